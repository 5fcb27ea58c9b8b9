"""Common-link matrices: counts of two-hop paths between node pairs."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import logging
from typing import Any, Optional

import numpy as np

from commonlink.adjacency import ProviderRef, build_adjacency_matrix
from commonlink.config import CommonLinkConfig
from commonlink.errors import CommonLinkError, ConfigError, SizeLimitError
from commonlink.logging_utils import log_exception
from commonlink.matrix import (
    AdjacencyMatrix,
    CommonLinkMatrix,
    as_adjacency_matrix,
    edge_mask,
    sparse_edge_mask,
)
from commonlink.registry import METHOD_KIND, Registry, register, resolve_method

logger = logging.getLogger(__name__)


def _count_rows(mask: np.ndarray, rows: np.ndarray, out: np.ndarray) -> None:
    size = mask.shape[1]
    for i in rows:
        row = mask[i, :]
        for j in range(size):
            out[i, j] = np.count_nonzero(row & mask[:, j])


def loop_common_links(adj: AdjacencyMatrix, *, workers: int = 1) -> np.ndarray:
    """Count, per cell, the positions where row i and column j both hold an edge.

    Row blocks are independent, so ``workers > 1`` splits them across a
    thread pool; each worker writes only to its own rows of ``out``.
    """
    mask = edge_mask(adj)
    size = mask.shape[0]
    out = np.zeros((size, size), dtype=np.int64)
    if size == 0:
        return out
    blocks = [
        block for block in np.array_split(np.arange(size), min(workers, size)) if block.size
    ]
    if len(blocks) == 1:
        _count_rows(mask, blocks[0], out)
        return out
    with ThreadPoolExecutor(max_workers=len(blocks)) as executor:
        futures = [executor.submit(_count_rows, mask, block, out) for block in blocks]
        for future in futures:
            future.result()
    return out


def matmul_common_links(adj: AdjacencyMatrix, *, workers: int = 1) -> np.ndarray:
    """Product of the 0/1 edge matrix with itself.

    Multiplies in float64 so BLAS does the work; counts never exceed n, so
    the result is exact for n below 2**53.
    """
    mask = edge_mask(adj).astype(np.float64)
    return (mask @ mask).astype(np.int64)


def sparse_common_links(adj: AdjacencyMatrix, *, workers: int = 1) -> np.ndarray:
    """Same product on a CSR edge matrix, densified at the end."""
    mask = sparse_edge_mask(adj)
    return np.asarray((mask @ mask).toarray(), dtype=np.int64)


def _resolve_config(
    config: Optional[CommonLinkConfig],
    **overrides: Any,
) -> CommonLinkConfig:
    if config is None:
        config = CommonLinkConfig()
    elif not isinstance(config, CommonLinkConfig):
        raise ConfigError(
            f"config must be a CommonLinkConfig, got {type(config).__name__}."
        )
    return config.merged(**overrides)


def _check_size(adj: AdjacencyMatrix, max_nodes: Optional[int]) -> None:
    if max_nodes is not None and adj.size > max_nodes:
        raise SizeLimitError(
            f"Adjacency matrix has {adj.size} nodes, above the limit of {max_nodes}.",
            context={"nodes": adj.size, "max_nodes": max_nodes},
        )


def _compute(
    adj: Any,
    settings: CommonLinkConfig,
    registry: Optional[Registry],
) -> CommonLinkMatrix:
    matrix = as_adjacency_matrix(adj)
    _check_size(matrix, settings.max_nodes)
    func = resolve_method(settings.method, registry=registry)
    logger.debug(
        "Computing common links for %d nodes (method=%s, workers=%d)",
        matrix.size,
        settings.method,
        settings.workers,
    )
    values = func(matrix, workers=settings.workers)
    return CommonLinkMatrix(
        values=values,
        row_labels=matrix.row_labels,
        col_labels=matrix.col_labels,
    )


def compute(
    adj: Any,
    *,
    method: Optional[str] = None,
    workers: Optional[int] = None,
    config: Optional[CommonLinkConfig] = None,
    registry: Optional[Registry] = None,
) -> CommonLinkMatrix:
    """Compute the common-link matrix of an adjacency matrix.

    Entry (i, j) of the result counts the nodes k with an edge i->k and an
    edge k->j. Entries of ``adj`` only matter as zero/non-zero; self-loops
    count as ordinary intermediaries. Labels are copied from the input.
    """
    try:
        settings = _resolve_config(config, method=method, workers=workers)
        return _compute(adj, settings, registry)
    except CommonLinkError as exc:
        log_exception(logger, exc)
        raise


def compute_from_graph(
    graph: Any,
    directed: Optional[bool] = None,
    *,
    provider: ProviderRef = None,
    method: Optional[str] = None,
    workers: Optional[int] = None,
    config: Optional[CommonLinkConfig] = None,
    registry: Optional[Registry] = None,
) -> CommonLinkMatrix:
    """Build the adjacency matrix of ``graph`` and compute its common links.

    With ``directed=False`` (the default) edge direction is collapsed first,
    so the result counts shared neighbours; with ``directed=True`` it counts
    directed two-hop paths.
    """
    try:
        settings = _resolve_config(
            config,
            method=method,
            workers=workers,
            directed=directed,
        )
        if provider is None:
            provider = settings.provider
        adj = build_adjacency_matrix(
            graph,
            settings.directed,
            provider=provider,
            registry=registry,
        )
        return _compute(adj, settings, registry)
    except CommonLinkError as exc:
        log_exception(logger, exc)
        raise


register(METHOD_KIND, "loop", loop_common_links)
register(METHOD_KIND, "matmul", matmul_common_links)
register(METHOD_KIND, "sparse", sparse_common_links)

__all__ = [
    "compute",
    "compute_from_graph",
    "loop_common_links",
    "matmul_common_links",
    "sparse_common_links",
]
