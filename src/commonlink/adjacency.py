"""Adjacency providers that turn graph objects into adjacency matrices."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
import logging
import math
from typing import Any, Optional, Union

import networkx as nx
import numpy as np

from commonlink.errors import ProviderError
from commonlink.matrix import AdjacencyMatrix
from commonlink.registry import (
    PROVIDER_KIND,
    Registry,
    default_registry,
    register,
    resolve_provider_name,
)

logger = logging.getLogger(__name__)


class AdjacencyProvider(ABC):
    """Base class for graph-to-adjacency converters."""

    name: str

    def supports(self, graph: Any) -> bool:
        """Return True when this provider can read ``graph``."""
        return False

    @abstractmethod
    def build_adjacency_matrix(self, graph: Any, directed: bool) -> AdjacencyMatrix:
        """Return a 0/1 matrix labeled with the graph's node identifiers."""


def _indicator_matrix(
    nodes: Sequence[str],
    edges: Sequence[tuple[str, str]],
    *,
    directed: bool,
) -> AdjacencyMatrix:
    index = {node: idx for idx, node in enumerate(nodes)}
    size = len(nodes)
    matrix = np.zeros((size, size), dtype=np.int64)
    for source, target in edges:
        row = index[source]
        col = index[target]
        matrix[row, col] = 1
        if not directed:
            matrix[col, row] = 1
    labels = tuple(nodes)
    return AdjacencyMatrix(matrix, row_labels=labels, col_labels=labels)


class NetworkxAdjacencyProvider(AdjacencyProvider):
    """Reads ``networkx`` graphs, digraphs and multigraphs."""

    name = "networkx"

    def supports(self, graph: Any) -> bool:
        return isinstance(graph, nx.Graph)

    def build_adjacency_matrix(self, graph: Any, directed: bool) -> AdjacencyMatrix:
        if not isinstance(graph, nx.Graph):
            raise ProviderError(
                f"networkx provider expects a networkx graph, got {type(graph).__name__}."
            )
        nodelist = list(graph.nodes())
        counts = nx.to_numpy_array(graph, nodelist=nodelist, weight=None, dtype=float)
        matrix = (counts != 0).astype(np.int64)
        if not directed and graph.is_directed():
            matrix = matrix | matrix.T
        labels = tuple(str(node) for node in nodelist)
        if len(set(labels)) != len(labels):
            raise ProviderError("graph node identifiers are not unique as strings.")
        return AdjacencyMatrix(matrix, row_labels=labels, col_labels=labels)


def _node_id_from_entry(entry: Any) -> Any:
    if isinstance(entry, Mapping):
        node_id = _coerce_node_ref(entry)
        if node_id is None:
            raise ProviderError("graph node entry has no id, name or key.")
        return node_id
    if entry is None:
        raise ProviderError("graph node id must not be null.")
    return entry


def _coerce_node_ref(value: Any) -> Any:
    if isinstance(value, Mapping):
        for key in ("id", "name", "key"):
            if value.get(key) is not None:
                return value.get(key)
        return None
    return value


def _add_node(nodes: dict[str, Any], node: Any) -> str:
    """Record ``node`` under its string label; distinct ids may not share one."""
    label = str(node)
    existing = nodes.setdefault(label, node)
    if existing is not node and (type(existing) is not type(node) or existing != node):
        raise ProviderError(
            f"graph node ids {existing!r} and {node!r} share the label {label!r}.",
            context={"label": label},
        )
    return label


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(
        value, (str, bytes, bytearray)
    )


def _link_present(link: Mapping[str, Any]) -> bool:
    if "weight" not in link or link.get("weight") is None:
        return True
    try:
        weight = float(link.get("weight"))
    except (TypeError, ValueError) as exc:
        raise ProviderError(f"edge weight must be numeric: {link.get('weight')!r}.") from exc
    if math.isnan(weight):
        raise ProviderError("edge weight must not be NaN.")
    return weight != 0.0


class NodeLinkAdjacencyProvider(AdjacencyProvider):
    """Reads node-link mappings: ``{"nodes": [...], "links": [...]}``."""

    name = "node_link"

    def supports(self, graph: Any) -> bool:
        return isinstance(graph, Mapping) and "nodes" in graph and (
            "links" in graph or "edges" in graph
        )

    def build_adjacency_matrix(self, graph: Any, directed: bool) -> AdjacencyMatrix:
        if not self.supports(graph):
            raise ProviderError("node-link graph must be a mapping with nodes and links.")
        nodes_raw = graph.get("nodes") or []
        links_raw = graph.get("links")
        if links_raw is None:
            links_raw = graph.get("edges") or []
        if not _is_sequence(nodes_raw):
            raise ProviderError("graph nodes must be a sequence.")
        if not _is_sequence(links_raw):
            raise ProviderError("graph links must be a sequence.")

        # Node order: declared nodes first, then link endpoints as first seen.
        nodes: dict[str, Any] = {}
        for entry in nodes_raw:
            _add_node(nodes, _node_id_from_entry(entry))

        # A graph declared undirected keeps its edges symmetric even on
        # a directed request.
        source_directed = bool(graph.get("directed", True))
        edges: list[tuple[str, str]] = []
        for entry in links_raw:
            if not isinstance(entry, Mapping):
                raise ProviderError(f"graph link must be a mapping, got {entry!r}.")
            source = _coerce_node_ref(entry.get("source"))
            target = _coerce_node_ref(entry.get("target"))
            if source is None or target is None:
                raise ProviderError(f"graph link is missing source or target: {entry!r}.")
            source = _add_node(nodes, source)
            target = _add_node(nodes, target)
            if not _link_present(entry):
                continue
            edges.append((source, target))
        return _indicator_matrix(
            list(nodes),
            edges,
            directed=directed and source_directed,
        )


class EdgeListAdjacencyProvider(AdjacencyProvider):
    """Reads sequences of ``(source, target)`` pairs."""

    name = "edge_list"

    def supports(self, graph: Any) -> bool:
        if not _is_sequence(graph) or isinstance(graph, Mapping):
            return False
        return all(_is_sequence(pair) and len(pair) == 2 for pair in graph)

    def build_adjacency_matrix(self, graph: Any, directed: bool) -> AdjacencyMatrix:
        if not _is_sequence(graph):
            raise ProviderError("edge list must be a sequence of (source, target) pairs.")
        nodes: dict[str, Any] = {}
        edges: list[tuple[str, str]] = []
        for index, pair in enumerate(graph):
            if not _is_sequence(pair) or len(pair) != 2:
                raise ProviderError(
                    f"edge list item {index} must be a (source, target) pair.",
                    context={"item": pair},
                )
            source = _coerce_node_ref(pair[0])
            target = _coerce_node_ref(pair[1])
            if source is None or target is None:
                raise ProviderError(f"edge list item {index} has a null endpoint.")
            source = _add_node(nodes, source)
            target = _add_node(nodes, target)
            edges.append((source, target))
        return _indicator_matrix(list(nodes), edges, directed=directed)


ProviderRef = Union[str, AdjacencyProvider, None]


def resolve_provider(
    graph: Any,
    provider: ProviderRef = None,
    *,
    registry: Optional[Registry] = None,
) -> AdjacencyProvider:
    """Pick a provider by name, pass one through, or detect one from ``graph``."""
    if isinstance(provider, AdjacencyProvider):
        return provider
    if isinstance(provider, str):
        return resolve_provider_name(provider, registry=registry)
    if provider is not None:
        raise ProviderError(
            f"provider must be a name or AdjacencyProvider, got {type(provider).__name__}."
        )
    registry = registry or default_registry()
    for name in registry.list(PROVIDER_KIND):
        candidate = registry.get(PROVIDER_KIND, name)
        if candidate.supports(graph):
            return candidate
    raise ProviderError(
        f"No adjacency provider supports graphs of type {type(graph).__name__}.",
        context={"providers": registry.list(PROVIDER_KIND)},
    )


def build_adjacency_matrix(
    graph: Any,
    directed: bool = False,
    *,
    provider: ProviderRef = None,
    registry: Optional[Registry] = None,
) -> AdjacencyMatrix:
    resolved = resolve_provider(graph, provider, registry=registry)
    logger.debug(
        "Building %s adjacency matrix with provider %s",
        "directed" if directed else "undirected",
        resolved.name,
    )
    return resolved.build_adjacency_matrix(graph, directed)


register(PROVIDER_KIND, NetworkxAdjacencyProvider.name, NetworkxAdjacencyProvider())
register(PROVIDER_KIND, NodeLinkAdjacencyProvider.name, NodeLinkAdjacencyProvider())
register(PROVIDER_KIND, EdgeListAdjacencyProvider.name, EdgeListAdjacencyProvider())

__all__ = [
    "AdjacencyProvider",
    "NetworkxAdjacencyProvider",
    "NodeLinkAdjacencyProvider",
    "EdgeListAdjacencyProvider",
    "resolve_provider",
    "build_adjacency_matrix",
]
