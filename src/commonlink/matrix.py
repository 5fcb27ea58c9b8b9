"""Labeled adjacency and common-link matrices."""

from __future__ import annotations

from collections.abc import Hashable, Sequence
from dataclasses import dataclass
import numbers
from typing import Any, Optional

import numpy as np
import pandas as pd
import scipy.sparse as sp

from commonlink.errors import EntryTypeError, ShapeError

Labels = Optional[tuple[Hashable, ...]]

_NUMERIC_KINDS = "biufc"


def _normalize_labels(labels: Any, size: int, axis: str) -> Labels:
    if labels is None:
        return None
    if isinstance(labels, (str, bytes)) or not isinstance(
        labels, (Sequence, pd.Index, np.ndarray)
    ):
        raise ShapeError(f"{axis} labels must be a sequence.")
    values = tuple(labels)
    if len(values) != size:
        raise ShapeError(
            f"{axis} labels have length {len(values)}, expected {size}.",
            context={"axis": axis, "labels": len(values), "size": size},
        )
    return values


def _check_square(shape: tuple[int, ...]) -> int:
    if len(shape) != 2:
        raise ShapeError(
            f"Adjacency matrix must be 2-D, got {len(shape)} dimension(s).",
            context={"shape": tuple(shape)},
        )
    rows, cols = shape
    if rows != cols:
        raise ShapeError(
            f"Adjacency matrix must be square, got {rows}x{cols}.",
            context={"shape": (rows, cols)},
        )
    return rows


@dataclass(frozen=True, eq=False)
class AdjacencyMatrix:
    """Square matrix of edge indicators with optional node labels."""

    values: Any
    row_labels: Labels = None
    col_labels: Labels = None

    def __post_init__(self) -> None:
        values = self.values
        if not sp.issparse(values):
            try:
                values = np.asarray(values)
            except ValueError as exc:
                raise ShapeError(
                    f"Adjacency matrix is ragged or malformed: {exc}"
                ) from exc
            object.__setattr__(self, "values", values)
        size = _check_square(tuple(values.shape))
        object.__setattr__(
            self, "row_labels", _normalize_labels(self.row_labels, size, "row")
        )
        object.__setattr__(
            self, "col_labels", _normalize_labels(self.col_labels, size, "column")
        )

    @property
    def size(self) -> int:
        return int(self.values.shape[0])

    @property
    def is_sparse(self) -> bool:
        return sp.issparse(self.values)


@dataclass(frozen=True, eq=False)
class CommonLinkMatrix:
    """Counts of two-hop paths between node pairs."""

    values: np.ndarray
    row_labels: Labels = None
    col_labels: Labels = None

    def __post_init__(self) -> None:
        values = np.array(self.values, dtype=np.int64)
        size = _check_square(values.shape)
        values.setflags(write=False)
        object.__setattr__(self, "values", values)
        object.__setattr__(
            self, "row_labels", _normalize_labels(self.row_labels, size, "row")
        )
        object.__setattr__(
            self, "col_labels", _normalize_labels(self.col_labels, size, "column")
        )

    @property
    def shape(self) -> tuple[int, int]:
        rows, cols = self.values.shape
        return int(rows), int(cols)

    def count(self, row: Hashable, col: Hashable) -> int:
        """Look up a cell by label, or by position when labels are absent."""
        i = _locate(self.row_labels, row, self.shape[0], "row")
        j = _locate(self.col_labels, col, self.shape[1], "column")
        return int(self.values[i, j])

    def to_frame(self) -> pd.DataFrame:
        index = list(self.row_labels) if self.row_labels is not None else None
        columns = list(self.col_labels) if self.col_labels is not None else None
        return pd.DataFrame(np.array(self.values), index=index, columns=columns)


def _locate(labels: Labels, key: Hashable, size: int, axis: str) -> int:
    if labels is None:
        if isinstance(key, (int, np.integer)) and not isinstance(key, bool):
            if 0 <= key < size:
                return int(key)
        raise KeyError(f"{axis} position {key!r} is out of range for size {size}.")
    try:
        return labels.index(key)
    except ValueError:
        raise KeyError(f"Unknown {axis} label: {key!r}.") from None


def as_adjacency_matrix(
    value: Any,
    *,
    row_labels: Optional[Sequence[Hashable]] = None,
    col_labels: Optional[Sequence[Hashable]] = None,
) -> AdjacencyMatrix:
    """Coerce arrays, nested sequences, DataFrames or sparse matrices."""
    if isinstance(value, AdjacencyMatrix):
        if row_labels is None and col_labels is None:
            return value
        return AdjacencyMatrix(
            values=value.values,
            row_labels=value.row_labels if row_labels is None else row_labels,
            col_labels=value.col_labels if col_labels is None else col_labels,
        )
    if isinstance(value, pd.DataFrame):
        return AdjacencyMatrix(
            values=value.to_numpy(),
            row_labels=tuple(value.index) if row_labels is None else row_labels,
            col_labels=tuple(value.columns) if col_labels is None else col_labels,
        )
    return AdjacencyMatrix(value, row_labels=row_labels, col_labels=col_labels)


def _is_edge_scalar(entry: Any) -> bool:
    if isinstance(entry, np.bool_):
        return True
    return isinstance(entry, numbers.Number)


def _has_nan(entry: Any) -> bool:
    try:
        return entry != entry
    except TypeError:
        return False
    except ArithmeticError:
        # Signaling NaNs (Decimal("sNaN")) refuse to compare.
        return True


def _dense_object_mask(values: np.ndarray) -> np.ndarray:
    mask = np.zeros(values.shape, dtype=bool)
    for index, entry in np.ndenumerate(values):
        if not _is_edge_scalar(entry):
            raise EntryTypeError(
                f"Adjacency entry at {index} is not numeric: {entry!r}.",
                context={"index": index, "type": type(entry).__name__},
            )
        if _has_nan(entry):
            raise EntryTypeError(f"Adjacency entry at {index} is NaN.")
        mask[index] = entry != 0
    return mask


def _check_numeric_dtype(dtype: np.dtype) -> None:
    if dtype.kind not in _NUMERIC_KINDS:
        raise EntryTypeError(
            f"Adjacency entries of dtype {dtype} cannot be read as edges.",
            context={"dtype": str(dtype)},
        )


def _reject_nan(data: np.ndarray) -> None:
    if data.dtype.kind in "fc" and np.isnan(data).any():
        position = tuple(int(i) for i in np.argwhere(np.isnan(data))[0])
        raise EntryTypeError(f"Adjacency entry at {position} is NaN.")


def edge_mask(adj: AdjacencyMatrix) -> np.ndarray:
    """Dense boolean matrix that is True where an edge is present."""
    if adj.is_sparse:
        return sparse_edge_mask(adj).toarray().astype(bool)
    values = np.asarray(adj.values)
    if values.dtype.kind == "O":
        return _dense_object_mask(values)
    _check_numeric_dtype(values.dtype)
    if values.dtype.kind == "b":
        return values.copy()
    _reject_nan(values)
    return values != 0


def sparse_edge_mask(adj: AdjacencyMatrix) -> sp.csr_matrix:
    """CSR matrix of int64 ones at every edge."""
    if not adj.is_sparse:
        return sp.csr_matrix(edge_mask(adj).astype(np.int64))
    csr = sp.csr_matrix(adj.values, copy=True)
    _check_numeric_dtype(csr.dtype)
    _reject_nan(csr.data)
    csr.data = (csr.data != 0).astype(np.int64)
    csr.eliminate_zeros()
    return csr


__all__ = [
    "AdjacencyMatrix",
    "CommonLinkMatrix",
    "as_adjacency_matrix",
    "edge_mask",
    "sparse_edge_mask",
]
