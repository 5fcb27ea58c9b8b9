"""Common-link matrices for graphs given as adjacency matrices."""

from commonlink.adjacency import (
    AdjacencyProvider,
    EdgeListAdjacencyProvider,
    NetworkxAdjacencyProvider,
    NodeLinkAdjacencyProvider,
    build_adjacency_matrix,
)
from commonlink.common_links import compute, compute_from_graph
from commonlink.config import CommonLinkConfig, load_config
from commonlink.errors import (
    CommonLinkError,
    ConfigError,
    EntryTypeError,
    ProviderError,
    ShapeError,
    SizeLimitError,
)
from commonlink.matrix import AdjacencyMatrix, CommonLinkMatrix, as_adjacency_matrix

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "AdjacencyMatrix",
    "AdjacencyProvider",
    "CommonLinkConfig",
    "CommonLinkError",
    "CommonLinkMatrix",
    "ConfigError",
    "EdgeListAdjacencyProvider",
    "EntryTypeError",
    "NetworkxAdjacencyProvider",
    "NodeLinkAdjacencyProvider",
    "ProviderError",
    "ShapeError",
    "SizeLimitError",
    "as_adjacency_matrix",
    "build_adjacency_matrix",
    "compute",
    "compute_from_graph",
    "load_config",
]
