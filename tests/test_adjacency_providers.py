import networkx as nx
import numpy as np
import pytest

from commonlink import AdjacencyMatrix, ProviderError
from commonlink.adjacency import (
    AdjacencyProvider,
    EdgeListAdjacencyProvider,
    NetworkxAdjacencyProvider,
    NodeLinkAdjacencyProvider,
    build_adjacency_matrix,
    resolve_provider,
)
from commonlink.common_links import compute_from_graph


def test_resolve_provider_detects_graph_types() -> None:
    assert isinstance(resolve_provider(nx.Graph()), NetworkxAdjacencyProvider)
    assert isinstance(resolve_provider(nx.MultiDiGraph()), NetworkxAdjacencyProvider)
    assert isinstance(
        resolve_provider({"nodes": [], "links": []}),
        NodeLinkAdjacencyProvider,
    )
    assert isinstance(resolve_provider([("a", "b")]), EdgeListAdjacencyProvider)


def test_resolve_provider_rejects_unknown_graphs() -> None:
    with pytest.raises(ProviderError) as exc:
        resolve_provider(object())

    assert "No adjacency provider" in str(exc.value)


def test_resolve_provider_by_name_and_instance() -> None:
    provider = NodeLinkAdjacencyProvider()

    assert resolve_provider({}, provider) is provider
    assert isinstance(resolve_provider({}, "edge_list"), EdgeListAdjacencyProvider)
    with pytest.raises(ProviderError):
        resolve_provider({}, 3.5)


def test_networkx_adjacency_symmetrizes_undirected_requests() -> None:
    graph = nx.DiGraph([("x", "y"), ("y", "z")])

    directed = build_adjacency_matrix(graph, directed=True)
    undirected = build_adjacency_matrix(graph)

    assert directed.row_labels == ("x", "y", "z")
    assert directed.values.tolist() == [[0, 1, 0], [0, 0, 1], [0, 0, 0]]
    assert undirected.values.tolist() == [[0, 1, 0], [1, 0, 1], [0, 1, 0]]


def test_networkx_adjacency_ignores_weights_and_parallel_edges() -> None:
    graph = nx.MultiDiGraph()
    graph.add_edge(1, 2, weight=5.0)
    graph.add_edge(1, 2, weight=2.0)
    graph.add_edge(2, 2)

    adj = build_adjacency_matrix(graph, directed=True)

    assert adj.row_labels == ("1", "2")
    assert adj.values.tolist() == [[0, 1], [0, 1]]


def test_node_link_appends_link_only_nodes_and_skips_zero_weights() -> None:
    payload = {
        "nodes": [{"id": "A"}, "B"],
        "edges": [
            {"source": "A", "target": "B", "weight": 1.5},
            {"source": "B", "target": "C", "weight": 0},
            {"source": {"id": "C"}, "target": "D"},
        ],
    }

    adj = build_adjacency_matrix(payload, directed=True)

    assert adj.row_labels == ("A", "B", "C", "D")
    expected = np.zeros((4, 4), dtype=int)
    expected[0, 1] = 1
    expected[2, 3] = 1
    assert np.array_equal(adj.values, expected)


def test_node_link_undirected_graph_stays_symmetric() -> None:
    payload = {
        "directed": False,
        "nodes": [{"id": "A"}, {"id": "B"}],
        "links": [{"source": "A", "target": "B"}],
    }

    adj = build_adjacency_matrix(payload, directed=True)

    assert adj.values.tolist() == [[0, 1], [1, 0]]


def test_node_link_rejects_bad_links() -> None:
    with pytest.raises(ProviderError) as exc:
        build_adjacency_matrix({"nodes": [], "links": [{"source": "A"}]})

    assert "missing source or target" in str(exc.value)

    with pytest.raises(ProviderError):
        build_adjacency_matrix(
            {"nodes": [], "links": [{"source": "A", "target": "B", "weight": "x"}]}
        )


def test_edge_list_keeps_first_seen_order_and_self_loops() -> None:
    adj = build_adjacency_matrix([("b", "a"), ("a", "a")], directed=True)

    assert adj.row_labels == ("b", "a")
    assert adj.values.tolist() == [[0, 1], [0, 1]]


def test_edge_list_rejects_malformed_pairs() -> None:
    with pytest.raises(ProviderError) as exc:
        build_adjacency_matrix([("a", "b", "c")], provider="edge_list")

    assert "item 0" in str(exc.value)


def test_custom_provider_is_used_as_given() -> None:
    class FixedProvider(AdjacencyProvider):
        name = "fixed"

        def __init__(self) -> None:
            self.calls: list[bool] = []

        def build_adjacency_matrix(self, graph, directed):
            self.calls.append(directed)
            labels = ("p", "q")
            return AdjacencyMatrix(
                np.array([[0, 1], [1, 0]]), row_labels=labels, col_labels=labels
            )

    provider = FixedProvider()

    result = compute_from_graph("anything", provider=provider)

    assert provider.calls == [False]
    assert result.count("p", "p") == 1
    assert result.count("p", "q") == 0


def test_edge_list_rejects_ids_sharing_a_label() -> None:
    with pytest.raises(ProviderError) as exc:
        build_adjacency_matrix([(1, 2), ("1", 3)], directed=True)

    assert "share the label '1'" in str(exc.value)
    assert exc.value.context == {"label": "1"}


def test_edge_list_accepts_repeated_equal_ids() -> None:
    adj = build_adjacency_matrix([(1, 2), (2, 3), (3, 1)], directed=True)

    assert adj.row_labels == ("1", "2", "3")
    assert int(adj.values.sum()) == 3


def test_node_link_rejects_ids_sharing_a_label() -> None:
    payload = {
        "nodes": [{"id": 1}, {"id": "1"}],
        "links": [],
    }

    with pytest.raises(ProviderError):
        build_adjacency_matrix(payload)

    payload = {
        "nodes": [{"id": 1}, {"id": 2}],
        "links": [{"source": "1", "target": 2}],
    }

    with pytest.raises(ProviderError):
        build_adjacency_matrix(payload)


def test_node_link_refs_with_falsy_ids_are_kept() -> None:
    payload = {
        "nodes": [{"id": 0}, {"id": 1}],
        "links": [{"source": {"id": 0}, "target": {"id": 1, "name": "one"}}],
    }

    adj = build_adjacency_matrix(payload, directed=True)

    assert adj.row_labels == ("0", "1")
    assert adj.values.tolist() == [[0, 1], [0, 0]]
