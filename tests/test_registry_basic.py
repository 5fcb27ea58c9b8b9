import numpy as np
import pytest

from commonlink import compute
from commonlink import registry as default
from commonlink.registry import METHOD_KIND, PROVIDER_KIND, Registry


def test_register_get_list_roundtrip() -> None:
    registry = Registry()
    sentinel = object()

    registry.register(METHOD_KIND, "custom", sentinel)

    assert registry.get(METHOD_KIND, "custom") is sentinel
    assert registry.list(METHOD_KIND) == ["custom"]
    assert registry.list(PROVIDER_KIND) == []


def test_unknown_kind_error_is_clear() -> None:
    registry = Registry()

    with pytest.raises(KeyError) as exc:
        registry.get("unknown", "dummy")

    message = str(exc.value)
    assert "Unknown registry kind" in message
    assert "unknown" in message


def test_unknown_name_error_is_clear() -> None:
    registry = Registry()
    registry.register(METHOD_KIND, "m1", object())

    with pytest.raises(KeyError) as exc:
        registry.get(METHOD_KIND, "missing")

    message = str(exc.value)
    assert "not registered" in message
    assert "m1" in message


def test_duplicate_registration_requires_overwrite() -> None:
    registry = Registry()
    registry.register(PROVIDER_KIND, "p1", 1)

    with pytest.raises(ValueError) as exc:
        registry.register(PROVIDER_KIND, "p1", 2)

    assert "already registered" in str(exc.value)

    registry.register(PROVIDER_KIND, "p1", 2, overwrite=True)
    assert registry.get(PROVIDER_KIND, "p1") == 2


def test_default_registry_holds_builtin_methods_and_providers() -> None:
    assert sorted(default.list(METHOD_KIND)) == ["loop", "matmul", "sparse"]
    assert sorted(default.list(PROVIDER_KIND)) == ["edge_list", "networkx", "node_link"]


def test_custom_registry_method_is_used_by_compute() -> None:
    registry = Registry()
    registry.register(METHOD_KIND, "ones", lambda adj, workers=1: np.ones((adj.size, adj.size)))

    result = compute([[0, 0], [0, 0]], method="ones", registry=registry)

    assert result.values.tolist() == [[1, 1], [1, 1]]


def test_mixed_case_method_name_resolves() -> None:
    registry = Registry()
    registry.register(METHOD_KIND, "Ones", lambda adj, workers=1: np.ones((adj.size, adj.size)))

    result = compute([[0, 1], [1, 0]], method="Ones", registry=registry)

    assert result.values.tolist() == [[1, 1], [1, 1]]
