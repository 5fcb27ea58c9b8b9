"""Registry of adjacency providers and common-link methods."""

from __future__ import annotations

import builtins
from collections.abc import Iterable
from typing import Any, Optional

from commonlink.errors import ConfigError, ProviderError

PROVIDER_KIND = "provider"
METHOD_KIND = "method"
DEFAULT_KINDS = (PROVIDER_KIND, METHOD_KIND)


def _validate_key(label: str, value: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise TypeError(f"{label} must be a non-empty string.")
    return value


def _format_options(options: Iterable[str]) -> str:
    values = builtins.list(options)
    if not values:
        return "<none>"
    return ", ".join(sorted(values))


class Registry:
    """Named objects grouped by kind."""

    def __init__(self, kinds: Iterable[str] = DEFAULT_KINDS) -> None:
        self._entries: dict[str, dict[str, Any]] = {}
        for kind in kinds:
            self.add_kind(kind)

    def add_kind(self, kind: str, *, overwrite: bool = False) -> None:
        kind = _validate_key("kind", kind)
        if kind in self._entries and not overwrite:
            raise ValueError(f"Registry kind already exists: {kind!r}.")
        self._entries[kind] = {}

    def _bucket(self, kind: str) -> dict[str, Any]:
        kind = _validate_key("kind", kind)
        bucket = self._entries.get(kind)
        if bucket is None:
            available = _format_options(self._entries.keys())
            raise KeyError(
                f"Unknown registry kind: {kind!r}. Available kinds: {available}."
            )
        return bucket

    def register(self, kind: str, name: str, obj: Any, *, overwrite: bool = False) -> None:
        bucket = self._bucket(kind)
        name = _validate_key("name", name)
        if name in bucket and not overwrite:
            raise ValueError(
                f"{kind} {name!r} is already registered; use overwrite=True to replace."
            )
        bucket[name] = obj

    def get(self, kind: str, name: str) -> Any:
        bucket = self._bucket(kind)
        name = _validate_key("name", name)
        if name not in bucket:
            available = _format_options(bucket.keys())
            raise KeyError(
                f"{kind} {name!r} is not registered. Available: {available}."
            )
        return bucket[name]

    def list(self, kind: str) -> list[str]:
        return builtins.list(self._bucket(kind).keys())


_DEFAULT_REGISTRY = Registry()


def default_registry() -> Registry:
    return _DEFAULT_REGISTRY


def register(kind: str, name: str, obj: Any, *, overwrite: bool = False) -> None:
    _DEFAULT_REGISTRY.register(kind, name, obj, overwrite=overwrite)


def get(kind: str, name: str) -> Any:
    return _DEFAULT_REGISTRY.get(kind, name)


def list(kind: str) -> list[str]:
    return _DEFAULT_REGISTRY.list(kind)


def resolve_method(name: str, *, registry: Optional[Registry] = None) -> Any:
    registry = registry or _DEFAULT_REGISTRY
    try:
        return registry.get(METHOD_KIND, name)
    except (KeyError, TypeError) as exc:
        available = _format_options(registry.list(METHOD_KIND))
        raise ConfigError(
            f"Common-link method {name!r} is not registered. Available: {available}.",
            context={"method": name},
        ) from exc


def resolve_provider_name(name: str, *, registry: Optional[Registry] = None) -> Any:
    registry = registry or _DEFAULT_REGISTRY
    try:
        return registry.get(PROVIDER_KIND, name)
    except (KeyError, TypeError) as exc:
        available = _format_options(registry.list(PROVIDER_KIND))
        raise ProviderError(
            f"Adjacency provider {name!r} is not registered. Available: {available}.",
            context={"provider": name},
        ) from exc


__all__ = [
    "PROVIDER_KIND",
    "METHOD_KIND",
    "DEFAULT_KINDS",
    "Registry",
    "default_registry",
    "register",
    "get",
    "list",
    "resolve_method",
    "resolve_provider_name",
]
