"""Configuration for common-link computations."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml

from commonlink.errors import ConfigError

CONFIG_SECTION = "commonlink"
DEFAULT_METHOD = "matmul"


@dataclass(frozen=True)
class CommonLinkConfig:
    method: str = DEFAULT_METHOD
    directed: bool = False
    workers: int = 1
    # Upper bound on n; the mask and result each hold n * n values.
    max_nodes: Optional[int] = None
    provider: Optional[str] = None

    @classmethod
    def from_mapping(cls, cfg: Mapping[str, Any]) -> "CommonLinkConfig":
        """Build a config from a flat mapping or one nested under ``commonlink``."""
        if not isinstance(cfg, Mapping):
            raise ConfigError("commonlink config must be a mapping.")
        section = cfg.get(CONFIG_SECTION)
        if isinstance(section, Mapping):
            cfg = section
        elif section is not None:
            raise ConfigError(f"{CONFIG_SECTION} config must be a mapping.")

        known = {item.name for item in fields(cls)}
        unknown = sorted(str(key) for key in cfg if key not in known)
        if unknown:
            raise ConfigError(
                f"Unknown commonlink config keys: {unknown}.",
                context={"allowed": sorted(known)},
            )
        return cls(
            method=_coerce_method(cfg.get("method")),
            directed=_coerce_bool(cfg.get("directed"), "directed", default=False),
            workers=_coerce_positive_int(cfg.get("workers"), "workers", default=1),
            max_nodes=_coerce_optional_positive_int(cfg.get("max_nodes"), "max_nodes"),
            provider=_coerce_optional_str(cfg.get("provider"), "provider"),
        )

    def merged(self, **overrides: Any) -> "CommonLinkConfig":
        """Return a copy with the non-None overrides applied and validated."""
        values = {key: value for key, value in overrides.items() if value is not None}
        if not values:
            return self
        payload = asdict(self)
        payload.update(values)
        return CommonLinkConfig.from_mapping(payload)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _require_nonempty_str(value: Any, label: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{label} must be a non-empty string.")
    return value


def _coerce_optional_str(value: Any, label: str) -> Optional[str]:
    if value is None:
        return None
    return _require_nonempty_str(value, label)


def _coerce_method(value: Any) -> str:
    if value is None:
        return DEFAULT_METHOD
    return _require_nonempty_str(value, "method").strip()


def _coerce_bool(value: Any, label: str, *, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    raise ConfigError(f"{label} must be a boolean.")


def _coerce_positive_int(value: Any, label: str, *, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        raise ConfigError(f"{label} must be an integer.")
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{label} must be an integer.") from exc
    if number <= 0:
        raise ConfigError(f"{label} must be a positive integer.")
    return number


def _coerce_optional_positive_int(value: Any, label: str) -> Optional[int]:
    if value is None:
        return None
    return _coerce_positive_int(value, label, default=0)


def load_config(path: Union[str, Path]) -> CommonLinkConfig:
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to load config from {path}: {exc}") from exc
    if payload is None:
        payload = {}
    return CommonLinkConfig.from_mapping(payload)


__all__ = ["CONFIG_SECTION", "DEFAULT_METHOD", "CommonLinkConfig", "load_config"]
