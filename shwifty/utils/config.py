"""Helpers for loading YAML configuration and applying ``KEY=VALUE`` overrides."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Sequence

import yaml

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "configs" / "default.yaml"

__all__ = ["DEFAULT_CONFIG_PATH", "deep_update", "load_config", "parse_overrides"]


def load_config(path: str | Path) -> dict[str, Any]:
    """Return the parsed YAML mapping located at ``path``.

    Missing files raise :class:`FileNotFoundError`; an empty document yields an
    empty mapping and any other non-mapping root is a :class:`ValueError`.
    """

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"configuration file not found: {config_path}")
    raw_text = config_path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(raw_text)
    except yaml.YAMLError as exc:
        raise ValueError(f"failed to parse configuration: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("configuration root must be a mapping")
    return data


def deep_update(base: Mapping[str, Any], updates: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``base`` with ``updates`` recursively merged."""

    result: dict[str, Any] = dict(base)
    for key, value in updates.items():
        if isinstance(value, Mapping) and isinstance(result.get(key), Mapping):
            result[key] = deep_update(result[key], value)
        else:
            result[key] = value
    return result


def parse_overrides(pairs: Sequence[str] | None) -> dict[str, Any]:
    """Turn ``["a.b=1", "c=true"]`` into a nested mapping.

    Values are parsed as YAML scalars so ``true``, ``4`` and ``[A, B]`` keep
    their natural types.
    """

    overrides: dict[str, Any] = {}
    for item in pairs or ():
        key, sep, raw_value = item.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"override must look like KEY=VALUE, got {item!r}")
        try:
            value = yaml.safe_load(raw_value) if raw_value.strip() else ""
        except yaml.YAMLError:
            value = raw_value
        target = overrides
        parts = key.split(".")
        for part in parts[:-1]:
            nested = target.setdefault(part, {})
            if not isinstance(nested, dict):
                raise ValueError(f"override {item!r} conflicts with an earlier value")
            target = nested
        target[parts[-1]] = value
    return overrides
