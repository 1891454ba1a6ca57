"""
typed-transform — runtime config loader.

File: src/typed_transform/config/loader.py
Last updated: 2026-10-18

Purpose
- Load an effective ``TransformConfig`` from defaults, a TOML file, environment
  variables and caller overrides.

What should be included in this file
- Precedence logic: overrides > env (TYPED_TRANSFORM_) > file > defaults.
- TOML loading via ``tomllib``. Either a dedicated ``typed_transform.toml`` whose
  root table holds the keys, or a ``pyproject.toml`` with a
  ``[tool.typed_transform]`` table.
- Deterministic environment variable mapping and coercion.
"""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Mapping
from dataclasses import fields
from pathlib import Path
from typing import Any, Final, Literal

from typed_transform.config.schema import (
    DEFAULT_CONFIG,
    ConfigValidationError,
    TransformConfig,
    assert_valid_config,
)
from typed_transform.constants import CONFIG_TABLE, DEFAULT_CONFIG_FILE, ENV_PREFIX

_PYPROJECT_FILE: Final[str] = "pyproject.toml"
_BOOLEAN_TRUE: Final[frozenset[str]] = frozenset({"1", "true", "t", "yes", "y", "on"})
_BOOLEAN_FALSE: Final[frozenset[str]] = frozenset({"0", "false", "f", "no", "n", "off"})

_ValueKind = Literal["str", "int", "bool"]


class ConfigLoadError(ValueError):
    """Raised when config cannot be loaded or overrides cannot be coerced."""


def load_config(
    config_path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    overrides: Mapping[str, object] | None = None,
    search_dir: str | Path | None = None,
) -> TransformConfig:
    """Load effective config with deterministic precedence: overrides > env > file > defaults."""

    env_map = dict(os.environ if environ is None else environ)
    resolved_path = _resolve_config_path(config_path, search_dir=search_dir)

    payload: dict[str, Any] = DEFAULT_CONFIG.to_dict()
    if resolved_path is not None:
        payload.update(_load_table(resolved_path, required=config_path is not None))
    payload.update(_collect_env_overrides(env_map))
    payload.update(dict(overrides or {}))

    try:
        assert_valid_config(payload)
        return TransformConfig(**payload)
    except ConfigValidationError as exc:
        source = f" (from {resolved_path})" if resolved_path is not None else ""
        raise ConfigLoadError(f"{exc}{source}") from exc


def dump_effective_config(config: TransformConfig) -> str:
    """Return deterministic JSON dump of the effective config."""

    return json.dumps(config.to_dict(), sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def _resolve_config_path(
    config_path: str | Path | None, *, search_dir: str | Path | None
) -> Path | None:
    if config_path is not None:
        return Path(config_path).expanduser().resolve()

    base = Path.cwd() if search_dir is None else Path(search_dir)
    for name in (DEFAULT_CONFIG_FILE, _PYPROJECT_FILE):
        candidate = (base / name).resolve()
        if candidate.is_file():
            return candidate
    return None


def _load_table(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise ConfigLoadError(f"config file not found: {path}")
        return {}

    try:
        with path.open("rb") as handle:
            parsed = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigLoadError(f"invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigLoadError(f"unable to read config file {path}: {exc}") from exc

    if path.name != _PYPROJECT_FILE:
        return parsed

    tool = parsed.get("tool")
    table = tool.get(CONFIG_TABLE) if isinstance(tool, dict) else None
    if table is None:
        return {}
    if not isinstance(table, dict):
        raise ConfigLoadError(f"[tool.{CONFIG_TABLE}] must be a table in {path}")
    return table


def _collect_env_overrides(environ: Mapping[str, str]) -> dict[str, object]:
    overrides: dict[str, object] = {}
    for field in fields(TransformConfig):
        env_name = _env_name_for_key(field.name)
        raw = environ.get(env_name)
        if raw is None:
            continue
        kind = _kind_for_value(getattr(DEFAULT_CONFIG, field.name))
        overrides[field.name] = _coerce_env(raw, kind, env_name)
    return overrides


def _kind_for_value(value: object) -> _ValueKind:
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int"
    return "str"


def _coerce_env(raw: str, value_type: _ValueKind, env_name: str) -> object:
    value = raw.strip()
    if value_type == "str":
        return value
    if value_type == "int":
        try:
            return int(value)
        except ValueError as exc:
            raise ConfigLoadError(f"{env_name} must be an integer") from exc

    lowered = value.lower()
    if lowered in _BOOLEAN_TRUE:
        return True
    if lowered in _BOOLEAN_FALSE:
        return False
    raise ConfigLoadError(f"{env_name} must be a boolean (true/false/1/0/yes/no/on/off)")


def _env_name_for_key(key: str) -> str:
    return ENV_PREFIX + key.upper()


__all__ = [
    "ConfigLoadError",
    "dump_effective_config",
    "load_config",
]
