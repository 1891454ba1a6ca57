"""Stable constants shared across the decode and encode engines."""

from __future__ import annotations

from typing import Final

# Name of the class attribute that carries a per-type field schema.
SCHEMA_ATTRIBUTE: Final[str] = "types"

# Attribute names starting with this prefix are invisible to both directions.
HIDDEN_PREFIX: Final[str] = "_"

# Nested decode levels allowed before the recursion guard trips.
DEFAULT_MAX_DEPTH: Final[int] = 64

# Environment variable prefix and config table name.
ENV_PREFIX: Final[str] = "TYPED_TRANSFORM_"
CONFIG_TABLE: Final[str] = "typed_transform"
DEFAULT_CONFIG_FILE: Final[str] = "typed_transform.toml"

__all__ = [
    "CONFIG_TABLE",
    "DEFAULT_CONFIG_FILE",
    "DEFAULT_MAX_DEPTH",
    "ENV_PREFIX",
    "HIDDEN_PREFIX",
    "SCHEMA_ATTRIBUTE",
]
