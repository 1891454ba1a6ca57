"""
typed-transform — configuration package.

Purpose
- Public entrypoint for transform configuration loading and validation.
- Keep import-time surface small and deterministic.
"""

from typed_transform.config.loader import (
    ConfigLoadError,
    dump_effective_config,
    load_config,
)
from typed_transform.config.schema import (
    CONFIG_KEYS,
    DEFAULT_CONFIG,
    ConfigValidationError,
    ConfigValidationIssue,
    TransformConfig,
    assert_valid_config,
    validate_config,
)

__all__ = [
    "CONFIG_KEYS",
    "DEFAULT_CONFIG",
    "ConfigLoadError",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "TransformConfig",
    "assert_valid_config",
    "dump_effective_config",
    "load_config",
    "validate_config",
]
