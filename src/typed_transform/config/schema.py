"""
typed-transform — configuration schema and validation.

File: src/typed_transform/config/schema.py
Last updated: 2026-10-18

Purpose
- Define the authoritative defaults for a ``Transformer`` and strict validation
  rules for values coming from files, environment variables or callers.

Functional requirements
- Validation returns structured issues (field + message) and
  ``assert_valid_config`` raises a single error listing all of them.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Final

from typed_transform.constants import DEFAULT_MAX_DEPTH, HIDDEN_PREFIX

_MAX_DEPTH_CEILING: Final[int] = 512


@dataclass(frozen=True, slots=True)
class TransformConfig:
    """Runtime knobs shared by the decode and encode engines."""

    strict: bool = True
    max_depth: int = DEFAULT_MAX_DEPTH
    hidden_prefix: str = HIDDEN_PREFIX
    assume_utc: bool = False
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        assert_valid_config(
            {field.name: getattr(self, field.name) for field in fields(self)}
        )

    def to_dict(self) -> dict[str, object]:
        return {field.name: getattr(self, field.name) for field in fields(self)}


CONFIG_KEYS: Final[tuple[str, ...]] = tuple(field.name for field in fields(TransformConfig))


@dataclass(frozen=True, slots=True)
class ConfigValidationIssue:
    field: str
    message: str


class ConfigValidationError(ValueError):
    """Raised when a config payload fails validation."""

    def __init__(self, issues: tuple[ConfigValidationIssue, ...]) -> None:
        self.issues = issues
        rendered = "; ".join(f"{issue.field}: {issue.message}" for issue in issues)
        super().__init__(f"invalid transform config: {rendered}")


def validate_config(payload: Mapping[str, object]) -> tuple[ConfigValidationIssue, ...]:
    issues: list[ConfigValidationIssue] = []

    unknown = sorted(key for key in payload if key not in CONFIG_KEYS)
    for key in unknown:
        issues.append(ConfigValidationIssue(str(key), "unknown config key"))

    for key in ("strict", "assume_utc"):
        if key in payload and not isinstance(payload[key], bool):
            issues.append(
                ConfigValidationIssue(key, f"expected boolean, got {type(payload[key]).__name__}")
            )

    if "max_depth" in payload:
        depth = payload["max_depth"]
        if isinstance(depth, bool) or not isinstance(depth, int):
            issues.append(
                ConfigValidationIssue(
                    "max_depth", f"expected integer, got {type(depth).__name__}"
                )
            )
        elif not 1 <= depth <= _MAX_DEPTH_CEILING:
            issues.append(
                ConfigValidationIssue("max_depth", f"must be between 1 and {_MAX_DEPTH_CEILING}")
            )

    if "hidden_prefix" in payload and not isinstance(payload["hidden_prefix"], str):
        issues.append(ConfigValidationIssue("hidden_prefix", "expected string"))

    if "log_level" in payload:
        level = payload["log_level"]
        if not isinstance(level, str) or not isinstance(
            logging.getLevelName(level.strip().upper()), int
        ):
            issues.append(ConfigValidationIssue("log_level", f"unsupported level {level!r}"))

    return tuple(issues)


def assert_valid_config(payload: Mapping[str, object]) -> dict[str, object]:
    issues = validate_config(payload)
    if issues:
        raise ConfigValidationError(issues)
    return dict(payload)


DEFAULT_CONFIG: Final[TransformConfig] = TransformConfig()


__all__ = [
    "CONFIG_KEYS",
    "DEFAULT_CONFIG",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "TransformConfig",
    "assert_valid_config",
    "validate_config",
]
