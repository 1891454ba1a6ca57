"""
typed-transform — unit tests for config schema validation

File: tests/unit/config/test_schema.py
Last updated: 2026-10-18

Purpose
- Validate strict config schema behavior and structured errors.
"""

from __future__ import annotations

import pytest

from typed_transform.config import (
    CONFIG_KEYS,
    DEFAULT_CONFIG,
    ConfigValidationError,
    ConfigValidationIssue,
    TransformConfig,
    assert_valid_config,
    validate_config,
)


def test_defaults() -> None:
    assert DEFAULT_CONFIG.strict is True
    assert DEFAULT_CONFIG.max_depth == 64
    assert DEFAULT_CONFIG.hidden_prefix == "_"
    assert DEFAULT_CONFIG.assume_utc is False
    assert set(DEFAULT_CONFIG.to_dict()) == set(CONFIG_KEYS)


def test_default_payload_is_valid() -> None:
    assert validate_config(DEFAULT_CONFIG.to_dict()) == ()


@pytest.mark.parametrize(
    ("payload", "field"),
    [
        ({"strict": "yes"}, "strict"),
        ({"assume_utc": 1}, "assume_utc"),
        ({"max_depth": True}, "max_depth"),
        ({"max_depth": "8"}, "max_depth"),
        ({"max_depth": 0}, "max_depth"),
        ({"max_depth": 10_000}, "max_depth"),
        ({"hidden_prefix": None}, "hidden_prefix"),
        ({"log_level": "LOUD"}, "log_level"),
        ({"colour": "blue"}, "colour"),
    ],
)
def test_invalid_values_are_reported_by_field(payload: dict[str, object], field: str) -> None:
    issues = validate_config(payload)
    assert [issue.field for issue in issues] == [field]


def test_assert_valid_config_collects_every_issue() -> None:
    with pytest.raises(ConfigValidationError) as excinfo:
        assert_valid_config({"strict": "no", "max_depth": -1})
    assert excinfo.value.issues == (
        ConfigValidationIssue("strict", "expected boolean, got str"),
        ConfigValidationIssue("max_depth", "must be between 1 and 512"),
    )


def test_transform_config_validates_on_construction() -> None:
    with pytest.raises(ConfigValidationError):
        TransformConfig(max_depth=0)
    with pytest.raises(ValueError):
        TransformConfig(strict="sometimes")  # type: ignore[arg-type]


def test_transform_config_is_immutable() -> None:
    with pytest.raises(AttributeError):
        DEFAULT_CONFIG.strict = False  # type: ignore[misc]
