"""
typed-transform — error taxonomy.

File: src/typed_transform/errors.py
Last updated: 2026-10-18

Purpose
- Named failure conditions raised by the decode and encode engines.

Functional requirements
- Every error carries the dotted path of the failing field (``Owner.field``),
  plus the expected and actual shapes where they are known.
- Errors subclass ``ValueError`` so callers that validate payloads with a
  generic ``except ValueError`` keep working.
"""

from __future__ import annotations

from collections.abc import Sequence


class TransformError(ValueError):
    """Base class for all transform failures."""

    def __init__(
        self,
        message: str,
        *,
        path: Sequence[str] = (),
        owner: str | None = None,
        expected: str | None = None,
        actual: str | None = None,
    ) -> None:
        self.path: tuple[str, ...] = tuple(path)
        self.owner = owner if owner is not None else (self.path[0] if self.path else None)
        self.expected = expected
        self.actual = actual
        self.reason = message
        super().__init__(_format(self.path, message))

    @property
    def field(self) -> str | None:
        """Name of the failing field, when the failure is field-scoped."""
        if len(self.path) < 2:
            return None
        return self.path[-1]

    @property
    def dotted_path(self) -> str:
        return ".".join(self.path)


class InvalidTargetError(TransformError):
    """Target type cannot be constructed, or a ``None`` default has no declared type."""


class InvalidSourceError(TransformError):
    """Source value is not a mapping."""


class InvalidTypeError(TransformError):
    """Source value does not match the inferred or declared shape of a field."""


class CyclicSchemaError(TransformError):
    """Nesting exceeded the recursion guard or a reference cycle was found."""


def _format(path: tuple[str, ...], message: str) -> str:
    if not path:
        return message
    return f"{'.'.join(path)}: {message}"


def describe_shape(value: object) -> str:
    """Return a short, JSON-flavoured name for the shape of ``value``."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, (set, frozenset)):
        return "set"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


# Short names matching the taxonomy used in the docs.
InvalidTarget = InvalidTargetError
InvalidSource = InvalidSourceError
InvalidType = InvalidTypeError
CyclicSchema = CyclicSchemaError

__all__ = [
    "CyclicSchema",
    "CyclicSchemaError",
    "InvalidSource",
    "InvalidSourceError",
    "InvalidTarget",
    "InvalidTargetError",
    "InvalidType",
    "InvalidTypeError",
    "TransformError",
    "describe_shape",
]
