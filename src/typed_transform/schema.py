"""
typed-transform — field descriptors and descriptor resolution.

File: src/typed_transform/schema.py
Last updated: 2026-10-18

Purpose
- Declare optional per-field overrides (``FieldDescriptor``) and attach them to
  a class as an immutable ``Schema``.
- Resolve the descriptor for a field and turn it, together with the field's
  default value, into an explicit ``FieldPlan`` the decode engine dispatches on.

Functional requirements
- Resolution never raises. Malformed schema entries resolve to an empty
  descriptor; bad constructors surface later as construction failures.
- Schemas are not inherited: only the class's own ``types`` attribute counts.
"""

from __future__ import annotations

import datetime as dt
import types as pytypes
from collections.abc import Callable, Iterator, Mapping, MutableMapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Final, Literal, TypeVar

from typed_transform.constants import SCHEMA_ATTRIBUTE

TClass = TypeVar("TClass", bound=type)
PrimitiveKind = Literal["string", "number", "boolean"]

_PRIMITIVE_TYPES: Final[tuple[type, ...]] = (str, int, float, bool)
_OPAQUE_TYPES: Final[tuple[type, ...]] = (pytypes.SimpleNamespace, pytypes.MappingProxyType)


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """Per-field override of the shape inferred from a default value.

    ``type`` replaces the expected constructor and is required when the default
    is ``None``. ``of`` declares the element type of a list, set or dict field.
    ``strict`` overrides the strictness passed to ``from_json`` for this field.
    """

    type: Callable[[], Any] | None = None
    of: Callable[[], Any] | None = None
    strict: bool | None = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object]) -> FieldDescriptor:
        strict = raw.get("strict")
        return cls(
            type=raw.get("type"),  # type: ignore[arg-type]
            of=raw.get("of"),  # type: ignore[arg-type]
            strict=strict if isinstance(strict, bool) else None,
        )


EMPTY_DESCRIPTOR: Final[FieldDescriptor] = FieldDescriptor()


def as_descriptor(raw: object) -> FieldDescriptor:
    """Normalize a schema entry; anything unrecognized becomes the empty descriptor."""
    if isinstance(raw, FieldDescriptor):
        return raw
    if isinstance(raw, Mapping):
        return FieldDescriptor.from_mapping(raw)
    return EMPTY_DESCRIPTOR


class Schema(Mapping[str, FieldDescriptor]):
    """Read-only mapping of field name to ``FieldDescriptor``."""

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, object] | None = None, /, **kwargs: object) -> None:
        merged: dict[str, FieldDescriptor] = {}
        for source in (entries or {}, kwargs):
            for name, raw in source.items():
                if not isinstance(name, str):
                    raise TypeError(f"schema field names must be strings, got {name!r}")
                merged[name] = as_descriptor(raw)
        self._entries = pytypes.MappingProxyType(merged)

    def __getitem__(self, name: str) -> FieldDescriptor:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Schema({dict(self._entries)!r})"


def schema(
    entries: Mapping[str, object] | None = None, /, **descriptors: object
) -> Callable[[TClass], TClass]:
    """Class decorator attaching an immutable ``Schema`` as the class's ``types``."""

    built = Schema(entries, **descriptors)

    def decorate(cls: TClass) -> TClass:
        setattr(cls, SCHEMA_ATTRIBUTE, built)
        return cls

    return decorate


def resolve(target: object, field_name: str) -> FieldDescriptor:
    """Return the descriptor declared for ``field_name`` on ``target`` itself."""
    namespace = getattr(target, "__dict__", None)
    if not isinstance(namespace, Mapping):
        return EMPTY_DESCRIPTOR
    declared = namespace.get(SCHEMA_ATTRIBUTE)
    if not isinstance(declared, Mapping):
        return EMPTY_DESCRIPTOR
    return as_descriptor(declared.get(field_name))


def effective_strict(ambient: bool, descriptor: FieldDescriptor | None) -> bool:
    """Per-field ``strict`` wins over the ambient flag when it is a real bool."""
    if descriptor is not None and isinstance(descriptor.strict, bool):
        return descriptor.strict
    return ambient


class FieldKind(StrEnum):
    PRIMITIVE = "primitive"
    SEQUENCE = "sequence"
    SET = "set"
    KEYED_COLLECTION = "keyed_collection"
    DATE = "date"
    OPAQUE_RECORD = "opaque_record"
    NESTED_OBJECT = "nested_object"


@dataclass(frozen=True, slots=True)
class FieldPlan:
    """How a single field is populated, decided before the source is inspected."""

    kind: FieldKind
    element_type: Callable[[], Any] | None = None


_COLLECTION_KINDS: Final[frozenset[FieldKind]] = frozenset(
    {FieldKind.SEQUENCE, FieldKind.SET, FieldKind.KEYED_COLLECTION}
)


def classify(value: object) -> FieldKind:
    if isinstance(value, _PRIMITIVE_TYPES):
        return FieldKind.PRIMITIVE
    if isinstance(value, (dt.datetime, dt.date)):
        return FieldKind.DATE
    if isinstance(value, (list, tuple)):
        return FieldKind.SEQUENCE
    if isinstance(value, (set, frozenset)):
        return FieldKind.SET
    if isinstance(value, _OPAQUE_TYPES):
        return FieldKind.OPAQUE_RECORD
    if isinstance(value, MutableMapping):
        return FieldKind.KEYED_COLLECTION
    return FieldKind.NESTED_OBJECT


def plan_field(value: object, descriptor: FieldDescriptor) -> FieldPlan:
    """Build the plan for a field from its (placeholder-filled) default value."""
    kind = classify(value)
    element_type = descriptor.of if kind in _COLLECTION_KINDS else None
    return FieldPlan(kind=kind, element_type=element_type)


def primitive_kind(value: object) -> PrimitiveKind | None:
    """JSON-level kind of a scalar; ``bool`` is never a number."""
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return None


__all__ = [
    "EMPTY_DESCRIPTOR",
    "FieldDescriptor",
    "FieldKind",
    "FieldPlan",
    "PrimitiveKind",
    "Schema",
    "as_descriptor",
    "classify",
    "effective_strict",
    "plan_field",
    "primitive_kind",
    "resolve",
    "schema",
]
