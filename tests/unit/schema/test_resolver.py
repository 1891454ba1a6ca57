"""
typed-transform — unit tests for descriptor resolution

File: tests/unit/schema/test_resolver.py
Last updated: 2026-10-18

Purpose
- Validate schema lookup, strictness resolution and field planning.

What this test file should cover
- Plain-mapping and ``FieldDescriptor`` schema entries, malformed entries.
- Non-inherited schemas.
- Field kind classification for every supported default value.
"""

from __future__ import annotations

import types
from dataclasses import dataclass, field
from datetime import UTC, date, datetime

import pytest

from typed_transform.schema import (
    EMPTY_DESCRIPTOR,
    FieldDescriptor,
    FieldKind,
    FieldPlan,
    Schema,
    classify,
    effective_strict,
    plan_field,
    primitive_kind,
    resolve,
    schema,
)


class Bar:
    def __init__(self) -> None:
        self.name = ""


class WithMappingSchema:
    types = {
        "items": {"of": Bar},
        "maybe": {"type": str, "strict": False},
        "broken": "not a descriptor",
        "weird_strict": {"strict": "yes"},
    }

    def __init__(self) -> None:
        self.items: list[Bar] = []
        self.maybe: str | None = None


class Child(WithMappingSchema):
    pass


@schema(tags={"of": Bar}, stamp=FieldDescriptor(type=datetime))
@dataclass
class Decorated:
    tags: set[str] = field(default_factory=set)
    stamp: datetime | None = None


def test_resolve_reads_mapping_entries() -> None:
    assert resolve(WithMappingSchema, "items") == FieldDescriptor(of=Bar)
    assert resolve(WithMappingSchema, "maybe") == FieldDescriptor(type=str, strict=False)


def test_resolve_missing_or_malformed_entries_are_empty() -> None:
    assert resolve(WithMappingSchema, "absent") is EMPTY_DESCRIPTOR
    assert resolve(WithMappingSchema, "broken") is EMPTY_DESCRIPTOR
    assert resolve(Bar, "name") is EMPTY_DESCRIPTOR
    assert resolve(WithMappingSchema, "weird_strict").strict is None


def test_resolve_never_raises_for_non_classes() -> None:
    assert resolve(None, "x") is EMPTY_DESCRIPTOR
    assert resolve(42, "x") is EMPTY_DESCRIPTOR


def test_schema_is_not_inherited() -> None:
    assert resolve(Child, "items") is EMPTY_DESCRIPTOR


def test_schema_decorator_attaches_read_only_schema() -> None:
    attached = Decorated.types  # type: ignore[attr-defined]
    assert isinstance(attached, Schema)
    assert attached["tags"] == FieldDescriptor(of=Bar)
    assert resolve(Decorated, "stamp") == FieldDescriptor(type=datetime)
    with pytest.raises(TypeError):
        attached["tags"] = FieldDescriptor()  # type: ignore[index]


def test_schema_rejects_non_string_field_names() -> None:
    with pytest.raises(TypeError):
        Schema({1: FieldDescriptor()})  # type: ignore[dict-item]


@pytest.mark.parametrize(
    ("ambient", "descriptor", "expected"),
    [
        (True, EMPTY_DESCRIPTOR, True),
        (False, EMPTY_DESCRIPTOR, False),
        (False, FieldDescriptor(strict=True), True),
        (True, FieldDescriptor(strict=False), False),
        (True, None, True),
    ],
)
def test_effective_strict_prefers_field_override(
    ambient: bool, descriptor: FieldDescriptor | None, expected: bool
) -> None:
    assert effective_strict(ambient, descriptor) is expected


@pytest.mark.parametrize(
    ("value", "kind"),
    [
        ("", FieldKind.PRIMITIVE),
        (0, FieldKind.PRIMITIVE),
        (0.5, FieldKind.PRIMITIVE),
        (False, FieldKind.PRIMITIVE),
        ([], FieldKind.SEQUENCE),
        ((), FieldKind.SEQUENCE),
        (set(), FieldKind.SET),
        (frozenset(), FieldKind.SET),
        ({}, FieldKind.KEYED_COLLECTION),
        (datetime(2025, 1, 1, tzinfo=UTC), FieldKind.DATE),
        (date(2025, 1, 1), FieldKind.DATE),
        (types.SimpleNamespace(), FieldKind.OPAQUE_RECORD),
        (types.MappingProxyType({}), FieldKind.OPAQUE_RECORD),
        (Bar(), FieldKind.NESTED_OBJECT),
    ],
)
def test_classify_covers_every_kind(value: object, kind: FieldKind) -> None:
    assert classify(value) is kind


def test_plan_field_only_carries_element_type_for_collections() -> None:
    descriptor = FieldDescriptor(of=Bar)
    assert plan_field([], descriptor).element_type is Bar
    assert plan_field({}, descriptor) == FieldPlan(FieldKind.KEYED_COLLECTION, Bar)
    assert plan_field("", descriptor).element_type is None
    assert plan_field(Bar(), descriptor) == FieldPlan(FieldKind.NESTED_OBJECT)


def test_primitive_kind_keeps_bool_apart_from_numbers() -> None:
    assert primitive_kind(True) == "boolean"
    assert primitive_kind(1) == "number"
    assert primitive_kind(1.5) == "number"
    assert primitive_kind("x") == "string"
    assert primitive_kind(None) is None
