"""
typed-transform — unit tests for the encode engine

File: tests/unit/encode/test_encode.py
Last updated: 2026-10-18

Purpose
- Validate that instances flatten into JSON-native values, drop behaviour and
  hidden attributes, and never mutate their input.
"""

from __future__ import annotations

import copy
import json
import types
import uuid
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from pathlib import PurePosixPath

import pytest

from typed_transform import (
    CyclicSchemaError,
    InvalidTypeError,
    TransformConfig,
    Transformer,
    from_json,
    to_json,
    toJSON,
)


class Color(str, Enum):
    RED = "red"


class Level(Enum):
    LOW = 1


class Bar:
    def __init__(self, name: str = "") -> None:
        self.name = name


class Foo:
    def __init__(self) -> None:
        self.title = "t"
        self.bars = [Bar("a"), Bar("b")]
        self.bar_set = {Bar("only")}
        self.callback = lambda: None
        self._private = "hidden"

    def method(self) -> str:
        return "ignored"


class Token:
    __slots__ = ()

    def __str__(self) -> str:
        return "token-1"


@dataclass
class Record:
    when: datetime = field(default_factory=lambda: datetime(2025, 1, 1, 12, tzinfo=UTC))
    day: date = field(default_factory=lambda: date(2025, 1, 2))
    naive: datetime = field(default_factory=lambda: datetime(2025, 1, 1))
    tags: set[str] = field(default_factory=lambda: {"b", "a", "c"})
    pair: tuple[int, int] = (1, 2)
    counts: dict[int, str] = field(default_factory=lambda: {1: "one", 2: "two"})
    color: Color = Color.RED
    level: Level = Level.LOW
    ident: uuid.UUID = field(default_factory=lambda: uuid.UUID(int=1))
    price: Decimal = Decimal("1.50")
    where: PurePosixPath = PurePosixPath("/tmp/x")
    missing: str | None = None


class Loop:
    def __init__(self) -> None:
        self.me: Loop | None = None


def test_methods_callables_and_hidden_fields_are_dropped() -> None:
    encoded = to_json(Foo())
    assert encoded == {
        "title": "t",
        "bars": [{"name": "a"}, {"name": "b"}],
        "bar_set": [{"name": "only"}],
    }


def test_camel_case_alias_is_the_same_operation() -> None:
    assert toJSON is to_json


def test_values_become_json_native() -> None:
    encoded = to_json(Record())
    assert encoded == {
        "when": "2025-01-01T12:00:00.000000Z",
        "day": "2025-01-02",
        "naive": "2025-01-01T00:00:00.000000",
        "tags": ["a", "b", "c"],
        "pair": [1, 2],
        "counts": {"1": "one", "2": "two"},
        "color": "red",
        "level": 1,
        "ident": "00000000-0000-0000-0000-000000000001",
        "price": "1.50",
        "where": "/tmp/x",
        "missing": None,
    }
    json.dumps(encoded)


def test_scalars_and_none_pass_through() -> None:
    assert to_json(None) is None
    assert to_json(3) == 3
    assert to_json("x") == "x"
    assert to_json(True) is True


def test_opaque_records_become_dicts() -> None:
    assert to_json(types.SimpleNamespace(a=1, b=[2])) == {"a": 1, "b": [2]}


def test_objects_without_storage_use_their_text_form() -> None:
    assert to_json(Token()) == "token-1"


def test_mixed_sets_sort_by_canonical_form() -> None:
    assert to_json({3, "a", 1}) == ["a", 1, 3]


def test_hidden_prefix_follows_config() -> None:
    transformer = Transformer(TransformConfig(hidden_prefix=""))
    assert "_private" in transformer.to_json(Foo())  # type: ignore[operator]


def test_shared_references_are_not_cycles() -> None:
    shared = Bar("shared")
    holder = types.SimpleNamespace(left=shared, right=shared)
    assert to_json(holder) == {"left": {"name": "shared"}, "right": {"name": "shared"}}


def test_reference_cycles_raise() -> None:
    loop = Loop()
    loop.me = loop
    with pytest.raises(CyclicSchemaError):
        to_json(loop)

    items: list[object] = []
    items.append(items)
    with pytest.raises(CyclicSchemaError):
        to_json(items)


def test_encoding_is_idempotent_and_does_not_mutate() -> None:
    record = Record()
    before = copy.deepcopy(record)
    first = to_json(record)
    second = to_json(record)
    assert first == second
    assert record == before


class Tagged:
    def __init__(self) -> None:
        self.ident = uuid.UUID(int=1)


def test_text_form_values_do_not_decode_back() -> None:
    encoded = to_json(Tagged())
    assert encoded == {"ident": "00000000-0000-0000-0000-000000000001"}

    with pytest.raises(InvalidTypeError):
        from_json(encoded, Tagged)
    assert from_json(encoded, Tagged, False).ident == "00000000-0000-0000-0000-000000000001"
