"""Encode engine: flatten typed instances into JSON-native values."""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from enum import Enum
from pathlib import PurePath
from typing import Any
from uuid import UUID

from typed_transform.config.schema import DEFAULT_CONFIG, TransformConfig
from typed_transform.dates import format_timestamp
from typed_transform.errors import CyclicSchemaError
from typed_transform.introspection import has_field_storage, is_non_data, own_fields, type_name

JSONScalar = str | int | float | bool | None
JSONValue = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]


class Encoder:
    """Recursive encoder; needs no schema since runtime values describe themselves."""

    def __init__(self, config: TransformConfig | None = None) -> None:
        self._config = config or DEFAULT_CONFIG

    def encode(self, instance: object) -> JSONValue:
        return self._flatten(instance, active=set(), path=(type_name(type(instance)),))

    def _flatten(self, value: object, *, active: set[int], path: tuple[str, ...]) -> JSONValue:
        if value is None:
            return None
        if isinstance(value, Enum):
            return self._flatten(value.value, active=active, path=path)
        # bool before int: bool is an int subclass
        for scalar in (bool, int, float, str):
            if isinstance(value, scalar):
                return scalar(value)
        if isinstance(value, date):
            return format_timestamp(value)
        if isinstance(value, (UUID, Decimal, PurePath)):
            return str(value)

        marker = id(value)
        if marker in active:
            raise CyclicSchemaError("reference cycle detected while encoding", path=path)
        active.add(marker)
        try:
            if isinstance(value, (list, tuple)):
                return [
                    self._flatten(item, active=active, path=(*path, str(index)))
                    for index, item in enumerate(value)
                ]
            if isinstance(value, (set, frozenset)):
                items = [self._flatten(item, active=active, path=path) for item in value]
                return sorted(items, key=_canonical)
            if isinstance(value, Mapping):
                return {
                    _json_key(key): self._flatten(item, active=active, path=(*path, str(key)))
                    for key, item in value.items()
                }
            if not has_field_storage(value):
                return str(value)
            return self._flatten_object(value, active=active, path=path)
        finally:
            active.discard(marker)

    def _flatten_object(
        self, value: object, *, active: set[int], path: tuple[str, ...]
    ) -> dict[str, JSONValue]:
        result: dict[str, JSONValue] = {}
        for name in own_fields(value, hidden_prefix=self._config.hidden_prefix):
            item = getattr(value, name)
            if is_non_data(item):
                continue
            result[name] = self._flatten(item, active=active, path=(*path, name))
        return result


def _json_key(key: object) -> str:
    """Stringify a mapping key the way ``json.dumps`` does."""
    if isinstance(key, str):
        return str(key)
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    if isinstance(key, (int, float)):
        return json.dumps(key)
    if isinstance(key, date):
        return format_timestamp(key)
    return str(key)


def _canonical(item: Any) -> str:
    return json.dumps(item, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def to_json(instance: object, *, config: TransformConfig | None = None) -> JSONValue:
    """Flatten ``instance`` into plain dicts, lists and scalars.

    Methods, callables and underscore-prefixed attributes are dropped, sets
    become sorted lists, mappings become string-keyed dicts and dates become
    ISO-8601 strings. The instance is never mutated.

    ``UUID``, ``Decimal`` and ``PurePath`` values are written as their text form
    for readability only: ``from_json`` treats such defaults as nested objects,
    so the encoded string does not decode back into them.
    """

    return Encoder(config).encode(instance)


__all__ = ["Encoder", "JSONScalar", "JSONValue", "to_json"]
