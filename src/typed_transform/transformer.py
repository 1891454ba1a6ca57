"""Config-bound facade, JSON text helpers and the ``Transformable`` mixin."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import TypeVar

from typed_transform.config.schema import DEFAULT_CONFIG, TransformConfig
from typed_transform.decode import Decoder
from typed_transform.encode import Encoder, JSONValue
from typed_transform.errors import InvalidSourceError
from typed_transform.introspection import type_name

T = TypeVar("T")
TModel = TypeVar("TModel", bound="Transformable")


class Transformer:
    """Decode and encode with one shared ``TransformConfig``."""

    def __init__(self, config: TransformConfig | None = None) -> None:
        self.config = config or DEFAULT_CONFIG
        self._decoder = Decoder(self.config)
        self._encoder = Encoder(self.config)

    def from_json(self, source: object, target: type[T], strict: bool | None = None) -> T:
        return self._decoder.decode(source, target, strict)

    def to_json(self, instance: object) -> JSONValue:
        return self._encoder.encode(instance)

    def loads(self, raw: str | bytes, target: type[T], strict: bool | None = None) -> T:
        """Parse JSON text and decode it into ``target``."""
        if not isinstance(raw, (str, bytes, bytearray)):
            raise InvalidSourceError(
                f"expected JSON text, got {type(raw).__name__}", path=(type_name(target),)
            )
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise InvalidSourceError(
                f"invalid JSON: {exc}", path=(type_name(target),)
            ) from exc
        return self.from_json(parsed, target, strict)

    def dumps(self, instance: object) -> str:
        """Canonical JSON text of the encoded instance."""
        return canonical_json(self.to_json(instance))


def canonical_json(value: JSONValue) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


_DEFAULT = Transformer()


def loads(raw: str | bytes, target: type[T], strict: bool | None = None) -> T:
    return _DEFAULT.loads(raw, target, strict)


def dumps(instance: object) -> str:
    return _DEFAULT.dumps(instance)


class Transformable:
    """Mixin adding dict/JSON round-trip methods to a zero-argument constructible class."""

    def to_dict(self) -> dict[str, JSONValue]:
        encoded = _DEFAULT.to_json(self)
        if not isinstance(encoded, dict):
            raise TypeError(f"{type(self).__name__}: encoded value must be an object")
        return encoded

    def to_json_text(self) -> str:
        return canonical_json(self.to_dict())

    @classmethod
    def from_dict(
        cls: type[TModel], data: Mapping[str, object], strict: bool | None = None
    ) -> TModel:
        return _DEFAULT.from_json(data, cls, strict)

    @classmethod
    def from_json_text(cls: type[TModel], raw: str | bytes, strict: bool | None = None) -> TModel:
        return _DEFAULT.loads(raw, cls, strict)


__all__ = [
    "Transformable",
    "Transformer",
    "canonical_json",
    "dumps",
    "loads",
]
