"""
typed-transform — decode engine.

File: src/typed_transform/decode.py
Last updated: 2026-10-18

Purpose
- Materialize a typed instance from untyped, JSON-shaped data. The expected
  shape of every field is inferred from the default value of a
  zero-argument-constructed instance, optionally overridden by the class's
  ``types`` schema.

Functional requirements
- First violation aborts the whole call; no partial instance is returned.
- ``None`` in the source never updates a field, whatever the strictness.
- A lenient mismatch assigns the source value as-is; a lenient missing field
  keeps the default.
- Date-typed collection elements must be ISO-8601 strings, regardless of
  strictness.

Non-functional requirements
- Stateless between calls; nesting depth bounded by ``TransformConfig.max_depth``.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

from typed_transform.config.schema import DEFAULT_CONFIG, TransformConfig
from typed_transform.dates import is_date_type, parse_timestamp
from typed_transform.errors import (
    CyclicSchemaError,
    InvalidSourceError,
    InvalidTargetError,
    InvalidTypeError,
    describe_shape,
)
from typed_transform.introspection import (
    instantiate,
    is_non_data,
    is_writable,
    own_fields,
    placeholder,
    type_name,
)
from typed_transform.observability.logging import get_event_logger
from typed_transform.schema import (
    FieldKind,
    FieldPlan,
    effective_strict,
    plan_field,
    primitive_kind,
    resolve,
)

T = TypeVar("T")

_SCALARS = (str, int, float, bool)


@dataclass(frozen=True, slots=True)
class _FieldContext:
    owner: str
    path: tuple[str, ...]
    depth: int
    throwable: bool


_Handler = Callable[[Any, Any, FieldPlan, _FieldContext], Any]


class Decoder:
    """Recursive decoder bound to one ``TransformConfig``."""

    def __init__(
        self, config: TransformConfig | None = None, *, logger: Any | None = None
    ) -> None:
        self._config = config or DEFAULT_CONFIG
        self._logger = logger if logger is not None else get_event_logger(__name__)
        self._handlers: dict[FieldKind, _Handler] = {
            FieldKind.PRIMITIVE: self._decode_primitive,
            FieldKind.SEQUENCE: self._decode_sequence,
            FieldKind.SET: self._decode_set,
            FieldKind.KEYED_COLLECTION: self._decode_keyed,
            FieldKind.DATE: self._decode_date,
            FieldKind.OPAQUE_RECORD: self._decode_opaque,
            FieldKind.NESTED_OBJECT: self._decode_nested,
        }

    @property
    def config(self) -> TransformConfig:
        return self._config

    def decode(self, source: object, target: type[T], strict: bool | None = None) -> T:
        ambient = self._config.strict if strict is None else strict
        return self._decode_object(source, target, ambient, path=(type_name(target),), depth=0)

    # ------------------------------------------------------------------
    # Objects
    # ------------------------------------------------------------------

    def _decode_object(
        self,
        source: object,
        target: Any,
        strict: bool,
        *,
        path: tuple[str, ...],
        depth: int,
    ) -> Any:
        if depth > self._config.max_depth:
            raise CyclicSchemaError(
                f"nesting exceeds max depth {self._config.max_depth}",
                path=path,
            )
        owner = type_name(target)
        if not isinstance(source, Mapping):
            raise InvalidSourceError(
                f"source can't be converted to target class {owner}",
                path=path,
                owner=owner,
                expected="object",
                actual=describe_shape(source),
            )

        instance = instantiate(target, path=path)

        for name in own_fields(instance, hidden_prefix=self._config.hidden_prefix):
            if not is_writable(instance, name):
                continue
            descriptor = resolve(target, name)
            throwable = effective_strict(strict, descriptor)
            field_path = (*path, name)

            value = getattr(instance, name)
            if is_non_data(value):
                continue

            if value is None:
                if descriptor.type is None:
                    if throwable:
                        raise InvalidTargetError(
                            f"default of {name!r} is None, but {owner}.types.{name}.type "
                            "is not declared",
                            path=field_path,
                            owner=owner,
                        )
                    self._logger.debug("decode_untyped_none_skipped", path=".".join(field_path))
                    continue
                try:
                    value = placeholder(descriptor.type, path=field_path)
                except InvalidTargetError:
                    if throwable:
                        raise
                    self._logger.debug("decode_placeholder_failed", path=".".join(field_path))
                    continue

            if name not in source:
                if throwable:
                    raise InvalidTypeError(
                        f"{name!r} is missing in source but required by {owner}",
                        path=field_path,
                        owner=owner,
                        expected=describe_shape(value),
                        actual="missing",
                    )
                self._logger.debug("decode_missing_field_kept_default", path=".".join(field_path))
                continue

            raw = source[name]
            if raw is None:
                continue

            plan = plan_field(value, descriptor)
            context = _FieldContext(owner=owner, path=field_path, depth=depth, throwable=throwable)
            setattr(instance, name, self._handlers[plan.kind](value, raw, plan, context))

        return instance

    # ------------------------------------------------------------------
    # Field handlers
    # ------------------------------------------------------------------

    def _decode_primitive(
        self, value: Any, raw: Any, plan: FieldPlan, ctx: _FieldContext
    ) -> Any:
        expected = primitive_kind(value)
        if primitive_kind(raw) != expected:
            return self._mismatch(raw, expected or type(value).__name__, ctx)
        return raw

    def _decode_sequence(
        self, value: Any, raw: Any, plan: FieldPlan, ctx: _FieldContext
    ) -> Any:
        if not isinstance(raw, (list, tuple)):
            return self._mismatch(raw, "array", ctx)
        items = [
            self._coerce_element(item, plan.element_type, ctx, str(index))
            for index, item in enumerate(raw)
        ]
        if isinstance(value, list):
            extended = copy.copy(value)
            extended.extend(items)
            return extended
        if _is_named_tuple(value):
            # positional record: the array replaces the fields one for one
            if len(items) != len(value):
                return self._mismatch(raw, f"array of {len(value)} items", ctx)
            return type(value)._make(items)
        if type(value) is tuple:
            return (*value, *items)
        return type(value)((*value, *items))

    def _decode_set(self, value: Any, raw: Any, plan: FieldPlan, ctx: _FieldContext) -> Any:
        if not isinstance(raw, (list, tuple)):
            return self._mismatch(raw, "array", ctx)
        items = [
            self._coerce_element(item, plan.element_type, ctx, str(index))
            for index, item in enumerate(raw)
        ]
        try:
            if isinstance(value, set):
                extended = copy.copy(value)
                extended.update(items)
                return extended
            return value.union(items)
        except TypeError:
            return self._mismatch(raw, "array of hashable values", ctx)

    def _decode_keyed(self, value: Any, raw: Any, plan: FieldPlan, ctx: _FieldContext) -> Any:
        if not isinstance(raw, Mapping):
            return self._mismatch(raw, "object", ctx)
        extended = copy.copy(value)
        for key, item in raw.items():
            extended[key] = self._coerce_element(item, plan.element_type, ctx, str(key))
        return extended

    def _decode_date(self, value: Any, raw: Any, plan: FieldPlan, ctx: _FieldContext) -> Any:
        if not isinstance(raw, str):
            return self._mismatch(raw, "string", ctx)
        try:
            return parse_timestamp(raw, reference=value, assume_utc=self._config.assume_utc)
        except ValueError:
            return self._mismatch(raw, "ISO-8601 string", ctx)

    def _decode_opaque(
        self, value: Any, raw: Any, plan: FieldPlan, ctx: _FieldContext
    ) -> Any:
        if not isinstance(raw, Mapping):
            return self._mismatch(raw, "object", ctx)
        return raw

    def _decode_nested(
        self, value: Any, raw: Any, plan: FieldPlan, ctx: _FieldContext
    ) -> Any:
        if not isinstance(raw, Mapping):
            return self._mismatch(raw, "object", ctx)
        return self._decode_object(
            raw, type(value), ctx.throwable, path=ctx.path, depth=ctx.depth + 1
        )

    # ------------------------------------------------------------------
    # Elements and mismatches
    # ------------------------------------------------------------------

    def _coerce_element(
        self,
        item: Any,
        element_type: Callable[[], Any] | None,
        ctx: _FieldContext,
        key: str,
    ) -> Any:
        if element_type is None:
            return item
        element_path = (*ctx.path, key)
        if is_date_type(element_type):
            if not isinstance(item, str):
                raise InvalidTypeError(
                    f"type of value in source is not string as {type_name(element_type)} expects",
                    path=element_path,
                    owner=ctx.owner,
                    expected="string",
                    actual=describe_shape(item),
                )
            try:
                return parse_timestamp(
                    item,
                    reference=placeholder(element_type, path=element_path),
                    assume_utc=self._config.assume_utc,
                )
            except ValueError as exc:
                raise InvalidTypeError(
                    f"{item!r} is not an ISO-8601 timestamp",
                    path=element_path,
                    owner=ctx.owner,
                    expected="ISO-8601 string",
                    actual="string",
                ) from exc
        if item is None or isinstance(item, _SCALARS):
            return item
        return self._decode_object(
            item, element_type, ctx.throwable, path=element_path, depth=ctx.depth + 1
        )

    def _mismatch(self, raw: Any, expected: str, ctx: _FieldContext) -> Any:
        if ctx.throwable:
            raise InvalidTypeError(
                f"type of {ctx.path[-1]!r} in source is not {expected} as {ctx.owner} expects",
                path=ctx.path,
                owner=ctx.owner,
                expected=expected,
                actual=describe_shape(raw),
            )
        self._logger.debug(
            "decode_mismatch_passed_through",
            path=".".join(ctx.path),
            expected=expected,
            actual=describe_shape(raw),
        )
        return raw


def _is_named_tuple(value: object) -> bool:
    return isinstance(value, tuple) and hasattr(type(value), "_fields")


def from_json(
    source: object,
    target: type[T],
    strict: bool | None = None,
    *,
    config: TransformConfig | None = None,
) -> T:
    """Decode ``source`` into a fresh instance of ``target``.

    Raises ``InvalidSourceError`` when ``source`` is not a mapping,
    ``InvalidTargetError`` when ``target`` (or a nested type) can't be built
    without arguments, and ``InvalidTypeError`` on strict-mode mismatches.
    ``strict`` defaults to the config value, which is ``True`` unless configured.
    """

    return Decoder(config).decode(source, target, strict)


__all__ = ["Decoder", "from_json"]
