"""Instance reflection helpers: own fields, writability, construction."""

from __future__ import annotations

import dataclasses
import datetime as dt
import functools
import inspect
from collections.abc import Callable, Sequence
from typing import Any, Final

from typed_transform.constants import HIDDEN_PREFIX
from typed_transform.errors import CyclicSchemaError, InvalidTargetError, describe_shape

# Zero-argument stand-ins for types whose constructors require arguments.
_PLACEHOLDERS: Final[dict[type, object]] = {
    dt.datetime: dt.datetime.min,
    dt.date: dt.date.min,
}


def own_fields(instance: object, *, hidden_prefix: str = HIDDEN_PREFIX) -> list[str]:
    """Return the visible own attribute names of ``instance`` in definition order."""
    names: list[str] = []
    namespace = getattr(instance, "__dict__", None)
    if isinstance(namespace, dict):
        names.extend(key for key in namespace if isinstance(key, str))

    seen = set(names)
    for klass in reversed(type(instance).__mro__):
        for slot in _slot_names(klass):
            if slot in seen or slot in ("__dict__", "__weakref__"):
                continue
            if hasattr(instance, slot):
                names.append(slot)
                seen.add(slot)

    if not hidden_prefix:
        return names
    return [name for name in names if not name.startswith(hidden_prefix)]


def has_field_storage(value: object) -> bool:
    """True when ``value`` can carry own attributes at all."""
    if isinstance(getattr(value, "__dict__", None), dict):
        return True
    return any(_slot_names(klass) for klass in type(value).__mro__)


def is_writable(instance: object, name: str) -> bool:
    cls = type(instance)
    params = getattr(cls, "__dataclass_params__", None)
    if dataclasses.is_dataclass(cls) and params is not None and params.frozen:
        return False
    attr = inspect.getattr_static(cls, name, None)
    if isinstance(attr, property):
        return attr.fset is not None
    return True


def is_non_data(value: object) -> bool:
    """Functions, methods and classes are never data fields."""
    return (
        inspect.isroutine(value)
        or inspect.isclass(value)
        or isinstance(value, functools.partial)
    )


def type_name(target: object) -> str:
    name = getattr(target, "__name__", None)
    if isinstance(name, str):
        return name
    return describe_shape(target)


def instantiate(target: object, *, path: Sequence[str]) -> Any:
    """Construct ``target`` with no arguments, translating failures into transform errors."""
    if not callable(target):
        raise InvalidTargetError(
            "target class can't be constructed without arguments",
            path=path,
            expected="zero-argument constructor",
            actual=describe_shape(target),
        )
    factory: Callable[[], Any] = target
    try:
        return factory()
    except RecursionError as exc:
        raise CyclicSchemaError(
            f"constructing {type_name(target)} recurses without bound",
            path=path,
        ) from exc
    except Exception as exc:
        raise InvalidTargetError(
            f"target class {type_name(target)} can't be constructed without arguments",
            path=path,
            expected="zero-argument constructor",
            actual=type(exc).__name__,
        ) from exc


def placeholder(factory: object, *, path: Sequence[str]) -> Any:
    """Build the stand-in value for a field whose default is ``None``."""
    if isinstance(factory, type) and factory in _PLACEHOLDERS:
        return _PLACEHOLDERS[factory]
    return instantiate(factory, path=path)


def _slot_names(klass: type) -> tuple[str, ...]:
    slots = klass.__dict__.get("__slots__", ())
    if isinstance(slots, str):
        return (slots,)
    return tuple(slot for slot in slots if isinstance(slot, str))


__all__ = [
    "has_field_storage",
    "instantiate",
    "is_non_data",
    "is_writable",
    "own_fields",
    "placeholder",
    "type_name",
]
