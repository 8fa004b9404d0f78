"""Value classification: atomic versus compound.

Atomic values are returned by the walker as-is. Everything else is compound and
goes to the strategy registry, which may still decide not to copy it.
"""

from __future__ import annotations

import numbers
import types
from collections.abc import Iterable, Iterator
from datetime import timedelta, timezone
from enum import Enum
from typing import Any

from clonegraph.core.types import Kind

ATOMIC_TYPES: tuple[type, ...] = (
    types.NoneType,
    types.NotImplementedType,
    types.EllipsisType,
    bool,
    numbers.Number,
    str,
    bytes,
    range,
    slice,
    timedelta,
    timezone,
    Enum,
)
"""Immutable primitives. Enum members play the role of unique symbols."""

FUNCTION_TYPES: tuple[type, ...] = (
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.MethodWrapperType,
    types.WrapperDescriptorType,
    types.MethodDescriptorType,
    types.ClassMethodDescriptorType,
)
"""Callables that are atomic unless a caller override claims them."""


def classify(value: Any, overrides: Iterable[type] = ()) -> Kind:
    """Decide whether a value needs a cloning strategy.

    Args:
        value: Any value.
        overrides: Types the caller registered strategies for. A function
            matching one of these is treated as compound.

    Returns:
        Kind.ATOMIC for immutable primitives and unclaimed functions,
        Kind.COMPOUND otherwise.
    """
    if isinstance(value, ATOMIC_TYPES):
        return Kind.ATOMIC
    if isinstance(value, FUNCTION_TYPES) and not any(isinstance(value, t) for t in overrides):
        return Kind.ATOMIC
    return Kind.COMPOUND


def is_atomic_type(cls: type) -> bool:
    """Check whether instances of a class are always classified atomic."""
    return issubclass(cls, ATOMIC_TYPES)


def is_record(value: Any) -> bool:
    """Check whether a value carries instance state the record strategy can copy.

    Args:
        value: Any value.

    Returns:
        True if the value has a ``__dict__`` or at least one ``__slots__`` entry.
    """
    if hasattr(value, "__dict__"):
        return True
    return any(True for _ in slot_names(type(value)))


def slot_names(cls: type) -> Iterator[str]:
    """Yield the attribute names of every slot declared along the MRO.

    Private slots are yielded in their mangled form so ``getattr`` finds them.
    """
    for base in cls.__mro__:
        slots = base.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name in ("__dict__", "__weakref__"):
                continue
            if name.startswith("__") and not name.endswith("__"):
                name = f"_{base.__name__.lstrip('_')}{name}"
            yield name
