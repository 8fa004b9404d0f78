"""Built-in cloning strategies.

Pure construct/populate/build functions for the standard library's compound
types, and the default table that maps types to them. The table is ordered:
the registry's ancestor lookup walks it front to back, so specific types are
listed before the ABCs that would also match them.
"""

from __future__ import annotations

import array
import asyncio
import concurrent.futures
import functools
import inspect
import io
import itertools
import logging
import re
import socket
import threading
import types
import weakref
from collections import Counter, OrderedDict, defaultdict, deque
from collections.abc import Callable, Mapping, MutableMapping, MutableSequence, MutableSet
from datetime import date, datetime, time
from functools import partial
from typing import Any

from clonegraph.core.classifier import FUNCTION_TYPES, slot_names
from clonegraph.core.errors import RecordConstructionError
from clonegraph.core.strategy.models import (
    NO_CLONE,
    CloneStrategy,
    RecordAllocation,
    Rebuild,
    Resolution,
)
from clonegraph.core.types import CloneFn

_PLAIN_CONTAINERS = frozenset({list, dict, set, OrderedDict, defaultdict, Counter})

SHARED_TYPES: tuple[type, ...] = (
    *FUNCTION_TYPES,
    partial,
    property,
    staticmethod,
    classmethod,
    type,
    types.ModuleType,
    types.CodeType,
    types.FrameType,
    types.TracebackType,
    types.GeneratorType,
    types.CoroutineType,
    types.AsyncGeneratorType,
    weakref.ReferenceType,
    weakref.ProxyType,
    weakref.CallableProxyType,
    weakref.WeakSet,
    weakref.WeakKeyDictionary,
    weakref.WeakValueDictionary,
    memoryview,
    io.IOBase,
    socket.socket,
    threading.Thread,
    logging.Logger,
    logging.Handler,
)
"""Types whose instances are handed back as the original reference."""


# Allocation helpers


def allocate(cls: type, allocation: RecordAllocation = RecordAllocation.NEW) -> Any:
    """Create an empty instance of ``cls`` to receive cloned state.

    Args:
        cls: Class to instantiate.
        allocation: NEW bypasses ``__init__``; INIT calls ``cls()``.

    Returns:
        A fresh instance of exactly ``cls``.

    Raises:
        RecordConstructionError: If INIT is requested and the constructor
            requires arguments, or if ``cls.__new__`` cannot run without them.
    """
    if allocation == RecordAllocation.INIT:
        try:
            signature = inspect.signature(cls)
        except (TypeError, ValueError):
            signature = None
        if signature is not None:
            try:
                signature.bind()
            except TypeError:
                raise RecordConstructionError(
                    cls,
                    f"record_allocation is 'init' but the constructor {cls.__name__}{signature} "
                    "requires arguments; register a strategy for it or use 'new'",
                ) from None
        return cls()

    try:
        return cls.__new__(cls)
    except TypeError as e:
        raise RecordConstructionError(
            cls, f"{cls.__name__}.__new__ requires arguments; register a strategy for it"
        ) from e


def _empty_like(original: Any, allocation: RecordAllocation) -> Any:
    cls = type(original)
    if cls in _PLAIN_CONTAINERS:
        return cls()
    return allocate(cls, allocation)


def copy_attributes(original: Any, skeleton: Any, clone: CloneFn) -> None:
    """Clone instance attributes from ``__dict__`` and ``__slots__`` by name.

    Unset slots are skipped. Slots are written with ``object.__setattr__`` so
    frozen dataclasses can be populated.
    """
    state = getattr(original, "__dict__", None)
    if state:
        target = skeleton.__dict__
        for name, item in state.items():
            target[name] = clone(item)
    for name in slot_names(type(original)):
        try:
            item = getattr(original, name)
        except AttributeError:
            continue
        object.__setattr__(skeleton, name, clone(item))


# Date/time instants


def construct_instant(original: date | time) -> date | time:
    """New instant from the original's pickled state (instants are immutable)."""
    cls, state = original.__reduce__()  # type: ignore[misc]
    return cls(*state)


# Sequences


def construct_list(
    original: list[Any], allocation: RecordAllocation = RecordAllocation.NEW
) -> list[Any]:
    """Same-class list pre-sized to the original's length."""
    skeleton = _empty_like(original, allocation)
    list.__init__(skeleton, itertools.repeat(None, len(original)))
    return skeleton


def populate_by_index(original: Any, skeleton: Any, clone: CloneFn) -> None:
    """Clone each element into the same index of a pre-sized skeleton."""
    for index, item in enumerate(original):
        skeleton[index] = clone(item)
    copy_attributes(original, skeleton, clone)


def construct_deque(
    original: deque[Any], allocation: RecordAllocation = RecordAllocation.NEW
) -> deque[Any]:
    if type(original) is deque:
        return deque(maxlen=original.maxlen)
    return allocate(type(original), allocation)


def populate_by_append(original: Any, skeleton: Any, clone: CloneFn) -> None:
    """Clone each element and append it, preserving order."""
    for item in original:
        skeleton.append(clone(item))
    copy_attributes(original, skeleton, clone)


def rebuild_tuple(original: tuple[Any, ...], clone: CloneFn) -> tuple[Any, ...]:
    """Rebuild a tuple, named tuple, or tuple subclass from cloned items."""
    items = [clone(item) for item in original]
    cls = type(original)
    if cls is tuple:
        return tuple(items)
    if hasattr(cls, "_make"):
        return cls._make(items)  # type: ignore[attr-defined]
    return cls.__new__(cls, items)


# Mappings


def construct_mapping(
    original: Mapping[Any, Any], allocation: RecordAllocation = RecordAllocation.NEW
) -> Any:
    """Empty mapping of the same class, keeping a defaultdict's factory."""
    skeleton = _empty_like(original, allocation)
    if isinstance(original, defaultdict):
        skeleton.default_factory = original.default_factory
    return skeleton


def populate_mapping(
    original: Mapping[Any, Any], skeleton: Any, clone: CloneFn, clone_keys: bool = True
) -> None:
    """Insert every entry, cloning values and, when ``clone_keys``, keys too.

    With ``clone_keys`` False the clone is keyed by the original key objects.
    """
    for key, item in original.items():
        skeleton[clone(key) if clone_keys else key] = clone(item)
    copy_attributes(original, skeleton, clone)


# Sets


def populate_set(original: Any, skeleton: Any, clone: CloneFn) -> None:
    for item in original:
        skeleton.add(clone(item))
    copy_attributes(original, skeleton, clone)


def rebuild_frozenset(original: frozenset[Any], clone: CloneFn) -> frozenset[Any]:
    return type(original)(clone(item) for item in original)


# User collections (MutableMapping, MutableSet, MutableSequence)


def construct_collection(
    original: Any, allocation: RecordAllocation = RecordAllocation.NEW
) -> Any:
    """Empty instance of a user collection class.

    Collections such as ``UserDict`` create their backing store in
    ``__init__``, so a constructor that takes no arguments is called even
    under NEW. Otherwise the allocation policy applies.
    """
    cls = type(original)
    try:
        inspect.signature(cls).bind()
    except (TypeError, ValueError):
        return allocate(cls, allocation)
    return cls()


def populate_collection(
    original: Any, skeleton: Any, clone: CloneFn, insert: Callable[[Any, Any, CloneFn], None]
) -> None:
    """Restore instance state, then insert items the state did not carry.

    Collections that keep their items in instance attributes (``data`` for
    ``UserDict`` and ``UserList``) are complete once their state is restored.
    Only an empty result is filled through the collection interface by
    ``insert``, one of the populate functions above.
    """
    copy_attributes(original, skeleton, clone)
    if len(skeleton) or not len(original):
        return
    insert(original, skeleton, clone)


# Binary buffers


def construct_buffer(original: bytearray | array.array[Any]) -> Any:
    """Zero-filled buffer with the same element type and length."""
    cls = type(original)
    if isinstance(original, array.array):
        return cls(original.typecode, bytes(len(original) * original.itemsize))
    return cls(len(original))


# Patterns


def rebuild_pattern(original: re.Pattern[Any], clone: CloneFn) -> re.Pattern[Any]:
    # re.compile may hand back its cached instance, which is immutable
    return re.compile(original.pattern, original.flags)


# Deferred computations


def construct_async_future(original: asyncio.Future[Any]) -> asyncio.Future[Any]:
    return original.get_loop().create_future()


def construct_thread_future(
    original: concurrent.futures.Future[Any],
) -> concurrent.futures.Future[Any]:
    return concurrent.futures.Future()


def populate_future(original: Any, skeleton: Any, clone: CloneFn) -> None:
    """Settle the clone with the original's outcome once it is known.

    The result object is relayed as-is, not cloned.
    """

    def relay(source: Any) -> None:
        if skeleton.done():
            return
        if source.cancelled():
            skeleton.cancel()
        elif (error := source.exception()) is not None:
            skeleton.set_exception(error)
        else:
            skeleton.set_result(source.result())

    original.add_done_callback(relay)


# Exceptions


def construct_exception(original: BaseException) -> BaseException:
    """Same-class exception called with the original's constructor args.

    Calling the class sets fields derived from args at the C level, such as
    ``OSError.errno``/``filename`` and ``StopIteration.value``. Classes that
    reject their own args are allocated without ``__init__``.
    """
    cls = type(original)
    _, args = original.__reduce__()[:2]  # type: ignore[misc]
    try:
        skeleton = cls(*args)
    except TypeError:
        return allocate(cls)
    # OSError(errno, ...) may return a more specific subclass
    if type(skeleton) is not cls:
        return allocate(cls)
    return skeleton


def populate_exception(original: BaseException, skeleton: BaseException, clone: CloneFn) -> None:
    """Clone args and attributes; chaining and traceback stay shared.

    Fields set from args in construct keep the original's objects.
    """
    skeleton.args = clone(original.args)
    copy_attributes(original, skeleton, clone)
    skeleton.__cause__ = original.__cause__
    skeleton.__context__ = original.__context__
    skeleton.__suppress_context__ = original.__suppress_context__
    skeleton.__traceback__ = original.__traceback__


# Records


def construct_record(original: Any, allocation: RecordAllocation = RecordAllocation.NEW) -> Any:
    return allocate(type(original), allocation)


def record_strategy(allocation: RecordAllocation = RecordAllocation.NEW) -> CloneStrategy[Any]:
    """Generic fallback for instances carrying ``__dict__`` or ``__slots__`` state."""
    return _record_strategy(RecordAllocation(allocation))


@functools.cache
def _record_strategy(allocation: RecordAllocation) -> CloneStrategy[Any]:
    return CloneStrategy(partial(construct_record, allocation=allocation), copy_attributes)


def default_strategies(
    clone_mapping_keys: bool = True,
    record_allocation: RecordAllocation = RecordAllocation.NEW,
) -> Mapping[type, Resolution]:
    """Return the ordered table of built-in strategies for one policy.

    Tables are built once per policy and shared between calls.

    Args:
        clone_mapping_keys: Whether mapping keys are cloned or shared.
        record_allocation: How containers of user subclasses are instantiated.

    Returns:
        Read-only mapping from type to strategy, in ancestor-lookup order.
    """
    return _build_defaults(bool(clone_mapping_keys), RecordAllocation(record_allocation))


@functools.cache
def _build_defaults(
    clone_mapping_keys: bool, record_allocation: RecordAllocation
) -> Mapping[type, Resolution]:
    mapping = CloneStrategy(
        partial(construct_mapping, allocation=record_allocation),
        partial(populate_mapping, clone_keys=clone_mapping_keys),
    )
    instant = CloneStrategy(construct_instant, copy_attributes)
    future = CloneStrategy(construct_thread_future, populate_future)
    buffer = CloneStrategy(construct_buffer, populate_by_index)
    collection = partial(construct_collection, allocation=record_allocation)

    table: dict[type, Resolution] = dict.fromkeys(SHARED_TYPES, NO_CLONE)
    table.update(
        {
            datetime: instant,
            date: instant,
            time: instant,
            re.Pattern: Rebuild(rebuild_pattern),
            asyncio.Future: CloneStrategy(construct_async_future, populate_future),
            concurrent.futures.Future: future,
            tuple: Rebuild(rebuild_tuple),
            frozenset: Rebuild(rebuild_frozenset),
            bytearray: buffer,
            array.array: buffer,
            deque: CloneStrategy(
                partial(construct_deque, allocation=record_allocation), populate_by_append
            ),
            dict: mapping,
            list: CloneStrategy(
                partial(construct_list, allocation=record_allocation), populate_by_index
            ),
            set: CloneStrategy(partial(_empty_like, allocation=record_allocation), populate_set),
            BaseException: CloneStrategy(construct_exception, populate_exception),
            MutableMapping: CloneStrategy(
                collection,
                partial(
                    populate_collection,
                    insert=partial(populate_mapping, clone_keys=clone_mapping_keys),
                ),
            ),
            MutableSet: CloneStrategy(collection, partial(populate_collection, insert=populate_set)),
            MutableSequence: CloneStrategy(
                collection, partial(populate_collection, insert=populate_by_append)
            ),
        }
    )
    return types.MappingProxyType(table)
