"""Tests for strategy resolution order."""

import threading
import types
from collections import OrderedDict
from collections.abc import Mapping
from typing import Protocol, runtime_checkable

import pytest

from clonegraph.core import (
    NO_CLONE,
    PROTOCOL_STRATEGY,
    CloneStrategy,
    Directive,
    RecordAllocation,
    Rebuild,
    StrategyRegistry,
    default_strategies,
    record_strategy,
)


def _strategy(tag):
    """Distinguishable strategy for identity assertions."""
    return CloneStrategy(construct=lambda value: tag)


class Base:
    pass


class Derived(Base):
    pass


@runtime_checkable
class HasArea(Protocol):
    def area(self) -> float: ...


class Square:
    def __init__(self, side):
        self.side = side

    def area(self):
        return self.side**2


class SelfCloning:
    def __clone__(self, clone):
        yield SelfCloning()


@pytest.fixture
def registry():
    return StrategyRegistry()


def test_exact_default_match(registry):
    assert registry.resolve({}) is default_strategies()[dict]


def test_ancestor_default_match(registry):
    """OrderedDict has no entry of its own and falls back to the dict strategy."""
    assert registry.resolve(OrderedDict()) is default_strategies()[dict]


def test_exact_override_beats_exact_default():
    custom = _strategy("dict")
    registry = StrategyRegistry({dict: custom})

    assert registry.resolve({}) is custom


def test_exact_default_beats_ancestor_override():
    """Step 2 (defaults, exact) runs before step 3 (overrides, ancestor)."""
    registry = StrategyRegistry({Mapping: NO_CLONE})

    assert registry.resolve({}) is default_strategies()[dict]


def test_ancestor_override_beats_ancestor_default():
    custom = _strategy("mapping")
    registry = StrategyRegistry({dict: custom})

    assert registry.resolve(OrderedDict()) is custom


def test_first_matching_ancestor_override_wins():
    first, second = _strategy("first"), _strategy("second")
    registry = StrategyRegistry({Base: first, object: second})

    assert registry.resolve(Derived()) is first


def test_override_registration_order_is_respected():
    first, second = _strategy("first"), _strategy("second")
    registry = StrategyRegistry({object: first, Base: second})

    assert registry.resolve(Derived()) is first


def test_capability_override_via_runtime_protocol():
    custom = _strategy("area")
    registry = StrategyRegistry({HasArea: custom})

    assert registry.resolve(Square(2)) is custom


def test_clone_protocol_resolves_to_staged_strategy(registry):
    assert registry.resolve(SelfCloning()) is PROTOCOL_STRATEGY


def test_override_beats_clone_protocol():
    registry = StrategyRegistry({SelfCloning: NO_CLONE})

    assert registry.resolve(SelfCloning()) is NO_CLONE


def test_class_objects_do_not_match_clone_protocol(registry):
    """A class defining __clone__ is itself shared, not staged."""
    assert registry.resolve(SelfCloning) is NO_CLONE


def test_record_fallback(registry):
    assert registry.resolve(Square(1)) is record_strategy(RecordAllocation.NEW)


def test_record_fallback_follows_allocation_policy():
    registry = StrategyRegistry(record_allocation=RecordAllocation.INIT)

    assert registry.resolve(Square(1)) is record_strategy(RecordAllocation.INIT)


def test_opaque_value_is_unsupported(registry):
    assert registry.resolve(threading.Lock()) is Directive.UNSUPPORTED
    assert registry.resolve(object()) is Directive.UNSUPPORTED


@pytest.mark.parametrize("value", [types, Base, threading.Thread(target=print)])
def test_host_types_are_not_cloned(registry, value):
    assert registry.resolve(value) is NO_CLONE


def test_overrides_are_read_only(registry):
    with pytest.raises(TypeError):
        registry.overrides[dict] = NO_CLONE  # type: ignore[index]


def test_override_key_must_be_a_class():
    with pytest.raises(TypeError, match="must be classes"):
        StrategyRegistry({"dict": NO_CLONE})  # type: ignore[dict-item]


def test_override_value_must_be_a_strategy():
    with pytest.raises(TypeError, match="must be a CloneStrategy"):
        StrategyRegistry({dict: lambda value: value})  # type: ignore[dict-item]


def test_atomic_override_warns():
    with pytest.warns(UserWarning, match="has no effect"):
        StrategyRegistry({int: Rebuild(lambda value, clone: value)})


def test_atomic_override_warning_can_be_disabled(recwarn):
    StrategyRegistry({int: NO_CLONE}, warn_on_atomic_overrides=False)

    assert len(recwarn) == 0


def test_default_tables_are_cached_per_policy():
    assert default_strategies(True, RecordAllocation.NEW) is default_strategies(
        True, RecordAllocation.NEW
    )
    assert default_strategies(True) is not default_strategies(False)


def test_default_table_is_read_only():
    with pytest.raises(TypeError):
        default_strategies()[dict] = NO_CLONE  # type: ignore[index]
