"""Tests for CloneSettings."""

import pydantic
import pytest

from clonegraph import NO_CLONE, CloneSettings, RecordAllocation, StrategyRegistry, get_settings
from clonegraph.core import record_strategy


def test_defaults(settings):
    assert settings.clone_mapping_keys is True
    assert settings.record_allocation is RecordAllocation.NEW
    assert settings.warn_on_atomic_overrides is True


def test_environment_variables_are_read(monkeypatch):
    monkeypatch.setenv("CLONEGRAPH_CLONE_MAPPING_KEYS", "false")
    monkeypatch.setenv("CLONEGRAPH_RECORD_ALLOCATION", "init")

    settings = CloneSettings(_env_file=None)

    assert settings.clone_mapping_keys is False
    assert settings.record_allocation is RecordAllocation.INIT


def test_explicit_values_override_environment(monkeypatch):
    monkeypatch.setenv("CLONEGRAPH_RECORD_ALLOCATION", "init")

    settings = CloneSettings(_env_file=None, record_allocation="new")

    assert settings.record_allocation is RecordAllocation.NEW


def test_env_file_is_read(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("CLONEGRAPH_CLONE_MAPPING_KEYS=0\nUNRELATED=1\n", encoding="utf-8")

    settings = CloneSettings(_env_file=env_file)

    assert settings.clone_mapping_keys is False


def test_invalid_allocation_is_rejected():
    with pytest.raises(pydantic.ValidationError):
        CloneSettings(_env_file=None, record_allocation="copy")


def test_settings_are_frozen(settings):
    with pytest.raises(pydantic.ValidationError):
        settings.clone_mapping_keys = False


def test_registry_from_settings():
    settings = CloneSettings(_env_file=None, record_allocation="init")

    registry = StrategyRegistry.from_settings(None, settings)

    assert registry.resolve(object.__new__(type("Bare", (), {}))) is record_strategy("init")


def test_registry_from_settings_silences_atomic_warning(recwarn):
    settings = CloneSettings(_env_file=None, warn_on_atomic_overrides=False)

    StrategyRegistry.from_settings({str: NO_CLONE}, settings)

    assert len(recwarn) == 0


def test_get_settings_is_loaded_once(monkeypatch, fresh_settings):
    monkeypatch.setenv("CLONEGRAPH_RECORD_ALLOCATION", "init")
    first = get_settings()
    monkeypatch.setenv("CLONEGRAPH_RECORD_ALLOCATION", "new")

    assert get_settings() is first
    assert first.record_allocation is RecordAllocation.INIT


def test_get_settings_cache_clear_reloads(monkeypatch, fresh_settings):
    first = get_settings()
    monkeypatch.setenv("CLONEGRAPH_CLONE_MAPPING_KEYS", "false")

    get_settings.cache_clear()

    assert get_settings() is not first
    assert get_settings().clone_mapping_keys is False
