"""AppSettingsManager と設定ストアのテスト。"""

from __future__ import annotations

import json
from pathlib import Path
import sys

import pytest

SRC_ROOT = Path(__file__).resolve().parents[3] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from codetray.domain.errors import PersistenceError  # noqa: E402
from codetray.domain.settings import AUTO_START_KEY, AppSettingsManager  # noqa: E402
from codetray.infrastructure.settings import (  # noqa: E402
    InMemorySettingsStore,
    JsonFileSettingsStore,
)
from codetray.infrastructure.settings import stores as stores_module  # noqa: E402


def test_load_creates_defaults_when_missing() -> None:
    store = InMemorySettingsStore()
    manager = AppSettingsManager(store)

    settings = manager.load()

    assert settings.auto_start_enabled is False
    assert store.contains(AUTO_START_KEY)
    assert store.sync_count == 1


def test_load_keeps_existing_values() -> None:
    store = InMemorySettingsStore({AUTO_START_KEY: True}, sync_count=1)
    manager = AppSettingsManager(store)

    assert manager.load().auto_start_enabled is True
    assert store.sync_count == 1


def test_set_persists_immediately() -> None:
    store = InMemorySettingsStore()
    manager = AppSettingsManager(store)

    manager.set_auto_start_enabled(True)

    assert store.value(AUTO_START_KEY) is True
    assert store.sync_count == 1
    assert manager.auto_start_enabled() is True


def test_non_boolean_value_reads_as_disabled() -> None:
    manager = AppSettingsManager(InMemorySettingsStore({AUTO_START_KEY: "yes"}))

    assert manager.auto_start_enabled() is False


def test_get_falls_back_to_default_table() -> None:
    manager = AppSettingsManager(InMemorySettingsStore())

    assert manager.get(AUTO_START_KEY) is False
    assert manager.get("unknown", "fallback") == "fallback"


def test_json_store_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "config" / "settings.json"
    manager = AppSettingsManager(JsonFileSettingsStore(path))

    manager.load()
    assert json.loads(path.read_text(encoding="utf-8")) == {AUTO_START_KEY: False}

    manager.set_auto_start_enabled(True)

    reopened = AppSettingsManager(JsonFileSettingsStore(path))
    assert reopened.load().auto_start_enabled is True


def test_json_store_ignores_unreadable_file(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("[1, 2", encoding="utf-8")

    store = JsonFileSettingsStore(path)

    assert store.value(AUTO_START_KEY) is None
    assert store.exists() is True


def test_json_store_sync_failure_raises(tmp_path: Path, monkeypatch) -> None:
    def failing_writer(path, payload):
        raise OSError("disk full")

    monkeypatch.setattr(stores_module, "write_json_atomic", failing_writer)
    store = JsonFileSettingsStore(tmp_path / "settings.json")
    store.set_value(AUTO_START_KEY, True)

    with pytest.raises(PersistenceError):
        store.sync()

    assert store.value(AUTO_START_KEY) is True
