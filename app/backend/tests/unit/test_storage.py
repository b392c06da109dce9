"""Tests for snapshot and preference persistence."""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[4]))

import pytest

from app.backend.src.core.storage import InMemoryStore, JsonFileStore, snapshot_store
from app.backend.src.schemas.schedule import ScheduleSnapshot, SnapshotMetadata
from app.backend.src.services.preferences import PreferencesService, UserPreferences
from app.backend.src.services.visibility import ViewMode


@pytest.fixture()
def snapshot() -> ScheduleSnapshot:
    return ScheduleSnapshot(
        metadata=SnapshotMetadata(
            company_name="Acme",
            last_updated="2025-02-01T00:00:00Z",
            data_format="getall",
        )
    )


def test_file_store_round_trips_snapshot(tmp_path: Path, snapshot: ScheduleSnapshot) -> None:
    store = snapshot_store(tmp_path / "nested" / "snapshot.json")

    assert store.exists() is False
    assert store.load() is None
    assert store.save(snapshot) is True
    assert store.exists() is True
    assert store.load() == snapshot
    assert '"companyName":"Acme"' in store.path.read_text(encoding="utf-8")

    assert store.clear() is True
    assert store.exists() is False
    assert store.clear() is True


def test_file_store_returns_none_for_corrupt_payload(tmp_path: Path) -> None:
    path = tmp_path / "snapshot.json"
    path.write_text("{broken", encoding="utf-8")

    assert JsonFileStore(path, ScheduleSnapshot).load() is None


def test_file_store_signals_save_failure(tmp_path: Path, snapshot: ScheduleSnapshot) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")

    store = JsonFileStore(blocker / "snapshot.json", ScheduleSnapshot)

    assert store.save(snapshot) is False


def test_in_memory_store(snapshot: ScheduleSnapshot) -> None:
    store = InMemoryStore(ScheduleSnapshot)

    assert store.exists() is False
    store.save(snapshot)
    assert store.load() == snapshot
    store.clear()
    assert store.load() is None


def test_preferences_default_then_update(tmp_path: Path) -> None:
    service = PreferencesService(JsonFileStore(tmp_path / "prefs.json", UserPreferences))

    assert service.load().view_mode is ViewMode.OFFICE

    assert service.set_view_mode("technician") is True
    updated, saved = service.update(selected_team="4")

    assert saved is True
    assert updated.view_mode is ViewMode.TECHNICIAN
    assert updated.selected_team == "4"
    assert service.load() == updated

    assert service.clear() is True
    assert service.load().view_mode is ViewMode.OFFICE


def test_preferences_ignore_unknown_keys(tmp_path: Path) -> None:
    path = tmp_path / "prefs.json"
    path.write_text('{"viewMode": "technician", "hideInfo": true}', encoding="utf-8")

    preferences = PreferencesService(JsonFileStore(path, UserPreferences)).load()

    assert preferences.view_mode is ViewMode.TECHNICIAN
    assert preferences.resolver({}).should_hide("billRate") is True
