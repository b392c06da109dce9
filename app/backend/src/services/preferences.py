"""Viewer preferences persisted separately from the schedule snapshot."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.backend.src.core.config import get_settings
from app.backend.src.core.storage import JsonFileStore, SnapshotStore
from app.backend.src.services.visibility import FieldVisibilityResolver, ViewMode


class UserPreferences(BaseModel):
    """View mode and last calendar selections for one viewer."""

    view_mode: ViewMode = ViewMode.OFFICE
    selected_date: str | None = None
    selected_company: str | None = None
    selected_team: str | None = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def resolver(self, feature_toggles: dict[str, Any] | None = None) -> FieldVisibilityResolver:
        return FieldVisibilityResolver(self.view_mode, feature_toggles)


DEFAULT_PREFERENCES = UserPreferences()


def preferences_store() -> JsonFileStore[UserPreferences]:
    return JsonFileStore(get_settings().preferences_storage_path, UserPreferences)


class PreferencesService:
    """Load and update preferences, merging defaults for missing keys."""

    def __init__(self, store: SnapshotStore[UserPreferences] | None = None) -> None:
        self.store = store or preferences_store()

    def load(self) -> UserPreferences:
        return self.store.load() or DEFAULT_PREFERENCES

    def update(self, **changes: Any) -> tuple[UserPreferences, bool]:
        """Apply ``changes`` and persist them, returning the new preferences."""

        current = self.load()
        updated = UserPreferences.model_validate(
            {**current.model_dump(), **changes}
        )
        return updated, self.store.save(updated)

    def set_view_mode(self, view_mode: ViewMode | str) -> bool:
        _, saved = self.update(view_mode=ViewMode(view_mode))
        return saved

    def clear(self) -> bool:
        return self.store.clear()


__all__ = [
    "DEFAULT_PREFERENCES",
    "PreferencesService",
    "UserPreferences",
    "preferences_store",
]
