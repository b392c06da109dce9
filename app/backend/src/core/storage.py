"""Key-value persistence for the current schedule snapshot and preferences."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Generic, Protocol, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from app.backend.src.core.config import get_settings
from app.backend.src.schemas.schedule import ScheduleSnapshot

LOGGER = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class SnapshotStore(Protocol[ModelT]):
    """Minimal protocol for stores holding a single opaque value.

    Failures are reported through the return value and never raised.
    """

    def save(self, value: ModelT) -> bool:
        """Persist ``value``, replacing anything stored before."""

    def load(self) -> ModelT | None:
        """Return the stored value, or ``None`` when missing or unreadable."""

    def clear(self) -> bool:
        """Remove the stored value."""

    def exists(self) -> bool:
        """Return ``True`` when a value is stored."""


class InMemoryStore(Generic[ModelT]):
    """Simple in-memory store used by tests and one-off scripts."""

    def __init__(self, model: type[ModelT]) -> None:
        self._model = model
        self._payload: str | None = None

    def save(self, value: ModelT) -> bool:
        self._payload = value.model_dump_json(by_alias=True)
        return True

    def load(self) -> ModelT | None:
        if self._payload is None:
            return None
        return self._model.model_validate_json(self._payload)

    def clear(self) -> bool:
        self._payload = None
        return True

    def exists(self) -> bool:
        return self._payload is not None


class JsonFileStore(Generic[ModelT]):
    """Store one model as a JSON document on the local filesystem."""

    def __init__(self, path: str | Path, model: type[ModelT]) -> None:
        self.path = Path(path)
        self._model = model

    def save(self, value: ModelT) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(value.model_dump_json(by_alias=True), encoding="utf-8")
        except OSError as exc:
            LOGGER.error("store_save_failed", path=str(self.path), error=str(exc))
            return False
        LOGGER.info("store_saved", path=str(self.path))
        return True

    def load(self) -> ModelT | None:
        try:
            document = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            LOGGER.error("store_load_failed", path=str(self.path), error=str(exc))
            return None

        try:
            return self._model.model_validate(json.loads(document))
        except (json.JSONDecodeError, ValidationError) as exc:
            LOGGER.warning("store_payload_invalid", path=str(self.path), error=str(exc))
            return None

    def clear(self) -> bool:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            LOGGER.error("store_clear_failed", path=str(self.path), error=str(exc))
            return False
        return True

    def exists(self) -> bool:
        return self.path.is_file()


def snapshot_store(path: str | Path | None = None) -> JsonFileStore[ScheduleSnapshot]:
    """Return the file store holding the current schedule snapshot."""

    return JsonFileStore(path or get_settings().schedule_storage_path, ScheduleSnapshot)


__all__ = ["InMemoryStore", "JsonFileStore", "SnapshotStore", "snapshot_store"]
