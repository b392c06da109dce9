"""Errors raised while ingesting a schedule export."""

from __future__ import annotations


class ScheduleIngestError(Exception):
    """Base class for failures that abort an upload."""


class MalformedInput(ScheduleIngestError):
    """The uploaded document is not valid JSON."""


class UnrecognizedFormat(ScheduleIngestError):
    """The parsed document matches neither supported export schema."""


class TransformFailure(ScheduleIngestError):
    """A record could not be normalized into the canonical model."""

    def __init__(self, message: str, *, record_index: int | None = None) -> None:
        super().__init__(message)
        self.record_index = record_index


__all__ = [
    "MalformedInput",
    "ScheduleIngestError",
    "TransformFailure",
    "UnrecognizedFormat",
]
