"""Structural classification of uploaded scheduling exports."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from app.backend.src.core.exceptions import UnrecognizedFormat
from app.backend.src.schemas.source import (
    FlatPayload,
    GroupedPayload,
    SourceFormat,
    SourcePayload,
)


def _optional_text(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def detect_format(raw: Any) -> SourcePayload:
    """Classify a parsed export and wrap it in its schema-specific payload.

    A list-valued ``Result`` is a Format A export; an object ``Result`` holding
    a ``ServiceCompanyGroups`` list is a grouped export. Anything else raises
    :class:`UnrecognizedFormat`.
    """

    if not isinstance(raw, Mapping) or "Result" not in raw:
        raise UnrecognizedFormat("Invalid data: missing Result")

    result = raw["Result"]
    if isinstance(result, list):
        return FlatPayload(jobs=result)

    if isinstance(result, Mapping) and isinstance(
        result.get("ServiceCompanyGroups"), list
    ):
        date_range = result.get("DateRange")
        return GroupedPayload(
            service_company_groups=result["ServiceCompanyGroups"],
            date_range=dict(date_range) if isinstance(date_range, Mapping) else None,
            generated_at=_optional_text(result.get("GeneratedAt")),
            data_version=_optional_text(result.get("DataVersion")),
        )

    raise UnrecognizedFormat("Unknown data format: unable to detect format")


def detect_format_tag(raw: Any) -> SourceFormat:
    """Return only the format tag for a parsed export."""

    return detect_format(raw).kind


__all__ = ["detect_format", "detect_format_tag"]
