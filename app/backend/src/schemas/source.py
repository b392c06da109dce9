"""Typed views over the two supported scheduling export schemas."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class SourceFormat(str, Enum):
    """Export schemas recognized by the format detector."""

    FLAT = "formatA"
    GROUPED = "drAllData"


class FlatPayload(BaseModel):
    """Format A export (``api/jobs/getall``): ``Result`` is a list of jobs."""

    kind: Literal[SourceFormat.FLAT] = SourceFormat.FLAT
    jobs: list[Any] = []

    model_config = ConfigDict(frozen=True)


class GroupedPayload(BaseModel):
    """Grouped export: jobs nested under service companies and company groups."""

    kind: Literal[SourceFormat.GROUPED] = SourceFormat.GROUPED
    service_company_groups: list[Any] = []
    date_range: dict[str, Any] | None = None
    generated_at: str | None = None
    data_version: str | None = None

    model_config = ConfigDict(frozen=True)


SourcePayload = Annotated[
    Union[FlatPayload, GroupedPayload], Field(discriminator="kind")
]


__all__ = [
    "FlatPayload",
    "GroupedPayload",
    "SourceFormat",
    "SourcePayload",
]
