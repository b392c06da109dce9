"""Aggregate statistics derived from a normalized schedule."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date, datetime, timezone
from typing import Any

from app.backend.src.schemas.schedule import (
    DataRange,
    Employee,
    Job,
    SnapshotMetadata,
    SnapshotStats,
    Team,
)

FLAT_DATA_FORMAT = "getall"
GROUPED_DATA_FORMAT = "dr-all-data"
DEFAULT_DATA_VERSION = "1.0"


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def compute_data_range(jobs: Sequence[Job]) -> DataRange:
    """Return the earliest and latest job dates, compared as calendar dates."""

    dates: list[date] = []
    for job in jobs:
        if not job.schedule.date:
            continue
        try:
            dates.append(date.fromisoformat(job.schedule.date))
        except ValueError:
            continue

    if not dates:
        return DataRange()
    return DataRange(start_date=min(dates).isoformat(), end_date=max(dates).isoformat())


def source_data_range(date_range: Mapping[str, Any] | None) -> DataRange | None:
    """Return the export's own date range when both ends parse."""

    if not date_range:
        return None
    try:
        start = datetime.fromisoformat(str(date_range.get("StartDate") or "").strip())
        end = datetime.fromisoformat(str(date_range.get("EndDate") or "").strip())
    except ValueError:
        return None
    return DataRange(
        start_date=start.strftime("%Y-%m-%d"), end_date=end.strftime("%Y-%m-%d")
    )


def compute_stats(
    jobs: Sequence[Job], teams: Sequence[Team], employees: Sequence[Employee]
) -> SnapshotStats:
    # the synthetic Unassigned team is never counted
    return SnapshotStats(
        total_jobs=len(jobs),
        total_teams=max(len(teams) - 1, 0),
        total_employees=len(employees),
    )


def calculate_metadata(
    jobs: Sequence[Job],
    teams: Sequence[Team],
    employees: Sequence[Employee],
    *,
    company_name: str,
    data_format: str = FLAT_DATA_FORMAT,
    last_updated: str | None = None,
    data_version: str | None = None,
    data_range: DataRange | None = None,
    feature_toggles: Mapping[str, bool] | None = None,
) -> SnapshotMetadata:
    """Build snapshot metadata, deriving the date range from jobs if not given."""

    return SnapshotMetadata(
        company_name=company_name,
        last_updated=last_updated or _utc_timestamp(),
        data_format=data_format,
        data_version=data_version,
        data_range=data_range or compute_data_range(jobs),
        stats=compute_stats(jobs, teams, employees),
        feature_toggles=dict(feature_toggles) if feature_toggles is not None else None,
    )


__all__ = [
    "DEFAULT_DATA_VERSION",
    "FLAT_DATA_FORMAT",
    "GROUPED_DATA_FORMAT",
    "calculate_metadata",
    "compute_data_range",
    "compute_stats",
    "source_data_range",
]
