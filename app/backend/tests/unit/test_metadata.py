"""Tests for snapshot metadata derivation."""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[4]))

from app.backend.src.schemas.schedule import Job, Schedule
from app.backend.src.services.metadata import (
    calculate_metadata,
    compute_data_range,
    source_data_range,
)
from app.backend.src.services.team_registry import UNASSIGNED_TEAM


def _job(job_id: str, job_date: str) -> Job:
    return Job(
        id=job_id,
        customer_name="Pat",
        service_type="Standard",
        scope_of_work="Recurring",
        address="Unknown Address",
        schedule=Schedule(date=job_date),
    )


def test_data_range_uses_calendar_dates() -> None:
    jobs = [_job("1", "2025-01-05"), _job("2", "2025-01-01"), _job("3", "2025-01-10"), _job("4", "")]

    data_range = compute_data_range(jobs)

    assert (data_range.start_date, data_range.end_date) == ("2025-01-01", "2025-01-10")


def test_data_range_is_empty_without_dates() -> None:
    data_range = compute_data_range([_job("1", "")])

    assert (data_range.start_date, data_range.end_date) == ("", "")


def test_stats_exclude_unassigned_team() -> None:
    metadata = calculate_metadata(
        [_job("1", "2025-01-05")], [UNASSIGNED_TEAM], [], company_name="Acme"
    )

    assert metadata.stats.total_jobs == 1
    assert metadata.stats.total_teams == 0
    assert metadata.stats.total_employees == 0
    assert metadata.data_format == "getall"
    assert metadata.last_updated.endswith("Z")
    assert metadata.feature_toggles is None


def test_explicit_values_override_derived_ones() -> None:
    metadata = calculate_metadata(
        [_job("1", "2025-01-05")],
        [UNASSIGNED_TEAM],
        [],
        company_name="Acme",
        last_updated="2025-02-01T00:00:00Z",
        data_range=source_data_range({"StartDate": "2024-12-01T00:00:00", "EndDate": "2024-12-31"}),
        feature_toggles={"TechDashboard_DisplayBillRate": True},
    )

    assert metadata.last_updated == "2025-02-01T00:00:00Z"
    assert (metadata.data_range.start_date, metadata.data_range.end_date) == ("2024-12-01", "2024-12-31")
    assert metadata.feature_toggles == {"TechDashboard_DisplayBillRate": True}


def test_source_range_requires_both_ends() -> None:
    assert source_data_range({"StartDate": "2024-12-01"}) is None
    assert source_data_range(None) is None
