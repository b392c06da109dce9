"""Normalization of scheduling exports into one canonical snapshot."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from typing import Any

import structlog
from pydantic import ValidationError

from app.backend.src.core.config import Settings, get_settings
from app.backend.src.core.exceptions import MalformedInput, TransformFailure
from app.backend.src.schemas.schedule import Company, Job, ScheduleSnapshot
from app.backend.src.schemas.source import FlatPayload, GroupedPayload
from app.backend.src.services import extractors as fx
from app.backend.src.services.employees import aggregate_employees
from app.backend.src.services.format_detection import detect_format
from app.backend.src.services.metadata import (
    DEFAULT_DATA_VERSION,
    FLAT_DATA_FORMAT,
    GROUPED_DATA_FORMAT,
    calculate_metadata,
    source_data_range,
)
from app.backend.src.services.team_registry import build_team_registry

LOGGER = structlog.get_logger(__name__)

RawJob = Mapping[str, Any]


def parse_schedule_json(document: str | bytes) -> Any:
    """Parse an uploaded document, raising :class:`MalformedInput` on failure."""

    try:
        return json.loads(document)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedInput(f"Uploaded file is not valid JSON: {exc}") from exc


def transform_flat_job(job: RawJob) -> Job:
    """Normalize one Format A job record."""

    home = job.get("HomeInformation")
    service_set = fx.as_mapping(job.get("ServiceSet"))
    return Job(
        id=fx.job_identity(job),
        customer_name=fx.customer_name_flat(job),
        service_type=fx.text(service_set.get("ServiceSetDescription"))
        or fx.text(job.get("ServiceSetDescription"))
        or fx.UNKNOWN_SERVICE,
        scope_of_work=fx.text(service_set.get("ServiceSetTypeDescription"))
        or fx.text(job.get("ServiceSetTypeDescription"))
        or fx.UNKNOWN_SCOPE,
        address=fx.build_address(home if isinstance(home, Mapping) else None),
        home_stats=fx.extract_home_stats(home if isinstance(home, Mapping) else None),
        **fx.extract_instructions_flat(job),
        tags=fx.extract_tags(job),
        rooms=fx.extract_rooms(job.get("Rooms")),
        scheduled_teams=fx.extract_scheduled_teams(job.get("ScheduledTeams")),
        schedule=fx.extract_schedule(job),
        allowed_time=fx.number(job.get("AllowedTime")),
        bill_rate=fx.number(job.get("BillRate")),
        fee_split_rate=fx.number(job.get("FeeSplitRate")),
        contact_info=fx.extract_contact_info(job.get("ContactInfos")),
        customer_notifications=fx.extract_customer_notifications(
            job.get("CustomerNotifications")
        ),
        base_fee=fx.extract_rate_modifier(job.get("BaseFeeLog")),
        service_set_rate_mods=fx.extract_rate_modifiers(job.get("ServiceSetRateMods")),
        job_rate_mods=fx.extract_rate_modifiers(job.get("JobRateMods")),
    )


def transform_grouped_job(job: RawJob) -> Job:
    """Normalize one grouped-export job record annotated with its company."""

    base_fee = fx.extract_rate_modifier(job.get("BaseFeeLog"))
    company_id = job.get("ServiceCompanyId")
    return Job(
        id=fx.job_identity(job),
        company_id=str(company_id) if company_id is not None else None,
        company_name=fx.text(job.get("ServiceCompanyName")),
        customer_name=fx.customer_name_grouped(job),
        service_type=fx.text(job.get("ServiceSetDescription")) or fx.UNKNOWN_SERVICE,
        scope_of_work=fx.text(job.get("ServiceSetTypeDescription")) or fx.UNKNOWN_SCOPE,
        address=fx.build_address(job),
        home_stats=fx.extract_home_stats(job),
        **fx.extract_instructions_grouped(job),
        tags=fx.extract_tags(job),
        rooms=fx.extract_rooms(job.get("Rooms")),
        scheduled_teams=fx.extract_scheduled_teams(job.get("ScheduledTeams")),
        schedule=fx.extract_schedule(job),
        allowed_time=fx.number(job.get("AllowedTime")),
        bill_rate=fx.number(job.get("BillRate"))
        or (base_fee.amount if base_fee is not None else 0),
        fee_split_rate=fx.number(job.get("FeeSplitRate")),
        contact_info=fx.extract_contact_info(job.get("ContactInfos")),
        customer_notifications=fx.extract_customer_notifications(
            job.get("CustomerNotifications")
        ),
        base_fee=base_fee,
        service_set_rate_mods=fx.extract_rate_modifiers(job.get("ServiceSetRateMods")),
        job_rate_mods=fx.extract_rate_modifiers(job.get("JobRateMods")),
    )


def _normalize_records(
    records: list[Any],
    transform: Callable[[RawJob], Job],
    *,
    skip_invalid: bool,
) -> tuple[list[RawJob], list[Job]]:
    """Transform every record, failing the batch or dropping bad records."""

    kept_records: list[RawJob] = []
    jobs: list[Job] = []

    for index, record in enumerate(records):
        try:
            if not isinstance(record, Mapping):
                raise TransformFailure("record is not an object")
            job = transform(record)
        except (TransformFailure, ValidationError) as exc:
            if not skip_invalid:
                raise TransformFailure(
                    f"Job record {index}: {exc}", record_index=index
                ) from exc
            LOGGER.warning(
                "schedule_record_skipped", record_index=index, reason=str(exc)
            )
            continue

        kept_records.append(record)
        jobs.append(job)

    return kept_records, jobs


def transform_format_a(
    payload: FlatPayload, *, settings: Settings | None = None
) -> ScheduleSnapshot:
    """Build a snapshot from a Format A (``api/jobs/getall``) export."""

    settings = settings or get_settings()
    records, jobs = _normalize_records(
        payload.jobs,
        transform_flat_job,
        skip_invalid=settings.skip_invalid_records,
    )
    teams = build_team_registry(records)
    employees = aggregate_employees(records)

    return ScheduleSnapshot(
        metadata=calculate_metadata(
            jobs,
            teams,
            employees,
            company_name=settings.default_company_name,
            data_format=FLAT_DATA_FORMAT,
        ),
        companies=[],
        teams=teams,
        jobs=jobs,
        employees=employees,
    )


def _service_companies(payload: GroupedPayload) -> list[RawJob]:
    return [
        company
        for group in map(fx.as_mapping, payload.service_company_groups)
        for company in map(fx.as_mapping, fx.as_list(group.get("ServiceCompanies")))
    ]


def flatten_grouped_jobs(payload: GroupedPayload) -> list[Any]:
    """Return every job in the export, annotated with its service company."""

    jobs: list[Any] = []
    for company in _service_companies(payload):
        for job in fx.as_list(company.get("Jobs")):
            if isinstance(job, Mapping):
                job = {
                    **job,
                    "ServiceCompanyId": company.get("ServiceCompanyId"),
                    "ServiceCompanyName": company.get("Name"),
                }
            jobs.append(job)
    return jobs


def extract_companies(payload: GroupedPayload) -> list[Company]:
    return [
        Company(id=str(company.get("ServiceCompanyId")), name=fx.text(company.get("Name")))
        for company in _service_companies(payload)
    ]


def merge_feature_toggles(payload: GroupedPayload) -> dict[str, bool]:
    """Merge per-company toggles; the first company to define a key wins."""

    toggles: dict[str, bool] = {}
    for company in _service_companies(payload):
        for key, value in fx.as_mapping(company.get("FeatureToggles")).items():
            toggles.setdefault(key, bool(value))
    return toggles


def extract_company_name(payload: GroupedPayload, default: str) -> str:
    if not payload.service_company_groups:
        return default

    first_group = fx.as_mapping(payload.service_company_groups[0])
    companies = fx.as_list(first_group.get("ServiceCompanies"))
    if companies:
        first_company = fx.as_mapping(companies[0])
        return (
            fx.text(first_company.get("Name"))
            or fx.text(first_group.get("Name"))
            or default
        )
    return fx.text(first_group.get("Name")) or default


def transform_grouped(
    payload: GroupedPayload, *, settings: Settings | None = None
) -> ScheduleSnapshot:
    """Build a snapshot from a grouped (company hierarchy) export."""

    settings = settings or get_settings()
    records, jobs = _normalize_records(
        flatten_grouped_jobs(payload),
        transform_grouped_job,
        skip_invalid=settings.skip_invalid_records,
    )
    teams = build_team_registry(records, fall_back_to_id=True)
    employees = aggregate_employees(records)

    return ScheduleSnapshot(
        metadata=calculate_metadata(
            jobs,
            teams,
            employees,
            company_name=extract_company_name(payload, settings.default_company_name),
            data_format=GROUPED_DATA_FORMAT,
            last_updated=payload.generated_at,
            data_version=payload.data_version or DEFAULT_DATA_VERSION,
            data_range=source_data_range(payload.date_range),
            feature_toggles=merge_feature_toggles(payload),
        ),
        companies=extract_companies(payload),
        teams=teams,
        jobs=jobs,
        employees=employees,
    )


def transform_data(raw: Any, *, settings: Settings | None = None) -> ScheduleSnapshot:
    """Detect the export schema and normalize it into a snapshot."""

    payload = detect_format(raw)
    if isinstance(payload, FlatPayload):
        return transform_format_a(payload, settings=settings)
    return transform_grouped(payload, settings=settings)


def ingest_schedule_document(
    document: str | bytes, *, settings: Settings | None = None
) -> ScheduleSnapshot:
    """Parse and normalize an uploaded export in one call."""

    return transform_data(parse_schedule_json(document), settings=settings)


__all__ = [
    "extract_companies",
    "extract_company_name",
    "flatten_grouped_jobs",
    "ingest_schedule_document",
    "merge_feature_toggles",
    "parse_schedule_json",
    "transform_data",
    "transform_flat_job",
    "transform_format_a",
    "transform_grouped",
    "transform_grouped_job",
]
