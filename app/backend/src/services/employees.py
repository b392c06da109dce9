"""Employee deduplication and shift accumulation across job records."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from app.backend.src.schemas.schedule import UNASSIGNED_TEAM_ID, Employee, Shift
from app.backend.src.services.extractors import (
    as_list,
    as_mapping,
    extract_schedule,
    job_identity,
    text,
)
from app.backend.src.services.team_positions import resolve_position


def _employee_id(schedule: Mapping[str, Any]) -> str | None:
    raw_id = schedule.get("EmployeeInformationId")
    if raw_id is None or isinstance(raw_id, bool):
        return None
    employee_id = str(raw_id).strip()
    if not employee_id or employee_id == "0":
        return None
    return employee_id


def aggregate_employees(jobs: Iterable[Mapping[str, Any]]) -> list[Employee]:
    """Return one employee per id with a shift for every dated job reference.

    Name, team and position come from the first record that mentions the
    employee; later records only contribute shifts.
    """

    employees: dict[str, dict[str, Any]] = {}
    shifts: dict[str, list[Shift]] = {}

    for job in jobs:
        schedule = extract_schedule(job)
        for raw_schedule in as_list(job.get("EmployeeSchedules")):
            employee_schedule = as_mapping(raw_schedule)
            employee_id = _employee_id(employee_schedule)
            if employee_id is None:
                continue

            if employee_id not in employees:
                first_name = text(employee_schedule.get("FirstName"))
                last_name = text(employee_schedule.get("LastName"))
                employees[employee_id] = {
                    "id": employee_id,
                    "first_name": first_name,
                    "last_name": last_name,
                    "name": f"{first_name} {last_name}".strip(),
                    "team_id": str(employee_schedule.get("TeamListId") or UNASSIGNED_TEAM_ID),
                    "position": resolve_position(employee_schedule.get("TeamPosition") or 0),
                }
                shifts[employee_id] = []

            if schedule.date:
                shifts[employee_id].append(
                    Shift(
                        job_id=job_identity(job),
                        date=schedule.date,
                        start_time=schedule.start_time,
                        end_time=schedule.end_time,
                    )
                )

    return [
        Employee(**fields, shifts=shifts[employee_id])
        for employee_id, fields in employees.items()
    ]


__all__ = ["aggregate_employees"]
