"""Canonical schedule snapshot schemas."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel, to_pascal

UNASSIGNED_TEAM_ID = "0"
UNASSIGNED_SORT_ORDER = 999


class CanonicalModel(BaseModel):
    """Base model serializing to the camelCase keys consumed by the views."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Team(CanonicalModel):
    id: str
    name: str
    color: str
    sort_order: int


class Position(CanonicalModel):
    id: int
    name: str
    color: str


class Shift(CanonicalModel):
    job_id: str
    date: str
    start_time: str
    end_time: str


class Employee(CanonicalModel):
    """An employee row shared by every calendar and filter view."""

    id: str
    first_name: str = ""
    last_name: str = ""
    name: str
    team_id: str = UNASSIGNED_TEAM_ID
    position: Position
    shifts: list[Shift] = []


class Schedule(CanonicalModel):
    date: str = ""
    start_time: str = ""
    end_time: str = ""


class ContactInfo(CanonicalModel):
    phone: str = ""
    email: str = ""


class Tag(CanonicalModel):
    """A tag annotated with the record it was attached to."""

    type: str
    description: str = ""
    icon: str = ""
    color: str = "#999999"


class Room(CanonicalModel):
    name: str = ""
    location: str = ""
    type: str = "Other"
    deep_clean_code: str = ""
    last_deep_clean_date: str = ""
    details_of_work: str = ""
    fee: float = 0


class HomeStats(CanonicalModel):
    bedrooms: int | float | None = None
    bathrooms: int | float | None = None
    full_bath: int | float | None = None
    half_bath: int | float | None = None
    square_footage: int | float | None = None
    stories: int | float | None = None


class RateModifier(BaseModel):
    """A base fee or rate modifier, kept in the source's key casing."""

    name: str = ""
    amount: float = 0
    fee_split: bool = False

    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class Job(CanonicalModel):
    """The canonical unit of scheduled work."""

    id: str
    company_id: str | None = None
    company_name: str | None = None
    customer_name: str
    service_type: str
    scope_of_work: str
    address: str
    home_stats: HomeStats | None = None
    event_instructions: str = ""
    special_instructions: str = ""
    pet_instructions: str = ""
    directions: str = ""
    special_equipment: str = ""
    waste_info: str = ""
    access_information: str = ""
    internal_memo: str = ""
    tags: list[Tag] = []
    rooms: list[Room] = []
    scheduled_teams: list[str] = Field(
        default_factory=lambda: [UNASSIGNED_TEAM_ID], min_length=1
    )
    schedule: Schedule = Schedule()
    allowed_time: int | float = 0
    bill_rate: float = 0
    fee_split_rate: float = 0
    contact_info: ContactInfo = ContactInfo()
    customer_notifications: list[dict[str, Any]] = []
    base_fee: RateModifier | None = None
    service_set_rate_mods: list[RateModifier] = []
    job_rate_mods: list[RateModifier] = []


class Company(CanonicalModel):
    id: str
    name: str


class DataRange(CanonicalModel):
    start_date: str = ""
    end_date: str = ""


class SnapshotStats(CanonicalModel):
    total_jobs: int = 0
    total_teams: int = 0
    total_employees: int = 0


class SnapshotMetadata(CanonicalModel):
    """Summary information describing one ingested export."""

    company_name: str
    last_updated: str
    data_format: str
    data_version: str | None = None
    data_range: DataRange = DataRange()
    stats: SnapshotStats = SnapshotStats()
    feature_toggles: dict[str, bool] | None = None


class ScheduleSnapshot(CanonicalModel):
    """The single artifact produced for one upload."""

    metadata: SnapshotMetadata
    companies: list[Company] = []
    teams: list[Team] = []
    jobs: list[Job] = []
    employees: list[Employee] = []

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-compatible mapping handed to the persistence store."""

        return self.model_dump(mode="json", by_alias=True)


__all__ = [
    "UNASSIGNED_SORT_ORDER",
    "UNASSIGNED_TEAM_ID",
    "Company",
    "ContactInfo",
    "DataRange",
    "Employee",
    "HomeStats",
    "Job",
    "Position",
    "RateModifier",
    "Room",
    "Schedule",
    "ScheduleSnapshot",
    "Shift",
    "SnapshotMetadata",
    "SnapshotStats",
    "Tag",
    "Team",
]
