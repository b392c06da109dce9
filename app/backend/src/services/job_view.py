"""Viewer-specific projection of a job, applying every redaction rule."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from app.backend.src.schemas.schedule import Job, Room
from app.backend.src.services.deep_clean import group_rooms_by_type, select_rooms_due
from app.backend.src.services.rates import ViewerRateBreakdown, rate_breakdown_for_viewer
from app.backend.src.services.visibility import FieldVisibilityResolver

# (label, job attribute, visibility field or None when always shown)
INSTRUCTION_FIELDS: tuple[tuple[str, str, str | None], ...] = (
    ("Event", "event_instructions", None),
    ("Special", "special_instructions", None),
    ("Pets", "pet_instructions", None),
    ("Directions", "directions", None),
    ("Equipment", "special_equipment", None),
    ("Waste", "waste_info", None),
    ("Access", "access_information", "accessInformation"),
    ("Internal Memo", "internal_memo", "internalMemo"),
)


class InstructionEntry(BaseModel):
    label: str
    content: str


class RoomEntry(BaseModel):
    room: Room
    fee: float | None = None
    deep_clean_due: bool = False


class JobView(BaseModel):
    """Everything a calendar or detail view may render for one job."""

    job_id: str
    customer_name: str
    address: str
    phone: str | None = None
    email: str | None = None
    bill_rate: float | None = None
    fee_split_rate: float | None = None
    instructions: list[InstructionEntry] = []
    rooms_by_type: dict[str, list[RoomEntry]] = {}
    rates: ViewerRateBreakdown

    model_config = ConfigDict(frozen=True)


def visible_instructions(job: Job, resolver: FieldVisibilityResolver) -> list[InstructionEntry]:
    entries: list[InstructionEntry] = []
    for label, attribute, field_name in INSTRUCTION_FIELDS:
        content = getattr(job, attribute)
        if not content:
            continue
        if field_name is not None and resolver.should_hide(field_name):
            continue
        entries.append(InstructionEntry(label=label, content=content))
    return entries


def _room_entries(job: Job, resolver: FieldVisibilityResolver) -> dict[str, list[RoomEntry]]:
    show_fee = resolver.is_visible("roomRate")
    result: dict[str, list[RoomEntry]] = {}
    for room_type, rooms in group_rooms_by_type(job.rooms).items():
        due_ids = {id(room) for room in select_rooms_due(rooms)}
        result[room_type] = [
            RoomEntry(
                room=room,
                fee=room.fee if show_fee and room.fee > 0 else None,
                deep_clean_due=id(room) in due_ids,
            )
            for room in rooms
        ]
    return result


def build_job_view(job: Job, resolver: FieldVisibilityResolver) -> JobView:
    """Project ``job`` for the viewer context held by ``resolver``."""

    toggles: dict[str, Any] = resolver.feature_toggles
    return JobView(
        job_id=job.id,
        customer_name=job.customer_name,
        address=job.address,
        phone=(job.contact_info.phone or None)
        if resolver.is_visible("customerPhone")
        else None,
        email=(job.contact_info.email or None)
        if resolver.is_visible("customerEmail")
        else None,
        bill_rate=(job.bill_rate or None) if resolver.is_visible("billRate") else None,
        fee_split_rate=(job.fee_split_rate or None)
        if resolver.is_visible("feeSplitRate")
        else None,
        instructions=visible_instructions(job, resolver),
        rooms_by_type=_room_entries(job, resolver),
        rates=rate_breakdown_for_viewer(job, resolver.view_mode, toggles),
    )


__all__ = [
    "InstructionEntry",
    "JobView",
    "RoomEntry",
    "build_job_view",
    "visible_instructions",
]
