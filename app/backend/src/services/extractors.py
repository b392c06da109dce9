"""Field extractors mapping one raw job record onto canonical sub-structures.

Both export schemas share the same null-safety contract: every nested access
is optional, missing scalars fall back to an empty string, zero or ``None``
and missing arrays fall back to an empty list. Format A nests home, customer
and note data in sub-objects; the grouped export flattens them onto the job.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from app.backend.src.core.exceptions import TransformFailure
from app.backend.src.schemas.schedule import (
    UNASSIGNED_TEAM_ID,
    ContactInfo,
    HomeStats,
    RateModifier,
    Room,
    Schedule,
    Tag,
)

UNKNOWN_ADDRESS = "Unknown Address"
UNKNOWN_CUSTOMER = "Unknown Customer"
UNKNOWN_SERVICE = "Unknown Service"
UNKNOWN_SCOPE = "Unknown"
DEFAULT_TAG_COLOR = "#999999"

HOME_PHONE_CONTACT_TYPE = 1
CELL_PHONE_CONTACT_TYPE = 2
EMAIL_CONTACT_TYPE = 3

SERVICE_NOTIFICATION_EVENTS = ("Three Days Before", "One Day Before", "On The Way")

# (canonical tag origin, source key), in display order
TAG_SOURCES = (
    ("job", "JobTags"),
    ("serviceSet", "ServiceSetTags"),
    ("home", "HomeTags"),
    ("customer", "CustomerTags"),
)


def as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def text(value: Any) -> str:
    """Return ``value`` as a string, treating falsy values as empty."""

    if not value:
        return ""
    return value if isinstance(value, str) else str(value)


def number(value: Any, default: float = 0) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return value or default


def optional_number(value: Any) -> int | float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not value:
        return None
    return value


def _as_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def job_identity(job: Mapping[str, Any]) -> str:
    """Return the stringified job id, rejecting records without one."""

    job_id = job.get("JobInformationId")
    if job_id is None or isinstance(job_id, bool) or str(job_id).strip() == "":
        raise TransformFailure("missing JobInformationId")
    return str(job_id)


def build_address(source: Mapping[str, Any] | None) -> str:
    """Join address lines and the city/region/postal line with commas."""

    if not source:
        return UNKNOWN_ADDRESS

    parts = [
        text(source.get(key))
        for key in ("HomeAddress1", "HomeAddress2")
        if text(source.get(key))
    ]
    city_line = " ".join(
        text(source.get(key))
        for key in ("HomeCity", "HomeRegion", "HomePostalCode")
        if text(source.get(key))
    )
    if city_line:
        parts.append(city_line)

    return ", ".join(parts) or UNKNOWN_ADDRESS


def extract_home_stats(source: Mapping[str, Any] | None) -> HomeStats | None:
    if source is None:
        return None

    return HomeStats(
        bedrooms=optional_number(source.get("HomeBedrooms")),
        bathrooms=optional_number(source.get("HomeBathrooms")),
        full_bath=optional_number(source.get("HomeFullBath")),
        half_bath=optional_number(source.get("HomeHalfBath")),
        square_footage=optional_number(source.get("HomeFinishedSquareFootage")),
        stories=optional_number(source.get("HomeStories")),
    )


def extract_instructions_flat(job: Mapping[str, Any]) -> dict[str, str]:
    """Read instruction fields from Format A's ``NotesAndMemos`` block."""

    notes = as_mapping(job.get("NotesAndMemos"))
    return {
        "event_instructions": text(notes.get("EventInstructions")),
        "special_instructions": text(notes.get("HomeSpecialInstructions")),
        "pet_instructions": text(notes.get("HomePetInstructions")),
        "directions": text(notes.get("HomeDirections")),
        "special_equipment": text(notes.get("HomeSpecialEquipment")),
        "waste_info": text(notes.get("HomeWasteDisposal")),
        # the API has shipped both spellings of this key
        "access_information": text(
            notes.get("HomeAccessInformation") or notes.get("HomeAcessInformation")
        ),
        "internal_memo": text(notes.get("HomeInternalMemo")),
    }


def extract_instructions_grouped(job: Mapping[str, Any]) -> dict[str, str]:
    """Read instruction fields flattened onto a grouped-export job."""

    return {
        "event_instructions": text(job.get("EventInstructions")),
        "special_instructions": text(
            job.get("HomeSpecialInstructions") or job.get("ServiceSetSpecialInstructions")
        ),
        "pet_instructions": text(job.get("HomePetInstructions")),
        "directions": text(job.get("HomeDirections")),
        "special_equipment": text(
            job.get("HomeSpecialEquipment") or job.get("ServiceSetSpecialEquipment")
        ),
        "waste_info": text(job.get("HomeWasteDisposal")),
        "access_information": text(job.get("HomeAccessInformation")),
        "internal_memo": text(job.get("HomeInternalMemo")),
    }


def extract_contact_info(contact_infos: Any) -> ContactInfo:
    """Pick a phone number (mobile before landline) and the email entry."""

    entries = [as_mapping(entry) for entry in as_list(contact_infos)]
    by_type: dict[int, str] = {}
    for entry in entries:
        contact_type = _as_int(entry.get("ContactTypeId"))
        if contact_type is not None and contact_type not in by_type:
            by_type[contact_type] = text(entry.get("ContactInfo"))

    return ContactInfo(
        phone=by_type.get(CELL_PHONE_CONTACT_TYPE)
        or by_type.get(HOME_PHONE_CONTACT_TYPE)
        or "",
        email=by_type.get(EMAIL_CONTACT_TYPE) or "",
    )


def extract_customer_notifications(notifications: Any) -> list[dict[str, Any]]:
    """Keep only the service-related customer notifications."""

    return [
        dict(notification)
        for notification in as_list(notifications)
        if isinstance(notification, Mapping)
        and notification.get("NotificationEvent") in SERVICE_NOTIFICATION_EVENTS
    ]


def extract_tags(job: Mapping[str, Any]) -> list[Tag]:
    tags: list[Tag] = []
    for origin, key in TAG_SOURCES:
        for raw_tag in as_list(job.get(key)):
            tag = as_mapping(raw_tag)
            tags.append(
                Tag(
                    type=origin,
                    description=text(tag.get("Description")),
                    icon=text(tag.get("IconPath")),
                    color=text(tag.get("Color")) or DEFAULT_TAG_COLOR,
                )
            )
    return tags


def extract_rooms(rooms: Any) -> list[Room]:
    result: list[Room] = []
    for raw_room in as_list(rooms):
        room = as_mapping(raw_room)
        result.append(
            Room(
                name=text(room.get("RoomName")),
                location=text(room.get("LocationInHome")),
                type=text(room.get("RoomTypeName")) or "Other",
                deep_clean_code=text(room.get("DCCodeDescription")),
                last_deep_clean_date=text(room.get("LastDCDate")),
                details_of_work=text(room.get("DetailsOfWork")),
                fee=number(room.get("RoomFee")),
            )
        )
    return result


def extract_scheduled_teams(scheduled_teams: Any) -> list[str]:
    """Return the job's team ids, falling back to the Unassigned team."""

    team_ids = [
        str(team["TeamListId"])
        for team in map(as_mapping, as_list(scheduled_teams))
        if team.get("TeamListId")
    ]
    return team_ids or [UNASSIGNED_TEAM_ID]


def _parse_timestamp(value: Any) -> datetime:
    if not isinstance(value, str):
        raise ValueError(f"Unsupported timestamp value: {value!r}")
    return datetime.fromisoformat(value.strip())


def extract_schedule(job: Mapping[str, Any]) -> Schedule:
    """Return the job's date and times; any unparseable value blanks all three."""

    try:
        job_date = job.get("JobDate")
        start = job.get("ScheduledStartTime")
        end = job.get("ScheduledEndTime")
        return Schedule(
            date=_parse_timestamp(job_date).strftime("%Y-%m-%d") if job_date else "",
            start_time=_parse_timestamp(start).strftime("%H:%M") if start else "",
            end_time=_parse_timestamp(end).strftime("%H:%M") if end else "",
        )
    except ValueError:
        return Schedule()


def extract_rate_modifier(value: Any) -> RateModifier | None:
    if not isinstance(value, Mapping):
        return None
    return RateModifier(
        name=text(value.get("Name")),
        amount=number(value.get("Amount")),
        fee_split=bool(value.get("FeeSplit")),
    )


def extract_rate_modifiers(values: Any) -> list[RateModifier]:
    modifiers = (extract_rate_modifier(value) for value in as_list(values))
    return [modifier for modifier in modifiers if modifier is not None]


def customer_name_flat(job: Mapping[str, Any]) -> str:
    customer = as_mapping(job.get("CustomerInformation"))
    name = " ".join(
        (text(customer.get("CustomerFirstName")), text(customer.get("CustomerLastName")))
    ).strip()
    return name or UNKNOWN_CUSTOMER


def customer_name_grouped(job: Mapping[str, Any]) -> str:
    full_name = text(job.get("CustomerFullName")).strip()
    if full_name:
        return full_name
    name = " ".join(
        (text(job.get("CustomerFirstName")), text(job.get("CustomerLastName")))
    ).strip()
    return name or UNKNOWN_CUSTOMER


__all__ = [
    "UNKNOWN_ADDRESS",
    "UNKNOWN_CUSTOMER",
    "as_list",
    "as_mapping",
    "build_address",
    "customer_name_flat",
    "customer_name_grouped",
    "extract_contact_info",
    "extract_customer_notifications",
    "extract_home_stats",
    "extract_instructions_flat",
    "extract_instructions_grouped",
    "extract_rate_modifier",
    "extract_rate_modifiers",
    "extract_rooms",
    "extract_schedule",
    "extract_scheduled_teams",
    "extract_tags",
    "job_identity",
    "number",
    "text",
]
