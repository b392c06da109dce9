"""Selection of rooms due for a deep clean."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone

from app.backend.src.schemas.schedule import Room

ALWAYS_CODE = "always"
NEVER_CODE = "never"
DEFAULT_ROOM_TYPE = "Other"
ROOM_TYPE_ORDER = ("Wet", "Dry", "Other")


def _deep_clean_code(room: Room) -> str:
    return (room.deep_clean_code or "").strip().lower()


def _parse_clean_date(value: str) -> datetime | None:
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    # offset-aware values are compared as naive UTC
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def select_rooms_due(rooms: Iterable[Room]) -> list[Room]:
    """Return the rooms of one type group that need a deep clean.

    Rooms coded ``always`` are all returned. Without any ``always`` room, the
    single room with the earliest last deep-clean date is returned; rooms coded
    ``never`` and rooms without a date are never candidates.
    """

    always: list[Room] = []
    oldest: Room | None = None
    oldest_date: datetime | None = None

    for room in rooms:
        code = _deep_clean_code(room)
        if code == ALWAYS_CODE:
            always.append(room)
            continue
        if code == NEVER_CODE or not room.last_deep_clean_date or always:
            continue
        clean_date = _parse_clean_date(room.last_deep_clean_date)
        if clean_date is None:
            continue
        # strictly earlier replaces, so ties keep the first room seen
        if oldest_date is None or clean_date < oldest_date:
            oldest, oldest_date = room, clean_date

    if always:
        return always
    return [oldest] if oldest is not None else []


def ordered_room_types(types: Iterable[str]) -> list[str]:
    """Order room types by the fixed priority, unknown types last."""

    present = list(dict.fromkeys(types))
    ordered = [room_type for room_type in ROOM_TYPE_ORDER if room_type in present]
    return ordered + [room_type for room_type in present if room_type not in ROOM_TYPE_ORDER]


def group_rooms_by_type(rooms: Iterable[Room]) -> dict[str, list[Room]]:
    groups: dict[str, list[Room]] = {}
    for room in rooms:
        groups.setdefault(room.type or DEFAULT_ROOM_TYPE, []).append(room)
    return {room_type: groups[room_type] for room_type in ordered_room_types(groups)}


def rooms_due_by_type(rooms: Iterable[Room]) -> dict[str, list[Room]]:
    """Return the deep-clean selection for every room type group present."""

    return {
        room_type: select_rooms_due(group)
        for room_type, group in group_rooms_by_type(rooms).items()
    }


__all__ = [
    "ROOM_TYPE_ORDER",
    "group_rooms_by_type",
    "ordered_room_types",
    "rooms_due_by_type",
    "select_rooms_due",
]
