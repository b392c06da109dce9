"""Team position lookup keyed by the export's ``TeamPosition`` code."""

from __future__ import annotations

from typing import Any, NamedTuple

from app.backend.src.schemas.schedule import Position


class TeamPosition(NamedTuple):
    id: int
    name: str
    color: str
    description: str


TEAM_POSITIONS: dict[int, TeamPosition] = {
    0: TeamPosition(0, "Unassigned", "#999999", "No position assigned"),
    1: TeamPosition(
        1, "Team Leader", "#E74C3C", "Lead position - responsible for team coordination"
    ),
    2: TeamPosition(2, "Team Member", "#3498DB", "Regular team member"),
    3: TeamPosition(3, "Trainee", "#F39C12", "Employee in training"),
    4: TeamPosition(4, "Supervisor", "#9B59B6", "Supervisory role"),
    5: TeamPosition(5, "Assistant", "#1ABC9C", "Assistant position"),
}


def get_position_by_id(position_id: Any) -> TeamPosition:
    """Return the position for ``position_id``, defaulting to Unassigned."""

    try:
        key = int(position_id)
    except (TypeError, ValueError):
        return TEAM_POSITIONS[0]
    return TEAM_POSITIONS.get(key, TEAM_POSITIONS[0])


def resolve_position(position_id: Any) -> Position:
    """Return the canonical id/name/color triple for an employee position."""

    position = get_position_by_id(position_id)
    return Position(id=position.id, name=position.name, color=position.color)


__all__ = ["TEAM_POSITIONS", "TeamPosition", "get_position_by_id", "resolve_position"]
