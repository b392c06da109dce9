"""Team registry built from the team references spread across job records."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from app.backend.src.schemas.schedule import (
    UNASSIGNED_SORT_ORDER,
    UNASSIGNED_TEAM_ID,
    Team,
)
from app.backend.src.services.extractors import as_list, as_mapping, text

UNKNOWN_TEAM_NAME = "Unknown Team"
DEFAULT_TEAM_COLOR = "#CCCCCC"
UNASSIGNED_TEAM = Team(
    id=UNASSIGNED_TEAM_ID,
    name="Unassigned",
    color="#999999",
    sort_order=UNASSIGNED_SORT_ORDER,
)


def _sort_order(team: Mapping[str, Any], *, fall_back_to_id: bool) -> int:
    candidates = [team.get("SortOrder")]
    if fall_back_to_id:
        candidates.append(team.get("TeamListId"))

    for candidate in candidates:
        if isinstance(candidate, bool):
            continue
        try:
            value = int(candidate)
        except (TypeError, ValueError, OverflowError):
            continue
        if value:
            return value
    return 0


def build_team_registry(
    jobs: Iterable[Mapping[str, Any]], *, fall_back_to_id: bool = False
) -> list[Team]:
    """Return the deduplicated teams referenced by ``jobs``, sorted for display.

    The first occurrence of a team id wins. The Unassigned team is always
    present and always sorts after every real team.
    ``fall_back_to_id`` uses the numeric team id when a team has no sort order,
    as the grouped export does.
    """

    registry: dict[str, Team] = {UNASSIGNED_TEAM_ID: UNASSIGNED_TEAM}

    for job in jobs:
        for raw_team in as_list(job.get("ScheduledTeams")):
            team = as_mapping(raw_team)
            if not team.get("TeamListId"):
                continue
            team_id = str(team["TeamListId"])
            if team_id in registry:
                continue
            registry[team_id] = Team(
                id=team_id,
                name=text(team.get("TeamListDescription")) or UNKNOWN_TEAM_NAME,
                color=text(team.get("Color")) or DEFAULT_TEAM_COLOR,
                sort_order=_sort_order(team, fall_back_to_id=fall_back_to_id),
            )

    # stable sort: equal sort orders keep first-seen order, Unassigned stays last
    return sorted(
        registry.values(),
        key=lambda team: (team.id == UNASSIGNED_TEAM_ID, team.sort_order),
    )


__all__ = ["UNASSIGNED_TEAM", "build_team_registry"]
