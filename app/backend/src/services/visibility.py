"""Role-based redaction of sensitive job fields.

Office viewers see everything. Technician viewers see a field only when a
remotely configured feature toggle explicitly allows it; fields without a
toggle, or whose toggle is absent from the export, stay hidden. A toggle's
decision is final: there is no manual override layered on top of it.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any


class ViewMode(str, Enum):
    OFFICE = "office"
    TECHNICIAN = "technician"


TOGGLE_PREFIX = "TechDashboard_"
DISPLAY_TOGGLE_PREFIX = f"{TOGGLE_PREFIX}Display"
HIDE_TOGGLE_PREFIX = f"{TOGGLE_PREFIX}Hide"

FIELD_TO_FEATURE_TOGGLE: dict[str, str] = {
    "billRate": "TechDashboard_DisplayBillRate",
    "feeSplitRate": "TechDashboard_DisplayFeeSplitRate",
    "addOnRate": "TechDashboard_DisplayAddOnRate",
    "roomRate": "TechDashboard_DisplayRoomRate",
    "customerPhone": "TechDashboard_DisplayCustomerPhoneNumbers",
    "customerEmail": "TechDashboard_DisplayCustomerEmails",
    "discounts": "TechDashboard_HideDiscounts",
}


def _toggle_hides(toggle_key: str, value: Any) -> bool:
    enabled = bool(value)
    if toggle_key.startswith(HIDE_TOGGLE_PREFIX):
        return enabled
    return not enabled


def should_hide_field(
    view_mode: ViewMode | str,
    field_name: str | None = None,
    feature_toggles: Mapping[str, Any] | None = None,
) -> bool:
    """Return ``True`` when ``field_name`` must be redacted for ``view_mode``."""

    if ViewMode(view_mode) is ViewMode.OFFICE:
        return False

    if field_name and feature_toggles:
        toggle_key = FIELD_TO_FEATURE_TOGGLE.get(field_name)
        if toggle_key and toggle_key in feature_toggles:
            return _toggle_hides(toggle_key, feature_toggles[toggle_key])

    return True


class FieldVisibilityResolver:
    """Resolver bound to one viewer context, queried once per rendered field."""

    def __init__(
        self,
        view_mode: ViewMode | str,
        feature_toggles: Mapping[str, Any] | None = None,
    ) -> None:
        self.view_mode = ViewMode(view_mode)
        self.feature_toggles = dict(feature_toggles or {})

    def should_hide(self, field_name: str | None = None) -> bool:
        return should_hide_field(self.view_mode, field_name, self.feature_toggles)

    def is_visible(self, field_name: str | None = None) -> bool:
        return not self.should_hide(field_name)

    def display_toggles(self) -> dict[str, bool]:
        """Return the ``Display*`` toggles keyed by their short label."""

        return {
            key.removeprefix(DISPLAY_TOGGLE_PREFIX): bool(value)
            for key, value in self.feature_toggles.items()
            if key.startswith(DISPLAY_TOGGLE_PREFIX)
        }


__all__ = [
    "FIELD_TO_FEATURE_TOGGLE",
    "FieldVisibilityResolver",
    "ViewMode",
    "should_hide_field",
]
