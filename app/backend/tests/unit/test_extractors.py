"""Tests for the per-record field extractors."""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[4]))

import pytest

from app.backend.src.core.exceptions import TransformFailure
from app.backend.src.services import extractors


def test_build_address_joins_lines_and_city_line() -> None:
    home = {
        "HomeAddress1": "12 Elm St",
        "HomeAddress2": "Unit 4",
        "HomeCity": "Springfield",
        "HomeRegion": "IL",
        "HomePostalCode": "62701",
    }

    assert extractors.build_address(home) == "12 Elm St, Unit 4, Springfield IL 62701"


def test_build_address_skips_empty_components() -> None:
    home = {"HomeAddress1": "", "HomeAddress2": None, "HomeCity": "Springfield"}

    assert extractors.build_address(home) == "Springfield"


@pytest.mark.parametrize("home", [None, {}, {"HomeAddress1": "", "HomeCity": None}])
def test_build_address_falls_back_when_everything_is_empty(home: dict | None) -> None:
    assert extractors.build_address(home) == "Unknown Address"


def test_contact_prefers_mobile_over_landline() -> None:
    contacts = [
        {"ContactTypeId": 1, "ContactInfo": "555-0100"},
        {"ContactTypeId": 3, "ContactInfo": "pat@example.com"},
        {"ContactTypeId": 2, "ContactInfo": "555-0199"},
    ]

    contact = extractors.extract_contact_info(contacts)

    assert contact.phone == "555-0199"
    assert contact.email == "pat@example.com"


def test_contact_uses_landline_without_mobile() -> None:
    contact = extractors.extract_contact_info([{"ContactTypeId": 1, "ContactInfo": "555-0100"}])

    assert contact.phone == "555-0100"
    assert contact.email == ""


def test_contact_skips_entries_with_non_finite_type() -> None:
    contacts = [
        {"ContactTypeId": float("inf"), "ContactInfo": "555-0000"},
        {"ContactTypeId": 2, "ContactInfo": "555-0199"},
    ]

    contact = extractors.extract_contact_info(contacts)

    assert contact.phone == "555-0199"


@pytest.mark.parametrize("contacts", [None, [], "nope"])
def test_contact_defaults_to_empty_pair(contacts: object) -> None:
    contact = extractors.extract_contact_info(contacts)

    assert (contact.phone, contact.email) == ("", "")


def test_flat_instructions_accept_misspelled_access_key() -> None:
    job = {
        "NotesAndMemos": {
            "EventInstructions": "<p>Ring twice</p>",
            "HomeAcessInformation": "Lockbox 1234",
        }
    }

    instructions = extractors.extract_instructions_flat(job)

    assert instructions["event_instructions"] == "<p>Ring twice</p>"
    assert instructions["access_information"] == "Lockbox 1234"
    assert instructions["internal_memo"] == ""


def test_grouped_instructions_fall_back_to_service_set_fields() -> None:
    job = {
        "ServiceSetSpecialInstructions": "Use eco products",
        "ServiceSetSpecialEquipment": "Ladder",
        "HomeSpecialEquipment": "",
    }

    instructions = extractors.extract_instructions_grouped(job)

    assert instructions["special_instructions"] == "Use eco products"
    assert instructions["special_equipment"] == "Ladder"


def test_tags_keep_origin_order_and_defaults() -> None:
    job = {
        "CustomerTags": [{"Description": "VIP"}],
        "JobTags": [{"Description": "Key", "IconPath": "key.png", "Color": "#112233"}],
        "HomeTags": [{"Description": "Dog"}],
    }

    tags = extractors.extract_tags(job)

    assert [(tag.type, tag.description) for tag in tags] == [
        ("job", "Key"),
        ("home", "Dog"),
        ("customer", "VIP"),
    ]
    assert tags[0].color == "#112233"
    assert tags[1].color == "#999999"


def test_rooms_default_type_to_other() -> None:
    rooms = extractors.extract_rooms(
        [{"RoomName": "Kitchen", "RoomTypeName": "Wet", "RoomFee": 15}, {"RoomName": "Den"}]
    )

    assert [room.type for room in rooms] == ["Wet", "Other"]
    assert rooms[0].fee == 15
    assert rooms[1].fee == 0


def test_scheduled_teams_fall_back_to_unassigned() -> None:
    assert extractors.extract_scheduled_teams([]) == ["0"]
    assert extractors.extract_scheduled_teams(None) == ["0"]
    assert extractors.extract_scheduled_teams([{"TeamListDescription": "No id"}]) == ["0"]
    assert extractors.extract_scheduled_teams([{"TeamListId": 7}, {"TeamListId": 3}]) == ["7", "3"]


def test_schedule_formats_date_and_times() -> None:
    schedule = extractors.extract_schedule(
        {
            "JobDate": "2025-01-05T00:00:00",
            "ScheduledStartTime": "2025-01-05T08:30:00",
            "ScheduledEndTime": "2025-01-05T11:00:00",
        }
    )

    assert (schedule.date, schedule.start_time, schedule.end_time) == ("2025-01-05", "08:30", "11:00")


def test_unparseable_timestamp_blanks_schedule() -> None:
    schedule = extractors.extract_schedule(
        {"JobDate": "2025-01-05", "ScheduledStartTime": "half past eight"}
    )

    assert (schedule.date, schedule.start_time, schedule.end_time) == ("", "", "")


def test_customer_notifications_keep_service_events_only() -> None:
    notifications = [
        {"NotificationEvent": "One Day Before", "Sent": True},
        {"NotificationEvent": "Invoice"},
        {"NotificationEvent": "On The Way"},
    ]

    kept = extractors.extract_customer_notifications(notifications)

    assert [entry["NotificationEvent"] for entry in kept] == ["One Day Before", "On The Way"]


def test_home_stats_treat_zero_as_missing() -> None:
    stats = extractors.extract_home_stats({"HomeBedrooms": 3, "HomeBathrooms": 0})

    assert stats is not None
    assert stats.bedrooms == 3
    assert stats.bathrooms is None
    assert extractors.extract_home_stats(None) is None


def test_rate_modifiers_default_missing_fields() -> None:
    modifiers = extractors.extract_rate_modifiers(
        [{"Name": "Oven", "Amount": 25, "FeeSplit": True}, {"Name": "Promo"}, "junk"]
    )

    assert [(mod.name, mod.amount, mod.fee_split) for mod in modifiers] == [
        ("Oven", 25, True),
        ("Promo", 0, False),
    ]


def test_customer_names() -> None:
    assert extractors.customer_name_flat({}) == "Unknown Customer"
    assert (
        extractors.customer_name_flat(
            {"CustomerInformation": {"CustomerFirstName": "Pat", "CustomerLastName": "Lee"}}
        )
        == "Pat Lee"
    )
    assert extractors.customer_name_grouped({"CustomerFullName": "Lee Household"}) == "Lee Household"
    assert extractors.customer_name_grouped({"CustomerLastName": "Lee"}) == "Lee"


@pytest.mark.parametrize("job_id", [None, "", "  "])
def test_job_identity_is_required(job_id: object) -> None:
    with pytest.raises(TransformFailure):
        extractors.job_identity({"JobInformationId": job_id})


def test_job_identity_is_stringified() -> None:
    assert extractors.job_identity({"JobInformationId": 1042}) == "1042"
