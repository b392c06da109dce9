"""Tests for the viewer-specific job projection."""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[4]))

import pytest

from app.backend.src.schemas.schedule import ContactInfo, Job, RateModifier, Room
from app.backend.src.services.job_view import build_job_view
from app.backend.src.services.visibility import FieldVisibilityResolver


@pytest.fixture()
def job() -> Job:
    return Job(
        id="9",
        customer_name="Pat Lee",
        service_type="Standard",
        scope_of_work="Recurring",
        address="12 Elm St",
        event_instructions="Ring twice",
        access_information="Lockbox 1234",
        internal_memo="Slow payer",
        contact_info=ContactInfo(phone="555-0100", email="pat@example.com"),
        bill_rate=150,
        fee_split_rate=90,
        rooms=[
            Room(name="Kitchen", type="Wet", last_deep_clean_date="2023-01-01", fee=20),
            Room(name="Bath", type="Wet", last_deep_clean_date="2022-01-01"),
            Room(name="Den", type="Dry", deep_clean_code="always"),
        ],
        base_fee=RateModifier(name="Base", amount=150, fee_split=True),
        job_rate_mods=[RateModifier(name="Promo", amount=-15)],
    )


def test_office_view_shows_everything(job: Job) -> None:
    view = build_job_view(job, FieldVisibilityResolver("office"))

    assert view.phone == "555-0100"
    assert view.email == "pat@example.com"
    assert view.bill_rate == 150
    assert view.fee_split_rate == 90
    assert view.rates.breakdown.fee_split_amount == 150
    assert [entry.label for entry in view.instructions] == ["Event", "Access", "Internal Memo"]
    assert view.rates.breakdown.total_amount == 135
    assert list(view.rooms_by_type) == ["Wet", "Dry"]
    assert [(entry.room.name, entry.deep_clean_due, entry.fee) for entry in view.rooms_by_type["Wet"]] == [
        ("Kitchen", False, 20),
        ("Bath", True, None),
    ]
    assert view.rooms_by_type["Dry"][0].deep_clean_due is True


def test_technician_view_applies_toggles(job: Job) -> None:
    toggles = {
        "TechDashboard_DisplayCustomerPhoneNumbers": True,
        "TechDashboard_DisplayCustomerEmails": False,
        "TechDashboard_DisplayBillRate": False,
        "TechDashboard_DisplayAddOnRate": True,
        "TechDashboard_HideDiscounts": True,
    }

    view = build_job_view(job, FieldVisibilityResolver("technician", toggles))

    assert view.phone == "555-0100"
    assert view.email is None
    assert view.bill_rate is None
    assert view.fee_split_rate is None
    assert view.rates.breakdown.fee_split_amount == 0
    assert [entry.label for entry in view.instructions] == ["Event"]
    assert view.rates.job_rate_mods == []
    assert view.rates.breakdown.total_amount == 150
    assert view.rooms_by_type["Wet"][0].fee is None


def test_technician_without_rate_toggles_sees_names_only(job: Job) -> None:
    toggles = {
        "TechDashboard_DisplayAddOnRate": False,
        "TechDashboard_DisplayFeeSplitRate": True,
        "TechDashboard_HideDiscounts": False,
    }

    view = build_job_view(job, FieldVisibilityResolver("technician", toggles))

    assert view.fee_split_rate == 90
    assert view.rates.base_fee is not None
    assert (view.rates.base_fee.name, view.rates.base_fee.amount) == ("Base", None)
    assert [(line.name, line.amount) for line in view.rates.job_rate_mods] == [("Promo", None)]
    assert view.rates.breakdown.total_amount == 0
    assert view.rates.breakdown.fee_split_amount == 150
    assert "150" not in view.rates.model_dump_json(include={"base_fee", "job_rate_mods"})
