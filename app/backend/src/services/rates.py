"""Bill rate breakdown for a job's base fee and rate modifiers."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict

from app.backend.src.schemas.schedule import Job, RateModifier
from app.backend.src.services.visibility import ViewMode, should_hide_field


class RateBreakdown(BaseModel):
    """Totals for one job. ``available`` is ``False`` when amounts are withheld."""

    available: bool
    total_amount: float = 0
    fee_split_amount: float = 0

    model_config = ConfigDict(frozen=True)


class RateLine(BaseModel):
    """A base fee or modifier as shown to a viewer; ``amount`` is ``None`` when withheld."""

    name: str
    amount: float | None = None
    fee_split: bool = False

    model_config = ConfigDict(frozen=True)


class ViewerRateBreakdown(BaseModel):
    """A breakdown paired with the rate lines the viewer is allowed to see.

    ``breakdown.total_amount`` is only filled when ``show_amounts`` is set and
    ``breakdown.fee_split_amount`` only when ``show_fee_split`` is set.
    """

    breakdown: RateBreakdown
    show_amounts: bool
    show_fee_split: bool
    hide_discounts: bool
    base_fee: RateLine | None = None
    service_set_rate_mods: list[RateLine] = []
    job_rate_mods: list[RateLine] = []

    model_config = ConfigDict(frozen=True)


def is_discount(modifier: RateModifier) -> bool:
    return modifier.amount < 0


def visible_modifiers(
    modifiers: Iterable[RateModifier], *, hide_discounts: bool
) -> list[RateModifier]:
    """Return ``modifiers`` without discounts when discounts are hidden."""

    if not hide_discounts:
        return list(modifiers)
    return [modifier for modifier in modifiers if not is_discount(modifier)]


def calculate_rate_breakdown(
    base_fee: RateModifier | None,
    service_set_rate_mods: Iterable[RateModifier],
    job_rate_mods: Iterable[RateModifier],
    *,
    show_amounts: bool,
    hide_discounts: bool,
) -> RateBreakdown:
    """Sum the base fee and modifiers into bill and fee-split totals.

    Hidden discounts are left out of both totals, and nothing is summed at all
    when the viewer may not see amounts. No rounding is applied here.
    """

    if not show_amounts:
        return RateBreakdown(available=False)

    entries: list[RateModifier] = [base_fee] if base_fee is not None else []
    entries += visible_modifiers(service_set_rate_mods, hide_discounts=hide_discounts)
    entries += visible_modifiers(job_rate_mods, hide_discounts=hide_discounts)

    total_amount = 0.0
    fee_split_amount = 0.0
    for entry in entries:
        total_amount += entry.amount
        if entry.fee_split:
            fee_split_amount += entry.amount

    return RateBreakdown(
        available=True,
        total_amount=total_amount,
        fee_split_amount=fee_split_amount,
    )


def calculate_job_rate_breakdown(
    job: Job, *, show_amounts: bool, hide_discounts: bool
) -> RateBreakdown:
    return calculate_rate_breakdown(
        job.base_fee,
        job.service_set_rate_mods,
        job.job_rate_mods,
        show_amounts=show_amounts,
        hide_discounts=hide_discounts,
    )


def rate_breakdown_for_viewer(
    job: Job,
    view_mode: ViewMode | str,
    feature_toggles: Mapping[str, Any] | None = None,
) -> ViewerRateBreakdown:
    """Resolve the amount, fee-split and discount gates for a viewer, then break down.

    Withheld amounts never leave this function: rate lines keep only their
    names and the totals the viewer may not see are zero.
    """

    show_amounts = not should_hide_field(view_mode, "addOnRate", feature_toggles)
    show_fee_split = not should_hide_field(view_mode, "feeSplitRate", feature_toggles)
    hide_discounts = should_hide_field(view_mode, "discounts", feature_toggles)

    totals = calculate_job_rate_breakdown(
        job, show_amounts=show_amounts or show_fee_split, hide_discounts=hide_discounts
    )
    breakdown = RateBreakdown(
        available=show_amounts,
        total_amount=totals.total_amount if show_amounts else 0,
        fee_split_amount=totals.fee_split_amount if show_fee_split else 0,
    )

    def line(modifier: RateModifier) -> RateLine:
        return RateLine(
            name=modifier.name,
            amount=modifier.amount if show_amounts else None,
            fee_split=modifier.fee_split,
        )

    return ViewerRateBreakdown(
        breakdown=breakdown,
        show_amounts=show_amounts,
        show_fee_split=show_fee_split,
        hide_discounts=hide_discounts,
        base_fee=line(job.base_fee) if job.base_fee is not None else None,
        service_set_rate_mods=[
            line(modifier)
            for modifier in visible_modifiers(
                job.service_set_rate_mods, hide_discounts=hide_discounts
            )
        ],
        job_rate_mods=[
            line(modifier)
            for modifier in visible_modifiers(job.job_rate_mods, hide_discounts=hide_discounts)
        ],
    )


__all__ = [
    "RateBreakdown",
    "RateLine",
    "ViewerRateBreakdown",
    "calculate_job_rate_breakdown",
    "calculate_rate_breakdown",
    "rate_breakdown_for_viewer",
    "visible_modifiers",
]
