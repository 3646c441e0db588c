"""Comparing realized totals against day targets."""

from __future__ import annotations

from dataclasses import dataclass

from carbcycle.cycle.models import DayTarget, DayType
from carbcycle.foods.models import FoodCatalog
from carbcycle.optimizer.models import DayTotals, PlanEntry
from carbcycle.optimizer.totals import compute_totals
from carbcycle.rounding import round2

# Remaining grams within this band count as on target
ON_TARGET_GRAMS = 3.0


@dataclass
class DayDeviation:
    """Actual minus target for one day (positive = over target)."""

    day: int
    day_type: DayType
    target: DayTarget
    totals: DayTotals
    dp: float
    dc: float
    df: float


def day_deviation(target: DayTarget, totals: DayTotals) -> DayDeviation:
    return DayDeviation(
        day=target.day,
        day_type=target.day_type,
        target=target,
        totals=totals,
        dp=round2(totals.p - target.protein_target),
        dc=round2(totals.c - target.carb_target),
        df=round2(totals.f - target.fat_target),
    )


def cycle_deviations(
    targets: list[DayTarget],
    plans: dict[int, list[PlanEntry]],
    catalog: FoodCatalog,
) -> list[DayDeviation]:
    """Deviation row for every day target; unplanned days count as empty."""
    return [
        day_deviation(target, compute_totals(plans.get(target.day, []), catalog))
        for target in targets
    ]


def remaining(target: DayTarget, totals: DayTotals) -> tuple[float, float, float]:
    """Grams of protein, carbs and fat still to plan (negative = over)."""
    return (
        round2(target.protein_target - totals.p),
        round2(target.carb_target - totals.c),
        round2(target.fat_target - totals.f),
    )


def delta_status(remaining_grams: float) -> str:
    """Classify a remaining amount as "ok", "warn" (under) or "over"."""
    if abs(remaining_grams) <= ON_TARGET_GRAMS:
        return "ok"
    if remaining_grams < 0:
        return "over"
    return "warn"
