"""Turn a profile into per-day protein, carb and fat targets.

Protein is the same every day (weight x protein rate). Carbs and fat are
computed as cycle totals from the body-type coefficients and then split
across day types by the profile's shares; each day type's share is divided
evenly among the days of that type.
"""

from __future__ import annotations

from carbcycle.cycle.models import (
    DAY_TYPE_ORDER,
    ECTO_CARB_PER_KG,
    ENDO_CARB_PER_KG,
    ENDO_FAT_PER_KG,
    BodyType,
    CycleTargets,
    DayTarget,
    DayType,
    MacroShares,
    PlannerProfile,
)
from carbcycle.rounding import round2


def body_type_coefficients(profile: PlannerProfile) -> tuple[float, float]:
    """Return (carbs per kg, fat per kg) for the profile's body type."""
    if profile.body_type is BodyType.ENDO:
        return ENDO_CARB_PER_KG, ENDO_FAT_PER_KG
    return ECTO_CARB_PER_KG, profile.ecto_fat_per_kg


def per_day_amounts(
    total: float,
    shares: MacroShares,
    profile: PlannerProfile,
) -> dict[DayType, float]:
    """Split a cycle total into the amount for one day of each type.

    Day types with no assigned days get 0.
    """
    amounts: dict[DayType, float] = {}
    for day_type in DAY_TYPE_ORDER:
        count = profile.required_count(day_type)
        if count > 0:
            amounts[day_type] = (total * shares.get(day_type)) / count
        else:
            amounts[day_type] = 0.0
    return amounts


def allocate_targets(profile: PlannerProfile) -> CycleTargets:
    """Compute the day-by-day macro targets for a profile.

    Reported values are rounded to 2 decimals; the cycle totals are not
    re-derived from the rounded per-day values.

    Args:
        profile: Planner profile (does not need to be valid)

    Returns:
        CycleTargets with one DayTarget per placement position
    """
    carb_per_kg, fat_per_kg = body_type_coefficients(profile)

    protein_per_day = profile.weight_kg * profile.protein_per_kg
    carb_total = profile.weight_kg * carb_per_kg * profile.cycle_days
    fat_total = profile.weight_kg * fat_per_kg * profile.cycle_days

    carb_by_type = per_day_amounts(carb_total, profile.carb_shares, profile)
    fat_by_type = per_day_amounts(fat_total, profile.fat_shares, profile)

    day_targets = [
        DayTarget(
            day=idx + 1,
            day_type=day_type,
            protein_target=round2(protein_per_day),
            carb_target=round2(carb_by_type[day_type]),
            fat_target=round2(fat_by_type[day_type]),
        )
        for idx, day_type in enumerate(profile.day_placement)
    ]

    return CycleTargets(
        day_targets=day_targets,
        protein_per_day=round2(protein_per_day),
        carb_total=round2(carb_total),
        fat_total=round2(fat_total),
    )
