"""Day-type placement: repairing a sequence and editing the cycle shape."""

from __future__ import annotations

from dataclasses import replace

from carbcycle.cycle.models import (
    DAY_TYPE_ORDER,
    MAX_CYCLE_DAYS,
    MIN_CYCLE_DAYS,
    DayType,
    PlannerProfile,
    count_day_types,
)


def normalize_placement(profile: PlannerProfile) -> list[DayType]:
    """Repair the profile's placement so its counts match the required ones.

    The sequence is first truncated, or padded with Low days, to cycle_days.
    Then positions are scanned from the end; a position whose day type is
    over-represented is reassigned to the first under-represented type in
    High, Medium, Low order. Positions of types that are not in excess are
    never touched, so an already valid placement comes back unchanged.

    When the required counts do not sum to cycle_days no repair can satisfy
    them exactly; the scan then stops once no deficit remains.

    Args:
        profile: Profile whose day_placement and counts are used

    Returns:
        New placement list of length cycle_days
    """
    length = max(profile.cycle_days, 0)
    out = list(profile.day_placement[:length])
    while len(out) < length:
        out.append(DayType.LOW)

    current = count_day_types(out)
    excess = {
        d: max(0, current[d] - profile.required_count(d)) for d in DAY_TYPE_ORDER
    }
    deficit = {
        d: max(0, profile.required_count(d) - current[d]) for d in DAY_TYPE_ORDER
    }

    for idx in range(len(out) - 1, -1, -1):
        if not any(deficit.values()):
            break
        day_type = out[idx]
        if excess[day_type] <= 0:
            continue
        target = next(d for d in DAY_TYPE_ORDER if deficit[d] > 0)
        out[idx] = target
        excess[day_type] -= 1
        deficit[target] -= 1

    return out


def placement_from_counts(n_high: int, n_medium: int, n_low: int) -> list[DayType]:
    """Blocked placement: all High days, then Medium, then Low."""
    return (
        [DayType.HIGH] * max(n_high, 0)
        + [DayType.MEDIUM] * max(n_medium, 0)
        + [DayType.LOW] * max(n_low, 0)
    )


def resize_cycle(profile: PlannerProfile, days: int) -> PlannerProfile:
    """Change the cycle length, shrinking day counts to fit.

    The length is clamped to the supported range. High days are kept first,
    then Medium, and Low fills whatever is left. The placement is rebuilt
    in blocked order.
    """
    cycle_days = min(max(days, MIN_CYCLE_DAYS), MAX_CYCLE_DAYS)
    n_high = min(profile.n_high, cycle_days)
    n_medium = min(profile.n_medium, cycle_days - n_high)
    n_low = max(0, cycle_days - n_high - n_medium)
    return replace(
        profile,
        cycle_days=cycle_days,
        n_high=n_high,
        n_medium=n_medium,
        n_low=n_low,
        day_placement=placement_from_counts(n_high, n_medium, n_low),
    )


def set_day_counts(
    profile: PlannerProfile,
    n_high: int,
    n_medium: int,
    n_low: int,
) -> PlannerProfile:
    """Store new day counts.

    The placement is rebuilt only when the counts add up to the cycle
    length; otherwise it is left alone for the validator to flag.
    """
    if n_high + n_medium + n_low != profile.cycle_days:
        return replace(profile, n_high=n_high, n_medium=n_medium, n_low=n_low)
    return replace(
        profile,
        n_high=n_high,
        n_medium=n_medium,
        n_low=n_low,
        day_placement=placement_from_counts(n_high, n_medium, n_low),
    )


def set_placement(profile: PlannerProfile, index: int, day_type: DayType) -> PlannerProfile:
    """Assign a day type to one 0-based placement position."""
    if not 0 <= index < len(profile.day_placement):
        raise IndexError(
            f"Day index {index} is outside a placement of {len(profile.day_placement)} days"
        )
    placement = list(profile.day_placement)
    placement[index] = day_type
    return replace(profile, day_placement=placement)
