"""Cycle profiles, day placement and macro target allocation."""

from carbcycle.cycle.allocator import allocate_targets
from carbcycle.cycle.models import (
    DEFAULT_CARB_SHARES,
    DEFAULT_FAT_SHARES,
    BodyType,
    CycleTargets,
    DayTarget,
    DayType,
    MacroShares,
    PlannerProfile,
)
from carbcycle.cycle.placement import (
    normalize_placement,
    placement_from_counts,
    resize_cycle,
    set_day_counts,
    set_placement,
)
from carbcycle.cycle.validation import validate_profile

__all__ = [
    "BodyType",
    "CycleTargets",
    "DEFAULT_CARB_SHARES",
    "DEFAULT_FAT_SHARES",
    "DayTarget",
    "DayType",
    "MacroShares",
    "PlannerProfile",
    "allocate_targets",
    "normalize_placement",
    "placement_from_counts",
    "resize_cycle",
    "set_day_counts",
    "set_placement",
    "validate_profile",
]
