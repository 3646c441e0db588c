"""Data models for carb-cycle profiles and per-day targets."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class DayType(Enum):
    """Carbohydrate level of a cycle day."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


# Fixed enumeration order used wherever categories are scanned
DAY_TYPE_ORDER: tuple[DayType, ...] = (DayType.HIGH, DayType.MEDIUM, DayType.LOW)


class BodyType(Enum):
    """Body-type variant selecting the carb and fat coefficients."""

    ENDO = "endo"
    ECTO = "ecto"


# Grams per kg of body weight per day
ENDO_CARB_PER_KG = 2.0
ENDO_FAT_PER_KG = 0.8
ECTO_CARB_PER_KG = 3.0

MIN_CYCLE_DAYS = 1
MAX_CYCLE_DAYS = 30

SHARE_TOLERANCE = 1e-6


@dataclass(frozen=True)
class MacroShares:
    """Fraction of a cycle macro total assigned to each day type."""

    high: float
    medium: float
    low: float

    def get(self, day_type: DayType) -> float:
        if day_type is DayType.HIGH:
            return self.high
        if day_type is DayType.MEDIUM:
            return self.medium
        return self.low

    def total(self) -> float:
        return self.high + self.medium + self.low


DEFAULT_CARB_SHARES = MacroShares(high=0.5, medium=0.35, low=0.15)
DEFAULT_FAT_SHARES = MacroShares(high=0.15, medium=0.35, low=0.5)


def _default_placement() -> list[DayType]:
    return [DayType.HIGH, DayType.HIGH, DayType.MEDIUM, DayType.MEDIUM, DayType.LOW]


@dataclass
class PlannerProfile:
    """Everything needed to derive a cycle's macro targets.

    The day counts must sum to cycle_days and the placement must contain
    exactly that many of each day type; validate_profile() reports
    violations without fixing them.
    """

    sex: str = "Female"
    weight_kg: float = 70.0
    body_type: BodyType = BodyType.ENDO
    protein_per_kg: float = 1.2
    ecto_fat_per_kg: float = 1.0  # Only used by BodyType.ECTO
    cycle_days: int = 5
    n_high: int = 2
    n_medium: int = 2
    n_low: int = 1
    carb_shares: MacroShares = DEFAULT_CARB_SHARES
    fat_shares: MacroShares = DEFAULT_FAT_SHARES
    day_placement: list[DayType] = field(default_factory=_default_placement)

    def required_count(self, day_type: DayType) -> int:
        """Number of days the profile asks for of a given type."""
        if day_type is DayType.HIGH:
            return self.n_high
        if day_type is DayType.MEDIUM:
            return self.n_medium
        return self.n_low


@dataclass
class DayTarget:
    """Macro targets for one day of the cycle (grams)."""

    day: int  # 1-based position in the cycle
    day_type: DayType
    protein_target: float
    carb_target: float
    fat_target: float


@dataclass
class CycleTargets:
    """Output of allocate_targets(): per-day targets plus cycle totals."""

    day_targets: list[DayTarget]
    protein_per_day: float
    carb_total: float
    fat_total: float

    def for_day(self, day: int) -> Optional[DayTarget]:
        """Look up the target for a 1-based day number."""
        if 1 <= day <= len(self.day_targets):
            return self.day_targets[day - 1]
        return None


def count_day_types(placement: list[DayType]) -> dict[DayType, int]:
    """Count how many positions hold each day type."""
    counts = {day_type: 0 for day_type in DAY_TYPE_ORDER}
    for day_type in placement:
        counts[day_type] += 1
    return counts
