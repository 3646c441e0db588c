"""Data models for day plans, totals and solver runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from carbcycle.cycle.models import DayTarget
from carbcycle.foods.models import Basis


@dataclass
class PlanEntry:
    """One planned food for a day: which food, which basis, how many grams."""

    food_id: str
    basis: Basis
    grams: float = 0.0


@dataclass(frozen=True)
class DayTotals:
    """Realized macros (and energy) of a set of plan entries."""

    kcal: float = 0.0
    p: float = 0.0
    c: float = 0.0
    f: float = 0.0


@dataclass(frozen=True)
class MacroTarget:
    """Protein/carb/fat grams the solver aims for."""

    p: float
    c: float
    f: float

    @classmethod
    def from_day_target(cls, target: DayTarget) -> MacroTarget:
        return cls(p=target.protein_target, c=target.carb_target, f=target.fat_target)

    def is_zero(self) -> bool:
        return self.p == 0 and self.c == 0 and self.f == 0


@dataclass
class SolverConfig:
    """Tuning knobs for the quantity solver."""

    step: float = 5.0  # grams per local-search move
    max_iterations: int = 1500
    seed_fraction: float = 0.7  # share of each macro target filled before search
    tolerance: float = 1.0  # stop once the L1 score drops below this
    min_improvement: float = 1e-9


class StopReason(Enum):
    """Why the local search stopped."""

    CONVERGED = "converged"
    LOCAL_OPTIMUM = "local_optimum"
    MAX_ITERATIONS = "max_iterations"
    NOTHING_TO_SOLVE = "nothing_to_solve"


@dataclass
class SolverResult:
    """Complete output from solve_day()."""

    entries: list[PlanEntry]
    totals: DayTotals
    score: float
    iterations: int
    stop_reason: StopReason
    solver_info: dict = field(default_factory=dict)  # elapsed time, seeded grams

    @property
    def converged(self) -> bool:
        return self.stop_reason is StopReason.CONVERGED
