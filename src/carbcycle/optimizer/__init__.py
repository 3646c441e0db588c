"""Day totals and the serving-size solver."""

from carbcycle.optimizer.models import (
    DayTotals,
    MacroTarget,
    PlanEntry,
    SolverConfig,
    SolverResult,
    StopReason,
)
from carbcycle.optimizer.solver import solve_day, solve_quantities
from carbcycle.optimizer.totals import compute_totals, entry_macros

__all__ = [
    "DayTotals",
    "MacroTarget",
    "PlanEntry",
    "SolverConfig",
    "SolverResult",
    "StopReason",
    "compute_totals",
    "entry_macros",
    "solve_day",
    "solve_quantities",
]
