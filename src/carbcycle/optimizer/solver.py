"""Serving-size solver: choose grams for a day's foods to hit its macros.

Two phases:

1. Seeding. Protein foods are filled toward protein, carb foods toward carbs
   and fat foods toward fat, densest food first, up to seed_fraction of each
   target.
2. Local search. Each iteration tries +step and -step grams on every entry
   and applies the single move that lowers the L1 distance
   |dp| + |dc| + |df| the most. It stops below the tolerance, when no move
   helps, or after max_iterations.

This is a heuristic: with fixed step sizes it can stall in a local optimum
or short of a target no 5 g combination of the chosen foods reaches.
Each call works on its own copy of the quantities.
"""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import Optional

import numpy as np

from carbcycle.foods.models import FoodCatalog, FoodCategory
from carbcycle.optimizer.models import (
    DayTotals,
    MacroTarget,
    PlanEntry,
    SolverConfig,
    SolverResult,
    StopReason,
)
from carbcycle.optimizer.totals import C, F, P, density_matrix, sum_totals
from carbcycle.rounding import round2

logger = logging.getLogger(__name__)

# Which food category is seeded toward which macro column
SEED_GROUPS: tuple[tuple[FoodCategory, int], ...] = (
    (FoodCategory.PROTEIN, P),
    (FoodCategory.CARB, C),
    (FoodCategory.FAT, F),
)


def score(target: MacroTarget, totals: DayTotals) -> float:
    """Unweighted L1 distance between a target and realized totals."""
    return abs(target.p - totals.p) + abs(target.c - totals.c) + abs(target.f - totals.f)


def _target_for_column(target: MacroTarget, column: int) -> float:
    return (target.p, target.c, target.f)[column]


def seed_quantities(
    quantities: np.ndarray,
    densities: np.ndarray,
    categories: list[Optional[FoodCategory]],
    target: MacroTarget,
    seed_fraction: float = 0.7,
) -> None:
    """Fill each macro's food group toward a fraction of its target.

    Modifies quantities in place. Within a group, entries are ranked by
    density for that macro (ties keep entry order) and entries with zero
    density are left out.
    """
    for category, column in SEED_GROUPS:
        needed = _target_for_column(target, column) * seed_fraction
        group = [i for i, cat in enumerate(categories) if cat is category]
        if not group or needed <= 0:
            continue

        ranked = sorted(
            (i for i in group if densities[i, column] > 0),
            key=lambda i: -densities[i, column],
        )
        remaining = needed
        for i in ranked:
            if remaining <= 0:
                break
            density = densities[i, column]
            grams = max(0.0, (remaining / density) * 100)
            quantities[i] += grams
            remaining -= density * (grams / 100)


def local_search(
    quantities: np.ndarray,
    densities: np.ndarray,
    target: MacroTarget,
    config: SolverConfig,
) -> tuple[int, StopReason]:
    """Steepest single-coordinate descent with a fixed step.

    Modifies quantities in place; quantities never go below zero.

    Returns:
        (number of moves applied, stop reason)
    """
    moves = 0
    for _ in range(config.max_iterations):
        base_score = score(target, sum_totals(densities, quantities))
        if base_score < config.tolerance:
            return moves, StopReason.CONVERGED

        best_score = base_score
        best_idx = -1
        best_delta = 0.0

        for idx in range(len(quantities)):
            for delta in (config.step, -config.step):
                original = quantities[idx]
                if original + delta < 0:
                    continue
                quantities[idx] = original + delta
                trial = score(target, sum_totals(densities, quantities))
                quantities[idx] = original
                if trial < best_score - config.min_improvement:
                    best_score = trial
                    best_idx = idx
                    best_delta = delta

        if best_idx < 0:
            return moves, StopReason.LOCAL_OPTIMUM

        quantities[best_idx] = max(0.0, quantities[best_idx] + best_delta)
        moves += 1

    if score(target, sum_totals(densities, quantities)) < config.tolerance:
        return moves, StopReason.CONVERGED
    return moves, StopReason.MAX_ITERATIONS


def solve_day(
    entries: list[PlanEntry],
    catalog: FoodCatalog,
    target: MacroTarget,
    config: Optional[SolverConfig] = None,
) -> SolverResult:
    """Main entry point for choosing serving sizes for one day.

    The same foods come back in the same order with new gram amounts;
    foods are never added or removed. Existing grams are the starting
    point (negative or missing amounts start at 0).

    Args:
        entries: Planned foods for the day
        catalog: Foods to resolve entries against
        target: Day's protein/carb/fat target in grams
        config: Solver tuning; defaults to SolverConfig()

    Returns:
        SolverResult with the new entries (grams rounded to 2 decimals)
    """
    config = config or SolverConfig()
    start_time = time.time()

    quantities = np.array([max(0.0, entry.grams or 0.0) for entry in entries], dtype=float)
    densities = density_matrix(entries, catalog)

    if not entries or target.is_zero():
        solved = [replace(e, grams=round2(q)) for e, q in zip(entries, quantities)]
        totals = sum_totals(densities, quantities)
        return SolverResult(
            entries=solved,
            totals=totals,
            score=round2(score(target, totals)),
            iterations=0,
            stop_reason=StopReason.NOTHING_TO_SOLVE,
            solver_info={"elapsed_seconds": time.time() - start_time},
        )

    categories: list[Optional[FoodCategory]] = []
    for entry in entries:
        food = catalog.get(entry.food_id)
        categories.append(food.category if food is not None else None)

    before_seed = quantities.copy()
    seed_quantities(quantities, densities, categories, target, config.seed_fraction)
    seeded_grams = float(np.sum(quantities - before_seed))

    iterations, stop_reason = local_search(quantities, densities, target, config)

    solved = [replace(e, grams=round2(q)) for e, q in zip(entries, quantities)]
    totals = sum_totals(densities, quantities)
    final_score = score(target, totals)
    elapsed = time.time() - start_time

    logger.debug(
        "Solved %d entries: %d moves, score %.2f, stopped (%s) in %.3fs",
        len(entries),
        iterations,
        final_score,
        stop_reason.value,
        elapsed,
    )

    return SolverResult(
        entries=solved,
        totals=totals,
        score=round2(final_score),
        iterations=iterations,
        stop_reason=stop_reason,
        solver_info={
            "elapsed_seconds": elapsed,
            "seeded_grams": round2(seeded_grams),
        },
    )


def solve_quantities(
    entries: list[PlanEntry],
    catalog: FoodCatalog,
    target: MacroTarget,
    config: Optional[SolverConfig] = None,
) -> list[PlanEntry]:
    """Like solve_day(), returning only the solved entries."""
    return solve_day(entries, catalog, target, config).entries
