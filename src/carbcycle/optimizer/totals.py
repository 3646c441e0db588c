"""Summing a day's plan entries into realized macro totals.

Entries that reference a food missing from the catalog contribute nothing.
Plans are kept across catalog edits, so an entry can outlive its food; that
entry is skipped rather than reported as an error.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from carbcycle.foods.models import FoodCatalog, FoodVariant
from carbcycle.optimizer.models import DayTotals, PlanEntry
from carbcycle.rounding import round2

# Column order of density matrices and macro vectors
P, C, F, KCAL = 0, 1, 2, 3


def resolve_variant(entry: PlanEntry, catalog: FoodCatalog) -> Optional[FoodVariant]:
    """Variant an entry refers to, or None for an unknown food."""
    food = catalog.get(entry.food_id)
    if food is None:
        return None
    return food.variant(entry.basis)


def density_matrix(entries: list[PlanEntry], catalog: FoodCatalog) -> np.ndarray:
    """Per-100g densities for each entry, shape (n_entries, 4).

    Columns are protein, carbs, fat, kcal. Unresolved entries get a row of
    zeros and a missing kcal counts as 0.
    """
    densities = np.zeros((len(entries), 4))
    for i, entry in enumerate(entries):
        variant = resolve_variant(entry, catalog)
        if variant is None:
            continue
        densities[i] = (variant.p, variant.c, variant.f, variant.kcal or 0.0)
    return densities


def sum_totals(densities: np.ndarray, quantities: np.ndarray) -> DayTotals:
    """Totals for a quantity vector against a density matrix.

    Negative quantities are treated as 0. Sums are rounded once at the end.
    """
    ratios = np.maximum(quantities, 0.0) / 100.0
    sums = ratios @ densities if len(ratios) else np.zeros(4)
    return DayTotals(
        kcal=round2(sums[KCAL]),
        p=round2(sums[P]),
        c=round2(sums[C]),
        f=round2(sums[F]),
    )


def compute_totals(entries: list[PlanEntry], catalog: FoodCatalog) -> DayTotals:
    """Sum protein, carbs, fat and kcal over a day's entries.

    Args:
        entries: Planned foods for the day
        catalog: Foods to resolve entries against

    Returns:
        DayTotals rounded to 2 decimals
    """
    quantities = np.array([entry.grams for entry in entries], dtype=float)
    return sum_totals(density_matrix(entries, catalog), quantities)


def entry_macros(entry: PlanEntry, catalog: FoodCatalog) -> DayTotals:
    """Contribution of a single entry, for plan tables and exports."""
    return compute_totals([entry], catalog)
