"""Editing a day's list of plan entries.

Functions return new lists; the input list is not modified.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from carbcycle.foods.models import Basis, FoodItem
from carbcycle.optimizer.models import PlanEntry


def toggle_entry(entries: list[PlanEntry], food: FoodItem) -> list[PlanEntry]:
    """Remove the food from the day if planned, otherwise add it at 0 g."""
    if any(e.food_id == food.id for e in entries):
        return [e for e in entries if e.food_id != food.id]
    return [*entries, PlanEntry(food_id=food.id, basis=food.default_basis, grams=0.0)]


def patch_entry(
    entries: list[PlanEntry],
    food_id: str,
    basis: Optional[Basis] = None,
    grams: Optional[float] = None,
) -> list[PlanEntry]:
    """Change the basis and/or grams of a planned food.

    Unknown food ids leave the list unchanged.
    """
    out = []
    for entry in entries:
        if entry.food_id == food_id:
            if basis is not None:
                entry = replace(entry, basis=basis)
            if grams is not None:
                entry = replace(entry, grams=grams)
        out.append(entry)
    return out
