"""CSV and XLSX export of targets, plans and deviations."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from carbcycle.cycle.models import DayTarget
from carbcycle.foods.models import FoodCatalog
from carbcycle.optimizer.deviation import cycle_deviations
from carbcycle.optimizer.models import PlanEntry
from carbcycle.optimizer.totals import entry_macros

TARGET_COLUMNS = ["day", "day_type", "protein_target_g", "carb_target_g", "fat_target_g"]


def targets_frame(targets: list[DayTarget]) -> pd.DataFrame:
    """One row per cycle day."""
    return pd.DataFrame(
        [
            {
                "day": t.day,
                "day_type": t.day_type.value,
                "protein_target_g": t.protein_target,
                "carb_target_g": t.carb_target,
                "fat_target_g": t.fat_target,
            }
            for t in targets
        ],
        columns=TARGET_COLUMNS,
    )


def plan_frame(
    targets: list[DayTarget],
    plans: dict[int, list[PlanEntry]],
    catalog: FoodCatalog,
) -> pd.DataFrame:
    """One row per planned food across the cycle, with its macros."""
    rows = []
    for target in targets:
        for entry in plans.get(target.day, []):
            food = catalog.get(entry.food_id)
            m = entry_macros(entry, catalog)
            rows.append(
                {
                    "day": target.day,
                    "food_id": entry.food_id,
                    "food_name": food.name_en if food is not None else entry.food_id,
                    "basis": entry.basis.value,
                    "grams": entry.grams,
                    "protein_g": m.p,
                    "carb_g": m.c,
                    "fat_g": m.f,
                    "kcal": m.kcal,
                }
            )
    return pd.DataFrame(
        rows,
        columns=[
            "day", "food_id", "food_name", "basis", "grams",
            "protein_g", "carb_g", "fat_g", "kcal",
        ],
    )


def deviations_frame(
    targets: list[DayTarget],
    plans: dict[int, list[PlanEntry]],
    catalog: FoodCatalog,
) -> pd.DataFrame:
    """Target, actual and difference per macro for every day."""
    rows = []
    for d in cycle_deviations(targets, plans, catalog):
        rows.append(
            {
                "day": d.day,
                "day_type": d.day_type.value,
                "protein_target_g": d.target.protein_target,
                "protein_actual_g": d.totals.p,
                "protein_diff_g": d.dp,
                "carb_target_g": d.target.carb_target,
                "carb_actual_g": d.totals.c,
                "carb_diff_g": d.dc,
                "fat_target_g": d.target.fat_target,
                "fat_actual_g": d.totals.f,
                "fat_diff_g": d.df,
                "kcal_actual": d.totals.kcal,
            }
        )
    return pd.DataFrame(rows)


def export_targets_csv(targets: list[DayTarget], path: Path) -> Path:
    """Write the cycle targets as CSV."""
    path.parent.mkdir(parents=True, exist_ok=True)
    targets_frame(targets).to_csv(path, index=False)
    return path


def export_xlsx(
    targets: list[DayTarget],
    plans: dict[int, list[PlanEntry]],
    catalog: FoodCatalog,
    path: Path,
) -> Path:
    """Write CycleTargets, DailyPlan and Deviations sheets to one workbook."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        targets_frame(targets).to_excel(writer, sheet_name="CycleTargets", index=False)
        plan_frame(targets, plans, catalog).to_excel(writer, sheet_name="DailyPlan", index=False)
        deviations_frame(targets, plans, catalog).to_excel(
            writer, sheet_name="Deviations", index=False
        )
    return path
