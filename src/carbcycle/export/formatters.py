"""Output formatters for cycle targets, day plans and deviations."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from carbcycle.cycle.models import CycleTargets, DayTarget, PlannerProfile
from carbcycle.foods.models import FoodCatalog
from carbcycle.optimizer.deviation import DayDeviation, delta_status, remaining
from carbcycle.optimizer.models import DayTotals, PlanEntry, SolverResult
from carbcycle.optimizer.totals import entry_macros

STATUS_STYLES = {"ok": "green", "warn": "yellow", "over": "red"}


def _food_name(entry: PlanEntry, catalog: FoodCatalog, language: str = "en") -> str:
    food = catalog.get(entry.food_id)
    return food.display_name(language) if food is not None else entry.food_id


def _signed(value: float) -> str:
    return f"{value:+.1f}"


class TableFormatter:
    """Format results as Rich tables for terminal display."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize the formatter.

        Args:
            console: Rich console for output. If None, creates a new one.
        """
        self.console = console or Console()

    def format_targets(self, cycle: CycleTargets, errors: Optional[list[str]] = None) -> None:
        """Print the cycle totals and the per-day target table."""
        header = (
            f"[bold]CYCLE TARGETS[/bold]\n"
            f"Protein/day: {cycle.protein_per_day} g | "
            f"Carbs total: {cycle.carb_total} g | Fat total: {cycle.fat_total} g"
        )
        self.console.print(Panel(header, title="Carb Cycle"))

        for error in errors or []:
            self.console.print(f"[red]! {error}[/red]")

        table = Table(title="Day Targets")
        table.add_column("Day", justify="right")
        table.add_column("Type")
        table.add_column("Protein (g)", justify="right")
        table.add_column("Carbs (g)", justify="right")
        table.add_column("Fat (g)", justify="right")
        for t in cycle.day_targets:
            table.add_row(
                str(t.day),
                t.day_type.value,
                f"{t.protein_target:.2f}",
                f"{t.carb_target:.2f}",
                f"{t.fat_target:.2f}",
            )
        self.console.print(table)

    def format_day(
        self,
        target: DayTarget,
        entries: list[PlanEntry],
        totals: DayTotals,
        catalog: FoodCatalog,
        language: str = "en",
    ) -> None:
        """Print a day's entries with their macros and the remaining grams."""
        table = Table(title=f"Day {target.day} ({target.day_type.value})")
        table.add_column("Food", style="cyan", max_width=40)
        table.add_column("Basis")
        table.add_column("Grams", justify="right")
        table.add_column("P", justify="right")
        table.add_column("C", justify="right")
        table.add_column("F", justify="right")
        table.add_column("kcal", justify="right")

        for entry in entries:
            m = entry_macros(entry, catalog)
            table.add_row(
                _food_name(entry, catalog, language),
                entry.basis.value,
                f"{entry.grams:.1f}",
                f"{m.p:.1f}",
                f"{m.c:.1f}",
                f"{m.f:.1f}",
                f"{m.kcal:.0f}",
            )

        table.add_row(
            "[bold]TOTAL[/bold]",
            "",
            "",
            f"[bold]{totals.p:.1f}[/bold]",
            f"[bold]{totals.c:.1f}[/bold]",
            f"[bold]{totals.f:.1f}[/bold]",
            f"[bold]{totals.kcal:.0f}[/bold]",
        )
        table.add_row(
            "[dim]TARGET[/dim]",
            "",
            "",
            f"{target.protein_target:.1f}",
            f"{target.carb_target:.1f}",
            f"{target.fat_target:.1f}",
            "",
        )
        self.console.print(table)

        parts = []
        for label, value in zip(("Protein", "Carb", "Fat"), remaining(target, totals)):
            style = STATUS_STYLES[delta_status(value)]
            parts.append(f"[{style}]{label} {_signed(value)}g[/{style}]")
        self.console.print("Remaining: " + "  ".join(parts))

    def format_deviations(self, deviations: list[DayDeviation]) -> None:
        """Print target vs actual for every day of the cycle."""
        table = Table(title="Deviations (actual - target)")
        table.add_column("Day", justify="right")
        table.add_column("Type")
        table.add_column("Protein", justify="right")
        table.add_column("Carbs", justify="right")
        table.add_column("Fat", justify="right")
        table.add_column("kcal", justify="right")
        for d in deviations:
            table.add_row(
                str(d.day),
                d.day_type.value,
                f"{d.totals.p:.1f} ({_signed(d.dp)})",
                f"{d.totals.c:.1f} ({_signed(d.dc)})",
                f"{d.totals.f:.1f} ({_signed(d.df)})",
                f"{d.totals.kcal:.0f}",
            )
        self.console.print(table)

    def format_solver_result(self, result: SolverResult) -> None:
        """Print a one-line summary of a solver run."""
        color = "green" if result.converged else "yellow"
        self.console.print(
            f"[{color}]{result.stop_reason.value}[/{color}] "
            f"after {result.iterations} moves, score {result.score:.2f}"
        )
        if "elapsed_seconds" in result.solver_info:
            self.console.print(f"[dim]Time: {result.solver_info['elapsed_seconds']:.3f}s[/dim]")


class JSONFormatter:
    """Format results as JSON for programmatic use."""

    def targets_to_dict(self, cycle: CycleTargets, errors: Optional[list[str]] = None) -> dict[str, Any]:
        return {
            "protein_per_day": cycle.protein_per_day,
            "carb_total": cycle.carb_total,
            "fat_total": cycle.fat_total,
            "errors": list(errors or []),
            "days": [
                {
                    "day": t.day,
                    "day_type": t.day_type.value,
                    "protein_target_g": t.protein_target,
                    "carb_target_g": t.carb_target,
                    "fat_target_g": t.fat_target,
                }
                for t in cycle.day_targets
            ],
        }

    def day_to_dict(
        self,
        target: DayTarget,
        entries: list[PlanEntry],
        totals: DayTotals,
        catalog: FoodCatalog,
    ) -> dict[str, Any]:
        rows = []
        for entry in entries:
            m = entry_macros(entry, catalog)
            rows.append(
                {
                    "food_id": entry.food_id,
                    "food_name": _food_name(entry, catalog),
                    "basis": entry.basis.value,
                    "grams": entry.grams,
                    "protein_g": m.p,
                    "carb_g": m.c,
                    "fat_g": m.f,
                    "kcal": m.kcal,
                }
            )
        rp, rc, rf = remaining(target, totals)
        return {
            "day": target.day,
            "day_type": target.day_type.value,
            "target": {"p": target.protein_target, "c": target.carb_target, "f": target.fat_target},
            "totals": {"kcal": totals.kcal, "p": totals.p, "c": totals.c, "f": totals.f},
            "remaining": {"p": rp, "c": rc, "f": rf},
            "entries": rows,
        }

    def deviations_to_dict(self, deviations: list[DayDeviation]) -> list[dict[str, Any]]:
        return [
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
            for d in deviations
        ]

    def dumps(self, data: Any) -> str:
        return json.dumps(data, indent=2, ensure_ascii=False)


class MarkdownFormatter:
    """Markdown summaries of a day or the whole cycle, for sharing."""

    def day_poster(
        self,
        target: DayTarget,
        entries: list[PlanEntry],
        totals: DayTotals,
        catalog: FoodCatalog,
        language: str = "en",
    ) -> str:
        dp, dc, df = (
            totals.p - target.protein_target,
            totals.c - target.carb_target,
            totals.f - target.fat_target,
        )
        lines = [
            f"# Day {target.day} Plan",
            "",
            f"**Type:** {target.day_type.value}",
            f"**Targets P/C/F:** {target.protein_target} / {target.carb_target} / {target.fat_target} g",
            f"**Actual P/C/F:** {totals.p} / {totals.c} / {totals.f} g",
            f"**Deviation:** {dp:.1f} / {dc:.1f} / {df:.1f} g",
            "",
            "## Foods",
            "",
            "| Food | Basis | Grams | P | C | F |",
            "|------|-------|-------|---|---|---|",
        ]
        for entry in entries:
            m = entry_macros(entry, catalog)
            lines.append(
                f"| {_food_name(entry, catalog, language)} | {entry.basis.value} | "
                f"{entry.grams:.1f} | {m.p:.1f} | {m.c:.1f} | {m.f:.1f} |"
            )
        return "\n".join(lines)

    def cycle_poster(
        self,
        profile: PlannerProfile,
        cycle: CycleTargets,
        deviations: list[DayDeviation],
    ) -> str:
        lines = [
            "# Cycle Summary",
            "",
            f"_Generated {datetime.now().strftime('%Y-%m-%d %H:%M')}_",
            "",
            f"**Weight:** {profile.weight_kg} kg, **Body:** {profile.body_type.value}",
            f"**Cycle Days:** {profile.cycle_days}",
            f"**P_day** = {cycle.protein_per_day} g, **C_total** = {cycle.carb_total} g, "
            f"**F_total** = {cycle.fat_total} g",
            "",
            "## Day Targets & Deviations",
            "",
            "| Day | Type | P target | C target | F target | dP | dC | dF |",
            "|-----|------|----------|----------|----------|----|----|----|",
        ]
        for d in deviations:
            lines.append(
                f"| {d.day} | {d.day_type.value} | {d.target.protein_target} | "
                f"{d.target.carb_target} | {d.target.fat_target} | "
                f"{d.dp:.1f} | {d.dc:.1f} | {d.df:.1f} |"
            )
        return "\n".join(lines)
