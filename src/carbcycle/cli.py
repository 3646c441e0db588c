"""CLI interface using Typer."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import NoReturn, Optional

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from carbcycle.app_logging import configure_logging
from carbcycle.config import get_settings, reload_settings
from carbcycle.cycle.allocator import allocate_targets
from carbcycle.cycle.models import BodyType, DayTarget, DayType, MacroShares, PlannerProfile
from carbcycle.cycle.placement import (
    normalize_placement,
    resize_cycle,
    set_day_counts,
    set_placement,
)
from carbcycle.cycle.validation import validate_profile
from carbcycle.db import SessionStore, get_db
from carbcycle.exceptions import CarbCycleError
from carbcycle.export.formatters import JSONFormatter, MarkdownFormatter, TableFormatter
from carbcycle.export.spreadsheet import export_targets_csv, export_xlsx
from carbcycle.foods.catalog import load_catalog, make_custom_food
from carbcycle.foods.models import Basis, FoodCatalog, FoodCategory
from carbcycle.optimizer.deviation import cycle_deviations
from carbcycle.optimizer.models import MacroTarget
from carbcycle.optimizer.plan import patch_entry, toggle_entry
from carbcycle.optimizer.solver import solve_day
from carbcycle.optimizer.totals import compute_totals
from carbcycle.serialization import check_body_metrics, deserialize_profile, serialize_profile

app = typer.Typer(
    help="Carb-cycling macro targets and serving-size planner",
    no_args_is_help=True,
)
console = Console()

profile_app = typer.Typer(help="Edit the cycle profile")
foods_app = typer.Typer(help="Browse and add foods")
plan_app = typer.Typer(help="Plan foods for a cycle day")
export_app = typer.Typer(help="Export targets, plans and summaries")

app.add_typer(profile_app, name="profile")
app.add_typer(foods_app, name="foods")
app.add_typer(plan_app, name="plan")
app.add_typer(export_app, name="export")

_catalog_override: Optional[Path] = None


@app.callback()
def main(
    config: Optional[Path] = typer.Option(
        None, "--config", help="Path to config.yaml"
    ),
    catalog: Optional[Path] = typer.Option(
        None, "--catalog", help="Food catalog file (overrides config)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Load settings and configure logging before any command."""
    global _catalog_override
    try:
        settings = reload_settings(config) if config else get_settings()
    except CarbCycleError as e:
        fail(str(e))
    configure_logging("DEBUG" if verbose else settings.defaults.log_level)
    _catalog_override = catalog


# ============================================================================
# Helpers
# ============================================================================


def get_store() -> SessionStore:
    return SessionStore(get_db())


def load_profile(store: SessionStore) -> PlannerProfile:
    try:
        return store.load_profile()
    except CarbCycleError as e:
        fail(str(e))


def get_language(store: SessionStore) -> str:
    return store.load_language(default=get_settings().defaults.language)


def get_catalog(store: SessionStore) -> FoodCatalog:
    """Built-in catalog (if configured) merged with the stored custom foods."""
    path = _catalog_override or get_settings().catalog.path
    try:
        base = load_catalog(path) if path else FoodCatalog()
    except CarbCycleError as e:
        fail(str(e))
    return base.merged_with(store.load_custom_foods())


def fail(message: str) -> NoReturn:
    console.print(f"[red]{escape(message)}[/red]")
    raise typer.Exit(1)


def output_json(data) -> None:
    print(JSONFormatter().dumps(data))


def parse_day_type(value: str) -> DayType:
    for day_type in DayType:
        if value.lower() in (day_type.value.lower(), day_type.value[0].lower()):
            return day_type
    fail(f"Unknown day type: {value} (use High, Medium or Low)")


def require_day(store: SessionStore, day: int) -> DayTarget:
    target = allocate_targets(load_profile(store)).for_day(day)
    if target is None:
        fail(f"Day {day} is outside the cycle")
    return target


def show_validation(errors: list[str]) -> None:
    if not errors:
        console.print("[green]Profile is valid[/green]")
        return
    for error in errors:
        console.print(f"[red]! {error}[/red]")


# ============================================================================
# Profile commands
# ============================================================================


@profile_app.command("show")
def profile_show(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the current profile."""
    store = get_store()
    profile = load_profile(store)
    errors = validate_profile(profile, get_language(store))

    if json_output:
        output_json({"profile": serialize_profile(profile), "errors": errors})
        return

    table = Table(title="Profile", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Sex", profile.sex)
    table.add_row("Weight", f"{profile.weight_kg} kg")
    table.add_row("Body type", profile.body_type.value)
    table.add_row("Protein", f"{profile.protein_per_kg} g/kg")
    if profile.body_type is BodyType.ECTO:
        table.add_row("Ecto fat", f"{profile.ecto_fat_per_kg} g/kg")
    table.add_row("Cycle days", str(profile.cycle_days))
    table.add_row("High/Medium/Low", f"{profile.n_high}/{profile.n_medium}/{profile.n_low}")
    cs, fs = profile.carb_shares, profile.fat_shares
    table.add_row("Carb shares", f"{cs.high} / {cs.medium} / {cs.low}")
    table.add_row("Fat shares", f"{fs.high} / {fs.medium} / {fs.low}")
    table.add_row("Placement", " ".join(d.value for d in profile.day_placement))
    console.print(table)
    show_validation(errors)


@profile_app.command("init")
def profile_init(
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", help="YAML profile to import (defaults if omitted)"
    ),
) -> None:
    """Reset the profile to defaults or import it from a YAML file."""
    store = get_store()
    if file is None:
        profile = PlannerProfile()
    else:
        if not file.exists():
            fail(f"Profile file not found: {file}")
        try:
            with open(file) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            fail(f"Could not parse profile file {file}: {e}")
        try:
            profile = deserialize_profile(data)
        except CarbCycleError as e:
            fail(str(e))
    profile = replace(profile, day_placement=normalize_placement(profile))
    store.save_profile(profile)
    console.print("[green]Profile saved[/green]")
    show_validation(validate_profile(profile, get_language(store)))


@profile_app.command("set")
def profile_set(
    weight: Optional[float] = typer.Option(
        None, "--weight", min=0.0, help="Body weight (kg)"
    ),
    body_type: Optional[BodyType] = typer.Option(None, "--body-type", help="endo or ecto"),
    protein: Optional[float] = typer.Option(None, "--protein", min=0.0, help="Protein g/kg"),
    ecto_fat: Optional[float] = typer.Option(None, "--ecto-fat", min=0.0, help="Ecto fat g/kg"),
    sex: Optional[str] = typer.Option(None, "--sex"),
) -> None:
    """Change body metrics."""
    try:
        check_body_metrics(weight, protein, ecto_fat)
    except CarbCycleError as e:
        fail(str(e))
    store = get_store()
    profile = load_profile(store)
    changes = {}
    if weight is not None:
        changes["weight_kg"] = weight
    if body_type is not None:
        changes["body_type"] = body_type
    if protein is not None:
        changes["protein_per_kg"] = protein
    if ecto_fat is not None:
        changes["ecto_fat_per_kg"] = ecto_fat
    if sex is not None:
        changes["sex"] = sex
    if not changes:
        fail("Nothing to change")
    store.save_profile(replace(profile, **changes))
    console.print("[green]Profile updated[/green]")


@profile_app.command("resize")
def profile_resize(
    days: int = typer.Argument(..., help="New cycle length (1-30)"),
) -> None:
    """Change the cycle length and rebuild the placement."""
    store = get_store()
    profile = resize_cycle(load_profile(store), days)
    store.save_profile(profile)
    console.print(
        f"Cycle is now {profile.cycle_days} days "
        f"({profile.n_high}/{profile.n_medium}/{profile.n_low})"
    )


@profile_app.command("counts")
def profile_counts(
    high: int = typer.Argument(..., min=0),
    medium: int = typer.Argument(..., min=0),
    low: int = typer.Argument(..., min=0),
) -> None:
    """Set how many High, Medium and Low days the cycle has."""
    store = get_store()
    profile = set_day_counts(load_profile(store), high, medium, low)
    store.save_profile(profile)
    show_validation(validate_profile(profile, get_language(store)))


@profile_app.command("place")
def profile_place(
    day: int = typer.Argument(..., help="1-based day number"),
    day_type: str = typer.Argument(..., help="High, Medium or Low"),
) -> None:
    """Assign a day type to one day of the cycle."""
    store = get_store()
    try:
        profile = set_placement(load_profile(store), day - 1, parse_day_type(day_type))
    except IndexError as e:
        fail(str(e))
    store.save_profile(profile)
    show_validation(validate_profile(profile, get_language(store)))


@profile_app.command("shares")
def profile_shares(
    macro: str = typer.Argument(..., help="carb or fat"),
    high: float = typer.Argument(...),
    medium: float = typer.Argument(...),
    low: float = typer.Argument(...),
) -> None:
    """Set the High/Medium/Low split of the carb or fat total."""
    store = get_store()
    profile = load_profile(store)
    shares = MacroShares(high=high, medium=medium, low=low)
    if macro == "carb":
        profile = replace(profile, carb_shares=shares)
    elif macro == "fat":
        profile = replace(profile, fat_shares=shares)
    else:
        fail(f"Unknown macro: {macro} (use carb or fat)")
    store.save_profile(profile)
    show_validation(validate_profile(profile, get_language(store)))


@profile_app.command("normalize")
def profile_normalize() -> None:
    """Repair the placement so it matches the day counts."""
    store = get_store()
    profile = load_profile(store)
    profile = replace(profile, day_placement=normalize_placement(profile))
    store.save_profile(profile)
    console.print("Placement: " + " ".join(d.value for d in profile.day_placement))


@profile_app.command("validate")
def profile_validate() -> None:
    """Check the profile; exits with code 1 when it is invalid."""
    store = get_store()
    errors = validate_profile(load_profile(store), get_language(store))
    show_validation(errors)
    if errors:
        raise typer.Exit(1)


@app.command("lang")
def lang(language: str = typer.Argument(..., help="en or zh")) -> None:
    """Set the display language."""
    if language not in ("en", "zh"):
        fail("Language must be en or zh")
    get_store().save_language(language)
    console.print(f"Language set to {language}")


# ============================================================================
# Targets and deviations
# ============================================================================


@app.command()
def targets(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the per-day macro targets for the cycle."""
    store = get_store()
    profile = load_profile(store)
    cycle = allocate_targets(profile)
    errors = validate_profile(profile, get_language(store))
    if json_output:
        output_json(JSONFormatter().targets_to_dict(cycle, errors))
        return
    TableFormatter(console).format_targets(cycle, errors)


@app.command()
def deviations(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Compare every day's planned totals against its targets."""
    store = get_store()
    cycle = allocate_targets(load_profile(store))
    rows = cycle_deviations(cycle.day_targets, store.load_plans(), get_catalog(store))
    if json_output:
        output_json(JSONFormatter().deviations_to_dict(rows))
        return
    TableFormatter(console).format_deviations(rows)


# ============================================================================
# Food commands
# ============================================================================


def _print_foods(foods, language: str) -> None:
    table = Table(title="Foods")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Category")
    table.add_column("Basis")
    table.add_column("P/C/F per 100g", justify="right")
    for food in foods:
        for v in food.variants:
            table.add_row(
                food.id,
                food.display_name(language),
                food.category.value,
                v.basis.value,
                f"{v.p:g}/{v.c:g}/{v.f:g}",
            )
    console.print(table)


@foods_app.command("list")
def foods_list(
    category: Optional[FoodCategory] = typer.Option(None, "--category", "-c"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List catalog and custom foods."""
    foods_search("", category=category, json_output=json_output)


@foods_app.command("search")
def foods_search(
    query: str = typer.Argument(..., help="Name substring (English or Chinese)"),
    category: Optional[FoodCategory] = typer.Option(None, "--category", "-c"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Search foods by name."""
    store = get_store()
    catalog = get_catalog(store)
    results = catalog.search(query, category)

    if json_output:
        output_json([{"id": f.id, "name_en": f.name_en, "name_zh": f.name_zh,
                      "category": f.category.value} for f in results])
        return
    if not results:
        console.print(f"[yellow]No foods found matching '{query}'[/yellow]")
        return
    _print_foods(results, get_language(store))
    console.print(f"[dim]Showing {len(results)} results[/dim]")


@foods_app.command("add")
def foods_add(
    name_en: str = typer.Argument(..., help="English name"),
    name_zh: str = typer.Option("", "--zh", help="Chinese name"),
    category: FoodCategory = typer.Option(FoodCategory.OTHER, "--category", "-c"),
    basis: Basis = typer.Option(Basis.RAW, "--basis"),
    protein: float = typer.Option(0.0, "--protein", "-p", help="Protein g/100g"),
    carbs: float = typer.Option(0.0, "--carbs", help="Carbs g/100g"),
    fat: float = typer.Option(0.0, "--fat", help="Fat g/100g"),
    kcal: float = typer.Option(0.0, "--kcal", help="kcal/100g"),
) -> None:
    """Save a custom food."""
    store = get_store()
    try:
        food = make_custom_food(name_en, name_zh, category, basis, protein, carbs, fat, kcal)
    except CarbCycleError as e:
        fail(str(e))
    store.save_custom_foods([food, *store.load_custom_foods()])
    console.print(f"[green]Custom food saved:[/green] {food.id}")


# ============================================================================
# Plan commands
# ============================================================================


@plan_app.command("show")
def plan_show(
    day: int = typer.Argument(..., help="1-based day number"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show a day's foods, totals and remaining macros."""
    store = get_store()
    target = require_day(store, day)
    catalog = get_catalog(store)
    entries = store.load_plans().get(day, [])
    totals = compute_totals(entries, catalog)
    if json_output:
        output_json(JSONFormatter().day_to_dict(target, entries, totals, catalog))
        return
    TableFormatter(console).format_day(target, entries, totals, catalog, get_language(store))


@plan_app.command("toggle")
def plan_toggle(
    day: int = typer.Argument(..., help="1-based day number"),
    food_id: str = typer.Argument(..., help="Food ID"),
) -> None:
    """Add a food to a day, or remove it if already planned."""
    store = get_store()
    require_day(store, day)
    food = get_catalog(store).get(food_id)
    if food is None:
        fail(f"Food {food_id} not found")
    plans = store.load_plans()
    plans[day] = toggle_entry(plans.get(day, []), food)
    store.save_plans(plans)
    planned = any(e.food_id == food_id for e in plans[day])
    console.print(f"{food.name_en} {'added to' if planned else 'removed from'} day {day}")


@plan_app.command("set")
def plan_set(
    day: int = typer.Argument(..., help="1-based day number"),
    food_id: str = typer.Argument(..., help="Food ID"),
    grams: Optional[float] = typer.Option(None, "--grams", "-g", min=0),
    basis: Optional[Basis] = typer.Option(None, "--basis"),
) -> None:
    """Change the grams or basis of a planned food."""
    store = get_store()
    plans = store.load_plans()
    entries = plans.get(day, [])
    if not any(e.food_id == food_id for e in entries):
        fail(f"Food {food_id} is not planned on day {day}")
    plans[day] = patch_entry(entries, food_id, basis=basis, grams=grams)
    store.save_plans(plans)


@plan_app.command("clear")
def plan_clear(day: int = typer.Argument(..., help="1-based day number")) -> None:
    """Remove every food from a day."""
    store = get_store()
    plans = store.load_plans()
    plans.pop(day, None)
    store.save_plans(plans)


@plan_app.command("solve")
def plan_solve(
    day: int = typer.Argument(..., help="1-based day number"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Auto-generate grams for the day's foods to match its targets."""
    store = get_store()
    profile = load_profile(store)
    errors = validate_profile(profile, get_language(store))
    if errors:
        show_validation(errors)
        fail("Fix the profile before solving")

    target = require_day(store, day)
    catalog = get_catalog(store)
    plans = store.load_plans()
    entries = plans.get(day, [])
    if not entries:
        fail(f"No foods planned on day {day}")

    result = solve_day(
        entries,
        catalog,
        MacroTarget.from_day_target(target),
        get_settings().solver.to_solver_config(),
    )
    plans[day] = result.entries
    store.save_plans(plans)

    if json_output:
        data = JSONFormatter().day_to_dict(target, result.entries, result.totals, catalog)
        data["solver"] = {
            "stop_reason": result.stop_reason.value,
            "iterations": result.iterations,
            "score": result.score,
        }
        output_json(data)
        return
    formatter = TableFormatter(console)
    formatter.format_day(target, result.entries, result.totals, catalog, get_language(store))
    formatter.format_solver_result(result)


# ============================================================================
# Export commands
# ============================================================================


@export_app.command("csv")
def export_csv(
    path: Path = typer.Argument(Path("cycle_targets.csv"), help="Output file"),
) -> None:
    """Write the cycle targets as CSV."""
    cycle = allocate_targets(load_profile(get_store()))
    export_targets_csv(cycle.day_targets, path)
    console.print(f"[green]Wrote {path}[/green]")


@export_app.command("xlsx")
def export_workbook(
    path: Path = typer.Argument(Path("carbcycle_export.xlsx"), help="Output file"),
) -> None:
    """Write targets, daily plans and deviations to an XLSX workbook."""
    store = get_store()
    cycle = allocate_targets(load_profile(store))
    export_xlsx(cycle.day_targets, store.load_plans(), get_catalog(store), path)
    console.print(f"[green]Wrote {path}[/green]")


@export_app.command("poster")
def export_poster(
    day: Optional[int] = typer.Option(None, "--day", "-d", help="Day poster instead of cycle"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to file"),
) -> None:
    """Markdown summary of one day or the whole cycle."""
    store = get_store()
    profile = load_profile(store)
    catalog = get_catalog(store)
    plans = store.load_plans()
    formatter = MarkdownFormatter()

    if day is not None:
        target = require_day(store, day)
        entries = plans.get(day, [])
        text = formatter.day_poster(
            target, entries, compute_totals(entries, catalog), catalog, get_language(store)
        )
    else:
        cycle = allocate_targets(profile)
        text = formatter.cycle_poster(
            profile, cycle, cycle_deviations(cycle.day_targets, plans, catalog)
        )

    if output:
        output.write_text(text, encoding="utf-8")
        console.print(f"[green]Wrote {output}[/green]")
    else:
        print(text)


if __name__ == "__main__":
    app()
