"""Tests for the serving-size solver."""

from __future__ import annotations

import pytest

from carbcycle.foods.catalog import parse_food
from carbcycle.foods.models import Basis
from carbcycle.optimizer.models import MacroTarget, PlanEntry, SolverConfig, StopReason
from carbcycle.optimizer.solver import score, solve_day, solve_quantities
from carbcycle.optimizer.totals import compute_totals


@pytest.fixture
def whey_catalog(catalog):
    """Catalog with a pure-protein powder (20 g protein per 100 g)."""
    whey = parse_food(
        {
            "id": "whey",
            "name_en": "Protein powder",
            "category": "protein",
            "variants": [{"basis": "raw", "p": 20, "c": 0, "f": 0}],
        }
    )
    return catalog.merged_with([whey])


@pytest.fixture
def day_entries():
    """A typical High day selection, all starting at 0 g."""
    return [
        PlanEntry("chicken_breast", Basis.RAW, 0),
        PlanEntry("white_rice", Basis.COOKED, 0),
        PlanEntry("olive_oil", Basis.RAW, 0),
        PlanEntry("broccoli", Basis.FRESH, 0),
    ]


HIGH_DAY = MacroTarget(p=84, c=175, f=21)


class TestSingleFood:
    """One protein food against a protein-only target."""

    def test_converges_to_exact_quantity(self, whey_catalog):
        """40 g protein at 20 g/100 g needs 200 g."""
        result = solve_day(
            [PlanEntry("whey", Basis.RAW, 0)], whey_catalog, MacroTarget(p=40, c=0, f=0)
        )

        assert result.entries[0].grams == pytest.approx(200)
        assert result.stop_reason is StopReason.CONVERGED
        assert result.converged
        assert result.score < 1

    def test_seeds_seventy_percent_then_steps(self, whey_catalog):
        """Seeding puts 140 g (28 g protein); each 5 g step adds 1 g protein."""
        result = solve_day(
            [PlanEntry("whey", Basis.RAW, 0)], whey_catalog, MacroTarget(p=40, c=0, f=0)
        )
        assert result.iterations == 12
        assert result.solver_info["seeded_grams"] == pytest.approx(140)

    def test_iteration_cap(self, whey_catalog):
        config = SolverConfig(max_iterations=3)
        result = solve_day(
            [PlanEntry("whey", Basis.RAW, 0)], whey_catalog, MacroTarget(p=40, c=0, f=0), config
        )
        assert result.entries[0].grams == pytest.approx(155)
        assert result.iterations == 3
        assert result.stop_reason is StopReason.MAX_ITERATIONS

    def test_local_optimum(self, whey_catalog):
        """Equal protein and fat density: no 5 g move improves the score."""
        food = parse_food(
            {
                "id": "even",
                "category": "protein",
                "variants": [{"basis": "raw", "p": 20, "c": 0, "f": 20}],
            }
        )
        catalog = whey_catalog.merged_with([food])
        result = solve_day([PlanEntry("even", Basis.RAW, 0)], catalog, MacroTarget(p=40, c=0, f=0))

        assert result.stop_reason is StopReason.LOCAL_OPTIMUM
        assert result.entries[0].grams == pytest.approx(140)


class TestSolveDay:
    """Tests for solve_day() on mixed selections."""

    def test_improves_on_empty_plan(self, catalog, day_entries):
        before = score(HIGH_DAY, compute_totals(day_entries, catalog))
        result = solve_day(day_entries, catalog, HIGH_DAY)

        assert result.score < before
        assert result.score < 10

    def test_totals_match_entries(self, catalog, day_entries):
        result = solve_day(day_entries, catalog, HIGH_DAY)
        recomputed = compute_totals(result.entries, catalog)

        assert recomputed.p == pytest.approx(result.totals.p, abs=0.05)
        assert recomputed.c == pytest.approx(result.totals.c, abs=0.05)
        assert recomputed.f == pytest.approx(result.totals.f, abs=0.05)

    def test_keeps_entry_identities(self, catalog, day_entries):
        result = solve_day(day_entries, catalog, HIGH_DAY)
        assert [(e.food_id, e.basis) for e in result.entries] == [
            (e.food_id, e.basis) for e in day_entries
        ]

    def test_quantities_never_negative(self, catalog):
        entries = [
            PlanEntry("chicken_breast", Basis.RAW, -40),
            PlanEntry("egg", Basis.RAW, 500),
            PlanEntry("olive_oil", Basis.RAW, 300),
        ]
        result = solve_day(entries, catalog, MacroTarget(p=30, c=10, f=5))
        assert all(e.grams >= 0 for e in result.entries)

    def test_deterministic(self, catalog, day_entries):
        first = solve_quantities(day_entries, catalog, HIGH_DAY)
        second = solve_quantities(day_entries, catalog, HIGH_DAY)
        assert first == second

    def test_input_not_modified(self, catalog, day_entries):
        solve_day(day_entries, catalog, HIGH_DAY)
        assert all(e.grams == 0 for e in day_entries)

    def test_grams_rounded(self, catalog, day_entries):
        result = solve_day(day_entries, catalog, HIGH_DAY)
        for entry in result.entries:
            assert entry.grams == round(entry.grams, 2)

    def test_unknown_food_left_alone(self, catalog):
        entries = [
            PlanEntry("ghost", Basis.RAW, 50),
            PlanEntry("chicken_breast", Basis.RAW, 0),
        ]
        result = solve_day(entries, catalog, MacroTarget(p=45, c=0, f=0))
        assert result.entries[0].grams == pytest.approx(50)

    def test_zero_density_food_not_seeded(self, catalog):
        """A protein-category food with no protein gets nothing from seeding."""
        food = parse_food(
            {
                "id": "gelatin_free",
                "category": "protein",
                "variants": [{"basis": "raw", "p": 0, "c": 0, "f": 0}],
            }
        )
        merged = catalog.merged_with([food])
        result = solve_day(
            [PlanEntry("gelatin_free", Basis.RAW, 0)], merged, MacroTarget(p=30, c=0, f=0)
        )
        assert result.entries[0].grams == 0
        assert result.stop_reason is StopReason.LOCAL_OPTIMUM

    def test_densest_food_seeded_first(self, catalog):
        """Cooked chicken (31 g/100 g) beats egg (13 g/100 g) for protein."""
        entries = [
            PlanEntry("egg", Basis.RAW, 0),
            PlanEntry("chicken_breast", Basis.COOKED, 0),
        ]
        config = SolverConfig(max_iterations=0)
        result = solve_day(entries, catalog, MacroTarget(p=100, c=0, f=0), config)

        assert result.entries[0].grams == 0
        assert result.entries[1].grams == pytest.approx(70 / 31 * 100, abs=0.01)


class TestNothingToSolve:
    """Empty selections and zero targets are no-ops."""

    def test_no_entries(self, catalog):
        result = solve_day([], catalog, HIGH_DAY)
        assert result.entries == []
        assert result.stop_reason is StopReason.NOTHING_TO_SOLVE

    def test_zero_target_keeps_quantities(self, catalog):
        entries = [
            PlanEntry("white_rice", Basis.COOKED, 120),
            PlanEntry("olive_oil", Basis.RAW, -5),
        ]
        result = solve_day(entries, catalog, MacroTarget(p=0, c=0, f=0))

        assert [e.grams for e in result.entries] == [120, 0]
        assert result.iterations == 0
        assert result.stop_reason is StopReason.NOTHING_TO_SOLVE


class TestScore:
    """Tests for the L1 objective."""

    def test_score(self):
        from carbcycle.optimizer.models import DayTotals

        target = MacroTarget(p=100, c=200, f=50)
        assert score(target, DayTotals(p=90, c=210, f=50)) == pytest.approx(20)
        assert score(target, DayTotals(p=100, c=200, f=50)) == 0
