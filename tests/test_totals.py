"""Tests for day totals aggregation."""

from __future__ import annotations

import numpy as np
import pytest

from carbcycle.foods.catalog import parse_food
from carbcycle.foods.models import Basis
from carbcycle.optimizer.models import DayTotals, PlanEntry
from carbcycle.optimizer.totals import compute_totals, density_matrix, entry_macros, sum_totals


class TestComputeTotals:
    """Tests for compute_totals()."""

    def test_empty_entries(self, catalog):
        assert compute_totals([], catalog) == DayTotals(kcal=0, p=0, c=0, f=0)

    def test_sums_entries(self, catalog):
        entries = [
            PlanEntry("chicken_breast", Basis.RAW, 200),
            PlanEntry("white_rice", Basis.COOKED, 150),
        ]
        totals = compute_totals(entries, catalog)

        assert totals.p == pytest.approx(49.05)
        assert totals.c == pytest.approx(42)
        assert totals.f == pytest.approx(5.65)
        assert totals.kcal == pytest.approx(435)

    def test_variant_by_basis(self, catalog):
        raw = compute_totals([PlanEntry("chicken_breast", Basis.RAW, 100)], catalog)
        cooked = compute_totals([PlanEntry("chicken_breast", Basis.COOKED, 100)], catalog)
        assert raw.p == pytest.approx(22.5)
        assert cooked.p == pytest.approx(31)

    def test_missing_basis_falls_back_to_first_variant(self, catalog):
        totals = compute_totals([PlanEntry("olive_oil", Basis.COOKED, 10)], catalog)
        assert totals.f == pytest.approx(10)
        assert totals.kcal == pytest.approx(88.4)

    def test_unknown_food_contributes_nothing(self, catalog):
        entries = [
            PlanEntry("deleted_food", Basis.RAW, 500),
            PlanEntry("olive_oil", Basis.RAW, 10),
        ]
        totals = compute_totals(entries, catalog)
        assert totals == DayTotals(kcal=88.4, p=0, c=0, f=10)

    def test_negative_grams_clamped(self, catalog):
        entries = [
            PlanEntry("olive_oil", Basis.RAW, -50),
            PlanEntry("white_rice", Basis.COOKED, 100),
        ]
        totals = compute_totals(entries, catalog)
        assert totals.f == pytest.approx(0.3)
        assert totals.p >= 0 and totals.c >= 0 and totals.kcal >= 0

    def test_missing_kcal_counts_as_zero(self, catalog):
        food = parse_food(
            {"id": "mystery", "category": "other", "variants": [{"basis": "raw", "p": 1, "c": 2, "f": 3}]}
        )
        merged = catalog.merged_with([food])
        totals = compute_totals([PlanEntry("mystery", Basis.RAW, 100)], merged)
        assert totals == DayTotals(kcal=0, p=1, c=2, f=3)

    def test_rounded_once_at_the_end(self, catalog):
        """Three entries of 0.004 g fat each round to 0.01, not 0."""
        entries = [PlanEntry("olive_oil", Basis.RAW, 0.004)] * 3
        assert compute_totals(entries, catalog).f == pytest.approx(0.01)


class TestHelpers:
    """Tests for density_matrix(), sum_totals() and entry_macros()."""

    def test_density_matrix_rows(self, catalog):
        entries = [
            PlanEntry("broccoli", Basis.FRESH, 0),
            PlanEntry("nope", Basis.RAW, 0),
        ]
        densities = density_matrix(entries, catalog)
        assert densities.shape == (2, 4)
        np.testing.assert_allclose(densities[0], [2.8, 7, 0.4, 34])
        np.testing.assert_allclose(densities[1], [0, 0, 0, 0])

    def test_sum_totals_empty(self):
        assert sum_totals(np.zeros((0, 4)), np.array([])) == DayTotals()

    def test_entry_macros(self, catalog):
        m = entry_macros(PlanEntry("egg", Basis.RAW, 50), catalog)
        assert m == DayTotals(kcal=71.5, p=6.5, c=0.55, f=5)
