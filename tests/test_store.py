"""Tests for the session store."""

from __future__ import annotations

from dataclasses import replace

import pytest

from carbcycle.cycle.models import BodyType, DayType, MacroShares, PlannerProfile
from carbcycle.exceptions import InvalidProfileError, StoreError
from carbcycle.foods.catalog import make_custom_food
from carbcycle.foods.models import Basis, FoodCategory
from carbcycle.optimizer.models import PlanEntry
from carbcycle.serialization import check_body_metrics, deserialize_profile, serialize_profile


class TestProfilePersistence:
    """Tests for profile save/load."""

    def test_default_when_empty(self, store):
        assert store.load_profile() == PlannerProfile()

    def test_round_trip(self, store):
        profile = PlannerProfile(
            sex="Male",
            weight_kg=82.5,
            body_type=BodyType.ECTO,
            ecto_fat_per_kg=1.2,
            cycle_days=4,
            n_high=1,
            n_medium=1,
            n_low=2,
            carb_shares=MacroShares(0.6, 0.3, 0.1),
            day_placement=[DayType.LOW, DayType.HIGH, DayType.LOW, DayType.MEDIUM],
        )
        store.save_profile(profile)
        assert store.load_profile() == profile

    def test_load_normalizes_placement(self, store):
        store.save_profile(replace(PlannerProfile(), day_placement=[DayType.HIGH] * 5))
        placement = store.load_profile().day_placement
        assert placement == [DayType.HIGH, DayType.HIGH, DayType.LOW, DayType.MEDIUM, DayType.MEDIUM]

    def test_overwrite(self, store):
        store.save_profile(PlannerProfile(weight_kg=60))
        store.save_profile(PlannerProfile(weight_kg=65))
        assert store.load_profile().weight_kg == 65

    def test_corrupt_value(self, store, temp_db):
        with temp_db.get_connection() as conn:
            conn.execute("INSERT INTO kv (key, value) VALUES (?, ?)", ("cc_profile_v2", "{oops"))
        with pytest.raises(StoreError) as exc_info:
            store.load_profile()
        assert exc_info.value.key == "cc_profile_v2"


class TestOtherState:
    """Tests for plans, custom foods and language."""

    def test_plans_round_trip(self, store):
        plans = {
            1: [PlanEntry("chicken_breast", Basis.COOKED, 180.5)],
            3: [PlanEntry("white_rice", Basis.RAW, 0), PlanEntry("egg", Basis.RAW, 100)],
        }
        store.save_plans(plans)
        assert store.load_plans() == plans

    def test_plans_default_empty(self, store):
        assert store.load_plans() == {}

    def test_custom_foods_round_trip(self, store):
        foods = [make_custom_food("Tofu", "豆腐", FoodCategory.PROTEIN, Basis.RAW, 8, 2, 4.8, 76)]
        store.save_custom_foods(foods)
        assert store.load_custom_foods() == foods

    def test_language(self, store):
        assert store.load_language() == "en"
        assert store.load_language(default="zh") == "zh"
        store.save_language("zh")
        assert store.load_language() == "zh"

    def test_delete(self, store):
        store.save_language("zh")
        store.delete("cc_lang_v2")
        assert store.get("cc_lang_v2") is None


class TestProfileSerialization:
    """Tests for profile dict conversion."""

    def test_missing_keys_use_defaults(self):
        profile = deserialize_profile({"weight_kg": 90})
        assert profile.weight_kg == 90
        assert profile.cycle_days == 5
        assert profile.carb_shares == PlannerProfile().carb_shares

    def test_round_trip(self):
        profile = PlannerProfile(weight_kg=77)
        assert deserialize_profile(serialize_profile(profile)) == profile

    def test_unknown_body_type(self):
        with pytest.raises(InvalidProfileError):
            deserialize_profile({"body_type": "meso"})

    def test_unknown_day_type(self):
        with pytest.raises(InvalidProfileError):
            deserialize_profile({"day_placement": ["High", "Extreme"]})

    def test_not_a_mapping(self):
        with pytest.raises(InvalidProfileError):
            deserialize_profile(["weight_kg", 70])


class TestBodyMetrics:
    """Tests for rejecting body metrics that give negative targets."""

    @pytest.mark.parametrize("weight", [-70, 0, float("nan"), float("inf")])
    def test_bad_weight(self, weight):
        with pytest.raises(InvalidProfileError):
            deserialize_profile({"weight_kg": weight})

    @pytest.mark.parametrize("field", ["protein_per_kg", "ecto_fat_per_kg"])
    @pytest.mark.parametrize("value", [-0.5, float("nan"), float("inf")])
    def test_bad_rates(self, field, value):
        with pytest.raises(InvalidProfileError):
            deserialize_profile({field: value})

    def test_zero_rates_allowed(self):
        profile = deserialize_profile({"protein_per_kg": 0, "ecto_fat_per_kg": 0})
        assert profile.protein_per_kg == 0

    def test_check_skips_missing_values(self):
        check_body_metrics()
        check_body_metrics(weight_kg=55.5)

    def test_stored_negative_weight_rejected_on_load(self, store):
        store.set("cc_profile_v2", {"weight_kg": -70})
        with pytest.raises(InvalidProfileError):
            store.load_profile()
