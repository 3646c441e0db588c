"""Tests for profile validation."""

from __future__ import annotations

from dataclasses import replace

from carbcycle.cycle.models import DayType, MacroShares
from carbcycle.cycle.validation import MESSAGES, validate_profile


class TestValidateProfile:
    """Tests for validate_profile()."""

    def test_default_profile_is_valid(self, default_profile):
        assert validate_profile(default_profile) == []

    def test_counts_must_sum_to_cycle_days(self, default_profile):
        profile = replace(default_profile, cycle_days=6)
        errors = validate_profile(profile)
        assert MESSAGES["counts_sum"]["en"] in errors

    def test_carb_shares_must_sum_to_one(self, default_profile):
        profile = replace(default_profile, carb_shares=MacroShares(0.5, 0.3, 0.1))
        assert validate_profile(profile) == [MESSAGES["carb_shares"]["en"]]

    def test_fat_shares_must_sum_to_one(self, default_profile):
        profile = replace(default_profile, fat_shares=MacroShares(0.5, 0.5, 0.5))
        assert validate_profile(profile) == [MESSAGES["fat_shares"]["en"]]

    def test_share_tolerance(self, default_profile):
        profile = replace(default_profile, carb_shares=MacroShares(0.5, 0.35, 0.1500005))
        assert validate_profile(profile) == []

    def test_placement_counts_must_match(self, default_profile):
        profile = replace(default_profile, day_placement=[DayType.HIGH] * 5)
        assert validate_profile(profile) == [MESSAGES["placement_counts"]["en"]]

    def test_all_checks_reported(self, default_profile):
        """Checks do not short-circuit."""
        profile = replace(
            default_profile,
            n_high=1,
            n_medium=1,
            n_low=1,
            carb_shares=MacroShares(0.5, 0.5, 0.5),
            fat_shares=MacroShares(0.0, 0.0, 0.0),
        )
        errors = validate_profile(profile)
        assert errors == [
            MESSAGES["counts_sum"]["en"],
            MESSAGES["carb_shares"]["en"],
            MESSAGES["fat_shares"]["en"],
            MESSAGES["placement_counts"]["en"],
        ]

    def test_does_not_modify_profile(self, default_profile):
        profile = replace(default_profile, day_placement=[DayType.LOW] * 5)
        validate_profile(profile)
        assert profile.day_placement == [DayType.LOW] * 5

    def test_chinese_messages(self, default_profile):
        profile = replace(default_profile, carb_shares=MacroShares(1.0, 1.0, 1.0))
        assert validate_profile(profile, "zh") == [MESSAGES["carb_shares"]["zh"]]

    def test_unknown_language_falls_back_to_english(self, default_profile):
        profile = replace(default_profile, carb_shares=MacroShares(1.0, 1.0, 1.0))
        assert validate_profile(profile, "fr") == [MESSAGES["carb_shares"]["en"]]
