"""Profile self-consistency checks.

Validation is advisory: it returns human-readable messages and never
modifies the profile. Every check runs, so a profile can report several
problems at once.
"""

from __future__ import annotations

from carbcycle.cycle.models import (
    DAY_TYPE_ORDER,
    SHARE_TOLERANCE,
    PlannerProfile,
    count_day_types,
)

MESSAGES: dict[str, dict[str, str]] = {
    "counts_sum": {
        "en": "Day counts must sum to cycle days.",
        "zh": "高中低碳天数之和必须等于周期天数。",
    },
    "carb_shares": {
        "en": "Carb shares must sum to 1.0.",
        "zh": "碳水分配比例之和必须为 1.0。",
    },
    "fat_shares": {
        "en": "Fat shares must sum to 1.0.",
        "zh": "脂肪分配比例之和必须为 1.0。",
    },
    "placement_counts": {
        "en": "Day placement must keep fixed counts for High/Medium/Low.",
        "zh": "逐日排布必须保持高/中/低碳天数不变。",
    },
}


def _message(key: str, language: str) -> str:
    translations = MESSAGES[key]
    return translations.get(language, translations["en"])


def validate_profile(profile: PlannerProfile, language: str = "en") -> list[str]:
    """Check a profile and describe every inconsistency found.

    Args:
        profile: Profile to check
        language: "en" or "zh"; unknown languages fall back to English

    Returns:
        List of messages, empty when the profile is valid
    """
    errors: list[str] = []

    if profile.n_high + profile.n_medium + profile.n_low != profile.cycle_days:
        errors.append(_message("counts_sum", language))

    if abs(profile.carb_shares.total() - 1) > SHARE_TOLERANCE:
        errors.append(_message("carb_shares", language))
    if abs(profile.fat_shares.total() - 1) > SHARE_TOLERANCE:
        errors.append(_message("fat_shares", language))

    placed = count_day_types(profile.day_placement)
    if any(placed[d] != profile.required_count(d) for d in DAY_TYPE_ORDER):
        errors.append(_message("placement_counts", language))

    return errors
