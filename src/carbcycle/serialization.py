"""Serialization of profiles and day plans to plain dicts.

The dict format is what the session store writes as JSON and what profile
YAML files contain::

    weight_kg: 70
    body_type: endo
    protein_per_kg: 1.2
    cycle_days: 5
    counts: {high: 2, medium: 2, low: 1}
    carb_shares: {high: 0.5, medium: 0.35, low: 0.15}
    fat_shares: {high: 0.15, medium: 0.35, low: 0.5}
    day_placement: [High, High, Medium, Medium, Low]

Missing keys take the PlannerProfile defaults.
"""

from __future__ import annotations

import math
from typing import Any, Optional

from carbcycle.cycle.models import BodyType, DayType, MacroShares, PlannerProfile
from carbcycle.exceptions import InvalidProfileError
from carbcycle.foods.models import Basis
from carbcycle.optimizer.models import PlanEntry


def _shares_to_dict(shares: MacroShares) -> dict[str, float]:
    return {"high": shares.high, "medium": shares.medium, "low": shares.low}


def _shares_from_dict(data: Any, default: MacroShares) -> MacroShares:
    if data is None:
        return default
    if not isinstance(data, dict):
        raise InvalidProfileError(f"Shares must be a mapping, got {data!r}")
    return MacroShares(
        high=float(data.get("high", default.high)),
        medium=float(data.get("medium", default.medium)),
        low=float(data.get("low", default.low)),
    )


def serialize_profile(profile: PlannerProfile) -> dict[str, Any]:
    """Convert a PlannerProfile to a JSON/YAML-serializable dict."""
    return {
        "sex": profile.sex,
        "weight_kg": profile.weight_kg,
        "body_type": profile.body_type.value,
        "protein_per_kg": profile.protein_per_kg,
        "ecto_fat_per_kg": profile.ecto_fat_per_kg,
        "cycle_days": profile.cycle_days,
        "counts": {
            "high": profile.n_high,
            "medium": profile.n_medium,
            "low": profile.n_low,
        },
        "carb_shares": _shares_to_dict(profile.carb_shares),
        "fat_shares": _shares_to_dict(profile.fat_shares),
        "day_placement": [d.value for d in profile.day_placement],
    }


def check_body_metrics(
    weight_kg: Optional[float] = None,
    protein_per_kg: Optional[float] = None,
    ecto_fat_per_kg: Optional[float] = None,
) -> None:
    """Reject body metrics that would produce negative or undefined targets.

    Weight must be a finite positive number; the per-kg rates must be finite
    and non-negative. Arguments left as None are not checked.

    Raises:
        InvalidProfileError: Naming the first offending field
    """
    if weight_kg is not None and not (math.isfinite(weight_kg) and weight_kg > 0):
        raise InvalidProfileError(f"weight_kg must be a positive number, got {weight_kg}")
    for name, value in (("protein_per_kg", protein_per_kg), ("ecto_fat_per_kg", ecto_fat_per_kg)):
        if value is not None and not (math.isfinite(value) and value >= 0):
            raise InvalidProfileError(f"{name} must be zero or more, got {value}")


def deserialize_profile(data: dict[str, Any]) -> PlannerProfile:
    """Build a PlannerProfile from a dict produced by serialize_profile().

    Raises:
        InvalidProfileError: On wrong types, unknown enum values or body
            metrics rejected by check_body_metrics()
    """
    if not isinstance(data, dict):
        raise InvalidProfileError(f"Profile must be a mapping, got {type(data).__name__}")

    defaults = PlannerProfile()
    try:
        counts = data.get("counts") or {}
        placement = data.get("day_placement")
        profile = PlannerProfile(
            sex=str(data.get("sex", defaults.sex)),
            weight_kg=float(data.get("weight_kg", defaults.weight_kg)),
            body_type=BodyType(data.get("body_type", defaults.body_type.value)),
            protein_per_kg=float(data.get("protein_per_kg", defaults.protein_per_kg)),
            ecto_fat_per_kg=float(data.get("ecto_fat_per_kg", defaults.ecto_fat_per_kg)),
            cycle_days=int(data.get("cycle_days", defaults.cycle_days)),
            n_high=int(counts.get("high", defaults.n_high)),
            n_medium=int(counts.get("medium", defaults.n_medium)),
            n_low=int(counts.get("low", defaults.n_low)),
            carb_shares=_shares_from_dict(data.get("carb_shares"), defaults.carb_shares),
            fat_shares=_shares_from_dict(data.get("fat_shares"), defaults.fat_shares),
            day_placement=(
                [DayType(d) for d in placement]
                if placement is not None
                else list(defaults.day_placement)
            ),
        )
    except (TypeError, ValueError, AttributeError) as e:
        raise InvalidProfileError(f"Invalid profile: {e}") from e

    check_body_metrics(profile.weight_kg, profile.protein_per_kg, profile.ecto_fat_per_kg)
    return profile


def serialize_entries(entries: list[PlanEntry]) -> list[dict[str, Any]]:
    return [
        {"food_id": e.food_id, "basis": e.basis.value, "grams": e.grams}
        for e in entries
    ]


def deserialize_entries(data: list[dict[str, Any]]) -> list[PlanEntry]:
    return [
        PlanEntry(
            food_id=str(item["food_id"]),
            basis=Basis(item.get("basis", "raw")),
            grams=float(item.get("grams") or 0.0),
        )
        for item in data
    ]


def serialize_plans(plans: dict[int, list[PlanEntry]]) -> dict[str, Any]:
    """Day number -> entries, with string keys for JSON."""
    return {str(day): serialize_entries(entries) for day, entries in sorted(plans.items())}


def deserialize_plans(data: dict[str, Any]) -> dict[int, list[PlanEntry]]:
    return {int(day): deserialize_entries(entries) for day, entries in data.items()}
