"""Persisted session state: profile, day plans, custom foods, language."""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from typing import Any

from carbcycle.cycle.models import PlannerProfile
from carbcycle.cycle.placement import normalize_placement
from carbcycle.db.connection import DatabaseConnection
from carbcycle.exceptions import StoreError
from carbcycle.foods.catalog import food_to_dict, parse_foods
from carbcycle.foods.models import FoodItem
from carbcycle.optimizer.models import PlanEntry
from carbcycle.serialization import (
    deserialize_plans,
    deserialize_profile,
    serialize_plans,
    serialize_profile,
)

logger = logging.getLogger(__name__)

STORAGE_KEYS = {
    "profile": "cc_profile_v2",
    "plans": "cc_day_plans_v2",
    "custom_foods": "cc_custom_foods_v2",
    "lang": "cc_lang_v2",
}


class SessionStore:
    """Key/value JSON documents in the kv table."""

    def __init__(self, db: DatabaseConnection):
        self.db = db

    def get(self, key: str, default: Any = None) -> Any:
        """Decoded value for a key, or default if it was never set.

        Raises:
            StoreError: If the stored value is not valid JSON
        """
        with self.db.get_connection() as conn:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        if row is None:
            return default
        try:
            return json.loads(row["value"])
        except json.JSONDecodeError as e:
            raise StoreError(f"Stored value for {key} is corrupt: {e}", key=key) from e

    def set(self, key: str, value: Any) -> None:
        payload = json.dumps(value, ensure_ascii=False)
        with self.db.get_connection() as conn:
            conn.execute(
                """
                INSERT INTO kv (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, payload),
            )
        logger.debug("Saved %s (%d bytes)", key, len(payload))

    def delete(self, key: str) -> None:
        with self.db.get_connection() as conn:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))

    # Typed accessors

    def load_profile(self) -> PlannerProfile:
        """Stored profile with its placement normalized, or the default profile."""
        data = self.get(STORAGE_KEYS["profile"])
        profile = deserialize_profile(data) if data is not None else PlannerProfile()
        return replace(profile, day_placement=normalize_placement(profile))

    def save_profile(self, profile: PlannerProfile) -> None:
        self.set(STORAGE_KEYS["profile"], serialize_profile(profile))

    def load_plans(self) -> dict[int, list[PlanEntry]]:
        return deserialize_plans(self.get(STORAGE_KEYS["plans"], {}))

    def save_plans(self, plans: dict[int, list[PlanEntry]]) -> None:
        self.set(STORAGE_KEYS["plans"], serialize_plans(plans))

    def load_custom_foods(self) -> list[FoodItem]:
        return parse_foods(self.get(STORAGE_KEYS["custom_foods"], []))

    def save_custom_foods(self, foods: list[FoodItem]) -> None:
        self.set(STORAGE_KEYS["custom_foods"], [food_to_dict(f) for f in foods])

    def load_language(self, default: str = "en") -> str:
        return self.get(STORAGE_KEYS["lang"], default)

    def save_language(self, language: str) -> None:
        self.set(STORAGE_KEYS["lang"], language)
