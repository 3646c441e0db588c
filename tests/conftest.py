"""Pytest fixtures for carbcycle tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from carbcycle.cycle.models import PlannerProfile
from carbcycle.db.connection import DatabaseConnection
from carbcycle.db.store import SessionStore
from carbcycle.foods.catalog import parse_foods
from carbcycle.foods.models import FoodCatalog

# Per-100g values, roughly USDA
SAMPLE_FOOD_RECORDS = [
    {
        "id": "chicken_breast",
        "name_en": "Chicken breast",
        "name_zh": "鸡胸肉",
        "category": "protein",
        "emoji": "🍗",
        "variants": [
            {"basis": "raw", "kcal": 120, "p": 22.5, "c": 0, "f": 2.6},
            {"basis": "cooked", "kcal": 165, "p": 31, "c": 0, "f": 3.6},
        ],
    },
    {
        "id": "white_rice",
        "name_en": "White rice",
        "name_zh": "白米饭",
        "category": "carb",
        "emoji": "🍚",
        "variants": [
            {"basis": "raw", "kcal": 365, "p": 7.1, "c": 80, "f": 0.7},
            {"basis": "cooked", "kcal": 130, "p": 2.7, "c": 28, "f": 0.3},
        ],
    },
    {
        "id": "olive_oil",
        "name_en": "Olive oil",
        "name_zh": "橄榄油",
        "category": "fat",
        "emoji": "🫒",
        "variants": [{"basis": "raw", "kcal": 884, "p": 0, "c": 0, "f": 100}],
    },
    {
        "id": "broccoli",
        "name_en": "Broccoli",
        "name_zh": "西兰花",
        "category": "veg",
        "emoji": "🥦",
        "variants": [{"basis": "fresh", "kcal": 34, "p": 2.8, "c": 7, "f": 0.4}],
    },
    {
        "id": "egg",
        "name_en": "Egg, whole",
        "name_zh": "鸡蛋",
        "category": "protein",
        "emoji": "🥚",
        "variants": [{"basis": "raw", "kcal": 143, "p": 13, "c": 1.1, "f": 10}],
    },
]


@pytest.fixture
def sample_foods():
    """Well-formed sample foods."""
    return parse_foods(SAMPLE_FOOD_RECORDS)


@pytest.fixture
def catalog(sample_foods) -> FoodCatalog:
    """Catalog of the sample foods."""
    return FoodCatalog.from_foods(sample_foods)


@pytest.fixture
def catalog_file(tmp_path) -> Path:
    """Sample foods written as a JSON catalog file."""
    path = tmp_path / "foods.json"
    data = {"version": 1, "units": "per_100g", "foods": SAMPLE_FOOD_RECORDS}
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def default_profile() -> PlannerProfile:
    """70 kg endo profile, 5-day cycle with 2 High, 2 Medium, 1 Low."""
    return PlannerProfile()


@pytest.fixture
def temp_db(tmp_path) -> DatabaseConnection:
    """Create a temporary database with schema."""
    return DatabaseConnection(tmp_path / "carbcycle.db")


@pytest.fixture
def store(temp_db) -> SessionStore:
    return SessionStore(temp_db)
