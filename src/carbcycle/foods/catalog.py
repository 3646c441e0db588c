"""Loading food catalogs and creating custom foods.

Catalog files hold ``{"version": 1, "units": "per_100g", "foods": [...]}``
where each food looks like::

    {"id": "chicken_breast", "name_en": "Chicken breast", "name_zh": "鸡胸肉",
     "category": "protein", "emoji": "🍗",
     "variants": [{"basis": "raw", "kcal": 120, "p": 22.5, "c": 0, "f": 2.6}]}

Records that cannot be used are dropped here so the calculation code only
ever sees well-formed foods.
"""

from __future__ import annotations

import json
import logging
import math
import time
from pathlib import Path
from typing import Any, Optional

import yaml

from carbcycle.exceptions import CatalogError
from carbcycle.foods.models import Basis, FoodCatalog, FoodCategory, FoodItem, FoodVariant

logger = logging.getLogger(__name__)


def _parse_variant(data: Any) -> Optional[FoodVariant]:
    if not isinstance(data, dict):
        return None
    try:
        basis = Basis(data.get("basis", "raw"))
        p = float(data["p"])
        c = float(data["c"])
        f = float(data["f"])
        kcal = data.get("kcal")
        kcal = float(kcal) if kcal is not None else None
    except (KeyError, TypeError, ValueError):
        return None
    densities = (p, c, f) if kcal is None else (p, c, f, kcal)
    if not all(math.isfinite(x) and x >= 0 for x in densities):
        return None
    return FoodVariant(basis=basis, p=p, c=c, f=f, kcal=kcal)


def parse_food(data: Any) -> Optional[FoodItem]:
    """Build a FoodItem from a catalog record.

    Returns:
        The food, or None if the record has no id, an unknown category
        or no usable variant
    """
    if not isinstance(data, dict):
        return None

    food_id = data.get("id")
    if not food_id:
        return None

    try:
        category = FoodCategory(data.get("category", "other"))
    except ValueError:
        logger.warning("Food %s has unknown category %r", food_id, data.get("category"))
        return None

    variants = []
    for raw in data.get("variants") or []:
        variant = _parse_variant(raw)
        if variant is None:
            logger.warning("Dropping malformed variant of food %s: %r", food_id, raw)
            continue
        variants.append(variant)
    if not variants:
        return None

    name_en = str(data.get("name_en") or food_id)
    return FoodItem(
        id=str(food_id),
        name_en=name_en,
        name_zh=str(data.get("name_zh") or name_en),
        category=category,
        variants=variants,
        emoji=str(data.get("emoji") or " "),
    )


def parse_foods(records: list[Any]) -> list[FoodItem]:
    """Parse a list of food records, skipping the unusable ones."""
    foods = []
    for record in records:
        food = parse_food(record)
        if food is None:
            logger.warning("Skipping malformed food record: %r", record)
            continue
        foods.append(food)
    return foods


def food_to_dict(food: FoodItem) -> dict[str, Any]:
    """Convert a FoodItem back to its catalog record."""
    variants = []
    for v in food.variants:
        record: dict[str, Any] = {"basis": v.basis.value}
        if v.kcal is not None:
            record["kcal"] = v.kcal
        record.update({"p": v.p, "c": v.c, "f": v.f})
        variants.append(record)
    return {
        "id": food.id,
        "name_en": food.name_en,
        "name_zh": food.name_zh,
        "category": food.category.value,
        "emoji": food.emoji,
        "variants": variants,
    }


def load_catalog(path: Path) -> FoodCatalog:
    """Read a catalog from a JSON or YAML file.

    Args:
        path: Catalog file; ``.yaml``/``.yml`` is read as YAML, anything
            else as JSON

    Returns:
        FoodCatalog with the well-formed foods

    Raises:
        CatalogError: If the file is missing or cannot be parsed
    """
    if not path.exists():
        raise CatalogError(f"Food catalog not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            if path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(f) or {}
            else:
                data = json.load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise CatalogError(f"Could not parse food catalog {path}: {e}") from e

    if isinstance(data, list):
        data = {"foods": data}
    if not isinstance(data, dict):
        raise CatalogError(f"Food catalog {path} must be a mapping with a 'foods' list")

    foods = parse_foods(data.get("foods") or [])
    logger.debug("Loaded %d foods from %s", len(foods), path)
    return FoodCatalog.from_foods(
        foods,
        version=int(data.get("version", 1)),
        units=str(data.get("units", "per_100g")),
    )


def make_custom_food(
    name_en: str,
    name_zh: str = "",
    category: FoodCategory = FoodCategory.OTHER,
    basis: Basis = Basis.RAW,
    p: float = 0.0,
    c: float = 0.0,
    f: float = 0.0,
    kcal: float = 0.0,
) -> FoodItem:
    """Create a single-variant user food.

    Raises:
        CatalogError: If the English name is blank or a density is negative
            or not finite
    """
    name_en = name_en.strip()
    if not name_en:
        raise CatalogError("Custom food name required.")
    for label, value in (("protein", p), ("carbs", c), ("fat", f), ("kcal", kcal)):
        if not (math.isfinite(value) and value >= 0):
            raise CatalogError(f"Custom food {label} must be zero or more, got {value}")
    return FoodItem(
        id=f"custom_{int(time.time() * 1000)}",
        name_en=name_en,
        name_zh=name_zh.strip() or name_en,
        category=category,
        variants=[FoodVariant(basis=basis, p=p, c=c, f=f, kcal=kcal)],
    )
