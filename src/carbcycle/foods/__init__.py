"""Food catalog model and loading."""

from carbcycle.foods.catalog import load_catalog, make_custom_food
from carbcycle.foods.models import Basis, FoodCatalog, FoodCategory, FoodItem, FoodVariant

__all__ = [
    "Basis",
    "FoodCatalog",
    "FoodCategory",
    "FoodItem",
    "FoodVariant",
    "load_catalog",
    "make_custom_food",
]
