"""Food items with per-100g macro densities."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Basis(Enum):
    """Preparation state a set of densities refers to."""

    RAW = "raw"
    COOKED = "cooked"
    FRESH = "fresh"


class FoodCategory(Enum):
    """Catalog category of a food."""

    PROTEIN = "protein"
    CARB = "carb"
    FAT = "fat"
    VEG = "veg"
    FRUIT = "fruit"
    DAIRY = "dairy"
    OTHER = "other"


@dataclass(frozen=True)
class FoodVariant:
    """Macro densities per 100g for one preparation basis."""

    basis: Basis
    p: float
    c: float
    f: float
    kcal: Optional[float] = None


@dataclass
class FoodItem:
    """A catalog food.

    A food always has at least one variant; the first one is the fallback
    when a plan asks for a basis the food does not list.
    """

    id: str
    name_en: str
    name_zh: str
    category: FoodCategory
    variants: list[FoodVariant]
    emoji: str = " "

    def variant(self, basis: Basis) -> FoodVariant:
        """Variant for the given basis, or the first variant."""
        for v in self.variants:
            if v.basis is basis:
                return v
        return self.variants[0]

    @property
    def default_basis(self) -> Basis:
        return self.variants[0].basis

    def display_name(self, language: str = "en") -> str:
        if language == "zh" and self.name_zh:
            return self.name_zh
        return self.name_en


@dataclass
class FoodCatalog:
    """Foods keyed by id, in insertion order.

    Later foods with a repeated id replace earlier ones, so custom foods
    merged after the built-ins take precedence.
    """

    foods: dict[str, FoodItem] = field(default_factory=dict)
    version: int = 1
    units: str = "per_100g"

    @classmethod
    def from_foods(cls, foods: list[FoodItem], version: int = 1, units: str = "per_100g") -> FoodCatalog:
        return cls(foods={f.id: f for f in foods}, version=version, units=units)

    def get(self, food_id: str) -> Optional[FoodItem]:
        """Look up a food; None when the id is not in the catalog."""
        return self.foods.get(food_id)

    def __contains__(self, food_id: object) -> bool:
        return food_id in self.foods

    def __len__(self) -> int:
        return len(self.foods)

    def __iter__(self):
        return iter(self.foods.values())

    def merged_with(self, extra: list[FoodItem]) -> FoodCatalog:
        """New catalog with extra foods added after the existing ones."""
        merged = dict(self.foods)
        for food in extra:
            merged[food.id] = food
        return FoodCatalog(foods=merged, version=self.version, units=self.units)

    def search(
        self,
        query: str = "",
        category: Optional[FoodCategory] = None,
    ) -> list[FoodItem]:
        """Foods whose English or Chinese name contains the query.

        Args:
            query: Case-insensitive substring; blank matches everything
            category: Only return foods in this category

        Returns:
            Matching foods in catalog order
        """
        q = query.strip().lower()
        results = []
        for food in self.foods.values():
            if category is not None and food.category is not category:
                continue
            if q and q not in food.name_en.lower() and q not in food.name_zh.lower():
                continue
            results.append(food)
        return results
