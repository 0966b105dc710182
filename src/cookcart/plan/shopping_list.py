"""Shopping list generation from scaled recipes."""

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

from cookcart.logging_config import LoggingContext, get_logger
from cookcart.normalize.units import UnitConversionTable
from cookcart.plan.aisle import UNCATEGORIZED, AisleMapping, categorize
from cookcart.plan.grouping import (
    AggregatedIngredient,
    ScaledRecipe,
    aggregate_scaled_recipes,
)

logger = get_logger(__name__)


@dataclass
class Category:
    """A store section and the ingredients to buy there."""

    name: str
    ingredients: list[AggregatedIngredient] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "ingredients": [ingredient.to_dict() for ingredient in self.ingredients],
        }


@dataclass
class ShoppingList:
    """Categories in presentation order, "uncategorized" last."""

    categories: list[Category] = field(default_factory=list)

    @property
    def ingredient_count(self) -> int:
        return sum(len(category.ingredients) for category in self.categories)

    def category(self, name: str) -> Category | None:
        """Find a category by name."""
        for category in self.categories:
            if category.name == name:
                return category
        return None

    def ingredients(self) -> Iterator[AggregatedIngredient]:
        for category in self.categories:
            yield from category.ingredients

    def to_dict(self) -> dict[str, Any]:
        return {"categories": [category.to_dict() for category in self.categories]}


def assemble_shopping_list(
    categorized: Iterable[tuple[str, AggregatedIngredient]],
) -> ShoppingList:
    """
    Order categorized ingredients for presentation.

    Categories appear in the order their first ingredient appears, except
    "uncategorized", which always comes last. Ingredients keep their input
    order within a category.
    """
    by_category: dict[str, Category] = {}
    for category_name, ingredient in categorized:
        if category_name not in by_category:
            by_category[category_name] = Category(name=category_name)
        by_category[category_name].ingredients.append(ingredient)

    categories = [c for name, c in by_category.items() if name != UNCATEGORIZED]
    if UNCATEGORIZED in by_category:
        categories.append(by_category[UNCATEGORIZED])

    return ShoppingList(categories=categories)


class ShoppingListGenerator:
    """
    Generates shopping lists from scaled recipes with:
    - Per-recipe grouping of repeated ingredients
    - Quantity aggregation across recipes (e.g., 200 g + 1 cup -> 440 g)
    - Aisle categorization with an "uncategorized" fallback

    Holds only read-only configuration, so one generator can serve any
    number of independent requests.
    """

    def __init__(
        self,
        units: UnitConversionTable,
        aisle_mapping: AisleMapping | None = None,
    ):
        self.units = units
        self.aisle_mapping = aisle_mapping

    def generate(self, recipes: Sequence[ScaledRecipe]) -> ShoppingList:
        """
        Generate a shopping list.

        Args:
            recipes: Scaled recipes in the order they should be considered.

        Returns:
            Complete ShoppingList.
        """
        with LoggingContext(list_id=uuid4().hex[:8]):
            logger.info(f"Generating shopping list from {len(recipes)} recipes")

            aggregated = aggregate_scaled_recipes(recipes, self.units)
            categorized = categorize(aggregated, self.aisle_mapping)
            shopping_list = assemble_shopping_list(categorized)

            uncategorized = shopping_list.category(UNCATEGORIZED)
            logger.info(
                f"Generated shopping list: {shopping_list.ingredient_count} items in "
                f"{len(shopping_list.categories)} categories, "
                f"{len(uncategorized.ingredients) if uncategorized else 0} uncategorized"
            )

        return shopping_list


def build_shopping_list(
    recipes: Sequence[ScaledRecipe],
    units: UnitConversionTable,
    aisle_mapping: AisleMapping | None = None,
) -> ShoppingList:
    """Build a shopping list in one call."""
    return ShoppingListGenerator(units, aisle_mapping).generate(recipes)
