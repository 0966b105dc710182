"""Ingredient grouping within a recipe and aggregation across recipes."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from cookcart.errors import IncompatibleUnitsError
from cookcart.logging_config import get_logger
from cookcart.normalize.quantity import UNSPECIFIED, Quantity, try_add
from cookcart.normalize.units import UnitConversionTable

logger = get_logger(__name__)


def ingredient_key(name: str) -> str:
    """Case-insensitive identity of an ingredient name."""
    return " ".join(name.split()).casefold()


@dataclass(frozen=True)
class IngredientOccurrence:
    """A single ingredient line taken from a scaled recipe."""

    name: str
    quantity: Quantity
    recipe_ref: str


@dataclass(frozen=True)
class ScaledRecipe:
    """A recipe whose quantities have already been multiplied by its scale."""

    id: str
    occurrences: tuple[IngredientOccurrence, ...] = ()
    name: str | None = None


@dataclass
class AggregatedIngredient:
    """
    An ingredient with its quantities merged.

    ``quantities`` holds one entry per group of mutually compatible units, in
    the order the groups were first seen. No two entries could be added
    together. ``sources`` lists contributing recipe ids once each.
    """

    name: str
    quantities: list[Quantity] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)

    @property
    def key(self) -> str:
        return ingredient_key(self.name)

    @property
    def is_unspecified(self) -> bool:
        return any(q.is_unspecified for q in self.quantities)

    def add_quantity(self, quantity: Quantity, table: UnitConversionTable) -> None:
        """Merge into the first compatible group, or open a new one."""
        for index, existing in enumerate(self.quantities):
            try:
                merged = try_add(existing, quantity, table)
            except IncompatibleUnitsError:
                continue

            if merged.is_unspecified:
                # Unspecified is compatible with every group, so it takes them all
                self.quantities = [Quantity(UNSPECIFIED)]
            else:
                self.quantities[index] = merged
            return

        self.quantities.append(quantity)

    def add_source(self, recipe_id: str) -> None:
        if recipe_id not in self.sources:
            self.sources.append(recipe_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "quantities": [q.to_dict() for q in self.quantities],
            "sources": list(self.sources),
        }


class _IngredientMerger:
    """Running, name-keyed merge state for a single grouping/aggregation call."""

    def __init__(self, table: UnitConversionTable):
        self.table = table
        self._entries: dict[str, AggregatedIngredient] = {}

    def add(self, name: str, quantities: Iterable[Quantity], sources: Iterable[str]) -> None:
        key = ingredient_key(name)
        entry = self._entries.get(key)
        if entry is None:
            entry = AggregatedIngredient(name=name)
            self._entries[key] = entry

        for quantity in quantities:
            entry.add_quantity(quantity, self.table)
        for source in sources:
            entry.add_source(source)

    def results(self) -> list[AggregatedIngredient]:
        return list(self._entries.values())


def group_ingredients(
    recipe: ScaledRecipe,
    table: UnitConversionTable,
) -> list[AggregatedIngredient]:
    """
    Merge repeated ingredients within one scaled recipe.

    Args:
        recipe: Recipe with already-scaled occurrences.
        table: Unit table used to decide compatibility.

    Returns:
        Aggregated ingredients in order of first appearance.
    """
    merger = _IngredientMerger(table)
    for occurrence in recipe.occurrences:
        merger.add(occurrence.name, [occurrence.quantity], [occurrence.recipe_ref])
    return merger.results()


def aggregate_recipes(
    grouped_recipes: Iterable[Sequence[AggregatedIngredient]],
    table: UnitConversionTable,
) -> list[AggregatedIngredient]:
    """
    Merge per-recipe groupings into one list.

    Recipes are processed in the given order and ingredients in their grouped
    order, so the output order is first appearance across the whole input.
    The inputs are not modified.
    """
    merger = _IngredientMerger(table)
    for grouped in grouped_recipes:
        for ingredient in grouped:
            merger.add(ingredient.name, ingredient.quantities, ingredient.sources)
    return merger.results()


def aggregate_scaled_recipes(
    recipes: Sequence[ScaledRecipe],
    table: UnitConversionTable,
) -> list[AggregatedIngredient]:
    """Group each recipe, then aggregate the groupings."""
    aggregated = aggregate_recipes(
        (group_ingredients(recipe, table) for recipe in recipes),
        table,
    )
    logger.debug(
        f"Aggregated {sum(len(r.occurrences) for r in recipes)} ingredient lines "
        f"from {len(recipes)} recipes into {len(aggregated)} ingredients"
    )
    return aggregated
