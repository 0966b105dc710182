"""Shopping list planning: grouping, aggregation, categorization and assembly."""

from cookcart.plan.aisle import (
    UNCATEGORIZED,
    AisleMapping,
    AisleRule,
    categorize,
    load_aisle_mapping,
    parse_aisle_config,
)
from cookcart.plan.grouping import (
    AggregatedIngredient,
    IngredientOccurrence,
    ScaledRecipe,
    aggregate_recipes,
    aggregate_scaled_recipes,
    group_ingredients,
)
from cookcart.plan.shopping_list import (
    Category,
    ShoppingList,
    ShoppingListGenerator,
    assemble_shopping_list,
    build_shopping_list,
)

__all__ = [
    "UNCATEGORIZED",
    "AggregatedIngredient",
    "AisleMapping",
    "AisleRule",
    "Category",
    "IngredientOccurrence",
    "ScaledRecipe",
    "ShoppingList",
    "ShoppingListGenerator",
    "aggregate_recipes",
    "aggregate_scaled_recipes",
    "assemble_shopping_list",
    "build_shopping_list",
    "categorize",
    "group_ingredients",
    "load_aisle_mapping",
    "parse_aisle_config",
]
