"""Pydantic schemas for recipe input and shopping list output."""

from pydantic import BaseModel, Field, field_validator

from cookcart.normalize.quantity import parse_quantity
from cookcart.plan.grouping import IngredientOccurrence, ScaledRecipe
from cookcart.plan.shopping_list import ShoppingList


class IngredientInput(BaseModel):
    """An ingredient line from a parsed recipe."""

    name: str = Field(min_length=1)
    quantity: float | str | None = Field(
        None, description='Amount, e.g. 200, "1 1/2 cups" or "to taste"'
    )
    unit: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: object) -> object:
        """Trim surrounding whitespace so blank names fail validation."""
        if isinstance(v, str):
            return v.strip()
        return v


class RecipeInput(BaseModel):
    """A parsed recipe with an optional scale factor."""

    id: str = Field(min_length=1)
    name: str | None = None
    scale: float = Field(default=1.0, gt=0)
    ingredients: list[IngredientInput] = Field(default_factory=list)

    def to_scaled_recipe(self) -> ScaledRecipe:
        """Apply the scale factor and produce the aggregation input."""
        occurrences = tuple(
            IngredientOccurrence(
                name=ingredient.name,
                quantity=parse_quantity(ingredient.quantity, ingredient.unit).scaled(self.scale),
                recipe_ref=self.id,
            )
            for ingredient in self.ingredients
        )
        return ScaledRecipe(id=self.id, occurrences=occurrences, name=self.name)


class ShoppingListRequest(BaseModel):
    """Request to build a shopping list."""

    recipes: list[RecipeInput] = Field(default_factory=list)
    use_aisle: bool = Field(True, description="Categorize with the configured aisle file")


class QuantitySchema(BaseModel):
    """A merged quantity; ``value`` is null for unspecified amounts."""

    value: float | None
    unit: str | None = None


class IngredientSchema(BaseModel):
    """One line of the shopping list."""

    name: str
    quantities: list[QuantitySchema]
    sources: list[str]


class CategorySchema(BaseModel):
    """A store section."""

    name: str
    ingredients: list[IngredientSchema]


class ShoppingListResponse(BaseModel):
    """Shopping list grouped by store section."""

    categories: list[CategorySchema]

    @classmethod
    def from_shopping_list(cls, shopping_list: ShoppingList) -> "ShoppingListResponse":
        return cls.model_validate(shopping_list.to_dict())
