"""API routes for shopping list generation."""

from typing import Annotated

from fastapi import APIRouter, Depends

from cookcart.context import AppContext, get_context
from cookcart.logging_config import get_logger
from cookcart.schemas import ShoppingListRequest, ShoppingListResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["shopping-list"])


@router.post("/shopping-list", response_model=ShoppingListResponse)
def create_shopping_list(
    request: ShoppingListRequest,
    context: Annotated[AppContext, Depends(get_context)],
) -> ShoppingListResponse:
    """
    Build a consolidated shopping list from recipes.

    Recipes are aggregated in request order. Nothing is stored; the aisle
    file is re-read for every request.
    """
    generator = context.shopping_list_generator(use_aisle=request.use_aisle)
    recipes = [recipe.to_scaled_recipe() for recipe in request.recipes]

    shopping_list = generator.generate(recipes)

    return ShoppingListResponse.from_shopping_list(shopping_list)


@router.get("/aisles")
def list_aisles(
    context: Annotated[AppContext, Depends(get_context)],
) -> dict:
    """List the categories defined in the aisle file."""
    mapping = context.aisle_mapping()
    if mapping is None:
        return {"available": False, "categories": []}
    return {"available": True, "categories": mapping.categories}
