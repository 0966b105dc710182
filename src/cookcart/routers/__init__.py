"""API routers for the cookcart application."""

from cookcart.routers.shopping_list import router as shopping_list_router

__all__ = [
    "shopping_list_router",
]
