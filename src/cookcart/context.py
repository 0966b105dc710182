"""Per-process application context passed explicitly to request handlers."""

from dataclasses import dataclass

from fastapi import Request

from cookcart.config import Settings
from cookcart.logging_config import get_logger
from cookcart.normalize.units import UnitConversionTable
from cookcart.plan.aisle import AisleMapping, load_aisle_mapping
from cookcart.plan.shopping_list import ShoppingListGenerator

logger = get_logger(__name__)


@dataclass(frozen=True)
class AppContext:
    """Settings and unit table, built once at startup and never mutated."""

    settings: Settings
    units: UnitConversionTable

    def aisle_mapping(self) -> AisleMapping | None:
        """Read the aisle file fresh, so edits apply to the next request."""
        return load_aisle_mapping(self.settings.resolve_aisle_path())

    def shopping_list_generator(self, use_aisle: bool = True) -> ShoppingListGenerator:
        mapping = self.aisle_mapping() if use_aisle else None
        return ShoppingListGenerator(self.units, mapping)


def build_context(settings: Settings) -> AppContext:
    """
    Create the application context.

    Raises:
        UnitTableError: If a configured unit file is invalid.
    """
    if settings.units_path is not None:
        units = UnitConversionTable.from_file(settings.units_path)
    else:
        units = UnitConversionTable.default()

    logger.info(f"Application context ready: {units!r}, aisle={settings.resolve_aisle_path()}")
    return AppContext(settings=settings, units=units)


def get_context(request: Request) -> AppContext:
    """Dependency returning the context created in the app lifespan."""
    return request.app.state.context
