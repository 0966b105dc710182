"""Quantity parsing, unit tables and quantity arithmetic."""

from cookcart.normalize.quantity import (
    UNSPECIFIED,
    Quantity,
    Unspecified,
    extract_quantity_and_unit,
    is_compatible,
    parse_quantity,
    parse_quantity_string,
    try_add,
)
from cookcart.normalize.units import (
    UnitConversionTable,
    UnitDefinition,
    normalize_unit_name,
)

__all__ = [
    "UNSPECIFIED",
    "Quantity",
    "UnitConversionTable",
    "UnitDefinition",
    "Unspecified",
    "extract_quantity_and_unit",
    "is_compatible",
    "normalize_unit_name",
    "parse_quantity",
    "parse_quantity_string",
    "try_add",
]
