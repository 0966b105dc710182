"""Unit conversion tables.

A unit belongs to exactly one dimension (mass, volume, a count family, ...) and carries
the ratio that converts one of it into the dimension's canonical unit. Two units are
comparable when they resolve to the same dimension.
"""

import json
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Annotated, Any, NamedTuple

from pydantic import BaseModel, Field, ValidationError, model_validator

from cookcart.errors import UnitTableError
from cookcart.logging_config import get_logger

logger = get_logger(__name__)


# =============================================================================
# Default Unit Tables
# =============================================================================

# Volume conversions (base unit: ml)
VOLUME_UNITS: dict[str, float] = {
    # Metric
    "ml": 1.0,
    "milliliter": 1.0,
    "milliliters": 1.0,
    "millilitre": 1.0,
    "millilitres": 1.0,
    "l": 1000.0,
    "liter": 1000.0,
    "liters": 1000.0,
    "litre": 1000.0,
    "litres": 1000.0,
    "dl": 100.0,
    "deciliter": 100.0,
    "deciliters": 100.0,
    "cl": 10.0,
    "centiliter": 10.0,
    "centiliters": 10.0,
    # US customary
    "cup": 236.588,
    "cups": 236.588,
    "tbsp": 14.787,
    "tablespoon": 14.787,
    "tablespoons": 14.787,
    "tbs": 14.787,
    "tsp": 4.929,
    "teaspoon": 4.929,
    "teaspoons": 4.929,
    "fl oz": 29.574,
    "fluid ounce": 29.574,
    "fluid ounces": 29.574,
    "pint": 473.176,
    "pints": 473.176,
    "pt": 473.176,
    "quart": 946.353,
    "quarts": 946.353,
    "qt": 946.353,
    "gallon": 3785.41,
    "gallons": 3785.41,
    "gal": 3785.41,
}

# Mass conversions (base unit: g)
MASS_UNITS: dict[str, float] = {
    # Metric
    "g": 1.0,
    "gram": 1.0,
    "grams": 1.0,
    "kg": 1000.0,
    "kilogram": 1000.0,
    "kilograms": 1000.0,
    "mg": 0.001,
    "milligram": 0.001,
    "milligrams": 0.001,
    # Imperial
    "oz": 28.3495,
    "ounce": 28.3495,
    "ounces": 28.3495,
    "lb": 453.592,
    "lbs": 453.592,
    "pound": 453.592,
    "pounds": 453.592,
}

# Generic counts (base unit: piece)
COUNT_UNITS: dict[str, float] = {
    "piece": 1.0,
    "pieces": 1.0,
    "pc": 1.0,
    "pcs": 1.0,
    "each": 1.0,
    "whole": 1.0,
    "dozen": 12.0,
}

# Container and portion words. Each family is its own dimension so that
# "2 cloves" and "1 can" never collapse into "3 of something".
COUNT_FAMILIES: dict[str, tuple[str, ...]] = {
    "slice": ("slice", "slices"),
    "clove": ("clove", "cloves"),
    "head": ("head", "heads"),
    "bunch": ("bunch", "bunches"),
    "sprig": ("sprig", "sprigs"),
    "can": ("can", "cans", "tin", "tins"),
    "jar": ("jar", "jars"),
    "package": ("package", "packages", "pkg", "pack", "packs"),
    "bottle": ("bottle", "bottles"),
    "bag": ("bag", "bags"),
    "box": ("box", "boxes"),
    "stick": ("stick", "sticks"),
    "fillet": ("fillet", "fillets"),
}

MASS = "mass"
VOLUME = "volume"
COUNT = "count"


def normalize_unit_name(unit: str) -> str:
    """Lowercase, collapse whitespace and drop a trailing abbreviation dot ("oz." -> "oz")."""
    name = " ".join(unit.lower().split())
    if len(name) > 1 and name.endswith("."):
        name = name[:-1]
    return name


# =============================================================================
# Conversion Table
# =============================================================================


class UnitDefinition(NamedTuple):
    """Where a unit lives: its dimension and its ratio to the canonical unit."""

    dimension: str
    ratio: float


class UnitConversionTable:
    """
    Immutable lookup from unit name to (dimension, ratio).

    Built once per invocation and shared read-only by every aggregation that
    runs against it.
    """

    def __init__(
        self,
        units: Mapping[str, UnitDefinition],
        canonical_units: Mapping[str, str],
    ):
        normalized = {normalize_unit_name(name): definition for name, definition in units.items()}
        for dimension, canonical in canonical_units.items():
            definition = normalized.get(normalize_unit_name(canonical))
            if definition is None or definition.dimension != dimension:
                raise UnitTableError(
                    f"Canonical unit {canonical!r} is not defined in dimension {dimension!r}"
                )
        self._units = MappingProxyType(normalized)
        self._canonical = MappingProxyType(dict(canonical_units))

    @classmethod
    def default(cls) -> "UnitConversionTable":
        """The built-in metric/US table."""
        return cls.from_dimensions(_default_dimensions())

    @classmethod
    def from_dimensions(
        cls,
        dimensions: Mapping[str, tuple[str, Mapping[str, float]]],
    ) -> "UnitConversionTable":
        """
        Build a table from ``{dimension: (canonical_unit, {unit: ratio})}``.

        Dimensions are applied in order, so a unit listed again in a later
        dimension moves there.
        """
        units: dict[str, UnitDefinition] = {}
        canonical: dict[str, str] = {}
        for dimension, (canonical_unit, ratios) in dimensions.items():
            canonical[dimension] = canonical_unit
            units[normalize_unit_name(canonical_unit)] = UnitDefinition(dimension, 1.0)
            for name, ratio in ratios.items():
                units[normalize_unit_name(name)] = UnitDefinition(dimension, float(ratio))

        # A later dimension may have claimed the canonical unit of an earlier one
        for dimension, canonical_unit in list(canonical.items()):
            if units[normalize_unit_name(canonical_unit)].dimension != dimension:
                logger.warning(
                    f"Dropping dimension {dimension!r}: its canonical unit "
                    f"{canonical_unit!r} was redefined"
                )
                del canonical[dimension]
        return cls(units, canonical)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "UnitConversionTable":
        """
        Build a table from a parsed unit file.

        Raises:
            UnitTableError: If the data does not describe a valid table.
        """
        try:
            table_file = UnitTableFile.model_validate(data)
        except ValidationError as e:
            raise UnitTableError(f"Invalid unit table: {e}") from e

        dimensions: dict[str, tuple[str, Mapping[str, float]]] = {}
        if table_file.extend_defaults:
            dimensions.update(_default_dimensions())
        for name, dimension in table_file.dimensions.items():
            units = _with_moved_aliases(name, dimension.units, dimensions)
            if name in dimensions:
                # Merge into the default dimension rather than replacing it
                canonical, ratios = dimensions.pop(name)
                if normalize_unit_name(canonical) != normalize_unit_name(dimension.canonical):
                    ratios = {}
                dimensions[name] = (dimension.canonical, {**ratios, **units})
            else:
                dimensions[name] = (dimension.canonical, units)
        return cls.from_dimensions(dimensions)

    @classmethod
    def from_file(cls, path: str | Path) -> "UnitConversionTable":
        """
        Load a table from a JSON unit file.

        Raises:
            UnitTableError: If the file cannot be read or is not a valid table.
        """
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise UnitTableError(f"Cannot read unit table {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise UnitTableError(f"Unit table {path} is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise UnitTableError(f"Unit table {path} must contain a JSON object")

        table = cls.from_mapping(data)
        logger.info(f"Loaded unit table from {path}: {len(table)} units")
        return table

    def resolve(self, unit: str | None) -> UnitDefinition | None:
        """Look up a unit. Unknown or empty units resolve to None."""
        if not unit:
            return None
        return self._units.get(normalize_unit_name(unit))

    def convert(self, value: float, from_unit: str, to_unit: str) -> float | None:
        """
        Convert ``value`` between two units of the same dimension.

        Returns None when either unit is unknown or the dimensions differ.
        """
        source = self.resolve(from_unit)
        target = self.resolve(to_unit)
        if source is None or target is None or source.dimension != target.dimension:
            return None
        if source.ratio == target.ratio:
            return value
        return value * source.ratio / target.ratio

    def same_dimension(self, unit1: str | None, unit2: str | None) -> bool:
        """Check whether both units are known and share a dimension."""
        first = self.resolve(unit1)
        second = self.resolve(unit2)
        return first is not None and second is not None and first.dimension == second.dimension

    def canonical_unit(self, dimension: str) -> str | None:
        return self._canonical.get(dimension)

    @property
    def dimensions(self) -> list[str]:
        return list(self._canonical)

    def __contains__(self, unit: object) -> bool:
        return isinstance(unit, str) and self.resolve(unit) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self._units)

    def __len__(self) -> int:
        return len(self._units)

    def __repr__(self) -> str:
        return f"UnitConversionTable(units={len(self)}, dimensions={self.dimensions})"


def _default_dimensions() -> dict[str, tuple[str, Mapping[str, float]]]:
    dimensions: dict[str, tuple[str, Mapping[str, float]]] = {
        MASS: ("g", MASS_UNITS),
        VOLUME: ("ml", VOLUME_UNITS),
        COUNT: ("piece", COUNT_UNITS),
    }
    for family, aliases in COUNT_FAMILIES.items():
        dimensions[f"{COUNT}:{family}"] = (family, {alias: 1.0 for alias in aliases})
    return dimensions


def _with_moved_aliases(
    dimension: str,
    units: Mapping[str, float],
    existing: Mapping[str, tuple[str, Mapping[str, float]]],
) -> dict[str, float]:
    """
    Extend ``units`` with the spellings that share a moved unit's ratio.

    Listing "cup" under mass would otherwise leave "cups" behind in volume.
    The other dimension's canonical unit only moves when listed explicitly.
    """
    listed = {normalize_unit_name(name) for name in units}
    moved = dict(units)
    for name, ratio in units.items():
        key = normalize_unit_name(name)
        for other, (canonical, ratios) in existing.items():
            if other == dimension:
                continue
            by_name = {normalize_unit_name(n): r for n, r in ratios.items()}
            if key not in by_name:
                continue
            for alias, alias_ratio in by_name.items():
                if (
                    alias_ratio == by_name[key]
                    and alias not in listed
                    and alias != normalize_unit_name(canonical)
                ):
                    moved[alias] = ratio
                    listed.add(alias)
                    logger.info(f"Moving unit {alias!r} to {dimension!r} along with {name!r}")
    return moved


# =============================================================================
# Unit File Schema
# =============================================================================


class DimensionSpec(BaseModel):
    """One dimension in a unit file."""

    canonical: str = Field(min_length=1)
    units: dict[str, Annotated[float, Field(gt=0)]] = Field(default_factory=dict)

    @model_validator(mode="after")
    def check_canonical_ratio(self) -> "DimensionSpec":
        """The canonical unit, if listed, must convert to itself."""
        for name, ratio in self.units.items():
            if normalize_unit_name(name) == normalize_unit_name(self.canonical) and ratio != 1.0:
                raise ValueError(
                    f"canonical unit {self.canonical!r} must have ratio 1, got {ratio}"
                )
        return self


class UnitTableFile(BaseModel):
    """
    JSON unit file.

    Example::

        {
            "extend_defaults": true,
            "dimensions": {
                "mass": {"canonical": "g", "units": {"cup": 240}}
            }
        }
    """

    extend_defaults: bool = True
    dimensions: dict[str, DimensionSpec] = Field(default_factory=dict)
