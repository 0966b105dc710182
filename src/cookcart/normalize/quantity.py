"""Quantity model: amounts with optional units, and how they add up."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

from cookcart.errors import IncompatibleUnitsError
from cookcart.logging_config import get_logger
from cookcart.normalize.units import UnitConversionTable, normalize_unit_name

logger = get_logger(__name__)


class Unspecified(Enum):
    """Marker for amounts like "to taste" that have no numeric value."""

    TOKEN = "unspecified"

    def __repr__(self) -> str:
        return "UNSPECIFIED"


UNSPECIFIED = Unspecified.TOKEN

QuantityValue = float | Literal[Unspecified.TOKEN]

# Amount phrases that mean "some, not measured"
UNSPECIFIED_PHRASES = frozenset(
    {
        "to taste",
        "some",
        "pinch",
        "a pinch",
        "dash",
        "a dash",
        "as needed",
        "as required",
        "optional",
    }
)

UNICODE_FRACTIONS = {
    "½": "1/2",
    "⅓": "1/3",
    "⅔": "2/3",
    "¼": "1/4",
    "¾": "3/4",
    "⅕": "1/5",
    "⅛": "1/8",
    "⅜": "3/8",
    "⅝": "5/8",
    "⅞": "7/8",
}

_AMOUNT_RE = re.compile(
    r"^(\d+(?:\.\d+)?(?:\s*/\s*\d+)?(?:\s+\d+/\d+)?(?:\s*-\s*\d+(?:\.\d+)?)?)\s*(.*)$"
)


@dataclass(frozen=True)
class Quantity:
    """An amount with an optional unit, or the unspecified amount."""

    value: QuantityValue
    unit: str | None = None

    @property
    def is_unspecified(self) -> bool:
        return self.value is UNSPECIFIED

    def scaled(self, factor: float) -> "Quantity":
        """Multiply the amount; unspecified amounts stay unspecified."""
        if self.is_unspecified:
            return self
        return Quantity(self.value * factor, self.unit)

    def to_dict(self) -> dict[str, Any]:
        return {
            "value": None if self.is_unspecified else self.value,
            "unit": self.unit,
        }

    def __str__(self) -> str:
        if self.is_unspecified:
            return "some"
        value = f"{self.value:g}"
        return f"{value} {self.unit}" if self.unit else value


def try_add(a: Quantity, b: Quantity, table: UnitConversionTable) -> Quantity:
    """
    Add two quantities, keeping the first operand's unit.

    Unspecified absorbs: if either side is unspecified, so is the result.

    Raises:
        IncompatibleUnitsError: If the units cannot be compared.
    """
    if a.is_unspecified or b.is_unspecified:
        return Quantity(UNSPECIFIED)

    if a.unit is None and b.unit is None:
        return Quantity(a.value + b.value)

    if a.unit is None or b.unit is None:
        raise IncompatibleUnitsError(a.unit, b.unit)

    if normalize_unit_name(a.unit) == normalize_unit_name(b.unit):
        return Quantity(a.value + b.value, a.unit)

    converted = table.convert(b.value, b.unit, a.unit)
    if converted is None:
        raise IncompatibleUnitsError(a.unit, b.unit)

    return Quantity(a.value + converted, a.unit)


def is_compatible(a: Quantity, b: Quantity, table: UnitConversionTable) -> bool:
    """Check whether ``try_add(a, b, table)`` would succeed."""
    try:
        try_add(a, b, table)
    except IncompatibleUnitsError:
        return False
    return True


# =============================================================================
# Parsing Functions
# =============================================================================


def parse_quantity_string(quantity_str: str) -> float | None:
    """
    Parse a numeric amount into a float.

    Handles formats like:
    - "2"
    - "1.5"
    - "1/2"
    - "1 1/2" (one and a half)
    - "2-3" (range, returns average)

    Returns None when the text is not a number.
    """
    quantity_str = quantity_str.strip()
    if not quantity_str:
        return None

    range_match = re.fullmatch(r"(\d+(?:\.\d+)?)\s*-\s*(\d+(?:\.\d+)?)", quantity_str)
    if range_match:
        low = float(range_match.group(1))
        high = float(range_match.group(2))
        return (low + high) / 2

    mixed_match = re.fullmatch(r"(\d+)\s+(\d+)\s*/\s*(\d+)", quantity_str)
    if mixed_match:
        whole = int(mixed_match.group(1))
        num = int(mixed_match.group(2))
        denom = int(mixed_match.group(3))
        if denom == 0:
            return None
        return whole + (num / denom)

    frac_match = re.fullmatch(r"(\d+)\s*/\s*(\d+)", quantity_str)
    if frac_match:
        num = int(frac_match.group(1))
        denom = int(frac_match.group(2))
        if denom == 0:
            return None
        return num / denom

    num_match = re.fullmatch(r"\d+(?:\.\d+)?", quantity_str)
    if num_match:
        return float(quantity_str)

    return None


def extract_quantity_and_unit(measure: str) -> tuple[str | None, str]:
    """
    Split a combined measure string into its amount and unit parts.

    Examples:
        "2 cups" -> ("2", "cups")
        "500g" -> ("500", "g")
        "1/2 tsp" -> ("1/2", "tsp")
        "handful" -> (None, "handful")
    """
    measure = _expand_unicode_fractions(measure.strip())
    match = _AMOUNT_RE.match(measure)
    if match:
        return match.group(1).strip(), match.group(2).strip()
    return None, measure


def parse_quantity(raw: str | float | None, unit: str | None = None) -> Quantity:
    """
    Turn a raw amount expression into a Quantity.

    Args:
        raw: The amount, e.g. "200 g", "1 1/2", 3, "to taste". None means unspecified.
        unit: Explicit unit. When given, any unit text inside ``raw`` is ignored.
    """
    if raw is None:
        return Quantity(UNSPECIFIED)

    if isinstance(raw, (int, float)):
        return Quantity(float(raw), _clean_unit(unit))

    text = " ".join(raw.split())
    if not text or text.lower() in UNSPECIFIED_PHRASES:
        return Quantity(UNSPECIFIED)

    amount, rest = extract_quantity_and_unit(text)
    if amount is None:
        # A bare unit word ("handful") counts as one of it
        return Quantity(1.0, _clean_unit(unit or text))

    value = parse_quantity_string(amount)
    if value is None:
        logger.warning(f"Unreadable amount {raw!r}, treating it as unspecified")
        return Quantity(UNSPECIFIED)

    return Quantity(value, _clean_unit(unit or rest))


def _clean_unit(unit: str | None) -> str | None:
    if unit is None:
        return None
    unit = " ".join(unit.split())
    return unit or None


def _expand_unicode_fractions(text: str) -> str:
    for symbol, fraction in UNICODE_FRACTIONS.items():
        if symbol in text:
            # "1½" -> "1 1/2"
            text = re.sub(rf"(\d){symbol}", rf"\1 {fraction}", text)
            text = text.replace(symbol, fraction)
    return text
