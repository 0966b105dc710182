"""Aisle categorization from a user-editable mapping file.

The mapping file groups ingredient patterns under store sections::

    # my store
    [produce]
    onion
    scallion|spring onion|green onion

    [dairy]
    milk
    butter

A pattern matches an ingredient name case-insensitively when the name equals
the pattern, or starts with it followed by a space, hyphen or comma. So
"egg" matches "egg yolk" but not "eggplant". The first matching pattern in
file order decides the category.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from cookcart.errors import AisleParseError
from cookcart.logging_config import get_logger
from cookcart.plan.grouping import AggregatedIngredient

logger = get_logger(__name__)

UNCATEGORIZED = "uncategorized"

# Characters allowed to follow a pattern for a prefix match
WORD_BOUNDARY_CHARS = frozenset(" -,")

_SECTION_RE = re.compile(r"^\[(?P<name>[^\]]*)\]$")


def normalize_pattern(text: str) -> str:
    return " ".join(text.split()).casefold()


@dataclass(frozen=True)
class AisleRule:
    """One ingredient pattern and the category it assigns."""

    pattern: str
    category: str

    def matches(self, ingredient_name: str) -> bool:
        pattern = normalize_pattern(self.pattern)
        name = normalize_pattern(ingredient_name)
        if not pattern or not name.startswith(pattern):
            return False
        return len(name) == len(pattern) or name[len(pattern)] in WORD_BOUNDARY_CHARS


@dataclass(frozen=True)
class AisleMapping:
    """Ordered aisle rules; the first match wins."""

    rules: tuple[AisleRule, ...] = ()

    def category_for(self, ingredient_name: str) -> str:
        for rule in self.rules:
            if rule.matches(ingredient_name):
                return rule.category
        return UNCATEGORIZED

    @property
    def categories(self) -> list[str]:
        """Category names in file order, without duplicates."""
        return list(dict.fromkeys(rule.category for rule in self.rules))

    def __len__(self) -> int:
        return len(self.rules)


def parse_aisle_config(text: str) -> AisleMapping:
    """
    Parse the text of an aisle mapping file.

    Raises:
        AisleParseError: On an empty section name or a pattern outside any section.
    """
    rules: list[AisleRule] = []
    category: str | None = None

    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.split("#", 1)[0].strip()
        if not line:
            continue

        section = _SECTION_RE.match(line)
        if section:
            category = section.group("name").strip()
            if not category:
                raise AisleParseError("empty section name", line_number)
            continue

        if category is None:
            raise AisleParseError(f"ingredient {line!r} appears before any section", line_number)

        for synonym in line.split("|"):
            pattern = synonym.strip()
            if pattern:
                rules.append(AisleRule(pattern=pattern, category=category))

    return AisleMapping(rules=tuple(rules))


def load_aisle_mapping(path: str | Path | None) -> AisleMapping | None:
    """
    Read an aisle mapping file.

    A missing, unreadable or malformed file yields None so that list
    generation can fall back to a single uncategorized section.
    """
    if path is None:
        return None

    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.warning(f"Aisle file not found: {path}")
        return None
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Aisle file unreadable, skipping categorization: {path}: {e}")
        return None

    try:
        mapping = parse_aisle_config(text)
    except AisleParseError as e:
        logger.warning(f"Aisle file malformed, skipping categorization: {path}: {e}")
        return None

    logger.debug(f"Loaded {len(mapping)} aisle rules from {path}")
    return mapping


def categorize(
    ingredients: Iterable[AggregatedIngredient],
    mapping: AisleMapping | None,
) -> list[tuple[str, AggregatedIngredient]]:
    """Pair each ingredient with its category, keeping input order."""
    if not mapping:
        return [(UNCATEGORIZED, ingredient) for ingredient in ingredients]
    return [(mapping.category_for(ingredient.name), ingredient) for ingredient in ingredients]
