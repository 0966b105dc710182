"""Pytest configuration and shared fixtures."""

import json

import pytest

from cookcart.normalize.quantity import parse_quantity
from cookcart.normalize.units import UnitConversionTable
from cookcart.plan.aisle import parse_aisle_config
from cookcart.plan.grouping import IngredientOccurrence, ScaledRecipe

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow running")


# =============================================================================
# Unit Table Fixtures
# =============================================================================


@pytest.fixture
def units():
    """The built-in unit table."""
    return UnitConversionTable.default()


@pytest.fixture
def baking_units():
    """Built-in table where a cup is a 240 g mass unit (flour-style)."""
    return UnitConversionTable.from_mapping(
        {"dimensions": {"mass": {"canonical": "g", "units": {"cup": 240}}}}
    )


# =============================================================================
# Recipe Fixtures
# =============================================================================


def make_recipe(recipe_id: str, *lines: tuple[str, str | float | None]) -> ScaledRecipe:
    """Build a scaled recipe from (name, raw quantity) pairs."""
    return ScaledRecipe(
        id=recipe_id,
        occurrences=tuple(
            IngredientOccurrence(name=name, quantity=parse_quantity(raw), recipe_ref=recipe_id)
            for name, raw in lines
        ),
    )


@pytest.fixture
def recipe_factory():
    """Factory for scaled recipes."""
    return make_recipe


@pytest.fixture
def pancakes():
    """Sample pancake recipe."""
    return make_recipe(
        "pancakes",
        ("flour", "200 g"),
        ("milk", "300 ml"),
        ("eggs", "2"),
        ("salt", "to taste"),
        ("butter", "25 g"),
    )


@pytest.fixture
def omelette():
    """Sample omelette recipe."""
    return make_recipe(
        "omelette",
        ("Eggs", "3"),
        ("butter", "1 tbsp"),
        ("chives", "1 bunch"),
        ("salt", "1 tsp"),
    )


# =============================================================================
# Aisle Fixtures
# =============================================================================

SAMPLE_AISLE_CONF = """\
# Local supermarket layout
[produce]
onion
chives
scallion|spring onion|green onion

[dairy]
milk
butter
egg|eggs

[baking]
flour
sugar
butter  # never reached, dairy comes first

[spices]
salt
pepper
"""


@pytest.fixture
def aisle_text():
    """Sample aisle file contents."""
    return SAMPLE_AISLE_CONF


@pytest.fixture
def aisle_mapping():
    """Parsed sample aisle mapping."""
    return parse_aisle_config(SAMPLE_AISLE_CONF)


@pytest.fixture
def aisle_file(tmp_path):
    """Sample aisle file on disk."""
    path = tmp_path / "aisle.conf"
    path.write_text(SAMPLE_AISLE_CONF, encoding="utf-8")
    return path


@pytest.fixture
def recipe_files(tmp_path):
    """Two recipe JSON files on disk."""
    pancakes = tmp_path / "pancakes.json"
    pancakes.write_text(
        json.dumps(
            {
                "name": "Pancakes",
                "ingredients": [
                    {"name": "flour", "quantity": "200 g"},
                    {"name": "milk", "quantity": 300, "unit": "ml"},
                    {"name": "salt", "quantity": "to taste"},
                ],
            }
        ),
        encoding="utf-8",
    )
    crepes = tmp_path / "crepes.json"
    crepes.write_text(
        json.dumps(
            {
                "id": "crepes-v2",
                "scale": 2,
                "ingredients": [
                    {"name": "Flour", "quantity": "100 g"},
                    {"name": "milk", "quantity": "1 cup"},
                ],
            }
        ),
        encoding="utf-8",
    )
    return pancakes, crepes
