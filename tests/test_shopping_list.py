"""Unit tests for shopping list assembly and generation."""

import logging

from cookcart.logging_config import list_id_ctx
from cookcart.normalize.quantity import Quantity
from cookcart.plan.aisle import UNCATEGORIZED, AisleMapping
from cookcart.plan.grouping import AggregatedIngredient
from cookcart.plan.shopping_list import (
    Category,
    ShoppingList,
    ShoppingListGenerator,
    assemble_shopping_list,
    build_shopping_list,
)


def _item(name):
    return AggregatedIngredient(name=name, quantities=[Quantity(1.0)], sources=["r"])


class TestAssembleShoppingList:
    """Tests for assemble_shopping_list function."""

    def test_category_order_is_first_appearance(self):
        result = assemble_shopping_list(
            [
                ("dairy", _item("milk")),
                ("produce", _item("onion")),
                ("dairy", _item("butter")),
                ("spices", _item("salt")),
            ]
        )
        assert [c.name for c in result.categories] == ["dairy", "produce", "spices"]
        assert [i.name for i in result.categories[0].ingredients] == ["milk", "butter"]

    def test_uncategorized_last(self):
        """Test that uncategorized comes last even when seen first."""
        result = assemble_shopping_list(
            [
                (UNCATEGORIZED, _item("saffron")),
                ("dairy", _item("milk")),
                (UNCATEGORIZED, _item("sumac")),
                ("produce", _item("onion")),
            ]
        )
        assert [c.name for c in result.categories] == ["dairy", "produce", UNCATEGORIZED]
        assert [i.name for i in result.categories[-1].ingredients] == ["saffron", "sumac"]

    def test_empty(self):
        assert assemble_shopping_list([]).categories == []


class TestShoppingList:
    """Tests for ShoppingList dataclass."""

    def test_lookup_and_count(self):
        shopping_list = ShoppingList(
            categories=[
                Category(name="dairy", ingredients=[_item("milk"), _item("butter")]),
                Category(name=UNCATEGORIZED, ingredients=[_item("saffron")]),
            ]
        )
        assert shopping_list.ingredient_count == 3
        assert shopping_list.category("dairy").name == "dairy"
        assert shopping_list.category("produce") is None
        assert [i.name for i in shopping_list.ingredients()] == ["milk", "butter", "saffron"]

    def test_to_dict(self):
        shopping_list = ShoppingList(
            categories=[
                Category(
                    name="baking",
                    ingredients=[
                        AggregatedIngredient(
                            name="flour",
                            quantities=[Quantity(440.0, "g")],
                            sources=["bread", "muffins"],
                        )
                    ],
                )
            ]
        )
        assert shopping_list.to_dict() == {
            "categories": [
                {
                    "name": "baking",
                    "ingredients": [
                        {
                            "name": "flour",
                            "quantities": [{"value": 440.0, "unit": "g"}],
                            "sources": ["bread", "muffins"],
                        }
                    ],
                }
            ]
        }


class TestShoppingListGenerator:
    """Tests for ShoppingListGenerator class."""

    def test_generate_with_aisles(self, units, aisle_mapping, pancakes, omelette):
        generator = ShoppingListGenerator(units, aisle_mapping)
        result = generator.generate([pancakes, omelette])

        assert [c.name for c in result.categories] == ["baking", "dairy", "spices", "produce"]

        dairy = result.category("dairy")
        assert [i.name for i in dairy.ingredients] == ["milk", "eggs", "butter"]
        eggs = dairy.ingredients[1]
        assert eggs.quantities == [Quantity(5.0)]
        assert eggs.sources == ["pancakes", "omelette"]

    def test_generate_without_mapping(self, units, pancakes, omelette):
        """Test that every ingredient lands in uncategorized without a mapping."""
        result = ShoppingListGenerator(units).generate([pancakes, omelette])

        assert [c.name for c in result.categories] == [UNCATEGORIZED]
        assert result.ingredient_count == 6

    def test_generate_with_empty_mapping(self, units, pancakes):
        result = ShoppingListGenerator(units, AisleMapping()).generate([pancakes])
        assert [c.name for c in result.categories] == [UNCATEGORIZED]
        assert result.ingredient_count == 5

    def test_generate_no_recipes(self, units, aisle_mapping):
        result = ShoppingListGenerator(units, aisle_mapping).generate([])
        assert result.categories == []
        assert result.to_dict() == {"categories": []}

    def test_unmatched_go_last(self, units, aisle_mapping, recipe_factory):
        recipe = recipe_factory(
            "curry",
            ("saffron", "1 pinch"),
            ("onion", "2"),
            ("eggplant", "1"),
        )
        result = ShoppingListGenerator(units, aisle_mapping).generate([recipe])

        assert [c.name for c in result.categories] == ["produce", UNCATEGORIZED]
        assert [i.name for i in result.category(UNCATEGORIZED).ingredients] == [
            "saffron",
            "eggplant",
        ]

    def test_permuted_recipes_same_category_content(self, units, aisle_mapping, pancakes, omelette):
        """Test that category membership does not depend on recipe order."""
        forward = ShoppingListGenerator(units, aisle_mapping).generate([pancakes, omelette])
        backward = ShoppingListGenerator(units, aisle_mapping).generate([omelette, pancakes])

        def membership(shopping_list):
            return {
                c.name: sorted(i.key for i in c.ingredients) for c in shopping_list.categories
            }

        assert membership(forward) == membership(backward)
        assert [c.name for c in backward.categories] == ["dairy", "produce", "spices", "baking"]

    def test_generate_logs_carry_list_id(self, units, pancakes, caplog):
        """Test that every log line of one generation shares a list id."""
        caplog.set_level(logging.INFO, logger="cookcart.plan.shopping_list")

        ShoppingListGenerator(units).generate([pancakes])

        list_ids = {
            getattr(record, "list_id", None)
            for record in caplog.records
            if record.name == "cookcart.plan.shopping_list"
        }
        assert len(list_ids) == 1
        assert None not in list_ids
        assert list_id_ctx.get() is None


class TestBuildShoppingList:
    """Tests for build_shopping_list function."""

    def test_flour_scenario(self, baking_units, aisle_mapping, recipe_factory):
        result = build_shopping_list(
            [
                recipe_factory("bread", ("flour", "200 g")),
                recipe_factory("muffins", ("flour", "1 cup")),
            ],
            baking_units,
            aisle_mapping,
        )
        assert result.to_dict() == {
            "categories": [
                {
                    "name": "baking",
                    "ingredients": [
                        {
                            "name": "flour",
                            "quantities": [{"value": 440.0, "unit": "g"}],
                            "sources": ["bread", "muffins"],
                        }
                    ],
                }
            ]
        }

    def test_salt_scenario(self, units, recipe_factory):
        result = build_shopping_list(
            [
                recipe_factory("soup", ("salt", "to taste")),
                recipe_factory("bread", ("salt", "1 tsp")),
            ],
            units,
        )
        (category,) = result.categories
        (salt,) = category.ingredients
        assert salt.to_dict()["quantities"] == [{"value": None, "unit": None}]
        assert salt.sources == ["soup", "bread"]
