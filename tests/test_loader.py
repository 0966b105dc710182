"""Tests for loading recipe files."""

import asyncio
import json
import time

import pytest

from cookcart.errors import RecipeLoadError
from cookcart.ingest import loader
from cookcart.ingest.loader import load_recipe_file, load_recipe_files, parse_recipe_arg


class TestParseRecipeArg:
    """Tests for parse_recipe_arg function."""

    def test_plain_path(self):
        assert parse_recipe_arg("pancakes.json") == ("pancakes.json", None)

    def test_with_scale(self):
        assert parse_recipe_arg("pancakes.json:2") == ("pancakes.json", 2.0)
        assert parse_recipe_arg("dir/crepes.json:0.5") == ("dir/crepes.json", 0.5)

    def test_colon_in_path(self):
        assert parse_recipe_arg("c:recipes.json") == ("c:recipes.json", None)

    def test_non_positive_scale(self):
        with pytest.raises(ValueError):
            parse_recipe_arg("pancakes.json:0")

    @pytest.mark.parametrize("scale", ["nan", "inf", "-inf"])
    def test_non_finite_scale(self, scale):
        with pytest.raises(ValueError):
            parse_recipe_arg(f"pancakes.json:{scale}")


class TestLoadRecipeFile:
    """Tests for load_recipe_file function."""

    def test_id_defaults_to_file_name(self, recipe_files):
        pancakes, _ = recipe_files
        recipe = load_recipe_file(pancakes)
        assert recipe.id == "pancakes"
        assert recipe.name == "Pancakes"
        assert len(recipe.ingredients) == 3

    def test_explicit_id_and_scale(self, recipe_files):
        _, crepes = recipe_files
        recipe = load_recipe_file(crepes, scale=1.5)
        assert recipe.id == "crepes-v2"
        assert recipe.scale == 3.0

    def test_missing_file(self, tmp_path):
        with pytest.raises(RecipeLoadError) as exc_info:
            load_recipe_file(tmp_path / "missing.json")
        assert exc_info.value.path.endswith("missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(RecipeLoadError):
            load_recipe_file(path)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(RecipeLoadError):
            load_recipe_file(path)

    def test_invalid_recipe(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"ingredients": [{"name": ""}]}), encoding="utf-8")
        with pytest.raises(RecipeLoadError):
            load_recipe_file(path)


class TestLoadRecipeFiles:
    """Tests for concurrent loading."""

    @pytest.mark.asyncio
    async def test_preserves_caller_order(self, recipe_files):
        pancakes, crepes = recipe_files

        recipes = await load_recipe_files([crepes, (pancakes, 2.0), crepes])

        assert [r.id for r in recipes] == ["crepes-v2", "pancakes", "crepes-v2"]
        assert recipes[1].scale == 2.0

    @pytest.mark.asyncio
    async def test_order_independent_of_completion(self, recipe_files, monkeypatch):
        """Test that a slow first file still comes back first."""
        pancakes, crepes = recipe_files
        original = loader.load_recipe_file

        def slow_first(path, scale=None):
            if path == pancakes:
                time.sleep(0.05)
            return original(path, scale)

        monkeypatch.setattr(loader, "load_recipe_file", slow_first)

        recipes = await load_recipe_files([pancakes, crepes])
        assert [r.id for r in recipes] == ["pancakes", "crepes-v2"]

    @pytest.mark.asyncio
    async def test_failure_names_file(self, recipe_files, tmp_path):
        pancakes, _ = recipe_files
        with pytest.raises(RecipeLoadError) as exc_info:
            await load_recipe_files([pancakes, tmp_path / "nope.json"])
        assert "nope.json" in str(exc_info.value)

    def test_sync_wrapper(self, recipe_files):
        recipes = asyncio.run(load_recipe_files(list(recipe_files)))
        assert len(recipes) == 2
