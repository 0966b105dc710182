"""Load pre-parsed recipe files from disk."""

import asyncio
import json
import math
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from cookcart.errors import RecipeLoadError
from cookcart.logging_config import get_logger
from cookcart.schemas import RecipeInput

logger = get_logger(__name__)


def load_recipe_file(path: str | Path, scale: float | None = None) -> RecipeInput:
    """
    Read a recipe JSON file.

    The recipe id defaults to the file name without extension. ``scale``
    multiplies the scale stored in the file.

    Raises:
        RecipeLoadError: If the file cannot be read or is not a valid recipe.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise RecipeLoadError(str(path), str(e)) from e
    except json.JSONDecodeError as e:
        raise RecipeLoadError(str(path), f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise RecipeLoadError(str(path), "expected a JSON object")
    data.setdefault("id", path.stem)

    try:
        recipe = RecipeInput.model_validate(data)
    except ValidationError as e:
        raise RecipeLoadError(str(path), str(e)) from e

    if scale is not None:
        recipe = recipe.model_copy(update={"scale": recipe.scale * scale})

    logger.debug(f"Loaded recipe {recipe.id} ({len(recipe.ingredients)} ingredients) from {path}")
    return recipe


async def load_recipe_files(
    paths: Sequence[str | Path | tuple[str | Path, float | None]],
) -> list[RecipeInput]:
    """
    Load many recipe files concurrently.

    Each entry is a path or a ``(path, scale)`` pair. Files are read in worker
    threads, and the result is in the same order as ``paths`` regardless of
    which read finishes first.
    """
    requests = [entry if isinstance(entry, tuple) else (entry, None) for entry in paths]
    recipes = await asyncio.gather(
        *(asyncio.to_thread(load_recipe_file, path, scale) for path, scale in requests)
    )
    logger.info(f"Loaded {len(recipes)} recipe files")
    return list(recipes)


def parse_recipe_arg(arg: str) -> tuple[str, float | None]:
    """
    Split a ``path[:scale]`` command-line argument.

    Examples:
        "pancakes.json" -> ("pancakes.json", None)
        "pancakes.json:2" -> ("pancakes.json", 2.0)
    """
    path, sep, scale = arg.rpartition(":")
    if not sep:
        return arg, None
    try:
        value = float(scale)
    except ValueError:
        # The colon belongs to the path itself
        return arg, None
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"Scale must be a positive number: {arg}")
    return path, value
