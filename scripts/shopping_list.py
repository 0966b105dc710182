"""Script to build a consolidated shopping list from recipe JSON files.

Each recipe argument is a path, optionally followed by ``:SCALE``.

Run with: uv run python scripts/shopping_list.py pancakes.json waffles.json:2
With aisles: uv run python scripts/shopping_list.py pancakes.json --aisle config/aisle.conf

Output is the shopping list as JSON on stdout.
"""

import argparse
import asyncio
import json
import sys

from cookcart.config import get_settings
from cookcart.errors import CookcartError
from cookcart.ingest import load_recipe_files, parse_recipe_arg
from cookcart.logging_config import configure_logging, get_logger
from cookcart.normalize import UnitConversionTable
from cookcart.plan import build_shopping_list, load_aisle_mapping

logger = get_logger(__name__)


async def run(args: argparse.Namespace) -> int:
    """Load recipes, aggregate them and print the list."""
    settings = get_settings()

    try:
        recipe_args = [parse_recipe_arg(arg) for arg in args.recipes]
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    units_path = args.units or settings.units_path
    aisle_path = None if args.no_aisle else (args.aisle or settings.resolve_aisle_path())

    try:
        units = (
            UnitConversionTable.from_file(units_path)
            if units_path
            else UnitConversionTable.default()
        )
        recipes = await load_recipe_files(recipe_args)
    except CookcartError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    mapping = load_aisle_mapping(aisle_path)
    shopping_list = build_shopping_list(
        [recipe.to_scaled_recipe() for recipe in recipes],
        units,
        mapping,
    )

    print(json.dumps(shopping_list.to_dict(), indent=args.indent, ensure_ascii=False))
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Build a shopping list from recipe files")
    parser.add_argument(
        "recipes",
        nargs="+",
        help="Recipe JSON files, each optionally suffixed with :SCALE",
    )
    parser.add_argument("--aisle", help="Aisle mapping file (default: config/aisle.conf)")
    parser.add_argument(
        "--no-aisle",
        action="store_true",
        help="Put every ingredient in a single uncategorized section",
    )
    parser.add_argument("--units", help="JSON unit table (default: built-in units)")
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation")
    parser.add_argument("--log-level", default="WARNING", help="Log level")

    args = parser.parse_args()

    configure_logging(log_level=args.log_level, json_format=False)
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
