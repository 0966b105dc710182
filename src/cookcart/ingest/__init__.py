"""Recipe file loading."""

from cookcart.ingest.loader import (
    load_recipe_file,
    load_recipe_files,
    parse_recipe_arg,
)

__all__ = [
    "load_recipe_file",
    "load_recipe_files",
    "parse_recipe_arg",
]
