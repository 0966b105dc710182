"""Exception types raised by cookcart."""


class CookcartError(Exception):
    """Base class for all cookcart errors."""


class IncompatibleUnitsError(CookcartError):
    """Two quantities cannot be summed because their units are not comparable."""

    def __init__(self, left: str | None, right: str | None):
        self.left = left
        self.right = right
        super().__init__(f"Cannot add quantities in {left or 'no unit'!r} and {right or 'no unit'!r}")


class UnitTableError(CookcartError):
    """A user-supplied unit conversion table is invalid."""


class AisleParseError(CookcartError):
    """An aisle mapping file is malformed."""

    def __init__(self, message: str, line_number: int | None = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class RecipeLoadError(CookcartError):
    """A recipe file could not be read or validated."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load recipe {path}: {reason}")
