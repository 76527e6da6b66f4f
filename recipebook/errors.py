class RecipeError(Exception):
    """Base class for failures surfaced by the recipe service."""


class RecipeNotFound(RecipeError, KeyError):
    """Raised when no recipe matches the requested identifier."""

    def __init__(self, recipe_id: str) -> None:
        super().__init__(f"Recipe '{recipe_id}' does not exist.")
        self.recipe_id = recipe_id

    def __str__(self) -> str:
        # KeyError quotes its argument otherwise.
        return str(self.args[0])


class InvalidRequest(RecipeError):
    """Malformed identifier or a payload the store cannot accept."""


class StoreUnavailable(RecipeError):
    """The document store could not be reached or timed out."""


class SeedError(StoreUnavailable):
    """The import source could not be read or holds an unusable record."""


__all__ = [
    "InvalidRequest",
    "RecipeError",
    "RecipeNotFound",
    "SeedError",
    "StoreUnavailable",
]
