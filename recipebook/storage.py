from __future__ import annotations

from typing import Any, List, Mapping, Protocol, Sequence

from .models import Recipe


class RecipeRepository(Protocol):
    """Protocol describing the document store behind the recipe service.

    ``fields`` arguments hold already coerced recipe fields, as returned by
    :func:`recipebook.models.parse_recipe_fields`.
    """

    def list_recipes(self) -> List[Recipe]:
        """Return every stored recipe in the store's default order."""

    def get_recipe(self, recipe_id: str) -> Recipe:
        """Return a single recipe or raise :class:`RecipeNotFound` if missing."""

    def add_recipe(self, fields: Mapping[str, Any]) -> Recipe:
        """Persist a new recipe and return the stored instance with its id."""

    def add_recipes(self, records: Sequence[Mapping[str, Any]]) -> List[Recipe]:
        """Persist a batch of recipes atomically: either all are stored or none."""

    def update_recipe(self, recipe_id: str, fields: Mapping[str, Any]) -> Recipe:
        """Merge ``fields`` into an existing recipe and return the new representation."""

    def delete_recipe(self, recipe_id: str) -> None:
        """Remove a recipe or raise :class:`RecipeNotFound` if missing."""

    def delete_all_recipes(self) -> int:
        """Remove every recipe and return how many were deleted."""


__all__ = ["RecipeRepository"]
