from __future__ import annotations

import logging
from typing import Any, List, Optional

from .errors import InvalidRequest, SeedError
from .models import Recipe, parse_recipe_fields
from .seed import SeedProvider
from .storage import RecipeRepository

logger = logging.getLogger(__name__)


class RecipeService:
    """Request-level operations on recipes.

    The service keeps no recipe state of its own; every call goes straight to
    the injected repository, and store errors propagate unchanged.
    """

    def __init__(self, storage: RecipeRepository, seed_provider: Optional[SeedProvider] = None) -> None:
        self.storage = storage
        self.seed_provider = seed_provider

    def find_all(self) -> List[Recipe]:
        return list(self.storage.list_recipes())

    def find_by_id(self, recipe_id: str) -> Recipe:
        return self.storage.get_recipe(recipe_id)

    def add(self, payload: Any) -> Recipe:
        fields = parse_recipe_fields(payload)
        recipe = self.storage.add_recipe(fields)
        logger.info("Created recipe %s", recipe.id)
        return recipe

    def update(self, recipe_id: str, payload: Any) -> Recipe:
        """Merge the fields present in ``payload`` into the stored recipe."""

        fields = parse_recipe_fields(payload)
        recipe = self.storage.update_recipe(recipe_id, fields)
        logger.info("Updated recipe %s (%s)", recipe_id, ", ".join(sorted(fields)) or "no fields")
        return recipe

    def delete(self, recipe_id: str) -> None:
        self.storage.delete_recipe(recipe_id)
        logger.info("Deleted recipe %s", recipe_id)

    def import_seed(self) -> List[Recipe]:
        """Insert the configured seed recipes as one all-or-nothing batch.

        Every record is coerced before anything is written, so a single bad
        record fails the import with :class:`SeedError` and leaves the store
        untouched. The store write itself is a single atomic batch.
        """

        if self.seed_provider is None:
            raise SeedError("No recipe seed source is configured.")

        records = self.seed_provider.load()
        batch = []
        for position, record in enumerate(records):
            try:
                batch.append(parse_recipe_fields(record))
            except InvalidRequest as exc:
                raise SeedError(f"Seed record #{position} is invalid: {exc}") from exc

        try:
            recipes = self.storage.add_recipes(batch)
        except InvalidRequest as exc:
            # Seed problems are server errors, never 400s.
            raise SeedError(f"Store rejected the seed: {exc}") from exc
        logger.info("Imported %d recipes", len(recipes))
        return recipes

    def kill_all(self) -> int:
        """Delete every recipe. There is no confirmation step and no undo."""

        deleted = self.storage.delete_all_recipes()
        logger.warning("Kill-all removed %d recipes", deleted)
        return deleted


__all__ = ["RecipeService"]
