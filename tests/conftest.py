from __future__ import annotations

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from recipebook import create_app
from recipebook.config import Settings
from recipebook.errors import RecipeNotFound
from recipebook.models import Recipe
from recipebook.seed import StaticSeedProvider


class InMemoryRecipeStorage:
    """Simple storage backend used for tests."""

    def __init__(self) -> None:
        self._documents: dict[str, dict] = {}
        self._ids = itertools.count(1)
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def list_recipes(self):
        return [Recipe.from_document(doc_id, data) for doc_id, data in self._documents.items()]

    def get_recipe(self, recipe_id: str) -> Recipe:
        if recipe_id not in self._documents:
            raise RecipeNotFound(recipe_id)
        return Recipe.from_document(recipe_id, self._documents[recipe_id])

    def add_recipe(self, fields) -> Recipe:
        recipe_id = f"r{next(self._ids)}"
        self._clock += timedelta(seconds=1)
        self._documents[recipe_id] = {**fields, "created_at": self._clock}
        return self.get_recipe(recipe_id)

    def add_recipes(self, records):
        return [self.add_recipe(fields) for fields in records]

    def update_recipe(self, recipe_id: str, fields) -> Recipe:
        if recipe_id not in self._documents:
            raise RecipeNotFound(recipe_id)
        self._documents[recipe_id].update(fields)
        return self.get_recipe(recipe_id)

    def delete_recipe(self, recipe_id: str) -> None:
        if self._documents.pop(recipe_id, None) is None:
            raise RecipeNotFound(recipe_id)

    def delete_all_recipes(self) -> int:
        deleted = len(self._documents)
        self._documents.clear()
        return deleted


SEED_RECIPES = [
    {"name": "pancakes", "title": "Pancakes", "ingredients": ["flour", "milk", "eggs"]},
    {"name": "omelette", "title": "Omelette", "ingredients": ["eggs", "butter"]},
    {
        "name": "salad",
        "title": "Greek Salad",
        "ingredients": [{"quantity": "200 g", "item": "feta"}, "olives"],
        "preparation": ["Chop.", "Toss."],
    },
]


@pytest.fixture
def storage():
    return InMemoryRecipeStorage()


@pytest.fixture
def seed_provider():
    return StaticSeedProvider(SEED_RECIPES)


@pytest.fixture
def app(storage, seed_provider):
    app = create_app(storage=storage, seed_provider=seed_provider, settings=Settings())
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def client(app):
    return app.test_client()
