from __future__ import annotations

import uuid
from typing import Dict, Optional

import pytest

from recipebox import create_app
from recipebox.errors import RecipeNotFoundError
from recipebox.models import Recipe, RecipeDraft, RecipePatch
from recipebox.storage import new_recipe_document, patch_document

START_MS = 1_700_000_000_000


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now: int = START_MS) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now


class InMemoryRecipeStorage:
    """Simple storage backend used for tests."""

    def __init__(self, clock: FakeClock) -> None:
        self._clock = clock
        self._docs: Dict[str, dict] = {}

    def list_recipes(self, owner_id: str):
        recipes = [
            Recipe.from_document(doc_id, data)
            for doc_id, data in self._docs.items()
            if data["owner_id"] == owner_id
        ]
        return sorted(recipes, key=lambda recipe: recipe.created_at, reverse=True)

    def get_recipe(self, recipe_id: str, owner_id: Optional[str] = None) -> Recipe:
        data = self._docs.get(recipe_id)
        if data is None or (owner_id is not None and data["owner_id"] != owner_id):
            raise RecipeNotFoundError(recipe_id)
        return Recipe.from_document(recipe_id, data)

    def add_recipe(self, draft: RecipeDraft, owner_id: str) -> Recipe:
        doc = new_recipe_document(draft, owner_id, self._clock())
        recipe_id = uuid.uuid4().hex
        self._docs[recipe_id] = doc
        return Recipe.from_document(recipe_id, doc)

    def update_recipe(
        self, recipe_id: str, patch: RecipePatch, owner_id: Optional[str] = None
    ) -> Recipe:
        current = self.get_recipe(recipe_id, owner_id)
        self._docs[recipe_id].update(patch_document(patch, current, self._clock()))
        return self.get_recipe(recipe_id)

    def delete_recipe(self, recipe_id: str, owner_id: Optional[str] = None) -> None:
        self.get_recipe(recipe_id, owner_id)
        del self._docs[recipe_id]


def _make_draft(title: str = "Pancakes", **overrides) -> RecipeDraft:
    data = {
        "title": title,
        "ingredients": [{"item": "flour", "amount": "2", "unit": "cups"}],
        "instructions": ["Mix", "Cook"],
    }
    data.update(overrides)
    return RecipeDraft.from_mapping(data)


@pytest.fixture
def make_draft():
    return _make_draft


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage(clock: FakeClock) -> InMemoryRecipeStorage:
    return InMemoryRecipeStorage(clock)


@pytest.fixture
def app(storage: InMemoryRecipeStorage, clock: FakeClock):
    app = create_app(storage=storage, clock=clock)
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def client(app):
    return app.test_client()
