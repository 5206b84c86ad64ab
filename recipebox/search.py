"""Case-insensitive substring search over an owner's recipes."""

from __future__ import annotations

from typing import Iterable, List

from .models import Recipe
from .storage import RecipeRepository


def matches(recipe: Recipe, needle: str) -> bool:
    """Return True if the lowercased ``needle`` occurs in a searchable field."""

    if needle in recipe.title.lower():
        return True
    if recipe.description and needle in recipe.description.lower():
        return True
    if any(needle in ingredient.item.lower() for ingredient in recipe.ingredients):
        return True
    if recipe.tags and any(needle in tag.lower() for tag in recipe.tags):
        return True
    if recipe.category and needle in recipe.category.lower():
        return True
    return False


def search_recipes(recipes: Iterable[Recipe], search_term: str) -> List[Recipe]:
    """Filter ``recipes`` by ``search_term``, keeping their order.

    A blank term matches nothing.
    """

    if not search_term.strip():
        return []

    needle = search_term.lower()
    return [recipe for recipe in recipes if matches(recipe, needle)]


def search_owner_recipes(
    storage: RecipeRepository, owner_id: str, search_term: str
) -> List[Recipe]:
    if not search_term.strip():
        return []
    return search_recipes(storage.list_recipes(owner_id), search_term)


__all__ = ["matches", "search_owner_recipes", "search_recipes"]
