from __future__ import annotations

import time
from typing import Any, Dict, Iterable, Optional, Protocol

from .models import Recipe, RecipeDraft, RecipePatch
from .validation import (
    clean_ingredients,
    clean_instructions,
    validate_new_recipe,
    validate_recipe_patch,
)


def now_ms() -> int:
    """Current wall-clock time in milliseconds since the epoch."""

    return int(time.time() * 1000)


class RecipeRepository(Protocol):
    """Protocol describing the behaviour required by the web layer.

    ``owner_id`` arguments scope a lookup to one user: a recipe that belongs
    to somebody else is reported as missing.
    """

    def list_recipes(self, owner_id: str) -> Iterable[Recipe]:
        """Return the owner's recipes ordered newest first."""

    def get_recipe(self, recipe_id: str, owner_id: Optional[str] = None) -> Recipe:
        """Return a single recipe or raise :class:`RecipeNotFoundError` if missing."""

    def add_recipe(self, draft: RecipeDraft, owner_id: str) -> Recipe:
        """Validate and persist a new recipe and return the stored instance."""

    def update_recipe(
        self,
        recipe_id: str,
        patch: RecipePatch,
        owner_id: Optional[str] = None,
    ) -> Recipe:
        """Apply the supplied fields of ``patch`` and return the new representation."""

    def delete_recipe(self, recipe_id: str, owner_id: Optional[str] = None) -> None:
        """Remove a recipe permanently."""


def new_recipe_document(draft: RecipeDraft, owner_id: str, now: int) -> Dict[str, Any]:
    """Validate ``draft`` and return the document to insert.

    Optional fields that were not given are left out of the document.
    """

    validate_new_recipe(draft)

    doc: Dict[str, Any] = {
        "title": draft.title.strip(),
        "ingredients": [ingredient.to_dict() for ingredient in clean_ingredients(draft.ingredients)],
        "instructions": clean_instructions(draft.instructions),
        "owner_id": owner_id,
        "created_at": now,
        "updated_at": now,
    }
    for name in (
        "description",
        "prep_time",
        "cook_time",
        "servings",
        "category",
        "tags",
        "difficulty",
        "rating",
        "notes",
    ):
        value = getattr(draft, name)
        if value is not None:
            doc[name] = list(value) if name == "tags" else value
    return doc


def patch_document(patch: RecipePatch, existing: Recipe, now: int) -> Dict[str, Any]:
    """Validate ``patch`` and return the field updates to write over ``existing``."""

    validate_recipe_patch(patch)

    changes = patch.changes()
    if "title" in changes:
        changes["title"] = changes["title"].strip()
    if "ingredients" in changes:
        changes["ingredients"] = [
            ingredient.to_dict() for ingredient in clean_ingredients(changes["ingredients"])
        ]
    if "instructions" in changes:
        changes["instructions"] = clean_instructions(changes["instructions"])

    changes["updated_at"] = max(now, existing.created_at, existing.updated_at)
    return changes


__all__ = ["RecipeRepository", "new_recipe_document", "now_ms", "patch_document"]
