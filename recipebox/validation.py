"""Checks applied to recipe payloads before they reach the store.

The same rules gate creation and partial updates. Ingredients and
instructions follow the trim-and-filter rule: blank entries are dropped and
the payload is rejected only if nothing is left.
"""

from __future__ import annotations

from typing import Any, Iterable, List

from .errors import ValidationError
from .models import UNSET, Ingredient, RecipeDraft, RecipePatch

MIN_RATING = 0
MAX_RATING = 5

OPTIONAL_TEXT_FIELDS = ("description", "category", "difficulty", "notes")
REQUIRED_FIELDS = ("title", "ingredients", "instructions")
_OPTIONAL_FIELDS = OPTIONAL_TEXT_FIELDS + ("prep_time", "cook_time", "servings", "tags", "rating")


def clean_ingredients(ingredients: Iterable[Ingredient]) -> List[Ingredient]:
    return [
        Ingredient(item=ingredient.item.strip(), amount=ingredient.amount, unit=ingredient.unit)
        for ingredient in ingredients
        if ingredient.item.strip()
    ]


def clean_instructions(instructions: Iterable[str]) -> List[str]:
    return [step.strip() for step in instructions if step.strip()]


def validate_new_recipe(draft: RecipeDraft) -> None:
    """Raise :class:`ValidationError` if ``draft`` cannot be stored."""

    _check_title(draft.title)
    _check_ingredients(draft.ingredients)
    _check_instructions(draft.instructions)
    _check_optional_fields({name: getattr(draft, name) for name in _OPTIONAL_FIELDS})


def validate_recipe_patch(patch: RecipePatch) -> None:
    """Raise :class:`ValidationError` if a supplied field of ``patch`` is invalid.

    Fields left as ``UNSET`` are not looked at.
    """

    if patch.title is not UNSET:
        _check_title(patch.title)
    if patch.ingredients is not UNSET:
        _check_ingredients(patch.ingredients)
    if patch.instructions is not UNSET:
        _check_instructions(patch.instructions)

    supplied = {
        name: value for name, value in patch.changes().items() if name not in REQUIRED_FIELDS
    }
    _check_optional_fields(supplied)


def _check_title(title: Any) -> None:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("Title is required.")


def _check_ingredients(ingredients: Any) -> None:
    if not ingredients or not clean_ingredients(ingredients):
        raise ValidationError("At least one ingredient is required.")


def _check_instructions(instructions: Any) -> None:
    if not instructions or not clean_instructions(instructions):
        raise ValidationError("At least one instruction is required.")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_minimum(name: str, value: Any, minimum: int) -> None:
    if value is None:
        return
    if not _is_int(value) or value < minimum:
        raise ValidationError(f"'{name}' must be a whole number of at least {minimum}.")


def _check_optional_fields(values: dict) -> None:
    for name in OPTIONAL_TEXT_FIELDS:
        value = values.get(name)
        if value is not None and not isinstance(value, str):
            raise ValidationError(f"'{name}' must be a string.")

    _check_minimum("prep_time", values.get("prep_time"), 0)
    _check_minimum("cook_time", values.get("cook_time"), 0)
    _check_minimum("servings", values.get("servings"), 1)

    rating = values.get("rating")
    if rating is not None and (not _is_int(rating) or not MIN_RATING <= rating <= MAX_RATING):
        raise ValidationError(f"'rating' must be a whole number from {MIN_RATING} to {MAX_RATING}.")


__all__ = [
    "clean_ingredients",
    "clean_instructions",
    "validate_new_recipe",
    "validate_recipe_patch",
]
