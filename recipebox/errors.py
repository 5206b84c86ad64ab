"""Exceptions raised by the recipe data-access layer."""


class RecipeError(Exception):
    """Base class for errors surfaced to API callers."""


class ValidationError(RecipeError, ValueError):
    """A create or update payload was rejected."""


class RecipeNotFoundError(RecipeError, KeyError):
    """The requested recipe does not exist for the caller."""

    def __init__(self, recipe_id: str) -> None:
        super().__init__(recipe_id)
        self.recipe_id = recipe_id

    def __str__(self) -> str:
        return f"Recipe '{self.recipe_id}' does not exist."


class AuthenticationError(RecipeError):
    """No usable owner identity was supplied with the request."""


__all__ = [
    "AuthenticationError",
    "RecipeError",
    "RecipeNotFoundError",
    "ValidationError",
]
