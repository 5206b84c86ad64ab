from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from .models import Recipe
from .storage import RecipeRepository, now_ms

WEEK_MS = 7 * 24 * 60 * 60 * 1000
TOP_RATING = 4
RECENTLY_UPDATED_LIMIT = 5


@dataclass
class RecipeSummary:
    id: str
    title: str


@dataclass
class RecipeStats:
    """Summary counts over one owner's recipes at a point in time."""

    total: int = 0
    categories: int = 0
    top_rated: int = 0
    easy: int = 0
    medium: int = 0
    hard: int = 0
    this_week: int = 0
    recently_updated: List[RecipeSummary] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def compute_stats(recipes: Iterable[Recipe], now: int) -> RecipeStats:
    """Aggregate ``recipes`` relative to ``now`` (milliseconds).

    ``recently_updated`` keeps the input order between recipes updated at the
    same instant.
    """

    recipes = list(recipes)
    week_ago = now - WEEK_MS

    difficulties = [recipe.difficulty for recipe in recipes]
    newest_updates = sorted(recipes, key=lambda recipe: recipe.updated_at, reverse=True)

    return RecipeStats(
        total=len(recipes),
        categories=len({recipe.category for recipe in recipes if recipe.category}),
        top_rated=sum(
            1 for recipe in recipes if recipe.rating is not None and recipe.rating >= TOP_RATING
        ),
        easy=difficulties.count("easy"),
        medium=difficulties.count("medium"),
        hard=difficulties.count("hard"),
        this_week=sum(1 for recipe in recipes if recipe.created_at > week_ago),
        recently_updated=[
            RecipeSummary(id=recipe.id, title=recipe.title)
            for recipe in newest_updates[:RECENTLY_UPDATED_LIMIT]
        ],
    )


def owner_stats(
    storage: RecipeRepository, owner_id: str, now: Optional[int] = None
) -> RecipeStats:
    return compute_stats(storage.list_recipes(owner_id), now if now is not None else now_ms())


__all__ = ["RecipeStats", "RecipeSummary", "WEEK_MS", "compute_stats", "owner_stats"]
