"""Recipe export and import as JSON-serialisable documents."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from .errors import ValidationError
from .models import Recipe, RecipeDraft
from .storage import RecipeRepository, now_ms

logger = logging.getLogger(__name__)

EXPORT_VERSION = 1
_NOT_EXPORTED = ("id", "owner_id", "total_time", "created_at", "updated_at")


@dataclass
class ImportResult:
    created: List[str] = field(default_factory=list)
    errors: List[Tuple[int, str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "created": list(self.created),
            "errors": [{"index": index, "error": message} for index, message in self.errors],
        }


def export_recipes(recipes: Iterable[Recipe]) -> Dict[str, Any]:
    """Build an export document; ids and ownership are not carried over."""

    entries = []
    for recipe in recipes:
        data = recipe.to_dict()
        entries.append(
            {key: value for key, value in data.items() if key not in _NOT_EXPORTED and value is not None}
        )
    return {"version": EXPORT_VERSION, "exported_at": now_ms(), "recipes": entries}


def _entries(document: Any) -> List[Any]:
    if isinstance(document, list):
        return document
    if isinstance(document, Mapping) and isinstance(document.get("recipes"), list):
        return document["recipes"]
    raise ValidationError("Import data must be a list of recipes or an export document.")


def import_recipes(storage: RecipeRepository, document: Any, owner_id: str) -> ImportResult:
    """Create every valid recipe in ``document`` for ``owner_id``.

    Entries that fail validation are skipped and reported by position.
    """

    result = ImportResult()
    for index, entry in enumerate(_entries(document)):
        try:
            draft = RecipeDraft.from_mapping(entry)
            recipe = storage.add_recipe(draft, owner_id)
        except ValidationError as exc:
            result.errors.append((index, str(exc)))
            continue
        result.created.append(recipe.id)

    logger.info(
        "Imported %d recipe(s) for owner %s, skipped %d",
        len(result.created),
        owner_id,
        len(result.errors),
    )
    return result


__all__ = ["EXPORT_VERSION", "ImportResult", "export_recipes", "import_recipes"]
