from __future__ import annotations

import logging
import os
from typing import Callable, Iterable, Optional

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from .errors import RecipeNotFoundError
from .models import Recipe, RecipeDraft, RecipePatch
from .storage import RecipeRepository, new_recipe_document, now_ms, patch_document

logger = logging.getLogger(__name__)


class FirestoreRecipeStorage(RecipeRepository):
    """Recipe storage backed by a Firestore collection.

    Every document carries an ``owner_id`` field. Listing an owner's recipes
    needs a composite index on ``owner_id`` (ascending) and ``created_at``
    (descending).
    """

    def __init__(
        self,
        *,
        project: Optional[str] = None,
        collection_name: str = "recipes",
        client: Optional[firestore.Client] = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._project = project
        self._collection_name = collection_name
        self._clock = clock

        self._firestore_client = client if client is not None else firestore.Client(project=project)
        self._collection = self._firestore_client.collection(collection_name)

    @classmethod
    def from_env(cls) -> "FirestoreRecipeStorage":
        """Build a storage instance from environment variables."""

        project = os.environ.get("GCP_PROJECT")
        collection_name = os.environ.get("RECIPES_COLLECTION", "recipes")
        return cls(project=project, collection_name=collection_name)

    def list_recipes(self, owner_id: str) -> Iterable[Recipe]:
        query = self._collection.where(filter=FieldFilter("owner_id", "==", owner_id)).order_by(
            "created_at", direction=firestore.Query.DESCENDING
        )
        for doc in query.stream():
            data = doc.to_dict() or {}
            yield Recipe.from_document(doc.id, data)

    def get_recipe(self, recipe_id: str, owner_id: Optional[str] = None) -> Recipe:
        _, recipe = self._load(recipe_id, owner_id)
        return recipe

    def add_recipe(self, draft: RecipeDraft, owner_id: str) -> Recipe:
        doc = new_recipe_document(draft, owner_id, self._clock())

        doc_ref = self._collection.document()
        doc_ref.set(doc)
        logger.info("Created recipe %s for owner %s", doc_ref.id, owner_id)

        return Recipe.from_document(doc_ref.id, doc)

    def update_recipe(
        self,
        recipe_id: str,
        patch: RecipePatch,
        owner_id: Optional[str] = None,
    ) -> Recipe:
        doc_ref, current = self._load(recipe_id, owner_id)

        update_doc = patch_document(patch, current, self._clock())
        doc_ref.update(update_doc)
        logger.info("Updated recipe %s (%s)", recipe_id, ", ".join(sorted(update_doc)))

        snapshot = doc_ref.get()
        data = snapshot.to_dict() or {}
        return Recipe.from_document(snapshot.id, data)

    def delete_recipe(self, recipe_id: str, owner_id: Optional[str] = None) -> None:
        doc_ref, _ = self._load(recipe_id, owner_id)
        doc_ref.delete()
        logger.info("Deleted recipe %s", recipe_id)

    def _load(self, recipe_id: str, owner_id: Optional[str]):
        doc_ref = self._collection.document(recipe_id)
        snapshot = doc_ref.get()

        if not snapshot.exists:
            raise RecipeNotFoundError(recipe_id)

        recipe = Recipe.from_document(snapshot.id, snapshot.to_dict() or {})
        if owner_id is not None and recipe.owner_id != owner_id:
            # Foreign recipes are indistinguishable from missing ones.
            raise RecipeNotFoundError(recipe_id)

        return doc_ref, recipe


__all__ = ["FirestoreRecipeStorage"]
