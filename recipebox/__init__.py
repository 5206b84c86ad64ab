import logging
import os
from typing import Any, Callable, Optional, Tuple

from flask import Flask, g, jsonify, request

from .errors import AuthenticationError, RecipeNotFoundError, ValidationError
from .exchange import export_recipes, import_recipes
from .identity import identity_from_headers, resolve_owner_id
from .models import Recipe, RecipeDraft, RecipePatch
from .search import search_owner_recipes
from .stats import owner_stats
from .storage import RecipeRepository, now_ms

try:
    from .gcp_storage import FirestoreRecipeStorage
except ImportError:  # pragma: no cover - allows running tests without optional deps
    FirestoreRecipeStorage = None  # type: ignore[assignment]

logger = logging.getLogger(__name__)


def create_app(
    storage: Optional[RecipeRepository] = None,
    clock: Callable[[], int] = now_ms,
) -> Flask:
    """Create and configure the Flask application.

    Parameters
    ----------
    storage:
        Optional recipe repository. When ``None`` the application will use
        :class:`FirestoreRecipeStorage` configured through environment variables.
    clock:
        Millisecond clock used for time-windowed statistics.
    """

    app = Flask(__name__)
    app.config.setdefault("MAX_CONTENT_LENGTH", 16 * 1024 * 1024)
    app.secret_key = os.environ.get("FLASK_SECRET_KEY", "development-secret-change-me")

    if storage is None:
        if FirestoreRecipeStorage is None:
            raise RuntimeError(
                "google-cloud-firestore is not installed. Install it "
                "or pass an explicit storage backend to create_app."
            )
        storage = FirestoreRecipeStorage.from_env()
    app.config["RECIPE_STORAGE"] = storage
    app.config["RECIPE_CLOCK"] = clock

    def _storage() -> RecipeRepository:
        return app.config["RECIPE_STORAGE"]

    def _owner_id() -> str:
        if "owner_id" not in g:
            g.owner_id = resolve_owner_id(identity_from_headers(request.headers))
        return g.owner_id

    def _json_body() -> Any:
        data = request.get_json(silent=True)
        if data is None:
            raise ValidationError("Request body must be JSON.")
        return data

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError) -> Tuple[Any, int]:
        logger.warning("Rejected %s %s: %s", request.method, request.path, exc)
        return jsonify(error=str(exc)), 400

    @app.errorhandler(AuthenticationError)
    def handle_authentication_error(exc: AuthenticationError) -> Tuple[Any, int]:
        return jsonify(error=str(exc)), 401

    @app.errorhandler(RecipeNotFoundError)
    def handle_not_found(exc: RecipeNotFoundError) -> Tuple[Any, int]:
        return jsonify(error="Recipe not found."), 404

    @app.get("/healthz")
    def healthz() -> Any:
        return jsonify(status="ok")

    @app.get("/api/recipes")
    def list_recipes() -> Any:
        recipes = _storage().list_recipes(_owner_id())
        return jsonify([recipe.to_dict() for recipe in recipes])

    @app.post("/api/recipes")
    def create_recipe() -> Tuple[Any, int]:
        owner_id = _owner_id()
        draft = RecipeDraft.from_mapping(_json_body())
        recipe = _storage().add_recipe(draft, owner_id)
        return jsonify(id=recipe.id), 201

    @app.get("/api/recipes/search")
    def search_recipes() -> Any:
        term = request.args.get("q", "")
        recipes = search_owner_recipes(_storage(), _owner_id(), term)
        return jsonify([recipe.to_dict() for recipe in recipes])

    @app.get("/api/recipes/stats")
    def recipe_stats() -> Any:
        stats = owner_stats(_storage(), _owner_id(), now=app.config["RECIPE_CLOCK"]())
        return jsonify(stats.to_dict())

    @app.get("/api/recipes/export")
    def export_collection() -> Any:
        return jsonify(export_recipes(_storage().list_recipes(_owner_id())))

    @app.post("/api/recipes/import")
    def import_collection() -> Tuple[Any, int]:
        owner_id = _owner_id()
        result = import_recipes(_storage(), _json_body(), owner_id)
        return jsonify(result.to_dict()), 201

    @app.get("/api/recipes/<recipe_id>")
    def get_recipe(recipe_id: str) -> Any:
        recipe = _storage().get_recipe(recipe_id, owner_id=_owner_id())
        return jsonify(recipe.to_dict())

    @app.patch("/api/recipes/<recipe_id>")
    def update_recipe(recipe_id: str) -> Any:
        owner_id = _owner_id()
        patch = RecipePatch.from_mapping(_json_body())
        recipe = _storage().update_recipe(recipe_id, patch, owner_id=owner_id)
        return jsonify(recipe.to_dict())

    @app.delete("/api/recipes/<recipe_id>")
    def delete_recipe(recipe_id: str) -> Tuple[str, int]:
        _storage().delete_recipe(recipe_id, owner_id=_owner_id())
        return "", 204

    return app


__all__ = ["create_app", "Recipe"]
