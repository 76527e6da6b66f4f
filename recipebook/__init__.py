from typing import Any, Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import RequestEntityTooLarge

from .config import Settings
from .errors import InvalidRequest, RecipeNotFound, StoreUnavailable
from .gcp_storage import FirestoreRecipeStorage
from .models import Recipe
from .seed import JsonFileSeedProvider, SeedProvider
from .service import RecipeService
from .storage import RecipeRepository


def create_app(
    storage: Optional[RecipeRepository] = None,
    seed_provider: Optional[SeedProvider] = None,
    settings: Optional[Settings] = None,
) -> Flask:
    """Create and configure the Flask application.

    Parameters
    ----------
    storage:
        Optional recipe repository. When ``None`` the application opens a
        :class:`FirestoreRecipeStorage` configured from ``settings``.
    seed_provider:
        Optional source for ``/api/import``. When ``None`` a JSON file seed is
        used if ``RECIPES_SEED_FILE`` is set; otherwise import is unavailable.
    settings:
        Optional settings. Read from the environment when ``None``.
    """

    app = Flask(__name__)
    app.config.setdefault("MAX_CONTENT_LENGTH", 1024 * 1024)

    if settings is None:
        settings = Settings.from_env()
    if storage is None:
        storage = FirestoreRecipeStorage.from_settings(settings)
    if seed_provider is None and settings.seed_file:
        seed_provider = JsonFileSeedProvider(settings.seed_file)

    app.config["RECIPE_SERVICE"] = RecipeService(storage, seed_provider)

    def service() -> RecipeService:
        return app.config["RECIPE_SERVICE"]

    @app.errorhandler(RecipeNotFound)
    def handle_not_found(exc: RecipeNotFound):
        return jsonify(error=str(exc)), 404

    @app.errorhandler(InvalidRequest)
    def handle_invalid_request(exc: InvalidRequest):
        return jsonify(error=str(exc)), 400

    @app.errorhandler(StoreUnavailable)
    def handle_store_unavailable(exc: StoreUnavailable):
        app.logger.error("Request %s %s failed: %s", request.method, request.path, exc)
        return jsonify(error=str(exc)), 500

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(exc: RequestEntityTooLarge):
        return jsonify(error="Request body is too large."), 413

    @app.get("/")
    @app.get("/recipes")
    @app.get("/recipes/<recipe_id>")
    def client_shell(recipe_id: Optional[str] = None):
        return app.send_static_file("index.html")

    @app.get("/api/recipes")
    def find_all():
        return jsonify([recipe.to_dict() for recipe in service().find_all()])

    @app.get("/api/recipes/<recipe_id>")
    def find_by_id(recipe_id: str):
        return jsonify(service().find_by_id(recipe_id).to_dict())

    @app.post("/api/recipes")
    def add():
        recipe = service().add(_json_payload())
        return jsonify(recipe.to_dict()), 201

    @app.put("/api/recipes/<recipe_id>")
    def update(recipe_id: str):
        recipe = service().update(recipe_id, _json_payload())
        return jsonify(recipe.to_dict())

    @app.delete("/api/recipes/<recipe_id>")
    def delete(recipe_id: str):
        service().delete(recipe_id)
        return jsonify(id=recipe_id, deleted=True)

    @app.get("/api/import")
    def import_recipes():
        return jsonify([recipe.to_dict() for recipe in service().import_seed()])

    @app.get("/api/killall")
    def kill_all():
        return jsonify(deleted=service().kill_all())

    return app


def _json_payload() -> Any:
    """Return the request's JSON body, treating an empty body as ``{}``."""

    payload = request.get_json(silent=True, force=True)
    if payload is None:
        if request.get_data():
            raise InvalidRequest("Request body must be a JSON object.")
        return {}
    return payload


__all__ = ["create_app", "Recipe"]
