from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

from google.api_core import exceptions as gcloud_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import firestore

from .config import Settings
from .errors import InvalidRequest, RecipeNotFound, StoreUnavailable
from .models import Recipe
from .storage import RecipeRepository

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

# Firestore rejects batches and transactions with more writes than this.
MAX_BATCH_WRITES = 500

MAX_DOCUMENT_ID_BYTES = 1500


@contextmanager
def _store_errors(action: str) -> Iterator[None]:
    """Translate client library failures into the service error taxonomy."""

    try:
        yield
    except gcloud_exceptions.BadRequest as exc:
        raise InvalidRequest(f"Store rejected {action}: {exc.message}") from exc
    except (gcloud_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError) as exc:
        logger.warning("Document store failure during %s: %s", action, exc)
        raise StoreUnavailable(f"Document store unavailable during {action}.") from exc


class FirestoreRecipeStorage(RecipeRepository):
    """Recipe storage backed by a Firestore collection.

    The client is created once and shared by every request. Calls are made
    with client-side retries disabled and a fixed timeout, so a slow store
    surfaces as :class:`StoreUnavailable` instead of hanging the request.
    """

    def __init__(
        self,
        *,
        project: Optional[str] = None,
        database: Optional[str] = None,
        collection_name: str = "recipes",
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[firestore.Client] = None,
    ) -> None:
        self._collection_name = collection_name
        self._timeout = timeout

        if client is None:
            client = firestore.Client(project=project, database=database)
        self._client = client
        self._collection = self._client.collection(collection_name)

    @classmethod
    def from_settings(cls, settings: Settings) -> "FirestoreRecipeStorage":
        """Build a storage instance from application settings."""

        return cls(
            project=settings.gcp_project,
            database=settings.firestore_database,
            collection_name=settings.collection_name,
            timeout=settings.store_timeout,
        )

    def list_recipes(self) -> List[Recipe]:
        """Return recipes oldest first.

        Ordering by ``created_at`` leaves out documents without that field,
        such as ones written to the collection by other tools. Those are still
        removed by :meth:`delete_all_recipes`.
        """

        query = self._collection.order_by("created_at")
        with _store_errors("list"):
            docs = list(query.stream(retry=None, timeout=self._timeout))
        return [self._doc_to_recipe(doc.id, doc.to_dict() or {}) for doc in docs]

    def get_recipe(self, recipe_id: str) -> Recipe:
        doc_ref = self._document(recipe_id)
        with _store_errors("get"):
            snapshot = doc_ref.get(retry=None, timeout=self._timeout)

        if not snapshot.exists:
            raise RecipeNotFound(recipe_id)

        data = snapshot.to_dict() or {}
        return self._doc_to_recipe(snapshot.id, data)

    def add_recipe(self, fields: Mapping[str, Any]) -> Recipe:
        doc_ref = self._collection.document()
        with _store_errors("create"):
            doc_ref.set(self._new_document(fields), retry=None, timeout=self._timeout)
            snapshot = doc_ref.get(retry=None, timeout=self._timeout)

        data = snapshot.to_dict() or {}
        return self._doc_to_recipe(snapshot.id, data)

    def add_recipes(self, records: Sequence[Mapping[str, Any]]) -> List[Recipe]:
        if not records:
            return []
        if len(records) > MAX_BATCH_WRITES:
            raise InvalidRequest(
                f"Cannot insert {len(records)} recipes at once; the limit is {MAX_BATCH_WRITES}."
            )

        batch = self._client.batch()
        doc_refs = []
        for fields in records:
            doc_ref = self._collection.document()
            batch.set(doc_ref, self._new_document(fields))
            doc_refs.append(doc_ref)

        with _store_errors("import"):
            batch.commit(retry=None, timeout=self._timeout)

        # Committed. A failed read-back falls back to the seed fields.
        try:
            snapshots = {
                snapshot.id: snapshot
                for snapshot in self._client.get_all(doc_refs, retry=None, timeout=self._timeout)
            }
        except (gcloud_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError) as exc:
            logger.warning("Imported %d recipes but could not read them back: %s", len(doc_refs), exc)
            snapshots = {}

        recipes = []
        for doc_ref, fields in zip(doc_refs, records):
            snapshot = snapshots.get(doc_ref.id)
            data = snapshot.to_dict() if snapshot is not None else None
            recipes.append(self._doc_to_recipe(doc_ref.id, data or self._new_document(fields)))
        return recipes

    def update_recipe(self, recipe_id: str, fields: Mapping[str, Any]) -> Recipe:
        doc_ref = self._document(recipe_id)

        with _store_errors("update"):
            if fields:
                try:
                    # update() merges the given fields and fails on missing documents.
                    doc_ref.update(dict(fields), retry=None, timeout=self._timeout)
                except gcloud_exceptions.NotFound:
                    raise RecipeNotFound(recipe_id) from None
            snapshot = doc_ref.get(retry=None, timeout=self._timeout)

        if not snapshot.exists:
            raise RecipeNotFound(recipe_id)

        data = snapshot.to_dict() or {}
        return self._doc_to_recipe(snapshot.id, data)

    def delete_recipe(self, recipe_id: str) -> None:
        doc_ref = self._document(recipe_id)
        with _store_errors("delete"):
            snapshot = doc_ref.get(retry=None, timeout=self._timeout)

            if not snapshot.exists:
                raise RecipeNotFound(recipe_id)

            doc_ref.delete(retry=None, timeout=self._timeout)

    def delete_all_recipes(self) -> int:
        with _store_errors("delete all"):
            doc_refs = [
                snapshot.reference
                for snapshot in self._collection.select([]).stream(
                    retry=None, timeout=self._timeout
                )
            ]

        deleted = 0
        for start in range(0, len(doc_refs), MAX_BATCH_WRITES):
            chunk = doc_refs[start : start + MAX_BATCH_WRITES]
            batch = self._client.batch()
            for doc_ref in chunk:
                batch.delete(doc_ref)
            with _store_errors("delete all"):
                batch.commit(retry=None, timeout=self._timeout)
            deleted += len(chunk)
        return deleted

    def _document(self, recipe_id: str) -> firestore.DocumentReference:
        if (
            not recipe_id
            or "/" in recipe_id
            or recipe_id in {".", ".."}
            or (recipe_id.startswith("__") and recipe_id.endswith("__"))
            or len(recipe_id.encode("utf-8")) > MAX_DOCUMENT_ID_BYTES
        ):
            raise InvalidRequest(f"Malformed recipe id: {recipe_id!r}.")
        return self._collection.document(recipe_id)

    def _new_document(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        doc = {"ingredients": [], "preparation": []}
        doc.update(fields)
        doc["created_at"] = firestore.SERVER_TIMESTAMP
        return doc

    def _doc_to_recipe(self, doc_id: str, data: Mapping[str, Any]) -> Recipe:
        return Recipe.from_document(doc_id, data)


__all__ = ["FirestoreRecipeStorage"]
