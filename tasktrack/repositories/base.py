"""Shared document-store access for the entity repositories."""

import logging
from datetime import datetime, timedelta
from typing import Any, ClassVar, Generic, TypeVar

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from tasktrack.db.mongo import CollectionResolver
from tasktrack.errors import ConflictError, NotFoundError, TransientStoreError
from tasktrack.models.common import as_utc, is_object_id, utcnow

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT")


def conflict_field(error: DuplicateKeyError) -> str | None:
    """Name the field whose unique index rejected a write.

    Reads the structured ``keyPattern`` (or ``keyValue``) the server attaches
    to duplicate key errors; the error message text is never inspected.
    """
    details = error.details or {}
    for key in ("keyPattern", "keyValue"):
        fields = details.get(key)
        if fields:
            name = next(iter(fields))
            return "id" if name == "_id" else name
    return None


def next_updated_at(previous: datetime | None, created_at: datetime | None = None) -> datetime:
    """Timestamp for a mutation, strictly after ``previous``.

    The store keeps millisecond precision, so two writes within the same
    millisecond are separated by bumping the later one.
    """
    now = utcnow()
    previous = as_utc(previous)
    if previous is not None and now <= previous:
        now = previous + timedelta(milliseconds=1)
    created_at = as_utc(created_at)
    if created_at is not None and now < created_at:
        now = created_at
    return now


class DocumentRepository(Generic[EntityT]):
    """
    CRUD over one collection resolved from a CollectionResolver.

    Malformed identifiers are rejected before any round trip. Store failures
    are logged once here and re-raised as TransientStoreError; unique index
    violations become ConflictError naming the offending field. Nothing is
    retried.
    """

    entity_name: ClassVar[str]
    logical_collection: ClassVar[str]

    def __init__(self, resolver: CollectionResolver) -> None:
        self.collection = resolver.resolve(self.logical_collection)

    def to_entity(self, doc: dict[str, Any]) -> EntityT:
        raise NotImplementedError

    def _store_error(self, action: str, error: PyMongoError) -> TransientStoreError:
        return TransientStoreError(f"Error {action}: {error}")

    async def list_all(self) -> list[EntityT]:
        """Unfiltered scan of the collection."""
        try:
            docs = await self.collection.find({}).to_list(length=None)
        except PyMongoError as e:
            logger.exception("Error getting all %s documents", self.entity_name)
            raise self._store_error(f"getting all {self.entity_name} documents", e) from e
        return [self.to_entity(doc) for doc in docs]

    async def find_by_id(self, id: str) -> EntityT | None:
        """Return the entity, or None when the id is malformed or absent."""
        if not is_object_id(id):
            return None
        try:
            doc = await self.collection.find_one({"_id": ObjectId(id)})
        except PyMongoError as e:
            logger.exception("Error getting %s with id %s", self.entity_name, id)
            raise self._store_error(f"getting {self.entity_name} {id}", e) from e
        return self.to_entity(doc) if doc is not None else None

    async def require_by_id(self, id: str) -> EntityT:
        """Return the entity or raise NotFoundError."""
        entity = await self.find_by_id(id)
        if entity is None:
            raise NotFoundError(self.entity_name, id)
        return entity

    async def _find_one(self, query: dict[str, Any], description: str) -> EntityT | None:
        try:
            doc = await self.collection.find_one(query)
        except PyMongoError as e:
            logger.exception("Error getting %s by %s", self.entity_name, description)
            raise self._store_error(f"getting {self.entity_name} by {description}", e) from e
        return self.to_entity(doc) if doc is not None else None

    async def _insert(self, doc: dict[str, Any]) -> None:
        try:
            await self.collection.insert_one(doc)
        except DuplicateKeyError as e:
            field = conflict_field(e)
            logger.warning("Duplicate %s rejected on field %s", self.entity_name, field)
            raise ConflictError(field) from e
        except PyMongoError as e:
            logger.exception("Error creating %s", self.entity_name)
            raise self._store_error(f"creating {self.entity_name}", e) from e

    async def _replace(self, id: str | None, doc: dict[str, Any]) -> EntityT:
        """Overwrite every mutable field of the document keyed by id.

        ``createdAt`` and ``_id`` are left untouched. Last writer wins.
        """
        if id is None or not is_object_id(id):
            raise NotFoundError(self.entity_name, str(id))

        fields = {k: v for k, v in doc.items() if k not in ("_id", "createdAt")}
        try:
            result = await self.collection.find_one_and_update(
                {"_id": ObjectId(id)},
                {"$set": fields},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as e:
            field = conflict_field(e)
            logger.warning("Update of %s %s rejected on field %s", self.entity_name, id, field)
            raise ConflictError(field) from e
        except PyMongoError as e:
            logger.exception("Error updating %s with id %s", self.entity_name, id)
            raise self._store_error(f"updating {self.entity_name} {id}", e) from e

        if result is None:
            raise NotFoundError(self.entity_name, id)
        return self.to_entity(result)

    async def delete(self, id: str) -> bool:
        """Delete by id. False when the id is malformed or nothing was removed."""
        if not is_object_id(id):
            return False
        try:
            result = await self.collection.delete_one({"_id": ObjectId(id)})
        except PyMongoError as e:
            logger.exception("Error deleting %s with id %s", self.entity_name, id)
            raise self._store_error(f"deleting {self.entity_name} {id}", e) from e
        return result.deleted_count > 0
