"""
app/repositories/base.py

Purpose: Shared repository plumbing

- with_error_handling: logs database errors and returns None instead of raising
- ObjectId conversion for reference fields
- Document serialization (_id -> id, ObjectId -> str)
- Generic CRUD over a single collection
"""

import functools
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument

from app.db.mongo import get_collection
from app.core.logging import get_logger

logger = get_logger(__name__)


def with_error_handling(fn):
    """
    Wraps an async repository method so that any exception is logged and
    None is returned to the service layer.
    """
    @functools.wraps(fn)
    async def wrapper(*args, **kwargs):
        try:
            return await fn(*args, **kwargs)
        except Exception as e:
            logger.error(f"Error in repository method {fn.__qualname__}: {e}", exc_info=True)
            return None
    return wrapper


def to_object_id(value: Any) -> ObjectId:
    """
    Converts a string id to ObjectId.

    Raises:
        bson.errors.InvalidId: If the value is not a valid ObjectId
    """
    if isinstance(value, ObjectId):
        return value
    return ObjectId(str(value))


def serialize(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Converts a raw MongoDB document into an API-friendly dict.
    _id becomes id; ObjectId values (top level and nested) become strings.
    """
    if doc is None:
        return None

    result = {}
    for key, value in doc.items():
        if key == "_id":
            result["id"] = str(value)
        else:
            result[key] = _serialize_value(value)
    return result


def _serialize_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        if "_id" in value:
            return serialize(value)
        return {k: _serialize_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_serialize_value(v) for v in value]
    return value


class BaseRepository:
    """
    Generic CRUD over one collection.

    Subclasses set collection_name and list the fields holding references to
    other documents in reference_fields; those are stored as ObjectId.
    """

    collection_name: str = ""
    reference_fields: Tuple[str, ...] = ()
    default_sort: Sequence[Tuple[str, int]] = (("created_at", -1),)

    def _collection(self) -> AsyncIOMotorCollection:
        return get_collection(self.collection_name)

    def _prepare(self, data: Dict[str, Any]) -> Dict[str, Any]:
        prepared = dict(data)
        for field in self.reference_fields:
            if prepared.get(field) is not None:
                prepared[field] = to_object_id(prepared[field])
        return prepared

    async def _find(
        self,
        query: Dict[str, Any],
        sort: Optional[Iterable[Tuple[str, int]]] = None,
        projection: Optional[Dict[str, int]] = None,
    ) -> List[Dict[str, Any]]:
        cursor = self._collection().find(query, projection)
        cursor = cursor.sort(list(sort or self.default_sort))
        return [serialize(doc) async for doc in cursor]

    @with_error_handling
    async def create(self, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        now = datetime.utcnow()
        document = {**self._prepare(data), "created_at": now, "updated_at": now}
        result = await self._collection().insert_one(document)
        document["_id"] = result.inserted_id
        return serialize(document)

    @with_error_handling
    async def find_by_id(self, id: str) -> Optional[Dict[str, Any]]:
        doc = await self._collection().find_one({"_id": to_object_id(id)})
        return serialize(doc)

    @with_error_handling
    async def find_all(self, query: Optional[Dict[str, Any]] = None) -> Optional[List[Dict[str, Any]]]:
        return await self._find(self._prepare(query or {}))

    @with_error_handling
    async def find_by(self, field: str, value: Any) -> Optional[List[Dict[str, Any]]]:
        return await self._find(self._prepare({field: value}))

    @with_error_handling
    async def update(self, id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        changes = {**self._prepare(data), "updated_at": datetime.utcnow()}
        doc = await self._collection().find_one_and_update(
            {"_id": to_object_id(id)},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        return serialize(doc)

    @with_error_handling
    async def delete(self, id: str) -> Optional[bool]:
        result = await self._collection().delete_one({"_id": to_object_id(id)})
        return result.deleted_count > 0
