"""
app/repositories/user_repository.py

Purpose: Persistence for user accounts

- Public reads never expose the password hash or reset OTP record
- Credential reads (find_by_email) return the full document for auth
- Embedded reset_otp sub-document management
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pymongo import ReturnDocument

from app.db.mongo import USERS
from app.repositories.base import BaseRepository, serialize, to_object_id, with_error_handling

PRIVATE_FIELDS = ("password", "reset_otp")
PUBLIC_PROJECTION = {field: 0 for field in PRIVATE_FIELDS}


def strip_private(user: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if user is None:
        return None
    return {k: v for k, v in user.items() if k not in PRIVATE_FIELDS}


class UserRepository(BaseRepository):
    collection_name = USERS

    @with_error_handling
    async def create(self, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        now = datetime.utcnow()
        document = {**data, "created_at": now, "updated_at": now}
        result = await self._collection().insert_one(document)
        document["_id"] = result.inserted_id
        return strip_private(serialize(document))

    @with_error_handling
    async def find_by_id(self, id: str) -> Optional[Dict[str, Any]]:
        doc = await self._collection().find_one({"_id": to_object_id(id)}, PUBLIC_PROJECTION)
        return serialize(doc)

    @with_error_handling
    async def find_all(self, query: Optional[Dict[str, Any]] = None) -> Optional[List[Dict[str, Any]]]:
        return await self._find(query or {}, projection=PUBLIC_PROJECTION)

    @with_error_handling
    async def update(self, id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        doc = await self._collection().find_one_and_update(
            {"_id": to_object_id(id)},
            {"$set": {**data, "updated_at": datetime.utcnow()}},
            projection=PUBLIC_PROJECTION,
            return_document=ReturnDocument.AFTER,
        )
        return serialize(doc)

    @with_error_handling
    async def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """Full document including password hash and reset_otp."""
        doc = await self._collection().find_one({"email": email.lower()})
        return serialize(doc)

    @with_error_handling
    async def add_role(self, id: str, role: str) -> Optional[Dict[str, Any]]:
        doc = await self._collection().find_one_and_update(
            {"_id": to_object_id(id)},
            {"$addToSet": {"role": role}, "$set": {"updated_at": datetime.utcnow()}},
            projection=PUBLIC_PROJECTION,
            return_document=ReturnDocument.AFTER,
        )
        return serialize(doc)

    @with_error_handling
    async def update_last_login(self, id: str, timestamp: datetime) -> Optional[bool]:
        result = await self._collection().update_one(
            {"_id": to_object_id(id)},
            {"$set": {"last_login": timestamp}},
        )
        return result.matched_count > 0

    @with_error_handling
    async def set_reset_otp(self, id: str, record: Dict[str, Any]) -> Optional[bool]:
        result = await self._collection().update_one(
            {"_id": to_object_id(id)},
            {"$set": {"reset_otp": record, "updated_at": datetime.utcnow()}},
        )
        return result.matched_count > 0

    @with_error_handling
    async def clear_reset_otp(self, id: str) -> Optional[bool]:
        result = await self._collection().update_one(
            {"_id": to_object_id(id)},
            {"$unset": {"reset_otp": ""}, "$set": {"updated_at": datetime.utcnow()}},
        )
        return result.matched_count > 0

    @with_error_handling
    async def update_password(self, id: str, password_hash: str) -> Optional[bool]:
        """Stores a new password hash and drops any reset OTP record."""
        result = await self._collection().update_one(
            {"_id": to_object_id(id)},
            {
                "$set": {"password": password_hash, "updated_at": datetime.utcnow()},
                "$unset": {"reset_otp": ""},
            },
        )
        return result.matched_count > 0
