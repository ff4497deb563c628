"""
app/repositories/seller_repository.py

Purpose: Persistence for seller profiles (one per user)
"""

from typing import Any, Dict, Optional

from app.db.mongo import SELLERS
from app.repositories.base import BaseRepository, serialize, to_object_id, with_error_handling


class SellerRepository(BaseRepository):
    collection_name = SELLERS
    reference_fields = ("user_id",)

    @with_error_handling
    async def find_by_user_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        doc = await self._collection().find_one({"user_id": to_object_id(user_id)})
        return serialize(doc)
