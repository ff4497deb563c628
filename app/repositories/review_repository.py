"""
app/repositories/review_repository.py

Purpose: Persistence for reviews
"""

from typing import Any, Dict, List, Optional

from app.db.mongo import REVIEWS
from app.repositories.base import BaseRepository, to_object_id, with_error_handling


class ReviewRepository(BaseRepository):
    collection_name = REVIEWS
    reference_fields = ("reviewer_id", "target_id", "order_id")

    @with_error_handling
    async def find_by_target(self, target_id: str) -> Optional[List[Dict[str, Any]]]:
        return await self._find({"target_id": to_object_id(target_id)})

    @with_error_handling
    async def find_by_reviewer(self, reviewer_id: str) -> Optional[List[Dict[str, Any]]]:
        return await self._find({"reviewer_id": to_object_id(reviewer_id)})

    @with_error_handling
    async def find_by_order_ids(self, order_ids: List[str]) -> Optional[List[Dict[str, Any]]]:
        return await self._find({"order_id": {"$in": [to_object_id(i) for i in order_ids]}})
