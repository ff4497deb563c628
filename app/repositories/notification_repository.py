"""
app/repositories/notification_repository.py

Purpose: Persistence for user notifications
"""

from typing import Any, Dict, List, Optional

from app.db.mongo import NOTIFICATIONS
from app.repositories.base import BaseRepository, to_object_id, with_error_handling


class NotificationRepository(BaseRepository):
    collection_name = NOTIFICATIONS
    reference_fields = ("user_id",)

    @with_error_handling
    async def find_by_user(self, user_id: str) -> Optional[List[Dict[str, Any]]]:
        return await self._find({"user_id": to_object_id(user_id)})
