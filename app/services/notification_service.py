"""
app/services/notification_service.py

Purpose: In-app notifications

- CRUD over notifications, mark as read
- notify(): used by other services to alert a user
- Cache keys: notification_{id}, notifications_user_{uid}, notifications
"""

from typing import Any, Dict, Optional

from app.core.logging import get_logger
from app.models.enums import NotificationType
from app.repositories.notification_repository import NotificationRepository
from app.repositories.user_repository import UserRepository
from app.services.cache_service import CacheService

logger = get_logger(__name__)


class NotificationService:

    def __init__(
        self,
        notification_repo: NotificationRepository,
        user_repo: UserRepository,
        cache: CacheService,
    ):
        self.notification_repo = notification_repo
        self.user_repo = user_repo
        self.cache = cache

    async def _invalidate(self, user_id: Optional[str], notification_id: Optional[str] = None):
        if notification_id:
            await self.cache.delete(f"notification_{notification_id}")
        if user_id:
            await self.cache.delete(f"notifications_user_{user_id}")
        await self.cache.delete("notifications")

    async def find_by_id(self, id: str) -> Dict[str, Any]:
        notification = await self.cache.get_or_set(
            f"notification_{id}", lambda: self.notification_repo.find_by_id(id)
        )
        if not notification:
            return {"success": False, "error": "Notification not found"}
        return {"success": True, "notification": notification}

    async def find_by_user_id(self, user_id: str) -> Dict[str, Any]:
        notifications = await self.cache.get_or_set(
            f"notifications_user_{user_id}", lambda: self.notification_repo.find_by_user(user_id)
        )
        if notifications is None:
            return {"success": False, "error": "Failed to retrieve notifications"}
        return {"success": True, "notifications": notifications}

    async def find_all(self) -> Dict[str, Any]:
        notifications = await self.cache.get_or_set(
            "notifications", lambda: self.notification_repo.find_all()
        )
        if notifications is None:
            return {"success": False, "error": "Failed to retrieve notifications"}
        return {"success": True, "notifications": notifications}

    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            user = await self.user_repo.find_by_id(data["user_id"])
            if not user:
                return {"success": False, "error": "User not found"}

            notification = await self.notification_repo.create({"is_read": False, **data})
            if not notification:
                return {"success": False, "error": "Failed to create notification"}

            await self._invalidate(data["user_id"])
            return {"success": True, "notification": notification}
        except Exception as e:
            logger.error(f"Failed to create notification: {e}", exc_info=True)
            return {"success": False, "error": "Failed to create notification"}

    async def notify(self, user_id: str, type: NotificationType, title: str, message: str) -> bool:
        """Best-effort notification used by other services; never raises."""
        result = await self.create({
            "user_id": user_id,
            "type": type.value,
            "title": title,
            "message": message,
        })
        if not result["success"]:
            logger.warning(
                f"Notification {type.value} not delivered: {result['error']}",
                extra={"user_id": user_id},
            )
        return result["success"]

    async def mark_as_read(self, id: str) -> Dict[str, Any]:
        return await self.update(id, {"is_read": True})

    async def update(self, id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            notification = await self.notification_repo.update(id, data)
            if not notification:
                return {"success": False, "error": "Notification not found"}

            await self._invalidate(notification.get("user_id"), id)
            return {"success": True, "notification": notification}
        except Exception as e:
            logger.error(f"Failed to update notification: {e}", exc_info=True)
            return {"success": False, "error": "Failed to update notification"}

    async def delete(self, id: str) -> Dict[str, Any]:
        try:
            notification = await self.notification_repo.find_by_id(id)
            if not notification:
                return {"success": False, "error": "Notification not found"}

            deleted = await self.notification_repo.delete(id)
            if not deleted:
                return {"success": False, "error": "Notification not found"}

            await self._invalidate(notification.get("user_id"), id)
            return {"success": True}
        except Exception as e:
            logger.error(f"Failed to delete notification: {e}", exc_info=True)
            return {"success": False, "error": "Failed to delete notification"}
