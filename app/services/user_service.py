"""
app/services/user_service.py

Purpose: User account management

- Admin create / list / delete
- Profile read and update
- Cache keys: user_{id}, users
"""

from typing import Any, Dict

from app.core.logging import get_logger
from app.core.security import hash_password
from app.models.enums import UserRole
from app.repositories.user_repository import UserRepository
from app.services.cache_service import CacheService
from utils.validation_utils import normalize_email

logger = get_logger(__name__)


class UserService:

    def __init__(self, user_repo: UserRepository, cache: CacheService):
        self.user_repo = user_repo
        self.cache = cache

    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            data = dict(data)
            data["email"] = normalize_email(data["email"])
            if data.get("password"):
                data["password"] = hash_password(data["password"])
            data.setdefault("role", [UserRole.USER.value])

            user = await self.user_repo.create(data)
            if not user:
                return {"success": False, "error": "Failed to create user"}

            await self.cache.delete("users")
            return {"success": True, "user": user}
        except Exception as e:
            logger.error(f"Failed to create user: {e}", exc_info=True)
            return {"success": False, "error": "Failed to create user"}

    async def find_by_id(self, id: str) -> Dict[str, Any]:
        user = await self.cache.get_or_set(f"user_{id}", lambda: self.user_repo.find_by_id(id))
        if not user:
            return {"success": False, "error": "User not found"}
        return {"success": True, "user": user}

    async def find_all(self) -> Dict[str, Any]:
        try:
            users = await self.cache.get_or_set("users", lambda: self.user_repo.find_all())
            if users is None:
                return {"success": False, "error": "Failed to retrieve users"}
            return {"success": True, "users": users}
        except Exception as e:
            logger.error(f"Failed to retrieve users: {e}", exc_info=True)
            return {"success": False, "error": "Failed to retrieve users"}

    async def update(self, id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            existing = await self.user_repo.find_by_id(id)
            if not existing:
                return {"success": False, "error": "User not found"}

            user = await self.user_repo.update(id, data)
            if not user:
                return {"success": False, "error": "Failed to update user"}

            await self.cache.delete(f"user_{id}")
            await self.cache.delete("users")
            return {"success": True, "user": user}
        except Exception as e:
            logger.error(f"Failed to update user: {e}", exc_info=True, extra={"user_id": id})
            return {"success": False, "error": "Failed to update user"}

    async def delete(self, id: str) -> Dict[str, Any]:
        try:
            deleted = await self.user_repo.delete(id)
            if not deleted:
                return {"success": False, "error": "User not found"}

            await self.cache.delete(f"user_{id}")
            await self.cache.delete("users")
            return {"success": True}
        except Exception as e:
            logger.error(f"Failed to delete user: {e}", exc_info=True, extra={"user_id": id})
            return {"success": False, "error": "Failed to delete user"}
