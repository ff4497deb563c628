"""
app/services/seller_service.py

Purpose: Seller profile management

- One seller profile per user; creating one grants the seller role
- Rating is the average of reviews attached to the seller's orders
- Cache keys: seller_{id}, seller_user_{uid}, sellers
"""

from typing import Any, Dict

from app.core.logging import get_logger, LogContext
from app.models.enums import UserRole
from app.repositories.order_repository import OrderRepository
from app.repositories.review_repository import ReviewRepository
from app.repositories.seller_repository import SellerRepository
from app.repositories.user_repository import UserRepository
from app.services.cache_service import CacheService

logger = get_logger(__name__)


class SellerService:

    def __init__(
        self,
        seller_repo: SellerRepository,
        user_repo: UserRepository,
        order_repo: OrderRepository,
        review_repo: ReviewRepository,
        cache: CacheService,
    ):
        self.seller_repo = seller_repo
        self.user_repo = user_repo
        self.order_repo = order_repo
        self.review_repo = review_repo
        self.cache = cache

    async def _invalidate(self, seller: Dict[str, Any]):
        await self.cache.delete("sellers")
        await self.cache.delete(f"seller_{seller['id']}")
        if seller.get("user_id"):
            await self.cache.delete(f"seller_user_{seller['user_id']}")

    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        user_id = data["user_id"]
        with LogContext(user_id=user_id, resource="seller"):
            try:
                user = await self.user_repo.find_by_id(user_id)
                if not user:
                    return {"success": False, "error": "User not found"}

                existing = await self.seller_repo.find_by_user_id(user_id)
                if existing:
                    return {"success": False, "error": "User already has a seller profile"}

                seller = await self.seller_repo.create({"rating": 0, "total_reviews": 0, **data})
                if not seller:
                    return {"success": False, "error": "Failed to create seller profile"}

                # Two separate writes, no rollback if the role update fails
                updated = await self.user_repo.add_role(user_id, UserRole.SELLER.value)
                if not updated:
                    logger.error("Seller created but seller role was not granted")

                await self.cache.delete("sellers")
                await self.cache.delete(f"seller_user_{user_id}")
                await self.cache.delete(f"user_{user_id}")
                await self.cache.delete("users")

                logger.info("Seller profile created")
                return {"success": True, "seller": seller}
            except Exception as e:
                logger.error(f"Failed to create seller profile: {e}", exc_info=True)
                return {"success": False, "error": "Failed to create seller profile"}

    async def get_by_id(self, id: str) -> Dict[str, Any]:
        seller = await self.cache.get_or_set(f"seller_{id}", lambda: self.seller_repo.find_by_id(id))
        if not seller:
            return {"success": False, "error": "Seller not found"}
        return {"success": True, "seller": seller}

    async def get_by_user_id(self, user_id: str) -> Dict[str, Any]:
        seller = await self.cache.get_or_set(
            f"seller_user_{user_id}", lambda: self.seller_repo.find_by_user_id(user_id)
        )
        if not seller:
            return {"success": False, "error": "Seller profile not found for this user"}
        return {"success": True, "seller": seller}

    async def get_all(self) -> Dict[str, Any]:
        sellers = await self.cache.get_or_set("sellers", lambda: self.seller_repo.find_all())
        if sellers is None:
            return {"success": False, "error": "Failed to retrieve sellers"}
        return {"success": True, "sellers": sellers}

    async def update(self, id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            seller = await self.seller_repo.update(id, data)
            if not seller:
                return {"success": False, "error": "Seller not found"}
            await self._invalidate(seller)
            return {"success": True, "seller": seller}
        except Exception as e:
            logger.error(f"Failed to update seller profile: {e}", exc_info=True)
            return {"success": False, "error": "Failed to update seller profile"}

    async def delete(self, id: str) -> Dict[str, Any]:
        try:
            seller = await self.seller_repo.find_by_id(id)
            if not seller:
                return {"success": False, "error": "Seller not found"}

            deleted = await self.seller_repo.delete(id)
            if not deleted:
                return {"success": False, "error": "Seller not found"}

            await self._invalidate(seller)
            return {"success": True}
        except Exception as e:
            logger.error(f"Failed to delete seller profile: {e}", exc_info=True)
            return {"success": False, "error": "Failed to delete seller profile"}

    async def update_rating_and_review_count(self, seller_id: str) -> Dict[str, Any]:
        """Recomputes rating and total_reviews from reviews on the seller's orders."""
        try:
            seller = await self.seller_repo.find_by_id(seller_id)
            if not seller:
                return {"success": False, "error": "Seller not found"}

            orders = await self.order_repo.find_by_seller(seller_id) or []
            order_ids = [order["id"] for order in orders]
            reviews = await self.review_repo.find_by_order_ids(order_ids) if order_ids else []
            reviews = reviews or []

            total = len(reviews)
            rating = round(sum(r["rating"] for r in reviews) / total, 2) if total else 0

            updated = await self.seller_repo.update(seller_id, {"rating": rating, "total_reviews": total})
            if not updated:
                return {"success": False, "error": "Failed to update seller rating"}

            await self._invalidate(updated)
            logger.info(f"Seller rating updated to {rating} over {total} reviews")
            return {"success": True, "seller": updated}
        except Exception as e:
            logger.error(f"Failed to update seller rating: {e}", exc_info=True)
            return {"success": False, "error": "Failed to update seller rating"}
