"""
app/services/review_service.py

Purpose: Product and service reviews

- CRUD with cache-aside reads
- Reviews tied to an order refresh the seller's rating
- Cache keys: reviews, reviews_target_{tid}, reviews_reviewer_{rid}, review_{id}
"""

from typing import Any, Dict, Optional

from app.core.logging import get_logger
from app.repositories.order_repository import OrderRepository
from app.repositories.review_repository import ReviewRepository
from app.repositories.user_repository import UserRepository
from app.services.cache_service import CacheService
from app.services.seller_service import SellerService

logger = get_logger(__name__)


class ReviewService:

    def __init__(
        self,
        review_repo: ReviewRepository,
        user_repo: UserRepository,
        order_repo: OrderRepository,
        seller_service: SellerService,
        cache: CacheService,
    ):
        self.review_repo = review_repo
        self.user_repo = user_repo
        self.order_repo = order_repo
        self.seller_service = seller_service
        self.cache = cache

    async def _invalidate(self, review: Dict[str, Any]):
        await self.cache.delete("reviews")
        await self.cache.delete(f"review_{review['id']}")
        if review.get("target_id"):
            await self.cache.delete(f"reviews_target_{review['target_id']}")
        if review.get("reviewer_id"):
            await self.cache.delete(f"reviews_reviewer_{review['reviewer_id']}")

    async def _refresh_seller_rating(self, order_id: Optional[str]):
        if not order_id:
            return
        order = await self.order_repo.find_by_id(order_id)
        if order and order.get("seller_id"):
            await self.seller_service.update_rating_and_review_count(order["seller_id"])

    async def get_all(self) -> Dict[str, Any]:
        try:
            reviews = await self.cache.get_or_set("reviews", lambda: self.review_repo.find_all())
            if reviews is None:
                return {"success": False, "error": "No reviews found"}
            return {"success": True, "reviews": reviews}
        except Exception as e:
            logger.error(f"Failed to fetch reviews: {e}", exc_info=True)
            return {"success": False, "error": "Failed to fetch reviews"}

    async def get_by_target(self, target_id: str) -> Dict[str, Any]:
        try:
            reviews = await self.cache.get_or_set(
                f"reviews_target_{target_id}", lambda: self.review_repo.find_by_target(target_id)
            )
            if reviews is None:
                return {"success": False, "error": "No reviews found for the target"}
            return {"success": True, "reviews": reviews}
        except Exception as e:
            logger.error(f"Failed to fetch reviews for the target: {e}", exc_info=True)
            return {"success": False, "error": "Failed to fetch reviews for the target"}

    async def get_by_reviewer(self, reviewer_id: str) -> Dict[str, Any]:
        try:
            reviews = await self.cache.get_or_set(
                f"reviews_reviewer_{reviewer_id}", lambda: self.review_repo.find_by_reviewer(reviewer_id)
            )
            if reviews is None:
                return {"success": False, "error": "No reviews found by the reviewer"}
            return {"success": True, "reviews": reviews}
        except Exception as e:
            logger.error(f"Failed to fetch reviews by the reviewer: {e}", exc_info=True)
            return {"success": False, "error": "Failed to fetch reviews by the reviewer"}

    async def get_by_id(self, id: str) -> Dict[str, Any]:
        try:
            review = await self.cache.get_or_set(f"review_{id}", lambda: self.review_repo.find_by_id(id))
            if not review:
                return {"success": False, "error": "Review not found"}
            return {"success": True, "review": review}
        except Exception as e:
            logger.error(f"Failed to fetch review: {e}", exc_info=True)
            return {"success": False, "error": "Failed to fetch review"}

    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            reviewer = await self.user_repo.find_by_id(data["reviewer_id"])
            if not reviewer:
                return {"success": False, "error": "Reviewer not found"}

            review = await self.review_repo.create(data)
            if not review:
                return {"success": False, "error": "Failed to create review"}

            await self._invalidate(review)
            await self._refresh_seller_rating(review.get("order_id"))
            return {"success": True, "review": review}
        except Exception as e:
            logger.error(f"Failed to create review: {e}", exc_info=True)
            return {"success": False, "error": "Failed to create review"}

    async def update(self, id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            existing = await self.review_repo.find_by_id(id)
            if not existing:
                return {"success": False, "error": "Review not found"}

            review = await self.review_repo.update(id, data)
            if not review:
                return {"success": False, "error": "Review not found"}

            await self._invalidate(existing)
            await self._invalidate(review)
            if "rating" in data:
                await self._refresh_seller_rating(review.get("order_id"))
            return {"success": True, "review": review}
        except Exception as e:
            logger.error(f"Failed to update review: {e}", exc_info=True)
            return {"success": False, "error": "Failed to update review"}

    async def delete(self, id: str) -> Dict[str, Any]:
        try:
            existing = await self.review_repo.find_by_id(id)
            if not existing:
                return {"success": False, "error": "Review not found"}

            deleted = await self.review_repo.delete(id)
            if not deleted:
                return {"success": False, "error": "Review not found"}

            await self._invalidate(existing)
            await self._refresh_seller_rating(existing.get("order_id"))
            return {"success": True}
        except Exception as e:
            logger.error(f"Failed to delete review: {e}", exc_info=True)
            return {"success": False, "error": "Failed to delete review"}
