"""
app/services/order_service.py

Purpose: Order lifecycle

- Create (pending, payment confirmed, dated now); listing_id and booking_id must exist
- Reads by id, user and seller
- Cancel notifies the customer
- Cache keys: order_{id}, orders_user_{uid}, orders_seller_{sid}
"""

from datetime import datetime
from typing import Any, Dict

from app.core.logging import get_logger, LogContext
from app.models.enums import NotificationType, OrderStatus, PaymentStatus
from app.repositories.ev_repository import ListingRepository
from app.repositories.order_repository import OrderRepository
from app.repositories.test_drive_repository import BookingRepository
from app.services.cache_service import CacheService
from app.services.notification_service import NotificationService

logger = get_logger(__name__)


class OrderService:

    def __init__(
        self,
        order_repo: OrderRepository,
        listing_repo: ListingRepository,
        booking_repo: BookingRepository,
        notification_service: NotificationService,
        cache: CacheService,
    ):
        self.order_repo = order_repo
        self.listing_repo = listing_repo
        self.booking_repo = booking_repo
        self.notification_service = notification_service
        self.cache = cache

    async def _invalidate(self, order: Dict[str, Any]):
        await self.cache.delete(f"order_{order['id']}")
        if order.get("user_id"):
            await self.cache.delete(f"orders_user_{order['user_id']}")
        if order.get("seller_id"):
            await self.cache.delete(f"orders_seller_{order['seller_id']}")

    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        with LogContext(user_id=data.get("user_id"), resource="order"):
            try:
                if data.get("listing_id") and not await self.listing_repo.find_by_id(data["listing_id"]):
                    return {"success": False, "error": "Listing not found"}
                if data.get("booking_id") and not await self.booking_repo.find_by_id(data["booking_id"]):
                    return {"success": False, "error": "Booking not found"}

                order = await self.order_repo.create({
                    **data,
                    "order_status": OrderStatus.PENDING.value,
                    "payment_status": PaymentStatus.CONFIRMED.value,
                    "order_date": datetime.utcnow(),
                })
                if not order:
                    return {"success": False, "error": "Failed to create order"}

                await self._invalidate(order)
                logger.info("Order created", extra={"order_id": order["id"]})
                return {"success": True, "order": order}
            except Exception as e:
                logger.error(f"Failed to create order: {e}", exc_info=True)
                return {"success": False, "error": "Failed to create order"}

    async def get_by_id(self, id: str) -> Dict[str, Any]:
        order = await self.cache.get_or_set(f"order_{id}", lambda: self.order_repo.find_by_id(id))
        if not order:
            return {"success": False, "error": "Order not found"}
        return {"success": True, "order": order}

    async def get_by_user(self, user_id: str) -> Dict[str, Any]:
        orders = await self.cache.get_or_set(
            f"orders_user_{user_id}", lambda: self.order_repo.find_by_user(user_id)
        )
        if orders is None:
            return {"success": False, "error": "No orders found"}
        return {"success": True, "orders": orders}

    async def get_by_seller(self, seller_id: str) -> Dict[str, Any]:
        orders = await self.cache.get_or_set(
            f"orders_seller_{seller_id}", lambda: self.order_repo.find_by_seller(seller_id)
        )
        if orders is None:
            return {"success": False, "error": "No orders found"}
        return {"success": True, "orders": orders}

    async def update(self, id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            order = await self.order_repo.update(id, data)
            if not order:
                return {"success": False, "error": "Order not found"}
            await self._invalidate(order)
            return {"success": True, "order": order}
        except Exception as e:
            logger.error(f"Failed to update order: {e}", exc_info=True, extra={"order_id": id})
            return {"success": False, "error": "Failed to update order"}

    async def cancel(self, id: str) -> Dict[str, Any]:
        with LogContext(order_id=id, resource="order"):
            try:
                order = await self.order_repo.update(id, {"order_status": OrderStatus.CANCELLED.value})
                if not order:
                    return {"success": False, "error": "Order not found"}

                await self._invalidate(order)
                await self.notification_service.notify(
                    order["user_id"],
                    NotificationType.ORDER_CANCELLED,
                    "Order cancelled",
                    f"Your order {order['id']} has been cancelled.",
                )
                logger.info("Order cancelled")
                return {"success": True, "order": order}
            except Exception as e:
                logger.error(f"Failed to cancel order: {e}", exc_info=True)
                return {"success": False, "error": "Failed to cancel order"}
