"""
app/services/payment_service.py

Purpose: Payments through the PayHere gateway

- create: builds the signed PayHere checkout request for an order
- validate: handles PayHere's notify callback (signature, status mapping)
- Cache keys: payment_{id}, payment_order_{oid}, payments_query_{json}
"""

import json
from typing import Any, Dict, Optional

from app.core.config import settings
from app.core.logging import get_logger, LogContext
from app.models.enums import PaymentStatus
from app.repositories.order_repository import OrderRepository
from app.repositories.payment_repository import PaymentRepository
from app.services.cache_service import CacheService
from utils.payhere_utils import (
    create_payment_request,
    map_status_code,
    single_line_address,
    verify_notification_hash,
)

logger = get_logger(__name__)

# PayHere "method" values that differ from PaymentMethod
GATEWAY_METHODS = {
    "master": "mastercard",
    "amex": "american_express",
}


def _split_name(name: Optional[str]):
    parts = (name or "").split()
    first = parts[0] if parts else ""
    last = " ".join(parts[1:]) if len(parts) > 1 else ""
    return first, last


class PaymentService:

    def __init__(
        self,
        payment_repo: PaymentRepository,
        order_repo: OrderRepository,
        cache: CacheService,
    ):
        self.payment_repo = payment_repo
        self.order_repo = order_repo
        self.cache = cache

    async def _invalidate(self, payment: Optional[Dict[str, Any]] = None):
        if payment:
            await self.cache.delete(f"payment_{payment['id']}")
            if payment.get("order_id"):
                await self.cache.delete(f"payment_order_{payment['order_id']}")
        await self.cache.delete_pattern("payments_query_*")

    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Stores a confirmed payment and returns the PayHere checkout fields
        under request_object.
        """
        order_id = data["order_id"]
        with LogContext(order_id=order_id, resource="payment"):
            try:
                order = await self.order_repo.find_with_customer(order_id)
                if not order:
                    return {"success": False, "error": "Order not found"}

                customer = order.get("customer")
                if not customer or not customer.get("name"):
                    logger.warning("Order customer missing or has no name")
                    return {"success": False, "error": "Failed to create payment"}

                address = customer.get("address") or {}
                first_name, last_name = _split_name(customer.get("name"))

                request_object = create_payment_request(
                    order_id=order_id,
                    amount=data["amount"],
                    currency=settings.PAYHERE_CURRENCY,
                    description=data["payment_type"],
                    customer={
                        "first_name": first_name,
                        "last_name": last_name,
                        "email": customer.get("email"),
                        "phone": customer.get("phone"),
                        "address": single_line_address(address),
                        "city": address.get("city"),
                        "country": address.get("country"),
                    },
                    return_url=data.get("return_url"),
                    cancel_url=data.get("cancel_url"),
                    notify_url=settings.PAYHERE_NOTIFY_URL,
                )

                record = {
                    k: v for k, v in data.items()
                    if k not in ("return_url", "cancel_url")
                }
                record["status"] = PaymentStatus.CONFIRMED.value

                payment = await self.payment_repo.create(record)
                if not payment:
                    return {"success": False, "error": "Failed to create new payment"}

                await self._invalidate(payment)
                logger.info("Payment request created")
                return {"success": True, "request_object": request_object}
            except Exception as e:
                logger.error(f"Failed to create payment: {e}", exc_info=True)
                return {"success": False, "error": "Failed to create payment"}

    async def validate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Applies a PayHere notification to the order's payment."""
        order_id = data.get("order_id")
        with LogContext(order_id=order_id, resource="payment"):
            try:
                valid = verify_notification_hash(
                    merchant_id=data.get("merchant_id", ""),
                    order_id=order_id or "",
                    payhere_amount=data.get("payhere_amount", ""),
                    payhere_currency=data.get("payhere_currency", ""),
                    status_code=data.get("status_code", ""),
                    md5sig=data.get("md5sig", ""),
                )
                if not valid:
                    logger.warning("PayHere notification signature mismatch")
                    return {"success": False, "error": "Invalid payment"}

                payment = await self.payment_repo.find_by_order_id(order_id)
                if not payment:
                    return {"success": False, "error": "Payment not found"}

                changes: Dict[str, Any] = {"payment_id": data.get("payment_id")}
                status = map_status_code(data.get("status_code"))
                if status:
                    changes["status"] = status.value
                method = (data.get("method") or "").lower()
                if method:
                    changes["payment_method"] = GATEWAY_METHODS.get(method, method)

                updated = await self.payment_repo.update(payment["id"], changes)
                if not updated:
                    return {"success": False, "error": "Failed to validate payment"}

                await self._invalidate(updated)
                logger.info(f"PayHere notification applied, status {updated.get('status')}")
                return {"success": True, "payment": updated}
            except Exception as e:
                logger.error(f"Failed to validate payment: {e}", exc_info=True)
                return {"success": False, "error": "Failed to validate payment"}

    async def check_status(self, id: str) -> Dict[str, Any]:
        """Reads the payment straight from the database, bypassing the cache."""
        try:
            payment = await self.payment_repo.find_by_id(id)
            if not payment:
                return {"success": False, "error": "Payment not found"}
            return {"success": True, "payment": payment}
        except Exception as e:
            logger.error(f"Failed to check payment status: {e}", exc_info=True)
            return {"success": False, "error": "Failed to check payment status"}

    async def get_by_id(self, id: str) -> Dict[str, Any]:
        payment = await self.cache.get_or_set(f"payment_{id}", lambda: self.payment_repo.find_by_id(id))
        if not payment:
            return {"success": False, "error": "Payment not found"}
        return {"success": True, "payment": payment}

    async def get_by_order_id(self, order_id: str) -> Dict[str, Any]:
        payment = await self.cache.get_or_set(
            f"payment_order_{order_id}", lambda: self.payment_repo.find_by_order_id(order_id)
        )
        if not payment:
            return {"success": False, "error": "Payment not found for this order"}
        return {"success": True, "payment": payment}

    async def get_all(self, query: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        query = query or {}
        key = f"payments_query_{json.dumps(query, sort_keys=True, default=str)}"
        payments = await self.cache.get_or_set(key, lambda: self.payment_repo.find_all(query))
        if payments is None:
            return {"success": False, "error": "Failed to retrieve payments"}
        return {"success": True, "payments": payments}

    async def update(self, id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            payment = await self.payment_repo.update(id, data)
            if not payment:
                return {"success": False, "error": "Payment not found"}
            await self._invalidate(payment)
            return {"success": True, "payment": payment}
        except Exception as e:
            logger.error(f"Failed to update payment: {e}", exc_info=True)
            return {"success": False, "error": "Failed to update payment"}

    async def delete(self, id: str) -> Dict[str, Any]:
        try:
            payment = await self.payment_repo.find_by_id(id)
            if not payment:
                return {"success": False, "error": "Payment not found"}
            deleted = await self.payment_repo.delete(id)
            if not deleted:
                return {"success": False, "error": "Payment not found"}
            await self._invalidate(payment)
            return {"success": True}
        except Exception as e:
            logger.error(f"Failed to delete payment: {e}", exc_info=True)
            return {"success": False, "error": "Failed to delete payment"}
