"""
app/repositories/payment_repository.py

Purpose: Persistence for payments (one per order)
"""

from typing import Any, Dict, Optional

from app.db.mongo import PAYMENTS
from app.repositories.base import BaseRepository, serialize, to_object_id, with_error_handling


class PaymentRepository(BaseRepository):
    collection_name = PAYMENTS
    reference_fields = ("order_id",)

    @with_error_handling
    async def find_by_order_id(self, order_id: str) -> Optional[Dict[str, Any]]:
        doc = await self._collection().find_one(
            {"order_id": to_object_id(order_id)},
            sort=[("created_at", -1)],
        )
        return serialize(doc)
