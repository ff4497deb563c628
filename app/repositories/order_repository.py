"""
app/repositories/order_repository.py

Purpose: Persistence for orders

- Newest first by order_date
- find_with_customer joins the ordering user (without credentials)
"""

from typing import Any, Dict, List, Optional

from app.db.mongo import ORDERS, USERS
from app.repositories.base import BaseRepository, serialize, to_object_id, with_error_handling


class OrderRepository(BaseRepository):
    collection_name = ORDERS
    reference_fields = ("user_id", "seller_id", "listing_id", "booking_id")
    default_sort = (("order_date", -1),)

    @with_error_handling
    async def find_with_customer(self, id: str) -> Optional[Dict[str, Any]]:
        """
        Returns the order with the ordering user embedded under "customer".
        customer is None when the user no longer exists.
        """
        pipeline = [
            {"$match": {"_id": to_object_id(id)}},
            {"$lookup": {
                "from": USERS,
                "localField": "user_id",
                "foreignField": "_id",
                "as": "customer",
            }},
            {"$unwind": {"path": "$customer", "preserveNullAndEmptyArrays": True}},
            {"$project": {"customer.password": 0, "customer.reset_otp": 0}},
        ]
        docs = await self._collection().aggregate(pipeline).to_list(length=1)
        if not docs:
            return None
        return serialize(docs[0])

    @with_error_handling
    async def find_recent(self, limit: int = 50) -> Optional[List[Dict[str, Any]]]:
        cursor = self._collection().find({}).sort("order_date", -1).limit(limit)
        return [serialize(doc) async for doc in cursor]

    @with_error_handling
    async def find_by_user(self, user_id: str) -> Optional[List[Dict[str, Any]]]:
        return await self._find({"user_id": to_object_id(user_id)})

    @with_error_handling
    async def find_by_seller(self, seller_id: str) -> Optional[List[Dict[str, Any]]]:
        return await self._find({"seller_id": to_object_id(seller_id)})
