"""
app/repositories/test_drive_repository.py

Purpose: Persistence for test drives

- Slots a seller opens for a model on a date
- Customer bookings against a slot, with optional feedback
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pymongo import ReturnDocument

from app.db.mongo import TEST_DRIVE_BOOKINGS, TEST_DRIVE_SLOTS
from app.models.enums import TestDriveBookingStatus
from app.repositories.base import BaseRepository, serialize, to_object_id, with_error_handling

CANCELLED = TestDriveBookingStatus.CANCELLED.value


class SlotRepository(BaseRepository):
    collection_name = TEST_DRIVE_SLOTS
    reference_fields = ("seller_id", "model_id")

    @with_error_handling
    async def find_by_seller(self, seller_id: str) -> Optional[List[Dict[str, Any]]]:
        return await self._find({"seller_id": to_object_id(seller_id)})

    @with_error_handling
    async def find_active(self) -> Optional[List[Dict[str, Any]]]:
        """Active slots, soonest first."""
        return await self._find({"is_active": True}, sort=[("available_date", 1)])


class BookingRepository(BaseRepository):
    collection_name = TEST_DRIVE_BOOKINGS
    reference_fields = ("customer_id", "slot_id")
    default_sort = (("booking_date", -1),)

    @with_error_handling
    async def find_by_customer(self, customer_id: str) -> Optional[List[Dict[str, Any]]]:
        return await self._find({"customer_id": to_object_id(customer_id)})

    @with_error_handling
    async def count_active_on_slot(self, slot_id: str) -> Optional[int]:
        """Bookings holding a place on the slot. Cancelled ones free theirs."""
        return await self._collection().count_documents({
            "slot_id": to_object_id(slot_id),
            "status": {"$ne": CANCELLED},
        })

    @with_error_handling
    async def count_customer_bookings_on_slot(self, customer_id: str, slot_id: str) -> Optional[int]:
        return await self._collection().count_documents({
            "customer_id": to_object_id(customer_id),
            "slot_id": to_object_id(slot_id),
            "status": {"$ne": CANCELLED},
        })

    @with_error_handling
    async def clear_feedback(self, id: str) -> Optional[Dict[str, Any]]:
        doc = await self._collection().find_one_and_update(
            {"_id": to_object_id(id)},
            {
                "$unset": {"feedback_rating": "", "feedback_comment": ""},
                "$set": {"updated_at": datetime.utcnow()},
            },
            return_document=ReturnDocument.AFTER,
        )
        return serialize(doc)
