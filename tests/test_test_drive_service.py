from datetime import datetime

import pytest
from bson import ObjectId


@pytest.fixture(autouse=True)
def customer(user_repo):
    return user_repo.seed(id="c1", email="c1@example.com", role=["user"])


def seed_slot(slot_repo, **fields):
    return slot_repo.seed(**{
        "seller_id": "s1",
        "model_id": "m1",
        "location": "Colombo showroom",
        "available_date": datetime(2026, 11, 2, 9, 0),
        "max_bookings": 2,
        "is_active": True,
        **fields,
    })


def booking_data(slot, customer_id="c1"):
    return {"customer_id": customer_id, "slot_id": slot["id"], "booking_time": "10:30", "duration_minutes": 30}


def notification_types(notification_repo, user_id):
    return [n["type"] for n in notification_repo.docs.values() if n["user_id"] == user_id]


# Slots

async def test_slot_needs_seller(test_drive_service, model_repo):
    model = model_repo.seed(model_name="Arc")
    result = await test_drive_service.create_slot({
        "seller_id": str(ObjectId()),
        "model_id": model["id"],
        "location": "Kandy",
        "available_date": datetime(2026, 11, 2),
        "max_bookings": 1,
    })
    assert result == {"success": False, "error": "Seller not found"}


async def test_slot_needs_model(test_drive_service, seller_repo):
    seller = seller_repo.seed(business_name="Spark Motors")
    result = await test_drive_service.create_slot({
        "seller_id": seller["id"],
        "model_id": str(ObjectId()),
        "location": "Kandy",
        "available_date": datetime(2026, 11, 2),
        "max_bookings": 1,
    })
    assert result == {"success": False, "error": "Model not found"}


async def test_create_slot_drops_slot_lists(test_drive_service, seller_repo, model_repo, cache):
    seller = seller_repo.seed(business_name="Spark Motors")
    model = model_repo.seed(model_name="Arc")
    cache.store["slots_active"] = []

    result = await test_drive_service.create_slot({
        "seller_id": seller["id"],
        "model_id": model["id"],
        "location": "Kandy",
        "available_date": datetime(2026, 11, 2),
        "max_bookings": 3,
    })
    assert result["slot"]["is_active"] is True
    assert "slots" in cache.deleted
    assert "slots_active" not in cache.store


async def test_active_slots_soonest_first(test_drive_service, slot_repo):
    seed_slot(slot_repo, available_date=datetime(2026, 12, 1))
    seed_slot(slot_repo, available_date=datetime(2026, 11, 1))
    seed_slot(slot_repo, available_date=datetime(2026, 10, 1), is_active=False)

    result = await test_drive_service.get_active_slots()
    assert [s["available_date"].month for s in result["slots"]] == [11, 12]


async def test_update_missing_slot(test_drive_service):
    assert await test_drive_service.update_slot("nope", {"location": "Galle"}) == {
        "success": False,
        "error": "Slot not found",
    }


# Bookings

async def test_booking_takes_slot_date_and_notifies(test_drive_service, slot_repo, notification_repo):
    slot = seed_slot(slot_repo)
    result = await test_drive_service.create_booking(booking_data(slot))

    assert result["success"] is True
    assert result["booking"]["status"] == "confirmed"
    assert result["booking"]["booking_date"] == slot["available_date"]
    assert notification_types(notification_repo, "c1") == ["BOOKING_CONFIRMED"]


async def test_booking_unknown_slot(test_drive_service):
    result = await test_drive_service.create_booking(booking_data({"id": str(ObjectId())}))
    assert result == {"success": False, "error": "Slot not found"}


async def test_booking_inactive_slot(test_drive_service, slot_repo):
    slot = seed_slot(slot_repo, is_active=False)
    result = await test_drive_service.create_booking(booking_data(slot))
    assert result == {"success": False, "error": "Slot is not available"}


async def test_full_slot_refuses_booking(test_drive_service, slot_repo, booking_repo):
    slot = seed_slot(slot_repo, max_bookings=1)
    booking_repo.seed(customer_id="c2", slot_id=slot["id"], status="confirmed")

    result = await test_drive_service.create_booking(booking_data(slot))
    assert result == {"success": False, "error": "Slot is fully booked"}


async def test_cancelled_booking_frees_its_place(test_drive_service, slot_repo, booking_repo):
    slot = seed_slot(slot_repo, max_bookings=1)
    booking_repo.seed(customer_id="c2", slot_id=slot["id"], status="cancelled")

    result = await test_drive_service.create_booking(booking_data(slot))
    assert result["success"] is True


async def test_one_booking_per_customer_per_slot(test_drive_service, slot_repo, booking_repo):
    slot = seed_slot(slot_repo, max_bookings=5)
    booking_repo.seed(customer_id="c1", slot_id=slot["id"], status="confirmed")

    result = await test_drive_service.create_booking(booking_data(slot))
    assert result == {"success": False, "error": "Customer already has a booking"}


async def test_failed_count_does_not_book(test_drive_service, slot_repo, booking_repo):
    slot = seed_slot(slot_repo)
    booking_repo.fail = True

    result = await test_drive_service.create_booking(booking_data(slot))
    assert result == {"success": False, "error": "Failed to create booking"}
    assert booking_repo.docs == {}


async def test_update_booking_keeps_customer(test_drive_service, booking_repo):
    booking = booking_repo.seed(customer_id="c1", slot_id="x", booking_time="10:00", status="confirmed")
    result = await test_drive_service.update_booking(booking["id"], {"customer_id": "c9", "booking_time": "11:00"})
    assert result["booking"]["customer_id"] == "c1"
    assert result["booking"]["booking_time"] == "11:00"


async def test_update_booking_to_unknown_slot(test_drive_service, booking_repo):
    booking = booking_repo.seed(customer_id="c1", slot_id="x", status="confirmed")
    result = await test_drive_service.update_booking(booking["id"], {"slot_id": str(ObjectId())})
    assert result == {"success": False, "error": "Slot not found"}


async def test_cancel_booking_notifies_once(test_drive_service, booking_repo, notification_repo, cache):
    booking = booking_repo.seed(customer_id="c1", slot_id="x", status="confirmed")

    result = await test_drive_service.cancel_booking(booking["id"])
    assert result["booking"]["status"] == "cancelled"
    assert "bookings_customer_c1" in cache.deleted

    again = await test_drive_service.cancel_booking(booking["id"])
    assert again == {"success": False, "error": "Booking is already cancelled"}
    assert notification_types(notification_repo, "c1") == ["BOOKING_CANCELLED"]


async def test_delete_live_booking_notifies(test_drive_service, booking_repo, notification_repo):
    booking = booking_repo.seed(customer_id="c1", slot_id="x", status="confirmed")
    assert await test_drive_service.delete_booking(booking["id"]) == {"success": True}
    assert notification_types(notification_repo, "c1") == ["BOOKING_CANCELLED"]


async def test_delete_cancelled_booking_is_silent(test_drive_service, booking_repo, notification_repo):
    booking = booking_repo.seed(customer_id="c1", slot_id="x", status="cancelled")
    assert await test_drive_service.delete_booking(booking["id"]) == {"success": True}
    assert notification_types(notification_repo, "c1") == []


# Feedback

async def test_rate_booking(test_drive_service, booking_repo):
    booking = booking_repo.seed(customer_id="c1", slot_id="x", status="completed")
    result = await test_drive_service.rate_booking({"booking_id": booking["id"], "rating": 4, "comment": "Smooth"})
    assert result["booking"]["feedback_rating"] == 4
    assert result["booking"]["feedback_comment"] == "Smooth"


async def test_rerating_keeps_comment(test_drive_service, booking_repo):
    booking = booking_repo.seed(customer_id="c1", slot_id="x", feedback_rating=2, feedback_comment="Noisy")
    result = await test_drive_service.rate_booking({"booking_id": booking["id"], "rating": 3, "comment": None})
    assert result["booking"]["feedback_rating"] == 3
    assert result["booking"]["feedback_comment"] == "Noisy"


async def test_rate_missing_booking(test_drive_service):
    result = await test_drive_service.rate_booking({"booking_id": "nope", "rating": 5})
    assert result == {"success": False, "error": "Booking not found"}


async def test_delete_rating(test_drive_service, booking_repo):
    booking = booking_repo.seed(customer_id="c1", slot_id="x", feedback_rating=5, feedback_comment="Great")
    assert await test_drive_service.delete_rating(booking["id"]) == {"success": True}
    assert "feedback_rating" not in booking_repo.docs[booking["id"]]
    assert "feedback_comment" not in booking_repo.docs[booking["id"]]


async def test_delete_rating_without_one(test_drive_service, booking_repo):
    booking = booking_repo.seed(customer_id="c1", slot_id="x")
    assert await test_drive_service.delete_rating(booking["id"]) == {"success": False, "error": "Rating not found"}
