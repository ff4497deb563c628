async def test_create_sets_defaults(order_service, listing_repo, cache):
    listing = listing_repo.seed(seller_id="s1", price=9000)
    result = await order_service.create({"user_id": "u1", "seller_id": "s1", "listing_id": listing["id"], "total_amount": 9000})
    order = result["order"]
    assert order["order_status"] == "pending"
    assert order["payment_status"] == "confirmed"
    assert order["order_date"] is not None
    assert "orders_user_u1" in cache.deleted
    assert "orders_seller_s1" in cache.deleted


async def test_create_rejects_unknown_listing(order_service, order_repo):
    result = await order_service.create({"user_id": "u1", "seller_id": "s1", "listing_id": "gone", "total_amount": 10})
    assert result == {"success": False, "error": "Listing not found"}
    assert order_repo.docs == {}


async def test_create_rejects_unknown_booking(order_service, order_repo):
    result = await order_service.create({"user_id": "u1", "seller_id": "s1", "booking_id": "gone", "total_amount": 10})
    assert result == {"success": False, "error": "Booking not found"}
    assert order_repo.docs == {}


async def test_create_for_test_drive_booking(order_service, booking_repo):
    booking = booking_repo.seed(customer_id="u1", slot_id="slot1", status="confirmed")
    result = await order_service.create({"user_id": "u1", "seller_id": "s1", "booking_id": booking["id"], "total_amount": 25})
    assert result["order"]["booking_id"] == booking["id"]


async def test_create_failure(order_service, order_repo):
    order_repo.fail = True
    assert await order_service.create({"user_id": "u1"}) == {"success": False, "error": "Failed to create order"}


async def test_get_by_id_missing(order_service):
    assert await order_service.get_by_id("nope") == {"success": False, "error": "Order not found"}


async def test_get_by_user_and_seller(order_service, order_repo):
    order_repo.seed(user_id="u1", seller_id="s1")
    order_repo.seed(user_id="u2", seller_id="s1")

    assert len((await order_service.get_by_user("u1"))["orders"]) == 1
    assert len((await order_service.get_by_seller("s1"))["orders"]) == 2


async def test_cancel_notifies_customer(order_service, order_repo, user_repo, notification_repo, cache):
    user = user_repo.seed(email="c@example.com", role=["user"])
    order = order_repo.seed(user_id=user["id"], seller_id="s1", order_status="pending")
    cache.store[f"order_{order['id']}"] = order

    result = await order_service.cancel(order["id"])
    assert result["order"]["order_status"] == "cancelled"
    assert f"order_{order['id']}" not in cache.store

    note = next(iter(notification_repo.docs.values()))
    assert note["type"] == "ORDER_CANCELLED"
    assert order["id"] in note["message"]


async def test_cancel_missing_order(order_service):
    assert await order_service.cancel("nope") == {"success": False, "error": "Order not found"}
