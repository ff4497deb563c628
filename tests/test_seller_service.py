async def test_create_requires_existing_user(seller_service):
    result = await seller_service.create({"user_id": "missing", "business_name": "Volt Motors"})
    assert result == {"success": False, "error": "User not found"}


async def test_create_grants_seller_role_and_invalidates(seller_service, user_repo, cache):
    user = user_repo.seed(email="s@example.com", role=["user"])
    cache.store[f"user_{user['id']}"] = {"id": user["id"], "role": ["user"]}

    result = await seller_service.create({"user_id": user["id"], "business_name": "Volt Motors"})
    assert result["success"] is True
    assert result["seller"]["rating"] == 0
    assert result["seller"]["total_reviews"] == 0
    assert user_repo.docs[user["id"]]["role"] == ["user", "seller"]
    assert f"user_{user['id']}" not in cache.store
    assert "sellers" in cache.deleted


async def test_create_rejects_second_profile(seller_service, user_repo, seller_repo):
    user = user_repo.seed(email="s@example.com", role=["user", "seller"])
    seller_repo.seed(user_id=user["id"], business_name="Volt Motors")

    result = await seller_service.create({"user_id": user["id"], "business_name": "Other"})
    assert result == {"success": False, "error": "User already has a seller profile"}


async def test_get_by_id_uses_cache(seller_service, seller_repo, cache):
    seller = seller_repo.seed(user_id="u1", business_name="Volt Motors")
    await seller_service.get_by_id(seller["id"])
    await seller_service.get_by_id(seller["id"])
    assert cache.fetches == 1


async def test_get_by_user_id_not_found(seller_service):
    result = await seller_service.get_by_user_id("u-none")
    assert result == {"success": False, "error": "Seller profile not found for this user"}


async def test_update_missing_seller(seller_service):
    result = await seller_service.update("nope", {"business_name": "x"})
    assert result == {"success": False, "error": "Seller not found"}


async def test_delete_invalidates_cached_profile(seller_service, seller_repo, cache):
    seller = seller_repo.seed(user_id="u1", business_name="Volt Motors")
    cache.store[f"seller_{seller['id']}"] = seller

    assert await seller_service.delete(seller["id"]) == {"success": True}
    assert f"seller_{seller['id']}" not in cache.store
    assert "seller_user_u1" in cache.deleted


async def test_rating_is_average_of_reviews_on_seller_orders(
    seller_service, seller_repo, order_repo, review_repo
):
    seller = seller_repo.seed(user_id="u1", rating=0, total_reviews=0)
    o1 = order_repo.seed(user_id="c1", seller_id=seller["id"])
    o2 = order_repo.seed(user_id="c2", seller_id=seller["id"])
    other = order_repo.seed(user_id="c3", seller_id="someone-else")

    review_repo.seed(reviewer_id="c1", order_id=o1["id"], rating=5)
    review_repo.seed(reviewer_id="c2", order_id=o2["id"], rating=4)
    review_repo.seed(reviewer_id="c2", order_id=o2["id"], rating=4)
    review_repo.seed(reviewer_id="c3", order_id=other["id"], rating=1)

    result = await seller_service.update_rating_and_review_count(seller["id"])
    assert result["success"] is True
    assert result["seller"]["rating"] == 4.33
    assert result["seller"]["total_reviews"] == 3


async def test_rating_without_reviews_is_zero(seller_service, seller_repo):
    seller = seller_repo.seed(user_id="u1", rating=3.5, total_reviews=2)
    result = await seller_service.update_rating_and_review_count(seller["id"])
    assert result["seller"]["rating"] == 0
    assert result["seller"]["total_reviews"] == 0
