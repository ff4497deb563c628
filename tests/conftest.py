"""
Shared test fixtures: in-memory repositories, cache, mail and LLM fakes.
"""

import fnmatch
from copy import deepcopy
from datetime import datetime
from typing import Any, Dict, List, Optional

import pytest
from bson import ObjectId

from app.core.rate_limit import RateLimitMiddleware
from app.core.security import create_access_token
from app.models.enums import BLOCKING_APPLICATION_STATUSES
from app.services.auth_service import AuthService
from app.services.chatbot_service import ChatbotService
from app.services.ev_service import EvService
from app.services.financial_service import FinancialService
from app.services.notification_service import NotificationService
from app.services.order_service import OrderService
from app.services.payment_service import PaymentService
from app.services.review_service import ReviewService
from app.services.seller_service import SellerService
from app.services.test_drive_service import TestDriveService
from app.services.user_service import UserService


# ----------------------------------------------------------------------
# Fakes
# ----------------------------------------------------------------------

class FakeCache:
    """Dict-backed stand-in for CacheService."""

    def __init__(self):
        self.store: Dict[str, Any] = {}
        self.deleted: List[str] = []
        self.fetches = 0

    async def get(self, key):
        return deepcopy(self.store.get(key))

    async def set(self, key, value, ttl=None):
        self.store[key] = deepcopy(value)
        return True

    async def delete(self, key):
        self.deleted.append(key)
        self.store.pop(key, None)
        return True

    async def delete_pattern(self, pattern):
        self.deleted.append(pattern)
        keys = [k for k in self.store if fnmatch.fnmatch(k, pattern)]
        for k in keys:
            del self.store[k]
        return len(keys)

    async def get_or_set(self, key, fetch, ttl=None):
        if self.store.get(key) is not None:
            return deepcopy(self.store[key])
        self.fetches += 1
        value = await fetch()
        if value is not None:
            self.store[key] = deepcopy(value)
        return value


class FakeRepository:
    """In-memory repository mirroring BaseRepository's dict contract."""

    def __init__(self):
        self.docs: Dict[str, Dict[str, Any]] = {}
        self.fail = False

    def seed(self, **fields) -> Dict[str, Any]:
        id = fields.pop("id", None) or str(ObjectId())
        now = datetime.utcnow()
        self.docs[id] = {"id": id, "created_at": now, "updated_at": now, **fields}
        return deepcopy(self.docs[id])

    def _match(self, doc, query):
        return all(doc.get(k) == v for k, v in query.items())

    async def create(self, data):
        if self.fail:
            return None
        return self.seed(**deepcopy(data))

    async def find_by_id(self, id):
        doc = self.docs.get(id)
        return deepcopy(doc) if doc else None

    async def find_all(self, query=None):
        if self.fail:
            return None
        return [deepcopy(d) for d in self.docs.values() if self._match(d, query or {})]

    async def find_by(self, field, value):
        return await self.find_all({field: value})

    async def update(self, id, data):
        if self.fail or id not in self.docs:
            return None
        self.docs[id].update(deepcopy(data))
        self.docs[id]["updated_at"] = datetime.utcnow()
        return deepcopy(self.docs[id])

    async def delete(self, id):
        return self.docs.pop(id, None) is not None


class FakeUserRepository(FakeRepository):

    async def find_by_id(self, id):
        doc = await super().find_by_id(id)
        if doc:
            doc.pop("password", None)
            doc.pop("reset_otp", None)
        return doc

    async def create(self, data):
        doc = await super().create(data)
        if doc:
            doc.pop("password", None)
        return doc

    async def find_by_email(self, email):
        for doc in self.docs.values():
            if doc.get("email") == email:
                return deepcopy(doc)
        return None

    async def add_role(self, id, role):
        if id not in self.docs:
            return None
        roles = self.docs[id].setdefault("role", [])
        if role not in roles:
            roles.append(role)
        return await self.find_by_id(id)

    async def update_last_login(self, id, timestamp):
        if self.fail:
            raise RuntimeError("database unavailable")
        self.docs[id]["last_login"] = timestamp
        return True

    async def set_reset_otp(self, id, record):
        self.docs[id]["reset_otp"] = deepcopy(record)
        return True

    async def clear_reset_otp(self, id):
        self.docs[id].pop("reset_otp", None)
        return True

    async def update_password(self, id, password_hash):
        self.docs[id]["password"] = password_hash
        self.docs[id].pop("reset_otp", None)
        return True


class FakeSellerRepository(FakeRepository):

    async def find_by_user_id(self, user_id):
        for doc in self.docs.values():
            if doc.get("user_id") == user_id:
                return deepcopy(doc)
        return None


class FakeOrderRepository(FakeRepository):

    def __init__(self, user_repo: Optional[FakeUserRepository] = None):
        super().__init__()
        self.user_repo = user_repo

    async def find_with_customer(self, id):
        order = await self.find_by_id(id)
        if not order:
            return None
        order["customer"] = await self.user_repo.find_by_id(order["user_id"]) if self.user_repo else None
        return order

    async def find_recent(self, limit=50):
        if self.fail:
            return None
        orders = sorted(self.docs.values(), key=lambda d: d.get("order_date") or d["created_at"], reverse=True)
        return [deepcopy(o) for o in orders[:limit]]

    async def find_by_user(self, user_id):
        return await self.find_all({"user_id": user_id})

    async def find_by_seller(self, seller_id):
        return await self.find_all({"seller_id": seller_id})


class FakePaymentRepository(FakeRepository):

    async def find_by_order_id(self, order_id):
        for doc in self.docs.values():
            if doc.get("order_id") == order_id:
                return deepcopy(doc)
        return None


class FakeReviewRepository(FakeRepository):

    async def find_by_target(self, target_id):
        return await self.find_all({"target_id": target_id})

    async def find_by_reviewer(self, reviewer_id):
        return await self.find_all({"reviewer_id": reviewer_id})

    async def find_by_order_ids(self, order_ids):
        return [deepcopy(d) for d in self.docs.values() if d.get("order_id") in order_ids]


class FakeNotificationRepository(FakeRepository):

    async def find_by_user(self, user_id):
        return await self.find_all({"user_id": user_id})


class FakeProductRepository(FakeRepository):

    async def find_all_products(self, active_only=True):
        return await self.find_all({"is_active": True} if active_only else {})

    async def find_by_institution(self, institution_id):
        return await self.find_all({"institution_id": institution_id})


class FakeApplicationRepository(FakeRepository):

    async def find_by_user(self, user_id):
        return await self.find_all({"user_id": user_id})

    async def find_by_product(self, product_id):
        return await self.find_all({"product_id": product_id})

    async def count_blocking_by_user(self, user_id):
        if self.fail:
            return None
        blocking = {s.value for s in BLOCKING_APPLICATION_STATUSES}
        return sum(
            1 for doc in self.docs.values()
            if doc.get("user_id") == user_id and doc.get("status") in blocking
        )


class FakeConversationRepository(FakeRepository):

    async def find_by_user(self, user_id):
        return await self.find_all({"user_id": user_id})


class FakePredictionRepository(FakeRepository):

    async def find_by_conversation(self, conversation_id):
        return await self.find_all({"conversation_id": conversation_id})


class FakeListingRepository(FakeRepository):

    async def find_by_seller(self, seller_id):
        return await self.find_all({"seller_id": seller_id})


class FakeSlotRepository(FakeRepository):

    async def find_by_seller(self, seller_id):
        return await self.find_all({"seller_id": seller_id})

    async def find_active(self):
        slots = await self.find_all({"is_active": True})
        return sorted(slots, key=lambda s: s["available_date"])


class FakeBookingRepository(FakeRepository):

    def _live(self, **query):
        return [
            d for d in self.docs.values()
            if self._match(d, query) and d.get("status") != "cancelled"
        ]

    async def find_by_customer(self, customer_id):
        return await self.find_all({"customer_id": customer_id})

    async def count_active_on_slot(self, slot_id):
        if self.fail:
            return None
        return len(self._live(slot_id=slot_id))

    async def count_customer_bookings_on_slot(self, customer_id, slot_id):
        if self.fail:
            return None
        return len(self._live(customer_id=customer_id, slot_id=slot_id))

    async def clear_feedback(self, id):
        if id not in self.docs:
            return None
        self.docs[id].pop("feedback_rating", None)
        self.docs[id].pop("feedback_comment", None)
        return deepcopy(self.docs[id])


class FakeEmailService:

    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.sent: List[Dict[str, str]] = []

    async def send_otp_email(self, to, otp):
        self.sent.append({"to": to, "otp": otp})
        return self.succeed


class FakeLLM:

    def __init__(self, answer: str = "Revenue is up.", error: Optional[Exception] = None):
        self.answer = answer
        self.error = error
        self.prompts: List[str] = []

    async def generate(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.answer


# ----------------------------------------------------------------------
# Fixtures
# ----------------------------------------------------------------------

@pytest.fixture
def cache():
    return FakeCache()


@pytest.fixture
def user_repo():
    return FakeUserRepository()


@pytest.fixture
def order_repo(user_repo):
    return FakeOrderRepository(user_repo)


@pytest.fixture
def review_repo():
    return FakeReviewRepository()


@pytest.fixture
def seller_repo():
    return FakeSellerRepository()


@pytest.fixture
def payment_repo():
    return FakePaymentRepository()


@pytest.fixture
def notification_repo():
    return FakeNotificationRepository()


@pytest.fixture
def listing_repo():
    return FakeListingRepository()


@pytest.fixture
def model_repo():
    return FakeRepository()


@pytest.fixture
def slot_repo():
    return FakeSlotRepository()


@pytest.fixture
def booking_repo():
    return FakeBookingRepository()


@pytest.fixture
def email_service():
    return FakeEmailService()


@pytest.fixture
def llm():
    return FakeLLM()


@pytest.fixture
def auth_service(user_repo, email_service):
    return AuthService(user_repo, email_service)


@pytest.fixture
def user_service(user_repo, cache):
    return UserService(user_repo, cache)


@pytest.fixture
def notification_service(notification_repo, user_repo, cache):
    return NotificationService(notification_repo, user_repo, cache)


@pytest.fixture
def seller_service(seller_repo, user_repo, order_repo, review_repo, cache):
    return SellerService(seller_repo, user_repo, order_repo, review_repo, cache)


@pytest.fixture
def financial_service(notification_service, cache):
    return FinancialService(
        FakeRepository(),
        FakeProductRepository(),
        FakeApplicationRepository(),
        notification_service,
        cache,
    )


@pytest.fixture
def order_service(order_repo, listing_repo, booking_repo, notification_service, cache):
    return OrderService(order_repo, listing_repo, booking_repo, notification_service, cache)


@pytest.fixture
def payment_service(payment_repo, order_repo, cache):
    return PaymentService(payment_repo, order_repo, cache)


@pytest.fixture
def review_service(review_repo, user_repo, order_repo, seller_service, cache):
    return ReviewService(review_repo, user_repo, order_repo, seller_service, cache)


@pytest.fixture
def chatbot_service(user_repo, order_repo, llm, cache):
    return ChatbotService(
        FakeConversationRepository(),
        FakePredictionRepository(),
        user_repo,
        order_repo,
        llm,
        cache,
    )


@pytest.fixture
def ev_service(model_repo, listing_repo, seller_repo, cache):
    return EvService(FakeRepository(), FakeRepository(), model_repo, listing_repo, seller_repo, cache)


@pytest.fixture
def test_drive_service(slot_repo, booking_repo, seller_repo, model_repo, notification_service, cache):
    return TestDriveService(slot_repo, booking_repo, seller_repo, model_repo, notification_service, cache)


@pytest.fixture
def auth_header():
    """Builds an Authorization header for a user id and role list."""
    def _header(user_id: Optional[str] = None, roles: Optional[List[str]] = None) -> Dict[str, str]:
        token = create_access_token(user_id or str(ObjectId()), roles or ["user"])
        return {"Authorization": f"Bearer {token}"}
    return _header


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """API tests share one client IP; start each test with empty windows."""
    RateLimitMiddleware.reset()
    yield
    RateLimitMiddleware.reset()
