"""
app/core/container.py

Purpose: Dependency wiring

- Builds one set of repositories and services per process
- FastAPI dependency providers (get_*_service)
- Tests override providers through app.dependency_overrides
"""

from typing import Optional

from app.repositories.chatbot_repository import ConversationRepository, PredictionRepository
from app.repositories.ev_repository import (
    BrandRepository,
    CategoryRepository,
    EvModelRepository,
    ListingRepository,
)
from app.repositories.financial_repository import (
    ApplicationRepository,
    InstitutionRepository,
    ProductRepository,
)
from app.repositories.notification_repository import NotificationRepository
from app.repositories.order_repository import OrderRepository
from app.repositories.payment_repository import PaymentRepository
from app.repositories.review_repository import ReviewRepository
from app.repositories.seller_repository import SellerRepository
from app.repositories.test_drive_repository import BookingRepository, SlotRepository
from app.repositories.user_repository import UserRepository
from app.services.auth_service import AuthService
from app.services.cache_service import CacheService, get_cache_service
from app.services.chatbot_service import ChatbotService
from app.services.email_service import EmailService, get_email_service
from app.services.ev_service import EvService
from app.services.financial_service import FinancialService
from app.services.llm_service import LLMService, get_llm_service
from app.services.notification_service import NotificationService
from app.services.order_service import OrderService
from app.services.payment_service import PaymentService
from app.services.review_service import ReviewService
from app.services.seller_service import SellerService
from app.services.test_drive_service import TestDriveService
from app.services.user_service import UserService


class Container:
    """Holds the process-wide repository and service instances."""

    def __init__(
        self,
        cache: Optional[CacheService] = None,
        email_service: Optional[EmailService] = None,
        llm: Optional[LLMService] = None,
    ):
        self.cache = cache or get_cache_service()
        self.email_service = email_service or get_email_service()
        self.llm = llm or get_llm_service()

        # Repositories
        self.user_repo = UserRepository()
        self.seller_repo = SellerRepository()
        self.institution_repo = InstitutionRepository()
        self.product_repo = ProductRepository()
        self.application_repo = ApplicationRepository()
        self.order_repo = OrderRepository()
        self.payment_repo = PaymentRepository()
        self.review_repo = ReviewRepository()
        self.notification_repo = NotificationRepository()
        self.conversation_repo = ConversationRepository()
        self.prediction_repo = PredictionRepository()
        self.brand_repo = BrandRepository()
        self.category_repo = CategoryRepository()
        self.model_repo = EvModelRepository()
        self.listing_repo = ListingRepository()
        self.slot_repo = SlotRepository()
        self.booking_repo = BookingRepository()

        # Services
        self.notification_service = NotificationService(
            self.notification_repo, self.user_repo, self.cache
        )
        self.auth_service = AuthService(self.user_repo, self.email_service)
        self.user_service = UserService(self.user_repo, self.cache)
        self.seller_service = SellerService(
            self.seller_repo, self.user_repo, self.order_repo, self.review_repo, self.cache
        )
        self.financial_service = FinancialService(
            self.institution_repo,
            self.product_repo,
            self.application_repo,
            self.notification_service,
            self.cache,
        )
        self.order_service = OrderService(
            self.order_repo,
            self.listing_repo,
            self.booking_repo,
            self.notification_service,
            self.cache,
        )
        self.payment_service = PaymentService(self.payment_repo, self.order_repo, self.cache)
        self.review_service = ReviewService(
            self.review_repo, self.user_repo, self.order_repo, self.seller_service, self.cache
        )
        self.chatbot_service = ChatbotService(
            self.conversation_repo,
            self.prediction_repo,
            self.user_repo,
            self.order_repo,
            self.llm,
            self.cache,
        )
        self.ev_service = EvService(
            self.brand_repo,
            self.category_repo,
            self.model_repo,
            self.listing_repo,
            self.seller_repo,
            self.cache,
        )
        self.test_drive_service = TestDriveService(
            self.slot_repo,
            self.booking_repo,
            self.seller_repo,
            self.model_repo,
            self.notification_service,
            self.cache,
        )


# Global container instance
_container: Optional[Container] = None


def get_container() -> Container:
    """Get or create the container."""
    global _container
    if _container is None:
        _container = Container()
    return _container


def get_auth_service() -> AuthService:
    return get_container().auth_service


def get_user_service() -> UserService:
    return get_container().user_service


def get_seller_service() -> SellerService:
    return get_container().seller_service


def get_financial_service() -> FinancialService:
    return get_container().financial_service


def get_order_service() -> OrderService:
    return get_container().order_service


def get_payment_service() -> PaymentService:
    return get_container().payment_service


def get_review_service() -> ReviewService:
    return get_container().review_service


def get_notification_service() -> NotificationService:
    return get_container().notification_service


def get_chatbot_service() -> ChatbotService:
    return get_container().chatbot_service


def get_ev_service() -> EvService:
    return get_container().ev_service


def get_test_drive_service() -> TestDriveService:
    return get_container().test_drive_service
