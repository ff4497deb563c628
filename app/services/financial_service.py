"""
app/services/financial_service.py

Purpose: Financing institutions, products and applications

- Institutions and their products (CRUD)
- Applications: product must be active, one blocking application per user
- Status changes notify the applicant
"""

from datetime import datetime
from typing import Any, Dict, Optional

from app.core.logging import get_logger, LogContext
from app.models.enums import ApplicationStatus, NotificationType
from app.repositories.financial_repository import (
    ApplicationRepository,
    InstitutionRepository,
    ProductRepository,
)
from app.services.cache_service import CacheService
from app.services.notification_service import NotificationService

logger = get_logger(__name__)

PROCESSED_STATUSES = (ApplicationStatus.APPROVED.value, ApplicationStatus.REJECTED.value)


class FinancialService:

    def __init__(
        self,
        institution_repo: InstitutionRepository,
        product_repo: ProductRepository,
        application_repo: ApplicationRepository,
        notification_service: NotificationService,
        cache: CacheService,
    ):
        self.institution_repo = institution_repo
        self.product_repo = product_repo
        self.application_repo = application_repo
        self.notification_service = notification_service
        self.cache = cache

    # ------------------------------------------------------------------
    # Institutions
    # ------------------------------------------------------------------

    async def create_institution(self, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            institution = await self.institution_repo.create(data)
            if not institution:
                return {"success": False, "error": "Failed to create institution"}
            await self.cache.delete("institutions")
            return {"success": True, "institution": institution}
        except Exception as e:
            logger.error(f"Failed to create institution: {e}", exc_info=True)
            return {"success": False, "error": "Failed to create institution"}

    async def get_institution(self, id: str) -> Dict[str, Any]:
        institution = await self.cache.get_or_set(
            f"institution_{id}", lambda: self.institution_repo.find_by_id(id)
        )
        if not institution:
            return {"success": False, "error": "Institution not found"}
        return {"success": True, "institution": institution}

    async def get_all_institutions(self) -> Dict[str, Any]:
        institutions = await self.cache.get_or_set(
            "institutions", lambda: self.institution_repo.find_all()
        )
        if institutions is None:
            return {"success": False, "error": "Failed to retrieve institutions"}
        return {"success": True, "institutions": institutions}

    async def update_institution(self, id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            institution = await self.institution_repo.update(id, data)
            if not institution:
                return {"success": False, "error": "Institution not found"}
            await self.cache.delete(f"institution_{id}")
            await self.cache.delete("institutions")
            return {"success": True, "institution": institution}
        except Exception as e:
            logger.error(f"Failed to update institution: {e}", exc_info=True)
            return {"success": False, "error": "Failed to update institution"}

    async def delete_institution(self, id: str) -> Dict[str, Any]:
        try:
            deleted = await self.institution_repo.delete(id)
            if not deleted:
                return {"success": False, "error": "Institution not found"}
            await self.cache.delete(f"institution_{id}")
            await self.cache.delete("institutions")
            return {"success": True}
        except Exception as e:
            logger.error(f"Failed to delete institution: {e}", exc_info=True)
            return {"success": False, "error": "Failed to delete institution"}

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    async def _invalidate_products(self, product_id: Optional[str] = None, institution_id: Optional[str] = None):
        if product_id:
            await self.cache.delete(f"product_{product_id}")
        if institution_id:
            await self.cache.delete(f"products_institution_{institution_id}")
        await self.cache.delete_pattern("products_all_*")

    async def create_product(self, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            institution = await self.institution_repo.find_by_id(data["institution_id"])
            if not institution:
                return {"success": False, "error": "Institution not found"}

            product = await self.product_repo.create({"is_active": True, **data})
            if not product:
                return {"success": False, "error": "Failed to create product"}

            await self._invalidate_products(institution_id=data["institution_id"])
            return {"success": True, "product": product}
        except Exception as e:
            logger.error(f"Failed to create product: {e}", exc_info=True)
            return {"success": False, "error": "Failed to create product"}

    async def get_product(self, id: str) -> Dict[str, Any]:
        product = await self.cache.get_or_set(f"product_{id}", lambda: self.product_repo.find_by_id(id))
        if not product:
            return {"success": False, "error": "Product not found"}
        return {"success": True, "product": product}

    async def get_all_products(self, active_only: bool = True) -> Dict[str, Any]:
        products = await self.cache.get_or_set(
            f"products_all_{'active' if active_only else 'any'}",
            lambda: self.product_repo.find_all_products(active_only),
        )
        if products is None:
            return {"success": False, "error": "Failed to retrieve products"}
        return {"success": True, "products": products}

    async def get_products_by_institution(self, institution_id: str) -> Dict[str, Any]:
        products = await self.cache.get_or_set(
            f"products_institution_{institution_id}",
            lambda: self.product_repo.find_by_institution(institution_id),
        )
        if products is None:
            return {"success": False, "error": "Failed to retrieve products"}
        return {"success": True, "products": products}

    async def update_product(self, id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            product = await self.product_repo.update(id, data)
            if not product:
                return {"success": False, "error": "Product not found"}
            await self._invalidate_products(id, product.get("institution_id"))
            return {"success": True, "product": product}
        except Exception as e:
            logger.error(f"Failed to update product: {e}", exc_info=True)
            return {"success": False, "error": "Failed to update product"}

    async def delete_product(self, id: str) -> Dict[str, Any]:
        try:
            product = await self.product_repo.find_by_id(id)
            if not product:
                return {"success": False, "error": "Product not found"}
            deleted = await self.product_repo.delete(id)
            if not deleted:
                return {"success": False, "error": "Product not found"}
            await self._invalidate_products(id, product.get("institution_id"))
            return {"success": True}
        except Exception as e:
            logger.error(f"Failed to delete product: {e}", exc_info=True)
            return {"success": False, "error": "Failed to delete product"}

    # ------------------------------------------------------------------
    # Applications
    # ------------------------------------------------------------------

    async def _invalidate_applications(self, application: Dict[str, Any]):
        await self.cache.delete(f"application_{application['id']}")
        if application.get("user_id"):
            await self.cache.delete(f"applications_user_{application['user_id']}")
        if application.get("product_id"):
            await self.cache.delete(f"applications_product_{application['product_id']}")

    async def create_application(self, data: Dict[str, Any]) -> Dict[str, Any]:
        with LogContext(user_id=data.get("user_id"), resource="financing_application"):
            try:
                product = await self.product_repo.find_by_id(data["product_id"])
                if not product or not product.get("is_active", True):
                    return {"success": False, "error": "Product is not available"}

                blocking = await self.application_repo.count_blocking_by_user(data["user_id"])
                if blocking is None:
                    return {"success": False, "error": "Failed to create application"}
                if blocking:
                    return {"success": False, "error": "User already has an active application"}

                application = await self.application_repo.create({
                    **data,
                    "status": ApplicationStatus.PENDING.value,
                })
                if not application:
                    return {"success": False, "error": "Failed to create application"}

                await self._invalidate_applications(application)
                logger.info("Financing application submitted")
                return {"success": True, "application": application}
            except Exception as e:
                logger.error(f"Failed to create application: {e}", exc_info=True)
                return {"success": False, "error": "Failed to create application"}

    async def get_application(self, id: str) -> Dict[str, Any]:
        application = await self.cache.get_or_set(
            f"application_{id}", lambda: self.application_repo.find_by_id(id)
        )
        if not application:
            return {"success": False, "error": "Application not found"}
        return {"success": True, "application": application}

    async def get_applications_by_user(self, user_id: str) -> Dict[str, Any]:
        applications = await self.cache.get_or_set(
            f"applications_user_{user_id}", lambda: self.application_repo.find_by_user(user_id)
        )
        if applications is None:
            return {"success": False, "error": "Failed to retrieve applications"}
        return {"success": True, "applications": applications}

    async def get_applications_by_product(self, product_id: str) -> Dict[str, Any]:
        applications = await self.cache.get_or_set(
            f"applications_product_{product_id}",
            lambda: self.application_repo.find_by_product(product_id),
        )
        if applications is None:
            return {"success": False, "error": "Failed to retrieve applications"}
        return {"success": True, "applications": applications}

    async def update_application_status(self, id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Moves an application to a new status.
        approved / rejected stamp processed_at and notify the applicant.
        """
        try:
            existing = await self.application_repo.find_by_id(id)
            if not existing:
                return {"success": False, "error": "Application not found"}

            changes = dict(data)
            status = changes.get("status")
            if status in PROCESSED_STATUSES:
                changes["processed_at"] = datetime.utcnow()

            application = await self.application_repo.update(id, changes)
            if not application:
                return {"success": False, "error": "Failed to update application"}

            await self._invalidate_applications(application)

            if status == ApplicationStatus.APPROVED.value:
                await self.notification_service.notify(
                    application["user_id"],
                    NotificationType.APPLICATION_APPROVED,
                    "Financing application approved",
                    "Your financing application has been approved.",
                )
            elif status == ApplicationStatus.REJECTED.value:
                reason = application.get("rejection_reason")
                await self.notification_service.notify(
                    application["user_id"],
                    NotificationType.APPLICATION_REJECTED,
                    "Financing application rejected",
                    f"Your financing application was rejected. {reason}" if reason
                    else "Your financing application was rejected.",
                )

            return {"success": True, "application": application}
        except Exception as e:
            logger.error(f"Failed to update application: {e}", exc_info=True)
            return {"success": False, "error": "Failed to update application"}

    async def delete_application(self, id: str) -> Dict[str, Any]:
        try:
            application = await self.application_repo.find_by_id(id)
            if not application:
                return {"success": False, "error": "Application not found"}
            deleted = await self.application_repo.delete(id)
            if not deleted:
                return {"success": False, "error": "Application not found"}
            await self._invalidate_applications(application)
            return {"success": True}
        except Exception as e:
            logger.error(f"Failed to delete application: {e}", exc_info=True)
            return {"success": False, "error": "Failed to delete application"}
