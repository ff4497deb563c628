"""
app/repositories/financial_repository.py

Purpose: Persistence for the financing domain

- Financial institutions
- Financial products offered by an institution
- Financing applications submitted by users
"""

from typing import Any, Dict, List, Optional

from app.db.mongo import FINANCIAL_INSTITUTIONS, FINANCIAL_PRODUCTS, FINANCING_APPLICATIONS
from app.models.enums import BLOCKING_APPLICATION_STATUSES
from app.repositories.base import BaseRepository, to_object_id, with_error_handling


class InstitutionRepository(BaseRepository):
    collection_name = FINANCIAL_INSTITUTIONS
    reference_fields = ("user_id",)


class ProductRepository(BaseRepository):
    collection_name = FINANCIAL_PRODUCTS
    reference_fields = ("institution_id",)

    @with_error_handling
    async def find_all_products(self, active_only: bool = True) -> Optional[List[Dict[str, Any]]]:
        query = {"is_active": True} if active_only else {}
        return await self._find(query)

    @with_error_handling
    async def find_by_institution(self, institution_id: str) -> Optional[List[Dict[str, Any]]]:
        return await self._find({"institution_id": to_object_id(institution_id)})


class ApplicationRepository(BaseRepository):
    collection_name = FINANCING_APPLICATIONS
    reference_fields = ("user_id", "product_id")

    @with_error_handling
    async def find_by_user(self, user_id: str) -> Optional[List[Dict[str, Any]]]:
        return await self._find({"user_id": to_object_id(user_id)})

    @with_error_handling
    async def find_by_product(self, product_id: str) -> Optional[List[Dict[str, Any]]]:
        return await self._find({"product_id": to_object_id(product_id)})

    @with_error_handling
    async def count_blocking_by_user(self, user_id: str) -> Optional[int]:
        """
        Counts applications that prevent the user from applying again.

        None means the lookup failed, not that there are none.
        """
        return await self._collection().count_documents({
            "user_id": to_object_id(user_id),
            "status": {"$in": [s.value for s in BLOCKING_APPLICATION_STATUSES]},
        })
