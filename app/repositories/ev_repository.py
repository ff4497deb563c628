"""
app/repositories/ev_repository.py

Purpose: Persistence for the EV catalog

- Brands and categories
- Models (belong to a brand and a category)
- Vehicle listings a seller puts up for sale or lease
"""

from typing import Any, Dict, List, Optional

from app.db.mongo import EV_BRANDS, EV_CATEGORIES, EV_MODELS, VEHICLE_LISTINGS
from app.repositories.base import BaseRepository, to_object_id, with_error_handling


class BrandRepository(BaseRepository):
    collection_name = EV_BRANDS
    default_sort = (("brand_name", 1),)


class CategoryRepository(BaseRepository):
    collection_name = EV_CATEGORIES
    default_sort = (("category_name", 1),)


class EvModelRepository(BaseRepository):
    collection_name = EV_MODELS
    reference_fields = ("brand_id", "category_id")
    default_sort = (("year", -1), ("model_name", 1))


class ListingRepository(BaseRepository):
    collection_name = VEHICLE_LISTINGS
    reference_fields = ("seller_id", "model_id")

    @with_error_handling
    async def find_by_seller(self, seller_id: str) -> Optional[List[Dict[str, Any]]]:
        return await self._find({"seller_id": to_object_id(seller_id)})
