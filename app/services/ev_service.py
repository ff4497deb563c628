"""
app/services/ev_service.py

Purpose: EV catalog and vehicle listings

- Brands, categories and models share one CRUD path (_Catalog)
- A model must point at an existing brand and category
- Listings belong to a seller and a model; paged browse with filter and search
- Cache keys: brands / brand_{id}, categories / category_{id}, models / model_{id},
  listing_{id}, listings_seller_{sid}, listings_{page}_{limit}_{search}_{filter}
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

from app.core.logging import get_logger, LogContext
from app.repositories.base import BaseRepository
from app.repositories.ev_repository import (
    BrandRepository,
    CategoryRepository,
    EvModelRepository,
    ListingRepository,
)
from app.repositories.seller_repository import SellerRepository
from app.services.cache_service import CacheService

logger = get_logger(__name__)

# Fields a filter term must equal, and a search term may appear in
LISTING_FILTER_FIELDS = ("listing_type", "condition", "status", "color")
LISTING_SEARCH_FIELDS = LISTING_FILTER_FIELDS + ("registration_year",)


@dataclass(frozen=True)
class _Catalog:
    """How one catalog entity is stored, cached and named in results."""
    repo: BaseRepository
    key: str
    plural: str
    label: str

    def item_key(self, id: str) -> str:
        return f"{self.key}_{id}"


def _matches_filter(listing: Dict[str, Any], term: str) -> bool:
    return any(str(listing.get(f) or "").lower() == term for f in LISTING_FILTER_FIELDS)


def _matches_search(listing: Dict[str, Any], term: str) -> bool:
    return any(term in str(listing.get(f) or "").lower() for f in LISTING_SEARCH_FIELDS)


class EvService:

    def __init__(
        self,
        brand_repo: BrandRepository,
        category_repo: CategoryRepository,
        model_repo: EvModelRepository,
        listing_repo: ListingRepository,
        seller_repo: SellerRepository,
        cache: CacheService,
    ):
        self.brand_repo = brand_repo
        self.category_repo = category_repo
        self.model_repo = model_repo
        self.listing_repo = listing_repo
        self.seller_repo = seller_repo
        self.cache = cache

        self.brands = _Catalog(brand_repo, "brand", "brands", "Brand")
        self.categories = _Catalog(category_repo, "category", "categories", "Category")
        self.models = _Catalog(model_repo, "model", "models", "Model")

    # ------------------------------------------------------------------
    # Brands, categories, models
    # ------------------------------------------------------------------

    async def _create(self, catalog: _Catalog, data: Dict[str, Any]) -> Dict[str, Any]:
        label = catalog.label.lower()
        try:
            item = await catalog.repo.create(data)
            if not item:
                return {"success": False, "error": f"Failed to create {label}"}
            await self.cache.delete(catalog.plural)
            return {"success": True, catalog.key: item}
        except Exception as e:
            logger.error(f"Failed to create {label}: {e}", exc_info=True)
            return {"success": False, "error": f"Failed to create {label}"}

    async def _get_all(self, catalog: _Catalog) -> Dict[str, Any]:
        items = await self.cache.get_or_set(catalog.plural, lambda: catalog.repo.find_all())
        if items is None:
            return {"success": False, "error": f"Failed to fetch {catalog.plural}"}
        return {"success": True, catalog.plural: items}

    async def _get(self, catalog: _Catalog, id: str) -> Dict[str, Any]:
        item = await self.cache.get_or_set(catalog.item_key(id), lambda: catalog.repo.find_by_id(id))
        if not item:
            return {"success": False, "error": f"{catalog.label} not found"}
        return {"success": True, catalog.key: item}

    async def _update(self, catalog: _Catalog, id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        label = catalog.label.lower()
        try:
            item = await catalog.repo.update(id, data)
            if not item:
                return {"success": False, "error": f"{catalog.label} not found"}
            await self.cache.delete(catalog.plural)
            await self.cache.delete(catalog.item_key(id))
            return {"success": True, catalog.key: item}
        except Exception as e:
            logger.error(f"Failed to update {label}: {e}", exc_info=True)
            return {"success": False, "error": f"Failed to update {label}"}

    async def _delete(self, catalog: _Catalog, id: str) -> Dict[str, Any]:
        label = catalog.label.lower()
        try:
            deleted = await catalog.repo.delete(id)
            if not deleted:
                return {"success": False, "error": f"{catalog.label} not found"}
            await self.cache.delete(catalog.plural)
            await self.cache.delete(catalog.item_key(id))
            return {"success": True}
        except Exception as e:
            logger.error(f"Failed to delete {label}: {e}", exc_info=True)
            return {"success": False, "error": f"Failed to delete {label}"}

    async def create_brand(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._create(self.brands, data)

    async def get_all_brands(self) -> Dict[str, Any]:
        return await self._get_all(self.brands)

    async def get_brand(self, id: str) -> Dict[str, Any]:
        return await self._get(self.brands, id)

    async def update_brand(self, id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._update(self.brands, id, data)

    async def delete_brand(self, id: str) -> Dict[str, Any]:
        return await self._delete(self.brands, id)

    async def create_category(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._create(self.categories, data)

    async def get_all_categories(self) -> Dict[str, Any]:
        return await self._get_all(self.categories)

    async def get_category(self, id: str) -> Dict[str, Any]:
        return await self._get(self.categories, id)

    async def update_category(self, id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._update(self.categories, id, data)

    async def delete_category(self, id: str) -> Dict[str, Any]:
        return await self._delete(self.categories, id)

    async def _check_model_parents(self, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Returns an error result when a referenced brand or category is missing."""
        if "brand_id" in data and not await self.brand_repo.find_by_id(data["brand_id"]):
            return {"success": False, "error": "Brand not found"}
        if "category_id" in data and not await self.category_repo.find_by_id(data["category_id"]):
            return {"success": False, "error": "Category not found"}
        return None

    async def create_model(self, data: Dict[str, Any]) -> Dict[str, Any]:
        missing = await self._check_model_parents(data)
        if missing:
            return missing
        return await self._create(self.models, data)

    async def get_all_models(self) -> Dict[str, Any]:
        return await self._get_all(self.models)

    async def get_model(self, id: str) -> Dict[str, Any]:
        return await self._get(self.models, id)

    async def update_model(self, id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        missing = await self._check_model_parents(data)
        if missing:
            return missing
        return await self._update(self.models, id, data)

    async def delete_model(self, id: str) -> Dict[str, Any]:
        return await self._delete(self.models, id)

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    async def _invalidate_listings(self, listing: Dict[str, Any]):
        await self.cache.delete(f"listing_{listing['id']}")
        # Also covers listings_seller_{sid}
        await self.cache.delete_pattern("listings_*")

    async def create_listing(self, data: Dict[str, Any]) -> Dict[str, Any]:
        with LogContext(resource="listing"):
            try:
                if not await self.seller_repo.find_by_id(data["seller_id"]):
                    return {"success": False, "error": "Seller not found"}
                if not await self.model_repo.find_by_id(data["model_id"]):
                    return {"success": False, "error": "Model not found"}

                listing = await self.listing_repo.create(data)
                if not listing:
                    return {"success": False, "error": "Failed to create listing"}

                await self._invalidate_listings(listing)
                logger.info(f"Listing {listing['id']} created for seller {data['seller_id']}")
                return {"success": True, "listing": listing}
            except Exception as e:
                logger.error(f"Failed to create listing: {e}", exc_info=True)
                return {"success": False, "error": "Failed to create listing"}

    async def get_all_listings(
        self,
        page: int = 1,
        limit: int = 10,
        search: str = "",
        filter_by: str = "",
    ) -> Dict[str, Any]:
        """
        One page of listings.

        filter_by must equal listing_type, condition, status or color; search may
        appear in any of those or in registration_year. Both ignore case.
        """
        async def fetch():
            listings = await self.listing_repo.find_all()
            if listings is None:
                return None
            if filter_by:
                listings = [item for item in listings if _matches_filter(item, filter_by.lower())]
            if search:
                listings = [item for item in listings if _matches_search(item, search.lower())]

            total = len(listings)
            start = (page - 1) * limit
            return {
                "listings": listings[start:start + limit],
                "total": total,
                "page": page,
                "limit": limit,
                "totalPages": math.ceil(total / limit),
            }

        try:
            result = await self.cache.get_or_set(f"listings_{page}_{limit}_{search}_{filter_by}", fetch)
            if result is None:
                return {"success": False, "error": "Failed to fetch listings"}
            if not result["listings"]:
                return {"success": False, "error": "No listings found"}
            return {"success": True, "page": result}
        except Exception as e:
            logger.error(f"Failed to fetch listings: {e}", exc_info=True)
            return {"success": False, "error": "Failed to fetch listings"}

    async def get_listing(self, id: str) -> Dict[str, Any]:
        listing = await self.cache.get_or_set(f"listing_{id}", lambda: self.listing_repo.find_by_id(id))
        if not listing:
            return {"success": False, "error": "Listing not found"}
        return {"success": True, "listing": listing}

    async def get_listings_by_seller(self, seller_id: str) -> Dict[str, Any]:
        listings = await self.cache.get_or_set(
            f"listings_seller_{seller_id}", lambda: self.listing_repo.find_by_seller(seller_id)
        )
        if listings is None:
            return {"success": False, "error": "Failed to fetch seller listings"}
        return {"success": True, "listings": listings}

    async def update_listing(self, id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            listing = await self.listing_repo.update(id, data)
            if not listing:
                return {"success": False, "error": "Listing not found"}
            await self._invalidate_listings(listing)
            return {"success": True, "listing": listing}
        except Exception as e:
            logger.error(f"Failed to update listing: {e}", exc_info=True)
            return {"success": False, "error": "Failed to update listing"}

    async def delete_listing(self, id: str) -> Dict[str, Any]:
        try:
            listing = await self.listing_repo.find_by_id(id)
            if not listing:
                return {"success": False, "error": "Listing not found"}

            if not await self.listing_repo.delete(id):
                return {"success": False, "error": "Failed to delete listing"}

            await self._invalidate_listings(listing)
            return {"success": True}
        except Exception as e:
            logger.error(f"Failed to delete listing: {e}", exc_info=True)
            return {"success": False, "error": "Failed to delete listing"}
