"""
app/api/ev.py

Purpose: EV catalog and listing endpoints

- /ev/brands, /ev/categories, /ev/models (admin writes)
- /ev/listings (seller or admin writes)
- Every route needs a signed-in user
"""

from fastapi import APIRouter, Depends, Query

from app.core.container import get_ev_service
from app.core.dependencies import get_current_user, require_roles
from app.core.errors import handle_result
from app.models.enums import UserRole
from app.schemas.ev import (
    BrandCreate,
    BrandUpdate,
    CategoryCreate,
    CategoryUpdate,
    EvModelCreate,
    EvModelUpdate,
    ListingCreate,
    ListingUpdate,
)
from app.services.ev_service import EvService

router = APIRouter(prefix="/ev", tags=["EV"], dependencies=[Depends(get_current_user)])

admin_only = require_roles(UserRole.ADMIN)
seller_or_admin = require_roles(UserRole.SELLER, UserRole.ADMIN)


# Brands

@router.post("/brands", status_code=201, dependencies=[Depends(admin_only)])
async def create_brand(body: BrandCreate, service: EvService = Depends(get_ev_service)):
    return handle_result(await service.create_brand(body.model_dump(exclude_none=True)), success_status=201)


@router.get("/brands")
async def list_brands(service: EvService = Depends(get_ev_service)):
    return handle_result(await service.get_all_brands())


@router.get("/brands/{id}")
async def get_brand(id: str, service: EvService = Depends(get_ev_service)):
    return handle_result(await service.get_brand(id))


@router.put("/brands/{id}", dependencies=[Depends(admin_only)])
async def update_brand(id: str, body: BrandUpdate, service: EvService = Depends(get_ev_service)):
    return handle_result(await service.update_brand(id, body.model_dump(exclude_unset=True)))


@router.delete("/brands/{id}", dependencies=[Depends(admin_only)])
async def delete_brand(id: str, service: EvService = Depends(get_ev_service)):
    return handle_result(await service.delete_brand(id))


# Categories

@router.post("/categories", status_code=201, dependencies=[Depends(admin_only)])
async def create_category(body: CategoryCreate, service: EvService = Depends(get_ev_service)):
    return handle_result(await service.create_category(body.model_dump(exclude_none=True)), success_status=201)


@router.get("/categories")
async def list_categories(service: EvService = Depends(get_ev_service)):
    return handle_result(await service.get_all_categories())


@router.get("/categories/{id}")
async def get_category(id: str, service: EvService = Depends(get_ev_service)):
    return handle_result(await service.get_category(id))


@router.put("/categories/{id}", dependencies=[Depends(admin_only)])
async def update_category(id: str, body: CategoryUpdate, service: EvService = Depends(get_ev_service)):
    return handle_result(await service.update_category(id, body.model_dump(exclude_unset=True)))


@router.delete("/categories/{id}", dependencies=[Depends(admin_only)])
async def delete_category(id: str, service: EvService = Depends(get_ev_service)):
    return handle_result(await service.delete_category(id))


# Models

@router.post("/models", status_code=201, dependencies=[Depends(admin_only)])
async def create_model(body: EvModelCreate, service: EvService = Depends(get_ev_service)):
    return handle_result(await service.create_model(body.model_dump(exclude_none=True)), success_status=201)


@router.get("/models")
async def list_models(service: EvService = Depends(get_ev_service)):
    return handle_result(await service.get_all_models())


@router.get("/models/{id}")
async def get_model(id: str, service: EvService = Depends(get_ev_service)):
    return handle_result(await service.get_model(id))


@router.put("/models/{id}", dependencies=[Depends(admin_only)])
async def update_model(id: str, body: EvModelUpdate, service: EvService = Depends(get_ev_service)):
    return handle_result(await service.update_model(id, body.model_dump(exclude_unset=True)))


@router.delete("/models/{id}", dependencies=[Depends(admin_only)])
async def delete_model(id: str, service: EvService = Depends(get_ev_service)):
    return handle_result(await service.delete_model(id))


# Listings

@router.post("/listings", status_code=201, dependencies=[Depends(seller_or_admin)])
async def create_listing(body: ListingCreate, service: EvService = Depends(get_ev_service)):
    return handle_result(await service.create_listing(body.model_dump(exclude_none=True)), success_status=201)


@router.get("/listings")
async def list_listings(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str = "",
    filter_by: str = Query("", alias="filter"),
    service: EvService = Depends(get_ev_service),
):
    return handle_result(await service.get_all_listings(page, limit, search, filter_by))


@router.get("/listings/seller/{seller_id}")
async def list_seller_listings(seller_id: str, service: EvService = Depends(get_ev_service)):
    return handle_result(await service.get_listings_by_seller(seller_id))


@router.get("/listings/{id}")
async def get_listing(id: str, service: EvService = Depends(get_ev_service)):
    return handle_result(await service.get_listing(id))


@router.put("/listings/{id}", dependencies=[Depends(seller_or_admin)])
async def update_listing(id: str, body: ListingUpdate, service: EvService = Depends(get_ev_service)):
    return handle_result(await service.update_listing(id, body.model_dump(exclude_unset=True)))


@router.delete("/listings/{id}", dependencies=[Depends(seller_or_admin)])
async def delete_listing(id: str, service: EvService = Depends(get_ev_service)):
    return handle_result(await service.delete_listing(id))
