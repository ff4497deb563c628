"""
app/api/sellers.py

Purpose: Seller profile endpoints
"""

from fastapi import APIRouter, Depends

from app.core.container import get_seller_service
from app.core.dependencies import get_current_user, require_roles
from app.core.errors import handle_result
from app.models.enums import UserRole
from app.schemas.seller import SellerCreate, SellerUpdate
from app.services.seller_service import SellerService

router = APIRouter(prefix="/sellers", tags=["Sellers"])


@router.post("", status_code=201, dependencies=[Depends(get_current_user)])
async def create_seller(body: SellerCreate, service: SellerService = Depends(get_seller_service)):
    result = await service.create(body.model_dump(exclude_none=True))
    return handle_result(result, success_status=201)


@router.get("")
async def list_sellers(service: SellerService = Depends(get_seller_service)):
    return handle_result(await service.get_all())


@router.get("/user/{user_id}")
async def get_seller_by_user(user_id: str, service: SellerService = Depends(get_seller_service)):
    return handle_result(await service.get_by_user_id(user_id))


@router.get("/{id}")
async def get_seller(id: str, service: SellerService = Depends(get_seller_service)):
    return handle_result(await service.get_by_id(id))


@router.put("/{id}", dependencies=[Depends(require_roles(UserRole.SELLER, UserRole.ADMIN))])
async def update_seller(id: str, body: SellerUpdate, service: SellerService = Depends(get_seller_service)):
    return handle_result(await service.update(id, body.model_dump(exclude_unset=True)))


@router.post("/{id}/rating", dependencies=[Depends(get_current_user)])
async def refresh_seller_rating(id: str, service: SellerService = Depends(get_seller_service)):
    return handle_result(await service.update_rating_and_review_count(id))


@router.delete("/{id}", dependencies=[Depends(require_roles(UserRole.ADMIN))])
async def delete_seller(id: str, service: SellerService = Depends(get_seller_service)):
    return handle_result(await service.delete(id))
