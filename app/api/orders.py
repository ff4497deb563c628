"""
app/api/orders.py

Purpose: Order endpoints
"""

from fastapi import APIRouter, Depends

from app.core.container import get_order_service
from app.core.dependencies import get_current_user
from app.core.errors import handle_result
from app.schemas.order import OrderCreate, OrderUpdate
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"], dependencies=[Depends(get_current_user)])


@router.post("", status_code=201)
async def create_order(body: OrderCreate, service: OrderService = Depends(get_order_service)):
    result = await service.create(body.model_dump(exclude_none=True))
    return handle_result(result, success_status=201)


@router.get("/user/{user_id}")
async def list_user_orders(user_id: str, service: OrderService = Depends(get_order_service)):
    return handle_result(await service.get_by_user(user_id))


@router.get("/seller/{seller_id}")
async def list_seller_orders(seller_id: str, service: OrderService = Depends(get_order_service)):
    return handle_result(await service.get_by_seller(seller_id))


@router.get("/{id}")
async def get_order(id: str, service: OrderService = Depends(get_order_service)):
    return handle_result(await service.get_by_id(id))


@router.put("/{id}")
async def update_order(id: str, body: OrderUpdate, service: OrderService = Depends(get_order_service)):
    return handle_result(await service.update(id, body.model_dump(exclude_unset=True)))


@router.patch("/{id}/cancel")
async def cancel_order(id: str, service: OrderService = Depends(get_order_service)):
    return handle_result(await service.cancel(id))
