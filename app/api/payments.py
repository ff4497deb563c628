"""
app/api/payments.py

Purpose: Payment endpoints

- Checkout request creation for the PayHere gateway
- /payments/notify: PayHere server-to-server callback (form data, no auth)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Form, Query

from app.core.container import get_payment_service
from app.core.dependencies import get_current_user, require_roles
from app.core.errors import handle_result
from app.core.logging import get_logger
from app.models.enums import PaymentMethod, PaymentStatus, PaymentType, UserRole
from app.schemas.payment import PaymentCreate, PaymentNotification, PaymentUpdate
from app.services.payment_service import PaymentService

logger = get_logger(__name__)
router = APIRouter(prefix="/payments", tags=["Payments"])

admin_only = require_roles(UserRole.ADMIN)


@router.post("", status_code=201, dependencies=[Depends(get_current_user)])
async def create_payment(body: PaymentCreate, service: PaymentService = Depends(get_payment_service)):
    result = await service.create(body.model_dump(exclude_none=True))
    return handle_result(result, success_status=201)


@router.post("/notify")
async def payhere_notify(
    merchant_id: str = Form(...),
    order_id: str = Form(...),
    payhere_amount: str = Form(...),
    payhere_currency: str = Form(...),
    status_code: str = Form(...),
    md5sig: str = Form(...),
    payment_id: Optional[str] = Form(None),
    method: Optional[str] = Form(None),
    status_message: Optional[str] = Form(None),
    service: PaymentService = Depends(get_payment_service),
):
    """
    PayHere notify_url callback.

    PayHere posts application/x-www-form-urlencoded fields signed with md5sig.
    """
    logger.info(f"💳 PayHere notification received, status_code={status_code}", extra={"order_id": order_id})

    notification = PaymentNotification(
        merchant_id=merchant_id,
        order_id=order_id,
        payment_id=payment_id,
        payhere_amount=payhere_amount,
        payhere_currency=payhere_currency,
        status_code=status_code,
        md5sig=md5sig,
        method=method,
        status_message=status_message,
    )
    return handle_result(await service.validate(notification.model_dump()))


@router.get("", dependencies=[Depends(admin_only)])
async def list_payments(
    status: Optional[PaymentStatus] = Query(None),
    payment_type: Optional[PaymentType] = Query(None),
    payment_method: Optional[PaymentMethod] = Query(None),
    order_id: Optional[str] = Query(None),
    service: PaymentService = Depends(get_payment_service),
):
    query = {
        "status": status.value if status else None,
        "payment_type": payment_type.value if payment_type else None,
        "payment_method": payment_method.value if payment_method else None,
        "order_id": order_id,
    }
    return handle_result(await service.get_all({k: v for k, v in query.items() if v is not None}))


@router.get("/order/{order_id}", dependencies=[Depends(get_current_user)])
async def get_payment_by_order(order_id: str, service: PaymentService = Depends(get_payment_service)):
    return handle_result(await service.get_by_order_id(order_id))


@router.get("/{id}/status", dependencies=[Depends(get_current_user)])
async def check_payment_status(id: str, service: PaymentService = Depends(get_payment_service)):
    return handle_result(await service.check_status(id))


@router.get("/{id}", dependencies=[Depends(get_current_user)])
async def get_payment(id: str, service: PaymentService = Depends(get_payment_service)):
    return handle_result(await service.get_by_id(id))


@router.put("/{id}", dependencies=[Depends(admin_only)])
async def update_payment(id: str, body: PaymentUpdate, service: PaymentService = Depends(get_payment_service)):
    return handle_result(await service.update(id, body.model_dump(exclude_unset=True)))


@router.delete("/{id}", dependencies=[Depends(admin_only)])
async def delete_payment(id: str, service: PaymentService = Depends(get_payment_service)):
    return handle_result(await service.delete(id))
