"""
app/schemas/payment.py

Purpose: Request bodies for /payments

- PaymentNotification mirrors the form fields PayHere posts to notify_url
"""

from typing import Optional

from pydantic import Field

from app.models.enums import PaymentMethod, PaymentStatus, PaymentType
from app.schemas.common import ObjectIdStr, RequestModel


class PaymentCreate(RequestModel):
    order_id: ObjectIdStr
    payment_type: PaymentType
    amount: float = Field(..., gt=0)
    tax_amount: Optional[float] = Field(default=None, ge=0)
    payment_method: Optional[PaymentMethod] = None
    return_url: str = Field(..., min_length=1)
    cancel_url: str = Field(..., min_length=1)

    class Config:
        json_schema_extra = {
            "example": {
                "order_id": "665f1c2ab1e4c2a1d8f0a111",
                "payment_type": "purchase",
                "amount": 1500000,
                "return_url": "https://evshop.example/payments/return",
                "cancel_url": "https://evshop.example/payments/cancel"
            }
        }


class PaymentUpdate(RequestModel):
    status: Optional[PaymentStatus] = None
    payment_method: Optional[PaymentMethod] = None
    amount: Optional[float] = Field(default=None, gt=0)
    tax_amount: Optional[float] = Field(default=None, ge=0)


class PaymentNotification(RequestModel):
    merchant_id: str
    order_id: str
    payment_id: Optional[str] = None
    payhere_amount: str
    payhere_currency: str
    status_code: str
    md5sig: str
    method: Optional[str] = None
    status_message: Optional[str] = None
