"""
app/schemas/order.py

Purpose: Request bodies for /orders
"""

from typing import Optional

from pydantic import Field

from app.models.enums import OrderStatus, PaymentStatus
from app.schemas.common import ObjectIdStr, RequestModel


class OrderCreate(RequestModel):
    user_id: ObjectIdStr
    seller_id: ObjectIdStr
    listing_id: Optional[ObjectIdStr] = None
    booking_id: Optional[ObjectIdStr] = None
    total_amount: float = Field(..., gt=0)


class OrderUpdate(RequestModel):
    order_status: Optional[OrderStatus] = None
    payment_status: Optional[PaymentStatus] = None
    total_amount: Optional[float] = Field(default=None, gt=0)
