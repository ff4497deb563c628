"""
app/schemas/seller.py

Purpose: Request bodies for /sellers
"""

from typing import Optional

from pydantic import Field

from app.schemas.common import ObjectIdStr, RequestModel


class SellerCreate(RequestModel):
    user_id: ObjectIdStr
    business_name: str = Field(..., min_length=1)
    license_number: Optional[str] = None
    description: Optional[str] = None
    website: Optional[str] = None


class SellerUpdate(RequestModel):
    business_name: Optional[str] = Field(default=None, min_length=1)
    license_number: Optional[str] = None
    description: Optional[str] = None
    website: Optional[str] = None
