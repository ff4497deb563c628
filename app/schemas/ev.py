"""
app/schemas/ev.py

Purpose: Request bodies for /ev

- Brands, categories, models, vehicle listings
- Image fields are URL strings; uploads are not handled here
"""

from typing import Any, Dict, List, Optional

from pydantic import Field

from app.models.enums import ListingStatus, ListingType, VehicleCondition
from app.schemas.common import ObjectIdStr, RequestModel


class BrandCreate(RequestModel):
    brand_name: str = Field(..., min_length=1)
    brand_logo: Optional[str] = Field(default=None, description="Logo URL")
    description: Optional[str] = None


class BrandUpdate(RequestModel):
    brand_name: Optional[str] = Field(default=None, min_length=1)
    brand_logo: Optional[str] = None
    description: Optional[str] = None


class CategoryCreate(RequestModel):
    category_name: str = Field(..., min_length=1)
    description: Optional[str] = None


class CategoryUpdate(RequestModel):
    category_name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None


class EvModelCreate(RequestModel):
    brand_id: ObjectIdStr
    category_id: ObjectIdStr
    model_name: str = Field(..., min_length=1)
    year: int = Field(..., ge=1900, le=2100)
    battery_capacity: Optional[float] = Field(default=None, ge=0, description="kWh")
    range_km: Optional[float] = Field(default=None, ge=0)
    charging_time_fast: Optional[float] = Field(default=None, ge=0, description="Hours on a fast charger")
    charging_time_slow: Optional[float] = Field(default=None, ge=0, description="Hours on a home charger")
    seating_capacity: Optional[int] = Field(default=None, ge=1)
    price_range: Optional[str] = None
    specifications: Dict[str, Any] = Field(default_factory=dict)
    features: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)


class EvModelUpdate(RequestModel):
    brand_id: Optional[ObjectIdStr] = None
    category_id: Optional[ObjectIdStr] = None
    model_name: Optional[str] = Field(default=None, min_length=1)
    year: Optional[int] = Field(default=None, ge=1900, le=2100)
    battery_capacity: Optional[float] = Field(default=None, ge=0)
    range_km: Optional[float] = Field(default=None, ge=0)
    charging_time_fast: Optional[float] = Field(default=None, ge=0)
    charging_time_slow: Optional[float] = Field(default=None, ge=0)
    seating_capacity: Optional[int] = Field(default=None, ge=1)
    price_range: Optional[str] = None
    specifications: Optional[Dict[str, Any]] = None
    features: Optional[List[str]] = None
    images: Optional[List[str]] = None


class ListingCreate(RequestModel):
    seller_id: ObjectIdStr
    model_id: ObjectIdStr
    listing_type: ListingType
    condition: VehicleCondition
    price: float = Field(..., ge=0)
    battery_health: Optional[float] = Field(default=None, ge=0, le=100)
    color: Optional[str] = None
    registration_year: Optional[int] = None
    images: List[str] = Field(default_factory=list)
    status: ListingStatus = ListingStatus.ACTIVE.value
    number_of_ev: int = Field(default=1, ge=1)


class ListingUpdate(RequestModel):
    listing_type: Optional[ListingType] = None
    condition: Optional[VehicleCondition] = None
    price: Optional[float] = Field(default=None, ge=0)
    battery_health: Optional[float] = Field(default=None, ge=0, le=100)
    color: Optional[str] = None
    registration_year: Optional[int] = None
    images: Optional[List[str]] = None
    status: Optional[ListingStatus] = None
    number_of_ev: Optional[int] = Field(default=None, ge=1)
