"""
app/schemas/review.py

Purpose: Request bodies for /reviews
"""

from typing import Optional

from pydantic import Field

from app.models.enums import ReviewType
from app.schemas.common import ObjectIdStr, RequestModel


class ReviewCreate(RequestModel):
    reviewer_id: ObjectIdStr
    target_type: ReviewType
    target_id: ObjectIdStr
    order_id: Optional[ObjectIdStr] = None
    rating: int = Field(..., ge=1, le=5)
    title: Optional[str] = None
    comment: Optional[str] = None


class ReviewUpdate(RequestModel):
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    title: Optional[str] = None
    comment: Optional[str] = None
