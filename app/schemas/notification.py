"""
app/schemas/notification.py

Purpose: Request bodies for /notifications
"""

from typing import Optional

from pydantic import Field

from app.models.enums import NotificationType
from app.schemas.common import ObjectIdStr, RequestModel


class NotificationCreate(RequestModel):
    user_id: ObjectIdStr
    type: NotificationType
    title: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)


class NotificationUpdate(RequestModel):
    title: Optional[str] = Field(default=None, min_length=1)
    message: Optional[str] = Field(default=None, min_length=1)
    is_read: Optional[bool] = None
