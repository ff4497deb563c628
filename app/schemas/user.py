"""
app/schemas/user.py

Purpose: Request bodies for /users
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from app.models.enums import UserRole
from app.schemas.common import EmailStr, RequestModel
from utils.validation_utils import PASSWORD_MIN_LENGTH, is_strong_password


class Address(RequestModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None


class UserCreate(RequestModel):
    email: EmailStr
    password: Optional[str] = Field(default=None, min_length=PASSWORD_MIN_LENGTH)
    name: Optional[str] = None
    phone: Optional[str] = None
    role: List[UserRole] = Field(default_factory=lambda: [UserRole.USER.value])
    profile_image: Optional[str] = Field(default=None, description="Profile image URL")
    date_of_birth: Optional[datetime] = None
    address: Optional[Address] = None

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not is_strong_password(v):
            raise ValueError("Password is not strong enough")
        return v


class UserUpdate(RequestModel):
    """Profile fields a user may change. Roles go through UserRoleUpdate."""

    class Config:
        extra = "forbid"

    name: Optional[str] = None
    phone: Optional[str] = None
    profile_image: Optional[str] = None
    date_of_birth: Optional[datetime] = None
    address: Optional[Address] = None


class UserRoleUpdate(RequestModel):
    role: List[UserRole] = Field(..., min_length=1)
