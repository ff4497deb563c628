"""
app/schemas/auth.py

Purpose: Request bodies for /auth
"""

from pydantic import Field, field_validator, model_validator

from app.schemas.common import EmailStr, RequestModel
from utils.validation_utils import PASSWORD_MIN_LENGTH, is_strong_password

PASSWORD_RULE = (
    "Password must contain at least one lowercase letter, one uppercase letter, "
    "one number and one special character (@$!%*?&)"
)


class _NewPassword(RequestModel):
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH)
    confirm_password: str

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        if not is_strong_password(v):
            raise ValueError(PASSWORD_RULE)
        return v

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class RegisterRequest(_NewPassword):

    class Config:
        json_schema_extra = {
            "example": {
                "email": "jane@example.com",
                "password": "Secret@123",
                "confirm_password": "Secret@123"
            }
        }


class ResetPasswordRequest(_NewPassword):
    pass


class LoginRequest(RequestModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshRequest(RequestModel):
    refresh_token: str = Field(..., min_length=1)


class EmailRequest(RequestModel):
    """Body for check-password and forget-password."""
    email: EmailStr


class VerifyOtpRequest(RequestModel):
    email: EmailStr
    otp: str = Field(..., pattern=r"^\d{6}$", description="6-digit code sent by email")
