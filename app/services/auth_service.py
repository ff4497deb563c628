"""
app/services/auth_service.py

Purpose: Account authentication and password reset

- Registration and credential login (bcrypt)
- JWT access / refresh token issue
- OTP password reset: no-otp -> otp-pending -> verified -> no-otp
"""

from datetime import datetime
from typing import Any, Dict, Optional

from app.core.config import settings
from app.core.logging import get_logger, LogContext
from app.core.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    generate_otp,
    hash_otp,
    hash_password,
    verify_password,
)
from app.models.enums import UserRole
from app.repositories.user_repository import UserRepository, strip_private
from app.services.email_service import EmailService
from utils.time_utils import calculate_otp_expiry, is_expired
from utils.validation_utils import normalize_email

logger = get_logger(__name__)


class AuthService:
    """Business logic behind /auth."""

    def __init__(self, user_repo: UserRepository, email_service: EmailService):
        self.user_repo = user_repo
        self.email_service = email_service
        self.otp_expires_min = settings.OTP_EXPIRES_MIN
        self.max_otp_attempts = settings.OTP_MAX_ATTEMPTS

    async def register(self, email: str, password: str) -> Dict[str, Any]:
        try:
            email = normalize_email(email)
            existing = await self.user_repo.find_by_email(email)
            if existing:
                return {"success": False, "error": "User already exists"}

            user = await self.user_repo.create({
                "email": email,
                "password": hash_password(password),
                "role": [UserRole.USER.value],
            })
            if not user:
                return {"success": False, "error": "Registration failed"}

            logger.info("New user registered", extra={"user_id": user["id"]})
            return {"success": True, "user": user}
        except Exception as e:
            logger.error(f"Registration failed: {e}", exc_info=True)
            return {"success": False, "error": "Registration failed"}

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        try:
            user = await self.user_repo.find_by_email(normalize_email(email))
            if not user or not verify_password(password, user.get("password")):
                return {"success": False, "error": "Invalid credentials"}
            return {"success": True, "user": strip_private(user)}
        except Exception as e:
            logger.error(f"Login failed: {e}", exc_info=True)
            return {"success": False, "error": "Login failed"}

    def issue_tokens(self, user: Dict[str, Any]) -> Dict[str, Any]:
        """Access and refresh tokens for an authenticated user."""
        roles = user.get("role") or [UserRole.USER.value]
        return {
            "access_token": create_access_token(user["id"], roles),
            "refresh_token": create_refresh_token(user["id"], roles),
            "token_type": "bearer",
            "user_id": user["id"],
            "role": roles,
        }

    async def refresh(self, refresh_token: str) -> Dict[str, Any]:
        """
        Exchanges a refresh token for a new access token.

        Raises:
            AuthenticationError: If the refresh token is invalid or expired
        """
        payload = decode_refresh_token(refresh_token)
        user = await self.user_repo.find_by_id(payload["userId"])
        if not user:
            return {"success": False, "error": "User not found"}

        roles = user.get("role") or [UserRole.USER.value]
        return {
            "success": True,
            "tokens": {
                "access_token": create_access_token(user["id"], roles),
                "token_type": "bearer",
            },
        }

    async def check_password(self, email: str) -> Dict[str, Any]:
        """Succeeds only when the account has a local password."""
        try:
            user = await self.user_repo.find_by_email(normalize_email(email))
            if not user or not user.get("password"):
                return {"success": False, "error": "Password not set"}
            return {"success": True}
        except Exception as e:
            logger.error(f"Password check failed: {e}", exc_info=True)
            return {"success": False, "error": "Password check failed"}

    async def forget_password(self, email: str) -> Dict[str, Any]:
        try:
            email = normalize_email(email)
            user = await self.user_repo.find_by_email(email)
            if not user:
                return {"success": False, "error": "User with this email does not exist"}

            with LogContext(user_id=user["id"]):
                otp = generate_otp(6)
                record = {
                    "otp_hash": hash_otp(otp),
                    "expires_at": calculate_otp_expiry(datetime.utcnow(), self.otp_expires_min),
                    "attempts": 0,
                    "verified": False,
                }
                saved = await self.user_repo.set_reset_otp(user["id"], record)
                if not saved:
                    return {"success": False, "error": "Forget password process failed"}

                sent = await self.email_service.send_otp_email(email, otp)
                if not sent:
                    return {"success": False, "error": "Failed to send OTP email"}

                logger.info("Password reset OTP issued")
                return {"success": True}
        except Exception as e:
            logger.error(f"Forget password process failed: {e}", exc_info=True)
            return {"success": False, "error": "Forget password process failed"}

    async def verify_otp(self, email: str, otp: str) -> Dict[str, Any]:
        try:
            user = await self.user_repo.find_by_email(normalize_email(email))
            record: Optional[Dict[str, Any]] = user.get("reset_otp") if user else None
            if not record:
                return {"success": False, "error": "Invalid request"}

            with LogContext(user_id=user["id"]):
                if is_expired(record.get("expires_at")):
                    await self.user_repo.clear_reset_otp(user["id"])
                    return {"success": False, "error": "OTP expired"}

                if record.get("verified"):
                    return {"success": True}

                attempts = record.get("attempts", 0)
                if attempts >= self.max_otp_attempts:
                    await self.user_repo.clear_reset_otp(user["id"])
                    return {"success": False, "error": "Max OTP attempts reached"}

                if hash_otp(otp) != record.get("otp_hash"):
                    attempts += 1
                    if attempts >= self.max_otp_attempts:
                        await self.user_repo.clear_reset_otp(user["id"])
                    else:
                        await self.user_repo.set_reset_otp(user["id"], {**record, "attempts": attempts})
                    logger.warning(f"Invalid OTP attempt {attempts}/{self.max_otp_attempts}")
                    return {"success": False, "error": "Invalid OTP"}

                await self.user_repo.set_reset_otp(user["id"], {
                    "otp_hash": None,
                    "expires_at": record.get("expires_at"),
                    "attempts": 0,
                    "verified": True,
                })
                logger.info("Password reset OTP verified")
                return {"success": True}
        except Exception as e:
            logger.error(f"Verify OTP process failed: {e}", exc_info=True)
            return {"success": False, "error": "Verify OTP process failed"}

    async def reset_password(self, email: str, new_password: str) -> Dict[str, Any]:
        try:
            user = await self.user_repo.find_by_email(normalize_email(email))
            record = user.get("reset_otp") if user else None
            if not record or not record.get("verified"):
                return {"success": False, "error": "Invalid request"}

            if is_expired(record.get("expires_at")):
                await self.user_repo.clear_reset_otp(user["id"])
                return {"success": False, "error": "OTP expired"}

            updated = await self.user_repo.update_password(user["id"], hash_password(new_password))
            if not updated:
                return {"success": False, "error": "Reset password process failed"}

            logger.info("Password reset completed", extra={"user_id": user["id"]})
            return {"success": True}
        except Exception as e:
            logger.error(f"Reset password process failed: {e}", exc_info=True)
            return {"success": False, "error": "Reset password process failed"}

    async def update_last_login(self, user_id: str, last_login: datetime) -> None:
        try:
            await self.user_repo.update_last_login(user_id, last_login)
        except Exception as e:
            logger.error(f"Failed to update last login: {e}", extra={"user_id": user_id})
