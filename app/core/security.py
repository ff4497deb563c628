"""
app/core/security.py

Purpose: Credential and token helpers

- bcrypt password hashing / verification
- SHA-256 hashing of one-time passwords
- JWT access and refresh token issue / decode
"""

import hashlib
import secrets
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from app.core.config import settings
from app.core.exceptions import AuthenticationError


def hash_password(password: str) -> str:
    """Hashes a plain-text password with a fresh bcrypt salt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=10)).decode("utf-8")


def verify_password(password: str, hashed: Optional[str]) -> bool:
    """Compares a plain-text password to a stored bcrypt hash."""
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def hash_otp(otp: str) -> str:
    """Hex SHA-256 digest of a one-time password."""
    return hashlib.sha256(otp.encode("utf-8")).hexdigest()


def generate_otp(length: int = 6) -> str:
    """Generates a numeric one-time password."""
    return "".join(secrets.choice("0123456789") for _ in range(length))


def _encode(user_id: str, roles: List[str], secret: str, expires_delta: timedelta, token_type: str) -> str:
    now = datetime.utcnow()
    payload = {
        "userId": user_id,
        "role": roles,
        "type": token_type,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, secret, algorithm=settings.JWT_ALGORITHM)


def create_access_token(user_id: str, roles: List[str]) -> str:
    return _encode(
        user_id,
        roles,
        settings.JWT_SECRET,
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        "access",
    )


def create_refresh_token(user_id: str, roles: List[str]) -> str:
    return _encode(
        user_id,
        roles,
        settings.JWT_REFRESH_SECRET,
        timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        "refresh",
    )


def _decode(token: str, secret: str, token_type: str) -> Dict[str, Any]:
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise AuthenticationError("Token expired")
    except JWTError:
        raise AuthenticationError("Invalid token")

    if payload.get("type") != token_type or not payload.get("userId"):
        raise AuthenticationError("Invalid token")
    return payload


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decodes and validates an access token.

    Raises:
        AuthenticationError: If the token is expired, malformed or not an access token
    """
    return _decode(token, settings.JWT_SECRET, "access")


def decode_refresh_token(token: str) -> Dict[str, Any]:
    """
    Decodes and validates a refresh token.

    Raises:
        AuthenticationError: If the token is expired, malformed or not a refresh token
    """
    return _decode(token, settings.JWT_REFRESH_SECRET, "refresh")
