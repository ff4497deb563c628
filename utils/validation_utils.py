"""
utils/validation_utils.py

Purpose: Input validation

- Password strength rule
- ObjectId format checks for reference fields
- Email normalization
"""

import re
from typing import Optional

from bson import ObjectId

# At least one lowercase, one uppercase, one digit and one of @$!%*?&
PASSWORD_PATTERN = r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]+$"
PASSWORD_MIN_LENGTH = 6

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


def is_strong_password(password: Optional[str]) -> bool:
    """
    Checks a password against the strength rule.

    Args:
        password: Plain-text password

    Returns:
        True if long enough and matches PASSWORD_PATTERN
    """
    if not password or len(password) < PASSWORD_MIN_LENGTH:
        return False
    return re.match(PASSWORD_PATTERN, password) is not None


def is_valid_object_id(value: Optional[str]) -> bool:
    if not value:
        return False
    return ObjectId.is_valid(str(value))


def normalize_email(email: str) -> str:
    """Trims and lowercases an email address."""
    return email.strip().lower()


def is_valid_email(email: Optional[str]) -> bool:
    if not email:
        return False
    return re.match(EMAIL_PATTERN, email.strip()) is not None
