"""
utils/time_utils.py

Purpose: Time and expiry helpers

- OTP expiry calculation and checks
"""

from datetime import datetime, timedelta
from typing import Optional, Union


def calculate_otp_expiry(issued_at: datetime, validity_minutes: int = 10) -> datetime:
    """
    Calculates OTP expiry timestamp.
    """
    return issued_at + timedelta(minutes=validity_minutes)


def is_expired(expires_at: Optional[Union[datetime, str]], now: Optional[datetime] = None) -> bool:
    """
    Checks whether an expiry timestamp has passed.
    A missing expiry counts as expired. ISO strings are accepted.
    """
    if not expires_at:
        return True
    if isinstance(expires_at, str):
        expires_at = datetime.fromisoformat(expires_at)
    return (now or datetime.utcnow()) > expires_at
