"""
utils/payhere_utils.py

Purpose: PayHere payment gateway helpers

- Checkout hash generation
- Notification (notify_url callback) signature verification
- Checkout request assembly
- Gateway status code mapping
"""

import hashlib
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional

from app.core.config import settings
from app.models.enums import PaymentStatus

# PayHere notify status_code -> local payment status
STATUS_CODE_MAP = {
    "2": PaymentStatus.COMPLETED,
    "-2": PaymentStatus.FAILED,
    "-1": PaymentStatus.CANCELLED,
}


def _md5_upper(value: str) -> str:
    return hashlib.md5(value.encode("utf-8")).hexdigest().upper()


def format_amount(amount: Any) -> str:
    """
    Formats an amount with two decimals and no thousands separators.

    Example: 1234.5 -> "1234.50"
    """
    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{value:.2f}"


def generate_hash(
    merchant_id: str,
    secret: str,
    order_id: str,
    amount: Any,
    currency: str,
) -> str:
    """
    Checkout hash:
    UPPER(MD5(merchant_id + order_id + amount + currency + UPPER(MD5(secret))))
    """
    hashed_secret = _md5_upper(secret)
    return _md5_upper(
        f"{merchant_id}{order_id}{format_amount(amount)}{currency.upper()}{hashed_secret}"
    )


def verify_notification_hash(
    merchant_id: str,
    order_id: str,
    payhere_amount: str,
    payhere_currency: str,
    status_code: str,
    md5sig: str,
    secret: Optional[str] = None,
) -> bool:
    """
    Verifies the md5sig PayHere sends to notify_url.

    The amount and currency are hashed exactly as received.
    """
    secret = secret if secret is not None else settings.PAYHERE_SECRET
    if not secret or not md5sig:
        return False

    hashed_secret = _md5_upper(secret)
    expected = _md5_upper(
        f"{merchant_id}{order_id}{payhere_amount}{payhere_currency}{status_code}{hashed_secret}"
    )
    return expected == md5sig.upper()


def single_line_address(address: Optional[Dict[str, Any]]) -> str:
    """Joins street, city and state, skipping empty parts."""
    if not address:
        return ""
    parts = [address.get("street"), address.get("city"), address.get("state")]
    return ", ".join(p for p in parts if p)


def create_payment_request(
    order_id: str,
    amount: Any,
    currency: str,
    description: str,
    customer: Dict[str, Any],
    return_url: str,
    cancel_url: str,
    notify_url: str,
    merchant_id: Optional[str] = None,
    secret: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Builds the checkout form fields for the PayHere gateway.

    Args:
        customer: first_name, last_name, email, phone, address, city, country
    """
    merchant_id = merchant_id if merchant_id is not None else settings.PAYHERE_MERCHANT_ID
    secret = secret if secret is not None else settings.PAYHERE_SECRET
    formatted_amount = format_amount(amount)

    return {
        "merchant_id": merchant_id,
        "return_url": return_url,
        "cancel_url": cancel_url,
        "notify_url": notify_url,
        "order_id": order_id,
        "items": description,
        "amount": formatted_amount,
        "currency": currency.upper(),
        "hash": generate_hash(merchant_id or "", secret or "", order_id, formatted_amount, currency),
        "first_name": customer.get("first_name"),
        "last_name": customer.get("last_name"),
        "email": customer.get("email"),
        "phone": customer.get("phone"),
        "address": customer.get("address"),
        "city": customer.get("city"),
        "country": customer.get("country") or "Sri Lanka",
    }


def map_status_code(status_code: Any) -> Optional[PaymentStatus]:
    """Maps a PayHere status_code to a payment status, None when unknown."""
    return STATUS_CODE_MAP.get(str(status_code))
