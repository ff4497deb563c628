import hashlib

import pytest

from app.models.enums import PaymentStatus
from utils.payhere_utils import (
    create_payment_request,
    format_amount,
    generate_hash,
    map_status_code,
    single_line_address,
    verify_notification_hash,
)

MERCHANT_ID = "1211149"
SECRET = "MzA0OTQ4NTk0ODM5NDg1OTQ4Mzk0ODU5NDgzOTQ4NQ=="


def md5_upper(value):
    return hashlib.md5(value.encode()).hexdigest().upper()


@pytest.mark.parametrize("amount, expected", [
    (1234.5, "1234.50"),
    (1000000, "1000000.00"),
    ("99.999", "100.00"),
    (0.1, "0.10"),
])
def test_format_amount(amount, expected):
    assert format_amount(amount) == expected


def test_generate_hash_matches_gateway_formula():
    expected = md5_upper(f"{MERCHANT_ID}ORDER1" + "1500.00" + "LKR" + md5_upper(SECRET))
    assert generate_hash(MERCHANT_ID, SECRET, "ORDER1", 1500, "lkr") == expected


def test_verify_notification_hash_accepts_valid_signature():
    sig = md5_upper(f"{MERCHANT_ID}ORDER1" + "1500.00" + "LKR" + "2" + md5_upper(SECRET))
    assert verify_notification_hash(
        merchant_id=MERCHANT_ID,
        order_id="ORDER1",
        payhere_amount="1500.00",
        payhere_currency="LKR",
        status_code="2",
        md5sig=sig,
        secret=SECRET,
    ) is True


def test_verify_notification_hash_rejects_tampered_status():
    sig = md5_upper(f"{MERCHANT_ID}ORDER1" + "1500.00" + "LKR" + "-2" + md5_upper(SECRET))
    assert verify_notification_hash(
        merchant_id=MERCHANT_ID,
        order_id="ORDER1",
        payhere_amount="1500.00",
        payhere_currency="LKR",
        status_code="2",
        md5sig=sig,
        secret=SECRET,
    ) is False


def test_verify_notification_hash_without_secret_fails():
    assert verify_notification_hash(MERCHANT_ID, "O", "1.00", "LKR", "2", "ABC", secret="") is False


def test_single_line_address_skips_empty_parts():
    assert single_line_address({"street": "12 Galle Rd", "city": "Colombo", "state": None}) == "12 Galle Rd, Colombo"
    assert single_line_address(None) == ""


def test_create_payment_request_fields():
    request = create_payment_request(
        order_id="ORDER1",
        amount=2500,
        currency="lkr",
        description="purchase",
        customer={
            "first_name": "Jane",
            "last_name": "Perera",
            "email": "jane@example.com",
            "phone": "0771234567",
            "address": "12 Galle Rd, Colombo",
            "city": "Colombo",
        },
        return_url="https://shop/return",
        cancel_url="https://shop/cancel",
        notify_url="https://api/notify",
        merchant_id=MERCHANT_ID,
        secret=SECRET,
    )
    assert request["amount"] == "2500.00"
    assert request["currency"] == "LKR"
    assert request["items"] == "purchase"
    assert request["country"] == "Sri Lanka"
    assert request["merchant_id"] == MERCHANT_ID
    assert request["hash"] == generate_hash(MERCHANT_ID, SECRET, "ORDER1", "2500.00", "LKR")
    assert request["notify_url"] == "https://api/notify"


@pytest.mark.parametrize("code, expected", [
    ("2", PaymentStatus.COMPLETED),
    ("-2", PaymentStatus.FAILED),
    ("-1", PaymentStatus.CANCELLED),
    (2, PaymentStatus.COMPLETED),
    ("0", None),
    ("-3", None),
])
def test_map_status_code(code, expected):
    assert map_status_code(code) == expected
