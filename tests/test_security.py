from datetime import datetime, timedelta

import pytest
from jose import jwt

from app.core.config import settings
from app.core.exceptions import AuthenticationError
from app.core.security import (
    create_access_token,
    create_refresh_token,
    decode_access_token,
    decode_refresh_token,
    generate_otp,
    hash_otp,
    hash_password,
    verify_password,
)


def test_password_hash_round_trip():
    hashed = hash_password("Secret@123")
    assert hashed != "Secret@123"
    assert verify_password("Secret@123", hashed)
    assert not verify_password("secret@123", hashed)


def test_verify_password_handles_missing_or_foreign_hash():
    assert verify_password("Secret@123", None) is False
    assert verify_password("Secret@123", "plain-text") is False
    assert verify_password("", hash_password("x")) is False


def test_generate_otp_is_six_digits():
    for _ in range(20):
        otp = generate_otp()
        assert len(otp) == 6 and otp.isdigit()


def test_hash_otp_is_deterministic_sha256():
    assert hash_otp("123456") == hash_otp("123456")
    assert hash_otp("123456") != hash_otp("654321")
    assert len(hash_otp("123456")) == 64


def test_access_token_payload():
    token = create_access_token("u1", ["user", "admin"])
    payload = decode_access_token(token)
    assert payload["userId"] == "u1"
    assert payload["role"] == ["user", "admin"]
    assert payload["type"] == "access"


def test_refresh_token_is_not_an_access_token():
    refresh = create_refresh_token("u1", ["user"])
    assert decode_refresh_token(refresh)["userId"] == "u1"
    with pytest.raises(AuthenticationError):
        decode_access_token(refresh)


def test_access_token_is_not_a_refresh_token():
    with pytest.raises(AuthenticationError):
        decode_refresh_token(create_access_token("u1", ["user"]))


def test_expired_token_is_rejected():
    past = datetime.utcnow() - timedelta(hours=2)
    token = jwt.encode(
        {"userId": "u1", "role": ["user"], "type": "access", "iat": past, "exp": past + timedelta(minutes=1)},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )
    with pytest.raises(AuthenticationError) as exc:
        decode_access_token(token)
    assert exc.value.message == "Token expired"


def test_token_signed_with_other_secret_is_rejected():
    token = jwt.encode(
        {"userId": "u1", "role": ["user"], "type": "access"},
        "some-other-secret",
        algorithm=settings.JWT_ALGORITHM,
    )
    with pytest.raises(AuthenticationError):
        decode_access_token(token)
