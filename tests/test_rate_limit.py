import pytest
from fastapi.testclient import TestClient

from app.core.config import settings
from app.core.rate_limit import API_LIMIT_MESSAGE, PAYMENT_LIMIT_MESSAGE, RateLimitMiddleware
from app.main import app


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def tight_limits(monkeypatch):
    monkeypatch.setattr(settings, "RATE_LIMIT_REQUESTS", 3)
    monkeypatch.setattr(settings, "RATE_LIMIT_WINDOW_SECONDS", 900)
    monkeypatch.setattr(settings, "PAYMENT_RATE_LIMIT_REQUESTS", 2)
    monkeypatch.setattr(settings, "PAYMENT_RATE_LIMIT_WINDOW_SECONDS", 60)


def test_api_limit_returns_429_with_retry_after(client, tight_limits):
    for _ in range(3):
        assert client.get("/api/v1/orders/user/abc").status_code == 401

    response = client.get("/api/v1/orders/user/abc")
    assert response.status_code == 429
    assert response.json() == {"message": API_LIMIT_MESSAGE}
    assert 1 <= int(response.headers["Retry-After"]) <= 900


def test_payment_limit_is_tighter(client, tight_limits):
    for _ in range(2):
        assert client.get("/api/v1/payments/order/o1").status_code == 401

    response = client.get("/api/v1/payments/order/o1")
    assert response.status_code == 429
    assert response.json() == {"message": PAYMENT_LIMIT_MESSAGE}
    assert 1 <= int(response.headers["Retry-After"]) <= 60


def test_payment_requests_count_toward_api_limit(client, tight_limits):
    client.get("/api/v1/payments/order/o1")
    client.get("/api/v1/payments/order/o1")
    client.get("/api/v1/orders/user/abc")

    response = client.get("/api/v1/orders/user/abc")
    assert response.status_code == 429
    assert response.json() == {"message": API_LIMIT_MESSAGE}


def test_limits_are_per_client_ip(client, tight_limits):
    for _ in range(3):
        client.get("/api/v1/orders/user/abc", headers={"X-Forwarded-For": "10.0.0.1"})

    blocked = client.get("/api/v1/orders/user/abc", headers={"X-Forwarded-For": "10.0.0.1"})
    other = client.get("/api/v1/orders/user/abc", headers={"X-Forwarded-For": "10.0.0.2, 172.16.0.1"})
    assert blocked.status_code == 429
    assert other.status_code == 401


def test_window_expiry_allows_requests_again(client, tight_limits):
    for _ in range(3):
        client.get("/api/v1/orders/user/abc")
    assert client.get("/api/v1/orders/user/abc").status_code == 429

    for bucket in RateLimitMiddleware._buckets.values():
        bucket.window_start -= 901
    assert client.get("/api/v1/orders/user/abc").status_code == 401


def test_paths_outside_api_prefix_are_not_limited(client, tight_limits):
    for _ in range(5):
        assert client.get("/live").status_code == 200


def test_disabled_limiter_passes_everything(client, tight_limits, monkeypatch):
    monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", False)
    for _ in range(5):
        assert client.get("/api/v1/orders/user/abc").status_code == 401
    assert RateLimitMiddleware._buckets == {}
