"""
app/core/rate_limit.py

Purpose: Per-IP request throttling for the API

- General limit on everything under API_PREFIX
- Tighter limit on payment endpoints, counted on top of the general one
- Fixed windows held in process memory; each worker counts on its own
- 429 with Retry-After once a window is exhausted
"""

import time
from dataclasses import dataclass
from typing import Dict, List, Tuple

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

API_LIMIT_MESSAGE = "Too many requests from this IP, please try again after 15 minutes."
PAYMENT_LIMIT_MESSAGE = "Too many payment requests, please try again later"


@dataclass
class _Bucket:
    window_start: float
    count: int


@dataclass(frozen=True)
class _Rule:
    name: str
    limit: int
    window_seconds: float
    message: str


class RateLimitMiddleware(BaseHTTPMiddleware):

    _buckets: Dict[Tuple[str, str], _Bucket] = {}

    @classmethod
    def reset(cls):
        cls._buckets.clear()

    @staticmethod
    def _client_ip(request: Request) -> str:
        forwarded = (request.headers.get("x-forwarded-for") or "").strip()
        ip = forwarded.split(",")[0].strip() if forwarded else ""
        if not ip and request.client:
            ip = request.client.host
        return ip or "unknown"

    @staticmethod
    def _rules_for(path: str) -> List[_Rule]:
        prefix = settings.API_PREFIX
        if not path.startswith(prefix):
            return []

        rules = [_Rule(
            "api",
            settings.RATE_LIMIT_REQUESTS,
            settings.RATE_LIMIT_WINDOW_SECONDS,
            API_LIMIT_MESSAGE,
        )]
        if path.startswith(f"{prefix}/payments"):
            rules.append(_Rule(
                "payments",
                settings.PAYMENT_RATE_LIMIT_REQUESTS,
                settings.PAYMENT_RATE_LIMIT_WINDOW_SECONDS,
                PAYMENT_LIMIT_MESSAGE,
            ))
        return rules

    def _hit(self, ip: str, rule: _Rule, now: float) -> int:
        """Counts one request. Returns seconds to wait when over the limit, else 0."""
        key = (rule.name, ip)
        bucket = self._buckets.get(key)
        if not bucket or (now - bucket.window_start) >= rule.window_seconds:
            bucket = _Bucket(window_start=now, count=0)
            self._buckets[key] = bucket

        bucket.count += 1
        if bucket.count <= rule.limit:
            return 0
        return int(max(1.0, rule.window_seconds - (now - bucket.window_start)))

    async def dispatch(self, request: Request, call_next) -> Response:
        if not settings.RATE_LIMIT_ENABLED:
            return await call_next(request)

        rules = self._rules_for(request.url.path)
        if not rules:
            return await call_next(request)

        ip = self._client_ip(request)
        now = time.time()
        for rule in rules:
            retry_after = self._hit(ip, rule, now)
            if retry_after:
                logger.warning(
                    f"🚫 Rate limit '{rule.name}' exceeded for {ip} on {request.url.path}"
                )
                return JSONResponse(
                    status_code=429,
                    content={"message": rule.message},
                    headers={"Retry-After": str(retry_after)},
                )

        return await call_next(request)
