from __future__ import annotations

from typing import Iterable, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from travel_api.core.config import RATE_LIMIT_TRUSTED_PROXIES
from travel_api.core.rate_limiter import InMemoryRateLimiterService, RateLimiterService


class ClientRateLimitMiddleware(BaseHTTPMiddleware):
    """Per-client request budget.

    The client is the connecting peer address. ``X-Forwarded-For`` is only
    read when that peer is one of ``trusted_proxies``.
    """

    def __init__(
        self,
        app,
        *,
        rate_limiter: RateLimiterService | None = None,
        trusted_proxies: Optional[Iterable[str]] = None,
    ) -> None:
        super().__init__(app)
        self._rate_limiter = rate_limiter or InMemoryRateLimiterService()
        self._trusted_proxies = frozenset(RATE_LIMIT_TRUSTED_PROXIES if trusted_proxies is None else trusted_proxies)

    async def dispatch(self, request: Request, call_next):
        decision = self._rate_limiter.check(client_key=client_key(request, self._trusted_proxies))
        if not decision.allowed:
            return JSONResponse(
                status_code=429,
                content={
                    "success": False,
                    "message": "Too many requests from this IP, please try again later.",
                },
                headers={
                    "Retry-After": str(decision.retry_after_seconds),
                    "X-RateLimit-Limit": str(decision.limit),
                    "X-RateLimit-Remaining": str(decision.remaining),
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(decision.limit)
        response.headers["X-RateLimit-Remaining"] = str(decision.remaining)
        return response


def client_key(request: Request, trusted_proxies: frozenset[str] = frozenset()) -> str:
    peer = request.client.host if request.client is not None else "unknown"
    if peer not in trusted_proxies:
        return peer

    # rightmost hop not added by one of our own proxies
    forwarded = request.headers.get("X-Forwarded-For", "")
    hops = [hop.strip() for hop in forwarded.split(",") if hop.strip()]
    for hop in reversed(hops):
        if hop not in trusted_proxies:
            return hop
    return peer
