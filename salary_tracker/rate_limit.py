# salary_tracker/rate_limit.py
# Per-client-IP request limits (slowapi). The default applies to every API
# route through SlowAPIMiddleware; auth endpoints carry a tighter limit.
import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from salary_tracker import config

logger = logging.getLogger(__name__)

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[config.RATE_LIMIT_DEFAULT],
    enabled=config.RATE_LIMIT_ENABLED,
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    logger.warning("Rate limit %s exceeded by %s on %s", exc.detail, get_remote_address(request), request.url.path)
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"detail": "Too many requests, please try again later"},
    )
