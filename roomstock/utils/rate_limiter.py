"""
Rate Limiter Configuration

Guards the public availability endpoint with a request-count-per-window
limit keyed by client address. Uses Redis storage when REDIS_URL is set
(multiple instances), in-memory storage otherwise.
"""

import math
import time
import logging
from typing import Optional

from fastapi import Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from ..config import settings

logger = logging.getLogger(__name__)


def get_real_client_ip(request: Request) -> str:
    """
    Get the client IP behind a reverse proxy.

    Infrastructure-set headers are preferred; X-Forwarded-For is client
    spoofable and only honoured when TRUST_PROXY is enabled.
    """
    # Cloudflare edge header
    cf_ip = request.headers.get("CF-Connecting-IP")
    if cf_ip:
        return cf_ip.strip()

    # nginx / common proxies
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    if settings.trust_proxy:
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            # Take the first IP (original client)
            return forwarded_for.split(",")[0].strip()

    # Fallback to direct connection
    return get_remote_address(request)


def create_limiter() -> Limiter:
    """
    Create a rate limiter with appropriate storage backend.
    Uses Redis if configured, otherwise in-memory.
    """
    if settings.redis_url:
        logger.info("Using Redis rate limiter storage")
        return Limiter(key_func=get_real_client_ip, storage_uri=settings.redis_url)

    # In-memory storage (for development or single instance)
    logger.info("Using in-memory rate limiter storage")
    return Limiter(key_func=get_real_client_ip)


# Global rate limiter instance
limiter = create_limiter()


def availability_rate_limit() -> str:
    """Current limit for the public availability endpoint (read per request)."""
    return settings.availability_rate_limit


def get_retry_after(request: Request, exc: RateLimitExceeded) -> int:
    """
    Seconds until the client may retry.

    Uses the window the failed hit was recorded in; falls back to the
    full window length when the limiter state is not available.
    """
    retry_after: Optional[int] = None

    view_limit = getattr(request.state, "view_rate_limit", None)
    if view_limit is not None:
        limit_item, args = view_limit
        reset_at = limiter.limiter.get_window_stats(limit_item, *args)[0]
        retry_after = math.ceil(reset_at - time.time())

    if retry_after is None:
        retry_after = exc.limit.limit.get_expiry()

    # At least one second
    return max(1, retry_after)
