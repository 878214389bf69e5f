import logging
from fastapi import Depends, HTTPException, Request, status

from tinylink.core.config import settings
from tinylink.core.errors import CacheUnavailableError
from tinylink.db.Connection import database

logger = logging.getLogger(__name__)
RATE_LIMIT_KEY_PREFIX = "rate_limit:encode:"


def get_client_ip(request: Request) -> str:
    xff = request.headers.get("x-forwarded-for")
    if xff:
        return xff.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def check_rate_limit(cache, key: str, limit: int, window: int):
    """Count one request against ``key``.

    Returns True when allowed, False when over the limit and None when the
    cache is unreachable (fail open).
    """
    try:
        current = cache.increment(key, expires_in=window)
    except CacheUnavailableError:
        logger.warning("Redis connection failed. Rate limiting skipped (fail open).")
        return None
    return current <= limit


def limit_encode_requests(request: Request, cache=Depends(database.get_cache)):
    limit, window = settings.ENCODE_RATE_LIMIT, settings.ENCODE_RATE_WINDOW
    key = f"{RATE_LIMIT_KEY_PREFIX}{get_client_ip(request)}"

    if check_rate_limit(cache, key, limit, window) is False:
        logger.warning(f"Rate limit hit on /encode for {key}")
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            headers={"Retry-After": str(window)},
            detail=f"Too many requests. Limit is {limit} per {window} seconds.",
        )
