"""
Rate Limiting Service

Request rate limiting with slowapi.

Limits:
=======
- Registration: settings.rate_limit_register per client IP (10/hour)
- Review submission: settings.rate_limit_review per user (5 per 15 minutes),
  keyed by the bearer token's user id and falling back to the client IP.
  It is a shared limit (REVIEW_LIMIT_SCOPE), so reviews of different books
  draw from the same budget.

Storage defaults to in-process memory; point RATE_LIMIT_STORAGE_URI at
redis:// to share counters between API instances.
"""

import logging

from fastapi import Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from bookreview.config import get_settings
from bookreview.services.security import get_token_user_id

logger = logging.getLogger(__name__)
settings = get_settings()

REGISTER_LIMIT_MESSAGE = (
    "Too many accounts created from this IP, please try again after an hour."
)
REVIEW_LIMIT_MESSAGE = (
    "You have submitted too many reviews recently. Please try again later."
)
REVIEW_LIMIT_SCOPE = "review_submission"


def get_client_ip(request: Request) -> str:
    """
    Get client IP address for rate limiting.

    Honors X-Forwarded-For and X-Real-IP from a fronting proxy and falls
    back to the direct connection address.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # X-Forwarded-For can contain multiple IPs; first is the client
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return get_remote_address(request)


def get_user_key(request: Request) -> str:
    """
    Rate-limit key for per-user limits.

    Uses the user id from a valid bearer token; anonymous or invalid
    requests are keyed by IP (they are rejected with 401 anyway).
    """
    authorization = request.headers.get("Authorization", "")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() == "bearer" and token:
        user_id = get_token_user_id(token.strip())
        if user_id is not None:
            return f"user:{user_id}"

    return f"ip:{get_client_ip(request)}"


def create_limiter() -> Limiter:
    """
    Create and configure the rate limiter.

    Returns:
        Configured Limiter instance
    """
    limiter = Limiter(
        key_func=get_client_ip,
        storage_uri=settings.rate_limit_storage_uri,
        strategy="fixed-window",
        enabled=settings.rate_limit_enabled,
    )

    logger.info(
        f"Rate limiter initialized - enabled: {settings.rate_limit_enabled}, "
        f"register: {settings.rate_limit_register}, review: {settings.rate_limit_review}"
    )

    return limiter


limiter = create_limiter()


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Render a rate limit violation as 429 with a JSON message.

    exc.detail holds the per-route error message when one was configured,
    otherwise the limit description (e.g. "10 per 1 hour").
    """
    detail = str(exc.detail)

    logger.warning(f"Rate limit exceeded for {get_client_ip(request)}: {detail}")

    response = JSONResponse(
        status_code=429,
        content={"message": detail},
    )
    response.headers["Retry-After"] = str(60)

    return response
