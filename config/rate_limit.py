# config/rate_limit.py
from slowapi import Limiter
from starlette.requests import Request
from config.settings import settings
from repository.namespaces import RATE_LIMIT


def real_ip(request: Request) -> str:
    if settings.TRUST_PROXY:
        fwd = request.headers.get("x-forwarded-for")
        if fwd:
            return fwd.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


# Counters live in Redis so every worker shares the same window.
limiter = Limiter(
    key_func=real_ip,
    storage_uri=settings.REDIS_URL,
    key_prefix=RATE_LIMIT,
)

SEARCH_LIMIT = f"{settings.RATE_LIMIT_TIMES} per {settings.RATE_LIMIT_SECONDS} seconds"
