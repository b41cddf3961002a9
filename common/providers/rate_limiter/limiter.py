"""Global rate limiter instance for SlowAPI."""

from slowapi import Limiter
from slowapi.util import get_remote_address
from common.core.config import settings

# Multiple limits: both must be satisfied (whichever is hit first applies)
# - 10/second: Prevents bursts from a single client
# - 300/minute: Sustained rate limit (5 req/sec average)
# Point rate_limit_storage_uri at a shared store when running several pods
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["10/second", "300/minute"],
    storage_uri=settings.rate_limit_storage_uri,
)
