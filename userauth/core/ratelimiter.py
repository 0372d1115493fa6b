"""Rate limiting with slowapi.

Every route gets ``RATE_LIMIT_DEFAULT`` per client IP through
`SlowAPIMiddleware`; the credential and email sending routes are decorated
with the stricter ``RATE_LIMIT_AUTH``. Counters live in Redis
(``RATE_LIMIT_STORAGE_URL``) except when limiting is disabled or in tests.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from userauth.core.config.settings import Settings, settings


def get_limiter(config: Settings = settings) -> Limiter:
    """Factory function for the rate limiter.

    Returns:
        Limiter: A configured slowapi.Limiter instance.
    """
    enabled = config.RATE_LIMIT_ENABLED and not config.is_test
    return Limiter(
        key_func=get_remote_address,
        enabled=enabled,
        default_limits=[config.RATE_LIMIT_DEFAULT],
        storage_uri=config.RATE_LIMIT_STORAGE_URL if enabled else "memory://",
    )


limiter = get_limiter()
