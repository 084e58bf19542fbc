"""Rate limiter instance for SlowAPI.

Shared so both main (app.state.limiter) and route modules can use the same
instance without circular imports. Decorated routes must accept a
``request: Request`` parameter.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from taskflow.core.config import get_settings

limiter = Limiter(key_func=get_remote_address)


def _write_limit() -> str:
    """Resolve the write limit from settings at request time (env may change in tests)."""
    return get_settings().rate_limit_writes


limit_writes = limiter.limit(_write_limit)
