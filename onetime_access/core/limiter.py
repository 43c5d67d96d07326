"""Rate limiter instance for SlowAPI.

Shared so both main (app.state.limiter) and route modules can use the same
instance without circular imports. Limit strings come from settings so
they can be tuned per deployment.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from onetime_access.core.config import get_settings

limiter = Limiter(key_func=get_remote_address)


def _login_limit() -> str:
    return get_settings().login_rate_limit


def _validate_limit() -> str:
    return get_settings().validate_rate_limit


def _admin_write_limit() -> str:
    return get_settings().admin_write_rate_limit


limit_login = limiter.limit(_login_limit)
limit_validate = limiter.limit(_validate_limit)
limit_admin_writes = limiter.limit(_admin_write_limit)
