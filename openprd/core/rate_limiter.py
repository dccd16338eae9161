"""Request rate limiting shared by the API routers."""
from slowapi import Limiter
from slowapi.util import get_remote_address

from openprd.config import get_settings

GENERATE_LIMIT = "10/minute"
CONNECTIVITY_LIMIT = "20/minute"
KEYS_LIMIT = "30/minute"

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["300/minute"],
    enabled=get_settings().rate_limit_enabled,
)
