"""Rate limiting configuration using slowapi."""

from slowapi import Limiter
from slowapi.util import get_remote_address

# Auth and password endpoints are all reached before a session exists, so
# limits are keyed by client IP.
limiter = Limiter(key_func=get_remote_address)

REGISTER_LIMIT = "5/minute"
LOGIN_LIMIT = "10/minute"
REFRESH_LIMIT = "30/minute"
FORGOT_PASSWORD_LIMIT = "5/minute"
RESET_PASSWORD_LIMIT = "10/minute"
