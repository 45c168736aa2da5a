"""
Global slowapi rate limiter.

Imported by the routers for per-endpoint limits and mounted onto app.state in
main.py so SlowAPIMiddleware can find it. Storage defaults to in-process
memory; point RATE_LIMIT_STORAGE_URI at Redis when running several workers.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import get_settings

_settings = get_settings()

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=_settings.rate_limit_storage_uri,
    enabled=_settings.rate_limit_enabled,
)

LOGIN_LIMIT = "5/15minutes"
FORGOT_PASSWORD_LIMIT = "3/hour"
VERIFY_OTP_LIMIT = "10/minute"
RESET_PASSWORD_LIMIT = "5/15minutes"
CONTACT_LIMIT = "5/hour"
