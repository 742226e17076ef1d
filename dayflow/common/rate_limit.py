"""Rate limiting configuration using slowapi.

Provides a module-level Limiter instance that routers import for
per-endpoint limits (credential endpoints), wired into the app in main.py.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from dayflow.config import settings

limiter = Limiter(key_func=get_remote_address)

# Limit applied to password-checking endpoints (login, signup, change-password).
credential_limit = limiter.limit(settings.LOGIN_RATE_LIMIT)
