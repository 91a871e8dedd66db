"""Shared slowapi limiter; the login route applies settings.LOGIN_RATE_LIMIT per client address."""
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)
