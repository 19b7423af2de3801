"""
Services package for the TFT climb bot.
"""

from .base import BaseService
from .cache import TieredCacheManager, TTLCache
from .rate_limiter import SimpleRateLimiter
from .session import SessionManager

__all__ = ['BaseService', 'TieredCacheManager', 'TTLCache', 'SimpleRateLimiter', 'SessionManager']
