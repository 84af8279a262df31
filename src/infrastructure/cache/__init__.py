"""Cache infrastructure (Redis fast tier).

Usage:
    from src.infrastructure.cache import RedisAdapter, RedisSessionCache, CacheKeys
"""

from src.infrastructure.cache.cache_keys import CacheKeys
from src.infrastructure.cache.redis_adapter import RedisAdapter
from src.infrastructure.cache.session_cache import RedisSessionCache

__all__ = ["CacheKeys", "RedisAdapter", "RedisSessionCache"]
