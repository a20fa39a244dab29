import logging

from django.conf import settings

logger = logging.getLogger(__name__)


class UserCache:
    """
    Best-effort read-through cache for user records.

    Wraps a Django cache backend. Every failure is logged and swallowed:
    a cache outage degrades to a store lookup, it never fails a request.
    """

    def __init__(self, backend, ttl=None):
        self._backend = backend
        self.ttl = ttl if ttl is not None else settings.USER_CACHE_TTL

    async def get(self, key):
        try:
            return await self._backend.aget(key)
        except Exception as e:
            logger.warning(f"Cache GET failed for {key}: {e}")
            return None

    async def set_with_ttl(self, key, value, ttl=None) -> bool:
        try:
            await self._backend.aset(key, value, timeout=ttl or self.ttl)
            return True
        except Exception as e:
            logger.warning(f"Cache SET failed for {key}: {e}")
            return False

    async def delete(self, key) -> bool:
        try:
            return bool(await self._backend.adelete(key))
        except Exception as e:
            logger.warning(f"Cache DELETE failed for {key}: {e}")
            return False
