"""
Process-wide caching for row mapping metadata.

Record classes are introspected once per class and the result is shared by
every mapper. Uses cachetools TTLCache so redefined classes (tests, reloads)
eventually age out.
"""
import functools
import logging
import threading

import cachetools

logger = logging.getLogger(__name__)


class Cache:
    """Cache manager for the sqldao package.

    Thread-safe singleton that manages all TTL caches.
    """

    _instance = None
    _caches: dict[str, cachetools.TTLCache] = {}
    _lock = threading.RLock()

    @classmethod
    def get_instance(cls) -> 'Cache':
        """Get singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    def get_cache(self, name: str, maxsize: int = 256, ttl: int = 3600) -> cachetools.TTLCache:
        """Get or create a TTL cache with the given name.

        Args:
            name: Name of the cache
            maxsize: Maximum cache size
            ttl: Time-to-live in seconds

        Returns
            TTLCache instance
        """
        if name not in self._caches:
            with self._lock:
                if name not in self._caches:
                    self._caches[name] = cachetools.TTLCache(maxsize=maxsize, ttl=ttl)
        return self._caches[name]

    def clear_all(self) -> None:
        """Clear all managed caches."""
        with self._lock:
            for cache in self._caches.values():
                cache.clear()


def cacheable_type(cache_name: str, ttl: int = 3600, maxsize: int = 256):
    """Decorator caching a function of one class argument.

    The class itself is the key, so two classes with the same name never
    share an entry.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(cls):
            cache = Cache.get_instance().get_cache(cache_name, maxsize=maxsize, ttl=ttl)
            with Cache._lock:
                if cls in cache:
                    return cache[cls]
            logger.debug(f'Cache miss for {func.__name__}({cls.__name__})')
            result = func(cls)
            with Cache._lock:
                cache[cls] = result
            return result
        return wrapper
    return decorator
