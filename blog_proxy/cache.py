"""
Cache configuration module.

Separating cache instance from main.py prevents circular import issues.
The gateway never talks to Flask-Caching directly: it receives a CacheStore,
so tests can hand it a plain in-memory map instead.
"""

import logging
import uuid
from typing import Any, Optional

from flask_caching import Cache

from blog_proxy.exceptions import CacheUnavailable

logger = logging.getLogger(__name__)

# Initialize cache instance (will be configured in main.py)
cache = Cache()


class CacheStore:
    """Key-value store with per-entry time-to-live."""

    def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    def set(self, key: str, value: Any, ttl: int) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def delete_prefix(self, prefix: str) -> None:
        raise NotImplementedError


class FlaskCacheStore(CacheStore):
    """
    CacheStore backed by a Flask-Caching backend.

    Backends such as memcached cannot enumerate keys, so prefix deletion is
    done with a generation token: every key under a prefix embeds the
    prefix's current generation, and deleting the prefix rotates it. Entries
    written under an old generation are unreachable and age out on their own.
    """

    def __init__(self, backend: Cache = cache):
        self.backend = backend

    def _generation(self, prefix: str) -> str:
        marker = f"{prefix}:__generation__"
        generation = self.backend.get(marker)
        if generation is None:
            generation = uuid.uuid4().hex
            # add() keeps the first writer's token when workers race here
            if not self.backend.add(marker, generation, timeout=0):
                generation = self.backend.get(marker) or generation
        return generation

    def _physical_key(self, key: str) -> str:
        prefix = key.split(':', 1)[0]
        return f"{prefix}:{self._generation(prefix)}:{key}"

    def get(self, key: str) -> Optional[Any]:
        return self.backend.get(self._physical_key(key))

    def set(self, key: str, value: Any, ttl: int) -> None:
        self.backend.set(self._physical_key(key), value, timeout=ttl)

    def delete(self, key: str) -> None:
        self.backend.delete(self._physical_key(key))

    def delete_prefix(self, prefix: str) -> None:
        try:
            rotated = self.backend.set(f"{prefix}:__generation__", uuid.uuid4().hex, timeout=0)
        except Exception as e:
            # backend-specific errors (redis, memcached) surface as one type
            logger.error(f"Cache backend failed rotating prefix '{prefix}': {e}")
            raise CacheUnavailable(f"Cache backend error: {e}") from e

        if rotated is False:
            raise CacheUnavailable(f"Cache backend refused to rotate prefix '{prefix}'")
        logger.info(f"Rotated cache generation for prefix '{prefix}'")
