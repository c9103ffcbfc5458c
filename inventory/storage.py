"""
Key-value storage backends for the product list.

The store only needs two calls: ``load(key)`` returning text or ``None`` and
``save(key, text)``. ``CacheStorage`` delegates to a Django cache alias, which
is Redis when ``REDIS_URL`` is configured and a file-based cache otherwise.
"""
import logging
from typing import Dict, Optional

from django.conf import settings
from django.core.cache import caches

logger = logging.getLogger(__name__)


class MemoryStorage:
    """Dict-backed storage for tests and one-off scripts."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.values: Dict[str, str] = dict(initial or {})

    def load(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def save(self, key: str, text: str) -> None:
        self.values[key] = text


class CacheStorage:
    """
    Storage on top of the Django cache framework.

    Entries are written without expiry so the cache behaves as durable
    key-value storage.
    """

    def __init__(self, alias: Optional[str] = None):
        self.alias = alias or getattr(settings, 'INVENTORY_CACHE_ALIAS', 'default')

    @property
    def cache(self):
        return caches[self.alias]

    def load(self, key: str) -> Optional[str]:
        return self.cache.get(key)

    def save(self, key: str, text: str) -> None:
        self.cache.set(key, text, timeout=None)
        logger.debug(f"Saved {len(text)} characters under '{key}' in cache '{self.alias}'")
