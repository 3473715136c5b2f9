"""
Process-lifetime memory caches.

No eviction: entries live as long as the process.
"""

from what2play.cache.group import CacheGroup
from what2play.cache.keyed import KeyedCache, ReadWriteLock

__all__ = [
    "CacheGroup",
    "KeyedCache",
    "ReadWriteLock",
]
