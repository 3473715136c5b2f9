"""Independent caches shared by one running process."""

from dataclasses import dataclass, field

from what2play.cache.keyed import KeyedCache
from what2play.catalog.models import Price, Title, UserIdentity


@dataclass
class CacheGroup:
    """
    Every memory cache the pipeline uses.

    Create one per process and pass it to the services that need it.
    No referential integrity is kept across caches.
    """

    owned_titles: KeyedCache[str, dict[int, Title]] = field(
        default_factory=lambda: KeyedCache("owned_titles")
    )
    prices: KeyedCache[int, Price] = field(default_factory=lambda: KeyedCache("prices"))
    users: KeyedCache[str, UserIdentity] = field(default_factory=lambda: KeyedCache("users"))
    friends: KeyedCache[str, list[str]] = field(default_factory=lambda: KeyedCache("friends"))
    vanity_names: KeyedCache[str, str] = field(
        default_factory=lambda: KeyedCache("vanity_names")
    )
    ranked_catalogs: KeyedCache[str, list[Title]] = field(
        default_factory=lambda: KeyedCache("ranked_catalogs")
    )
    categories: KeyedCache[int, list[int]] = field(
        default_factory=lambda: KeyedCache("categories")
    )
