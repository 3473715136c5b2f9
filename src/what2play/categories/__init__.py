"""
Title categories.

Tiered resolution (memory, store, provider) and the filtered
paging built on top of it.
"""

from what2play.categories.paging import (
    MULTIPLAYER_CATEGORIES,
    PagedFilterSequence,
    is_multiplayer,
)
from what2play.categories.resolver import CategoryResolver

__all__ = [
    "MULTIPLAYER_CATEGORIES",
    "CategoryResolver",
    "PagedFilterSequence",
    "is_multiplayer",
]
