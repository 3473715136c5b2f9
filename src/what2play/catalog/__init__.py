"""
User catalogs.

Domain models for titles, prices and users. The cache-aside
catalog service lives in ``what2play.catalog.service`` and the
multi-user ranking in ``what2play.catalog.ranking``.
"""

from what2play.catalog.models import (
    Friend,
    FriendsOverview,
    GamesPage,
    OwnedGame,
    Price,
    Title,
    UserIdentity,
)

__all__ = [
    "Friend",
    "FriendsOverview",
    "GamesPage",
    "OwnedGame",
    "Price",
    "Title",
    "UserIdentity",
]
