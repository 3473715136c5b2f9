"""
Domain models for user catalogs.

Plain frozen dataclasses: a value fetched for a cache cycle is
replaced on refetch, never mutated.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Price:
    """Store price of a title, amounts in minor currency units."""

    currency: str = ""
    initial: int = 0
    final: int = 0
    discount_percent: int = 0

    @property
    def free(self) -> bool:
        """A title with no initial price is free to play."""
        return self.initial == 0


@dataclass(frozen=True)
class Title:
    """A game owned by a user."""

    app_id: int
    name: str
    playtime_2weeks: int = 0
    playtime_forever: int = 0
    free: bool = False


@dataclass(frozen=True)
class OwnedGame:
    """A raw owned-games entry before it is joined with its price."""

    app_id: int
    name: str
    playtime_2weeks: int = 0
    playtime_forever: int = 0

    def to_title(self, price: Price | None) -> Title:
        # the store omits prices for titles it doesn't sell
        free = price is None or price.free
        return Title(
            app_id=self.app_id,
            name=self.name,
            playtime_2weeks=self.playtime_2weeks,
            playtime_forever=self.playtime_forever,
            free=free,
        )


@dataclass(frozen=True)
class UserIdentity:
    """Public profile of a Steam user."""

    steam_id: str
    username: str
    avatar_url: str = ""


@dataclass(frozen=True)
class Friend:
    """A friend entry with the viewer's favorite flag."""

    identity: UserIdentity
    favorite: bool = False


@dataclass
class FriendsOverview:
    """A user together with their friends."""

    user: UserIdentity
    friends: list[Friend] = field(default_factory=list)


@dataclass
class GamesPage:
    """One page of multiplayer games shared by a group of users."""

    page: int
    titles: list[Title]
    next_page: int | None = None
