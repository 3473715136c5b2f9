"""
Data contracts for Steam API responses.

These Pydantic models define the expected structure of data
from the Steam Web API and the Steam Store API.
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator

VANITY_MATCH = 1
VANITY_NO_MATCH = 42


class OwnedGameEntry(BaseModel):
    """One entry of IPlayerService/GetOwnedGames."""

    appid: int = Field(..., gt=0, description="Steam application ID")
    name: str = Field(default="", description="Game name")
    playtime_2weeks: int = Field(default=0, ge=0, description="Minutes played in the last two weeks")
    playtime_forever: int = Field(default=0, ge=0, description="Minutes played in total")


class OwnedGamesBody(BaseModel):
    # private profiles answer with an empty body
    game_count: int = Field(default=0)
    games: list[OwnedGameEntry] = Field(default_factory=list)


class OwnedGamesAPIResponse(BaseModel):
    """Wrapper for GetOwnedGames response."""

    response: OwnedGamesBody = Field(default_factory=OwnedGamesBody)


class PriceOverview(BaseModel):
    """Price information for a game."""

    currency: str = Field(default="", description="Currency code (e.g., USD, EUR)")
    initial: int = Field(default=0, ge=0, description="Initial price in cents")
    final: int = Field(default=0, ge=0, description="Final price in cents (after discount)")
    discount_percent: int = Field(default=0, ge=0, le=100, description="Discount percentage")


class Category(BaseModel):
    """Game category."""

    id: int = Field(..., ge=0)
    description: str = Field(default="")


class AppDetailsData(BaseModel):
    """The filtered ``data`` object of a Store appdetails entry."""

    price_overview: PriceOverview | None = Field(default=None)
    categories: list[Category] = Field(default_factory=list)

    @property
    def category_ids(self) -> list[int]:
        return [c.id for c in self.categories]


class AppDetailsEntry(BaseModel):
    """
    Store appdetails entry for one app.

    The API returns {app_id: {success: bool, data: {...}}} where
    ``data`` is an empty array when the filtered fields are missing.
    """

    success: bool = Field(default=False)
    data: AppDetailsData | None = Field(default=None)

    @field_validator("data", mode="before")
    @classmethod
    def empty_array_means_no_data(cls, v: Any) -> Any:
        if isinstance(v, list):
            return None
        return v


class PlayerSummary(BaseModel):
    """One entry of ISteamUser/GetPlayerSummaries."""

    steamid: str
    personaname: str = Field(default="")
    avatarfull: str = Field(default="")


class PlayerSummariesBody(BaseModel):
    players: list[PlayerSummary] = Field(default_factory=list)


class PlayerSummariesAPIResponse(BaseModel):
    """Wrapper for GetPlayerSummaries response."""

    response: PlayerSummariesBody = Field(default_factory=PlayerSummariesBody)


class FriendEntry(BaseModel):
    steamid: str
    relationship: str = Field(default="friend")


class FriendsList(BaseModel):
    friends: list[FriendEntry] = Field(default_factory=list)


class FriendListAPIResponse(BaseModel):
    """Wrapper for GetFriendList response."""

    friendslist: FriendsList = Field(default_factory=FriendsList)


class VanityResolution(BaseModel):
    """
    Response from ResolveVanityURL.

    ``success`` is 1 for a match and 42 when no user has that name.
    """

    success: int
    steamid: str | None = Field(default=None)
    message: str | None = Field(default=None)

    @property
    def is_match(self) -> bool:
        return self.success == VANITY_MATCH

    @property
    def is_no_match(self) -> bool:
        return self.success == VANITY_NO_MATCH


class VanityAPIResponse(BaseModel):
    """Wrapper for ResolveVanityURL response."""

    response: VanityResolution
