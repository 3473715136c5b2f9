"""
Cache-aside access to user catalogs.

Every lookup checks the process memory cache first and only asks
the provider for what is missing. Fetched values are written back
to the cache before they are returned and never invalidated.
"""

from collections.abc import Sequence

from what2play.cache.group import CacheGroup
from what2play.catalog.models import Price, Title, UserIdentity
from what2play.errors import ProviderError
from what2play.logger import get_logger
from what2play.provider.base import BaseCatalogProvider


class CatalogService:
    """
    Owned games, prices, friends and profiles for Steam users.

    Example:
        >>> service = CatalogService(provider, CacheGroup())
        >>> titles = await service.owned_titles("76561197960287930")
    """

    def __init__(
        self,
        provider: BaseCatalogProvider,
        caches: CacheGroup,
        *,
        price_batch_size: int = 100,
    ) -> None:
        self._provider = provider
        self._caches = caches
        self._price_batch_size = price_batch_size
        self._logger = get_logger(__name__, component="catalog")

    async def owned_titles(self, steam_id: str) -> dict[int, Title]:
        """
        Every game a user owns, keyed by app ID.

        The free flag of each title comes from its store price.

        Raises:
            ProviderError: If the owned games or prices can't be fetched;
                ``steam_id`` names the user
        """
        titles, found = self._caches.owned_titles.get(steam_id)
        if found:
            self._logger.debug("Owned games cache hit", steam_id=steam_id)
            return titles

        try:
            owned = await self._provider.list_owned_titles(steam_id)
            prices = await self.prices([game.app_id for game in owned])
        except ProviderError as e:
            # price lookups don't know whose catalog they serve
            if e.steam_id is None:
                e.steam_id = steam_id
            self._logger.error("Owned games fetch failed", steam_id=steam_id, error=str(e))
            raise

        titles = {game.app_id: game.to_title(prices.get(game.app_id)) for game in owned}

        self._caches.owned_titles.set(steam_id, titles)
        return titles

    async def prices(self, app_ids: Sequence[int]) -> dict[int, Price]:
        """
        Store prices by app ID.

        Titles the store reports as unavailable are absent from the result.
        """
        prices, missing = self._caches.prices.get_many(app_ids)

        if not missing:
            self._logger.debug("Prices full cache hit", count=len(prices))
            return prices
        if prices:
            self._logger.debug("Prices partial cache hit", count=len(prices))

        for start in range(0, len(missing), self._price_batch_size):
            chunk = missing[start : start + self._price_batch_size]
            fetched = await self._provider.list_prices(chunk)
            self._caches.prices.set_many(fetched)
            prices.update(fetched)

        self._logger.debug("Fetched prices from provider", count=len(missing))
        return prices

    async def friends(self, steam_id: str) -> list[str]:
        """Steam IDs of a user's friends."""
        friends, found = self._caches.friends.get(steam_id)
        if found:
            self._logger.debug("Friends cache hit", steam_id=steam_id)
            return friends

        friends = await self._provider.list_friends(steam_id)
        self._caches.friends.set(steam_id, friends)
        return friends

    async def user_summaries(self, steam_ids: Sequence[str]) -> list[UserIdentity]:
        """
        Public profiles, in request order.

        IDs the provider doesn't know are left out.
        """
        cached, missing = self._caches.users.get_many(steam_ids)

        if missing:
            if cached:
                self._logger.debug("User summaries partial cache hit", count=len(cached))
            for identity in await self._provider.list_user_summaries(missing):
                self._caches.users.set(identity.steam_id, identity)
                cached[identity.steam_id] = identity
        else:
            self._logger.debug("User summaries full cache hit", count=len(cached))

        return [cached[steam_id] for steam_id in steam_ids if steam_id in cached]

    async def resolve_vanity(self, name: str) -> str | None:
        """Steam ID behind a vanity name, or None when nobody uses it."""
        steam_id, found = self._caches.vanity_names.get(name)
        if found:
            return steam_id

        steam_id = await self._provider.resolve_identity(name)
        # only matches are cached, a free name may be claimed later
        if steam_id is not None:
            self._caches.vanity_names.set(name, steam_id)
        return steam_id
