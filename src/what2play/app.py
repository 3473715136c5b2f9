"""
Application wiring.

Builds one process worth of services from settings: a single cache
group, provider and category store shared by every service.
"""

from dataclasses import dataclass
from typing import Any

from what2play.cache.group import CacheGroup
from what2play.catalog.ranking import CommonCatalogRanker
from what2play.catalog.service import CatalogService
from what2play.categories.resolver import CategoryResolver
from what2play.config import Settings, get_settings
from what2play.games import GamesService
from what2play.logger import get_logger
from what2play.provider.base import BaseCatalogProvider
from what2play.provider.steam import SteamCatalogProvider
from what2play.storage.category_store import CategoryStore


@dataclass
class Application:
    """Every long-lived object of a running process."""

    settings: Settings
    caches: CacheGroup
    provider: BaseCatalogProvider
    store: CategoryStore
    catalog: CatalogService
    ranker: CommonCatalogRanker
    resolver: CategoryResolver
    games: GamesService

    @classmethod
    async def create(
        cls,
        settings: Settings | None = None,
        *,
        provider: BaseCatalogProvider | None = None,
        store: CategoryStore | None = None,
    ) -> "Application":
        """
        Build the services and make sure the store schema exists.

        Args:
            settings: Configuration (loaded from the environment if None)
            provider: Provider to use instead of the Steam one
            store: Store to use instead of one built from settings
        """
        settings = settings or get_settings()
        logger = get_logger(__name__, component="app")

        caches = CacheGroup()
        provider = provider or SteamCatalogProvider(
            config=settings.steam,
            retry_config=settings.retry,
        )
        store = store or CategoryStore.from_config(settings.database)
        await store.create_schema()

        catalog = CatalogService(
            provider,
            caches,
            price_batch_size=settings.fetch.price_batch_size,
        )
        ranker = CommonCatalogRanker(catalog, caches)
        resolver = CategoryResolver(
            provider,
            store,
            caches,
            concurrency=settings.fetch.category_concurrency,
        )
        games = GamesService(catalog, ranker, resolver, page_size=settings.fetch.page_size)

        logger.info(
            "Application ready",
            environment=settings.environment,
            provider=provider.source_name,
        )
        return cls(
            settings=settings,
            caches=caches,
            provider=provider,
            store=store,
            catalog=catalog,
            ranker=ranker,
            resolver=resolver,
            games=games,
        )

    async def aclose(self) -> None:
        await self.provider.aclose()
        await self.store.close()

    async def __aenter__(self) -> "Application":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()
