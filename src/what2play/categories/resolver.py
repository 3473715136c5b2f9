"""
Tiered category resolution.

Categories are looked up in three tiers, each one only for the
titles the previous tier couldn't answer:

1. process memory cache
2. persistent category store
3. remote provider

Remote fetches start with a single lead request. The Store API
quota is undocumented and it just starts failing once exhausted;
the lead request finds that out before dozens of parallel requests are
sent. When it succeeds the remaining titles are fetched
concurrently, and whatever was learned is saved to the store in
one batch even if one of the concurrent requests failed.
"""

import asyncio
from collections.abc import Sequence

from what2play.cache.group import CacheGroup
from what2play.errors import (
    CategoryFetchError,
    CategoryPersistenceError,
    CategoryResolutionError,
    ProviderError,
    ProviderExhaustedError,
    StoreError,
)
from what2play.logger import get_logger
from what2play.provider.base import BaseCatalogProvider
from what2play.storage.category_store import CategoryStore

DEFAULT_CONCURRENCY = 10


class CategoryResolver:
    """
    Resolves category codes for titles.

    Example:
        >>> resolver = CategoryResolver(provider, store, caches)
        >>> await resolver.resolve([570, 730])
        {570: [1, 49], 730: [1, 36]}
    """

    def __init__(
        self,
        provider: BaseCatalogProvider,
        store: CategoryStore,
        caches: CacheGroup,
        *,
        concurrency: int = DEFAULT_CONCURRENCY,
    ) -> None:
        if concurrency < 1:
            raise ValueError(f"concurrency must be positive: {concurrency}")
        self._provider = provider
        self._store = store
        self._cache = caches.categories
        self._concurrency = concurrency
        self._logger = get_logger(__name__, component="category_resolver")

    async def resolve(self, app_ids: Sequence[int]) -> dict[int, list[int]]:
        """
        Categories for every requested title.

        Titles the provider has no data for resolve to an empty list.

        Args:
            app_ids: Titles to resolve

        Returns:
            dict[int, list[int]]: Category codes per app ID

        Raises:
            ProviderExhaustedError: If the lead request failed; nothing was
                fetched concurrently and nothing was persisted
            CategoryFetchError: If a concurrent request failed; titles fetched
                before the failure were cached and persisted anyway
            CategoryPersistenceError: If newly fetched categories couldn't be saved
            CategoryResolutionError: If the store couldn't be queried

        Every error carries the titles resolved so far in ``resolved``.
        """
        resolved, pending = self._cache.get_many(app_ids)
        pending = list(dict.fromkeys(pending))

        if not pending:
            self._logger.debug("Categories full cache hit", count=len(resolved))
            return resolved
        if resolved:
            self._logger.debug("Categories partial cache hit", count=len(resolved))

        try:
            stored = await self._store.query_categories(pending)
        except StoreError as e:
            raise CategoryResolutionError(
                f"query categories from store: {e}",
                resolved=resolved,
                original_error=e,
            ) from e

        self._cache.set_many(stored)
        resolved.update(stored)
        pending = [app_id for app_id in pending if app_id not in stored]

        if not pending:
            self._logger.debug("Categories full store hit", count=len(stored))
            return resolved
        if stored:
            self._logger.debug("Categories partial store hit", count=len(stored))

        await self._fetch_remote(pending, resolved)
        return resolved

    async def _fetch_remote(
        self,
        app_ids: list[int],
        resolved: dict[int, list[int]],
    ) -> dict[int, list[int]]:
        fetched: dict[int, list[int]] = {}

        lead_id, rest = app_ids[-1], app_ids[:-1]
        try:
            categories = await self._provider.list_categories(lead_id)
        except ProviderError as e:
            self._logger.error(
                "Lead category request failed, provider quota probably exhausted",
                app_id=lead_id,
                error=str(e),
            )
            raise ProviderExhaustedError(
                f"fetch categories (app_id={lead_id}): provider quota probably exhausted: {e}",
                resolved=resolved,
                app_id=lead_id,
                original_error=e,
            ) from e

        self._remember(lead_id, categories, fetched, resolved)

        failure = await self._fan_out(rest, fetched, resolved) if rest else None

        self._logger.info(
            "Fetched categories from provider",
            requested=len(app_ids),
            fetched=len(fetched),
            failed=failure is not None,
        )

        try:
            await self._store.save_categories(fetched)
        except StoreError as e:
            if failure is not None:
                self._logger.error(
                    "Category fetch failed",
                    app_id=failure.app_id,
                    error=str(failure),
                )
            raise CategoryPersistenceError(
                f"save new categories to store: {e}",
                resolved=resolved,
                original_error=e,
            ) from e

        if failure is not None:
            raise CategoryFetchError(
                f"fetch categories: {failure}",
                resolved=resolved,
                app_id=failure.app_id,
                original_error=failure,
            ) from failure

        return fetched

    async def _fan_out(
        self,
        app_ids: list[int],
        fetched: dict[int, list[int]],
        resolved: dict[int, list[int]],
    ) -> ProviderError | None:
        """
        Fetch titles concurrently, at most ``concurrency`` at a time.

        The first failure cancels every other request. Titles fetched
        before that stay in ``fetched`` and ``resolved``.

        Returns:
            The first failure, or None if every request succeeded
        """
        semaphore = asyncio.Semaphore(self._concurrency)

        async def fetch(app_id: int) -> None:
            async with semaphore:
                try:
                    categories = await self._provider.list_categories(app_id)
                except ProviderError as e:
                    if e.app_id is None:
                        e.app_id = app_id
                    raise
            self._remember(app_id, categories, fetched, resolved)

        failure: ProviderError | None = None
        try:
            async with asyncio.TaskGroup() as group:
                for app_id in app_ids:
                    group.create_task(fetch(app_id))
        except* ProviderError as errors:
            failure = errors.exceptions[0]
            self._logger.warning(
                "Concurrent category fetch cancelled",
                app_id=failure.app_id,
                failures=len(errors.exceptions),
                fetched=len(fetched),
            )

        return failure

    def _remember(
        self,
        app_id: int,
        categories: list[int],
        fetched: dict[int, list[int]],
        resolved: dict[int, list[int]],
    ) -> None:
        self._cache.set(app_id, categories)
        fetched[app_id] = categories
        resolved[app_id] = categories
