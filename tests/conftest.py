"""Shared fixtures: an in-memory catalog provider and a SQLite category store."""

import asyncio
from collections import defaultdict
from collections.abc import AsyncIterator, Sequence
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from what2play.cache.group import CacheGroup
from what2play.catalog.models import OwnedGame, Price, UserIdentity
from what2play.errors import APIError
from what2play.provider.base import BaseCatalogProvider
from what2play.storage.category_store import CategoryStore


class FakeCatalogProvider(BaseCatalogProvider):
    """
    Catalog provider serving canned data.

    Records every call, can fail owned-games, price and category requests,
    delays category requests per app ID and tracks how many of them were
    in flight at once.
    """

    def __init__(
        self,
        *,
        owned: dict[str, list[OwnedGame]] | None = None,
        prices: dict[int, Price] | None = None,
        friends: dict[str, list[str]] | None = None,
        users: dict[str, UserIdentity] | None = None,
        vanity: dict[str, str] | None = None,
        categories: dict[int, list[int]] | None = None,
        failing_categories: Sequence[int] = (),
        category_delays: dict[int, float] | None = None,
        failing_owned: Sequence[str] = (),
        failing_prices: Sequence[int] = (),
    ) -> None:
        self.owned = owned or {}
        self.prices = prices or {}
        self.friends = friends or {}
        self.users = users or {}
        self.vanity = vanity or {}
        self.categories = categories or {}
        self.failing_categories = set(failing_categories)
        self.category_delays = category_delays or {}
        self.failing_owned = set(failing_owned)
        self.failing_prices = set(failing_prices)
        self.calls: dict[str, list[object]] = defaultdict(list)
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def source_name(self) -> str:
        return "fake"

    async def resolve_identity(self, name: str) -> str | None:
        self.calls["resolve_identity"].append(name)
        return self.vanity.get(name)

    async def list_owned_titles(self, steam_id: str) -> list[OwnedGame]:
        self.calls["list_owned_titles"].append(steam_id)
        if steam_id in self.failing_owned:
            raise APIError("API error: 500", source=self.source_name, status_code=500)
        return list(self.owned.get(steam_id, []))

    async def list_prices(self, app_ids: Sequence[int]) -> dict[int, Price]:
        self.calls["list_prices"].append(list(app_ids))
        if self.failing_prices.intersection(app_ids):
            raise APIError("API error: 502", source=self.source_name, status_code=502)
        return {app_id: self.prices[app_id] for app_id in app_ids if app_id in self.prices}

    async def list_friends(self, steam_id: str) -> list[str]:
        self.calls["list_friends"].append(steam_id)
        return list(self.friends.get(steam_id, []))

    async def list_categories(self, app_id: int) -> list[int]:
        self.calls["list_categories"].append(app_id)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.category_delays.get(app_id, 0))
            if app_id in self.failing_categories:
                raise APIError("API error: 500", source=self.source_name, status_code=500)
            return list(self.categories.get(app_id, []))
        finally:
            self.in_flight -= 1

    async def list_user_summaries(self, steam_ids: Sequence[str]) -> list[UserIdentity]:
        self.calls["list_user_summaries"].append(list(steam_ids))
        return [self.users[steam_id] for steam_id in steam_ids if steam_id in self.users]


@pytest.fixture
def caches() -> CacheGroup:
    """Fresh memory caches."""
    return CacheGroup()


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """SQLite database file private to the test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'what2play.db'}"


@pytest_asyncio.fixture
async def store(database_url: str) -> AsyncIterator[CategoryStore]:
    """Category store with its schema created."""
    category_store = CategoryStore(create_async_engine(database_url))
    await category_store.create_schema()
    yield category_store
    await category_store.close()
