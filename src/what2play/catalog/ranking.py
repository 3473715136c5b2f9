"""
Games in common between a user and their companions.

A title makes the list when the primary user owns it and every
companion owns it too. Free-to-play titles skip the ownership check:
anyone in the group can install them.
"""

from collections.abc import Sequence
from functools import cmp_to_key

from what2play.cache.group import CacheGroup
from what2play.catalog.models import Title
from what2play.catalog.service import CatalogService
from what2play.logger import get_logger


def compare_titles(a: Title, b: Title) -> int:
    """
    Most played first.

    Two-week playtime decides when either title was played recently,
    lifetime playtime otherwise. Equal playtimes put the greater name first.
    """
    if a.playtime_2weeks > 0 or b.playtime_2weeks > 0:
        key_a, key_b = a.playtime_2weeks, b.playtime_2weeks
    else:
        key_a, key_b = a.playtime_forever, b.playtime_forever

    if key_a != key_b:
        return -1 if key_a > key_b else 1
    return -1 if a.name > b.name else 1


def rank_titles(titles: Sequence[Title]) -> list[Title]:
    return sorted(titles, key=cmp_to_key(compare_titles))


def common_titles(
    primary: dict[int, Title],
    companions: Sequence[dict[int, Title]],
) -> list[Title]:
    """
    Titles the whole group can play, unordered.

    Primary titles are kept when free or owned by every companion;
    free companion titles are added when not already present.
    """
    selected: dict[int, Title] = {}

    for app_id, title in primary.items():
        if title.free or all(app_id in games for games in companions):
            selected[app_id] = title

    for games in companions:
        for app_id, title in games.items():
            if title.free and app_id not in selected:
                selected[app_id] = title

    return list(selected.values())


def ranking_cache_key(primary_id: str, companion_ids: Sequence[str]) -> str:
    return f"{primary_id}:{','.join(sorted(set(companion_ids)))}"


class CommonCatalogRanker:
    """
    Ranked list of games a group has in common.

    Rankings are cached per primary user and companion set; the
    order companions are given in doesn't matter.
    """

    def __init__(self, catalog: CatalogService, caches: CacheGroup) -> None:
        self._catalog = catalog
        self._caches = caches
        self._logger = get_logger(__name__, component="ranker")

    async def ranked_catalog(self, primary_id: str, companion_ids: Sequence[str]) -> list[Title]:
        """
        Args:
            primary_id: Steam ID of the user the list is built for
            companion_ids: Steam IDs of the users they want to play with

        Returns:
            list[Title]: Common titles, most played first, in a fresh list
                the caller may modify

        Raises:
            ProviderError: If a user's games can't be fetched
        """
        cache_key = ranking_cache_key(primary_id, companion_ids)

        ranked, found = self._caches.ranked_catalogs.get(cache_key)
        if found:
            self._logger.debug("Ranked catalog cache hit", users=cache_key)
            return list(ranked)

        primary = await self._catalog.owned_titles(primary_id)
        companions = [
            await self._catalog.owned_titles(steam_id)
            for steam_id in dict.fromkeys(companion_ids)
            if steam_id != primary_id
        ]

        ranked = rank_titles(common_titles(primary, companions))

        self._logger.info(
            "Ranked common catalog",
            users=cache_key,
            primary_titles=len(primary),
            common_titles=len(ranked),
        )
        self._caches.ranked_catalogs.set(cache_key, ranked)
        return list(ranked)
