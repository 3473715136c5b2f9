"""
Lazy filtered paging over a ranked catalog.

Only some titles pass the filter and nobody knows how many until
their categories are resolved, which is slow for titles seen for
the first time. The sequence resolves categories one batch at a
time and only moves on to the next batch when the consumer keeps
pulling.
"""

from collections.abc import AsyncIterator, Callable, Iterable, Sequence
from contextlib import aclosing

from what2play.catalog.models import Title
from what2play.categories.resolver import CategoryResolver

MULTIPLAYER_CATEGORIES = frozenset(
    {
        1,  # Multi-player
        9,  # Co-op
        20,  # MMO
        27,  # Cross-Platform Multiplayer
        36,  # Online PvP
        38,  # Online Co-op
        49,  # PvP
    }
)

CategoryPredicate = Callable[[Iterable[int]], bool]


def is_multiplayer(categories: Iterable[int]) -> bool:
    return any(category in MULTIPLAYER_CATEGORIES for category in categories)


class PagedFilterSequence:
    """
    Single-pass async sequence of ``(title, categories)`` pairs.

    Pairs come out in catalog order, only for titles whose categories
    pass ``predicate``. The first ``offset`` accepted pairs are consumed
    but not yielded, which lets a caller serve page ``p`` with
    ``offset=p * page_size``.

    Example:
        >>> sequence = PagedFilterSequence(ranked, resolver, batch_size=20, offset=40)
        >>> page = await sequence.take(20)

    A resolver failure ends the sequence with that error; nothing from
    the failing batch is yielded.
    """

    def __init__(
        self,
        titles: Sequence[Title],
        resolver: CategoryResolver,
        *,
        batch_size: int,
        predicate: CategoryPredicate = is_multiplayer,
        offset: int = 0,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive: {batch_size}")
        if offset < 0:
            raise ValueError(f"offset must not be negative: {offset}")
        self._titles = titles
        self._resolver = resolver
        self._batch_size = batch_size
        self._predicate = predicate
        self._offset = offset
        self._started = False

    def __aiter__(self) -> AsyncIterator[tuple[Title, list[int]]]:
        if self._started:
            raise RuntimeError("PagedFilterSequence can only be iterated once")
        self._started = True
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[tuple[Title, list[int]]]:
        skipped = 0

        for start in range(0, len(self._titles), self._batch_size):
            batch = self._titles[start : start + self._batch_size]
            categories_per_game = await self._resolver.resolve([t.app_id for t in batch])

            for title in batch:
                categories = categories_per_game.get(title.app_id)
                if categories is None or not self._predicate(categories):
                    continue

                if skipped < self._offset:
                    skipped += 1
                    continue

                yield title, categories

    async def take(self, count: int) -> list[tuple[Title, list[int]]]:
        """Collect at most ``count`` pairs and stop pulling."""
        items: list[tuple[Title, list[int]]] = []
        if count <= 0:
            return items

        async with aclosing(self.__aiter__()) as pairs:
            async for pair in pairs:
                items.append(pair)
                if len(items) == count:
                    break

        return items
