"""Tests for the filtered paging sequence."""

from collections.abc import Sequence
from typing import Any, cast

import pytest
from what2play.catalog.models import Title
from what2play.categories.paging import MULTIPLAYER_CATEGORIES, PagedFilterSequence, is_multiplayer
from what2play.categories.resolver import CategoryResolver
from what2play.errors import CategoryFetchError


class StubResolver:
    """Serves canned categories and records every batch it is asked for."""

    def __init__(self, categories: dict[int, list[int]], fail_on_batch: int | None = None) -> None:
        self.categories = categories
        self.fail_on_batch = fail_on_batch
        self.batches: list[list[int]] = []

    async def resolve(self, app_ids: Sequence[int]) -> dict[int, list[int]]:
        self.batches.append(list(app_ids))
        if self.fail_on_batch is not None and len(self.batches) > self.fail_on_batch:
            raise CategoryFetchError("fetch categories: boom", app_id=app_ids[0])
        return {app_id: self.categories[app_id] for app_id in app_ids if app_id in self.categories}


def _sequence(titles: list[Title], resolver: StubResolver, **kwargs: Any) -> PagedFilterSequence:
    return PagedFilterSequence(titles, cast(CategoryResolver, resolver), **kwargs)


def _titles(count: int) -> list[Title]:
    return [Title(app_id, f"Game {app_id}") for app_id in range(1, count + 1)]


class TestIsMultiplayer:
    """Tests for the multiplayer predicate."""

    @pytest.mark.parametrize("code", sorted(MULTIPLAYER_CATEGORIES))
    def test_multiplayer_codes(self, code: int) -> None:
        """Every multiplayer category qualifies on its own."""
        assert is_multiplayer([2, code])

    def test_single_player_only(self) -> None:
        """Single-player and unrelated codes don't qualify."""
        assert not is_multiplayer([2, 22, 29])

    def test_no_categories(self) -> None:
        """A title without categories doesn't qualify."""
        assert not is_multiplayer([])


class TestPagedFilterSequence:
    """Tests for PagedFilterSequence."""

    @pytest.mark.asyncio
    async def test_short_page_when_few_titles_pass(self) -> None:
        """Five accepted titles out of fifty give a page of five."""
        titles = _titles(50)
        accepted = {3, 11, 19, 27, 42}
        resolver = StubResolver({t.app_id: [1] if t.app_id in accepted else [2] for t in titles})

        page = await _sequence(titles, resolver, batch_size=20).take(20)

        assert [t.app_id for t, _ in page] == [3, 11, 19, 27, 42]
        assert len(resolver.batches) == 3

    @pytest.mark.asyncio
    async def test_stops_pulling_once_full(self) -> None:
        """Later batches aren't resolved once the page is full."""
        titles = _titles(100)
        resolver = StubResolver({t.app_id: [1] for t in titles})

        page = await _sequence(titles, resolver, batch_size=20).take(20)

        assert [t.app_id for t, _ in page] == list(range(1, 21))
        assert resolver.batches == [list(range(1, 21))]

    @pytest.mark.asyncio
    async def test_offset_skips_accepted_titles(self) -> None:
        """The offset counts accepted titles, not catalog positions."""
        titles = _titles(10)
        resolver = StubResolver({t.app_id: [1] if t.app_id % 2 else [] for t in titles})

        page = await _sequence(titles, resolver, batch_size=4, offset=2).take(2)

        assert [t.app_id for t, _ in page] == [5, 7]

    @pytest.mark.asyncio
    async def test_offset_past_end(self) -> None:
        """An offset beyond every accepted title gives an empty page."""
        titles = _titles(5)
        resolver = StubResolver({t.app_id: [1] for t in titles})

        assert await _sequence(titles, resolver, batch_size=2, offset=5).take(5) == []

    @pytest.mark.asyncio
    async def test_yields_categories(self) -> None:
        """Each title comes with its resolved categories."""
        titles = _titles(2)
        resolver = StubResolver({1: [1, 22], 2: [38]})

        pairs = [pair async for pair in _sequence(titles, resolver, batch_size=5)]

        assert pairs == [(titles[0], [1, 22]), (titles[1], [38])]

    @pytest.mark.asyncio
    async def test_unresolved_titles_skipped(self) -> None:
        """Titles the resolver has no answer for are left out."""
        titles = _titles(3)
        resolver = StubResolver({1: [1], 3: [1]})

        page = await _sequence(titles, resolver, batch_size=3).take(3)

        assert [t.app_id for t, _ in page] == [1, 3]

    @pytest.mark.asyncio
    async def test_custom_predicate(self) -> None:
        """Any category predicate can be used."""
        titles = _titles(3)
        resolver = StubResolver({1: [22], 2: [1], 3: [22, 1]})

        page = await _sequence(
            titles,
            resolver,
            batch_size=3,
            predicate=lambda categories: 22 in categories,
        ).take(3)

        assert [t.app_id for t, _ in page] == [1, 3]

    @pytest.mark.asyncio
    async def test_single_pass(self) -> None:
        """A sequence can't be iterated twice."""
        sequence = _sequence(_titles(1), StubResolver({1: [1]}), batch_size=1)
        await sequence.take(1)

        with pytest.raises(RuntimeError):
            await sequence.take(1)

    @pytest.mark.asyncio
    async def test_resolver_error_ends_sequence(self) -> None:
        """Pairs before the failing batch are yielded, then the error surfaces."""
        titles = _titles(4)
        resolver = StubResolver({t.app_id: [1] for t in titles}, fail_on_batch=1)
        seen: list[int] = []

        with pytest.raises(CategoryFetchError):
            async for title, _ in _sequence(titles, resolver, batch_size=2):
                seen.append(title.app_id)

        assert seen == [1, 2]

    @pytest.mark.asyncio
    async def test_take_nothing(self) -> None:
        """Taking zero pairs resolves nothing."""
        resolver = StubResolver({1: [1]})

        assert await _sequence(_titles(1), resolver, batch_size=1).take(0) == []
        assert resolver.batches == []

    def test_invalid_arguments(self) -> None:
        """Batch size must be positive and offset non-negative."""
        with pytest.raises(ValueError):
            _sequence([], StubResolver({}), batch_size=0)
        with pytest.raises(ValueError):
            _sequence([], StubResolver({}), batch_size=1, offset=-1)
