"""
Multiplayer games a group of friends has in common.

Ties the pipeline together: rank the group's common catalog, then
walk it with a filtered paging sequence to serve one page of
multiplayer titles at a time.
"""

from collections.abc import Collection, Sequence

from what2play.catalog.models import Friend, FriendsOverview, GamesPage, UserIdentity
from what2play.catalog.ranking import CommonCatalogRanker
from what2play.catalog.service import CatalogService
from what2play.categories.paging import PagedFilterSequence
from what2play.categories.resolver import CategoryResolver
from what2play.errors import InvalidRequestError
from what2play.logger import get_logger


class GamesService:
    """
    Pages of shared multiplayer games, plus user and friends lookups.

    Example:
        >>> page = await games.games_page("7656...", ["7656..."], page=0)
        >>> [t.name for t in page.titles]
    """

    def __init__(
        self,
        catalog: CatalogService,
        ranker: CommonCatalogRanker,
        resolver: CategoryResolver,
        *,
        page_size: int = 20,
    ) -> None:
        self._catalog = catalog
        self._ranker = ranker
        self._resolver = resolver
        self._page_size = page_size
        self._logger = get_logger(__name__, component="games")

    @property
    def page_size(self) -> int:
        return self._page_size

    async def games_page(
        self,
        steam_id: str,
        companion_ids: Sequence[str],
        page: int = 0,
    ) -> GamesPage:
        """
        One page of multiplayer games the whole group can play.

        Args:
            steam_id: User the page is built for
            companion_ids: Friends they want to play with
            page: Zero-based page number

        Returns:
            GamesPage: Titles of the page; ``next_page`` is None once a page comes back empty

        Raises:
            InvalidRequestError: On missing companions or a negative page
            ProviderError: If owned games can't be fetched
            CategoryResolutionError: If categories can't be resolved
        """
        if not companion_ids:
            raise InvalidRequestError("missing companion steam ids")
        if any(not companion_id for companion_id in companion_ids):
            raise InvalidRequestError("invalid companion steam id")
        if page < 0:
            raise InvalidRequestError(f"invalid page: {page}")

        ranked = await self._ranker.ranked_catalog(steam_id, companion_ids)

        sequence = PagedFilterSequence(
            ranked,
            self._resolver,
            batch_size=self._page_size,
            offset=page * self._page_size,
        )
        titles = [title for title, _ in await sequence.take(self._page_size)]

        self._logger.info(
            "Served games page",
            steam_id=steam_id,
            companions=len(companion_ids),
            page=page,
            count=len(titles),
        )
        return GamesPage(
            page=page,
            titles=titles,
            next_page=page + 1 if titles else None,
        )

    async def lookup_user(self, identifier: str) -> UserIdentity | None:
        """
        Find a user by Steam ID or vanity name.

        Identifiers made only of digits are tried as Steam IDs first,
        then as vanity names.

        Returns:
            UserIdentity | None: The user, or None when nobody matches

        Raises:
            InvalidRequestError: For empty identifiers or identifiers with spaces
        """
        identifier = identifier.strip()
        if not identifier:
            raise InvalidRequestError("identifier required")
        if any(ch.isspace() for ch in identifier):
            raise InvalidRequestError("identifier must not contain spaces")

        if identifier.isdigit():
            users = await self._catalog.user_summaries([identifier])
            if users:
                return users[0]

        steam_id = await self._catalog.resolve_vanity(identifier)
        if steam_id is None:
            self._logger.info("User not found", identifier=identifier)
            return None

        users = await self._catalog.user_summaries([steam_id])
        return users[0] if users else None

    async def friends_overview(
        self,
        steam_id: str,
        favorites: Collection[str] = (),
    ) -> FriendsOverview:
        """
        A user's profile and their friends' profiles.

        Args:
            steam_id: User whose friends are listed
            favorites: Friend IDs the user marked as favorite

        Raises:
            InvalidRequestError: If the user has no public profile
        """
        friend_ids = await self._catalog.friends(steam_id)
        identities = await self._catalog.user_summaries([*friend_ids, steam_id])

        user: UserIdentity | None = None
        friends: list[Friend] = []
        for identity in identities:
            if identity.steam_id == steam_id:
                user = identity
                continue
            friends.append(Friend(identity=identity, favorite=identity.steam_id in favorites))

        if user is None:
            raise InvalidRequestError(f"unknown steam id: {steam_id}")

        return FriendsOverview(user=user, friends=friends)
