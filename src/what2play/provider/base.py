"""
Remote catalog provider contract.

The pipeline only talks to the provider through this interface,
so tests and alternative transports can stand in for Steam.

Not-found outcomes are values, not errors:
- an unknown vanity name resolves to None
- titles whose price lookup fails are absent from the price mapping
- titles without category data resolve to an empty list

Every other failure raises ProviderError (or a subclass).
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from what2play.catalog.models import OwnedGame, Price, UserIdentity


class BaseCatalogProvider(ABC):
    """Abstract base class for catalog providers."""

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Return identifier for this data source."""
        ...

    @abstractmethod
    async def resolve_identity(self, name: str) -> str | None:
        """Resolve a vanity name to a Steam ID, or None when nobody has it."""
        ...

    @abstractmethod
    async def list_owned_titles(self, steam_id: str) -> list[OwnedGame]:
        """List every game a user owns, with playtimes."""
        ...

    @abstractmethod
    async def list_prices(self, app_ids: Sequence[int]) -> dict[int, Price]:
        """Look up store prices; unsuccessful lookups are left out."""
        ...

    @abstractmethod
    async def list_friends(self, steam_id: str) -> list[str]:
        """List the Steam IDs of a user's friends."""
        ...

    @abstractmethod
    async def list_categories(self, app_id: int) -> list[int]:
        """List the category codes of a title; empty when unavailable."""
        ...

    @abstractmethod
    async def list_user_summaries(self, steam_ids: Sequence[str]) -> list[UserIdentity]:
        """Look up public profiles; unknown IDs are left out."""
        ...

    async def aclose(self) -> None:
        """Release transport resources."""
        pass

    async def __aenter__(self) -> "BaseCatalogProvider":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()
