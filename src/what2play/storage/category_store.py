"""
Persistent category store.

Batch reads and writes of encoded category lists keyed by app ID.
Every batch runs in one transaction: it either commits as a whole
or is rolled back as a whole.
"""

from collections.abc import Mapping, Sequence

from sqlalchemy import insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from what2play.config import DatabaseConfig
from what2play.errors import StoreError
from what2play.logger import get_logger
from what2play.storage.codec import decode_categories, encode_categories
from what2play.storage.models import Base, GameCategoriesRow

# keeps IN (...) below SQLite's bound-parameter limit
QUERY_CHUNK_SIZE = 500


class CategoryStore:
    """
    Category rows backed by an async SQLAlchemy engine.

    Example:
        >>> store = CategoryStore.from_config(DatabaseConfig())
        >>> await store.create_schema()
        >>> await store.save_categories({570: [1, 49]})
        >>> await store.query_categories([570, 730])
        {570: [1, 49]}
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        self._session_factory = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self._logger = get_logger(__name__, component="category_store")

    @classmethod
    def from_config(cls, config: DatabaseConfig) -> "CategoryStore":
        """Create a store with its own engine."""
        engine = create_async_engine(config.connection_url, echo=config.echo)
        return cls(engine)

    async def create_schema(self) -> None:
        """Create the category table if it doesn't exist."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        """Dispose the engine and its connections."""
        await self._engine.dispose()

    async def query_categories(self, app_ids: Sequence[int]) -> dict[int, list[int]]:
        """
        Load stored categories.

        Args:
            app_ids: Titles to look up

        Returns:
            dict[int, list[int]]: Categories per app ID; IDs without a row are absent

        Raises:
            StoreError: If the read transaction fails
        """
        if not app_ids:
            return {}

        rows: dict[int, bytes] = {}
        try:
            async with self._session_factory() as session, session.begin():
                for start in range(0, len(app_ids), QUERY_CHUNK_SIZE):
                    chunk = app_ids[start : start + QUERY_CHUNK_SIZE]
                    result = await session.execute(
                        select(GameCategoriesRow.appid, GameCategoriesRow.categories).where(
                            GameCategoriesRow.appid.in_(chunk)
                        )
                    )
                    rows.update({appid: encoded for appid, encoded in result})
        except SQLAlchemyError as e:
            self._logger.error("Category query failed", count=len(app_ids), error=str(e))
            raise StoreError(f"query game categories: {e}", original_error=e) from e

        return {appid: decode_categories(encoded) for appid, encoded in rows.items()}

    async def save_categories(self, categories_per_game: Mapping[int, Sequence[int]]) -> None:
        """
        Insert one row per title.

        Rows are insert-only: saving an app ID that is already stored
        fails and rolls back the whole batch.

        Raises:
            StoreError: If any insert or the commit fails
        """
        if not categories_per_game:
            return

        values = [
            {"appid": appid, "categories": encode_categories(categories)}
            for appid, categories in categories_per_game.items()
        ]

        try:
            async with self._session_factory() as session, session.begin():
                await session.execute(insert(GameCategoriesRow), values)
        except SQLAlchemyError as e:
            self._logger.error("Category save failed", count=len(values), error=str(e))
            raise StoreError(f"save game categories: {e}", original_error=e) from e

        self._logger.debug("Saved game categories", count=len(values))
