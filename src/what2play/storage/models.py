"""SQLAlchemy table definitions for the persistent store."""

from sqlalchemy import Integer, LargeBinary
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class GameCategoriesRow(Base):
    """Encoded category codes of one title."""

    __tablename__ = "game_categories"

    appid: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    categories: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)

    def __repr__(self) -> str:
        return f"<GameCategoriesRow(appid={self.appid})>"
