"""
Persistent storage for title categories.

Category lists are stored as compact binary blobs in a
SQLAlchemy-managed relational table.
"""

from what2play.storage.category_store import CategoryStore
from what2play.storage.codec import decode_categories, encode_categories
from what2play.storage.models import Base, GameCategoriesRow

__all__ = [
    "Base",
    "CategoryStore",
    "GameCategoriesRow",
    "decode_categories",
    "encode_categories",
]
