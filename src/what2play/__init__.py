"""
what2play.

Finds the multiplayer games a group of Steam friends owns in
common, ranked by how much they have been played.
"""

from what2play.config import Settings, get_settings
from what2play.logger import get_logger, setup_logging

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "get_settings",
    "get_logger",
    "setup_logging",
    "__version__",
]
