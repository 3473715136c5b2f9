"""
Remote catalog providers.

The pipeline depends on BaseCatalogProvider only; SteamCatalogProvider
is the production implementation over Steam's HTTP APIs.
"""

from what2play.provider.base import BaseCatalogProvider
from what2play.provider.rate_limiter import RateLimiter, RateLimiterConfig
from what2play.provider.steam import SteamCatalogProvider

__all__ = [
    "BaseCatalogProvider",
    "RateLimiter",
    "RateLimiterConfig",
    "SteamCatalogProvider",
]
