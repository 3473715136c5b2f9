"""
Steam catalog provider.

Implements the provider contract on top of the Steam Web API
(owned games, friends, profiles, vanity names) and the Steam
Store API (prices, categories). Store calls are paced by a
token bucket since that API has a tight undocumented quota.
"""

from collections.abc import Sequence
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from what2play.catalog.models import OwnedGame, Price, UserIdentity
from what2play.config import RetryConfig, SteamAPIConfig, get_settings
from what2play.errors import APIError, ProviderError, RateLimitError, ValidationError
from what2play.logger import get_logger
from what2play.provider.base import BaseCatalogProvider
from what2play.provider.contracts import (
    AppDetailsEntry,
    FriendListAPIResponse,
    OwnedGamesAPIResponse,
    PlayerSummariesAPIResponse,
    VanityAPIResponse,
)
from what2play.provider.rate_limiter import RateLimiter, RateLimiterConfig

M = TypeVar("M", bound=BaseModel)

# GetPlayerSummaries accepts at most 100 comma-separated IDs
PLAYER_SUMMARIES_LIMIT = 100


class SteamCatalogProvider(BaseCatalogProvider):
    """
    Catalog provider backed by Steam's HTTP APIs.

    Example:
        >>> async with SteamCatalogProvider() as provider:
        ...     steam_id = await provider.resolve_identity("gabelogannewell")
        ...     games = await provider.list_owned_titles(steam_id)
    """

    def __init__(
        self,
        *,
        config: SteamAPIConfig | None = None,
        retry_config: RetryConfig | None = None,
        rate_limiter: RateLimiter | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the Steam provider.

        Args:
            config: Steam API section (read from settings if None)
            retry_config: Retry behaviour (read from settings if None)
            rate_limiter: Store API pacing (built from config if None)
            client: HTTP client to reuse (created lazily if None)
        """
        if config is None or retry_config is None:
            settings = get_settings()
            config = config or settings.steam
            retry_config = retry_config or settings.retry

        self._config = config
        self._retry_config = retry_config
        self._api_key = config.api_key.get_secret_value()
        self._rate_limiter = rate_limiter or RateLimiter(
            RateLimiterConfig(
                requests_per_minute=config.requests_per_minute,
                burst_size=config.burst_size,
            )
        )
        self._client = client
        self._logger = get_logger(
            self.__class__.__name__,
            component="provider",
            source=self.source_name,
        )

    @property
    def source_name(self) -> str:
        return "steam"

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._config.timeout_seconds),
                follow_redirects=True,
                headers={
                    "User-Agent": "what2play/1.0",
                    "Accept": "application/json",
                },
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def _web_url(self, path: str) -> str:
        return f"{self._config.base_url}/{path}"

    def _store_url(self, path: str) -> str:
        return f"{self._config.store_url}/{path}"

    def _create_retry_decorator(self) -> Any:
        """Create retry decorator with current configuration."""
        return retry(
            retry=retry_if_exception_type((httpx.TransportError, APIError)),
            stop=stop_after_attempt(self._retry_config.max_attempts),
            wait=wait_exponential(
                multiplier=self._retry_config.base_delay_seconds,
                max=self._retry_config.max_delay_seconds,
                exp_base=self._retry_config.exponential_base,
            ),
            before_sleep=self._log_retry_attempt,
            reraise=True,
        )

    def _log_retry_attempt(self, retry_state: Any) -> None:
        self._logger.warning(
            "Retrying request",
            attempt=retry_state.attempt_number,
            wait_seconds=retry_state.next_action.sleep if retry_state.next_action else 0,
            exception=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )

    async def _get_json(
        self,
        url: str,
        params: dict[str, Any],
        *,
        store: bool = False,
        app_id: int | None = None,
        steam_id: str | None = None,
    ) -> Any:
        """
        GET a JSON document.

        Args:
            url: Endpoint URL
            params: Query parameters
            store: Pace the request with the Store API rate limiter
            app_id: Title the request is about, for error context
            steam_id: User the request is about, for error context

        Raises:
            RateLimitError: On HTTP 429
            APIError: On any other HTTP error status
            ValidationError: If the body isn't valid JSON
            ProviderError: On transport failures
        """

        @self._create_retry_decorator()
        async def _request() -> httpx.Response:
            if store:
                await self._rate_limiter.acquire()

            response = await self.client.get(url, params=params)

            if response.status_code == 429:
                retry_after = response.headers.get("Retry-After", "60")
                raise RateLimitError(
                    f"Rate limit exceeded. Retry after {retry_after}s",
                    source=self.source_name,
                    endpoint=url,
                    status_code=429,
                    app_id=app_id,
                    steam_id=steam_id,
                )

            if response.status_code >= 400:
                raise APIError(
                    f"API error: {response.status_code}",
                    source=self.source_name,
                    endpoint=url,
                    status_code=response.status_code,
                    app_id=app_id,
                    steam_id=steam_id,
                )

            return response

        try:
            response = await _request()
        except httpx.HTTPError as e:
            self._logger.error(
                "Request failed",
                url=url,
                app_id=app_id,
                steam_id=steam_id,
                error=str(e),
            )
            raise ProviderError(
                f"Request failed: {e}",
                source=self.source_name,
                endpoint=url,
                app_id=app_id,
                steam_id=steam_id,
                original_error=e,
            ) from e

        try:
            return response.json()
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError alike
            raise ValidationError(
                f"Response is not JSON: {e}",
                source=self.source_name,
                endpoint=url,
                status_code=response.status_code,
                app_id=app_id,
                steam_id=steam_id,
                original_error=e,
            ) from e

    def _parse(self, model: type[M], raw_data: Any, *, endpoint: str) -> M:
        try:
            return model.model_validate(raw_data)
        except PydanticValidationError as e:
            raise ValidationError(
                f"Response validation failed: {e}",
                source=self.source_name,
                endpoint=endpoint,
                original_error=e,
            ) from e

    def _parse_app_details(self, raw_data: Any, *, endpoint: str) -> dict[int, AppDetailsEntry]:
        if not isinstance(raw_data, dict):
            raise ValidationError(
                f"Unexpected appdetails payload: {type(raw_data).__name__}",
                source=self.source_name,
                endpoint=endpoint,
            )
        entries: dict[int, AppDetailsEntry] = {}
        for key, value in raw_data.items():
            try:
                app_id = int(key)
            except ValueError as e:
                raise ValidationError(
                    f"Invalid app id in appdetails payload: {key!r}",
                    source=self.source_name,
                    endpoint=endpoint,
                    original_error=e,
                ) from e
            entries[app_id] = self._parse(AppDetailsEntry, value, endpoint=endpoint)
        return entries

    async def resolve_identity(self, name: str) -> str | None:
        url = self._web_url("ISteamUser/ResolveVanityURL/v0001/")
        raw_data = await self._get_json(url, {"key": self._api_key, "vanityurl": name})
        resolution = self._parse(VanityAPIResponse, raw_data, endpoint=url).response

        if resolution.is_match and resolution.steamid:
            return resolution.steamid
        if resolution.is_no_match:
            self._logger.debug("Vanity name not found", vanity_name=name)
            return None

        raise ValidationError(
            f"Invalid vanity resolution success code: {resolution.success}",
            source=self.source_name,
            endpoint=url,
        )

    async def list_owned_titles(self, steam_id: str) -> list[OwnedGame]:
        url = self._web_url("IPlayerService/GetOwnedGames/v0001/")
        raw_data = await self._get_json(
            url,
            {
                "key": self._api_key,
                "steamid": steam_id,
                "include_appinfo": "true",
                "include_played_free_games": "true",
            },
            steam_id=steam_id,
        )
        body = self._parse(OwnedGamesAPIResponse, raw_data, endpoint=url).response

        self._logger.info("Fetched owned games", steam_id=steam_id, count=len(body.games))
        return [
            OwnedGame(
                app_id=g.appid,
                name=g.name,
                playtime_2weeks=g.playtime_2weeks,
                playtime_forever=g.playtime_forever,
            )
            for g in body.games
        ]

    async def list_prices(self, app_ids: Sequence[int]) -> dict[int, Price]:
        if not app_ids:
            return {}

        url = self._store_url("appdetails")
        raw_data = await self._get_json(
            url,
            {
                "appids": ",".join(str(app_id) for app_id in app_ids),
                "filters": "price_overview",
            },
            store=True,
        )

        prices: dict[int, Price] = {}
        for app_id, entry in self._parse_app_details(raw_data, endpoint=url).items():
            if not entry.success:
                continue
            overview = entry.data.price_overview if entry.data else None
            if overview is None:
                # data comes back as [] for titles the store doesn't sell
                prices[app_id] = Price()
                continue
            prices[app_id] = Price(
                currency=overview.currency,
                initial=overview.initial,
                final=overview.final,
                discount_percent=overview.discount_percent,
            )

        self._logger.info("Fetched prices", requested=len(app_ids), found=len(prices))
        return prices

    async def list_friends(self, steam_id: str) -> list[str]:
        url = self._web_url("ISteamUser/GetFriendList/v0001/")
        raw_data = await self._get_json(
            url,
            {"key": self._api_key, "steamid": steam_id, "relationship": "friend"},
            steam_id=steam_id,
        )
        friends = self._parse(FriendListAPIResponse, raw_data, endpoint=url).friendslist.friends
        return [f.steamid for f in friends]

    async def list_categories(self, app_id: int) -> list[int]:
        url = self._store_url("appdetails")
        raw_data = await self._get_json(
            url,
            {"appids": app_id, "filters": "categories"},
            store=True,
            app_id=app_id,
        )

        entry = self._parse_app_details(raw_data, endpoint=url).get(app_id)
        if entry is None or not entry.success or entry.data is None:
            self._logger.debug("No categories available", app_id=app_id)
            return []
        return entry.data.category_ids

    async def list_user_summaries(self, steam_ids: Sequence[str]) -> list[UserIdentity]:
        if not steam_ids:
            return []

        url = self._web_url("ISteamUser/GetPlayerSummaries/v0002/")
        identities: list[UserIdentity] = []

        for start in range(0, len(steam_ids), PLAYER_SUMMARIES_LIMIT):
            chunk = steam_ids[start : start + PLAYER_SUMMARIES_LIMIT]
            raw_data = await self._get_json(
                url,
                {"key": self._api_key, "steamids": ",".join(chunk)},
            )
            body = self._parse(PlayerSummariesAPIResponse, raw_data, endpoint=url).response
            identities.extend(
                UserIdentity(steam_id=p.steamid, username=p.personaname, avatar_url=p.avatarfull)
                for p in body.players
            )

        return identities
