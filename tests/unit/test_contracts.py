"""Tests for data contracts."""

import pytest
from what2play.provider.contracts import (
    AppDetailsEntry,
    OwnedGamesAPIResponse,
    PriceOverview,
    VanityAPIResponse,
)


class TestPriceOverview:
    """Tests for PriceOverview contract."""

    def test_discount_validation(self) -> None:
        """Test discount percentage bounds."""
        price = PriceOverview(currency="USD", initial=1000, final=500, discount_percent=50)
        assert price.discount_percent == 50

        with pytest.raises(ValueError):
            PriceOverview(currency="USD", initial=1000, final=500, discount_percent=150)

    def test_defaults(self) -> None:
        """Missing fields default to zero amounts."""
        price = PriceOverview()

        assert price.initial == 0
        assert price.currency == ""


class TestAppDetailsEntry:
    """Tests for Store appdetails entries."""

    def test_categories(self) -> None:
        """Category IDs in response order."""
        entry = AppDetailsEntry.model_validate(
            {
                "success": True,
                "data": {
                    "categories": [
                        {"id": 1, "description": "Multi-player"},
                        {"id": 36, "description": "Online PvP"},
                    ]
                },
            }
        )

        assert entry.data is not None
        assert entry.data.category_ids == [1, 36]

    def test_empty_array_data(self) -> None:
        """The store sends [] when the filtered fields are missing."""
        entry = AppDetailsEntry.model_validate({"success": True, "data": []})

        assert entry.success is True
        assert entry.data is None

    def test_unsuccessful(self) -> None:
        """Unknown apps come back without data."""
        entry = AppDetailsEntry.model_validate({"success": False})

        assert entry.success is False
        assert entry.data is None

    def test_price_overview(self) -> None:
        """Price overview is parsed when present."""
        entry = AppDetailsEntry.model_validate(
            {
                "success": True,
                "data": {
                    "price_overview": {
                        "currency": "EUR",
                        "initial": 1999,
                        "final": 999,
                        "discount_percent": 50,
                    }
                },
            }
        )

        assert entry.data is not None
        assert entry.data.price_overview == PriceOverview(
            currency="EUR", initial=1999, final=999, discount_percent=50
        )
        assert entry.data.category_ids == []


class TestOwnedGamesAPIResponse:
    """Tests for GetOwnedGames responses."""

    def test_private_profile(self) -> None:
        """Private profiles answer with an empty body."""
        body = OwnedGamesAPIResponse.model_validate({"response": {}}).response

        assert body.games == []

    def test_playtimes_default_to_zero(self) -> None:
        """Games never played recently have no two-week playtime."""
        body = OwnedGamesAPIResponse.model_validate(
            {"response": {"game_count": 1, "games": [{"appid": 570, "name": "Dota 2"}]}}
        ).response

        assert body.games[0].playtime_2weeks == 0
        assert body.games[0].playtime_forever == 0

    def test_invalid_appid(self) -> None:
        """App IDs must be positive."""
        with pytest.raises(ValueError):
            OwnedGamesAPIResponse.model_validate({"response": {"games": [{"appid": 0}]}})


class TestVanityAPIResponse:
    """Tests for ResolveVanityURL responses."""

    def test_match(self) -> None:
        """Success code 1 is a match."""
        resolution = VanityAPIResponse.model_validate(
            {"response": {"success": 1, "steamid": "76561197960287930"}}
        ).response

        assert resolution.is_match
        assert not resolution.is_no_match

    def test_no_match(self) -> None:
        """Success code 42 means nobody has that name."""
        resolution = VanityAPIResponse.model_validate(
            {"response": {"success": 42, "message": "No match"}}
        ).response

        assert resolution.is_no_match
        assert resolution.steamid is None
