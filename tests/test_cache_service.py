"""Tests for cache service."""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest

from services.cache import CacheKeyPrefix, CacheService, CacheTTL
from services.locations import Address
from services.shipping.carriers.base import CarrierRateRequest, Package


def _request(**kwargs: object) -> CarrierRateRequest:
    params: dict[str, object] = {
        "from_address": Address(country="US", state="CA"),
        "to_address": Address(country="US", state="NY", postal_code="10001"),
        "packages": (Package(weight=Decimal("2")),),
    }
    params.update(kwargs)
    return CarrierRateRequest(**params)  # type: ignore[arg-type]


class TestCacheConstants:
    """Tests for cache prefixes and TTLs."""

    def test_values(self) -> None:
        """Carrier quotes have a prefix and a five minute default."""
        assert CacheKeyPrefix.CARRIER_QUOTE == "carrier_quote"
        assert CacheTTL.CARRIER_QUOTES == 300


class TestCacheService:
    """Tests for CacheService."""

    @pytest.fixture()
    def service(self) -> CacheService:
        """Create a cache service for testing."""
        return CacheService(key_prefix="test")

    def test_make_key(self, service: CacheService) -> None:
        """_make_key should create prefixed key."""
        assert service._make_key("mykey") == "test:mykey"

    @patch("services.cache.cache")
    def test_set_and_get(self, mock_cache: MagicMock, service: CacheService) -> None:
        """set and get should use prefixed keys."""
        mock_cache.get.return_value = "value"

        assert service.set("k", "value", ttl=30) is True
        assert service.get("k") == "value"
        mock_cache.set.assert_called_once_with("test:k", "value", 30)
        mock_cache.get.assert_called_once_with("test:k")

    @patch("services.cache.cache")
    def test_delete(self, mock_cache: MagicMock, service: CacheService) -> None:
        """delete should remove the prefixed key."""
        service.delete("k")

        mock_cache.delete.assert_called_once_with("test:k")

    @pytest.mark.asyncio
    async def test_async_round_trip(self, service: CacheService) -> None:
        """aset then aget should return the stored value."""
        await service.aset("quote", ("rate",), ttl=60)

        assert await service.aget("quote") == ("rate",)
        assert await service.aget("missing") is None


class TestQuoteKey:
    """Tests for make_quote_key."""

    def test_format(self) -> None:
        """Keys carry the prefix and the provider id."""
        key = CacheService.make_quote_key("prov-1", _request())

        assert key.startswith("carrier_quote:prov-1:")
        assert len(key.rsplit(":", 1)[1]) == 12

    def test_stable(self) -> None:
        """Equal requests give equal keys."""
        assert CacheService.make_quote_key("p", _request()) == CacheService.make_quote_key(
            "p", _request()
        )

    def test_service_order_ignored(self) -> None:
        """Service codes are compared as a set."""
        first = CacheService.make_quote_key("p", _request(services=("01", "03")))
        second = CacheService.make_quote_key("p", _request(services=("03", "01")))

        assert first == second

    def test_distinguishes_requests(self) -> None:
        """Destination, packages and provider all change the key."""
        base = CacheService.make_quote_key("p", _request())

        assert base != CacheService.make_quote_key("q", _request())
        assert base != CacheService.make_quote_key(
            "p", _request(to_address=Address(country="US", state="NJ"))
        )
        assert base != CacheService.make_quote_key(
            "p", _request(packages=(Package(weight=Decimal("3")),))
        )
