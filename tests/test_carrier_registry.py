"""Tests for the carrier adapter registry."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from core.result import Failure, Success
from services.shipping.carriers import CarrierRegistry, build_default_registry
from services.shipping.carriers.errors import ErrorCode
from services.shipping.carriers.fedex import FedexAdapter
from services.shipping.carriers.ups import UpsAdapter


class TestCarrierRegistry:
    """Tests for CarrierRegistry."""

    def test_register_and_get(self) -> None:
        """A registered adapter is returned for its code."""
        registry = CarrierRegistry()
        adapter = UpsAdapter()

        registry.register("ups", adapter)
        result = registry.get_adapter("ups")

        assert isinstance(result, Success)
        assert result.value is adapter
        assert registry.is_registered("ups") is True

    def test_unknown_code(self) -> None:
        """Unknown carriers give an unsupported-provider failure."""
        result = CarrierRegistry().get_adapter("dhl")

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.UNSUPPORTED_PROVIDER
        assert result.error.carrier_code == "dhl"

    def test_empty_code_rejected(self) -> None:
        """Registering under an empty code raises."""
        with pytest.raises(ValueError, match="carrier_code cannot be empty"):
            CarrierRegistry().register("", UpsAdapter())

    def test_unregister(self) -> None:
        """unregister reports whether an adapter was removed."""
        registry = CarrierRegistry()
        registry.register("ups", UpsAdapter())

        assert registry.unregister("ups") is True
        assert registry.unregister("ups") is False
        assert registry.registered_codes == []

    @pytest.mark.asyncio
    async def test_close_closes_adapters(self) -> None:
        """close releases every adapter."""
        registry = CarrierRegistry()
        first, second = MagicMock(), MagicMock()
        first.close = AsyncMock()
        second.close = AsyncMock()
        registry.register("a", first)
        registry.register("b", second)

        await registry.close()

        first.close.assert_awaited_once()
        second.close.assert_awaited_once()


class TestDefaultRegistry:
    """Tests for build_default_registry."""

    def test_registers_ups_and_fedex(self) -> None:
        """The default registry knows UPS and FedEx only."""
        registry = build_default_registry(timeout=10.0)

        assert sorted(registry.registered_codes) == ["fedex", "ups"]
        ups = registry.get_adapter("ups")
        fedex = registry.get_adapter("fedex")
        assert isinstance(ups, Success)
        assert isinstance(ups.value, UpsAdapter)
        assert isinstance(fedex, Success)
        assert isinstance(fedex.value, FedexAdapter)
        assert isinstance(registry.get_adapter("usps"), Failure)
