"""Registry of real-time carrier adapters."""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.result import Failure, Success
from services.shipping.carriers.client import DEFAULT_TIMEOUT
from services.shipping.carriers.errors import UnsupportedProviderError
from services.shipping.carriers.fedex import FedexAdapter
from services.shipping.carriers.ups import UpsAdapter

if TYPE_CHECKING:
    from core.result import Result
    from services.shipping.carriers.base import CarrierAdapter
    from services.shipping.carriers.errors import ProviderError


class CarrierRegistry:
    """
    Maps carrier codes to adapters.

    Example:
        >>> registry = CarrierRegistry()
        >>> registry.register("ups", UpsAdapter())
        >>> adapter = registry.get_adapter("ups")
    """

    def __init__(self) -> None:
        """Initialize with an empty registry."""
        self._adapters: dict[str, CarrierAdapter] = {}

    def register(self, carrier_code: str, adapter: CarrierAdapter) -> None:
        """
        Register an adapter for a carrier.

        Raises:
            ValueError: If carrier_code is empty.
        """
        if not carrier_code:
            msg = "carrier_code cannot be empty"
            raise ValueError(msg)
        self._adapters[carrier_code] = adapter

    def unregister(self, carrier_code: str) -> bool:
        """Remove an adapter; returns False if none was registered."""
        return self._adapters.pop(carrier_code, None) is not None

    def get_adapter(self, carrier_code: str) -> Result[CarrierAdapter, ProviderError]:
        """
        Get the adapter for ``carrier_code``.

        Returns:
            Result containing the adapter or an unsupported-provider error.
        """
        adapter = self._adapters.get(carrier_code)
        if adapter is None:
            return Failure(UnsupportedProviderError(carrier_code))
        return Success(adapter)

    def is_registered(self, carrier_code: str) -> bool:
        return carrier_code in self._adapters

    @property
    def registered_codes(self) -> list[str]:
        """Return list of all registered carrier codes."""
        return list(self._adapters.keys())

    async def close(self) -> None:
        """Close every registered adapter."""
        for adapter in self._adapters.values():
            await adapter.close()


def build_default_registry(timeout: float = DEFAULT_TIMEOUT) -> CarrierRegistry:
    """Return a registry holding the UPS and FedEx adapters."""
    registry = CarrierRegistry()
    for adapter in (UpsAdapter(timeout=timeout), FedexAdapter(timeout=timeout)):
        registry.register(adapter.carrier_code, adapter)
    return registry
