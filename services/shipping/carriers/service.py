"""Real-time carrier quoting for configured shipping providers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from core.logging import get_logger
from core.result import Failure, Result, Success, failure, success
from services.locations import Address
from services.shipping.carriers.base import SANDBOX_KEY, CarrierRateRequest
from services.shipping.carriers.errors import (
    ProviderError,
    ProviderInactiveError,
    ProviderNotFoundError,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from core.config import ShippingSettings
    from services.cache import CacheService
    from services.shipping.carriers.base import CarrierRate, ConnectionTestResult, Package
    from services.shipping.carriers.registry import CarrierRegistry
    from services.shipping.types import ShippingProviderConfig, ShippingStore

logger = get_logger(__name__)


def origin_address(settings: ShippingSettings) -> Address:
    """Return the warehouse address configured in ``settings``."""
    return Address(
        country=settings.origin_country,
        state=settings.origin_state or None,
        city=settings.origin_city or None,
        postal_code=settings.origin_postal_code or None,
    )


def provider_credentials(provider: ShippingProviderConfig) -> dict[str, Any]:
    """Return the provider's credentials with its test-mode flag merged in."""
    return {**provider.credentials, SANDBOX_KEY: provider.is_test_mode}


class CarrierRateService:
    """
    Resolves a configured provider to its carrier adapter and quotes it.

    Successful quotes are cached for ``settings.quote_cache_ttl`` seconds
    when a cache is supplied.
    """

    def __init__(
        self,
        store: ShippingStore,
        registry: CarrierRegistry,
        settings: ShippingSettings,
        cache: CacheService | None = None,
    ) -> None:
        """
        Initialize the carrier rate service.

        Args:
            store: Storage collaborator for provider configuration.
            registry: Adapters keyed by carrier code.
            settings: Shipping settings (origin address, quote TTL).
            cache: Optional quote cache.
        """
        self._store = store
        self._registry = registry
        self._settings = settings
        self._cache = cache

    async def _load_provider(
        self, provider_id: str
    ) -> Result[ShippingProviderConfig, ProviderError]:
        provider = await self._store.get_shipping_provider(provider_id)
        if provider is None:
            logger.warning("Shipping provider not found", provider_id=provider_id)
            return failure(ProviderNotFoundError(provider_id))
        if not provider.is_active:
            return failure(ProviderInactiveError(provider.type, provider_id))
        return success(provider)

    async def test_connection(
        self, provider_id: str
    ) -> Result[ConnectionTestResult, ProviderError]:
        """
        Check that a provider's stored credentials authenticate.

        Returns:
            Result with the connection outcome or a ProviderError.
        """
        loaded = await self._load_provider(provider_id)
        if isinstance(loaded, Failure):
            return failure(loaded.error)
        provider = loaded.value

        adapter = self._registry.get_adapter(provider.type)
        if isinstance(adapter, Failure):
            return failure(adapter.error)

        result = await adapter.value.test_connection(provider_credentials(provider))
        if isinstance(result, Success):
            logger.info(
                "Provider connection tested",
                provider_id=provider_id,
                carrier=provider.type,
                success=result.value.success,
            )
        return result

    async def get_rates(
        self,
        provider_id: str,
        to_address: Address,
        packages: Sequence[Package],
        services: Sequence[str] = (),
        from_address: Address | None = None,
    ) -> Result[tuple[CarrierRate, ...], ProviderError]:
        """
        Quote a provider for a shipment.

        Args:
            provider_id: Configured provider to quote.
            to_address: Destination.
            packages: Parcels to ship.
            services: Service codes to keep; empty keeps all.
            from_address: Origin; defaults to the configured warehouse.

        Returns:
            Result containing quoted rates or a ProviderError.
        """
        loaded = await self._load_provider(provider_id)
        if isinstance(loaded, Failure):
            return failure(loaded.error)
        provider = loaded.value

        adapter = self._registry.get_adapter(provider.type)
        if isinstance(adapter, Failure):
            return failure(adapter.error)

        request = CarrierRateRequest(
            from_address=from_address or origin_address(self._settings),
            to_address=to_address,
            packages=tuple(packages),
            services=tuple(services),
        )

        ttl = self._settings.quote_cache_ttl
        cache_key = None
        if self._cache is not None and ttl > 0:
            cache_key = self._cache.make_quote_key(provider_id, request)
            cached = await self._cache.aget(cache_key)
            if cached is not None:
                logger.debug("Carrier quote cache hit", provider_id=provider_id)
                return success(cached)

        result = await adapter.value.get_rates(provider_credentials(provider), request)
        if isinstance(result, Failure):
            logger.warning(
                "Carrier quote failed",
                provider_id=provider_id,
                carrier=provider.type,
                error_code=result.error.code.value,
            )
            return result

        if self._cache is not None and cache_key is not None:
            await self._cache.aset(cache_key, result.value, ttl=ttl)
        return result

    async def close(self) -> None:
        """Release the adapters' HTTP clients."""
        await self._registry.close()
