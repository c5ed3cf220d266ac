"""Cache service for carrier quotes and connection checks."""

from __future__ import annotations

import hashlib
import json
from typing import TYPE_CHECKING, Any

from django.core.cache import cache

if TYPE_CHECKING:
    from services.shipping.carriers.base import CarrierRateRequest


class CacheKeyPrefix:
    """Cache key prefixes for different data types."""

    CARRIER_QUOTE = "carrier_quote"


class CacheTTL:
    """Default TTL values in seconds for different data types."""

    CARRIER_QUOTES = 300  # 5 minutes


class CacheService:
    """
    Thin wrapper over Django's cache framework with namespaced keys.

    Example:
        >>> cache_service = CacheService()
        >>> await cache_service.aset("carrier_quote:ups:ab12", rates, ttl=300)
        >>> cached = await cache_service.aget("carrier_quote:ups:ab12")
    """

    def __init__(self, key_prefix: str = "backoffice") -> None:
        """
        Initialize the cache service.

        Args:
            key_prefix: Prefix for all cache keys (default: 'backoffice').
        """
        self._key_prefix = key_prefix

    def _make_key(self, key: str) -> str:
        return f"{self._key_prefix}:{key}"

    def get(self, key: str) -> Any | None:
        """Get a value from the cache, or None if not found."""
        return cache.get(self._make_key(key))

    def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """
        Set a value in the cache.

        Args:
            key: The cache key.
            value: The value to cache.
            ttl: Time-to-live in seconds (optional).

        Returns:
            True if successful.
        """
        cache.set(self._make_key(key), value, ttl)
        return True

    def delete(self, key: str) -> bool:
        cache.delete(self._make_key(key))
        return True

    async def aget(self, key: str) -> Any | None:
        """Async variant of ``get``."""
        return await cache.aget(self._make_key(key))

    async def aset(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Async variant of ``set``."""
        await cache.aset(self._make_key(key), value, ttl)
        return True

    @staticmethod
    def make_quote_key(provider_id: str, request: CarrierRateRequest) -> str:
        """
        Generate a cache key for a carrier quote.

        Args:
            provider_id: The configured provider.
            request: The rate request being quoted.

        Returns:
            A key unique to the provider, addresses, packages and services.
        """
        params = {
            "from": request.from_address.to_dict(),
            "to": request.to_address.to_dict(),
            "packages": [
                [str(p.weight), p.weight_unit, str(p.length), str(p.width), str(p.height)]
                for p in request.packages
            ],
            "services": sorted(request.services),
        }
        params_str = json.dumps(params, sort_keys=True, default=str)
        params_hash = hashlib.md5(params_str.encode(), usedforsecurity=False).hexdigest()[:12]
        return f"{CacheKeyPrefix.CARRIER_QUOTE}:{provider_id}:{params_hash}"
