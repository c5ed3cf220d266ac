"""Django ORM implementation of the shipping store."""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.core.exceptions import ValidationError

from apps.shipping import models

if TYPE_CHECKING:
    from collections.abc import Sequence

    from services.shipping.types import ShippingProviderConfig, ShippingRate, ShippingZone


class DjangoShippingStore:
    """ShippingStore backed by the shipping models."""

    async def list_shipping_zones(self, country_code: str) -> list[ShippingZone]:
        """Return active zones listing ``country_code``, highest priority first."""
        code = country_code.upper()
        # Country membership is checked in Python; JSON containment is not portable
        qs = models.ShippingZone.objects.filter(is_active=True).order_by("-priority", "name")
        return [zone.to_domain() async for zone in qs if code in (zone.countries or [])]

    async def list_shipping_rates(self, zone_ids: Sequence[str]) -> list[ShippingRate]:
        """Return active rates attached to any of ``zone_ids``."""
        if not zone_ids:
            return []
        qs = models.ShippingRate.objects.filter(
            shipping_zone_id__in=list(zone_ids),
            is_active=True,
        ).order_by("-priority", "name")
        return [rate.to_domain() async for rate in qs]

    async def get_shipping_provider(self, provider_id: str) -> ShippingProviderConfig | None:
        """Return a configured provider; malformed ids resolve to None."""
        try:
            provider = await models.ShippingProvider.objects.filter(pk=provider_id).afirst()
        except ValidationError:
            return None
        return provider.to_domain() if provider else None
