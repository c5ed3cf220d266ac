"""Shipping zone matching."""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable

    from services.locations import Address
    from services.shipping.types import ShippingStore, ShippingZone

logger = get_logger(__name__)

POSTAL_WILDCARD = "*"


def _normalize(value: str) -> str:
    return value.strip().upper()


def zone_matches(zone: ShippingZone, address: Address) -> bool:
    """
    Return True if an active ``zone`` covers ``address``.

    Country membership is mandatory. State, city and postal filters only
    apply when both the address and the zone provide that dimension.
    """
    if not zone.is_active:
        return False

    country = address.country_code
    if country not in {_normalize(c) for c in zone.countries}:
        return False

    if address.state and zone.states:
        if _normalize(address.state) not in {_normalize(s) for s in zone.states}:
            return False

    if address.city and zone.cities:
        city = address.city.strip().casefold()
        if not any(city == c.strip().casefold() for c in zone.cities):
            return False

    if address.postal_code and zone.postal_codes:
        postal_code = _normalize(address.postal_code)
        if not any(
            pattern == POSTAL_WILDCARD or postal_code.startswith(_normalize(pattern))
            for pattern in zone.postal_codes
        ):
            return False

    return True


def filter_matching_zones(
    zones: Iterable[ShippingZone],
    address: Address,
) -> list[ShippingZone]:
    """
    Return the zones covering ``address``, highest priority first.

    The sort is stable, so zones of equal priority keep their input order.
    """
    matching = [zone for zone in zones if zone_matches(zone, address)]
    return sorted(matching, key=lambda zone: zone.priority, reverse=True)


class ShippingZoneMatcher:
    """Loads candidate zones from storage and filters them for an address."""

    def __init__(self, store: ShippingStore) -> None:
        """
        Initialize the matcher.

        Args:
            store: Storage collaborator used for zone lookups.
        """
        self._store = store

    async def find_matching_zones(self, address: Address) -> list[ShippingZone]:
        """
        Find every zone covering ``address``.

        Args:
            address: Destination address.

        Returns:
            Matching zones ordered by descending priority (possibly empty).
        """
        candidates = await self._store.list_shipping_zones(address.country_code)
        zones = filter_matching_zones(candidates, address)
        logger.debug(
            "Matched shipping zones",
            country=address.country_code,
            candidates=len(candidates),
            matched=[zone.id for zone in zones],
        )
        return zones
