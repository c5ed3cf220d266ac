"""Shipping rate service."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from core.logging import get_logger
from services.locations import is_valid_country_code
from services.shipping.rates import calculate_rates
from services.shipping.types import (
    CoverageResult,
    RateContext,
    ShippingQuote,
    ShippingValidationError,
)
from services.shipping.zones import ShippingZoneMatcher

if TYPE_CHECKING:
    from collections.abc import Sequence

    from services.locations import Address
    from services.shipping.types import CartItem, ShippingStore

logger = get_logger(__name__)

NO_SHIPPING_MESSAGE = "No shipping available to this location"


def _validate_address(address: Address) -> None:
    if not is_valid_country_code(address.country):
        msg = "Shipping address country must be a valid ISO 3166-1 alpha-2 code"
        raise ShippingValidationError(msg)


def total_item_weight(items: Sequence[CartItem]) -> Decimal | None:
    """Return the summed weight of ``items`` if every item declares one."""
    weights = [item.total_weight for item in items]
    if not weights or any(w is None for w in weights):
        return None
    return sum((w for w in weights if w is not None), Decimal("0"))


class ShippingRateService:
    """
    Turns a cart context into priced shipping options.

    Rates are aggregated across every matching zone, not only the
    highest-priority one.
    """

    def __init__(
        self,
        store: ShippingStore,
        matcher: ShippingZoneMatcher | None = None,
    ) -> None:
        """
        Initialize the shipping rate service.

        Args:
            store: Storage collaborator for zones and rates.
            matcher: Optional zone matcher (built from ``store`` by default).
        """
        self._store = store
        self._matcher = matcher or ShippingZoneMatcher(store)

    async def calculate_shipping_rates(
        self,
        address: Address,
        items: Sequence[CartItem],
        subtotal: Decimal,
        weight: Decimal | None = None,
    ) -> ShippingQuote:
        """
        Price the shipping options available for a destination.

        Args:
            address: Destination address.
            items: Cart lines; at least one is required.
            subtotal: Cart subtotal.
            weight: Total weight. Derived from ``items`` when omitted and
                every item declares a weight.

        Returns:
            ShippingQuote with rates sorted cheapest first, or an empty quote
            with a message when no zone covers the address.

        Raises:
            ShippingValidationError: If the request is malformed.
        """
        _validate_address(address)
        if not items:
            msg = "At least one item is required"
            raise ShippingValidationError(msg)
        if weight is None:
            weight = total_item_weight(items)
        context = RateContext(subtotal=subtotal, weight=weight)

        zones = await self._matcher.find_matching_zones(address)
        if not zones:
            logger.info("No shipping zone for address", country=address.country_code)
            return ShippingQuote(rates=(), message=NO_SHIPPING_MESSAGE)

        candidates = await self._store.list_shipping_rates([zone.id for zone in zones])
        priced = calculate_rates(candidates, context)

        logger.info(
            "Shipping rates calculated",
            country=address.country_code,
            zones=len(zones),
            candidates=len(candidates),
            eligible=len(priced),
        )
        return ShippingQuote(rates=tuple(priced))

    async def check_coverage(self, address: Address) -> CoverageResult:
        """
        Report whether any active zone covers ``address``.

        Raises:
            ShippingValidationError: If the address country is malformed.
        """
        _validate_address(address)
        zones = await self._matcher.find_matching_zones(address)
        return CoverageResult(covered=bool(zones), zones=tuple(zones))
