"""Shipping rate eligibility and cost calculation."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from core.logging import get_logger
from services.shipping.types import EstimatedDays, PricedRate, ShippingRateType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from services.shipping.types import RateContext, ShippingRate

logger = get_logger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def _out_of_bounds(
    value: Decimal,
    lower: Decimal | None,
    upper: Decimal | None,
) -> bool:
    if lower is not None and value < lower:
        return True
    return upper is not None and value > upper


def _threshold_met(rate: ShippingRate, subtotal: Decimal) -> bool:
    threshold = rate.free_shipping_threshold
    return threshold is not None and subtotal >= threshold


def evaluate_rate(rate: ShippingRate, context: RateContext) -> Decimal | None:
    """
    Price ``rate`` for ``context``.

    Eligibility is decided before any cost is computed. A met free-shipping
    threshold zeroes the cost of every rate type.

    Args:
        rate: Candidate rate.
        context: Subtotal and optional weight.

    Returns:
        The cost, or None when the rate is inactive or ineligible.
    """
    if not rate.is_active:
        return None

    subtotal = context.subtotal
    match rate.type:
        case ShippingRateType.FLAT_RATE:
            cost = rate.flat_rate or ZERO
        case ShippingRateType.WEIGHT_BASED:
            weight = context.weight
            if weight is None or _out_of_bounds(weight, rate.min_weight, rate.max_weight):
                return None
            cost = (rate.weight_rate or ZERO) * weight
        case ShippingRateType.PRICE_BASED:
            if _out_of_bounds(subtotal, rate.min_price, rate.max_price):
                return None
            cost = subtotal * ((rate.price_rate or ZERO) / HUNDRED)
        case ShippingRateType.FREE:
            if not _threshold_met(rate, subtotal):
                return None
            cost = ZERO
        case ShippingRateType.CALCULATED:
            # Carrier quotes go through CarrierRateService instead.
            return None

    if _threshold_met(rate, subtotal):
        cost = ZERO
    return max(cost, ZERO)


def calculate_rates(
    candidate_rates: Iterable[ShippingRate],
    context: RateContext,
) -> list[PricedRate]:
    """
    Price every eligible candidate, cheapest first.

    Ineligible rates are left out rather than reported as errors; ties keep
    the candidate order.

    Args:
        candidate_rates: Rates attached to the matching zones.
        context: Subtotal and optional weight.

    Returns:
        Priced rates sorted by ascending cost.
    """
    priced: list[PricedRate] = []
    for rate in candidate_rates:
        cost = evaluate_rate(rate, context)
        if cost is None:
            logger.debug("Shipping rate not eligible", rate_id=rate.id, type=rate.type.value)
            continue
        priced.append(
            PricedRate(
                rate_id=rate.id,
                name=rate.name,
                cost=cost,
                estimated_days=EstimatedDays(
                    min=rate.min_delivery_days,
                    max=rate.max_delivery_days,
                ),
                type=rate.type,
                shipping_zone_id=rate.shipping_zone_id,
                shipping_provider_id=rate.shipping_provider_id,
                description=rate.description,
            )
        )
    priced.sort(key=lambda p: p.cost)
    return priced
