"""Shipping zones, rates and carrier quoting package."""

from services.shipping.rates import calculate_rates, evaluate_rate
from services.shipping.service import NO_SHIPPING_MESSAGE, ShippingRateService
from services.shipping.types import (
    CartItem,
    CoverageResult,
    EstimatedDays,
    PricedRate,
    RateContext,
    ShippingProviderConfig,
    ShippingQuote,
    ShippingRate,
    ShippingRateType,
    ShippingStore,
    ShippingValidationError,
    ShippingZone,
)
from services.shipping.zones import ShippingZoneMatcher, filter_matching_zones, zone_matches

__all__ = [
    "NO_SHIPPING_MESSAGE",
    "CartItem",
    "CoverageResult",
    "EstimatedDays",
    "PricedRate",
    "RateContext",
    "ShippingProviderConfig",
    "ShippingQuote",
    "ShippingRate",
    "ShippingRateService",
    "ShippingRateType",
    "ShippingStore",
    "ShippingValidationError",
    "ShippingZone",
    "ShippingZoneMatcher",
    "calculate_rates",
    "evaluate_rate",
    "filter_matching_zones",
    "zone_matches",
]
