"""Builds services over the Django ORM stores for the API views."""

from __future__ import annotations

from apps.orders.repositories import DjangoOrderStore
from apps.shipping.repositories import DjangoShippingStore
from apps.tax.repositories import DjangoTaxRegionStore
from core.config import get_settings
from services.cache import CacheService
from services.orders import OrderTaxService
from services.shipping import ShippingRateService
from services.shipping.carriers import CarrierRateService, build_default_registry
from services.tax import TaxCalculationService


def build_tax_service() -> TaxCalculationService:
    return TaxCalculationService(DjangoTaxRegionStore())


def build_shipping_service() -> ShippingRateService:
    return ShippingRateService(DjangoShippingStore())


def build_carrier_service() -> CarrierRateService:
    """Return a carrier service with fresh adapters; close it after use."""
    shipping = get_settings().shipping
    return CarrierRateService(
        store=DjangoShippingStore(),
        registry=build_default_registry(timeout=shipping.carrier_timeout),
        settings=shipping,
        cache=CacheService(),
    )


def build_order_tax_service() -> OrderTaxService:
    return OrderTaxService(
        tax_service=build_tax_service(),
        store=DjangoOrderStore(),
        settings=get_settings().tax,
    )
