"""Real-time carrier adapters package."""

from services.shipping.carriers.base import (
    CarrierAdapter,
    CarrierRate,
    CarrierRateRequest,
    CarrierType,
    ConnectionTestResult,
    Package,
)
from services.shipping.carriers.errors import ErrorCode, ProviderError
from services.shipping.carriers.registry import CarrierRegistry, build_default_registry
from services.shipping.carriers.service import CarrierRateService

__all__ = [
    "CarrierAdapter",
    "CarrierRate",
    "CarrierRateRequest",
    "CarrierRateService",
    "CarrierRegistry",
    "CarrierType",
    "ConnectionTestResult",
    "ErrorCode",
    "Package",
    "ProviderError",
    "build_default_registry",
]
