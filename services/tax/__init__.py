"""Tax resolution engine package."""

from services.tax.matcher import TaxRegionMatcher
from services.tax.resolver import TaxRateResolver, resolve_effective_rate
from services.tax.service import TaxCalculationService
from services.tax.types import (
    ProductTarget,
    ProductTypeTarget,
    RegionStatus,
    TaxBreakdownEntry,
    TaxCalculationRequest,
    TaxCalculationResult,
    TaxOverride,
    TaxRegion,
    TaxRegionFilter,
    TaxRegionStore,
    TaxSource,
    TaxValidationError,
)

__all__ = [
    "ProductTarget",
    "ProductTypeTarget",
    "RegionStatus",
    "TaxBreakdownEntry",
    "TaxCalculationRequest",
    "TaxCalculationResult",
    "TaxCalculationService",
    "TaxOverride",
    "TaxRateResolver",
    "TaxRegion",
    "TaxRegionFilter",
    "TaxRegionMatcher",
    "TaxRegionStore",
    "TaxSource",
    "TaxValidationError",
    "resolve_effective_rate",
]
