"""Tax calculation service."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from core.logging import get_logger
from services.locations import normalize_country_code
from services.tax.matcher import TaxRegionMatcher
from services.tax.resolver import TaxRateResolver
from services.tax.types import RegionStatus, TaxRegionFilter

if TYPE_CHECKING:
    from services.tax.types import (
        TaxCalculationRequest,
        TaxCalculationResult,
        TaxRegion,
        TaxRegionStore,
    )

logger = get_logger(__name__)


class TaxCalculationService:
    """
    Turns a destination and product into a tax amount and breakdown.

    Composes ``TaxRegionMatcher`` and ``TaxRateResolver`` over a single
    storage collaborator. A destination without a tax region is a normal
    outcome and yields None; lookup failures propagate unchanged.
    """

    def __init__(
        self,
        store: TaxRegionStore,
        matcher: TaxRegionMatcher | None = None,
        resolver: TaxRateResolver | None = None,
    ) -> None:
        """
        Initialize the tax calculation service.

        Args:
            store: Storage collaborator for tax regions.
            matcher: Optional region matcher (built from ``store`` by default).
            resolver: Optional rate resolver (built from ``store`` by default).
        """
        self._store = store
        self._matcher = matcher or TaxRegionMatcher(store)
        self._resolver = resolver or TaxRateResolver(store)

    async def calculate_tax(
        self,
        request: TaxCalculationRequest,
    ) -> TaxCalculationResult | None:
        """
        Calculate tax for a product shipped to a destination.

        Args:
            request: Validated calculation request.

        Returns:
            TaxCalculationResult, or None when no tax region applies.
        """
        logger.debug(
            "Calculating tax",
            country_code=request.country_code,
            subdivision_code=request.effective_subdivision,
            product_id=request.product_id,
            product_type=request.product_type,
            amount=request.amount,
        )

        region = await self._matcher.find_applicable_tax_region(
            request.country_code,
            request.effective_subdivision,
        )
        if region is None:
            return None

        result = await self._resolver.calculate_tax_for_region(
            region,
            product_id=request.product_id,
            product_type=request.product_type,
            amount=request.amount,
        )
        logger.info(
            "Tax calculated",
            region_id=result.region_id,
            tax_rate=result.tax_rate,
            tax_amount=result.tax_amount,
        )
        return result

    async def calculate_tax_for_region(
        self,
        region: TaxRegion,
        product_id: str | None = None,
        product_type: str | None = None,
        amount: Decimal = Decimal("0"),
    ) -> TaxCalculationResult:
        """Calculate tax against an already resolved region."""
        return await self._resolver.calculate_tax_for_region(
            region,
            product_id=product_id,
            product_type=product_type,
            amount=amount,
        )

    async def find_applicable_tax_region(
        self,
        country_code: str,
        subdivision_code: str | None = None,
    ) -> TaxRegion | None:
        """Find the most specific active region for a destination."""
        return await self._matcher.find_applicable_tax_region(country_code, subdivision_code)

    async def get_tax_regions_for_country(self, country_code: str) -> list[TaxRegion]:
        """Return the active regions of a country, country level first."""
        return await self._store.list_tax_regions(normalize_country_code(country_code))

    async def get_default_tax_region(self, country_code: str) -> TaxRegion | None:
        """Return the active country-level default region, if any."""
        return await self._store.get_tax_region(
            TaxRegionFilter(
                country_code=normalize_country_code(country_code),
                status=RegionStatus.ACTIVE,
                is_default=True,
                country_level=True,
            )
        )
