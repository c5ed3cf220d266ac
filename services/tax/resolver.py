"""Effective tax rate resolution for a region and product."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from core.logging import get_logger
from services.tax.types import TaxBreakdownEntry, TaxCalculationResult, TaxSource

if TYPE_CHECKING:
    from services.tax.types import TaxOverride, TaxRegion, TaxRegionStore

logger = get_logger(__name__)

ZERO = Decimal("0")


def resolve_effective_rate(
    region: TaxRegion,
    product_id: str | None,
    product_type: str | None,
) -> tuple[Decimal, TaxOverride | None]:
    """
    Return a region's own rate for a product and the override that set it.

    The first matching override in declaration order replaces the default
    rate. Its ``combinable`` flag does not make it stack with the default.
    """
    override = region.find_override(product_id, product_type)
    if override is not None:
        return override.rate, override
    return region.default_tax_rate or ZERO, None


class TaxRateResolver:
    """Combines parent, override and default rates into a tax result."""

    def __init__(self, store: TaxRegionStore) -> None:
        """
        Initialize the resolver.

        Args:
            store: Storage collaborator used to load parent regions.
        """
        self._store = store

    async def calculate_tax_for_region(
        self,
        region: TaxRegion,
        product_id: str | None = None,
        product_type: str | None = None,
        amount: Decimal = ZERO,
    ) -> TaxCalculationResult:
        """
        Calculate tax on ``amount`` for a product in ``region``.

        Args:
            region: Region resolved for the destination.
            product_id: Product identifier for product overrides.
            product_type: Product type for product-type overrides.
            amount: Taxable amount (already validated as non-negative).

        Returns:
            TaxCalculationResult with the breakdown in evaluation order.
        """
        breakdown: list[TaxBreakdownEntry] = []
        total_rate = ZERO

        parent_entry = await self._parent_contribution(region, product_id, product_type, amount)
        if parent_entry is not None:
            breakdown.append(parent_entry)
            total_rate += parent_entry.rate

        rate, override = resolve_effective_rate(region, product_id, product_type)
        if rate > 0:
            if override is not None:
                name = override.name or _default_rate_name(region)
                source = TaxSource.OVERRIDE
            else:
                name = _default_rate_name(region)
                source = TaxSource.DEFAULT
            breakdown.append(
                TaxBreakdownEntry(name=name, rate=rate, amount=amount * rate, source=source)
            )
            total_rate += rate

        tax_amount = amount * total_rate
        logger.debug(
            "Tax resolved for region",
            region_id=region.id,
            product_id=product_id,
            product_type=product_type,
            tax_rate=total_rate,
            entries=len(breakdown),
        )
        return TaxCalculationResult(
            region_id=region.id,
            region_name=region.name,
            tax_rate=total_rate,
            tax_amount=tax_amount,
            total_amount=amount + tax_amount,
            breakdown=tuple(breakdown),
        )

    async def _parent_contribution(
        self,
        region: TaxRegion,
        product_id: str | None,
        product_type: str | None,
        amount: Decimal,
    ) -> TaxBreakdownEntry | None:
        """Return the parent's entry when the region combines with it."""
        if region.parent_region_id is None or not region.default_combinable_with_parent:
            return None

        parent = await self._store.get_tax_region_by_id(region.parent_region_id)
        if parent is None:
            logger.warning(
                "Parent tax region not found",
                region_id=region.id,
                parent_region_id=region.parent_region_id,
            )
            return None

        if not parent.default_tax_rate:
            return None

        # One level only: the parent's own parent is never consulted.
        rate, _ = resolve_effective_rate(parent, product_id, product_type)
        if rate <= 0:
            return None
        return TaxBreakdownEntry(
            name=f"{parent.name} Tax",
            rate=rate,
            amount=amount * rate,
            source=TaxSource.PARENT,
        )


def _default_rate_name(region: TaxRegion) -> str:
    return region.default_tax_rate_name or f"{region.name} Tax"
