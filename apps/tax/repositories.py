"""Django ORM implementation of the tax region store."""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.core.exceptions import ValidationError

from apps.tax.models import TaxRegion as TaxRegionRecord

if TYPE_CHECKING:
    from services.tax.types import TaxRegion, TaxRegionFilter


class DjangoTaxRegionStore:
    """TaxRegionStore backed by the ``TaxRegion`` model."""

    async def get_tax_region(self, criteria: TaxRegionFilter) -> TaxRegion | None:
        """Return the first region matching ``criteria``."""
        qs = TaxRegionRecord.objects.filter(country_code=criteria.country_code)
        if criteria.subdivision_code is not None:
            qs = qs.filter(subdivision_code=criteria.subdivision_code)
        if criteria.status is not None:
            qs = qs.filter(status=criteria.status.value)
        if criteria.is_default is not None:
            qs = qs.filter(is_default=criteria.is_default)
        if criteria.country_level:
            qs = qs.filter(parent_region__isnull=True)
        region = await qs.order_by("created_at").afirst()
        return region.to_domain() if region else None

    async def get_tax_region_by_id(self, region_id: str) -> TaxRegion | None:
        """Return the region with ``region_id``; malformed ids resolve to None."""
        try:
            region = await TaxRegionRecord.objects.filter(pk=region_id).afirst()
        except ValidationError:
            return None
        return region.to_domain() if region else None

    async def list_tax_regions(self, country_code: str) -> list[TaxRegion]:
        """Return the active regions of a country, country level first."""
        qs = TaxRegionRecord.objects.filter(
            country_code=country_code,
            status=TaxRegionRecord.Status.ACTIVE,
        ).order_by("name")
        regions = [region.to_domain() async for region in qs]
        return sorted(regions, key=lambda r: r.is_subregion)
