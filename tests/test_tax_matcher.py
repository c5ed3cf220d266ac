"""Tests for tax region matching."""

from __future__ import annotations

from decimal import Decimal

import pytest

from services.tax.matcher import TaxRegionMatcher
from services.tax.types import RegionStatus, TaxRegion
from tests.fakes import InMemoryTaxRegionStore


class TestTaxRegionMatcher:
    """Tests for TaxRegionMatcher.find_applicable_tax_region."""

    @pytest.mark.asyncio
    async def test_subdivision_region_preferred(
        self, tax_store: InMemoryTaxRegionStore, ca_region: TaxRegion
    ) -> None:
        """An active subdivision region wins over the country default."""
        region = await TaxRegionMatcher(tax_store).find_applicable_tax_region("US", "CA")

        assert region == ca_region

    @pytest.mark.asyncio
    async def test_qualified_subdivision_code(
        self, tax_store: InMemoryTaxRegionStore, ca_region: TaxRegion
    ) -> None:
        """Qualified codes and lowercase input resolve the same region."""
        region = await TaxRegionMatcher(tax_store).find_applicable_tax_region("us", "us-ca")

        assert region == ca_region

    @pytest.mark.asyncio
    async def test_falls_back_to_country_default(
        self, tax_store: InMemoryTaxRegionStore, us_region: TaxRegion
    ) -> None:
        """A subdivision without its own region falls back to the country."""
        region = await TaxRegionMatcher(tax_store).find_applicable_tax_region("US", "NV")

        assert region == us_region

    @pytest.mark.asyncio
    async def test_inactive_subdivision_falls_back(
        self, tax_store: InMemoryTaxRegionStore, us_region: TaxRegion
    ) -> None:
        """An inactive subdivision region is skipped."""
        region = await TaxRegionMatcher(tax_store).find_applicable_tax_region("US", "TX")

        assert region == us_region

    @pytest.mark.asyncio
    async def test_no_subdivision_uses_country_default(
        self, tax_store: InMemoryTaxRegionStore, us_region: TaxRegion
    ) -> None:
        """Without a subdivision only the country lookup is made."""
        region = await TaxRegionMatcher(tax_store).find_applicable_tax_region("US")

        assert region == us_region
        assert len(tax_store.lookups) == 1
        assert tax_store.lookups[0].is_default is True
        assert tax_store.lookups[0].country_level is True

    @pytest.mark.asyncio
    async def test_unknown_country_returns_none(
        self, tax_store: InMemoryTaxRegionStore
    ) -> None:
        """A country without regions yields None rather than raising."""
        region = await TaxRegionMatcher(tax_store).find_applicable_tax_region("ZZ")

        assert region is None

    @pytest.mark.asyncio
    async def test_non_default_country_region_not_used(self) -> None:
        """A country-level region that is not the default is never a fallback."""
        store = InMemoryTaxRegionStore(
            [
                TaxRegion(
                    id="de",
                    name="Germany",
                    country_code="DE",
                    default_tax_rate=Decimal("0.19"),
                )
            ]
        )

        assert await TaxRegionMatcher(store).find_applicable_tax_region("DE") is None

    @pytest.mark.asyncio
    async def test_inactive_default_not_used(self) -> None:
        """An inactive default region is not returned."""
        store = InMemoryTaxRegionStore(
            [
                TaxRegion(
                    id="fr",
                    name="France",
                    country_code="FR",
                    is_default=True,
                    status=RegionStatus.INACTIVE,
                )
            ]
        )

        assert await TaxRegionMatcher(store).find_applicable_tax_region("FR") is None

    @pytest.mark.asyncio
    async def test_default_subregion_is_not_country_fallback(self) -> None:
        """A subregion flagged default is not treated as the country region."""
        store = InMemoryTaxRegionStore(
            [
                TaxRegion(
                    id="on",
                    name="Ontario",
                    country_code="CA",
                    subdivision_code="CA-ON",
                    parent_region_id="ca",
                    is_default=True,
                )
            ]
        )

        assert await TaxRegionMatcher(store).find_applicable_tax_region("CA", "QC") is None
