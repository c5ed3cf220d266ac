"""Tests for effective tax rate resolution."""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from services.tax.resolver import TaxRateResolver, resolve_effective_rate
from services.tax.types import (
    ProductTarget,
    ProductTypeTarget,
    TaxOverride,
    TaxRegion,
    TaxSource,
)
from tests.fakes import InMemoryTaxRegionStore


def _region(
    region_id: str,
    rate: str | None,
    *,
    parent: str | None = None,
    combinable: bool = False,
    overrides: tuple[TaxOverride, ...] = (),
    name: str | None = None,
) -> TaxRegion:
    return TaxRegion(
        id=region_id,
        name=name or region_id.upper(),
        country_code="US",
        subdivision_code=f"US-{region_id.upper()}" if parent else None,
        parent_region_id=parent,
        default_tax_rate=Decimal(rate) if rate is not None else None,
        default_combinable_with_parent=combinable,
        tax_overrides=overrides,
    )


LUXURY = TaxOverride(
    name="Luxury Tax",
    rate=Decimal("0.10"),
    targets=(ProductTypeTarget("luxury_goods"),),
)


class TestResolveEffectiveRate:
    """Tests for resolve_effective_rate."""

    def test_default_rate_without_override(self) -> None:
        """The default rate applies when no override matches."""
        rate, override = resolve_effective_rate(_region("ca", "0.08"), "p1", "books")

        assert rate == Decimal("0.08")
        assert override is None

    def test_override_replaces_default(self) -> None:
        """A matching override replaces the default rather than adding to it."""
        region = _region("ca", "0.08", overrides=(LUXURY,))

        rate, override = resolve_effective_rate(region, None, "luxury_goods")

        assert rate == Decimal("0.10")
        assert override is LUXURY

    def test_combinable_override_still_replaces(self) -> None:
        """The combinable flag does not make an override stack."""
        combinable = TaxOverride(
            name="Combinable", rate=Decimal("0.02"), targets=(ProductTarget("p1"),), combinable=True
        )

        rate, _ = resolve_effective_rate(_region("ca", "0.08", overrides=(combinable,)), "p1", None)

        assert rate == Decimal("0.02")

    def test_missing_default_is_zero(self) -> None:
        """A region without default rate resolves to zero."""
        rate, override = resolve_effective_rate(_region("xx", None), None, None)

        assert rate == Decimal("0")
        assert override is None


class TestTaxRateResolver:
    """Tests for TaxRateResolver.calculate_tax_for_region."""

    @pytest.mark.asyncio
    async def test_zero_rate_parent_adds_no_entry(
        self, tax_store: InMemoryTaxRegionStore, ca_region: TaxRegion
    ) -> None:
        """A combinable region with a zero-rate parent only reports its own rate."""
        result = await TaxRateResolver(tax_store).calculate_tax_for_region(
            ca_region, amount=Decimal("100")
        )

        assert result.tax_rate == Decimal("0.075")
        assert result.tax_amount == Decimal("7.50")
        assert result.total_amount == Decimal("107.50")
        assert len(result.breakdown) == 1
        entry = result.breakdown[0]
        assert entry.name == "CA Sales Tax"
        assert entry.source is TaxSource.DEFAULT
        assert entry.amount == Decimal("7.50")

    @pytest.mark.asyncio
    async def test_override_wins_over_default(self) -> None:
        """A luxury override yields its own rate, not the sum and not the default."""
        region = _region("ca", "0.08", overrides=(LUXURY,), name="California")
        resolver = TaxRateResolver(InMemoryTaxRegionStore([region]))

        result = await resolver.calculate_tax_for_region(
            region, product_type="luxury_goods", amount=Decimal("200")
        )

        assert result.tax_rate == Decimal("0.10")
        assert result.tax_amount == Decimal("20.00")
        assert [e.source for e in result.breakdown] == [TaxSource.OVERRIDE]
        assert result.breakdown[0].name == "Luxury Tax"

    @pytest.mark.asyncio
    async def test_unnamed_override_uses_default_name(self) -> None:
        """An override without a name is labelled like the default rate."""
        override = TaxOverride(name="", rate=Decimal("0.01"), targets=(ProductTarget("p1"),))
        region = _region("ny", "0.04", overrides=(override,), name="New York")

        result = await TaxRateResolver(InMemoryTaxRegionStore()).calculate_tax_for_region(
            region, product_id="p1", amount=Decimal("10")
        )

        assert result.breakdown[0].name == "New York Tax"

    @pytest.mark.asyncio
    async def test_parent_rate_combined_first(self) -> None:
        """A combinable subregion adds the parent's rate, parent entry first."""
        parent = _region("us", "0.05", name="Federal")
        child = _region("ca", "0.02", parent="us", combinable=True, name="California")
        resolver = TaxRateResolver(InMemoryTaxRegionStore([parent, child]))

        result = await resolver.calculate_tax_for_region(child, amount=Decimal("100"))

        assert result.tax_rate == Decimal("0.07")
        assert result.tax_amount == Decimal("7.00")
        assert [e.source for e in result.breakdown] == [TaxSource.PARENT, TaxSource.DEFAULT]
        assert result.breakdown[0].name == "Federal Tax"
        assert result.breakdown[0].amount == Decimal("5.00")

    @pytest.mark.asyncio
    async def test_non_combinable_ignores_parent(self) -> None:
        """Without the combinable flag the parent is not consulted."""
        parent = _region("us", "0.05")
        child = _region("ca", "0.02", parent="us", combinable=False)
        resolver = TaxRateResolver(InMemoryTaxRegionStore([parent, child]))

        result = await resolver.calculate_tax_for_region(child, amount=Decimal("100"))

        assert result.tax_rate == Decimal("0.02")
        assert len(result.breakdown) == 1

    @pytest.mark.asyncio
    async def test_parent_override_applies_to_product(self) -> None:
        """The parent's contribution uses the parent's own override for the product."""
        food = TaxOverride(name="Food", rate=Decimal("0.01"), targets=(ProductTypeTarget("food"),))
        parent = _region("us", "0.05", overrides=(food,))
        child = _region("ca", "0.02", parent="us", combinable=True)
        resolver = TaxRateResolver(InMemoryTaxRegionStore([parent, child]))

        result = await resolver.calculate_tax_for_region(
            child, product_type="food", amount=Decimal("100")
        )

        assert result.tax_rate == Decimal("0.03")
        assert result.breakdown[0].rate == Decimal("0.01")

    @pytest.mark.asyncio
    async def test_missing_parent_is_skipped(self) -> None:
        """A dangling parent reference only drops the parent contribution."""
        child = _region("ca", "0.02", parent="gone", combinable=True)

        result = await TaxRateResolver(InMemoryTaxRegionStore([child])).calculate_tax_for_region(
            child, amount=Decimal("50")
        )

        assert result.tax_rate == Decimal("0.02")
        assert len(result.breakdown) == 1

    @pytest.mark.asyncio
    async def test_only_one_parent_level(self) -> None:
        """The parent's own parent never contributes."""
        top = _region("us", "0.03")
        middle = _region("west", "0.02", parent="us", combinable=True)
        leaf = _region("ca", "0.01", parent="west", combinable=True)
        resolver = TaxRateResolver(InMemoryTaxRegionStore([top, middle, leaf]))

        result = await resolver.calculate_tax_for_region(leaf, amount=Decimal("100"))

        assert result.tax_rate == Decimal("0.03")
        assert len(result.breakdown) == 2

    @pytest.mark.asyncio
    async def test_region_without_rates_has_empty_breakdown(self) -> None:
        """No default and no override is a valid zero-tax result."""
        region = _region("xx", None)

        result = await TaxRateResolver(InMemoryTaxRegionStore()).calculate_tax_for_region(
            region, amount=Decimal("80")
        )

        assert result.tax_rate == Decimal("0")
        assert result.tax_amount == Decimal("0")
        assert result.total_amount == Decimal("80")
        assert result.breakdown == ()

    @pytest.mark.asyncio
    async def test_parent_lookup_failure_propagates(self) -> None:
        """A failing parent lookup raises instead of dropping the parent rate."""
        child = _region("ca", "0.02", parent="us", combinable=True)
        store = AsyncMock()
        store.get_tax_region_by_id.side_effect = ConnectionError("database unavailable")

        with pytest.raises(ConnectionError):
            await TaxRateResolver(store).calculate_tax_for_region(child, amount=Decimal("50"))
