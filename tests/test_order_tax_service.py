"""Tests for applying tax to orders."""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from core.config import TaxSettings
from services.locations import Address
from services.orders import (
    MissingShippingAddressError,
    OrderLine,
    OrderNotFoundError,
    OrderRecord,
    OrderTaxService,
)
from services.tax import TaxCalculationService, TaxSource
from tests.fakes import InMemoryOrderStore, InMemoryTaxRegionStore


@pytest.fixture()
def order() -> OrderRecord:
    """A California order with a digital and a physical line."""
    return OrderRecord(
        id="order-1",
        order_number="1001",
        subtotal=Decimal("100.00"),
        shipping_amount=Decimal("10.00"),
        discount_amount=Decimal("5.00"),
        total=Decimal("105.00"),
        shipping_address=Address(country="US", state="CA", postal_code="94105"),
        items=(
            OrderLine(
                id="line-1",
                title="E-book",
                total=Decimal("30.00"),
                product_id="prod-ebook",
                product_type="digital",
            ),
            OrderLine(id="line-2", title="Lamp", total=Decimal("70.00"), product_type="home"),
        ),
    )


@pytest.fixture()
def order_store(order: OrderRecord) -> InMemoryOrderStore:
    """Store holding the sample order."""
    return InMemoryOrderStore([order])


@pytest.fixture()
def service(
    tax_store: InMemoryTaxRegionStore, order_store: InMemoryOrderStore
) -> OrderTaxService:
    """Order tax service over the US hierarchy."""
    return OrderTaxService(TaxCalculationService(tax_store), order_store, TaxSettings())


class TestCalculateOrderTax:
    """Tests for calculate_order_tax."""

    @pytest.mark.asyncio
    async def test_tax_stored_on_order(
        self, service: OrderTaxService, order_store: InMemoryOrderStore
    ) -> None:
        """Subtotal tax is rounded and the total recomputed."""
        updated = await service.calculate_order_tax("order-1")

        assert updated.tax_amount == Decimal("7.50")
        assert updated.tax_region_id == "region-us-ca"
        assert updated.total == Decimal("112.50")
        assert [e.name for e in updated.tax_breakdown] == ["CA Sales Tax"]
        assert order_store.orders["order-1"] == updated

    @pytest.mark.asyncio
    async def test_rounds_half_up(
        self, tax_store: InMemoryTaxRegionStore, order: OrderRecord
    ) -> None:
        """Half cents round up."""
        store = InMemoryOrderStore([replace(order, subtotal=Decimal("10.10"))])
        service = OrderTaxService(TaxCalculationService(tax_store), store, TaxSettings())

        updated = await service.calculate_order_tax("order-1")

        # 10.10 * 0.075 = 0.7575
        assert updated.tax_amount == Decimal("0.76")
        assert updated.tax_breakdown[0].amount == Decimal("0.76")

    @pytest.mark.asyncio
    async def test_exempt_order_has_zero_tax(
        self, service: OrderTaxService, order_store: InMemoryOrderStore, order: OrderRecord
    ) -> None:
        """Exempt orders never carry tax."""
        order_store.orders["order-1"] = replace(order, tax_exempt=True, tax_amount=Decimal("9"))

        updated = await service.calculate_order_tax("order-1")

        assert updated.tax_amount == Decimal("0")
        assert updated.tax_breakdown == ()
        assert updated.total == Decimal("105.00")

    @pytest.mark.asyncio
    async def test_no_region_zero_tax(
        self, service: OrderTaxService, order_store: InMemoryOrderStore, order: OrderRecord
    ) -> None:
        """Destinations without a tax region get zero tax."""
        order_store.orders["order-1"] = replace(order, shipping_address=Address(country="JP"))

        updated = await service.calculate_order_tax("order-1")

        assert updated.tax_amount == Decimal("0")
        assert updated.tax_region_id is None

    @pytest.mark.asyncio
    async def test_missing_order(self, service: OrderTaxService) -> None:
        """Unknown orders raise OrderNotFoundError."""
        with pytest.raises(OrderNotFoundError, match="missing"):
            await service.calculate_order_tax("missing")

    @pytest.mark.asyncio
    async def test_missing_address(
        self, service: OrderTaxService, order_store: InMemoryOrderStore, order: OrderRecord
    ) -> None:
        """Orders without shipping address cannot be taxed."""
        order_store.orders["order-1"] = replace(order, shipping_address=None)

        with pytest.raises(MissingShippingAddressError, match="Shipping address is required"):
            await service.calculate_order_tax("order-1")


class TestItemLevelTax:
    """Tests for calculate_item_level_tax."""

    @pytest.mark.asyncio
    async def test_overrides_apply_per_line(self, service: OrderTaxService) -> None:
        """Each line gets its own rate and breakdown entry."""
        updated = await service.calculate_item_level_tax("order-1")

        # 30 * 0.05 + 70 * 0.075 = 1.50 + 5.25
        assert updated.tax_amount == Decimal("6.75")
        assert updated.total == Decimal("111.75")
        ebook, lamp = updated.tax_breakdown
        assert ebook.name == "E-book Tax"
        assert ebook.rate == Decimal("0.05")
        assert ebook.source is TaxSource.OVERRIDE
        assert lamp.name == "Lamp Tax"
        assert lamp.amount == Decimal("5.25")
        assert lamp.source is TaxSource.DEFAULT

    @pytest.mark.asyncio
    async def test_line_id_used_without_product_id(
        self, tax_store: InMemoryTaxRegionStore, order: OrderRecord
    ) -> None:
        """Lines without product id are matched by their line id."""
        tax_service = TaxCalculationService(tax_store)
        tax_service.calculate_tax_for_region = AsyncMock(  # type: ignore[method-assign]
            wraps=tax_service.calculate_tax_for_region
        )
        service = OrderTaxService(tax_service, InMemoryOrderStore([order]), TaxSettings())

        await service.calculate_item_level_tax("order-1")

        calls = tax_service.calculate_tax_for_region.call_args_list
        product_ids = [call.kwargs["product_id"] for call in calls]
        assert product_ids == ["prod-ebook", "line-2"]

    @pytest.mark.asyncio
    async def test_exempt_order(
        self, service: OrderTaxService, order_store: InMemoryOrderStore, order: OrderRecord
    ) -> None:
        """Exempt orders stay at zero tax."""
        order_store.orders["order-1"] = replace(order, tax_exempt=True)

        updated = await service.calculate_item_level_tax("order-1")

        assert updated.tax_amount == Decimal("0")


class TestExemptions:
    """Tests for applying and removing exemptions."""

    @pytest.mark.asyncio
    async def test_apply_clears_tax(self, service: OrderTaxService) -> None:
        """Applying an exemption zeroes the tax and records the reason."""
        await service.calculate_order_tax("order-1")

        updated = await service.apply_tax_exemption("order-1", "Reseller certificate")

        assert updated.tax_exempt is True
        assert updated.tax_exempt_reason == "Reseller certificate"
        assert updated.tax_amount == Decimal("0")
        assert updated.tax_breakdown == ()
        assert updated.total == Decimal("105.00")

    @pytest.mark.asyncio
    async def test_remove_recalculates(
        self, service: OrderTaxService, order_store: InMemoryOrderStore
    ) -> None:
        """Removing an exemption restores calculated tax."""
        await service.apply_tax_exemption("order-1", "Nonprofit")

        updated = await service.remove_tax_exemption("order-1")

        assert updated.tax_exempt is False
        assert updated.tax_exempt_reason is None
        assert updated.tax_amount == Decimal("7.50")
        assert order_store.orders["order-1"].tax_exempt is False

    @pytest.mark.asyncio
    async def test_remove_without_address_keeps_exemption(
        self, service: OrderTaxService, order_store: InMemoryOrderStore, order: OrderRecord
    ) -> None:
        """A failed recalculation leaves the stored exemption untouched."""
        exempt = replace(
            order, shipping_address=None, tax_exempt=True, tax_exempt_reason="Nonprofit"
        )
        order_store.orders["order-1"] = exempt

        with pytest.raises(MissingShippingAddressError):
            await service.remove_tax_exemption("order-1")

        assert order_store.orders["order-1"] == exempt

    @pytest.mark.asyncio
    async def test_apply_missing_order(self, service: OrderTaxService) -> None:
        """Unknown orders raise OrderNotFoundError."""
        with pytest.raises(OrderNotFoundError):
            await service.apply_tax_exemption("missing", "reason")


class TestTaxSummary:
    """Tests for get_order_tax_summary."""

    @pytest.mark.asyncio
    async def test_summary(self, service: OrderTaxService) -> None:
        """The summary reflects the stored tax fields."""
        await service.calculate_order_tax("order-1")

        summary = await service.get_order_tax_summary("order-1")

        assert summary.order_number == "1001"
        assert summary.tax_amount == Decimal("7.50")
        data = summary.to_dict()
        assert data["tax_amount"] == "7.50"
        assert data["tax_breakdown"][0]["source"] == "default"
        assert data["shipping_address"]["state"] == "CA"
        assert data["currency"] == "USD"
