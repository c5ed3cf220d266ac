"""Tests for API serializers."""

from __future__ import annotations

from decimal import Decimal

from apps.api.serializers import (
    CarrierRateInputSerializer,
    ShippingRateInputSerializer,
    TaxCalculationInputSerializer,
    TaxCalculationResultSerializer,
    TaxRegionSerializer,
)
from services.shipping.carriers.base import Package
from services.tax.types import (
    ProductTarget,
    TaxBreakdownEntry,
    TaxCalculationResult,
    TaxOverride,
    TaxRegion,
    TaxSource,
)


class TestTaxCalculationInputSerializer:
    """Tests for TaxCalculationInputSerializer."""

    def test_shipping_address_value(self) -> None:
        """The optional address becomes an Address value."""
        serializer = TaxCalculationInputSerializer(
            data={
                "country_code": "US",
                "amount": "10.5",
                "shipping_address": {"country": "US", "state": "CA"},
            }
        )

        assert serializer.is_valid(), serializer.errors
        address = serializer.shipping_address_value()
        assert address is not None
        assert address.state == "CA"

    def test_without_address(self) -> None:
        """No address gives None."""
        serializer = TaxCalculationInputSerializer(data={"country_code": "US", "amount": "1"})

        assert serializer.is_valid(), serializer.errors
        assert serializer.shipping_address_value() is None

    def test_invalid_amount(self) -> None:
        """Non-numeric amounts are rejected."""
        serializer = TaxCalculationInputSerializer(data={"country_code": "US", "amount": "abc"})

        assert not serializer.is_valid()
        assert "amount" in serializer.errors


class TestResultSerializers:
    """Tests for output serializers."""

    def test_tax_result(self) -> None:
        """Decimals render as strings and sources as their values."""
        result = TaxCalculationResult(
            region_id="r1",
            region_name="California",
            tax_rate=Decimal("0.075"),
            tax_amount=Decimal("7.5"),
            total_amount=Decimal("107.5"),
            breakdown=(
                TaxBreakdownEntry(
                    name="CA Sales Tax",
                    rate=Decimal("0.075"),
                    amount=Decimal("7.5"),
                    source=TaxSource.DEFAULT,
                ),
            ),
        )

        data = TaxCalculationResultSerializer(result).data

        assert data["tax_amount"] == "7.5"
        assert data["tax_rate_percentage"] == "7.500"
        assert data["breakdown"][0]["source"] == "default"

    def test_tax_region(self) -> None:
        """Regions render their overrides and targets."""
        region = TaxRegion(
            id="r1",
            name="United States",
            country_code="US",
            default_tax_rate=None,
            tax_overrides=(
                TaxOverride(
                    id="o1",
                    name="Books",
                    rate=Decimal("0"),
                    targets=(ProductTarget(product_id="b1"),),
                ),
            ),
        )

        data = TaxRegionSerializer(region).data

        assert data["status"] == "active"
        assert data["default_tax_rate"] is None
        assert data["tax_overrides"][0]["targets"] == [{"type": "product", "target_id": "b1"}]


class TestShippingInputSerializers:
    """Tests for shipping input serializers."""

    def test_cart_items(self) -> None:
        """Cart lines default to quantity one and keep their weight."""
        serializer = ShippingRateInputSerializer(
            data={
                "shipping_address": {"country": "US"},
                "items": [{"product_id": "p1", "weight": "2"}, {"product_id": "p2"}],
                "subtotal": "20",
            }
        )

        assert serializer.is_valid(), serializer.errors
        first, second = serializer.cart_items()
        assert first.quantity == 1
        assert first.weight == Decimal("2")
        assert second.weight is None

    def test_packages(self) -> None:
        """Packages default to pounds and inches."""
        serializer = CarrierRateInputSerializer(
            data={"to_address": {"country": "US"}, "packages": [{"weight": "1.25"}]}
        )

        assert serializer.is_valid(), serializer.errors
        package = serializer.packages_value()[0]
        assert isinstance(package, Package)
        assert package.weight_unit == "LB"
        assert package.dimension_unit == "IN"
        assert serializer.validated_data["services"] == []
        assert serializer.from_address_value() is None

    def test_packages_required(self) -> None:
        """At least one package is required."""
        serializer = CarrierRateInputSerializer(
            data={"to_address": {"country": "US"}, "packages": []}
        )

        assert not serializer.is_valid()
        assert "packages" in serializer.errors
