"""API serializers for tax, shipping and order endpoints."""

from __future__ import annotations

from typing import Any

from rest_framework import serializers

from services.locations import Address
from services.shipping.carriers.base import Package
from services.shipping.types import CartItem

# Output decimals are rendered unquantized
_DECIMAL = {"max_digits": None, "decimal_places": None, "read_only": True}


class AddressSerializer(serializers.Serializer):
    """Destination or origin address."""

    country = serializers.CharField()
    state = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    city = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    postal_code = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    address_lines = serializers.ListField(
        child=serializers.CharField(), required=False, default=list
    )


def _address(data: dict[str, Any] | None) -> Address | None:
    return Address.from_mapping(data) if data else None


# Tax


class TaxCalculationInputSerializer(serializers.Serializer):
    """Input for a destination-based tax calculation."""

    country_code = serializers.CharField()
    subdivision_code = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    amount = serializers.DecimalField(max_digits=14, decimal_places=4)
    product_id = serializers.CharField(required=False, allow_null=True)
    product_type = serializers.CharField(required=False, allow_null=True)
    shipping_address = AddressSerializer(required=False, allow_null=True)

    def shipping_address_value(self) -> Address | None:
        return _address(self.validated_data.get("shipping_address"))


class RegionTaxInputSerializer(serializers.Serializer):
    """Input for a tax calculation against a known region."""

    amount = serializers.DecimalField(max_digits=14, decimal_places=4)
    product_id = serializers.CharField(required=False, allow_null=True)
    product_type = serializers.CharField(required=False, allow_null=True)


class TaxRegionLookupSerializer(serializers.Serializer):
    """Query parameters for region lookups."""

    country_code = serializers.CharField(max_length=2)
    subdivision_code = serializers.CharField(required=False, allow_blank=True)


class TaxBreakdownEntrySerializer(serializers.Serializer):
    """One contribution to a tax rate."""

    name = serializers.CharField(read_only=True)
    rate = serializers.DecimalField(**_DECIMAL)
    amount = serializers.DecimalField(**_DECIMAL)
    source = serializers.CharField(source="source.value", read_only=True)


class TaxCalculationResultSerializer(serializers.Serializer):
    """Tax calculation outcome."""

    region_id = serializers.CharField(read_only=True)
    region_name = serializers.CharField(read_only=True)
    tax_rate = serializers.DecimalField(**_DECIMAL)
    tax_rate_percentage = serializers.DecimalField(**_DECIMAL)
    tax_amount = serializers.DecimalField(**_DECIMAL)
    total_amount = serializers.DecimalField(**_DECIMAL)
    breakdown = TaxBreakdownEntrySerializer(many=True, read_only=True)


class TaxOverrideSerializer(serializers.Serializer):
    """A product or product-type override on a region."""

    id = serializers.CharField(read_only=True, allow_null=True)
    name = serializers.CharField(read_only=True)
    rate = serializers.DecimalField(**_DECIMAL)
    code = serializers.CharField(read_only=True, allow_null=True)
    combinable = serializers.BooleanField(read_only=True)
    targets = serializers.SerializerMethodField()

    def get_targets(self, obj: Any) -> list[dict[str, str]]:
        return [{"type": t.type.value, "target_id": t.target_id} for t in obj.targets]


class TaxRegionSerializer(serializers.Serializer):
    """Tax region as resolved by the engine."""

    id = serializers.CharField(read_only=True)
    name = serializers.CharField(read_only=True)
    country_code = serializers.CharField(read_only=True)
    subdivision_code = serializers.CharField(read_only=True, allow_null=True)
    status = serializers.CharField(source="status.value", read_only=True)
    is_default = serializers.BooleanField(read_only=True)
    parent_region_id = serializers.CharField(read_only=True, allow_null=True)
    default_tax_rate_name = serializers.CharField(read_only=True, allow_null=True)
    default_tax_rate = serializers.DecimalField(**_DECIMAL, allow_null=True)
    default_tax_code = serializers.CharField(read_only=True, allow_null=True)
    default_combinable_with_parent = serializers.BooleanField(read_only=True)
    tax_overrides = TaxOverrideSerializer(many=True, read_only=True)


# Shipping


class CartItemSerializer(serializers.Serializer):
    """A cart line used for weight derivation."""

    product_id = serializers.CharField()
    quantity = serializers.IntegerField(min_value=1, default=1)
    weight = serializers.DecimalField(
        max_digits=10, decimal_places=3, required=False, allow_null=True, min_value=0
    )


class ShippingRateInputSerializer(serializers.Serializer):
    """Input for a shipping rate calculation."""

    shipping_address = AddressSerializer()
    items = CartItemSerializer(many=True, allow_empty=True)
    subtotal = serializers.DecimalField(max_digits=14, decimal_places=2)
    weight = serializers.DecimalField(
        max_digits=10, decimal_places=3, required=False, allow_null=True
    )

    def cart_items(self) -> list[CartItem]:
        return [
            CartItem(
                product_id=item["product_id"],
                quantity=item["quantity"],
                weight=item.get("weight"),
            )
            for item in self.validated_data["items"]
        ]


class CoverageInputSerializer(serializers.Serializer):
    """Input for a coverage check."""

    shipping_address = AddressSerializer()


class PackageSerializer(serializers.Serializer):
    """A parcel in a carrier rate request."""

    weight = serializers.DecimalField(max_digits=10, decimal_places=3, min_value=0)
    weight_unit = serializers.ChoiceField(choices=["LB", "KG"], default="LB")
    length = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, allow_null=True
    )
    width = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, allow_null=True
    )
    height = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, allow_null=True
    )
    dimension_unit = serializers.ChoiceField(choices=["IN", "CM"], default="IN")

    def validate_weight(self, value: Any) -> Any:
        """Reject zero-weight parcels."""
        if value <= 0:
            msg = "Package weight must be positive"
            raise serializers.ValidationError(msg)
        return value


class CarrierRateInputSerializer(serializers.Serializer):
    """Input for a real-time carrier quote."""

    to_address = AddressSerializer()
    from_address = AddressSerializer(required=False, allow_null=True)
    packages = PackageSerializer(many=True, allow_empty=False)
    services = serializers.ListField(child=serializers.CharField(), required=False, default=list)

    def packages_value(self) -> list[Package]:
        return [Package(**package) for package in self.validated_data["packages"]]

    def from_address_value(self) -> Address | None:
        return _address(self.validated_data.get("from_address"))


# Orders


class OrderTaxInputSerializer(serializers.Serializer):
    """Options for an order tax calculation."""

    item_level = serializers.BooleanField(default=False)


class TaxExemptionInputSerializer(serializers.Serializer):
    """Input for applying a tax exemption."""

    reason = serializers.CharField(max_length=255)


class OrderTaxSerializer(serializers.Serializer):
    """Order totals after a tax operation."""

    id = serializers.CharField(read_only=True)
    order_number = serializers.CharField(read_only=True)
    subtotal = serializers.DecimalField(**_DECIMAL)
    tax_amount = serializers.DecimalField(**_DECIMAL)
    shipping_amount = serializers.DecimalField(**_DECIMAL)
    discount_amount = serializers.DecimalField(**_DECIMAL)
    total = serializers.DecimalField(**_DECIMAL)
    currency = serializers.CharField(read_only=True)
    tax_region_id = serializers.CharField(read_only=True, allow_null=True)
    tax_exempt = serializers.BooleanField(read_only=True)
    tax_exempt_reason = serializers.CharField(read_only=True, allow_null=True)
    tax_breakdown = TaxBreakdownEntrySerializer(many=True, read_only=True)


class ErrorSerializer(serializers.Serializer):
    """Error payload."""

    error = serializers.CharField()
    code = serializers.CharField(required=False)
    details = serializers.CharField(required=False, allow_null=True)
