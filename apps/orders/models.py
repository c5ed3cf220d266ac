"""Models for the orders application."""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.db import models

from services.locations import Address
from services.orders.types import OrderLine, OrderRecord
from services.tax.types import TaxBreakdownEntry, TaxSource


class Order(models.Model):
    """
    A customer order with its tax state.

    ``tax_breakdown`` stores the entries of the last tax calculation;
    ``shipping_address`` keeps the storefront shape (province, zip, ...).
    """

    class Status(models.TextChoices):
        """Order lifecycle status."""

        PENDING = "pending", "Pending"
        CONFIRMED = "confirmed", "Confirmed"
        SHIPPED = "shipped", "Shipped"
        DELIVERED = "delivered", "Delivered"
        CANCELLED = "cancelled", "Cancelled"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_number = models.CharField(max_length=50, unique=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    tax_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    shipping_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    discount_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    currency = models.CharField(max_length=3, default="USD")
    shipping_address = models.JSONField(null=True, blank=True)
    tax_region = models.ForeignKey(
        "tax.TaxRegion",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="orders",
    )
    tax_breakdown = models.JSONField(default=list, blank=True)
    tax_exempt = models.BooleanField(default=False)
    tax_exempt_reason = models.CharField(max_length=255, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Meta options for Order model."""

        db_table = "orders"
        ordering = ["-created_at"]
        verbose_name = "Order"
        verbose_name_plural = "Orders"

    def __str__(self) -> str:
        """Return string representation of the order."""
        return self.order_number

    def to_record(self, items: list[OrderItem]) -> OrderRecord:
        """Return the tax-relevant view of the order."""
        return OrderRecord(
            id=str(self.id),
            order_number=self.order_number,
            subtotal=self.subtotal,
            shipping_amount=self.shipping_amount,
            discount_amount=self.discount_amount,
            tax_amount=self.tax_amount,
            total=self.total,
            currency=self.currency,
            shipping_address=(
                Address.from_mapping(self.shipping_address) if self.shipping_address else None
            ),
            tax_region_id=str(self.tax_region_id) if self.tax_region_id else None,
            tax_breakdown=tuple(
                TaxBreakdownEntry(
                    name=entry["name"],
                    rate=Decimal(entry["rate"]),
                    amount=Decimal(entry["amount"]),
                    source=TaxSource(entry["source"]),
                )
                for entry in self.tax_breakdown or []
            ),
            tax_exempt=self.tax_exempt,
            tax_exempt_reason=self.tax_exempt_reason or None,
            items=tuple(item.to_line() for item in items),
        )


class OrderItem(models.Model):
    """A line of an order."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    product_id = models.CharField(max_length=100, blank=True, default="")
    product_type = models.CharField(max_length=100, blank=True, default="")
    product_title = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    total = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        """Meta options for OrderItem model."""

        db_table = "order_items"
        ordering = ["product_title"]
        verbose_name = "Order item"
        verbose_name_plural = "Order items"

    def __str__(self) -> str:
        """Return string representation of the item."""
        return f"{self.quantity} x {self.product_title}"

    def to_line(self) -> OrderLine:
        return OrderLine(
            id=str(self.id),
            title=self.product_title,
            total=self.total,
            product_id=self.product_id or None,
            product_type=self.product_type or None,
        )
