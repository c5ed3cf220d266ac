"""Admin configuration for orders app."""

from django.contrib import admin

from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    """Inline admin for items in an order."""

    model = OrderItem
    extra = 0
    fields = ("product_title", "product_type", "quantity", "unit_price", "total")


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Admin configuration for Order model."""

    list_display = (
        "order_number",
        "status",
        "subtotal",
        "tax_amount",
        "total",
        "tax_exempt",
        "created_at",
    )
    list_filter = ("status", "tax_exempt", "created_at")
    search_fields = ("order_number",)
    readonly_fields = ("id", "tax_breakdown", "created_at", "updated_at")
    raw_id_fields = ("tax_region",)
    inlines = [OrderItemInline]
    date_hierarchy = "created_at"
