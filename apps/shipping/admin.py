"""Admin configuration for shipping app."""

from django.contrib import admin

from .models import ShippingProvider, ShippingRate, ShippingZone


class ShippingRateInline(admin.TabularInline):
    """Inline admin for rates in a zone."""

    model = ShippingRate
    extra = 0
    fields = ("name", "type", "flat_rate", "free_shipping_threshold", "is_active", "priority")


@admin.register(ShippingZone)
class ShippingZoneAdmin(admin.ModelAdmin):
    """Admin configuration for ShippingZone model."""

    list_display = ("name", "countries", "priority", "is_active", "updated_at")
    list_filter = ("is_active",)
    search_fields = ("name", "description")
    readonly_fields = ("id", "created_at", "updated_at")
    inlines = [ShippingRateInline]


@admin.register(ShippingRate)
class ShippingRateAdmin(admin.ModelAdmin):
    """Admin configuration for ShippingRate model."""

    list_display = ("name", "shipping_zone", "type", "priority", "is_active")
    list_filter = ("type", "is_active")
    search_fields = ("name", "shipping_zone__name")
    readonly_fields = ("id", "created_at", "updated_at")


@admin.register(ShippingProvider)
class ShippingProviderAdmin(admin.ModelAdmin):
    """Admin configuration for ShippingProvider model."""

    list_display = ("name", "type", "is_active", "is_test_mode")
    list_filter = ("type", "is_active", "is_test_mode")
    search_fields = ("name",)
    readonly_fields = ("id", "created_at", "updated_at")
