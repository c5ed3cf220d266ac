"""Admin configuration for tax app."""

from django.contrib import admin

from .models import TaxRegion


@admin.register(TaxRegion)
class TaxRegionAdmin(admin.ModelAdmin):
    """Admin configuration for TaxRegion."""

    list_display = (
        "name",
        "country_code",
        "subdivision_code",
        "status",
        "is_default",
        "default_tax_rate",
        "override_count",
    )
    list_filter = ("status", "is_default", "country_code")
    search_fields = ("name", "country_code", "subdivision_code")
    readonly_fields = ("id", "created_at", "updated_at")
    raw_id_fields = ("parent_region",)

    def override_count(self, obj: TaxRegion) -> int:
        """Return number of stored overrides."""
        return len(obj.tax_overrides or [])

    override_count.short_description = "Overrides"  # type: ignore[attr-defined]
