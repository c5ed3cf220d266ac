"""URL configuration for the API application."""

from django.urls import path

from apps.api.views import (
    CoverageView,
    OrderTaxExemptionView,
    OrderTaxSummaryView,
    OrderTaxView,
    ProviderConnectionTestView,
    ProviderRatesView,
    ShippingRatesView,
    TaxCalculateView,
    TaxRegionCalculateView,
    TaxRegionDefaultView,
    TaxRegionListView,
    TaxRegionLookupView,
)

app_name = "api"

urlpatterns = [
    # Tax
    path("tax/calculate/", TaxCalculateView.as_view(), name="tax-calculate"),
    path("tax/regions/", TaxRegionListView.as_view(), name="tax-region-list"),
    path("tax/regions/lookup/", TaxRegionLookupView.as_view(), name="tax-region-lookup"),
    path("tax/regions/default/", TaxRegionDefaultView.as_view(), name="tax-region-default"),
    path(
        "tax/regions/<str:region_id>/calculate/",
        TaxRegionCalculateView.as_view(),
        name="tax-region-calculate",
    ),
    # Shipping
    path("shipping/rates/calculate/", ShippingRatesView.as_view(), name="shipping-rates"),
    path(
        "shipping/zones/check-coverage/",
        CoverageView.as_view(),
        name="shipping-coverage",
    ),
    path(
        "shipping/providers/<str:provider_id>/test-connection/",
        ProviderConnectionTestView.as_view(),
        name="provider-test-connection",
    ),
    path(
        "shipping/providers/<str:provider_id>/rates/",
        ProviderRatesView.as_view(),
        name="provider-rates",
    ),
    # Orders
    path("orders/<str:order_id>/tax/", OrderTaxView.as_view(), name="order-tax"),
    path(
        "orders/<str:order_id>/tax-exemption/",
        OrderTaxExemptionView.as_view(),
        name="order-tax-exemption",
    ),
    path(
        "orders/<str:order_id>/tax-summary/",
        OrderTaxSummaryView.as_view(),
        name="order-tax-summary",
    ),
]
