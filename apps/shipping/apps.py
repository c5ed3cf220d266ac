"""Shipping app configuration."""

from django.apps import AppConfig


class ShippingConfig(AppConfig):
    """Configuration for the shipping application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.shipping"
    verbose_name = "Shipping"
