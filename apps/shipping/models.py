"""Models for the shipping application."""

from __future__ import annotations

import uuid

from django.core.validators import MinValueValidator
from django.db import models

from services.shipping import types as domain

CREDENTIAL_FIELDS = (
    "api_key",
    "api_secret",
    "account_number",
    "meter_number",
    "user_id",
    "password",
)


class ShippingZone(models.Model):
    """
    A geographic area rates are attached to.

    Empty ``states``, ``cities`` and ``postal_codes`` lists match any value.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    countries = models.JSONField(default=list, help_text="ISO country codes, e.g. [\"US\", \"CA\"]")
    states = models.JSONField(default=list, blank=True)
    cities = models.JSONField(default=list, blank=True)
    postal_codes = models.JSONField(
        default=list,
        blank=True,
        help_text="Postal code prefixes; \"*\" matches any code",
    )
    is_active = models.BooleanField(default=True)
    priority = models.IntegerField(default=0, help_text="Higher priority zones are listed first")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Meta options for ShippingZone model."""

        db_table = "shipping_zones"
        ordering = ["-priority", "name"]
        verbose_name = "Shipping zone"
        verbose_name_plural = "Shipping zones"

    def __str__(self) -> str:
        """Return string representation of the zone."""
        return self.name

    def save(self, *args, **kwargs) -> None:
        """Upper-case country and state codes before saving."""
        self.countries = [str(c).strip().upper() for c in self.countries or []]
        self.states = [str(s).strip().upper() for s in self.states or []]
        super().save(*args, **kwargs)

    def to_domain(self) -> domain.ShippingZone:
        """Return the zone as an engine value."""
        return domain.ShippingZone(
            id=str(self.id),
            name=self.name,
            countries=tuple(self.countries or ()),
            states=tuple(self.states or ()),
            cities=tuple(self.cities or ()),
            postal_codes=tuple(self.postal_codes or ()),
            is_active=self.is_active,
            priority=self.priority,
            description=self.description,
        )


class ShippingProvider(models.Model):
    """A carrier account used for real-time quotes."""

    class Type(models.TextChoices):
        """Carrier behind the account."""

        UPS = "ups", "UPS"
        FEDEX = "fedex", "FedEx"
        USPS = "usps", "USPS"
        DHL = "dhl", "DHL"
        CUSTOM = "custom", "Custom"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    type = models.CharField(max_length=20, choices=Type.choices)
    description = models.TextField(blank=True, default="")
    is_active = models.BooleanField(default=True)
    is_test_mode = models.BooleanField(default=True, help_text="Use the carrier sandbox")
    api_key = models.CharField(max_length=255, blank=True, default="")
    api_secret = models.CharField(max_length=255, blank=True, default="")
    account_number = models.CharField(max_length=100, blank=True, default="")
    meter_number = models.CharField(max_length=100, blank=True, default="", help_text="FedEx")
    user_id = models.CharField(max_length=100, blank=True, default="", help_text="UPS")
    password = models.CharField(max_length=255, blank=True, default="", help_text="UPS")
    supported_services = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Meta options for ShippingProvider model."""

        db_table = "shipping_providers"
        ordering = ["name"]
        verbose_name = "Shipping provider"
        verbose_name_plural = "Shipping providers"

    def __str__(self) -> str:
        """Return string representation of the provider."""
        return f"{self.name} ({self.get_type_display()})"

    def credentials(self) -> dict[str, str]:
        """Return the non-empty credential fields."""
        return {name: getattr(self, name) for name in CREDENTIAL_FIELDS if getattr(self, name)}

    def to_domain(self) -> domain.ShippingProviderConfig:
        """Return the provider as an engine value."""
        return domain.ShippingProviderConfig(
            id=str(self.id),
            name=self.name,
            type=self.type,
            credentials=self.credentials(),
            is_active=self.is_active,
            is_test_mode=self.is_test_mode,
        )


class ShippingRate(models.Model):
    """
    A priced shipping option inside a zone.

    Only the fields of the selected ``type`` are used; ``price_rate`` is a
    percentage of the subtotal.
    """

    class Type(models.TextChoices):
        """Pricing strategy."""

        FLAT_RATE = domain.ShippingRateType.FLAT_RATE.value, "Flat rate"
        WEIGHT_BASED = domain.ShippingRateType.WEIGHT_BASED.value, "Weight based"
        PRICE_BASED = domain.ShippingRateType.PRICE_BASED.value, "Price based"
        FREE = domain.ShippingRateType.FREE.value, "Free"
        CALCULATED = domain.ShippingRateType.CALCULATED.value, "Carrier calculated"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    type = models.CharField(max_length=20, choices=Type.choices, default=Type.FLAT_RATE)
    shipping_zone = models.ForeignKey(
        ShippingZone,
        on_delete=models.CASCADE,
        related_name="rates",
    )
    shipping_provider = models.ForeignKey(
        ShippingProvider,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="rates",
    )
    flat_rate = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True, validators=[MinValueValidator(0)]
    )
    weight_rate = models.DecimalField(
        max_digits=10, decimal_places=4, null=True, blank=True, validators=[MinValueValidator(0)]
    )
    min_weight = models.DecimalField(max_digits=10, decimal_places=3, null=True, blank=True)
    max_weight = models.DecimalField(max_digits=10, decimal_places=3, null=True, blank=True)
    price_rate = models.DecimalField(
        max_digits=6,
        decimal_places=3,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
        help_text="Percentage of the subtotal",
    )
    min_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    max_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    free_shipping_threshold = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True
    )
    min_delivery_days = models.PositiveIntegerField(null=True, blank=True)
    max_delivery_days = models.PositiveIntegerField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    priority = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Meta options for ShippingRate model."""

        db_table = "shipping_rates"
        ordering = ["-priority", "name"]
        verbose_name = "Shipping rate"
        verbose_name_plural = "Shipping rates"

    def __str__(self) -> str:
        """Return string representation of the rate."""
        return f"{self.name} ({self.get_type_display()})"

    def to_domain(self) -> domain.ShippingRate:
        """Return the rate as an engine value."""
        return domain.ShippingRate(
            id=str(self.id),
            name=self.name,
            shipping_zone_id=str(self.shipping_zone_id),
            type=domain.ShippingRateType(self.type),
            shipping_provider_id=(
                str(self.shipping_provider_id) if self.shipping_provider_id else None
            ),
            description=self.description,
            flat_rate=self.flat_rate,
            weight_rate=self.weight_rate,
            min_weight=self.min_weight,
            max_weight=self.max_weight,
            price_rate=self.price_rate,
            min_price=self.min_price,
            max_price=self.max_price,
            free_shipping_threshold=self.free_shipping_threshold,
            min_delivery_days=self.min_delivery_days,
            max_delivery_days=self.max_delivery_days,
            is_active=self.is_active,
            priority=self.priority,
        )
