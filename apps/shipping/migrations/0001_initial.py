import uuid

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ShippingZone",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                (
                    "countries",
                    models.JSONField(default=list, help_text='ISO country codes, e.g. ["US", "CA"]'),
                ),
                ("states", models.JSONField(blank=True, default=list)),
                ("cities", models.JSONField(blank=True, default=list)),
                (
                    "postal_codes",
                    models.JSONField(
                        blank=True,
                        default=list,
                        help_text='Postal code prefixes; "*" matches any code',
                    ),
                ),
                ("is_active", models.BooleanField(default=True)),
                (
                    "priority",
                    models.IntegerField(
                        default=0, help_text="Higher priority zones are listed first"
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Shipping zone",
                "verbose_name_plural": "Shipping zones",
                "db_table": "shipping_zones",
                "ordering": ["-priority", "name"],
            },
        ),
        migrations.CreateModel(
            name="ShippingProvider",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("name", models.CharField(max_length=255)),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("ups", "UPS"),
                            ("fedex", "FedEx"),
                            ("usps", "USPS"),
                            ("dhl", "DHL"),
                            ("custom", "Custom"),
                        ],
                        max_length=20,
                    ),
                ),
                ("description", models.TextField(blank=True, default="")),
                ("is_active", models.BooleanField(default=True)),
                (
                    "is_test_mode",
                    models.BooleanField(default=True, help_text="Use the carrier sandbox"),
                ),
                ("api_key", models.CharField(blank=True, default="", max_length=255)),
                ("api_secret", models.CharField(blank=True, default="", max_length=255)),
                ("account_number", models.CharField(blank=True, default="", max_length=100)),
                (
                    "meter_number",
                    models.CharField(blank=True, default="", help_text="FedEx", max_length=100),
                ),
                (
                    "user_id",
                    models.CharField(blank=True, default="", help_text="UPS", max_length=100),
                ),
                (
                    "password",
                    models.CharField(blank=True, default="", help_text="UPS", max_length=255),
                ),
                ("supported_services", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Shipping provider",
                "verbose_name_plural": "Shipping providers",
                "db_table": "shipping_providers",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="ShippingRate",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("FLAT_RATE", "Flat rate"),
                            ("WEIGHT_BASED", "Weight based"),
                            ("PRICE_BASED", "Price based"),
                            ("FREE", "Free"),
                            ("CALCULATED", "Carrier calculated"),
                        ],
                        default="FLAT_RATE",
                        max_length=20,
                    ),
                ),
                (
                    "flat_rate",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        max_digits=10,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "weight_rate",
                    models.DecimalField(
                        blank=True,
                        decimal_places=4,
                        max_digits=10,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "min_weight",
                    models.DecimalField(blank=True, decimal_places=3, max_digits=10, null=True),
                ),
                (
                    "max_weight",
                    models.DecimalField(blank=True, decimal_places=3, max_digits=10, null=True),
                ),
                (
                    "price_rate",
                    models.DecimalField(
                        blank=True,
                        decimal_places=3,
                        help_text="Percentage of the subtotal",
                        max_digits=6,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "min_price",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True),
                ),
                (
                    "max_price",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True),
                ),
                (
                    "free_shipping_threshold",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True),
                ),
                ("min_delivery_days", models.PositiveIntegerField(blank=True, null=True)),
                ("max_delivery_days", models.PositiveIntegerField(blank=True, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("priority", models.IntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "shipping_provider",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="rates",
                        to="shipping.shippingprovider",
                    ),
                ),
                (
                    "shipping_zone",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="rates",
                        to="shipping.shippingzone",
                    ),
                ),
            ],
            options={
                "verbose_name": "Shipping rate",
                "verbose_name_plural": "Shipping rates",
                "db_table": "shipping_rates",
                "ordering": ["-priority", "name"],
            },
        ),
    ]
