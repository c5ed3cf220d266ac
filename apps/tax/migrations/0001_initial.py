import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="TaxRegion",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("name", models.CharField(max_length=255)),
                ("country_code", models.CharField(db_index=True, max_length=2)),
                (
                    "subdivision_code",
                    models.CharField(
                        blank=True,
                        help_text="ISO 3166-2 code, e.g. US-CA (subregions only)",
                        max_length=10,
                        null=True,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("inactive", "Inactive")],
                        default="active",
                        max_length=10,
                    ),
                ),
                ("is_default", models.BooleanField(default=False)),
                (
                    "default_tax_rate_name",
                    models.CharField(blank=True, default="", max_length=255),
                ),
                (
                    "default_tax_rate",
                    models.DecimalField(
                        blank=True,
                        decimal_places=6,
                        help_text="Fraction, e.g. 0.0725 for 7.25%",
                        max_digits=7,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0")),
                            django.core.validators.MaxValueValidator(Decimal("1")),
                        ],
                    ),
                ),
                ("default_tax_code", models.CharField(blank=True, default="", max_length=50)),
                (
                    "default_combinable_with_parent",
                    models.BooleanField(
                        default=False,
                        help_text="Add the parent region's rate on top of this region's rate",
                    ),
                ),
                ("tax_overrides", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "parent_region",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="subregions",
                        to="tax.taxregion",
                    ),
                ),
            ],
            options={
                "verbose_name": "Tax region",
                "verbose_name_plural": "Tax regions",
                "db_table": "tax_regions",
                "ordering": ["country_code", "subdivision_code"],
            },
        ),
    ]
