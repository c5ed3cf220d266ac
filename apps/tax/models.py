"""Models for the tax application."""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import Any

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from services.tax import types as domain

RATE_VALIDATORS = [MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("1"))]


class TaxRegion(models.Model):
    """
    A country or state/province with its tax rates.

    Country-level regions have no parent and no subdivision code;
    subregions have both. Overrides are stored as a JSON list in
    declaration order.
    """

    class Status(models.TextChoices):
        """Region lifecycle status."""

        ACTIVE = domain.RegionStatus.ACTIVE.value, "Active"
        INACTIVE = domain.RegionStatus.INACTIVE.value, "Inactive"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    country_code = models.CharField(max_length=2, db_index=True)
    subdivision_code = models.CharField(
        max_length=10,
        null=True,
        blank=True,
        help_text="ISO 3166-2 code, e.g. US-CA (subregions only)",
    )
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.ACTIVE)
    is_default = models.BooleanField(default=False)
    parent_region = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        on_delete=models.CASCADE,
        related_name="subregions",
    )
    default_tax_rate_name = models.CharField(max_length=255, blank=True, default="")
    default_tax_rate = models.DecimalField(
        max_digits=7,
        decimal_places=6,
        null=True,
        blank=True,
        validators=RATE_VALIDATORS,
        help_text="Fraction, e.g. 0.0725 for 7.25%",
    )
    default_tax_code = models.CharField(max_length=50, blank=True, default="")
    default_combinable_with_parent = models.BooleanField(
        default=False,
        help_text="Add the parent region's rate on top of this region's rate",
    )
    tax_overrides = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Meta options for TaxRegion."""

        db_table = "tax_regions"
        ordering = ["country_code", "subdivision_code"]
        verbose_name = "Tax region"
        verbose_name_plural = "Tax regions"

    def __str__(self) -> str:
        """Return string representation of the region."""
        return f"{self.name} ({self.subdivision_code or self.country_code})"

    def _normalize_codes(self) -> None:
        self.country_code = (self.country_code or "").strip().upper()
        if self.subdivision_code:
            self.subdivision_code = self.subdivision_code.strip().upper()

    def save(self, *args, **kwargs) -> None:
        """Upper-case the region codes before saving."""
        self._normalize_codes()
        super().save(*args, **kwargs)

    def clean(self) -> None:
        """Validate the parent and subdivision pairing and the stored overrides."""
        self._normalize_codes()
        if bool(self.subdivision_code) != (self.parent_region_id is not None):
            raise ValidationError(
                "Subdivision code must be set if and only if a parent region is set."
            )
        try:
            self.parsed_overrides()
        except (domain.TaxValidationError, KeyError, TypeError, ArithmeticError) as e:
            raise ValidationError({"tax_overrides": str(e)}) from e

    def parsed_overrides(self) -> tuple[domain.TaxOverride, ...]:
        """Return the stored overrides as domain objects."""
        return tuple(domain.TaxOverride.from_dict(item) for item in self.tax_overrides or [])

    def to_domain(self) -> domain.TaxRegion:
        """Return the region as an engine value."""
        return domain.TaxRegion(
            id=str(self.id),
            name=self.name,
            country_code=self.country_code,
            subdivision_code=self.subdivision_code or None,
            status=domain.RegionStatus(self.status),
            is_default=self.is_default,
            parent_region_id=str(self.parent_region_id) if self.parent_region_id else None,
            default_tax_rate_name=self.default_tax_rate_name or None,
            default_tax_rate=self.default_tax_rate,
            default_tax_code=self.default_tax_code or None,
            default_combinable_with_parent=self.default_combinable_with_parent,
            tax_overrides=self.parsed_overrides(),
        )

    def add_tax_override(self, data: dict[str, Any]) -> dict[str, Any]:
        """
        Validate and append an override. The caller saves the region.

        Returns:
            The stored override, with a generated id.

        Raises:
            TaxValidationError: If the override is malformed.
        """
        override_id = data.get("id") or str(uuid.uuid4())
        stored = domain.TaxOverride.from_dict({**data, "id": override_id}).to_dict()
        self.tax_overrides = [*(self.tax_overrides or []), stored]
        return stored

    def update_tax_override(self, override_id: str, data: dict[str, Any]) -> dict[str, Any] | None:
        """
        Replace the fields of an existing override, keeping its position.

        Returns:
            The updated override, or None if no override has ``override_id``.
        """
        overrides = list(self.tax_overrides or [])
        for index, item in enumerate(overrides):
            if item.get("id") == override_id:
                merged = {**item, **data, "id": override_id}
                stored = domain.TaxOverride.from_dict(merged).to_dict()
                overrides[index] = stored
                self.tax_overrides = overrides
                return stored
        return None

    def remove_tax_override(self, override_id: str) -> bool:
        """Drop an override; returns False if it was not present."""
        overrides = list(self.tax_overrides or [])
        kept = [item for item in overrides if item.get("id") != override_id]
        self.tax_overrides = kept
        return len(kept) != len(overrides)
