"""
Pytest configuration and fixtures for the test suite.

This module contains shared fixtures used across all tests.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

import pytest
from rest_framework.test import APIClient

from services.tax.types import RegionStatus, TaxOverride, TaxRegion, parse_target
from tests.fakes import InMemoryTaxRegionStore

if TYPE_CHECKING:
    from django.contrib.auth.models import User


@pytest.fixture()
def us_region() -> TaxRegion:
    """Country-level default region for the US with a zero rate."""
    return TaxRegion(
        id="region-us",
        name="United States",
        country_code="US",
        is_default=True,
        default_tax_rate=Decimal("0.00"),
    )


@pytest.fixture()
def ca_region() -> TaxRegion:
    """California subregion combinable with the US, with a digital override."""
    return TaxRegion(
        id="region-us-ca",
        name="California",
        country_code="US",
        subdivision_code="US-CA",
        parent_region_id="region-us",
        default_tax_rate_name="CA Sales Tax",
        default_tax_rate=Decimal("0.075"),
        default_combinable_with_parent=True,
        tax_overrides=(
            TaxOverride(
                id="ovr-digital",
                name="CA Digital Goods",
                rate=Decimal("0.05"),
                targets=(parse_target({"type": "product_type", "target_id": "digital"}),),
            ),
        ),
    )


@pytest.fixture()
def inactive_tx_region() -> TaxRegion:
    """Inactive Texas subregion."""
    return TaxRegion(
        id="region-us-tx",
        name="Texas",
        country_code="US",
        subdivision_code="US-TX",
        parent_region_id="region-us",
        status=RegionStatus.INACTIVE,
        default_tax_rate=Decimal("0.0625"),
    )


@pytest.fixture()
def tax_store(
    us_region: TaxRegion,
    ca_region: TaxRegion,
    inactive_tx_region: TaxRegion,
) -> InMemoryTaxRegionStore:
    """Store holding the US hierarchy."""
    return InMemoryTaxRegionStore([ca_region, inactive_tx_region, us_region])


@pytest.fixture()
def api_client() -> APIClient:
    """Create an API test client."""
    return APIClient()


@pytest.fixture()
def user(db: None) -> User:
    """Create a back-office user."""
    from django.contrib.auth import get_user_model

    return get_user_model().objects.create_user(
        username="operator",
        email="operator@example.com",
        password="testpass123",
    )


@pytest.fixture()
def authenticated_client(api_client: APIClient, user: User) -> APIClient:
    """Create an authenticated API client."""
    api_client.force_authenticate(user=user)
    return api_client
