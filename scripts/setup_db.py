#!/usr/bin/env python
"""
Database setup script.

Creates the PostgreSQL schema, runs migrations and seeds a starter set of
tax regions and shipping zones.

Usage:
    cd /path/to/ecommerce_backoffice
    python scripts/setup_db.py [--force-recreate] [--skip-seed]
"""

import argparse
import os
import sys
from decimal import Decimal
from pathlib import Path

from dotenv import load_dotenv

# Add project root to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))


def create_schema_raw(force_recreate: bool = False) -> None:
    """
    Create the application schema using a raw psycopg connection.

    This runs BEFORE Django is initialized to avoid search_path issues.
    """
    import psycopg

    from core.config import get_settings

    database = get_settings().database
    schema_name = os.environ.get("DB_SCHEMA", "backoffice")

    print(f"Setting up schema '{schema_name}' on {database.safe_url}...")

    with psycopg.connect(database.connection_url) as conn:
        conn.autocommit = True
        with conn.cursor() as cursor:
            cursor.execute(
                "SELECT schema_name FROM information_schema.schemata WHERE schema_name = %s",
                (schema_name,),
            )
            exists = cursor.fetchone() is not None

            if exists and force_recreate:
                print(f"Dropping existing schema '{schema_name}'...")
                cursor.execute(f'DROP SCHEMA "{schema_name}" CASCADE')
                exists = False

            if not exists:
                cursor.execute(f'CREATE SCHEMA "{schema_name}"')
                print(f"Schema '{schema_name}' created successfully.")
            else:
                print(f"Schema '{schema_name}' already exists.")


def setup_django() -> None:
    """Setup Django."""
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "core.settings.development")

    import django

    django.setup()


def run_migrations() -> None:
    """Run Django migrations."""
    from django.core.management import call_command

    print("\nRunning migrations...")
    call_command("migrate", verbosity=1)
    print("Migrations completed.")


def seed_tax_regions() -> None:
    """Create a US default region with a California subregion."""
    from apps.tax.models import TaxRegion

    if TaxRegion.objects.filter(country_code="US").exists():
        print("\nUS tax regions already present.")
        return

    print("\nSeeding tax regions...")
    us = TaxRegion.objects.create(
        name="United States",
        country_code="US",
        is_default=True,
        default_tax_rate_name="Federal",
        default_tax_rate=Decimal("0"),
    )
    california = TaxRegion(
        name="California",
        country_code="US",
        subdivision_code="US-CA",
        parent_region=us,
        default_tax_rate_name="CA Sales Tax",
        default_tax_rate=Decimal("0.0725"),
    )
    california.add_tax_override(
        {
            "name": "CA Digital Goods",
            "rate": "0",
            "targets": [{"type": "product_type", "target_id": "digital"}],
        }
    )
    california.full_clean()
    california.save()
    print("Tax regions seeded.")


def seed_shipping() -> None:
    """Create a domestic zone with standard and free shipping rates."""
    from apps.shipping.models import ShippingRate, ShippingZone

    if ShippingZone.objects.exists():
        print("\nShipping zones already present.")
        return

    print("\nSeeding shipping zones...")
    zone = ShippingZone.objects.create(name="Domestic", countries=["US"], priority=10)
    ShippingRate.objects.create(
        name="Standard",
        shipping_zone=zone,
        type=ShippingRate.Type.FLAT_RATE,
        flat_rate=Decimal("7.99"),
        free_shipping_threshold=Decimal("75.00"),
        min_delivery_days=3,
        max_delivery_days=5,
    )
    ShippingRate.objects.create(
        name="Express",
        shipping_zone=zone,
        type=ShippingRate.Type.WEIGHT_BASED,
        weight_rate=Decimal("2.50"),
        max_weight=Decimal("50"),
        min_delivery_days=1,
        max_delivery_days=2,
    )
    print("Shipping zones seeded.")


def create_superuser() -> None:
    """Create an admin user from ADMIN_USERNAME/ADMIN_PASSWORD if both are set."""
    from django.contrib.auth import get_user_model

    username = os.environ.get("ADMIN_USERNAME")
    password = os.environ.get("ADMIN_PASSWORD")
    if not username or not password:
        print("\nADMIN_USERNAME/ADMIN_PASSWORD not set, skipping admin user.")
        return

    user_model = get_user_model()
    if user_model.objects.filter(username=username).exists():
        print(f"\nUser '{username}' already exists.")
        return

    user_model.objects.create_superuser(username=username, email="", password=password)
    print(f"\nAdmin user '{username}' created successfully.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Setup database")
    parser.add_argument(
        "--force-recreate",
        action="store_true",
        help="Drop and recreate schema (WARNING: destroys all data)",
    )
    parser.add_argument("--skip-seed", action="store_true", help="Do not seed starter data")
    args = parser.parse_args()

    load_dotenv(project_root / ".env")

    create_schema_raw(force_recreate=args.force_recreate)
    setup_django()
    run_migrations()

    if not args.skip_seed:
        seed_tax_regions()
        seed_shipping()

    create_superuser()

    print("\nDatabase setup complete!")
