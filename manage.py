#!/usr/bin/env python
"""Django's command-line utility for administrative tasks."""

import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root before settings are read
env_path = Path(__file__).resolve().parent / ".env"
load_dotenv(env_path)

from django.core.management import execute_from_command_line

SETTINGS_MODULES = {
    "development": "core.settings.development",
    "production": "core.settings.production",
    "test": "core.settings.test",
}


def main() -> None:
    """Run administrative tasks."""
    environment = os.environ.get("ENVIRONMENT", "development")
    os.environ.setdefault(
        "DJANGO_SETTINGS_MODULE",
        SETTINGS_MODULES.get(environment, SETTINGS_MODULES["development"]),
    )
    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
