"""
Test settings for ecommerce_backoffice project.

These settings are used during test execution.
"""

from .base import *

# Use a simple secret key for tests
SECRET_KEY = "test-secret-key-not-for-production"  # noqa: S105

DEBUG = False

ALLOWED_HOSTS = ["testserver", "localhost"]

# Use SQLite for faster tests
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

# In-memory cache so quote caching can be exercised
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "backoffice-test",
    }
}

# Password hashers (faster for tests)
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

# Disable logging during tests
LOGGING = {
    "version": 1,
    "disable_existing_loggers": True,
    "handlers": {
        "null": {
            "class": "logging.NullHandler",
        },
    },
    "root": {
        "handlers": ["null"],
        "level": "DEBUG",
    },
}
