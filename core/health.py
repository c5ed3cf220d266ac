"""Health check endpoint for monitoring."""

from django.core.cache import cache
from django.db import connection
from django.http import JsonResponse

CACHE_PROBE_KEY = "health:probe"


def health_check(_request: object) -> JsonResponse:
    """
    Health check endpoint.

    Reports database and cache connectivity.

    Args:
        _request: Django HTTP request object (unused but required by Django).

    Returns:
        JsonResponse with health status; 503 when any check fails.
    """
    checks: dict[str, dict[str, str]] = {
        "database": _check_database(),
        "cache": _check_cache(),
    }

    all_healthy = all(check.get("status") == "healthy" for check in checks.values())

    health_status = {
        "status": "healthy" if all_healthy else "degraded",
        "checks": checks,
    }

    return JsonResponse(
        health_status,
        status=200 if all_healthy else 503,
    )


def _check_database() -> dict[str, str]:
    """Check database connectivity."""
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        return {"status": "healthy"}
    except Exception as e:
        return {"status": "unhealthy", "error": str(e)}


def _check_cache() -> dict[str, str]:
    """Check that the cache accepts a write and returns it."""
    try:
        cache.set(CACHE_PROBE_KEY, "ok", 10)
        if cache.get(CACHE_PROBE_KEY) != "ok":
            return {"status": "unhealthy", "error": "Cache did not return the probe value"}
        return {"status": "healthy"}
    except Exception as e:
        return {"status": "unhealthy", "error": str(e)}
