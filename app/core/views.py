"""
Infrastructure views.

Only the health probe lives here; domain endpoints are in each app.
"""

import logging

from django.core.cache import cache
from django.db import DatabaseError, connection
from django.http import JsonResponse

logger = logging.getLogger(__name__)


def health_check(request):
    """
    Health check endpoint for Docker, Kubernetes and load balancers.

    The database is the ledger store, so its absence makes the service
    unhealthy. The cache only backs throttling and is reported but never
    fails the probe.

    Returns:
        JsonResponse with:
        - status: "healthy" or "unhealthy"
        - database: "connected" or "disconnected"
        - cache: "connected" or "disconnected"

    HTTP Status Codes:
        200: Database reachable
        503: Database unreachable
    """
    health_status = {
        "status": "healthy",
        "database": "unknown",
        "cache": "unknown",
    }

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        health_status["database"] = "connected"
    except DatabaseError:
        logger.error("Health check could not reach the database", exc_info=True)
        health_status["database"] = "disconnected"
        health_status["status"] = "unhealthy"

    try:
        cache.set("health_check", "ok", timeout=1)
        health_status["cache"] = (
            "connected" if cache.get("health_check") == "ok" else "disconnected"
        )
    except Exception:
        logger.warning("Health check could not reach the cache", exc_info=True)
        health_status["cache"] = "disconnected"

    status_code = 200 if health_status["status"] == "healthy" else 503
    return JsonResponse(health_status, status=status_code)
