import logging

from django.core.cache import cache
from django.db import DatabaseError, connections
from drf_spectacular.utils import extend_schema
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

logger = logging.getLogger("shopcart.health")


def _check_database(alias: str = "default") -> bool:
    try:
        with connections[alias].cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
    except DatabaseError:
        logger.exception("health.database_unavailable", extra={"event": "health.database_unavailable"})
        return False
    return True


def _check_cache() -> bool:
    # Stock availability lives in the cache; a broken backend must show up here
    try:
        cache.set("health:ping", "pong", timeout=5)
        return cache.get("health:ping") == "pong"
    except Exception:
        logger.exception("health.cache_unavailable", extra={"event": "health.cache_unavailable"})
        return False


@extend_schema(tags=["Health Endpoint"], summary="Health check")
@api_view(["GET"])
@permission_classes([AllowAny])
@throttle_classes([])
def health(request):
    checks = {"database": _check_database(), "cache": _check_cache()}
    healthy = all(checks.values())
    return Response({"status": "ok" if healthy else "degraded", "checks": checks}, status=200 if healthy else 503)
