import time
from typing import Any, Dict

import structlog
from django.db import DatabaseError, connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework.decorators import api_view

from modules.core.exceptions import INTERNAL_ERROR_MESSAGE
from modules.core.responses import envelope

logger = structlog.get_logger()


@extend_schema(responses={200: OpenApiTypes.OBJECT, 503: OpenApiTypes.OBJECT})
@api_view(["GET"])
def health_check(request: HttpRequest) -> JsonResponse:
    """GET only; other methods get an enveloped 405 from DRF."""
    services: Dict[str, Dict[str, Any]] = {}
    healthy = True

    try:
        start = time.monotonic()
        conn = connections["default"]
        conn.ensure_connection()
        with conn.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        services["database"] = {
            "status": "up",
            "response_time_ms": round((time.monotonic() - start) * 1000, 2),
        }
    except DatabaseError:
        services["database"] = {"status": "down"}
        healthy = False
        logger.error("health_check_db_failure")

    logger.info("health_check_completed", status="healthy" if healthy else "unhealthy")

    message = (
        "API is running and healthy"
        if healthy
        else "API is running but DB disconnected"
    )
    return JsonResponse(
        envelope(
            healthy,
            message,
            {
                "status": "healthy" if healthy else "unhealthy",
                "timestamp": timezone.now().isoformat(),
                "services": services,
            },
        ),
        status=200 if healthy else 503,
    )


def not_found(request: HttpRequest, exception: Exception) -> JsonResponse:
    """``handler404``: unmatched routes get the envelope too."""
    return JsonResponse(
        envelope(False, f"Not Found - {request.path}"),
        status=404,
    )


def server_error(request: HttpRequest) -> JsonResponse:
    """``handler500`` for errors raised outside DRF views."""
    return JsonResponse(envelope(False, INTERNAL_ERROR_MESSAGE), status=500)
