import time
import uuid
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

REQUEST_ID_HEADER = "X-Request-ID"

logger = structlog.get_logger(__name__)


class CorrelationIdMiddleware:
    """Tag each request with a correlation id and time it.

    The id comes from the ``X-Request-ID`` request header (a UUID4 is
    generated when it is missing) and is bound to structlog's contextvars
    as ``correlation_id`` for the lifetime of the request.  The response
    echoes it back in the same header.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = request.META.get("HTTP_X_REQUEST_ID") or str(uuid.uuid4())

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            correlation_id=cid, method=request.method, path=request.path
        )

        start = time.monotonic()
        logger.info("request_started")
        try:
            response = self.get_response(request)
        finally:
            elapsed_ms = round((time.monotonic() - start) * 1000, 2)

        logger.info(
            "request_finished",
            status_code=response.status_code,
            duration_ms=elapsed_ms,
        )
        response[REQUEST_ID_HEADER] = cid
        return response
