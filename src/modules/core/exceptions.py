"""Single error boundary for the API.

Configured as DRF's ``EXCEPTION_HANDLER``.  Every exception escaping a
view ends up here and is rendered as the response envelope:

- ``DomainError`` subclasses use their own ``status_code``, message and
  ``data`` payload.
- DRF ``APIException`` subclasses (malformed JSON, 405, ...) keep DRF's
  status code and message.
- Anything else is an internal error: logged with its traceback and
  reported as a bare 500; details are exposed only when ``DEBUG`` is on.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.conf import settings
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response

from modules.core.responses import error_response
from shared.domain.exceptions import DomainError

logger = structlog.get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal Server Error"


def _api_exception_message(detail: Any) -> str:
    if isinstance(detail, dict):
        return "; ".join(
            f"{key}: {_api_exception_message(value)}" for key, value in detail.items()
        )
    if isinstance(detail, list):
        return ", ".join(_api_exception_message(item) for item in detail)
    return str(detail)


def envelope_exception_handler(
    exc: Exception, context: Dict[str, Any]
) -> Optional[Response]:
    view = context.get("view")
    view_name = type(view).__name__ if view is not None else None

    if isinstance(exc, DomainError):
        logger.info(
            "api.domain_error",
            error=type(exc).__name__,
            status_code=exc.status_code,
            view=view_name,
        )
        return error_response(exc.message, exc.status_code, exc.data)

    if isinstance(exc, Http404):
        exc = exceptions.NotFound()

    if isinstance(exc, exceptions.APIException):
        headers: Dict[str, str] = {}
        if getattr(exc, "auth_header", None):
            headers["WWW-Authenticate"] = exc.auth_header
        if getattr(exc, "wait", None):
            headers["Retry-After"] = str(int(exc.wait))
        logger.info(
            "api.request_error",
            error=type(exc).__name__,
            status_code=exc.status_code,
            view=view_name,
        )
        return error_response(
            _api_exception_message(exc.detail), exc.status_code, headers=headers
        )

    logger.exception("api.unhandled_error", error=type(exc).__name__, view=view_name)
    data: Dict[str, Any] = {}
    if settings.DEBUG:
        data = {"error": type(exc).__name__, "detail": str(exc)}
    return error_response(
        INTERNAL_ERROR_MESSAGE, status.HTTP_500_INTERNAL_SERVER_ERROR, data
    )
