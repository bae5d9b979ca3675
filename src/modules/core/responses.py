"""Uniform response envelope: ``{"success", "message", "data"}``."""

from __future__ import annotations

from typing import Any, Dict, Optional

from rest_framework import status as http_status
from rest_framework.response import Response


def envelope(
    success: bool, message: str, data: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    return {"success": success, "message": message, "data": data or {}}


def success_response(
    message: str,
    data: Optional[Dict[str, Any]] = None,
    status: int = http_status.HTTP_200_OK,
) -> Response:
    return Response(envelope(True, message, data), status=status)


def error_response(
    message: str,
    status: int,
    data: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> Response:
    return Response(envelope(False, message, data), status=status, headers=headers)
