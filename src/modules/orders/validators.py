"""Order payload validation.

Runs the input serializers and returns frozen DTOs.  All field errors are
collected before failing, unknown keys are dropped, and nothing here
touches the repository: uniqueness is the persistence layer's job.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Type

from rest_framework import serializers
from rest_framework.settings import api_settings

from modules.orders.dtos import CancelOrderDTO, CreateOrderDTO, UpdateOrderDTO
from modules.orders.exceptions import EmptyUpdate, ValidationFailed
from modules.orders.serializers import (
    CancelOrderSerializer,
    CreateOrderSerializer,
    UpdateOrderSerializer,
)


def flatten_errors(detail: Any, prefix: str = "") -> List[Dict[str, str]]:
    """Flatten DRF's nested error detail into ``{"field", "message"}`` pairs."""
    if isinstance(detail, Mapping):
        errors: List[Dict[str, str]] = []
        for key, value in detail.items():
            field = prefix
            if key != api_settings.NON_FIELD_ERRORS_KEY:
                field = f"{prefix}.{key}" if prefix else str(key)
            errors.extend(flatten_errors(value, field))
        return errors
    if isinstance(detail, list):
        errors = []
        for item in detail:
            errors.extend(flatten_errors(item, prefix))
        return errors
    return [{"field": prefix or "body", "message": str(detail)}]


def _run(serializer_class: Type[serializers.Serializer], payload: Any) -> Dict[str, Any]:
    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise ValidationFailed(
            [{"field": "body", "message": "Request body must be a JSON object"}]
        )
    serializer = serializer_class(data=payload)
    if not serializer.is_valid():
        raise ValidationFailed(flatten_errors(serializer.errors))
    return dict(serializer.validated_data)


def validate_create(payload: Any) -> CreateOrderDTO:
    """Validate a create payload.

    Raises:
        ValidationFailed: one entry per invalid field.
    """
    data = _run(CreateOrderSerializer, payload)
    data["notes"] = data.get("notes") or ""
    return CreateOrderDTO(**data)


def validate_update(payload: Any) -> UpdateOrderDTO:
    """Validate a PATCH/PUT payload.

    Raises:
        ValidationFailed: one entry per invalid field.
        EmptyUpdate: no updatable field was provided.
    """
    data = _run(UpdateOrderSerializer, payload)
    if not set(data) - {"version"}:
        raise EmptyUpdate()
    return UpdateOrderDTO(**data)


def validate_cancel(payload: Any) -> CancelOrderDTO:
    """Validate a cancel body (``reason`` is optional)."""
    return CancelOrderDTO(**_run(CancelOrderSerializer, payload))
