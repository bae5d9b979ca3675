"""Order DRF serializers for API input/output.

Input serializers are the field-level validators behind
``modules.orders.validators``; they never touch the database.
Wire names are camelCase; ``source`` maps them to model attributes,
so ``validated_data`` is keyed by the snake_case attribute names.
Output serializers render ``Order`` instances.
"""

from __future__ import annotations

import re

from rest_framework import serializers

from modules.orders.constants import (
    CANCELLATION_REASON_MAX_LENGTH,
    CUSTOMER_NAME_MAX_LENGTH,
    CUSTOMER_NAME_MIN_LENGTH,
    NOTES_MAX_LENGTH,
    PHONE_MAX_LENGTH,
    PHONE_MIN_DIGITS,
    PRODUCT_MAX_LENGTH,
    PRODUCT_MIN_LENGTH,
    QUANTITY_MAX,
    QUANTITY_MIN,
    OrderStatus,
)
from modules.orders.models import Order

PHONE_ALLOWED = re.compile(r"^[\d\s\-+()]+$")
NON_DIGITS = re.compile(r"\D")


def validate_phone(value: str) -> str:
    if not PHONE_ALLOWED.match(value):
        raise serializers.ValidationError("Invalid phone number format")
    if len(NON_DIGITS.sub("", value)) < PHONE_MIN_DIGITS:
        raise serializers.ValidationError(
            f"Phone number must be at least {PHONE_MIN_DIGITS} digits"
        )
    return value


class StrictCharField(serializers.CharField):
    """``CharField`` that only accepts JSON strings.

    DRF's ``CharField`` coerces numbers with ``str()``; here they fail
    with the field's ``invalid`` message.
    """

    def to_internal_value(self, data):
        if not isinstance(data, str):
            self.fail("invalid")
        return super().to_internal_value(data)


# ---------------------------------------------------------------------------
# Field factories (shared by create and update)
# ---------------------------------------------------------------------------


def _customer_name_field(**kwargs) -> StrictCharField:
    return StrictCharField(
        source="customer_name",
        min_length=CUSTOMER_NAME_MIN_LENGTH,
        max_length=CUSTOMER_NAME_MAX_LENGTH,
        error_messages={
            "invalid": "Customer name must be a string",
            "required": "Customer name is required",
            "blank": "Customer name is required",
            "null": "Customer name is required",
            "min_length": (
                f"Customer name must be at least {CUSTOMER_NAME_MIN_LENGTH} characters"
            ),
            "max_length": (
                f"Customer name cannot exceed {CUSTOMER_NAME_MAX_LENGTH} characters"
            ),
        },
        **kwargs,
    )


def _phone_field(**kwargs) -> StrictCharField:
    return StrictCharField(
        max_length=PHONE_MAX_LENGTH,
        validators=[validate_phone],
        error_messages={
            "invalid": "Phone number must be a string",
            "required": "Phone number is required",
            "blank": "Phone number is required",
            "null": "Phone number is required",
            "max_length": (
                f"Phone number cannot exceed {PHONE_MAX_LENGTH} characters"
            ),
        },
        **kwargs,
    )


def _product_field(**kwargs) -> StrictCharField:
    return StrictCharField(
        min_length=PRODUCT_MIN_LENGTH,
        max_length=PRODUCT_MAX_LENGTH,
        error_messages={
            "invalid": "Product name must be a string",
            "required": "Product name is required",
            "blank": "Product name is required",
            "null": "Product name is required",
            "min_length": (
                f"Product name must be at least {PRODUCT_MIN_LENGTH} characters"
            ),
            "max_length": (
                f"Product name cannot exceed {PRODUCT_MAX_LENGTH} characters"
            ),
        },
        **kwargs,
    )


def _quantity_field(**kwargs) -> serializers.IntegerField:
    return serializers.IntegerField(
        min_value=QUANTITY_MIN,
        max_value=QUANTITY_MAX,
        error_messages={
            "invalid": "Quantity must be a whole number",
            "null": "Quantity must be a whole number",
            "min_value": f"Quantity must be at least {QUANTITY_MIN}",
            "max_value": f"Quantity cannot exceed {QUANTITY_MAX}",
        },
        **kwargs,
    )


def _notes_field() -> StrictCharField:
    return StrictCharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        max_length=NOTES_MAX_LENGTH,
        error_messages={
            "invalid": "Notes must be a string",
            "max_length": f"Notes cannot exceed {NOTES_MAX_LENGTH} characters",
        },
    )


def _reason_field(**kwargs) -> StrictCharField:
    return StrictCharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        max_length=CANCELLATION_REASON_MAX_LENGTH,
        error_messages={
            "invalid": "Cancellation reason must be a string",
            "max_length": (
                "Cancellation reason cannot exceed "
                f"{CANCELLATION_REASON_MAX_LENGTH} characters"
            ),
        },
        **kwargs,
    )


# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateOrderSerializer(serializers.Serializer):
    """Validates the order creation request payload."""

    customerName = _customer_name_field()
    phone = _phone_field()
    product = _product_field()
    quantity = _quantity_field(required=False, default=QUANTITY_MIN)
    notes = _notes_field()


class UpdateOrderSerializer(serializers.Serializer):
    """Validates PATCH/PUT payloads; every field is optional."""

    status = serializers.ChoiceField(
        choices=OrderStatus.choices,
        required=False,
        error_messages={
            "invalid_choice": "Invalid status value",
            "null": "Invalid status value",
        },
    )
    customerName = _customer_name_field(required=False)
    phone = _phone_field(required=False)
    product = _product_field(required=False)
    quantity = _quantity_field(required=False)
    notes = _notes_field()
    cancellationReason = _reason_field(source="cancellation_reason")
    version = serializers.IntegerField(
        required=False,
        min_value=1,
        error_messages={
            "invalid": "Version must be a positive integer",
            "min_value": "Version must be a positive integer",
        },
    )


class CancelOrderSerializer(serializers.Serializer):
    """Validates the cancel action body."""

    reason = _reason_field()


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for a single order."""

    orderId = serializers.CharField(source="order_id", read_only=True)
    customerName = serializers.CharField(source="customer_name", read_only=True)
    cancelledAt = serializers.DateTimeField(source="cancelled_at", read_only=True)
    cancellationReason = serializers.CharField(
        source="cancellation_reason", read_only=True
    )
    isDeleted = serializers.BooleanField(source="is_deleted", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Order
        fields = [
            "orderId",
            "customerName",
            "phone",
            "product",
            "quantity",
            "status",
            "cancelledAt",
            "cancellationReason",
            "notes",
            "isDeleted",
            "version",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields


class CancellationSerializer(serializers.ModelSerializer):
    """Compact payload returned by the cancel action."""

    orderId = serializers.CharField(source="order_id", read_only=True)
    cancelledAt = serializers.DateTimeField(source="cancelled_at", read_only=True)
    cancellationReason = serializers.CharField(
        source="cancellation_reason", read_only=True
    )

    class Meta:
        model = Order
        fields = ["orderId", "status", "cancelledAt", "cancellationReason"]
        read_only_fields = fields
