"""Order domain exceptions.

Raised by the Service Layer, the state machine and the validators when
business rules are violated.  None of them are caught by the views:
the DRF exception handler translates them into the response envelope
using each class's ``status_code``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from shared.domain.exceptions import DomainError


class ValidationFailed(DomainError):
    """The payload failed structural or semantic validation.

    ``errors`` is the complete list of ``{"field", "message"}`` pairs.
    """

    status_code = 400
    default_message = "Validation failed"

    def __init__(
        self, errors: List[Dict[str, str]], message: Optional[str] = None
    ) -> None:
        self.errors = list(errors)
        super().__init__(message, data={"errors": self.errors})


class EmptyUpdate(ValidationFailed):
    """An update payload carried no updatable field."""

    default_message = "At least one field must be provided for update"

    def __init__(self) -> None:
        super().__init__(
            [{"field": "body", "message": self.default_message}],
            message=self.default_message,
        )


class InvalidTransition(DomainError):
    """The requested status is not reachable from the current one."""

    status_code = 400

    def __init__(
        self,
        current_status: str,
        attempted_status: str,
        allowed: Iterable[str],
        message: Optional[str] = None,
    ) -> None:
        self.current_status = current_status
        self.attempted_status = attempted_status
        self.allowed = list(allowed)
        super().__init__(
            message
            or f"Cannot transition from '{current_status}' to '{attempted_status}'",
            data={
                "currentStatus": current_status,
                "attemptedStatus": attempted_status,
                "allowedTransitions": self.allowed,
            },
        )


class TerminalStateViolation(InvalidTransition):
    """The order is delivered or cancelled and cannot change status."""


class AlreadyCancelled(DomainError):
    """The order was cancelled before; echoes the original metadata."""

    status_code = 400
    default_message = "Order is already cancelled"

    def __init__(
        self,
        cancelled_at: Optional[datetime],
        cancellation_reason: Optional[str],
        order_id: Optional[str] = None,
    ) -> None:
        self.order_id = order_id
        self.cancelled_at = cancelled_at
        self.cancellation_reason = cancellation_reason
        super().__init__(
            data={
                "orderId": order_id,
                "cancelledAt": cancelled_at,
                "cancellationReason": cancellation_reason,
            }
        )


class InvalidOrderId(DomainError):
    """The path identifier is too short to be an order id."""

    status_code = 400
    default_message = "Invalid order ID format"

    def __init__(self, order_id: str) -> None:
        self.order_id = order_id
        super().__init__(data={"orderId": order_id})


class OrderNotFound(DomainError):
    """The requested order does not exist or has been soft-deleted."""

    status_code = 404
    default_message = "Order not found"

    def __init__(self, order_id: str) -> None:
        self.order_id = order_id
        super().__init__(data={"orderId": order_id})


class DuplicateKey(DomainError):
    """An order with the same ``order_id`` already exists."""

    status_code = 409
    default_message = "Order creation failed. Please try again."

    def __init__(self, order_id: Optional[str] = None) -> None:
        self.order_id = order_id
        super().__init__()


class ConcurrentModification(DomainError):
    """The order changed since it was read; re-fetch and retry."""

    status_code = 409
    default_message = "Order was modified concurrently. Re-fetch and retry."

    def __init__(
        self, order_id: str, expected_version: Optional[int] = None
    ) -> None:
        self.order_id = order_id
        self.expected_version = expected_version
        data: Dict[str, Any] = {"orderId": order_id}
        if expected_version is not None:
            data["expectedVersion"] = expected_version
        super().__init__(data=data)


class OrderIdUnavailable(DomainError):
    """The identifier sequence could not be advanced (retryable)."""

    status_code = 503
    default_message = "Order identifier service unavailable. Please retry."
