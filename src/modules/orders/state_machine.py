"""Order status state machine.

Pure decision functions: no I/O, no model access, safe to call from any
number of concurrent requests.  The caller applies the returned
``TransitionOutcome`` to the entity and persists it.

Transition table lives in ``constants.VALID_TRANSITIONS``::

    pending    -> processing | cancelled
    processing -> shipped    | cancelled
    shipped    -> delivered  | cancelled
    delivered  -> (terminal)
    cancelled  -> (terminal)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from django.utils import timezone

from modules.orders.constants import (
    DEFAULT_CANCEL_REASON,
    DEFAULT_UPDATE_CANCELLATION_REASON,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    OrderStatus,
)
from modules.orders.exceptions import (
    AlreadyCancelled,
    InvalidTransition,
    TerminalStateViolation,
)


@dataclass(frozen=True)
class TransitionOutcome:
    """Result of a status decision.

    When ``changed`` is ``False`` the request was a same-status no-op and
    the cancellation fields must be left untouched.
    """

    status: str
    changed: bool
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None


def allowed_transitions(status: str) -> Tuple[str, ...]:
    """Return the statuses reachable from *status* (empty when terminal)."""
    return VALID_TRANSITIONS.get(status, ())


def is_terminal(status: str) -> bool:
    return status in TERMINAL_STATES


def can_transition(current_status: str, requested_status: str) -> bool:
    return requested_status in allowed_transitions(current_status)


def decide(
    current_status: str,
    requested_status: str,
    reason: Optional[str] = None,
    *,
    default_reason: str = DEFAULT_UPDATE_CANCELLATION_REASON,
    now: Optional[datetime] = None,
) -> TransitionOutcome:
    """Decide whether *current_status* may move to *requested_status*.

    Raises:
        TerminalStateViolation: the current status is terminal.
        InvalidTransition: the target is not in the allowed set.
    """
    if requested_status == current_status:
        return TransitionOutcome(status=current_status, changed=False)

    allowed = allowed_transitions(current_status)
    if not can_transition(current_status, requested_status):
        if is_terminal(current_status):
            raise TerminalStateViolation(
                current_status,
                requested_status,
                allowed,
                message=f"Order is '{current_status}' and can no longer change status",
            )
        raise InvalidTransition(current_status, requested_status, allowed)

    if requested_status == OrderStatus.CANCELLED:
        cleaned = (reason or "").strip()
        return TransitionOutcome(
            status=requested_status,
            changed=True,
            cancelled_at=now or timezone.now(),
            cancellation_reason=cleaned or default_reason,
        )

    return TransitionOutcome(status=requested_status, changed=True)


def decide_cancellation(
    current_status: str,
    reason: Optional[str] = None,
    *,
    order_id: Optional[str] = None,
    cancelled_at: Optional[datetime] = None,
    cancellation_reason: Optional[str] = None,
    now: Optional[datetime] = None,
) -> TransitionOutcome:
    """Decide a dedicated cancel request.

    ``order_id``, ``cancelled_at`` and ``cancellation_reason`` describe the
    order being cancelled; they are echoed back when it is already cancelled.

    Raises:
        AlreadyCancelled: the order is already cancelled.
        TerminalStateViolation: the order has been delivered.
    """
    if current_status == OrderStatus.CANCELLED:
        raise AlreadyCancelled(cancelled_at, cancellation_reason, order_id)
    if current_status == OrderStatus.DELIVERED:
        raise TerminalStateViolation(
            current_status,
            OrderStatus.CANCELLED,
            allowed_transitions(current_status),
            message="Cannot cancel a delivered order",
        )
    return decide(
        current_status,
        OrderStatus.CANCELLED,
        reason,
        default_reason=DEFAULT_CANCEL_REASON,
        now=now,
    )
