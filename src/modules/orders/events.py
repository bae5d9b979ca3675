"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderCreated(DomainEvent):
    """Raised when an order is created."""

    order_id: str = ""


@dataclass(frozen=True)
class OrderUpdated(DomainEvent):
    """Raised when order attributes other than status change."""

    order_id: str = ""
    fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    """Raised when an order status changes (cancellation included)."""

    order_id: str = ""
    old_status: str = ""
    new_status: str = ""


@dataclass(frozen=True)
class OrderCancelled(DomainEvent):
    """Raised when an order is cancelled."""

    order_id: str = ""
    reason: str = ""


@dataclass(frozen=True)
class OrderDeleted(DomainEvent):
    """Raised when an order is soft- or hard-deleted."""

    order_id: str = ""
    hard: bool = False
