"""Event handlers for Orders domain events.

Handlers only log: the service keeps no audit trail beyond the order's
own cancellation fields.
"""

from __future__ import annotations

import structlog

from modules.orders.events import (
    OrderCancelled,
    OrderCreated,
    OrderDeleted,
    OrderStatusChanged,
    OrderUpdated,
)
from shared.domain.bus import IEventHandler
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class _LoggingHandler:
    log_key = "order.event"

    def handle(self, event: DomainEvent) -> None:
        logger.info(self.log_key, event_id=str(event.event_id), **event.payload())


class OrderCreatedHandler(_LoggingHandler, IEventHandler[OrderCreated]):
    log_key = "order.event.created"


class OrderUpdatedHandler(_LoggingHandler, IEventHandler[OrderUpdated]):
    log_key = "order.event.updated"


class OrderStatusChangedHandler(_LoggingHandler, IEventHandler[OrderStatusChanged]):
    log_key = "order.event.status_changed"


class OrderCancelledHandler(_LoggingHandler, IEventHandler[OrderCancelled]):
    log_key = "order.event.cancelled"


class OrderDeletedHandler(_LoggingHandler, IEventHandler[OrderDeleted]):
    log_key = "order.event.deleted"


order_created_handler = OrderCreatedHandler()
order_updated_handler = OrderUpdatedHandler()
order_status_changed_handler = OrderStatusChangedHandler()
order_cancelled_handler = OrderCancelledHandler()
order_deleted_handler = OrderDeletedHandler()
