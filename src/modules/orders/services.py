"""Order service layer (Use Cases).

Orchestrates order creation, lookup, listing, partial updates with
status transitions, cancellation and deletion.  Every write runs inside
``transaction.atomic`` and follows the same order: load, decide,
persist.  The state machine decides before anything is written.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Tuple

import structlog
from django.conf import settings
from django.db import transaction

from modules.orders import state_machine
from modules.orders.constants import DEFAULT_UPDATE_CANCELLATION_REASON, OrderStatus
from modules.orders.events import (
    OrderCancelled,
    OrderCreated,
    OrderDeleted,
    OrderStatusChanged,
    OrderUpdated,
)
from modules.orders.exceptions import (
    AlreadyCancelled,
    ConcurrentModification,
    DuplicateKey,
    InvalidTransition,
    OrderNotFound,
)
from shared.infrastructure.bus import event_bus

if TYPE_CHECKING:
    from modules.orders.dtos import (
        CancelOrderDTO,
        CreateOrderDTO,
        ListOrdersDTO,
        UpdateOrderDTO,
    )
    from modules.orders.identifiers import IdentifierGenerator
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives the repository and the identifier generator via constructor
    injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        id_generator: IdentifierGenerator,
        max_id_retries: Optional[int] = None,
    ) -> None:
        self._order_repo = order_repository
        self._id_generator = id_generator
        self._max_id_retries = max_id_retries or settings.ORDER_ID_MAX_RETRIES

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Create a new ``pending`` order with a generated ``order_id``.

        A collision on ``order_id`` is retried with a fresh identifier.

        Raises:
            OrderIdUnavailable: the identifier sequence is unreachable.
            DuplicateKey: every attempt collided.
        """
        log = logger.bind(product=dto.product, quantity=dto.quantity)
        log.info("order.creation_started")

        for attempt in range(1, self._max_id_retries + 1):
            order_id = self._id_generator.next_id()
            try:
                order = self._order_repo.insert(
                    {
                        "order_id": order_id,
                        "customer_name": dto.customer_name,
                        "phone": dto.phone,
                        "product": dto.product,
                        "quantity": dto.quantity,
                        "notes": dto.notes,
                    }
                )
            except DuplicateKey:
                log.warning("order.id_collision", order_id=order_id, attempt=attempt)
                continue
            break
        else:
            log.error("order.id_retries_exhausted", attempts=self._max_id_retries)
            raise DuplicateKey()

        log.info("order.created", order_id=order.order_id)
        order.add_domain_event(
            OrderCreated(aggregate_id=order.id, order_id=order.order_id)
        )
        self._publish_events(order)
        return order

    @transaction.atomic
    def update_order(
        self,
        order_id: str,
        dto: UpdateOrderDTO,
        default_reason: str = DEFAULT_UPDATE_CANCELLATION_REASON,
    ) -> Order:
        """Apply a validated partial update, including a status change.

        Raises:
            OrderNotFound: order does not exist or is soft-deleted.
            ConcurrentModification: ``dto.version`` is stale, or a
                concurrent write won the race.
            InvalidTransition / TerminalStateViolation: status change refused.
        """
        order = self._load_for_update(order_id)
        log = logger.bind(order_id=order_id, current_status=order.status)

        if dto.version is not None and dto.version != order.version:
            log.warning(
                "order.stale_version",
                expected_version=dto.version,
                stored_version=order.version,
            )
            raise ConcurrentModification(order_id, dto.version)

        changed_fields: List[str] = []
        old_status = order.status

        if "status" in dto.provided_fields and dto.status is not None:
            try:
                outcome = state_machine.decide(
                    order.status,
                    dto.status,
                    dto.cancellation_reason,
                    default_reason=default_reason,
                )
            except InvalidTransition:
                log.warning("order.invalid_transition", requested_status=dto.status)
                raise
            if outcome.changed:
                order.apply_transition(outcome)
                changed_fields += ["status", "cancelled_at", "cancellation_reason"]

        for name, value in dto.field_changes().items():
            if getattr(order, name) != value:
                setattr(order, name, value)
                changed_fields.append(name)

        if not changed_fields:
            log.info("order.update_noop")
            return order

        order = self._order_repo.save_mutation(order, changed_fields)
        log.info("order.updated", fields=changed_fields, new_status=order.status)

        attribute_fields = tuple(
            f
            for f in changed_fields
            if f not in ("status", "cancelled_at", "cancellation_reason")
        )
        if attribute_fields:
            order.add_domain_event(
                OrderUpdated(
                    aggregate_id=order.id,
                    order_id=order.order_id,
                    fields=attribute_fields,
                )
            )
        if order.status != old_status:
            self._record_status_change(order, old_status)
        self._publish_events(order)
        return order

    @transaction.atomic
    def cancel_order(self, order_id: str, dto: CancelOrderDTO) -> Order:
        """Cancel an order through the dedicated cancel action.

        Raises:
            OrderNotFound: order does not exist or is soft-deleted.
            AlreadyCancelled: order was cancelled before.
            TerminalStateViolation: order has been delivered.
        """
        order = self._load_for_update(order_id)
        log = logger.bind(order_id=order_id, current_status=order.status)

        try:
            outcome = state_machine.decide_cancellation(
                order.status,
                dto.reason,
                order_id=order.order_id,
                cancelled_at=order.cancelled_at,
                cancellation_reason=order.cancellation_reason,
            )
        except (AlreadyCancelled, InvalidTransition):
            log.warning("order.cancel_not_allowed")
            raise

        old_status = order.status
        order.apply_transition(outcome)
        order = self._order_repo.save_mutation(
            order, ["status", "cancelled_at", "cancellation_reason"]
        )

        log.info("order.cancelled", reason=order.cancellation_reason)
        self._record_status_change(order, old_status)
        self._publish_events(order)
        return order

    @transaction.atomic
    def delete_order(self, order_id: str, hard: bool = False) -> None:
        """Soft-delete an order, or remove it physically when *hard*.

        Raises:
            OrderNotFound: nothing to delete.
        """
        if hard:
            order = self._order_repo.find_by_id(order_id)
            deleted = self._order_repo.hard_delete(order_id)
        else:
            order = self._order_repo.get_for_update(order_id)
            deleted = order is not None and self._order_repo.soft_delete(order_id)
        if not deleted:
            raise OrderNotFound(order_id)

        logger.info("order.deleted", order_id=order_id, hard=hard)
        if order is not None:
            order.add_domain_event(
                OrderDeleted(aggregate_id=order.id, order_id=order_id, hard=hard)
            )
            self._publish_events(order)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        """Retrieve a single live order.

        Raises:
            OrderNotFound: if the order does not exist or is soft-deleted.
        """
        order = self._order_repo.find_by_id(order_id)
        if not order:
            raise OrderNotFound(order_id)
        return order

    def list_orders(self, params: ListOrdersDTO) -> Tuple[List[Order], int]:
        """Return one page of live orders and the total match count."""
        return self._order_repo.find_page(
            params.filters,
            params.sort_by,
            params.descending,
            params.page,
            params.limit,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _load_for_update(self, order_id: str) -> Order:
        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound(order_id)
        return order

    def _record_status_change(self, order: Order, old_status: str) -> None:
        order.add_domain_event(
            OrderStatusChanged(
                aggregate_id=order.id,
                order_id=order.order_id,
                old_status=old_status,
                new_status=order.status,
            )
        )
        if order.status == OrderStatus.CANCELLED:
            order.add_domain_event(
                OrderCancelled(
                    aggregate_id=order.id,
                    order_id=order.order_id,
                    reason=order.cancellation_reason or "",
                )
            )

    def _publish_events(self, order: Order) -> None:
        event_bus.publish_all(order.pull_domain_events())
