"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.

Concurrency control: ``get_for_update`` takes a row lock
(``select_for_update``) and ``save_mutation`` writes with a conditional
``UPDATE ... WHERE version = <read version>``, so a stale write never
overwrites a newer one even on backends that ignore row locks.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import structlog
from django.core.paginator import Paginator
from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from modules.orders.exceptions import ConcurrentModification, DuplicateKey
from modules.orders.filters import OrderFilter
from modules.orders.models import MUTABLE_FIELDS, Order
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def insert(self, data: Dict[str, Any]) -> Order:
        order = Order(
            order_id=data["order_id"],
            customer_name=data["customer_name"],
            phone=data["phone"],
            product=data["product"],
            quantity=data.get("quantity", 1),
            notes=data.get("notes") or "",
        )
        try:
            # Savepoint: a collision must not poison the caller's transaction.
            with transaction.atomic():
                order.save(force_insert=True)
        except IntegrityError as exc:
            if Order.objects.filter(order_id=order.order_id).exists():
                logger.warning("order.duplicate_order_id", order_id=order.order_id)
                raise DuplicateKey(order.order_id) from exc
            raise

        logger.info("order.inserted", order_id=order.order_id)
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def find_by_id(self, id: str) -> Optional[Order]:
        return Order.objects.alive().filter(order_id=id).first()

    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve a live order with a row-level lock (SELECT FOR UPDATE).

        Must be called inside ``transaction.atomic``.
        """
        return Order.objects.select_for_update().alive().filter(order_id=id).first()

    def find_page(
        self,
        filters: Mapping[str, Any],
        sort_by: str,
        descending: bool,
        page: int,
        page_size: int,
    ) -> Tuple[List[Order], int]:
        """Filter via ``OrderFilter``, order, and fetch one page.

        ``id`` is a tie-breaker so pages are stable when sort keys repeat.
        A page past the end is empty rather than an error.
        """
        queryset = OrderFilter(data=filters, queryset=Order.objects.alive()).qs
        prefix = "-" if descending else ""
        queryset = queryset.order_by(f"{prefix}{sort_by}", f"{prefix}id")

        paginator = Paginator(queryset, page_size)
        if page > paginator.num_pages:
            return [], paginator.count
        return list(paginator.page(page).object_list), paginator.count

    # ------------------------------------------------------------------
    # Mutate
    # ------------------------------------------------------------------

    def save_mutation(self, order: Order, fields: Iterable[str]) -> Order:
        fields = [name for name in fields if name in MUTABLE_FIELDS]
        values = {name: getattr(order, name) for name in fields}

        updated = (
            Order.objects.alive()
            .filter(pk=order.pk, version=order.version)
            .update(**values, version=F("version") + 1, updated_at=timezone.now())
        )
        if not updated:
            logger.warning(
                "order.concurrent_modification",
                order_id=order.order_id,
                expected_version=order.version,
            )
            raise ConcurrentModification(order.order_id, order.version)

        order.refresh_from_db()
        logger.info(
            "order.saved", order_id=order.order_id, fields=fields, version=order.version
        )
        return order

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def soft_delete(self, id: str) -> bool:
        count = Order.objects.filter(order_id=id).soft_delete(
            version=F("version") + 1
        )
        if count:
            logger.info("order.soft_deleted", order_id=id)
        return bool(count)

    def hard_delete(self, id: str) -> bool:
        """Physically remove the row, including already soft-deleted ones."""
        count = Order.objects.filter(order_id=id).hard_delete()
        if count:
            logger.info("order.hard_deleted", order_id=id)
        return bool(count)
