"""Order repository interface.

Extends ``IRepository[Order]`` with the write operations the Order
aggregate needs: insert with identifier-collision detection, locked
reads, and version-checked mutation.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root."""

    @abstractmethod
    def insert(self, data: Dict[str, Any]) -> Order:
        """Create an order.

        ``data`` must include ``order_id``, ``customer_name``, ``phone``
        and ``product``; ``quantity`` and ``notes`` are optional.

        Raises:
            DuplicateKey: ``order_id`` is already taken.
        """

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve a live order holding a row-level lock."""

    @abstractmethod
    def save_mutation(self, order: Order, fields: Iterable[str]) -> Order:
        """Persist *fields* of *order* if its ``version`` is still current.

        Bumps ``version`` and ``updated_at`` and returns the refreshed order.

        Raises:
            ConcurrentModification: the stored version moved on, or the
                order was deleted meanwhile.
        """
