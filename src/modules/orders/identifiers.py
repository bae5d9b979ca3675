"""Order identifier generation.

``orderId`` values are human-readable (``ORD-<seq>``) and drawn from a
sequence that is advanced atomically, so two concurrent creations never
receive the same identifier.  The unique constraint on ``Order.order_id``
remains the final guard; the service retries on collision.

Counter backends:
- ``DatabaseCounterBackend``: row in ``order_counters`` locked with
  ``SELECT FOR UPDATE`` and incremented with an ``F()`` expression.
- ``LocalCounterBackend``: process-local sequence guarded by a lock, for
  single-process deployments and tests.
"""

from __future__ import annotations

import threading
from typing import Dict, Optional, Protocol

import structlog
from django.conf import settings
from django.db import DatabaseError, transaction
from django.db.models import F

from modules.orders.constants import ORDER_ID_SEQUENCE_NAME
from modules.orders.exceptions import OrderIdUnavailable
from modules.orders.models import Counter

logger = structlog.get_logger(__name__)


class CounterBackend(Protocol):
    """Source of monotonically increasing integers per sequence name."""

    def increment(self, name: str) -> int: ...


class IdentifierGenerator(Protocol):
    """Produces a fresh, never-repeated order identifier."""

    def next_id(self) -> str: ...


class DatabaseCounterBackend:
    """Counter persisted in the ``order_counters`` table."""

    def increment(self, name: str) -> int:
        try:
            with transaction.atomic():
                counter, _ = Counter.objects.select_for_update().get_or_create(
                    name=name
                )
                Counter.objects.filter(pk=counter.pk).update(value=F("value") + 1)
                counter.refresh_from_db(fields=["value"])
        except DatabaseError as exc:
            logger.error("order_id.counter_unavailable", sequence=name, error=str(exc))
            raise OrderIdUnavailable() from exc
        return counter.value


class LocalCounterBackend:
    """In-process counter; sequences restart with the process."""

    def __init__(self, start: int = 0) -> None:
        self._start = start
        self._values: Dict[str, int] = {}
        self._lock = threading.Lock()

    def increment(self, name: str) -> int:
        with self._lock:
            value = self._values.get(name, self._start) + 1
            self._values[name] = value
            return value


class SequentialIdentifierGenerator:
    """Formats counter values as ``<prefix>-<seq>``."""

    def __init__(
        self,
        counter: CounterBackend,
        prefix: str = "ORD",
        sequence_name: str = ORDER_ID_SEQUENCE_NAME,
    ) -> None:
        self._counter = counter
        self._prefix = prefix
        self._sequence_name = sequence_name

    def next_id(self) -> str:
        seq = self._counter.increment(self._sequence_name)
        return f"{self._prefix}-{seq}"


_COUNTER_BACKENDS = {
    "database": DatabaseCounterBackend,
    "local": LocalCounterBackend,
}

_default_generator: Optional[SequentialIdentifierGenerator] = None
_default_lock = threading.Lock()


def get_identifier_generator() -> SequentialIdentifierGenerator:
    """Return the process-wide generator built from settings.

    ``ORDER_ID_COUNTER_BACKEND`` selects the backend (``database`` or
    ``local``) and ``ORDER_ID_PREFIX`` the prefix.
    """
    global _default_generator
    with _default_lock:
        if _default_generator is None:
            backend_name = settings.ORDER_ID_COUNTER_BACKEND
            try:
                backend_cls = _COUNTER_BACKENDS[backend_name]
            except KeyError:
                raise ValueError(
                    f"Unknown ORDER_ID_COUNTER_BACKEND {backend_name!r}; "
                    f"expected one of {sorted(_COUNTER_BACKENDS)}."
                ) from None
            _default_generator = SequentialIdentifierGenerator(
                backend_cls(), prefix=settings.ORDER_ID_PREFIX
            )
        return _default_generator


def reset_identifier_generator() -> None:
    """Drop the cached generator (settings changed)."""
    global _default_generator
    with _default_lock:
        _default_generator = None
