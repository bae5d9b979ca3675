"""Domain event primitives shared by every module.

Aggregates record events while a use case runs; the application service
drains them with ``pull_domain_events`` once the write has succeeded and
hands them to the event bus.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List
from uuid import UUID, uuid4


@dataclass(frozen=True)
class DomainEvent:
    """Immutable fact about an aggregate.

    Subclasses add their payload as fields with defaults.
    """

    aggregate_id: UUID
    event_id: UUID = field(default_factory=uuid4)
    occurred_on: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_name: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "event_name", type(self).__name__)

    def payload(self) -> Dict[str, Any]:
        """Event-specific fields only (no envelope metadata)."""
        data = asdict(self)
        for key in ("aggregate_id", "event_id", "occurred_on", "event_name"):
            data.pop(key, None)
        return data


class DomainEventMixin:
    """Collects pending domain events on an aggregate root instance."""

    _pending_events: List[DomainEvent]

    def _events(self) -> List[DomainEvent]:
        if not hasattr(self, "_pending_events"):
            self._pending_events = []
        return self._pending_events

    def add_domain_event(self, event: DomainEvent) -> None:
        self._events().append(event)

    @property
    def domain_events(self) -> List[DomainEvent]:
        return list(self._events())

    def pull_domain_events(self) -> List[DomainEvent]:
        """Return the pending events and forget them."""
        events = list(self._events())
        self._events().clear()
        return events
