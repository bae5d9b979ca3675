"""Synchronous in-process event bus.

Handlers run in the publisher's thread and transaction.  A handler error
propagates to the publisher, so a failing handler rolls the use case back.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Type

import structlog

from shared.domain.bus import IEventBus, IEventHandler
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class InMemoryEventBus(IEventBus):
    def __init__(self) -> None:
        self._subscribers: Dict[Type[DomainEvent], List[IEventHandler]] = {}

    def subscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        """Register *handler* for *event_class*; subscribing twice is a no-op."""
        subscribers = self._subscribers.setdefault(event_class, [])
        if handler not in subscribers:
            subscribers.append(handler)

    def handlers_for(self, event_class: Type[DomainEvent]) -> List[IEventHandler]:
        return list(self._subscribers.get(event_class, []))

    def publish(self, event: DomainEvent) -> None:
        handlers = self.handlers_for(type(event))
        if not handlers:
            logger.debug("event_bus.unhandled", event_name=event.event_name)
        for handler in handlers:
            handler.handle(event)

    def publish_all(self, events: Iterable[DomainEvent]) -> None:
        for event in events:
            self.publish(event)


# Process-wide bus; modules subscribe in AppConfig.ready().
event_bus = InMemoryEventBus()
