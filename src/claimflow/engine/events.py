"""
ClaimFlow Events

Typed in-process event channel. The controller publishes a
``FulfillmentTransitioned`` event after every persisted transition so that
views (the API layer, audit listeners, tests) can react without the workflow
knowing about them.

Usage:
    channel: EventChannel[FulfillmentTransitioned] = EventChannel()
    unsubscribe = channel.subscribe(lambda event: print(event.action))
    channel.publish(event)
    unsubscribe()
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Generic, Optional, TypeVar

from ..models import FlowStep, FulfillmentRecord, FulfillmentStatus

logger = logging.getLogger(__name__)

E = TypeVar("E")


@dataclass(frozen=True)
class FulfillmentTransitioned:
    """A fulfillment record was persisted after a workflow action."""
    claim_id: str
    action: str
    previous_status: FulfillmentStatus
    status: FulfillmentStatus
    step: FlowStep
    record: FulfillmentRecord
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        return {
            "claim_id": self.claim_id,
            "action": self.action,
            "previous_status": self.previous_status.value,
            "status": self.status.value,
            "step": int(self.step),
            "occurred_at": self.occurred_at.isoformat(),
        }


class EventChannel(Generic[E]):
    """
    Synchronous publish/subscribe channel.

    Handlers run in subscription order on the publishing thread. A failing
    handler is logged and does not stop delivery to the others.
    """

    def __init__(self) -> None:
        self._handlers: list[Callable[[E], None]] = []
        self._lock = threading.Lock()

    def subscribe(self, handler: Callable[[E], None]) -> Callable[[], None]:
        """Register a handler. Returns a callable that unsubscribes it."""
        with self._lock:
            self._handlers.append(handler)

        def unsubscribe() -> None:
            with self._lock:
                if handler in self._handlers:
                    self._handlers.remove(handler)

        return unsubscribe

    def publish(self, event: E) -> int:
        """Deliver an event. Returns the number of handlers that succeeded."""
        with self._lock:
            handlers = list(self._handlers)

        delivered = 0
        for handler in handlers:
            try:
                handler(event)
                delivered += 1
            except Exception:
                logger.exception("Event handler %r failed", handler)
        return delivered

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._handlers)


@dataclass
class EventRecorder(Generic[E]):
    """Handler that keeps every event it receives."""
    events: list[E] = field(default_factory=list)

    def __call__(self, event: E) -> None:
        self.events.append(event)

    @property
    def last(self) -> Optional[E]:
        return self.events[-1] if self.events else None
