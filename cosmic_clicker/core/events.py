"""Event bus for decoupled communication between the session and its observers."""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable

from ..simulation.resources import ResourceType

logger = logging.getLogger(__name__)


@dataclass
class Event:
    """Base class for all events."""
    pass


@dataclass
class ObjectDestroyedEvent(Event):
    """Fired when a mineable object is destroyed."""
    object_id: str
    template_id: str
    drops: dict[str, int]


@dataclass
class CreditsEarnedEvent(Event):
    """Fired when credits increase during a step (sales, salvage)."""
    amount: float
    total: float


@dataclass
class ResourcesCollectedEvent(Event):
    """Fired when cargo holdings increase during a step."""
    resource_type: ResourceType
    amount: float


@dataclass
class CargoWarningEvent(Event):
    """Fired when cargo utilization crosses into a new status band."""
    utilization: float
    status: str  # CargoStatus.value


@dataclass
class AchievementUnlockedEvent(Event):
    achievement_id: str
    name: str


@dataclass
class PrestigeEvent(Event):
    """Fired after a successful prestige reset."""
    crystals_gained: int
    total_crystals: int
    total_prestiges: int


@dataclass
class ZoneChangedEvent(Event):
    old_zone: int
    new_zone: int
    zone_name: str


@dataclass
class NotificationEvent(Event):
    """Fired for UI notifications."""
    message: str
    notification_type: str = "info"  # info, success, warning, error
    duration: float = 5.0  # How long to display (seconds)


EventHandler = Callable[[Event], None]


class EventBus:
    """Central event bus for publishing and subscribing to events."""

    def __init__(self) -> None:
        self._handlers: dict[type[Event], list[EventHandler]] = {}
        self._queued_events: list[Event] = []
        self._processing: bool = False

    def subscribe(self, event_type: type[Event], handler: EventHandler) -> None:
        """Subscribe a handler to an event type (and its subclasses)."""
        self._handlers.setdefault(event_type, []).append(handler)

    def unsubscribe(self, event_type: type[Event], handler: EventHandler) -> None:
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def publish(self, event: Event) -> None:
        """Publish an event to all subscribers.

        If called while handlers are running, the event is queued and
        delivered by the current process_queue call.
        """
        if self._processing:
            self._queued_events.append(event)
            return

        self._dispatch(event)

    def _dispatch(self, event: Event) -> None:
        logger.debug("Dispatching %s", type(event).__name__)
        for registered_type, handlers in list(self._handlers.items()):
            if isinstance(event, registered_type):
                for handler in list(handlers):
                    handler(event)

    def queue(self, event: Event) -> None:
        """Defer an event until the next process_queue call."""
        self._queued_events.append(event)

    def process_queue(self) -> None:
        """Deliver all queued events, including ones queued by handlers."""
        self._processing = True
        try:
            while self._queued_events:
                current_queue = self._queued_events
                self._queued_events = []
                for event in current_queue:
                    self._dispatch(event)
        finally:
            self._processing = False

    def clear(self) -> None:
        """Clear all handlers and queued events."""
        self._handlers.clear()
        self._queued_events.clear()
