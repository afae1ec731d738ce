"""Event bus for decoupled communication between the slash pipeline and the scene."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable
from uuid import UUID


@dataclass
class Event:
    """Base class for all events."""
    pass


@dataclass
class SlashStartedEvent(Event):
    """Fired when a gesture begins."""
    x: float
    y: float


@dataclass
class SlashEndedEvent(Event):
    """Fired when a gesture ends, before damage is resolved."""
    accumulated_length: float
    forced: bool = False  # True when the duration cap ended the gesture


@dataclass
class TargetHitEvent(Event):
    """Fired for every resolved opaque span on a target."""
    target_id: UUID
    span: tuple[float, float, float, float]  # start_x, start_y, end_x, end_y


@dataclass
class EnemyDamagedEvent(Event):
    """Fired when a touched target receives the gesture's damage."""
    target_id: UUID
    damage: float
    remaining_hp: float


@dataclass
class EnemyKilledEvent(Event):
    """Fired once per target death."""
    target_id: UUID
    kind: str
    position: tuple[float, float]


@dataclass
class CoinsAwardedEvent(Event):
    """Fired when a delayed coin award lands in the wallet."""
    amount: int
    total: int


EventHandler = Callable[[Event], None]


class EventBus:
    """Central event bus for publishing and subscribing to events."""

    def __init__(self) -> None:
        self._handlers: dict[type[Event], list[EventHandler]] = {}
        self._queued_events: list[Event] = []
        self._processing: bool = False

    def subscribe(self, event_type: type[Event], handler: EventHandler) -> None:
        """Subscribe a handler to an event type."""
        if event_type not in self._handlers:
            self._handlers[event_type] = []
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: type[Event], handler: EventHandler) -> None:
        """Unsubscribe a handler from an event type."""
        if event_type in self._handlers:
            try:
                self._handlers[event_type].remove(handler)
            except ValueError:
                pass

    def publish(self, event: Event) -> None:
        """Publish an event to all subscribers.

        If called during event processing, the event is queued.
        """
        if self._processing:
            self._queued_events.append(event)
            return

        self._dispatch(event)

    def _dispatch(self, event: Event) -> None:
        """Dispatch an event to handlers registered for its type or a base type."""
        for registered_type, handlers in list(self._handlers.items()):
            if isinstance(event, registered_type):
                for handler in list(handlers):
                    handler(event)

    def process_queue(self) -> None:
        """Process all queued events."""
        self._processing = True

        try:
            while self._queued_events:
                # New events raised by handlers go to a fresh queue
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
