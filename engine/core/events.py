"""
Typed event bus for decoupled communication.

Uses Enums for event types to prevent magic strings and enable
IDE autocomplete.

Usage:
    # Subscribe
    event_bus.subscribe(BattleEvent.MOVE_RESOLVED, on_move_resolved)

    # Publish
    event_bus.publish(BattleEvent.MOVE_RESOLVED, move="Tackle", damage=12)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable
from weakref import WeakMethod, ref

logger = logging.getLogger(__name__)


class BattleEvent(Enum):
    """Events published by the battle engine."""
    STATE_CHANGED = auto()
    BATTLE_STARTED = auto()
    MOVE_RESOLVED = auto()
    BATTLE_ENDED = auto()

    # Rewards
    REWARDS_READY = auto()
    REWARDS_SAVED = auto()
    REWARDS_SAVE_FAILED = auto()

    # Presentation cues
    CELEBRATION_STARTED = auto()
    CELEBRATION_ENDED = auto()


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: The event type (Enum member)
        data: Dictionary of event-specific data
        consumed: Whether the event has been handled
    """
    type: Enum
    data: dict[str, Any] = field(default_factory=dict)
    consumed: bool = False

    def consume(self) -> None:
        """Mark event as consumed (stops propagation)."""
        self.consumed = True

    def get(self, key: str, default: Any = None) -> Any:
        """Get event data by key."""
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        """Get event data by key (dict-style)."""
        return self.data[key]


# Type alias for event handlers
EventHandler = Callable[[Event], None]


class EventBus:
    """
    Central event bus for publish/subscribe messaging.

    Features:
    - Typed events (Enum-based)
    - Priority ordering
    - Weak references (auto-cleanup when handlers are deleted)
    - One-shot handlers
    - Event consumption (stops propagation)
    """

    def __init__(self):
        # Map of event type -> list of (priority, handler, one_shot)
        self._handlers: dict[Enum, list[tuple[int, Any, bool]]] = {}
        # Queue for events published during handling
        self._event_queue: list[Event] = []
        self._is_publishing = False

    def subscribe(
        self,
        event_type: Enum,
        handler: EventHandler,
        priority: int = 0,
        one_shot: bool = False,
        weak: bool = True,
    ) -> None:
        """
        Subscribe to an event type.

        Args:
            event_type: The event type to listen for
            handler: Callback function(event: Event)
            priority: Higher priority handlers are called first (default 0)
            one_shot: If True, handler is removed after first call
            weak: If True, use weak reference (handler auto-removed if deleted)
        """
        handlers = self._handlers.setdefault(event_type, [])

        if weak:
            if hasattr(handler, '__self__'):
                handler_ref = WeakMethod(handler)
            else:
                handler_ref = ref(handler)
        else:
            handler_ref = handler

        # Insert sorted by priority (highest first), stable for equal priority
        insert_idx = len(handlers)
        for i, (p, _, _) in enumerate(handlers):
            if priority > p:
                insert_idx = i
                break

        handlers.insert(insert_idx, (priority, handler_ref, one_shot))

    def unsubscribe(self, event_type: Enum, handler: EventHandler) -> None:
        """
        Unsubscribe from an event type.

        Args:
            event_type: The event type
            handler: The handler to remove
        """
        if event_type not in self._handlers:
            return

        handlers = self._handlers[event_type]
        self._handlers[event_type] = [
            (p, h, o) for p, h, o in handlers
            if self._get_handler(h) != handler
        ]

    def publish(self, event_type: Enum, **data: Any) -> Event:
        """
        Publish an event.

        Args:
            event_type: The event type
            **data: Event data as keyword arguments

        Returns:
            The Event object (check .consumed to see if it was handled)
        """
        event = Event(type=event_type, data=data)

        if self._is_publishing:
            # Queue event if we're already publishing
            self._event_queue.append(event)
        else:
            self._dispatch(event)

        return event

    def clear(self, event_type: Enum | None = None) -> None:
        """
        Clear handlers.

        Args:
            event_type: If specified, only clear handlers for this type.
                       If None, clear all handlers.
        """
        if event_type is None:
            self._handlers.clear()
        elif event_type in self._handlers:
            del self._handlers[event_type]

    def _dispatch(self, event: Event) -> None:
        """Dispatch event to handlers."""
        if event.type not in self._handlers:
            self._drain_queue()
            return

        self._is_publishing = True
        handlers = self._handlers[event.type]
        to_remove = []

        try:
            for i, (priority, handler_ref, one_shot) in enumerate(list(handlers)):
                handler = self._get_handler(handler_ref)

                if handler is None:
                    # Weak reference was garbage collected
                    to_remove.append(handler_ref)
                    continue

                try:
                    handler(event)
                except Exception:
                    # Log but don't crash the publisher
                    logger.exception("Error in event handler for %s", event.type)

                if one_shot:
                    to_remove.append(handler_ref)

                if event.consumed:
                    break
        finally:
            if to_remove:
                self._handlers[event.type] = [
                    entry for entry in handlers if entry[1] not in to_remove
                ]
            self._is_publishing = False

        self._drain_queue()

    def _drain_queue(self) -> None:
        """Process events queued while handlers were running."""
        while self._event_queue and not self._is_publishing:
            queued = self._event_queue.pop(0)
            self._dispatch(queued)

    def _get_handler(self, handler_ref: Any) -> EventHandler | None:
        """Resolve handler from reference."""
        if isinstance(handler_ref, (ref, WeakMethod)):
            return handler_ref()
        return handler_ref
