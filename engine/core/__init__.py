"""
Core engine module.

Exports:
- Component: Data-only component base
- EventBus, Event, BattleEvent: Event system
- TaskRegistry, TaskHandle: Cancellable delayed tasks
"""

from engine.core.component import Component
from engine.core.events import EventBus, Event, BattleEvent
from engine.core.tasks import TaskRegistry, TaskHandle

__all__ = [
    # Components
    "Component",
    # Events
    "EventBus",
    "Event",
    "BattleEvent",
    # Tasks
    "TaskRegistry",
    "TaskHandle",
]
