"""
Battle Engine

Core infrastructure for turn-based creature battles: data components,
an event bus and a tick-driven task registry.

Quick Start:
    from engine.core import EventBus, TaskRegistry
    from framework.battle import BattleSystem, BattleConfig

    events = EventBus()
    battle = BattleSystem(BattleConfig(), events=events, tasks=TaskRegistry())

    # Host loop
    battle.update(dt)
"""

__version__ = "0.1.0"
__author__ = "Developer"

# Re-export core components for convenience
from engine.core import (
    Component,
    EventBus,
    Event,
    BattleEvent,
    TaskRegistry,
    TaskHandle,
)

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
