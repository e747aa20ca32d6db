"""
Task registry - tracked, cancellable delayed callbacks.

Every deferred action in the engine (AI think time, celebration timers,
reset grace periods, reward persistence) is registered here so that a
single call can cancel all outstanding work.

The registry is tick-driven like every other system: the host loop calls
``update(dt)`` with the fixed timestep and due tasks fire in order.

Usage:
    tasks = TaskRegistry()
    handle = tasks.schedule(1.5, resolve_turn, name="opponent_turn")
    tasks.update(1 / 60)
    tasks.cancel(handle)      # no-op if it already fired

    with TaskRegistry() as tasks:
        ...                   # everything left is cancelled on exit
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

logger = logging.getLogger(__name__)

TaskCallback = Callable[[], None]


@dataclass(frozen=True)
class TaskHandle:
    """Opaque identifier for a scheduled task."""
    id: int
    name: str = ""


@dataclass(order=True)
class _ScheduledTask:
    due: float
    seq: int
    handle: TaskHandle = field(compare=False)
    callback: TaskCallback = field(compare=False)


class TaskRegistry:
    """
    Arena of cancellable delayed callbacks.

    Guarantees:
    - A task's handle is removed before its callback runs, so a callback
      may safely reschedule or cancel anything (including everything).
    - Cancelling an unknown or already-fired handle is a no-op.
    - A cancelled task never runs.
    - Exceptions raised by callbacks are logged, never propagated.
    """

    def __init__(self):
        self._tasks: dict[int, _ScheduledTask] = {}
        self._ids = itertools.count(1)
        self._seq = itertools.count()
        self._time: float = 0.0

    @property
    def time(self) -> float:
        """Registry clock in seconds (advanced by update)."""
        return self._time

    @property
    def pending(self) -> int:
        """Number of tasks waiting to fire."""
        return len(self._tasks)

    def is_pending(self, handle: Optional[TaskHandle]) -> bool:
        """Check whether a handle is still scheduled."""
        return handle is not None and handle.id in self._tasks

    def schedule(self, delay: float, callback: TaskCallback, name: str = "") -> TaskHandle:
        """
        Schedule a callback to run after ``delay`` seconds.

        Args:
            delay: Seconds from now (negative values are treated as 0)
            callback: Zero-argument callable
            name: Label used in diagnostics

        Returns:
            Handle that can be passed to cancel()
        """
        handle = TaskHandle(id=next(self._ids), name=name)
        self._tasks[handle.id] = _ScheduledTask(
            due=self._time + max(0.0, delay),
            seq=next(self._seq),
            handle=handle,
            callback=callback,
        )
        logger.debug("Scheduled task %s (%s) in %.3fs", handle.id, name, delay)
        return handle

    def cancel(self, handle: Optional[TaskHandle]) -> bool:
        """
        Cancel a scheduled task.

        Returns:
            True if a pending task was removed
        """
        if handle is None:
            return False
        return self._tasks.pop(handle.id, None) is not None

    def cancel_all(self) -> int:
        """
        Cancel every pending task.

        Returns:
            Number of tasks cancelled
        """
        count = len(self._tasks)
        self._tasks.clear()
        if count:
            logger.debug("Cancelled %d pending task(s)", count)
        return count

    def update(self, dt: float) -> int:
        """
        Advance the clock and fire due tasks.

        Tasks scheduled by a firing callback with a zero delay run in the
        same update once the clock allows it.

        Args:
            dt: Delta time in seconds

        Returns:
            Number of callbacks executed
        """
        self._time += max(0.0, dt)
        fired = 0

        while True:
            task = self._next_due()
            if task is None:
                break

            # Handle leaves the registry before the callback is eligible to run
            del self._tasks[task.handle.id]
            fired += 1

            try:
                task.callback()
            except Exception:
                logger.exception("Task %s (%s) failed", task.handle.id, task.handle.name)

        return fired

    def advance(self, seconds: float, step: float = 1 / 60) -> int:
        """Run update() in fixed steps until ``seconds`` have elapsed."""
        fired = 0
        remaining = seconds
        while remaining > 1e-9:
            dt = min(step, remaining)
            fired += self.update(dt)
            remaining -= dt
        return fired

    def _next_due(self) -> Optional[_ScheduledTask]:
        due = [t for t in self._tasks.values() if t.due <= self._time + 1e-9]
        return min(due) if due else None

    def __enter__(self) -> TaskRegistry:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cancel_all()

    def __len__(self) -> int:
        return len(self._tasks)
