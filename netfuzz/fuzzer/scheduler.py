"""
Round-robin rotation of generator-based actors.

An actor body is a generator. Every `yield` ends the actor's turn and tells
the scheduler what to do next:

    SCHEDULE  keep me in the rotation, run the next actor
    SUSPEND   park me: leave the rotation for good
    ROOT      stop rotating and hand control back to whoever called run()

Only one actor runs at a time and a turn always runs to its yield, so the
state actors share needs no locking.
"""

from __future__ import annotations

import logging
from collections import deque
from enum import Enum
from typing import Generator

from netfuzz.errors import SchedulerError

logger = logging.getLogger(__name__)


class Signal(str, Enum):
    SCHEDULE = "schedule"
    SUSPEND = "suspend"
    ROOT = "root"


ActorBody = Generator[Signal, None, None]


class Task:
    """One schedulable actor."""

    def __init__(self, name: str, body: ActorBody):
        self.name = name
        self.parked = False
        self._body = body

    def resume(self) -> Signal:
        try:
            return next(self._body)
        except StopIteration:
            return Signal.SUSPEND

    def close(self) -> None:
        self._body.close()

    def __repr__(self) -> str:
        state = "parked" if self.parked else "runnable"
        return f"<Task:{self.name} {state}>"


class Scheduler:
    """FIFO rotation of tasks; the front task runs, then moves to the back."""

    def __init__(self):
        self._rotation: deque[Task] = deque()
        self._tasks: list[Task] = []
        self._current: Task | None = None
        self.turns = 0

    @property
    def pending(self) -> int:
        return len(self._rotation)

    @property
    def current(self) -> Task | None:
        return self._current

    def spawn(self, name: str, body: ActorBody) -> Task:
        task = Task(name, body)
        self._tasks.append(task)
        self._rotation.append(task)
        return task

    def schedule(self) -> Signal:
        """Rotate the front task to the back and give it one turn."""
        task = self._rotation.popleft()
        self._rotation.append(task)
        self._current = task
        self.turns += 1

        signal = task.resume()
        if signal is Signal.SUSPEND:
            self.suspend()
        return signal

    def suspend(self) -> None:
        """Remove the most recently scheduled task from the rotation."""
        task = self._current
        if task is None or task.parked:
            return
        if self._rotation and self._rotation[-1] is task:
            self._rotation.pop()
        else:
            self._rotation.remove(task)
        task.parked = True
        logger.debug("%s parked after %d turns, %d tasks left", task.name, self.turns, self.pending)

    def run(self) -> None:
        """Rotate until an actor yields ROOT."""
        while self._rotation:
            if self.schedule() is Signal.ROOT:
                return
        raise SchedulerError(
            "Every task parked before control returned to the root context",
            {"turns": self.turns},
        )

    def close(self) -> None:
        """Close every actor body so its cleanup runs."""
        for task in self._tasks:
            task.close()
        self._rotation.clear()
        self._current = None
