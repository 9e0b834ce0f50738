"""
Phase Controller — watches the shared counters and decides when a run is over.

A run passes through four phases in order:

  1. Spawning       every client actor has started
  2. Connections    the connect/reject churn hit its target and all clients are connected
  3. Transmission   the shared message target is reached
  4. Disconnection  every client has been disconnected for good

Every turn the current phase is polled once and the result is one of
CONTINUE, COMPLETE or ABORT. ABORT means the server and every client have
parked, so nothing can make progress anymore.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol

from netfuzz.fuzzer.scheduler import ActorBody, Signal
from netfuzz.models import FuzzState, PhaseProgress, RunOutcome, RunTargets

logger = logging.getLogger(__name__)


class PhaseResult(str, Enum):
    CONTINUE = "continue"
    COMPLETE = "complete"
    ABORT = "abort"


class PhaseRenderer(Protocol):
    """Where the controller reports phase lines."""

    def update(self, progress: PhaseProgress) -> None: ...

    def complete(self, progress: PhaseProgress) -> None: ...

    def finish(self, completed: bool) -> None: ...


class NullRenderer:
    """Renderer that draws nothing."""

    def update(self, progress: PhaseProgress) -> None:
        pass

    def complete(self, progress: PhaseProgress) -> None:
        pass

    def finish(self, completed: bool) -> None:
        pass


@dataclass(frozen=True)
class PhaseSpec:
    number: int
    name: str
    current: Callable[[FuzzState, RunTargets], int]
    target: Callable[[RunTargets], int]
    done: Callable[[FuzzState, RunTargets], bool]


def _connections_done(state: FuzzState, targets: RunTargets) -> bool:
    return (
        state.clients_connected == targets.clients
        and state.connection_iterations == targets.connection_iterations
        and state.disconnection_iterations == targets.connection_iterations
    )


PHASES: list[PhaseSpec] = [
    PhaseSpec(
        1, "Spawning",
        current=lambda s, t: s.clients_spawned,
        target=lambda t: t.clients,
        done=lambda s, t: s.clients_spawned == t.clients,
    ),
    PhaseSpec(
        2, "Connections",
        current=lambda s, t: s.disconnection_iterations,
        target=lambda t: t.connection_iterations,
        done=_connections_done,
    ),
    PhaseSpec(
        3, "Transmission",
        current=lambda s, t: s.messages_exchanged,
        target=lambda t: t.messages,
        done=lambda s, t: s.messages_exchanged == t.messages,
    ),
    PhaseSpec(
        4, "Disconnection",
        current=lambda s, t: s.clients_disconnected,
        target=lambda t: t.clients,
        done=lambda s, t: s.clients_disconnected == t.clients,
    ),
]


class PhaseController:
    """Supervisor actor driving the phase state machine."""

    def __init__(self, state: FuzzState, targets: RunTargets, renderer: PhaseRenderer | None = None):
        self.state = state
        self.targets = targets
        self.renderer = renderer or NullRenderer()
        self.outcome: RunOutcome | None = None
        self.phases_completed: list[str] = []

    def progress(self, phase: PhaseSpec) -> PhaseProgress:
        return PhaseProgress(
            number=phase.number,
            name=phase.name,
            current=phase.current(self.state, self.targets),
            target=phase.target(self.targets),
        )

    def poll(self, phase: PhaseSpec) -> PhaseResult:
        """Render the phase line and evaluate it once."""
        progress = self.progress(phase)
        self.renderer.update(progress)

        if phase.done(self.state, self.targets):
            self.renderer.complete(progress)
            return PhaseResult.COMPLETE
        if self.state.everyone_parked(self.targets.clients):
            return PhaseResult.ABORT
        return PhaseResult.CONTINUE

    def run(self) -> ActorBody:
        for phase in PHASES:
            while True:
                result = self.poll(phase)
                if result is PhaseResult.COMPLETE:
                    self.phases_completed.append(phase.name)
                    logger.info("phase %d (%s) complete", phase.number, phase.name)
                    break
                if result is PhaseResult.ABORT:
                    logger.warning("every actor parked during phase %d (%s)", phase.number, phase.name)
                    self.outcome = RunOutcome.ABORTED
                    self.renderer.finish(completed=False)
                    yield Signal.ROOT
                    return
                yield Signal.SCHEDULE

        self.outcome = RunOutcome.COMPLETED
        self.renderer.finish(completed=True)
        yield Signal.ROOT
