"""
Core data models for netfuzz.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Library(int, Enum):
    HYPERNET = 0
    ENET = 1


class RunOutcome(str, Enum):
    COMPLETED = "completed"
    ABORTED = "aborted"


class FuzzConfig(BaseModel):
    """Run settings, fixed at startup."""
    model_config = ConfigDict(frozen=True)

    library: Library
    clients: int = Field(default=256, ge=1, le=4095)
    port: int = Field(default=9500, ge=1, le=65535)
    host: str = "127.0.0.1"
    seed: int | None = None


class RunTargets(BaseModel):
    """Completion thresholds shared by the actors and the phase controller."""
    model_config = ConfigDict(frozen=True)

    clients: int = Field(ge=1)
    connection_iterations: int = Field(default=1000, ge=1)
    message_iterations: int = Field(default=100, ge=1)

    @property
    def messages(self) -> int:
        # Both directions are counted.
        return self.clients * self.message_iterations * 2


class FuzzState(BaseModel):
    """
    Progress counters shared by every actor of a run.

    Only the actor holding control mutates it, and only within its own
    turn, so no locking is involved. All counters only grow; the server
    parked flag is set once.
    """
    clients_spawned: int = 0
    clients_connected: int = 0
    connection_iterations: int = 0
    disconnection_iterations: int = 0
    messages_exchanged: int = 0
    clients_disconnected: int = 0
    clients_parked: int = 0
    server_parked: bool = False

    def everyone_parked(self, clients: int) -> bool:
        return self.server_parked and self.clients_parked == clients


class PhaseProgress(BaseModel):
    """One rendered phase line: `Phase N: <Name> (<current>/<target>)`."""
    number: int
    name: str
    current: int
    target: int

    def __str__(self) -> str:
        return f"Phase {self.number}: {self.name} ({self.current}/{self.target})"


class RunSummary(BaseModel):
    """Result of one fuzzing run."""
    library: Library
    clients: int
    port: int
    outcome: RunOutcome
    phases_completed: list[str] = Field(default_factory=list)
    state: FuzzState
    turns: int = 0
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: datetime | None = None

    @property
    def duration_s(self) -> float:
        if self.completed_at is None:
            return 0.0
        return max(0.0, (self.completed_at - self.started_at).total_seconds())

    def to_json(self, indent: int = 2) -> str:
        return self.model_dump_json(indent=indent)

    def mark_complete(self):
        self.completed_at = datetime.now(timezone.utc)
