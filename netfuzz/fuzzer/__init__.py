"""Cooperative swarm fuzzing: scheduler, phase controller and actors."""

from .fuzz_engine import FuzzEngine
from .scheduler import Scheduler, Signal
from .supervisor import PhaseController, PhaseResult

__all__ = ["FuzzEngine", "Scheduler", "Signal", "PhaseController", "PhaseResult"]
