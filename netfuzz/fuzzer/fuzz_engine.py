"""
Swarm Fuzzer Engine.
Builds the shared state and the actors, hands them to the scheduler, and
reports what the run achieved.
"""

import logging
from typing import Callable

from netfuzz.config import BUFFER_CAPACITY, default_targets, library_name
from netfuzz.fuzzer.client import ClientActor
from netfuzz.fuzzer.payload import PayloadGenerator
from netfuzz.fuzzer.scheduler import Scheduler
from netfuzz.fuzzer.server import ServerActor
from netfuzz.fuzzer.supervisor import PhaseController, PhaseRenderer
from netfuzz.interrupt import never
from netfuzz.models import FuzzConfig, FuzzState, RunOutcome, RunSummary, RunTargets
from netfuzz.transport.base import TransportBackend

logger = logging.getLogger(__name__)


class FuzzEngine:
    """Runs one server and N clients against a transport backend in a single process."""

    def __init__(
        self,
        config: FuzzConfig,
        backend: TransportBackend,
        renderer: PhaseRenderer | None = None,
        interrupted: Callable[[], bool] = never,
        targets: RunTargets | None = None,
        payload_capacity: int = BUFFER_CAPACITY,
    ):
        self.config = config
        self.backend = backend
        self.targets = targets or default_targets(config.clients)
        if self.targets.clients != config.clients:
            raise ValueError(
                f"targets are for {self.targets.clients} clients, config has {config.clients}"
            )
        self.interrupted = interrupted
        self.state = FuzzState()
        self.payloads = PayloadGenerator(payload_capacity, seed=config.seed)
        self.scheduler = Scheduler()
        self.supervisor = PhaseController(self.state, self.targets, renderer)
        self.server = ServerActor(
            config, self.targets, self.state, backend, self.payloads, interrupted,
        )
        self.clients = [
            ClientActor(i, config, self.targets, self.state, backend, self.payloads, interrupted)
            for i in range(config.clients)
        ]

    def run(self) -> RunSummary:
        """Run the swarm until the phase controller hands control back."""
        summary = RunSummary(
            library=self.config.library,
            clients=self.config.clients,
            port=self.config.port,
            outcome=RunOutcome.ABORTED,
            state=self.state,
        )

        self.backend.initialize()
        try:
            self.scheduler.spawn("supervisor", self.supervisor.run())
            self.scheduler.spawn("server", self.server.run())
            for client in self.clients:
                self.scheduler.spawn(f"client-{client.index}", client.run())

            logger.info(
                "fuzzing %s with %d clients on port %d",
                library_name(self.config.library), self.config.clients, self.config.port,
            )
            self.scheduler.run()
        finally:
            self.scheduler.close()
            self.backend.deinitialize()

        summary.outcome = self.supervisor.outcome or RunOutcome.ABORTED
        summary.phases_completed = list(self.supervisor.phases_completed)
        summary.state = self.state.model_copy()
        summary.turns = self.scheduler.turns
        summary.mark_complete()
        return summary
