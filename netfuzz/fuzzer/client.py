"""
One simulated client with its own outbound host.

The client never decides whether a connection lives: every disconnect
before the shared message target is met is answered with a reconnect,
which is what keeps the server's churn going. Every message received is
answered with a new one. The disconnect that arrives after the target is
met is this client's last; it then closes its host and parks.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from netfuzz.config import DATA_CHANNEL, MAX_CHANNELS
from netfuzz.fuzzer.payload import PayloadGenerator
from netfuzz.fuzzer.polling import poll_events
from netfuzz.fuzzer.scheduler import ActorBody, Signal
from netfuzz.models import FuzzConfig, FuzzState, RunTargets
from netfuzz.transport.base import EventType, TransportBackend, TransportEvent, TransportHost

logger = logging.getLogger(__name__)


class ClientActor:
    def __init__(
        self,
        index: int,
        config: FuzzConfig,
        targets: RunTargets,
        state: FuzzState,
        backend: TransportBackend,
        payloads: PayloadGenerator,
        interrupted: Callable[[], bool],
    ):
        self.index = index
        self.config = config
        self.targets = targets
        self.state = state
        self.backend = backend
        self.payloads = payloads
        self.interrupted = interrupted
        self.peer: Any = None
        self.reconnects = 0
        self.finished = False

    def _connect(self, host: TransportHost, address: Any) -> None:
        self.peer = host.connect(address, MAX_CHANNELS)

    def handle(self, host: TransportHost, address: Any, event: TransportEvent) -> None:
        state = self.state

        if event.type is EventType.CONNECT:
            return

        if event.is_disconnect:
            if state.messages_exchanged < self.targets.messages:
                self.reconnects += 1
                self._connect(host, address)
            else:
                state.clients_disconnected += 1
                self.finished = True

        elif event.type is EventType.RECEIVE:
            host.destroy_packet(event.packet)
            if state.messages_exchanged < self.targets.messages:
                state.messages_exchanged += 1
            host.send(self.peer, DATA_CHANNEL, self.payloads(), reliable=True)

    def run(self) -> ActorBody:
        address = self.backend.resolve(self.config.host, self.config.port)
        host = self.backend.create_host(None, 1, 0, 0, 0)
        try:
            self.state.clients_spawned += 1
            self._connect(host, address)
            logger.debug("client %d spawned", self.index)

            while not self.finished and not self.interrupted():
                for event in poll_events(host):
                    self.handle(host, address, event)
                    if self.finished:
                        break
                if not self.finished:
                    yield Signal.SCHEDULE
        finally:
            host.flush()
            host.destroy()

        logger.debug("client %d parked after %d reconnects", self.index, self.reconnects)
        self.state.clients_parked += 1
        yield Signal.SUSPEND
