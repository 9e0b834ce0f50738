"""
The single listening endpoint every client churns against.

While the connection churn target isn't reached, each new peer is rejected
right away. After that, a new peer gets a first message and the echo
exchange starts. Once the shared message target is met, every peer that
replies is disconnected instead of answered.
"""

from __future__ import annotations

import logging
from typing import Callable

from netfuzz.config import DATA_CHANNEL, MAX_CHANNELS
from netfuzz.fuzzer.payload import PayloadGenerator
from netfuzz.fuzzer.polling import poll_events
from netfuzz.fuzzer.scheduler import ActorBody, Signal
from netfuzz.models import FuzzConfig, FuzzState, RunTargets
from netfuzz.transport.base import EventType, TransportBackend, TransportEvent, TransportHost

logger = logging.getLogger(__name__)


class ServerActor:
    def __init__(
        self,
        config: FuzzConfig,
        targets: RunTargets,
        state: FuzzState,
        backend: TransportBackend,
        payloads: PayloadGenerator,
        interrupted: Callable[[], bool],
    ):
        self.config = config
        self.targets = targets
        self.state = state
        self.backend = backend
        self.payloads = payloads
        self.interrupted = interrupted

    def _open(self) -> TransportHost:
        address = self.backend.resolve(self.config.host, self.config.port)
        host = self.backend.create_host(address, self.config.clients, MAX_CHANNELS, 0, 0)
        logger.debug("server listening on %s:%d", self.config.host, self.config.port)
        return host

    def handle(self, host: TransportHost, event: TransportEvent) -> None:
        state = self.state

        if event.type is EventType.CONNECT:
            state.clients_connected = host.connected_peers
            if state.connection_iterations < self.targets.connection_iterations:
                state.connection_iterations += 1
                host.disconnect(event.peer)
            else:
                host.send(event.peer, DATA_CHANNEL, self.payloads(), reliable=True)

        elif event.is_disconnect:
            # Rejections and final teardown share this counter.
            if state.disconnection_iterations < self.targets.connection_iterations:
                state.disconnection_iterations += 1

        elif event.type is EventType.RECEIVE:
            host.destroy_packet(event.packet)
            if state.messages_exchanged < self.targets.messages:
                state.messages_exchanged += 1
            if state.messages_exchanged < self.targets.messages:
                host.send(event.peer, DATA_CHANNEL, self.payloads(), reliable=True)
            else:
                host.disconnect(event.peer)

    def run(self) -> ActorBody:
        host = self._open()
        try:
            while not self.interrupted():
                for event in poll_events(host):
                    logger.debug("server event %s", event.type.value)
                    self.handle(host, event)
                yield Signal.SCHEDULE
        finally:
            host.flush()
            host.destroy()

        logger.debug("server parked")
        self.state.server_parked = True
        yield Signal.SUSPEND
