"""
ENet transport — drives the ENet reliable-UDP library through pyenet.

pyenet initializes the C library on import and owns packet lifetimes, so
initialize() only imports it and destroy_packet() has nothing to free.
"""

from __future__ import annotations

import logging
from typing import Any

from netfuzz.errors import BackendError
from netfuzz.transport.base import (
    EventType,
    NO_EVENT,
    TransportBackend,
    TransportEvent,
    TransportHost,
)

logger = logging.getLogger(__name__)


class ENetHost(TransportHost):
    """Wraps an enet.Host."""

    def __init__(self, enet_module, host):
        self._enet = enet_module
        self._host = host
        self._event_types = {
            enet_module.EVENT_TYPE_NONE: EventType.NONE,
            enet_module.EVENT_TYPE_CONNECT: EventType.CONNECT,
            enet_module.EVENT_TYPE_DISCONNECT: EventType.DISCONNECT,
            enet_module.EVENT_TYPE_RECEIVE: EventType.RECEIVE,
        }

    @property
    def connected_peers(self) -> int:
        connected = self._enet.PEER_STATE_CONNECTED
        return sum(1 for peer in self._host.peers if peer.state == connected)

    def connect(self, address: Any, channel_count: int) -> Any:
        try:
            peer = self._host.connect(address, channel_count)
        except (MemoryError, OSError) as e:
            raise BackendError("Client connection failed!", {"error": str(e)}) from e
        if peer is None:
            raise BackendError("Client connection failed!")
        return peer

    def _translate(self, event) -> TransportEvent:
        # check_events() hands back None when the queue is empty.
        if event is None:
            return NO_EVENT
        kind = self._event_types.get(event.type, EventType.NONE)
        if kind is EventType.NONE:
            return NO_EVENT
        if kind is EventType.RECEIVE:
            return TransportEvent(
                kind,
                peer=event.peer,
                packet=event.packet,
                payload=bytes(event.packet.data),
                channel=event.channelID,
            )
        return TransportEvent(kind, peer=event.peer)

    def check_events(self) -> TransportEvent:
        try:
            event = self._host.check_events()
        except OSError as e:
            raise BackendError("Event polling failed!", {"error": str(e)}) from e
        return self._translate(event)

    def service(self, timeout_ms: int = 0) -> TransportEvent:
        try:
            event = self._host.service(timeout_ms)
        except OSError as e:
            raise BackendError("Host servicing failed!", {"error": str(e)}) from e
        return self._translate(event)

    def send(self, peer: Any, channel: int, payload: bytes, reliable: bool = True) -> None:
        flags = self._enet.PACKET_FLAG_RELIABLE if reliable else 0
        if peer.send(channel, self._enet.Packet(payload, flags)) < 0:
            logger.debug("send on channel %d refused by peer %s", channel, peer)

    def disconnect(self, peer: Any) -> None:
        peer.disconnect()

    def destroy_packet(self, packet: Any) -> None:
        """pyenet frees received packets once the event is released."""

    def flush(self) -> None:
        if self._host is not None:
            self._host.flush()

    def destroy(self) -> None:
        # enet_host_destroy runs when pyenet releases the last reference.
        self._host = None


class ENetBackend(TransportBackend):
    """Reliable UDP backed by ENet."""

    name = "ENet"

    def __init__(self):
        self._enet = None

    def initialize(self) -> None:
        try:
            import enet
        except ImportError as e:
            raise BackendError(
                "ENet initialization failed! Install the 'pyenet' package",
                {"error": str(e)},
            ) from e
        self._enet = enet
        logger.info("ENet initialized")

    def deinitialize(self) -> None:
        self._enet = None
        logger.info("ENet deinitialized")

    def _module(self):
        if self._enet is None:
            raise BackendError("ENet is not initialized")
        return self._enet

    def resolve(self, host: str, port: int) -> Any:
        enet = self._module()
        try:
            return enet.Address(host.encode("utf-8"), port)
        except (OSError, ValueError) as e:
            raise BackendError("Hostname assignment failed!", {"host": host, "error": str(e)}) from e

    def create_host(
        self,
        address: Any,
        peer_count: int,
        channel_limit: int,
        incoming_bandwidth: int = 0,
        outgoing_bandwidth: int = 0,
    ) -> TransportHost:
        enet = self._module()
        try:
            host = enet.Host(address, peer_count, channel_limit, incoming_bandwidth, outgoing_bandwidth)
        except (MemoryError, OSError) as e:
            role = "Server" if address is not None else "Client"
            raise BackendError(f"{role} creation failed!", {"error": str(e)}) from e
        return ENetHost(enet, host)
