"""
Base transport interface — every networking library under test is driven through this.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any


class EventType(str, Enum):
    NONE = "none"
    CONNECT = "connect"
    DISCONNECT = "disconnect"
    DISCONNECT_TIMEOUT = "disconnect_timeout"
    RECEIVE = "receive"


@dataclass
class TransportEvent:
    """A single event delivered by a transport host."""
    type: EventType
    peer: Any = None        # Backend peer handle
    packet: Any = None      # Backend packet handle (RECEIVE only)
    payload: bytes = b""    # Received bytes (RECEIVE only)
    channel: int = 0

    @property
    def is_disconnect(self) -> bool:
        return self.type in (EventType.DISCONNECT, EventType.DISCONNECT_TIMEOUT)


NO_EVENT = TransportEvent(EventType.NONE)


class TransportHost(ABC):
    """One endpoint, owned by exactly one actor."""

    @property
    @abstractmethod
    def connected_peers(self) -> int:
        """Number of peers currently in the connected state."""
        ...

    @abstractmethod
    def connect(self, address: Any, channel_count: int) -> Any:
        """Start connecting to address. Returns the peer; raises BackendError on failure."""
        ...

    @abstractmethod
    def check_events(self) -> TransportEvent:
        """Dispatch an already-queued event without touching the network."""
        ...

    @abstractmethod
    def service(self, timeout_ms: int = 0) -> TransportEvent:
        """Send and receive pending traffic, then dispatch at most one event."""
        ...

    @abstractmethod
    def send(self, peer: Any, channel: int, payload: bytes, reliable: bool = True) -> None:
        ...

    @abstractmethod
    def disconnect(self, peer: Any) -> None:
        ...

    @abstractmethod
    def destroy_packet(self, packet: Any) -> None:
        ...

    @abstractmethod
    def flush(self) -> None:
        ...

    @abstractmethod
    def destroy(self) -> None:
        ...


class TransportBackend(ABC):
    """Abstract base class for all netfuzz transport backends."""

    name: str = "base"

    def initialize(self) -> None:
        """Library-wide setup, called once before any host is created."""

    def deinitialize(self) -> None:
        """Library-wide teardown, called once after the run."""

    @abstractmethod
    def resolve(self, host: str, port: int) -> Any:
        """Build a backend address; raises BackendError if the hostname can't be assigned."""
        ...

    @abstractmethod
    def create_host(
        self,
        address: Any,
        peer_count: int,
        channel_limit: int,
        incoming_bandwidth: int = 0,
        outgoing_bandwidth: int = 0,
    ) -> TransportHost:
        """
        Create an endpoint.

        Args:
            address: Bind address, or None for an outbound-only host
            peer_count: Maximum number of simultaneous peers
            channel_limit: Maximum channels per peer (0 = backend maximum)
            incoming_bandwidth: Bytes/s, 0 = unlimited
            outgoing_bandwidth: Bytes/s, 0 = unlimited

        Raises:
            BackendError: when the host can't be created
        """
        ...

    def __repr__(self) -> str:
        return f"<Transport:{self.name}>"
