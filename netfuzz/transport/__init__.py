from netfuzz.config import library_name
from netfuzz.errors import UnsupportedBackendError
from netfuzz.models import Library
from netfuzz.transport.base import EventType, TransportBackend, TransportEvent, TransportHost
from netfuzz.transport.enet_backend import ENetBackend

__all__ = [
    "EventType",
    "TransportBackend",
    "TransportEvent",
    "TransportHost",
    "ENetBackend",
    "BACKENDS",
    "get_backend",
]

# HyperNet is a recognized identifier without an implementation.
BACKENDS: dict[Library, type[TransportBackend] | None] = {
    Library.HYPERNET: None,
    Library.ENET: ENetBackend,
}


def get_backend(library: Library) -> TransportBackend:
    """Instantiate the backend for a library, failing fast if it isn't implemented."""
    backend_cls = BACKENDS.get(library)
    if backend_cls is None:
        raise UnsupportedBackendError(
            f"{library_name(library)} is not implemented!",
            {"library": int(library)},
        )
    return backend_cls()
