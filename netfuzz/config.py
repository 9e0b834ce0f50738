"""
netfuzz configuration — networking library registry and run constants.

Everything here is fixed for the lifetime of a run. Nothing is read from
the environment or from disk.
"""

from pydantic import ValidationError

from netfuzz.errors import ConfigurationError
from netfuzz.models import FuzzConfig, Library, RunTargets

DEFAULT_CLIENTS = 256
DEFAULT_PORT = 9500
DEFAULT_HOST = "127.0.0.1"

MAX_CHANNELS = 2
DATA_CHANNEL = 1

CONNECTION_ITERATIONS = 1000
MESSAGE_ITERATIONS = 100

BUFFER_CAPACITY = 1024

LIBRARIES = {
    Library.HYPERNET: {
        "name": "HyperNet",
        "package": None,
        "description": "reserved, not implemented",
    },
    Library.ENET: {
        "name": "ENet",
        "package": "pyenet",
        "description": "reliable UDP via pyenet",
    },
}


def library_name(library: Library) -> str:
    return LIBRARIES[library]["name"]


def resolve_library(selector: str) -> Library:
    """
    Map a CLI selector to a Library.

    Accepts the numeric identifier ("0", "1") or the library name in any case.
    """
    value = selector.strip()
    if value.isdigit():
        try:
            return Library(int(value))
        except ValueError:
            pass
    else:
        for library, info in LIBRARIES.items():
            if info["name"].lower() == value.lower():
                return library
    raise ConfigurationError(
        "Invalid networking library, please, set the correct identifier!",
        {"library": selector},
    )


def build_config(
    library: str,
    clients: int = DEFAULT_CLIENTS,
    port: int = DEFAULT_PORT,
    host: str = DEFAULT_HOST,
    seed: int | None = None,
) -> FuzzConfig:
    """Validate raw settings into a FuzzConfig."""
    resolved = resolve_library(library)
    try:
        return FuzzConfig(library=resolved, clients=clients, port=port, host=host, seed=seed)
    except ValidationError as e:
        problems = {".".join(str(p) for p in err["loc"]): err["msg"] for err in e.errors()}
        raise ConfigurationError("Invalid fuzzing configuration", problems) from e


def default_targets(clients: int) -> RunTargets:
    return RunTargets(
        clients=clients,
        connection_iterations=CONNECTION_ITERATIONS,
        message_iterations=MESSAGE_ITERATIONS,
    )
