"""Tests for configuration and backend selection."""
import pytest
from pydantic import ValidationError

from netfuzz.config import (
    CONNECTION_ITERATIONS,
    DEFAULT_CLIENTS,
    DEFAULT_PORT,
    LIBRARIES,
    MESSAGE_ITERATIONS,
    build_config,
    default_targets,
    resolve_library,
)
from netfuzz.errors import BackendError, ConfigurationError, UnsupportedBackendError
from netfuzz.models import FuzzConfig, Library, RunTargets
from netfuzz.transport import BACKENDS, ENetBackend, get_backend


def test_libraries_defined():
    """Every Library has a registry entry with a name."""
    for lib in Library:
        assert lib in LIBRARIES
        assert LIBRARIES[lib]["name"]


@pytest.mark.parametrize("selector,expected", [
    ("0", Library.HYPERNET),
    ("1", Library.ENET),
    ("enet", Library.ENET),
    ("ENet", Library.ENET),
    (" HyperNet ", Library.HYPERNET),
])
def test_resolve_library(selector, expected):
    """Libraries are selected by numeric identifier or by name."""
    assert resolve_library(selector) is expected


@pytest.mark.parametrize("selector", ["2", "7", "-1", "", "udt"])
def test_invalid_library_selector(selector):
    """Unknown selectors are configuration errors."""
    with pytest.raises(ConfigurationError) as exc:
        resolve_library(selector)
    assert "Invalid networking library" in exc.value.message


def test_build_config_defaults():
    """Client count and port default to 256 and 9500."""
    config = build_config("enet")
    assert config.library is Library.ENET
    assert config.clients == DEFAULT_CLIENTS == 256
    assert config.port == DEFAULT_PORT == 9500
    assert config.seed is None


@pytest.mark.parametrize("kwargs", [
    {"clients": 0},
    {"clients": 5000},
    {"port": 0},
    {"port": 70000},
])
def test_build_config_rejects_out_of_range(kwargs):
    """Out-of-range counts and ports are configuration errors."""
    with pytest.raises(ConfigurationError):
        build_config("1", **kwargs)


def test_config_is_read_only():
    """FuzzConfig can't change once built."""
    config = build_config("1", clients=4)
    with pytest.raises(ValidationError):
        config.clients = 8
    assert isinstance(config, FuzzConfig)


def test_run_targets():
    """Message target counts both directions for every client."""
    targets = default_targets(4)
    assert targets.connection_iterations == CONNECTION_ITERATIONS == 1000
    assert targets.message_iterations == MESSAGE_ITERATIONS == 100
    assert targets.messages == 4 * 100 * 2
    assert RunTargets(clients=3, message_iterations=5).messages == 30


# ─── Backend selection ───────────────────────────────────────────────────────

def test_enet_backend_selected():
    """ENet is the implemented backend."""
    backend = get_backend(Library.ENET)
    assert isinstance(backend, ENetBackend)
    assert backend.name == "ENet"


def test_hypernet_is_not_implemented():
    """Selecting HyperNet fails fast with a message naming it."""
    assert BACKENDS[Library.HYPERNET] is None
    with pytest.raises(UnsupportedBackendError) as exc:
        get_backend(Library.HYPERNET)
    assert "HyperNet is not implemented!" in str(exc.value)
    assert isinstance(exc.value, ConfigurationError)


def test_enet_requires_initialization():
    """ENet hosts can't be created before the library is initialized."""
    backend = ENetBackend()
    with pytest.raises(BackendError):
        backend.resolve("127.0.0.1", 9500)
    with pytest.raises(BackendError):
        backend.create_host(None, 1, 0)
