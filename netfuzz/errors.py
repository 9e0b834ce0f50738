"""
netfuzz exceptions.

Two failure classes exist: configuration errors stop the run before any
fuzzing starts, backend errors abort a run that is already underway.
"""

from __future__ import annotations

from typing import Any


class NetFuzzError(Exception):
    """Base exception for netfuzz errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigurationError(NetFuzzError):
    """Raised for invalid or missing run settings."""


class UnsupportedBackendError(ConfigurationError):
    """Raised when a reserved backend without an implementation is selected."""


class BackendError(NetFuzzError):
    """Raised when the transport under test fails to set up or connect."""


class SchedulerError(NetFuzzError):
    """Raised when the rotation empties before control returns to the root."""
