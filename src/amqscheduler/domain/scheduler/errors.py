"""Error taxonomy for scheduler commands."""

from __future__ import annotations


class SchedulerError(RuntimeError):
    """Base class for failures raised while running a scheduler command."""


class ConfigurationError(SchedulerError):
    """Raised when command line arguments are missing or contradict each other."""


class TransportError(SchedulerError):
    """Raised when the broker connection, sender or consumer fails."""


class DecodeError(SchedulerError):
    """Raised when a single browse reply cannot be turned into a scheduled job."""


class InvalidArgument(ValueError):
    """Raised when a control command is built from invalid input."""


__all__ = [
    "ConfigurationError",
    "DecodeError",
    "InvalidArgument",
    "SchedulerError",
    "TransportError",
]
