"""Scheduler domain exports."""

from .commands import (
    MANAGEMENT_DESTINATION,
    Browse,
    ControlCommand,
    ControlMessage,
    RemoveAll,
    RemoveOne,
    build_browse,
    build_control_message,
    build_remove_all,
    build_remove_one,
)
from .display import DetailMode, DisplayMode, TotalsMode, display_mode_from_flags
from .errors import (
    ConfigurationError,
    DecodeError,
    InvalidArgument,
    SchedulerError,
    TransportError,
)
from .jobs import UNKNOWN_DESTINATION, ReplyFrame, ScheduledJob, decode_job

__all__ = [
    "Browse",
    "ConfigurationError",
    "ControlCommand",
    "ControlMessage",
    "DecodeError",
    "DetailMode",
    "DisplayMode",
    "InvalidArgument",
    "MANAGEMENT_DESTINATION",
    "RemoveAll",
    "RemoveOne",
    "ReplyFrame",
    "ScheduledJob",
    "SchedulerError",
    "TotalsMode",
    "TransportError",
    "UNKNOWN_DESTINATION",
    "build_browse",
    "build_control_message",
    "build_remove_all",
    "build_remove_one",
    "decode_job",
    "display_mode_from_flags",
]
