"""Control commands understood by the broker scheduler and their wire envelopes.

The scheduler listens on a well-known management topic and reacts to the
``AMQ_SCHEDULER_ACTION`` property of each message it receives. Remove commands
are fire-and-forget: the broker never acknowledges them. Browse commands carry a
reply-to address and the broker streams a copy of every pending job to it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Union

from .errors import InvalidArgument

MANAGEMENT_DESTINATION = "/topic/ActiveMQ.Scheduler.Management"

SCHEDULER_ACTION = "AMQ_SCHEDULER_ACTION"
SCHEDULED_ID = "scheduledJobId"

ACTION_BROWSE = "BROWSE"
ACTION_REMOVE = "REMOVE"
ACTION_REMOVE_ALL = "REMOVEALL"


@dataclass(frozen=True)
class Browse:
    """Ask the scheduler to replay every pending job to a reply address."""


@dataclass(frozen=True)
class RemoveOne:
    """Remove a single scheduled job by its broker-assigned id."""

    job_id: str

    def __post_init__(self) -> None:
        if not self.job_id:
            raise InvalidArgument("scheduled job id must be a non-empty string")


@dataclass(frozen=True)
class RemoveAll:
    """Remove every job held by the scheduler of the connected broker."""


ControlCommand = Union[Browse, RemoveOne, RemoveAll]


@dataclass(frozen=True)
class ControlMessage:
    headers: Dict[str, str] = field(default_factory=dict)
    reply_to: str | None = None

    @property
    def action(self) -> str | None:
        return self.headers.get(SCHEDULER_ACTION)


def build_remove_all() -> ControlMessage:
    return ControlMessage(headers={SCHEDULER_ACTION: ACTION_REMOVE_ALL})


def build_remove_one(job_id: str) -> ControlMessage:
    command = RemoveOne(job_id)
    return ControlMessage(headers={SCHEDULER_ACTION: ACTION_REMOVE, SCHEDULED_ID: command.job_id})


def build_browse(reply_address: str) -> ControlMessage:
    if not reply_address:
        raise InvalidArgument("browse requires a reply address")
    return ControlMessage(headers={SCHEDULER_ACTION: ACTION_BROWSE}, reply_to=reply_address)


def build_control_message(command: ControlCommand, reply_address: str | None = None) -> ControlMessage:
    """Translate a command variant into the envelope the scheduler expects."""

    if isinstance(command, RemoveAll):
        return build_remove_all()
    if isinstance(command, RemoveOne):
        return build_remove_one(command.job_id)
    if isinstance(command, Browse):
        return build_browse(reply_address or "")
    raise InvalidArgument(f"unsupported scheduler command: {command!r}")


__all__ = [
    "ACTION_BROWSE",
    "ACTION_REMOVE",
    "ACTION_REMOVE_ALL",
    "Browse",
    "ControlCommand",
    "ControlMessage",
    "MANAGEMENT_DESTINATION",
    "RemoveAll",
    "RemoveOne",
    "SCHEDULED_ID",
    "SCHEDULER_ACTION",
    "build_browse",
    "build_control_message",
    "build_remove_all",
    "build_remove_one",
]
