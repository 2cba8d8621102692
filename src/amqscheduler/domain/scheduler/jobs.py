"""Scheduled job records decoded from browse replies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

from .commands import SCHEDULED_ID
from .errors import DecodeError

UNKNOWN_DESTINATION = "<unknown>"

# Only populated by brokers that track the original destination (ActiveMQ 5.15.1+).
ORIGINAL_DESTINATION = "original-destination"

# STOMP frame headers and mapped JMS headers; neither is a message property.
FRAME_HEADERS = frozenset(
    {
        "ack",
        "content-length",
        "content-type",
        "correlation-id",
        "destination",
        "expires",
        "message-id",
        "persistent",
        "priority",
        "redelivered",
        "reply-to",
        "subscription",
        "timestamp",
        "type",
        ORIGINAL_DESTINATION,
    }
)


@dataclass(frozen=True)
class ReplyFrame:
    """Raw browse reply as handed over by a broker channel."""

    headers: Mapping[str, Any]
    body: Any = b""


@dataclass(frozen=True)
class ScheduledJob:
    """One deferred message held by the broker scheduler."""

    job_id: str
    destination: str = UNKNOWN_DESTINATION
    properties: Dict[str, str] = field(default_factory=dict)
    payload: bytes = b""


def decode_job(frame: ReplyFrame) -> ScheduledJob:
    """Decode a browse reply; raises :class:`DecodeError` for malformed frames."""

    headers = frame.headers
    if not isinstance(headers, Mapping):
        raise DecodeError("reply headers must be a mapping")
    job_id = headers.get(SCHEDULED_ID)
    if not isinstance(job_id, str) or not job_id:
        raise DecodeError(f"reply is missing the {SCHEDULED_ID} property")

    destination = headers.get(ORIGINAL_DESTINATION)
    if not destination:
        destination = UNKNOWN_DESTINATION

    properties = {
        str(name): str(value) for name, value in headers.items() if name not in FRAME_HEADERS
    }
    return ScheduledJob(
        job_id=job_id,
        destination=str(destination),
        properties=properties,
        payload=_payload_bytes(frame.body),
    )


def _payload_bytes(body: Any) -> bytes:
    if body is None:
        return b""
    if isinstance(body, (bytes, bytearray)):
        return bytes(body)
    if isinstance(body, str):
        return body.encode("utf-8")
    raise DecodeError(f"unsupported reply body type: {type(body).__name__}")


__all__ = [
    "FRAME_HEADERS",
    "ORIGINAL_DESTINATION",
    "ReplyFrame",
    "ScheduledJob",
    "UNKNOWN_DESTINATION",
    "decode_job",
]
