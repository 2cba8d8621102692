from __future__ import annotations

import io
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from amqscheduler.domain.scheduler import ControlMessage, ReplyFrame  # noqa: E402
from amqscheduler.ports.broker import BrokerChannel, ReplyConsumer  # noqa: E402
from amqscheduler.utils.log import configure_logging  # noqa: E402


class ScriptedConsumer(ReplyConsumer):
    """Replays a fixed list of frames; exceptions in the list are raised."""

    def __init__(self, frames: Iterable[object], address: str = "/temp-queue/test-replies") -> None:
        self._frames = list(frames)
        self._address = address
        self.timeouts: list[float] = []

    @property
    def address(self) -> str:
        return self._address

    def receive(self, timeout: float) -> ReplyFrame | None:
        self.timeouts.append(timeout)
        if not self._frames:
            return None
        item = self._frames.pop(0)
        if isinstance(item, Exception):
            raise item
        return item  # type: ignore[return-value]


class RecordingChannel(BrokerChannel):
    def __init__(self, frames: Iterable[object] = (), *, send_error: Exception | None = None) -> None:
        self.consumer = ScriptedConsumer(frames)
        self.sent: list[ControlMessage] = []
        self.events: list[str] = []
        self.consumer_released = False
        self._send_error = send_error

    def send(self, message: ControlMessage) -> None:
        self.events.append(f"send:{message.action}")
        if self._send_error is not None:
            raise self._send_error
        self.sent.append(message)

    @contextmanager
    def open_reply_consumer(self) -> Iterator[ScriptedConsumer]:
        self.events.append("open")
        try:
            yield self.consumer
        finally:
            self.consumer_released = True
            self.events.append("release")


def make_reply(
    job_id: str,
    destination: str | None = None,
    body: bytes | str = b"",
    **properties: str,
) -> ReplyFrame:
    headers: dict[str, str] = {
        "message-id": f"ID:broker-{job_id}",
        "subscription": "amqsched-test",
        "destination": "/temp-queue/test-replies",
        "scheduledJobId": job_id,
    }
    if destination is not None:
        headers["original-destination"] = destination
    headers.update(properties)
    return ReplyFrame(headers=headers, body=body)


@pytest.fixture()
def reply_factory():
    return make_reply


@pytest.fixture()
def channel_factory():
    return RecordingChannel


@pytest.fixture(autouse=True)
def _structured_logging() -> Iterator[io.StringIO]:
    buffer = io.StringIO()
    configure_logging("debug", stream=buffer)
    yield buffer


@pytest.fixture()
def consumer_factory():
    return ScriptedConsumer
