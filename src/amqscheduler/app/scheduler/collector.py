"""Collection of browse replies into scheduled job records.

The scheduler sends no end-of-stream marker. The first reply may take a while
because the broker has to start dispatching, so the first receive waits longer;
after that a short silence is taken to mean the stream is complete. Both
durations are tunables, not protocol guarantees.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator

from amqscheduler.domain.scheduler import ConfigurationError, DecodeError, ScheduledJob, decode_job
from amqscheduler.ports.broker import ReplyConsumer
from amqscheduler.settings import DEFAULT_INITIAL_RECEIVE_TIMEOUT, DEFAULT_RECEIVE_TIMEOUT
from amqscheduler.utils.log import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ReceiveTimeouts:
    initial: float = DEFAULT_INITIAL_RECEIVE_TIMEOUT
    subsequent: float = DEFAULT_RECEIVE_TIMEOUT

    def __post_init__(self) -> None:
        for value in (self.initial, self.subsequent):
            if not math.isfinite(value) or value < 0:
                raise ConfigurationError("receive timeouts must be finite and non-negative")


class BrowseResponseCollector:
    """Single-use iterator over the replies arriving on one reply consumer."""

    def __init__(self, consumer: ReplyConsumer, timeouts: ReceiveTimeouts | None = None) -> None:
        self._consumer = consumer
        self._timeouts = timeouts or ReceiveTimeouts()
        self._started = False
        self.received = 0
        self.skipped = 0

    def __iter__(self) -> Iterator[ScheduledJob]:
        if self._started:
            raise RuntimeError("browse replies can only be collected once")
        self._started = True
        return self._collect()

    def _collect(self) -> Iterator[ScheduledJob]:
        timeout = self._timeouts.initial
        while True:
            frame = self._consumer.receive(timeout)
            if frame is None:
                break
            timeout = self._timeouts.subsequent
            self.received += 1
            try:
                job = decode_job(frame)
            except DecodeError as exc:
                self.skipped += 1
                logger.warning("scheduler.browse.decode_failed", reply=self.received, error=str(exc))
                continue
            yield job
        logger.debug("scheduler.browse.drained", received=self.received, skipped=self.skipped)


__all__ = ["BrowseResponseCollector", "ReceiveTimeouts"]
