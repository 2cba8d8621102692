"""Application service running one scheduler command against one broker."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from amqscheduler.domain.scheduler import (
    Browse,
    ControlCommand,
    DisplayMode,
    RemoveAll,
    RemoveOne,
    build_browse,
    build_control_message,
)
from amqscheduler.ports.broker import BrokerChannel
from amqscheduler.utils.log import get_logger

from .collector import BrowseResponseCollector, ReceiveTimeouts
from .report import Sink, render_jobs

logger = get_logger(__name__)


@dataclass(frozen=True)
class BrowseSummary:
    received: int
    skipped: int
    rendered: int

    def to_dict(self) -> dict[str, int]:
        return {"received": self.received, "skipped": self.skipped, "rendered": self.rendered}


class SchedulerCommandService:
    def __init__(self, channel: BrokerChannel, timeouts: ReceiveTimeouts | None = None) -> None:
        self._channel = channel
        self._timeouts = timeouts or ReceiveTimeouts()

    def remove(self, command: RemoveOne | RemoveAll) -> None:
        """Signal the scheduler to drop jobs. The broker never confirms removal."""

        message = build_control_message(command)
        self._channel.send(message)
        logger.info(
            "scheduler.remove.sent",
            action=message.action,
            job_id=getattr(command, "job_id", None),
        )

    @contextmanager
    def browse(self) -> Iterator[BrowseResponseCollector]:
        """Send a browse request and yield a collector over the replies.

        The reply consumer is bound before the request goes out and is released
        when the block exits, whatever the outcome.
        """

        with self._channel.open_reply_consumer() as consumer:
            self._channel.send(build_browse(consumer.address))
            logger.debug("scheduler.browse.sent", reply_to=consumer.address)
            yield BrowseResponseCollector(consumer, self._timeouts)

    def list_jobs(self, mode: DisplayMode, sink: Sink) -> BrowseSummary:
        with self.browse() as collector:
            rendered = render_jobs(collector, mode, sink)
        summary = BrowseSummary(received=collector.received, skipped=collector.skipped, rendered=rendered)
        logger.info("scheduler.browse.completed", **summary.to_dict())
        return summary

    def execute(
        self,
        command: ControlCommand,
        *,
        mode: DisplayMode | None = None,
        sink: Sink | None = None,
    ) -> BrowseSummary | None:
        if isinstance(command, Browse):
            if mode is None or sink is None:
                raise ValueError("browse requires a display mode and an output sink")
            return self.list_jobs(mode, sink)
        self.remove(command)
        return None


__all__ = ["BrowseSummary", "SchedulerCommandService"]
