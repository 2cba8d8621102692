"""Port definitions for the broker command channel."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from amqscheduler.domain.scheduler import ControlMessage, ReplyFrame


class ReplyConsumer(ABC):
    """Consumer bound to a temporary, receiver-exclusive reply address."""

    @property
    @abstractmethod
    def address(self) -> str:
        """Address to put in the reply-to field of a browse command."""

    @abstractmethod
    def receive(self, timeout: float) -> ReplyFrame | None:
        """Block up to ``timeout`` seconds for the next reply; ``None`` on silence."""


class BrokerChannel(ABC):
    """Transport used to talk to the scheduler management address of one broker."""

    @abstractmethod
    def send(self, message: ControlMessage) -> None:
        """Deliver one control message. Success means transmitted, not applied."""

    @abstractmethod
    def open_reply_consumer(self) -> AbstractContextManager[ReplyConsumer]:
        """Allocate a temporary reply address with a consumer already bound to it."""


__all__ = ["BrokerChannel", "ReplyConsumer"]
