"""STOMP adapter for the broker command channel."""

from __future__ import annotations

import queue
import threading
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator
from urllib.parse import urlsplit

import stomp
from stomp.exception import StompException

from amqscheduler.domain.scheduler import (
    MANAGEMENT_DESTINATION,
    ConfigurationError,
    ControlMessage,
    ReplyFrame,
    TransportError,
)
from amqscheduler.ports.broker import BrokerChannel, ReplyConsumer
from amqscheduler.utils.log import get_logger

logger = get_logger(__name__)

DEFAULT_STOMP_PORT = 61613
DEFAULT_RECEIPT_TIMEOUT = 10.0
SESSION_LISTENER = "amqsched-session"
TEMP_QUEUE_PREFIX = "/temp-queue/"

_PLAIN_SCHEMES = {"tcp", "stomp", "nio", "stomp+nio"}
_SSL_SCHEMES = {"ssl", "stomp+ssl", "stomp+nio+ssl"}


@dataclass(frozen=True)
class BrokerAddress:
    host: str
    port: int
    use_ssl: bool = False

    @property
    def host_and_ports(self) -> list[tuple[str, int]]:
        return [(self.host, self.port)]


def parse_broker_url(url: str) -> BrokerAddress:
    """Parse ``tcp://host:port`` style broker URLs into a STOMP address."""

    if not url or not url.strip():
        raise ConfigurationError("broker URL must not be empty")
    parts = urlsplit(url.strip())
    scheme = parts.scheme.lower()
    if scheme not in _PLAIN_SCHEMES | _SSL_SCHEMES:
        raise ConfigurationError(f"unsupported broker URL scheme '{parts.scheme}' in {url}")
    try:
        port = parts.port or DEFAULT_STOMP_PORT
    except ValueError as exc:
        raise ConfigurationError(f"invalid port in broker URL {url}") from exc
    if not parts.hostname:
        raise ConfigurationError(f"broker URL {url} has no host")
    return BrokerAddress(host=parts.hostname, port=port, use_ssl=scheme in _SSL_SCHEMES)


def _error_message(frame: Any) -> str:
    message = frame.headers.get("message") or frame.body or "broker error"
    if isinstance(message, bytes):
        message = message.decode("utf-8", errors="replace")
    return message


class _SessionListener(stomp.ConnectionListener):
    """Tracks receipts and ERROR frames for the whole STOMP session."""

    def __init__(self) -> None:
        self._condition = threading.Condition()
        self._receipts: set[str] = set()
        self.error: str | None = None

    def on_receipt(self, frame: Any) -> None:
        with self._condition:
            self._receipts.add(frame.headers.get("receipt-id"))
            self._condition.notify_all()

    def on_error(self, frame: Any) -> None:
        with self._condition:
            self.error = _error_message(frame)
            self._condition.notify_all()

    def on_disconnected(self) -> None:
        with self._condition:
            if self.error is None:
                self.error = "connection to broker lost"
            self._condition.notify_all()

    def wait_for_receipt(self, receipt: str, timeout: float) -> None:
        with self._condition:
            self._condition.wait_for(lambda: receipt in self._receipts or self.error is not None, timeout)
            if receipt in self._receipts:
                self._receipts.discard(receipt)
                return
            if self.error is not None:
                error, self.error = self.error, None
                raise TransportError(f"broker rejected request: {error}")
        raise TransportError(f"broker did not acknowledge the command within {timeout:g}s")


class _ReplyListener(stomp.ConnectionListener):
    """Hands frames from the STOMP receiver thread over to the calling thread."""

    def __init__(self, subscription_id: str) -> None:
        self._subscription_id = subscription_id
        self.frames: "queue.Queue[ReplyFrame | TransportError]" = queue.Queue()

    def on_message(self, frame: Any) -> None:
        headers = dict(frame.headers)
        if headers.get("subscription") not in (None, self._subscription_id):
            return
        self.frames.put(ReplyFrame(headers=headers, body=frame.body))

    def on_error(self, frame: Any) -> None:
        self.frames.put(TransportError(f"broker rejected request: {_error_message(frame)}"))

    def on_disconnected(self) -> None:
        self.frames.put(TransportError("connection to broker lost"))


class StompReplyConsumer(ReplyConsumer):
    def __init__(self, address: str, listener: _ReplyListener) -> None:
        self._address = address
        self._listener = listener

    @property
    def address(self) -> str:
        return self._address

    def receive(self, timeout: float) -> ReplyFrame | None:
        try:
            item = self._listener.frames.get(timeout=max(0.0, timeout))
        except queue.Empty:
            return None
        if isinstance(item, TransportError):
            raise item
        return item


class StompBrokerChannel(BrokerChannel):
    def __init__(
        self,
        connection: Any,
        *,
        management_destination: str = MANAGEMENT_DESTINATION,
        receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT,
        session: _SessionListener | None = None,
    ) -> None:
        self._conn = connection
        self._management_destination = management_destination
        self._receipt_timeout = receipt_timeout
        if session is None:
            session = _SessionListener()
            connection.set_listener(SESSION_LISTENER, session)
        self._session = session

    def send(self, message: ControlMessage) -> None:
        """Send ``message`` and wait until the broker confirms it with a receipt."""

        headers = dict(message.headers)
        if message.reply_to:
            headers["reply-to"] = message.reply_to
        receipt = f"amqsched-{uuid.uuid4().hex}"
        headers["receipt"] = receipt
        try:
            self._conn.send(self._management_destination, body="", headers=headers)
        except (StompException, OSError) as exc:
            raise TransportError(f"failed to send scheduler command: {exc}") from exc
        self._session.wait_for_receipt(receipt, self._receipt_timeout)
        logger.debug(
            "scheduler.command.sent",
            destination=self._management_destination,
            action=message.action,
        )

    @contextmanager
    def open_reply_consumer(self) -> Iterator[StompReplyConsumer]:
        token = uuid.uuid4().hex
        address = f"{TEMP_QUEUE_PREFIX}amqsched-{token}"
        subscription_id = f"amqsched-{token}"
        listener = _ReplyListener(subscription_id)
        self._conn.set_listener(subscription_id, listener)
        try:
            try:
                self._conn.subscribe(destination=address, id=subscription_id, ack="auto")
            except (StompException, OSError) as exc:
                raise TransportError(f"failed to subscribe to reply address {address}: {exc}") from exc
            logger.debug("broker.reply_consumer.opened", address=address)
            try:
                yield StompReplyConsumer(address, listener)
            finally:
                self._unsubscribe(subscription_id)
        finally:
            self._conn.remove_listener(subscription_id)

    def _unsubscribe(self, subscription_id: str) -> None:
        if not self._conn.is_connected():
            return
        try:
            self._conn.unsubscribe(id=subscription_id)
        except (StompException, OSError) as exc:
            logger.warning("broker.reply_consumer.release_failed", subscription=subscription_id, error=str(exc))


ConnectionFactory = Callable[..., Any]


@contextmanager
def connect_channel(
    url: str,
    user: str | None = None,
    password: str | None = None,
    *,
    management_destination: str = MANAGEMENT_DESTINATION,
    receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT,
    connection_factory: ConnectionFactory | None = None,
) -> Iterator[StompBrokerChannel]:
    """Open a STOMP session to one broker and close it on every exit path."""

    address = parse_broker_url(url)
    factory = connection_factory or stomp.Connection
    conn = factory(address.host_and_ports, auto_decode=False)
    if address.use_ssl:
        conn.set_ssl(for_hosts=address.host_and_ports)
    session = _SessionListener()
    conn.set_listener(SESSION_LISTENER, session)
    try:
        conn.connect(username=user, passcode=password, wait=True)
    except (StompException, OSError) as exc:
        cause = session.error or str(exc) or type(exc).__name__
        raise TransportError(f"failed to connect to broker {url}: {cause}") from exc
    logger.info("broker.connected", host=address.host, port=address.port, ssl=address.use_ssl)
    try:
        yield StompBrokerChannel(
            conn,
            management_destination=management_destination,
            receipt_timeout=receipt_timeout,
            session=session,
        )
    finally:
        _disconnect(conn)


def _disconnect(conn: Any) -> None:
    if not conn.is_connected():
        return
    try:
        conn.disconnect()
    except (StompException, OSError) as exc:
        logger.warning("broker.disconnect_failed", error=str(exc))


__all__ = [
    "BrokerAddress",
    "DEFAULT_RECEIPT_TIMEOUT",
    "DEFAULT_STOMP_PORT",
    "StompBrokerChannel",
    "StompReplyConsumer",
    "connect_channel",
    "parse_broker_url",
]
