from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional

from .config import ClientConfig, load_config
from .config.client import Seconds
from .constants import (
    DEFAULT_FLUSH_INTERVAL,
    DEFAULT_FLUSH_SIZE,
    DEFAULT_TIMEOUT,
    IDENTIFY_EVENT,
    SET_ONCE_PROPERTY,
    SET_PROPERTY,
)
from .dispatch import EventQueue
from .errors import ClientClosedError, InvalidArgumentError
from .events import CaptureEvent
from .logs_helpers import log_call
from .properties import Properties
from .transport import HttpxTransport, Transport

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
PropertiesLike = Optional[Mapping[str, Any]]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _require_not_blank(value: Any, name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(f"{name} cannot be blank", argument=name)
    return value


class Client:
    """
    Entrypoint for reporting events.

    Calls only validate their arguments and enqueue; delivery happens on a
    background thread, in batches, and is best effort. Close the client (or
    use it as a context manager) to flush what is still buffered.

    Args:
        host (str): The base URL of the ingestion endpoint.
        api_key (str): The API key used to authenticate.
        flush_size (int): Buffered events allowed before a flush is forced.
        flush_interval (float | timedelta): Idle time after which buffered
            events are flushed. Non-positive or infinite disables it.
        transport (Optional[Transport]): Transport used to send requests.
            When omitted the client creates, and later closes, an
            ``HttpxTransport``.
        clock (Optional[Callable[[], datetime]]): Source of event timestamps.
        timeout (float | timedelta): HTTP timeout for the default transport.
    """

    def __init__(
        self,
        host: str,
        api_key: str,
        flush_size: int = DEFAULT_FLUSH_SIZE,
        flush_interval: Seconds = DEFAULT_FLUSH_INTERVAL,
        transport: Optional[Transport] = None,
        clock: Optional[Clock] = None,
        timeout: Seconds = DEFAULT_TIMEOUT,
    ):
        config = ClientConfig(
            host=host,
            api_key=api_key,
            flush_size=flush_size,
            flush_interval=flush_interval,
            timeout=timeout,
        )
        self._setup(config, transport, clock)

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        transport: Optional[Transport] = None,
        clock: Optional[Clock] = None,
    ) -> "Client":
        client = cls.__new__(cls)
        client._setup(config, transport, clock)
        return client

    @classmethod
    def from_environment(
        cls,
        transport: Optional[Transport] = None,
        clock: Optional[Clock] = None,
        **overrides: Any,
    ) -> "Client":
        """
        Build a client from keyword overrides, environment variables and the
        user's config.ini, in that order of precedence.
        """
        return cls.from_config(load_config(**overrides), transport=transport, clock=clock)

    def _setup(
        self,
        config: ClientConfig,
        transport: Optional[Transport],
        clock: Optional[Clock],
    ) -> None:
        self.config = config
        self._owns_transport = transport is None
        self.transport: Transport = transport or HttpxTransport(
            timeout=float(config.timeout)
        )
        self._clock: Clock = clock or utc_now
        self._queue = EventQueue(config, self.transport)

    @property
    def is_active(self) -> bool:
        return self._queue.is_active

    def _check_active(self) -> None:
        if not self._queue.is_active:
            raise ClientClosedError()

    def identify(
        self,
        distinct_id: str,
        properties: PropertiesLike = Properties.EMPTY,
        properties_set_once: PropertiesLike = Properties.EMPTY,
    ) -> None:
        """
        Identifies a user.

        Args:
            distinct_id (str): A unique ID representing this user.
            properties (Properties): Properties to set on the user.
            properties_set_once (Properties): Properties that are only set if
                the user does not have them yet.

        Raises:
            ClientClosedError: If the client is closed.
            InvalidArgumentError: If ``distinct_id`` is blank.
        """
        self._check_active()
        _require_not_blank(distinct_id, "distinct_id")

        to_set = Properties.coerce(properties)
        to_set_once = Properties.coerce(properties_set_once)

        payload = {}
        if not to_set.is_empty():
            payload[SET_PROPERTY] = to_set
        if not to_set_once.is_empty():
            payload[SET_ONCE_PROPERTY] = to_set_once

        self._queue.add_event(
            CaptureEvent(
                name=IDENTIFY_EVENT,
                distinct_id=distinct_id,
                timestamp=self._clock(),
                properties=Properties(payload) if payload else Properties.EMPTY,
            )
        )

    def capture(
        self,
        distinct_id: str,
        event_name: str,
        properties: PropertiesLike = Properties.EMPTY,
    ) -> None:
        """
        Captures an event.

        Args:
            distinct_id (str): A unique ID representing this user.
            event_name (str): The name of the event.
            properties (Properties): Properties for this event.

        Raises:
            ClientClosedError: If the client is closed.
            InvalidArgumentError: If ``distinct_id`` or ``event_name`` is
                blank, or ``event_name`` is reserved.
        """
        self._check_active()
        _require_not_blank(distinct_id, "distinct_id")
        _require_not_blank(event_name, "event_name")
        if event_name == IDENTIFY_EVENT:
            raise InvalidArgumentError(
                f"'{IDENTIFY_EVENT}' is reserved, use identify() instead",
                argument="event_name",
            )

        self._queue.add_event(
            CaptureEvent(
                name=event_name,
                distinct_id=distinct_id,
                timestamp=self._clock(),
                properties=Properties.coerce(properties),
            )
        )

    @log_call()
    def close(self, wait_for_delivery: bool = False) -> None:
        """
        Closes this client, flushing any remaining events.

        Args:
            wait_for_delivery (bool): Also wait for requests already handed to
                the transport. Only applies to a transport the client created
                itself.

        Raises:
            ClientClosedError: If the client is already closed.
        """
        self._check_active()
        try:
            self._queue.close()
        except ClientClosedError:
            # Lost a race with a concurrent close
            raise ClientClosedError() from None

        if self._owns_transport:
            self.transport.close(wait=wait_for_delivery)

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc) -> None:
        if self.is_active:
            self.close()
