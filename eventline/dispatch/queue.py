from __future__ import annotations

import logging
import queue
import threading
from enum import Enum
from typing import List, Optional

from eventline.config import ClientConfig
from eventline.config.log_codes import (
    QUEUE_CLOSED,
    QUEUE_CLOSING,
    QUEUE_EVENT_DROPPED,
    QUEUE_FLUSH,
    QUEUE_FLUSH_FAILED,
    QUEUE_STARTED,
)
from eventline.constants import WORKER_THREAD_NAME
from eventline.errors import ClientClosedError
from eventline.events import CaptureEvent
from eventline.logs_helpers import log_call
from eventline.transport.base import Transport, TransportCallback
from .payloads import build_request
from .responses import ResponseLogger

logger = logging.getLogger(__name__)


class QueueState(Enum):
    RUNNING = "running"
    CLOSED = "closed"


_CLOSE = object()


class EventQueue:
    """
    Buffers events on a background thread and hands them to the transport in
    batches.

    A flush happens when the buffer holds more than ``flush_size`` events, when
    ``flush_interval`` passes without a new event arriving, or when the queue
    is closed. Producers never block: ``add_event`` only puts on an unbounded
    queue. The buffer itself is only ever touched by the worker thread.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Transport,
        callback: Optional[TransportCallback] = None,
    ):
        self.config = config
        self.transport = transport
        self.callback = callback or ResponseLogger()

        self._inbound: "queue.Queue[object]" = queue.Queue()
        self._lock = threading.Lock()
        self._state = QueueState.RUNNING

        self._thread = threading.Thread(
            target=self._run, name=WORKER_THREAD_NAME, daemon=True
        )
        self._thread.start()
        logger.debug(QUEUE_STARTED, extra=config.as_dict())

    @property
    def state(self) -> QueueState:
        return self._state

    @property
    def is_active(self) -> bool:
        """
        Checks if this queue still accepts events.
        """
        return self._state is QueueState.RUNNING

    def add_event(self, event: CaptureEvent) -> None:
        """
        Adds an event to the queue. Events added after close are dropped.
        """
        with self._lock:
            if self._state is QueueState.CLOSED:
                logger.debug(QUEUE_EVENT_DROPPED, extra={"event_name": event.name})
                return
            self._inbound.put_nowait(event)

    @log_call(show_args=False)
    def close(self, timeout: Optional[float] = None) -> None:
        """
        Stop accepting events, flush whatever is buffered and wait for the
        worker thread to finish.

        Requests already handed to the transport are not waited for.

        Args:
            timeout (Optional[float]): How long to wait for the worker thread.

        Raises:
            ClientClosedError: If the queue is already closed.
        """
        with self._lock:
            if self._state is QueueState.CLOSED:
                raise ClientClosedError("This event queue is already closed")
            self._state = QueueState.CLOSED
            # Nothing can be enqueued behind the sentinel once the state is set
            self._inbound.put_nowait(_CLOSE)

        logger.debug(QUEUE_CLOSING)
        self._thread.join(timeout)
        logger.debug(QUEUE_CLOSED, extra={"worker_alive": self._thread.is_alive()})

    def _next_timeout(self, buffer: List[CaptureEvent]) -> Optional[float]:
        if buffer and self.config.timed_flush_enabled:
            # Queue.get rejects waits longer than the platform supports
            return min(float(self.config.flush_interval), threading.TIMEOUT_MAX)
        return None

    def _run(self) -> None:
        buffer: List[CaptureEvent] = []

        while True:
            try:
                try:
                    item = self._inbound.get(timeout=self._next_timeout(buffer))
                except queue.Empty:
                    self.process(buffer)
                    buffer = []
                    continue

                if item is _CLOSE:
                    if buffer:
                        self.process(buffer)
                    break

                buffer.append(item)  # type: ignore[arg-type]

                if len(buffer) > self.config.flush_size:
                    self.process(buffer)
                    buffer = []
            except Exception:
                logger.exception(
                    "Unexpected error in the event queue worker, %d buffered event(s) kept.",
                    len(buffer),
                )

    def process(self, events: List[CaptureEvent]) -> None:
        """
        Serialize the events and hand them to the transport without waiting
        for the response.
        """
        request = build_request(events, self.config)
        if request is None:
            return

        logger.debug(
            QUEUE_FLUSH, extra={"url": request.url, "event_count": request.event_count}
        )

        try:
            self.transport.submit(request, self.callback)
        except Exception:
            logger.exception(
                "Unable to dispatch %d event(s)! The events will be discarded.",
                request.event_count,
                extra={"log_code": QUEUE_FLUSH_FAILED},
            )
