from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import httpx

from eventline.config.log_codes import TRANSPORT_CLOSED, TRANSPORT_SUBMITTED
from eventline.constants import (
    DEFAULT_TIMEOUT,
    DEFAULT_TRANSPORT_WORKERS,
    TRANSPORT_THREAD_PREFIX,
)
from eventline.errors import TransportClosedError
from .base import TransportCallback, TransportRequest

logger = logging.getLogger(__name__)


class HttpxTransport:
    """
    Sends requests with an ``httpx.Client`` on a small thread pool.

    ``submit`` only schedules the request, so the event queue never waits on
    the network. Several requests may be in flight at once and may complete in
    any order.
    """

    def __init__(
        self,
        http_client: Optional[httpx.Client] = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_workers: int = DEFAULT_TRANSPORT_WORKERS,
    ):
        self._owns_client = http_client is None
        self.client = http_client or httpx.Client(timeout=timeout)
        self._pool = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix=TRANSPORT_THREAD_PREFIX
        )
        self._lock = threading.Lock()
        self._pending = 0
        self._closed = False

    @property
    def pending(self) -> int:
        with self._lock:
            return self._pending

    def submit(self, request: TransportRequest, callback: TransportCallback) -> None:
        with self._lock:
            if self._closed:
                raise TransportClosedError()
            self._pending += 1

        try:
            self._pool.submit(self._send, request, callback)
        except RuntimeError as e:
            self._finished()
            raise TransportClosedError() from e

        logger.debug(
            TRANSPORT_SUBMITTED,
            extra={"url": request.url, "event_count": request.event_count},
        )

    def _send(self, request: TransportRequest, callback: TransportCallback) -> None:
        try:
            try:
                response = self.client.post(
                    request.url, json=request.payload, headers=request.headers
                )
            except Exception as e:
                # Mounted transports and event hooks may raise outside httpx.HTTPError
                callback.on_failure(request, e)
                return

            try:
                callback.on_response(request, response)
            finally:
                response.close()
        except Exception:
            logger.exception("Transport callback failed while handling %s", request.url)
        finally:
            self._finished()

    def _finished(self) -> None:
        with self._lock:
            self._pending -= 1
            release = self._closed and self._pending == 0

        if release:
            self._release_client()

    def _release_client(self) -> None:
        if self._owns_client:
            self.client.close()
        logger.debug(TRANSPORT_CLOSED)

    def close(self, wait: bool = True) -> None:
        """
        Stop accepting requests.

        Args:
            wait (bool): Block until every outstanding request has completed.
                When False, an owned HTTP client is released by whichever
                request finishes last.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            idle = self._pending == 0

        self._pool.shutdown(wait=wait)

        if idle:
            self._release_client()
