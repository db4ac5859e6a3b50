import threading
from datetime import datetime, timezone
from typing import List, Optional

import pytest

from eventline.config import ClientConfig
from eventline.events import CaptureEvent
from eventline.properties import Properties
from eventline.transport.base import TransportCallback, TransportRequest


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without network access")


class RecordingTransport:
    """
    Transport double that records every submitted request.
    """

    def __init__(self) -> None:
        self.requests: List[TransportRequest] = []
        self.callbacks: List[TransportCallback] = []
        self.closed_with: Optional[bool] = None
        self._cond = threading.Condition()

    def submit(self, request: TransportRequest, callback: TransportCallback) -> None:
        with self._cond:
            self.requests.append(request)
            self.callbacks.append(callback)
            self._cond.notify_all()

    def wait_for(self, count: int, timeout: float = 2.0) -> bool:
        with self._cond:
            return self._cond.wait_for(lambda: len(self.requests) >= count, timeout)

    def close(self, wait: bool = True) -> None:
        self.closed_with = wait


FIXED_NOW = datetime(2024, 5, 17, 12, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def transport() -> RecordingTransport:
    """
    Recording transport.
    """
    return RecordingTransport()


@pytest.fixture
def fixed_clock():
    """
    Clock that always returns the same instant.
    """
    return lambda: FIXED_NOW


@pytest.fixture
def make_config():
    """
    Factory for client configurations with timed flushing disabled by default.
    """

    def _make(
        flush_size: int = 20, flush_interval: float = 0, host: str = "https://ingest.test/"
    ) -> ClientConfig:
        return ClientConfig(
            host=host,
            api_key="phc_test_key",
            flush_size=flush_size,
            flush_interval=flush_interval,
        )

    return _make


@pytest.fixture
def make_event():
    """
    Factory for capture events.
    """

    def _make(name: str = "clicked", distinct_id: str = "u1", **properties) -> CaptureEvent:
        return CaptureEvent(
            name=name,
            distinct_id=distinct_id,
            timestamp=FIXED_NOW,
            properties=Properties(properties),
        )

    return _make
