from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Protocol


@dataclass(frozen=True)
class TransportRequest:
    url: str
    payload: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)
    event_count: int = 0


class TransportResponse(Protocol):
    @property
    def status_code(self) -> int: ...
    @property
    def text(self) -> str: ...


class TransportCallback(Protocol):
    def on_failure(self, request: TransportRequest, exc: BaseException) -> None: ...
    def on_response(
        self, request: TransportRequest, response: TransportResponse
    ) -> None: ...


class Transport(Protocol):
    def submit(self, request: TransportRequest, callback: TransportCallback) -> None:
        """
        Send the request without blocking the caller. The callback is invoked
        from whatever thread completes the request.
        """
        ...

    def close(self, wait: bool = True) -> None: ...
