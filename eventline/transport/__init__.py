from .base import Transport, TransportCallback, TransportRequest, TransportResponse
from .http import HttpxTransport

__all__ = [
    "HttpxTransport",
    "Transport",
    "TransportCallback",
    "TransportRequest",
    "TransportResponse",
]
