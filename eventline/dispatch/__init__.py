from .payloads import build_request
from .queue import EventQueue, QueueState
from .responses import ErrorResponse, ResponseLogger

__all__ = [
    "ErrorResponse",
    "EventQueue",
    "QueueState",
    "ResponseLogger",
    "build_request",
]
