from typing import Optional


class EventlineError(Exception):
    """
    Base exception for eventline errors.

    Args:
        message (str): The error message.
    """
    def __init__(self, message: str = "An unexpected error occurred in eventline."):
        self.message = message
        super().__init__(self.message)


class InvalidArgumentError(EventlineError, ValueError):
    """
    Error raised when a caller supplies an invalid argument, such as a blank
    distinct id or a non-positive flush size.

    Args:
        message (str): The error message.
        argument (Optional[str]): The name of the offending argument.
    """
    def __init__(self, message: str = "Invalid argument.",
                 argument: Optional[str] = None):
        self.argument = argument
        super().__init__(message)


class ClientClosedError(EventlineError, RuntimeError):
    """
    Error raised when operating on a client or event queue that is already closed.
    """
    def __init__(self, message: str = "This eventline client is already closed"):
        super().__init__(message)


class TransportClosedError(EventlineError, RuntimeError):
    """
    Error raised when a request is submitted to a transport after it was closed.
    """
    def __init__(self, message: str = "The transport is closed and no longer accepts requests"):
        super().__init__(message)


class ErrorResponseDecodeError(EventlineError):
    """
    Error raised when an error body returned by the ingestion endpoint does not
    have the expected shape.

    Args:
        body (Optional[str]): The raw body that failed to decode.
        reason (str): Why decoding failed.
    """
    def __init__(self, body: Optional[str] = None, reason: str = ""):
        self.body = body
        info = f" Details: {reason}" if reason else ""
        super().__init__(f"Unable to decode the error response body.{info}")
