from __future__ import annotations

import logging
from typing import Optional

from pydantic import BaseModel, ValidationError

from eventline.config.log_codes import RESPONSE_RECEIVED
from eventline.errors import ErrorResponseDecodeError
from eventline.transport.base import TransportRequest, TransportResponse

logger = logging.getLogger(__name__)

DECODED_ERROR_STATUSES = frozenset({400, 401})

MSG_UNKNOWN_ERROR = (
    "An unknown error occurred whilst posting %d event(s)! The events will be discarded."
)
MSG_DECODED_ERROR = (
    "An error occurred whilst posting %d event(s) (%s: %s). %s "
    "The events will be discarded."
)
MSG_DECODED_ERROR_WITH_ATTR = (
    "An error occurred whilst posting %d event(s) (%s: %s, attr: %s). %s "
    "The events will be discarded."
)


class ErrorResponse(BaseModel):
    """
    An error body returned by the ingestion endpoint on 400 and 401 responses.
    """

    type: str
    code: str
    detail: str
    attr: Optional[str] = None

    @classmethod
    def decode(cls, body: str) -> "ErrorResponse":
        """
        Decode a raw error body.

        Args:
            body (str): The JSON body.

        Returns:
            ErrorResponse: The decoded error.

        Raises:
            ErrorResponseDecodeError: If the body is not a JSON object with the
                expected fields.
        """
        try:
            return cls.model_validate_json(body)
        except ValidationError as e:
            raise ErrorResponseDecodeError(body=body, reason=str(e)) from e


class ResponseLogger:
    """
    Transport callback that reports the outcome of a flush through logging.

    Failed batches are never retried or requeued.
    """

    def on_failure(self, request: TransportRequest, exc: BaseException) -> None:
        logger.error(MSG_UNKNOWN_ERROR, request.event_count, exc_info=exc)

    def on_response(
        self, request: TransportRequest, response: TransportResponse
    ) -> None:
        status = response.status_code

        if status not in DECODED_ERROR_STATUSES:
            logger.debug(
                RESPONSE_RECEIVED,
                extra={
                    "url": request.url,
                    "status_code": status,
                    "event_count": request.event_count,
                },
            )
            return

        body = self._read_body(response)
        if not body:
            logger.error(MSG_UNKNOWN_ERROR, request.event_count)
            return

        try:
            error = ErrorResponse.decode(body)
        except ErrorResponseDecodeError as e:
            logger.error(MSG_UNKNOWN_ERROR, request.event_count)
            logger.debug("Undecodable error body (HTTP %d): %s", status, e)
            return

        if error.attr:
            message = MSG_DECODED_ERROR_WITH_ATTR
            args = (request.event_count, error.type, error.code, error.attr, error.detail)
        else:
            message = MSG_DECODED_ERROR
            args = (request.event_count, error.type, error.code, error.detail)

        logger.error(
            message,
            *args,
            extra={"error_attr": error.attr, "status_code": status},
        )

    @staticmethod
    def _read_body(response: TransportResponse) -> Optional[str]:
        try:
            return response.text
        except Exception:
            logger.debug("Unable to read the response body", exc_info=True)
            return None
