from __future__ import annotations

from typing import Dict, Optional, Sequence

from eventline.config import ClientConfig
from eventline.constants import BATCH_PATH, CAPTURE_PATH
from eventline.events import CaptureEvent
from eventline.meta import get_meta_http_headers
from eventline.transport.base import TransportRequest


def build_headers(config: ClientConfig) -> Dict[str, str]:
    return {
        **get_meta_http_headers(),
        "Authorization": f"Bearer {config.api_key}",
        "Content-Type": "application/json",
    }


def build_request(
    events: Sequence[CaptureEvent], config: ClientConfig
) -> Optional[TransportRequest]:
    """
    Serialize a flushed buffer into a single request.

    One event goes to the capture endpoint as-is; two or more go to the batch
    endpoint, in the order they were enqueued.

    Args:
        events (Sequence[CaptureEvent]): The buffered events.
        config (ClientConfig): The client configuration.

    Returns:
        Optional[TransportRequest]: The request, or None when there is nothing
        to send.
    """
    if not events:
        return None

    if len(events) == 1:
        url = f"{config.base_url}{CAPTURE_PATH}"
        payload = events[0].to_payload()
    else:
        url = f"{config.base_url}{BATCH_PATH}"
        payload = {"batch": [event.to_payload() for event in events]}

    return TransportRequest(
        url=url,
        payload=payload,
        headers=build_headers(config),
        event_count=len(events),
    )
