from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict

from .constants import IDENTIFY_EVENT
from .properties import Properties

__all__ = ["CaptureEvent", "IDENTIFY_EVENT"]


@dataclass(frozen=True)
class CaptureEvent:
    """
    A single occurrence to be submitted to the ingestion endpoint.

    The timestamp is the moment the event was recorded by the caller, not the
    moment it is sent.
    """

    name: str
    distinct_id: str
    timestamp: datetime
    properties: Properties = field(default=Properties.EMPTY)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "event": self.name,
            "distinct_id": self.distinct_id,
            "timestamp": self.timestamp.isoformat(),
            "properties": self.properties.to_dict(),
        }
