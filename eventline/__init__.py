# -*- coding: utf-8 -*-

__author__ = """eventline maintainers"""

import os

ROOT = os.path.dirname(os.path.abspath(__file__))

with open(os.path.join(ROOT, 'VERSION')) as version_file:
    VERSION = version_file.read().strip()

from eventline.client import Client  # noqa: E402
from eventline.config import ClientConfig, load_config  # noqa: E402
from eventline.errors import (  # noqa: E402
    ClientClosedError,
    ErrorResponseDecodeError,
    EventlineError,
    InvalidArgumentError,
    TransportClosedError,
)
from eventline.events import CaptureEvent  # noqa: E402
from eventline.properties import Properties  # noqa: E402

__all__ = [
    "VERSION",
    "CaptureEvent",
    "Client",
    "ClientClosedError",
    "ClientConfig",
    "ErrorResponseDecodeError",
    "EventlineError",
    "InvalidArgumentError",
    "Properties",
    "TransportClosedError",
    "load_config",
]
