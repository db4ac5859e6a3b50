from pathlib import Path

DIR_NAME = ".eventline"


def get_user_dir() -> Path:
    """
    Get the user directory for the eventline configuration.

    Returns:
        Path: The user directory path.
    """
    path = Path("~", DIR_NAME).expanduser()
    return path


USER_CONFIG_DIR = get_user_dir()

CONFIG_FILE_NAME = "config.ini"
CONFIG = USER_CONFIG_DIR / CONFIG_FILE_NAME
CONFIG_SECTION_NAME = "eventline"

# Client defaults
DEFAULT_FLUSH_SIZE: int = 20
DEFAULT_FLUSH_INTERVAL: float = 30.0
DEFAULT_TIMEOUT: float = 10.0
DEFAULT_TRANSPORT_WORKERS: int = 4

# Reserved event names
IDENTIFY_EVENT = "$identify"
SET_PROPERTY = "$set"
SET_ONCE_PROPERTY = "$set_once"

# Ingestion endpoints, relative to the configured host
CAPTURE_PATH = "/capture"
BATCH_PATH = "/batch"

# Environment variables
ENV_HOST = "EVENTLINE_HOST"
ENV_API_KEY = "EVENTLINE_API_KEY"
ENV_FLUSH_SIZE = "EVENTLINE_FLUSH_SIZE"
ENV_FLUSH_INTERVAL = "EVENTLINE_FLUSH_INTERVAL"
ENV_TIMEOUT = "EVENTLINE_TIMEOUT"

WORKER_THREAD_NAME = "eventline-event-queue"
TRANSPORT_THREAD_PREFIX = "eventline-transport"
