import configparser
import logging
import math
import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from eventline.constants import (
    CONFIG,
    CONFIG_SECTION_NAME,
    DEFAULT_FLUSH_INTERVAL,
    DEFAULT_FLUSH_SIZE,
    DEFAULT_TIMEOUT,
    ENV_API_KEY,
    ENV_FLUSH_INTERVAL,
    ENV_FLUSH_SIZE,
    ENV_HOST,
    ENV_TIMEOUT,
)
from eventline.errors import InvalidArgumentError
from .log_codes import (
    CLIENT_CONFIG_MISSING_SECTION,
    CLIENT_RESOLVED,
    CLIENT_VALUE_DEFAULTED,
    CLIENT_VALUE_RESOLVED,
)

logger = logging.getLogger(__name__)

HOST_KEY = "host"
API_KEY_KEY = "api_key"
FLUSH_SIZE_KEY = "flush_size"
FLUSH_INTERVAL_KEY = "flush_interval"
TIMEOUT_KEY = "timeout"

Seconds = Union[float, int, timedelta]


def _to_seconds(value: Any, name: str) -> float:
    if isinstance(value, timedelta):
        return value.total_seconds()
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentError(
            f"{name} must be a number of seconds or a timedelta, was {value!r}",
            argument=name,
        )
    return float(value)


@dataclass(frozen=True)
class ClientConfig:
    """
    Immutable configuration shared by a client and its event queue.

    Args:
        host (str): Base URL of the ingestion endpoint.
        api_key (str): Credential sent as a bearer token on every request.
        flush_size (int): Number of buffered events that may accumulate before
            a flush is forced; a flush happens once the buffer holds more than
            this many events.
        flush_interval (float | timedelta): Seconds of inactivity after which
            a non-empty buffer is flushed. Zero, negative or infinite values
            disable timed flushing.
        timeout (float | timedelta): HTTP timeout used by the default transport.
    """

    host: str
    api_key: str
    flush_size: int = DEFAULT_FLUSH_SIZE
    flush_interval: Seconds = DEFAULT_FLUSH_INTERVAL
    timeout: Seconds = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        if not isinstance(self.host, str) or not self.host.strip():
            raise InvalidArgumentError("host cannot be blank", argument=HOST_KEY)

        if not isinstance(self.api_key, str) or not self.api_key.strip():
            raise InvalidArgumentError("api_key cannot be blank", argument=API_KEY_KEY)

        if (
            isinstance(self.flush_size, bool)
            or not isinstance(self.flush_size, int)
            or self.flush_size <= 0
        ):
            raise InvalidArgumentError(
                f"flush_size must be a positive integer, was '{self.flush_size}'",
                argument=FLUSH_SIZE_KEY,
            )

        object.__setattr__(
            self, "flush_interval", _to_seconds(self.flush_interval, FLUSH_INTERVAL_KEY)
        )
        object.__setattr__(self, "timeout", _to_seconds(self.timeout, TIMEOUT_KEY))

    @property
    def base_url(self) -> str:
        return self.host.strip().rstrip("/")

    @property
    def timed_flush_enabled(self) -> bool:
        """
        Whether the event queue flushes on elapsed time as well as on size.
        """
        return self.flush_interval > 0 and math.isfinite(self.flush_interval)

    def as_dict(self) -> Dict[str, Any]:
        """
        Convert the configuration to a dictionary, with the credential masked.
        """
        return {
            HOST_KEY: self.base_url,
            API_KEY_KEY: _mask(self.api_key),
            FLUSH_SIZE_KEY: self.flush_size,
            FLUSH_INTERVAL_KEY: self.flush_interval,
            TIMEOUT_KEY: self.timeout,
        }


def _mask(secret: str) -> str:
    if len(secret) <= 4:
        return "****"
    return f"{secret[:4]}****"


def _parse_int(raw: str, name: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        raise InvalidArgumentError(f"{name} must be an integer, was {raw!r}", argument=name)


def _parse_float(raw: str, name: str) -> float:
    try:
        return float(raw.strip())
    except ValueError:
        raise InvalidArgumentError(f"{name} must be a number, was {raw!r}", argument=name)


def _values_from_env() -> Dict[str, Optional[str]]:
    return {
        HOST_KEY: os.environ.get(ENV_HOST),
        API_KEY_KEY: os.environ.get(ENV_API_KEY),
        FLUSH_SIZE_KEY: os.environ.get(ENV_FLUSH_SIZE),
        FLUSH_INTERVAL_KEY: os.environ.get(ENV_FLUSH_INTERVAL),
        TIMEOUT_KEY: os.environ.get(ENV_TIMEOUT),
    }


def _values_from_config_ini(config_path: Path) -> Dict[str, Optional[str]]:
    """
    Retrieve the client values from the config.ini file.

    Args:
        config_path (Path): The path to the config.ini file.

    Returns:
        Dict[str, Optional[str]]: The raw values found, keyed by setting name.
    """
    config = configparser.ConfigParser()
    config_files = config.read(filenames=[config_path])

    if not config_files or not config.has_section(CONFIG_SECTION_NAME):
        if config_files:
            logger.debug(
                CLIENT_CONFIG_MISSING_SECTION, extra={"config_path": str(config_path)}
            )
        return {}

    section = config[CONFIG_SECTION_NAME]
    return {
        key: section.get(key, None)
        for key in (HOST_KEY, API_KEY_KEY, FLUSH_SIZE_KEY, FLUSH_INTERVAL_KEY, TIMEOUT_KEY)
    }


_PARSERS: Dict[str, Callable[[str, str], Any]] = {
    FLUSH_SIZE_KEY: _parse_int,
    FLUSH_INTERVAL_KEY: _parse_float,
    TIMEOUT_KEY: _parse_float,
}

_DEFAULTS: Dict[str, Any] = {
    FLUSH_SIZE_KEY: DEFAULT_FLUSH_SIZE,
    FLUSH_INTERVAL_KEY: DEFAULT_FLUSH_INTERVAL,
    TIMEOUT_KEY: DEFAULT_TIMEOUT,
}


def load_config(
    host: Optional[str] = None,
    api_key: Optional[str] = None,
    flush_size: Optional[int] = None,
    flush_interval: Optional[Seconds] = None,
    timeout: Optional[Seconds] = None,
    config_path: Path = CONFIG,
) -> ClientConfig:
    """
    Resolve the effective client configuration.

    Resolution order per setting (first non-None wins):
      1. Keyword arguments
      2. Environment variables
      3. config.ini file, ``[eventline]`` section
      4. Built-in defaults (host and api_key have none)

    Args:
        host (Optional[str]): The ingestion host.
        api_key (Optional[str]): The API key.
        flush_size (Optional[int]): The flush size.
        flush_interval (Optional[Seconds]): The flush interval.
        timeout (Optional[Seconds]): The HTTP timeout.
        config_path (Path): The path to the config.ini file.

    Returns:
        ClientConfig: The resolved configuration.

    Raises:
        InvalidArgumentError: If a value is missing or malformed.
    """
    explicit: Dict[str, Any] = {
        HOST_KEY: host,
        API_KEY_KEY: api_key,
        FLUSH_SIZE_KEY: flush_size,
        FLUSH_INTERVAL_KEY: flush_interval,
        TIMEOUT_KEY: timeout,
    }

    sources: List[Tuple[str, Callable[[], Dict[str, Any]]]] = [
        ("explicit", lambda: explicit),
        ("env", _values_from_env),
        ("config", lambda: _values_from_config_ini(config_path)),
    ]
    loaded: Dict[str, Dict[str, Any]] = {}

    resolved: Dict[str, Any] = {}
    for key in explicit:
        for source_name, source_func in sources:
            if source_name not in loaded:
                loaded[source_name] = source_func()
            raw = loaded[source_name].get(key)
            if raw is None:
                continue
            if source_name != "explicit" and key in _PARSERS:
                raw = _PARSERS[key](raw, key)
            resolved[key] = raw
            logger.debug(CLIENT_VALUE_RESOLVED, extra={"key": key, "source": source_name})
            break
        else:
            if key in _DEFAULTS:
                resolved[key] = _DEFAULTS[key]
                logger.debug(CLIENT_VALUE_DEFAULTED, extra={"key": key})

    if not resolved.get(HOST_KEY):
        raise InvalidArgumentError(
            f"No host configured. Pass one explicitly, set {ENV_HOST} or add it to {config_path}",
            argument=HOST_KEY,
        )
    if not resolved.get(API_KEY_KEY):
        raise InvalidArgumentError(
            f"No API key configured. Pass one explicitly, set {ENV_API_KEY} or add it to {config_path}",
            argument=API_KEY_KEY,
        )

    config = ClientConfig(**resolved)
    logger.info(CLIENT_RESOLVED, extra=config.as_dict())
    return config
