from importlib.metadata import PackageNotFoundError, version
import logging
import platform
from typing import Dict, Optional

import httpx


LOG = logging.getLogger(__name__)


def get_version() -> Optional[str]:
    """
    Get the version of the eventline package.

    Returns:
      Optional[str]: The eventline version if found, otherwise None.
    """
    try:
        return version("eventline")
    except PackageNotFoundError:
        LOG.debug("Unable to get eventline version from the installed metadata.")
        from eventline import VERSION

        return VERSION


def get_user_agent() -> str:
    """
    Get the user agent string for ingestion requests, e.g.
    ``eventline/1.0.0 (Python/3.12.1; httpx/0.27.0; Linux)``.
    """
    return (
        f"eventline/{get_version() or 'unknown'} "
        f"(Python/{platform.python_version()}; httpx/{httpx.__version__}; {platform.system() or 'unknown'})"
    )


def get_meta_http_headers() -> Dict[str, str]:
    """
    Get the metadata headers sent with every ingestion request.

    Returns:
      Dict[str, str]: The metadata headers.
    """
    return {
        "Eventline-Client-Version": get_version() or "",
        "User-Agent": get_user_agent(),
    }
