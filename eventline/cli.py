import logging
import sys
from typing import Annotated, Dict, List, Optional

import typer

from eventline.client import Client
from eventline.config import load_config
from eventline.console import error_console, main_console as console
from eventline.constants import CONFIG, ENV_API_KEY, ENV_HOST
from eventline.errors import EventlineError, InvalidArgumentError
from eventline.meta import get_version
from eventline.properties import Properties

LOG = logging.getLogger(__name__)

EXIT_CODE_FAILURE = 1

CLI_MAIN_HELP = (
    "Send events to an ingestion endpoint from the command line.\n\n"
    f"Connection settings are read from the options below, then {ENV_HOST} / "
    f"{ENV_API_KEY}, then [bold]{CONFIG}[/bold]."
)
CLI_HOST_HELP = "Base URL of the ingestion endpoint."
CLI_API_KEY_HELP = "API key sent as a bearer token."
CLI_PROPERTY_HELP = "Event property as key=value. Repeat for more than one."
CLI_SET_ONCE_HELP = "Property to set only once, as key=value. Repeat for more than one."
CLI_DEBUG_HELP = "Enable debug logging."

cli_app = typer.Typer(rich_markup_mode="rich", name="eventline", help=CLI_MAIN_HELP)


def configure_logger(debug: bool) -> None:
    level = logging.CRITICAL

    if debug:
        level = logging.DEBUG

    logging.basicConfig(format="%(asctime)s %(name)s => %(message)s", level=level)


def parse_properties(pairs: Optional[List[str]]) -> Properties:
    """
    Turn ``key=value`` pairs into a properties instance.

    Raises:
        InvalidArgumentError: If a pair has no ``=`` or an empty key.
    """
    values: Dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise InvalidArgumentError(
                f"Invalid property {pair!r}, expected key=value", argument="property"
            )
        values[key.strip()] = value
    return Properties.from_map(values)


def _run(host: Optional[str], api_key: Optional[str], action) -> None:
    try:
        config = load_config(host=host, api_key=api_key)
        client = Client.from_config(config)
        try:
            action(client)
        finally:
            client.close(wait_for_delivery=True)
    except EventlineError as e:
        LOG.debug("Command failed", exc_info=True)
        error_console.print(f"[failed]Error:[/failed] {e.message}")
        sys.exit(EXIT_CODE_FAILURE)


@cli_app.callback()
def main(
    debug: Annotated[bool, typer.Option("--debug", help=CLI_DEBUG_HELP)] = False,
) -> None:
    configure_logger(debug)
    LOG.info("eventline version: %s", get_version())


@cli_app.command(help="Capture a single event.")
def capture(
    distinct_id: Annotated[str, typer.Argument(help="ID of the user the event belongs to.")],
    event_name: Annotated[str, typer.Argument(help="Name of the event.")],
    prop: Annotated[
        Optional[List[str]], typer.Option("--property", "-p", help=CLI_PROPERTY_HELP)
    ] = None,
    host: Annotated[Optional[str], typer.Option("--host", help=CLI_HOST_HELP)] = None,
    api_key: Annotated[
        Optional[str], typer.Option("--api-key", help=CLI_API_KEY_HELP)
    ] = None,
) -> None:
    def action(client: Client) -> None:
        client.capture(distinct_id, event_name, parse_properties(prop))

    _run(host, api_key, action)
    console.print(f"[ok]Sent[/ok] [event]{event_name}[/event] for {distinct_id}")


@cli_app.command(help="Identify a user and set properties on them.")
def identify(
    distinct_id: Annotated[str, typer.Argument(help="ID of the user.")],
    prop: Annotated[
        Optional[List[str]], typer.Option("--property", "-p", help=CLI_PROPERTY_HELP)
    ] = None,
    set_once: Annotated[
        Optional[List[str]], typer.Option("--set-once", help=CLI_SET_ONCE_HELP)
    ] = None,
    host: Annotated[Optional[str], typer.Option("--host", help=CLI_HOST_HELP)] = None,
    api_key: Annotated[
        Optional[str], typer.Option("--api-key", help=CLI_API_KEY_HELP)
    ] = None,
) -> None:
    def action(client: Client) -> None:
        client.identify(distinct_id, parse_properties(prop), parse_properties(set_once))

    _run(host, api_key, action)
    console.print(f"[ok]Identified[/ok] {distinct_id}")


cli = cli_app
