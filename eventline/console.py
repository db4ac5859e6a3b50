from rich.console import Console
from rich.theme import Theme

EVENTLINE_THEME = Theme(
    {
        "ok": "bold green",
        "failed": "bold red",
        "muted": "dim",
        "event": "bold cyan",
    }
)

main_console = Console(theme=EVENTLINE_THEME, highlight=False)
error_console = Console(theme=EVENTLINE_THEME, highlight=False, stderr=True)
