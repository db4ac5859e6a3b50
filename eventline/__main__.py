"""Allow eventline to be executable through `python -m eventline`."""
from eventline.cli import cli


if __name__ == "__main__":  # pragma: no cover
    cli(prog_name="eventline")
