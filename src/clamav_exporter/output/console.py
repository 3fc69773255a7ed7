"""Rich Console factory and theme for clamav-exporter output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

EXPORTER_THEME = Theme(
    {
        "clam.ok": "bold green",
        "clam.error": "bold red",
        "clam.warning": "bold yellow",
        "clam.op": "bold cyan",
        "clam.key": "dim",
        "clam.metric": "bold blue",
        "clam.value": "magenta",
    }
)


CONSOLE_WIDTH = 120


def create_console() -> Console:
    """Create a fixed-width Console that renders to a StringIO buffer.

    The width keeps the metric table from wrapping label columns when
    output is piped.
    """
    return Console(file=StringIO(), theme=EXPORTER_THEME, highlight=False, width=CONSOLE_WIDTH)


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
