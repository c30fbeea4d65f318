"""Rich Console factory and theme for flowstate output.

Consoles render into a StringIO buffer so every renderer keeps a plain
``-> str`` contract. Outside a terminal (tests, pipes) Rich drops colour
codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

FLOW_THEME = Theme(
    {
        "flow.ok": "bold green",
        "flow.error": "bold red",
        "flow.warning": "bold yellow",
        "flow.op": "bold cyan",
        "flow.key": "dim",
        "flow.id": "bold blue",
        "flow.title": "bold",
        "flow.today": "reverse",
        "flow.load.full": "green",
        "flow.load.partial": "yellow",
        "flow.load.over": "bold red",
        "flow.absence": "magenta",
        "flow.milestone": "bold magenta",
        "flow.weekend": "dim",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width; the forecast grid defaults wide.
    """
    return Console(
        file=StringIO(),
        theme=FLOW_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 160,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_load(hundredths: int) -> str:
    """Cell style for a resource's planned load on one day."""
    if hundredths > 100:
        return "flow.load.over"
    if hundredths == 100:
        return "flow.load.full"
    if hundredths > 0:
        return "flow.load.partial"
    return ""
