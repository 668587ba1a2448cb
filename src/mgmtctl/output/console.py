"""Rich Console factory and theme for mgmtctl output.

Creates Console instances that render to a StringIO buffer so callers (and
tests) can collect the rendered text. In non-TTY environments Rich
automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

MGMT_THEME = Theme(
    {
        "mgmt.ok": "bold green",
        "mgmt.error": "bold red",
        "mgmt.warning": "bold yellow",
        "mgmt.info": "cyan",
        "mgmt.op": "bold cyan",
        "mgmt.key": "dim",
        "mgmt.address": "bold blue",
        "mgmt.title": "bold",
        "mgmt.undefined": "dim italic",
        "mgmt.selected": "bold green",
    }
)

_LEVEL_STYLES: dict[str, str] = {
    "success": "mgmt.ok",
    "info": "mgmt.info",
    "warning": "mgmt.warning",
    "error": "mgmt.error",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=MGMT_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_level(level: str) -> str:
    """Return the Rich style name for a message level."""
    return _LEVEL_STYLES.get(level, "")
