"""Buffered Rich consoles for rendering results to strings.

Renderers print into a console whose file is a StringIO, and the
formatter returns the captured text. Rich drops color codes on its own
when the buffer is not a terminal, which is always the case here.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

DEFAULT_WIDTH = 120

STROKE_THEME = Theme(
    {
        "so.ok": "bold green",
        "so.error": "bold red",
        "so.warning": "bold yellow",
        "so.op": "bold cyan",
        "so.key": "dim",
        "so.order": "bold",
        "so.glyphs": "bold magenta",
        "so.char": "bold blue",
    }
)


def create_console(*, width: int = DEFAULT_WIDTH) -> Console:
    """A themed console writing into a private buffer."""
    return Console(file=StringIO(), theme=STROKE_THEME, highlight=False, width=width)


def get_output(console: Console) -> str:
    """Everything printed to a console made by :func:`create_console`."""
    buffer = console.file
    if not isinstance(buffer, StringIO):
        raise TypeError("console is not buffered")
    return buffer.getvalue()
