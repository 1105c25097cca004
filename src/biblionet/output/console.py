"""Rich Console factory and theme for biblionet output.

Consoles render into a StringIO buffer so formatters keep returning plain
strings.  Outside a terminal (tests, pipes) Rich drops color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

BIBLIONET_THEME = Theme(
    {
        "bn.ok": "bold green",
        "bn.error": "bold red",
        "bn.warning": "bold yellow",
        "bn.op": "bold cyan",
        "bn.key": "dim",
        "bn.id": "bold blue",
        "bn.path": "dim",
        "bn.degree": "magenta",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        width: Override terminal width (keeps test output stable).
    """
    return Console(
        file=StringIO(),
        theme=BIBLIONET_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
