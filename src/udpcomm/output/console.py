"""Rich Console factories, theme, and the serialized traffic printer.

Two kinds of console:

- :func:`create_console` renders to a StringIO buffer, preserving the
  ``format_result() -> str`` contract for command results.
- :func:`create_live_console` writes straight to the terminal for traffic
  lines printed while a session runs.

In non-TTY environments (tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

import threading
from io import StringIO
from typing import IO

from rich.console import Console
from rich.text import Text
from rich.theme import Theme

UDP_THEME = Theme(
    {
        "udp.ok": "bold green",
        "udp.error": "bold red",
        "udp.op": "bold cyan",
        "udp.key": "dim",
        "udp.list": "bold underline yellow",
        "udp.tx": "bold underline blue",
        "udp.rx": "bold underline red",
        "udp.delay": "bold underline green",
        "udp.flush": "bold underline bright_black",
    }
)

TRAFFIC_INDENT = 4


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=UDP_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def create_live_console(
    *,
    file: IO[str] | None = None,
    stderr: bool = False,
    no_color: bool = False,
) -> Console:
    """Create a Console writing to *file* (default: stdout, or stderr if *stderr*)."""
    return Console(
        file=file,
        stderr=stderr,
        theme=UDP_THEME,
        no_color=no_color,
        highlight=False,
        soft_wrap=True,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


class TrafficPrinter:
    """Prints one styled line at a time under a lock.

    The stdin and stdout tasks of an async-duplex session print concurrently;
    holding the lock per line keeps their output from interleaving.
    """

    def __init__(self, console: Console) -> None:
        self._console = console
        self._lock = threading.Lock()

    @property
    def console(self) -> Console:
        return self._console

    def line(self, text: str, style: str | None = None) -> None:
        rendered = Text(" " * TRAFFIC_INDENT)
        rendered.append(text, style=style)
        with self._lock:
            self._console.print(rendered)

    def notice(self, text: str) -> None:
        """Print an unindented, unstyled status line."""
        with self._lock:
            self._console.print(Text(text))

    def setting(self, key: str, value: object) -> None:
        """Print a ``Using Key=value`` line with the value highlighted."""
        rendered = Text(f"Using {key}=")
        rendered.append(str(value), style="udp.list")
        with self._lock:
            self._console.print(rendered)
