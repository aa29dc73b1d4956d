"""Script text → command sequence.

The parser is permissive: blank lines, ``#`` comments, and lines that do not
start with a known keyword are skipped.  Structural and numeric validation is
left to the unroller and the executor.
"""

from __future__ import annotations

import re
from pathlib import Path

from udpcomm.domain.commands import Command, CommandKind
from udpcomm.domain.errors import ScriptFileError

COMMENT_PREFIX = "#"

# Longest keywords first so ``loop-end`` is never read as ``loop``.
_KEYWORDS: list[str] = sorted(
    (kind.value for kind in CommandKind if kind != CommandKind.UNSPECIFIED),
    key=len,
    reverse=True,
)

_LINE_RE = re.compile(
    r"^\s*(?P<keyword>" + "|".join(re.escape(k) for k in _KEYWORDS) + r")(?:\s(?P<rest>.*))?$",
    re.IGNORECASE | re.DOTALL,
)


def parse_line(line: str) -> Command | None:
    """Parse a single script line, or return None if it is not a command."""
    stripped = line.rstrip("\r\n")
    if not stripped.strip() or stripped.lstrip().startswith(COMMENT_PREFIX):
        return None

    match = _LINE_RE.match(stripped)
    if match is None:
        return None

    kind = CommandKind(match.group("keyword").lower())
    rest = match.group("rest") or ""
    if kind == CommandKind.WRITE:
        # Payload is sent verbatim; only the separator after the keyword goes.
        argument = rest.lstrip(" \t") if rest.strip() else ""
    else:
        argument = rest.strip()
    return Command(kind=kind, argument=argument)


def parse_script(text: str) -> list[Command]:
    """Parse script *text* into an ordered list of commands."""
    commands: list[Command] = []
    for line in text.splitlines():
        command = parse_line(line)
        if command is not None:
            commands.append(command)
    return commands


def read_script(path: Path) -> list[Command]:
    """Read and parse the script file at *path*."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ScriptFileError(f"Cannot read script {path}: {exc.strerror or exc}", path=str(path)) from exc
    return parse_script(text)
