"""Interactive input scrubbing and history recall.

Terminals (notably Cygwin shells) leak arrow-key escape sequences into line
input.  An up-arrow at the start of a line means "resend the last string";
any other cursor sequence is noise and is removed before sending.

Kept free of I/O so the rules can be tested on plain strings.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

ESC = "\x1b"
RECALL_SEQUENCES: tuple[str, ...] = (f"{ESC}[A", f"{ESC}OA", "[A")

# Complete CSI / SS3 sequences, e.g. ESC[B, ESC[1;5C, ESCOA.
_ESCAPE_RE = re.compile(r"\x1b(?:\[[0-9;?]*[@-~]|O[A-Z])")
# Bracket residue left when the terminal drops the ESC byte: "[B" .. "[Z".
_RESIDUE_RE = re.compile(r"^(?:\[[B-Z])+")
_NON_PRINTABLE_RE = re.compile(r"[\x00-\x1f\x7f]")


def is_blank(text: str) -> bool:
    """True for empty or whitespace-only strings."""
    return not text.strip()


def strip_control(raw: str) -> str:
    """Remove escape sequences, their leading residue, and control characters."""
    text = _ESCAPE_RE.sub("", raw.rstrip("\r\n"))
    text = _NON_PRINTABLE_RE.sub("", text)
    return _RESIDUE_RE.sub("", text)


def is_recall(raw: str) -> bool:
    """Whether *raw* starts with a cursor-up sequence."""
    return raw.startswith(RECALL_SEQUENCES)


class HistoryBuffer:
    """Previously sent strings, most recent first.

    Unbounded and append-only for the lifetime of a session.  Blank strings
    are never recorded.
    """

    def __init__(self) -> None:
        self._entries: list[str] = []

    def record(self, text: str) -> bool:
        """Record *text* as the most recent entry.  Returns False if blank."""
        if is_blank(text):
            return False
        self._entries.insert(0, text)
        return True

    def latest(self) -> str | None:
        """The most recently recorded string, or None when empty."""
        return self._entries[0] if self._entries else None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)


def resolve_input(raw: str, history: HistoryBuffer) -> str:
    """Turn a raw input line into the string that should be sent.

    A leading cursor-up sequence resolves to the latest history entry (or
    ``""`` when there is none).  Everything else is scrubbed with
    :func:`strip_control`.
    """
    if is_recall(raw):
        return history.latest() or ""
    return strip_control(raw)
