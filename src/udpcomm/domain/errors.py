"""Typed errors raised by the script engine and the channel.

Every error carries a stable ``code``.  The service layer converts these into
``ServiceResult(ok=False, error=ServiceError(code=...))`` so callers branch on
values, not on exception types.

INVARIANT: Script errors are fatal to the current script only, never to the
process.  Only a channel that cannot be opened ends the process.
"""

from __future__ import annotations

from typing import Any


class UdpcommError(Exception):
    """Base class for all udpcomm errors."""

    code = "UDPCOMM_ERROR"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class ScriptError(UdpcommError):
    """A defect in a script (structure, arguments, or unknown commands)."""

    code = "SCRIPT_ERROR"


class ParseError(ScriptError):
    """A numeric argument that does not parse."""

    code = "PARSE_ERROR"


class UnbalancedLoopError(ScriptError):
    """``loop`` / ``loop-end`` markers are not properly paired."""

    code = "UNBALANCED_LOOP"


class InvalidLoopCountError(ScriptError):
    """A ``loop`` argument that is not a non-negative integer."""

    code = "INVALID_LOOP_COUNT"


class UnsupportedCommandError(ScriptError):
    """A command kind the executor cannot run."""

    code = "UNSUPPORTED_COMMAND"


class ScriptFileError(ScriptError):
    """A script file that cannot be read."""

    code = "SCRIPT_FILE"


class ChannelError(UdpcommError):
    """Open/read/write/flush failure reported by the transport."""

    code = "CHANNEL_ERROR"


def parse_int(argument: str, *, what: str) -> int:
    """Parse *argument* as a base-10 integer or raise :class:`ParseError`."""
    text = argument.strip()
    try:
        return int(text, 10)
    except ValueError:
        raise ParseError(f"Invalid {what} {argument!r}: expected an integer", argument=argument) from None
