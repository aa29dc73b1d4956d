"""Script command model and the enums shared by the executor and the session.

A :class:`Command` is an immutable ``(kind, argument)`` pair.  The argument is
kept as unparsed text; delay magnitudes and loop counts are parsed by whoever
consumes the command, at the point of use.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class CommandKind(StrEnum):
    """Script instruction kinds.  Values double as the script keywords."""

    WRITE = "write"
    READ = "read"
    DELAY_SECONDS = "delay-s"
    DELAY_MILLISECONDS = "delay-ms"
    DELAY_MICROSECONDS = "delay-us"
    FLUSH_RX = "flush-rx"
    FLUSH_TX = "flush-tx"
    FLUSH_RX_TX = "flush"
    LOOP_START = "loop"
    LOOP_END = "loop-end"
    UNSPECIFIED = "unspecified"


class DelayUnit(StrEnum):
    """Unit reported to ``on_delay`` observers."""

    SECONDS = "s"
    MILLISECONDS = "ms"
    MICROSECONDS = "us"


class FlushDirection(StrEnum):
    """Direction reported to ``on_flush`` observers."""

    RX = "rx"
    TX = "tx"
    RX_TX = "rx-tx"


class SessionMode(StrEnum):
    """Interactive communication mode, chosen once per session."""

    SEND_ONLY = "send-only"
    RECEIVE_ONLY = "receive-only"
    SYNCHRONOUS = "synchronous"
    ASYNC_DUPLEX = "async-duplex"


class ChannelRole(StrEnum):
    """Which directions of the datagram channel are opened."""

    CLIENT = "client"
    SERVER = "server"
    DUPLEX = "duplex"


DELAY_KINDS: dict[CommandKind, DelayUnit] = {
    CommandKind.DELAY_SECONDS: DelayUnit.SECONDS,
    CommandKind.DELAY_MILLISECONDS: DelayUnit.MILLISECONDS,
    CommandKind.DELAY_MICROSECONDS: DelayUnit.MICROSECONDS,
}

FLUSH_KINDS: dict[CommandKind, FlushDirection] = {
    CommandKind.FLUSH_RX: FlushDirection.RX,
    CommandKind.FLUSH_TX: FlushDirection.TX,
    CommandKind.FLUSH_RX_TX: FlushDirection.RX_TX,
}

# Seconds per unit, used to turn a delay magnitude into a sleep duration.
DELAY_SCALE: dict[DelayUnit, float] = {
    DelayUnit.SECONDS: 1.0,
    DelayUnit.MILLISECONDS: 1e-3,
    DelayUnit.MICROSECONDS: 1e-6,
}


def select_mode(*, send_only: bool = False, receive_only: bool = False, synchronous: bool = False) -> SessionMode:
    """Map the mutually exclusive mode flags to a SessionMode.

    No flag selects async-duplex.  More than one flag raises ValueError.
    """
    chosen = [
        mode
        for mode, flag in (
            (SessionMode.SEND_ONLY, send_only),
            (SessionMode.RECEIVE_ONLY, receive_only),
            (SessionMode.SYNCHRONOUS, synchronous),
        )
        if flag
    ]
    if len(chosen) > 1:
        raise ValueError(f"Session modes are mutually exclusive: {', '.join(chosen)}")
    return chosen[0] if chosen else SessionMode.ASYNC_DUPLEX


def role_for_mode(mode: SessionMode) -> ChannelRole:
    """Return the channel role a session in *mode* needs.

    Receive-only sessions never write, send-only sessions never read;
    everything else needs both directions.
    """
    if mode == SessionMode.RECEIVE_ONLY:
        return ChannelRole.SERVER
    if mode == SessionMode.SEND_ONLY:
        return ChannelRole.CLIENT
    return ChannelRole.DUPLEX


class Command(BaseModel):
    """One scripted instruction."""

    model_config = {"frozen": True}

    kind: CommandKind
    argument: str = ""

    def __str__(self) -> str:
        if self.argument:
            return f"{self.kind.value} {self.argument}"
        return self.kind.value
