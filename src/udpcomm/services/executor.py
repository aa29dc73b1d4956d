"""ScriptExecutor — replay a loop-free command sequence against a channel.

Commands run strictly in order on the calling thread.  The first error stops
the run; side effects already performed (writes, delays, flushes) stay done.
Nothing is retried.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from udpcomm.domain.commands import DELAY_KINDS, DELAY_SCALE, FLUSH_KINDS, CommandKind, FlushDirection
from udpcomm.domain.errors import ParseError, UdpcommError, UnsupportedCommandError, parse_int
from udpcomm.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from udpcomm.domain.commands import Command
    from udpcomm.infrastructure.channel import Channel
    from udpcomm.plugins.observers import Observers

logger = logging.getLogger(__name__)


class ScriptExecutor:
    """Runs unrolled command sequences and reports each step to observers."""

    def __init__(
        self,
        observers: Observers,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._observers = observers
        self._sleep = sleep

    def execute(self, channel: Channel | None, commands: list[Command]) -> ServiceResult:
        """Run *commands* against *channel*, opening it first if needed.

        Returns a ServiceResult whose ``data["executed"]`` counts completed
        commands.  On failure ``error.detail`` names the failing index, kind
        and argument.
        """
        if channel is None:
            raise ValueError("ScriptExecutor.execute() requires a channel")

        if not channel.is_open:
            try:
                channel.open()
            except UdpcommError as exc:
                return ServiceResult(
                    ok=False,
                    op="execute",
                    data={"executed": 0, "total": len(commands)},
                    error=ServiceError.from_exception(exc),
                )

        executed = 0
        for index, command in enumerate(commands):
            try:
                self._dispatch(channel, command)
            except UdpcommError as exc:
                logger.debug("Script aborted at command %d (%s): %s", index, command, exc)
                return ServiceResult(
                    ok=False,
                    op="execute",
                    data={"executed": executed, "total": len(commands)},
                    error=ServiceError.from_exception(
                        exc,
                        index=index,
                        kind=str(command.kind),
                        argument=command.argument,
                    ),
                )
            executed += 1

        return ServiceResult(ok=True, op="execute", data={"executed": executed, "total": len(commands)})

    def _dispatch(self, channel: Channel, command: Command) -> None:
        kind = command.kind
        if kind == CommandKind.WRITE:
            channel.write_string(command.argument)
            self._observers.on_tx(command.argument)
        elif kind == CommandKind.READ:
            self._observers.on_rx(channel.read_string())
        elif kind in DELAY_KINDS:
            unit = DELAY_KINDS[kind]
            magnitude = parse_int(command.argument, what=f"{kind} duration")
            if magnitude < 0:
                raise ParseError(f"Invalid {kind} duration {magnitude}: must not be negative", argument=command.argument)
            self._observers.on_delay(unit, magnitude)
            self._sleep(magnitude * DELAY_SCALE[unit])
        elif kind in FLUSH_KINDS:
            direction = FLUSH_KINDS[kind]
            self._observers.on_flush(direction)
            if direction == FlushDirection.RX:
                channel.flush_rx()
            elif direction == FlushDirection.TX:
                channel.flush_tx()
            else:
                channel.flush_rx_tx()
        else:
            raise UnsupportedCommandError(
                f"Command type {kind} is not implemented: {command.argument!r}",
                argument=command.argument,
            )
