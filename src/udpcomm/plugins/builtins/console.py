"""Built-in console plugin — prints traffic as colored lines.

    Tx >> hello          (blue)
    Rx << HELLO          (red)
    Delay <> 10ms        (green)
    Flush vv             (grey)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from udpcomm.output.console import TrafficPrinter

hookimpl = pluggy.HookimplMarker("udpcomm")

_DELAY_SUFFIX: dict[str, str] = {"s": "sec", "ms": "ms", "us": "us"}
_FLUSH_ARROWS: dict[str, str] = {"rx": "vv", "tx": "^^", "rx-tx": "^v"}


class ConsolePlugin:
    """Render observer notifications through a :class:`TrafficPrinter`."""

    def __init__(self, printer: TrafficPrinter) -> None:
        self._printer = printer

    @hookimpl
    def on_tx(self, text: str) -> None:
        self._printer.line(f"Tx >> {text}", style="udp.tx")

    @hookimpl
    def on_rx(self, text: str) -> None:
        self._printer.line(f"Rx << {text}", style="udp.rx")

    @hookimpl
    def on_delay(self, unit: str, magnitude: int) -> None:
        self._printer.line(f"Delay <> {magnitude}{_DELAY_SUFFIX.get(unit, unit)}", style="udp.delay")

    @hookimpl
    def on_flush(self, direction: str) -> None:
        self._printer.line(f"Flush {_FLUSH_ARROWS.get(direction, direction)}", style="udp.flush")
