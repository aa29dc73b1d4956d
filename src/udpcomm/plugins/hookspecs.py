"""Pluggy hook specifications for traffic observers.

The script executor and the session scheduler announce every transmit,
receive, delay and flush through these hooks.  The built-in console plugin
prints them; third-party plugins (loggers, recorders) can listen too.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("udpcomm")


class UdpcommHookSpec:
    """Hook specifications for the udpcomm plugin system."""

    @hookspec
    def on_tx(self, text: str) -> None:
        """Called after *text* was written to the channel."""

    @hookspec
    def on_rx(self, text: str) -> None:
        """Called with a string read from the channel (may be empty in scripts)."""

    @hookspec
    def on_delay(self, unit: str, magnitude: int) -> None:
        """Called before a scripted delay of *magnitude* *unit* starts."""

    @hookspec
    def on_flush(self, direction: str) -> None:
        """Called before the channel is flushed in *direction*."""
