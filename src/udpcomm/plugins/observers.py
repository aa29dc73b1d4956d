"""Observers — the notification facade used by the core.

Wraps the pluggy hook relay so the executor and the scheduler call plain
methods.  A failing hook is logged and dropped.

INVARIANT: Observer failures are warnings, never errors.  Hooks can neither
block the core with an exception nor change its control flow.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from udpcomm.domain.commands import DelayUnit, FlushDirection
    from udpcomm.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class Observers:
    """Dispatch traffic notifications to every registered plugin."""

    def __init__(self, plugin_manager: PluginManager) -> None:
        self._pm = plugin_manager

    @property
    def plugin_manager(self) -> PluginManager:
        return self._pm

    def on_tx(self, text: str) -> None:
        self._dispatch("on_tx", text=text)

    def on_rx(self, text: str) -> None:
        self._dispatch("on_rx", text=text)

    def on_delay(self, unit: DelayUnit, magnitude: int) -> None:
        self._dispatch("on_delay", unit=str(unit), magnitude=magnitude)

    def on_flush(self, direction: FlushDirection) -> None:
        self._dispatch("on_flush", direction=str(direction))

    def _dispatch(self, hook_name: str, **payload: Any) -> None:
        hook_fn = getattr(self._pm.hook, hook_name)
        try:
            hook_fn(**payload)
        except Exception:
            logger.warning("Observer hook %s failed", hook_name, exc_info=True)
