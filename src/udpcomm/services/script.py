"""ScriptService — load, unroll, and run script files.

Pipeline: READ → PARSE → UNROLL → EXECUTE → RESPOND

A failed script never stops the next one; each run returns its own result.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

import structlog

from udpcomm.domain.errors import ScriptError
from udpcomm.domain.parser import read_script
from udpcomm.domain.unroll import unroll
from udpcomm.services.executor import ScriptExecutor
from udpcomm.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from pathlib import Path

    from udpcomm.domain.commands import Command
    from udpcomm.infrastructure.channel import Channel
    from udpcomm.plugins.observers import Observers

logger = logging.getLogger(__name__)


def load_script(path: Path) -> list[Command]:
    """Read *path* and return its unrolled command sequence.

    Raises:
        ScriptError: The file is unreadable or its loops are malformed.
    """
    return unroll(read_script(path))


class ScriptService:
    """Runs script files against a channel."""

    def __init__(self, observers: Observers, *, sleep: Callable[[float], None] = time.sleep) -> None:
        self._executor = ScriptExecutor(observers, sleep=sleep)

    def unroll_script(self, path: Path) -> ServiceResult:
        """Parse and unroll *path* without touching a channel."""
        try:
            commands = load_script(path)
        except ScriptError as exc:
            return ServiceResult(
                ok=False,
                op="unroll",
                data={"script": str(path)},
                error=ServiceError.from_exception(exc),
            )
        return ServiceResult(
            ok=True,
            op="unroll",
            data={
                "script": str(path),
                "count": len(commands),
                "commands": [{"kind": str(c.kind), "argument": c.argument} for c in commands],
            },
        )

    def run_script(self, channel: Channel, path: Path) -> ServiceResult:
        """Load *path* and execute it against *channel*."""
        try:
            commands = load_script(path)
        except ScriptError as exc:
            logger.debug("Script %s rejected: %s", path, exc)
            return ServiceResult(
                ok=False,
                op="run_script",
                data={"script": str(path), "executed": 0},
                error=ServiceError.from_exception(exc),
            )

        if not commands:
            return ServiceResult(
                ok=True,
                op="run_script",
                data={"script": str(path), "executed": 0, "total": 0, "skipped": True},
                warnings=[f"Script {path} has no commands, skipping script"],
            )

        with structlog.contextvars.bound_contextvars(script=str(path)):
            outcome = self._executor.execute(channel, commands)
        return ServiceResult(
            ok=outcome.ok,
            op="run_script",
            data={"script": str(path), **outcome.data},
            error=outcome.error,
        )

    def run_scripts(self, channel: Channel, paths: Iterable[Path]) -> list[ServiceResult]:
        """Run every script in sorted, de-duplicated order."""
        return [self.run_script(channel, path) for path in sorted(set(paths))]
