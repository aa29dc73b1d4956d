"""Shared pytest fixtures and test helpers for udpcomm tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pluggy
import pytest
from click.testing import CliRunner

from udpcomm.plugins.manager import PluginManager
from udpcomm.plugins.observers import Observers

hookimpl = pluggy.HookimplMarker("udpcomm")


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep user config files and ``UDPCOMM_*`` variables out of every test."""
    import os

    for key in list(os.environ):
        if key.startswith("UDPCOMM_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def fast_session(monkeypatch: pytest.MonkeyPatch) -> None:
    """Zero the settle delays around opening the channel and running scripts."""
    monkeypatch.setenv("UDPCOMM_SESSION__OPEN_SETTLE_MS", "0")
    monkeypatch.setenv("UDPCOMM_SESSION__POST_SCRIPT_SETTLE_MS", "0")


@pytest.fixture
def recorder() -> RecordingPlugin:
    return RecordingPlugin()


@pytest.fixture
def observers(recorder: RecordingPlugin) -> Observers:
    """Observers with only the recording plugin registered."""
    pm = PluginManager()
    pm.register_plugin(recorder, name="recorder")
    return Observers(pm)


@pytest.fixture
def write_script(tmp_path: Path):
    """Write a script file under tmp_path and return its path."""

    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


class RecordingPlugin:
    """Plugin that records all hook calls in order."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []

    @hookimpl
    def on_tx(self, text: str) -> None:
        self.calls.append(("on_tx", text))

    @hookimpl
    def on_rx(self, text: str) -> None:
        self.calls.append(("on_rx", text))

    @hookimpl
    def on_delay(self, unit: str, magnitude: int) -> None:
        self.calls.append(("on_delay", (unit, magnitude)))

    @hookimpl
    def on_flush(self, direction: str) -> None:
        self.calls.append(("on_flush", direction))

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]


class FakeChannel:
    """In-memory Channel.

    Reads pop *replies* in order; an exception instance in *replies* is
    raised instead.  Once the replies run out, reads return the last written
    string upper-cased when *echo* is set, otherwise *default*.  Writes pop
    *write_errors* the same way: an exception is raised and nothing is kept,
    None lets the write through.
    """

    def __init__(
        self,
        replies: list[Any] | None = None,
        *,
        echo: bool = False,
        default: str = "",
        open_error: Exception | None = None,
        is_open: bool = True,
        write_errors: list[Exception | None] | None = None,
    ) -> None:
        self.name = "fake://channel"
        self.writes: list[str] = []
        self.flushes: list[str] = []
        self.timeouts: list[int] = []
        self.reads = 0
        self.open_calls = 0
        self.closed = False
        self._replies = list(replies or [])
        self._echo = echo
        self._default = default
        self._open_error = open_error
        self._open = is_open
        self._write_errors = list(write_errors or [])

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> None:
        self.open_calls += 1
        if self._open_error is not None:
            raise self._open_error
        self._open = True

    def close(self) -> None:
        self._open = False
        self.closed = True

    def write_string(self, text: str) -> None:
        if self._write_errors:
            error = self._write_errors.pop(0)
            if error is not None:
                raise error
        self.writes.append(text)

    def read_string(self) -> str:
        self.reads += 1
        if self._replies:
            reply = self._replies.pop(0)
            if isinstance(reply, BaseException):
                raise reply
            return reply
        if self._echo and self.writes:
            return self.writes[-1].upper()
        return self._default

    def available(self) -> bool:
        return bool(self._replies)

    def flush_rx(self) -> None:
        self.flushes.append("rx")

    def flush_tx(self) -> None:
        self.flushes.append("tx")

    def flush_rx_tx(self) -> None:
        self.flushes.append("rx-tx")

    def set_timeout(self, timeout_ms: int) -> None:
        self.timeouts.append(timeout_ms)
