"""Interactive sessions — Session state and the SessionScheduler.

A session runs exactly one of four loops, chosen before entry:

- ``send-only``: read a line, send it.
- ``receive-only``: read the channel, print what arrives.
- ``synchronous``: read a line, send it, then do one channel read.
- ``async-duplex``: a stdin task and a stdout task run on their own daemon
  threads.  The scheduler blocks until either finishes, handles its payload,
  and relaunches it.  When both finish together, stdin is handled first.

The loops end on Ctrl+C, end of input, or :meth:`SessionScheduler.stop`.
A failed send or read is logged and counted, and the loop keeps going.
The channel is closed before :meth:`SessionScheduler.run` returns.
"""

from __future__ import annotations

import logging
import sys
import threading
from concurrent.futures import FIRST_COMPLETED, Future, wait
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog

from udpcomm.domain.commands import SessionMode
from udpcomm.domain.errors import ChannelError
from udpcomm.domain.text import HistoryBuffer, is_blank, resolve_input
from udpcomm.services.result import ServiceResult

if TYPE_CHECKING:
    from collections.abc import Callable

    from udpcomm.infrastructure.channel import Channel
    from udpcomm.plugins.observers import Observers

logger = logging.getLogger(__name__)

# Pause after a failed channel read so a dead socket cannot spin the loop.
READ_ERROR_BACKOFF_S = 0.1


def read_stdin_line() -> str:
    """Block for one line of user input.

    Raises:
        EOFError: Standard input is exhausted.
    """
    line = sys.stdin.readline()
    if not line:
        raise EOFError
    return line.rstrip("\r\n")


@dataclass
class Session:
    """Everything one interactive run owns.

    The channel is shared by the two async-duplex tasks: the stdin side only
    writes, the stdout side only reads.
    """

    channel: Channel
    mode: SessionMode
    observers: Observers
    history: HistoryBuffer = field(default_factory=HistoryBuffer)
    sent: int = 0
    received: int = 0
    errors: int = 0


class SessionScheduler:
    """Drives one :class:`Session` until it is cancelled."""

    def __init__(
        self,
        session: Session,
        *,
        read_line: Callable[[], str] = read_stdin_line,
    ) -> None:
        self._session = session
        self._read_line = read_line
        self._stopped = threading.Event()

    @property
    def session(self) -> Session:
        return self._session

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()

    def stop(self) -> None:
        """Ask the running loop to finish after its current step."""
        self._stopped.set()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self) -> ServiceResult:
        """Run the session loop for the session's mode.

        Returns a ServiceResult with ``mode``, ``sent``, ``received``,
        ``errors`` (failed channel operations) and the ``reason`` the loop
        ended (``interrupted``, ``end_of_input`` or ``stopped``).  Channel
        failures never end the session, so the result is always ok.
        """
        session = self._session
        if not session.channel.is_open:
            raise ValueError("SessionScheduler.run() requires an open channel")

        loops: dict[SessionMode, Callable[[], None]] = {
            SessionMode.SEND_ONLY: self._run_send_only,
            SessionMode.RECEIVE_ONLY: self._run_receive_only,
            SessionMode.SYNCHRONOUS: self._run_synchronous,
            SessionMode.ASYNC_DUPLEX: self._run_async_duplex,
        }
        logger.debug("Starting %s session on %s", session.mode, session.channel.name)

        reason = "stopped"
        try:
            with structlog.contextvars.bound_contextvars(mode=str(session.mode), channel=session.channel.name):
                loops[session.mode]()
        except KeyboardInterrupt:
            reason = "interrupted"
        except EOFError:
            reason = "end_of_input"
        finally:
            self._stopped.set()
            self._close_channel()

        return ServiceResult(
            ok=True,
            op="session",
            data={
                "mode": str(session.mode),
                "sent": session.sent,
                "received": session.received,
                "errors": session.errors,
                "reason": reason,
            },
        )

    def send(self, raw: str) -> str | None:
        """Resolve *raw* input and send it.

        Returns the string actually sent, or None when it resolved to blank
        or the write failed.  A failed write is not recorded in history.
        """
        session = self._session
        text = resolve_input(raw, session.history)
        if is_blank(text):
            return None
        try:
            session.channel.write_string(text)
        except ChannelError as exc:
            session.errors += 1
            logger.warning("Send failed on %s: %s", session.channel.name, exc)
            return None
        session.history.record(text)
        session.sent += 1
        session.observers.on_tx(text)
        return text

    def receive(self, text: str) -> bool:
        """Report a received string.  Blank strings are dropped."""
        if is_blank(text):
            return False
        self._session.received += 1
        self._session.observers.on_rx(text)
        return True

    # ------------------------------------------------------------------
    # Mode loops
    # ------------------------------------------------------------------

    def _run_send_only(self) -> None:
        while not self._stopped.is_set():
            self.send(self._read_line())

    def _run_receive_only(self) -> None:
        while not self._stopped.is_set():
            self.receive(self._read())

    def _run_synchronous(self) -> None:
        while not self._stopped.is_set():
            self.send(self._read_line())
            self.receive(self._read())

    def _run_async_duplex(self) -> None:
        stdin_task = self._launch("stdin", self._read_line)
        stdout_task = self._launch("stdout", self._next_message)
        while not self._stopped.is_set():
            done, _pending = wait((stdin_task, stdout_task), return_when=FIRST_COMPLETED)
            # Fixed tie-break: stdin is drained before stdout.
            if stdin_task in done:
                self.send(stdin_task.result())
                stdin_task = self._launch("stdin", self._read_line)
            if stdout_task in done:
                self.receive(stdout_task.result())
                stdout_task = self._launch("stdout", self._next_message)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _read(self) -> str:
        """One channel read; a failure is logged, counted, and reads as ``""``."""
        session = self._session
        try:
            return session.channel.read_string()
        except ChannelError as exc:
            session.errors += 1
            logger.warning("Receive failed on %s: %s", session.channel.name, exc)
            self._stopped.wait(READ_ERROR_BACKOFF_S)
            return ""

    def _next_message(self) -> str:
        """Read the channel until a non-blank string arrives or the session stops."""
        while not self._stopped.is_set():
            text = self._read()
            if not is_blank(text):
                return text
        return ""

    @staticmethod
    def _launch(name: str, target: Callable[[], str]) -> Future[str]:
        """Run *target* on a daemon thread and return a future for its result.

        Daemon threads let a blocked stdin or channel read be abandoned when
        the process exits.
        """
        future: Future[str] = Future()

        def runner() -> None:
            if not future.set_running_or_notify_cancel():
                return
            try:
                result = target()
            except Exception as exc:
                future.set_exception(exc)
            else:
                future.set_result(result)

        threading.Thread(target=runner, name=f"udpcomm-{name}", daemon=True).start()
        return future

    def _close_channel(self) -> None:
        channel = self._session.channel
        try:
            channel.close()
        except Exception:
            logger.warning("Failed to close channel %s", channel.name, exc_info=True)
