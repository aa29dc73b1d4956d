"""Channel protocol and the UDP implementation.

:class:`UdpChannel` keeps one socket per direction:

- the **send** socket (client/duplex roles) is bound to the return port and
  writes datagrams to ``host:port``, resolved once when the channel opens;
- the **receive** socket (server/duplex roles) is bound to ``server_port`` and
  reads with a per-read timeout.

Separate sockets make one concurrent reader plus one concurrent writer safe
without locking, which is what the async-duplex session relies on.
All socket failures surface as :class:`ChannelError`.
"""

from __future__ import annotations

import logging
import select
import socket
from typing import Protocol, runtime_checkable

from udpcomm.domain.commands import ChannelRole
from udpcomm.domain.errors import ChannelError

logger = logging.getLogger(__name__)

LINE_ENDINGS: dict[str, str] = {
    "none": "",
    "cr": "\r",
    "lf": "\n",
    "crlf": "\r\n",
}

DEFAULT_TIMEOUT_MS = 25
DEFAULT_BUFFER_SIZE = 65535


@runtime_checkable
class Channel(Protocol):
    """Bidirectional string transport consumed by the executor and the session."""

    @property
    def name(self) -> str: ...

    @property
    def is_open(self) -> bool: ...

    def open(self) -> None: ...

    def close(self) -> None: ...

    def write_string(self, text: str) -> None: ...

    def read_string(self) -> str: ...

    def available(self) -> bool: ...

    def flush_rx(self) -> None: ...

    def flush_tx(self) -> None: ...

    def flush_rx_tx(self) -> None: ...

    def set_timeout(self, timeout_ms: int) -> None: ...


class UdpChannel:
    """UDP datagram channel.

    Parameters:
        host: Remote host datagrams are sent to.
        port: Remote port datagrams are sent to.
        server_port: Local port bound for receiving.
        return_port: Local port the send socket binds to (ephemeral if None).
        role: Which directions to open.
        line_ending: Key of :data:`LINE_ENDINGS` appended to every write.
        timeout_ms: Per-read timeout; a timed-out read returns ``""``.
        buffer_size: Maximum datagram size read in one call.
    """

    def __init__(
        self,
        host: str,
        port: int,
        server_port: int,
        *,
        return_port: int | None = None,
        role: ChannelRole = ChannelRole.DUPLEX,
        line_ending: str = "none",
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ) -> None:
        if line_ending not in LINE_ENDINGS:
            msg = f"Unknown line ending {line_ending!r}; expected one of {', '.join(LINE_ENDINGS)}"
            raise ValueError(msg)
        self.host = host
        self.port = port
        self.server_port = server_port
        self.return_port = return_port
        self.role = role
        self.line_ending = LINE_ENDINGS[line_ending]
        self.buffer_size = buffer_size
        self._timeout_ms = timeout_ms
        self._send_sock: socket.socket | None = None
        self._recv_sock: socket.socket | None = None
        self._remote: tuple[str, int] | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        if self.role == ChannelRole.SERVER:
            return f"udp://0.0.0.0:{self.server_port}"
        if self.role == ChannelRole.CLIENT:
            return f"udp://{self.host}:{self.port}"
        return f"udp://{self.host}:{self.port} <-> 0.0.0.0:{self.server_port}"

    @property
    def is_open(self) -> bool:
        return self._send_sock is not None or self._recv_sock is not None

    @property
    def local_port(self) -> int | None:
        """Port the receive socket is actually bound to (useful with port 0)."""
        if self._recv_sock is None:
            return None
        return self._recv_sock.getsockname()[1]

    def open(self) -> None:
        """Create and bind the sockets required by :attr:`role`."""
        if self.is_open:
            return
        try:
            if self.role in (ChannelRole.CLIENT, ChannelRole.DUPLEX):
                self._remote = self._resolve_remote()
                sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
                self._send_sock = sock
                sock.bind(("", self.return_port or 0))
            if self.role in (ChannelRole.SERVER, ChannelRole.DUPLEX):
                sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
                self._recv_sock = sock
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
                sock.bind(("", self.server_port))
                sock.settimeout(self._timeout_ms / 1000)
        except OSError as exc:
            self.close()
            raise ChannelError(f"Failed to open {self.name}: {exc}", name=self.name) from exc
        logger.debug("Opened channel %s", self.name)

    def _resolve_remote(self) -> tuple[str, int]:
        """Resolve ``host:port`` once so an unknown host fails at open time.

        Raises:
            socket.gaierror: The host name cannot be resolved.
        """
        infos = socket.getaddrinfo(self.host, self.port, socket.AF_INET, socket.SOCK_DGRAM)
        address = infos[0][4]
        return address[0], address[1]

    def close(self) -> None:
        """Close both sockets.  Safe to call more than once."""
        for sock in (self._send_sock, self._recv_sock):
            if sock is None:
                continue
            try:
                sock.close()
            except OSError:
                logger.debug("Error closing socket for %s", self.name, exc_info=True)
        if self.is_open:
            logger.debug("Closed channel %s", self.name)
        self._send_sock = None
        self._recv_sock = None
        self._remote = None

    def set_timeout(self, timeout_ms: int) -> None:
        """Set the per-read timeout in milliseconds."""
        self._timeout_ms = timeout_ms
        if self._recv_sock is not None:
            self._recv_sock.settimeout(timeout_ms / 1000)

    # ------------------------------------------------------------------
    # I/O
    # ------------------------------------------------------------------

    def write_string(self, text: str) -> None:
        """Send *text* plus the line ending as one datagram."""
        sock = self._send_sock
        remote = self._remote
        if sock is None or remote is None:
            raise ChannelError(f"{self.name} is not open for sending", name=self.name)
        payload = (text + self.line_ending).encode("utf-8")
        try:
            sock.sendto(payload, remote)
        except OSError as exc:
            raise ChannelError(f"Write to {self.name} failed: {exc}", name=self.name) from exc

    def read_string(self) -> str:
        """Read one datagram, or return ``""`` when the timeout elapses."""
        sock = self._recv_sock
        if sock is None:
            raise ChannelError(f"{self.name} is not open for receiving", name=self.name)
        try:
            data, _addr = sock.recvfrom(self.buffer_size)
        except TimeoutError:
            return ""
        except OSError as exc:
            raise ChannelError(f"Read from {self.name} failed: {exc}", name=self.name) from exc
        text = data.decode("utf-8", errors="replace")
        if self.line_ending and text.endswith(self.line_ending):
            text = text[: -len(self.line_ending)]
        return text

    def available(self) -> bool:
        """Whether a datagram is waiting to be read."""
        if self._recv_sock is None:
            return False
        try:
            readable, _, _ = select.select([self._recv_sock], [], [], 0)
        except (OSError, ValueError):
            return False
        return bool(readable)

    def flush_rx(self) -> None:
        """Discard every datagram already queued on the receive socket."""
        if self._recv_sock is None:
            return
        discarded = 0
        while self.available():
            try:
                self._recv_sock.recvfrom(self.buffer_size)
            except OSError:
                break
            discarded += 1
        if discarded:
            logger.debug("Flushed %d pending datagram(s) from %s", discarded, self.name)

    def flush_tx(self) -> None:
        """No-op: datagrams are handed to the kernel as soon as they are written."""

    def flush_rx_tx(self) -> None:
        self.flush_tx()
        self.flush_rx()

    def __enter__(self) -> UdpChannel:
        self.open()
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
