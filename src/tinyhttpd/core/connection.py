"""
=============================================================================
CLIENT CONNECTION
=============================================================================

Wraps one accepted TCP socket for the lifetime of a single request.

=============================================================================
ONE REQUEST PER CONNECTION
=============================================================================

There is no keep-alive. Each connection carries exactly one exchange:

    accept ──► read request ──► dispatch ──► write response ──► close

    ┌──────────────────────────────────────────────────────────────────┐
    │                     Connection State Machine                     │
    ├──────────────────────────────────────────────────────────────────┤
    │                                                                  │
    │   NEW ──► READING ──► PROCESSING ──► WRITING ──► CLOSING ──► CLOSED
    │             │                           │           ▲            │
    │             └──── parse error ──────────┴── write ──┘            │
    │                                             error                │
    │                                                                  │
    └──────────────────────────────────────────────────────────────────┘

=============================================================================
BUFFERED READING
=============================================================================

TCP delivers bytes in arbitrary chunks. ``socket.makefile("rb")`` gives a
BufferedReader on top of the socket, which provides exactly what the
request parser needs:

    reader.readline()   → one CRLF-terminated line (b"" at end of stream)
    reader.read(n)      → up to n bytes, blocking until n arrive or EOF

=============================================================================
"""

import io
import socket
import time
import uuid
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import BinaryIO, Optional

logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Connection lifecycle states, used for logging and debugging."""

    NEW = "new"                # Just accepted, nothing read yet
    READING = "reading"        # Parsing the request
    PROCESSING = "processing"  # Handler is running
    WRITING = "writing"        # Sending the response
    CLOSING = "closing"        # Shutdown sequence in progress
    CLOSED = "closed"          # Socket released


@dataclass
class Connection:
    """
    A client connection.

    Attributes:
        socket: The accepted client socket.
        address: Client's (ip, port) tuple.
        id: Short identifier used to correlate log lines.
        state: Current ConnectionState.
        created_at: Timestamp when the connection was accepted.
    """

    socket: socket.socket
    address: tuple[str, int]
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    _reader: Optional[BinaryIO] = field(default=None, repr=False)

    def __post_init__(self):
        # Accepted sockets may inherit the listener's accept timeout;
        # connection I/O is fully blocking, with no read deadline.
        self.socket.setblocking(True)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def age(self) -> float:
        """Get connection age in seconds."""
        return time.time() - self.created_at

    @property
    def reader(self) -> BinaryIO:
        """Buffered binary reader over the socket, created on first use."""
        if self._reader is None:
            self._reader = self.socket.makefile("rb")
        return self._reader

    def write(self, data: bytes) -> int:
        """
        Send ``data`` to the client.

        Uses sendall() so the whole buffer goes out; a plain send() may
        stop early when the kernel buffer is full.

        Raises:
            OSError: If the peer has gone away (reset, broken pipe, ...).
        """
        self.state = ConnectionState.WRITING
        self.socket.sendall(data)
        return len(data)

    def close(self):
        """
        Close the connection gracefully.

        1. shutdown(SHUT_WR): send FIN, we're done writing
        2. Drain whatever the client still sends, briefly
        3. close(): release the file descriptor
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING

        if self._reader is not None:
            try:
                self._reader.close()
            except (OSError, io.UnsupportedOperation):
                pass

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        try:
            self.socket.settimeout(0.5)
            while self.socket.recv(1024):
                pass
        except OSError:
            pass  # Timeout or reset while draining; closing anyway

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age * 1000:.2f}ms")

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False  # Don't suppress exceptions
