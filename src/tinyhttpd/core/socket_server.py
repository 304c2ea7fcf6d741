"""
=============================================================================
LOW-LEVEL TCP SOCKET SERVER
=============================================================================

Owns the listening socket and the accept loop. Every accepted client is
wrapped in a Connection and handed to a callback; the callback must not
block the loop (HTTPServer starts a thread and returns at once).

SOCKET LIFECYCLE (Server Side):
────────────────────────────────

    1. socket()    Create a TCP socket
    2. bind()      Reserve host:port
    3. listen()    OS starts queueing incoming connections (backlog)
    4. accept()    Take the next queued connection → new client socket
    5. close()     Release the listening socket

SO_REUSEADDR lets a restarted server bind immediately instead of failing
with "Address already in use" while old sockets sit in TIME_WAIT.

=============================================================================
ERROR POLICY
=============================================================================

    accept() timeout      → loop again (lets shutdown() take effect)
    any other accept error → logged, re-raised; the listener is finished

Errors inside a connection never reach this loop: they belong to the
connection's own thread.

=============================================================================
"""

import socket
import logging
import threading
from typing import Callable, Optional, Tuple

from ..config import ServerConfig
from .connection import Connection

logger = logging.getLogger(__name__)

ConnectionCallback = Callable[[Connection], None]


class SocketServer:
    """
    Listening socket plus accept loop.

        listener = SocketServer(config)
        listener.start(on_connection)  # Blocks until shutdown() or an error
    """

    ACCEPT_TIMEOUT = 1.0

    def __init__(self, config: ServerConfig):
        self.config = config
        self._listener: Optional[socket.socket] = None
        self._running = False
        self._stopped = threading.Event()

    @property
    def address(self) -> Tuple[str, int]:
        """The bound (host, port), or the configured one before binding."""
        if self._listener is not None:
            return self._listener.getsockname()[:2]
        return self.config.address

    def _open_listener(self) -> socket.socket:
        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        # Periodic wake-ups so the loop can notice shutdown()
        listener.settimeout(self.ACCEPT_TIMEOUT)
        return listener

    def start(self, on_connection: ConnectionCallback):
        """
        Bind, listen and accept until shutdown() or a fatal error.

        Raises:
            OSError: If binding or accept() fails.
        """
        self._listener = self._open_listener()

        try:
            self._listener.bind(self.config.address)
        except OSError as e:
            logger.error(f"Cannot bind {self.config.host}:{self.config.port}: {e}")
            self._close_listener()
            raise

        self._listener.listen(self.config.backlog)
        self._running = True
        self._stopped.clear()

        host, port = self.address
        logger.info(f"Server listening on {host}:{port}")

        try:
            self._serve(on_connection)
        finally:
            self._close_listener()

    def _serve(self, on_connection: ConnectionCallback):
        while self._running:
            try:
                client, peer = self._listener.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if not self._running:
                    break
                logger.error(f"accept() failed, stopping listener: {e}")
                raise

            logger.debug(f"Accepted {peer[0]}:{peer[1]}")
            on_connection(Connection(socket=client, address=peer))

    def shutdown(self):
        """
        Ask the accept loop to stop.

        Callable from any thread, any number of times. The loop notices
        within ACCEPT_TIMEOUT seconds; connections already handed off
        keep running on their own threads.
        """
        logger.info("Stopping listener")
        self._running = False

    def _close_listener(self):
        self._running = False
        if self._listener is not None:
            try:
                self._listener.close()
            except OSError:
                pass
            self._listener = None
        self._stopped.set()
        logger.info("Listener closed")

    def wait_for_shutdown(self, timeout: Optional[float] = None) -> bool:
        """Block until the listener is closed; False if ``timeout`` ran out first."""
        return self._stopped.wait(timeout)
