"""
=============================================================================
CORE NETWORKING
=============================================================================

    core/
    ├── socket_server.py  # Listening socket + accept loop
    └── connection.py     # One accepted client socket

The HTTP layer (tinyhttpd.http) never touches sockets directly; it reads
from ``Connection.reader`` and writes through ``Connection.write``.

=============================================================================
"""

from .connection import Connection, ConnectionState
from .socket_server import SocketServer

__all__ = [
    "Connection",
    "ConnectionState",
    "SocketServer",
]
