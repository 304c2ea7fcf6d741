"""
=============================================================================
TINYHTTPD - A Minimal HTTP/1.1 Server on Raw Sockets
=============================================================================

Accepts TCP connections, parses one HTTP request per connection,
dispatches it to a small fixed set of routes, and writes one response
back before closing.

=============================================================================
ROUTES
=============================================================================

    ┌──────────────────┬──────────────────────────────────────────────────┐
    │ Path             │ Response                                         │
    ├──────────────────┼──────────────────────────────────────────────────┤
    │ /                │ 200, empty body                                  │
    │ /user-agent      │ 200 text/plain, the User-Agent header            │
    │ /echo/<text>     │ 200 text/plain, <text> verbatim                  │
    │ /files/<name>    │ GET: file bytes (200/404/500), POST: store (201),│
    │                  │ other methods: 400. 404 when --directory unset.  │
    │ anything else    │ 404                                              │
    └──────────────────┴──────────────────────────────────────────────────┘

Every response advertises "Content-Encoding: gzip" when the client lists
the exact token "gzip" in Accept-Encoding. Bodies are never compressed.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    tinyhttpd/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m tinyhttpd)
    ├── server.py            # HTTPServer + create_app
    ├── config.py            # ServerConfig dataclass
    ├── core/                # Sockets
    │   ├── socket_server.py # Listener and accept loop
    │   └── connection.py    # Accepted client socket wrapper
    ├── http/                # Protocol
    │   ├── request.py       # Request parsing
    │   ├── response.py      # Response building
    │   ├── router.py        # URL routing
    │   └── status_codes.py  # Supported status codes
    ├── middleware/          # Cross-cutting behavior
    │   ├── base.py          # Middleware ABC and pipeline
    │   ├── logging.py       # Access logging
    │   └── encoding.py      # Content-Encoding negotiation
    └── handlers/            # Route handlers
        ├── basic.py         # /, /echo, /user-agent
        └── files.py         # /files

=============================================================================
QUICK START
=============================================================================

    from tinyhttpd import ServerConfig, create_app

    server = create_app(ServerConfig(static_files="/tmp/data"))
    server.run()

    $ curl -i http://127.0.0.1:4221/echo/hello

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer, create_app
from .config import ServerConfig

__all__ = ["HTTPServer", "ServerConfig", "create_app", "__version__"]
