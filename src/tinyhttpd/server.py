"""
=============================================================================
MAIN HTTP SERVER
=============================================================================

Ties the listener, the parser, the router and the response builder
together.

=============================================================================
ARCHITECTURE OVERVIEW
=============================================================================

    ┌──────────────────────────────────────────────────────────────────┐
    │                                                                  │
    │   SocketServer ──accept──► Connection ──thread──► _process_...   │
    │   (one loop)                                   │                 │
    │                                                ▼                 │
    │                                   RequestParser.parse(reader)    │
    │                                                │                 │
    │                                                ▼                 │
    │                     LoggingMiddleware → ContentEncodingMiddleware│
    │                                                │                 │
    │                                                ▼                 │
    │                                          Router.handle           │
    │                                                │                 │
    │                                                ▼                 │
    │                                   HTTPResponse.send(conn)        │
    │                                                │                 │
    │                                                ▼                 │
    │                                           conn.close()           │
    │                                                                  │
    └──────────────────────────────────────────────────────────────────┘

=============================================================================
CONCURRENCY
=============================================================================

The accept loop runs on the calling thread and never waits for a
connection to finish: each connection gets its own daemon thread. The
only state the threads share is the frozen ServerConfig and the router,
both of which are read-only once run() starts.

Within one connection: parse, then dispatch, then send. Nothing is ever
retried, and there is no read timeout.

=============================================================================
ERROR HANDLING
=============================================================================

    HTTPParseError       → log, send nothing, close      (this connection)
    OSError              → log, close                    (this connection)
    other handler error  → log with traceback, close     (this connection)
    accept() failure     → raised out of run()           (whole server)

=============================================================================
"""

import logging
import threading
from typing import Callable, Optional

from .config import ServerConfig
from .core import Connection, ConnectionState, SocketServer
from .handlers import FileHandler, echo, index, user_agent
from .http import HTTPParseError, HTTPRequest, HTTPResponse, RequestParser, Router
from .middleware import ContentEncodingMiddleware, LoggingMiddleware, Middleware, MiddlewarePipeline

logger = logging.getLogger(__name__)


class HTTPServer:
    """
    HTTP/1.1 server: one request per connection, one thread per connection.

        server = HTTPServer(ServerConfig(port=4221))

        @server.route("/")
        def root(request):
            return ok()

        server.use(LoggingMiddleware())
        server.run()

    Most callers want create_app(), which registers the standard routes.
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        self.config = config or ServerConfig()
        self.config.validate()  # Fail-fast on invalid config

        self._socket_server = SocketServer(self.config)
        self._parser = RequestParser()
        self._router = Router()
        self._middleware = MiddlewarePipeline()
        self._handler: Optional[Callable[[HTTPRequest], HTTPResponse]] = None

    @property
    def router(self) -> Router:
        return self._router

    @property
    def address(self):
        """The bound (host, port) once listening."""
        return self._socket_server.address

    def use(self, middleware: Middleware) -> "HTTPServer":
        """
        Add middleware. First added runs outermost.

        Returns:
            Self for method chaining.
        """
        self._middleware.add(middleware)
        return self

    def route(self, path: str, method: Optional[str] = None):
        """Register a route handler (any method when ``method`` is None)."""
        return self._router.route(path, method)

    def dispatch(self, request: HTTPRequest) -> HTTPResponse:
        """
        Run a parsed request through the middleware and the router.

        The wrapped handler is built lazily so routes and middleware added
        before the first dispatch are all included.
        """
        if self._handler is None:
            self._handler = self._middleware.wrap(self._router.handle)
        return self._handler(request)

    def run(self):
        """
        Start the server (blocking).

        Returns when shutdown() is called or on Ctrl+C.

        Raises:
            OSError: If the listener cannot bind or accept() fails.
        """
        self._setup_logging()
        self._handler = self._middleware.wrap(self._router.handle)

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")

        logger.info("Server stopped")

    def shutdown(self):
        """Stop accepting new connections."""
        self._socket_server.shutdown()

    def wait_for_shutdown(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_for_shutdown(timeout)

    def _setup_logging(self):
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)
        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("tinyhttpd").setLevel(level)

    def _handle_connection(self, conn: Connection):
        """
        Spawn a thread for a freshly accepted connection.

        Called on the accept loop's thread; must return immediately.
        """
        thread = threading.Thread(
            target=self._process_connection,
            args=(conn,),
            name=f"conn-{conn.id}",
            daemon=True,
        )
        thread.start()

    def _process_connection(self, conn: Connection):
        """
        Handle exactly one request on ``conn`` (runs in its own thread).

        1. Parse one request from the buffered reader
        2. Dispatch it through middleware and router
        3. Send the response
        4. Close, whatever happened
        """
        with conn:  # closed on every exit path
            try:
                conn.state = ConnectionState.READING
                request = self._parser.parse(conn.reader, conn.address)

                conn.state = ConnectionState.PROCESSING
                response = self.dispatch(request)

                response.send(conn)

            except HTTPParseError as e:
                logger.warning(f"[{conn.id}] Dropping malformed request from {conn.client_ip}: {e}")
            except OSError as e:
                logger.warning(f"[{conn.id}] Connection aborted in state {conn.state.value}: {e}")
            except Exception as e:
                logger.exception(f"[{conn.id}] Connection error: {e}")


def create_app(config: Optional[ServerConfig] = None) -> HTTPServer:
    """
    Create a server with the standard routes and middleware.

        /                → index
        /user-agent      → user_agent
        /echo/*message   → echo
        /files/*name     → FileHandler (only when config.static_files is set)

    Without a static root no /files route exists, so those requests fall
    through to the router's 404.
    """
    server = HTTPServer(config)

    server.use(LoggingMiddleware())
    server.use(ContentEncodingMiddleware())

    server.route("/")(index)
    server.route("/user-agent")(user_agent)
    server.route("/echo/*message")(echo)

    if server.config.static_files is not None:
        files = FileHandler(server.config.static_files)
        server.route("/files/*name")(files.handle)
        logger.info(f"Serving files from: {files.root_dir}")

    return server
