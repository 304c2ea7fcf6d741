"""
Handlers that answer from the request alone, without touching the disk.

    GET /              → 200, empty body
    GET /echo/<text>   → 200, text/plain, body = <text> verbatim
    GET /user-agent    → 200, text/plain, body = User-Agent header or ""

They accept every method; the routes are registered without a method filter.
"""

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ok, text


def index(request: HTTPRequest) -> HTTPResponse:
    """Root path: a bare 200 with ``Content-Length: 0``."""
    return ok()


def echo(request: HTTPRequest) -> HTTPResponse:
    """
    Echo back whatever follows ``/echo/`` in the path.

    The router captures the remainder as the ``message`` path parameter,
    undecoded and including any further slashes.
    """
    return text(request.path_params.get("message", ""))


def user_agent(request: HTTPRequest) -> HTTPResponse:
    """Reflect the User-Agent header, or an empty body when it is absent."""
    return text(request.user_agent)
