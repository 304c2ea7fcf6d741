"""
=============================================================================
HTTP PROTOCOL PACKAGE
=============================================================================

The protocol layer, independent of sockets and threads:

    http/
    ├── request.py       # RequestParser: byte stream → HTTPRequest
    ├── response.py      # HTTPResponse: fields → bytes on the wire
    ├── router.py        # Router: HTTPRequest → handler → HTTPResponse
    └── status_codes.py  # HTTPStatus: the five supported codes

=============================================================================
"""

from .request import HTTPRequest, HTTPParseError, Method, RequestParser, parse_request
from .response import (
    HTTPResponse,
    ok,             # 200 OK
    text,           # 200 OK, text/plain
    created,        # 201 Created
    bad_request,    # 400 Bad Request
    not_found,      # 404 Not Found
    internal_error, # 500 Internal Server Error
)
from .router import Router, Route, RouteMatch
from .status_codes import HTTPStatus

__all__ = [
    # Request parsing
    "HTTPRequest",
    "HTTPParseError",
    "Method",
    "RequestParser",
    "parse_request",

    # Response building
    "HTTPResponse",
    "ok",
    "text",
    "created",
    "bad_request",
    "not_found",
    "internal_error",

    # Routing
    "Router",
    "Route",
    "RouteMatch",

    # Status codes
    "HTTPStatus",
]
