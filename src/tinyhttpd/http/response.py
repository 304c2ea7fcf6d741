"""
=============================================================================
HTTP RESPONSE BUILDER
=============================================================================

Accumulates status, headers and body, then writes a well-formed HTTP/1.1
response to the connection.

=============================================================================
HTTP RESPONSE ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP RESPONSE STRUCTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  HTTP/1.1 200 OK\r\n                    ◄── status line              │
    │  Content-Type: text/plain\r\n           ◄── accumulated headers      │
    │  Content-Encoding: gzip\r\n                 (order not guaranteed)   │
    │  Content-Length: 3\r\n                  ◄── always computed, last    │
    │  \r\n                                   ◄── blank line               │
    │  abc                                    ◄── body bytes               │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Content-Length is never taken from the caller. It is computed from the
body at send time, so an empty body still produces "Content-Length: 0".

=============================================================================
THE BUILDER STYLE
=============================================================================

Every setter mutates the response in place and returns it:

    response = (HTTPResponse()
        .set_status(HTTPStatus.OK)
        .set_header("Content-Type", "text/plain")
        .set_body("abc"))

    response.send(conn)   # writes status+headers, then body

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Protocol, Union

from .status_codes import HTTPStatus


class Writable(Protocol):
    """Anything with a ``write(bytes)`` method: a Connection or io.BytesIO."""

    def write(self, data: bytes) -> object: ...


@dataclass
class HTTPResponse:
    """
    An HTTP response being assembled.

    Attributes:
        status:  HTTPStatus member; only the supported set can be stored
        headers: Header name → value; setting a name again overwrites it
        body:    Body bytes; str bodies are UTF-8 encoded on the way in
        version: Protocol version written on the status line
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    def __post_init__(self):
        # Rejects unsupported codes passed straight to the constructor
        self.status = HTTPStatus(self.status)

    @property
    def status_line(self) -> str:
        """
        Get the HTTP status line.

        Format: HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE
        Example: "HTTP/1.1 200 OK"
        """
        return f"{self.version} {self.status.value} {self.status.phrase}"

    @property
    def content_length(self) -> int:
        return len(self.body)

    def set_status(self, status: Union[HTTPStatus, int]) -> "HTTPResponse":
        """
        Set the status code.

        Raises:
            ValueError: If ``status`` is not one of 200, 201, 400, 404, 500.
        """
        self.status = HTTPStatus(status)
        return self

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        """
        Set a response header, replacing any earlier value for ``name``.

        Returns self for method chaining:
            response.set_header("X-One", "1").set_header("X-Two", "2")
        """
        self.headers[name] = value
        return self

    def set_content_type(self, content_type: str) -> "HTTPResponse":
        """Set the Content-Type header."""
        return self.set_header("Content-Type", content_type)

    def set_body(self, body: Union[str, bytes]) -> "HTTPResponse":
        """
        Replace the whole body.

        Strings are encoded to UTF-8 so Content-Length counts bytes, not
        characters.
        """
        if isinstance(body, str):
            self.body = body.encode("utf-8")
        else:
            self.body = bytes(body)
        return self

    def head_bytes(self) -> bytes:
        """
        Serialize everything up to and including the blank line.

        Accumulated headers come first in insertion order, then the computed
        Content-Length. A caller-set Content-Length is replaced, never trusted.
        """
        lines = [self.status_line]

        for name, value in self.headers.items():
            if name.lower() == "content-length":
                continue
            lines.append(f"{name}: {value}")
        lines.append(f"Content-Length: {self.content_length}")

        # Trailing "" plus the final CRLF produce the blank separator line
        lines.append("")
        return "\r\n".join(lines).encode("utf-8") + b"\r\n"

    def to_bytes(self) -> bytes:
        """Serialize the complete response (head + body) to bytes."""
        return self.head_bytes() + self.body

    def send(self, conn: Writable) -> None:
        """
        Write the response to ``conn``.

        The head and the body go out as separate writes. A failing write
        raises (typically OSError) and the remaining writes are skipped;
        nothing is retried.
        """
        conn.write(self.head_bytes())
        if self.body:
            conn.write(self.body)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
#
# One-liners for the responses the handlers produce:
#
#     return ok("hello", content_type="text/plain")
#     return not_found()
#
# =============================================================================

def ok(body: Union[str, bytes] = b"", content_type: str = "") -> HTTPResponse:
    """
    Create a 200 OK response.

    Content-Type is only set when given, so ``ok()`` is a bare 200 with
    ``Content-Length: 0``.
    """
    response = HTTPResponse(status=HTTPStatus.OK).set_body(body)
    if content_type:
        response.set_content_type(content_type)
    return response


def text(body: str) -> HTTPResponse:
    """Create a 200 OK ``text/plain`` response."""
    return ok(body, content_type="text/plain")


def created() -> HTTPResponse:
    """Create a 201 Created response with an empty body."""
    return HTTPResponse(status=HTTPStatus.CREATED)


def bad_request() -> HTTPResponse:
    """Create a 400 Bad Request response with an empty body."""
    return HTTPResponse(status=HTTPStatus.BAD_REQUEST)


def not_found() -> HTTPResponse:
    """Create a 404 Not Found response with an empty body."""
    return HTTPResponse(status=HTTPStatus.NOT_FOUND)


def internal_error(message: str = "Internal Server Error") -> HTTPResponse:
    """
    Create a 500 Internal Server Error response.

    The message is sent to the client as plain text. It may carry
    filesystem error detail.
    """
    return (HTTPResponse(status=HTTPStatus.INTERNAL_SERVER_ERROR)
        .set_content_type("text/plain")
        .set_body(message))
