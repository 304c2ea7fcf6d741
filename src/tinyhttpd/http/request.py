"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Reads exactly one HTTP/1.1 request from a buffered, line-oriented byte
stream and turns it into an immutable HTTPRequest.

=============================================================================
HTTP REQUEST ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP REQUEST STRUCTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    POST /files/new.txt HTTP/1.1\r\n      ◄── request line            │
    │    ─┬── ───────┬────── ────┬───                                      │
    │     │          │           │                                         │
    │   Method     Target     Version                                      │
    │                                                                      │
    │    Host: localhost:4221\r\n              ◄── headers, one per line   │
    │    Content-Length: 3\r\n                                             │
    │    \r\n                                  ◄── blank line ends headers │
    │    abc                                   ◄── exactly 3 body bytes    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PARSING RULES
=============================================================================

1. REQUEST LINE
   Split on whitespace into exactly three tokens. Anything else is fatal.
   The method is matched case-insensitively against GET, POST and PUT.
   The target is kept verbatim: no URL-decoding, no query splitting.

2. HEADERS
   One "Name: Value" per line, split on the FIRST ": ". The name is kept
   exactly as sent (keys are case-sensitive), the value is stripped.
   A repeated header overwrites the earlier one (last one wins).
   Parsing stops at a bare "\r\n" line OR at end of stream. Hitting end of
   stream before the blank line is accepted as the end of the headers.

3. BODY
   Only for POST and PUT. Exactly Content-Length bytes are read; a missing
   or non-numeric Content-Length means zero. A stream that closes before
   the declared length is fatal.

There are no limits on header count, line length or body size.

=============================================================================
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import BinaryIO, Dict, Optional


class HTTPParseError(Exception):
    """
    Raised when a request cannot be parsed.

    Every parse failure is fatal for the connection it happened on: the
    server sends no response and closes the socket. Other connections are
    never affected.
    """


class Method(str, Enum):
    """
    The HTTP methods this server understands.

    Subclassing str lets members compare equal to their wire form, so
    ``Method.GET == "GET"`` holds.
    """

    GET = "GET"
    POST = "POST"
    PUT = "PUT"

    @classmethod
    def from_token(cls, token: str) -> "Method":
        """
        Normalize a request-line method token.

        Raises:
            HTTPParseError: If the token is not GET, POST or PUT (any case).
        """
        try:
            return cls(token.upper())
        except ValueError:
            raise HTTPParseError(f"Unsupported method: {token}") from None

    @property
    def has_body(self) -> bool:
        """POST and PUT carry a Content-Length delimited body."""
        return self in (Method.POST, Method.PUT)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class HTTPRequest:
    """
    A parsed HTTP request.

    Built once by RequestParser and never mutated afterwards. The router
    hands handlers a copy with ``path_params`` filled in (via
    ``dataclasses.replace``) and leaves the parsed one untouched.

    Attributes:
        method:         GET, POST or PUT
        path:           Request target exactly as received
                        "/echo/a%20b" stays "/echo/a%20b"
        version:        Protocol token from the request line ("HTTP/1.1")
        headers:        Header name → value, names as sent by the client
        body:           Raw body bytes for POST/PUT, None for GET
        path_params:    Values captured by the route pattern
                        Route "/echo/*message" with "/echo/hi" → {"message": "hi"}
        client_address: (ip, port) of the peer, for logging
    """

    method: Method
    path: str
    version: str = "HTTP/1.1"
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None
    path_params: Dict[str, str] = field(default_factory=dict)
    client_address: tuple[str, int] = ("", 0)

    @property
    def user_agent(self) -> str:
        """The User-Agent header, or an empty string when it is absent."""
        return self.headers.get("User-Agent", "")

    @property
    def content_length(self) -> int:
        """
        Declared body length.

        Returns 0 if the header is missing or is not a non-negative integer.
        """
        return _parse_content_length(self.headers.get("Content-Length"))


class RequestParser:
    """
    Parses one HTTP request from a buffered binary stream.

    The stream only needs ``readline()`` and ``read(n)``, which is what
    ``socket.makefile("rb")`` returns and what ``io.BytesIO`` offers in tests.

        Buffered stream
              │
              ▼
        ┌───────────────────────────────────────────────────────────────┐
        │  1. readline() → request line → (method, target, version)     │
        │     │  not 3 tokens / unknown method? → HTTPParseError        │
        │     ▼                                                         │
        │  2. readline() until b"\\r\\n" or b"" → headers               │
        │     │  no ": " separator? → HTTPParseError                    │
        │     ▼                                                         │
        │  3. POST/PUT: read(Content-Length) → body                     │
        │     │  short read? → HTTPParseError                           │
        │     ▼                                                         │
        │  4. HTTPRequest(...)                                          │
        └───────────────────────────────────────────────────────────────┘
    """

    HEADER_SEPARATOR = ": "
    HEADER_TERMINATOR = b"\r\n"

    def parse(
        self,
        stream: BinaryIO,
        client_address: tuple[str, int] = ("", 0),
    ) -> HTTPRequest:
        """
        Read and parse a single request from ``stream``.

        Args:
            stream: Buffered binary stream positioned at a request line.
            client_address: Peer (ip, port), carried on the request for logs.

        Returns:
            The parsed HTTPRequest.

        Raises:
            HTTPParseError: On any malformed or truncated input.
            OSError: If reading from the underlying socket fails.
        """
        method, path, version = self._parse_request_line(stream.readline())
        headers = self._parse_headers(stream)

        body = None
        if method.has_body:
            length = _parse_content_length(headers.get("Content-Length"))
            body = self._read_body(stream, length)

        return HTTPRequest(
            method=method,
            path=path,
            version=version,
            headers=headers,
            body=body,
            client_address=client_address,
        )

    def _parse_request_line(self, raw: bytes) -> tuple[Method, str, str]:
        """
        Parse the request line into (method, target, version).

            "GET /echo/abc HTTP/1.1"
             ─┬─ ────┬──── ───┬────
              │      │        │
            Method Target  Version
        """
        line = _decode_line(raw)
        tokens = line.split()
        if len(tokens) != 3:
            raise HTTPParseError(f"Invalid request line: {line.strip()!r}")

        method_token, target, version = tokens
        return Method.from_token(method_token), target, version

    def _parse_headers(self, stream: BinaryIO) -> Dict[str, str]:
        headers: Dict[str, str] = {}

        while True:
            raw = stream.readline()
            # End of stream before the blank line still ends the header block
            if not raw or raw == self.HEADER_TERMINATOR:
                break

            line = _decode_line(raw)
            name, sep, value = line.partition(self.HEADER_SEPARATOR)
            if not sep:
                raise HTTPParseError(f"Invalid header line: {line.strip()!r}")

            headers[name] = value.strip()

        return headers

    def _read_body(self, stream: BinaryIO, length: int) -> bytes:
        if length == 0:
            return b""

        body = stream.read(length)
        if len(body) < length:
            raise HTTPParseError(
                f"Incomplete body: expected {length} bytes, got {len(body)}"
            )
        return body


def _decode_line(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise HTTPParseError(f"Line is not valid UTF-8: {e}") from e


def _parse_content_length(value: Optional[str]) -> int:
    if value is None or not (value.isascii() and value.isdigit()):
        return 0
    return int(value)


def parse_request(
    stream: BinaryIO,
    client_address: tuple[str, int] = ("", 0),
) -> HTTPRequest:
    """
    Convenience function to parse an HTTP request.

    Equivalent to ``RequestParser().parse(stream, client_address)``.
    """
    return RequestParser().parse(stream, client_address)
