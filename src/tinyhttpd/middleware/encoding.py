"""
=============================================================================
CONTENT-ENCODING NEGOTIATION
=============================================================================

Clients list the encodings they accept; the server may advertise one back:

    Request:   Accept-Encoding: gzip, deflate
    Response:  Content-Encoding: gzip

This middleware only ADVERTISES gzip. The body is sent exactly as the
handler produced it; no compression happens anywhere in the server.

=============================================================================
TOKEN MATCHING
=============================================================================

The header value is split on "," and the tokens are NOT trimmed, so the
match is exact:

    "gzip"              → ["gzip"]               → advertised
    "gzip, deflate"     → ["gzip", " deflate"]   → advertised
    "deflate, gzip"     → ["deflate", " gzip"]   → not advertised
    "deflate"           → ["deflate"]            → not advertised

A Content-Encoding already set by a handler is left alone.

=============================================================================
"""

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


class ContentEncodingMiddleware(Middleware):
    """
    Adds ``Content-Encoding`` when the client accepts a supported encoding.

    Usage:
        pipeline.add(ContentEncodingMiddleware())
    """

    SUPPORTED_ENCODINGS = ("gzip",)

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        response = next(request)

        encoding = self.negotiate(request.headers.get("Accept-Encoding", ""))
        if encoding and "Content-Encoding" not in response.headers:
            response.set_header("Content-Encoding", encoding)

        return response

    def negotiate(self, accept_encoding: str) -> str:
        """
        Pick the encoding to advertise.

        Returns:
            The first supported encoding found among the tokens, or "".
        """
        tokens = accept_encoding.split(",")
        for encoding in self.SUPPORTED_ENCODINGS:
            if encoding in tokens:
                return encoding
        return ""
