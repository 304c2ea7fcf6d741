"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The closed set of status codes this server ever produces.

    ┌───────────┬──────┬────────────────────────┬──────────────────────────┐
    │  Member   │ Code │ Reason phrase          │ Produced by              │
    ├───────────┼──────┼────────────────────────┼──────────────────────────┤
    │ OK        │ 200  │ OK                     │ /, /echo, /user-agent,   │
    │           │      │                        │ GET /files               │
    │ CREATED   │ 201  │ Created                │ POST /files              │
    │ BAD_REQ.. │ 400  │ Bad Request            │ other methods on /files  │
    │ NOT_FOUND │ 404  │ Not Found              │ unknown path, no file    │
    │ INTERNAL..│ 500  │ Internal Server Error  │ unreadable file          │
    └───────────┴──────┴────────────────────────┴──────────────────────────┘

Because HTTPStatus is an IntEnum, HTTPStatus(418) raises ValueError. Asking
for a code outside the table is a programming error, not something a
request can trigger.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    Supported HTTP status codes.

    IntEnum members compare equal to plain ints, so ``HTTPStatus.OK == 200``
    and f-strings render them as numbers: ``f"{HTTPStatus.OK}"`` is ``"200"``.
    """

    OK = 200
    CREATED = 201
    BAD_REQUEST = 400
    NOT_FOUND = 404
    INTERNAL_SERVER_ERROR = 500

    @property
    def phrase(self) -> str:
        """
        Get the reason phrase for this status code.

            HTTP/1.1 404 Not Found
                     ─── ─────────
                      │      │
                      │      └── Reason phrase
                      └───────── Status code
        """
        return _STATUS_PHRASES[self]

    def __str__(self) -> str:
        return str(self.value)

    @property
    def is_success(self) -> bool:
        """Check if this is a 2xx (success) status code."""
        return 200 <= self < 300

    @property
    def is_error(self) -> bool:
        """Check if this is an error status code (4xx or 5xx)."""
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
}
