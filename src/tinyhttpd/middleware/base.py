"""
=============================================================================
MIDDLEWARE BASE
=============================================================================

Middleware wraps the router so cross-cutting behavior (access logging,
content negotiation) runs on every response without each handler having
to remember it.

    pipeline.add(LoggingMiddleware())          # First added = outermost
    pipeline.add(ContentEncodingMiddleware())  # Closest to the router

        ┌──────────────────────────────────────────────────────┐
        │  LoggingMiddleware                                   │
        │  ┌────────────────────────────────────────────────┐  │
        │  │  ContentEncodingMiddleware                     │  │
        │  │  ┌──────────────────────────────────────────┐  │  │
        │  │  │           router.handle                  │  │  │
        │  │  └──────────────────────────────────────────┘  │  │
        │  └────────────────────────────────────────────────┘  │
        └──────────────────────────────────────────────────────┘

Requests flow inward, responses flow back outward, so the access log sees
the final headers.

=============================================================================
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, List

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse

logger = logging.getLogger(__name__)

NextHandler = Callable[[HTTPRequest], HTTPResponse]


class Middleware(ABC):
    """
    A step wrapped around the router.

        class NoCache(Middleware):
            def __call__(self, request, next):
                response = next(request)  # <-- call the rest of the chain
                response.set_header("Cache-Control", "no-store")
                return response
    """

    @abstractmethod
    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        """
        Process the request.

        Args:
            request: Parsed request
            next: The next handler in the chain

        Returns:
            HTTP response (from next() or short-circuited)
        """

    @property
    def name(self) -> str:
        """Class name, used in debug logs."""
        return self.__class__.__name__


class MiddlewarePipeline:
    """Chains middleware around a final handler."""

    def __init__(self):
        self._middleware: List[Middleware] = []

    def __len__(self) -> int:
        return len(self._middleware)

    def add(self, middleware: Middleware) -> "MiddlewarePipeline":
        """
        Add middleware to the pipeline (first added = outermost).

        Returns:
            Self for method chaining
        """
        self._middleware.append(middleware)
        logger.debug(f"Added middleware: {middleware.name}")
        return self

    def wrap(self, handler: NextHandler) -> NextHandler:
        """
        Wrap ``handler`` with every middleware in the pipeline.

        Given [MW1, MW2] and handler, we wrap in REVERSE order:

            current = handler
            current = MW2 around current
            current = MW1 around current

            Final: MW1 → MW2 → handler
        """
        current = handler
        for middleware in reversed(self._middleware):
            current = self._bind(middleware, current)
        return current

    @staticmethod
    def _bind(middleware: Middleware, next_handler: NextHandler) -> NextHandler:
        # Closure over one middleware and the handler it wraps
        def wrapped(request: HTTPRequest) -> HTTPResponse:
            return middleware(request, next_handler)
        return wrapped
