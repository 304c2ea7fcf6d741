"""
=============================================================================
URL ROUTER
=============================================================================

Maps a request path to the handler that produces its response.

=============================================================================
ROUTE PATTERNS
=============================================================================

    Pattern              Path                 Captured
    ───────────────────  ───────────────────  ──────────────────────────
    /                    /                    {}
    /user-agent          /user-agent          {}
    /echo/*message       /echo/abc            {"message": "abc"}
    /echo/*message       /echo/a/b/           {"message": "a/b/"}
    /echo/*message       /echo/               {"message": ""}
    /files/:name         /files/hello.txt     {"name": "hello.txt"}

    :param  - matches one non-empty segment (no slashes)
    *param  - matches the rest of the path, slashes included, possibly empty

Paths are matched exactly as they arrived on the request line. There is
no trailing-slash normalisation and no percent-decoding, so "/echo/a%20b"
captures "a%20b".

=============================================================================
MATCHING ORDER
=============================================================================

Routes are tried in registration order and the first match wins. A route
registered with ``method=None`` matches every method; handlers that care
about the method (the file handler) branch on it themselves. When nothing
matches, the router answers 404 with an empty body.

=============================================================================
"""

import re
import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, List, Optional

from .request import HTTPRequest, Method
from .response import HTTPResponse, not_found

logger = logging.getLogger(__name__)

Handler = Callable[[HTTPRequest], HTTPResponse]


@dataclass
class Route:
    """
    A registered route: a compiled path pattern bound to a handler.

        Route(
            path="/echo/*message",
            method=None,                 # any method
            handler=echo,
            _pattern=re.compile(r"^/echo/(?P<message>.*)$"),
            _param_names=["message"],
        )
    """

    path: str
    method: Optional[Method]
    handler: Handler
    _pattern: Optional[re.Pattern] = field(default=None, repr=False)
    _param_names: List[str] = field(default_factory=list, repr=False)


@dataclass
class RouteMatch:
    """Result of a successful match: the route and its captured values."""

    route: Route
    params: Dict[str, str]


class Router:
    """
    HTTP request router.

        router = Router()

        @router.route("/echo/*message")
        def echo(request):
            return text(request.path_params["message"])

        response = router.handle(request)
    """

    def __init__(self):
        self._routes: List[Route] = []

    @property
    def routes(self) -> List[Route]:
        return list(self._routes)

    def add_route(
        self,
        path: str,
        handler: Handler,
        method: Optional[str] = None,
    ) -> Route:
        """
        Register a route.

        Args:
            path: URL pattern (e.g. /files/:name)
            handler: Callable taking a request and returning a response
            method: Restrict to one method, or None for any method

        Returns:
            The registered Route
        """
        pattern, param_names = self._compile_pattern(path)
        route = Route(
            path=path,
            method=Method.from_token(method) if method else None,
            handler=handler,
            _pattern=pattern,
            _param_names=param_names,
        )
        self._routes.append(route)
        logger.debug(f"Registered route {route.method or '*'} {path}")
        return route

    def _compile_pattern(self, path: str) -> tuple[re.Pattern, List[str]]:
        """
        Compile a path pattern into an anchored regex.

            "/echo/*message"  →  ^/echo/(?P<message>.*)$
            "/files/:name"    →  ^/files/(?P<name>[^/]+)$
            "/"               →  ^/$
        """
        param_names: List[str] = []
        regex_parts = ["^"]

        for segment in path.split("/")[1:]:
            regex_parts.append("/")

            if segment.startswith(":"):
                param_name = segment[1:]
                param_names.append(param_name)
                regex_parts.append(f"(?P<{param_name}>[^/]+)")

            elif segment.startswith("*"):
                param_name = segment[1:] or "wildcard"
                param_names.append(param_name)
                regex_parts.append(f"(?P<{param_name}>.*)")
                break  # Wildcard consumes everything

            else:
                regex_parts.append(re.escape(segment))

        regex_parts.append("$")
        return re.compile("".join(regex_parts), re.DOTALL), param_names

    def match(self, method: str, path: str) -> Optional[RouteMatch]:
        """
        Find the first route matching ``method`` and ``path``.

        Returns:
            RouteMatch if found, None otherwise
        """
        for route in self._routes:
            if route.method and route.method != method.upper():
                continue

            match = route._pattern.match(path)
            if match:
                return RouteMatch(route=route, params=match.groupdict())

        return None

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Route a request to its handler.

        The handler receives a copy of the request with ``path_params``
        filled in; the parsed request itself is never modified.
        """
        match = self.match(request.method, request.path)
        if match is None:
            return not_found()

        return match.route.handler(replace(request, path_params=match.params))

    def route(self, path: str, method: Optional[str] = None) -> Callable[[Handler], Handler]:
        """
        Decorator for registering routes.

            @router.route("/user-agent")
            def user_agent(request):
                ...
        """
        def decorator(handler: Handler) -> Handler:
            self.add_route(path, handler, method)
            return handler
        return decorator

    def get(self, path: str) -> Callable[[Handler], Handler]:
        """Register a GET route."""
        return self.route(path, "GET")

    def post(self, path: str) -> Callable[[Handler], Handler]:
        """Register a POST route."""
        return self.route(path, "POST")
