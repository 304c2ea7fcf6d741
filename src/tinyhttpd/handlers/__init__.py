"""
=============================================================================
REQUEST HANDLERS
=============================================================================

Handlers take an HTTPRequest and return an HTTPResponse:

    handlers/
    ├── basic.py   # index, echo, user_agent
    └── files.py   # FileHandler for /files/*name

=============================================================================
USAGE
=============================================================================

    from tinyhttpd.handlers import FileHandler, echo

    router.add_route("/echo/*message", echo)
    router.add_route("/files/*name", FileHandler("/tmp/data").handle)

=============================================================================
"""

from .basic import echo, index, user_agent
from .files import FileHandler

__all__ = [
    "index",
    "echo",
    "user_agent",
    "FileHandler",
]
