"""
=============================================================================
MIDDLEWARE PACKAGE
=============================================================================

    middleware/
    ├── base.py       # Middleware ABC and MiddlewarePipeline
    ├── logging.py    # Access logging
    └── encoding.py   # Content-Encoding negotiation (header only)

=============================================================================
"""

from .base import Middleware, MiddlewarePipeline, NextHandler
from .encoding import ContentEncodingMiddleware
from .logging import LoggingMiddleware, RequestLog

__all__ = [
    "Middleware",
    "MiddlewarePipeline",
    "NextHandler",
    "ContentEncodingMiddleware",
    "LoggingMiddleware",
    "RequestLog",
]
