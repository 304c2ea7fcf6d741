"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

One immutable ServerConfig is built at startup (from the command line) and
shared, read-only, by every connection thread.

    ┌──────────────────────────────────────────────────────────────────┐
    │                   CONFIGURATION LIFECYCLE                        │
    ├──────────────────────────────────────────────────────────────────┤
    │                                                                  │
    │   argparse ──► ServerConfig(...) ──► validate() ──► HTTPServer   │
    │                    (frozen)          fail fast       binds       │
    │                                                                  │
    │   After bind: every connection thread reads the same instance.   │
    │   Nothing ever writes to it, so no locking is needed.            │
    │                                                                  │
    └──────────────────────────────────────────────────────────────────┘

There is no config file and no environment variable support; the only
runtime knob exposed to users is ``--directory``.

=============================================================================
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ServerConfig:
    """
    Configuration for the HTTP server.

    frozen=True turns any attempt to mutate the config into a
    dataclasses.FrozenInstanceError.
    """

    host: str = "127.0.0.1"
    """Address to bind to. "0.0.0.0" listens on all interfaces."""

    port: int = 4221
    """Port to listen on. 0 lets the OS pick a free port."""

    static_files: Optional[str] = None
    """
    Root directory for the /files/ routes.
    None disables them: every /files/* request gets a 404.
    """

    backlog: int = 128
    """Maximum number of queued, not yet accepted connections."""

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    @property
    def address(self) -> tuple[str, int]:
        return (self.host, self.port)

    def validate(self) -> None:
        """
        Validate configuration values.

        Called by HTTPServer at construction so a bad value fails at startup
        instead of on the first request.

        Raises:
            ValueError: On the first invalid value found.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Unknown log level: {self.log_level}")

        if self.static_files is not None and not os.path.isdir(self.static_files):
            raise ValueError(f"Static files directory does not exist: {self.static_files}")
