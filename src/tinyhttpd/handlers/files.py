"""
=============================================================================
FILE HANDLER
=============================================================================

Reads and writes files under the configured static root for the
``/files/<name>`` routes.

    ┌──────────┬──────────────────────────────┬────────────────────────────┐
    │ Method   │ Outcome                      │ Status                     │
    ├──────────┼──────────────────────────────┼────────────────────────────┤
    │ GET      │ file missing                 │ 404                        │
    │ GET      │ name unusable (NUL, too long)│ 404                        │
    │ GET      │ file read                    │ 200 application/octet-stream│
    │ GET      │ read failed (dir, perms...)  │ 500, error text as body    │
    │ POST     │ body written (create/trunc)  │ 201                        │
    │ POST     │ write failed                 │ OSError propagates         │
    │ other    │                              │ 400                        │
    └──────────┴──────────────────────────────┴────────────────────────────┘

GET and POST fail differently on purpose: a failed read is reported to the
client as a 500, while a failed write aborts the connection.

=============================================================================
PATH TRAVERSAL
=============================================================================

The entity name comes straight from the request line, so it can try to
climb out of the root:

    GET /files/../../etc/passwd
    root / "../../etc/passwd"  → /etc/passwd

Every joined path is resolved (following ".." and symlinks) and must
still be inside the resolved root:

    full_path = (root / name).resolve()
    full_path.relative_to(root)  # ValueError when outside

Escaping paths are logged and answered with 404.

=============================================================================
"""

import logging
from pathlib import Path
from typing import Optional, Union

from ..http.request import HTTPRequest, Method
from ..http.response import HTTPResponse, bad_request, created, internal_error, not_found, ok

logger = logging.getLogger(__name__)


class FileHandler:
    """
    Serves and stores files below ``root_dir``.

    Usage:
        files = FileHandler("/tmp/data")
        router.add_route("/files/*name", files.handle)
    """

    CONTENT_TYPE = "application/octet-stream"

    def __init__(self, root_dir: Union[str, Path]):
        self.root_dir = Path(root_dir).resolve()

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Dispatch on method for a ``/files/*name`` request.

        Raises:
            OSError: If writing a POSTed file fails.
        """
        name = request.path_params.get("name", "")

        if request.method not in (Method.GET, Method.POST):
            return bad_request()

        full_path = self.resolve(name)
        if full_path is None:
            return not_found()

        if request.method == Method.GET:
            return self._read(full_path)
        return self._write(full_path, request.body or b"")

    def resolve(self, name: str) -> Optional[Path]:
        """
        Join ``name`` onto the root and jail-check the result.

        Returns:
            The resolved path, or None if it falls outside the root or
            cannot be resolved at all (NUL bytes, overlong names).
        """
        try:
            if "\x00" in name:
                raise ValueError("embedded null byte")
            full_path = (self.root_dir / name).resolve()
        except (OSError, ValueError) as e:
            logger.warning(f"Unusable file name {name!r}: {e}")
            return None

        try:
            full_path.relative_to(self.root_dir)
        except ValueError:
            logger.warning(f"Path traversal attempt: {name!r}")
            return None
        return full_path

    def _read(self, path: Path) -> HTTPResponse:
        try:
            found = path.exists()
        except OSError as e:
            logger.warning(f"Cannot stat {path}: {e}")
            return not_found()
        if not found:
            return not_found()

        try:
            content = path.read_bytes()
        except OSError as e:
            logger.error(f"Error reading file {path}: {e}")
            return internal_error(f"Failed to read file: {e}")

        return ok(content, content_type=self.CONTENT_TYPE)

    def _write(self, path: Path, body: bytes) -> HTTPResponse:
        path.write_bytes(body)
        logger.debug(f"Wrote {len(body)} bytes to {path}")
        return created()
