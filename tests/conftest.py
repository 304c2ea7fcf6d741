"""
pytest configuration and fixtures.
"""

import socket
import threading
import time
from typing import Callable, Generator, Optional
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tinyhttpd import HTTPServer, ServerConfig, create_app


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request."""
    return (
        b"GET /user-agent HTTP/1.1\r\n"
        b"Host: localhost:4221\r\n"
        b"User-Agent: foo/1.0\r\n"
        b"Accept: */*\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample HTTP POST request with a body."""
    body = b"abc"
    head = (
        b"POST /files/new.txt HTTP/1.1\r\n"
        b"Host: localhost:4221\r\n"
        b"Content-Type: application/octet-stream\r\n"
    )
    return head + f"Content-Length: {len(body)}\r\n".encode() + b"\r\n" + body


@pytest.fixture
def static_dir(tmp_path: Path) -> Path:
    """A static root containing hello.txt = "world"."""
    (tmp_path / "hello.txt").write_bytes(b"world")
    return tmp_path


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


def _parse_response(raw: bytes) -> tuple[int, str, dict, bytes]:
    head, sep, body = raw.partition(b"\r\n\r\n")
    assert sep, f"no header terminator in {raw!r}"

    lines = head.decode("utf-8").split("\r\n")
    version, code, reason = lines[0].split(" ", 2)
    assert version == "HTTP/1.1"

    headers = {}
    for line in lines[1:]:
        name, value = line.split(": ", 1)
        headers[name] = value
    return int(code), reason, headers, body


@pytest.fixture
def parse_response() -> Callable[[bytes], tuple[int, str, dict, bytes]]:
    """Split raw response bytes into (status, reason, headers, body)."""
    return _parse_response


class LiveServer:
    """Runs an HTTPServer in a background thread."""

    def __init__(self, server: HTTPServer, port: int):
        self.server = server
        self.port = port
        self._thread: Optional[threading.Thread] = None
        self.error: Optional[BaseException] = None

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

        # Wait for server to be ready
        for _ in range(50):  # 5 seconds max
            try:
                with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
                    s.connect(('127.0.0.1', self.port))
                    return
            except ConnectionRefusedError:
                time.sleep(0.1)

        raise RuntimeError("Server failed to start")

    def _run(self):
        try:
            self.server.run()
        except BaseException as e:
            self.error = e

    def stop(self):
        """Stop the server."""
        self.server.shutdown()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def exchange(self, data: bytes, timeout: float = 5.0) -> bytes:
        """Send raw bytes on a fresh connection and read until the server closes."""
        with socket.create_connection(('127.0.0.1', self.port), timeout=timeout) as s:
            s.sendall(data)
            chunks = []
            while True:
                chunk = s.recv(4096)
                if not chunk:
                    break
                chunks.append(chunk)
        return b"".join(chunks)


@pytest.fixture
def live_server(free_port: int, static_dir: Path) -> Generator[LiveServer, None, None]:
    """A running server with a static root."""
    server = create_app(ServerConfig(
        host="127.0.0.1",
        port=free_port,
        static_files=str(static_dir),
        log_level="WARNING",
    ))

    srv = LiveServer(server, free_port)
    srv.start()

    yield srv

    srv.stop()


@pytest.fixture
def bare_server(free_port: int) -> Generator[LiveServer, None, None]:
    """A running server without a static root."""
    server = create_app(ServerConfig(
        host="127.0.0.1",
        port=free_port,
        log_level="WARNING",
    ))

    srv = LiveServer(server, free_port)
    srv.start()

    yield srv

    srv.stop()
