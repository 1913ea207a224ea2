"""
pytest configuration and fixtures.
"""

import threading
import urllib.error
import urllib.request
from typing import Generator, Optional
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from webdispatch import HTTPServer, ServerConfig
from webdispatch.http import HTTPRequest


def make_request(
    path: Optional[str] = "/",
    host: Optional[str] = None,
    client_ip: str = "127.0.0.1",
    method: str = "GET",
) -> HTTPRequest:
    """Helper to create a request for testing."""
    headers = {"host": host} if host is not None else {}
    return HTTPRequest(
        method=method,
        path=path,
        headers=headers,
        client_address=(client_ip, 54321),
    )


@pytest.fixture
def files_dir(tmp_path: Path) -> Path:
    """A directory with a few files to serve."""
    root = tmp_path / "files"
    (root / "docs").mkdir(parents=True)
    (root / "report.pdf").write_bytes(b"%PDF-1.4 fake")
    (root / "index.html").write_text("<h1>home</h1>")
    (root / "docs" / "notes.txt").write_text("notes")
    (tmp_path / "secret.txt").write_text("top secret")
    return root


@pytest.fixture
def config() -> ServerConfig:
    """Test server configuration on a free port."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        timeout=5.0,
        log_level="WARNING",
    )


class TestServer:
    """Test server helper that runs in a background thread."""

    __test__ = False

    def __init__(self, server: HTTPServer):
        self.server = server
        self._thread: Optional[threading.Thread] = None

    @property
    def base_url(self) -> str:
        host, port = self.server.address
        return f"http://{host}:{port}"

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

    def request(self, path: str, method: str = "GET", headers: Optional[dict] = None):
        """
        Send a request and return (status, headers, body).

        Error statuses are returned, not raised.
        """
        req = urllib.request.Request(
            self.base_url + path, method=method, headers=headers or {}
        )
        try:
            with urllib.request.urlopen(req, timeout=5) as resp:
                return resp.status, dict(resp.headers), resp.read()
        except urllib.error.HTTPError as e:
            with e:
                return e.code, dict(e.headers), e.read()

    def stop(self):
        """Stop the server."""
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)


@pytest.fixture
def serve_app(config: ServerConfig) -> Generator:
    """Factory fixture: serve an app in the background, stop it afterwards."""
    servers = []

    def start(app) -> TestServer:
        test_server = TestServer(HTTPServer(app, config))
        test_server.start()
        servers.append(test_server)
        return test_server

    yield start

    for test_server in servers:
        test_server.stop()
