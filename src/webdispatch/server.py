"""
=============================================================================
HTTP HOSTING ADAPTER
=============================================================================

Serves any handler (a Router, an IPFilter, a plain function) over HTTP using
the standard library's ThreadingHTTPServer.

    from webdispatch import Router, serve

    router = Router(lambda r: r.mount("/", "public"))
    serve(router, port=9000)

=============================================================================
REQUEST LIFECYCLE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  ThreadingHTTPServer  (one thread per connection)                    │
    │       │                                                              │
    │       ▼                                                              │
    │  _DispatchHandler._dispatch()                                        │
    │       │                                                              │
    │       ├── 1. Build HTTPRequest (path, query, headers, body, client)   │
    │       ├── 2. response = app(request)                                 │
    │       │        └── exception → logged, 500 Internal Server Error     │
    │       ├── 3. HTTPResponse.coerce(response)  (tuples accepted)        │
    │       ├── 4. Write status line and headers                           │
    │       ├── 5. Write body chunks (skipped for HEAD)                    │
    │       └── 6. response.close()  (always, in a finally)                │
    └─────────────────────────────────────────────────────────────────────┘

Connections are HTTP/1.0 style: one request per connection, closed after
the response. Streamed bodies without a Content-Length therefore need no
chunked encoding.

=============================================================================
"""

import logging
import threading
from dataclasses import replace
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Callable, Optional

from .config import ServerConfig
from .http.request import HTTPRequest
from .http.response import HTTPResponse, internal_error
from .http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)


App = Callable[[HTTPRequest], Any]


def configure_logging(level: int | str = logging.INFO) -> None:
    """
    Configure logging for the server process.

    Installs a root handler (only if none exists yet) and sets the level of
    the "webdispatch" logger tree.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("webdispatch").setLevel(level)


class _DispatchHandler(BaseHTTPRequestHandler):
    """
    Translates between http.server and the HTTPRequest/HTTPResponse pair.

    One instance is created per connection by ThreadingHTTPServer.
    """

    server: "_ThreadingServer"

    def setup(self):
        self.timeout = self.server.config.timeout
        super().setup()

    def version_string(self) -> str:
        return self.server.config.server_name

    def _build_request(self) -> Optional[HTTPRequest]:
        try:
            length = int(self.headers.get("Content-Length") or 0)
        except ValueError:
            self.send_error(400, "Invalid Content-Length")
            return None

        body = self.rfile.read(length) if length > 0 else b""

        # Repeated headers are folded into one comma separated value
        headers = {}
        for name in self.headers.keys():
            headers[name] = ", ".join(self.headers.get_all(name, []))

        return HTTPRequest.from_target(
            self.command,
            self.path,
            headers=headers,
            body=body,
            client_address=(self.client_address[0], self.client_address[1]),
            request_version=self.request_version,
        )

    def _dispatch(self) -> None:
        request = self._build_request()
        if request is None:
            return

        try:
            response = HTTPResponse.coerce(self.server.app(request))
        except Exception:
            logger.exception(f"Unhandled error serving {self.command} {self.path}")
            response = internal_error()

        try:
            self._write_response(response)
        except (BrokenPipeError, ConnectionResetError):
            logger.debug(f"Client {self.client_address[0]} disconnected")
        finally:
            response.close()

    def _write_response(self, response: HTTPResponse) -> None:
        status = response.status
        phrase = status.phrase if isinstance(status, HTTPStatus) else None
        self.send_response(int(status), phrase)
        for name, value in response.headers.items():
            self.send_header(name, str(value))

        if not response.is_streamed and not any(
            name.lower() == "content-length" for name in response.headers
        ):
            self.send_header("Content-Length", str(len(response.body)))
        self.send_header("Connection", "close")
        self.end_headers()

        if self.command == "HEAD":
            return

        for chunk in response.iter_body():
            self.wfile.write(chunk)
        self.wfile.flush()

    do_GET = _dispatch
    do_HEAD = _dispatch
    do_POST = _dispatch
    do_PUT = _dispatch
    do_DELETE = _dispatch
    do_PATCH = _dispatch
    do_OPTIONS = _dispatch

    def log_message(self, format: str, *args: Any) -> None:
        # Access lines belong to LoggingMiddleware; keep http.server's quiet
        logger.debug(f"{self.address_string()} {format % args}")

    def log_error(self, format: str, *args: Any) -> None:
        logger.warning(f"{self.address_string()} {format % args}")


class _ThreadingServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self, app: App, config: ServerConfig):
        self.app = app
        self.config = config
        self.request_queue_size = config.backlog
        super().__init__((config.host, config.port), _DispatchHandler)

    def handle_error(self, request, client_address):
        logger.exception(f"Error handling connection from {client_address[0]}")


class HTTPServer:
    """
    Serves a handler over HTTP.

    The socket is bound when the server is created, so with port=0 the
    chosen port is available from `address` before run() is called:

        server = HTTPServer(router, ServerConfig(host="127.0.0.1", port=0))
        threading.Thread(target=server.run, daemon=True).start()
        host, port = server.address
        ...
        server.shutdown()

    Args:
        app: Any handler: request → HTTPResponse or (status, headers, body).
        config: Server configuration (defaults to ServerConfig()).

    Raises:
        ValueError: If the configuration is invalid.
        OSError: If the address cannot be bound.
    """

    def __init__(self, app: App, config: Optional[ServerConfig] = None):
        self.app = app
        self.config = config or ServerConfig()
        self.config.validate()

        self._server = _ThreadingServer(app, self.config)
        self._running = False
        self._lock = threading.Lock()
        self._shutdown_requested = threading.Event()

    @property
    def address(self) -> tuple[str, int]:
        """The bound (host, port)."""
        host, port = self._server.server_address[:2]
        return host, port

    @property
    def running(self) -> bool:
        return self._running

    def run(self) -> None:
        """
        Serve requests until shutdown() is called or Ctrl+C is pressed.
        """
        configure_logging(self.config.level)

        host, port = self.address
        logger.info(f"Starting {self.config.server_name} on http://{host}:{port}")

        with self._lock:
            if self._shutdown_requested.is_set():
                logger.info("Shutdown requested before start, not serving")
                self.close()
                return
            self._running = True

        try:
            self._server.serve_forever()
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            with self._lock:
                self._running = False
            self.close()
            logger.info("Server stopped")

    def shutdown(self) -> None:
        """
        Stop a running server from another thread.

        May be called before run() has started: run() then returns without
        serving. Otherwise blocks until the serve loop has exited.
        """
        with self._lock:
            self._shutdown_requested.set()
            running = self._running

        if running:
            logger.info("Shutting down server...")
            # serve_forever() picks the request up even if it has not
            # entered its loop yet
            self._server.shutdown()

    def close(self) -> None:
        """Release the listening socket. Used after run() returns, or instead of it."""
        self._server.server_close()

    def __repr__(self) -> str:
        host, port = self.address
        return f"HTTPServer({host}:{port}, running={self._running})"


def serve(app: App, config: Optional[ServerConfig] = None, **overrides: Any) -> HTTPServer:
    """
    Serve `app` over HTTP (blocking) and return the server once stopped.

    Keyword overrides replace fields of `config`:

        serve(router, port=9000, log_level="DEBUG")

    Raises:
        ValueError: If the resulting configuration is invalid.
        TypeError: If an override names an unknown setting.
    """
    config = replace(config or ServerConfig(), **overrides)
    server = HTTPServer(app, config)
    server.run()
    return server
