"""
=============================================================================
WEBDISPATCH
=============================================================================

A small host/path request router for serving files and callbacks over HTTP.

    from webdispatch import Router, IPFilter, ok

    def configure(router):
        router.file("/robots.txt", "/etc/www/robots.txt")
        router.mount("/files/", "/srv/data")

        @router.bind("/status")
        def status(request):
            return ok("up")

        @router.host("admin.example.com")
        def admin(admin_router):
            admin_router.dir("/", admin_app)

    router = Router(configure)
    router.start(port=9000)

=============================================================================
PACKAGE LAYOUT
=============================================================================

    webdispatch/
    ├── http/            Request, response, status codes, MIME types, Router
    ├── handlers/        Built-in handlers: 404 page, static files, mounts
    ├── middleware/      IPFilter, access logging, pipeline
    ├── config.py        ServerConfig
    ├── server.py        HTTPServer adapter (http.server based)
    └── __main__.py      python -m webdispatch DIRECTORY

The dispatch core (http, handlers, middleware) never touches a socket. Any
host that can produce an HTTPRequest and write an HTTPResponse can serve a
Router; server.py is the one shipped here.

=============================================================================
"""

__version__ = "0.1.0"

from .http import (
    HTTPRequest,
    HTTPResponse,
    FileBody,
    HTTPStatus,
    Router,
    RouteInfo,
    ok,
    html,
    forbidden,
    internal_error,
    content_type,
    content_type_for,
    register_content_type,
)
from .handlers import not_found, StaticFile, MountedDirectory
from .middleware import Middleware, MiddlewarePipeline, IPFilter, LoggingMiddleware
from .config import ServerConfig, DEFAULT_HOST, DEFAULT_PORT
from .server import HTTPServer, serve, configure_logging

# Router doubles as the top-level server application
Server = Router

__all__ = [
    "__version__",
    "HTTPRequest",
    "HTTPResponse",
    "FileBody",
    "HTTPStatus",
    "Router",
    "Server",
    "RouteInfo",
    "ok",
    "html",
    "forbidden",
    "internal_error",
    "not_found",
    "content_type",
    "content_type_for",
    "register_content_type",
    "StaticFile",
    "MountedDirectory",
    "Middleware",
    "MiddlewarePipeline",
    "IPFilter",
    "LoggingMiddleware",
    "ServerConfig",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "HTTPServer",
    "serve",
    "configure_logging",
]
