"""
=============================================================================
HOST / PATH ROUTER
=============================================================================

Dispatches requests through a tree of routing rules:

- Host patterns:  regexes matched against the Host header → child Router
- Exact hosts:    "docs.example.com"                      → child Router
- Path patterns:  regexes matched against the path         → handler
- Directories:    path prefixes ending in "/"              → handler
- Exact paths:    "/robots.txt"                            → handler
- Default:        everything else                          → handler (404)

=============================================================================
DISPATCH ORDER
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        Router(request)                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   request.host set?                                                  │
    │     ├── 1. host patterns, in registration order ──► child(request)   │
    │     └── 2. exact host lookup ─────────────────────► child(request)   │
    │                                                                      │
    │   request.path set?                                                  │
    │     ├── 3. path patterns, in registration order ──► handler(request) │
    │     ├── 4. directory prefixes, in order ──────────► handler(request) │
    │     └── 5. exact path lookup ─────────────────────► handler(request) │
    │                                                                      │
    │   6. default handler ─────────────────────────────► handler(request) │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Every step short-circuits: the first rule that matches handles the whole
request and nothing after it is consulted. A child Router is a complete
Router of its own, with its own rules and its own default, so a matched
host never falls back to the parent's path rules.

Host rules come before path rules. That lets one Router front several
virtual hosts, each with an independent routing tree, while requests for
any other host still go through the parent's path rules.

=============================================================================
RULE PRIORITY
=============================================================================

Within patterns and directories the FIRST registered rule wins. Register
the more specific rule first:

    router.dir("/downloads/private", private_area)   # checked first
    router.dir("/downloads", public_area)

Exact hosts and exact paths are keyed by their string, so registering the
same key twice replaces the earlier handler.

Patterns are regular expressions searched ANYWHERE in the value, not
anchored. "example" matches "www.example.com"; use "^example\\.com$" for
an anchored match.

=============================================================================
BUILDING A ROUTER
=============================================================================

Registration methods return the router, so they chain. When the handler is
left out they return a decorator instead:

    def configure(router):
        router.file("/robots.txt", "/etc/www/robots.txt")
        router.mount("/files/", "/srv/data")

        @router.host("admin.example.com")
        def admin(admin_router):
            admin_router.default(admin_app)

        @router.bind("/status")
        def status(request):
            return ok("up")

    router = Router(configure)

Routers are built once, before the server starts. Registration is not
synchronized with dispatch: never add rules to a Router that is already
serving requests.

=============================================================================
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from .request import HTTPRequest
from .response import HTTPResponse
from . import mime_types
from ..handlers.not_found import not_found
from ..handlers.static import MountedDirectory, StaticFile


logger = logging.getLogger(__name__)


# =============================================================================
# TYPE ALIASES
# =============================================================================

# Handler: anything that takes a request and returns a response.
# Routers, IPFilters, StaticFile, MountedDirectory and plain functions
# all fit this signature.
Handler = Callable[[HTTPRequest], HTTPResponse]

# Builder function that fills in a freshly created Router
Configure = Callable[["Router"], None]

Pattern = Union[str, re.Pattern]


@dataclass(frozen=True)
class RouteInfo:
    """
    A flattened description of one registered rule, for debugging.

    Example:
        RouteInfo(host="admin.example.com", kind="path", rule="/status",
                  target="status")
    """

    host: str
    kind: str
    rule: str
    target: str


def _compile(pattern: Pattern) -> re.Pattern:
    # Compile eagerly so a bad regex fails at registration, not per request
    if isinstance(pattern, re.Pattern):
        return pattern
    return re.compile(pattern)


def _describe(handler: Any) -> str:
    return getattr(handler, "__name__", None) or repr(handler)


class Router:
    """
    Hierarchical host/path request router.

    A Router is itself a handler: calling it with a request returns a
    response. That is what makes nesting work. A host rule stores a child
    Router and simply calls it.

    Args:
        configure: Optional builder, called once with the new Router.
    """

    def __init__(self, configure: Optional[Configure] = None):
        self._default: Handler = not_found

        self._host_patterns: List[tuple[re.Pattern, "Router"]] = []
        self._hosts: Dict[str, "Router"] = {}

        self._path_patterns: List[tuple[re.Pattern, Handler]] = []
        self._directories: List[tuple[str, Handler]] = []
        self._paths: Dict[str, Handler] = {}

        if configure is not None:
            configure(self)

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    def _register(self, value: Any, register: Callable[[Any], None]):
        """
        Run `register(value)` and return self, or, when value is None,
        return a decorator that registers the decorated function.
        """
        if value is None:
            def decorator(func):
                register(func)
                return func
            return decorator

        register(value)
        return self

    def default(self, handler: Optional[Handler] = None):
        """
        Use `handler` for every request no other rule matches.

            @router.default()
            def fallback(request):
                return ok("lol train")

        Replaces the built-in 404 handler. Note the parentheses: a bare
        @router.default would register the function and then rebind its
        name to the router.
        """
        def register(func: Handler) -> None:
            self._default = func

        return self._register(handler, register)

    def hosts_like(self, pattern: Pattern, configure: Optional[Configure] = None):
        """
        Route hosts matching `pattern` to a new child Router.

        The child is created with `configure` and appended after any host
        patterns registered so far.

            router.hosts_like(r"\\.example\\.com$", lambda r: r.default(app))
        """
        compiled = _compile(pattern)

        def register(func: Configure) -> None:
            self._host_patterns.append((compiled, Router(func)))

        return self._register(configure, register)

    def host(self, name: str, configure: Optional[Configure] = None):
        """
        Route requests whose Host header is exactly `name` to a new child
        Router, created with `configure`.
        """
        def register(func: Configure) -> None:
            self._hosts[name] = Router(func)

        return self._register(configure, register)

    def bind(self, path: str, handler: Optional[Handler] = None):
        """
        Bind the exact URL `path` to `handler`.

            @router.bind("/secrets.xml")
            def secrets(request):
                return HTTPResponse(200, {"Content-Type": "text/xml"},
                                    "<secrets>Made you look.</secrets>")
        """
        def register(func: Handler) -> None:
            self._paths[path] = func

        return self._register(handler, register)

    def paths_like(self, pattern: Pattern, handler: Optional[Handler] = None):
        """Route paths matching the regex `pattern` to `handler`."""
        compiled = _compile(pattern)

        def register(func: Handler) -> None:
            self._path_patterns.append((compiled, func))

        return self._register(handler, register)

    def dir(self, path: str, handler: Optional[Handler] = None):
        """
        Route every path under the directory `path` to `handler`.

        A trailing "/" is added if missing, so dir("/downloads") matches
        "/downloads/file.txt" but not "/downloads" or "/downloadsx".
        """
        if not path.endswith("/"):
            path += "/"

        def register(func: Handler) -> None:
            self._directories.append((path, func))

        return self._register(handler, register)

    def file(self, path: str, file_path: str | Path, content_type: Optional[str] = None) -> "Router":
        """
        Serve the contents of `file_path` at the exact URL `path`.

            router.file("/robots.txt", "/path/to/my_robots.txt")

        The file path is made absolute now. The file itself is looked up on
        every request and a 404 is returned while it does not exist.

        Args:
            path: URL path.
            file_path: File on disk.
            content_type: Overrides the extension-based Content-Type.
        """
        return self.bind(path, StaticFile(file_path, content_type))

    def mount(self, path: str, directory: str | Path) -> "Router":
        """
        Serve the files below `directory` under the URL prefix `path`.

            router.mount("/download/", "/tmp/files/")
            # GET /download/a/b.zip → /tmp/files/a/b.zip

        Requests that would resolve outside `directory` get 404.
        """
        return self.dir(path, MountedDirectory(path, directory))

    # =========================================================================
    # DISPATCH
    # =========================================================================

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Dispatch a request. See DISPATCH ORDER in the module docstring.

        Args:
            request: The normalized request.

        Returns:
            Whatever the selected handler returns.
        """
        host = request.host
        if host:
            for pattern, router in self._host_patterns:
                if pattern.search(host):
                    logger.debug(f"Host {host!r} matched pattern {pattern.pattern!r}")
                    return router.handle(request)

            router = self._hosts.get(host)
            if router is not None:
                logger.debug(f"Host {host!r} matched exactly")
                return router.handle(request)

        path = request.path
        if path:
            for pattern, handler in self._path_patterns:
                if pattern.search(path):
                    logger.debug(f"Path {path!r} matched pattern {pattern.pattern!r}")
                    return handler(request)

            for prefix, handler in self._directories:
                if path.startswith(prefix):
                    logger.debug(f"Path {path!r} is under {prefix!r}")
                    return handler(request)

            handler = self._paths.get(path)
            if handler is not None:
                logger.debug(f"Path {path!r} matched exactly")
                return handler(request)

        return self._default(request)

    def __call__(self, request: HTTPRequest) -> HTTPResponse:
        return self.handle(request)

    # =========================================================================
    # CONTENT TYPES
    # =========================================================================

    @staticmethod
    def content_type(extension: str) -> str:
        """
        Get the Content-Type for a file extension.

            router.content_type("html")  # "text/html"
        """
        return mime_types.content_type(extension)

    @staticmethod
    def content_type_for(path: str | Path) -> str:
        """
        Get the Content-Type for a file.

            router.content_type_for("file.html")  # "text/html"
        """
        return mime_types.content_type_for(path)

    # =========================================================================
    # SERVING
    # =========================================================================

    def start(self, config=None, **overrides):
        """
        Serve this router over HTTP (blocking).

        Shortcut for webdispatch.server.serve(router, config, **overrides).
        Host and port default to ServerConfig's 0.0.0.0:8080.

            Router(configure).start(port=9000)
        """
        from ..server import serve

        return serve(self, config, **overrides)

    # =========================================================================
    # INTROSPECTION
    # =========================================================================

    def routes(self, host: str = "*") -> List[RouteInfo]:
        """
        Flatten the routing tree into a list of RouteInfo, in dispatch order.

        Child routers are expanded in place, labelled with their host rule.
        """
        routes: List[RouteInfo] = []

        for pattern, router in self._host_patterns:
            routes.extend(router.routes(f"~{pattern.pattern}"))
        for name, router in self._hosts.items():
            routes.extend(router.routes(name))

        for pattern, handler in self._path_patterns:
            routes.append(RouteInfo(host, "pattern", pattern.pattern, _describe(handler)))
        for prefix, handler in self._directories:
            routes.append(RouteInfo(host, "dir", prefix, _describe(handler)))
        for path, handler in self._paths.items():
            routes.append(RouteInfo(host, "path", path, _describe(handler)))

        routes.append(RouteInfo(host, "default", "*", _describe(self._default)))
        return routes

    def print_routes(self) -> None:
        """
        Print all registered rules (useful for debugging).

        Example output:
            Registered Routes:
            ------------------------------------------------------------
              *                    dir      /files/  MountedDirectory(...)
              *                    path     /robots.txt  StaticFile(...)
              *                    default  *        not_found
            ------------------------------------------------------------
        """
        print("\nRegistered Routes:")
        print("-" * 60)
        for route in self.routes():
            print(f"  {route.host:20} {route.kind:8} {route.rule}  {route.target}")
        print("-" * 60)
