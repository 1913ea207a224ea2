"""
=============================================================================
NORMALIZED HTTP REQUEST
=============================================================================

The request object every handler in this package receives.

Parsing bytes off the wire is the hosting server's job (see server.py).
By the time a request reaches the router it has been normalized into an
HTTPRequest with only the fields the dispatch layer needs:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     WHAT THE ROUTER LOOKS AT                        │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   GET /files/report.pdf?dl=1 HTTP/1.1                               │
    │   Host: docs.example.com                                             │
    │        │                                                             │
    │        ├── request.host        "docs.example.com"  (host rules)      │
    │        ├── request.path        "/files/report.pdf" (path rules)      │
    │        └── request.client_ip   "10.1.2.3"          (IPFilter)        │
    │                                                                      │
    │   Everything else (method, query, body, environ) is carried along    │
    │   for the handlers and never inspected by the dispatch core.         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Both `host` and `path` may be absent. A request without a Host header
skips host rules entirely; a request without a path skips path rules and
goes straight to the default handler.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Mapping
from urllib.parse import parse_qs, urlsplit, unquote


@dataclass
class HTTPRequest:
    """
    Represents a normalized HTTP request.

    =========================================================================
    ATTRIBUTES
    =========================================================================

        method:         The HTTP method (GET, POST, ...). Passed through,
                        the router does not dispatch on it.

        path:           URL-decoded path WITHOUT query string, or None.
                        "/api/users" not "/api/users?page=1"

        headers:        Dictionary of headers with LOWERCASE keys.

        query_params:   Parsed query string as dict of lists
                        "?a=1&a=2&b=3" → {"a": ["1", "2"], "b": ["3"]}

        body:           Raw request body as bytes.

        client_address: Tuple of (ip, port) identifying the client.

        environ:        Extra protocol fields supplied by the hosting
                        server. Opaque to the dispatch core.

    =========================================================================
    """

    method: str = "GET"
    path: Optional[str] = "/"
    headers: Dict[str, str] = field(default_factory=dict)
    query_params: Dict[str, list[str]] = field(default_factory=dict)
    body: bytes = b""
    client_address: tuple[str, int] = ("", 0)
    environ: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # Header lookups (host, get_header) rely on lowercase names
        self.headers = {name.lower(): value for name, value in self.headers.items()}

    @classmethod
    def from_target(
        cls,
        method: str,
        target: str,
        headers: Optional[Mapping[str, str]] = None,
        body: bytes = b"",
        client_address: tuple[str, int] = ("", 0),
        **environ: Any,
    ) -> "HTTPRequest":
        """
        Build a request from a raw request-target.

        The target is the second token of the request line. It is split
        into path and query, and the path is URL-decoded:

            HTTPRequest.from_target("GET", "/a%20b?x=1")
            # path="/a b", query_params={"x": ["1"]}

        Header names are lowercased. Repeated headers are expected to be
        joined by the caller.

        Args:
            method: HTTP method.
            target: Request-target, e.g. "/users?page=2".
            headers: Header mapping (any case).
            body: Request body bytes.
            client_address: (ip, port) of the client.
            **environ: Extra passthrough fields.
        """
        target = target.split("#", 1)[0]
        if target.startswith("/") or target.startswith("?") or not target:
            # origin-form: "//x" is a path here, not a network location
            raw_path, _, query = target.partition("?")
        else:
            # absolute-form: "http://host/path?query"
            parts = urlsplit(target)
            raw_path, query = parts.path, parts.query

        return cls(
            method=method.upper(),
            path=unquote(raw_path) or "/",
            headers=dict(headers or {}),
            query_params=parse_qs(query, keep_blank_values=True),
            body=body,
            client_address=client_address,
            environ=dict(environ),
        )

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def host(self) -> Optional[str]:
        """
        The Host header, or None when the client did not send one.

        The value is used verbatim, port included ("localhost:8080"), so
        exact host rules must be registered the way clients send them.
        """
        return self.headers.get("host") or None

    @property
    def client_ip(self) -> str:
        """The client's IP address as a string ("" if unknown)."""
        return self.client_address[0]

    @property
    def user_agent(self) -> str:
        return self.headers.get("user-agent", "")

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    def get_header(self, name: str, default: str = "") -> str:
        """Get a header value (case-insensitive lookup)."""
        return self.headers.get(name.lower(), default)

    def get_query(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """
        Get the first value of a query parameter.

        Example:
            # URL: /search?q=one&q=two
            request.get_query("q")  # Returns "one"
        """
        values = self.query_params.get(name, [])
        return values[0] if values else default
