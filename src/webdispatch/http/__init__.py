"""
=============================================================================
HTTP LAYER
=============================================================================

The request/response model and the router built on top of it.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ request.py       HTTPRequest: host, path, client IP + passthrough   │
    │ response.py      HTTPResponse, FileBody and response helpers        │
    │ status_codes.py  HTTPStatus enum                                    │
    │ mime_types.py    Extension → Content-Type table                      │
    │ router.py        Router: host/path dispatch tree                     │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .request import HTTPRequest
from .response import (
    HTTPResponse,
    FileBody,
    ok,             # 200 OK
    html,           # HTML page with any status
    forbidden,      # 403 Forbidden
    internal_error, # 500 Internal Server Error
)
from .status_codes import HTTPStatus
from .mime_types import content_type, content_type_for, register_content_type
from .router import Router, RouteInfo, Handler

__all__ = [
    # Request / response
    "HTTPRequest",
    "HTTPResponse",
    "FileBody",

    # Response convenience functions
    "ok",
    "html",
    "forbidden",
    "internal_error",

    # Routing
    "Router",
    "RouteInfo",
    "Handler",

    # Status codes
    "HTTPStatus",

    # Content types
    "content_type",
    "content_type_for",
    "register_content_type",
]
