"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The status codes the dispatch layer itself produces.

Handlers are free to return any integer status; the hosting adapter
passes it through untouched. This enum only names the codes that the
router, the static file handlers and the server adapter emit on their own:

    ┌────────┬──────────────────────────────────────────────────────────┐
    │  200   │ A static file was found and is being streamed            │
    │  403   │ Explicitly forbidden responses (user handlers)           │
    │  404   │ No rule matched, or a static file is missing/unreadable  │
    │  500   │ A handler raised, or a file failed to open               │
    └────────┴──────────────────────────────────────────────────────────┘

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    IntEnum members compare equal to plain integers, so a response built
    by the core can be checked against either form:

        >>> HTTPStatus.NOT_FOUND == 404
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200

    FORBIDDEN = 403
    NOT_FOUND = 404

    INTERNAL_SERVER_ERROR = 500

    @property
    def phrase(self) -> str:
        """Reason phrase used in the status line (``HTTP/1.1 404 Not Found``)."""
        return _STATUS_PHRASES.get(self, "Unknown")


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.FORBIDDEN: "Forbidden",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
}
