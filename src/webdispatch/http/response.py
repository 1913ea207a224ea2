"""
=============================================================================
NORMALIZED HTTP RESPONSE
=============================================================================

The value every handler returns: a status code, an ordered set of headers
and a body.

=============================================================================
RESPONSE SHAPE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   HTTPResponse(                                                      │
    │       status=404,                          ← int / HTTPStatus        │
    │       headers={"Content-Type": "text/html"},   ← insertion ordered   │
    │       body=b"<html>...",                   ← bytes, or               │
    │   )                                          an iterable of bytes    │
    │                                              (FileBody for files)    │
    │                                                                      │
    │   status, headers, body = response         ← unpacks like a tuple    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

User callbacks may return either an HTTPResponse or a plain
(status, headers, body) tuple. The hosting server normalizes both with
HTTPResponse.coerce() before writing anything to the socket.

=============================================================================
STREAMED BODIES
=============================================================================

Static files are not read into memory. FileBody opens the file when the
response is built (so "missing" and "unreadable" are known up front) and
yields fixed-size chunks while the server writes them out. The file handle
is closed when iteration ends, when iteration fails, or when close() is
called, whichever comes first. Servers MUST call response.close() once
they are done with a response.

=============================================================================
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, Optional, Union

from .status_codes import HTTPStatus


# A response body: in-memory bytes or a lazy stream of byte chunks
Body = Union[bytes, Iterable[bytes]]


class FileBody:
    """
    Lazily streams the contents of a file.

    The file is opened in the constructor; OSError (FileNotFoundError,
    PermissionError, ...) propagates from there so callers can turn it into
    an error response before any bytes are sent.

        body = FileBody("/srv/data/report.pdf")
        body.size     # 48213
        for chunk in body:
            sock.sendall(chunk)
        # file is closed here

    A FileBody can be iterated once.
    """

    chunk_size = 64 * 1024

    def __init__(self, path: str | Path, chunk_size: Optional[int] = None):
        self.path = Path(path)
        if chunk_size:
            self.chunk_size = chunk_size

        self._file = open(self.path, "rb")
        try:
            self.size = os.fstat(self._file.fileno()).st_size
        except OSError:
            self._file.close()
            raise

    @property
    def closed(self) -> bool:
        return self._file.closed

    def __iter__(self) -> Iterator[bytes]:
        if self.closed:
            return
        try:
            while True:
                chunk = self._file.read(self.chunk_size)
                if not chunk:
                    break
                yield chunk
        finally:
            self.close()

    def close(self) -> None:
        """Release the file handle. Safe to call more than once."""
        if not self._file.closed:
            self._file.close()

    def __enter__(self) -> "FileBody":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<FileBody {str(self.path)!r} {self.size} bytes ({state})>"


@dataclass
class HTTPResponse:
    """
    Represents an HTTP response produced by a handler.

    This is a plain data container. It knows nothing about sockets; the
    hosting server decides how to frame and send it.
    """

    status: int = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: Body = b""

    def __post_init__(self):
        if isinstance(self.body, str):
            self.body = self.body.encode("utf-8")

    @classmethod
    def coerce(cls, value: Any) -> "HTTPResponse":
        """
        Normalize a handler's return value.

        Accepts an HTTPResponse (returned unchanged) or a
        (status, headers, body) tuple, where body may be str, bytes or an
        iterable of bytes.

        Raises:
            TypeError: If the value has any other shape.
        """
        if isinstance(value, cls):
            return value

        if isinstance(value, tuple) and len(value) == 3:
            status, headers, body = value
            return cls(status=int(status), headers=dict(headers), body=body)

        raise TypeError(
            f"Handler returned {type(value).__name__}; expected HTTPResponse "
            f"or a (status, headers, body) tuple"
        )

    def __iter__(self):
        return iter((self.status, self.headers, self.body))

    @property
    def is_streamed(self) -> bool:
        return not isinstance(self.body, (bytes, bytearray))

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        """
        Set a response header.

        Returns self for method chaining:
            response.set_header("X-One", "1").set_header("X-Two", "2")
        """
        self.headers[name] = value
        return self

    def iter_body(self) -> Iterator[bytes]:
        """Yield the body as a sequence of byte chunks."""
        if not self.is_streamed:
            if self.body:
                yield bytes(self.body)
            return

        for chunk in self.body:
            yield chunk.encode("utf-8") if isinstance(chunk, str) else chunk

    def read_body(self) -> bytes:
        """Drain the whole body into memory and release it."""
        try:
            return b"".join(self.iter_body())
        finally:
            self.close()

    def close(self) -> None:
        """Close a streamed body, if it can be closed."""
        close = getattr(self.body, "close", None)
        if callable(close):
            close()


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def ok(body: Union[str, bytes] = "", content_type: str = "text/plain; charset=utf-8") -> HTTPResponse:
    """Create a 200 OK response."""
    return HTTPResponse(HTTPStatus.OK, {"Content-Type": content_type}, body)


def html(body: str, status: int = HTTPStatus.OK) -> HTTPResponse:
    """Create an HTML response with the given status."""
    return HTTPResponse(status, {"Content-Type": "text/html"}, body)


def forbidden(message: str = "Forbidden") -> HTTPResponse:
    """Create a 403 Forbidden response."""
    return HTTPResponse(
        HTTPStatus.FORBIDDEN,
        {"Content-Type": "text/plain; charset=utf-8"},
        message,
    )


def internal_error(message: str = "Internal Server Error") -> HTTPResponse:
    """Create a 500 Internal Server Error response."""
    return HTTPResponse(
        HTTPStatus.INTERNAL_SERVER_ERROR,
        {"Content-Type": "text/plain; charset=utf-8"},
        message,
    )
