"""
=============================================================================
STATIC FILE HANDLERS
=============================================================================

Serve files from the local filesystem. These are the handlers behind
Router.file() and Router.mount():

    router.file("/robots.txt", "/etc/www/robots.txt")   → StaticFile
    router.mount("/files/", "/srv/data")                → MountedDirectory

Both resolve their filesystem paths to absolute paths once, when the route
is registered. Whether the file actually exists is checked per request, so
files may appear and disappear while the server runs.

=============================================================================
FAILURE HANDLING
=============================================================================

Static serving never raises into the router. Every filesystem problem is
turned into a response:

    ┌─────────────────────────────────────────┬──────────────────────────┐
    │ Condition                               │ Response                 │
    ├─────────────────────────────────────────┼──────────────────────────┤
    │ Path does not exist / is a directory    │ 404 Not Found            │
    │ File vanished between check and open    │ 404 Not Found            │
    │ Permission denied                       │ 404 Not Found (logged)   │
    │ Any other OSError                       │ 500 (logged)             │
    │ Mounted path escapes the mount root     │ 404 Not Found (logged)   │
    └─────────────────────────────────────────┴──────────────────────────┘

=============================================================================
SECURITY: PATH TRAVERSAL
=============================================================================

A mounted directory strips its URL prefix from the request path and joins
the rest onto the root directory. A request like

    GET /files/../../etc/passwd

would otherwise escape the root. After joining we resolve the path
(following ".." and symlinks) and require it to still be inside root_dir:

    full_path = (root_dir / rest).resolve()
    full_path.relative_to(root_dir)  # Raises if outside root!

Escaping paths are answered exactly like missing files.

=============================================================================
"""

import logging
from pathlib import Path
from typing import Optional

from ..http.mime_types import content_type_for
from ..http.request import HTTPRequest
from ..http.response import FileBody, HTTPResponse, internal_error
from ..http.status_codes import HTTPStatus
from .not_found import not_found


logger = logging.getLogger(__name__)


def serve_file(
    path: str | Path,
    request: HTTPRequest,
    content_type: Optional[str] = None,
) -> HTTPResponse:
    """
    Serve a single file as a streamed 200 response.

    Args:
        path: Absolute filesystem path of the file.
        request: The request being answered (used for the 404 page).
        content_type: Overrides the extension-based Content-Type.

    Returns:
        200 with a FileBody, 404 if the file is missing or unreadable,
        500 for any other I/O failure.
    """
    path = Path(path)
    if not path.is_file():
        return not_found(request)

    try:
        body = FileBody(path)
    except (FileNotFoundError, IsADirectoryError):
        return not_found(request)
    except PermissionError:
        logger.warning(f"Permission denied reading {path}")
        return not_found(request)
    except OSError as e:
        logger.error(f"Error opening {path}: {e}")
        return internal_error("Failed to read file")

    return HTTPResponse(
        HTTPStatus.OK,
        {
            "Content-Type": content_type or content_type_for(path),
            "Content-Length": str(body.size),
        },
        body,
    )


class StaticFile:
    """
    Handler that serves one file, whatever the request path.

    The path is made absolute when the handler is created, so later
    changes of the working directory do not affect it.
    """

    def __init__(self, file_path: str | Path, content_type: Optional[str] = None):
        self.file_path = Path(file_path).expanduser().resolve()
        self.content_type = content_type

    def __call__(self, request: HTTPRequest) -> HTTPResponse:
        return serve_file(self.file_path, request, self.content_type)

    def __repr__(self) -> str:
        return f"StaticFile({str(self.file_path)!r})"


class MountedDirectory:
    """
    Handler that maps a URL prefix onto a directory.

        handler = MountedDirectory("/files/", "/srv/data")
        # GET /files/report.pdf       → /srv/data/report.pdf
        # GET /files/2024/q1/sum.txt  → /srv/data/2024/q1/sum.txt
        # GET /files/../secret        → 404 (outside /srv/data)

    The root directory does not need to exist yet; requests made while it
    is missing simply get 404.
    """

    def __init__(self, url_prefix: str, root_dir: str | Path):
        self.url_prefix = url_prefix if url_prefix.endswith("/") else url_prefix + "/"
        self.root_dir = Path(root_dir).expanduser().resolve()

    def resolve(self, request_path: str) -> Optional[Path]:
        """
        Map a request path to a filesystem path inside root_dir.

        Returns:
            The resolved absolute path, or None if the request path does
            not start with the prefix or the result escapes root_dir.
        """
        # "/files" itself maps to the root directory
        if request_path + "/" == self.url_prefix:
            request_path = self.url_prefix

        if not request_path.startswith(self.url_prefix):
            return None

        rest = request_path[len(self.url_prefix):].lstrip("/")

        try:
            full_path = (self.root_dir / rest).resolve()
        except (OSError, RuntimeError, ValueError) as e:
            # Symlink loops, embedded NUL bytes, ...
            logger.warning(f"Cannot resolve {request_path!r}: {e}")
            return None

        try:
            full_path.relative_to(self.root_dir)
        except ValueError:
            logger.warning(f"Path traversal attempt: {request_path}")
            return None

        return full_path

    def __call__(self, request: HTTPRequest) -> HTTPResponse:
        full_path = self.resolve(request.path or "")
        if full_path is None:
            return not_found(request)
        return serve_file(full_path, request)

    def __repr__(self) -> str:
        return f"MountedDirectory({self.url_prefix!r}, {str(self.root_dir)!r})"
