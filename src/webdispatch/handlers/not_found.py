"""
Built-in 404 handler.

Every Router falls back to this handler until default() replaces it, and
the static file handlers use it when a file is missing. The requested path
is echoed back in the page, HTML-escaped so a path such as
``/<script>alert(1)</script>`` is rendered as text instead of markup.

The handler keeps no state: the same request always produces the same
bytes.
"""

from html import escape

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, html
from ..http.status_codes import HTTPStatus


NOT_FOUND_PAGE = """
<!DOCTYPE HTML PUBLIC "-//IETF//DTD HTML 2.0//EN">
<html>
  <head>
    <title>404 Not Found</title>
  <body>
    <h1>Not Found</h1>
    <p>The requested URL {path} was not found on this server.</p>
    <hr>
  </body>
</html>"""


def not_found(request: HTTPRequest) -> HTTPResponse:
    """Return the 404 Not Found page for the requested path."""
    return html(
        NOT_FOUND_PAGE.format(path=escape(request.path or "")),
        status=HTTPStatus.NOT_FOUND,
    )
