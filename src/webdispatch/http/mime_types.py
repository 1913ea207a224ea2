"""
=============================================================================
CONTENT-TYPE TABLE
=============================================================================

Maps file extensions to the Content-Type header sent with static files.

The table is process-wide configuration data. It is populated once, when
this module is imported, and may be extended at startup with
register_content_type(). After the server starts serving it is only read.

=============================================================================
LOOKUP RULES
=============================================================================

    ┌────────────────────────────────────────────────────────────────────┐
    │                                                                     │
    │   "/srv/www/Report.PDF"                                            │
    │           │                                                         │
    │           ▼  Path.suffix, lowercased, leading "." removed           │
    │         "pdf"                                                       │
    │           │                                                         │
    │           ▼  CONTENT_TYPES lookup                                   │
    │   "application/pdf"                                                 │
    │                                                                     │
    │   Unknown or missing extension:                                     │
    │   "application/x-unknown-content-type"                              │
    │                                                                     │
    └────────────────────────────────────────────────────────────────────┘

Note that some of the values below (text/gif, text/jpeg, text/png) are
not the registered IANA types. They are kept as-is because existing
deployments and clients of this server rely on them.

=============================================================================
"""

from pathlib import Path
from typing import Dict, Iterable


# Returned for extensions that have no entry in the table
UNKNOWN_CONTENT_TYPE = "application/x-unknown-content-type"

# Extension (lowercase, without dot) → Content-Type
CONTENT_TYPES: Dict[str, str] = {}


def register_content_type(mime_type: str, extensions: Iterable[str]) -> None:
    """
    Register a Content-Type for one or more file extensions.

    Meant to be called while the application is being configured, before
    the server starts. Later registrations override earlier ones.

        register_content_type("text/xml", ["xml", "xsl"])

    Args:
        mime_type: Value for the Content-Type header.
        extensions: Extensions, with or without the leading dot.
    """
    for extension in extensions:
        CONTENT_TYPES[_normalize(extension)] = mime_type


def content_type(extension: str) -> str:
    """
    Get the Content-Type for a file extension.

    Matching is case-insensitive and a leading dot is ignored:

        >>> content_type("html")
        'text/html'
        >>> content_type(".HTM")
        'text/html'
        >>> content_type("xyz")
        'application/x-unknown-content-type'
    """
    return CONTENT_TYPES.get(_normalize(extension), UNKNOWN_CONTENT_TYPE)


def content_type_for(path: str | Path) -> str:
    """
    Get the Content-Type for a file path, based on its extension.

        >>> content_type_for("/var/www/index.html")
        'text/html'
    """
    return content_type(Path(path).suffix)


def _normalize(extension: str) -> str:
    return extension.lower().lstrip(".")


# =============================================================================
# DEFAULT TABLE
# =============================================================================

register_content_type("text/html", ["html", "htm", "xhtml"])
register_content_type("text/css", ["css"])
register_content_type("text/gif", ["gif"])
register_content_type("text/jpeg", ["jpeg", "jpg"])
register_content_type("text/png", ["png"])
register_content_type("image/x-icon", ["ico"])
register_content_type("text/javascript", ["js"])
register_content_type("text/xml", ["xml", "xsl"])
register_content_type("application/rss+xml", ["rss"])
register_content_type("application/rdf+xml", ["rdf"])
register_content_type("application/pdf", ["pdf"])
register_content_type("application/doc", ["doc"])
register_content_type("application/zip", ["zip"])
register_content_type(
    "text/plain",
    ["txt", "conf", "rb", "py", "h", "c", "hh", "cc", "hpp", "cpp"],
)
