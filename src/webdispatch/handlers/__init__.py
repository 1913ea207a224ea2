"""
Built-in handlers.

    not_found         The default 404 page of every Router
    StaticFile        One file at one URL (Router.file)
    MountedDirectory  A directory under a URL prefix (Router.mount)
    serve_file        The shared "stream this file or 404" helper
"""

from .not_found import not_found
from .static import StaticFile, MountedDirectory, serve_file

__all__ = [
    "not_found",
    "StaticFile",
    "MountedDirectory",
    "serve_file",
]
