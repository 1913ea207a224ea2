"""
Command-line entry point: serve a directory.

    python -m webdispatch                         # serve "." on 0.0.0.0:8080
    python -m webdispatch ./public --port 3000
    python -m webdispatch ./public --allow 10.0.0.0/8 --allow ::1

Defaults for host, port and log level come from the HTTP_* environment
variables (see ServerConfig.from_env).
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from . import __version__
from .config import LOG_LEVELS, ServerConfig
from .http.response import forbidden
from .http.router import Router
from .middleware import IPFilter, LoggingMiddleware, MiddlewarePipeline
from .server import HTTPServer, configure_logging


logger = logging.getLogger(__name__)


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="webdispatch",
        description="Serve a directory over HTTP",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m webdispatch                          # Serve the current directory
  python -m webdispatch ./public --port 3000     # Custom port
  python -m webdispatch --host 127.0.0.1         # Localhost only
  python -m webdispatch --allow 192.168.0.0/16   # Only answer the LAN
        """,
    )

    parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory to serve at / (default: current directory)",
    )

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Host to bind to (default: {defaults.host})",
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})",
    )

    parser.add_argument(
        "--log-level", "-l",
        type=str.upper,
        choices=LOG_LEVELS,
        default=defaults.log_level.upper(),
        help=f"Logging level (default: {defaults.log_level})",
    )

    parser.add_argument(
        "--allow", "-a",
        action="append",
        metavar="RANGE",
        default=[],
        help="Only serve clients in this IP range; repeatable. Others get 403.",
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"webdispatch {__version__}",
    )

    return parser


def build_app(directory: str | Path, allow: Sequence[str] = ()):
    """
    Build the application the CLI serves: `directory` mounted at /, behind
    an optional allow-list and an access logger.

    Raises:
        ValueError: If an allow range is invalid.
    """
    router = Router(lambda r: r.mount("/", directory))

    pipeline = MiddlewarePipeline().use(LoggingMiddleware)
    if allow:
        pipeline.use(IPFilter, ips={ip_range: router for ip_range in allow})
        return pipeline.wrap(lambda request: forbidden())

    return pipeline.wrap(router)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Run the CLI.

    Returns:
        Process exit status.
    """
    try:
        defaults = ServerConfig.from_env()
    except ValueError as e:
        print(f"Error: invalid environment setting: {e}", file=sys.stderr)
        return 2

    args = build_parser(defaults).parse_args(argv)

    directory = Path(args.directory)
    if not directory.is_dir():
        print(f"Error: not a directory: {directory}", file=sys.stderr)
        return 2

    config = replace(defaults, host=args.host, port=args.port, log_level=args.log_level)
    configure_logging(config.level)

    try:
        app = build_app(directory, args.allow)
        server = HTTPServer(app, config)
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.info(f"Serving {directory.resolve()}")
    server.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
