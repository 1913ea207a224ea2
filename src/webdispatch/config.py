"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Settings for the HTTP hosting adapter. Routing itself needs no
configuration; these values only matter once a Router is served.

Configuration is an explicit value passed to the server. There are no
module-level settings to mutate:

    config = ServerConfig(port=9000)
    serve(router, config)

    # or from the environment
    serve(router, ServerConfig.from_env())

=============================================================================
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from . import __version__


DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ServerConfig:
    """
    Server configuration.

    Examples:
        Development:
            ServerConfig(host="127.0.0.1", log_level="DEBUG")

        Tests (any free port):
            ServerConfig(host="127.0.0.1", port=0)
    """

    host: str = DEFAULT_HOST
    """
    The IP address to bind to.
    - "127.0.0.1" - Localhost only
    - "0.0.0.0" - All network interfaces
    """

    port: int = DEFAULT_PORT
    """
    The port number to listen on. 0 lets the OS pick a free port; the
    bound port is then available from HTTPServer.address.
    """

    backlog: int = 128
    """Maximum number of queued connections."""

    timeout: Optional[float] = 30.0
    """
    Per-connection socket timeout in seconds.
    None = blocking (a stalled client holds its thread forever)
    """

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    server_name: str = f"webdispatch/{__version__}"
    """Value of the Server response header."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        HTTP_HOST       Server host (default: 0.0.0.0)
        HTTP_PORT       Server port (default: 8080)
        HTTP_TIMEOUT    Socket timeout in seconds (default: 30)
        HTTP_LOG_LEVEL  Logging level (default: INFO)

        =====================================================================

        Raises:
            ValueError: If HTTP_PORT or HTTP_TIMEOUT is not a number.
        """
        return cls(
            host=os.getenv("HTTP_HOST", DEFAULT_HOST),
            port=int(os.getenv("HTTP_PORT", str(DEFAULT_PORT))),
            timeout=float(os.getenv("HTTP_TIMEOUT", "30")),
            log_level=os.getenv("HTTP_LOG_LEVEL", "INFO").upper(),
        )

    @property
    def level(self) -> int:
        """The log level as a logging module constant."""
        return getattr(logging, self.log_level.upper(), logging.INFO)

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ValueError: On the first invalid value.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: {self.log_level!r}. "
                f"Must be one of {', '.join(LOG_LEVELS)}."
            )
