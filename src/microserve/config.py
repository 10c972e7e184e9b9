"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

All runtime settings in one dataclass, so a server can be built from code,
from environment variables, or from the command line (see __main__.py).

    ┌───────────────┬──────────────────────────┬──────────────────────────┐
    │ setting       │ default                  │ env var                  │
    ├───────────────┼──────────────────────────┼──────────────────────────┤
    │ host          │ 127.0.0.1                │ HTTP_HOST                │
    │ port          │ 35000                    │ HTTP_PORT                │
    │ static_dir    │ public                   │ HTTP_STATIC_DIR          │
    │ app_prefix    │ /app                     │ HTTP_APP_PREFIX          │
    │ handler_target│ None (scan handler_root) │ HTTP_HANDLERS            │
    │ log_level     │ INFO                     │ HTTP_LOG_LEVEL           │
    └───────────────┴──────────────────────────┴──────────────────────────┘

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass
class ServerConfig:
    """
    Configuration for the microserve runtime.

    Development:
        ServerConfig(port=8080, log_level="DEBUG")

    One controller module only:
        ServerConfig(handler_target="shop.controllers.cart")
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    port: int = 35000
    backlog: int = 50

    buffer_size: int = 8192
    """Bytes read per recv() call."""

    timeout: Optional[float] = 30.0
    """Per-connection socket timeout in seconds. None blocks forever."""

    max_request_size: int = 1024 * 1024
    """Largest request head accepted before answering 413."""

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT
    # ─────────────────────────────────────────────────────────────────────

    static_dir: str = "public"
    """Directory static assets are served from."""

    app_prefix: str = "/app"
    """Requests under this prefix go to the dispatcher, not the disk."""

    # ─────────────────────────────────────────────────────────────────────
    # DISCOVERY
    # ─────────────────────────────────────────────────────────────────────

    handler_root: str = "microserve.controllers"
    """Package scanned when no explicit target is given."""

    handler_target: Optional[str] = None
    """Module or "module.Class" to load instead of scanning handler_root."""

    search_paths: Tuple[str, ...] = ()
    """Extra directories or .zip archives scanned for controllers."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING / IDENTITY
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    server_name: str = "MicroServe/1.0"

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

            HTTP_PORT=8080 HTTP_HANDLERS=shop.controllers python -m microserve
        """
        return cls(
            host=os.getenv("HTTP_HOST", "127.0.0.1"),
            port=int(os.getenv("HTTP_PORT", "35000")),
            static_dir=os.getenv("HTTP_STATIC_DIR", "public"),
            app_prefix=os.getenv("HTTP_APP_PREFIX", "/app"),
            handler_target=os.getenv("HTTP_HANDLERS") or None,
            log_level=os.getenv("HTTP_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """Fail fast on values the server cannot start with."""
        if not 0 < self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 1-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 1024:
            raise ValueError("buffer_size must be >= 1024")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if not self.app_prefix.startswith("/") or self.app_prefix == "/":
            raise ValueError(f"app_prefix must start with '/' and name a namespace: {self.app_prefix!r}")

        if self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {self.log_level}")
