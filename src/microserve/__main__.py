"""
=============================================================================
MICROSERVE CLI ENTRY POINT
=============================================================================

    # Scan microserve.controllers, serve ./public on 127.0.0.1:35000
    python -m microserve

    # Load one controller module or class
    python -m microserve microserve.controllers.greeting
    python -m microserve shop.controllers.CartController

    # Also scan a directory and an archive of controllers
    python -m microserve --search-path ./handlers --search-path ./more.zip

    # Copy assets into the static directory before serving
    python -m microserve --static build/public --static-source assets/

Settings not given on the command line come from the HTTP_* environment
variables (see config.py), then from the built-in defaults.

=============================================================================
"""

import argparse
import sys
from typing import List, Optional

from . import __version__
from .config import ServerConfig
from .server import HTTPServer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="microserve",
        description="Annotation-driven micro web framework with a built-in HTTP server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m microserve                                  # Scan default controllers
  python -m microserve microserve.controllers.greeting  # One module
  python -m microserve --port 8080 --static ./public    # Custom port and assets
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # DISCOVERY ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "target",
        nargs="?",
        default=None,
        help="Controller module or module.Class to load (default: scan the deployment root)"
    )

    parser.add_argument(
        "--search-path",
        action="append",
        default=[],
        metavar="PATH",
        help="Extra directory or .zip archive to scan for controllers (repeatable)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument("--host", "-H", default=None, help="Host to bind to (default: 127.0.0.1)")
    parser.add_argument("--port", "-p", type=int, default=None, help="Port to listen on (default: 35000)")

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument("--static", "-s", default=None, help="Directory to serve static files from (default: public)")
    parser.add_argument("--static-source", default=None, help="Copy this asset tree into the static directory at startup")
    parser.add_argument("--prefix", default=None, help="URL prefix of app routes (default: /app)")

    # ─────────────────────────────────────────────────────────────────────
    # META ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)"
    )

    parser.add_argument("--version", "-v", action="version", version=f"microserve {__version__}")

    return parser


def build_config(args: argparse.Namespace) -> ServerConfig:
    """Environment-based config with command-line overrides applied."""
    config = ServerConfig.from_env()

    if args.host:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.static:
        config.static_dir = args.static
    if args.prefix:
        config.app_prefix = args.prefix
    if args.log_level:
        config.log_level = args.log_level
    if args.target:
        config.handler_target = args.target
    if args.search_path:
        config.search_paths = tuple(args.search_path)

    return config


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        server = HTTPServer(build_config(args))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.static_source:
        server.provision_static(args.static_source)

    try:
        server.run()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
