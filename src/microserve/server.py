"""
=============================================================================
MICROSERVE HTTP SERVER
=============================================================================

Ties the pieces together:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        REQUEST LIFECYCLE                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   SocketServer.accept()                                              │
    │        │                                                             │
    │        ▼                                                             │
    │   Connection.read_request()        raw bytes                         │
    │        │                                                             │
    │        ▼                                                             │
    │   RequestParser.parse()            HTTPRequest (or 400 / 413)        │
    │        │                                                             │
    │        ▼                                                             │
    │   method != GET?  ──────────────►  405                               │
    │        │                                                             │
    │        ▼                                                             │
    │   classify(path)                                                     │
    │        ├── HTML / CSS / JS / IMAGE ──► StaticFileHandler             │
    │        ├── APP  ─────────────────────► Dispatcher                    │
    │        └── NOT_FOUND ────────────────► 404                           │
    │        │                                                             │
    │        ▼                                                             │
    │   Connection.send_response()  then close                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Handlers are discovered once, before the first connection is accepted.
One connection is served at a time.

=============================================================================
"""

import logging
from pathlib import Path
from typing import Optional, Tuple

from .config import ServerConfig
from .core import Connection, SocketServer
from .handlers import StaticFileHandler, copy_static_files
from .http import (
    HTTPParseError, HTTPRequest, HTTPResponse, HTTPStatus,
    RequestParser, ResponseBuilder, RouteKind,
    classify, internal_error, method_not_allowed, not_found,
)
from .routing import Discoverer, Dispatcher, HandlerRegistry


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    The microserve runtime.

    =========================================================================
    USAGE
    =========================================================================

        server = HTTPServer(ServerConfig(port=35000, static_dir="public"))
        server.run()      # discovers microserve.controllers, then serves

        # One module only
        server = HTTPServer(ServerConfig(handler_target="shop.controllers"))

        # Without a socket (tests, embedding)
        server.load_handlers()
        response = server.handle_request(b"GET /app/greeting?name=Ana HTTP/1.1\\r\\n\\r\\n")

    =========================================================================
    """

    def __init__(self, config: Optional[ServerConfig] = None, registry: Optional[HandlerRegistry] = None):
        """
        Args:
            config: Server configuration. Defaults are used if not provided.
            registry: Route table to serve from. A fresh one if not provided.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self.registry = registry if registry is not None else HandlerRegistry()
        self.discoverer = Discoverer(
            self.registry,
            root=self.config.handler_root,
            search_paths=self.config.search_paths,
        )
        self.dispatcher = Dispatcher(self.registry, app_prefix=self.config.app_prefix)
        self.static = StaticFileHandler(self.config.static_dir)

        self._parser = RequestParser(max_request_size=self.config.max_request_size)
        self._socket_server = SocketServer(self.config)
        self._handlers_loaded = False
        self._running = False

    # =========================================================================
    # SETUP
    # =========================================================================

    def load_handlers(self, target: Optional[str] = None) -> int:
        """
        Rebuild the route table.

        Args:
            target: Module or "module.Class" to load. Falls back to
                    config.handler_target, then to scanning config.handler_root.

        Returns:
            Number of routes registered.
        """
        count = self.discoverer.load(target or self.config.handler_target)
        self._handlers_loaded = True
        return count

    def provision_static(self, source_dir: str) -> int:
        """Copy an asset tree into the static directory."""
        Path(self.config.static_dir).mkdir(parents=True, exist_ok=True)
        return copy_static_files(source_dir, self.config.static_dir)

    @property
    def address(self) -> Tuple[str, int]:
        return self._socket_server.address

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """Answer a parsed request."""
        if request.method != "GET":
            return method_not_allowed(["GET"])

        kind = classify(request.path, self.config.app_prefix)

        if kind is RouteKind.APP:
            return self.dispatcher.dispatch(request.path, request.query_params)
        if kind.is_static:
            return self.static.serve(request.path, kind)
        return not_found()

    def handle_request(self, raw: bytes, client_address: Tuple[str, int] = ("", 0)) -> HTTPResponse:
        """
        Answer raw request bytes. Always returns a response.

        Parse failures are answered with their status code, anything else
        that goes wrong with 500.
        """
        try:
            request = self._parser.parse(raw, client_address)
        except HTTPParseError as e:
            logger.info(f"Rejected request from {client_address[0] or '-'}: {e}")
            return self._error_response(HTTPStatus(e.status_code))

        try:
            response = self.handle(request)
        except Exception as e:
            logger.exception(f"Unhandled error for {request.method} {request.path}: {e}")
            response = internal_error()

        logger.info(f"{request.method} {request.path} → {int(response.status)}")
        return response

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def run(self, host: Optional[str] = None, port: Optional[int] = None):
        """
        Discover handlers (unless already loaded) and serve until stopped.

        Args:
            host: Override config host.
            port: Override config port.
        """
        if host:
            self.config.host = host
        if port:
            self.config.port = port

        self._setup_logging()

        if not self._handlers_loaded:
            self.load_handlers()

        self._running = True
        logger.info(f"Starting HTTP server on {self.config.host}:{self.config.port}")
        self._print_startup_banner()

        try:
            self._socket_server.start(self._process_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._running = False
            logger.info("Server stopped")

    def stop(self):
        """Stop accepting connections; run() returns shortly after."""
        self._socket_server.shutdown()

    def _print_startup_banner(self):
        print()
        print("╔══════════════════════════════════════════════════════════════╗")
        print(f"║  🚀 {self.config.server_name} running")
        print(f"║  📍 http://{self.config.host}:{self.config.port}")
        print(f"║  📁 Static files: {self.config.static_dir}")
        print(f"║  🔀 App routes under: {self.config.app_prefix}")
        print("║  Press Ctrl+C to stop")
        print("╚══════════════════════════════════════════════════════════════╝")
        self.registry.print_routes()

    def _setup_logging(self):
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)
        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("microserve").setLevel(level)

    def _process_connection(self, conn: Connection):
        """Read one request, answer it, close the connection."""
        with conn:
            try:
                raw = conn.read_request()
                if raw is None:
                    return
                response = self.handle_request(raw, conn.address)
            except TimeoutError:
                response = self._error_response(HTTPStatus.REQUEST_TIMEOUT)
            except ValueError as e:
                logger.warning(f"[{conn.id}] {e}")
                response = self._error_response(HTTPStatus.PAYLOAD_TOO_LARGE)
            except Exception as e:
                logger.exception(f"[{conn.id}] Connection error: {e}")
                response = internal_error()

            conn.send_response(response.to_bytes(self.config.server_name))

    @staticmethod
    def _error_response(status: HTTPStatus) -> HTTPResponse:
        return (ResponseBuilder()
            .status(status)
            .text(f"{int(status)} {status.phrase}")
            .close_connection()
            .build())
