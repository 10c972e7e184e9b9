"""
pytest configuration and fixtures.
"""

import socket
import threading
import time
from typing import Generator
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from microserve import HTTPServer, ServerConfig
from microserve.routing import HandlerDescriptor, HandlerRegistry, ParameterBinding, make_invoker


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample app request with a query string."""
    return (
        b"GET /app/hello?name=Ana&age=31 HTTP/1.1\r\n"
        b"Host: localhost:35000\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: */*\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """A request with a method the server does not serve."""
    body = b"name=Ana"
    head = (
        "POST /app/greeting HTTP/1.1\r\n"
        "Host: localhost:35000\r\n"
        f"Content-Length: {len(body)}\r\n"
        "\r\n"
    )
    return head.encode() + body


@pytest.fixture
def static_root(tmp_path: Path) -> Path:
    """A small asset tree."""
    root = tmp_path / "public"
    (root / "images").mkdir(parents=True)
    (root / "css").mkdir()
    (root / "index.html").write_text("<html><body>Inicio</body></html>", encoding="utf-8")
    (root / "about.html").write_text("<html><body>Acerca</body></html>", encoding="utf-8")
    (root / "styles.css").write_text("body { color: red; }", encoding="utf-8")
    (root / "css" / "extra.css").write_text("p { margin: 0; }", encoding="utf-8")
    (root / "app.js").write_text("console.log('hola');", encoding="utf-8")
    (root / "images" / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\nfake")
    (root / "images" / "photo.jpg").write_bytes(b"\xff\xd8\xff\xe0fake")
    return root


@pytest.fixture
def registry() -> HandlerRegistry:
    """Registry holding the sample routes used across tests."""
    registry = HandlerRegistry()

    def greeting(name):
        return "Hola " + name

    def hello(name, age):
        return f"Hola hola {name}, tienes {age} años"

    registry.register("/greeting", HandlerDescriptor(
        path="/greeting",
        parameter_bindings=(ParameterBinding("name", "World"),),
        invoke=make_invoker(greeting),
        name="greeting",
    ))
    registry.register("/hello", HandlerDescriptor(
        path="/hello",
        parameter_bindings=(ParameterBinding("name", "World"), ParameterBinding("age", "0")),
        invoke=make_invoker(hello),
        name="hello",
    ))
    return registry


@pytest.fixture
def config(static_root: Path) -> ServerConfig:
    """Default test server configuration."""
    return ServerConfig(
        host="127.0.0.1",
        port=35000,
        timeout=5.0,
        static_dir=str(static_root),
        log_level="WARNING",
    )


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


class TestServer:
    """Test server helper that runs in a background thread."""

    def __init__(self, server: HTTPServer, port: int):
        self.server = server
        self.port = port
        self._thread: threading.Thread = None

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(
            target=self.server.run,
            kwargs={"port": self.port},
            daemon=True
        )
        self._thread.start()

        # Wait for server to be ready
        for _ in range(50):  # 5 seconds max
            try:
                with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
                    s.connect(('127.0.0.1', self.port))
                    return
            except ConnectionRefusedError:
                time.sleep(0.1)

        raise RuntimeError("Server failed to start")

    def request(self, raw: bytes) -> bytes:
        """Send raw bytes, read until the server closes the connection."""
        with socket.create_connection(('127.0.0.1', self.port), timeout=5.0) as s:
            s.sendall(raw)
            chunks = []
            while True:
                chunk = s.recv(4096)
                if not chunk:
                    break
                chunks.append(chunk)
        return b"".join(chunks)

    def get(self, target: str) -> bytes:
        return self.request(f"GET {target} HTTP/1.1\r\nHost: localhost\r\n\r\n".encode())

    def stop(self):
        """Stop the server."""
        self.server.stop()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)


@pytest.fixture
def test_server(free_port: int, static_root: Path) -> Generator[TestServer, None, None]:
    """A server with the sample controllers, listening on a free port."""
    server = HTTPServer(ServerConfig(
        host="127.0.0.1",
        port=free_port,
        timeout=5.0,
        static_dir=str(static_root),
        log_level="WARNING",
    ))
    server.load_handlers()

    test_srv = TestServer(server, free_port)
    test_srv.start()

    yield test_srv

    test_srv.stop()
