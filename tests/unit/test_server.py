"""
Unit tests for HTTPServer request handling (no sockets).
"""

import pytest

from microserve import HTTPServer, ServerConfig
from microserve.http import HTTPStatus


@pytest.fixture
def server(config: ServerConfig) -> HTTPServer:
    server = HTTPServer(config)
    server.load_handlers()
    return server


def get(server: HTTPServer, target: str):
    return server.handle_request(f"GET {target} HTTP/1.1\r\nHost: localhost\r\n\r\n".encode())


class TestHandleRequest:
    """Tests for HTTPServer.handle_request()."""

    def test_app_route(self, server: HTTPServer):
        """GET /app/greeting?name=Ana → 200 application/json Hola Ana."""
        response = get(server, "/app/greeting?name=Ana")

        assert response.status == HTTPStatus.OK
        assert response.content_type == "application/json"
        assert response.text == "Hola Ana"

    def test_app_route_defaults(self, server: HTTPServer):
        """GET /app/hello with no query uses every default."""
        assert get(server, "/app/hello").text == "Hola hola World, tienes 0 años"

    def test_app_route_partial(self, server: HTTPServer):
        """GET /app/hello?age=31 mixes a value with a default."""
        assert get(server, "/app/hello?age=31").text == "Hola hola World, tienes 31 años"

    def test_app_route_encoded_query(self, server: HTTPServer):
        """Query values are URL-decoded before binding."""
        assert get(server, "/app/greeting?name=Jos%C3%A9").text == "Hola José"

    def test_app_route_empty_value(self, server: HTTPServer):
        """An empty query value counts as absent."""
        assert get(server, "/app/greeting?name=").text == "Hola World"

    def test_unknown_app_route(self, server: HTTPServer):
        """An unregistered app path is a 404."""
        response = get(server, "/app/unknown")

        assert response.status == HTTPStatus.NOT_FOUND
        assert response.text == "404 Not Found"

    def test_index(self, server: HTTPServer):
        """GET / serves index.html."""
        response = get(server, "/")

        assert response.status == HTTPStatus.OK
        assert response.content_type == "text/html; charset=utf-8"
        assert "Inicio" in response.text

    def test_image(self, server: HTTPServer):
        """Test an image from the images directory."""
        response = get(server, "/logo.png")

        assert response.status == HTTPStatus.OK
        assert response.content_type == "image/png"

    def test_unclassified_path(self, server: HTTPServer):
        """A path no kind matches is a 404."""
        assert get(server, "/unknown").status == HTTPStatus.NOT_FOUND

    def test_non_get(self, server: HTTPServer, sample_post_request: bytes):
        """Methods other than GET are answered with 405."""
        response = server.handle_request(sample_post_request)

        assert response.status == HTTPStatus.METHOD_NOT_ALLOWED
        assert response.headers["Allow"] == "GET"

    def test_malformed_request(self, server: HTTPServer):
        """An unparseable request line is answered with 400."""
        response = server.handle_request(b"garbage\r\n\r\n")

        assert response.status == HTTPStatus.BAD_REQUEST
        assert response.text == "400 Bad Request"

    def test_traversal_request(self, server: HTTPServer):
        """Test .. in the path."""
        assert server.handle_request(b"GET /../x.html HTTP/1.1\r\n\r\n").status == HTTPStatus.BAD_REQUEST

    def test_unexpected_error_answers_500(self, server: HTTPServer, monkeypatch):
        """An error outside any handler still produces a response."""
        def broken(path, kind):
            raise OSError("disk on fire")

        monkeypatch.setattr(server.static, "serve", broken)

        assert get(server, "/").status == HTTPStatus.INTERNAL_SERVER_ERROR


class TestLoadHandlers:
    """Tests for HTTPServer.load_handlers()."""

    def test_explicit_target(self, config: ServerConfig):
        """Loading one module registers only its routes."""
        server = HTTPServer(config)

        assert server.load_handlers("microserve.controllers.calculate") == 2
        assert get(server, "/app/greeting").status == HTTPStatus.NOT_FOUND

    def test_target_from_config(self, config: ServerConfig):
        """config.handler_target is used when no target is given."""
        config.handler_target = "microserve.controllers.greeting"
        server = HTTPServer(config)

        assert server.load_handlers() == 4

    def test_unloadable_target(self, config: ServerConfig):
        """An unknown target leaves an empty table, no exception."""
        server = HTTPServer(config)

        assert server.load_handlers("mst_nothing_here") == 0
        assert get(server, "/app/greeting").status == HTTPStatus.NOT_FOUND

    def test_custom_prefix(self, config: ServerConfig):
        """Test serving app routes under another prefix."""
        config.app_prefix = "/api"
        server = HTTPServer(config)
        server.load_handlers()

        assert get(server, "/api/greeting?name=Ana").text == "Hola Ana"
        assert get(server, "/app/greeting").status == HTTPStatus.NOT_FOUND

    def test_invalid_config_rejected(self):
        """The server refuses an invalid configuration."""
        with pytest.raises(ValueError):
            HTTPServer(ServerConfig(port=0))

    def test_provision_static(self, config: ServerConfig, static_root, tmp_path):
        """Assets are copied into the static directory."""
        config.static_dir = str(tmp_path / "served")
        server = HTTPServer(config)

        assert server.provision_static(str(static_root)) == 7
        assert get(server, "/styles.css").status == HTTPStatus.OK
