"""
Unit tests for HTTP response building.
"""

from datetime import datetime, timezone

from microserve.http.response import (
    NOT_FOUND_TEXT,
    HTTPResponse,
    ResponseBuilder,
    HTTPStatus,
    ok,
    not_found,
    forbidden,
    bad_request,
    method_not_allowed,
    internal_error,
    format_http_date,
)


class TestHTTPResponse:
    """Tests for HTTPResponse class."""

    def test_status_line(self):
        """Test status line generation."""
        assert HTTPResponse(status=HTTPStatus.OK).status_line == "HTTP/1.1 200 OK"
        assert HTTPResponse(status=HTTPStatus.NOT_FOUND).status_line == "HTTP/1.1 404 Not Found"

    def test_to_bytes_includes_headers(self):
        """Test that to_bytes includes all headers."""
        response = HTTPResponse(
            status=HTTPStatus.OK,
            headers={"Content-Type": "application/json"},
            body=b"Hola Ana",
        )

        result = response.to_bytes()

        assert result.startswith(b"HTTP/1.1 200 OK\r\n")
        assert b"Content-Type: application/json\r\n" in result
        assert b"Content-Length: 8\r\n" in result
        assert result.endswith(b"\r\n\r\nHola Ana")

    def test_to_bytes_always_closes(self):
        """Every serialized response carries Connection: close."""
        result = HTTPResponse(body=b"x").to_bytes()

        assert b"Connection: close\r\n" in result

    def test_to_bytes_server_and_date(self):
        """Test automatic Server and Date headers."""
        result = HTTPResponse().to_bytes(server_name="Test/0.1")

        assert b"Server: Test/0.1\r\n" in result
        assert b"Date: " in result

    def test_content_length_counts_bytes(self):
        """Content-Length is in bytes, not characters."""
        response = ok("años", "application/json")

        assert b"Content-Length: 5\r\n" in response.to_bytes()

    def test_text_property(self):
        """Test body decoding."""
        assert HTTPResponse(body="Hola".encode("utf-8")).text == "Hola"


class TestResponseBuilder:
    """Tests for ResponseBuilder."""

    def test_fluent_build(self):
        """Test chaining builder methods."""
        response = (ResponseBuilder()
            .status(HTTPStatus.OK)
            .content_type("text/css; charset=utf-8")
            .body(b"body {}")
            .build())

        assert response.status == HTTPStatus.OK
        assert response.content_type == "text/css; charset=utf-8"
        assert response.body == b"body {}"

    def test_string_body_is_encoded(self):
        """Test that string bodies become UTF-8 bytes."""
        response = ResponseBuilder().body("tienes 0 años").build()

        assert response.body == "tienes 0 años".encode("utf-8")

    def test_text_sets_plain_content_type(self):
        """Test text() helper."""
        response = ResponseBuilder().text("hola").build()

        assert response.content_type == "text/plain; charset=utf-8"


class TestConvenienceConstructors:
    """Tests for ok(), not_found() and friends."""

    def test_ok_with_string(self):
        """Strings default to text/plain."""
        response = ok("hola")

        assert response.status == HTTPStatus.OK
        assert response.content_type == "text/plain; charset=utf-8"

    def test_ok_with_bytes_and_type(self):
        """Bytes are sent untouched."""
        response = ok(b"\x89PNG", "image/png")

        assert response.body == b"\x89PNG"
        assert response.content_type == "image/png"

    def test_ok_with_explicit_string_type(self):
        """Test app responses keep the given content type."""
        assert ok("Hola Ana", "application/json").content_type == "application/json"

    def test_not_found_marker_text(self):
        """404 responses carry the fixed marker text."""
        response = not_found()

        assert response.status == HTTPStatus.NOT_FOUND
        assert response.text == NOT_FOUND_TEXT == "404 Not Found"

    def test_error_helpers(self):
        """Test status codes of the error helpers."""
        assert forbidden().status == HTTPStatus.FORBIDDEN
        assert bad_request().status == HTTPStatus.BAD_REQUEST
        assert internal_error().status == HTTPStatus.INTERNAL_SERVER_ERROR

    def test_method_not_allowed_sets_allow(self):
        """Test the Allow header on 405."""
        response = method_not_allowed(["GET"])

        assert response.status == HTTPStatus.METHOD_NOT_ALLOWED
        assert response.headers["Allow"] == "GET"


class TestFormatHttpDate:
    """Tests for HTTP-date formatting."""

    def test_format(self):
        """Test RFC 7231 date format."""
        dt = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

        assert format_http_date(dt) == "Thu, 01 Jan 2026 12:00:00 GMT"
