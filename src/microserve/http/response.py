"""
=============================================================================
HTTP RESPONSE BUILDING
=============================================================================

Builds the bytes that go back over the socket.

=============================================================================
RESPONSE FORMAT
=============================================================================

    HTTP/1.1 200 OK\r\n                          ← Status line
    Content-Type: application/json\r\n           ← Headers
    Content-Length: 8\r\n
    Connection: close\r\n
    \r\n                                         ← Blank line
    Hola Ana                                     ← Body

Every response the runtime produces is one of:

    ┌──────────────┬──────────────────────────────────────────────────────┐
    │ ok()         │ static asset bytes or a handler's string result       │
    │ not_found()  │ fixed marker text "404 Not Found"                     │
    │ forbidden()  │ static path outside the asset root                    │
    │ bad_request()│ request line could not be parsed                      │
    │ method_not_allowed() │ anything other than GET                       │
    │ internal_error()     │ handler fault, turned into a reported error   │
    └──────────────┴──────────────────────────────────────────────────────┘

Connections are never kept alive, so every response is stamped with
"Connection: close" when serialized.

=============================================================================
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Dict, Union

from .status_codes import HTTPStatus


NOT_FOUND_TEXT = "404 Not Found"


@dataclass
class HTTPResponse:
    """
    An HTTP response to be sent to the client.

    Use ResponseBuilder or the helper functions at the bottom of this
    module rather than constructing one by hand.
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """Status line, e.g. "HTTP/1.1 200 OK"."""
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    @property
    def content_type(self) -> Optional[str]:
        return self.headers.get("Content-Type")

    @property
    def text(self) -> str:
        """Body decoded as UTF-8 (for logging and tests)."""
        return self.body.decode("utf-8", errors="replace")

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        self.headers[name] = value
        return self

    def to_bytes(self, server_name: str = "MicroServe/1.0") -> bytes:
        """
        Serialize the response for socket.sendall().

        Content-Length, Date, Server and Connection are filled in when the
        builder did not set them.
        """
        response_headers = dict(self.headers)

        response_headers.setdefault("Content-Length", str(len(self.body)))
        response_headers.setdefault("Date", format_http_date(datetime.now(timezone.utc)))
        response_headers.setdefault("Server", server_name)
        response_headers.setdefault("Connection", "close")

        lines = [self.status_line]
        for name, value in response_headers.items():
            lines.append(f"{name}: {value}")
        lines.append("")

        header_bytes = "\r\n".join(lines).encode("utf-8") + b"\r\n"
        return header_bytes + self.body


class ResponseBuilder:
    """
    Fluent builder for HTTP responses.

        response = (ResponseBuilder()
            .status(HTTPStatus.OK)
            .content_type("text/css; charset=utf-8")
            .body(css_bytes)
            .build())

    Each method returns self except build().
    """

    def __init__(self, server_name: str = "MicroServe/1.0"):
        self._status = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body: bytes = b""
        self._server_name = server_name

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        self._status = status
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        self._headers[name] = value
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        return self.header("Content-Type", content_type)

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        """Set the body; strings are encoded as UTF-8."""
        if isinstance(body, str):
            self._body = body.encode("utf-8")
        else:
            self._body = body
        return self

    def text(self, text: str, content_type: str = "text/plain; charset=utf-8") -> "ResponseBuilder":
        self._body = text.encode("utf-8")
        self._headers["Content-Type"] = content_type
        return self

    def close_connection(self) -> "ResponseBuilder":
        self._headers["Connection"] = "close"
        return self

    def build(self) -> HTTPResponse:
        return HTTPResponse(
            status=self._status,
            headers=self._headers,
            body=self._body,
        )

    def to_bytes(self) -> bytes:
        """Build and serialize in one step."""
        return self.build().to_bytes(self._server_name)


def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 7231).

    Example: Wed, 01 Jan 2026 12:00:00 GMT

    HTTP dates are always GMT, never local time.
    """
    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )


# =============================================================================
# CONVENIENCE CONSTRUCTORS
# =============================================================================

def ok(body: Union[str, bytes] = "", content_type: Optional[str] = None) -> HTTPResponse:
    """
    Create a 200 OK response.

    Strings default to text/plain, bytes are sent untouched with whatever
    content_type the caller provides.
    """
    builder = ResponseBuilder().status(HTTPStatus.OK)

    if isinstance(body, str):
        builder.text(body, content_type or "text/plain; charset=utf-8")
    else:
        builder.body(body)
        if content_type:
            builder.content_type(content_type)

    return builder.build()


def not_found(message: str = NOT_FOUND_TEXT) -> HTTPResponse:
    """Create a 404 response carrying the fixed marker text."""
    return ResponseBuilder().status(HTTPStatus.NOT_FOUND).text(message).build()


def forbidden(message: str = "403 Forbidden") -> HTTPResponse:
    return ResponseBuilder().status(HTTPStatus.FORBIDDEN).text(message).build()


def bad_request(message: str = "400 Bad Request") -> HTTPResponse:
    return ResponseBuilder().status(HTTPStatus.BAD_REQUEST).text(message).build()


def method_not_allowed(allowed_methods: list[str]) -> HTTPResponse:
    """
    Create a 405 response.

    Includes the Allow header listing valid methods (RFC 7231 requirement).
    """
    return (ResponseBuilder()
        .status(HTTPStatus.METHOD_NOT_ALLOWED)
        .header("Allow", ", ".join(allowed_methods))
        .text("405 Method Not Allowed")
        .build())


def internal_error(message: str = "500 Internal Server Error") -> HTTPResponse:
    """Create a 500 response. Keep the message free of internals."""
    return ResponseBuilder().status(HTTPStatus.INTERNAL_SERVER_ERROR).text(message).build()
