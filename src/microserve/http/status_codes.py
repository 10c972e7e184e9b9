"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The status codes microserve actually answers with.

The runtime speaks a deliberately small subset of HTTP, so only the codes
that can leave the server are listed here:

    ┌────────┬───────────────────────────────────────────────────────────┐
    │  2xx   │ 200 OK            - Static asset or handler result        │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  4xx   │ 400 Bad Request   - Request line could not be parsed      │
    │        │ 403 Forbidden     - Static path escapes the asset root    │
    │        │ 404 Not Found     - No asset, no route                    │
    │        │ 405 Method Not Allowed - Anything other than GET          │
    │        │ 408 Request Timeout    - Client never finished the line   │
    │        │ 413 Payload Too Large  - Request bigger than the limit    │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  5xx   │ 500 Internal Error - Handler raised or had wrong arity    │
    └────────┴───────────────────────────────────────────────────────────┘

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    IntEnum, so codes compare equal to plain integers:

        >>> HTTPStatus.NOT_FOUND == 404
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200

    BAD_REQUEST = 400
    FORBIDDEN = 403
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    REQUEST_TIMEOUT = 408
    PAYLOAD_TOO_LARGE = 413

    INTERNAL_SERVER_ERROR = 500

    @property
    def phrase(self) -> str:
        """
        Reason phrase for the status line.

            HTTP/1.1 404 Not Found
                     ─── ─────────
                      │      └── phrase
                      └───────── code
        """
        return _STATUS_PHRASES.get(self, "Unknown")

    @property
    def is_success(self) -> bool:
        """Check if this is a 2xx status code."""
        return 200 <= self < 300

    @property
    def is_error(self) -> bool:
        """Check if this is a 4xx or 5xx status code."""
        return self >= 400


# =============================================================================
# REASON PHRASES
# =============================================================================

_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.FORBIDDEN: "Forbidden",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.REQUEST_TIMEOUT: "Request Timeout",
    HTTPStatus.PAYLOAD_TOO_LARGE: "Payload Too Large",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
}
