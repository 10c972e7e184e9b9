"""
=============================================================================
HTTP PROTOCOL LAYER
=============================================================================

The small slice of HTTP/1.1 that microserve speaks:

    request.py       Request line + query string → HTTPRequest
    response.py      HTTPResponse, ResponseBuilder, ok()/not_found()/...
    status_codes.py  The status codes the runtime answers with
    mime_types.py    Extension → Content-Type
    classify.py      Path → RouteKind (static asset, app route, not found)

=============================================================================
"""

from .classify import RouteKind, classify
from .mime_types import APP_CONTENT_TYPE, get_content_type, get_mime_type
from .request import HTTPParseError, HTTPRequest, RequestParser, parse_query, parse_request
from .response import (
    NOT_FOUND_TEXT,
    HTTPResponse,
    ResponseBuilder,
    bad_request,
    forbidden,
    internal_error,
    method_not_allowed,
    not_found,
    ok,
)
from .status_codes import HTTPStatus

__all__ = [
    # Request
    "HTTPRequest",
    "HTTPParseError",
    "RequestParser",
    "parse_request",
    "parse_query",

    # Response
    "HTTPResponse",
    "ResponseBuilder",
    "HTTPStatus",
    "NOT_FOUND_TEXT",
    "ok",
    "not_found",
    "forbidden",
    "bad_request",
    "method_not_allowed",
    "internal_error",

    # Content types
    "APP_CONTENT_TYPE",
    "get_content_type",
    "get_mime_type",

    # Classification
    "RouteKind",
    "classify",
]
