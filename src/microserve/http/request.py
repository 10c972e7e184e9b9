"""
=============================================================================
HTTP REQUEST PARSING
=============================================================================

Turns the raw bytes read from a connection into an HTTPRequest.

The runtime only cares about the REQUEST LINE:

    GET /app/greeting?name=Ana HTTP/1.1
    ─┬─ ───────┬───── ────┬─── ───┬────
     │         │          │       │
   Method     Path      Query   Version

Header lines are parsed leniently and kept for logging; nothing downstream
depends on them.

=============================================================================
QUERY STRING RULES
=============================================================================

    "a=1&b=2"        → {"a": "1", "b": "2"}
    "a=1&a=2"        → {"a": "2"}              last occurrence wins
    "flag&name=Ana"  → {"flag": "", "name": "Ana"}   no "=" binds to ""
    "name="          → {"name": ""}
    ""  / None       → {}
    "q=hello%20you"  → {"q": "hello you"}      URL-decoded

A lookup for a key that is not present, or for no key at all (None),
yields the empty string. It never raises.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Optional
from urllib.parse import parse_qsl, unquote, urlsplit
import re


class HTTPParseError(Exception):
    """
    Raised when the request line cannot be parsed.

    Carries the status code the server should answer with.
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class HTTPRequest:
    """
    A parsed HTTP request.

    Attributes:
        method:         HTTP method ("GET", ...)
        path:           URL-decoded path WITHOUT the query string
        version:        "HTTP/1.1" or "HTTP/1.0"
        query_params:   Single-valued query mapping (last occurrence wins)
        query_string:   The raw text after "?" (possibly empty)
        headers:        Header name (lowercase) → value
        client_address: (ip, port) of the peer, for logging
        raw:            Original bytes, for debugging
    """

    method: str
    path: str
    version: str = "HTTP/1.1"

    query_params: Dict[str, str] = field(default_factory=dict)
    query_string: str = ""
    headers: Dict[str, str] = field(default_factory=dict)

    client_address: tuple[str, int] = ("", 0)
    raw: bytes = field(default=b"", repr=False)

    @property
    def host(self) -> str:
        return self.headers.get("host", "")

    @property
    def user_agent(self) -> str:
        return self.headers.get("user-agent", "")

    def get_header(self, name: str, default: str = "") -> str:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower(), default)

    def get_value(self, name: Optional[str]) -> str:
        """
        Value of a query parameter, or "" when it is absent.

        Also returns "" when name is None, so callers holding an unnamed
        binding never have to special-case it.
        """
        if name is None:
            return ""
        return self.query_params.get(name, "")


def parse_query(query: Optional[str]) -> Dict[str, str]:
    """
    Parse a query string into a single-valued mapping.

    Pairs are split on "&", keys and values are URL-decoded, a later
    duplicate key overwrites an earlier one and a key without "=" maps to
    the empty string. Anything unparseable yields an empty mapping.
    """
    if not query:
        return {}

    try:
        pairs = parse_qsl(query, keep_blank_values=True)
    except ValueError:
        return {}

    return dict(pairs)


class RequestParser:
    """
    Parses raw request bytes into HTTPRequest objects.

        Raw bytes
            │
            ▼
        1. Size check           too large → HTTPParseError(413)
        2. Split header section at \\r\\n\\r\\n (whole input if absent)
        3. Parse request line   METHOD SP URI SP VERSION
        4. Parse headers        "Name: Value", names lowercased
            │
            ▼
        HTTPRequest

    REQUEST_LINE_PATTERN: ^([A-Z]+) ([^ ]+) (HTTP/\\d\\.\\d)$

    The method is not validated here. Answering anything other than GET
    with 405 is the server's job.
    """

    REQUEST_LINE_PATTERN = re.compile(r"^([A-Z]+) ([^ ]+) (HTTP/\d\.\d)$")
    HEADER_PATTERN = re.compile(r"^([^:]+):\s*(.*)$")

    def __init__(self, max_request_size: int = 1024 * 1024):
        self.max_request_size = max_request_size

    def parse(
        self,
        data: bytes,
        client_address: tuple[str, int] = ("", 0)
    ) -> HTTPRequest:
        """
        Parse raw HTTP request data.

        Raises:
            HTTPParseError: If the request line is missing or malformed.
        """
        if len(data) > self.max_request_size:
            raise HTTPParseError(
                f"Request too large: {len(data)} bytes",
                status_code=413
            )

        header_end = data.find(b"\r\n\r\n")
        head = data if header_end == -1 else data[:header_end]
        header_section = head.decode("utf-8", errors="replace")

        lines = header_section.split("\r\n")
        if not lines or not lines[0].strip():
            raise HTTPParseError("Empty request")

        method, path, query_string, version = self._parse_request_line(lines[0].strip())
        headers = self._parse_headers(lines[1:])

        return HTTPRequest(
            method=method,
            path=path,
            version=version,
            query_params=parse_query(query_string),
            query_string=query_string,
            headers=headers,
            client_address=client_address,
            raw=data,
        )

    def _parse_request_line(self, line: str) -> tuple[str, str, str, str]:
        """
        Split the request line into (method, path, query_string, version).

        Absolute-form targets ("http://host:35000/app/x?a=1") are accepted
        too; only their path and query are kept.
        """
        match = self.REQUEST_LINE_PATTERN.match(line)
        if not match:
            raise HTTPParseError(f"Invalid request line: {line}")

        method, uri, version = match.groups()

        if version not in ("HTTP/1.0", "HTTP/1.1"):
            raise HTTPParseError(f"Unsupported HTTP version: {version}")

        parts = urlsplit(uri)
        path = unquote(parts.path) or "/"

        if ".." in path:
            raise HTTPParseError("Invalid path: contains ..", status_code=400)

        return method, path, parts.query, version

    def _parse_headers(self, lines: list[str]) -> Dict[str, str]:
        headers: Dict[str, str] = {}

        for line in lines:
            match = self.HEADER_PATTERN.match(line)
            if not match:
                continue  # lenient

            name, value = match.groups()
            name = name.strip().lower()
            value = value.strip()

            if name in headers:
                headers[name] += ", " + value
            else:
                headers[name] = value

        return headers


def parse_request(
    data: bytes,
    client_address: tuple[str, int] = ("", 0),
    max_size: int = 1024 * 1024
) -> HTTPRequest:
    """Parse a request with a throwaway RequestParser."""
    return RequestParser(max_request_size=max_size).parse(data, client_address)
