"""
=============================================================================
ROUTE CLASSIFICATION
=============================================================================

Decides, from the path alone, who answers a request.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                 CLASSIFICATION ORDER (first match wins)             │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. "/" or *.html          → HTML   (static resolver)              │
    │   2. *.css                  → CSS    (static resolver)              │
    │   3. *.js                   → JS     (static resolver)              │
    │   4. starts with "/app"     → APP    (dispatcher)                   │
    │   5. *.jpeg *.jpg *.png *.ico → IMAGE (static resolver)             │
    │   6. anything else          → NOT_FOUND                             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The order matters: "/app/page.html" is HTML and "/app/logo.png" is APP.

=============================================================================
"""

from enum import Enum


IMAGE_SUFFIXES = (".jpeg", ".jpg", ".png", ".ico")


class RouteKind(Enum):
    """Who handles a request."""
    HTML = "html"
    CSS = "css"
    JS = "js"
    APP = "app"
    IMAGE = "image"
    NOT_FOUND = "not_found"

    @property
    def is_static(self) -> bool:
        return self in (RouteKind.HTML, RouteKind.CSS, RouteKind.JS, RouteKind.IMAGE)


def classify(path: str, app_prefix: str = "/app") -> RouteKind:
    """
    Classify a request path.

    Matching is plain, case-sensitive suffix/prefix comparison on the path
    (query string already removed).

    Examples:
        >>> classify("/")
        <RouteKind.HTML: 'html'>
        >>> classify("/app/greeting")
        <RouteKind.APP: 'app'>
        >>> classify("/favicon.ico")
        <RouteKind.IMAGE: 'image'>
    """
    if path == "/" or path.endswith(".html"):
        return RouteKind.HTML
    if path.endswith(".css"):
        return RouteKind.CSS
    if path.endswith(".js"):
        return RouteKind.JS
    if path.startswith(app_prefix):
        return RouteKind.APP
    if path.endswith(IMAGE_SUFFIXES):
        return RouteKind.IMAGE
    return RouteKind.NOT_FOUND
