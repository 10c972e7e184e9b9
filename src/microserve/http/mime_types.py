"""
=============================================================================
MIME TYPE DETECTION
=============================================================================

Maps the file extensions the static resolver serves to their Content-Type.

    ┌────────────────────────────────────────────────────────────────────┐
    │                 WHAT THE RUNTIME SERVES                            │
    ├────────────────────────────────────────────────────────────────────┤
    │                                                                     │
    │  PAGES:      .html .htm → text/html                                │
    │  STYLES:     .css       → text/css                                 │
    │  SCRIPTS:    .js  .mjs  → text/javascript                          │
    │  IMAGES:     .png .jpg .jpeg .ico → image/<ext>                    │
    │  APP ROUTES: (no file)  → application/json                         │
    │                                                                     │
    └────────────────────────────────────────────────────────────────────┘

Image types follow the "image/<extension>" convention for the formats the
classifier accepts, so a .jpg is announced as image/jpg and an .ico as
image/ico, the way browsers have always tolerated them.

=============================================================================
"""

from pathlib import Path
from typing import Optional


# =============================================================================
# MIME TYPE DATABASE
# =============================================================================

MIME_TYPES = {
    # -------------------------------------------------------------------------
    # TEXT TYPES
    # -------------------------------------------------------------------------
    ".html": "text/html",
    ".htm": "text/html",
    ".css": "text/css",
    ".js": "text/javascript",
    ".mjs": "text/javascript",
    ".json": "application/json",
    ".txt": "text/plain",

    # -------------------------------------------------------------------------
    # IMAGE TYPES
    # -------------------------------------------------------------------------
    # Named after the extension itself (image/jpg, image/ico).
    ".png": "image/png",
    ".jpg": "image/jpg",
    ".jpeg": "image/jpeg",
    ".ico": "image/ico",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
}

DEFAULT_MIME_TYPE = "application/octet-stream"

# Content-Type for everything under the app namespace, whatever the handler
# actually returned.
APP_CONTENT_TYPE = "application/json"


def get_mime_type(path: str | Path, default: Optional[str] = None) -> str:
    """
    Get the MIME type for a file based on its extension.

    Examples:
        >>> get_mime_type("style.css")
        'text/css'

        >>> get_mime_type("/images/logo.PNG")
        'image/png'

        >>> get_mime_type("unknown.xyz")
        'application/octet-stream'
    """
    if isinstance(path, str):
        path = Path(path)

    extension = path.suffix.lower()
    return MIME_TYPES.get(extension, default or DEFAULT_MIME_TYPE)


def is_text_type(mime_type: str) -> bool:
    """Check if a MIME type should carry a charset parameter."""
    return mime_type.startswith("text/") or mime_type in {
        "application/json",
        "image/svg+xml",
    }


def get_content_type(path: str | Path, charset: str = "utf-8") -> str:
    """
    Full Content-Type header value for a file.

        >>> get_content_type("page.html")
        'text/html; charset=utf-8'

        >>> get_content_type("image.png")
        'image/png'
    """
    mime_type = get_mime_type(path)

    if is_text_type(mime_type):
        return f"{mime_type}; charset={charset}"

    return mime_type
