"""
=============================================================================
STATIC FILE HANDLER
=============================================================================

Serves the page, stylesheet, script and image assets of the site from one
directory on disk, and provisions that directory at startup.

=============================================================================
PATH MAPPING
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  kind    request path            file under root_dir                │
    ├─────────────────────────────────────────────────────────────────────┤
    │  HTML    /                       index.html                         │
    │  HTML    /docs/about.html        docs/about.html                    │
    │  CSS     /styles.css             styles.css                         │
    │  JS      /app.js                 app.js                             │
    │  IMAGE   /images/logo.png        images/logo.png                    │
    │  IMAGE   /logo.png               images/logo.png                    │
    └─────────────────────────────────────────────────────────────────────┘

Images always live under images/; a bare image path is looked up there.

=============================================================================
SECURITY: PATH TRAVERSAL
=============================================================================

    GET /../../etc/passwd.html

    full_path = (root_dir / user_input).resolve()
    full_path.relative_to(root_dir)   # raises ValueError if outside → 403

The request parser already rejects ".." segments; this check also covers
symlinks pointing out of the asset root.

=============================================================================
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union
import logging
import shutil

from ..http.classify import RouteKind, classify
from ..http.mime_types import get_content_type
from ..http.response import (
    HTTPResponse, HTTPStatus, ResponseBuilder,
    format_http_date, forbidden, not_found,
)


logger = logging.getLogger(__name__)


class StaticFileHandler:
    """
    Serves static assets from root_dir.

    Usage:
        static = StaticFileHandler("public")
        response = static.serve("/", RouteKind.HTML)   # index.html
    """

    def __init__(self, root_dir: Union[str, Path], index_file: str = "index.html", image_dir: str = "images"):
        """
        Args:
            root_dir: Asset root. Nothing outside it is ever served.
                      It does not have to exist yet; missing files are 404s.
            index_file: File served for "/".
            image_dir: Subdirectory holding images.
        """
        self.root_dir = Path(root_dir).resolve()
        self.index_file = index_file
        self.image_dir = image_dir.strip("/")

    def handle(self, path: str) -> HTTPResponse:
        """Classify path and serve it."""
        return self.serve(path, classify(path))

    def serve(self, path: str, kind: RouteKind) -> HTTPResponse:
        """
        Serve the asset for an already-classified path.

        Args:
            path: URL path, query string removed.
            kind: HTML, CSS, JS or IMAGE. Anything else is a 404.

        Returns:
            200 with the file's raw bytes, 403 for a path outside the root,
            404 when the file does not exist.
        """
        relative = self.map_path(path, kind)
        if relative is None:
            return not_found()

        full_path = (self.root_dir / relative).resolve()

        try:
            full_path.relative_to(self.root_dir)
        except ValueError:
            logger.warning(f"Path traversal attempt: {path}")
            return forbidden()

        if not full_path.is_file():
            logger.debug(f"Static file not found: {full_path}")
            return not_found()

        return self._serve_file(full_path)

    def map_path(self, path: str, kind: RouteKind) -> Optional[str]:
        """Path relative to root_dir for a request, or None if kind is not static."""
        if kind is RouteKind.HTML:
            return self.index_file if path == "/" else path.lstrip("/")
        if kind in (RouteKind.CSS, RouteKind.JS):
            return path.lstrip("/")
        if kind is RouteKind.IMAGE:
            prefix = f"/{self.image_dir}/"
            if path.startswith(prefix):
                return path.lstrip("/")
            return f"{self.image_dir}/{path.lstrip('/')}"
        return None

    def _serve_file(self, path: Path) -> HTTPResponse:
        try:
            content = path.read_bytes()
            mtime = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
        except PermissionError:
            return forbidden()

        return (ResponseBuilder()
            .status(HTTPStatus.OK)
            .content_type(get_content_type(path))
            .header("Last-Modified", format_http_date(mtime))
            .body(content)
            .build())


# =============================================================================
# PROVISIONING
# =============================================================================

def copy_static_files(source_dir: Union[str, Path], dest_dir: Union[str, Path]) -> int:
    """
    Copy an asset tree into dest_dir, overwriting existing files.

    A file that cannot be copied is logged and skipped; the rest of the tree
    is still copied. A missing source directory copies nothing.

    Returns:
        Number of files copied.
    """
    source = Path(source_dir)
    dest = Path(dest_dir)

    if not source.is_dir():
        logger.warning(f"Static source directory does not exist: {source}")
        return 0

    copied = 0
    for item in sorted(source.rglob("*")):
        target = dest / item.relative_to(source)
        try:
            if item.is_dir():
                target.mkdir(parents=True, exist_ok=True)
            else:
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(item, target)
                copied += 1
        except OSError as e:
            logger.warning(f"Could not copy {item}: {e}")

    logger.info(f"Copied {copied} static file(s) from {source} to {dest}")
    return copied
