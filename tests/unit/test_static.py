"""
Unit tests for static file serving and provisioning.
"""

import logging
import os
from pathlib import Path

import pytest

from microserve.handlers.static import StaticFileHandler, copy_static_files
from microserve.http import HTTPStatus, RouteKind


@pytest.fixture
def static(static_root: Path) -> StaticFileHandler:
    return StaticFileHandler(static_root)


class TestStaticFileHandler:
    """Tests for StaticFileHandler."""

    def test_root_serves_index(self, static: StaticFileHandler):
        """GET / answers with index.html as text/html."""
        response = static.serve("/", RouteKind.HTML)

        assert response.status == HTTPStatus.OK
        assert response.content_type == "text/html; charset=utf-8"
        assert response.text == "<html><body>Inicio</body></html>"

    def test_html_page(self, static: StaticFileHandler):
        """Test a named page."""
        assert static.serve("/about.html", RouteKind.HTML).text == "<html><body>Acerca</body></html>"

    def test_css(self, static: StaticFileHandler):
        """Test a stylesheet, including one in a subdirectory."""
        response = static.serve("/styles.css", RouteKind.CSS)

        assert response.content_type == "text/css; charset=utf-8"
        assert response.body == b"body { color: red; }"
        assert static.serve("/css/extra.css", RouteKind.CSS).status == HTTPStatus.OK

    def test_js(self, static: StaticFileHandler):
        """Test a script."""
        response = static.serve("/app.js", RouteKind.JS)

        assert response.content_type == "text/javascript; charset=utf-8"

    def test_image_under_images(self, static: StaticFileHandler):
        """Image paths already under /images/ map directly."""
        response = static.serve("/images/logo.png", RouteKind.IMAGE)

        assert response.status == HTTPStatus.OK
        assert response.content_type == "image/png"
        assert response.body == b"\x89PNG\r\n\x1a\nfake"

    def test_bare_image_looked_up_in_images(self, static: StaticFileHandler):
        """Other image paths are looked up under images/."""
        response = static.serve("/photo.jpg", RouteKind.IMAGE)

        assert response.status == HTTPStatus.OK
        assert response.content_type == "image/jpg"

    def test_missing_file(self, static: StaticFileHandler):
        """A missing file answers 404 with the marker text."""
        response = static.serve("/missing.html", RouteKind.HTML)

        assert response.status == HTTPStatus.NOT_FOUND
        assert response.text == "404 Not Found"

    def test_missing_index(self, tmp_path: Path):
        """An empty root has no index page."""
        assert StaticFileHandler(tmp_path).serve("/", RouteKind.HTML).status == HTTPStatus.NOT_FOUND

    def test_nonexistent_root(self, tmp_path: Path):
        """A root that does not exist yet only produces 404s."""
        static = StaticFileHandler(tmp_path / "not-there")

        assert static.serve("/styles.css", RouteKind.CSS).status == HTTPStatus.NOT_FOUND

    def test_non_static_kind(self, static: StaticFileHandler):
        """APP and NOT_FOUND kinds are never served from disk."""
        assert static.serve("/index.html", RouteKind.APP).status == HTTPStatus.NOT_FOUND
        assert static.serve("/index.html", RouteKind.NOT_FOUND).status == HTTPStatus.NOT_FOUND

    def test_path_traversal_forbidden(self, static: StaticFileHandler, caplog):
        """A path resolving outside the root answers 403."""
        with caplog.at_level(logging.WARNING, logger="microserve"):
            response = static.serve("/../secret.html", RouteKind.HTML)

        assert response.status == HTTPStatus.FORBIDDEN
        assert "traversal" in caplog.text

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not available")
    def test_symlink_out_of_root_forbidden(self, static_root: Path, tmp_path: Path):
        """A symlink pointing outside the root is not followed."""
        outside = tmp_path / "outside.html"
        outside.write_text("secret", encoding="utf-8")
        (static_root / "link.html").symlink_to(outside)

        response = StaticFileHandler(static_root).serve("/link.html", RouteKind.HTML)

        assert response.status == HTTPStatus.FORBIDDEN

    def test_handle_classifies(self, static: StaticFileHandler):
        """handle() classifies the path itself."""
        assert static.handle("/").status == HTTPStatus.OK
        assert static.handle("/images/logo.png").content_type == "image/png"
        assert static.handle("/unknown").status == HTTPStatus.NOT_FOUND

    def test_map_path(self, static: StaticFileHandler):
        """Test request path to file mapping."""
        assert static.map_path("/", RouteKind.HTML) == "index.html"
        assert static.map_path("/a/b.html", RouteKind.HTML) == "a/b.html"
        assert static.map_path("/images/x.png", RouteKind.IMAGE) == "images/x.png"
        assert static.map_path("/x.png", RouteKind.IMAGE) == "images/x.png"
        assert static.map_path("/app/x", RouteKind.APP) is None


class TestProvisioning:
    """Tests for copy_static_files()."""

    def test_copy_tree(self, static_root: Path, tmp_path: Path):
        """Files and subdirectories are copied."""
        dest = tmp_path / "dest"

        copied = copy_static_files(static_root, dest)

        assert copied == 7
        assert (dest / "index.html").read_text(encoding="utf-8") == "<html><body>Inicio</body></html>"
        assert (dest / "images" / "logo.png").exists()
        assert (dest / "css" / "extra.css").exists()

    def test_copy_overwrites(self, static_root: Path, tmp_path: Path):
        """Existing destination files are replaced."""
        dest = tmp_path / "dest"
        dest.mkdir()
        (dest / "index.html").write_text("old", encoding="utf-8")

        copy_static_files(static_root, dest)

        assert (dest / "index.html").read_text(encoding="utf-8") == "<html><body>Inicio</body></html>"

    def test_copy_missing_source(self, tmp_path: Path, caplog):
        """A missing source copies nothing and logs a warning."""
        with caplog.at_level(logging.WARNING, logger="microserve"):
            copied = copy_static_files(tmp_path / "nope", tmp_path / "dest")

        assert copied == 0
        assert not (tmp_path / "dest").exists()
        assert "does not exist" in caplog.text

