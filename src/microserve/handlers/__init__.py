"""
=============================================================================
HANDLERS
=============================================================================

Built-in request handling that is not user code:

    StaticFileHandler   pages, stylesheets, scripts and images from disk
    copy_static_files   provision the asset directory from a source tree

App-namespace requests are answered by routing.Dispatcher instead.

=============================================================================
"""

from .static import StaticFileHandler, copy_static_files

__all__ = [
    "StaticFileHandler",
    "copy_static_files",
]
