"""
=============================================================================
APP-ROUTE DISPATCH
=============================================================================

Turns "/app/<route>?<query>" into a handler call:

    "/app/hello"  {"name": "Ana"}
         │
         ▼  strip prefix
    "/hello"  ──lookup──►  HandlerDescriptor (or 404)
         │
         ▼  bind
    ["Ana", "0"]  ──invoke──►  "Hola hola Ana, tienes 0 años"
         │
         ▼
    200 application/json

A response is always produced. A handler that raises, or that cannot take
the bound argument list, is logged with its traceback and answered with 500.

=============================================================================
"""

from typing import Mapping
import logging

from ..errors import InvocationFault
from ..http.mime_types import APP_CONTENT_TYPE
from ..http.response import HTTPResponse, internal_error, not_found, ok
from .binding import bind
from .registry import HandlerDescriptor, HandlerRegistry


logger = logging.getLogger(__name__)


class Dispatcher:
    """
    Dispatches app-namespace paths to registered handlers.

    Usage:
        dispatcher = Dispatcher(registry)
        response = dispatcher.dispatch("/app/greeting", {"name": "Ana"})
        response.text   # "Hola Ana"
    """

    def __init__(self, registry: HandlerRegistry, app_prefix: str = "/app"):
        self.registry = registry
        self.app_prefix = app_prefix

    def route_key(self, path: str) -> str:
        """Registry key for a request path ("/app/greeting" → "/greeting")."""
        if self.app_prefix and path.startswith(self.app_prefix):
            return path[len(self.app_prefix):]
        return path

    def dispatch(self, path: str, query_params: Mapping[str, str]) -> HTTPResponse:
        key = self.route_key(path)
        descriptor = self.registry.lookup(key)

        if descriptor is None:
            logger.debug(f"No handler for {key}")
            return not_found()

        try:
            body = self.invoke(descriptor, query_params)
        except InvocationFault as fault:
            logger.error(f"{fault} ({type(fault.cause).__name__})", exc_info=fault.cause)
            return internal_error()

        return ok(body, APP_CONTENT_TYPE)

    def invoke(self, descriptor: HandlerDescriptor, query_params: Mapping[str, str]) -> str:
        """
        Bind and call one handler.

        Raises:
            InvocationFault: The handler raised, or rejected the argument list.
        """
        args = bind(descriptor, query_params)
        try:
            return descriptor.invoke(args)
        except Exception as e:
            raise InvocationFault(descriptor.path, e) from e
