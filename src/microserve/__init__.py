"""
=============================================================================
MICROSERVE
=============================================================================

A micro web framework: mark classes and functions, and microserve finds
them at startup and serves them over HTTP next to a directory of static
assets.

    from microserve import rest_controller, get_mapping, RequestParam

    @rest_controller
    class GreetingController:

        @get_mapping("/greeting")
        def greeting(self, name=RequestParam("name", "World")):
            return "Hola " + name

    $ python -m microserve
    $ curl "http://127.0.0.1:35000/app/greeting?name=Ana"
    Hola Ana

=============================================================================
PACKAGE LAYOUT
=============================================================================

    routing/    markers, discovery, registry, binding, dispatch
    http/       request parsing, responses, MIME types, classification
    handlers/   static asset serving and provisioning
    core/       listening socket and connections
    controllers/  sample controllers (the default deployment root)

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig
from .errors import DiscoveryError, InvocationFault, MicroServeError, RouteNotFound
from .routing import (
    Discoverer,
    Dispatcher,
    HandlerDescriptor,
    HandlerRegistry,
    ParameterBinding,
    RequestParam,
    bind,
    get_mapping,
    rest_controller,
)
from .server import HTTPServer

__all__ = [
    "__version__",
    "HTTPServer",
    "ServerConfig",
    "rest_controller",
    "get_mapping",
    "RequestParam",
    "Discoverer",
    "Dispatcher",
    "HandlerRegistry",
    "HandlerDescriptor",
    "ParameterBinding",
    "bind",
    "MicroServeError",
    "DiscoveryError",
    "RouteNotFound",
    "InvocationFault",
]
