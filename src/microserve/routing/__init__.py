"""
=============================================================================
ROUTING
=============================================================================

From annotated source code to an answered app request:

    annotations.py  @rest_controller, @get_mapping, RequestParam
    discovery.py    Discoverer: finds controllers, builds descriptors
    registry.py     HandlerRegistry: path → HandlerDescriptor
    binding.py      bind(): query string → ordered argument list
    dispatch.py     Dispatcher: strip prefix, look up, bind, invoke

=============================================================================
"""

from .annotations import RequestParam, get_mapping, get_route_path, is_rest_controller, rest_controller
from .binding import bind
from .discovery import DEFAULT_ROOT, Discoverer, make_invoker
from .dispatch import Dispatcher
from .registry import HandlerDescriptor, HandlerRegistry, Invoker, ParameterBinding

__all__ = [
    # Markers
    "rest_controller",
    "get_mapping",
    "RequestParam",
    "is_rest_controller",
    "get_route_path",

    # Table
    "HandlerRegistry",
    "HandlerDescriptor",
    "ParameterBinding",
    "Invoker",

    # Pipeline
    "Discoverer",
    "DEFAULT_ROOT",
    "make_invoker",
    "bind",
    "Dispatcher",
]
