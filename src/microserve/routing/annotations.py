"""
=============================================================================
CAPABILITY MARKERS
=============================================================================

Decorators and parameter markers that make a class discoverable.

    from microserve import rest_controller, get_mapping, RequestParam

    @rest_controller
    class GreetingController:

        @get_mapping("/greeting")
        def greeting(self, name=RequestParam("name", "World")):
            return "Hola " + name

Three markers, three levels:

    ┌──────────────────┬──────────────────────────────────────────────────┐
    │ @rest_controller │ class is a handler group                          │
    │ @get_mapping(p)  │ function is a GET handler for route p             │
    │ RequestParam(..) │ parameter reads query key, falls back to default  │
    └──────────────────┴──────────────────────────────────────────────────┘

The decorators only attach attributes. Nothing is registered at import
time: the discoverer reads the markers later, so importing a controller
module has no side effects on any registry.

=============================================================================
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar


CONTROLLER_MARKER = "__rest_controller__"
ROUTE_MARKER = "__get_mapping__"

T = TypeVar("T")
F = TypeVar("F", bound=Callable[..., Any])


@dataclass(frozen=True)
class RequestParam:
    """
    Per-parameter marker, used as the parameter's default value.

    Attributes:
        value:         Query-string key to read.
        default_value: Used when the key is absent or its value is empty.
    """
    value: str
    default_value: str = ""


def rest_controller(cls: T) -> T:
    """Mark a class as a handler group."""
    setattr(cls, CONTROLLER_MARKER, True)
    return cls


def get_mapping(path: str) -> Callable[[F], F]:
    """
    Mark a function as the GET handler for path.

    The path is stored as given; it is validated when the controller is
    discovered, so a bad path skips that one handler instead of breaking
    the import of the whole module.
    """
    def decorator(func: F) -> F:
        target = func.__func__ if isinstance(func, (staticmethod, classmethod)) else func
        setattr(target, ROUTE_MARKER, path)
        return func
    return decorator


def is_rest_controller(obj: Any) -> bool:
    """True for classes decorated with @rest_controller."""
    return isinstance(obj, type) and obj.__dict__.get(CONTROLLER_MARKER) is True


def get_route_path(func: Any) -> Optional[Any]:
    """Raw value given to @get_mapping, or None when unmarked."""
    func = getattr(func, "__func__", func)
    return getattr(func, ROUTE_MARKER, None)
