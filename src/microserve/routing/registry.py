"""
=============================================================================
HANDLER REGISTRY
=============================================================================

Path → HandlerDescriptor. Built once by the discoverer, read by the
dispatcher for the rest of the process.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        REGISTRY CONTENTS                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   "/greeting"       → greeting(name="World")                        │
    │   "/hello"          → hello_service(name="World", age="0")          │
    │   "/calculate/suma" → calculate(a="0", b="0")                       │
    │                                                                      │
    │   Exact string keys. No patterns, no wildcards, no ordering.         │
    │   The "/app" namespace prefix is NOT part of the key.                │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
COPY-ON-WRITE
=============================================================================

Writers build a new dict under a lock and swap it in with one assignment.
Readers just grab the current dict, so a lookup during a reload sees either
the old table or the new one, never a half-built one.

Duplicate paths: the later registration wins. A warning is logged because
two handlers claiming one path is almost always a mistake, but the
behavior is kept.

=============================================================================
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence
import logging
import threading

from ..errors import RouteNotFound


logger = logging.getLogger(__name__)


# Uniform handler signature: ordered strings in, one string out.
Invoker = Callable[[Sequence[str]], str]


@dataclass(frozen=True)
class ParameterBinding:
    """
    One declared handler parameter.

    query_name is None for a parameter that carries no RequestParam marker;
    such a binding always resolves to the empty string.
    """
    query_name: Optional[str]
    default_value: str = ""


@dataclass(frozen=True)
class HandlerDescriptor:
    """
    Everything the dispatcher needs to call one handler.

    Attributes:
        path:               Route key ("/greeting").
        parameter_bindings: One binding per handler parameter, in call order.
        invoke:             Takes the bound argument list, returns the body.
        name:               Qualified handler name, for logs.
        handler:            The original callable, for introspection.
    """
    path: str
    parameter_bindings: tuple[ParameterBinding, ...]
    invoke: Invoker = field(compare=False)
    name: str = ""
    handler: Any = field(default=None, compare=False, repr=False)

    @property
    def signature(self) -> tuple[str, tuple[ParameterBinding, ...]]:
        """Comparable summary: the path and its bindings."""
        return (self.path, self.parameter_bindings)


class HandlerRegistry:
    """
    Route table shared by the discoverer (writer) and dispatcher (reader).

    Usage:
        registry = HandlerRegistry()
        registry.register("/greeting", descriptor)

        registry.lookup("/greeting")   # → descriptor
        registry.lookup("/missing")    # → None
        registry.require("/missing")   # → raises RouteNotFound
    """

    def __init__(self):
        self._routes: Dict[str, HandlerDescriptor] = {}
        self._lock = threading.Lock()

    # =========================================================================
    # WRITES
    # =========================================================================

    def register(self, path: str, descriptor: HandlerDescriptor) -> None:
        """Register descriptor under path, replacing any previous entry."""
        with self._lock:
            previous = self._routes.get(path)
            if previous is not None:
                logger.warning(
                    f"Route {path} already registered by {previous.name}, "
                    f"overwriting with {descriptor.name}"
                )
            routes = dict(self._routes)
            routes[path] = descriptor
            self._routes = routes

    def clear(self) -> None:
        with self._lock:
            self._routes = {}

    def replace(self, descriptors: Mapping[str, HandlerDescriptor]) -> None:
        """Swap in a complete table at once."""
        with self._lock:
            self._routes = dict(descriptors)

    # =========================================================================
    # READS
    # =========================================================================

    def lookup(self, path: str) -> Optional[HandlerDescriptor]:
        """Descriptor registered under path, or None."""
        return self._routes.get(path)

    def require(self, path: str) -> HandlerDescriptor:
        descriptor = self._routes.get(path)
        if descriptor is None:
            raise RouteNotFound(path)
        return descriptor

    def paths(self) -> List[str]:
        return sorted(self._routes)

    def snapshot(self) -> Mapping[str, HandlerDescriptor]:
        """Read-only view of the current table."""
        return MappingProxyType(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def __contains__(self, path: object) -> bool:
        return path in self._routes

    def print_routes(self) -> None:
        """
        Print the route table, e.g.

            Registered Routes:
            ------------------------------------------------------------
              GET      /greeting  (name='World')
            ------------------------------------------------------------
        """
        print("\nRegistered Routes:")
        print("-" * 60)
        for path in self.paths():
            descriptor = self._routes[path]
            params = ", ".join(
                f"{b.query_name}={b.default_value!r}" if b.query_name else "_"
                for b in descriptor.parameter_bindings
            )
            print(f"  GET      {path}  ({params})")
        print("-" * 60)
