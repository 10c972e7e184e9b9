"""
=============================================================================
HANDLER DISCOVERY
=============================================================================

Finds @rest_controller classes, reads their @get_mapping handlers and
fills a HandlerRegistry. Nobody maintains a list of routes by hand.

=============================================================================
TWO MODES
=============================================================================

    EXPLICIT: discover("shop.controllers.cart")
              discover("shop.controllers.cart.CartController")

        Load exactly that module (every controller defined in it) or that
        one controller class. If it cannot be loaded, log it and register
        nothing.

    IMPLICIT: discover()

        Walk the deployment root recursively and evaluate every module:

        ┌──────────────────────────────────────────────────────────────────┐
        │  root package "microserve.controllers"                           │
        │     ├── greeting.py        → GreetingController                  │
        │     ├── calculate.py       → CalculateController                 │
        │     └── admin/             (subpackages are walked too)          │
        │                                                                  │
        │  search paths (optional)                                         │
        │     ├── /srv/handlers/           loose .py files and packages    │
        │     └── /srv/handlers.zip        packaged archive                │
        └──────────────────────────────────────────────────────────────────┘

        pkgutil does the walking; it reads zip archives through zipimport,
        so both layouts go through the same code path.

=============================================================================
WHAT GETS EXTRACTED
=============================================================================

    @rest_controller
    class GreetingController:
        @get_mapping("/hello")
        def hello(self, name=RequestParam("name", "World"),
                        age=RequestParam("age", "0")):
            ...

    HandlerDescriptor(
        path="/hello",
        parameter_bindings=(ParameterBinding("name", "World"),
                            ParameterBinding("age", "0")),
        invoke=<calls hello(*args), returns str>,
    )

A parameter without a RequestParam marker gets ParameterBinding(None, "").

=============================================================================
FAILURE POLICY
=============================================================================

Nothing here aborts a scan. An unloadable module, a controller whose
constructor raises, a handler with a malformed path or marker: each is
logged at WARNING and skipped, and the rest of the scan carries on.

=============================================================================
"""

from contextlib import contextmanager
from types import ModuleType
from typing import Any, Iterator, List, Optional, Sequence, Set
import importlib
import inspect
import logging
import pkgutil
import sys

from ..errors import DiscoveryError
from .annotations import RequestParam, get_route_path, is_rest_controller
from .registry import HandlerDescriptor, HandlerRegistry, Invoker, ParameterBinding


logger = logging.getLogger(__name__)


DEFAULT_ROOT = "microserve.controllers"

_UNBINDABLE_KINDS = (
    inspect.Parameter.VAR_POSITIONAL,
    inspect.Parameter.VAR_KEYWORD,
    inspect.Parameter.KEYWORD_ONLY,
)


class Discoverer:
    """
    Scans code units for route handlers and registers them.

    Usage:
        registry = HandlerRegistry()
        discoverer = Discoverer(registry)

        discoverer.load()                                   # full scan
        discoverer.load("microserve.controllers.greeting")  # one module

    load() replaces the whole table; discover() only adds to it.
    """

    def __init__(
        self,
        registry: HandlerRegistry,
        root: Optional[str] = DEFAULT_ROOT,
        search_paths: Sequence[str] = (),
    ):
        """
        Args:
            registry: Registry to fill.
            root: Dotted name of the package walked in implicit mode.
                  None or "" skips the package walk.
            search_paths: Directories or .zip archives whose modules are
                          also walked in implicit mode. They are put on
                          sys.path for the duration of a scan.
        """
        self.registry = registry
        self.root = root
        self.search_paths = [str(p) for p in search_paths]

    # =========================================================================
    # ENTRY POINTS
    # =========================================================================

    def load(self, target: Optional[str] = None) -> int:
        """
        Rebuild the registry from one discovery pass, return the route count.

        The pass fills a private table that replaces the live one in a single
        swap, so lookups running meanwhile see the old table or the new one.
        """
        staging = HandlerRegistry()
        self._discover_into(staging, target)
        self.registry.replace(staging.snapshot())
        logger.info(f"Loaded {len(self.registry)} route(s)")
        return len(self.registry)

    def discover(self, target: Optional[str] = None) -> Set[HandlerDescriptor]:
        """
        Discover handlers and register them.

        Args:
            target: Module or controller class to load (explicit mode), or
                    None / "" to scan the deployment root (implicit mode).

        Returns:
            Every descriptor registered during this pass.
        """
        return self._discover_into(self.registry, target)

    def _discover_into(self, registry: HandlerRegistry, target: Optional[str]) -> Set[HandlerDescriptor]:
        found: Set[HandlerDescriptor] = set()

        with self._on_sys_path(self.search_paths):
            if target:
                controllers = self._load_target(target)
            else:
                controllers = [
                    controller
                    for module in self._iter_modules()
                    for controller in self._controllers_in(module)
                ]

            for controller in controllers:
                for descriptor in self._extract(controller):
                    registry.register(descriptor.path, descriptor)
                    found.add(descriptor)
                    logger.info(f"Registered GET {descriptor.path} → {descriptor.name}")

        return found

    # =========================================================================
    # LOADING CODE UNITS
    # =========================================================================

    def _load_target(self, target: str) -> List[type]:
        """Controllers named by an explicit target ([] if it cannot be loaded)."""
        try:
            return self._resolve_target(target)
        except DiscoveryError as e:
            logger.warning(f"Skipping {e.target}: {e.reason}")
            return []

    def _resolve_target(self, target: str) -> List[type]:
        # ─────────────────────────────────────────────────────────────────
        # MODULE FIRST
        # ─────────────────────────────────────────────────────────────────
        try:
            module = importlib.import_module(target)
        except ModuleNotFoundError as e:
            if e.name != target:
                raise DiscoveryError(target, f"import failed: {e!r}") from e
            missing = e
        except Exception as e:
            raise DiscoveryError(target, f"import failed: {e!r}") from e
        else:
            return self._controllers_in(module)

        # ─────────────────────────────────────────────────────────────────
        # THEN "module.ClassName"
        # ─────────────────────────────────────────────────────────────────
        module_name, _, attribute = target.rpartition(".")
        if not module_name:
            raise DiscoveryError(target, f"import failed: {missing!r}") from missing

        try:
            module = importlib.import_module(module_name)
        except Exception as e:
            raise DiscoveryError(target, f"import failed: {e!r}") from e

        controller = getattr(module, attribute, None)
        if controller is None:
            raise DiscoveryError(target, f"module {module_name} has no attribute {attribute}")
        if not is_rest_controller(controller):
            raise DiscoveryError(target, "not a @rest_controller class")

        return [controller]

    def _iter_modules(self) -> Iterator[ModuleType]:
        """Every importable module under the root package and search paths."""
        if self.root:
            try:
                package = importlib.import_module(self.root)
            except Exception as e:
                logger.warning(f"Skipping deployment root {self.root}: {e!r}")
            else:
                yield package
                if hasattr(package, "__path__"):
                    yield from self._walk(package.__path__, prefix=package.__name__ + ".")

        for path in self.search_paths:
            yield from self._walk([path], prefix="")

    def _walk(self, paths: Sequence[str], prefix: str) -> Iterator[ModuleType]:
        for info in pkgutil.walk_packages(paths, prefix=prefix, onerror=self._on_walk_error):
            module = self._import(info.name)
            if module is not None:
                yield module

    def _import(self, name: str) -> Optional[ModuleType]:
        try:
            return importlib.import_module(name)
        except Exception as e:
            logger.warning(f"Skipping module {name}: {e!r}")
            return None

    @staticmethod
    def _on_walk_error(name: str) -> None:
        logger.warning(f"Skipping package {name}: import failed")

    @staticmethod
    @contextmanager
    def _on_sys_path(paths: Sequence[str]) -> Iterator[None]:
        """Temporarily prepend paths to sys.path."""
        added = [p for p in paths if p not in sys.path]
        sys.path[:0] = added
        try:
            yield
        finally:
            for p in added:
                if p in sys.path:
                    sys.path.remove(p)

    @staticmethod
    def _controllers_in(module: ModuleType) -> List[type]:
        """Controller classes defined in module (re-exports are ignored)."""
        return [
            obj for _, obj in inspect.getmembers(module, is_rest_controller)
            if obj.__module__ == module.__name__
        ]

    # =========================================================================
    # EXTRACTING DESCRIPTORS
    # =========================================================================

    def _extract(self, controller: type) -> List[HandlerDescriptor]:
        """Descriptors for every well-formed handler on controller."""
        try:
            instance = controller()
        except Exception as e:
            logger.warning(f"Skipping controller {controller.__qualname__}: cannot instantiate: {e!r}")
            return []

        descriptors = []
        for name, member in inspect.getmembers(controller):
            if name.startswith("__") or get_route_path(member) is None:
                continue
            try:
                descriptors.append(self._describe(controller, name, getattr(instance, name)))
            except DiscoveryError as e:
                logger.warning(f"Skipping handler {e.target}: {e.reason}")
        return descriptors

    def _describe(self, controller: type, name: str, func: Any) -> HandlerDescriptor:
        qualname = f"{controller.__module__}.{controller.__qualname__}.{name}"

        path = get_route_path(func)
        if not isinstance(path, str) or not path.startswith("/"):
            raise DiscoveryError(qualname, f"malformed route path {path!r}")

        try:
            parameters = inspect.signature(func).parameters.values()
        except (TypeError, ValueError) as e:
            raise DiscoveryError(qualname, f"no inspectable signature: {e}") from e

        bindings = []
        for param in parameters:
            if param.kind in _UNBINDABLE_KINDS:
                raise DiscoveryError(qualname, f"parameter {param.name!r} cannot be bound positionally")

            marker = param.default
            if isinstance(marker, RequestParam):
                if not isinstance(marker.value, str) or not isinstance(marker.default_value, str):
                    raise DiscoveryError(qualname, f"malformed RequestParam on {param.name!r}")
                bindings.append(ParameterBinding(marker.value, marker.default_value))
            else:
                bindings.append(ParameterBinding(None, ""))

        return HandlerDescriptor(
            path=path,
            parameter_bindings=tuple(bindings),
            invoke=make_invoker(func),
            name=qualname,
            handler=func,
        )


def make_invoker(func: Any) -> Invoker:
    """
    Wrap func in the uniform signature: one sequence of strings in, one
    string out. Non-string results are converted with str().
    """
    def invoke(args: Sequence[str]) -> str:
        result = func(*args)
        return result if isinstance(result, str) else str(result)

    invoke.__name__ = getattr(func, "__name__", "invoke")
    return invoke
