"""
Exception types raised inside microserve.

None of these are meant to reach the socket. The discoverer catches
DiscoveryError and moves on, the dispatcher turns InvocationFault into a
500 response, and RouteNotFound is only raised for callers who ask for it
via HandlerRegistry.require().
"""


class MicroServeError(Exception):
    """Base class for microserve errors."""


class DiscoveryError(MicroServeError):
    """A code unit could not be loaded or carries a malformed marker."""

    def __init__(self, target: str, reason: str):
        super().__init__(f"{target}: {reason}")
        self.target = target
        self.reason = reason


class RouteNotFound(MicroServeError, LookupError):
    """No handler is registered under the path."""

    def __init__(self, path: str):
        super().__init__(f"No route registered for {path!r}")
        self.path = path


class InvocationFault(MicroServeError):
    """A handler raised, or was called with the wrong number of arguments."""

    def __init__(self, path: str, cause: BaseException):
        super().__init__(f"Handler for {path!r} failed: {cause}")
        self.path = path
        self.cause = cause
