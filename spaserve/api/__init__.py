"""HTTP API module."""

from spaserve.api.routes import router
from spaserve.api.middleware import DevServerMiddleware
from spaserve.api.routing import RouteDecision, RouteKind, classify

__all__ = ["router", "DevServerMiddleware", "RouteDecision", "RouteKind", "classify"]
