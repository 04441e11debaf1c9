"""
Request classification.

Any path whose final segment contains a dot is a static file request and
is never subject to fallback resolution. Everything else is a route
request, answered by an implicit index.html when one exists and by the
fallback document otherwise.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from spaserve.config import ServerConfig
from spaserve.paths import is_route_request, resolve_path
from spaserve.responders.route import fallback_path

LIVERELOAD_PATH = "/livereload"


class RouteKind(str, Enum):
    """How a request is answered."""
    RELOAD = "reload"
    STATIC = "static"
    ROUTE = "route"


@dataclass(frozen=True)
class RouteDecision:
    """Outcome of classifying one normalized pathname."""
    kind: RouteKind
    pathname: str
    file: Optional[Path] = None


def classify(config: ServerConfig, pathname: str) -> RouteDecision:
    """Decide which responder answers pathname (already normalized)."""
    if config.reload and pathname == LIVERELOAD_PATH:
        return RouteDecision(RouteKind.RELOAD, pathname)

    if not is_route_request(pathname):
        return RouteDecision(RouteKind.STATIC, pathname, resolve_path(config.root, pathname))

    # Plain concatenation: only "/" and paths ending in "/" find an index.
    # An index that is itself the fallback document goes through the route
    # responder so it receives the injected snippets.
    index = resolve_path(config.root, pathname + "index.html")
    if index.exists() and index != fallback_path(config, pathname):
        return RouteDecision(RouteKind.STATIC, pathname, index)

    return RouteDecision(RouteKind.ROUTE, pathname)
