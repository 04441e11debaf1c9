"""
HTTP routes for the development server.
A single catch-all route dispatches every request.
"""

from fastapi import APIRouter, Request, Response

from spaserve.api.routing import RouteKind, classify
from spaserve.paths import decode_pathname, normalize_pathname
from spaserve.responders import serve_route, serve_static_file

router = APIRouter()


def request_pathname(request: Request) -> str:
    """Decoded, normalized pathname of the request."""
    raw = request.scope.get("raw_path") or request.scope["path"].encode("utf-8")
    return normalize_pathname(decode_pathname(raw))


@router.api_route("/{full_path:path}", methods=["GET", "HEAD"], include_in_schema=False)
async def dispatch(request: Request, full_path: str) -> Response:
    """Route the request to the reload hub, a static file or a fallback route."""
    config = request.app.state.config
    decision = classify(config, request_pathname(request))

    if decision.kind == RouteKind.RELOAD:
        return request.app.state.hub.event_stream_response()

    if decision.kind == RouteKind.STATIC:
        return await serve_static_file(decision.file)

    return await serve_route(config, decision.pathname)
