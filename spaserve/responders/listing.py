"""
Directory listing served when a route has no fallback document.
"""

import asyncio

from fastapi import Response
from fastapi.responses import HTMLResponse

from spaserve.config import ServerConfig
from spaserve.paths import resolve_path
from spaserve.responders.documents import base_document, livereload_script
from spaserve.responders.encoder import error_response
from spaserve.support.listing import render_listing


async def serve_directory_listing(config: ServerConfig, pathname: str) -> Response:
    """List the directory at pathname, or 404 when there is none."""
    directory = resolve_path(config.root, pathname)
    if not directory.is_dir():
        return error_response(404)

    listing = await asyncio.to_thread(render_listing, directory, pathname)
    body = base_document(pathname) + listing + livereload_script(config.reload)
    return HTMLResponse(content=body, status_code=200)
