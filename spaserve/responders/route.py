"""
Fallback documents for route requests (paths without an extension).

In the default single-page mode one fallback file at the root answers
every route. In static mode each directory carries its own fallback and
the document is given a base href pointing at the requested directory.
"""

import logging
from pathlib import Path

from fastapi import Response

from spaserve.config import ServerConfig
from spaserve.paths import resolve_path
from spaserve.responders.documents import base_document, livereload_script
from spaserve.responders.encoder import encode_response, error_response
from spaserve.responders.listing import serve_directory_listing
from spaserve.responders.static import read_file

logger = logging.getLogger(__name__)


def fallback_path(config: ServerConfig, pathname: str) -> Path:
    """Location of the fallback document answering pathname."""
    if config.static:
        return resolve_path(config.root, pathname) / config.fallback_name
    return config.root / config.fallback_name


def route_status(config: ServerConfig, pathname: str) -> int:
    """
    200 for the root path or in static mode, else 301.

    The 301 carries no Location header; clients render the body.
    """
    return 200 if pathname == "/" or config.static else 301


def compose_document(config: ServerConfig, pathname: str, content: str) -> str:
    """Wrap, prefix and suffix the fallback content in serving order."""
    if config.module:
        content = f"<script type='module'>{content}</script>"
    if config.static:
        content = base_document(pathname) + content
    return content + config.inject + livereload_script(config.reload)


async def serve_route(config: ServerConfig, pathname: str) -> Response:
    """Serve the fallback document for pathname, or a directory listing."""
    index = fallback_path(config, pathname)
    if not index.exists():
        return await serve_directory_listing(config, pathname)

    try:
        raw = await read_file(index)
    except OSError as e:
        logger.error(f"Failed to read fallback {index}: {e}")
        return error_response(500)

    document = compose_document(config, pathname, raw.decode("utf-8", errors="replace"))
    return encode_response(document.encode("utf-8"), "html", status_code=route_status(config, pathname))
