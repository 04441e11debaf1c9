"""
Serving files requested by exact path.
"""

import asyncio
import logging
from pathlib import Path

from fastapi import Response

from spaserve.responders.encoder import encode_response, error_response, file_extension

logger = logging.getLogger(__name__)


async def read_file(path: Path) -> bytes:
    """Read a file without blocking the event loop. Raises OSError."""
    return await asyncio.to_thread(path.read_bytes)


async def serve_static_file(path: Path) -> Response:
    """Serve path as-is: 404 when absent, 500 when unreadable."""
    logger.info(f"Serving static file {path}")

    if not path.exists():
        return error_response(404)

    try:
        body = await read_file(path)
    except OSError as e:
        logger.error(f"Failed to read {path}: {e}")
        return error_response(500)

    return encode_response(body, file_extension(path.name))
