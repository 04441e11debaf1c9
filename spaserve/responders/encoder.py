"""
Response encoding policy.
Text-like assets are gzip-compressed, everything else is sent as-is.
"""

import gzip
import re

from fastapi import Response

from spaserve.support.mime import mime_type

# Fixed allow-list; content is never sniffed
COMPRESSIBLE_EXTENSIONS = frozenset({"js", "css", "html", "json", "xml", "svg"})


def file_extension(path: str) -> str:
    """Substring after the last dot or slash, lower-cased."""
    return re.sub(r"^.*[./\\]", "", str(path)).lower()


def encode_response(body: bytes, ext: str, status_code: int = 200) -> Response:
    """Build a response for body, compressing it when ext is on the allow-list."""
    headers = {}
    if ext in COMPRESSIBLE_EXTENSIONS:
        body = gzip.compress(body)
        headers["content-encoding"] = "gzip"

    return Response(
        content=body,
        status_code=status_code,
        headers=headers,
        media_type=mime_type(ext),
    )


def error_response(status_code: int) -> Response:
    """Bare error response whose body is the status code."""
    return Response(content=str(status_code), status_code=status_code)
