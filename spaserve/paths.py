"""
Request path decoding, normalization and resolution under the served root.
"""

import logging
import posixpath
import re
from pathlib import Path
from urllib.parse import unquote_to_bytes

logger = logging.getLogger(__name__)

# "%" not starting a two-digit hex escape
MALFORMED_ESCAPE = re.compile(rb"%(?![0-9A-Fa-f]{2})")


def decode_pathname(raw: bytes) -> str:
    """
    Decode a percent-escaped request path.

    Malformed input (a stray "%" or escapes that are not valid UTF-8) is
    logged and replaced by the root path; the request itself never fails.
    """
    raw = raw.split(b"?", 1)[0]
    if MALFORMED_ESCAPE.search(raw):
        logger.warning(f"Malformed escape in request path {raw!r}")
        return "/"
    try:
        return unquote_to_bytes(raw).decode("utf-8")
    except UnicodeDecodeError as e:
        logger.warning(f"Could not decode request path {raw!r}: {e}")
        return "/"


def normalize_pathname(pathname: str) -> str:
    """
    Collapse separators, "." and ".." segments into an absolute path.

    The result always starts with "/" and never contains a ".." segment,
    so joining it under the root cannot escape the root. A trailing slash
    is kept, it marks a directory request.
    """
    path = pathname.replace("\\", "/")
    trailing = path.endswith("/")
    path = posixpath.normpath("/" + path.lstrip("/"))
    if trailing and path != "/":
        path += "/"
    return path


def resolve_path(root: Path, pathname: str) -> Path:
    """Map a normalized pathname to a location under root."""
    return root.joinpath(normalize_pathname(pathname).lstrip("/"))


def is_route_request(pathname: str) -> bool:
    """A route request has no dot in its final segment."""
    return "." not in pathname.split("/")[-1]


def directory_href(pathname: str) -> str:
    """Normalized directory of pathname, with leading and trailing slash."""
    path = posixpath.normpath("/" + pathname.strip("/"))
    return path if path == "/" else path + "/"
