"""Responders producing the HTTP response for each request kind."""

from spaserve.responders.encoder import (
    COMPRESSIBLE_EXTENSIONS,
    encode_response,
    error_response,
    file_extension,
)
from spaserve.responders.documents import LIVERELOAD_SCRIPT, base_document, livereload_script
from spaserve.responders.static import read_file, serve_static_file
from spaserve.responders.listing import serve_directory_listing
from spaserve.responders.route import serve_route, fallback_path

__all__ = [
    "COMPRESSIBLE_EXTENSIONS",
    "encode_response",
    "error_response",
    "file_extension",
    "LIVERELOAD_SCRIPT",
    "base_document",
    "livereload_script",
    "read_file",
    "serve_static_file",
    "serve_directory_listing",
    "serve_route",
    "fallback_path",
]
