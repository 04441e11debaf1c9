"""Tests for the response encoding policy."""

import gzip

import pytest

from spaserve.responders.encoder import (
    COMPRESSIBLE_EXTENSIONS,
    encode_response,
    error_response,
    file_extension,
)

BODY = "<p>héllo</p>\n".encode("utf-8") * 20


class TestEncodeResponse:
    """Test gzip allow-list handling."""

    def test_allow_list_is_fixed(self):
        """Test the exact set of compressed extensions."""
        assert COMPRESSIBLE_EXTENSIONS == {"js", "css", "html", "json", "xml", "svg"}

    @pytest.mark.parametrize("ext", ["js", "css", "html", "json", "xml", "svg"])
    def test_compressible_extensions_are_gzipped(self, ext):
        """Test gzip round trip for allow-listed extensions."""
        response = encode_response(BODY, ext)
        assert response.status_code == 200
        assert response.headers["content-encoding"] == "gzip"
        assert gzip.decompress(response.body) == BODY

    @pytest.mark.parametrize("ext", ["png", "txt", "woff2", "wasm", "md", "unknownext"])
    def test_other_extensions_are_raw(self, ext):
        """Test that other extensions are sent unmodified."""
        response = encode_response(BODY, ext)
        assert "content-encoding" not in response.headers
        assert response.body == BODY

    def test_content_type(self):
        """Test content type resolution."""
        assert encode_response(BODY, "js").headers["content-type"].startswith("application/javascript")
        assert encode_response(BODY, "png").headers["content-type"] == "image/png"
        assert encode_response(BODY, "unknownext").headers["content-type"] == "application/octet-stream"

    def test_status_code_passthrough(self):
        """Test that the given status code is kept."""
        assert encode_response(BODY, "html", status_code=301).status_code == 301


class TestFileExtension:
    """Test extension extraction."""

    def test_file_extension(self):
        """Test extension after the last dot or slash."""
        assert file_extension("/root/app.JS") == "js"
        assert file_extension("/root/archive.tar.gz") == "gz"
        assert file_extension("/root/v1.2/README") == "readme"


def test_error_response_body_is_status():
    """Test that error bodies carry the status code."""
    response = error_response(404)
    assert response.status_code == 404
    assert response.body == b"404"
