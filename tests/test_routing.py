"""Tests for path normalization and request classification."""

import pytest

from spaserve.api.routing import RouteKind, classify
from spaserve.config import ServerConfig
from spaserve.paths import (
    decode_pathname,
    directory_href,
    is_route_request,
    normalize_pathname,
    resolve_path,
)


class TestDecodePathname:
    """Test percent-decoding of raw request paths."""

    def test_plain_and_escaped(self):
        """Test plain and percent-escaped paths."""
        assert decode_pathname(b"/app.js") == "/app.js"
        assert decode_pathname(b"/my%20file.txt") == "/my file.txt"
        assert decode_pathname(b"/caf%C3%A9/") == "/café/"

    def test_query_string_is_dropped(self):
        """Test that the query string is ignored."""
        assert decode_pathname(b"/app.js?v=3") == "/app.js"

    def test_invalid_utf8_falls_back_to_root(self):
        """Test escapes that are not valid UTF-8."""
        assert decode_pathname(b"/%FF%FE") == "/"

    def test_malformed_escape_falls_back_to_root(self):
        """Test a stray "%" without two hex digits."""
        assert decode_pathname(b"/%ZZ") == "/"
        assert decode_pathname(b"/50%") == "/"
        assert decode_pathname(b"/a%2") == "/"
        assert decode_pathname(b"/ok%2Fpath%41") == "/ok/pathA"


class TestNormalizePathname:
    """Test collapsing of separators and dot segments."""

    def test_always_absolute(self):
        """Test that results start with a single slash."""
        assert normalize_pathname("") == "/"
        assert normalize_pathname("app.js") == "/app.js"
        assert normalize_pathname("//double//slash") == "/double/slash"

    def test_dot_segments(self):
        """Test collapsing of "." and ".." segments."""
        assert normalize_pathname("/a/./b/../c.js") == "/a/c.js"
        assert normalize_pathname("/a/b/..") == "/a"

    def test_trailing_slash_kept(self):
        """Test that directory requests keep their slash."""
        assert normalize_pathname("/docs/") == "/docs/"
        assert normalize_pathname("/docs/../blog/") == "/blog/"

    def test_backslashes(self):
        """Test backslash separators."""
        assert normalize_pathname("\\a\\b.txt") == "/a/b.txt"

    @pytest.mark.parametrize("pathname", [
        "/../secret.txt",
        "../../secret.txt",
        "/a/../../../secret.txt",
        "/..\\..\\secret.txt",
        "/./../.././secret.txt",
    ])
    def test_traversal_is_stripped(self, pathname):
        """Test removal of leading traversal."""
        normalized = normalize_pathname(pathname)
        assert normalized == "/secret.txt"
        assert ".." not in normalized.split("/")

    @pytest.mark.parametrize("pathname", [
        "/../secret.txt",
        "/../../etc/passwd",
        "/docs/../../secret.txt",
        "..",
    ])
    def test_resolved_path_confined_under_root(self, tmp_path, pathname):
        """Test that resolved paths stay under root."""
        root = tmp_path / "site"
        resolved = resolve_path(root, pathname).resolve()
        assert resolved == root.resolve() or root.resolve() in resolved.parents


class TestDirectoryHref:
    """Test base href derivation."""

    def test_directory_href(self):
        """Test base href for files and directories."""
        assert directory_href("/") == "/"
        assert directory_href("") == "/"
        assert directory_href("/docs") == "/docs/"
        assert directory_href("/docs/") == "/docs/"
        assert directory_href("/a/b/../c") == "/a/c/"


class TestClassify:
    """Test dispatch decisions."""

    @pytest.mark.parametrize("pathname", [
        "/app.js",
        "/missing.png",
        "/docs/guide.txt",
        "/.hidden",
        "/livereload.js",
    ])
    def test_dotted_final_segment_is_static(self, site, pathname):
        """Test that dotted paths always go to the static responder."""
        config = ServerConfig(root=site)
        decision = classify(config, pathname)
        assert decision.kind == RouteKind.STATIC
        assert decision.file == resolve_path(config.root, pathname)

    @pytest.mark.parametrize("pathname", [
        "/docs/",
        "/pages/about",
        "/some/route",
        "/v1.2/",
        "/blog",
    ])
    def test_undotted_final_segment_is_route(self, site, pathname):
        """Test that undotted paths go to route handling."""
        config = ServerConfig(root=site)
        assert is_route_request(pathname)
        assert classify(config, pathname).kind == RouteKind.ROUTE

    def test_implicit_index_is_static(self, site):
        """Test a directory index served as a file."""
        config = ServerConfig(root=site)
        decision = classify(config, "/blog/")
        assert decision.kind == RouteKind.STATIC
        assert decision.file == config.root / "blog" / "index.html"

    def test_index_that_is_the_fallback_is_a_route(self, site):
        """Test that the fallback index goes through the route responder."""
        assert classify(ServerConfig(root=site), "/").kind == RouteKind.ROUTE
        assert classify(ServerConfig(root=site, static=True), "/blog/").kind == RouteKind.ROUTE

        # A differently named fallback leaves index.html a plain file
        decision = classify(ServerConfig(root=site, fallback="shell.html"), "/")
        assert decision.kind == RouteKind.STATIC
        assert decision.file == site.resolve() / "index.html"

    def test_livereload_only_when_enabled(self, site):
        """Test /livereload dispatch depends on reload."""
        assert classify(ServerConfig(root=site, reload=True), "/livereload").kind == RouteKind.RELOAD
        assert classify(ServerConfig(root=site, reload=False), "/livereload").kind == RouteKind.ROUTE


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
