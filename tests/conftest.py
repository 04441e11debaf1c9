"""Shared fixtures: a small site tree and app factory."""

import pytest
from fastapi.testclient import TestClient

from spaserve.config import ServerConfig
from spaserve.main import create_app


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Keep host environment and any .env file out of the tests."""
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def site(tmp_path):
    """
    root/
      index.html
      app.js
      logo.png
      data.json
      docs/guide.txt
      blog/index.html
      pages/about/
    secret.txt (outside root)
    """
    root = tmp_path / "site"
    root.mkdir()
    (root / "index.html").write_text("<h1>Home</h1>")
    (root / "app.js").write_text("console.log('app')")
    (root / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n\x00\x01binary")
    (root / "data.json").write_text('{"ok": true}')
    (root / "docs").mkdir()
    (root / "docs" / "guide.txt").write_text("guide")
    (root / "blog").mkdir()
    (root / "blog" / "index.html").write_text("<h1>Blog</h1>")
    (root / "pages" / "about").mkdir(parents=True)
    (tmp_path / "secret.txt").write_text("top secret")
    return root


@pytest.fixture
def make_client():
    """Build a TestClient for a config; the lifespan (watcher) is not started."""
    def factory(**options) -> TestClient:
        config = ServerConfig(**options)
        return TestClient(create_app(config))
    return factory
