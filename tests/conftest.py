# =============================================================================
# File: tests/conftest.py
# Purpose: Shared fixtures: a throwaway static root and app/client builders.
# =============================================================================
import pytest
from starlette.testclient import TestClient

from spa_server.config import DEVELOPMENT, PRODUCTION, Settings
from spa_server.main import create_app

INDEX_HTML = b"<!doctype html><html><body><div id=\"root\"></div></body></html>"
APP_JS = b"console.log('hello from the bundle');\n"
STYLE_CSS = b"body { margin: 0; }\n"


@pytest.fixture
def static_root(tmp_path):
    root = tmp_path / "public"
    (root / "assets").mkdir(parents=True)
    (root / "index.html").write_bytes(INDEX_HTML)
    (root / "app.js").write_bytes(APP_JS)
    (root / "assets" / "style.css").write_bytes(STYLE_CSS)
    # Lives next to the root; must never be reachable.
    (tmp_path / "secret.txt").write_text("do not serve")
    return root


@pytest.fixture
def make_client(static_root):
    def _make(mode=DEVELOPMENT, root=None, base_url="http://testserver", **overrides):
        settings = Settings(mode=mode, static_root=root or static_root, **overrides)
        return TestClient(create_app(settings), base_url=base_url, follow_redirects=False)

    return _make


@pytest.fixture
def dev_client(make_client):
    return make_client(DEVELOPMENT)


@pytest.fixture
def prod_client(make_client):
    return make_client(PRODUCTION, base_url="http://example.com")


@pytest.fixture
def index_html():
    return INDEX_HTML


@pytest.fixture
def app_js():
    return APP_JS


@pytest.fixture
def style_css():
    return STYLE_CSS
