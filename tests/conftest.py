import gzip
import json
from pathlib import Path

import brotli
import pytest

from webdist.config import get_settings
from webdist.routes.debug import reset_metrics

INDEX_TEMPLATE = (
    "<!doctype html>\n<html><head>"
    '<link rel="stylesheet" href="dist/index.css">'
    "</head><body>"
    '<script src="dist/index.js"></script>'
    "</body></html>\n"
)
HASHED_JS = "console.log('hello from a hashed bundle');\n" * 20
HASHED_CSS = "body { margin: 0; padding: 0; }\n" * 20


@pytest.fixture(autouse=True)
def test_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("APP_ENV", "dev")
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    monkeypatch.delenv("WEB_ROOT", raising=False)
    monkeypatch.delenv("BIND_HOST", raising=False)
    monkeypatch.delenv("BIND_PORT", raising=False)
    monkeypatch.setattr("webdist.cli.main.configure_logging", lambda *a, **k: None)
    get_settings.cache_clear()
    reset_metrics()
    yield
    get_settings.cache_clear()
    reset_metrics()


@pytest.fixture
def web_root(tmp_path: Path) -> Path:
    """A built web root: hashed JS with only a .gz sibling, CSS with both."""
    dist = tmp_path / "dist"
    dist.mkdir()
    (dist / "placeholder").write_text("")
    (tmp_path / "index.html").write_text(INDEX_TEMPLATE)
    (dist / "entry-point-map.json").write_text(
        json.dumps({"src/index.js": "dist/index-ab12cd.js", "src/index.css": "dist/index-ef34.css"})
    )
    (dist / "index-ab12cd.js").write_text(HASHED_JS)
    (dist / "index-ab12cd.js.gz").write_bytes(gzip.compress(HASHED_JS.encode()))
    (dist / "index-ef34.css").write_text(HASHED_CSS)
    (dist / "index-ef34.css.gz").write_bytes(gzip.compress(HASHED_CSS.encode()))
    (dist / "index-ef34.css.br").write_bytes(brotli.compress(HASHED_CSS.encode()))
    return tmp_path
