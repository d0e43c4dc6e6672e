"""Pytest fixtures for Kalenuxer tests."""
import json
import os

import pytest

from kalenuxer.config import open_project
from kalenuxer.core.constants import ALL_CATEGORIES
from kalenuxer.ledger.store import Ledger

# Whole-millisecond mtimes survive every filesystem's timestamp resolution
BASE_MTIME_NS = 1_500_000_000_123_000_000


def set_mtime(path, seconds_offset: int = 0) -> int:
    """Pin path's mtime to BASE_MTIME_NS + seconds_offset seconds; returns the ns value."""
    ns = BASE_MTIME_NS + seconds_offset * 1_000_000_000
    os.utime(path, ns=(ns, ns))
    return ns


@pytest.fixture
def mtime():
    """Expose set_mtime to tests."""
    return set_mtime


@pytest.fixture
def ledger(tmp_path):
    """Ledger with a backing file registered for every category under tmp_path/times."""
    return Ledger({c: tmp_path / "times" / f"{c}.json" for c in ALL_CATEGORIES})


@pytest.fixture
def source_file(tmp_path):
    """A source file with a pinned mtime."""
    path = tmp_path / "src" / "a.css"
    path.parent.mkdir(parents=True)
    path.write_text("body { color: red; }", encoding="utf-8")
    set_mtime(path)
    return path


@pytest.fixture
def project_root(tmp_path):
    """websites/demo with settings.json, css, html and a general template."""
    root = tmp_path / "workspace"
    project = root / "websites" / "demo"
    files = {
        "site/css/a.css": "body {}",
        "site/js/app.js": "console.log(1);",
        "site/html/en/index.html": "<html><body>index</body></html>",
        "site/html/en/about.html": "<html><body>about</body></html>",
        "site/html/fr/index.html": "<html><body>accueil</body></html>",
        "site/template/en/general/header.html": "<header></header>",
    }
    for offset, (rel, text) in enumerate(files.items()):
        path = project / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        set_mtime(path, offset)
    (project / "settings.json").write_text(json.dumps({
        "languages": ["en", "fr"],
        "home_page": "en/index.html",
        "upload_dir": "uploads",
    }), encoding="utf-8")
    return root


@pytest.fixture
def project_dir(project_root):
    return project_root / "websites" / "demo"


@pytest.fixture
def build_ctx(project_root):
    """BuildContext for the demo project, test base."""
    return open_project("demo", base="test", root=project_root)
