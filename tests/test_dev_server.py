"""Tests for kalenuxer.serve: routing, live reload and the watcher."""
import json
import threading
import urllib.error
import urllib.request

import pytest

from kalenuxer.serve import DevServer, SourceWatcher, resolve_request
from kalenuxer.serve.dev_server import LIVE_RELOAD_SNIPPET, inject_live_reload
from kalenuxer.serve.watcher import diff, scan


@pytest.fixture
def release_dir(tmp_path):
    out = tmp_path / "release"
    (out / "tr").mkdir(parents=True)
    (out / "tr" / "anasayfa.html").write_text("<body>home</body>", encoding="utf-8")
    (out / "about.html").write_text("<body>about</body>", encoding="utf-8")
    (out / "api.php").write_text("<?php ?>", encoding="utf-8")
    (out / "app.js").write_text("x", encoding="utf-8")
    return out


class TestResolveRequest:
    """Tests for resolve_request routing."""

    def test_root_serves_home_page(self, release_dir):
        r = resolve_request(release_dir, "/", "tr/anasayfa.html")
        assert r.status == 200
        assert r.file == release_dir / "tr" / "anasayfa.html"

    def test_root_without_home_page(self, release_dir):
        r = resolve_request(release_dir, "/", "missing.html")
        assert (r.status, r.text) == (404, "Home page not found")

    def test_exact_file(self, release_dir):
        assert resolve_request(release_dir, "/app.js", "x").file == release_dir / "app.js"

    def test_html_then_php_rewrite(self, release_dir):
        """/about -> about.html, /api -> api.php."""
        assert resolve_request(release_dir, "/about", "x").file == release_dir / "about.html"
        assert resolve_request(release_dir, "/api?x=1", "x").file == release_dir / "api.php"

    def test_directory_index(self, release_dir):
        """/en/ and /en serve en/index.html."""
        (release_dir / "en").mkdir()
        (release_dir / "en" / "index.html").write_text("<p>en</p>", encoding="utf-8")
        assert resolve_request(release_dir, "/en/", "x").file == release_dir / "en" / "index.html"
        assert resolve_request(release_dir, "/en", "x").file == release_dir / "en" / "index.html"

    def test_not_found_text(self, release_dir):
        r = resolve_request(release_dir, "/nope", "x")
        assert (r.status, r.text) == (404, "404 Not Found")

    def test_not_found_page(self, release_dir):
        (release_dir / "404.html").write_text("gone", encoding="utf-8")
        r = resolve_request(release_dir, "/nope", "x")
        assert r.status == 404
        assert r.file == release_dir / "404.html"

    def test_traversal_blocked(self, release_dir, tmp_path):
        (tmp_path / "secret.txt").write_text("s", encoding="utf-8")
        r = resolve_request(release_dir, "/../secret.txt", "x")
        assert r.status == 404


class TestLiveReload:
    """Tests for inject_live_reload."""

    def test_before_body_close(self):
        out = inject_live_reload(b"<html><body>x</body></html>")
        assert out.endswith(b"</body></html>")
        assert LIVE_RELOAD_SNIPPET.encode() in out

    def test_appended_without_body(self):
        assert inject_live_reload(b"<p>x</p>").startswith(b"<p>x</p><script>")


class TestWatcher:
    """Tests for scan, diff and SourceWatcher."""

    def test_diff_events(self):
        events = diff({"a": 1, "b": 1}, {"a": 2, "c": 1})
        assert events == [("change", "a"), ("unlink", "b"), ("add", "c")]

    def test_scan_skips_missing_dirs(self, tmp_path):
        (tmp_path / "site").mkdir()
        (tmp_path / "site" / "a.css").write_text("x", encoding="utf-8")
        snapshot = scan([tmp_path / "site", tmp_path / "datas"])
        assert list(snapshot) == [str(tmp_path / "site" / "a.css")]

    def test_poll_schedules_one_rebuild(self, tmp_path):
        """Several changes in one poll fire a single debounced callback."""
        site = tmp_path / "site"
        site.mkdir()
        fired = threading.Event()
        calls = []

        def on_change():
            calls.append(1)
            fired.set()

        watcher = SourceWatcher([site], on_change, debounce_ms=10)
        watcher._snapshot = scan([site])
        (site / "a.css").write_text("x", encoding="utf-8")
        (site / "b.css").write_text("y", encoding="utf-8")

        events = watcher.poll()

        assert [e for e, _ in events] == ["add", "add"]
        assert fired.wait(5)
        watcher.stop()
        assert calls == [1]

    def test_no_change_no_rebuild(self, tmp_path):
        watcher = SourceWatcher([tmp_path], lambda: pytest.fail("unexpected rebuild"))
        watcher._snapshot = scan([tmp_path])
        assert watcher.poll() == []
        watcher.stop()


class TestDevServer:
    """End-to-end test of DevServer over HTTP."""

    def test_serves_built_site(self, build_ctx, capsys):
        server = DevServer(build_ctx, port=0, open_browser=False)
        server.start()
        thread = threading.Thread(target=server.httpd.serve_forever, daemon=True)
        thread.start()
        base = f"http://127.0.0.1:{server.port}"
        try:
            with urllib.request.urlopen(base + "/") as resp:
                body = resp.read().decode("utf-8")
            assert "index" in body
            assert "<script>" in body, "HTML gets the live-reload snippet"

            with urllib.request.urlopen(base + "/en/about") as resp:
                assert "about" in resp.read().decode("utf-8")

            with urllib.request.urlopen(base + "/__kalenuxer/build") as resp:
                assert json.loads(resp.read()) == {"build": 1}

            with pytest.raises(urllib.error.HTTPError) as exc:
                urllib.request.urlopen(base + "/missing")
            assert exc.value.code == 404
        finally:
            server.httpd.shutdown()
            server.stop()
            thread.join(timeout=5)

    def test_rebuild_bumps_build_id(self, build_ctx, capsys):
        server = DevServer(build_ctx, port=0, open_browser=False)
        server.rebuild()
        server.rebuild()
        assert server.build_id == 2
