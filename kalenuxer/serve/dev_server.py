"""Development server for dist/release with rebuild-on-change and live reload.

Routing:
    /                  -> settings home_page, else 404 "Home page not found"
    /<path>            -> the file itself, then <path>/index.html, then
                          <path>.html, then <path>.php
    anything else      -> 404.html with status 404, else "404 Not Found"

HTML responses carry a small script that polls LIVE_RELOAD_PATH and reloads
the page when the build counter moves.
"""
import json
import logging
import mimetypes
import threading
import webbrowser
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from urllib.parse import unquote, urlsplit

from ..build.prepare import Processor, process_project
from ..config.project import BuildContext
from ..core.constants import (
    DEV_SERVER_HOST,
    DEV_SERVER_PORT,
    LIVE_RELOAD_PATH,
    LIVE_RELOAD_POLL_MS,
    DIRECTORY_INDEX,
    NOT_FOUND_PAGE,
)
from .watcher import SourceWatcher

logger = logging.getLogger("kalenuxer.dev_server")

LIVE_RELOAD_SNIPPET = """<script>
(function(){var b=null;setInterval(function(){fetch("%(path)s").then(function(r){return r.json()})
.then(function(d){if(b!==null&&d.build!==b){location.reload()}b=d.build}).catch(function(){})},%(ms)d)})();
</script>""" % {"path": LIVE_RELOAD_PATH, "ms": LIVE_RELOAD_POLL_MS}


@dataclass
class Resolved:
    """Routing decision for one request path."""
    status: int
    file: Path | None = None
    text: str | None = None


def _inside(root: Path, candidate: Path) -> bool:
    try:
        candidate.resolve().relative_to(root.resolve())
    except ValueError:
        return False
    return True


def resolve_request(output_dir: Path, url_path: str, home_page: str) -> Resolved:
    """Map a request path onto dist/release."""
    path = unquote(urlsplit(url_path).path)

    if path == "/":
        home = output_dir / home_page
        if home.is_file():
            return Resolved(200, file=home)
        return Resolved(404, text="Home page not found")

    rel = path.strip("/")
    candidates = (
        output_dir / rel,
        output_dir / rel / DIRECTORY_INDEX,
        output_dir / (rel + ".html"),
        output_dir / (rel + ".php"),
    )
    for candidate in candidates:
        if rel and candidate.is_file() and _inside(output_dir, candidate):
            return Resolved(200, file=candidate)

    not_found = output_dir / NOT_FOUND_PAGE
    if not_found.is_file():
        return Resolved(404, file=not_found)
    return Resolved(404, text="404 Not Found")


def inject_live_reload(body: bytes) -> bytes:
    """Insert the live-reload script before </body>, or append it."""
    snippet = LIVE_RELOAD_SNIPPET.encode("utf-8")
    idx = body.lower().rfind(b"</body>")
    if idx == -1:
        return body + snippet
    return body[:idx] + snippet + body[idx:]


class DevServer:
    """Builds the project, serves dist/release and rebuilds on source changes."""

    def __init__(
        self,
        ctx: BuildContext,
        port: int = DEV_SERVER_PORT,
        host: str = DEV_SERVER_HOST,
        open_browser: bool = True,
        processors: dict[str, Processor] | None = None,
    ):
        self.ctx = ctx
        self.port = port
        self.host = host
        self.open_browser = open_browser
        self.processors = processors
        self.build_id = 0
        self._build_lock = threading.Lock()
        self.watcher = SourceWatcher([ctx.site_dir, ctx.datas_dir], self.rebuild)
        self.httpd: ThreadingHTTPServer | None = None

    @property
    def url(self) -> str:
        return f"http://localhost:{self.port}/"

    def rebuild(self) -> None:
        """Run prepare; overlapping calls wait for the running build."""
        with self._build_lock:
            logger.info("[DevServer] Rebuilding...")
            process_project(self.ctx, self.processors)
            self.build_id += 1

    def make_handler(self) -> type[BaseHTTPRequestHandler]:
        server = self

        class Handler(BaseHTTPRequestHandler):
            def do_GET(self) -> None:  # noqa: N802
                if urlsplit(self.path).path == LIVE_RELOAD_PATH:
                    self._send(200, json.dumps({"build": server.build_id}).encode("utf-8"),
                               "application/json")
                    return

                resolved = resolve_request(
                    server.ctx.output_dir, self.path, server.ctx.settings.home_page
                )
                if resolved.file is None:
                    self._send(resolved.status, (resolved.text or "").encode("utf-8"),
                               "text/plain; charset=utf-8")
                    return

                body = resolved.file.read_bytes()
                ctype = mimetypes.guess_type(resolved.file.name)[0] or "application/octet-stream"
                if resolved.file.suffix == ".html":
                    body = inject_live_reload(body)
                    ctype = "text/html; charset=utf-8"
                self._send(resolved.status, body, ctype)

            def _send(self, status: int, body: bytes, ctype: str) -> None:
                self.send_response(status)
                self.send_header("Content-Type", ctype)
                self.send_header("Content-Length", str(len(body)))
                self.send_header("Cache-Control", "no-store")
                self.end_headers()
                self.wfile.write(body)

            def log_message(self, format: str, *args) -> None:
                logger.debug("%s - %s", self.address_string(), format % args)

        return Handler

    def start(self) -> None:
        """Initial build, bind the HTTP server and start watching sources."""
        self.rebuild()
        self.httpd = ThreadingHTTPServer((self.host, self.port), self.make_handler())
        self.port = self.httpd.server_address[1]
        self.watcher.start()
        logger.info("Dev server running: %s", self.url)

    def serve_forever(self) -> None:
        self.start()
        if self.open_browser:
            webbrowser.open(self.url)
        try:
            self.httpd.serve_forever()
        finally:
            self.stop()

    def stop(self) -> None:
        self.watcher.stop()
        if self.httpd is not None:
            self.httpd.server_close()
            self.httpd = None


def start_dev_server(
    ctx: BuildContext,
    port: int = DEV_SERVER_PORT,
    open_browser: bool = True,
) -> None:
    """Build, serve and watch until interrupted."""
    DevServer(ctx, port=port, open_browser=open_browser).serve_forever()
