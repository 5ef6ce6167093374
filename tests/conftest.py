"""
Shared test fixtures: a local release server and config factory.
"""

from __future__ import annotations

import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

import pytest

from gohome_launcher.core.config.loader import LauncherConfig


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


# ── Release server ─────────────────────────────────────────────


class ReleaseServer:
    """Serves canned ``(status, headers, body)`` responses by path."""

    def __init__(self, httpd: ThreadingHTTPServer):
        self.httpd = httpd
        self.routes: dict[str, tuple[int, dict[str, str], bytes]] = {}
        self.requests: list[str] = []

    @property
    def base_url(self) -> str:
        host, port = self.httpd.server_address[:2]
        return f"http://{host}:{port}"

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def add(self, path: str, body: bytes = b"", status: int = 200,
            headers: dict[str, str] | None = None) -> None:
        self.routes[path] = (status, headers or {}, body)

    def redirect(self, path: str, location: str, status: int = 302) -> None:
        self.add(path, status=status, headers={"Location": location})


def _handler_for(server: ReleaseServer) -> type[BaseHTTPRequestHandler]:
    class Handler(BaseHTTPRequestHandler):
        def do_GET(self) -> None:  # noqa: N802
            server.requests.append(self.path)
            status, headers, body = server.routes.get(self.path, (404, {}, b"not found"))
            self.send_response(status)
            for key, value in headers.items():
                self.send_header(key, value)
            if "Content-Length" not in headers:
                self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, format, *args) -> None:
            pass

    return Handler


@pytest.fixture
def release_server():
    """A threaded HTTP server on an ephemeral localhost port."""
    httpd = ThreadingHTTPServer(("127.0.0.1", 0), BaseHTTPRequestHandler)
    server = ReleaseServer(httpd)
    httpd.RequestHandlerClass = _handler_for(server)

    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    try:
        yield server
    finally:
        httpd.shutdown()
        httpd.server_close()
        thread.join(timeout=5)


# ── Config ─────────────────────────────────────────────────────


@pytest.fixture
def make_config(tmp_path: Path, release_server: ReleaseServer):
    """Factory for a LauncherConfig pointed at the local release server."""

    def factory(**overrides) -> LauncherConfig:
        data = {
            "tool": "tool",
            "version": "1.2.3",
            "host": "host",
            "owner": "owner",
            "repo": "repo",
            "url_template": (
                release_server.base_url
                + "/{owner}/{repo}/releases/download/v{version}/{filename}"
            ),
            "install_dir": tmp_path / "bin",
        }
        data.update(overrides)
        return LauncherConfig(**data)

    return factory
