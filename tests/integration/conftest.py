"""Fixtures for integration tests.

Integration tests launch a real Chromium against pages served from
tests/fixtures/pages by a local HTTP server. They are skipped when no
browser executable can be located.
"""

import asyncio
import http.server
import socket
import socketserver
import threading
from pathlib import Path
from typing import Any

import pytest

from remoteclick.core.engine import InteractionEngine
from remoteclick.utils.config import AppConfig, ConfigLoader

PAGES_DIR = Path(__file__).parent.parent / "fixtures" / "pages"


class QuietHandler(http.server.SimpleHTTPRequestHandler):
    """Serves fixture pages without logging each request."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, directory=str(PAGES_DIR), **kwargs)

    def log_message(self, format: str, *args: Any) -> None:
        pass


class FixtureServer:
    """Local HTTP server for the fixture pages."""

    def __init__(self, port: int):
        self.port = port
        self._server: socketserver.TCPServer | None = None
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Start the server in a background thread."""
        self._server = socketserver.ThreadingTCPServer(
            ("127.0.0.1", self.port), QuietHandler
        )
        self._server.daemon_threads = True
        self._thread = threading.Thread(target=self._server.serve_forever)
        self._thread.daemon = True
        self._thread.start()

    def stop(self) -> None:
        if self._server:
            self._server.shutdown()
            self._server.server_close()
            if self._thread:
                self._thread.join(timeout=5)
            self._server = None
            self._thread = None

    @property
    def base_url(self) -> str:
        return f"http://127.0.0.1:{self.port}"


def get_free_port() -> int:
    """Get a free port on localhost."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture(scope="session")
def fixture_server():
    """Serve tests/fixtures/pages for the whole session."""
    server = FixtureServer(get_free_port())
    server.start()
    yield server
    server.stop()


@pytest.fixture(scope="session")
def browser_config() -> AppConfig:
    """Environment configuration tuned for fast local pages.

    Skips the calling test when no browser executable can be located.
    """
    config = ConfigLoader.load()
    config.headless = True
    config.nav_timeout = 15000
    config.nav_retry_delay = 100
    config.default_wait = 0
    report = asyncio.run(InteractionEngine(config).liveness())
    if not report.ok:
        pytest.skip(f"No browser executable found (checked {report.candidates})")
    return config


@pytest.fixture
def engine(browser_config: AppConfig) -> InteractionEngine:
    return InteractionEngine(browser_config)
