"""Shared pytest fixtures for remoteclick tests.

Fixtures include Playwright page and frame fakes, a fake browser session
factory, a test configuration and a fresh state machine.
"""

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from remoteclick.core.states import InteractionStateMachine
from remoteclick.utils.config import AppConfig


def make_frame(url: str) -> MagicMock:
    """Build a fake Playwright frame at ``url``."""
    frame = MagicMock()
    frame.url = url
    frame.evaluate = AsyncMock(return_value=True)
    frame.wait_for_selector = AsyncMock()
    frame.click = AsyncMock()
    return frame


def make_page(url: str = "https://example.test/form", status: int | None = 200):
    """Build a fake Playwright page whose navigation succeeds.

    Args:
        url: Value of ``page.url``.
        status: Status of the navigation response, None for no response.
    """
    page = MagicMock()
    page.url = url
    response = None
    if status is not None:
        response = MagicMock()
        response.status = status
    page.goto = AsyncMock(return_value=response)
    page.wait_for_load_state = AsyncMock()
    page.title = AsyncMock(return_value="Form")
    page.content = AsyncMock(return_value="<html><body>form</body></html>")
    page.evaluate = AsyncMock(return_value=True)
    page.wait_for_selector = AsyncMock()
    page.click = AsyncMock()
    page.frames = [make_frame(url)]
    return page


class FakeSession:
    """Stands in for BrowserSession without launching anything.

    Attributes:
        page: The fake page handed to the pipeline.
        open_error: Raised from ``__aenter__`` when set.
        opened: Whether the session was entered.
        closed: Whether the session was exited.
    """

    def __init__(self, page: MagicMock, open_error: Exception | None = None):
        self.page = page
        self.open_error = open_error
        self.opened = False
        self.closed = False

    async def __aenter__(self) -> "FakeSession":
        self.opened = True
        if self.open_error is not None:
            raise self.open_error
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.closed = True

    async def html(self) -> str:
        return await self.page.content()


class FakeSessionFactory:
    """Session factory recording every session it builds."""

    def __init__(self, page: MagicMock, open_error: Exception | None = None):
        self.page = page
        self.open_error = open_error
        self.sessions: list[FakeSession] = []

    def __call__(self, config: AppConfig) -> FakeSession:
        session = FakeSession(self.page, self.open_error)
        self.sessions.append(session)
        return session


@pytest.fixture
def mock_page() -> MagicMock:
    """Fake page on https://example.test/form answering 200."""
    return make_page()


@pytest.fixture
def session_factory(mock_page: MagicMock) -> FakeSessionFactory:
    """Fake session factory serving ``mock_page``."""
    return FakeSessionFactory(mock_page)


@pytest.fixture
def app_config() -> AppConfig:
    """Test configuration.

    Short timeouts, no backoff between navigation attempts, no post-click
    wait and no artifacts on disk.

    Returns:
        AppConfig: A configuration object for testing.
    """
    return AppConfig(
        headless=True,
        nav_timeout=5000,
        selector_timeout=2000,
        default_wait=0,
        nav_retries=2,
        nav_retry_delay=0,
        stealth=False,
    )


@pytest.fixture
def artifacts_config(app_config: AppConfig, tmp_path: Path) -> AppConfig:
    """Test configuration that records runs under ``tmp_path``."""
    app_config.artifacts_dir = tmp_path / "runs"
    return app_config


@pytest.fixture
def state_machine() -> InteractionStateMachine:
    """Fresh state machine instance."""
    return InteractionStateMachine()


@pytest.fixture
def page_factory():
    """Factory building fake pages, see ``make_page``."""
    return make_page


@pytest.fixture
def frame_factory():
    """Factory building fake frames, see ``make_frame``."""
    return make_frame


@pytest.fixture
def factory_for():
    """Build a FakeSessionFactory for a page, optionally failing to open."""
    return FakeSessionFactory
