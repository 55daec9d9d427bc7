"""Playwright-based browser session with stealth capabilities.

This module owns the one browser process and page that a single request
uses. It provides:
- locate_browser_executable, which finds a usable Chromium binary
- BrowserSession, an async context manager that launches the browser on
  entry and always tears it down on exit
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    async_playwright,
)
from playwright_stealth import Stealth

from remoteclick.utils.config import AppConfig
from remoteclick.utils.exceptions import LaunchFailure

logger = logging.getLogger(__name__)

SYSTEM_BROWSER_PATHS = [
    "/usr/bin/chromium",
    "/usr/bin/chromium-browser",
    "/usr/bin/google-chrome-stable",
    "/usr/bin/google-chrome",
    "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome",  # macOS
]

LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
]

VIEWPORT = {"width": 1366, "height": 900}

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/123 Safari/537.36"
)


def _is_executable(path: str) -> bool:
    return Path(path).is_file() and os.access(path, os.X_OK)


def locate_browser_executable(
    override: str | None, bundled: str | None
) -> tuple[str | None, list[str]]:
    """Find the browser binary to launch.

    Candidates are checked in preference order: the configured override,
    Playwright's bundled Chromium, then well-known system locations.

    Args:
        override: Explicit executable path from configuration.
        bundled: Path of the Playwright-bundled Chromium, if known.

    Returns:
        Tuple of (first usable executable or None, every candidate checked).
    """
    candidates = [p for p in (override, bundled) if p] + SYSTEM_BROWSER_PATHS
    checked: list[str] = []
    for path in candidates:
        checked.append(path)
        if _is_executable(path):
            return path, checked
    return None, checked


async def bundled_executable_path() -> str | None:
    """Ask Playwright where its bundled Chromium lives, without launching it."""
    try:
        async with async_playwright() as playwright:
            return playwright.chromium.executable_path
    except Exception as e:
        logger.warning("Playwright driver unavailable: %s", e)
        return None


class BrowserSession:
    """One browser process and one page, scoped to a single request.

    The session is meant to be used as an async context manager so teardown
    runs on every exit path, including cancellation:

    Example:
        >>> async with BrowserSession(config) as session:
        ...     await session.page.goto("https://example.com")

    Attributes:
        config: Application configuration.
        executable: The browser binary that was launched.
    """

    def __init__(self, config: AppConfig) -> None:
        self.config = config
        self.executable: str | None = None
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._page: Page | None = None

    async def __aenter__(self) -> BrowserSession:
        await self.open()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @property
    def page(self) -> Page:
        """The session page.

        Raises:
            RuntimeError: If the browser is not launched.
        """
        if not self._page:
            raise RuntimeError("Browser not launched")
        return self._page

    @property
    def is_open(self) -> bool:
        return self._page is not None

    async def open(self) -> None:
        """Launch the browser and create the page.

        Raises:
            LaunchFailure: If no executable is found or the launch fails.
        """
        try:
            await self._launch()
        except BaseException:
            await self.close()
            raise

    async def _launch(self) -> None:
        try:
            self._playwright = await async_playwright().start()
        except Exception as e:
            raise LaunchFailure(
                f"Could not start the Playwright driver: {e}", last_error=str(e)
            ) from e

        bundled = self._bundled_path()
        executable, candidates = locate_browser_executable(
            self.config.browser_path, bundled
        )
        if executable is None:
            logger.error("No usable browser executable, checked %s", candidates)
            raise LaunchFailure(
                "No usable browser executable found", candidates=candidates
            )

        logger.info("Launching %s (headless=%s)", executable, self.config.headless)
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self.config.headless,
                executable_path=executable,
                args=LAUNCH_ARGS,
            )
        except Exception as e:
            raise LaunchFailure(
                f"Browser failed to start: {e}",
                candidates=candidates,
                executable=executable,
                last_error=str(e),
            ) from e

        self.executable = executable
        try:
            self._context = await self._browser.new_context(
                viewport=VIEWPORT,  # type: ignore[arg-type]
                user_agent=USER_AGENT,
            )
            page = await self._context.new_page()
            if self.config.stealth:
                await Stealth().apply_stealth_async(page)
        except Exception as e:
            raise LaunchFailure(
                f"Could not open a browser page: {e}",
                candidates=candidates,
                executable=executable,
                last_error=str(e),
            ) from e
        self._page = page

    def _bundled_path(self) -> str | None:
        assert self._playwright is not None
        try:
            return self._playwright.chromium.executable_path
        except Exception as e:
            logger.debug("No bundled Chromium path: %s", e)
            return None

    async def html(self) -> str:
        """Get full page HTML.

        Raises:
            RuntimeError: If browser not launched.
        """
        return await self.page.content()

    async def close(self) -> None:
        """Close the browser and stop Playwright.

        Safe to call more than once and on a half-opened session. Errors are
        logged, never raised, so they cannot replace the request's outcome.
        """
        if self._context:
            try:
                await self._context.close()
            except Exception as e:
                logger.warning("Error closing browser context: %s", e)
        if self._browser:
            try:
                await self._browser.close()
            except Exception as e:
                logger.warning("Error closing browser: %s", e)
        if self._playwright:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.warning("Error stopping Playwright: %s", e)

        # Reset internal state
        self._browser = None
        self._context = None
        self._page = None
        self._playwright = None
