"""Execution context resolution.

Element lookup and clicks run either in the page's main document or inside
one of its frames. Both are wrapped behind the ExecutionContext protocol so
the locator and executor never care which one they got.
"""

from __future__ import annotations

import logging
from typing import Any, Literal

from playwright.async_api import Frame, Page

from remoteclick.core.protocols import ExecutionContext
from remoteclick.utils.exceptions import FrameNotFound

logger = logging.getLogger(__name__)


class _PlaywrightContext:
    """Shared delegation to a Playwright Page or Frame."""

    kind: Literal["document", "frame"]

    def __init__(self, target: Page | Frame) -> None:
        self._target = target

    @property
    def url(self) -> str:
        return self._target.url

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        return await self._target.evaluate(expression, arg)

    async def wait_for_selector(self, selector: str, timeout: int) -> None:
        await self._target.wait_for_selector(
            selector, state="visible", timeout=timeout
        )

    async def click(self, selector: str, delay: int, timeout: int) -> None:
        await self._target.click(selector, delay=delay, timeout=timeout)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(url={self.url!r})"


class DocumentContext(_PlaywrightContext):
    """The page's top-level document."""

    kind: Literal["document", "frame"] = "document"

    def __init__(self, page: Page) -> None:
        super().__init__(page)


class FrameContext(_PlaywrightContext):
    """A frame attached to the page, possibly the main frame."""

    kind: Literal["document", "frame"] = "frame"

    def __init__(self, frame: Frame) -> None:
        super().__init__(frame)


def resolve_context(
    page: Page,
    frame_url_contains: str | None,
    after_nav_url: str | None = None,
    nav_status: int | None = None,
) -> ExecutionContext:
    """Pick the context the element lookup and click run in.

    Frames are enumerated once, at call time; there is no waiting for a frame
    to attach. When several frames match, the first in ``page.frames`` order
    wins.

    Args:
        page: The session page.
        frame_url_contains: Case-sensitive substring of the frame URL, or
            None for the top document.
        after_nav_url: Page URL right after navigation, for diagnostics.
        nav_status: Navigation HTTP status, for diagnostics.

    Returns:
        The resolved execution context.

    Raises:
        FrameNotFound: If no attached frame URL contains the substring.
    """
    if not frame_url_contains:
        return DocumentContext(page)

    frames = page.frames
    for frame in frames:
        if frame_url_contains in (frame.url or ""):
            logger.info("Using frame %s", frame.url)
            return FrameContext(frame)

    frame_urls = [frame.url for frame in frames if frame.url]
    logger.error(
        "Iframe not found: frameUrlContains=%r frameUrls=%s",
        frame_url_contains,
        frame_urls,
    )
    raise FrameNotFound(
        frame_url_contains,
        frame_urls,
        after_nav_url=after_nav_url,
        nav_status=nav_status,
    )
