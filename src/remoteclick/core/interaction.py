"""Element locating and clicking inside an execution context.

ElementLocator waits for the target to become visible and, on timeout,
collects page-level diagnostics. InteractionExecutor scrolls the target into
view and clicks it, either with a pointer click or with the element's own
``click()`` method.
"""

from __future__ import annotations

import logging

from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from remoteclick.core.protocols import ExecutionContext
from remoteclick.utils.exceptions import ClickFailure, SelectorTimeout

logger = logging.getLogger(__name__)

SCROLL_INTO_VIEW_JS = """
(sel) => {
    const el = document.querySelector(sel);
    if (el) {
        el.scrollIntoView({ block: "center", inline: "center" });
    }
}
"""

JS_CLICK_JS = """
(sel) => {
    const el = document.querySelector(sel);
    if (!el) {
        return false;
    }
    el.click();
    return true;
}
"""

# Press/release gap; some handlers ignore zero-duration synthetic clicks.
POINTER_CLICK_DELAY_MS = 25


class ElementLocator:
    """Waits for the target element to be attached and visible.

    Attributes:
        page: The top-level page, read for diagnostics even when the context
            is a frame.
    """

    def __init__(self, page: Page) -> None:
        self.page = page

    async def wait_for_visible(
        self,
        context: ExecutionContext,
        selector: str,
        timeout_ms: int,
        after_nav_url: str | None = None,
        nav_status: int | None = None,
    ) -> None:
        """Wait until ``selector`` is visible in ``context``.

        Visible means a non-empty bounding box and no ``visibility:hidden``.
        Returns as soon as the condition holds.

        Args:
            context: Where to look for the element.
            selector: CSS selector of the target.
            timeout_ms: Wait budget in milliseconds.
            after_nav_url: Page URL right after navigation, for diagnostics.
            nav_status: Navigation HTTP status, for diagnostics.

        Raises:
            SelectorTimeout: If the element is not visible within the budget.
        """
        try:
            await context.wait_for_selector(selector, timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            page_title = await self._page_title()
            final_url = self.page.url
            logger.error(
                "Timeout waiting for selector %r (%d ms) url=%s title=%r",
                selector,
                timeout_ms,
                final_url,
                page_title,
            )
            raise SelectorTimeout(
                selector,
                timeout_ms,
                final_url=final_url,
                page_title=page_title,
                after_nav_url=after_nav_url,
                nav_status=nav_status,
            ) from e

    async def _page_title(self) -> str | None:
        """Read the page title, None if the page cannot be read."""
        try:
            return await self.page.title()
        except Exception as e:
            logger.debug("Could not read page title: %s", e)
            return None


class InteractionExecutor:
    """Scrolls the target into view and clicks it. Never retries."""

    def __init__(self, click_timeout: int = 5000) -> None:
        """Initialize the executor.

        Args:
            click_timeout: Actionability budget of a pointer click in ms.
        """
        self.click_timeout = click_timeout

    async def click(
        self, context: ExecutionContext, selector: str, use_js_click: bool
    ) -> None:
        """Click ``selector`` inside ``context``.

        Args:
            context: Where the element lives.
            selector: CSS selector of the target.
            use_js_click: Call ``el.click()`` from script instead of a
                pointer click.

        Raises:
            ClickFailure: If the script click finds no element.
        """
        await self.scroll_into_view(context, selector)
        await self.perform_click(context, selector, use_js_click)

    async def perform_click(
        self, context: ExecutionContext, selector: str, use_js_click: bool
    ) -> None:
        """Click without scrolling first.

        Raises:
            ClickFailure: If the script click finds no element.
        """
        if use_js_click:
            clicked = await context.evaluate(JS_CLICK_JS, selector)
            if not clicked:
                logger.error("JS click failed, element gone: %s", selector)
                raise ClickFailure(selector)
            logger.info("JS-clicked %s", selector)
            return

        await context.click(
            selector, delay=POINTER_CLICK_DELAY_MS, timeout=self.click_timeout
        )
        logger.info("Clicked %s", selector)

    async def scroll_into_view(self, context: ExecutionContext, selector: str) -> None:
        """Center the element in the viewport, best-effort.

        The element may have been removed since it was located; that is not
        an error here.
        """
        try:
            await context.evaluate(SCROLL_INTO_VIEW_JS, selector)
        except Exception as e:
            logger.debug("Scroll into view skipped for %s: %s", selector, e)
