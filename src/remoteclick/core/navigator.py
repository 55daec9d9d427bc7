"""Navigation with bounded retry.

Navigation is the only pipeline stage that is retried: network variance can
make a load fail once and succeed a second later, whereas repeating a click
risks a double submission.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import TypeVar

from playwright.async_api import Page, Request

from remoteclick.core.protocols import NavigationResult
from remoteclick.utils.exceptions import (
    NavigationError,
    NavigationFailure,
    TransientError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Navigation settles once at most this many requests stay in flight for
# NETWORK_IDLE_MS.
MAX_INFLIGHT_REQUESTS = 2
NETWORK_IDLE_MS = 500
_IDLE_POLL_S = 0.05


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    retry_on: tuple[type[Exception], ...] = (TransientError,),
    base_delay: float = 1.0,
) -> T:
    """Execute operation with retry for transient failures.

    Sleeps ``base_delay * 2**n`` seconds after the n-th failed attempt,
    never after the last one.

    Args:
        operation: Async callable to execute.
        max_attempts: Maximum number of attempts, at least 1.
        retry_on: Tuple of exception types to retry on.
        base_delay: Backoff before the second attempt, in seconds.

    Returns:
        The result of the operation.

    Raises:
        The last exception if all attempts fail.
    """
    last_error: Exception | None = None
    for attempt in range(max(1, max_attempts)):
        try:
            return await operation()
        except retry_on as e:
            last_error = e
            if attempt + 1 < max_attempts:
                delay = base_delay * 2**attempt
                logger.warning(
                    "Attempt %d/%d failed (%s), retrying in %.1fs",
                    attempt + 1,
                    max_attempts,
                    e,
                    delay,
                )
                await asyncio.sleep(delay)
    if last_error:
        raise last_error
    raise RuntimeError("No retries attempted")


class InflightRequests:
    """Counts requests the page has sent but not yet finished or failed.

    Requests from every frame of the page are counted. Used as a context
    manager so the page listeners only live for one navigation attempt.

    Example:
        >>> with InflightRequests(page) as inflight:
        ...     await page.goto(url, wait_until="domcontentloaded")
        ...     await inflight.wait_until_quiet(timeout_ms=45000)
    """

    def __init__(self, page: Page) -> None:
        self.page = page
        self._pending: set[Request] = set()

    def __enter__(self) -> InflightRequests:
        self.page.on("request", self._started)
        self.page.on("requestfinished", self._settled)
        self.page.on("requestfailed", self._settled)
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.page.remove_listener("request", self._started)
        self.page.remove_listener("requestfinished", self._settled)
        self.page.remove_listener("requestfailed", self._settled)

    @property
    def count(self) -> int:
        return len(self._pending)

    def _started(self, request: Request) -> None:
        self._pending.add(request)

    def _settled(self, request: Request) -> None:
        self._pending.discard(request)

    async def wait_until_quiet(
        self,
        timeout_ms: int,
        idle_ms: int = NETWORK_IDLE_MS,
        max_inflight: int = MAX_INFLIGHT_REQUESTS,
    ) -> None:
        """Wait until at most ``max_inflight`` requests stay pending for ``idle_ms``.

        Args:
            timeout_ms: Wait budget in milliseconds, 0 for no limit.
            idle_ms: How long the count must stay at or below the limit.
            max_inflight: Pending requests still counted as quiet.

        Raises:
            TimeoutError: If the network is still busy when the budget runs out.
        """
        started = time.monotonic()
        quiet_since: float | None = None
        while True:
            now = time.monotonic()
            if self.count > max_inflight:
                quiet_since = None
            elif quiet_since is None:
                quiet_since = now
            if quiet_since is not None and (now - quiet_since) * 1000 >= idle_ms:
                return
            if timeout_ms and (now - started) * 1000 >= timeout_ms:
                raise TimeoutError(
                    f"{self.count} requests still in flight after {timeout_ms} ms"
                )
            await asyncio.sleep(_IDLE_POLL_S)


class Navigator:
    """Loads a URL into the session page.

    An attempt completes once the DOM has been parsed and no more than
    MAX_INFLIGHT_REQUESTS requests have been in flight for ``idle_ms``, both
    within the same per-attempt timeout.

    Attributes:
        page: The session page.
        timeout_ms: Budget of a single attempt.
        retries: Extra attempts after the first one.
        retry_delay_ms: Backoff before the first retry, doubling afterwards.
        idle_ms: Quiet window that ends an attempt.
    """

    def __init__(
        self,
        page: Page,
        timeout_ms: int = 45000,
        retries: int = 2,
        retry_delay_ms: int = 1000,
        idle_ms: int | None = None,
    ) -> None:
        self.page = page
        self.timeout_ms = timeout_ms
        self.retries = retries
        self.retry_delay_ms = retry_delay_ms
        self.idle_ms = NETWORK_IDLE_MS if idle_ms is None else idle_ms
        self._attempts = 0

    async def navigate(self, url: str) -> NavigationResult:
        """Navigate with retry.

        Raises:
            NavigationFailure: If every attempt failed.
        """
        self._attempts = 0
        max_attempts = self.retries + 1
        try:
            return await with_retry(
                lambda: self.navigate_once(url),
                max_attempts=max_attempts,
                retry_on=(NavigationError,),
                base_delay=self.retry_delay_ms / 1000,
            )
        except NavigationError as e:
            logger.error(
                "Navigation to %s failed after %d attempts", url, self._attempts
            )
            raise NavigationFailure(url, self._attempts, str(e)) from e

    async def navigate_once(self, url: str) -> NavigationResult:
        """Make a single navigation attempt.

        Raises:
            NavigationError: If the attempt failed or timed out.
        """
        self._attempts += 1
        started = time.monotonic()
        logger.info("Navigating to %s (attempt %d)", url, self._attempts)
        try:
            with InflightRequests(self.page) as inflight:
                response = await self.page.goto(
                    url, wait_until="domcontentloaded", timeout=self.timeout_ms
                )
                remaining = 0  # 0 means no limit, as for Playwright timeouts
                if self.timeout_ms:
                    spent_ms = int((time.monotonic() - started) * 1000)
                    remaining = max(1, self.timeout_ms - spent_ms)
                await inflight.wait_until_quiet(remaining, idle_ms=self.idle_ms)
        except Exception as e:
            raise NavigationError(f"Failed to navigate to {url}: {e}") from e

        status = response.status if response is not None else None
        return NavigationResult(
            final_url=self.page.url, http_status=status, attempts=self._attempts
        )
