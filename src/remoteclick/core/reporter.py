"""Outcome assembly for the interaction pipeline.

Every failure kind has a fixed set of detail keys. The reporter fills the
keys it knows and sets the rest to None, so callers always see the same
response shape for the same kind of failure.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from typing import Any

from remoteclick.core.protocols import (
    Failure,
    InteractionResult,
    NavigationResult,
    Outcome,
    ProbeResult,
    RequestDescriptor,
)
from remoteclick.utils.exceptions import FailureKind, RemoteClickError

logger = logging.getLogger(__name__)

DETAIL_FIELDS: dict[FailureKind, tuple[str, ...]] = {
    FailureKind.VALIDATION: ("missing", "invalid"),
    FailureKind.LAUNCH: ("candidates", "executable", "lastError"),
    FailureKind.NAVIGATION: ("url", "attempts", "lastError"),
    FailureKind.FRAME_NOT_FOUND: (
        "frameUrlContains",
        "afterNavUrl",
        "navStatus",
        "frameUrls",
    ),
    FailureKind.SELECTOR_TIMEOUT: (
        "selector",
        "timeoutMs",
        "afterNavUrl",
        "finalUrl",
        "navStatus",
        "pageTitle",
    ),
    FailureKind.CLICK: ("selector",),
    FailureKind.UNEXPECTED: ("errorType",),
}

HINTS: dict[FailureKind, str | None] = {
    FailureKind.VALIDATION: "Pass url plus either buttonId or selector.",
    FailureKind.LAUNCH: (
        "Install Chromium (playwright install chromium) or point "
        "REMOTECLICK_BROWSER_PATH at a browser executable."
    ),
    FailureKind.NAVIGATION: (
        "Check that the URL is reachable from this host or raise "
        "REMOTECLICK_NAV_TIMEOUT_MS."
    ),
    FailureKind.FRAME_NOT_FOUND: (
        "Open DevTools, check iframe src, pass a unique substring from its URL."
    ),
    FailureKind.SELECTOR_TIMEOUT: (
        "If element is in an iframe, pass frameUrlContains; if SPA, increase "
        "waitForSelectorMs or extraWaitAfterLoadMs."
    ),
    FailureKind.CLICK: (
        "The element disappeared before the click; retry without useJsClick "
        "or increase extraWaitAfterLoadMs."
    ),
    FailureKind.UNEXPECTED: (
        "See service logs for the stack; if page is SPA/iframe/anti-bot, pass "
        "frameUrlContains/useJsClick."
    ),
}

_FRAME_SELECTOR_TIMEOUT_HINT = (
    "Double-check frameUrlContains or increase waitForSelectorMs."
)


def shape_details(kind: FailureKind, raw: dict[str, Any]) -> dict[str, Any]:
    """Project raw diagnostics onto the fixed key set of ``kind``."""
    return {key: raw.get(key) for key in DETAIL_FIELDS[kind]}


class OutcomeReporter:
    """Builds success and failure outcomes.

    Attributes:
        started_at: ``time.monotonic()`` value at request start.
    """

    def __init__(self, started_at: float | None = None) -> None:
        self.started_at = time.monotonic() if started_at is None else started_at

    @property
    def elapsed_ms(self) -> int:
        return int((time.monotonic() - self.started_at) * 1000)

    async def report_success(
        self,
        request: RequestDescriptor,
        navigation: NavigationResult,
        current_url: Callable[[], str],
        selector: str,
        wait_ms: int,
        wait_for_selector_ms: int,
    ) -> Outcome:
        """Wait ``wait_ms`` after the click, then report success.

        The wait gives side effects of the click (a download, a state change)
        time to happen before the browser is torn down.

        Args:
            request: The request being answered.
            navigation: Result of the navigation stage.
            current_url: Reads the page URL, called after the wait since the
                click may have navigated.
            selector: The selector that was clicked.
            wait_ms: Post-click delay in milliseconds.
            wait_for_selector_ms: Element wait budget that was applied.
        """
        if wait_ms > 0:
            await asyncio.sleep(wait_ms / 1000)
        return self.interaction_success(
            request,
            navigation,
            current_url(),
            selector,
            wait_ms,
            wait_for_selector_ms,
        )

    def interaction_success(
        self,
        request: RequestDescriptor,
        navigation: NavigationResult,
        final_url: str,
        selector: str,
        wait_ms: int,
        wait_for_selector_ms: int,
    ) -> Outcome:
        result = InteractionResult(
            url=request.url,
            final_url=final_url,
            http_status=navigation.http_status,
            used_selector=selector,
            used_frame_filter=request.frame_url_contains,
            waited_ms=wait_ms,
            wait_for_selector_ms=wait_for_selector_ms,
            extra_wait_after_load_ms=request.extra_wait_after_load_ms,
            elapsed_ms=self.elapsed_ms,
        )
        logger.info("Run succeeded in %d ms: %s", result.elapsed_ms, selector)
        return Outcome.succeeded(result)

    def probe_success(
        self, navigation: NavigationResult, title: str | None
    ) -> Outcome:
        return Outcome.succeeded(
            ProbeResult(
                final_url=navigation.final_url,
                http_status=navigation.http_status,
                title=title,
            )
        )

    def failure(
        self, error: BaseException, frame_filter: str | None = None
    ) -> Outcome:
        """Turn an exception raised by any stage into a failed outcome.

        Args:
            error: The exception that ended the request.
            frame_filter: The request's frameUrlContains, which picks the
                selector-timeout hint.

        Returns:
            The failed outcome.
        """
        if isinstance(error, RemoteClickError):
            kind = error.kind
            message = error.message
            raw = error.details
        else:
            kind = FailureKind.UNEXPECTED
            message = str(error) or type(error).__name__
            raw = {"errorType": type(error).__name__}

        hint = HINTS[kind]
        if kind is FailureKind.SELECTOR_TIMEOUT and frame_filter:
            hint = _FRAME_SELECTOR_TIMEOUT_HINT

        return Outcome.failed(
            Failure(
                kind=kind,
                message=message,
                details=shape_details(kind, raw),
                hint=hint,
            )
        )
