"""Exception hierarchy for remoteclick.

Every failure the interaction pipeline can report has a dedicated exception
class. Each class carries a ``kind`` (one of :class:`FailureKind`) and a
``details`` mapping with the diagnostics known at the point of failure, so the
outcome reporter can turn any of them into a typed failure without guessing.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class FailureKind(Enum):
    """Kinds of terminal failure a request can end with."""

    VALIDATION = "validation"
    LAUNCH = "launch"
    NAVIGATION = "navigation"
    FRAME_NOT_FOUND = "frame_not_found"
    SELECTOR_TIMEOUT = "selector_timeout"
    CLICK = "click"
    UNEXPECTED = "unexpected"


class RemoteClickError(Exception):
    """Base exception for all remoteclick errors."""

    kind: FailureKind = FailureKind.UNEXPECTED

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.details: dict[str, Any] = dict(details or {})
        super().__init__(message)

    @property
    def message(self) -> str:
        return str(self)


class TransientError(RemoteClickError):
    """Errors caused by timing or network variance."""


class PermanentError(RemoteClickError):
    """Errors that repeating the same request will not fix."""


class ConfigurationError(PermanentError):
    """Invalid or missing configuration."""


class ValidationFailure(PermanentError):  # noqa: N818
    """The request is missing required fields or carries invalid values."""

    kind = FailureKind.VALIDATION

    def __init__(
        self,
        message: str,
        missing: list[str] | None = None,
        invalid: list[str] | None = None,
    ) -> None:
        self.missing = list(missing or [])
        self.invalid = list(invalid or [])
        super().__init__(
            message, {"missing": self.missing, "invalid": self.invalid}
        )


class LaunchFailure(PermanentError):  # noqa: N818
    """No usable browser executable was found or the browser failed to start."""

    kind = FailureKind.LAUNCH

    def __init__(
        self,
        message: str,
        candidates: list[str] | None = None,
        executable: str | None = None,
        last_error: str | None = None,
    ) -> None:
        self.candidates = list(candidates or [])
        self.executable = executable
        super().__init__(
            message,
            {
                "candidates": self.candidates,
                "executable": executable,
                "lastError": last_error,
            },
        )


class NavigationError(TransientError):
    """A single navigation attempt failed, may succeed on retry."""

    kind = FailureKind.NAVIGATION


class NavigationFailure(PermanentError):  # noqa: N818
    """Every navigation attempt failed."""

    kind = FailureKind.NAVIGATION

    def __init__(self, url: str, attempts: int, last_error: str) -> None:
        self.url = url
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Navigation to {url} failed after {attempts} attempt(s): {last_error}",
            {"url": url, "attempts": attempts, "lastError": last_error},
        )


class FrameNotFound(PermanentError):  # noqa: N818
    """No attached frame URL contains the requested substring."""

    kind = FailureKind.FRAME_NOT_FOUND

    def __init__(
        self,
        frame_url_contains: str,
        frame_urls: list[str],
        after_nav_url: str | None = None,
        nav_status: int | None = None,
    ) -> None:
        self.frame_url_contains = frame_url_contains
        self.frame_urls = list(frame_urls)
        super().__init__(
            f'Iframe not found for frameUrlContains="{frame_url_contains}"',
            {
                "frameUrlContains": frame_url_contains,
                "afterNavUrl": after_nav_url,
                "navStatus": nav_status,
                "frameUrls": self.frame_urls,
            },
        )


class SelectorTimeout(TransientError):  # noqa: N818
    """The target element did not become visible within its wait budget."""

    kind = FailureKind.SELECTOR_TIMEOUT

    def __init__(
        self,
        selector: str,
        timeout_ms: int,
        final_url: str | None = None,
        page_title: str | None = None,
        after_nav_url: str | None = None,
        nav_status: int | None = None,
    ) -> None:
        self.selector = selector
        self.timeout_ms = timeout_ms
        super().__init__(
            f'Timeout waiting for selector "{selector}"',
            {
                "selector": selector,
                "timeoutMs": timeout_ms,
                "afterNavUrl": after_nav_url,
                "finalUrl": final_url,
                "navStatus": nav_status,
                "pageTitle": page_title,
            },
        )


class ClickFailure(PermanentError):  # noqa: N818
    """The element disappeared between locating it and the script click."""

    kind = FailureKind.CLICK

    def __init__(self, selector: str) -> None:
        self.selector = selector
        super().__init__(f"Failed to JS-click {selector}", {"selector": selector})
