"""Core protocols and data types for remoteclick.

This module defines the foundational types that every pipeline stage and
host surface depends on. It includes:
- RequestDescriptor, the validated input of one interaction
- Result data classes for navigation, interaction, probe and liveness
- Failure and Outcome, the tagged success-or-failure result
- ExecutionContext protocol shared by the document and frame contexts
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal, Protocol

from remoteclick.core.selectors import build_selector
from remoteclick.utils.exceptions import FailureKind, ValidationFailure

_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off", ""}

# Wire name -> attribute name for the optional duration fields.
_DURATION_FIELDS = {
    "waitMs": "wait_ms",
    "waitForSelectorMs": "wait_for_selector_ms",
    "extraWaitAfterLoadMs": "extra_wait_after_load_ms",
}


def _coerce_ms(value: Any) -> int | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError("boolean is not a duration")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError("duration must be a whole number of milliseconds")
        return int(value)
    if isinstance(value, int):
        return value
    return int(str(value).strip())


def _coerce_flag(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    lowered = str(value).strip().lower()
    if lowered in _TRUE_STRINGS:
        return True
    if lowered in _FALSE_STRINGS:
        return False
    raise ValueError(f"'{value}' is not a boolean")


@dataclass(frozen=True)
class RequestDescriptor:
    """Validated parameters of one interaction request.

    Attributes:
        url: The navigation target.
        button_id: Element id to click, resolved to an escaped ``#id``.
        selector: Raw CSS selector; takes precedence over ``button_id``.
        frame_url_contains: Substring of the frame URL the element lives in.
        wait_ms: Delay after the click; None means the configured default.
        wait_for_selector_ms: Element wait budget; None means the default.
        extra_wait_after_load_ms: Delay right after navigation.
        use_js_click: Click via ``el.click()`` instead of a pointer click.
    """

    url: str
    button_id: str | None = None
    selector: str | None = None
    frame_url_contains: str | None = None
    wait_ms: int | None = None
    wait_for_selector_ms: int | None = None
    extra_wait_after_load_ms: int = 0
    use_js_click: bool = False

    def __post_init__(self) -> None:
        """Reject requests the pipeline cannot run."""
        if not self.url:
            raise ValidationFailure("Missing url", missing=["url"])
        if not self.button_id and not self.selector:
            raise ValidationFailure(
                "Provide buttonId or selector", missing=["buttonId", "selector"]
            )
        negative = [
            wire
            for wire, attr in _DURATION_FIELDS.items()
            if getattr(self, attr) is not None and getattr(self, attr) < 0
        ]
        if negative:
            raise ValidationFailure(
                f"Durations must not be negative: {', '.join(negative)}",
                invalid=negative,
            )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> RequestDescriptor:
        """Build a descriptor from a camelCase request body.

        Args:
            data: The decoded request body. None is treated as empty.

        Returns:
            The validated descriptor.

        Raises:
            ValidationFailure: If required fields are missing or values are
                not usable.
        """
        data = data or {}
        url = data.get("url") or None
        button_id = data.get("buttonId") or None
        selector = data.get("selector") or None

        if not url:
            raise ValidationFailure("Missing url", missing=["url"])
        if not button_id and not selector:
            raise ValidationFailure(
                "Provide buttonId or selector", missing=["buttonId", "selector"]
            )

        invalid: list[str] = []
        durations: dict[str, int | None] = {}
        for wire, attr in _DURATION_FIELDS.items():
            try:
                durations[attr] = _coerce_ms(data.get(wire))
            except (TypeError, ValueError):
                invalid.append(wire)
        try:
            use_js_click = _coerce_flag(data.get("useJsClick"))
        except ValueError:
            invalid.append("useJsClick")
            use_js_click = False
        if invalid:
            raise ValidationFailure(
                f"Invalid value for {', '.join(invalid)}", invalid=invalid
            )

        return cls(
            url=str(url),
            button_id=str(button_id) if button_id else None,
            selector=str(selector) if selector else None,
            frame_url_contains=str(data["frameUrlContains"])
            if data.get("frameUrlContains")
            else None,
            wait_ms=durations["wait_ms"],
            wait_for_selector_ms=durations["wait_for_selector_ms"],
            extra_wait_after_load_ms=durations["extra_wait_after_load_ms"] or 0,
            use_js_click=use_js_click,
        )

    @property
    def target_selector(self) -> str:
        """The CSS selector actually used for waiting and clicking."""
        return build_selector(self.button_id, self.selector)

    def to_dict(self) -> dict[str, Any]:
        """Return the request in wire (camelCase) form."""
        return {
            "url": self.url,
            "buttonId": self.button_id,
            "selector": self.selector,
            "frameUrlContains": self.frame_url_contains,
            "waitMs": self.wait_ms,
            "waitForSelectorMs": self.wait_for_selector_ms,
            "extraWaitAfterLoadMs": self.extra_wait_after_load_ms,
            "useJsClick": self.use_js_click,
        }


@dataclass(frozen=True)
class NavigationResult:
    """Where a navigation ended up.

    Attributes:
        final_url: The page URL once navigation settled.
        http_status: Status of the main response, None when there was none.
        attempts: Number of attempts it took.
    """

    final_url: str
    http_status: int | None
    attempts: int = 1


@dataclass(frozen=True)
class InteractionResult:
    """Success payload of an interaction."""

    url: str
    final_url: str
    http_status: int | None
    used_selector: str
    used_frame_filter: str | None
    waited_ms: int
    wait_for_selector_ms: int
    extra_wait_after_load_ms: int
    elapsed_ms: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "finalUrl": self.final_url,
            "httpStatus": self.http_status,
            "usedSelector": self.used_selector,
            "usedFrameFilter": self.used_frame_filter,
            "waitedMs": self.waited_ms,
            "waitForSelectorMs": self.wait_for_selector_ms,
            "extraWaitAfterLoadMs": self.extra_wait_after_load_ms,
            "elapsedMs": self.elapsed_ms,
        }


@dataclass(frozen=True)
class ProbeResult:
    """Success payload of a probe."""

    final_url: str
    http_status: int | None
    title: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "finalUrl": self.final_url,
            "httpStatus": self.http_status,
            "title": self.title,
        }


@dataclass(frozen=True)
class Failure:
    """Failure payload: a kind, a message and stage-scoped diagnostics.

    Attributes:
        kind: Which stage failed and how.
        message: Human-readable description.
        details: Diagnostics with a fixed key set per kind.
        hint: Optional advice on how to adjust the request.
    """

    kind: FailureKind
    message: str
    details: dict[str, Any] = field(default_factory=dict)
    hint: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "error": self.message,
            "hint": self.hint,
            "details": dict(self.details),
        }


@dataclass(frozen=True)
class Outcome:
    """The single success-or-failure result of one invocation."""

    success: bool
    result: InteractionResult | ProbeResult | None = None
    failure: Failure | None = None

    def __post_init__(self) -> None:
        """Exactly one of result and failure must be set."""
        if self.success and (self.result is None or self.failure is not None):
            raise ValueError("successful outcome needs a result and no failure")
        if not self.success and (self.failure is None or self.result is not None):
            raise ValueError("failed outcome needs a failure and no result")

    @classmethod
    def succeeded(cls, result: InteractionResult | ProbeResult) -> Outcome:
        return cls(success=True, result=result)

    @classmethod
    def failed(cls, failure: Failure) -> Outcome:
        return cls(success=False, failure=failure)

    @property
    def kind(self) -> FailureKind | None:
        return self.failure.kind if self.failure else None

    def to_dict(self) -> dict[str, Any]:
        """Return the outcome in the wire shape every host emits."""
        if self.success:
            assert self.result is not None
            return {"success": True, "details": self.result.to_dict()}
        assert self.failure is not None
        return {"success": False, **self.failure.to_dict()}


@dataclass(frozen=True)
class LivenessReport:
    """Whether a usable browser executable can be located.

    Attributes:
        ok: True when an executable was found.
        executable: The executable that would be launched.
        candidates: Every path that was checked, in preference order.
    """

    ok: bool
    executable: str | None
    candidates: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        if self.ok:
            return {"ok": True, "browserExecutable": self.executable}
        return {"ok": False, "candidates": list(self.candidates)}


class ExecutionContext(Protocol):
    """Document or frame in which element lookup and clicks happen.

    The pipeline only depends on this protocol, never on which variant it
    holds.
    """

    kind: Literal["document", "frame"]

    @property
    def url(self) -> str:
        """Current URL of the context."""
        ...

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        """Evaluate a JavaScript function with one argument in the context."""
        ...

    async def wait_for_selector(self, selector: str, timeout: int) -> None:
        """Wait for ``selector`` to be attached and visible."""
        ...

    async def click(self, selector: str, delay: int, timeout: int) -> None:
        """Pointer-click ``selector`` holding the button for ``delay`` ms."""
        ...
