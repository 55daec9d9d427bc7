"""Unit tests for the request and outcome data types.

Tests cover:
- RequestDescriptor validation and coercion from camelCase mappings
- Outcome consistency checks and wire shape
- LivenessReport wire shape
"""

import pytest

from remoteclick.core.protocols import (
    Failure,
    InteractionResult,
    LivenessReport,
    Outcome,
    ProbeResult,
    RequestDescriptor,
)
from remoteclick.utils.exceptions import FailureKind, ValidationFailure


class TestRequestDescriptorValidation:
    """Tests for required fields."""

    def test_missing_url(self) -> None:
        """A body without url is rejected."""
        with pytest.raises(ValidationFailure) as exc_info:
            RequestDescriptor.from_mapping({"buttonId": "go"})
        assert exc_info.value.message == "Missing url"
        assert exc_info.value.missing == ["url"]

    def test_missing_target(self) -> None:
        """A body without buttonId and selector is rejected."""
        with pytest.raises(ValidationFailure) as exc_info:
            RequestDescriptor.from_mapping({"url": "https://example.test"})
        assert exc_info.value.message == "Provide buttonId or selector"
        assert exc_info.value.missing == ["buttonId", "selector"]

    def test_none_body_is_missing_url(self) -> None:
        """No body at all behaves like an empty one."""
        with pytest.raises(ValidationFailure, match="Missing url"):
            RequestDescriptor.from_mapping(None)

    def test_empty_strings_count_as_absent(self) -> None:
        """An empty buttonId does not satisfy the target requirement."""
        with pytest.raises(ValidationFailure):
            RequestDescriptor.from_mapping(
                {"url": "https://example.test", "buttonId": "", "selector": ""}
            )

    def test_direct_construction_validates(self) -> None:
        """The dataclass itself refuses a missing target."""
        with pytest.raises(ValidationFailure):
            RequestDescriptor(url="https://example.test")

    def test_negative_duration_is_invalid(self) -> None:
        """Durations must not be negative."""
        with pytest.raises(ValidationFailure) as exc_info:
            RequestDescriptor.from_mapping(
                {"url": "https://example.test", "buttonId": "go", "waitMs": -1}
            )
        assert exc_info.value.invalid == ["waitMs"]

    def test_non_numeric_duration_is_invalid(self) -> None:
        """Unparseable durations are reported by wire name."""
        with pytest.raises(ValidationFailure) as exc_info:
            RequestDescriptor.from_mapping(
                {
                    "url": "https://example.test",
                    "buttonId": "go",
                    "waitForSelectorMs": "soon",
                    "extraWaitAfterLoadMs": 1.5,
                }
            )
        assert exc_info.value.invalid == ["waitForSelectorMs", "extraWaitAfterLoadMs"]

    def test_boolean_duration_is_invalid(self) -> None:
        """True is not a number of milliseconds."""
        with pytest.raises(ValidationFailure):
            RequestDescriptor.from_mapping(
                {"url": "https://example.test", "buttonId": "go", "waitMs": True}
            )

    def test_unparseable_flag_is_invalid(self) -> None:
        """useJsClick must look like a boolean."""
        with pytest.raises(ValidationFailure) as exc_info:
            RequestDescriptor.from_mapping(
                {"url": "https://example.test", "buttonId": "go", "useJsClick": "maybe"}
            )
        assert exc_info.value.invalid == ["useJsClick"]


class TestRequestDescriptorCoercion:
    """Tests for value coercion and defaults."""

    def test_defaults(self) -> None:
        """Optional fields default to None / 0 / False."""
        d = RequestDescriptor.from_mapping(
            {"url": "https://example.test", "buttonId": "go"}
        )
        assert d.wait_ms is None
        assert d.wait_for_selector_ms is None
        assert d.extra_wait_after_load_ms == 0
        assert d.use_js_click is False
        assert d.frame_url_contains is None

    def test_numeric_strings_are_accepted(self) -> None:
        """Durations may arrive as strings."""
        d = RequestDescriptor.from_mapping(
            {
                "url": "https://example.test",
                "buttonId": "go",
                "waitMs": "100",
                "waitForSelectorMs": 2000.0,
                "extraWaitAfterLoadMs": " 50 ",
            }
        )
        assert d.wait_ms == 100
        assert d.wait_for_selector_ms == 2000
        assert d.extra_wait_after_load_ms == 50

    def test_zero_wait_is_kept(self) -> None:
        """waitMs 0 means no wait, not the default."""
        d = RequestDescriptor.from_mapping(
            {"url": "https://example.test", "buttonId": "go", "waitMs": 0}
        )
        assert d.wait_ms == 0

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(True, True), ("true", True), ("1", True), (1, True), ("no", False), (0, False)],
    )
    def test_flag_coercion(self, raw: object, expected: bool) -> None:
        """useJsClick accepts booleans, ints and boolean-like strings."""
        d = RequestDescriptor.from_mapping(
            {"url": "https://example.test", "buttonId": "go", "useJsClick": raw}
        )
        assert d.use_js_click is expected

    def test_target_selector_from_button_id(self) -> None:
        """buttonId is resolved to an escaped id selector."""
        d = RequestDescriptor.from_mapping({"url": "https://x.test", "buttonId": "a.b"})
        assert d.target_selector == "#a\\.b"

    def test_target_selector_prefers_selector(self) -> None:
        """selector wins over buttonId."""
        d = RequestDescriptor.from_mapping(
            {"url": "https://x.test", "buttonId": "a", "selector": ".cta"}
        )
        assert d.target_selector == ".cta"

    def test_to_dict_uses_wire_names(self) -> None:
        """to_dict returns camelCase keys."""
        d = RequestDescriptor.from_mapping(
            {"url": "https://x.test", "selector": ".cta", "frameUrlContains": "pay"}
        )
        assert d.to_dict() == {
            "url": "https://x.test",
            "buttonId": None,
            "selector": ".cta",
            "frameUrlContains": "pay",
            "waitMs": None,
            "waitForSelectorMs": None,
            "extraWaitAfterLoadMs": 0,
            "useJsClick": False,
        }


class TestOutcome:
    """Tests for Outcome."""

    def _result(self) -> InteractionResult:
        return InteractionResult(
            url="https://x.test",
            final_url="https://x.test/done",
            http_status=None,
            used_selector="#go",
            used_frame_filter=None,
            waited_ms=100,
            wait_for_selector_ms=2000,
            extra_wait_after_load_ms=0,
            elapsed_ms=450,
        )

    def test_success_wire_shape(self) -> None:
        """Success serializes as success + camelCase details."""
        data = Outcome.succeeded(self._result()).to_dict()
        assert data["success"] is True
        assert data["details"]["usedSelector"] == "#go"
        assert data["details"]["httpStatus"] is None
        assert data["details"]["usedFrameFilter"] is None

    def test_failure_wire_shape(self) -> None:
        """Failure serializes kind, error, hint and details at top level."""
        failure = Failure(
            kind=FailureKind.CLICK,
            message="Failed to JS-click #go",
            details={"selector": "#go"},
            hint="retry",
        )
        assert Outcome.failed(failure).to_dict() == {
            "success": False,
            "kind": "click",
            "error": "Failed to JS-click #go",
            "hint": "retry",
            "details": {"selector": "#go"},
        }

    def test_kind_is_none_on_success(self) -> None:
        """Only failures have a kind."""
        assert Outcome.succeeded(self._result()).kind is None

    def test_inconsistent_outcome_is_rejected(self) -> None:
        """A success without result cannot be built."""
        with pytest.raises(ValueError):
            Outcome(success=True)

    def test_probe_result_wire_shape(self) -> None:
        """ProbeResult uses finalUrl/httpStatus/title."""
        result = ProbeResult(final_url="https://x.test", http_status=200, title=None)
        assert result.to_dict() == {
            "finalUrl": "https://x.test",
            "httpStatus": 200,
            "title": None,
        }


class TestLivenessReport:
    """Tests for LivenessReport."""

    def test_ok(self) -> None:
        report = LivenessReport(ok=True, executable="/usr/bin/chromium")
        assert report.to_dict() == {"ok": True, "browserExecutable": "/usr/bin/chromium"}

    def test_not_ok_lists_candidates(self) -> None:
        report = LivenessReport(ok=False, executable=None, candidates=["/a", "/b"])
        assert report.to_dict() == {"ok": False, "candidates": ["/a", "/b"]}
