"""Unit tests for the InteractionStateMachine.

Tests cover:
- Initial state verification
- The full interaction path and the probe path
- Failure reachability from each failing stage
- Invalid transitions raising TransitionNotAllowed
- Step counter and transition history
"""

import pytest
from statemachine.exceptions import TransitionNotAllowed

from remoteclick.core.states import InteractionStateMachine

FULL_PATH = [
    "launch",
    "navigate",
    "settle",
    "resolve_context",
    "locate",
    "scroll",
    "click",
    "wait_after_click",
    "succeed",
]


def advance(sm: InteractionStateMachine, events: list[str]) -> None:
    for event in events:
        sm.send(event)


class TestInitialState:
    """Tests for initial state configuration."""

    def test_initial_state_is_idle(self, state_machine: InteractionStateMachine) -> None:
        """State machine should start in 'idle' state."""
        assert state_machine.current_state == state_machine.idle

    def test_initial_step_is_zero(self, state_machine: InteractionStateMachine) -> None:
        """Step counter should start at zero."""
        assert state_machine.step == 0
        assert state_machine.history == []

    def test_idle_cannot_fail(self, state_machine: InteractionStateMachine) -> None:
        """Nothing has started, so there is no failure transition."""
        assert state_machine.can_fail is False


class TestHappyPaths:
    """Tests for complete paths."""

    def test_full_path_with_extra_wait(self) -> None:
        """Every stage in order ends in 'succeeded'."""
        sm = InteractionStateMachine()
        advance(sm, FULL_PATH)
        assert sm.current_state == sm.succeeded
        assert sm.step == len(FULL_PATH)

    def test_extra_wait_is_optional(self) -> None:
        """navigating can go straight to resolving_context."""
        sm = InteractionStateMachine()
        advance(sm, [e for e in FULL_PATH if e != "settle"])
        assert sm.stage == "succeeded"

    def test_probe_path(self) -> None:
        """A probe succeeds right after navigating."""
        sm = InteractionStateMachine()
        advance(sm, ["launch", "navigate", "succeed"])
        assert sm.current_state == sm.succeeded

    def test_history_records_transitions(self) -> None:
        """Each transition is recorded as (event, source, target)."""
        sm = InteractionStateMachine()
        advance(sm, ["launch", "navigate"])
        assert sm.history == [
            ("launch", "idle", "launching"),
            ("navigate", "launching", "navigating"),
        ]


class TestFailTransition:
    """Tests for reaching 'failed'."""

    @pytest.mark.parametrize(
        "events",
        [
            ["launch"],
            ["launch", "navigate"],
            ["launch", "navigate", "resolve_context"],
            ["launch", "navigate", "resolve_context", "locate"],
            ["launch", "navigate", "resolve_context", "locate", "scroll", "click"],
        ],
    )
    def test_fail_from_failing_stage(self, events: list[str]) -> None:
        """Launching, navigating, resolving, locating and clicking can fail."""
        sm = InteractionStateMachine()
        advance(sm, events)
        assert sm.can_fail is True
        sm.fail()
        assert sm.current_state == sm.failed

    def test_scrolling_cannot_fail(self) -> None:
        """Scrolling is best-effort and has no failure edge."""
        sm = InteractionStateMachine()
        advance(sm, ["launch", "navigate", "resolve_context", "locate", "scroll"])
        assert sm.can_fail is False
        with pytest.raises(TransitionNotAllowed):
            sm.fail()


class TestInvalidTransitions:
    """Tests for out-of-order events."""

    def test_cannot_click_before_locating(self) -> None:
        sm = InteractionStateMachine()
        advance(sm, ["launch", "navigate", "resolve_context"])
        with pytest.raises(TransitionNotAllowed):
            sm.click()

    def test_cannot_navigate_before_launch(self) -> None:
        sm = InteractionStateMachine()
        with pytest.raises(TransitionNotAllowed):
            sm.navigate()

    def test_terminal_states_are_final(self) -> None:
        """No event leaves 'succeeded' or 'failed'."""
        sm = InteractionStateMachine()
        advance(sm, ["launch", "fail"])
        assert sm.current_state.final is True
        with pytest.raises(TransitionNotAllowed):
            sm.navigate()
