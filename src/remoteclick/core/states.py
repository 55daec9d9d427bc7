"""State machine for one interaction request.

This module defines the InteractionStateMachine that fixes the order of the
pipeline stages. It uses python-statemachine to enforce transition rules.

States are organized into logical groups:
- Entry: idle (initial)
- Browser: launching, navigating, extra_wait
- Target: resolving_context, locating_element, scrolling, clicking
- Settle: post_wait
- Terminal: succeeded, failed (final states)
"""

from statemachine import State as SMState
from statemachine import StateMachine


class InteractionStateMachine(StateMachine):
    """State machine for the interaction pipeline.

    Attributes:
        step: Counter that increments on each state transition.
        history: (event, source id, target id) for each transition, in order.

    States:
        idle: Nothing started yet.
        launching: Starting the browser process.
        navigating: Loading the target URL, with retry.
        extra_wait: Fixed delay after navigation.
        resolving_context: Picking the document or a frame.
        locating_element: Waiting for the target to be visible.
        scrolling: Scrolling the target into view.
        clicking: Clicking the target.
        post_wait: Fixed delay after the click.
        succeeded: The request completed (final).
        failed: The request ended with a typed failure (final).
    """

    idle = SMState(initial=True)

    launching = SMState()
    navigating = SMState()
    extra_wait = SMState()

    resolving_context = SMState()
    locating_element = SMState()
    scrolling = SMState()
    clicking = SMState()

    post_wait = SMState()

    succeeded = SMState(final=True)
    failed = SMState(final=True)

    # Transitions

    launch = idle.to(launching)
    navigate = launching.to(navigating)
    settle = navigating.to(extra_wait)
    resolve_context = navigating.to(resolving_context) | extra_wait.to(
        resolving_context
    )
    locate = resolving_context.to(locating_element)
    scroll = locating_element.to(scrolling)
    click = scrolling.to(clicking)
    wait_after_click = clicking.to(post_wait)

    # Probe stops after navigation.
    succeed = post_wait.to(succeeded) | navigating.to(succeeded)

    fail = (
        launching.to(failed)
        | navigating.to(failed)
        | resolving_context.to(failed)
        | locating_element.to(failed)
        | clicking.to(failed)
    )

    def __init__(self) -> None:
        """Initialize the state machine with tracking variables."""
        self.step: int = 0
        self.history: list[tuple[str, str, str]] = []
        super().__init__()

    @property
    def can_fail(self) -> bool:
        """Whether the current stage has a transition to ``failed``."""
        return self.current_state in (
            self.launching,
            self.navigating,
            self.resolving_context,
            self.locating_element,
            self.clicking,
        )

    @property
    def stage(self) -> str:
        """Identifier of the current state."""
        return self.current_state.id

    def after_transition(self, event: str, source: SMState, target: SMState) -> None:
        """Callback invoked after any state transition.

        Args:
            event: The event that triggered this state change.
            source: The state we're transitioning from.
            target: The state we're transitioning to.
        """
        self.step += 1
        self.history.append((str(event), source.id, target.id))
