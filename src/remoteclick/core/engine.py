"""Interaction engine for remoteclick.

This module provides the orchestrator that runs one request through the
pipeline stages in the order fixed by InteractionStateMachine:
launch, navigate, optional extra wait, resolve the execution context, wait
for the element, scroll, click, post-click wait. Every stage error is turned
into a typed Outcome; the browser session is torn down on every exit path.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from typing import Any

from remoteclick.core.browser import (
    BrowserSession,
    bundled_executable_path,
    locate_browser_executable,
)
from remoteclick.core.context import resolve_context
from remoteclick.core.interaction import ElementLocator, InteractionExecutor
from remoteclick.core.navigator import Navigator
from remoteclick.core.protocols import LivenessReport, Outcome, RequestDescriptor
from remoteclick.core.reporter import OutcomeReporter
from remoteclick.core.states import InteractionStateMachine
from remoteclick.utils.config import AppConfig
from remoteclick.utils.exceptions import RemoteClickError, ValidationFailure
from remoteclick.utils.session import RunRecorder

logger = logging.getLogger(__name__)

SessionFactory = Callable[[AppConfig], BrowserSession]


class InteractionEngine:
    """Runs interaction, probe and liveness requests.

    The engine holds no per-request state; each call builds its own session,
    state machine, reporter and recorder, so one engine can serve concurrent
    requests.

    Attributes:
        config: Application configuration.

    Example:
        >>> engine = InteractionEngine(ConfigLoader.load())
        >>> outcome = await engine.invoke(
        ...     {"url": "https://example.com", "buttonId": "submit"}
        ... )
        >>> outcome.to_dict()["success"]
    """

    def __init__(
        self,
        config: AppConfig,
        session_factory: SessionFactory = BrowserSession,
    ) -> None:
        """Initialize the engine.

        Args:
            config: Application configuration.
            session_factory: Builds the browser session for one request.
        """
        self.config = config
        self._session_factory = session_factory

    async def invoke(self, request: RequestDescriptor | Mapping[str, Any]) -> Outcome:
        """Run the full interaction pipeline for one request.

        Args:
            request: A descriptor, or the raw camelCase mapping to validate.

        Returns:
            Success with interaction details, or a typed failure. Never raises
            for stage errors; ``asyncio.CancelledError`` still propagates.
        """
        reporter = OutcomeReporter()
        try:
            descriptor = (
                request
                if isinstance(request, RequestDescriptor)
                else RequestDescriptor.from_mapping(request)
            )
        except ValidationFailure as e:
            logger.warning("Rejected request: %s", e.message)
            return reporter.failure(e)

        machine = InteractionStateMachine()
        recorder = RunRecorder(self.config.artifacts_dir, "run", descriptor.to_dict())
        logger.info(
            "Run %s: %s -> %s",
            recorder.run_id,
            descriptor.url,
            descriptor.target_selector,
        )

        try:
            self._advance(machine, recorder, "launch")
            async with self._session_factory(self.config) as session:
                try:
                    outcome = await self._interact(
                        session, descriptor, machine, recorder, reporter
                    )
                except Exception:
                    await self._save_html_dump_on_failure(session, recorder)
                    raise
        except Exception as e:
            outcome = self._fail(
                e, machine, recorder, reporter, descriptor.frame_url_contains
            )

        return self._complete(outcome, machine, recorder)

    async def _interact(
        self,
        session: BrowserSession,
        descriptor: RequestDescriptor,
        machine: InteractionStateMachine,
        recorder: RunRecorder,
        reporter: OutcomeReporter,
    ) -> Outcome:
        page = session.page

        self._advance(machine, recorder, "navigate")
        navigation = await Navigator(
            page,
            timeout_ms=self.config.nav_timeout,
            retries=self.config.nav_retries,
            retry_delay_ms=self.config.nav_retry_delay,
        ).navigate(descriptor.url)
        after_nav_url = navigation.final_url

        if descriptor.extra_wait_after_load_ms > 0:
            self._advance(machine, recorder, "settle")
            await asyncio.sleep(descriptor.extra_wait_after_load_ms / 1000)

        self._advance(machine, recorder, "resolve_context")
        context = resolve_context(
            page,
            descriptor.frame_url_contains,
            after_nav_url=after_nav_url,
            nav_status=navigation.http_status,
        )

        selector = descriptor.target_selector
        selector_timeout = (
            descriptor.wait_for_selector_ms
            if descriptor.wait_for_selector_ms is not None
            else self.config.selector_timeout
        )
        self._advance(machine, recorder, "locate")
        await ElementLocator(page).wait_for_visible(
            context,
            selector,
            selector_timeout,
            after_nav_url=after_nav_url,
            nav_status=navigation.http_status,
        )

        executor = InteractionExecutor(click_timeout=selector_timeout)
        self._advance(machine, recorder, "scroll")
        await executor.scroll_into_view(context, selector)
        self._advance(machine, recorder, "click")
        await executor.perform_click(context, selector, descriptor.use_js_click)

        wait_ms = (
            descriptor.wait_ms
            if descriptor.wait_ms is not None
            else self.config.default_wait
        )
        self._advance(machine, recorder, "wait_after_click")
        outcome = await reporter.report_success(
            descriptor,
            navigation,
            lambda: page.url,
            selector,
            wait_ms,
            selector_timeout,
        )
        self._advance(machine, recorder, "succeed")
        return outcome

    async def probe(self, url: str | None) -> Outcome:
        """Launch and navigate only, then report URL, status and title.

        Navigation is attempted once.

        Args:
            url: The page to load.

        Returns:
            Probe success, or a typed failure.
        """
        reporter = OutcomeReporter()
        if not url:
            return reporter.failure(ValidationFailure("Missing url", missing=["url"]))

        machine = InteractionStateMachine()
        recorder = RunRecorder(self.config.artifacts_dir, "info", {"url": url})
        logger.info("Probe %s: %s", recorder.run_id, url)

        try:
            self._advance(machine, recorder, "launch")
            async with self._session_factory(self.config) as session:
                page = session.page
                self._advance(machine, recorder, "navigate")
                navigation = await Navigator(
                    page, timeout_ms=self.config.nav_timeout, retries=0
                ).navigate(url)
                title = await self._read_title(session)
                outcome = reporter.probe_success(navigation, title)
                self._advance(machine, recorder, "succeed")
        except Exception as e:
            outcome = self._fail(e, machine, recorder, reporter)

        return self._complete(outcome, machine, recorder)

    async def liveness(self) -> LivenessReport:
        """Check that a browser executable can be located, without launching.

        Returns:
            LivenessReport with the executable found or every candidate checked.
        """
        bundled = await bundled_executable_path()
        executable, candidates = locate_browser_executable(
            self.config.browser_path, bundled
        )
        if executable is None:
            logger.warning("No browser executable found, checked %s", candidates)
            return LivenessReport(ok=False, executable=None, candidates=candidates)
        return LivenessReport(ok=True, executable=executable)

    def _advance(
        self, machine: InteractionStateMachine, recorder: RunRecorder, event: str
    ) -> None:
        source = machine.stage
        machine.send(event)
        recorder.log_transition(event, source, machine.stage)

    def _fail(
        self,
        error: Exception,
        machine: InteractionStateMachine,
        recorder: RunRecorder,
        reporter: OutcomeReporter,
        frame_filter: str | None = None,
    ) -> Outcome:
        if isinstance(error, RemoteClickError):
            logger.error(
                "Failed at %s: %s %s", machine.stage, error.message, error.details
            )
        else:
            logger.exception("Unexpected error at %s", machine.stage)
        if machine.can_fail:
            self._advance(machine, recorder, "fail")
        return reporter.failure(error, frame_filter)

    async def _read_title(self, session: BrowserSession) -> str | None:
        try:
            return await session.page.title()
        except Exception as e:
            logger.debug("Could not read page title: %s", e)
            return None

    async def _save_html_dump_on_failure(
        self, session: BrowserSession, recorder: RunRecorder
    ) -> None:
        """Save HTML dump on failure for debugging."""
        if recorder.run_dir is None:
            return
        try:
            html_path = recorder.save_html(await session.html())
            logger.info("HTML dump saved: %s", html_path)
        except Exception as e:
            logger.debug("HTML dump skipped: %s", e)

    def _complete(
        self,
        outcome: Outcome,
        machine: InteractionStateMachine,
        recorder: RunRecorder,
    ) -> Outcome:
        """Record the final result and return ``outcome`` unchanged."""
        recorder.complete(
            result="success" if outcome.success else "failed",
            final_stage=machine.stage,
            error=outcome.failure.to_dict() if outcome.failure else None,
        )
        return outcome
