"""Core module for remoteclick interaction logic.

This module exports the pipeline stages, the engine that orchestrates them,
and the foundational types they exchange.
"""

from remoteclick.core.browser import BrowserSession, locate_browser_executable
from remoteclick.core.context import DocumentContext, FrameContext, resolve_context
from remoteclick.core.engine import InteractionEngine
from remoteclick.core.interaction import ElementLocator, InteractionExecutor
from remoteclick.core.navigator import InflightRequests, Navigator, with_retry
from remoteclick.core.protocols import (
    ExecutionContext,
    Failure,
    InteractionResult,
    LivenessReport,
    NavigationResult,
    Outcome,
    ProbeResult,
    RequestDescriptor,
)
from remoteclick.core.reporter import OutcomeReporter
from remoteclick.core.selectors import build_selector, escape_css_id
from remoteclick.core.states import InteractionStateMachine

__all__ = [
    "BrowserSession",
    "DocumentContext",
    "ElementLocator",
    "ExecutionContext",
    "Failure",
    "FrameContext",
    "InflightRequests",
    "InteractionEngine",
    "InteractionExecutor",
    "InteractionResult",
    "InteractionStateMachine",
    "LivenessReport",
    "NavigationResult",
    "Navigator",
    "Outcome",
    "OutcomeReporter",
    "ProbeResult",
    "RequestDescriptor",
    "build_selector",
    "escape_css_id",
    "locate_browser_executable",
    "resolve_context",
    "with_retry",
]
