"""Utilities module for remoteclick."""

from .config import AppConfig, ConfigLoader
from .exceptions import (
    ClickFailure,
    ConfigurationError,
    FailureKind,
    FrameNotFound,
    LaunchFailure,
    NavigationError,
    NavigationFailure,
    PermanentError,
    RemoteClickError,
    SelectorTimeout,
    TransientError,
    ValidationFailure,
)
from .session import RunRecorder, StageTransition

__all__ = [
    "AppConfig",
    "ClickFailure",
    "ConfigLoader",
    "ConfigurationError",
    "FailureKind",
    "FrameNotFound",
    "LaunchFailure",
    "NavigationError",
    "NavigationFailure",
    "PermanentError",
    "RemoteClickError",
    "RunRecorder",
    "SelectorTimeout",
    "StageTransition",
    "TransientError",
    "ValidationFailure",
]
