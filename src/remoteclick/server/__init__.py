"""HTTP service exposing the interaction engine."""

from remoteclick.server.app import create_app, run, status_for

__all__ = ["create_app", "run", "status_for"]
