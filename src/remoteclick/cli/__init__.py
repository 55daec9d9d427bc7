"""Command-line interface for remoteclick."""
