"""remoteclick - drive a headless browser to click one element on demand."""

__version__ = "0.1.0"
