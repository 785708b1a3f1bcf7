"""Chatline - two-party real-time messaging backend."""

__version__ = "1.0.0"
