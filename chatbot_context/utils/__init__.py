"""Utility functions for chatbot_context."""

from .config import configure_file_logging, load_window_limits

__all__ = [
    "configure_file_logging",
    "load_window_limits",
]
