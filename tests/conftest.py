"""Shared pytest configuration and fixtures."""

import logging

import pytest

from chatbot_context.window.types import WindowLimits

LIMIT_ENV_VARS = (
    "CONTEXT_WINDOW_MAX_TOKENS",
    "CONTEXT_WINDOW_SOFT_LIMIT_TOKENS",
    "CONTEXT_WINDOW_MIN_RETAINED_MESSAGES",
    "CONTEXT_WINDOW_MAX_RETAINED_MESSAGES",
)


@pytest.fixture
def default_limits():
    """The documented default window limits."""
    return WindowLimits(
        max_tokens=16000,
        soft_limit_tokens=14000,
        min_retained_messages=2,
        max_retained_messages=18,
    )


@pytest.fixture
def clean_limit_env(monkeypatch):
    """Remove CONTEXT_WINDOW_* variables so tests start from the defaults."""
    for name in LIMIT_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level after a test reconfigures logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
