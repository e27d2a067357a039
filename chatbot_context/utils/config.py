"""Environment-backed configuration and logging setup."""

import logging
import os

from dotenv import load_dotenv

from ..errors import ContextCompressionError
from ..window.types import DEFAULT_WINDOW_LIMITS, WindowLimits

load_dotenv()

# Environment variable -> (WindowLimits field, error category)
_LIMIT_ENV_VARS = {
    "CONTEXT_WINDOW_MAX_TOKENS": ("max_tokens", "token_limits"),
    "CONTEXT_WINDOW_SOFT_LIMIT_TOKENS": ("soft_limit_tokens", "token_limits"),
    "CONTEXT_WINDOW_MIN_RETAINED_MESSAGES": ("min_retained_messages", "message_limits"),
    "CONTEXT_WINDOW_MAX_RETAINED_MESSAGES": ("max_retained_messages", "message_limits"),
}


def load_window_limits() -> WindowLimits:
    """Load window limits from the environment.

    Unset variables fall back to the defaults. WindowLimits validates the
    combined values when it is built.

    Raises:
        ContextCompressionError: If a value is not an integer or the limits are invalid
    """
    values = DEFAULT_WINDOW_LIMITS.model_dump()
    for env_var, (field, category) in _LIMIT_ENV_VARS.items():
        raw = os.getenv(env_var)
        if raw is None or raw.strip() == "":
            continue
        try:
            values[field] = int(raw)
        except ValueError:
            raise ContextCompressionError(
                category, f"{env_var} must be an integer", value=raw
            ) from None

    return WindowLimits(**values)


def configure_file_logging(log_file: str, level: int = logging.INFO) -> None:
    """Send compression and validation logs to a file instead of stdout/stderr.

    Replaces the root logger's handlers, so the ``chatbot_context.*`` loggers
    and any other propagating loggers all write to ``log_file``.
    """
    handler = logging.FileHandler(log_file, mode="a")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s"))
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
