__version__ = "0.1.0"

from .errors import (
    ContextCompressionError,
    ContextWindowError,
    ContextWindowExceededError,
    RelevanceCalculationError,
)
from .utils import configure_file_logging, load_window_limits
from .window import (
    DEFAULT_WINDOW_LIMITS,
    ContextMetrics,
    ContextWindowManager,
    ConversationMessage,
    MessageToken,
    RelevanceComponents,
    RelevanceScore,
    RetentionDecision,
    TokenUsageCheck,
    WindowLimits,
    build_message_tokens,
    estimate_tokens,
    get_metrics,
    score_conversation,
    score_message,
    select_retention,
    validate_limits,
    validate_message_count,
    validate_token_usage,
)

__all__ = [
    "DEFAULT_WINDOW_LIMITS",
    "ContextCompressionError",
    "ContextMetrics",
    "ContextWindowError",
    "ContextWindowExceededError",
    "ContextWindowManager",
    "ConversationMessage",
    "MessageToken",
    "RelevanceCalculationError",
    "RelevanceComponents",
    "RelevanceScore",
    "RetentionDecision",
    "TokenUsageCheck",
    "WindowLimits",
    "build_message_tokens",
    "configure_file_logging",
    "estimate_tokens",
    "get_metrics",
    "load_window_limits",
    "score_conversation",
    "score_message",
    "select_retention",
    "validate_limits",
    "validate_message_count",
    "validate_token_usage",
]
