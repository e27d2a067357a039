"""Window module - relevance scoring and retention selection for conversation context."""

from .manager import ContextWindowManager
from .scoring import (
    calculate_business_entity_relevance,
    calculate_conversation_flow_relevance,
    calculate_recency_score,
    calculate_user_engagement_score,
    score_conversation,
    score_message,
)
from .selection import select_retention
from .tokens import build_message_tokens, estimate_tokens, total_tokens
from .types import (
    DEFAULT_WINDOW_LIMITS,
    ContextMetrics,
    ConversationMessage,
    ConversationPhase,
    EngagementLevel,
    MessageToken,
    RelevanceComponents,
    RelevanceScore,
    RetentionDecision,
    RetentionPriority,
    TokenUsageCheck,
    WindowLimits,
    classify_retention_priority,
)
from .validation import get_metrics, validate_limits, validate_message_count, validate_token_usage

__all__ = [
    "DEFAULT_WINDOW_LIMITS",
    "ContextMetrics",
    "ContextWindowManager",
    "ConversationMessage",
    "ConversationPhase",
    "EngagementLevel",
    "MessageToken",
    "RelevanceComponents",
    "RelevanceScore",
    "RetentionDecision",
    "RetentionPriority",
    "TokenUsageCheck",
    "WindowLimits",
    "build_message_tokens",
    "calculate_business_entity_relevance",
    "calculate_conversation_flow_relevance",
    "calculate_recency_score",
    "calculate_user_engagement_score",
    "classify_retention_priority",
    "estimate_tokens",
    "get_metrics",
    "score_conversation",
    "score_message",
    "select_retention",
    "total_tokens",
    "validate_limits",
    "validate_message_count",
    "validate_token_usage",
]
