"""ContextWindowManager - single entry point for one conversation turn."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from .scoring import score_conversation, score_message
from .selection import select_retention
from .tokens import build_message_tokens, estimate_tokens
from .types import (
    DEFAULT_WINDOW_LIMITS,
    ContextMetrics,
    ConversationMessage,
    MessageToken,
    RelevanceScore,
    RetentionDecision,
    TokenUsageCheck,
    WindowLimits,
)
from .validation import (
    get_metrics,
    validate_limits,
    validate_message_count,
    validate_token_usage,
)

logger = logging.getLogger(__name__)


class ContextWindowManager:
    """Scores and trims conversation history to fit the context window.

    Limits are validated once at construction; invalid limits raise
    ContextCompressionError instead of falling back to defaults. The
    manager holds no state besides its limits, so a single instance can be
    shared across threads and tasks.

    Usage::

        from chatbot_context import ContextWindowManager, ConversationMessage

        manager = ContextWindowManager()
        decision = manager.plan_turn([
            ConversationMessage(message_id="m1", token_count=120, conversation_phase="discovery"),
            ConversationMessage(message_id="m2", content="What does pricing look like?"),
        ])
        kept = decision.retained_messages
    """

    def __init__(self, limits: WindowLimits | None = None):
        limits = limits if limits is not None else DEFAULT_WINDOW_LIMITS
        validate_limits(limits)
        self._limits = limits
        logger.debug(
            "ContextWindowManager limits: max=%d soft=%d min_retained=%d max_retained=%d",
            limits.max_tokens,
            limits.soft_limit_tokens,
            limits.min_retained_messages,
            limits.max_retained_messages,
        )

    @classmethod
    def from_env(cls) -> ContextWindowManager:
        """Create a manager from CONTEXT_WINDOW_* environment variables."""
        from ..utils.config import load_window_limits

        return cls(load_window_limits())

    @property
    def limits(self) -> WindowLimits:
        return self._limits

    def score_message(
        self,
        message_id: str,
        message_position: int,
        total_messages: int,
        business_entity_count: int,
        conversation_phase: str,
        user_engagement_level: str,
        *,
        newest_first: bool = True,
    ) -> RelevanceScore:
        return score_message(
            message_id,
            message_position,
            total_messages,
            business_entity_count,
            conversation_phase,
            user_engagement_level,
            newest_first=newest_first,
        )

    def select_retention(
        self,
        message_tokens: Sequence[MessageToken],
        relevance_scores: Iterable[RelevanceScore],
    ) -> RetentionDecision:
        return select_retention(message_tokens, relevance_scores, self._limits)

    def get_metrics(self, current_tokens: int, message_count: int) -> ContextMetrics:
        return get_metrics(current_tokens, message_count, self._limits)

    def validate_message_count(self, count: int) -> bool:
        return validate_message_count(count, self._limits)

    def validate_token_usage(self, token_count: int) -> TokenUsageCheck:
        return validate_token_usage(token_count, self._limits)

    def plan_turn(self, messages: Sequence[ConversationMessage]) -> RetentionDecision:
        """Score a chronologically ordered conversation and select what to keep.

        Messages without a token_count are estimated from their content.
        """
        message_tokens = build_message_tokens(
            (message.message_id, _token_count(message)) for message in messages
        )
        scores = score_conversation(messages)
        return select_retention(message_tokens, scores, self._limits)


def _token_count(message: ConversationMessage) -> int:
    if message.token_count is not None:
        return message.token_count
    return estimate_tokens(message.content or "")
