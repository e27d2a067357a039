"""Types for the context-window engine.

All records are frozen pydantic models: produced fresh per call, owned by
the caller, never cached across calls.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from ..errors import ContextCompressionError

ConversationPhase = Literal[
    "discovery",
    "qualification",
    "demo",
    "objection_handling",
    "closing",
    "unknown",
]
EngagementLevel = Literal["high", "medium", "low"]
RetentionPriority = Literal["high", "medium", "low"]

# Fixed retention priority thresholds on the overall score
HIGH_PRIORITY_THRESHOLD = 0.7
MEDIUM_PRIORITY_THRESHOLD = 0.4


def classify_retention_priority(overall_score: float) -> RetentionPriority:
    """Map an overall relevance score to its retention priority."""
    if overall_score >= HIGH_PRIORITY_THRESHOLD:
        return "high"
    if overall_score >= MEDIUM_PRIORITY_THRESHOLD:
        return "medium"
    return "low"


class MessageToken(BaseModel):
    """Token accounting for a single message, in conversation order."""

    model_config = ConfigDict(frozen=True)

    message_id: str
    token_count: int = Field(ge=0)
    cumulative_tokens: int = Field(ge=0)


class RelevanceComponents(BaseModel):
    """The four independent component scores behind an overall score."""

    model_config = ConfigDict(frozen=True)

    recency_score: float = Field(ge=0.0, le=1.0)
    business_entity_relevance: float = Field(ge=0.0, le=1.0)
    conversation_flow_relevance: float = Field(ge=0.0, le=1.0)
    user_engagement_score: float = Field(ge=0.0, le=1.0)


class RelevanceScore(BaseModel):
    """Multi-factor relevance score for one message."""

    model_config = ConfigDict(frozen=True)

    message_id: str
    overall_score: float = Field(ge=0.0, le=1.0)
    components: RelevanceComponents
    calculated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @computed_field  # type: ignore[prop-decorator]
    @property
    def retention_priority(self) -> RetentionPriority:
        return classify_retention_priority(self.overall_score)


def check_window_limits(limits: WindowLimits) -> None:
    """Run the window limit rules in order, reporting the first violation.

    Raises:
        ContextCompressionError: If the limits are invalid
    """
    if limits.max_tokens <= 0:
        raise ContextCompressionError(
            "token_limits",
            "max_tokens must be positive",
            max_tokens=limits.max_tokens,
        )
    if limits.soft_limit_tokens >= limits.max_tokens:
        raise ContextCompressionError(
            "token_limits",
            "soft_limit_tokens must be less than max_tokens",
            soft_limit_tokens=limits.soft_limit_tokens,
            max_tokens=limits.max_tokens,
        )
    if limits.soft_limit_tokens <= 0:
        raise ContextCompressionError(
            "token_limits",
            "soft_limit_tokens must be positive",
            soft_limit_tokens=limits.soft_limit_tokens,
        )
    if limits.min_retained_messages <= 0:
        raise ContextCompressionError(
            "message_limits",
            "min_retained_messages must be positive",
            min_retained_messages=limits.min_retained_messages,
        )
    if limits.min_retained_messages > limits.max_retained_messages:
        raise ContextCompressionError(
            "message_limits",
            "min_retained_messages cannot exceed max_retained_messages",
            min_retained_messages=limits.min_retained_messages,
            max_retained_messages=limits.max_retained_messages,
        )


class WindowLimits(BaseModel):
    """Token and message-count limits for the context window.

    Validated once at construction; invalid limits raise
    ``ContextCompressionError`` (not a pydantic ``ValidationError``).
    """

    model_config = ConfigDict(frozen=True)

    max_tokens: int = 16000
    soft_limit_tokens: int = 14000
    min_retained_messages: int = 2
    max_retained_messages: int = 18

    @model_validator(mode="after")
    def _check_limits(self) -> WindowLimits:
        check_window_limits(self)
        return self


DEFAULT_WINDOW_LIMITS = WindowLimits()


class RetentionDecision(BaseModel):
    """Result from select_retention."""

    model_config = ConfigDict(frozen=True)

    retained_messages: list[str] = Field(default_factory=list)
    removed_messages: list[str] = Field(default_factory=list)
    total_tokens_retained: int = 0
    compression_ratio: float = 1.0


class ContextMetrics(BaseModel):
    """Point-in-time utilization of the context window."""

    model_config = ConfigDict(frozen=True)

    utilization_percentage: float
    remaining_tokens: int
    compression_recommended: bool
    messages_within_limits: bool


class TokenUsageCheck(BaseModel):
    """Token count compared against the hard and soft limits."""

    model_config = ConfigDict(frozen=True)

    within_hard_limit: bool
    within_soft_limit: bool
    exceeds_recommended_limit: bool


class ConversationMessage(BaseModel):
    """One message of a conversation turn with its scoring signals.

    ``token_count`` is estimated from ``content`` when not supplied.
    """

    model_config = ConfigDict(frozen=True)

    message_id: str
    token_count: int | None = Field(default=None, ge=0)
    content: str | None = None
    business_entity_count: int = Field(default=0, ge=0)
    conversation_phase: ConversationPhase | str = "unknown"
    user_engagement_level: EngagementLevel = "medium"
