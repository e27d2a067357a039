"""Multi-factor relevance scoring for conversation messages.

Each message gets four independent component scores in [0, 1]:

- recency: linear decay over the message position
- business entity relevance: how many domain entities the message carries
- conversation flow relevance: fixed weight per conversation phase
- user engagement: fixed weight per engagement level

The overall score is a fixed weighted sum of the components.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from ..errors import RelevanceCalculationError
from .types import (
    ConversationMessage,
    RelevanceComponents,
    RelevanceScore,
)

logger = logging.getLogger(__name__)

# -- Constants ----------------------------------------------------------------

RECENCY_WEIGHT = 0.3
BUSINESS_ENTITY_WEIGHT = 0.35
CONVERSATION_FLOW_WEIGHT = 0.25
USER_ENGAGEMENT_WEIGHT = 0.1

MIN_RECENCY_SCORE = 0.1
RECENCY_DECAY = 0.9

# Entity count at which business relevance saturates
ENTITY_SATURATION_COUNT = 3

CONVERSATION_FLOW_SCORES: dict[str, float] = {
    "discovery": 0.8,
    "qualification": 1.0,
    "demo": 0.9,
    "objection_handling": 0.95,
    "closing": 1.0,
    "unknown": 0.3,
}
DEFAULT_FLOW_SCORE = 0.5

USER_ENGAGEMENT_SCORES: dict[str, float] = {
    "high": 1.0,
    "medium": 0.6,
    "low": 0.3,
}

# -- Component scores ---------------------------------------------------------


def calculate_recency_score(message_position: int, total_messages: int) -> float:
    """Linear decay from 1.0 at position 0 down to 0.1 at the last position."""
    if total_messages <= 1:
        return 1.0
    relative_position = message_position / (total_messages - 1)
    return max(MIN_RECENCY_SCORE, 1.0 - relative_position * RECENCY_DECAY)


def calculate_business_entity_relevance(business_entity_count: int) -> float:
    if business_entity_count <= 0:
        return 0.1
    if business_entity_count >= ENTITY_SATURATION_COUNT:
        return 1.0
    return 0.3 + (business_entity_count / ENTITY_SATURATION_COUNT) * 0.7


def calculate_conversation_flow_relevance(conversation_phase: str) -> float:
    return CONVERSATION_FLOW_SCORES.get(conversation_phase, DEFAULT_FLOW_SCORE)


def calculate_user_engagement_score(user_engagement_level: str) -> float:
    return USER_ENGAGEMENT_SCORES[user_engagement_level]


# -- Main functions -----------------------------------------------------------


def _check_inputs(message_id: str, inputs: dict[str, Any]) -> None:
    total_messages = inputs["total_messages"]
    message_position = inputs["message_position"]

    if total_messages < 1:
        raise RelevanceCalculationError(message_id, "total_messages must be >= 1", inputs)
    if not 0 <= message_position < total_messages:
        raise RelevanceCalculationError(
            message_id,
            f"message_position must be in [0, {total_messages}), got {message_position}",
            inputs,
        )
    if inputs["business_entity_count"] < 0:
        raise RelevanceCalculationError(message_id, "business_entity_count must be >= 0", inputs)
    if inputs["user_engagement_level"] not in USER_ENGAGEMENT_SCORES:
        raise RelevanceCalculationError(
            message_id,
            f"unknown user_engagement_level: {inputs['user_engagement_level']!r}",
            inputs,
        )


def score_message(
    message_id: str,
    message_position: int,
    total_messages: int,
    business_entity_count: int,
    conversation_phase: str,
    user_engagement_level: str,
    *,
    newest_first: bool = True,
) -> RelevanceScore:
    """Score a single message.

    The recency formula gives position 0 the highest score. With
    ``newest_first=True`` (default) positions are taken as given, so the
    caller indexes the newest message as 0. With ``newest_first=False``
    positions are chronological (0 is the oldest message) and are mirrored
    before scoring, so the newest message still scores highest.

    Args:
        message_id: Message identifier
        message_position: Zero-based position in the message history
        total_messages: Number of messages under consideration
        business_entity_count: Domain entities attributed to the message
        conversation_phase: Conversation phase label (unmapped labels score 0.5)
        user_engagement_level: "high", "medium" or "low"
        newest_first: Whether position 0 is the newest message

    Returns:
        RelevanceScore for the message

    Raises:
        RelevanceCalculationError: If the inputs are invalid or scoring fails
    """
    inputs = {
        "message_position": message_position,
        "total_messages": total_messages,
        "business_entity_count": business_entity_count,
        "conversation_phase": conversation_phase,
        "user_engagement_level": user_engagement_level,
        "newest_first": newest_first,
    }

    try:
        _check_inputs(message_id, inputs)

        position = message_position if newest_first else total_messages - 1 - message_position
        components = RelevanceComponents(
            recency_score=calculate_recency_score(position, total_messages),
            business_entity_relevance=calculate_business_entity_relevance(business_entity_count),
            conversation_flow_relevance=calculate_conversation_flow_relevance(conversation_phase),
            user_engagement_score=calculate_user_engagement_score(user_engagement_level),
        )
        overall = (
            components.recency_score * RECENCY_WEIGHT
            + components.business_entity_relevance * BUSINESS_ENTITY_WEIGHT
            + components.conversation_flow_relevance * CONVERSATION_FLOW_WEIGHT
            + components.user_engagement_score * USER_ENGAGEMENT_WEIGHT
        )
        # Weights sum to 1.0; clamp only absorbs float rounding
        overall = min(1.0, max(0.0, overall))
    except RelevanceCalculationError:
        raise
    except (TypeError, ValueError, ArithmeticError, KeyError) as err:
        raise RelevanceCalculationError(message_id, str(err), inputs) from err

    return RelevanceScore(message_id=message_id, overall_score=overall, components=components)


def score_conversation(messages: Sequence[ConversationMessage]) -> list[RelevanceScore]:
    """Score every message of a conversation given in chronological order."""
    total = len(messages)
    scores = [
        score_message(
            message.message_id,
            position,
            total,
            message.business_entity_count,
            message.conversation_phase,
            message.user_engagement_level,
            newest_first=False,
        )
        for position, message in enumerate(messages)
    ]
    logger.debug("Scored %d messages", total)
    return scores
