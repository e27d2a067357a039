"""Retention selection: which messages stay in the context window.

1. Under the soft limit -> keep everything (no-op)
2. Otherwise:
   - Reserve the most recent ``min_retained_messages`` messages unconditionally
   - Fill the remaining soft-limit budget greedily by relevance, skipping
     (not stopping at) candidates that don't fit
   - Return retained ids in conversation order
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from ..errors import ContextWindowExceededError, RelevanceCalculationError
from .tokens import total_tokens
from .types import MessageToken, RelevanceScore, RetentionDecision, WindowLimits
from .validation import validate_limits

logger = logging.getLogger(__name__)


def select_retention(
    message_tokens: Sequence[MessageToken],
    relevance_scores: Iterable[RelevanceScore],
    limits: WindowLimits,
) -> RetentionDecision:
    """Select the messages to retain within the window limits.

    Args:
        message_tokens: Token accounting in conversation order
        relevance_scores: One RelevanceScore per message (any order)
        limits: Window limits (re-validated before use)

    Returns:
        RetentionDecision with retained ids in conversation order

    Raises:
        RelevanceCalculationError: If a message has no relevance score
        ContextCompressionError: If the limits are invalid
        ContextWindowExceededError: If the reserved tail alone reaches max_tokens
    """
    validate_limits(limits)

    if not message_tokens:
        return RetentionDecision()

    history_tokens = total_tokens(message_tokens)
    all_ids = [mt.message_id for mt in message_tokens]

    # Under budget - no-op
    if history_tokens <= limits.soft_limit_tokens:
        logger.debug(
            "No compression needed: %d tokens within soft limit %d",
            history_tokens,
            limits.soft_limit_tokens,
        )
        return RetentionDecision(
            retained_messages=all_ids,
            removed_messages=[],
            total_tokens_retained=history_tokens,
            compression_ratio=1.0,
        )

    scores_by_id = {score.message_id: score for score in relevance_scores}
    for mt in message_tokens:
        if mt.message_id not in scores_by_id:
            raise RelevanceCalculationError(
                mt.message_id,
                "no relevance score supplied for message",
                {"token_count": mt.token_count},
            )

    # Reserved tail: the most recent messages are always kept
    reserved_start = max(0, len(message_tokens) - limits.min_retained_messages)
    selected = set(range(reserved_start, len(message_tokens)))
    current_tokens = sum(mt.token_count for mt in message_tokens[reserved_start:])

    if current_tokens >= limits.max_tokens:
        raise ContextWindowExceededError(current_tokens, limits.max_tokens, len(selected))

    # sorted() is stable, so equal scores keep conversation order
    candidates = sorted(
        range(reserved_start),
        key=lambda i: scores_by_id[message_tokens[i].message_id].overall_score,
        reverse=True,
    )
    for index in candidates:
        cost = message_tokens[index].token_count
        if current_tokens + cost > limits.soft_limit_tokens:
            continue
        if len(selected) >= limits.max_retained_messages:
            continue
        selected.add(index)
        current_tokens += cost

    retained = [all_ids[i] for i in sorted(selected)]
    removed = [all_ids[i] for i in range(len(all_ids)) if i not in selected]
    compression_ratio = current_tokens / history_tokens

    logger.info(
        "Context compressed: kept %d/%d messages, %d/%d tokens (ratio %.3f)",
        len(retained),
        len(all_ids),
        current_tokens,
        history_tokens,
        compression_ratio,
    )

    return RetentionDecision(
        retained_messages=retained,
        removed_messages=removed,
        total_tokens_retained=current_tokens,
        compression_ratio=compression_ratio,
    )
