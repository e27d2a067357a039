"""Token accounting helpers for the context window.

Token counts normally come from an upstream tokenizer; ``estimate_tokens``
is a fallback using a simple heuristic: ~4 characters per token.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

from .types import MessageToken


def estimate_tokens(text: str) -> int:
    """Estimate token count for a string using the ~4 chars/token heuristic."""
    return math.ceil(len(text) / 4)


def build_message_tokens(entries: Iterable[tuple[str, int]]) -> list[MessageToken]:
    """Build the ordered MessageToken sequence with running cumulative totals.

    Args:
        entries: ``(message_id, token_count)`` pairs in conversation order

    Raises:
        ValueError: If a token count is negative
    """
    message_tokens: list[MessageToken] = []
    cumulative = 0
    for message_id, token_count in entries:
        if token_count < 0:
            raise ValueError(f"Token count for message {message_id} must be >= 0, got {token_count}")
        cumulative += token_count
        message_tokens.append(
            MessageToken(
                message_id=message_id,
                token_count=token_count,
                cumulative_tokens=cumulative,
            )
        )
    return message_tokens


def total_tokens(message_tokens: Sequence[MessageToken]) -> int:
    """Total tokens of an ordered MessageToken sequence (0 if empty)."""
    if not message_tokens:
        return 0
    return message_tokens[-1].cumulative_tokens
