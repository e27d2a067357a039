"""Validation of window limits and point-in-time utilization metrics."""

from __future__ import annotations

from .types import ContextMetrics, TokenUsageCheck, WindowLimits, check_window_limits


def validate_limits(limits: WindowLimits) -> None:
    """Validate a WindowLimits configuration.

    Checks run in a fixed order and the first violation is reported. Limits
    built through ``WindowLimits(...)`` already passed these checks; this
    also covers records made with ``model_copy``/``model_construct``.

    Raises:
        ContextCompressionError: If the limits are invalid
    """
    check_window_limits(limits)


def get_metrics(current_tokens: int, message_count: int, limits: WindowLimits) -> ContextMetrics:
    """Report utilization for an externally tracked token and message count."""
    validate_limits(limits)
    return ContextMetrics(
        utilization_percentage=current_tokens / limits.max_tokens * 100,
        remaining_tokens=limits.max_tokens - current_tokens,
        compression_recommended=current_tokens > limits.soft_limit_tokens,
        messages_within_limits=message_count <= limits.max_retained_messages,
    )


def validate_message_count(count: int, limits: WindowLimits) -> bool:
    return limits.min_retained_messages <= count <= limits.max_retained_messages


def validate_token_usage(token_count: int, limits: WindowLimits) -> TokenUsageCheck:
    return TokenUsageCheck(
        within_hard_limit=token_count <= limits.max_tokens,
        within_soft_limit=token_count <= limits.soft_limit_tokens,
        exceeds_recommended_limit=token_count > limits.soft_limit_tokens,
    )
