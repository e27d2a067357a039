"""Unit tests for chatbot_context.window.selection module."""

import pytest

from chatbot_context.errors import (
    ContextCompressionError,
    ContextWindowExceededError,
    RelevanceCalculationError,
)
from chatbot_context.window.selection import select_retention
from chatbot_context.window.tokens import build_message_tokens
from chatbot_context.window.types import (
    RelevanceComponents,
    RelevanceScore,
    RetentionDecision,
    WindowLimits,
)

# -- Helpers ----------------------------------------------------------------


def make_tokens(*counts: int):
    """Build MessageTokens m0..mN with the given per-message token counts."""
    return build_message_tokens((f"m{i}", count) for i, count in enumerate(counts))


def make_score(message_id: str, overall: float) -> RelevanceScore:
    components = RelevanceComponents(
        recency_score=0.5,
        business_entity_relevance=0.5,
        conversation_flow_relevance=0.5,
        user_engagement_score=0.5,
    )
    return RelevanceScore(message_id=message_id, overall_score=overall, components=components)


def make_scores(*overall: float) -> list[RelevanceScore]:
    return [make_score(f"m{i}", value) for i, value in enumerate(overall)]


def assert_partition(decision: RetentionDecision, message_tokens) -> None:
    """Retained is an ordered subsequence and retained + removed covers the input exactly."""
    all_ids = [mt.message_id for mt in message_tokens]
    positions = [all_ids.index(mid) for mid in decision.retained_messages]
    assert positions == sorted(positions)
    assert set(decision.retained_messages).isdisjoint(decision.removed_messages)
    assert set(decision.retained_messages) | set(decision.removed_messages) == set(all_ids)
    assert len(decision.retained_messages) + len(decision.removed_messages) == len(all_ids)


# -- No compression -----------------------------------------------------------


class TestNoCompression:
    """Tests for inputs that fit under the soft limit."""

    def test_empty_input(self, default_limits):
        result = select_retention([], [], default_limits)
        assert result.retained_messages == []
        assert result.removed_messages == []
        assert result.total_tokens_retained == 0
        assert result.compression_ratio == 1.0

    def test_under_soft_limit_retains_all(self, default_limits):
        message_tokens = make_tokens(*([50] * 10))
        result = select_retention(message_tokens, [], default_limits)
        assert result.retained_messages == [f"m{i}" for i in range(10)]
        assert result.removed_messages == []
        assert result.total_tokens_retained == 500
        assert result.compression_ratio == 1.0

    def test_exactly_soft_limit_retains_all(self, default_limits):
        message_tokens = make_tokens(7000, 7000)
        result = select_retention(message_tokens, [], default_limits)
        assert result.retained_messages == ["m0", "m1"]
        assert result.compression_ratio == 1.0

    def test_more_messages_than_max_retained_under_budget(self, default_limits):
        message_tokens = make_tokens(*([10] * 25))
        result = select_retention(message_tokens, [], default_limits)
        assert len(result.retained_messages) == 25


# -- Compression --------------------------------------------------------------


class TestCompression:
    """Tests for the reserved-tail + greedy selection path."""

    def test_missing_score_raises(self, default_limits):
        message_tokens = make_tokens(8000, 8000, 100)
        scores = [make_score("m0", 0.5), make_score("m2", 0.5)]
        with pytest.raises(RelevanceCalculationError) as exc_info:
            select_retention(message_tokens, scores, default_limits)
        assert exc_info.value.message_id == "m1"

    def test_reserved_tail_exceeding_max_raises(self, default_limits):
        message_tokens = make_tokens(*([9000] * 5))
        scores = make_scores(0.5, 0.5, 0.5, 0.5, 0.5)
        with pytest.raises(ContextWindowExceededError) as exc_info:
            select_retention(message_tokens, scores, default_limits)
        assert exc_info.value.current_tokens == 18000
        assert exc_info.value.max_tokens == 16000
        assert exc_info.value.reserved_messages == 2

    def test_reserved_tail_equal_to_max_raises(self, default_limits):
        message_tokens = make_tokens(100, 8000, 8000)
        scores = make_scores(0.5, 0.5, 0.5)
        with pytest.raises(ContextWindowExceededError) as exc_info:
            select_retention(message_tokens, scores, default_limits)
        assert exc_info.value.current_tokens == 16000

    def test_skips_oversized_candidate_and_continues(self, default_limits):
        # Tail costs 13800, leaving 200 tokens of soft-limit budget
        message_tokens = make_tokens(5000, 100, 6900, 6900)
        scores = make_scores(0.9, 0.5, 0.1, 0.1)
        result = select_retention(message_tokens, scores, default_limits)
        assert result.retained_messages == ["m1", "m2", "m3"]
        assert result.removed_messages == ["m0"]
        assert result.total_tokens_retained == 13900
        assert result.compression_ratio == pytest.approx(13900 / 18900)
        assert_partition(result, message_tokens)

    def test_prefers_higher_scores_and_keeps_conversation_order(self, default_limits):
        message_tokens = make_tokens(*([3000] * 6))
        scores = make_scores(0.2, 0.9, 0.3, 0.8, 0.1, 0.1)
        result = select_retention(message_tokens, scores, default_limits)
        assert result.retained_messages == ["m1", "m3", "m4", "m5"]
        assert result.removed_messages == ["m0", "m2"]
        assert result.total_tokens_retained == 12000
        assert result.compression_ratio == pytest.approx(12000 / 18000)
        assert_partition(result, message_tokens)

    def test_ties_keep_original_order(self, default_limits):
        message_tokens = make_tokens(*([3000] * 6))
        scores = make_scores(*([0.5] * 6))
        result = select_retention(message_tokens, scores, default_limits)
        assert result.retained_messages == ["m0", "m1", "m4", "m5"]

    def test_score_order_does_not_matter(self, default_limits):
        message_tokens = make_tokens(*([3000] * 6))
        scores = make_scores(0.2, 0.9, 0.3, 0.8, 0.1, 0.1)
        forward = select_retention(message_tokens, scores, default_limits)
        backward = select_retention(message_tokens, reversed(scores), default_limits)
        assert forward == backward

    def test_max_retained_messages_caps_selection(self):
        limits = WindowLimits(
            max_tokens=1000, soft_limit_tokens=800, min_retained_messages=2, max_retained_messages=3
        )
        message_tokens = make_tokens(100, 100, 100, 300, 300)
        scores = make_scores(0.3, 0.9, 0.6, 0.1, 0.1)
        result = select_retention(message_tokens, scores, limits)
        assert result.retained_messages == ["m1", "m3", "m4"]
        assert result.total_tokens_retained == 700
        assert_partition(result, message_tokens)

    def test_tail_over_soft_limit_is_kept(self, default_limits):
        # Tail (15000) is above the soft limit but under max_tokens
        message_tokens = make_tokens(500, 7500, 7500)
        scores = make_scores(1.0, 0.1, 0.1)
        result = select_retention(message_tokens, scores, default_limits)
        assert result.retained_messages == ["m1", "m2"]
        assert result.removed_messages == ["m0"]
        assert result.total_tokens_retained == 15000
        assert result.total_tokens_retained <= default_limits.max_tokens

    def test_zero_cost_candidate_fits_exhausted_budget(self, default_limits):
        # Tail costs exactly the soft limit
        message_tokens = make_tokens(500, 0, 7000, 7000)
        scores = make_scores(1.0, 0.2, 0.1, 0.1)
        result = select_retention(message_tokens, scores, default_limits)
        assert result.retained_messages == ["m1", "m2", "m3"]
        assert result.removed_messages == ["m0"]

    def test_min_retained_larger_than_history(self):
        limits = WindowLimits(
            max_tokens=1000, soft_limit_tokens=500, min_retained_messages=5, max_retained_messages=10
        )
        message_tokens = make_tokens(200, 200, 200)
        scores = make_scores(0.1, 0.1, 0.1)
        result = select_retention(message_tokens, scores, limits)
        assert result.retained_messages == ["m0", "m1", "m2"]
        assert result.total_tokens_retained == 600
        assert result.compression_ratio == 1.0

    def test_tail_is_always_retained(self, default_limits):
        message_tokens = make_tokens(4000, 4000, 4000, 4000, 1000, 1000)
        scores = make_scores(1.0, 1.0, 1.0, 1.0, 0.0, 0.0)
        result = select_retention(message_tokens, scores, default_limits)
        assert result.retained_messages[-2:] == ["m4", "m5"]
        assert result.total_tokens_retained <= default_limits.soft_limit_tokens
        assert_partition(result, message_tokens)

    def test_negative_min_retained_rejected(self):
        limits = WindowLimits.model_construct(
            max_tokens=1000, soft_limit_tokens=100, min_retained_messages=-1, max_retained_messages=5
        )
        message_tokens = make_tokens(300, 300, 300)
        with pytest.raises(ContextCompressionError) as exc_info:
            select_retention(message_tokens, make_scores(0.5, 0.5, 0.5), limits)
        assert exc_info.value.category == "message_limits"

    def test_invalid_limits_rejected_before_empty_shortcut(self):
        limits = WindowLimits.model_construct(
            max_tokens=0, soft_limit_tokens=-1, min_retained_messages=2, max_retained_messages=18
        )
        with pytest.raises(ContextCompressionError):
            select_retention([], [], limits)

    def test_accepts_generator_of_scores(self, default_limits):
        message_tokens = make_tokens(5000, 100, 6900, 6900)
        scores = (score for score in make_scores(0.9, 0.5, 0.1, 0.1))
        result = select_retention(message_tokens, scores, default_limits)
        assert result.retained_messages == ["m1", "m2", "m3"]
