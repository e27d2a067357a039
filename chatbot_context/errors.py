"""Error types raised by the context-window engine.

Every error carries a machine-readable ``code``, a ``severity`` and a
``context`` dict so the conversation layer can log or translate it without
parsing messages. None of these are retried internally.
"""

from typing import Any, Literal

ErrorSeverity = Literal["low", "medium", "high", "critical"]


class ContextWindowError(Exception):
    """Base class for context-window errors."""

    code: str = "CONTEXT_WINDOW_ERROR"
    severity: ErrorSeverity = "medium"

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        self.context = dict(context or {})
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/telemetry."""
        return {
            "code": self.code,
            "severity": self.severity,
            "message": str(self),
            "context": self.context,
        }


class RelevanceCalculationError(ContextWindowError):
    """
    Exception raised when a relevance score cannot be produced or found.

    Signals a caller contract violation (bad inputs, missing score); the
    input set must be fixed before calling again.
    """

    code = "RELEVANCE_CALCULATION_FAILED"
    severity = "medium"

    def __init__(self, message_id: str, reason: str, inputs: dict[str, Any] | None = None):
        self.message_id = message_id
        self.reason = reason
        self.inputs = dict(inputs or {})
        super().__init__(
            f"Relevance calculation failed for message {message_id}: {reason}",
            {"message_id": message_id, "reason": reason, "inputs": self.inputs},
        )


class ContextWindowExceededError(ContextWindowError):
    """
    Exception raised when the reserved recent-message tail alone reaches the
    hard token ceiling.
    """

    code = "CONTEXT_WINDOW_EXCEEDED"
    severity = "high"

    def __init__(self, current_tokens: int, max_tokens: int, reserved_messages: int):
        self.current_tokens = current_tokens
        self.max_tokens = max_tokens
        self.reserved_messages = reserved_messages
        super().__init__(
            f"Context window exceeded: {reserved_messages} reserved messages use "
            f"{current_tokens} tokens (max: {max_tokens})",
            {
                "current_tokens": current_tokens,
                "max_tokens": max_tokens,
                "reserved_messages": reserved_messages,
            },
        )


class ContextCompressionError(ContextWindowError):
    """
    Exception raised for an invalid window limits configuration.

    Only raised at validation/construction time.
    """

    code = "CONTEXT_COMPRESSION_FAILED"
    severity = "high"

    def __init__(
        self,
        category: Literal["token_limits", "message_limits"],
        reason: str,
        **context: Any,
    ):
        self.category = category
        self.reason = reason
        super().__init__(
            f"Invalid {category} configuration: {reason}",
            {"category": category, "reason": reason, **context},
        )
