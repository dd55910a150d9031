"""
Dots Game Error Hierarchy

Unified exception hierarchy for consistent error handling across the engine
and the automated opponent. All custom exceptions inherit from DotsGameError
for easy catching and filtering.

Usage:
    from dotsgame.errors import InvalidConnectionError, NoEnclosingPathError

    try:
        GameEngine.extend_encirclement(state, dot)
    except InvalidConnectionError as e:
        logger.warning(f"Connection rejected: {e.message}")
"""

from typing import Any

__all__ = [
    # AI errors
    "AIError",
    "AIFallbackError",
    "AlreadyEncircledError",
    "ConfigurationError",
    # Base error
    "DotsGameError",
    "InvalidConnectionError",
    "InvalidMoveError",
    "InvalidStateError",
    "NoEnclosingPathError",
    # Game rules errors
    "RulesViolationError",
    # Validation errors
    "ValidationError",
]


class DotsGameError(Exception):
    """Base exception for all game errors.

    Attributes:
        code: Machine-readable error code for categorization
        message: Human-readable error description
        context: Additional context for debugging
    """
    code: str = "DOTS_GAME_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({ctx})"
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


# =============================================================================
# Game Rules Errors
# =============================================================================


class RulesViolationError(DotsGameError):
    """Action that breaks the game rules."""
    code: str = "RULES_VIOLATION"


class InvalidConnectionError(RulesViolationError):
    """Attempted join of dots that cannot be connected.

    The dots are not neighbours, differ in color, or the target is already
    on the path without being its start. Raised after the in-progress path
    has been rolled back.
    """
    code: str = "INVALID_CONNECTION"

    def __init__(
        self,
        message: str,
        from_pos: tuple[int, int] | None = None,
        to_pos: tuple[int, int] | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        if from_pos is not None:
            self.context["from"] = from_pos
        if to_pos is not None:
            self.context["to"] = to_pos


class InvalidStateError(DotsGameError):
    """The game state contradicts itself.

    For example an automated path that was played to the end without
    closing.
    """
    code: str = "INVALID_STATE"


class InvalidMoveError(DotsGameError):
    """Action that cannot be applied to the current state.

    Raised when an action is well formed but not allowed right now
    (finished game, occupied dot, opponent's dot).
    """
    code: str = "INVALID_MOVE"


class AlreadyEncircledError(InvalidMoveError):
    """Selection of a dot that a closed loop already resolved."""
    code: str = "ALREADY_ENCIRCLED"

    def __init__(
        self,
        message: str,
        position: tuple[int, int] | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        if position is not None:
            self.context["position"] = position


# =============================================================================
# AI Errors
# =============================================================================


class AIError(DotsGameError):
    """Base class for AI-related errors."""
    code: str = "AI_ERROR"


class NoEnclosingPathError(AIError):
    """The encirclement builder could not produce a closed loop.

    Raised when the target group still has breakouts, has no perimeter of
    the encircling color, or its perimeter does not reduce to one chain.
    """
    code: str = "NO_ENCLOSING_PATH"

    def __init__(
        self,
        message: str,
        group_size: int | None = None,
        chain_count: int | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        if group_size is not None:
            self.context["group_size"] = group_size
        if chain_count is not None:
            self.context["chain_count"] = chain_count


class AIFallbackError(AIError):
    """An automated player could not carry out its plan and captured instead.

    Attributes:
        original_error: The exception that triggered the fallback
        fallback_method: Description of fallback used (e.g., "capture")
    """
    code: str = "AI_FALLBACK"

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
        fallback_method: str = "capture",
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        self.original_error = original_error
        self.fallback_method = fallback_method
        self.context["fallback_method"] = fallback_method
        if original_error:
            self.context["original_error"] = str(original_error)


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(DotsGameError):
    """Rejected input values."""
    code: str = "VALIDATION_ERROR"


class ConfigurationError(ValidationError):
    """Inconsistent game or AI settings."""
    code: str = "CONFIGURATION_ERROR"
