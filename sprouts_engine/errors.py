"""
Error Codes and Exceptions
==========================

Geometry and topology outcomes are values (ValidationResult); exceptions
are raised only at the engine's operation boundary.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Machine-readable reason a state or move was rejected."""
    INVALID_GAME_STATE = "INVALID_GAME_STATE"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    GAME_OVER = "GAME_OVER"
    INVALID_MOVE = "INVALID_MOVE"
    CONNECTION_LIMIT_EXCEEDED = "CONNECTION_LIMIT_EXCEEDED"
    INVALID_CURVE = "INVALID_CURVE"
    INVALID_NEW_POINT = "INVALID_NEW_POINT"
    SYNTHESIS_FAILED = "SYNTHESIS_FAILED"


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of a move validation.

    Attributes:
        is_valid: True when every check passed
        code: Failure code (None when valid)
        message: Human-readable failure reason
    """

    is_valid: bool
    code: Optional[ErrorCode] = None
    message: str = ""

    @classmethod
    def ok(cls) -> 'ValidationResult':
        return cls(is_valid=True)

    @classmethod
    def fail(cls, code: ErrorCode, message: str) -> 'ValidationResult':
        return cls(is_valid=False, code=code, message=message)

    def __bool__(self) -> bool:
        return self.is_valid


class SproutsError(Exception):
    """Base class for engine errors; carries an ErrorCode."""

    def __init__(self, code: ErrorCode, message: str):
        super().__init__(message)
        self.code = code


class InvalidGameStateError(SproutsError):
    """Raised when a state cannot be created or restored"""

    def __init__(self, message: str):
        super().__init__(ErrorCode.INVALID_GAME_STATE, message)


class InvalidMoveError(SproutsError):
    """Raised by apply_move when validation fails"""

    def __init__(self, result: ValidationResult):
        super().__init__(result.code or ErrorCode.INVALID_MOVE, result.message)
        self.result = result
