"""
Structured Logging for the Sprouts Engine
=========================================

Bounded Context: Observability

Design:
- JSON output (one object per line)
- Typed events (enums prevent typos)
- Contextual metadata (game_id, turn, pair, etc.)

Public API
----------
    LogEvent: Typed event names (enum)
    StructuredLogger: JSON logger implementation
    create_logger: Factory function

Example:
    >>> from sprouts_engine.logging import create_logger, LogEvent
    >>> logger = create_logger("engine")
    >>> logger.info(
    ...     event=LogEvent.GAME_FINISHED,
    ...     message="Game over",
    ...     metadata={'winner': 'alice', 'moves': 8}
    ... )
"""

from .events import LogEvent
from .structured import StructuredLogger, create_logger

__all__ = [
    'LogEvent',
    'StructuredLogger',
    'create_logger',
]
