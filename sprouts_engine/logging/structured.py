"""
Structured JSON Logger
======================

Bounded Context: Observability Infrastructure

JSON-lines logger used by the engine, synthesizer and CLI.

Design:
- One JSON object per line (log aggregator friendly)
- Wraps the standard logging module (handlers, levels, propagation)
- Typed events (LogEvent enum)

Example:
    >>> logger = StructuredLogger(component="engine")
    >>> logger.info(
    ...     event=LogEvent.MOVE_APPLIED,
    ...     message="Move applied",
    ...     metadata={'turn': 4, 'curve_id': 'curve-3'}
    ... )

Output:
    {
        "timestamp": "2026-03-02T10:15:03.120034+00:00",
        "level": "INFO",
        "component": "engine",
        "event": "move.applied",
        "message": "Move applied",
        "metadata": {"turn": 4, "curve_id": "curve-3"}
    }
"""

import json
import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional, Union
from .events import LogEvent


class StructuredLogger:
    """
    JSON structured logger.

    Attributes:
        component: Component name (e.g., "engine", "synthesis")
        logger: Underlying Python logger instance
    """

    def __init__(
        self,
        component: str,
        level: int = logging.INFO,
        logger_name: Optional[str] = None
    ):
        """
        Initialize structured logger.

        Args:
            component: Component identifier
            level: Logging level (default: INFO)
            logger_name: Custom logger name (default: sprouts_engine.<component>)
        """
        self.component = component
        self.logger_name = logger_name or f"sprouts_engine.{component}"
        self.logger = logging.getLogger(self.logger_name)
        self.logger.setLevel(level)

        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(JSONFormatter())
            self.logger.addHandler(handler)

    def _log(
        self,
        level: str,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[Exception] = None
    ) -> None:
        log_level = getattr(logging, level)
        if not self.logger.isEnabledFor(log_level):
            return

        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': level,
            'component': self.component,
            'event': event.value,
            'message': message,
        }

        if metadata:
            log_entry['metadata'] = metadata

        if exc_info:
            log_entry['exception'] = {
                'type': type(exc_info).__name__,
                'message': str(exc_info)
            }

        self.logger.log(log_level, json.dumps(log_entry, default=str))

    def debug(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """Log DEBUG level message (synthesis ladder detail)."""
        self._log('DEBUG', event, message, metadata)

    def info(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Log INFO level message.

        Example:
            >>> logger.info(
            ...     event=LogEvent.GAME_CREATED,
            ...     message="Game created",
            ...     metadata={'point_count': 3}
            ... )
        """
        self._log('INFO', event, message, metadata)

    def warning(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """Log WARNING level message."""
        self._log('WARNING', event, message, metadata)

    def error(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[Exception] = None
    ) -> None:
        """
        Log ERROR level message.

        Example:
            >>> try:
            ...     engine.deserialize_state(text)
            ... except InvalidGameStateError as e:
            ...     logger.error(
            ...         event=LogEvent.DESERIALIZATION_ERROR,
            ...         message="Rejected snapshot",
            ...         exc_info=e,
            ...     )
        """
        self._log('ERROR', event, message, metadata, exc_info)

    def set_level(self, level: Union[int, str]) -> None:
        """Change logging level dynamically (int or name like "DEBUG")."""
        self.logger.setLevel(level)


class JSONFormatter(logging.Formatter):
    """Pass-through formatter: StructuredLogger already emits JSON."""

    def format(self, record: logging.LogRecord) -> str:
        return record.getMessage()


def create_logger(
    component: str,
    level: Union[int, str] = logging.INFO
) -> StructuredLogger:
    """
    Factory function to create configured StructuredLogger.

    Args:
        component: Component identifier
        level: Logging level, numeric or by name (default: INFO)

    Returns:
        Configured StructuredLogger instance

    Example:
        >>> logger = create_logger("engine", level="DEBUG")
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    return StructuredLogger(component=component, level=level)
