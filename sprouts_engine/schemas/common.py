"""
Common Schema Types
===================

Bounded Context: Shared Data Structures

Design Principles:
- Immutability: frozen=True prevents accidental mutation
- Serialization: to_dict() for JSON export, from_dict() for import
- Validation: Constructor validates invariants

Types:
- Timestamp: ISO 8601 timestamp wrapper
- position_to_dict / position_from_dict: (x, y) wire format, finite only
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Sequence, Tuple

import numpy as np

from sprouts_engine.geometry.vectors import Vec


@dataclass(frozen=True)
class Timestamp:
    """
    Immutable ISO 8601 timestamp wrapper.

    Attributes:
        value: ISO 8601 formatted timestamp string

    Example:
        >>> ts = Timestamp.now()
        >>> ts.value
        '2026-03-02T10:15:03.120034+00:00'
    """
    value: str

    @classmethod
    def now(cls) -> 'Timestamp':
        """Create timestamp from current UTC time."""
        return cls(value=datetime.now(timezone.utc).isoformat())

    def to_datetime(self) -> datetime:
        """Parse to datetime object.

        Raises:
            ValueError: If timestamp format invalid
        """
        try:
            return datetime.fromisoformat(self.value)
        except ValueError as e:
            raise ValueError(f"Invalid ISO timestamp: {self.value}") from e

    def to_dict(self) -> str:
        """Serialize to JSON (as string)."""
        return self.value


def position_to_dict(position: Vec) -> Dict[str, float]:
    return {'x': position[0], 'y': position[1]}


def position_from_dict(data: Dict[str, Any]) -> Vec:
    """Parse ``{'x': .., 'y': ..}``; raises KeyError/TypeError/ValueError."""
    return finite_position((data['x'], data['y']))


def path_to_list(path: Sequence[Vec]) -> List[Dict[str, float]]:
    return [position_to_dict(p) for p in path]


def path_from_list(data: Sequence[Dict[str, Any]]) -> Tuple[Vec, ...]:
    return tuple(position_from_dict(p) for p in data)


def as_position(value: Sequence[float]) -> Vec:
    """Coerce any 2-sequence to a float tuple."""
    x, y = value
    return (float(x), float(y))


def finite_position(value: Sequence[float]) -> Vec:
    """
    Coerce like ``as_position`` and reject NaN or infinite coordinates.

    Raises:
        ValueError: If either coordinate is not finite
    """
    position = as_position(value)
    if not np.isfinite(position).all():
        raise ValueError(f"Position must be finite, got {position}")
    return position
