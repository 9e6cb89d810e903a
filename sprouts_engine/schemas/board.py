"""
Board Schema
============

Bounded Context: Board Elements

Design:
- Point: a sprout and the ordered ids of the curves meeting it
- Curve: a drawn polyline between two points (or a loop on one)
- Records are never mutated; a point "grows" by being replaced

Invariants:
    - A point has at most MAX_CONNECTIONS incident entries
    - A self-loop contributes two entries to its point
    - A curve's inserted point lists that curve exactly twice
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Tuple

from .common import Vec, finite_position, position_to_dict, position_from_dict, path_to_list, path_from_list

MAX_CONNECTIONS = 3


@dataclass(frozen=True)
class Point:
    """
    Immutable sprout.

    Attributes:
        id: Stable identifier (e.g. "point-4")
        position: (x, y) canvas coordinates
        incident: Ordered ids of curves meeting this point
        created_at_move: Turn number that created the point (0 = initial)

    Example:
        >>> p = Point(id="point-0", position=(300.0, 125.0))
        >>> p.with_incident("curve-0").degree
        1
    """

    id: str
    position: Vec
    incident: Tuple[str, ...] = ()
    created_at_move: int = 0

    def __post_init__(self):
        """Normalize and validate."""
        if not self.id:
            raise ValueError("Point id cannot be empty")
        object.__setattr__(self, 'position', finite_position(self.position))
        object.__setattr__(self, 'incident', tuple(self.incident))
        if len(self.incident) > MAX_CONNECTIONS:
            raise ValueError(
                f"Point '{self.id}' has {len(self.incident)} connections, "
                f"max is {MAX_CONNECTIONS}"
            )

    @property
    def degree(self) -> int:
        return len(self.incident)

    @property
    def spare(self) -> int:
        """Remaining connection slots."""
        return MAX_CONNECTIONS - len(self.incident)

    def with_incident(self, curve_id: str, times: int = 1) -> 'Point':
        """New point with ``curve_id`` appended ``times`` times."""
        return replace(self, incident=self.incident + (curve_id,) * times)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'position': position_to_dict(self.position),
            'incident': list(self.incident),
            'created_at_move': self.created_at_move,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Point':
        """Deserialize from dict.

        Raises:
            ValueError: If required fields missing or invalid
        """
        try:
            return cls(
                id=str(data['id']),
                position=position_from_dict(data['position']),
                incident=tuple(str(c) for c in data.get('incident', [])),
                created_at_move=int(data.get('created_at_move', 0)),
            )
        except KeyError as e:
            raise ValueError(f"Missing required Point field: {e}")
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid Point data: {e}")


@dataclass(frozen=True)
class Curve:
    """
    Immutable drawn curve.

    Attributes:
        id: Stable identifier (e.g. "curve-2")
        start_id: Point the curve leaves from
        end_id: Point the curve arrives at (== start_id for a loop)
        path: Polyline; first/last samples are the endpoint positions and the
              inserted point is one of the interior samples
        new_point_id: Point inserted on this curve
        created_at_move: Turn number that drew the curve
    """

    id: str
    start_id: str
    end_id: str
    path: Tuple[Vec, ...]
    new_point_id: str
    created_at_move: int

    def __post_init__(self):
        """Normalize and validate."""
        if not self.id:
            raise ValueError("Curve id cannot be empty")
        path = tuple(finite_position(p) for p in self.path)
        if len(path) < 2:
            raise ValueError(f"Curve '{self.id}' path needs >= 2 samples, got {len(path)}")
        object.__setattr__(self, 'path', path)

    @property
    def is_loop(self) -> bool:
        return self.start_id == self.end_id

    @property
    def endpoint_ids(self) -> Tuple[str, str]:
        return (self.start_id, self.end_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'start_id': self.start_id,
            'end_id': self.end_id,
            'path': path_to_list(self.path),
            'new_point_id': self.new_point_id,
            'created_at_move': self.created_at_move,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Curve':
        """Deserialize from dict.

        Raises:
            ValueError: If required fields missing or invalid
        """
        try:
            return cls(
                id=str(data['id']),
                start_id=str(data['start_id']),
                end_id=str(data['end_id']),
                path=path_from_list(data['path']),
                new_point_id=str(data['new_point_id']),
                created_at_move=int(data['created_at_move']),
            )
        except KeyError as e:
            raise ValueError(f"Missing required Curve field: {e}")
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid Curve data: {e}")
