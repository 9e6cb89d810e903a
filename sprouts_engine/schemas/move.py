"""
Move Schema
===========

Bounded Context: Player Actions

Design:
- ConnectAction: the only action type ("connect"), tagged on the wire
- Move: who played the action and when

A move is atomic: it is either accepted as a whole (new snapshot) or
rejected before anything is built.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Tuple

from .common import (
    Timestamp,
    Vec,
    as_position,
    path_from_list,
    path_to_list,
    position_from_dict,
    position_to_dict,
)


@dataclass(frozen=True)
class ConnectAction:
    """
    Draw a curve between two points and place a new point on it.

    Attributes:
        from_id: Start point id
        to_id: End point id (== from_id for a loop)
        path: Polyline from the start position to the end position
        new_point_position: Where the new point is placed on the path
        curve_id: Id the new curve will receive
        new_point_id: Id the new point will receive
    """

    TYPE: ClassVar[str] = "connect"

    from_id: str
    to_id: str
    path: Tuple[Vec, ...]
    new_point_position: Vec
    curve_id: str
    new_point_id: str

    def __post_init__(self):
        object.__setattr__(self, 'path', tuple(as_position(p) for p in self.path))
        object.__setattr__(self, 'new_point_position', as_position(self.new_point_position))

    @property
    def type(self) -> str:
        return self.TYPE

    @property
    def is_loop(self) -> bool:
        return self.from_id == self.to_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.TYPE,
            'from_id': self.from_id,
            'to_id': self.to_id,
            'path': path_to_list(self.path),
            'new_point_position': position_to_dict(self.new_point_position),
            'curve_id': self.curve_id,
            'new_point_id': self.new_point_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ConnectAction':
        """Deserialize from dict.

        Raises:
            ValueError: If fields missing, invalid, or type is not "connect"
        """
        try:
            if data['type'] != cls.TYPE:
                raise ValueError(f"Unsupported action type: {data['type']!r}")
            return cls(
                from_id=str(data['from_id']),
                to_id=str(data['to_id']),
                path=path_from_list(data['path']),
                new_point_position=position_from_dict(data['new_point_position']),
                curve_id=str(data['curve_id']),
                new_point_id=str(data['new_point_id']),
            )
        except KeyError as e:
            raise ValueError(f"Missing required ConnectAction field: {e}")
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid ConnectAction data: {e}")


@dataclass(frozen=True)
class Move:
    """
    A player's move.

    Attributes:
        id: Unique move id
        player_id: Id of the player making the move
        timestamp: When the move was created
        action: The connect action
    """

    id: str
    player_id: str
    timestamp: Timestamp
    action: ConnectAction

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'player_id': self.player_id,
            'timestamp': self.timestamp.to_dict(),
            'action': self.action.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Move':
        """Deserialize from dict.

        Raises:
            ValueError: If required fields missing or invalid
        """
        try:
            timestamp = Timestamp(value=str(data['timestamp']))
            timestamp.to_datetime()
            return cls(
                id=str(data['id']),
                player_id=str(data['player_id']),
                timestamp=timestamp,
                action=ConnectAction.from_dict(data['action']),
            )
        except KeyError as e:
            raise ValueError(f"Missing required Move field: {e}")
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid Move data: {e}")
