"""
Sprouts Schemas
===============

Bounded Context: Data Structures

Design:
- Frozen dataclasses (immutability)
- to_dict() for JSON serialization
- from_dict() for deserialization (raises ValueError on bad input)

Public API
----------
Common Types:
    Timestamp: ISO 8601 timestamp wrapper

Board Types:
    Point: Sprout with its incident curve ids
    Curve: Drawn polyline with its inserted point

Move Types:
    ConnectAction: Tagged "connect" action
    Move: Player, timestamp and action

State Types:
    GamePhase: Enum (PLAYING, FINISHED)
    Player, GameMetadata, GameState
    PlayerScore, Scoreboard, GameOver
"""

from .common import Timestamp
from .board import MAX_CONNECTIONS, Point, Curve
from .move import ConnectAction, Move
from .state import (
    GamePhase,
    Player,
    GameMetadata,
    GameState,
    PlayerScore,
    Scoreboard,
    GameOver,
)

__all__ = [
    # Common types
    'Timestamp',
    # Board types
    'MAX_CONNECTIONS',
    'Point',
    'Curve',
    # Move types
    'ConnectAction',
    'Move',
    # State types
    'GamePhase',
    'Player',
    'GameMetadata',
    'GameState',
    'PlayerScore',
    'Scoreboard',
    'GameOver',
]
