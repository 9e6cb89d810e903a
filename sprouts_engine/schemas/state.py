"""
Game State Schema
=================

Bounded Context: Game Snapshots

Design:
- GameState is an immutable snapshot; every accepted move builds a new one
- Unchanged Point/Curve records are shared between snapshots (no deep copy)
- Holding a previous GameState is a complete undo

Types:
- Player, GamePhase, GameMetadata, GameState
- PlayerScore, Scoreboard, GameOver (evaluation results)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .board import Point, Curve
from .move import Move


class GamePhase(str, Enum):
    """Game lifecycle phase; FINISHED is absorbing."""
    PLAYING = "playing"
    FINISHED = "finished"


@dataclass(frozen=True)
class Player:
    """A seat at the table."""

    id: str
    name: str
    is_ai: bool = False

    def __post_init__(self):
        if not self.id:
            raise ValueError("Player id cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'name': self.name, 'is_ai': self.is_ai}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Player':
        try:
            return cls(
                id=str(data['id']),
                name=str(data.get('name', data['id'])),
                is_ai=bool(data.get('is_ai', False)),
            )
        except KeyError as e:
            raise ValueError(f"Missing required Player field: {e}")
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid Player data: {e}")


@dataclass(frozen=True)
class GameMetadata:
    """
    Board contents and bookkeeping for one snapshot.

    Attributes:
        points: All points in creation order
        curves: All curves in creation order
        legal_moves_remaining: Legal pair count for this board
        phase: PLAYING or FINISHED
        move_history: Accepted moves, oldest first
        winner: Player id of the winner once FINISHED
    """

    points: Tuple[Point, ...] = ()
    curves: Tuple[Curve, ...] = ()
    legal_moves_remaining: int = 0
    phase: GamePhase = GamePhase.PLAYING
    move_history: Tuple[Move, ...] = ()
    winner: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'points', tuple(self.points))
        object.__setattr__(self, 'curves', tuple(self.curves))
        object.__setattr__(self, 'move_history', tuple(self.move_history))
        object.__setattr__(self, '_point_index', {p.id: p for p in self.points})
        object.__setattr__(self, '_curve_index', {c.id: c for c in self.curves})

    def point(self, point_id: str) -> Optional[Point]:
        return self._point_index.get(point_id)

    def curve(self, curve_id: str) -> Optional[Curve]:
        return self._curve_index.get(curve_id)

    @property
    def last_move(self) -> Optional[Move]:
        return self.move_history[-1] if self.move_history else None

    @property
    def initial_point_count(self) -> int:
        return sum(1 for p in self.points if p.created_at_move == 0)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'points': [p.to_dict() for p in self.points],
            'curves': [c.to_dict() for c in self.curves],
            'legal_moves_remaining': self.legal_moves_remaining,
            'phase': self.phase.value,
            'move_history': [m.to_dict() for m in self.move_history],
        }
        if self.winner is not None:
            data['winner'] = self.winner
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GameMetadata':
        try:
            winner = data.get('winner')
            return cls(
                points=tuple(Point.from_dict(p) for p in data['points']),
                curves=tuple(Curve.from_dict(c) for c in data.get('curves', [])),
                legal_moves_remaining=int(data['legal_moves_remaining']),
                phase=GamePhase(data['phase']),
                move_history=tuple(Move.from_dict(m) for m in data.get('move_history', [])),
                winner=str(winner) if winner is not None else None,
            )
        except KeyError as e:
            raise ValueError(f"Missing required GameMetadata field: {e}")
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid GameMetadata data: {e}")


@dataclass(frozen=True)
class GameState:
    """
    Immutable game snapshot.

    Attributes:
        id: Game id
        players: Exactly two players, in turn order
        current_player: Index into ``players`` of the player to move
        turn_number: Number of accepted moves so far
        metadata: Board contents and bookkeeping

    Invariants:
        - len(players) == 2
        - 0 <= current_player < 2
    """

    id: str
    players: Tuple[Player, ...]
    current_player: int = 0
    turn_number: int = 0
    metadata: GameMetadata = field(default_factory=GameMetadata)

    def __post_init__(self):
        """Validate seating."""
        object.__setattr__(self, 'players', tuple(self.players))
        if len(self.players) != 2:
            raise ValueError(f"Sprouts needs exactly 2 players, got {len(self.players)}")
        if self.players[0].id == self.players[1].id:
            raise ValueError(f"Player ids must differ, got {self.players[0].id!r} twice")
        if self.current_player not in (0, 1):
            raise ValueError(f"current_player must be 0 or 1, got {self.current_player}")
        if self.turn_number < 0:
            raise ValueError(f"turn_number must be >= 0, got {self.turn_number}")

    @property
    def current(self) -> Player:
        return self.players[self.current_player]

    @property
    def is_finished(self) -> bool:
        return self.metadata.phase == GamePhase.FINISHED

    def player(self, player_id: str) -> Optional[Player]:
        return next((p for p in self.players if p.id == player_id), None)

    def opponent_of(self, player_id: str) -> Player:
        return self.players[1] if self.players[0].id == player_id else self.players[0]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'players': [p.to_dict() for p in self.players],
            'current_player': self.current_player,
            'turn_number': self.turn_number,
            'metadata': self.metadata.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GameState':
        """Deserialize from dict.

        Raises:
            ValueError: If required fields missing or invalid
        """
        try:
            return cls(
                id=str(data['id']),
                players=tuple(Player.from_dict(p) for p in data['players']),
                current_player=int(data['current_player']),
                turn_number=int(data['turn_number']),
                metadata=GameMetadata.from_dict(data['metadata']),
            )
        except KeyError as e:
            raise ValueError(f"Missing required GameState field: {e}")
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid GameState data: {e}")


@dataclass(frozen=True)
class PlayerScore:
    player_id: str
    score: float


@dataclass(frozen=True)
class Scoreboard:
    """Per-player scores; winner 1, everyone else 0."""

    scores: Tuple[PlayerScore, ...]

    def for_player(self, player_id: str) -> float:
        return next((s.score for s in self.scores if s.player_id == player_id), 0.0)

    def to_dict(self) -> Dict[str, float]:
        return {s.player_id: s.score for s in self.scores}


@dataclass(frozen=True)
class GameOver:
    """
    Terminal result.

    Attributes:
        winner: Player id of the last mover
        reason: Why the game ended ("no_legal_moves")
        final_scores: Scoreboard at the end
    """

    winner: Optional[str]
    reason: str
    final_scores: Scoreboard
