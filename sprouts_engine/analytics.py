"""
Game Statistics
===============

Immutable statistics snapshot for a game state.

Design:
- Value object (no identity), computed on demand
- Move window from the Sprouts bounds: a game on n starting points lasts
  between 2n and 3n - 1 moves
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict

from sprouts_engine.schemas.state import GameState


@dataclass(frozen=True)
class GameStatistics:
    """
    Immutable statistics snapshot.

    Attributes:
        initial_points: Starting point count (n)
        total_points: Points on the board
        total_curves: Curves on the board
        moves_played: Accepted moves so far
        legal_moves_remaining: Legal pair count
        live_points: Points with at least one spare slot
        spare_capacity: Sum of spare slots over all points
        min_total_moves: 2n
        max_total_moves: 3n - 1
        estimated_remaining_min: Lower bound on moves still to come
        estimated_remaining_max: Upper bound on moves still to come
        phase: "playing" or "finished"
    """

    initial_points: int
    total_points: int
    total_curves: int
    moves_played: int
    legal_moves_remaining: int
    live_points: int
    spare_capacity: int
    min_total_moves: int
    max_total_moves: int
    estimated_remaining_min: int
    estimated_remaining_max: int
    phase: str

    def __str__(self) -> str:
        return (
            f"move {self.moves_played} ({self.phase}): "
            f"{self.total_points} points, {self.total_curves} curves, "
            f"{self.legal_moves_remaining} legal pairs, "
            f"{self.estimated_remaining_min}-{self.estimated_remaining_max} moves left"
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def compute_statistics(state: GameState) -> GameStatistics:
    meta = state.metadata
    n = meta.initial_point_count
    played = state.turn_number
    min_total = 2 * n
    max_total = 3 * n - 1
    finished = meta.legal_moves_remaining == 0
    return GameStatistics(
        initial_points=n,
        total_points=len(meta.points),
        total_curves=len(meta.curves),
        moves_played=played,
        legal_moves_remaining=meta.legal_moves_remaining,
        live_points=sum(1 for p in meta.points if p.spare > 0),
        spare_capacity=sum(p.spare for p in meta.points),
        min_total_moves=min_total,
        max_total_moves=max_total,
        estimated_remaining_min=0 if finished else max(1, min_total - played),
        estimated_remaining_max=0 if finished else max(1, max_total - played),
        phase=meta.phase.value,
    )
