"""
Players and Self-Play
=====================

Automated agents that consume the engine's legal-move list.

Design:
- An agent returns a Move, or None to resign (no synthesizable move)
- Resignation is handled by play_game, outside the state machine, so a
  FINISHED phase always means the capacity rule ran out
"""

from dataclasses import dataclass
from typing import Mapping, Optional

import numpy as np

from sprouts_engine.engine import SproutsEngine
from sprouts_engine.logging import LogEvent
from sprouts_engine.schemas import GameState, Move

REASON_EXHAUSTED = "exhausted"
REASON_RESIGNED = "resigned"
REASON_IN_PROGRESS = "in_progress"


class RandomPlayer:
    """
    Uniform choice among the engine's legal moves.

    Args:
        seed: Seed for the numpy Generator (reproducible games)
    """

    def __init__(self, seed: Optional[int] = None):
        self._rng = np.random.default_rng(seed)

    def choose_move(self, engine: SproutsEngine, state: GameState) -> Optional[Move]:
        moves = engine.get_legal_moves(state, state.current.id)
        if not moves:
            return None
        return moves[int(self._rng.integers(len(moves)))]


@dataclass(frozen=True)
class GameRecord:
    """
    Result of a self-play game.

    Attributes:
        final_state: Last snapshot
        winner: Winning player id
        reason: "exhausted" (no legal pairs), "resigned", or "in_progress"
                when max_moves stopped the game early
        moves_played: Accepted moves
    """

    final_state: GameState
    winner: Optional[str]
    reason: str
    moves_played: int


def play_game(
    engine: SproutsEngine,
    state: GameState,
    agents: Mapping[str, RandomPlayer],
    max_moves: Optional[int] = None
) -> GameRecord:
    """
    Alternate agents until the game ends or an agent resigns.

    Args:
        engine: Rule engine
        state: Starting snapshot
        agents: Agent per player id
        max_moves: Optional cap on moves applied by this call

    Returns:
        GameRecord; on resignation the opponent (the last mover) wins
    """
    applied = 0
    while engine.is_terminal(state) is None:
        if max_moves is not None and applied >= max_moves:
            return GameRecord(state, None, REASON_IN_PROGRESS, state.turn_number)

        player = state.current
        move = agents[player.id].choose_move(engine, state)
        if move is None:
            winner = state.opponent_of(player.id).id
            engine.logger.info(
                event=LogEvent.GAME_RESIGNED,
                message="No synthesizable move; player resigns",
                metadata={'game_id': state.id, 'player_id': player.id, 'winner': winner},
            )
            return GameRecord(state, winner, REASON_RESIGNED, state.turn_number)

        state = engine.apply_move(state, move)
        applied += 1

    return GameRecord(state, state.metadata.winner, REASON_EXHAUSTED, state.turn_number)
