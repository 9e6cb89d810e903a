"""
Sprouts Game Engine
===================

Bounded Context: Game State Machine

Owns the canonical snapshots and is the only place exceptions are raised.

Design:
- Stateless w.r.t. games: every operation takes a GameState and returns
  a value or a new GameState (the input is never touched)
- Phases: PLAYING -> FINISHED (absorbing), entered the moment the legal
  pair count drops to zero; the player who made that move wins
- Ids are deterministic: point-<k>, curve-<k> in creation order

Operations:
    create_initial_state, validate_move, apply_move, is_terminal,
    evaluate, get_legal_moves, plan_move, create_move,
    serialize_state, deserialize_state, statistics
"""

import json
import math
import uuid
from dataclasses import dataclass
from typing import List, Optional, Sequence

from sprouts_engine.analytics import GameStatistics, compute_statistics
from sprouts_engine.config import EngineConfig, GameSettings, MAX_POINTS, MIN_POINTS
from sprouts_engine.errors import (
    ErrorCode,
    InvalidGameStateError,
    InvalidMoveError,
    ValidationResult,
)
from sprouts_engine.geometry.vectors import Path, Vec
from sprouts_engine.logging import LogEvent, StructuredLogger, create_logger
from sprouts_engine.schemas import (
    ConnectAction,
    Curve,
    GameMetadata,
    GameOver,
    GamePhase,
    GameState,
    Move,
    Player,
    PlayerScore,
    Point,
    Scoreboard,
    Timestamp,
)
from sprouts_engine.synthesis import PathSynthesizer, SynthesisResult
from sprouts_engine.topology import (
    ActionCheck,
    TopologyValidator,
    count_legal_pairs,
    has_legal_pairs,
    legal_pairs,
)

TERMINAL_REASON = "no_legal_moves"


@dataclass(frozen=True)
class MovePlan:
    """
    Candidate move for a point pair.

    Attributes:
        move: Ready-to-apply move, or None when no valid path was found
        synthesis: Synthesizer outcome (carries the fallback loop on failure)
        result: Why ``move`` is None (valid when a move was built)
    """

    move: Optional[Move]
    synthesis: SynthesisResult
    result: ValidationResult


def generate_initial_points(settings: GameSettings) -> List[Point]:
    """
    Starting layout.

    - 2 points: horizontal midline at 30% and 70% of the usable width
    - 3 points: circle of radius 0.25 * usable minimum, first point on top
    - 4-6 points: circle of radius 0.3 * usable minimum, first point on top
    """
    n = settings.point_count
    pad = settings.canvas_padding
    usable_w = settings.canvas_width - 2 * pad
    usable_h = settings.canvas_height - 2 * pad
    cx = settings.canvas_width / 2.0
    cy = settings.canvas_height / 2.0

    if n == 2:
        positions = [(pad + usable_w * 0.3, cy), (pad + usable_w * 0.7, cy)]
    else:
        radius = min(usable_w, usable_h) * (0.25 if n == 3 else 0.3)
        positions = []
        for i in range(n):
            angle = -math.pi / 2 + 2 * math.pi * i / n
            positions.append((cx + radius * math.cos(angle), cy + radius * math.sin(angle)))

    return [Point(id=f"point-{i}", position=pos, created_at_move=0) for i, pos in enumerate(positions)]


class SproutsEngine:
    """
    Sprouts rule engine.

    Usage:
        engine = SproutsEngine()
        state = engine.create_initial_state(
            GameSettings(point_count=3),
            [Player("alice", "Alice"), Player("bob", "Bob")],
        )
        plan = engine.plan_move(state, "alice", "point-0", "point-1")
        state = engine.apply_move(state, plan.move)
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        logger: Optional[StructuredLogger] = None
    ):
        self.config = config or EngineConfig()
        self.logger = logger or create_logger("engine", self.config.log_level)
        self.validator = TopologyValidator(self.config.tolerance)
        self.synthesizer = PathSynthesizer(
            self.config.synthesis,
            self.validator,
            create_logger("synthesis", self.config.log_level),
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def create_initial_state(
        self,
        settings: Optional[GameSettings],
        players: Sequence[Player],
        game_id: Optional[str] = None
    ) -> GameState:
        """
        Build the opening snapshot.

        Raises:
            InvalidGameStateError: If not exactly 2 players, or point_count
                                   outside [2, 6]
        """
        settings = settings or self.config.game
        players = tuple(players)
        if len(players) != 2:
            raise InvalidGameStateError(f"Sprouts needs exactly 2 players, got {len(players)}")
        if not isinstance(settings.point_count, int) or not MIN_POINTS <= settings.point_count <= MAX_POINTS:
            raise InvalidGameStateError(
                f"point_count must be in [{MIN_POINTS}, {MAX_POINTS}], got {settings.point_count}"
            )

        points = tuple(generate_initial_points(settings))
        metadata = GameMetadata(
            points=points,
            curves=(),
            legal_moves_remaining=count_legal_pairs(points),
            phase=GamePhase.PLAYING,
        )
        try:
            state = GameState(
                id=game_id or str(uuid.uuid4()),
                players=players,
                current_player=0,
                turn_number=0,
                metadata=metadata,
            )
        except ValueError as e:
            raise InvalidGameStateError(str(e)) from e

        self.logger.info(
            event=LogEvent.GAME_CREATED,
            message="Game created",
            metadata={'game_id': state.id, 'point_count': settings.point_count},
        )
        return state

    def validate_move(self, state: GameState, move: Move, player_id: str) -> ValidationResult:
        """Pure move check; never raises for a bad move."""
        return self._check(state, move, player_id).result

    def apply_move(self, state: GameState, move: Move) -> GameState:
        """
        Validate and apply ``move``, returning the next snapshot.

        Raises:
            InvalidMoveError: If the move fails validation (``state`` is
                              left untouched)
        """
        check = self._check(state, move, move.player_id)
        if not check.result.is_valid:
            self.logger.info(
                event=LogEvent.MOVE_REJECTED,
                message=check.result.message,
                metadata={'game_id': state.id, 'code': check.result.code.value, 'turn': state.turn_number},
            )
            raise InvalidMoveError(check.result)

        action = move.action
        turn = state.turn_number + 1
        curve = Curve(
            id=action.curve_id,
            start_id=action.from_id,
            end_id=action.to_id,
            path=check.path,
            new_point_id=action.new_point_id,
            created_at_move=turn,
        )
        new_point = Point(
            id=action.new_point_id,
            position=action.new_point_position,
            incident=(curve.id, curve.id),
            created_at_move=turn,
        )
        hits = 2 if action.is_loop else 1
        points = tuple(
            p.with_incident(curve.id, hits) if p.id in (action.from_id, action.to_id) else p
            for p in state.metadata.points
        ) + (new_point,)
        curves = state.metadata.curves + (curve,)

        report = self.validator.validate_state(points, curves)
        if not report.is_valid:
            self.logger.error(
                event=LogEvent.TOPOLOGY_VIOLATION,
                message=report.summary(),
                metadata={'game_id': state.id, 'turn': turn},
            )
            raise InvalidMoveError(ValidationResult.fail(ErrorCode.INVALID_CURVE, report.summary()))

        remaining = count_legal_pairs(points)
        finished = remaining == 0
        metadata = GameMetadata(
            points=points,
            curves=curves,
            legal_moves_remaining=remaining,
            phase=GamePhase.FINISHED if finished else GamePhase.PLAYING,
            move_history=state.metadata.move_history + (move,),
            winner=move.player_id if finished else None,
        )
        next_state = GameState(
            id=state.id,
            players=state.players,
            current_player=(state.current_player + 1) % 2,
            turn_number=turn,
            metadata=metadata,
        )

        self.logger.info(
            event=LogEvent.MOVE_APPLIED,
            message="Move applied",
            metadata={
                'game_id': state.id,
                'turn': turn,
                'player_id': move.player_id,
                'pair': [action.from_id, action.to_id],
                'curve_id': curve.id,
                'legal_moves_remaining': remaining,
            },
        )
        if finished:
            self.logger.info(
                event=LogEvent.GAME_FINISHED,
                message="No legal moves remain",
                metadata={'game_id': state.id, 'winner': move.player_id, 'moves': turn},
            )
        return next_state

    def is_terminal(self, state: GameState) -> Optional[GameOver]:
        """GameOver when the legal pair count is zero, else None."""
        if has_legal_pairs(state.metadata.points):
            return None
        return GameOver(
            winner=self._winner(state),
            reason=TERMINAL_REASON,
            final_scores=self.evaluate(state),
        )

    def evaluate(self, state: GameState) -> Scoreboard:
        """1 for the winner, 0 for everyone else; no draws."""
        winner = None if has_legal_pairs(state.metadata.points) else self._winner(state)
        return Scoreboard(scores=tuple(
            PlayerScore(player_id=p.id, score=1.0 if p.id == winner else 0.0)
            for p in state.players
        ))

    # ------------------------------------------------------------------
    # Move generation
    # ------------------------------------------------------------------

    def get_legal_moves(self, state: GameState, player_id: str) -> List[Move]:
        """
        One synthesized move per legal pair; pairs whose synthesis fails
        are omitted. Empty when it is not ``player_id``'s turn.
        """
        if state.is_finished or state.current.id != player_id:
            return []
        moves = []
        for from_id, to_id in legal_pairs(state.metadata.points):
            plan = self.plan_move(state, player_id, from_id, to_id)
            if plan.move is not None:
                moves.append(plan.move)
        return moves

    def plan_move(
        self,
        state: GameState,
        player_id: str,
        from_id: str,
        to_id: str,
        waypoint: Optional[Vec] = None
    ) -> MovePlan:
        """
        Synthesize a move for a point pair.

        Args:
            state: Current snapshot
            player_id: Player the move is for
            from_id: Start point id
            to_id: End point id (same as from_id for a loop)
            waypoint: Optional pointer position the curve should pass through
        """
        meta = state.metadata
        candidate = ConnectAction(
            from_id=from_id,
            to_id=to_id,
            path=(),
            new_point_position=(0.0, 0.0),
            curve_id=self._next_curve_id(state),
            new_point_id=self._next_point_id(state),
        )
        index = {p.id: p for p in meta.points}
        result = self.validator.check_capacity(candidate, index, meta.curves)
        if not result.is_valid:
            return MovePlan(move=None, synthesis=SynthesisResult(ok=False), result=result)

        synthesis = self.synthesizer.synthesize(
            index[from_id], index[to_id], meta.points, meta.curves, waypoint
        )
        if not synthesis.ok:
            return MovePlan(
                move=None,
                synthesis=synthesis,
                result=ValidationResult.fail(
                    ErrorCode.SYNTHESIS_FAILED,
                    f"No valid path between {from_id} and {to_id}",
                ),
            )

        move = self.create_move(state, player_id, from_id, to_id, synthesis.path, synthesis.new_point)
        self.logger.debug(
            event=LogEvent.MOVE_PLANNED,
            message="Move planned",
            metadata={'pair': [from_id, to_id], 'label': synthesis.label},
        )
        return MovePlan(move=move, synthesis=synthesis, result=ValidationResult.ok())

    def create_move(
        self,
        state: GameState,
        player_id: str,
        from_id: str,
        to_id: str,
        path: Path,
        new_point_position: Vec
    ) -> Move:
        """Wrap a path in a Move with the next curve/point ids."""
        return Move(
            id=str(uuid.uuid4()),
            player_id=player_id,
            timestamp=Timestamp.now(),
            action=ConnectAction(
                from_id=from_id,
                to_id=to_id,
                path=path,
                new_point_position=new_point_position,
                curve_id=self._next_curve_id(state),
                new_point_id=self._next_point_id(state),
            ),
        )

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def serialize_state(self, state: GameState) -> str:
        text = json.dumps(state.to_dict())
        self.logger.debug(
            event=LogEvent.STATE_SERIALIZED,
            message="State serialized",
            metadata={'game_id': state.id, 'bytes': len(text)},
        )
        return text

    def deserialize_state(self, text: str) -> GameState:
        """
        Restore a snapshot and re-run the whole-state check.

        Raises:
            InvalidGameStateError: If the text is not a consistent game state
        """
        try:
            state = GameState.from_dict(json.loads(text))
        except (ValueError, TypeError, AttributeError) as e:
            self.logger.error(
                event=LogEvent.DESERIALIZATION_ERROR,
                message="Failed to parse game state",
                exc_info=e,
            )
            raise InvalidGameStateError(f"Cannot parse game state: {e}") from e

        meta = state.metadata
        report = self.validator.validate_state(meta.points, meta.curves)
        problems = [v.message for v in report.violations]

        remaining = count_legal_pairs(meta.points)
        if meta.legal_moves_remaining != remaining:
            problems.append(
                f"legal_moves_remaining is {meta.legal_moves_remaining}, board has {remaining}"
            )
        if (meta.phase == GamePhase.FINISHED) != (remaining == 0):
            problems.append(f"phase {meta.phase.value} does not match {remaining} legal pairs")
        if state.turn_number != len(meta.curves):
            problems.append(f"turn_number {state.turn_number} does not match {len(meta.curves)} curves")
        if len(meta.move_history) != state.turn_number:
            problems.append(
                f"move_history has {len(meta.move_history)} moves, turn_number is {state.turn_number}"
            )
        if state.current_player != state.turn_number % 2:
            problems.append(
                f"current_player {state.current_player} does not match turn_number {state.turn_number}"
            )
        if (meta.winner is not None) != (meta.phase == GamePhase.FINISHED):
            problems.append(f"winner {meta.winner} does not match phase {meta.phase.value}")
        elif meta.winner is not None:
            if state.player(meta.winner) is None:
                problems.append(f"winner {meta.winner} is not a player")
            elif meta.last_move is not None and meta.last_move.player_id != meta.winner:
                problems.append(f"winner {meta.winner} did not make the last move")

        if problems:
            message = "; ".join(problems)
            self.logger.error(
                event=LogEvent.TOPOLOGY_VIOLATION,
                message=message,
                metadata={'game_id': state.id},
            )
            raise InvalidGameStateError(f"Inconsistent game state: {message}")

        self.logger.debug(
            event=LogEvent.STATE_DESERIALIZED,
            message="State restored",
            metadata={'game_id': state.id, 'turn': state.turn_number},
        )
        return state

    def statistics(self, state: GameState) -> GameStatistics:
        return compute_statistics(state)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check(self, state: GameState, move: Move, player_id: str) -> ActionCheck:
        if state.current.id != player_id:
            return ActionCheck.failed(
                ErrorCode.NOT_YOUR_TURN, f"It is {state.current.id}'s turn, not {player_id}'s"
            )
        if state.is_finished:
            return ActionCheck.failed(ErrorCode.GAME_OVER, "Game is already finished")
        if move.player_id != player_id:
            return ActionCheck.failed(
                ErrorCode.INVALID_MOVE, f"Move belongs to {move.player_id}, not {player_id}"
            )
        if not isinstance(move.action, ConnectAction):
            return ActionCheck.failed(
                ErrorCode.INVALID_MOVE, f"Unsupported action: {type(move.action).__name__}"
            )
        return self.validator.check_action(move.action, state.metadata.points, state.metadata.curves)

    @staticmethod
    def _winner(state: GameState) -> Optional[str]:
        if state.metadata.winner is not None:
            return state.metadata.winner
        last = state.metadata.last_move
        return last.player_id if last is not None else None

    @staticmethod
    def _next_curve_id(state: GameState) -> str:
        return f"curve-{len(state.metadata.curves)}"

    @staticmethod
    def _next_point_id(state: GameState) -> str:
        return f"point-{len(state.metadata.points)}"
