"""
Sprouts Engine v1.0
===================

Bounded Context: Rule engine for the pencil-and-paper game Sprouts.

Players alternately draw a curve between two points (or a loop on one
point) and place a new point on it. No curve may cross another, no point
may carry more than three curve ends, and the player who makes the last
possible move wins.

Architecture:

    sprouts_engine/
    ├── geometry/          # Pure geometry (immutable, stateless)
    │   ├── tolerance.py   # TolerancePolicy
    │   ├── vectors.py     # Vector helpers, Bezier sampling, arc length
    │   └── intersection.py# Segment / curve intersection (numpy kernel)
    │
    ├── topology/          # Game rules over geometry
    │   ├── validator.py   # TopologyValidator (move checks, whole state)
    │   └── enumerator.py  # Legal pair enumeration (capacity rule)
    │
    ├── schemas/           # Frozen records with to_dict / from_dict
    ├── synthesis.py       # PathSynthesizer (candidate ladders)
    ├── engine.py          # SproutsEngine (state machine, public API)
    ├── players.py         # RandomPlayer, play_game
    ├── analytics.py       # GameStatistics
    ├── config.py          # EngineConfig (YAML)
    ├── errors.py          # ErrorCode, ValidationResult, exceptions
    └── logging/           # Structured JSON logging

Usage:

    from sprouts_engine import SproutsEngine, GameSettings, Player

    engine = SproutsEngine()
    state = engine.create_initial_state(
        GameSettings(point_count=3),
        [Player("alice", "Alice"), Player("bob", "Bob")],
    )

    # Plan a move from a pair of point ids (optionally through a waypoint)
    plan = engine.plan_move(state, "alice", "point-0", "point-1")
    state = engine.apply_move(state, plan.move)

    # Terminal check and scoring
    over = engine.is_terminal(state)   # None while moves remain
    text = engine.serialize_state(state)
    assert engine.deserialize_state(text) == state
"""

# Geometry Layer (immutable, stateless)
from sprouts_engine.geometry import TolerancePolicy, IntersectionResult

# Configuration
from sprouts_engine.config import EngineConfig, GameSettings, SynthesisConfig

# Errors
from sprouts_engine.errors import (
    ErrorCode,
    ValidationResult,
    SproutsError,
    InvalidGameStateError,
    InvalidMoveError,
)

# Schemas
from sprouts_engine.schemas import (
    Point,
    Curve,
    ConnectAction,
    Move,
    Player,
    GamePhase,
    GameMetadata,
    GameState,
    GameOver,
    Scoreboard,
)

# Rules
from sprouts_engine.topology import TopologyValidator, TopologyReport, legal_pairs, count_legal_pairs
from sprouts_engine.synthesis import PathSynthesizer, SynthesisResult

# Engine
from sprouts_engine.engine import SproutsEngine, MovePlan, generate_initial_points
from sprouts_engine.analytics import GameStatistics
from sprouts_engine.players import RandomPlayer, GameRecord, play_game

__all__ = [
    # Geometry
    "TolerancePolicy",
    "IntersectionResult",
    # Configuration
    "EngineConfig",
    "GameSettings",
    "SynthesisConfig",
    # Errors
    "ErrorCode",
    "ValidationResult",
    "SproutsError",
    "InvalidGameStateError",
    "InvalidMoveError",
    # Schemas
    "Point",
    "Curve",
    "ConnectAction",
    "Move",
    "Player",
    "GamePhase",
    "GameMetadata",
    "GameState",
    "GameOver",
    "Scoreboard",
    # Rules
    "TopologyValidator",
    "TopologyReport",
    "legal_pairs",
    "count_legal_pairs",
    "PathSynthesizer",
    "SynthesisResult",
    # Engine
    "SproutsEngine",
    "MovePlan",
    "generate_initial_points",
    "GameStatistics",
    "RandomPlayer",
    "GameRecord",
    "play_game",
]

__version__ = "1.0.0"
