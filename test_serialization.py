"""
Serialization Tests
===================

JSON snapshots: round trip, wire shape and rejection of inconsistent input.

Usage:
    pytest test_serialization.py
"""

import json

import pytest

from sprouts_engine.config import EngineConfig, GameSettings, SynthesisConfig
from sprouts_engine.engine import SproutsEngine
from sprouts_engine.errors import ErrorCode, InvalidGameStateError
from sprouts_engine.schemas import ConnectAction, GameState, Move, Player, Point, Timestamp

PLAYERS = [Player("alice", "Alice"), Player("bob", "Bob", is_ai=True)]


def make_engine():
    config = EngineConfig(synthesis=SynthesisConfig(jitter=0.0), log_level="WARNING")
    return SproutsEngine(config)


def game_after_two_moves(engine):
    state = engine.create_initial_state(GameSettings(point_count=3), PLAYERS, game_id="snap")
    for player_id, pair in (("alice", ("point-0", "point-1")), ("bob", ("point-2", "point-2"))):
        plan = engine.plan_move(state, player_id, *pair)
        state = engine.apply_move(state, plan.move)
    return state


def test_round_trip_is_lossless():
    engine = make_engine()
    state = game_after_two_moves(engine)

    restored = engine.deserialize_state(engine.serialize_state(state))

    assert restored == state
    assert restored.metadata.curve("curve-1").path == state.metadata.curve("curve-1").path
    assert restored.players[1].is_ai


def test_wire_format():
    engine = make_engine()
    data = json.loads(engine.serialize_state(game_after_two_moves(engine)))

    assert data["id"] == "snap"
    assert data["turn_number"] == 2
    assert data["metadata"]["phase"] == "playing"
    assert "winner" not in data["metadata"]

    action = data["metadata"]["move_history"][0]["action"]
    assert action["type"] == "connect"
    assert action["from_id"] == "point-0"
    assert action["curve_id"] == "curve-0"
    assert set(action["path"][0]) == {"x", "y"}

    point = data["metadata"]["points"][3]
    assert point["incident"] == ["curve-0", "curve-0"]
    assert point["created_at_move"] == 1


def test_malformed_text_rejected():
    engine = make_engine()
    with pytest.raises(InvalidGameStateError) as excinfo:
        engine.deserialize_state("not json")
    assert excinfo.value.code == ErrorCode.INVALID_GAME_STATE

    with pytest.raises(InvalidGameStateError):
        engine.deserialize_state(json.dumps({"id": "x"}))


def test_tampered_incidence_rejected():
    engine = make_engine()
    data = json.loads(engine.serialize_state(game_after_two_moves(engine)))
    data["metadata"]["points"][0]["incident"] = []

    with pytest.raises(InvalidGameStateError):
        engine.deserialize_state(json.dumps(data))


def test_tampered_counters_rejected():
    engine = make_engine()
    good = json.loads(engine.serialize_state(game_after_two_moves(engine)))

    wrong_count = json.loads(json.dumps(good))
    wrong_count["metadata"]["legal_moves_remaining"] += 1
    with pytest.raises(InvalidGameStateError):
        engine.deserialize_state(json.dumps(wrong_count))

    wrong_turn = json.loads(json.dumps(good))
    wrong_turn["turn_number"] = 7
    with pytest.raises(InvalidGameStateError):
        engine.deserialize_state(json.dumps(wrong_turn))

    wrong_phase = json.loads(json.dumps(good))
    wrong_phase["metadata"]["phase"] = "finished"
    with pytest.raises(InvalidGameStateError):
        engine.deserialize_state(json.dumps(wrong_phase))


def test_moved_point_breaks_curve_endpoints():
    engine = make_engine()
    data = json.loads(engine.serialize_state(game_after_two_moves(engine)))
    data["metadata"]["points"][1]["position"]["x"] += 40.0

    with pytest.raises(InvalidGameStateError):
        engine.deserialize_state(json.dumps(data))


def test_unknown_action_type():
    action = ConnectAction("a", "b", ((0, 0), (1, 1)), (0.5, 0.5), "curve-0", "point-2")
    move = Move("m1", "alice", Timestamp.now(), action)
    data = move.to_dict()
    data["action"]["type"] = "erase"

    with pytest.raises(ValueError):
        Move.from_dict(data)


def test_schema_round_trips():
    point = Point("point-4", (12.5, 40.0), incident=("curve-1", "curve-1"), created_at_move=2)
    assert Point.from_dict(point.to_dict()) == point

    state = make_engine().create_initial_state(GameSettings(point_count=2), PLAYERS, game_id="g")
    assert GameState.from_dict(state.to_dict()) == state

    with pytest.raises(ValueError):
        Point.from_dict({"position": {"x": 1, "y": 2}})


def test_bad_timestamp_rejected():
    engine = make_engine()
    state = game_after_two_moves(engine)
    assert state.metadata.last_move.timestamp.to_datetime().tzinfo is not None

    data = json.loads(engine.serialize_state(state))
    data["metadata"]["move_history"][0]["timestamp"] = "yesterday"
    with pytest.raises(InvalidGameStateError):
        engine.deserialize_state(json.dumps(data))


def test_tampered_turn_bookkeeping_rejected():
    engine = make_engine()
    good = json.loads(engine.serialize_state(game_after_two_moves(engine)))

    flipped = json.loads(json.dumps(good))
    flipped["current_player"] = 1
    with pytest.raises(InvalidGameStateError):
        engine.deserialize_state(json.dumps(flipped))

    dropped = json.loads(json.dumps(good))
    dropped["metadata"]["move_history"].pop()
    with pytest.raises(InvalidGameStateError):
        engine.deserialize_state(json.dumps(dropped))

    early_winner = json.loads(json.dumps(good))
    early_winner["metadata"]["winner"] = "bob"
    with pytest.raises(InvalidGameStateError):
        engine.deserialize_state(json.dumps(early_winner))


def test_non_finite_position_rejected():
    engine = make_engine()
    data = json.loads(engine.serialize_state(game_after_two_moves(engine)))
    data["metadata"]["points"][3]["position"]["x"] = float("nan")

    text = json.dumps(data)
    assert "NaN" in text
    with pytest.raises(InvalidGameStateError):
        engine.deserialize_state(text)
