"""
Configuration and Logging Tests
===============================

YAML loading, validation of config values and the JSON log format.

Usage:
    pytest test_config.py
"""

import io
import json
import logging
from pathlib import Path

import pytest

from sprouts_engine.config import EngineConfig, GameSettings, SynthesisConfig
from sprouts_engine.geometry import TolerancePolicy
from sprouts_engine.logging import LogEvent, StructuredLogger, create_logger
from sprouts_engine.logging.structured import JSONFormatter

SHIPPED_CONFIG = Path(__file__).parent / "config" / "engine.yaml"


def test_shipped_yaml_matches_defaults():
    config = EngineConfig.from_yaml(SHIPPED_CONFIG)
    defaults = EngineConfig()

    assert config.tolerance == defaults.tolerance
    assert config.synthesis == defaults.synthesis
    assert config.game == defaults.game
    assert config.log_level == "INFO"


def test_partial_yaml_keeps_defaults(tmp_path):
    path = tmp_path / "engine.yaml"
    path.write_text("log_level: DEBUG\nsynthesis:\n  seed: 7\n  jitter: 0.0\n")

    config = EngineConfig.from_yaml(path)

    assert config.log_level == "DEBUG"
    assert config.synthesis.seed == 7
    assert config.synthesis.jitter == 0.0
    assert config.synthesis.arc_samples == 16
    assert config.tolerance.pixel == 12.0


def test_empty_mapping_gives_defaults():
    assert EngineConfig.from_dict({}) == EngineConfig()
    assert EngineConfig.from_dict(None) == EngineConfig()


def test_ladders_are_normalized_to_tuples():
    cfg = SynthesisConfig(height_ladder=[1, -1], s_curve_ladder=[[0.5, -0.5]])
    assert cfg.height_ladder == (1.0, -1.0)
    assert cfg.s_curve_ladder == ((0.5, -0.5),)


def test_invalid_values_raise():
    with pytest.raises(ValueError):
        TolerancePolicy(exact=0.0)
    with pytest.raises(ValueError):
        SynthesisConfig(jitter=0.9)
    with pytest.raises(ValueError):
        SynthesisConfig(radius_ladder=())
    with pytest.raises(ValueError):
        GameSettings(canvas_width=80, canvas_padding=50)
    with pytest.raises(ValueError):
        EngineConfig(log_level="LOUD")


# ========== Logging ==========

def capture(logger: StructuredLogger) -> io.StringIO:
    buffer = io.StringIO()
    handler = logging.StreamHandler(buffer)
    handler.setFormatter(JSONFormatter())
    logger.logger.addHandler(handler)
    return buffer


def test_log_lines_are_json():
    logger = StructuredLogger("test", logger_name="sprouts_engine.test.json")
    buffer = capture(logger)

    logger.info(
        event=LogEvent.MOVE_APPLIED,
        message="Move applied",
        metadata={'turn': 4, 'curve_id': 'curve-3'},
    )

    entry = json.loads(buffer.getvalue().strip().splitlines()[-1])
    assert entry['level'] == "INFO"
    assert entry['component'] == "test"
    assert entry['event'] == "move.applied"
    assert entry['metadata'] == {'turn': 4, 'curve_id': 'curve-3'}
    assert entry['timestamp'].endswith("+00:00")


def test_errors_carry_exception_details():
    logger = StructuredLogger("test", logger_name="sprouts_engine.test.errors")
    buffer = capture(logger)

    logger.error(
        event=LogEvent.DESERIALIZATION_ERROR,
        message="Rejected snapshot",
        exc_info=ValueError("bad phase"),
    )

    entry = json.loads(buffer.getvalue().strip().splitlines()[-1])
    assert entry['exception'] == {'type': "ValueError", 'message': "bad phase"}


def test_level_filtering():
    logger = StructuredLogger("test", level=logging.WARNING, logger_name="sprouts_engine.test.levels")
    buffer = capture(logger)

    logger.debug(event=LogEvent.SYNTHESIS_FAILED, message="hidden")
    logger.info(event=LogEvent.GAME_CREATED, message="hidden")
    assert buffer.getvalue() == ""

    logger.set_level("DEBUG")
    logger.debug(event=LogEvent.SYNTHESIS_FAILED, message="shown")
    assert "shown" in buffer.getvalue()


def test_create_logger_accepts_level_names():
    logger = create_logger("config-test", "ERROR")
    assert logger.logger.level == logging.ERROR
    assert logger.logger_name == "sprouts_engine.config-test"


def test_every_event_has_one_category():
    from sprouts_engine.logging import events

    categories = [
        events.GAME_EVENTS,
        events.MOVE_EVENTS,
        events.SYNTHESIS_EVENTS,
        events.STATE_EVENTS,
        events.ERROR_EVENTS,
    ]
    assert set().union(*categories) == set(LogEvent)
    assert sum(len(c) for c in categories) == len(LogEvent)
