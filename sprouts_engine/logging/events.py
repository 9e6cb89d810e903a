"""
Structured Log Event Types
==========================

Bounded Context: Observability Event Taxonomy

Typed event names for the engine's structured logs.

Design:
- Enum-based (prevents typos, enables autocomplete)
- Hierarchical naming (namespace.category.action)
- Searchable in log aggregators

Event Naming Convention:
    <namespace>.<action>[.<outcome>]

    namespace: game, move, synthesis, state, error
    action: created, applied, rejected, attempt
    outcome: success, failed

Example Log Query:
    fields @timestamp, event, metadata.game_id
    | filter event = "move.rejected"
    | stats count() by metadata.code
"""

from enum import Enum


class LogEvent(str, Enum):
    """
    Typed log event names for structured logging.

    Categories:
    - game.*: Game lifecycle
    - move.*: Move validation and application
    - synthesis.*: Path synthesizer ladder
    - state.*: Snapshot serialization
    - error.*: Error conditions
    """

    # ========== Game Events ==========
    GAME_CREATED = "game.created"
    """Initial state built from settings."""

    GAME_FINISHED = "game.finished"
    """No legal pairs remain; winner decided."""

    GAME_RESIGNED = "game.resigned"
    """A player resigned because no move could be synthesized."""

    # ========== Move Events ==========
    MOVE_APPLIED = "move.applied"
    """Move accepted and a new snapshot produced."""

    MOVE_REJECTED = "move.rejected"
    """Move failed validation."""

    MOVE_PLANNED = "move.planned"
    """Candidate move built from a pair of point ids."""

    # ========== Synthesis Events ==========
    SYNTHESIS_SUCCESS = "synthesis.success"
    """A ladder candidate passed validation."""

    SYNTHESIS_FAILED = "synthesis.failed"
    """Ladder exhausted without a valid candidate."""

    # ========== State Events ==========
    STATE_SERIALIZED = "state.serialized"
    """Snapshot serialized to JSON."""

    STATE_DESERIALIZED = "state.deserialized"
    """Snapshot restored from JSON and checked."""

    # ========== Error Events ==========
    DESERIALIZATION_ERROR = "error.deserialization"
    """Serialized snapshot could not be parsed."""

    TOPOLOGY_VIOLATION = "error.topology_violation"
    """Whole-state check found a broken invariant."""


# Event categories for filtering
GAME_EVENTS = {
    LogEvent.GAME_CREATED,
    LogEvent.GAME_FINISHED,
    LogEvent.GAME_RESIGNED,
}

MOVE_EVENTS = {
    LogEvent.MOVE_APPLIED,
    LogEvent.MOVE_REJECTED,
    LogEvent.MOVE_PLANNED,
}

SYNTHESIS_EVENTS = {
    LogEvent.SYNTHESIS_SUCCESS,
    LogEvent.SYNTHESIS_FAILED,
}

STATE_EVENTS = {
    LogEvent.STATE_SERIALIZED,
    LogEvent.STATE_DESERIALIZED,
}

ERROR_EVENTS = {
    LogEvent.DESERIALIZATION_ERROR,
    LogEvent.TOPOLOGY_VIOLATION,
}
