"""
Topology Layer
==============

    topology/
    ├── validator.py   # TopologyValidator (move checks 1-5, validate_state)
    └── enumerator.py  # legal_pairs / count_legal_pairs (capacity rule)
"""

from sprouts_engine.topology.validator import (
    ActionCheck,
    TopologyReport,
    TopologyValidator,
    TopologyViolation,
    ViolationType,
)
from sprouts_engine.topology.enumerator import (
    legal_pairs,
    count_legal_pairs,
    has_legal_pairs,
)

__all__ = [
    # Validator
    "ActionCheck",
    "TopologyReport",
    "TopologyValidator",
    "TopologyViolation",
    "ViolationType",
    # Enumerator
    "legal_pairs",
    "count_legal_pairs",
    "has_legal_pairs",
]
