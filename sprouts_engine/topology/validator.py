"""
Topology Validator
==================

Bounded Context: Planarity Rules

Checks a proposed connect action against the current board, and a whole
board against the global invariants.

Design:
- Ordered, fail-fast move checks:
    1. endpoints exist, ids unused, capacity
    2. path shape, self-intersection, intersection with existing curves
    3. path keeps clear of every point except its endpoints
    4. declared new point lies on the path (then anchored as a sample)
    5. new point keeps clear of existing points and curves
- Checks 2-5 are exposed separately so the path synthesizer runs exactly
  the checks the engine runs
- Results are values (ValidationResult, TopologyReport), never exceptions
"""

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from sprouts_engine.errors import ErrorCode, ValidationResult
from sprouts_engine.geometry.intersection import (
    cross_intersections,
    curve_passes_through_point,
    is_closed,
    self_intersections,
)
from sprouts_engine.geometry.tolerance import TolerancePolicy, DEFAULT_TOLERANCE
from sprouts_engine.geometry.vectors import (
    Path,
    Vec,
    as_array,
    distance,
    distance_to_path,
    insert_on_path,
)
from sprouts_engine.schemas.board import MAX_CONNECTIONS, Curve, Point
from sprouts_engine.schemas.common import as_position
from sprouts_engine.schemas.move import ConnectAction


@dataclass(frozen=True)
class ActionCheck:
    """
    Validation outcome plus the path that would be stored.

    Attributes:
        result: Pass/fail with code and message
        path: Anchored path (endpoints snapped, new point as a sample);
              None when the check failed
        new_point_index: Index of the new point within ``path``
    """

    result: ValidationResult
    path: Optional[Path] = None
    new_point_index: int = -1

    @classmethod
    def failed(cls, code: ErrorCode, message: str) -> 'ActionCheck':
        return cls(result=ValidationResult.fail(code, message))


class ViolationType(str, Enum):
    """Whole-state invariant violations."""
    CURVE_INTERSECTION = "curve_intersection"
    POINT_LIMIT_EXCEEDED = "point_limit_exceeded"
    CURVE_THROUGH_POINT = "curve_through_point"
    INVALID_ENDPOINTS = "invalid_endpoints"
    DUPLICATE_ID = "duplicate_id"
    DANGLING_REFERENCE = "dangling_reference"


@dataclass(frozen=True)
class TopologyViolation:
    type: ViolationType
    message: str
    affected: Tuple[str, ...] = ()


@dataclass(frozen=True)
class TopologyReport:
    """Result of validate_state; empty violations means consistent."""

    violations: Tuple[TopologyViolation, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.violations

    def summary(self) -> str:
        return "; ".join(v.message for v in self.violations)


class TopologyValidator:
    """
    Stateless rule checker parameterized by a TolerancePolicy.

    Usage:
        validator = TopologyValidator()
        check = validator.check_action(action, points, curves)
        if check.result.is_valid:
            store(check.path)
    """

    def __init__(self, tolerance: TolerancePolicy = DEFAULT_TOLERANCE):
        self.tolerance = tolerance

    # ------------------------------------------------------------------
    # Move checks
    # ------------------------------------------------------------------

    def validate_action(
        self,
        action: ConnectAction,
        points: Sequence[Point],
        curves: Sequence[Curve]
    ) -> ValidationResult:
        return self.check_action(action, points, curves).result

    def check_action(
        self,
        action: ConnectAction,
        points: Sequence[Point],
        curves: Sequence[Curve]
    ) -> ActionCheck:
        """Run checks 1-5 in order, stopping at the first failure."""
        index = {p.id: p for p in points}
        result = self.check_capacity(action, index, curves)
        if not result.is_valid:
            return ActionCheck(result=result)
        return self.check_geometry(
            index[action.from_id],
            index[action.to_id],
            action.path,
            action.new_point_position,
            points,
            curves,
        )

    def check_capacity(
        self,
        action: ConnectAction,
        index: Dict[str, Point],
        curves: Sequence[Curve]
    ) -> ValidationResult:
        """Check 1: endpoints exist, new ids are fresh, spare capacity."""
        for point_id in (action.from_id, action.to_id):
            if point_id not in index:
                return ValidationResult.fail(
                    ErrorCode.INVALID_MOVE, f"Unknown point: {point_id}"
                )
        if not action.curve_id or any(c.id == action.curve_id for c in curves):
            return ValidationResult.fail(
                ErrorCode.INVALID_MOVE, f"Curve id unavailable: {action.curve_id!r}"
            )
        if not action.new_point_id or action.new_point_id in index:
            return ValidationResult.fail(
                ErrorCode.INVALID_MOVE, f"Point id unavailable: {action.new_point_id!r}"
            )

        if action.is_loop:
            point = index[action.from_id]
            if point.spare < 2:
                return ValidationResult.fail(
                    ErrorCode.CONNECTION_LIMIT_EXCEEDED,
                    f"Loop on {point.id} needs 2 free connections, has {point.spare}",
                )
            return ValidationResult.ok()

        for point_id in (action.from_id, action.to_id):
            point = index[point_id]
            if point.spare < 1:
                return ValidationResult.fail(
                    ErrorCode.CONNECTION_LIMIT_EXCEEDED,
                    f"Point {point.id} already has {MAX_CONNECTIONS} connections",
                )
        return ValidationResult.ok()

    def check_geometry(
        self,
        start: Point,
        end: Point,
        path: Sequence[Vec],
        new_point_position: Vec,
        points: Sequence[Point],
        curves: Sequence[Curve]
    ) -> ActionCheck:
        """Checks 2-5 for a candidate path; returns the anchored path."""
        tol = self.tolerance
        # NaN fails every distance comparison below
        if not (np.isfinite(as_array(path)).all() and np.isfinite(as_array(new_point_position)).all()):
            return ActionCheck.failed(
                ErrorCode.INVALID_MOVE, "Path and new point coordinates must be finite"
            )
        if len(path) < 2:
            return ActionCheck.failed(
                ErrorCode.INVALID_CURVE, f"Path needs >= 2 samples, got {len(path)}"
            )
        if distance(path[0], start.position) >= tol.exact or distance(path[-1], end.position) >= tol.exact:
            return ActionCheck.failed(
                ErrorCode.INVALID_CURVE,
                f"Path must run from {start.id} to {end.id}",
            )
        is_loop = start.id == end.id
        if is_loop and len(path) < 4:
            return ActionCheck.failed(
                ErrorCode.INVALID_CURVE, f"Loop path needs >= 4 samples, got {len(path)}"
            )

        # Endpoints snapped to the exact point positions
        snapped = (start.position,) + tuple(as_position(p) for p in path[1:-1]) + (end.position,)
        new_point_position = as_position(new_point_position)

        failure = self._check_path(snapped, start, end, points, curves)
        if failure is not None:
            return ActionCheck(result=failure)

        # Check 4: placement
        if len(snapped) == 3:
            if distance(snapped[1], new_point_position) >= tol.exact:
                return ActionCheck.failed(
                    ErrorCode.INVALID_NEW_POINT,
                    "New point must be the middle sample of a 3-sample path",
                )
        elif distance_to_path(snapped, new_point_position) >= tol.pixel:
            return ActionCheck.failed(
                ErrorCode.INVALID_NEW_POINT,
                f"New point {new_point_position} is not on the path",
            )

        anchored, idx = insert_on_path(snapped, new_point_position, tol.exact)
        anchored = anchored[:idx] + (new_point_position,) + anchored[idx + 1:]
        if idx in (0, len(anchored) - 1):
            return ActionCheck.failed(
                ErrorCode.INVALID_NEW_POINT, "New point cannot sit on an endpoint"
            )
        if anchored != snapped:
            failure = self._check_path(anchored, start, end, points, curves)
            if failure is not None:
                return ActionCheck(result=failure)

        # Check 5: separation
        failure = self.check_new_point(new_point_position, points, curves)
        if failure is not None:
            return ActionCheck(result=failure)

        return ActionCheck(result=ValidationResult.ok(), path=anchored, new_point_index=idx)

    def _check_path(
        self,
        path: Path,
        start: Point,
        end: Point,
        points: Sequence[Point],
        curves: Sequence[Curve]
    ) -> Optional[ValidationResult]:
        """Checks 2-3 on one path; None when clean."""
        tol = self.tolerance
        if start.id == end.id and not is_closed(path, tol):
            return ValidationResult.fail(ErrorCode.INVALID_CURVE, "Loop path must be closed")

        if self_intersections(path, tol).has_intersection:
            return ValidationResult.fail(ErrorCode.INVALID_CURVE, "Path crosses itself")

        for curve in curves:
            if cross_intersections(path, curve.path, tol).has_intersection:
                return ValidationResult.fail(
                    ErrorCode.INVALID_CURVE, f"Path crosses existing curve {curve.id}"
                )

        allowed = {start.id, end.id}
        for point in points:
            if curve_passes_through_point(path, point.position, tol, point.id, allowed):
                return ValidationResult.fail(
                    ErrorCode.INVALID_CURVE, f"Path passes through point {point.id}"
                )
        return None

    def check_new_point(
        self,
        position: Vec,
        points: Sequence[Point],
        curves: Sequence[Curve]
    ) -> Optional[ValidationResult]:
        """Check 5; None when the position is clear."""
        tol = self.tolerance
        for point in points:
            if distance(position, point.position) < tol.min_separation:
                return ValidationResult.fail(
                    ErrorCode.INVALID_NEW_POINT,
                    f"New point too close to {point.id}",
                )
        for curve in curves:
            if distance_to_path(curve.path, position) < tol.pixel:
                return ValidationResult.fail(
                    ErrorCode.INVALID_NEW_POINT,
                    f"New point too close to curve {curve.id}",
                )
        return None

    # ------------------------------------------------------------------
    # Whole-state check
    # ------------------------------------------------------------------

    def validate_state(
        self,
        points: Sequence[Point],
        curves: Sequence[Curve]
    ) -> TopologyReport:
        """
        Check every global invariant of a board.

        Returns:
            TopologyReport listing every violation found (empty when valid)
        """
        tol = self.tolerance
        violations = []

        for label, ids in (("point", [p.id for p in points]), ("curve", [c.id for c in curves])):
            for dup, count in Counter(ids).items():
                if count > 1:
                    violations.append(TopologyViolation(
                        ViolationType.DUPLICATE_ID, f"Duplicate {label} id {dup}", (dup,)
                    ))

        index = {p.id: p for p in points}
        curve_ids = {c.id for c in curves}

        for point in points:
            if point.degree > MAX_CONNECTIONS:
                violations.append(TopologyViolation(
                    ViolationType.POINT_LIMIT_EXCEEDED,
                    f"Point {point.id} has {point.degree} connections",
                    (point.id,),
                ))
            for curve_id in set(point.incident) - curve_ids:
                violations.append(TopologyViolation(
                    ViolationType.DANGLING_REFERENCE,
                    f"Point {point.id} references unknown curve {curve_id}",
                    (point.id, curve_id),
                ))

        total_refs = Counter(cid for p in points for cid in p.incident)
        for curve in curves:
            violations.extend(self._check_curve_refs(curve, index, total_refs))

        for i, curve in enumerate(curves):
            if self_intersections(curve.path, tol).has_intersection:
                violations.append(TopologyViolation(
                    ViolationType.CURVE_INTERSECTION,
                    f"Curve {curve.id} crosses itself",
                    (curve.id,),
                ))
            for other in curves[i + 1:]:
                if cross_intersections(curve.path, other.path, tol).has_intersection:
                    violations.append(TopologyViolation(
                        ViolationType.CURVE_INTERSECTION,
                        f"Curves {curve.id} and {other.id} intersect",
                        (curve.id, other.id),
                    ))

            allowed = {curve.start_id, curve.end_id, curve.new_point_id}
            for point in points:
                if curve_passes_through_point(curve.path, point.position, tol, point.id, allowed):
                    violations.append(TopologyViolation(
                        ViolationType.CURVE_THROUGH_POINT,
                        f"Curve {curve.id} passes through point {point.id}",
                        (curve.id, point.id),
                    ))

        return TopologyReport(violations=tuple(violations))

    def _check_curve_refs(
        self,
        curve: Curve,
        index: Dict[str, Point],
        total_refs: Counter
    ) -> list:
        tol = self.tolerance
        found = []
        missing = [pid for pid in (curve.start_id, curve.end_id, curve.new_point_id) if pid not in index]
        if missing:
            return [TopologyViolation(
                ViolationType.INVALID_ENDPOINTS,
                f"Curve {curve.id} references unknown points {missing}",
                (curve.id, *missing),
            )]

        start, end, new = index[curve.start_id], index[curve.end_id], index[curve.new_point_id]
        expected = Counter({new.id: 2})
        expected[start.id] += 1
        expected[end.id] += 1
        for point_id, count in expected.items():
            actual = index[point_id].incident.count(curve.id)
            if actual != count:
                found.append(TopologyViolation(
                    ViolationType.INVALID_ENDPOINTS,
                    f"Point {point_id} lists curve {curve.id} {actual} times, expected {count}",
                    (curve.id, point_id),
                ))
        if total_refs[curve.id] != 4:
            found.append(TopologyViolation(
                ViolationType.DANGLING_REFERENCE,
                f"Curve {curve.id} is referenced {total_refs[curve.id]} times, expected 4",
                (curve.id,),
            ))

        if distance(curve.path[0], start.position) >= tol.exact or distance(curve.path[-1], end.position) >= tol.exact:
            found.append(TopologyViolation(
                ViolationType.INVALID_ENDPOINTS,
                f"Curve {curve.id} path does not end on its points",
                (curve.id,),
            ))
        if min(distance(s, new.position) for s in curve.path) >= tol.exact:
            found.append(TopologyViolation(
                ViolationType.INVALID_ENDPOINTS,
                f"Curve {curve.id} does not pass through its new point {new.id}",
                (curve.id, new.id),
            ))
        return found
