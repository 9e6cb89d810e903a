"""
Path Synthesizer
================

Bounded Context: Curve Placement Search

Finds a valid polyline for a connection when the caller has no valid path
of its own (AI players, legal-move listing, pointer gestures reduced to a
single waypoint).

Design:
- Candidate ladders are lazy generators of (path, new_point, label)
- Each candidate goes through TopologyValidator.check_geometry, the same
  checks 2-5 the engine applies; the first one that passes wins
- Cosmetic jitter comes from a per-pair numpy Generator seeded from
  (config.seed, crc32(pair)) so results do not depend on call order
- The returned path is exactly the validated path

Regular ladder:
    direct (through waypoint or midpoint) -> quadratic arcs -> cubic
    S-curves -> straight line

Loop ladder:
    radius multipliers on the preferred direction -> the same radii on
    each rotation of that direction
"""

import math
import zlib
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple

import numpy as np

from sprouts_engine.config import SynthesisConfig
from sprouts_engine.geometry.vectors import (
    Path,
    Vec,
    add,
    distance,
    insert_on_path,
    midpoint,
    normalize,
    perpendicular,
    point_at,
    sample_cubic,
    sample_quadratic,
    scale,
    subtract,
)
from sprouts_engine.logging import LogEvent, StructuredLogger, create_logger
from sprouts_engine.schemas.board import Curve, Point
from sprouts_engine.topology.validator import TopologyValidator

Candidate = Tuple[Path, Vec, str]


@dataclass(frozen=True)
class SynthesisResult:
    """
    Outcome of a synthesis run.

    Attributes:
        ok: True when ``path`` passed validation
        path: Validated path; for a failed loop, the smallest loop tried;
              None for a failed regular connection
        new_point: Position of the new point on ``path``
        label: Ladder rung that produced ``path``
        attempts: Number of candidates validated
    """

    ok: bool
    path: Optional[Path] = None
    new_point: Optional[Vec] = None
    label: str = ""
    attempts: int = 0


class PathSynthesizer:
    """
    Bounded search over geometric variants of a connection.

    Usage:
        synthesizer = PathSynthesizer(SynthesisConfig(), TopologyValidator())
        result = synthesizer.synthesize(start, end, points, curves)
        if result.ok:
            action = ConnectAction(..., path=result.path,
                                   new_point_position=result.new_point, ...)
    """

    def __init__(
        self,
        config: SynthesisConfig,
        validator: TopologyValidator,
        logger: Optional[StructuredLogger] = None
    ):
        self.config = config
        self.validator = validator
        self.logger = logger or create_logger("synthesis")

    def synthesize(
        self,
        start: Point,
        end: Point,
        points: Sequence[Point],
        curves: Sequence[Curve],
        waypoint: Optional[Vec] = None
    ) -> SynthesisResult:
        """
        Find the first valid candidate between ``start`` and ``end``.

        Args:
            start: Start point
            end: End point (same as start for a loop)
            points: All points on the board
            curves: All curves on the board
            waypoint: Optional position the curve should pass through;
                      ignored when not finite

        Returns:
            SynthesisResult; ``ok`` is False when the ladder is exhausted
        """
        if waypoint is not None and not np.isfinite(waypoint).all():
            self.logger.warning(
                event=LogEvent.SYNTHESIS_FAILED,
                message="Ignoring non-finite waypoint",
                metadata={'pair': [start.id, end.id]},
            )
            waypoint = None
        rng = self._rng(start.id, end.id)
        is_loop = start.id == end.id
        if is_loop:
            candidates = self._loop_candidates(start, points, waypoint, rng)
        else:
            candidates = self._regular_candidates(start, end, waypoint, rng)

        attempts = 0
        first: Optional[Candidate] = None
        for path, new_point, label in candidates:
            attempts += 1
            if first is None:
                first = (path, new_point, label)
            check = self.validator.check_geometry(start, end, path, new_point, points, curves)
            if check.result.is_valid:
                self.logger.debug(
                    event=LogEvent.SYNTHESIS_SUCCESS,
                    message="Candidate accepted",
                    metadata={'pair': [start.id, end.id], 'label': label, 'attempts': attempts},
                )
                return SynthesisResult(
                    ok=True, path=check.path, new_point=new_point, label=label, attempts=attempts
                )

        self.logger.debug(
            event=LogEvent.SYNTHESIS_FAILED,
            message="Candidate ladder exhausted",
            metadata={'pair': [start.id, end.id], 'attempts': attempts},
        )
        if is_loop and first is not None:
            return SynthesisResult(
                ok=False, path=first[0], new_point=first[1], label="loop-fallback", attempts=attempts
            )
        return SynthesisResult(ok=False, attempts=attempts)

    # ------------------------------------------------------------------
    # Ladders
    # ------------------------------------------------------------------

    def _rng(self, start_id: str, end_id: str) -> np.random.Generator:
        pair_key = zlib.crc32(f"{start_id}|{end_id}".encode("utf-8"))
        return np.random.default_rng([self.config.seed, pair_key])

    def _jitter(self, rng: np.random.Generator) -> float:
        if self.config.jitter == 0.0:
            return 1.0
        return 1.0 + self.config.jitter * float(rng.uniform(-1.0, 1.0))

    def _regular_candidates(
        self,
        start: Point,
        end: Point,
        waypoint: Optional[Vec],
        rng: np.random.Generator
    ) -> Iterator[Candidate]:
        cfg = self.config
        a, b = start.position, end.position
        mid = midpoint(a, b)
        normal = perpendicular(normalize(subtract(b, a)))
        base = min(cfg.max_curve_height, distance(a, b) * cfg.curvature_ratio)

        through = waypoint if waypoint is not None else mid
        yield (a, through, b), through, "direct"

        for h in cfg.height_ladder:
            height = base * h * self._jitter(rng)
            # Control point at twice the apex height
            control = add(mid, scale(normal, 2.0 * height))
            path = sample_quadratic(a, control, b, cfg.arc_samples)
            yield self._place(path, waypoint, f"arc:{h:+g}")

        for first, second in cfg.s_curve_ladder:
            k = self._jitter(rng)
            quarter = add(a, scale(subtract(b, a), 0.25))
            three_quarter = add(a, scale(subtract(b, a), 0.75))
            c1 = add(quarter, scale(normal, first * base * k))
            c2 = add(three_quarter, scale(normal, second * base * k))
            path = sample_cubic(a, c1, c2, b, cfg.arc_samples)
            yield self._place(path, waypoint, f"s-curve:{first:+g},{second:+g}")

        if waypoint is not None:
            yield (a, mid, b), mid, "straight"

    def _loop_candidates(
        self,
        point: Point,
        points: Sequence[Point],
        waypoint: Optional[Vec],
        rng: np.random.Generator
    ) -> Iterator[Candidate]:
        cfg = self.config
        origin = point.position

        direction = normalize(subtract(waypoint, origin)) if waypoint is not None else (0.0, 0.0)
        if direction == (0.0, 0.0):
            waypoint = None
            direction = self._away_from_others(point, points)
            r0 = cfg.min_loop_radius
        else:
            r0 = max(cfg.min_loop_radius, distance(waypoint, origin) / 2.0)

        for multiplier in cfg.radius_ladder:
            path = self._ring(origin, direction, r0 * multiplier * self._jitter(rng))
            yield self._place_loop(path, waypoint, f"loop:0:{multiplier:g}")

        for degrees in cfg.rotation_ladder_deg:
            rotated = _rotate(direction, degrees)
            for multiplier in cfg.radius_ladder:
                path = self._ring(origin, rotated, r0 * multiplier * self._jitter(rng))
                yield self._place_loop(path, waypoint, f"loop:{degrees:g}:{multiplier:g}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _place(self, path: Path, waypoint: Optional[Vec], label: str) -> Candidate:
        """Insert the new point: projected waypoint, else arc-length midpoint."""
        if waypoint is not None:
            placed, idx = insert_on_path(path, waypoint, self.validator.tolerance.exact, project=True)
        else:
            placed, idx = insert_on_path(path, point_at(path, 0.5), self.validator.tolerance.exact)
        return placed, placed[idx], label

    def _place_loop(self, path: Path, waypoint: Optional[Vec], label: str) -> Candidate:
        """New point on the far side of the ring unless a waypoint is given."""
        if waypoint is not None:
            placed, idx = insert_on_path(path, waypoint, self.validator.tolerance.exact, project=True)
            return placed, placed[idx], label
        far = path[len(path) // 2]
        return path, far, label

    def _ring(self, origin: Vec, direction: Vec, radius: float) -> Path:
        """Closed polygon through ``origin`` centred at origin + direction * radius."""
        samples = self.config.loop_samples
        center = add(origin, scale(direction, radius))
        phase = math.atan2(-direction[1], -direction[0])
        angles = phase + np.linspace(0.0, 2.0 * np.pi, samples + 1)
        ring = np.column_stack((center[0] + radius * np.cos(angles), center[1] + radius * np.sin(angles)))
        inner = tuple((float(x), float(y)) for x, y in ring[1:-1])
        return (origin,) + inner + (origin,)

    @staticmethod
    def _away_from_others(point: Point, points: Sequence[Point]) -> Vec:
        others = [p.position for p in points if p.id != point.id]
        if not others:
            return (0.0, -1.0)
        centroid = tuple(np.mean(np.asarray(others, dtype=float), axis=0))
        direction = normalize(subtract(point.position, centroid))
        return direction if direction != (0.0, 0.0) else (0.0, -1.0)


def _rotate(v: Vec, degrees: float) -> Vec:
    theta = math.radians(degrees)
    c, s = math.cos(theta), math.sin(theta)
    return (v[0] * c - v[1] * s, v[0] * s + v[1] * c)
