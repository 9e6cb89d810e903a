"""
Intersection Detector
=====================

Stateless planarity checks between polylines and points.

Design:
- One vectorized kernel (numpy broadcasting) over N x M segment pairs
- Scalar helpers are the 1 x 1 case of the same kernel
- Shared-endpoint exemption: segments that meet only at a common sample
  (within the exact tolerance) do not count as crossing, provided that
  sample is the first or last sample of one of the paths
- Collinear overlap is reported separately from a proper crossing
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np

from .tolerance import TolerancePolicy, DEFAULT_TOLERANCE
from .vectors import Vec, as_array, point_segment_distances


@dataclass(frozen=True)
class IntersectionResult:
    """
    Outcome of a curve/curve or self-intersection scan.

    Attributes:
        points: Intersection positions found (empty when planar)
        overlaps: Number of collinear overlapping segment pairs
    """

    points: Tuple[Vec, ...] = ()
    overlaps: int = 0

    @property
    def has_intersection(self) -> bool:
        return bool(self.points) or self.overlaps > 0


def _cross(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return a[..., 0] * b[..., 1] - a[..., 1] * b[..., 0]


def _segments(path: Sequence[Vec]) -> Tuple[np.ndarray, np.ndarray]:
    pts = as_array(path)
    return pts[:-1], pts[1:]


def _pair_masks(
    a_start: np.ndarray,
    a_end: np.ndarray,
    b_start: np.ndarray,
    b_end: np.ndarray,
    tol: TolerancePolicy
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Crossing/overlap kernel for every (a_i, b_j) segment pair.

    Returns:
        Tuple of:
        - crossing: (N, M) bool, proper or touching intersection
        - overlap: (N, M) bool, collinear overlap longer than exact
        - points: (N, M, 2) intersection positions (valid where crossing)
    """
    p = a_start[:, None, :]
    r = (a_end - a_start)[:, None, :]
    q = b_start[None, :, :]
    s = (b_end - b_start)[None, :, :]
    qp = q - p

    denom = _cross(r, s)
    non_parallel = np.abs(denom) > tol.parallel
    with np.errstate(divide="ignore", invalid="ignore"):
        t = np.where(non_parallel, _cross(qp, s) / denom, -1.0)
        u = np.where(non_parallel, _cross(qp, r) / denom, -1.0)
    crossing = non_parallel & (t >= 0) & (t <= 1) & (u >= 0) & (u <= 1)
    points = p + r * t[..., None]

    # Collinear overlap: both ends of b inside the exact band of a's line,
    # and the projected intervals overlapping by more than exact
    a_len = np.hypot(r[..., 0], r[..., 1])
    with np.errstate(divide="ignore", invalid="ignore"):
        r_hat = r / a_len[..., None]
        off0 = np.abs(_cross(r_hat, qp))
        off1 = np.abs(_cross(r_hat, qp + s))
        proj0 = (qp * r_hat).sum(axis=-1)
        proj1 = ((qp + s) * r_hat).sum(axis=-1)
    lo = np.maximum(0.0, np.minimum(proj0, proj1))
    hi = np.minimum(a_len, np.maximum(proj0, proj1))
    overlap = (
        (a_len > tol.exact)
        & (off0 < tol.exact)
        & (off1 < tol.exact)
        & (hi - lo > tol.exact)
    )
    overlap = np.broadcast_to(overlap, crossing.shape)
    return crossing, overlap, points


def _shared_endpoint_mask(
    a_start: np.ndarray,
    a_end: np.ndarray,
    b_start: np.ndarray,
    b_end: np.ndarray,
    points: np.ndarray,
    exact: float,
    terminals: Sequence[Vec]
) -> np.ndarray:
    """
    True where the crossing lies on an endpoint common to both segments
    and that endpoint is one of ``terminals`` (first/last path samples).

    Interior samples that happen to coincide are not exempt: two curves
    may only meet at a point of the game.
    """
    shared = np.zeros(points.shape[:2], dtype=bool)
    for a_pt in (a_start, a_end):
        for b_pt in (b_start, b_end):
            gap = a_pt[:, None, :] - b_pt[None, :, :]
            common = np.hypot(gap[..., 0], gap[..., 1]) < exact
            offset = points - a_pt[:, None, :]
            at_common = np.hypot(offset[..., 0], offset[..., 1]) < exact
            shared |= common & at_common

    at_terminal = np.zeros_like(shared)
    for terminal in terminals:
        offset = points - np.asarray(terminal, dtype=float)
        at_terminal |= np.hypot(offset[..., 0], offset[..., 1]) < exact
    return shared & at_terminal


def segment_intersection(
    p1: Vec,
    p2: Vec,
    p3: Vec,
    p4: Vec,
    tol: TolerancePolicy = DEFAULT_TOLERANCE
) -> Optional[Vec]:
    """
    Intersection of segments p1-p2 and p3-p4.

    Parallel segments (cross product below tolerance) report no
    intersection; use ``segments_overlap`` for the collinear case.

    Returns:
        Intersection position, or None
    """
    a0, a1 = np.array([p1], dtype=float), np.array([p2], dtype=float)
    b0, b1 = np.array([p3], dtype=float), np.array([p4], dtype=float)
    crossing, _, points = _pair_masks(a0, a1, b0, b1, tol)
    if not crossing[0, 0]:
        return None
    return (float(points[0, 0, 0]), float(points[0, 0, 1]))


def segments_overlap(
    p1: Vec,
    p2: Vec,
    p3: Vec,
    p4: Vec,
    tol: TolerancePolicy = DEFAULT_TOLERANCE
) -> bool:
    """True when segments p1-p2 and p3-p4 are collinear and overlap."""
    a0, a1 = np.array([p1], dtype=float), np.array([p2], dtype=float)
    b0, b1 = np.array([p3], dtype=float), np.array([p4], dtype=float)
    _, forward, _ = _pair_masks(a0, a1, b0, b1, tol)
    _, backward, _ = _pair_masks(b0, b1, a0, a1, tol)
    return bool(forward[0, 0] or backward[0, 0])


def is_closed(path: Sequence[Vec], tol: TolerancePolicy = DEFAULT_TOLERANCE) -> bool:
    """A path is closed when its first and last samples coincide."""
    if len(path) < 3:
        return False
    first, last = path[0], path[-1]
    return float(np.hypot(first[0] - last[0], first[1] - last[1])) < tol.exact


def self_intersections(
    path: Sequence[Vec],
    tol: TolerancePolicy = DEFAULT_TOLERANCE
) -> IntersectionResult:
    """
    Scan one path for crossings between non-adjacent segments.

    For a closed path the first/last segment pair is also exempt, since a
    loop necessarily meets itself at its start sample.
    """
    if len(path) < 4:
        return IntersectionResult()

    starts, ends = _segments(path)
    n = len(starts)
    crossing, overlap, points = _pair_masks(starts, ends, starts, ends, tol)
    shared = _shared_endpoint_mask(
        starts, ends, starts, ends, points, tol.exact, (path[0], path[-1])
    )

    candidates = np.triu(np.ones((n, n), dtype=bool), k=2)
    if is_closed(path, tol):
        candidates[0, n - 1] = False

    hits = crossing & ~shared & candidates
    overlaps = overlap & candidates
    return IntersectionResult(
        points=tuple((float(x), float(y)) for x, y in points[hits]),
        overlaps=int(overlaps.sum()),
    )


def curves_intersect(
    path_a: Sequence[Vec],
    path_b: Sequence[Vec],
    tol: TolerancePolicy = DEFAULT_TOLERANCE
) -> IntersectionResult:
    """
    Full curve/curve check.

    Self-intersection of each path, then every cross pair of segments,
    combining the overlap check with the crossing check. Crossings at a
    shared endpoint are exempt.
    """
    for path in (path_a, path_b):
        own = self_intersections(path, tol)
        if own.has_intersection:
            return own

    return cross_intersections(path_a, path_b, tol)


def cross_intersections(
    path_a: Sequence[Vec],
    path_b: Sequence[Vec],
    tol: TolerancePolicy = DEFAULT_TOLERANCE
) -> IntersectionResult:
    """Segment pairs between two paths only; no self-intersection scan."""
    if len(path_a) < 2 or len(path_b) < 2:
        return IntersectionResult()

    a0, a1 = _segments(path_a)
    b0, b1 = _segments(path_b)
    crossing, forward, points = _pair_masks(a0, a1, b0, b1, tol)
    _, backward, _ = _pair_masks(b0, b1, a0, a1, tol)
    shared = _shared_endpoint_mask(
        a0, a1, b0, b1, points, tol.exact,
        (path_a[0], path_a[-1], path_b[0], path_b[-1])
    )

    hits = crossing & ~shared
    overlaps = forward | backward.T
    return IntersectionResult(
        points=tuple((float(x), float(y)) for x, y in points[hits]),
        overlaps=int(overlaps.sum()),
    )


def curve_passes_through_point(
    path: Sequence[Vec],
    position: Vec,
    tol: TolerancePolicy = DEFAULT_TOLERANCE,
    point_id: Optional[str] = None,
    allowed_ids: Iterable[str] = ()
) -> bool:
    """
    True if any segment of ``path`` comes within the pixel tolerance of
    ``position``, unless ``point_id`` is in ``allowed_ids``.
    """
    if point_id is not None and point_id in set(allowed_ids):
        return False
    return bool((point_segment_distances(path, position) < tol.pixel).any())
