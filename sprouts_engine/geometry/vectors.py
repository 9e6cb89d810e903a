"""
Vector Primitives
=================

Pure 2D helpers over plain ``(x, y)`` tuples - NO state, NO side effects.

Design:
- Tuples at the API (hashable, JSON friendly, frozen-dataclass friendly)
- numpy for anything that walks a whole path (arc length, sampling,
  point/segment distance)
- Every function is total over finite, non-empty input
"""

from typing import Sequence, Tuple

import numpy as np

Vec = Tuple[float, float]
Path = Tuple[Vec, ...]


def add(a: Vec, b: Vec) -> Vec:
    return (a[0] + b[0], a[1] + b[1])


def subtract(a: Vec, b: Vec) -> Vec:
    return (a[0] - b[0], a[1] - b[1])


def scale(a: Vec, k: float) -> Vec:
    return (a[0] * k, a[1] * k)


def dot(a: Vec, b: Vec) -> float:
    return a[0] * b[0] + a[1] * b[1]


def distance(a: Vec, b: Vec) -> float:
    return float(np.hypot(a[0] - b[0], a[1] - b[1]))


def distance_squared(a: Vec, b: Vec) -> float:
    dx, dy = a[0] - b[0], a[1] - b[1]
    return dx * dx + dy * dy


def cross(a: Vec, b: Vec) -> float:
    """Z component of the 3D cross product; positive when ``b`` turns left of ``a``."""
    return a[0] * b[1] - a[1] * b[0]


def is_point_in_circle(point: Vec, center: Vec, radius: float) -> bool:
    """Boundary counts as inside."""
    return distance_squared(point, center) <= radius * radius


def normalize(a: Vec) -> Vec:
    """Unit vector in the direction of ``a``; the zero vector maps to zero."""
    length = float(np.hypot(a[0], a[1]))
    if length == 0.0:
        return (0.0, 0.0)
    return (a[0] / length, a[1] / length)


def perpendicular(a: Vec) -> Vec:
    """Left-hand normal (rotated +90 degrees)."""
    return (-a[1], a[0])


def midpoint(a: Vec, b: Vec) -> Vec:
    return ((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0)


def closest_point_on_segment(point: Vec, start: Vec, end: Vec) -> Vec:
    """
    Project ``point`` onto segment ``start-end``, clamped to the segment.

    A degenerate segment returns ``start``.
    """
    seg = subtract(end, start)
    length_sq = dot(seg, seg)
    if length_sq == 0.0:
        return start
    t = dot(subtract(point, start), seg) / length_sq
    t = min(1.0, max(0.0, t))
    return (start[0] + seg[0] * t, start[1] + seg[1] * t)


def quadratic_bezier(p0: Vec, p1: Vec, p2: Vec, t: float) -> Vec:
    u = 1.0 - t
    return (
        u * u * p0[0] + 2 * u * t * p1[0] + t * t * p2[0],
        u * u * p0[1] + 2 * u * t * p1[1] + t * t * p2[1],
    )


def cubic_bezier(p0: Vec, p1: Vec, p2: Vec, p3: Vec, t: float) -> Vec:
    u = 1.0 - t
    a, b, c, d = u * u * u, 3 * u * u * t, 3 * u * t * t, t * t * t
    return (
        a * p0[0] + b * p1[0] + c * p2[0] + d * p3[0],
        a * p0[1] + b * p1[1] + c * p2[1] + d * p3[1],
    )


def sample_quadratic(p0: Vec, p1: Vec, p2: Vec, samples: int) -> Path:
    """
    Polyline of ``samples + 1`` positions along a quadratic Bezier.

    The first and last entries are exactly ``p0`` and ``p2``.
    """
    t = np.linspace(0.0, 1.0, samples + 1)[:, None]
    u = 1.0 - t
    pts = u * u * np.asarray(p0) + 2 * u * t * np.asarray(p1) + t * t * np.asarray(p2)
    return _pin_ends(as_path(pts), p0, p2)


def sample_cubic(p0: Vec, p1: Vec, p2: Vec, p3: Vec, samples: int) -> Path:
    """Polyline of ``samples + 1`` positions along a cubic Bezier."""
    t = np.linspace(0.0, 1.0, samples + 1)[:, None]
    u = 1.0 - t
    pts = (
        u ** 3 * np.asarray(p0)
        + 3 * u * u * t * np.asarray(p1)
        + 3 * u * t * t * np.asarray(p2)
        + t ** 3 * np.asarray(p3)
    )
    return _pin_ends(as_path(pts), p0, p3)


def _pin_ends(path: Path, first: Vec, last: Vec) -> Path:
    # Endpoints must be bit-identical to the point positions
    return (tuple(map(float, first)),) + path[1:-1] + (tuple(map(float, last)),)


def as_array(path: Sequence[Vec]) -> np.ndarray:
    """Nx2 float array view of a path."""
    return np.asarray(path, dtype=float).reshape(-1, 2)


def as_path(points: np.ndarray) -> Path:
    """Tuple-of-tuples copy of an Nx2 array."""
    return tuple((float(x), float(y)) for x, y in np.asarray(points, dtype=float))


def point_at(path: Sequence[Vec], t: float) -> Vec:
    """
    Arc-length lookup along a polyline.

    Args:
        path: Non-empty sequence of positions
        t: Fraction of total length; clamped to [0, 1]

    Returns:
        Position at ``t * length`` from the first sample. A one-point or
        zero-length path returns its first sample.

    Raises:
        ValueError: If path is empty
    """
    if len(path) == 0:
        raise ValueError("point_at requires a non-empty path")
    pts = as_array(path)
    if len(pts) == 1:
        return (float(pts[0, 0]), float(pts[0, 1]))

    t = min(1.0, max(0.0, float(t)))
    seg_lengths = np.hypot(*np.diff(pts, axis=0).T)
    cumulative = np.concatenate(([0.0], np.cumsum(seg_lengths)))
    total = cumulative[-1]
    if total == 0.0:
        return (float(pts[0, 0]), float(pts[0, 1]))

    target = t * total
    idx = int(np.searchsorted(cumulative, target, side="right")) - 1
    idx = min(max(idx, 0), len(seg_lengths) - 1)
    seg = seg_lengths[idx]
    local = (target - cumulative[idx]) / seg if seg > 0 else 0.0
    x, y = pts[idx] + (pts[idx + 1] - pts[idx]) * local
    return (float(x), float(y))


def point_segment_distances(path: Sequence[Vec], position: Vec) -> np.ndarray:
    """
    Distance from ``position`` to every segment of ``path``.

    Returns:
        Array of shape (len(path) - 1,). A one-point path yields the single
        point distance as a length-1 array.
    """
    pts = as_array(path)
    pos = np.asarray(position, dtype=float)
    if len(pts) == 1:
        return np.array([np.hypot(*(pts[0] - pos))])

    starts = pts[:-1]
    segs = pts[1:] - starts
    length_sq = np.einsum("ij,ij->i", segs, segs)
    with np.errstate(divide="ignore", invalid="ignore"):
        t = np.einsum("ij,ij->i", pos - starts, segs) / length_sq
    t = np.where(length_sq > 0, np.clip(t, 0.0, 1.0), 0.0)
    closest = starts + segs * t[:, None]
    return np.hypot(*(closest - pos).T)


def distance_to_path(path: Sequence[Vec], position: Vec) -> float:
    """Minimum distance from ``position`` to a polyline."""
    return float(point_segment_distances(path, position).min())


def insert_on_path(
    path: Sequence[Vec],
    position: Vec,
    exact: float,
    project: bool = False
) -> Tuple[Path, int]:
    """
    Make ``position`` a sample of ``path``.

    The position is placed in the closest segment. If a sample already lies
    within ``exact`` of the target, the path is returned unchanged with that
    sample's index.

    Args:
        path: Polyline with at least 2 samples
        position: Position to insert
        exact: Positional equality epsilon
        project: Insert the projection onto the closest segment instead of
                 the position itself

    Returns:
        Tuple of (new path, index of the inserted sample)
    """
    pts = tuple((float(x), float(y)) for x, y in path)
    if len(pts) < 2:
        raise ValueError(f"insert_on_path requires >= 2 samples, got {len(pts)}")

    seg_idx = int(np.argmin(point_segment_distances(pts, position)))
    start, end = pts[seg_idx], pts[seg_idx + 1]
    target = closest_point_on_segment(position, start, end) if project else (
        float(position[0]), float(position[1])
    )

    for idx, sample in enumerate(pts):
        if distance(sample, target) < exact:
            return pts, idx

    new_path = pts[:seg_idx + 1] + (target,) + pts[seg_idx + 1:]
    return new_path, seg_idx + 1
