"""
Geometry Layer
==============

Pure geometry (immutable, stateless):

    geometry/
    ├── tolerance.py     # TolerancePolicy (exact / pixel categories)
    ├── vectors.py       # Vector arithmetic, Bezier sampling, arc length
    └── intersection.py  # Segment, self and curve/curve intersection
"""

from sprouts_engine.geometry.tolerance import TolerancePolicy, DEFAULT_TOLERANCE
from sprouts_engine.geometry.vectors import (
    Vec,
    Path,
    distance,
    distance_squared,
    cross,
    is_point_in_circle,
    closest_point_on_segment,
    point_at,
    distance_to_path,
    insert_on_path,
)
from sprouts_engine.geometry.intersection import (
    IntersectionResult,
    segment_intersection,
    segments_overlap,
    self_intersections,
    curves_intersect,
    cross_intersections,
    curve_passes_through_point,
)

__all__ = [
    # Tolerance
    "TolerancePolicy",
    "DEFAULT_TOLERANCE",
    # Vectors
    "Vec",
    "Path",
    "distance",
    "distance_squared",
    "cross",
    "is_point_in_circle",
    "closest_point_on_segment",
    "point_at",
    "distance_to_path",
    "insert_on_path",
    # Intersection
    "IntersectionResult",
    "segment_intersection",
    "segments_overlap",
    "self_intersections",
    "curves_intersect",
    "cross_intersections",
    "curve_passes_through_point",
]
