"""
Tolerance Policy
================

Single source of truth for every distance threshold used by the geometry,
validation and synthesis layers.

Two categories:
- exact: positions closer than this are the same position (shared
  endpoints, loop closure, anchored samples, collinear band)
- pixel: the drawing-scale clearance a curve must keep from points it
  does not touch, and the placement window for a declared new point
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class TolerancePolicy:
    """
    Immutable tolerance policy.

    Attributes:
        exact: Positional equality epsilon (pixels)
        pixel: Curve/point clearance and placement window (pixels)
        min_separation: Minimum distance between a new point and any point
        parallel: Cross-product cutoff below which two directions are parallel

    Invariants:
        - 0 < exact < pixel
        - min_separation >= pixel
        - parallel > 0
    """

    exact: float = 0.1
    pixel: float = 12.0
    min_separation: float = 15.0
    parallel: float = 1e-6

    def __post_init__(self):
        """Validate tolerance ordering."""
        if self.exact <= 0:
            raise ValueError(f"exact tolerance must be > 0, got {self.exact}")
        if self.pixel <= self.exact:
            raise ValueError(
                f"pixel tolerance must exceed exact tolerance, "
                f"got pixel={self.pixel}, exact={self.exact}"
            )
        if self.min_separation < self.pixel:
            raise ValueError(
                f"min_separation must be >= pixel tolerance, "
                f"got {self.min_separation} < {self.pixel}"
            )
        if self.parallel <= 0:
            raise ValueError(f"parallel tolerance must be > 0, got {self.parallel}")


DEFAULT_TOLERANCE = TolerancePolicy()
