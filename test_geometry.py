"""
Geometry Tests
==============

Vector helpers and the intersection detector.

Usage:
    pytest test_geometry.py
"""

import pytest

from sprouts_engine.geometry import (
    TolerancePolicy,
    curve_passes_through_point,
    curves_intersect,
    cross_intersections,
    distance,
    distance_to_path,
    insert_on_path,
    point_at,
    segment_intersection,
    segments_overlap,
    self_intersections,
    closest_point_on_segment,
    cross,
    distance_squared,
    is_point_in_circle,
)
from sprouts_engine.geometry.vectors import (
    normalize,
    quadratic_bezier,
    cubic_bezier,
    sample_quadratic,
)


def approx_vec(v, expected):
    return v[0] == pytest.approx(expected[0]) and v[1] == pytest.approx(expected[1])


# ========== Vectors ==========

def test_distance_and_normalize():
    assert distance((0, 0), (3, 4)) == 5.0
    assert normalize((0.0, 0.0)) == (0.0, 0.0)
    assert approx_vec(normalize((3.0, 4.0)), (0.6, 0.8))


def test_squared_distance_cross_and_circle():
    assert distance_squared((0, 0), (3, 4)) == 25
    assert cross((1, 0), (0, 1)) == 1
    assert cross((0, 1), (1, 0)) == -1
    assert cross((2, 2), (1, 1)) == 0
    # Boundary counts as inside
    assert is_point_in_circle((3, 4), (0, 0), 5.0)
    assert is_point_in_circle((1, 1), (0, 0), 5.0)
    assert not is_point_in_circle((3, 4.1), (0, 0), 5.0)


def test_closest_point_on_segment_clamps():
    assert closest_point_on_segment((5, 5), (0, 0), (10, 0)) == (5.0, 0.0)
    assert closest_point_on_segment((-3, 2), (0, 0), (10, 0)) == (0, 0)
    assert closest_point_on_segment((14, -2), (0, 0), (10, 0)) == (10.0, 0.0)
    # Degenerate segment
    assert closest_point_on_segment((4, 4), (1, 1), (1, 1)) == (1, 1)


def test_bezier_evaluation():
    assert approx_vec(quadratic_bezier((0, 0), (1, 2), (2, 0), 0.5), (1.0, 1.0))
    assert approx_vec(cubic_bezier((0, 0), (1, 3), (2, 3), (3, 0), 0.0), (0.0, 0.0))
    assert approx_vec(cubic_bezier((0, 0), (1, 3), (2, 3), (3, 0), 1.0), (3.0, 0.0))


def test_sampled_curve_keeps_exact_endpoints():
    path = sample_quadratic((100.0, 200.0), (200.0, 260.0), (300.0, 200.0), 16)
    assert len(path) == 17
    assert path[0] == (100.0, 200.0)
    assert path[-1] == (300.0, 200.0)


def test_point_at_uses_arc_length():
    path = ((0, 0), (10, 0), (10, 10))
    assert approx_vec(point_at(path, 0.5), (10.0, 0.0))
    assert approx_vec(point_at(path, 0.75), (10.0, 5.0))
    # t is clamped
    assert approx_vec(point_at(path, -1.0), (0.0, 0.0))
    assert approx_vec(point_at(path, 2.0), (10.0, 10.0))


def test_point_at_degenerate_paths():
    assert point_at(((4, 5),), 0.7) == (4.0, 5.0)
    assert point_at(((1, 1), (1, 1)), 0.5) == (1.0, 1.0)
    with pytest.raises(ValueError):
        point_at((), 0.5)


def test_insert_on_path():
    path = ((0.0, 0.0), (10.0, 0.0))

    inserted, idx = insert_on_path(path, (5.0, 3.0), exact=0.1)
    assert idx == 1
    assert inserted == ((0.0, 0.0), (5.0, 3.0), (10.0, 0.0))

    projected, idx = insert_on_path(path, (5.0, 3.0), exact=0.1, project=True)
    assert projected[idx] == (5.0, 0.0)

    # Existing sample within exact is reused
    same, idx = insert_on_path(path, (10.05, 0.0), exact=0.1)
    assert same == path
    assert idx == 1


def test_distance_to_path():
    assert distance_to_path(((0, 0), (10, 0)), (5, 3)) == pytest.approx(3.0)
    assert distance_to_path(((0, 0), (10, 0), (10, 10)), (13, 5)) == pytest.approx(3.0)


# ========== Segments ==========

def test_segment_intersection_crossing():
    hit = segment_intersection((0, 0), (10, 10), (0, 10), (10, 0))
    assert hit is not None
    assert approx_vec(hit, (5.0, 5.0))


def test_segment_intersection_inclusive_endpoints():
    hit = segment_intersection((0, 0), (5, 5), (5, 5), (10, 0))
    assert hit is not None
    assert approx_vec(hit, (5.0, 5.0))


def test_segment_intersection_parallel_and_disjoint():
    assert segment_intersection((0, 0), (10, 0), (0, 5), (10, 5)) is None
    assert segment_intersection((0, 0), (1, 1), (5, 0), (6, -1)) is None


def test_segments_overlap():
    assert segments_overlap((0, 0), (10, 0), (5, 0), (15, 0))
    # Touching end to end is not an overlap
    assert not segments_overlap((0, 0), (10, 0), (10, 0), (20, 0))
    # Parallel but offset
    assert not segments_overlap((0, 0), (10, 0), (0, 1), (10, 1))


# ========== Paths ==========

def test_self_intersection_detected():
    path = ((0, 0), (10, 10), (10, 0), (0, 10))
    result = self_intersections(path)
    assert result.has_intersection
    assert approx_vec(result.points[0], (5.0, 5.0))


def test_closed_loop_is_not_self_intersecting():
    square = ((0, 0), (10, 0), (10, 10), (0, 10), (0, 0))
    assert not self_intersections(square).has_intersection


def test_curves_sharing_an_endpoint_do_not_intersect():
    a = ((0, 0), (10, 0))
    b = ((10, 0), (10, 10))
    assert not curves_intersect(a, b).has_intersection


def test_curves_crossing():
    a = ((0, 0), (5, 5), (10, 10))
    b = ((0, 10), (10, 0))
    result = curves_intersect(a, b)
    assert result.has_intersection
    assert len(result.points) >= 1


def test_coincident_interior_samples_still_cross():
    # Both paths have a sample at (5, 5) but neither ends there
    a = ((0, 0), (5, 5), (10, 10))
    b = ((0, 10), (5, 5), (10, 0))
    assert cross_intersections(a, b).has_intersection


def test_curve_ending_on_interior_sample_is_allowed():
    # b starts on a's inserted point
    a = ((0, 0), (5, 0), (10, 0))
    b = ((5, 0), (5, 10))
    assert not cross_intersections(a, b).has_intersection


def test_collinear_overlap_between_curves():
    a = ((0, 0), (10, 0))
    b = ((5, 0), (20, 0))
    result = curves_intersect(a, b)
    assert result.has_intersection
    assert result.overlaps == 1


def test_curve_passes_through_point():
    path = ((0, 0), (100, 0))
    tol = TolerancePolicy()
    assert curve_passes_through_point(path, (50, 5), tol)
    assert not curve_passes_through_point(path, (50, 20), tol)
    assert not curve_passes_through_point(path, (50, 5), tol, point_id="p", allowed_ids={"p"})


def test_tolerance_policy_ordering():
    with pytest.raises(ValueError):
        TolerancePolicy(exact=1.0, pixel=0.5)
    with pytest.raises(ValueError):
        TolerancePolicy(pixel=12.0, min_separation=5.0)
