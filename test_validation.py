"""
Topology Validator Tests
========================

Move checks 1-5 in order, and the whole-board consistency check.

Usage:
    pytest test_validation.py
"""

import math
from dataclasses import replace

import pytest

from sprouts_engine.errors import ErrorCode
from sprouts_engine.schemas import ConnectAction, Curve, Point
from sprouts_engine.topology import (
    TopologyValidator,
    ViolationType,
    count_legal_pairs,
    legal_pairs,
)

validator = TopologyValidator()


def connect(from_id, to_id, path, new_point, curve_id="curve-0", new_point_id="point-9"):
    return ConnectAction(
        from_id=from_id,
        to_id=to_id,
        path=path,
        new_point_position=new_point,
        curve_id=curve_id,
        new_point_id=new_point_id,
    )


def two_points():
    return [Point("a", (0.0, 0.0)), Point("b", (200.0, 0.0))]


# ========== Check 1: ids and capacity ==========

def test_unknown_point_is_invalid_move():
    action = connect("a", "zzz", ((0, 0), (100, 0), (200, 0)), (100, 0))
    result = validator.validate_action(action, two_points(), [])
    assert result.code == ErrorCode.INVALID_MOVE


def test_reused_ids_are_invalid_move():
    points = two_points()
    taken_point = connect("a", "b", ((0, 0), (100, 50), (200, 0)), (100, 50), new_point_id="a")
    assert validator.validate_action(taken_point, points, []).code == ErrorCode.INVALID_MOVE

    existing = Curve("curve-0", "a", "b", ((0, 0), (100, -50), (200, 0)), "m", 1)
    taken_curve = connect("a", "b", ((0, 0), (100, 50), (200, 0)), (100, 50))
    assert validator.validate_action(taken_curve, points, [existing]).code == ErrorCode.INVALID_MOVE


def test_full_point_exceeds_connection_limit():
    points = [Point("a", (0.0, 0.0), incident=("x", "y", "z")), Point("b", (200.0, 0.0))]
    action = connect("a", "b", ((0, 0), (100, 0), (200, 0)), (100, 0))
    result = validator.validate_action(action, points, [])
    assert result.code == ErrorCode.CONNECTION_LIMIT_EXCEEDED


def test_loop_needs_two_spare_slots():
    points = [Point("a", (0.0, 0.0), incident=("x", "y"))]
    loop = connect("a", "a", ((0, 0), (30, 30), (0, 60), (-30, 30), (0, 0)), (0, 60))
    result = validator.validate_action(loop, points, [])
    assert result.code == ErrorCode.CONNECTION_LIMIT_EXCEEDED


def test_capacity_is_checked_before_geometry():
    # Bad path and a full endpoint: capacity wins
    points = [Point("a", (0.0, 0.0), incident=("x", "y", "z")), Point("b", (200.0, 0.0))]
    action = connect("a", "b", ((50, 50), (60, 60)), (55, 55))
    assert validator.validate_action(action, points, []).code == ErrorCode.CONNECTION_LIMIT_EXCEEDED


# ========== Check 2-3: path ==========

def test_path_must_start_and_end_on_points():
    action = connect("a", "b", ((5, 5), (100, 0), (200, 0)), (100, 0))
    assert validator.validate_action(action, two_points(), []).code == ErrorCode.INVALID_CURVE


def test_self_crossing_path():
    path = ((0, 0), (150, 50), (150, -50), (50, 50), (200, 0))
    action = connect("a", "b", path, (150, 0))
    assert validator.validate_action(action, two_points(), []).code == ErrorCode.INVALID_CURVE


def test_loop_must_be_closed_and_long_enough():
    points = [Point("a", (0.0, 0.0))]
    short = connect("a", "a", ((0, 0), (30, 30), (0, 0)), (30, 30))
    assert validator.validate_action(short, points, []).code == ErrorCode.INVALID_CURVE


def test_path_through_third_point():
    points = two_points() + [Point("c", (100.0, 5.0))]
    action = connect("a", "b", ((0, 0), (100, 0), (200, 0)), (100, 0))
    result = validator.validate_action(action, points, [])
    assert result.code == ErrorCode.INVALID_CURVE
    assert "c" in result.message


def test_path_crossing_existing_curve():
    points = two_points() + [Point("c", (100.0, -100.0)), Point("d", (100.0, 100.0))]
    points[2] = points[2].with_incident("curve-0")
    points[3] = points[3].with_incident("curve-0")
    wall = Curve("curve-0", "c", "d", ((100, -100), (100, -40), (100, 100)), "m", 1)
    action = connect("a", "b", ((0, 0), (60, 20), (200, 0)), (60, 20), curve_id="curve-1")
    result = validator.validate_action(action, points, [wall])
    assert result.code == ErrorCode.INVALID_CURVE


# ========== Check 4-5: new point ==========

def test_three_sample_path_needs_middle_new_point():
    action = connect("a", "b", ((0, 0), (100, 0), (200, 0)), (120, 0))
    assert validator.validate_action(action, two_points(), []).code == ErrorCode.INVALID_NEW_POINT


def test_new_point_off_the_path():
    action = connect("a", "b", ((0, 0), (200, 0)), (100, 20))
    assert validator.validate_action(action, two_points(), []).code == ErrorCode.INVALID_NEW_POINT


def test_new_point_is_anchored_into_path():
    action = connect("a", "b", ((0, 0), (200, 0)), (100, 0))
    check = validator.check_action(action, two_points(), [])
    assert check.result.is_valid
    assert check.path == ((0.0, 0.0), (100.0, 0.0), (200.0, 0.0))
    assert check.new_point_index == 1


def test_new_point_on_endpoint_is_rejected():
    action = connect("a", "b", ((0, 0), (100, 50), (150, 50), (200, 0)), (0, 0))
    assert validator.validate_action(action, two_points(), []).code == ErrorCode.INVALID_NEW_POINT


def test_new_point_too_close_to_existing_point():
    action = connect("a", "b", ((0, 0), (10, 0), (200, 0)), (10, 0))
    assert validator.validate_action(action, two_points(), []).code == ErrorCode.INVALID_NEW_POINT


def test_new_point_too_close_to_existing_curve():
    points = two_points() + [Point("c", (40.0, 80.0)), Point("d", (160.0, 80.0))]
    points[2] = points[2].with_incident("curve-0")
    points[3] = points[3].with_incident("curve-0")
    shelf = Curve("curve-0", "c", "d", ((40, 80), (100, 32), (160, 80)), "m", 1)
    # New point 10px below the shelf's lowest sample
    path = ((0, 0), (40, 22), (100, 22), (160, 22), (200, 0))
    action = connect("a", "b", path, (100, 22), curve_id="curve-1")
    assert validator.validate_action(action, points, [shelf]).code == ErrorCode.INVALID_NEW_POINT



def test_non_finite_coordinates_are_invalid_move():
    nan_middle = connect("a", "b", ((0, 0), (math.nan, math.nan), (200, 0)), (math.nan, math.nan))
    assert validator.validate_action(nan_middle, two_points(), []).code == ErrorCode.INVALID_MOVE

    inf_point = connect("a", "b", ((0, 0), (100, 40), (200, 0)), (math.inf, 40))
    assert validator.validate_action(inf_point, two_points(), []).code == ErrorCode.INVALID_MOVE


def test_board_records_reject_non_finite_positions():
    with pytest.raises(ValueError):
        Point("a", (math.nan, 0.0))
    with pytest.raises(ValueError):
        Curve("curve-0", "a", "b", ((0, 0), (math.inf, 0), (200, 0)), "m", 1)

# ========== Whole-board check ==========

def consistent_board():
    points = [
        Point("a", (0.0, 0.0), incident=("curve-0",)),
        Point("b", (200.0, 0.0), incident=("curve-0",)),
        Point("m", (100.0, 0.0), incident=("curve-0", "curve-0"), created_at_move=1),
    ]
    curves = [Curve("curve-0", "a", "b", ((0, 0), (100, 0), (200, 0)), "m", 1)]
    return points, curves


def test_consistent_board_is_valid():
    points, curves = consistent_board()
    assert validator.validate_state(points, curves).is_valid


def test_dangling_reference():
    points, curves = consistent_board()
    points[0] = points[0].with_incident("curve-7")
    report = validator.validate_state(points, curves)
    assert not report.is_valid
    assert ViolationType.DANGLING_REFERENCE in {v.type for v in report.violations}


def test_missing_incidence_entry():
    points, curves = consistent_board()
    points[2] = replace(points[2], incident=("curve-0",))
    report = validator.validate_state(points, curves)
    assert ViolationType.INVALID_ENDPOINTS in {v.type for v in report.violations}


def test_duplicate_ids():
    points, curves = consistent_board()
    points.append(Point("a", (0.0, 150.0)))
    report = validator.validate_state(points, curves)
    assert ViolationType.DUPLICATE_ID in {v.type for v in report.violations}


def test_crossing_curves_in_state():
    points, curves = consistent_board()
    points += [
        Point("c", (50.0, -100.0), incident=("curve-1",)),
        Point("d", (50.0, 100.0), incident=("curve-1",)),
        Point("n", (50.0, 60.0), incident=("curve-1", "curve-1"), created_at_move=2),
    ]
    curves.append(Curve("curve-1", "c", "d", ((50, -100), (50, 60), (50, 100)), "n", 2))
    report = validator.validate_state(points, curves)
    assert ViolationType.CURVE_INTERSECTION in {v.type for v in report.violations}


def test_curve_through_unrelated_point():
    points, curves = consistent_board()
    points.append(Point("z", (150.0, 4.0)))
    report = validator.validate_state(points, curves)
    assert ViolationType.CURVE_THROUGH_POINT in {v.type for v in report.violations}


# ========== Legal pairs ==========

def test_legal_pair_enumeration():
    points = [
        Point("p0", (0, 0)),
        Point("p1", (50, 0), incident=("c", "c")),
        Point("p2", (100, 0), incident=("c", "d", "e")),
    ]
    assert legal_pairs(points) == [("p0", "p0"), ("p0", "p1")]
    assert count_legal_pairs(points) == 2


def test_fresh_board_pair_count():
    points = [Point(f"p{i}", (i * 50.0, 0.0)) for i in range(3)]
    # C(3, 2) pairs plus one loop per point
    assert count_legal_pairs(points) == 6
    assert len(legal_pairs(points)) == 6
