import math

import pytest

from gridparts.errors import GeometryError
from gridparts.geom import Point2
from gridparts.path import draw
from gridparts.segments import ArcSegment, BezierSegment, EllipseArcSegment, LineSegment


def _close(a, b, tol=1e-9):
    return (Point2(*a) - Point2(*b)).length() <= tol


def test_builder_is_immutable():
    stem = draw().h_line(10)
    up = stem.v_line(5)
    down = stem.v_line(-5)
    assert len(stem.segments) == 1
    assert _close(up.pen, (10, 5))
    assert _close(down.pen, (10, -5))


def test_rectangle_closes_with_positive_area():
    profile = draw().h_line(10).v_line(5).h_line(-10).close()
    assert profile.closed
    assert len(profile.segments) == 4
    assert math.isclose(profile.signed_area(), 50.0, abs_tol=1e-9)
    lo, hi = profile.bounds()
    assert _close(lo, (0, 0)) and _close(hi, (10, 5))


def test_close_skips_segment_when_pen_is_at_start():
    profile = draw().h_line(10).v_line(10).line_to((0, 0)).close()
    assert len(profile.segments) == 3


def test_move_to_only_before_drawing():
    pen = draw().move_to((3, 4))
    assert _close(pen.pen, (3, 4))
    with pytest.raises(GeometryError):
        pen.h_line(1).move_to((0, 0))


def test_zero_length_segment_reports_operation_and_index():
    with pytest.raises(GeometryError) as info:
        draw().h_line(5).v_line(0)
    assert info.value.operation == "v_line"
    assert info.value.index == 1


def test_polar_line_uses_degrees_counter_clockwise():
    pen = draw().polar_line(2, 90)
    assert _close(pen.pen, (0, 2), 1e-12)
    pen = draw().polar_line_to(2, 180)
    assert _close(pen.pen, (-2, 0), 1e-12)


class TestTangentArcs:

    def test_start_tangent_follows_previous_segment(self):
        pen = draw().h_line(10).tangent_arc(5, 5)
        arc = pen.segments[-1]
        assert isinstance(arc, ArcSegment)
        assert _close(arc.start_tangent, (1, 0), 1e-9)
        assert _close(arc.end_tangent, (0, 1), 1e-9)
        assert math.isclose(arc.radius, 5.0)
        assert _close(arc.center, (10, 5))

    def test_first_segment_starts_along_x(self):
        arc = draw().tangent_arc(2, 2).segments[0]
        assert _close(arc.start_tangent, (1, 0), 1e-9)

    def test_end_on_tangent_line_is_rejected(self):
        with pytest.raises(GeometryError):
            draw().h_line(10).tangent_arc_to((20, 0))

    def test_clockwise_turn(self):
        arc = draw().h_line(10).tangent_arc(5, -5).segments[-1]
        assert arc.sweep < 0
        assert _close(arc.end_tangent, (0, -1), 1e-9)


def test_three_points_arc_passes_through_mid():
    arc = draw((-1, 0)).three_points_arc_to((1, 0), (0, 1)).segments[0]
    assert _close(arc.center, (0, 0), 1e-9)
    assert math.isclose(arc.radius, 1.0)
    assert _close(arc.point_at(0.5), (0, 1), 1e-9)


def test_sagitta_arc_bulges_left_of_chord():
    arc = draw().sagitta_arc(2, 0, 1).segments[0]
    assert _close(arc.point_at(0.5), (1, 1), 1e-9)


class TestEllipses:

    def test_half_ellipse_with_equal_radii_is_a_semicircle(self):
        seg = draw().half_ellipse_to((0, 2), 1).segments[0]
        assert isinstance(seg, ArcSegment)
        # clockwise from the bottom passes through the left-most point
        assert _close(seg.point_at(0.5), (-1, 1), 1e-9)

    def test_half_ellipse_sweep_flips_side(self):
        seg = draw().half_ellipse_to((0, 2), 1, sweep=True).segments[0]
        assert _close(seg.point_at(0.5), (1, 1), 1e-9)

    def test_half_ellipse_minor_radius(self):
        seg = draw().half_ellipse(10, 0, 2).segments[0]
        assert isinstance(seg, EllipseArcSegment)
        assert math.isclose(seg.rx, 5.0)
        assert math.isclose(seg.ry, 2.0)
        assert _close(seg.point_at(0.5), (5, 2), 1e-9)

    def test_radii_too_small_are_scaled_up(self):
        seg = draw().ellipse_to((10, 0), 1, 1).segments[0]
        assert math.isclose(seg.radius, 5.0)

    def test_endpoints_are_exact(self):
        seg = draw((1, 1)).ellipse_to((4, 3), 5, 2, 30).segments[0]
        assert seg.start == Point2(1, 1)
        assert seg.end == Point2(4, 3)


def test_smooth_spline_continues_previous_tangent():
    pen = draw().h_line(4).smooth_spline_to((8, 4), start_factor=2, end_factor=2)
    spline = pen.segments[-1]
    assert isinstance(spline, BezierSegment)
    assert _close(spline.start_tangent, (1, 0), 1e-9)
    chord = Point2(4, 4)
    arm = chord.length() * 0.25 * 2
    assert _close(spline.control1, (4 + arm, 0), 1e-9)


class TestCustomCorner:

    def test_corner_is_tangent_to_both_lines(self):
        profile = draw().h_line(10).custom_corner(2).v_line(10).done()
        first, arc, last = profile.segments
        assert isinstance(arc, ArcSegment)
        assert _close(first.end, (8, 0), 1e-9)
        assert _close(arc.end, (10, 2), 1e-9)
        assert _close(arc.start_tangent, first.end_tangent, 1e-9)
        assert _close(arc.end_tangent, last.start_tangent, 1e-9)

    def test_corner_resolved_by_close(self):
        profile = draw().h_line(10).v_line(10).custom_corner(3).close()
        assert any(isinstance(seg, ArcSegment) for seg in profile.segments)
        assert profile.closed

    def test_radius_larger_than_segments_is_rejected(self):
        with pytest.raises(GeometryError):
            draw().h_line(1).custom_corner(5).v_line(1)

    def test_corner_needs_straight_segments(self):
        with pytest.raises(GeometryError):
            draw().tangent_arc(2, 2).custom_corner(1).v_line(5)

    def test_pending_corner_blocks_done(self):
        with pytest.raises(GeometryError):
            draw().h_line(5).custom_corner(1).done()


def test_close_with_mirror_is_symmetric():
    half = (draw((10, 0))
            .v_line(-3)
            .tangent_arc_to((0, -5))
            .h_line_to(-4)
            .v_line_to(0))
    profile = half.close_with_mirror()
    assert profile.closed
    pts = profile.points(32)
    for p in pts:
        mirrored = Point2(p.x, -p.y)
        assert min((mirrored - q).length() for q in pts) <= 1e-9


def test_done_keeps_profile_open():
    profile = draw().h_line(3).v_line(3).done()
    assert not profile.closed
    assert isinstance(profile.segments[0], LineSegment)
    with pytest.raises(GeometryError):
        profile.signed_area()
