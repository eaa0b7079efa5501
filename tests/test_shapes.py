import math

import pytest

from gridparts.errors import GeometryError
from gridparts.shapes import (
    draw_circle,
    draw_hexagon,
    draw_hexihole,
    draw_rounded_rectangle,
    draw_rounded_rectangle_with_straight_back,
    grid_cells,
    grid_positions,
    inscribed_to_circumscribed,
)


def _assert_bounds(profile, lo, hi, tol=1e-9):
    plo, phi = profile.bounds()
    assert math.isclose(plo.x, lo[0], abs_tol=tol)
    assert math.isclose(plo.y, lo[1], abs_tol=tol)
    assert math.isclose(phi.x, hi[0], abs_tol=tol)
    assert math.isclose(phi.y, hi[1], abs_tol=tol)


def test_circle_is_a_single_full_arc():
    circle = draw_circle(3, (1, 1))
    assert circle.closed
    assert len(circle.segments) == 1
    assert circle.segments[0].is_full_circle
    assert math.isclose(circle.signed_area(), math.pi * 9, rel_tol=1e-2)


def test_hexihole_inscribed_radius():
    """A flat-bottom hexihole has its flats at the requested radius."""
    r = 4.0
    hole = draw_hexihole(r, "flat-bottom")
    big = inscribed_to_circumscribed(r)
    _assert_bounds(hole, (-big, -r), (big, r))
    assert len(hole.segments) == 6


def test_hexihole_v_bottom_has_vertex_down():
    r = 4.0
    hole = draw_hexihole(r)
    big = inscribed_to_circumscribed(r)
    _assert_bounds(hole, (-r, -big), (r, big))
    assert math.isclose(hole.first_point.y, -big)


def test_hexagon_area_and_orientation():
    hexagon = draw_hexagon(2.0)
    assert math.isclose(hexagon.signed_area(), 3 * math.sqrt(3) / 2 * 4)
    with pytest.raises(ValueError):
        draw_hexagon(2.0, "pointy")


def test_rounded_rectangle_bounds():
    _assert_bounds(draw_rounded_rectangle(20, 10, 3), (-10, -5), (10, 5))
    _assert_bounds(draw_rounded_rectangle(20, 10), (-10, -5), (10, 5))


def test_rounded_rectangle_radius_must_fit():
    with pytest.raises(GeometryError):
        draw_rounded_rectangle(4, 4, 3)


def test_straight_back_rectangle_spans_negative_x():
    plate = draw_rounded_rectangle_with_straight_back(40, 30, 5)
    _assert_bounds(plate, (-40, 0), (0, 30))
    assert plate.signed_area() > 0
    # the back edge is the straight closing segment along y = 0
    back = plate.segments[-1]
    assert back.start.y == pytest.approx(0.0) and back.end.y == pytest.approx(0.0)


def test_straight_back_rectangle_rejects_large_radius():
    with pytest.raises(GeometryError):
        draw_rounded_rectangle_with_straight_back(8, 30, 5)


def test_grid_positions_are_cell_centres():
    assert grid_positions(3, 40) == [20.0, 60.0, 100.0]
    assert grid_positions(2, 10, offset=-5) == [0.0, 10.0]
    assert grid_positions(0, 10) == []
    with pytest.raises(ValueError):
        grid_positions(-1, 10)


def test_grid_cells_row_major():
    assert list(grid_cells([2, 2])) == [(0, 0), (0, 1), (1, 0), (1, 1)]


def test_hexagon_vertices_and_apothem():
    """Vertices sit on the circumscribed circle, edge midpoints on the inscribed one."""
    radius = 7.0
    for orientation in ("v-bottom", "flat-bottom"):
        hexagon = draw_hexagon(radius, orientation)
        for seg in hexagon.segments:
            assert seg.start.length() == pytest.approx(radius, abs=1e-9)
            mid = seg.point_at(0.5)
            assert mid.length() == pytest.approx(radius * math.sqrt(3) / 2, abs=1e-9)
