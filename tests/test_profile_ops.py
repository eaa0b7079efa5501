import math

import pytest

from gridparts import profile_ops
from gridparts.errors import GeometryError
from gridparts.geom import Point2
from gridparts.path import draw
from gridparts.profile_ops import Region
from gridparts.shapes import draw_circle, draw_rounded_rectangle


def _square(size=2.0):
    return draw().h_line(size).v_line(size).h_line(-size).close()


def test_translate_accepts_pair_or_point():
    moved = profile_ops.translate(_square(), 3, 4)
    same = profile_ops.translate(_square(), (3, 4))
    assert moved == same
    lo, hi = moved.bounds()
    assert math.isclose(lo.x, 3.0) and math.isclose(lo.y, 4.0)
    assert math.isclose(hi.x, 5.0) and math.isclose(hi.y, 6.0)


def test_rotate_quarter_turn():
    rotated = profile_ops.rotate(_square(), 90)
    lo, hi = rotated.bounds()
    assert math.isclose(lo.x, -2.0, abs_tol=1e-9)
    assert math.isclose(hi.x, 0.0, abs_tol=1e-9)
    assert math.isclose(hi.y, 2.0, abs_tol=1e-9)


def test_mirror_keeps_winding():
    square = _square()
    for axis in ("x", "y", ((1, 1), (1, 0))):
        mirrored = profile_ops.mirror(square, axis)
        assert mirrored.closed
        assert mirrored.signed_area() > 0
        assert math.isclose(mirrored.signed_area(), square.signed_area())


def test_mirror_across_x_flips_y():
    mirrored = profile_ops.mirror(_square(), "x")
    lo, hi = mirrored.bounds()
    assert math.isclose(lo.y, -2.0) and math.isclose(hi.y, 0.0)


def test_mirror_rejects_unknown_axis():
    with pytest.raises(ValueError):
        profile_ops.mirror(_square(), "z")


def test_cut_records_ordered_steps():
    plate = draw_rounded_rectangle(20, 10, 2)
    hole_a = draw_circle(1, (-5, 0))
    hole_b = draw_circle(1, (5, 0))
    region = profile_ops.cut(profile_ops.cut(plate, hole_a), hole_b)
    assert isinstance(region, Region)
    assert region.base is plate
    assert [op for op, _ in region.steps] == ["cut", "cut"]
    assert profile_ops.loops(region) == (plate, hole_a, hole_b)


def test_fuse_flattens_union_on_the_right():
    union = profile_ops.fuse(_square(), profile_ops.translate(_square(), 1, 1))
    region = profile_ops.fuse(draw_circle(5), union)
    assert [op for op, _ in region.steps] == ["fuse", "fuse"]


def test_cut_with_holed_region_on_the_right_is_rejected():
    holed = profile_ops.cut(_square(4), draw_circle(0.5, (2, 2)))
    with pytest.raises(GeometryError):
        profile_ops.cut(draw_circle(10), holed)


def test_booleans_need_closed_profiles():
    open_path = draw().h_line(3).v_line(3).done()
    with pytest.raises(GeometryError):
        profile_ops.cut(_square(), open_path)
    with pytest.raises(GeometryError):
        Region(open_path)


def test_region_transforms_apply_to_every_loop():
    region = profile_ops.cut(_square(4), draw_circle(0.5, (2, 2)))
    moved = region.translate(10, 0)
    hole = moved.steps[0][1]
    assert hole.segments[0].center == Point2(12, 2)
    assert moved.base.first_point == Point2(10, 0)


def test_profile_chaining_matches_module_functions():
    square = _square()
    assert square.translate(1, 2) == profile_ops.translate(square, 1, 2)
    assert square.mirror("y") == profile_ops.mirror(square, "y")
