import math

import pytest

from gridparts import solid_ops
from gridparts.brep import face_count, occ_available, solid_count
from gridparts.errors import ConsumedSolidError
from gridparts.forming import extrude
from gridparts.path import draw

pytestmark = pytest.mark.skipif(not occ_available(), reason="pythonocc-core not available")


def _box(w=10, d=10, h=10):
    return extrude(draw().h_line(w).v_line(d).h_line(-w).close(), "XY", h)


class TestBooleans:

    def test_fuse_overlapping_boxes(self):
        a = _box()
        b = solid_ops.translate(_box(), 5, 0, 0)
        result = solid_ops.fuse(a, b)
        assert result.volume() == pytest.approx(1500)
        assert a.consumed and b.consumed
        # coplanar faces merged by the default simplify step
        assert face_count(result) == 6

    def test_cut_and_intersect(self):
        base = _box()
        tool = solid_ops.translate(_box(), 5, 5, 0)
        assert solid_ops.cut(base, tool).volume() == pytest.approx(750)
        common = solid_ops.intersect(_box(), solid_ops.translate(_box(), 5, 5, 0))
        assert common.volume() == pytest.approx(250)

    def test_consumed_operand_cannot_be_reused(self):
        a = _box()
        b = solid_ops.translate(_box(), 5, 0, 0)
        solid_ops.fuse(a, b)
        with pytest.raises(ConsumedSolidError):
            solid_ops.cut(a, _box())

    def test_disjoint_fuse_keeps_both_bodies(self):
        far = solid_ops.translate(_box(), 50, 0, 0)
        assert solid_count(solid_ops.fuse_all([_box(), far])) == 2

    def test_glued_fuse_of_touching_boxes(self):
        a = _box()
        b = solid_ops.translate(_box(), 10, 0, 0)
        result = solid_ops.fuse(a, b, same_face=True)
        assert result.volume() == pytest.approx(2000)
        assert solid_count(result) == 1

    def test_cut_all(self):
        holes = [solid_ops.translate(_box(2, 2, 10), x, 4, 0) for x in (1, 5)]
        result = solid_ops.cut_all(_box(), holes)
        assert result.volume() == pytest.approx(1000 - 2 * 40)


class TestTransforms:

    def test_translate_leaves_input_usable(self):
        box = _box()
        moved = solid_ops.translate(box, (1, 2, 3))
        assert not box.consumed
        assert moved.bounding_box().min.x == pytest.approx(1, abs=1e-3)
        assert box.bounding_box().min.x == pytest.approx(0, abs=1e-3)

    def test_rotate_there_and_back(self):
        box = _box(10, 4, 2)
        turned = solid_ops.rotate(solid_ops.rotate(box, 37.0, (1, 1, 0)), -37.0, (1, 1, 0))
        before = box.bounding_box()
        after = turned.bounding_box()
        for p, q in ((before.min, after.min), (before.max, after.max)):
            assert (p - q).length() == pytest.approx(0, abs=1e-3)
        assert turned.volume() == pytest.approx(box.volume())

    def test_rotate_quarter_turn_about_z(self):
        box = solid_ops.rotate(_box(10, 4, 2), 90).bounding_box()
        assert box.size == pytest.approx((4, 10, 2), abs=1e-3)
        assert box.min.x == pytest.approx(-4, abs=1e-3)

    def test_mirror_yz(self):
        mirrored = solid_ops.mirror(_box(), "YZ").bounding_box()
        assert mirrored.min.x == pytest.approx(-10, abs=1e-3)
        assert mirrored.max.x == pytest.approx(0, abs=1e-3)

    def test_clone_is_independent(self):
        box = _box()
        copy = solid_ops.clone(box)
        solid_ops.fuse(box, solid_ops.translate(_box(), 5, 0, 0))
        assert copy.volume() == pytest.approx(1000)
        assert math.isclose(copy.bounding_box().max.x, 10, abs_tol=1e-3)
