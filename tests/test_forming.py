import math

import pytest

from gridparts.brep import occ_available
from gridparts.errors import FormingError
from gridparts.forming import (
    extrude,
    helical_sweep,
    loft,
    make_cylinder,
    make_wire,
    profile_crosses_axis,
    revolve,
    sweep,
    sweep_profile_plane,
)
from gridparts.geom import Point3
from gridparts.path import draw
from gridparts.profile_ops import cut
from gridparts.shapes import draw_circle, draw_rounded_rectangle

requires_occ = pytest.mark.skipif(not occ_available(), reason="pythonocc-core not available")


def _rect(w, h):
    return draw().h_line(w).v_line(h).h_line(-w).close()


def _size(solid):
    return solid.bounding_box().size


class TestFrames:
    """Plane bookkeeping that does not need the kernel."""

    def test_sweep_frame_points_outward(self):
        plane = sweep_profile_plane((0, 0, 0), (0, 1, 0), (0, 0, 1))
        assert (plane.x_dir - Point3(1, 0, 0)).length() < 1e-12
        assert (plane.y_dir - Point3(0, 0, 1)).length() < 1e-12

    def test_profile_crossing_axis(self):
        assert profile_crosses_axis(draw_circle(1), (0, 0), (0, 1))
        assert not profile_crosses_axis(draw_circle(1, (2, 0)), (0, 0), (0, 1))
        # touching the axis is allowed
        assert not profile_crosses_axis(_rect(1, 1), (0, 0), (0, 1))


@requires_occ
class TestExtrude:

    def test_box_on_xy(self):
        solid = extrude(_rect(10, 5), "XY", 3)
        assert _size(solid) == pytest.approx((10, 5, 3), abs=1e-3)
        assert solid.volume() == pytest.approx(150.0)
        assert solid.provenance[-1].operation == "extrude"

    def test_xz_extrudes_towards_negative_y(self):
        box = extrude(_rect(2, 3), "XZ", 4).bounding_box()
        assert box.min.y == pytest.approx(-4, abs=1e-3)
        assert box.max.y == pytest.approx(0, abs=1e-3)
        assert box.max.z == pytest.approx(3, abs=1e-3)

    def test_offset_and_negative_distance(self):
        box = extrude(_rect(2, 2), "XY", -3, offset=10).bounding_box()
        assert box.min.z == pytest.approx(7, abs=1e-3)
        assert box.max.z == pytest.approx(10, abs=1e-3)

    def test_region_with_hole(self):
        region = cut(draw_rounded_rectangle(10, 10), draw_circle(1))
        solid = extrude(region, "XY", 2)
        assert solid.volume() == pytest.approx(200 - 2 * math.pi, rel=1e-6)

    def test_rejects_open_profile_and_zero_distance(self):
        with pytest.raises(FormingError):
            extrude(draw().h_line(1).v_line(1).done(), "XY", 1)
        with pytest.raises(FormingError):
            extrude(_rect(1, 1), "XY", 0)


@requires_occ
class TestRevolveLoftSweep:

    def test_revolve_square_off_axis(self):
        square = draw((1, 0)).h_line(1).v_line(1).h_line(-1).close()
        solid = revolve(square, "XY", ((0, 0), (0, 1)))
        # Pappus: 2 pi * centroid distance * area
        assert solid.volume() == pytest.approx(2 * math.pi * 1.5, rel=1e-6)

    def test_revolve_rejects_profile_across_axis(self):
        with pytest.raises(FormingError):
            revolve(draw_circle(1), "XY", ((0, 0), (0, 1)))

    def test_loft_between_equal_circles(self):
        wires = [make_wire(draw_circle(2), "XY", z) for z in (0, 5)]
        solid = loft(wires, ruled=True)
        assert solid.volume() == pytest.approx(math.pi * 4 * 5, rel=1e-3)

    def test_loft_needs_two_sections(self):
        with pytest.raises(FormingError):
            loft([make_wire(draw_circle(2))])

    def test_sweep_along_straight_path(self):
        path = make_wire(draw().v_line(10).done(), "XY")
        solid = sweep(draw_circle(1), path)
        assert solid.volume() == pytest.approx(math.pi * 10, rel=1e-3)
        assert _size(solid)[1] == pytest.approx(10, abs=1e-3)

    def test_sweep_rejects_unknown_transition(self):
        path = make_wire(draw().v_line(10).done(), "XY")
        with pytest.raises(ValueError):
            sweep(draw_circle(1), path, transition="mitre")

    def test_cylinder(self):
        solid = make_cylinder(2, 5, base=(1, 1, -1))
        box = solid.bounding_box()
        assert box.min.z == pytest.approx(-1, abs=1e-3)
        assert box.max.z == pytest.approx(4, abs=1e-3)
        assert solid.volume() == pytest.approx(math.pi * 20, rel=1e-6)


@requires_occ
class TestContactSweep:

    def _path(self):
        # straight path up +y starting at (5, 0, 0)
        return make_wire(draw((5, 0)).v_line(10).done(), "XY")

    def test_section_is_moved_onto_path_start(self):
        section = draw_circle(1, center=(3, 3))
        solid = sweep(section, self._path(), with_contact=True)
        box = solid.bounding_box()
        assert box.min.y == pytest.approx(0, abs=1e-3)
        assert box.max.y == pytest.approx(10, abs=1e-3)
        assert box.min.x - 1e-3 <= 5 <= box.max.x + 1e-3
        assert box.min.z - 1e-3 <= 0 <= box.max.z + 1e-3
        assert solid.volume() == pytest.approx(math.pi * 10, rel=1e-3)

    def test_without_contact_section_keeps_its_offset(self):
        solid = sweep(draw_circle(1, center=(3, 3)), self._path())
        box = solid.bounding_box()
        assert box.min.x == pytest.approx(7, abs=1e-3)
        assert box.min.z == pytest.approx(2, abs=1e-3)


@requires_occ
class TestHelicalSweep:

    # local x runs down the axis, local y radially outward: this section
    # sits 0.2..0.8 outside the helix and 0..0.6 above its start
    SECTION = draw_circle(0.3, center=(-0.3, 0.5))

    def test_spans_height_from_base(self):
        solid = helical_sweep(self.SECTION, 2.0, 4.0, 2.0, seam_offset_deg=0.0)
        box = solid.bounding_box()
        assert box.min.z == pytest.approx(0, abs=1e-2)
        assert 4.0 < box.max.z <= 4.6 + 1e-2
        assert box.max.x <= 2.8 + 1e-2

    def test_seam_offset_rotates_without_changing_volume(self):
        # half a turn: the unrotated sweep lies in y >= 0
        plain = helical_sweep(self.SECTION, 2.0, 1.0, 2.0, seam_offset_deg=0.0)
        turned = helical_sweep(self.SECTION, 2.0, 1.0, 2.0, seam_offset_deg=90.0)
        a, b = plain.bounding_box(), turned.bounding_box()
        assert a.min.y > -0.5 and a.min.x < -2.0
        assert b.max.x < 0.5 and b.min.y < -2.0
        assert turned.volume() == pytest.approx(plain.volume(), rel=1e-6)

    def test_default_seam_offset_comes_from_settings(self):
        solid = helical_sweep(self.SECTION, 2.0, 2.0, 2.0)
        step = dict(solid.provenance[-1].parameters)
        assert step["seam_offset_deg"] == pytest.approx(2.0)
