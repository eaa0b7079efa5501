import math

import pytest

from gridparts import solid_ops
from gridparts.brep import occ_available
from gridparts.edges import EdgeFinder, _faces_of, _projector, edge_infos, kernel_edges
from gridparts.errors import ConsumedSolidError, FilletError
from gridparts.fillet import chamfer, combine_finder_filters, fillet
from gridparts.forming import extrude
from gridparts.path import draw
from gridparts.shapes import draw_circle

pytestmark = pytest.mark.skipif(not occ_available(), reason="pythonocc-core not available")


def _box(size=10.0):
    return extrude(draw().h_line(size).v_line(size).h_line(-size).close(), "XY", size)


def _edge_loss(radius, length):
    """Material removed by rounding one straight 90 degree edge."""
    return (1 - math.pi / 4) * radius * radius * length


class TestFinders:

    def test_edges_of_a_box(self):
        box = _box()
        assert len(EdgeFinder().find(box)) == 12
        assert len(EdgeFinder().in_plane("XY", 10).find(box)) == 4
        assert len(EdgeFinder().in_direction("Z").find(box)) == 4
        assert len(EdgeFinder().contains_point((5, 0, 0)).find(box)) == 1

    def test_selection_goes_stale_after_fillet(self):
        box = _box()
        top = EdgeFinder().in_plane("XY", 10).find(box)
        fillet(box, 1.0, EdgeFinder().in_direction("Z"))
        with pytest.raises(ConsumedSolidError):
            top.indices()

    def test_cylinder_seam_is_not_a_corner(self):
        rod = extrude(draw_circle(3), "XY", 5)
        infos = EdgeFinder().find(rod).infos()
        assert any(e.seam for e in infos)
        assert sum(1 for e in infos if e.curve_type == "circle") == 2

    def test_indices_address_the_original_edges(self):
        rounded = fillet(_box(), 1.0, EdgeFinder().in_direction("Z"))
        shape = rounded.shape
        edges = kernel_edges(shape)
        for info in edge_infos(shape):
            mid = info.points[len(info.points) // 2]
            assert _projector(edges[info.index])(mid) < 1e-6

    def test_query_leaves_regularity_flags_alone(self):
        from OCC.Core.BRep import BRep_Tool
        from OCC.Core.TopAbs import TopAbs_EDGE, TopAbs_FACE
        from OCC.Core.TopExp import topexp
        from OCC.Core.TopTools import TopTools_IndexedDataMapOfShapeListOfShape

        shape = _box().shape
        ancestors = TopTools_IndexedDataMapOfShapeListOfShape()
        topexp.MapShapesAndAncestors(shape, TopAbs_EDGE, TopAbs_FACE, ancestors)

        def flags():
            result = []
            for edge in kernel_edges(shape):
                faces = _faces_of(edge, ancestors)
                result.append(BRep_Tool.HasContinuity(edge, faces[0], faces[1]))
            return result

        before = flags()
        edge_infos(shape)
        assert flags() == before


class TestFillet:

    def test_vertical_edges(self):
        rounded = fillet(_box(), 1.0, EdgeFinder().in_direction("Z"))
        assert rounded.volume() == pytest.approx(1000 - 4 * _edge_loss(1.0, 10), rel=1e-4)

    def test_input_is_consumed(self):
        box = _box()
        fillet(box, 1.0)
        with pytest.raises(ConsumedSolidError):
            box.shape

    def test_first_group_wins(self):
        spec = combine_finder_filters([
            (lambda f: f.in_direction("Z"), 2.0),
            (EdgeFinder(), 0.5),
        ])
        rounded = fillet(_box(), spec)
        assert rounded.volume() < 1000 - 4 * _edge_loss(2.0, 10) * 0.9
        assert rounded.provenance[-1].operation == "fillet"

    def test_refilleting_skips_smooth_edges(self):
        once = fillet(_box(), 1.0, EdgeFinder().in_direction("Z"))
        twice = fillet(once, 0.5)
        assert twice.volume() < once.volume()

    def test_oversized_radius(self):
        with pytest.raises(FilletError) as info:
            fillet(_box(), 20.0)
        assert info.value.radius == 20.0

    def test_radius_over_half_the_shortest_edge(self):
        with pytest.raises(FilletError):
            fillet(_box(), 6.0, EdgeFinder().in_direction("Z"))

    def test_non_positive_radius(self):
        with pytest.raises(FilletError):
            fillet(_box(), 0.0)

    def test_no_matching_edges_returns_same_geometry(self):
        box = _box()
        result = fillet(box, 1.0, EdgeFinder().in_plane("XY", 50))
        assert box.consumed
        assert result.volume() == pytest.approx(1000)

    def test_hole_edges(self):
        plate = solid_ops.cut(_box(), extrude(draw_circle(2, (5, 5)), "XY", 10))
        before = plate.volume()
        rounded = fillet(plate, 0.5, EdgeFinder().of_curve_type("circle"))
        assert rounded.volume() < before


def test_chamfer_vertical_edges():
    cut = chamfer(_box(), 1.0, EdgeFinder().in_direction("Z"))
    assert cut.volume() == pytest.approx(1000 - 4 * 0.5 * 10, rel=1e-4)
