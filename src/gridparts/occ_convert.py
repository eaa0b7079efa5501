"""Profile to OCC conversion utilities.

Maps the pure-Python 2D model (segments, profiles, regions) placed on a
:class:`~gridparts.planes.Plane` into pythonocc-core edges, wires and planar
faces.

Conversion functions:
- segment_to_edge: one segment to a ``TopoDS_Edge``
- profile_to_wire: a profile to a ``TopoDS_Wire``
- profile_to_face: a closed profile to a planar face
- region_to_face: a profile or region (after its fuse/cut steps) to a face
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from gridparts.brep import require_occ
from gridparts.errors import FormingError, kernel_errors
from gridparts.geom import Point2, Point3
from gridparts.path import Profile
from gridparts.planes import Plane
from gridparts.profile_ops import CUT, Region
from gridparts.segments import (
    ArcSegment,
    BezierSegment,
    EllipseArcSegment,
    LineSegment,
    Segment,
)

try:  # pragma: no cover - optional dependency
    from OCC.Core.BRepAlgoAPI import BRepAlgoAPI_Cut, BRepAlgoAPI_Fuse
    from OCC.Core.BRepBuilderAPI import (
        BRepBuilderAPI_MakeEdge,
        BRepBuilderAPI_MakeFace,
        BRepBuilderAPI_MakeWire,
    )
    from OCC.Core.GC import GC_MakeArcOfCircle
    from OCC.Core.Geom import Geom_BezierCurve
    from OCC.Core.ShapeUpgrade import ShapeUpgrade_UnifySameDomain
    from OCC.Core.TColgp import TColgp_Array1OfPnt
    from OCC.Core.TopoDS import topods
    from OCC.Core.gp import gp_Ax2, gp_Ax3, gp_Circ, gp_Dir, gp_Elips, gp_Pln, gp_Pnt, gp_Vec
except ImportError:  # pragma: no cover
    BRepAlgoAPI_Cut = BRepAlgoAPI_Fuse = None
    BRepBuilderAPI_MakeEdge = BRepBuilderAPI_MakeFace = BRepBuilderAPI_MakeWire = None
    GC_MakeArcOfCircle = Geom_BezierCurve = ShapeUpgrade_UnifySameDomain = None
    TColgp_Array1OfPnt = topods = None
    gp_Ax2 = gp_Ax3 = gp_Circ = gp_Dir = gp_Elips = gp_Pln = gp_Pnt = gp_Vec = None

logger = logging.getLogger(__name__)

__all__ = [
    "gp_point",
    "gp_direction",
    "gp_vector",
    "plane_ax3",
    "segment_to_edge",
    "profile_to_wire",
    "profile_to_face",
    "region_to_face",
    "oriented_ccw",
    "world_point",
]


def gp_point(p) -> "gp_Pnt":
    x, y, z = p
    return gp_Pnt(float(x), float(y), float(z))


def gp_direction(v) -> "gp_Dir":
    x, y, z = v
    return gp_Dir(float(x), float(y), float(z))


def gp_vector(v) -> "gp_Vec":
    x, y, z = v
    return gp_Vec(float(x), float(y), float(z))


def plane_ax3(plane: Plane) -> "gp_Ax3":
    return gp_Ax3(gp_point(plane.origin), gp_direction(plane.normal), gp_direction(plane.x_dir))


def _ax2(plane: Plane, center: Point2, x_local: Point2, flip: bool = False) -> "gp_Ax2":
    """Frame at ``center`` with x along the in-plane direction ``x_local``."""
    normal = -plane.normal if flip else plane.normal
    return gp_Ax2(gp_point(plane.to_world(center)), gp_direction(normal),
                  gp_direction(plane.to_world_vector(x_local)))


def _reversed(edge):
    return topods.Edge(edge.Reversed())


def _line_edge(seg: LineSegment, plane: Plane):
    return BRepBuilderAPI_MakeEdge(gp_point(plane.to_world(seg.start)),
                                   gp_point(plane.to_world(seg.end))).Edge()


def _arc_edge(seg: ArcSegment, plane: Plane):
    if seg.is_full_circle:
        # start the circle parameter at the segment's start point so the
        # edge vertex coincides with the profile's first point
        x_local = Point2(math.cos(seg.start_angle), math.sin(seg.start_angle))
        circ = gp_Circ(_ax2(plane, seg.center, x_local, flip=seg.sweep < 0), seg.radius)
        return BRepBuilderAPI_MakeEdge(circ).Edge()
    arc = GC_MakeArcOfCircle(gp_point(plane.to_world(seg.start)),
                             gp_point(plane.to_world(seg.point_at(0.5))),
                             gp_point(plane.to_world(seg.end)))
    if not arc.IsDone():
        raise FormingError("arc construction failed", "segment_to_edge", "arc")
    return BRepBuilderAPI_MakeEdge(arc.Value()).Edge()


def _ellipse_edge(seg: EllipseArcSegment, plane: Plane):
    c, s = math.cos(seg.rotation), math.sin(seg.rotation)
    if seg.rx >= seg.ry:
        major, minor = seg.rx, seg.ry
        x_local = Point2(c, s)
        shift = 0.0
    else:
        # OCC wants major >= minor: put the major axis on the local y axis
        major, minor = seg.ry, seg.rx
        x_local = Point2(-s, c)
        shift = -math.pi / 2.0
    elips = gp_Elips(_ax2(plane, seg.center, x_local), major, minor)
    u0 = seg.start_param + shift
    u1 = u0 + seg.sweep
    if seg.sweep > 0:
        return BRepBuilderAPI_MakeEdge(elips, u0, u1).Edge()
    return _reversed(BRepBuilderAPI_MakeEdge(elips, u1, u0).Edge())


def _bezier_edge(seg: BezierSegment, plane: Plane):
    poles = TColgp_Array1OfPnt(1, 4)
    for i, p in enumerate(seg.poles, start=1):
        poles.SetValue(i, gp_point(plane.to_world(p)))
    return BRepBuilderAPI_MakeEdge(Geom_BezierCurve(poles)).Edge()


_EDGE_BUILDERS = {
    "line": _line_edge,
    "arc": _arc_edge,
    "ellipse": _ellipse_edge,
    "bezier": _bezier_edge,
}


def segment_to_edge(seg: Segment, plane: Plane):
    """Build the kernel edge for ``seg`` placed on ``plane``."""
    require_occ()
    try:
        builder = _EDGE_BUILDERS[seg.kind]
    except KeyError:
        raise FormingError(f"unsupported segment kind {seg.kind!r}", "segment_to_edge") from None
    with kernel_errors("segment_to_edge", seg.kind):
        return builder(seg, plane)


def profile_to_wire(profile: Profile, plane: Plane):
    require_occ()
    subject = f"{len(profile.segments)} segments"
    with kernel_errors("make_wire", subject):
        maker = BRepBuilderAPI_MakeWire()
        for seg in profile.segments:
            maker.Add(segment_to_edge(seg, plane))
        if not maker.IsDone():
            raise FormingError("segments do not form a connected wire", "make_wire", subject)
        return maker.Wire()


def oriented_ccw(profile: Profile) -> Profile:
    """``profile`` with counter-clockwise winding in its own plane."""
    if profile.signed_area() >= 0:
        return profile
    segs = tuple(seg.reversed() for seg in reversed(profile.segments))
    return Profile(segs, closed=True)


def profile_to_face(profile: Profile, plane: Plane):
    """Planar face bounded by a closed profile."""
    require_occ()
    if not profile.closed:
        raise FormingError("a face needs a closed profile", "make_face")
    wire = profile_to_wire(oriented_ccw(profile), plane)
    with kernel_errors("make_face"):
        maker = BRepBuilderAPI_MakeFace(gp_Pln(plane_ax3(plane)), wire, True)
        if not maker.IsDone():
            raise FormingError("kernel rejected the profile as a face boundary", "make_face")
        return maker.Face()


def _unify(shape):
    unifier = ShapeUpgrade_UnifySameDomain(shape, True, True, False)
    unifier.Build()
    return unifier.Shape()


def region_to_face(shape, plane: Plane):
    """Evaluate a profile or region into a planar face (or compound of faces)."""
    require_occ()
    if isinstance(shape, Profile):
        return profile_to_face(shape, plane)
    if not isinstance(shape, Region):
        raise TypeError(f"expected a Profile or Region, got {type(shape).__name__}")
    result = profile_to_face(shape.base, plane)
    for index, (op, profile) in enumerate(shape.steps):
        tool = profile_to_face(profile, plane)
        with kernel_errors("make_face", f"region step {index}"):
            builder = BRepAlgoAPI_Cut(result, tool) if op == CUT else BRepAlgoAPI_Fuse(result, tool)
            builder.Build()
            if not builder.IsDone():
                raise FormingError(f"2D {op} failed", "make_face", f"region step {index}")
            result = builder.Shape()
    logger.debug("evaluated region with %d steps", len(shape.steps))
    with kernel_errors("make_face", "unify"):
        return _unify(result)


def world_point(p) -> Optional[Point3]:
    """Convert a ``gp_Pnt`` back into a :class:`Point3`."""
    if p is None:
        return None
    return Point3(p.X(), p.Y(), p.Z())
