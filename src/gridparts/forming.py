"""
Solid forming: lift profiles into solids.

Extrusion, revolution, sweep along a wire, loft through wires and helical
sweep, each returning a fresh :class:`~gridparts.brep.Solid` whose
provenance records the operation.  Kernel rejections surface as
:class:`~gridparts.errors.FormingError` carrying the operation name and a
short description of the offending input.
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence, Tuple

from gridparts.brep import Solid, Wire, make_step, require_occ
from gridparts.config import get_settings
from gridparts.errors import FormingError, kernel_errors
from gridparts.geom import Point3, as_point2, as_point3, cross3, normalize3
from gridparts.occ_convert import (
    gp_direction,
    gp_point,
    gp_vector,
    profile_to_wire,
    region_to_face,
    world_point,
)
from gridparts.path import Profile
from gridparts.planes import Plane, PlaneLike, resolve_plane
from gridparts.profile_ops import loops, translate

try:  # pragma: no cover - optional dependency
    from OCC.Core.BRepAdaptor import BRepAdaptor_CompCurve
    from OCC.Core.BRepBuilderAPI import (
        BRepBuilderAPI_MakeEdge,
        BRepBuilderAPI_MakeWire,
        BRepBuilderAPI_RightCorner,
        BRepBuilderAPI_RoundCorner,
        BRepBuilderAPI_Transform,
        BRepBuilderAPI_Transformed,
    )
    from OCC.Core.BRepLib import breplib
    from OCC.Core.BRepOffsetAPI import BRepOffsetAPI_MakePipeShell, BRepOffsetAPI_ThruSections
    from OCC.Core.BRepPrimAPI import (
        BRepPrimAPI_MakeCylinder,
        BRepPrimAPI_MakePrism,
        BRepPrimAPI_MakeRevol,
    )
    from OCC.Core.GCE2d import GCE2d_MakeSegment
    from OCC.Core.Geom import Geom_CylindricalSurface
    from OCC.Core.gp import gp_Ax1, gp_Ax2, gp_Ax3, gp_Dir2d, gp_Lin2d, gp_Pnt, gp_Pnt2d, gp_Trsf, gp_Vec
except ImportError:  # pragma: no cover
    BRepAdaptor_CompCurve = None
    BRepBuilderAPI_MakeEdge = BRepBuilderAPI_MakeWire = BRepBuilderAPI_Transform = None
    BRepBuilderAPI_RightCorner = BRepBuilderAPI_RoundCorner = BRepBuilderAPI_Transformed = None
    breplib = None
    BRepOffsetAPI_MakePipeShell = BRepOffsetAPI_ThruSections = None
    BRepPrimAPI_MakeCylinder = BRepPrimAPI_MakePrism = BRepPrimAPI_MakeRevol = None
    GCE2d_MakeSegment = Geom_CylindricalSurface = None
    gp_Ax1 = gp_Ax2 = gp_Ax3 = gp_Dir2d = gp_Lin2d = gp_Pnt = gp_Pnt2d = gp_Trsf = gp_Vec = None

logger = logging.getLogger(__name__)

__all__ = [
    "make_wire",
    "make_helix",
    "extrude",
    "revolve",
    "sweep",
    "loft",
    "helical_sweep",
    "make_cylinder",
    "profile_crosses_axis",
    "sweep_profile_plane",
]


def _plane_label(plane: PlaneLike, offset: float = 0.0) -> str:
    if isinstance(plane, str):
        return f"{plane}@{offset:g}" if offset else plane
    return "custom"


def _done(make, operation: str, subject: Optional[str] = None):
    """Construct a kernel builder with ``make()`` and return its shape."""
    with kernel_errors(operation, subject):
        builder = make()
        if not builder.IsDone():
            raise FormingError("kernel rejected the input", operation, subject)
        return builder.Shape()


def _pipe_solid(builder, operation: str, subject: str):
    with kernel_errors(operation, subject):
        builder.Build()
        if not builder.IsDone():
            raise FormingError("kernel rejected the sweep", operation, subject)
        if not builder.MakeSolid():
            raise FormingError("sweep did not close into a solid", operation, subject)
        return builder.Shape()


def make_wire(profile: Profile, plane: PlaneLike = "XY", offset: float = 0.0) -> Wire:
    """Embed ``profile`` on ``plane`` as a kernel wire."""
    require_occ()
    target = resolve_plane(plane, offset)
    shape = profile_to_wire(profile, target)
    return Wire(shape, plane=target, closed=profile.closed, label=_plane_label(plane, offset))


def extrude(shape, plane: PlaneLike, distance: float, offset: float = 0.0) -> Solid:
    """Sweep a closed profile or region along the plane normal.

    ``distance`` is signed; a negative value extrudes against the normal.
    """
    require_occ()
    if abs(distance) <= get_settings().tolerance:
        raise FormingError("extrusion distance is zero", "extrude")
    for loop in loops(shape):
        if not loop.closed:
            raise FormingError("only closed profiles can be extruded", "extrude", "open profile")
    target = resolve_plane(plane, offset)
    face = region_to_face(shape, target)
    vec = gp_vector(target.normal * float(distance))
    solid = _done(lambda: BRepPrimAPI_MakePrism(face, vec), "extrude", _plane_label(plane, offset))
    logger.debug("extrude on %s by %g", _plane_label(plane, offset), distance)
    return Solid(solid, (make_step("extrude", plane=_plane_label(plane, offset),
                                   distance=float(distance)),))


def profile_crosses_axis(profile: Profile, axis_origin, axis_direction,
                         tol: Optional[float] = None) -> bool:
    """True when sampled points of ``profile`` lie on both sides of the axis."""
    tol = get_settings().tolerance if tol is None else tol
    origin = as_point2(axis_origin)
    direction = as_point2(axis_direction).normalized()
    left = right = False
    for p in profile.points(get_settings().edge_samples):
        side = direction.cross(p - origin)
        if side > tol:
            left = True
        elif side < -tol:
            right = True
    return left and right


def revolve(profile: Profile, plane: PlaneLike = "XY",
            axis: Tuple[Sequence[float], Sequence[float]] = ((0.0, 0.0), (0.0, 1.0)),
            angle_deg: float = 360.0, offset: float = 0.0) -> Solid:
    """Revolve a closed profile about an in-plane axis ``(point, direction)``."""
    require_occ()
    if not profile.closed:
        raise FormingError("only closed profiles can be revolved", "revolve", "open profile")
    if profile_crosses_axis(profile, axis[0], axis[1]):
        raise FormingError("profile crosses the revolution axis", "revolve",
                           f"axis through {tuple(axis[0])}")
    target = resolve_plane(plane, offset)
    face = region_to_face(profile, target)
    ax1 = gp_Ax1(gp_point(target.to_world(axis[0])),
                 gp_direction(target.to_world_vector(axis[1])))
    solid = _done(lambda: BRepPrimAPI_MakeRevol(face, ax1, math.radians(angle_deg)), "revolve")
    return Solid(solid, (make_step("revolve", plane=_plane_label(plane, offset),
                                   angle_deg=float(angle_deg)),))


def _wire_start(wire: Wire) -> Tuple[Point3, Point3]:
    curve = BRepAdaptor_CompCurve(wire.shape)
    pnt = gp_Pnt()
    vec = gp_Vec()
    curve.D1(curve.FirstParameter(), pnt, vec)
    return world_point(pnt), normalize3(Point3(vec.X(), vec.Y(), vec.Z()))


def sweep_profile_plane(start, tangent, path_normal) -> Plane:
    """Plane normal to a path at its start, in which the swept profile is drawn.

    The profile's y axis follows ``path_normal`` and its x axis points away
    from the side a counter-clockwise planar path encloses.
    """
    normal = -normalize3(as_point3(tangent))
    x_dir = -cross3(normal, normalize3(as_point3(path_normal)))
    return Plane(as_point3(start), x_dir, normal)


def _transition_mode(transition: str):
    modes = {
        "right": BRepBuilderAPI_RightCorner,
        "round": BRepBuilderAPI_RoundCorner,
        "transformed": BRepBuilderAPI_Transformed,
    }
    try:
        return modes[transition]
    except KeyError:
        raise ValueError(f"transition must be one of {sorted(modes)}, got {transition!r}") from None


def sweep(profile: Profile, path: Wire, with_contact: bool = False,
          frenet: bool = False, transition: str = "right") -> Solid:
    """Sweep a closed profile along ``path``.

    The profile is drawn on :func:`sweep_profile_plane` at the path start.
    ``with_contact`` moves the profile's first point onto the path and asks
    the kernel to keep it in contact along the sweep.  ``transition`` picks
    how sharp path corners are bridged: ``"right"`` mitres them.
    """
    require_occ()
    if not profile.closed:
        raise FormingError("only closed profiles can be swept", "sweep", "open profile")
    mode = _transition_mode(transition)
    start, tangent = _wire_start(path)
    path_normal = path.plane.normal if path.plane is not None else Point3(0.0, 0.0, 1.0)
    frame = sweep_profile_plane(start, tangent, path_normal)
    if with_contact:
        profile = translate(profile, -profile.first_point)
    section = profile_to_wire(profile, frame)

    with kernel_errors("sweep", path.label):
        builder = BRepOffsetAPI_MakePipeShell(path.shape)
        if frenet:
            builder.SetMode(True)
        elif path.plane is not None:
            builder.SetMode(gp_direction(path_normal))
        builder.SetTransitionMode(mode)
        builder.Add(section, with_contact, False)
    shape = _pipe_solid(builder, "sweep", path.label)
    return Solid(shape, (make_step("sweep", path=path.label,
                                             with_contact=with_contact, frenet=frenet,
                                             transition=transition),))


def loft(wires: Sequence[Wire], ruled: bool = False) -> Solid:
    """Solid through an ordered sequence of at least two closed wires."""
    require_occ()
    if len(wires) < 2:
        raise FormingError("loft needs at least two wires", "loft", f"{len(wires)} wire(s)")
    for wire in wires:
        if not wire.closed:
            raise FormingError("loft sections must be closed", "loft", wire.label)
    subject = " -> ".join(w.label for w in wires)

    def make():
        builder = BRepOffsetAPI_ThruSections(True, ruled)
        for wire in wires:
            builder.AddWire(wire.shape)
        builder.CheckCompatibility(False)
        builder.Build()
        return builder

    shape = _done(make, "loft", subject)
    return Solid(shape, (make_step("loft", sections=len(wires), ruled=ruled),))


def _perpendicular(direction: Point3) -> Point3:
    ref = Point3(1.0, 0.0, 0.0) if abs(direction.x) < 0.9 else Point3(0.0, 1.0, 0.0)
    return normalize3(cross3(cross3(direction, ref), direction))


def make_helix(pitch: float, height: float, radius: float, axis_origin=(0.0, 0.0, 0.0),
               axis_direction=(0.0, 0.0, 1.0), left_handed: bool = False) -> Wire:
    """Helix wire drawn as a straight line on the unrolled cylinder.

    The helix starts at ``axis_origin + radius * x`` where ``x`` is a fixed
    perpendicular of the axis, and climbs ``height`` along the axis.
    """
    require_occ()
    if pitch <= 0 or height <= 0 or radius <= 0:
        raise FormingError("pitch, height and radius must be positive", "helix")
    origin = as_point3(axis_origin)
    direction = normalize3(as_point3(axis_direction))
    x_dir = _perpendicular(direction)
    surface = Geom_CylindricalSurface(
        gp_Ax3(gp_point(origin), gp_direction(direction), gp_direction(x_dir)), radius)
    turn = -2.0 * math.pi if left_handed else 2.0 * math.pi
    line = gp_Lin2d(gp_Pnt2d(0.0, 0.0), gp_Dir2d(turn, pitch))
    length = (height / pitch) * math.hypot(2.0 * math.pi, pitch)
    with kernel_errors("helix", f"p={pitch:g} h={height:g}"):
        segment = GCE2d_MakeSegment(line, 0.0, length).Value()
        edge = BRepBuilderAPI_MakeEdge(segment, surface).Edge()
        breplib.BuildCurves3d(edge)
        wire = BRepBuilderAPI_MakeWire(edge).Wire()
    return Wire(wire, plane=None, closed=False, label=f"helix p={pitch:g} h={height:g}")


def _rotated(shape, angle_deg: float, origin: Point3, direction: Point3):
    trsf = gp_Trsf()
    trsf.SetRotation(gp_Ax1(gp_point(origin), gp_direction(direction)), math.radians(angle_deg))
    return BRepBuilderAPI_Transform(shape, trsf, True).Shape()


def helical_sweep(profile: Profile, pitch: float, height: float, radius: float,
                  axis_origin=(0.0, 0.0, 0.0), axis_direction=(0.0, 0.0, 1.0),
                  left_handed: bool = False,
                  seam_offset_deg: Optional[float] = None) -> Solid:
    """Sweep ``profile`` along a helix, e.g. a thread section.

    At the helix start the profile's x axis points down the axis and its y
    axis radially outward.  The result is turned ``seam_offset_deg`` about
    the axis so the thread start never lies on the 0 degree seam of a
    coaxial cylinder it is later fused with.
    """
    require_occ()
    if not profile.closed:
        raise FormingError("only closed profiles can be swept", "helical_sweep", "open profile")
    offset = get_settings().seam_offset_deg if seam_offset_deg is None else seam_offset_deg
    origin = as_point3(axis_origin)
    direction = normalize3(as_point3(axis_direction))
    helix = make_helix(pitch, height, radius, origin, direction, left_handed)
    start, tangent = _wire_start(helix)
    frame = Plane(start, -direction, -tangent)
    section = profile_to_wire(profile, frame)

    with kernel_errors("helical_sweep", helix.label):
        builder = BRepOffsetAPI_MakePipeShell(helix.shape)
        builder.SetMode(True)
        builder.Add(section, False, False)
    shape = _pipe_solid(builder, "helical_sweep", helix.label)
    if offset:
        with kernel_errors("helical_sweep", helix.label):
            shape = _rotated(shape, offset, origin, direction)
    logger.debug("helical sweep pitch=%g height=%g radius=%g seam offset=%g",
                 pitch, height, radius, offset)
    return Solid(shape, (make_step("helical_sweep", pitch=float(pitch), height=float(height),
                                   radius=float(radius), left_handed=left_handed,
                                   seam_offset_deg=float(offset)),))


def make_cylinder(radius: float, height: float, base=(0.0, 0.0, 0.0),
                  direction=(0.0, 0.0, 1.0)) -> Solid:
    require_occ()
    if radius <= 0 or height <= 0:
        raise FormingError("cylinder radius and height must be positive", "cylinder")
    ax2 = gp_Ax2(gp_point(as_point3(base)), gp_direction(normalize3(as_point3(direction))))
    shape = _done(lambda: BRepPrimAPI_MakeCylinder(ax2, float(radius), float(height)), "cylinder")
    return Solid(shape, (make_step("cylinder", radius=float(radius), height=float(height)),))
