"""
Edge selection.

An :class:`EdgeFinder` is an immutable conjunction of spatial predicates
over :class:`EdgeInfo` records.  ``finder.find(solid)`` binds it to one
Solid snapshot and returns a lazy :class:`EdgeSet`; evaluating the set
after that Solid was consumed by a boolean or fillet raises
:class:`~gridparts.errors.ConsumedSolidError`, so a selection can never
silently refer to stale topology.

Predicates follow the usual CAD vocabulary::

    EdgeFinder().in_plane("XY", 10)               # edges lying in z = 10
    EdgeFinder().either([lambda f: f.in_plane("YZ", 0),
                         lambda f: f.in_plane("YZ", 100)])
    EdgeFinder().contains_point((1.6, 1.6, 40))   # pin one edge
    EdgeFinder()                                  # every edge

:class:`EdgeInfo` is kernel independent so predicates can be evaluated and
tested on plain data; :func:`edge_infos` extracts them from a kernel shape.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Sequence, Tuple, Union

from gridparts.brep import Solid, require_occ
from gridparts.config import get_settings
from gridparts.geom import Point3, as_point3, cross3, dot3, normalize3
from gridparts.planes import Plane, PlaneLike, resolve_plane

try:  # pragma: no cover - optional dependency
    from OCC.Core.BRep import BRep_Tool
    from OCC.Core.BRepAdaptor import BRepAdaptor_Curve
    from OCC.Core.BRepBuilderAPI import BRepBuilderAPI_Copy, BRepBuilderAPI_MakeVertex
    from OCC.Core.BRepExtrema import BRepExtrema_DistShapeShape
    from OCC.Core.BRepGProp import brepgprop
    from OCC.Core.BRepLib import breplib
    from OCC.Core.GeomAbs import (
        GeomAbs_BezierCurve,
        GeomAbs_BSplineCurve,
        GeomAbs_C0,
        GeomAbs_Circle,
        GeomAbs_Ellipse,
        GeomAbs_Line,
    )
    from OCC.Core.GProp import GProp_GProps
    from OCC.Core.TopAbs import TopAbs_EDGE, TopAbs_FACE
    from OCC.Core.TopExp import topexp
    from OCC.Core.TopTools import (
        TopTools_IndexedDataMapOfShapeListOfShape,
        TopTools_IndexedMapOfShape,
        TopTools_ListIteratorOfListOfShape,
    )
    from OCC.Core.TopoDS import topods
    from OCC.Core.gp import gp_Pnt

    _CURVE_TYPES = {
        GeomAbs_Line: "line",
        GeomAbs_Circle: "circle",
        GeomAbs_Ellipse: "ellipse",
        GeomAbs_BSplineCurve: "bspline",
        GeomAbs_BezierCurve: "bezier",
    }
except ImportError:  # pragma: no cover
    BRep_Tool = BRepAdaptor_Curve = BRepBuilderAPI_Copy = BRepBuilderAPI_MakeVertex = None
    BRepExtrema_DistShapeShape = brepgprop = breplib = GProp_GProps = None
    GeomAbs_C0 = None
    TopAbs_EDGE = TopAbs_FACE = topexp = topods = gp_Pnt = None
    TopTools_IndexedDataMapOfShapeListOfShape = TopTools_IndexedMapOfShape = None
    TopTools_ListIteratorOfListOfShape = None
    _CURVE_TYPES = {}

logger = logging.getLogger(__name__)

__all__ = [
    "CURVE_TYPES",
    "EdgeInfo",
    "EdgeFinder",
    "EdgeSet",
    "edge_infos",
    "kernel_edges",
]

## faces meeting within this angle (radians) share a smooth edge
SMOOTH_ANGLE = math.radians(0.1)

CURVE_TYPES = ("line", "circle", "ellipse", "bspline", "bezier", "other")

_AXES = {
    "X": Point3(1.0, 0.0, 0.0),
    "Y": Point3(0.0, 1.0, 0.0),
    "Z": Point3(0.0, 0.0, 1.0),
}


@dataclass(frozen=True)
class EdgeInfo:
    """What the predicates know about one edge.

    ``points`` are samples along the edge, endpoints included.  ``projector``
    returns the exact distance from a point to the edge when the kernel
    provides one; otherwise distances are measured to the sampled polyline.
    ``smooth`` marks an edge between tangent-continuous faces and ``seam``
    the closing edge of a periodic face; neither has a corner to round.
    """

    index: int
    curve_type: str
    length: float
    points: Tuple[Point3, ...]
    projector: Optional[Callable[[Point3], float]] = None
    smooth: bool = False
    seam: bool = False

    @property
    def start(self) -> Point3:
        return self.points[0]

    @property
    def end(self) -> Point3:
        return self.points[-1]

    @property
    def direction(self) -> Optional[Point3]:
        """Unit direction of a straight edge, ``None`` for curves."""
        if self.curve_type != "line":
            return None
        delta = self.end - self.start
        if delta.length() == 0:
            return None
        return normalize3(delta)

    @property
    def cornered(self) -> bool:
        return not (self.smooth or self.seam)

    def distance_to(self, p) -> float:
        p = as_point3(p)
        if self.projector is not None:
            return self.projector(p)
        return min(_point_segment_distance(p, a, b)
                   for a, b in zip(self.points, self.points[1:]))


def _point_segment_distance(p: Point3, a: Point3, b: Point3) -> float:
    ab = b - a
    denom = dot3(ab, ab)
    if denom == 0:
        return (p - a).length()
    t = max(0.0, min(1.0, dot3(p - a, ab) / denom))
    return (p - (a + ab * t)).length()


EdgeFilter = Callable[[EdgeInfo], bool]
FinderLike = Union["EdgeFinder", Callable[["EdgeFinder"], "EdgeFinder"]]


def _tol(tol: Optional[float]) -> float:
    return get_settings().tolerance * 1e3 if tol is None else tol


def _axis(direction) -> Point3:
    if isinstance(direction, str):
        try:
            return _AXES[direction.upper()]
        except KeyError:
            raise ValueError(f"unknown axis {direction!r}; expected X, Y or Z") from None
    return normalize3(as_point3(direction))


class EdgeFinder:
    """Immutable conjunction of edge predicates; empty matches every edge."""

    def __init__(self, filters: Sequence[EdgeFilter] = (), labels: Sequence[str] = ()):
        self._filters = tuple(filters)
        self._labels = tuple(labels)

    def __repr__(self) -> str:
        return f"EdgeFinder({' & '.join(self._labels) or 'all'})"

    def _with(self, fn: EdgeFilter, label: str) -> "EdgeFinder":
        return EdgeFinder(self._filters + (fn,), self._labels + (label,))

    @property
    def is_all(self) -> bool:
        return not self._filters

    def matches(self, edge: EdgeInfo) -> bool:
        return all(fn(edge) for fn in self._filters)

    def select(self, edges: Sequence[EdgeInfo]) -> List[EdgeInfo]:
        return [edge for edge in edges if self.matches(edge)]

    def find(self, solid: Solid, extractor=None) -> "EdgeSet":
        return EdgeSet(solid, self, extractor)

    # predicates -------------------------------------------------------

    def all(self) -> "EdgeFinder":
        return self

    def in_plane(self, plane: PlaneLike, offset: float = 0.0,
                 tol: Optional[float] = None) -> "EdgeFinder":
        """Edges lying entirely in ``plane`` shifted ``offset`` along its normal."""
        target = resolve_plane(plane, offset)
        t = _tol(tol)

        def fn(edge: EdgeInfo) -> bool:
            return all(abs(target.signed_distance(p)) <= t for p in edge.points)

        return self._with(fn, f"in_plane({_label(plane)}, {offset:g})")

    def parallel_to(self, plane: PlaneLike, tol: Optional[float] = None) -> "EdgeFinder":
        """Edges lying in some plane parallel to ``plane``."""
        target = resolve_plane(plane)
        t = _tol(tol)

        def fn(edge: EdgeInfo) -> bool:
            d0 = target.signed_distance(edge.points[0])
            return all(abs(target.signed_distance(p) - d0) <= t for p in edge.points)

        return self._with(fn, f"parallel_to({_label(plane)})")

    def contains_point(self, point, tol: Optional[float] = None) -> "EdgeFinder":
        """Edges passing through ``point``."""
        p = as_point3(point)
        t = _tol(tol)
        return self._with(lambda edge: edge.distance_to(p) <= t,
                          f"contains_point({p.x:g}, {p.y:g}, {p.z:g})")

    def at_distance(self, distance: float, point=(0.0, 0.0, 0.0),
                    tol: Optional[float] = None) -> "EdgeFinder":
        """Edges whose closest approach to ``point`` is ``distance``."""
        p = as_point3(point)
        t = _tol(tol)
        return self._with(lambda edge: abs(edge.distance_to(p) - distance) <= t,
                          f"at_distance({distance:g})")

    def in_direction(self, direction, tol: Optional[float] = None) -> "EdgeFinder":
        """Straight edges parallel to ``direction`` (either sense)."""
        axis = _axis(direction)
        t = _tol(tol)

        def fn(edge: EdgeInfo) -> bool:
            d = edge.direction
            return d is not None and cross3(d, axis).length() <= t

        return self._with(fn, f"in_direction({direction!r})")

    def of_length(self, length: float, tol: Optional[float] = None) -> "EdgeFinder":
        t = _tol(tol)
        return self._with(lambda edge: abs(edge.length - length) <= t, f"of_length({length:g})")

    def of_curve_type(self, curve_type: str) -> "EdgeFinder":
        if curve_type not in CURVE_TYPES:
            raise ValueError(f"unknown curve type {curve_type!r}; expected one of {CURVE_TYPES}")
        return self._with(lambda edge: edge.curve_type == curve_type,
                          f"of_curve_type({curve_type})")

    def in_box(self, corner1, corner2) -> "EdgeFinder":
        """Edges entirely inside the axis-aligned box spanned by two corners."""
        a = as_point3(corner1)
        b = as_point3(corner2)
        lo = Point3(min(a.x, b.x), min(a.y, b.y), min(a.z, b.z))
        hi = Point3(max(a.x, b.x), max(a.y, b.y), max(a.z, b.z))

        def fn(edge: EdgeInfo) -> bool:
            return all(lo.x <= p.x <= hi.x and lo.y <= p.y <= hi.y and lo.z <= p.z <= hi.z
                       for p in edge.points)

        return self._with(fn, "in_box")

    # combinators ------------------------------------------------------

    def either(self, finders: Sequence[FinderLike]) -> "EdgeFinder":
        """Logical OR of ``finders``; callables receive a fresh finder."""
        resolved = [_resolve(f) for f in finders]
        if not resolved:
            raise ValueError("either() needs at least one finder")
        return self._with(lambda edge: any(f.matches(edge) for f in resolved),
                          "either(" + " | ".join(repr(f) for f in resolved) + ")")

    def not_(self, finder: FinderLike) -> "EdgeFinder":
        inner = _resolve(finder)
        return self._with(lambda edge: not inner.matches(edge), f"not({inner!r})")


def _resolve(finder: FinderLike) -> EdgeFinder:
    if isinstance(finder, EdgeFinder):
        return finder
    if callable(finder):
        result = finder(EdgeFinder())
        if not isinstance(result, EdgeFinder):
            raise TypeError("finder callables must return an EdgeFinder")
        return result
    raise TypeError(f"expected an EdgeFinder or a callable, got {type(finder).__name__}")


def _label(plane: PlaneLike) -> str:
    return plane if isinstance(plane, str) else "plane"


class EdgeSet:
    """Edges of one Solid snapshot matching a finder, evaluated on demand."""

    def __init__(self, solid: Solid, finder: EdgeFinder, extractor=None):
        self._solid = solid
        self._finder = finder
        self._extractor = extractor or edge_infos
        self._cache: Optional[List[EdgeInfo]] = None

    def __repr__(self) -> str:
        return f"<EdgeSet of solid #{self._solid.id} {self._finder!r}>"

    @property
    def solid(self) -> Solid:
        return self._solid

    def infos(self) -> List[EdgeInfo]:
        # touching the shape raises ConsumedSolidError for stale selections
        shape = self._solid.shape
        if self._cache is None:
            self._cache = self._finder.select(self._extractor(shape))
        return list(self._cache)

    def indices(self) -> List[int]:
        return [edge.index for edge in self.infos()]

    def __iter__(self) -> Iterator[EdgeInfo]:
        return iter(self.infos())

    def __len__(self) -> int:
        return len(self.infos())


def kernel_edges(shape) -> List:
    """Distinct edges of ``shape`` in the kernel's stable map order."""
    require_occ()
    edge_map = TopTools_IndexedMapOfShape()
    topexp.MapShapes(shape, TopAbs_EDGE, edge_map)
    return [topods.Edge(edge_map.FindKey(i)) for i in range(1, edge_map.Size() + 1)]


def _faces_of(edge, ancestors) -> List:
    faces = []
    it = TopTools_ListIteratorOfListOfShape(ancestors.FindFromKey(edge))
    while it.More():
        faces.append(topods.Face(it.Value()))
        it.Next()
    return faces


def _projector(edge):
    def distance(p: Point3) -> float:
        vertex = BRepBuilderAPI_MakeVertex(gp_Pnt(p.x, p.y, p.z)).Vertex()
        extrema = BRepExtrema_DistShapeShape(vertex, edge)
        if not extrema.IsDone():
            return math.inf
        return extrema.Value()

    return distance


def edge_infos(shape) -> List[EdgeInfo]:
    """Describe every non-degenerate edge of a kernel shape.

    Smoothness is encoded on a copy, which keeps the edge order of
    ``shape``, so the query leaves the caller's shape untouched and
    ``EdgeInfo.index`` still addresses ``kernel_edges(shape)``.
    """
    require_occ()
    samples = get_settings().edge_samples
    query = BRepBuilderAPI_Copy(shape).Shape()
    breplib.EncodeRegularity(query, SMOOTH_ANGLE)
    ancestors = TopTools_IndexedDataMapOfShapeListOfShape()
    topexp.MapShapesAndAncestors(query, TopAbs_EDGE, TopAbs_FACE, ancestors)

    infos = []
    for index, edge in enumerate(kernel_edges(query)):
        if BRep_Tool.Degenerated(edge):
            continue
        curve = BRepAdaptor_Curve(edge)
        u0, u1 = curve.FirstParameter(), curve.LastParameter()
        points = []
        for i in range(samples + 1):
            pnt = curve.Value(u0 + (u1 - u0) * i / samples)
            points.append(Point3(pnt.X(), pnt.Y(), pnt.Z()))
        props = GProp_GProps()
        brepgprop.LinearProperties(edge, props)

        faces = _faces_of(edge, ancestors)
        seam = any(BRep_Tool.IsClosed(edge, face) for face in faces)
        smooth = (len(faces) == 2
                  and BRep_Tool.Continuity(edge, faces[0], faces[1]) != GeomAbs_C0)
        infos.append(EdgeInfo(
            index=index,
            curve_type=_CURVE_TYPES.get(curve.GetType(), "other"),
            length=props.Mass(),
            points=tuple(points),
            projector=_projector(edge),
            smooth=smooth,
            seam=seam,
        ))
    logger.debug("extracted %d edges", len(infos))
    return infos
