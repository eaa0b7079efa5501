"""
Edge rounding and chamfering.

A :class:`FilletSpec` is an ordered list of ``(EdgeFinder, radius)``
groups.  Each edge takes the radius of the first group whose finder
matches it; edges no group matches are left sharp.  The whole assignment
goes to the kernel as one operation, so a spec either applies completely
or raises :class:`~gridparts.errors.FilletError` and leaves nothing
half-rounded.

Edges between tangent-continuous faces and the seam edges of periodic
faces have no corner, and are never handed to the kernel even when a
finder matches them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Union

from gridparts.brep import Solid, require_occ
from gridparts.edges import EdgeFinder, EdgeInfo, edge_infos, kernel_edges
from gridparts.errors import FilletError

try:  # pragma: no cover - optional dependency
    from OCC.Core.BRepCheck import BRepCheck_Analyzer
    from OCC.Core.BRepFilletAPI import BRepFilletAPI_MakeChamfer, BRepFilletAPI_MakeFillet
except ImportError:  # pragma: no cover
    BRepCheck_Analyzer = None
    BRepFilletAPI_MakeChamfer = BRepFilletAPI_MakeFillet = None

logger = logging.getLogger(__name__)

__all__ = [
    "FilletGroup",
    "FilletSpec",
    "combine_finder_filters",
    "assign_radii",
    "fillet",
    "chamfer",
]


@dataclass(frozen=True)
class FilletGroup:
    finder: EdgeFinder
    radius: float


@dataclass(frozen=True)
class FilletSpec:
    """Ordered radius groups; the first matching group wins."""

    groups: Tuple[FilletGroup, ...]

    def radius_for(self, edge: EdgeInfo) -> Optional[Tuple[int, float]]:
        for index, group in enumerate(self.groups):
            if group.finder.matches(edge):
                return index, group.radius
        return None

    def validate(self, operation: str = "fillet") -> None:
        if not self.groups:
            raise FilletError("no edge groups given", operation=operation)
        for index, group in enumerate(self.groups):
            if not group.radius > 0:
                raise FilletError("radius must be positive", group.radius, index, operation)


def combine_finder_filters(pairs: Sequence[Tuple[EdgeFinder, float]]) -> FilletSpec:
    """Build a :class:`FilletSpec` from ``(finder, radius)`` pairs.

    A finder may also be given as a callable that receives a fresh
    :class:`EdgeFinder`, e.g. ``(lambda e: e.in_plane("XY", 10), 2.0)``.
    """
    groups = []
    for finder, radius in pairs:
        if not isinstance(finder, EdgeFinder):
            finder = finder(EdgeFinder())
        groups.append(FilletGroup(finder, float(radius)))
    return FilletSpec(tuple(groups))


@dataclass(frozen=True)
class Assignment:
    edge: EdgeInfo
    group: int
    radius: float


def assign_radii(spec: FilletSpec, infos: Sequence[EdgeInfo]) -> List[Assignment]:
    """Pair every cornered edge with the radius of its first matching group."""
    assigned = []
    for edge in infos:
        if not edge.cornered:
            continue
        match = spec.radius_for(edge)
        if match is not None:
            assigned.append(Assignment(edge, *match))
    return assigned


SpecOrRadius = Union[FilletSpec, float, int]


def _as_spec(spec_or_radius: SpecOrRadius, finder: Optional[EdgeFinder]) -> FilletSpec:
    if isinstance(spec_or_radius, FilletSpec):
        if finder is not None:
            raise ValueError("pass either a FilletSpec or a radius with a finder, not both")
        return spec_or_radius
    return FilletSpec((FilletGroup(finder or EdgeFinder(), float(spec_or_radius)),))


def _faulty_group(builder, edges, assigned: Sequence[Assignment]) -> Optional[Assignment]:
    """The assignment owning the first contour the kernel could not build."""
    try:
        if builder.NbFaultyContours() == 0:
            return None
        contour = builder.FaultyContour(1)
        culprit = builder.Edge(contour, 1)
    except RuntimeError:
        return None
    for item in assigned:
        if edges[item.edge.index].IsSame(culprit):
            return item
    return None


def _round(solid: Solid, spec: FilletSpec, operation: str) -> Solid:
    require_occ()
    spec.validate(operation)
    shape = solid.shape
    assigned = assign_radii(spec, edge_infos(shape))
    if not assigned:
        logger.warning("%s on solid #%d matched no edges", operation, solid.id)
        result = solid.derive(shape, operation, edges=0)
        solid.consume(operation)
        return result

    edges = kernel_edges(shape)
    if operation == "fillet":
        builder = BRepFilletAPI_MakeFillet(shape)
    else:
        builder = BRepFilletAPI_MakeChamfer(shape)
    for item in assigned:
        builder.Add(item.radius, edges[item.edge.index])

    def failure(message: str, cause: Optional[BaseException] = None) -> FilletError:
        culprit = _faulty_group(builder, edges, assigned) if operation == "fillet" else None
        radii = {item.radius for item in assigned}
        if culprit is not None:
            return FilletError(message, culprit.radius, culprit.group, operation)
        if len(spec.groups) == 1:
            return FilletError(message, spec.groups[0].radius, 0, operation)
        radius = radii.pop() if len(radii) == 1 else None
        return FilletError(message, radius, None, operation)

    try:
        builder.Build()
    except RuntimeError as exc:
        raise failure(f"kernel could not round the selected edges ({exc})") from exc
    if not builder.IsDone():
        raise failure("kernel could not round the selected edges")
    rounded = builder.Shape()
    if not BRepCheck_Analyzer(rounded).IsValid():
        raise failure("rounding produced an invalid solid")

    per_group: Dict[int, int] = {}
    for item in assigned:
        per_group[item.group] = per_group.get(item.group, 0) + 1
    result = solid.derive(rounded, operation, edges=len(assigned),
                          radii=tuple(g.radius for g in spec.groups))
    solid.consume(operation)
    logger.debug("%s #%d -> #%d: %s", operation, solid.id, result.id,
                 ", ".join(f"group {g}: {n} edges" for g, n in sorted(per_group.items())))
    return result


def fillet(solid: Solid, spec_or_radius: SpecOrRadius,
           finder: Optional[EdgeFinder] = None) -> Solid:
    """Round edges of ``solid``; the input is consumed.

    Parameters
    ----------
    solid : Solid
        Solid to round.
    spec_or_radius : FilletSpec or float
        Either a full spec or one radius for the edges ``finder`` selects.
    finder : EdgeFinder, optional
        Edge selection for a single radius; every edge when omitted.

    Raises
    ------
    FilletError
        For a non-positive radius or when the kernel cannot realize the
        rounding.  ``group`` names the failing spec group when known.
    """
    return _round(solid, _as_spec(spec_or_radius, finder), "fillet")


def chamfer(solid: Solid, spec_or_distance: SpecOrRadius,
            finder: Optional[EdgeFinder] = None) -> Solid:
    """Bevel edges with equal distances; same contract as :func:`fillet`."""
    return _round(solid, _as_spec(spec_or_distance, finder), "chamfer")
