"""OCC-backed boolean engine operating on raw kernel shapes."""

from __future__ import annotations

import logging

try:  # pragma: no cover - optional dependency
    from OCC.Core.BOPAlgo import BOPAlgo_GlueFull
    from OCC.Core.BRepAlgoAPI import (
        BRepAlgoAPI_Common,
        BRepAlgoAPI_Cut,
        BRepAlgoAPI_Fuse,
    )
    from OCC.Core.ShapeUpgrade import ShapeUpgrade_UnifySameDomain
    from OCC.Core.TopTools import TopTools_ListOfShape
except ImportError:  # pragma: no cover
    BOPAlgo_GlueFull = None
    BRepAlgoAPI_Common = BRepAlgoAPI_Cut = BRepAlgoAPI_Fuse = None
    ShapeUpgrade_UnifySameDomain = None
    TopTools_ListOfShape = None

from gridparts.brep import occ_available, require_occ, solid_count
from gridparts.errors import BooleanError, kernel_errors

logger = logging.getLogger(__name__)

OPERATIONS = ("fuse", "cut", "intersect")


def is_available() -> bool:
    return occ_available() and BRepAlgoAPI_Fuse is not None


def _make_builder(op: str):
    require_occ()
    if op == "fuse":
        return BRepAlgoAPI_Fuse()
    if op == "intersect":
        return BRepAlgoAPI_Common()
    if op == "cut":
        return BRepAlgoAPI_Cut()
    raise ValueError(f"unsupported boolean operation '{op}'")


def _shape_list(*shapes):
    items = TopTools_ListOfShape()
    for shape in shapes:
        items.Append(shape)
    return items


def simplify_shape(shape):
    """Merge coplanar faces and collinear edges left behind by a boolean."""
    require_occ()
    unifier = ShapeUpgrade_UnifySameDomain(shape, True, True, False)
    unifier.Build()
    return unifier.Shape()


def solid_boolean(a, b, operation: str, same_face: bool = False, simplify: bool = False):
    """Combine two kernel shapes.

    ``same_face`` tells the kernel the operands share coincident faces so it
    can glue them instead of intersecting them in general position.  Failure,
    kernel errors and results without any solid raise :class:`BooleanError`;
    a fuse of disjoint operands is a valid multi-body result.
    """
    op = operation.lower()
    builder = _make_builder(op)
    with kernel_errors(op, error=BooleanError):
        builder.SetArguments(_shape_list(a))
        builder.SetTools(_shape_list(b))
        if same_face:
            builder.SetGlue(BOPAlgo_GlueFull)
        builder.Build()
        if not builder.IsDone() or builder.HasErrors():
            raise BooleanError("kernel boolean failed", op)
        shape = builder.Shape()
        if simplify:
            shape = simplify_shape(shape)
    if solid_count(shape) == 0:
        raise BooleanError("result contains no solid", op)
    logger.debug("%s done (same_face=%s, simplify=%s)", op, same_face, simplify)
    return shape


__all__ = ["OPERATIONS", "is_available", "simplify_shape", "solid_boolean"]
