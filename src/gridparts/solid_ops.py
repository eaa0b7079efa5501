## 3D booleans and rigid transforms for gridparts
## =====================================

## Copyright (c) 2025 gridparts contributors
## All rights reserved

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
# 
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
# 
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""
3D boolean combination and rigid transforms on :class:`Solid` handles.

Booleans consume both operands; transforms never touch their input and
return a new handle.  Reusing a consumed operand raises
:class:`~gridparts.errors.ConsumedSolidError`; :func:`clone` first when an
operand is needed twice.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable

from gridparts.boolean import get_engine
from gridparts.brep import Solid, require_occ
from gridparts.errors import BooleanError
from gridparts.geom import as_point3, normalize3
from gridparts.occ_convert import gp_direction, gp_point, gp_vector
from gridparts.planes import PlaneLike, resolve_plane

try:  # pragma: no cover - optional dependency
    from OCC.Core.BRepBuilderAPI import BRepBuilderAPI_Transform
    from OCC.Core.gp import gp_Ax1, gp_Ax2, gp_Trsf
except ImportError:  # pragma: no cover
    BRepBuilderAPI_Transform = None
    gp_Ax1 = gp_Ax2 = gp_Trsf = None

logger = logging.getLogger(__name__)

__all__ = [
    "fuse",
    "cut",
    "intersect",
    "fuse_all",
    "cut_all",
    "clone",
    "translate",
    "rotate",
    "mirror",
]

ENGINE = "occ"


def _boolean(a: Solid, b: Solid, operation: str, same_face: bool = False,
             simplify: bool = False) -> Solid:
    if a is b:
        raise BooleanError("both operands are the same solid; clone one first", operation)
    engine = get_engine(ENGINE)
    # read both shapes first so a consumed operand fails before anything changes
    shape = engine.solid_boolean(a.shape, b.shape, operation, same_face=same_face,
                                 simplify=simplify)
    result = a.derive(shape, operation, (b,), same_face=same_face)
    a.consume(operation)
    b.consume(operation)
    logger.debug("%s #%d, #%d -> #%d", operation, a.id, b.id, result.id)
    return result


def fuse(a: Solid, b: Solid, same_face: bool = False, simplify: bool = True) -> Solid:
    """Union of ``a`` and ``b``; both are consumed."""
    return _boolean(a, b, "fuse", same_face, simplify)


def cut(a: Solid, b: Solid, same_face: bool = False, simplify: bool = True) -> Solid:
    """``a`` minus ``b``; both are consumed."""
    return _boolean(a, b, "cut", same_face, simplify)


def intersect(a: Solid, b: Solid) -> Solid:
    return _boolean(a, b, "intersect", simplify=True)


def fuse_all(solids: Iterable[Solid], **options) -> Solid:
    solids = list(solids)
    if not solids:
        raise BooleanError("nothing to fuse", "fuse")
    result = solids[0]
    for other in solids[1:]:
        result = fuse(result, other, **options)
    return result


def cut_all(base: Solid, tools: Iterable[Solid], **options) -> Solid:
    result = base
    for tool in tools:
        result = cut(result, tool, **options)
    return result


def clone(solid: Solid) -> Solid:
    return solid.clone()


def _transformed(solid: Solid, trsf, operation: str, **parameters) -> Solid:
    shape = BRepBuilderAPI_Transform(solid.shape, trsf, True).Shape()
    return solid.derive(shape, operation, **parameters)


def translate(solid: Solid, dx=0.0, dy: float = 0.0, dz: float = 0.0) -> Solid:
    """Shift by ``(dx, dy, dz)``; a single 3-sequence is also accepted."""
    require_occ()
    if isinstance(dx, (tuple, list)):
        dx, dy, dz = as_point3(dx)
    trsf = gp_Trsf()
    trsf.SetTranslation(gp_vector((dx, dy, dz)))
    return _transformed(solid, trsf, "translate", delta=(float(dx), float(dy), float(dz)))


def rotate(solid: Solid, angle_deg: float, center=(0.0, 0.0, 0.0),
           direction=(0.0, 0.0, 1.0)) -> Solid:
    """Rotate by ``angle_deg`` about the axis through ``center``."""
    require_occ()
    axis = normalize3(as_point3(direction))
    trsf = gp_Trsf()
    trsf.SetRotation(gp_Ax1(gp_point(as_point3(center)), gp_direction(axis)),
                     math.radians(angle_deg))
    return _transformed(solid, trsf, "rotate", angle_deg=float(angle_deg),
                        axis=axis.as_tuple())


def mirror(solid: Solid, plane: PlaneLike = "YZ", origin=None) -> Solid:
    """Reflect across ``plane`` (a name or a Plane), optionally moved to ``origin``."""
    require_occ()
    target = resolve_plane(plane)
    center = as_point3(origin) if origin is not None else target.origin
    trsf = gp_Trsf()
    trsf.SetMirror(gp_Ax2(gp_point(center), gp_direction(target.normal)))
    label = plane if isinstance(plane, str) else "custom"
    return _transformed(solid, trsf, "mirror", plane=label)
