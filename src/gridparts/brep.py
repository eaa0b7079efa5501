## gridparts kernel solid handles
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
Kernel handles: Solid and Wire wrappers around pythonocc-core shapes.

These classes wrap ``pythonocc-core`` objects when that dependency is
available.  Importing this module on systems without pythonocc-core does not
fail; the first operation that needs the kernel raises
:class:`~gridparts.errors.KernelUnavailableError` naming the missing package.

Ownership rules
---------------
A :class:`Solid` exclusively owns its kernel shape.  Booleans and fillets
*consume* their input solids: the handle is marked and any further access
to its shape raises :class:`~gridparts.errors.ConsumedSolidError`.  Callers
that need an operand again must :meth:`Solid.clone` it first.  Rigid
transforms leave their input untouched and return a new handle.

Every Solid carries a provenance chain, the ordered list of forming,
boolean and fillet steps that produced it, for diagnostics.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence, Tuple

from gridparts.errors import ConsumedSolidError, KernelUnavailableError
from gridparts.geom import Point3

try:  # pragma: no cover - exercised indirectly in environments with OCC
    from OCC.Core.Bnd import Bnd_Box
    from OCC.Core.BRepBndLib import brepbndlib
    from OCC.Core.BRepBuilderAPI import BRepBuilderAPI_Copy
    from OCC.Core.BRepGProp import brepgprop
    from OCC.Core.GProp import GProp_GProps
    from OCC.Core.TopAbs import TopAbs_EDGE, TopAbs_FACE, TopAbs_SOLID
    from OCC.Core.TopExp import TopExp_Explorer, topexp
    from OCC.Core.TopTools import TopTools_IndexedMapOfShape

    _OCC_IMPORT_ERROR: Optional[Exception] = None
    _HAVE_OCC = True
except ImportError as exc:  # pragma: no cover - handled during runtime detection
    Bnd_Box = brepbndlib = BRepBuilderAPI_Copy = brepgprop = GProp_GProps = None
    TopExp_Explorer = topexp = TopTools_IndexedMapOfShape = None
    TopAbs_EDGE = TopAbs_FACE = TopAbs_SOLID = None
    _OCC_IMPORT_ERROR = exc
    _HAVE_OCC = False

logger = logging.getLogger(__name__)

__all__ = [
    "occ_available",
    "require_occ",
    "ProvenanceStep",
    "BoundingBox",
    "Solid",
    "Wire",
    "bounding_box",
    "volume",
    "edge_count",
    "face_count",
    "solid_count",
]

_solid_ids = itertools.count(1)


def occ_available() -> bool:
    """Return True when pythonocc-core imports succeeded."""
    return _HAVE_OCC


def require_occ() -> None:
    """
    Raise a descriptive error if pythonocc-core is not installed/activated.
    """
    if _HAVE_OCC:
        return
    raise KernelUnavailableError(
        "pythonocc-core is not available. Install it from conda-forge "
        "(conda install -c conda-forge pythonocc-core) before building solids."
    ) from _OCC_IMPORT_ERROR


@dataclass(frozen=True)
class ProvenanceStep:
    """One construction step in a Solid's history."""

    operation: str
    parameters: Tuple[Tuple[str, Any], ...] = ()
    inputs: Tuple[int, ...] = ()

    def describe(self) -> str:
        args = ", ".join(f"{k}={v!r}" for k, v in self.parameters)
        text = f"{self.operation}({args})"
        if self.inputs:
            text += " <- " + ", ".join(f"#{i}" for i in self.inputs)
        return text


def make_step(operation: str, inputs: Iterable[int] = (), **parameters) -> ProvenanceStep:
    return ProvenanceStep(operation, tuple(sorted(parameters.items())), tuple(inputs))


@dataclass(frozen=True)
class BoundingBox:
    min: Point3
    max: Point3

    @property
    def size(self) -> Tuple[float, float, float]:
        return (self.max.x - self.min.x, self.max.y - self.min.y, self.max.z - self.min.z)

    @property
    def center(self) -> Point3:
        return (self.min + self.max) * 0.5

    def contains(self, p, tol: float = 0.0) -> bool:
        x, y, z = p
        return (self.min.x - tol <= x <= self.max.x + tol
                and self.min.y - tol <= y <= self.max.y + tol
                and self.min.z - tol <= z <= self.max.z + tol)


class Solid:
    """A kernel-resident solid plus its provenance chain.

    The constructor does not touch the kernel, so ownership rules hold for
    any shape object; kernel-backed queries call :func:`require_occ`.
    """

    def __init__(self, shape, provenance: Sequence[ProvenanceStep] = ()):
        self._shape = shape
        self._provenance = tuple(provenance)
        self._consumed_by: Optional[str] = None
        self.id = next(_solid_ids)

    def __repr__(self) -> str:
        state = f" consumed by {self._consumed_by}" if self._consumed_by else ""
        last = self._provenance[-1].operation if self._provenance else "raw"
        return f"<Solid #{self.id} {last}{state}>"

    @property
    def shape(self):
        if self._consumed_by is not None:
            raise ConsumedSolidError(
                f"solid #{self.id} was consumed by {self._consumed_by}; clone it before reuse")
        return self._shape

    @property
    def consumed(self) -> bool:
        return self._consumed_by is not None

    @property
    def provenance(self) -> Tuple[ProvenanceStep, ...]:
        return self._provenance

    def history(self) -> str:
        return "\n".join(step.describe() for step in self._provenance)

    def consume(self, operation: str):
        """Take the shape out of this handle for ``operation``."""
        shape = self.shape
        self._consumed_by = operation
        logger.debug("solid #%d consumed by %s", self.id, operation)
        return shape

    def derive(self, shape, operation: str, inputs: Iterable["Solid"] = (),
               **parameters) -> "Solid":
        """A new Solid whose history is this one's plus ``operation``."""
        ids = (self.id,) + tuple(s.id for s in inputs)
        return Solid(shape, self._provenance + (make_step(operation, ids, **parameters),))

    def clone(self) -> "Solid":
        """Independent deep copy of the kernel shape."""
        require_occ()
        copy = BRepBuilderAPI_Copy(self.shape).Shape()
        return self.derive(copy, "clone")

    def bounding_box(self) -> BoundingBox:
        return bounding_box(self)

    def volume(self) -> float:
        return volume(self)

    def edge_count(self) -> int:
        return edge_count(self)


class Wire:
    """A kernel wire: a Profile placed on a plane, or a helix."""

    def __init__(self, shape, plane=None, closed: bool = True, label: str = "wire"):
        self._shape = shape
        self.plane = plane
        self.closed = closed
        self.label = label

    def __repr__(self) -> str:
        return f"<Wire {self.label} closed={self.closed}>"

    @property
    def shape(self):
        return self._shape


def _raw(shape_or_solid):
    if isinstance(shape_or_solid, (Solid, Wire)):
        return shape_or_solid.shape
    return shape_or_solid


def bounding_box(shape_or_solid) -> BoundingBox:
    """Tight axis-aligned bounds from the exact geometry (no mesh)."""
    require_occ()
    box = Bnd_Box()
    brepbndlib.AddOptimal(_raw(shape_or_solid), box, False, False)
    xmin, ymin, zmin, xmax, ymax, zmax = box.Get()
    return BoundingBox(Point3(xmin, ymin, zmin), Point3(xmax, ymax, zmax))


def volume(shape_or_solid) -> float:
    require_occ()
    props = GProp_GProps()
    brepgprop.VolumeProperties(_raw(shape_or_solid), props)
    return abs(props.Mass())


def _count(shape, kind) -> int:
    require_occ()
    shapes = TopTools_IndexedMapOfShape()
    topexp.MapShapes(shape, kind, shapes)
    return shapes.Size()


def edge_count(shape_or_solid) -> int:
    return _count(_raw(shape_or_solid), TopAbs_EDGE)


def face_count(shape_or_solid) -> int:
    return _count(_raw(shape_or_solid), TopAbs_FACE)


def solid_count(shape_or_solid) -> int:
    """Number of solid bodies; a disjoint fuse yields more than one."""
    require_occ()
    explorer = TopExp_Explorer(_raw(shape_or_solid), TopAbs_SOLID)
    count = 0
    while explorer.More():
        count += 1
        explorer.Next()
    return count
