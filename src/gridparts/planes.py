"""Construction planes.

A plane maps a profile's 2D coordinates into model space: local ``x``
follows ``x_dir``, local ``y`` follows ``y_dir = normal x x_dir`` and
extrusions travel along ``normal``.  Named planes carry the orientation
conventions the part recipes are written against; note that ``XZ`` (alias
``front``) has its normal along ``-Y`` so a local ``y`` maps to world ``Z``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Tuple, Union

from gridparts.geom import (
    Point2,
    Point3,
    as_point3,
    cross3,
    dot3,
    epsilon,
    normalize3,
)

__all__ = ["Plane", "make_plane", "NAMED_PLANES", "PlaneLike", "resolve_plane"]

NAMED_PLANES: Dict[str, Tuple[Tuple[float, float, float], Tuple[float, float, float]]] = {
    # name: (x_dir, normal)
    "XY": ((1, 0, 0), (0, 0, 1)),
    "YZ": ((0, 1, 0), (1, 0, 0)),
    "ZX": ((0, 0, 1), (0, 1, 0)),
    "XZ": ((1, 0, 0), (0, -1, 0)),
    "YX": ((0, 1, 0), (0, 0, -1)),
    "ZY": ((0, 0, 1), (-1, 0, 0)),
    "front": ((1, 0, 0), (0, -1, 0)),
    "back": ((-1, 0, 0), (0, 1, 0)),
    "left": ((0, -1, 0), (-1, 0, 0)),
    "right": ((0, 1, 0), (1, 0, 0)),
    "top": ((1, 0, 0), (0, 0, 1)),
    "bottom": ((1, 0, 0), (0, 0, -1)),
}


@dataclass(frozen=True)
class Plane:
    """An origin plus orthonormal in-plane x axis and normal."""

    origin: Point3
    x_dir: Point3
    normal: Point3

    def __post_init__(self):
        normal = normalize3(as_point3(self.normal))
        x_dir = as_point3(self.x_dir)
        # keep the frame orthonormal even if x_dir was only roughly in-plane
        x_dir = x_dir - normal * dot3(x_dir, normal)
        if x_dir.length() <= epsilon:
            raise ValueError("plane x direction is parallel to its normal")
        object.__setattr__(self, "origin", as_point3(self.origin))
        object.__setattr__(self, "normal", normal)
        object.__setattr__(self, "x_dir", normalize3(x_dir))

    @property
    def y_dir(self) -> Point3:
        return cross3(self.normal, self.x_dir)

    def to_world(self, p) -> Point3:
        """Map a local 2D point onto the plane."""
        x, y = p
        return self.origin + self.x_dir * x + self.y_dir * y

    def to_world_vector(self, v) -> Point3:
        x, y = v
        return self.x_dir * x + self.y_dir * y

    def to_local(self, p) -> Point2:
        """Project a model-space point into plane coordinates."""
        rel = as_point3(p) - self.origin
        return Point2(dot3(rel, self.x_dir), dot3(rel, self.y_dir))

    def signed_distance(self, p) -> float:
        return dot3(as_point3(p) - self.origin, self.normal)

    def translated(self, delta) -> "Plane":
        return Plane(self.origin + as_point3(delta), self.x_dir, self.normal)

    def offset(self, distance: float) -> "Plane":
        """The parallel plane ``distance`` along the normal."""
        return Plane(self.origin + self.normal * distance, self.x_dir, self.normal)

    def rotated_2d(self, angle_deg: float) -> "Plane":
        """Spin the in-plane axes about the normal."""
        a = math.radians(angle_deg)
        x_dir = self.x_dir * math.cos(a) + self.y_dir * math.sin(a)
        return Plane(self.origin, x_dir, self.normal)


PlaneLike = Union[Plane, str]


def make_plane(kind: str = "XY", offset: float = 0.0) -> Plane:
    """Return a named plane shifted ``offset`` along its own normal."""
    try:
        x_dir, normal = NAMED_PLANES[kind]
    except KeyError:
        raise ValueError(
            f"unknown plane {kind!r}; expected one of {sorted(NAMED_PLANES)}"
        ) from None
    n = Point3(*normal)
    return Plane(n * float(offset), Point3(*x_dir), n)


def resolve_plane(plane: PlaneLike, offset: float = 0.0) -> Plane:
    """Accept either a ``Plane`` or a plane name."""
    if isinstance(plane, Plane):
        return plane.offset(offset) if offset else plane
    return make_plane(plane, offset)
