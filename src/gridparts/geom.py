## foundational value types for gridparts
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

"""foundational value types and vector helpers for **gridparts**

Points are immutable dataclasses of floats, in millimetres.  ``Point2``
lives in a profile's own plane, ``Point3`` in model space.  Both support
``+``, ``-``, scalar ``*`` and unpacking, so ``x, y = p`` works.

Angles passed across public APIs are degrees, measured counter-clockwise
from the positive x axis; internal helpers work in radians.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple, Union

__all__ = [
    "epsilon",
    "Point2",
    "Point3",
    "as_point2",
    "as_point3",
    "dist",
    "angle_of",
    "rotate2",
    "left_normal",
    "mirror2",
    "cross3",
    "dot3",
    "normalize3",
    "isclose_point",
]

## geometric tolerance used when deciding whether two points coincide
epsilon = 1e-9


@dataclass(frozen=True)
class Point2:
    x: float = 0.0
    y: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __add__(self, other: "Point2") -> "Point2":
        return Point2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point2") -> "Point2":
        return Point2(self.x - other.x, self.y - other.y)

    def __mul__(self, k: float) -> "Point2":
        return Point2(self.x * k, self.y * k)

    __rmul__ = __mul__

    def __neg__(self) -> "Point2":
        return Point2(-self.x, -self.y)

    def dot(self, other: "Point2") -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: "Point2") -> float:
        """z component of the 3D cross product."""
        return self.x * other.y - self.y * other.x

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def normalized(self) -> "Point2":
        mag = self.length()
        if mag <= epsilon:
            raise ValueError("cannot normalize a zero-length vector")
        return Point2(self.x / mag, self.y / mag)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Point3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: "Point3") -> "Point3":
        return Point3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Point3") -> "Point3":
        return Point3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, k: float) -> "Point3":
        return Point3(self.x * k, self.y * k, self.z * k)

    __rmul__ = __mul__

    def __neg__(self) -> "Point3":
        return Point3(-self.x, -self.y, -self.z)

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)


PointLike2 = Union[Point2, Sequence[float]]
PointLike3 = Union[Point3, Sequence[float]]


def as_point2(p: PointLike2) -> Point2:
    """Coerce a ``Point2`` or a 2-sequence into a ``Point2``."""
    if isinstance(p, Point2):
        return p
    if len(p) != 2:
        raise ValueError(f"expected a 2D point, got {p!r}")
    return Point2(float(p[0]), float(p[1]))


def as_point3(p: PointLike3) -> Point3:
    """Coerce a ``Point3`` or a 3-sequence into a ``Point3``.

    A 2-sequence is accepted and lifted to ``z = 0``.
    """
    if isinstance(p, Point3):
        return p
    if isinstance(p, Point2):
        return Point3(p.x, p.y, 0.0)
    if len(p) == 2:
        return Point3(float(p[0]), float(p[1]), 0.0)
    if len(p) != 3:
        raise ValueError(f"expected a 3D point, got {p!r}")
    return Point3(float(p[0]), float(p[1]), float(p[2]))


def dist(a, b) -> float:
    """Euclidean distance between two points of the same dimension."""
    return (a - b).length()


def angle_of(v: Point2) -> float:
    """Angle of ``v`` in radians, in ``(-pi, pi]``."""
    return math.atan2(v.y, v.x)


def rotate2(p: Point2, angle: float, center: Point2 = Point2()) -> Point2:
    """Rotate ``p`` by ``angle`` radians about ``center``."""
    c = math.cos(angle)
    s = math.sin(angle)
    dx = p.x - center.x
    dy = p.y - center.y
    return Point2(center.x + c * dx - s * dy, center.y + s * dx + c * dy)


def left_normal(v: Point2) -> Point2:
    """``v`` rotated a quarter turn counter-clockwise."""
    return Point2(-v.y, v.x)


def mirror2(p: Point2, origin: Point2, direction: Point2) -> Point2:
    """Reflect ``p`` across the line through ``origin`` along ``direction``."""
    d = direction.normalized()
    rel = p - origin
    along = d * rel.dot(d)
    return origin + along * 2.0 - rel


def cross3(a: Point3, b: Point3) -> Point3:
    return Point3(a.y * b.z - a.z * b.y,
                  a.z * b.x - a.x * b.z,
                  a.x * b.y - a.y * b.x)


def dot3(a: Point3, b: Point3) -> float:
    return a.x * b.x + a.y * b.y + a.z * b.z


def normalize3(v: Point3) -> Point3:
    mag = v.length()
    if mag <= epsilon:
        raise ValueError("cannot normalize a zero-length vector")
    return Point3(v.x / mag, v.y / mag, v.z / mag)


def isclose_point(a, b, tol: float = epsilon) -> bool:
    """True when two points of the same dimension coincide within ``tol``."""
    return dist(a, b) <= tol
