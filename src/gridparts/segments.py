## planar curve segments for gridparts profiles
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

"""Planar curve segments that make up a profile.

Each segment is an immutable value with exact ``start`` and ``end`` points
(so closure checks never depend on trigonometric round-off), a
``point_at(t)`` evaluator over ``t`` in ``[0, 1]`` and unit tangents.
Transforms return new segments.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import List

from gridparts.geom import Point2, epsilon, mirror2, rotate2

__all__ = [
    "Segment",
    "LineSegment",
    "ArcSegment",
    "EllipseArcSegment",
    "BezierSegment",
    "arc_from_center",
]

TWO_PI = 2.0 * math.pi

_LENGTH_SAMPLES = 64


class Segment:
    """Interface shared by all segment kinds."""

    kind = "segment"
    start: Point2
    end: Point2

    def point_at(self, t: float) -> Point2:
        raise NotImplementedError

    def tangent_at(self, t: float) -> Point2:
        raise NotImplementedError

    @property
    def start_tangent(self) -> Point2:
        return self.tangent_at(0.0)

    @property
    def end_tangent(self) -> Point2:
        return self.tangent_at(1.0)

    @property
    def length(self) -> float:
        pts = self.sample(_LENGTH_SAMPLES)
        return sum((b - a).length() for a, b in zip(pts, pts[1:]))

    def sample(self, count: int) -> List[Point2]:
        """``count + 1`` points from start to end inclusive."""
        if count < 1:
            raise ValueError("count must be >= 1")
        pts = [self.point_at(i / count) for i in range(count + 1)]
        pts[0] = self.start
        pts[-1] = self.end
        return pts

    def translated(self, delta: Point2) -> "Segment":
        raise NotImplementedError

    def rotated(self, angle: float, center: Point2 = Point2()) -> "Segment":
        raise NotImplementedError

    def mirrored(self, origin: Point2, direction: Point2) -> "Segment":
        raise NotImplementedError

    def reversed(self) -> "Segment":
        raise NotImplementedError


@dataclass(frozen=True)
class LineSegment(Segment):
    start: Point2
    end: Point2

    kind = "line"

    def point_at(self, t: float) -> Point2:
        return self.start + (self.end - self.start) * t

    def tangent_at(self, t: float) -> Point2:
        return (self.end - self.start).normalized()

    @property
    def length(self) -> float:
        return (self.end - self.start).length()

    def translated(self, delta: Point2) -> "LineSegment":
        return LineSegment(self.start + delta, self.end + delta)

    def rotated(self, angle: float, center: Point2 = Point2()) -> "LineSegment":
        return LineSegment(rotate2(self.start, angle, center), rotate2(self.end, angle, center))

    def mirrored(self, origin: Point2, direction: Point2) -> "LineSegment":
        return LineSegment(mirror2(self.start, origin, direction),
                           mirror2(self.end, origin, direction))

    def reversed(self) -> "LineSegment":
        return LineSegment(self.end, self.start)


@dataclass(frozen=True)
class ArcSegment(Segment):
    """Circular arc; ``sweep`` is signed radians, positive counter-clockwise.

    A sweep of magnitude ``2*pi`` with ``start == end`` is a full circle.
    """

    start: Point2
    end: Point2
    center: Point2
    radius: float
    start_angle: float
    sweep: float

    kind = "arc"

    @property
    def is_full_circle(self) -> bool:
        return abs(abs(self.sweep) - TWO_PI) <= 1e-12

    @property
    def counter_clockwise(self) -> bool:
        return self.sweep > 0

    def point_at(self, t: float) -> Point2:
        if t <= 0.0:
            return self.start
        if t >= 1.0:
            return self.end
        a = self.start_angle + self.sweep * t
        return Point2(self.center.x + self.radius * math.cos(a),
                      self.center.y + self.radius * math.sin(a))

    def tangent_at(self, t: float) -> Point2:
        a = self.start_angle + self.sweep * t
        sign = 1.0 if self.sweep > 0 else -1.0
        return Point2(-math.sin(a) * sign, math.cos(a) * sign)

    @property
    def length(self) -> float:
        return abs(self.sweep) * self.radius

    def translated(self, delta: Point2) -> "ArcSegment":
        return replace(self, start=self.start + delta, end=self.end + delta,
                       center=self.center + delta)

    def rotated(self, angle: float, center: Point2 = Point2()) -> "ArcSegment":
        return replace(self,
                       start=rotate2(self.start, angle, center),
                       end=rotate2(self.end, angle, center),
                       center=rotate2(self.center, angle, center),
                       start_angle=self.start_angle + angle)

    def mirrored(self, origin: Point2, direction: Point2) -> "ArcSegment":
        start = mirror2(self.start, origin, direction)
        c = mirror2(self.center, origin, direction)
        return replace(self,
                       start=start,
                       end=mirror2(self.end, origin, direction),
                       center=c,
                       start_angle=math.atan2(start.y - c.y, start.x - c.x),
                       sweep=-self.sweep)

    def reversed(self) -> "ArcSegment":
        return replace(self, start=self.end, end=self.start,
                       start_angle=self.start_angle + self.sweep,
                       sweep=-self.sweep)


def arc_from_center(start: Point2, end: Point2, center: Point2,
                    counter_clockwise: bool) -> ArcSegment:
    """Arc around ``center`` from ``start`` to ``end`` in the given direction.

    Coincident ``start`` and ``end`` produce a full circle.
    """
    radius = (start - center).length()
    if radius <= epsilon:
        raise ValueError("arc radius is zero")
    a0 = math.atan2(start.y - center.y, start.x - center.x)
    a1 = math.atan2(end.y - center.y, end.x - center.x)
    sweep = a1 - a0
    if counter_clockwise:
        while sweep <= 1e-12:
            sweep += TWO_PI
    else:
        while sweep >= -1e-12:
            sweep -= TWO_PI
    if (start - end).length() <= epsilon:
        sweep = TWO_PI if counter_clockwise else -TWO_PI
    return ArcSegment(start, end, center, radius, a0, sweep)


@dataclass(frozen=True)
class EllipseArcSegment(Segment):
    """Elliptical arc.

    ``point(theta) = center + R(rotation) * (rx cos theta, ry sin theta)``
    for ``theta`` from ``start_param`` to ``start_param + sweep``.
    """

    start: Point2
    end: Point2
    center: Point2
    rx: float
    ry: float
    rotation: float
    start_param: float
    sweep: float

    kind = "ellipse"

    def _local(self, theta: float) -> Point2:
        return Point2(self.rx * math.cos(theta), self.ry * math.sin(theta))

    def point_at(self, t: float) -> Point2:
        if t <= 0.0:
            return self.start
        if t >= 1.0:
            return self.end
        theta = self.start_param + self.sweep * t
        return self.center + rotate2(self._local(theta), self.rotation)

    def tangent_at(self, t: float) -> Point2:
        theta = self.start_param + self.sweep * t
        d = Point2(-self.rx * math.sin(theta), self.ry * math.cos(theta))
        if self.sweep < 0:
            d = -d
        return rotate2(d, self.rotation).normalized()

    def translated(self, delta: Point2) -> "EllipseArcSegment":
        return replace(self, start=self.start + delta, end=self.end + delta,
                       center=self.center + delta)

    def rotated(self, angle: float, center: Point2 = Point2()) -> "EllipseArcSegment":
        return replace(self,
                       start=rotate2(self.start, angle, center),
                       end=rotate2(self.end, angle, center),
                       center=rotate2(self.center, angle, center),
                       rotation=self.rotation + angle)

    def mirrored(self, origin: Point2, direction: Point2) -> "EllipseArcSegment":
        axis_angle = math.atan2(direction.y, direction.x)
        return replace(self,
                       start=mirror2(self.start, origin, direction),
                       end=mirror2(self.end, origin, direction),
                       center=mirror2(self.center, origin, direction),
                       rotation=2.0 * axis_angle - self.rotation,
                       start_param=-self.start_param,
                       sweep=-self.sweep)

    def reversed(self) -> "EllipseArcSegment":
        return replace(self, start=self.end, end=self.start,
                       start_param=self.start_param + self.sweep,
                       sweep=-self.sweep)


@dataclass(frozen=True)
class BezierSegment(Segment):
    """Cubic Bezier from ``start`` to ``end`` with two control points."""

    start: Point2
    control1: Point2
    control2: Point2
    end: Point2

    kind = "bezier"

    @property
    def poles(self):
        return (self.start, self.control1, self.control2, self.end)

    def point_at(self, t: float) -> Point2:
        if t <= 0.0:
            return self.start
        if t >= 1.0:
            return self.end
        u = 1.0 - t
        return (self.start * (u * u * u)
                + self.control1 * (3 * u * u * t)
                + self.control2 * (3 * u * t * t)
                + self.end * (t * t * t))

    def tangent_at(self, t: float) -> Point2:
        u = 1.0 - t
        d = ((self.control1 - self.start) * (3 * u * u)
             + (self.control2 - self.control1) * (6 * u * t)
             + (self.end - self.control2) * (3 * t * t))
        if d.length() <= epsilon:
            # coincident control point: fall back to the next pole
            d = (self.control2 - self.start) if t < 0.5 else (self.end - self.control1)
        return d.normalized()

    def translated(self, delta: Point2) -> "BezierSegment":
        return BezierSegment(*(p + delta for p in self.poles))

    def rotated(self, angle: float, center: Point2 = Point2()) -> "BezierSegment":
        return BezierSegment(*(rotate2(p, angle, center) for p in self.poles))

    def mirrored(self, origin: Point2, direction: Point2) -> "BezierSegment":
        return BezierSegment(*(mirror2(p, origin, direction) for p in self.poles))

    def reversed(self) -> "BezierSegment":
        return BezierSegment(self.end, self.control2, self.control1, self.start)
