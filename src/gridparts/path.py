## pen-style 2D path construction for gridparts
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
Pen-style 2D path construction.

``draw()`` returns an immutable :class:`PathBuilder`; every drawing call
returns a new builder with one more segment and the pen advanced, so a
partially drawn path can be reused as the stem of several profiles::

    >>> from gridparts.path import draw
    >>> profile = draw().h_line(10).v_line(5).h_line(-10).close()
    >>> len(profile.segments)
    4

Finishing calls (:meth:`PathBuilder.close`,
:meth:`PathBuilder.close_with_mirror`, :meth:`PathBuilder.done`) return a
:class:`Profile`.  Only single-loop profiles are supported; holes are made
with :func:`gridparts.profile_ops.cut`.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple, Union

from gridparts.errors import GeometryError
from gridparts.geom import (
    Point2,
    as_point2,
    epsilon,
    left_normal,
)
from gridparts.segments import (
    ArcSegment,
    BezierSegment,
    EllipseArcSegment,
    LineSegment,
    Segment,
    arc_from_center,
)

logger = logging.getLogger(__name__)

__all__ = ["Profile", "PathBuilder", "draw"]

## tolerance for closure and continuity checks, in millimetres
CLOSURE_TOL = 1e-9


@dataclass(frozen=True)
class Profile:
    """An ordered run of connected segments, optionally closed."""

    segments: Tuple[Segment, ...]
    closed: bool = False

    def __post_init__(self):
        segs = tuple(self.segments)
        object.__setattr__(self, "segments", segs)
        if not segs:
            raise GeometryError("profile has no segments", "profile")
        for idx, (a, b) in enumerate(zip(segs, segs[1:])):
            if (a.end - b.start).length() > CLOSURE_TOL * 1e3:
                raise GeometryError("segments are not connected", "profile", idx + 1)
        if self.closed and (segs[-1].end - segs[0].start).length() > CLOSURE_TOL * 1e3:
            raise GeometryError("closed profile does not return to its start",
                                "profile", len(segs) - 1)

    @property
    def first_point(self) -> Point2:
        return self.segments[0].start

    @property
    def last_point(self) -> Point2:
        return self.segments[-1].end

    def points(self, samples_per_curve: int = 16) -> List[Point2]:
        """Polyline approximation; straight segments contribute their end only."""
        pts = [self.first_point]
        for seg in self.segments:
            count = 1 if isinstance(seg, LineSegment) else samples_per_curve
            pts.extend(seg.sample(count)[1:])
        if self.closed:
            pts.pop()
        return pts

    def signed_area(self) -> float:
        """Shoelace area of the sampled loop; positive when counter-clockwise."""
        if not self.closed:
            raise GeometryError("area of an open profile is undefined", "signed_area")
        pts = self.points(64)
        area = 0.0
        for a, b in zip(pts, pts[1:] + pts[:1]):
            area += a.cross(b)
        return area / 2.0

    def bounds(self) -> Tuple[Point2, Point2]:
        pts = self.points(64)
        xs = [p.x for p in pts]
        ys = [p.y for p in pts]
        return Point2(min(xs), min(ys)), Point2(max(xs), max(ys))

    # chaining conveniences; the operations themselves live in profile_ops

    def translate(self, dx, dy: Optional[float] = None) -> "Profile":
        from gridparts import profile_ops  # circular-safe import
        return profile_ops.translate(self, dx, dy)

    def rotate(self, angle_deg: float, center=(0.0, 0.0)) -> "Profile":
        from gridparts import profile_ops
        return profile_ops.rotate(self, angle_deg, center)

    def mirror(self, axis="x") -> "Profile":
        from gridparts import profile_ops
        return profile_ops.mirror(self, axis)

    def cut(self, other):
        from gridparts import profile_ops
        return profile_ops.cut(self, other)

    def fuse(self, other):
        from gridparts import profile_ops
        return profile_ops.fuse(self, other)


Vector2 = Union[Point2, Sequence[float]]


@dataclass(frozen=True)
class PathBuilder:
    """Immutable pen.  See the module docstring for an overview."""

    origin: Point2 = Point2()
    segments: Tuple[Segment, ...] = ()
    pending_corner: Optional[float] = None

    @property
    def pen(self) -> Point2:
        return self.segments[-1].end if self.segments else self.origin

    @property
    def _tangent(self) -> Point2:
        if not self.segments:
            return Point2(1.0, 0.0)
        return self.segments[-1].end_tangent

    # ------------------------------------------------------------------
    # internals

    def _error(self, op: str, message: str) -> GeometryError:
        return GeometryError(message, op, len(self.segments))

    def _append(self, segment: Segment, op: str) -> "PathBuilder":
        if (segment.end - segment.start).length() <= epsilon and not (
                isinstance(segment, ArcSegment) and segment.is_full_circle):
            raise self._error(op, "zero-length segment")
        segments = list(self.segments)
        if self.pending_corner is not None:
            segments, segment = _round_corner(segments, segment, self.pending_corner,
                                              op, len(self.segments))
        if segment is not None:
            segments.append(segment)
        return replace(self, segments=tuple(segments), pending_corner=None)

    # ------------------------------------------------------------------
    # pen placement

    def move_to(self, p: Vector2) -> "PathBuilder":
        """Relocate the pen; only valid before the first segment."""
        if self.segments:
            raise self._error("move_to", "move_to after drawing started; profiles are single loops")
        return replace(self, origin=as_point2(p))

    # ------------------------------------------------------------------
    # straight segments

    def line_to(self, p: Vector2) -> "PathBuilder":
        return self._append(LineSegment(self.pen, as_point2(p)), "line_to")

    def line(self, dx: float, dy: float) -> "PathBuilder":
        return self._append(LineSegment(self.pen, self.pen + Point2(dx, dy)), "line")

    def h_line(self, dx: float) -> "PathBuilder":
        return self._append(LineSegment(self.pen, self.pen + Point2(dx, 0.0)), "h_line")

    def v_line(self, dy: float) -> "PathBuilder":
        return self._append(LineSegment(self.pen, self.pen + Point2(0.0, dy)), "v_line")

    def h_line_to(self, x: float) -> "PathBuilder":
        return self._append(LineSegment(self.pen, Point2(x, self.pen.y)), "h_line_to")

    def v_line_to(self, y: float) -> "PathBuilder":
        return self._append(LineSegment(self.pen, Point2(self.pen.x, y)), "v_line_to")

    def polar_line(self, length: float, angle_deg: float) -> "PathBuilder":
        """Line of ``length`` heading ``angle_deg`` counter-clockwise from +x."""
        a = math.radians(angle_deg)
        delta = Point2(length * math.cos(a), length * math.sin(a))
        return self._append(LineSegment(self.pen, self.pen + delta), "polar_line")

    def polar_line_to(self, distance: float, angle_deg: float) -> "PathBuilder":
        """Line to the absolute polar position ``(distance, angle_deg)``."""
        a = math.radians(angle_deg)
        target = Point2(distance * math.cos(a), distance * math.sin(a))
        return self._append(LineSegment(self.pen, target), "polar_line_to")

    # ------------------------------------------------------------------
    # circular arcs

    def tangent_arc_to(self, p: Vector2) -> "PathBuilder":
        """Arc to ``p`` leaving the pen along the previous segment's tangent."""
        start = self.pen
        end = as_point2(p)
        chord = end - start
        if chord.length() <= epsilon:
            raise self._error("tangent_arc_to", "zero-length segment")
        normal = left_normal(self._tangent)
        offset = chord.dot(normal)
        if abs(offset) <= epsilon * max(1.0, chord.length()):
            raise self._error("tangent_arc_to", "end point lies on the tangent line")
        signed_radius = chord.dot(chord) / (2.0 * offset)
        center = start + normal * signed_radius
        arc = arc_from_center(start, end, center, counter_clockwise=offset > 0)
        return self._append(arc, "tangent_arc_to")

    def tangent_arc(self, dx: float, dy: float) -> "PathBuilder":
        return self.tangent_arc_to(self.pen + Point2(dx, dy))

    def three_points_arc_to(self, end: Vector2, mid: Vector2) -> "PathBuilder":
        """Circular arc from the pen through ``mid`` to ``end``."""
        a = self.pen
        b = as_point2(mid)
        c = as_point2(end)
        d = 2.0 * ((a.x - c.x) * (b.y - c.y) - (b.x - c.x) * (a.y - c.y))
        if abs(d) <= epsilon:
            raise self._error("three_points_arc_to", "points are collinear")
        a2 = a.dot(a)
        b2 = b.dot(b)
        c2 = c.dot(c)
        ux = (a2 * (b.y - c.y) + b2 * (c.y - a.y) + c2 * (a.y - b.y)) / d
        uy = (a2 * (c.x - b.x) + b2 * (a.x - c.x) + c2 * (b.x - a.x)) / d
        ccw = (b - a).cross(c - b) > 0
        arc = arc_from_center(a, c, Point2(ux, uy), counter_clockwise=ccw)
        return self._append(arc, "three_points_arc_to")

    def sagitta_arc_to(self, end: Vector2, sagitta: float) -> "PathBuilder":
        """Arc bulging ``sagitta`` to the left of the chord (right if negative)."""
        end = as_point2(end)
        chord = end - self.pen
        if chord.length() <= epsilon:
            raise self._error("sagitta_arc_to", "zero-length segment")
        if abs(sagitta) <= epsilon:
            raise self._error("sagitta_arc_to", "sagitta must be non-zero")
        mid = (self.pen + end) * 0.5 + left_normal(chord.normalized()) * sagitta
        return self.three_points_arc_to(end, mid)

    def sagitta_arc(self, dx: float, dy: float, sagitta: float) -> "PathBuilder":
        return self.sagitta_arc_to(self.pen + Point2(dx, dy), sagitta)

    # ------------------------------------------------------------------
    # elliptical arcs

    def ellipse_to(self, end: Vector2, rx: float, ry: float, rotation_deg: float = 0.0,
                   long_way: bool = False, sweep: bool = False) -> "PathBuilder":
        """Elliptical arc to ``end``, parameterised like an SVG arc command.

        Of the (up to) four arcs through both points, ``long_way`` picks the
        larger one and ``sweep=True`` the one drawn counter-clockwise.
        """
        seg = _svg_arc(self.pen, as_point2(end), rx, ry, rotation_deg, long_way, sweep,
                       lambda msg: self._error("ellipse_to", msg))
        return self._append(seg, "ellipse_to")

    def ellipse(self, dx: float, dy: float, rx: float, ry: float, rotation_deg: float = 0.0,
                long_way: bool = False, sweep: bool = False) -> "PathBuilder":
        return self.ellipse_to(self.pen + Point2(dx, dy), rx, ry, rotation_deg, long_way, sweep)

    def half_ellipse_to(self, end: Vector2, minor_radius: float,
                        sweep: bool = False) -> "PathBuilder":
        """Half ellipse whose major axis is the chord to ``end``."""
        end = as_point2(end)
        chord = end - self.pen
        if chord.length() <= epsilon:
            raise self._error("half_ellipse_to", "zero-length segment")
        angle = math.degrees(math.atan2(chord.y, chord.x))
        return self.ellipse_to(end, chord.length() / 2.0, minor_radius, angle, True, sweep)

    def half_ellipse(self, dx: float, dy: float, minor_radius: float,
                     sweep: bool = False) -> "PathBuilder":
        return self.half_ellipse_to(self.pen + Point2(dx, dy), minor_radius, sweep)

    # ------------------------------------------------------------------
    # splines

    def smooth_spline_to(self, end: Vector2, start_factor: float = 1.0,
                         end_factor: float = 1.0, start_tangent: Optional[Vector2] = None,
                         end_tangent: Union[None, str, Vector2] = None) -> "PathBuilder":
        """Cubic spline to ``end`` with tangent arms scaled by the factors.

        Each arm is a quarter of the chord times its factor.  The start arm
        follows the previous segment (or ``start_tangent``); the end arm
        follows the chord unless ``end_tangent`` is a vector or
        ``"symmetric"`` (mirror of the start direction).
        """
        start = self.pen
        end = as_point2(end)
        chord = end - start
        if chord.length() <= epsilon:
            raise self._error("smooth_spline_to", "zero-length segment")
        arm = chord.length() * 0.25
        start_dir = (as_point2(start_tangent).normalized()
                     if start_tangent is not None else self._tangent)
        if end_tangent == "symmetric":
            end_dir = -start_dir
        elif end_tangent is not None:
            end_dir = as_point2(end_tangent).normalized()
        else:
            end_dir = chord.normalized()
        seg = BezierSegment(start,
                            start + start_dir * (arm * start_factor),
                            end - end_dir * (arm * end_factor),
                            end)
        return self._append(seg, "smooth_spline_to")

    def smooth_spline(self, dx: float, dy: float, **kwargs) -> "PathBuilder":
        return self.smooth_spline_to(self.pen + Point2(dx, dy), **kwargs)

    def bezier_curve_to(self, end: Vector2, control1: Vector2,
                        control2: Vector2) -> "PathBuilder":
        seg = BezierSegment(self.pen, as_point2(control1), as_point2(control2), as_point2(end))
        return self._append(seg, "bezier_curve_to")

    # ------------------------------------------------------------------
    # corners

    def custom_corner(self, radius: float) -> "PathBuilder":
        """Round the vertex at the pen once the outgoing segment is drawn."""
        if radius <= 0:
            raise self._error("custom_corner", "radius must be positive")
        if not self.segments:
            raise self._error("custom_corner", "no incoming segment to round")
        if self.pending_corner is not None:
            raise self._error("custom_corner", "a corner is already pending at this vertex")
        return replace(self, pending_corner=float(radius))

    # ------------------------------------------------------------------
    # finishing

    def close(self) -> Profile:
        """Close the loop with a straight segment back to the first point."""
        if not self.segments:
            raise self._error("close", "nothing to close")
        builder = self
        first = self.segments[0].start
        if (self.pen - first).length() > CLOSURE_TOL:
            builder = builder._append(LineSegment(self.pen, first), "close")
        elif builder.pending_corner is not None:
            # corner pending at the start vertex itself
            if len(builder.segments) < 2:
                raise self._error("close", "no outgoing segment to round")
            segments = list(builder.segments)
            head = segments.pop(0)
            segments, head = _round_corner(segments, head, builder.pending_corner,
                                           "close", len(builder.segments))
            if head is not None:
                segments.insert(0, head)
            builder = replace(builder, segments=tuple(segments), pending_corner=None)
        if len(builder.segments) < 2 and not (
                isinstance(builder.segments[0], ArcSegment) and builder.segments[0].is_full_circle):
            raise self._error("close", "a closed profile needs at least two segments")
        profile = Profile(builder.segments, closed=True)
        logger.debug("closed profile with %d segments", len(profile.segments))
        return profile

    def close_with_mirror(self, axis: Optional[Tuple[Vector2, Vector2]] = None) -> Profile:
        """Close by appending the path reflected across a symmetry axis.

        The default axis runs through the first point and the pen, so a
        half-profile drawn from one end of the axis to the other becomes a
        symmetric loop.  ``axis`` may instead be ``(point, direction)``.
        """
        if not self.segments:
            raise self._error("close_with_mirror", "nothing to mirror")
        if self.pending_corner is not None:
            raise self._error("close_with_mirror", "a corner is pending at the mirror axis")
        first = self.segments[0].start
        if axis is None:
            origin = first
            direction = self.pen - first
            if direction.length() <= epsilon:
                raise self._error("close_with_mirror",
                                  "first point and pen coincide; the mirror axis is undefined")
        else:
            origin = as_point2(axis[0])
            direction = as_point2(axis[1])
            if direction.length() <= epsilon:
                raise self._error("close_with_mirror", "mirror axis direction is zero")
        mirrored = [seg.mirrored(origin, direction).reversed()
                    for seg in reversed(self.segments)]
        segments = list(self.segments) + mirrored
        if (segments[-1].end - first).length() > CLOSURE_TOL * 1e3:
            raise self._error("close_with_mirror",
                              "path does not start and end on the mirror axis")
        return Profile(tuple(segments), closed=True)

    def done(self) -> Profile:
        """Finish an open profile."""
        if not self.segments:
            raise self._error("done", "empty path")
        if self.pending_corner is not None:
            raise self._error("done", "a corner is pending with no outgoing segment")
        return Profile(self.segments, closed=False)


def draw(origin: Optional[Vector2] = None) -> PathBuilder:
    """Start a path with the pen at ``origin`` (default ``(0, 0)``)."""
    return PathBuilder(as_point2(origin) if origin is not None else Point2())


def _round_corner(segments: List[Segment], outgoing: Segment, radius: float,
                  op: str, index: int):
    """Fillet the vertex between ``segments[-1]`` and ``outgoing``.

    Returns the updated segment list (trimmed incoming segment plus the
    rounding arc) and the trimmed outgoing segment, either of the trimmed
    segments being dropped when the fillet consumes it entirely.
    """
    incoming = segments[-1]
    if not isinstance(incoming, LineSegment) or not isinstance(outgoing, LineSegment):
        raise GeometryError("custom corners join straight segments only", "custom_corner", index)
    d1 = incoming.end_tangent
    d2 = outgoing.start_tangent
    turn = math.atan2(d1.cross(d2), d1.dot(d2))
    if abs(turn) <= 1e-9:
        raise GeometryError("segments are collinear; there is no corner to round",
                            "custom_corner", index)
    if math.pi - abs(turn) <= 1e-9:
        raise GeometryError("path reverses on itself at the corner", "custom_corner", index)
    trim = radius * math.tan(abs(turn) / 2.0)
    slack = 1e-9 * max(1.0, trim)
    if trim > incoming.length + slack or trim > outgoing.length + slack:
        raise GeometryError(
            f"corner radius {radius:g} needs {trim:g} of each adjacent segment "
            f"(available {incoming.length:g} and {outgoing.length:g})",
            "custom_corner", index)
    vertex = incoming.end
    arc_start = vertex - d1 * trim
    arc_end = vertex + d2 * trim
    sign = 1.0 if turn > 0 else -1.0
    center = arc_start + left_normal(d1) * (radius * sign)
    arc = arc_from_center(arc_start, arc_end, center, counter_clockwise=turn > 0)
    updated = segments[:-1]
    if (arc_start - incoming.start).length() > epsilon:
        updated.append(LineSegment(incoming.start, arc_start))
    updated.append(arc)
    tail = None
    if (outgoing.end - arc_end).length() > epsilon:
        tail = LineSegment(arc_end, outgoing.end)
    return updated, tail


def _svg_arc(start: Point2, end: Point2, rx: float, ry: float, rotation_deg: float,
             long_way: bool, sweep: bool, fail):
    """Endpoint to center conversion of an SVG elliptical arc.

    Radii too small to reach ``end`` are scaled up uniformly.  Equal radii
    produce an :class:`ArcSegment`.
    """
    if (end - start).length() <= epsilon:
        raise fail("zero-length segment")
    rx = abs(rx)
    ry = abs(ry)
    if rx <= epsilon or ry <= epsilon:
        raise fail("ellipse radii must be non-zero")
    phi = math.radians(rotation_deg)
    cos_phi = math.cos(phi)
    sin_phi = math.sin(phi)
    hx = (start.x - end.x) / 2.0
    hy = (start.y - end.y) / 2.0
    x1 = cos_phi * hx + sin_phi * hy
    y1 = -sin_phi * hx + cos_phi * hy

    lam = (x1 * x1) / (rx * rx) + (y1 * y1) / (ry * ry)
    if lam > 1.0:
        scale = math.sqrt(lam)
        rx *= scale
        ry *= scale

    num = rx * rx * ry * ry - rx * rx * y1 * y1 - ry * ry * x1 * x1
    den = rx * rx * y1 * y1 + ry * ry * x1 * x1
    coef = math.sqrt(max(0.0, num / den))
    if long_way == sweep:
        coef = -coef
    cxp = coef * rx * y1 / ry
    cyp = -coef * ry * x1 / rx
    center = Point2(cos_phi * cxp - sin_phi * cyp + (start.x + end.x) / 2.0,
                    sin_phi * cxp + cos_phi * cyp + (start.y + end.y) / 2.0)

    ux = (x1 - cxp) / rx
    uy = (y1 - cyp) / ry
    vx = (-x1 - cxp) / rx
    vy = (-y1 - cyp) / ry
    theta1 = math.atan2(uy, ux)
    delta = math.atan2(ux * vy - uy * vx, ux * vx + uy * vy)
    if sweep and delta <= 0:
        delta += 2.0 * math.pi
    elif not sweep and delta >= 0:
        delta -= 2.0 * math.pi

    if abs(rx - ry) <= epsilon * max(1.0, rx):
        return arc_from_center(start, end, center, counter_clockwise=sweep)
    return EllipseArcSegment(start, end, center, rx, ry, phi, theta1, delta)
