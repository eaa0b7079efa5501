## 2D profile transforms and booleans for gridparts
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
Profile-level transforms and boolean combination.

Transforms (translate, rotate, mirror) work on any :class:`Profile` or
:class:`Region` and never mutate their input.  Booleans need closed
profiles and produce a :class:`Region`: an ordered record of fuse/cut
steps that the kernel evaluates into a planar face when the region is
lifted into a solid.  Recording instead of evaluating keeps 2D work free
of the kernel until a solid is actually needed.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple, Union

from gridparts.errors import GeometryError
from gridparts.geom import Point2, as_point2
from gridparts.path import Profile

__all__ = [
    "Region",
    "Shape2D",
    "translate",
    "rotate",
    "mirror",
    "cut",
    "fuse",
    "loops",
]

FUSE = "fuse"
CUT = "cut"


@dataclass(frozen=True)
class Region:
    """A closed base profile followed by ordered boolean steps."""

    base: Profile
    steps: Tuple[Tuple[str, Profile], ...] = ()

    def __post_init__(self):
        _require_closed(self.base, "region")
        for op, profile in self.steps:
            if op not in (FUSE, CUT):
                raise ValueError(f"unknown region step {op!r}")
            _require_closed(profile, "region")

    def profiles(self) -> Iterator[Profile]:
        yield self.base
        for _, profile in self.steps:
            yield profile

    def _map(self, fn) -> "Region":
        return Region(fn(self.base), tuple((op, fn(p)) for op, p in self.steps))

    def translate(self, dx, dy: Optional[float] = None) -> "Region":
        return translate(self, dx, dy)

    def rotate(self, angle_deg: float, center=(0.0, 0.0)) -> "Region":
        return rotate(self, angle_deg, center)

    def mirror(self, axis="x") -> "Region":
        return mirror(self, axis)

    def cut(self, other) -> "Region":
        return cut(self, other)

    def fuse(self, other) -> "Region":
        return fuse(self, other)


Shape2D = Union[Profile, Region]


def _require_closed(profile: Profile, op: str) -> None:
    if not profile.closed:
        raise GeometryError("boolean combination requires closed profiles", op)


def _map_segments(profile: Profile, fn) -> Profile:
    return Profile(tuple(fn(seg) for seg in profile.segments), profile.closed)


def _apply(shape: Shape2D, fn) -> Shape2D:
    if isinstance(shape, Region):
        return shape._map(lambda p: _map_segments(p, fn))
    if isinstance(shape, Profile):
        return _map_segments(shape, fn)
    raise TypeError(f"expected a Profile or Region, got {type(shape).__name__}")


def translate(shape: Shape2D, dx, dy: Optional[float] = None) -> Shape2D:
    """Shift by ``(dx, dy)``; a single 2-sequence is also accepted."""
    delta = as_point2(dx) if dy is None else Point2(float(dx), float(dy))
    return _apply(shape, lambda seg: seg.translated(delta))


def rotate(shape: Shape2D, angle_deg: float, center=(0.0, 0.0)) -> Shape2D:
    """Rotate counter-clockwise by ``angle_deg`` about ``center``."""
    angle = math.radians(angle_deg)
    c = as_point2(center)
    return _apply(shape, lambda seg: seg.rotated(angle, c))


def _axis(axis) -> Tuple[Point2, Point2]:
    if axis in ("x", "X"):
        return Point2(), Point2(1.0, 0.0)
    if axis in ("y", "Y"):
        return Point2(), Point2(0.0, 1.0)
    if isinstance(axis, Sequence) and len(axis) == 2:
        origin, direction = as_point2(axis[0]), as_point2(axis[1])
        if direction.length() == 0:
            raise GeometryError("mirror axis direction is zero", "mirror")
        return origin, direction
    raise ValueError(f"mirror axis must be 'x', 'y' or (point, direction), got {axis!r}")


def mirror(shape: Shape2D, axis="x") -> Shape2D:
    """Reflect across ``axis``.

    Reflection flips the winding; each segment list is reversed so closed
    loops keep their original orientation sense after mirroring.
    """
    origin, direction = _axis(axis)

    def flip(profile: Profile) -> Profile:
        segs = tuple(seg.mirrored(origin, direction).reversed()
                     for seg in reversed(profile.segments))
        return Profile(segs, profile.closed)

    if isinstance(shape, Region):
        return shape._map(flip)
    if isinstance(shape, Profile):
        return flip(shape)
    raise TypeError(f"expected a Profile or Region, got {type(shape).__name__}")


def _as_region(shape: Shape2D, op: str) -> Region:
    if isinstance(shape, Region):
        return shape
    if isinstance(shape, Profile):
        _require_closed(shape, op)
        return Region(shape)
    raise TypeError(f"expected a Profile or Region, got {type(shape).__name__}")


def _combine(a: Shape2D, b: Shape2D, op: str) -> Region:
    left = _as_region(a, op)
    right = _as_region(b, op)
    # a region on the right flattens into its profiles, which is only exact
    # when it is a plain union
    if any(step == CUT for step, _ in right.steps):
        raise GeometryError(f"cannot {op} with a region that has holes", op)
    steps = list(left.steps)
    for profile in right.profiles():
        steps.append((op, profile))
    return Region(left.base, tuple(steps))


def cut(a: Shape2D, b: Shape2D) -> Region:
    """``a`` minus ``b``; both must be closed."""
    return _combine(a, b, CUT)


def fuse(a: Shape2D, b: Shape2D) -> Region:
    """Union of ``a`` and ``b``; both must be closed."""
    return _combine(a, b, FUSE)


def loops(shape: Shape2D) -> Tuple[Profile, ...]:
    """Every profile taking part in ``shape``."""
    if isinstance(shape, Region):
        return tuple(shape.profiles())
    return (shape,)
