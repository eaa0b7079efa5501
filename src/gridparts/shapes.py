"""Shared 2D helper shapes used by the part recipes.

Circles, rounded rectangles, regular hexagons and the grid arithmetic
that places fastener holes on a fixed pitch.
"""

from __future__ import annotations

import math
from typing import Iterator, List, Sequence, Tuple

from gridparts.errors import GeometryError
from gridparts.geom import Point2, as_point2
from gridparts.path import Profile, draw
from gridparts.segments import ArcSegment

__all__ = [
    "HEX_ORIENTATIONS",
    "draw_circle",
    "draw_rounded_rectangle",
    "draw_rounded_rectangle_with_straight_back",
    "draw_hexagon",
    "draw_hexihole",
    "inscribed_to_circumscribed",
    "grid_range",
    "grid_positions",
    "grid_cells",
]

HEX_ORIENTATIONS = ("v-bottom", "flat-bottom")


def draw_circle(radius: float, center=(0.0, 0.0)) -> Profile:
    """A full circle, drawn counter-clockwise from its rightmost point."""
    if radius <= 0:
        raise GeometryError("circle radius must be positive", "draw_circle")
    c = as_point2(center)
    start = Point2(c.x + radius, c.y)
    return Profile((ArcSegment(start, start, c, float(radius), 0.0, 2.0 * math.pi),),
                   closed=True)


def draw_rounded_rectangle(width: float, height: float, radius: float = 0.0) -> Profile:
    """Rectangle centred on the origin with optional corner radius."""
    if width <= 0 or height <= 0:
        raise GeometryError("rectangle sides must be positive", "draw_rounded_rectangle")
    if radius < 0 or radius > min(width, height) / 2.0:
        raise GeometryError(
            f"corner radius {radius:g} does not fit a {width:g} x {height:g} rectangle",
            "draw_rounded_rectangle")
    w2 = width / 2.0
    h2 = height / 2.0
    if radius == 0:
        return (draw((-w2, -h2))
                .h_line(width).v_line(height).h_line(-width)
                .close())
    r = radius
    pen = draw((-w2 + r, -h2))
    if width > 2 * r:
        pen = pen.h_line(width - 2 * r)
    pen = pen.tangent_arc(r, r)
    if height > 2 * r:
        pen = pen.v_line(height - 2 * r)
    pen = pen.tangent_arc(-r, r)
    if width > 2 * r:
        pen = pen.h_line(-(width - 2 * r))
    pen = pen.tangent_arc(-r, -r)
    if height > 2 * r:
        pen = pen.v_line(-(height - 2 * r))
    # the last quarter arc lands back on the start point
    pen = pen.tangent_arc(r, -r)
    return pen.close()


def draw_rounded_rectangle_with_straight_back(width: float, height: float,
                                              radius: float) -> Profile:
    """Plate with a straight bottom edge and two rounded top corners.

    Drawn from the origin up the right-hand side, so the plate spans
    ``x`` in ``[-width, 0]`` and ``y`` in ``[0, height]``.
    """
    r = radius
    if r <= 0 or width < 2 * r or height <= r:
        raise GeometryError(
            f"corner radius {r:g} does not fit a {width:g} x {height:g} plate",
            "draw_rounded_rectangle_with_straight_back")
    pen = draw().v_line(height - r)
    pen = pen.tangent_arc(-r, r)
    if width > 2 * r:
        pen = pen.h_line(-width + 2 * r)
    pen = pen.tangent_arc(-r, -r).v_line(-height + r)
    return pen.close()


def draw_hexagon(radius: float, orientation: str = "v-bottom") -> Profile:
    """Regular hexagon centred on the origin.

    ``radius`` is the circumscribed radius (equal to the side length).
    ``"v-bottom"`` puts a vertex at the bottom, ``"flat-bottom"`` a
    horizontal side.
    """
    if radius <= 0:
        raise GeometryError("hexagon radius must be positive", "draw_hexagon")
    if orientation == "v-bottom":
        start, start_angle = (0.0, -radius), 30.0
    elif orientation == "flat-bottom":
        start, start_angle = (radius, 0.0), 120.0
    else:
        raise ValueError(f"orientation must be one of {HEX_ORIENTATIONS}, got {orientation!r}")
    pen = draw(start)
    for side in range(5):
        pen = pen.polar_line(radius, side * 60.0 + start_angle)
    # the sixth side is the closing segment
    return pen.close()


def inscribed_to_circumscribed(inscribed_radius: float) -> float:
    return inscribed_radius * 2.0 / math.sqrt(3.0)


def draw_hexihole(radius: float, orientation: str = "v-bottom") -> Profile:
    """Hexagonal cut-out whose inscribed circle has ``radius``.

    A bolt of diameter ``2 * radius`` passes through; a nut of the same
    across-flats size is captured.
    """
    return draw_hexagon(inscribed_to_circumscribed(radius), orientation)


def grid_range(count: int) -> range:
    if count < 0:
        raise ValueError("grid count must be non-negative")
    return range(int(count))


def grid_positions(count: int, spacing: float, offset: float = 0.0) -> List[float]:
    """Cell centres ``offset + (i + 1/2) * spacing`` for ``i < count``."""
    return [offset + (0.5 + i) * spacing for i in grid_range(count)]


def grid_cells(counts: Sequence[int]) -> Iterator[Tuple[int, ...]]:
    """Every index tuple of a rectangular grid, row-major."""
    if len(counts) == 1:
        for i in grid_range(counts[0]):
            yield (i,)
        return
    for i in grid_range(counts[0]):
        for rest in grid_cells(counts[1:]):
            yield (i,) + rest
