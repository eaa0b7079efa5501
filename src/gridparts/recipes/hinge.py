"""Print-in-place butt hinge.

Terminology:

- leaf: the flat plate that carries the fasteners
- knuckle: a curl around the pin axis; knuckles alternate between the
  two sides along the axis, even indices on the even side
- pin: a waisted loft that joins the even side through the odd knuckles
- clearance: the gap left between neighbouring knuckles and around pins

The hinge axis runs along +Y at ``x = 0, z = thickness``.  The even side
is built with its leaf along +X; the odd side is built the same way and
mirrored across the YZ plane.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

from gridparts import solid_ops
from gridparts.brep import Solid
from gridparts.fillet import fillet
from gridparts.forming import extrude, loft, make_wire
from gridparts.path import draw
from gridparts.planes import make_plane
from gridparts.recipes.base import Part, RecipeParams, require_positive
from gridparts.shapes import draw_circle, draw_hexihole

logger = logging.getLogger(__name__)

__all__ = ["HingeParams", "HingeLayout", "KnuckleSlot", "hinge_layout", "build", "parts"]

EVEN = "even"
ODD = "odd"

SIDE_COLORS = {EVEN: "steelblue", ODD: "orange"}


@dataclass(frozen=True)
class HingeParams(RecipeParams):
    even_side: bool = True
    odd_side: bool = True
    num_fasteners: int = 2
    num_odd_knuckles: int = 1
    fastener_spacing: float = 40.0
    fastener_hole_diameter: float = 8.0
    fastener_cap_diameter: float = 13.0
    fastener_cap_height: float = 3.5
    fastener_margin: float = 8.5
    thickness: float = 6.0
    knuckle_clearance: float = 0.4
    knuckle_even_odd_ratio: float = 3.0 / 5.0
    leaf_fillet: float = 2.0
    knuckle_fillet: float = 2.0
    fastener_fillet: float = 1.0

    ALIASES = {
        "evenSide": "even_side",
        "oddSide": "odd_side",
        "numFasteners": "num_fasteners",
        "numOddKnuckles": "num_odd_knuckles",
        "fastenerSpacing": "fastener_spacing",
        "fastenerHoleDiameter": "fastener_hole_diameter",
        "fastenerCapDiameter": "fastener_cap_diameter",
        "fastenerCapHeight": "fastener_cap_height",
        "fastenerMargin": "fastener_margin",
        "thickness": "thickness",
        "knuckleClearance": "knuckle_clearance",
        "knuckleEvenOddRatio": "knuckle_even_odd_ratio",
        "leafFillet": "leaf_fillet",
        "knuckleFillet": "knuckle_fillet",
        "fastenerFillet": "fastener_fillet",
    }

    def __post_init__(self):
        if not (self.even_side or self.odd_side):
            raise ValueError("HingeParams: at least one side must be requested")
        require_positive(self, "num_fasteners", "num_odd_knuckles", "fastener_spacing",
                         "fastener_hole_diameter", "fastener_cap_diameter",
                         "fastener_cap_height", "fastener_margin", "thickness",
                         "knuckle_clearance", "leaf_fillet", "knuckle_fillet",
                         "fastener_fillet")
        if not 0 < self.knuckle_even_odd_ratio < 1:
            raise ValueError("HingeParams.knuckle_even_odd_ratio must lie strictly between 0 and 1")
        if self.fastener_cap_height >= self.thickness:
            raise ValueError("HingeParams: fastener cap must be shallower than the leaf")
        if self.fastener_hole_diameter >= self.fastener_cap_diameter:
            raise ValueError("HingeParams: fastener hole must be narrower than its cap")


@dataclass(frozen=True)
class KnuckleSlot:
    index: int
    start: float
    height: float

    @property
    def even(self) -> bool:
        return self.index % 2 == 0

    @property
    def end(self) -> float:
        return self.start + self.height


@dataclass(frozen=True)
class HingeLayout:
    pin_radius: float
    connector_radius: float
    leaf_height: float
    even_height: float
    odd_height: float
    knuckles: Tuple[KnuckleSlot, ...]


def hinge_layout(params: HingeParams) -> HingeLayout:
    """Knuckle placement along the hinge axis.

    Knuckles alternate even, odd, even and so on, starting and ending with
    an even one, separated by the clearance.  The even knuckles together
    take ``knuckle_even_odd_ratio`` of the height left over after the
    clearances.
    """
    num_even = params.num_odd_knuckles + 1
    num_knuckles = params.num_odd_knuckles + num_even
    clearance = params.knuckle_clearance
    connector_radius = params.fastener_cap_diameter / 2.0 + params.fastener_margin
    leaf_height = (params.fastener_spacing * (params.num_fasteners - 1)
                   + params.fastener_cap_diameter + 2 * params.fastener_margin)
    knuckles_height = leaf_height - clearance * (num_knuckles - 1)
    if knuckles_height <= 0:
        raise ValueError("HingeParams: knuckle clearances leave no room for knuckles")
    ratio = params.knuckle_even_odd_ratio
    even_height = knuckles_height * ratio / num_even
    odd_height = knuckles_height * (1 - ratio) / params.num_odd_knuckles

    slots = []
    for i in range(num_knuckles):
        start = ((i // 2) * (even_height + odd_height)
                 + (i % 2) * even_height
                 + i * clearance)
        slots.append(KnuckleSlot(i, start, even_height if i % 2 == 0 else odd_height))
    return HingeLayout(params.thickness / 2.0, connector_radius, leaf_height,
                       even_height, odd_height, tuple(slots))


def leaf_profile(params: HingeParams, layout: HingeLayout):
    """Plate outline with a half hexagon swelling around the fastener row."""
    t = params.thickness
    hex_radius = layout.connector_radius
    return (draw((t, 0.0))
            .h_line_to(params.fastener_spacing / 2.0)
            .polar_line(hex_radius, 30.0)
            .v_line(hex_radius + (params.num_fasteners - 1) * params.fastener_spacing)
            .polar_line(hex_radius, 150.0)
            .h_line_to(t)
            .close())


def _fastener_cuts(params: HingeParams, x: float, y: float) -> Tuple[Solid, Solid]:
    t = params.thickness
    hole = extrude(draw_hexihole(params.fastener_hole_diameter / 2.0), "XY", t)
    cap = extrude(draw_hexihole(params.fastener_cap_diameter / 2.0), "XY",
                  params.fastener_cap_height, offset=t - params.fastener_cap_height)
    return (solid_ops.translate(hole, x, y, 0.0), solid_ops.translate(cap, x, y, 0.0))


def leaf(params: HingeParams, layout: HingeLayout) -> Solid:
    plate = fillet(extrude(leaf_profile(params, layout), "XY", params.thickness),
                   params.leaf_fillet)
    x = params.fastener_spacing / 2.0
    for i in range(params.num_fasteners):
        y = i * params.fastener_spacing + layout.connector_radius
        for cutter in _fastener_cuts(params, x, y):
            plate = solid_ops.cut(plate, cutter)
        plate = fillet(plate, params.fastener_fillet)
    return plate


def knuckle(params: HingeParams, height: float) -> Solid:
    """Curl around the axis, spanning ``y`` in ``[0, height]``."""
    t = params.thickness
    profile = (draw()
               .half_ellipse_to((0.0, 2 * t), t)
               .smooth_spline_to((2 * t, t), start_factor=2.0, end_factor=2.0)
               .v_line_to(0.0)
               .close())
    return fillet(extrude(profile, "XZ", -height), params.knuckle_fillet)


def pin(params: HingeParams, radius: float, height: float) -> Solid:
    """Waisted pin on the hinge axis, spanning ``y`` in ``[0, height]``."""
    sections = [make_wire(draw_circle(r), "XZ", offset)
                for r, offset in ((radius, 0.0), (radius / 2.0, height / 2.0), (radius, height))]
    body = solid_ops.mirror(loft(sections, ruled=False), "XZ")
    return solid_ops.translate(body, 0.0, 0.0, params.thickness)


def _knuckle_at(params: HingeParams, slot: KnuckleSlot) -> Solid:
    return solid_ops.translate(knuckle(params, slot.height), 0.0, slot.start, 0.0)


def _clearance_at(params: HingeParams, slot: KnuckleSlot) -> Solid:
    """Room for the other side's knuckle to swing through."""
    return solid_ops.mirror(_knuckle_at(params, slot), make_plane("XY", params.thickness))


def _pin_at(params: HingeParams, slot: KnuckleSlot, radius: float) -> Solid:
    c = params.knuckle_clearance
    return solid_ops.translate(pin(params, radius, slot.height + 2 * c), 0.0, slot.start - c, 0.0)


def side(params: HingeParams, layout: HingeLayout, which: str) -> Solid:
    if which not in (EVEN, ODD):
        raise ValueError(f"hinge side must be {EVEN!r} or {ODD!r}, got {which!r}")
    body = leaf(params, layout)
    for slot in layout.knuckles:
        if slot.even and which == EVEN:
            body = solid_ops.fuse(body, _knuckle_at(params, slot))
        elif slot.even:
            body = solid_ops.cut(body, _clearance_at(params, slot))
        elif which == EVEN:
            body = solid_ops.cut(body, _clearance_at(params, slot))
            body = solid_ops.fuse(body, _pin_at(params, slot, layout.pin_radius))
        else:
            bored = solid_ops.cut(_knuckle_at(params, slot),
                                  _pin_at(params, slot, layout.pin_radius + params.knuckle_clearance))
            body = solid_ops.fuse(body, bored)
    if which == ODD:
        body = solid_ops.mirror(body, "YZ")
    logger.debug("hinge %s side: %d knuckles", which, len(layout.knuckles))
    return body


def _requested_sides(params: HingeParams) -> List[str]:
    return [name for name, wanted in ((EVEN, params.even_side), (ODD, params.odd_side)) if wanted]


def parts(params: HingeParams) -> List[Part]:
    """One coloured part per requested side."""
    layout = hinge_layout(params)
    return [Part(side(params, layout, which), SIDE_COLORS[which], f"hinge-{which}")
            for which in _requested_sides(params)]


def build(params: HingeParams) -> Solid:
    """Both requested sides as one (possibly multi-body) solid."""
    layout = hinge_layout(params)
    sides = [side(params, layout, which) for which in _requested_sides(params)]
    return solid_ops.fuse_all(sides)
