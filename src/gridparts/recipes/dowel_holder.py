"""Dowel holder base: a stadium-shaped plate bolted down at both ends."""

from __future__ import annotations

from dataclasses import dataclass

from gridparts import profile_ops
from gridparts.brep import Solid
from gridparts.forming import extrude
from gridparts.path import draw
from gridparts.recipes.base import Part, RecipeParams, require_non_negative, require_positive
from gridparts.shapes import draw_circle

__all__ = ["DowelHolderParams", "build", "bottom_profile"]


@dataclass(frozen=True)
class DowelHolderParams(RecipeParams):
    grid_spacing: float = 40.0
    dowel_diameter: float = 22.0
    fastener_hole_diameter: float = 8.0
    fastener_cap_diameter: float = 13.0
    bottom_thickness: float = 1.0
    edge_thickness: float = 2.0

    ALIASES = {
        "gridSpacingInMm": "grid_spacing",
        "dowelDiameterInMm": "dowel_diameter",
        "fastenerHoleDiameterInMm": "fastener_hole_diameter",
        "fastenerCapDiameterInMm": "fastener_cap_diameter",
        "bottomThicknessInMm": "bottom_thickness",
        "edgeThicknessInMm": "edge_thickness",
    }

    def __post_init__(self):
        require_positive(self, "grid_spacing", "dowel_diameter", "fastener_hole_diameter",
                         "fastener_cap_diameter", "bottom_thickness")
        require_non_negative(self, "edge_thickness")
        if self.fastener_hole_diameter >= self.fastener_cap_diameter + 2 * self.edge_thickness:
            raise ValueError("fastener hole does not fit inside the rounded ends")


def bottom_profile(params: DowelHolderParams):
    """Stadium around both fastener positions, minus the two holes."""
    half = params.grid_spacing / 2.0
    end_radius = params.fastener_cap_diameter / 2.0 + params.edge_thickness
    outline = (draw((-half, end_radius))
               .half_ellipse_to((-half, -end_radius), end_radius, sweep=True)
               .h_line_to(half)
               .half_ellipse_to((half, end_radius), end_radius, sweep=True)
               .close())
    hole_radius = params.fastener_hole_diameter / 2.0
    region = profile_ops.cut(outline, draw_circle(hole_radius, (half, 0.0)))
    return region.cut(draw_circle(hole_radius, (-half, 0.0)))


def build(params: DowelHolderParams) -> Solid:
    # TODO: offset the holder when the dowel would collide with a fastener cap;
    # the offset formula is still unsettled.
    return extrude(bottom_profile(params), "XY", params.bottom_thickness)


def parts(params: DowelHolderParams):
    return [Part(build(params), name="dowel-holder")]
