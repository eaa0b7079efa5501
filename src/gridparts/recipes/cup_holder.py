"""Wall-hung cup holder: a ring-shaped shelf on a perforated back plate."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from gridparts import profile_ops, solid_ops
from gridparts.brep import Solid
from gridparts.fillet import fillet
from gridparts.forming import extrude
from gridparts.path import draw
from gridparts.recipes.base import Part, RecipeParams, require_non_negative, require_positive
from gridparts.shapes import (
    draw_circle,
    draw_hexihole,
    draw_rounded_rectangle_with_straight_back,
)

logger = logging.getLogger(__name__)

__all__ = ["CupHolderParams", "build", "shelf_profile"]


@dataclass(frozen=True)
class CupHolderParams(RecipeParams):
    grid_spacing: float = 40.0
    width_in_grids: int = 2
    fastener_diameter: float = 8.0
    cup_edge_width: float = 5.0
    cup_inner_diameter: float = 100.0
    space_between_wall_and_cup: float = 10.0
    has_empty_inner: bool = True
    wall_thickness: float = 1.6
    outer_fillet: float = 5.0
    kerf: float = 1.0

    ALIASES = {
        "gridSpacingInMm": "grid_spacing",
        "widthInGrids": "width_in_grids",
        "fastenerDiameterInMm": "fastener_diameter",
        "cupEdgeWidthInMm": "cup_edge_width",
        "cupInnerDiameterInMm": "cup_inner_diameter",
        "spaceBetweenWallAndCupInMm": "space_between_wall_and_cup",
        "hasEmptyInner": "has_empty_inner",
        "wallThicknessInMm": "wall_thickness",
        "outerFilletInMm": "outer_fillet",
        "kerfInMm": "kerf",
    }

    def __post_init__(self):
        require_positive(self, "grid_spacing", "width_in_grids", "fastener_diameter",
                         "cup_edge_width", "cup_inner_diameter", "wall_thickness",
                         "outer_fillet")
        require_non_negative(self, "space_between_wall_and_cup", "kerf")

    @property
    def width(self) -> float:
        return self.width_in_grids * self.grid_spacing - 2 * self.kerf

    @property
    def back_height(self) -> float:
        return self.grid_spacing - 2 * self.kerf

    @property
    def total_diameter(self) -> float:
        return self.cup_inner_diameter + 2 * self.cup_edge_width


def shelf_profile(params: CupHolderParams):
    """Outline of the shelf in the XY plane, back edge on the y axis.

    The lower half is drawn from the far side of the ring round to the
    back edge and mirrored across the centre line ``y = width / 2``.
    """
    wall = params.wall_thickness
    diameter = params.total_diameter
    near = wall + params.space_between_wall_and_cup
    centre_y = params.width / 2.0
    outline = (draw((near + diameter, centre_y))
               .ellipse_to((near + diameter / 2.0, centre_y - diameter / 2.0),
                           diameter / 2.0, diameter / 2.0, 90.0)
               .tangent_arc_to((wall, 0.0))
               .h_line(-wall)
               .v_line(centre_y)
               .close_with_mirror())
    if not params.has_empty_inner:
        return outline
    inner = draw_circle(params.cup_inner_diameter / 2.0,
                        (near + params.cup_edge_width + params.cup_inner_diameter / 2.0,
                         centre_y))
    return profile_ops.cut(outline, inner)


def _back(params: CupHolderParams) -> Solid:
    g = params.grid_spacing
    wall = params.wall_thickness
    plate = extrude(draw_rounded_rectangle_with_straight_back(
        params.width, params.back_height, params.outer_fillet), "XZ", wall)
    back = solid_ops.translate(plate, 0.0, wall, 0.0)
    hole = draw_hexihole(params.fastener_diameter / 2.0)
    for i in range(params.width_in_grids):
        cutter = solid_ops.translate(extrude(hole, "XZ", wall),
                                     params.kerf - (0.5 + i) * g, wall,
                                     -params.kerf + g / 2.0)
        back = solid_ops.cut(back, cutter)
    # stand the plate along the y axis, behind the shelf
    return solid_ops.rotate(back, -90.0)


def build(params: CupHolderParams) -> Solid:
    shelf = extrude(shelf_profile(params), "XY", params.wall_thickness)
    holder = solid_ops.fuse(shelf, _back(params))
    logger.debug("cup holder for a %g mm cup", params.cup_inner_diameter)
    return fillet(holder, params.wall_thickness / 3.0)


def parts(params: CupHolderParams):
    return [Part(build(params), name="cup-holder")]
