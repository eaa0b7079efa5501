"""Angle bracket: two perforated plates meeting at a right angle."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from gridparts import profile_ops, solid_ops
from gridparts.brep import Solid
from gridparts.edges import EdgeFinder
from gridparts.fillet import combine_finder_filters, fillet
from gridparts.forming import extrude
from gridparts.recipes.base import Part, RecipeParams, require_non_negative, require_positive
from gridparts.shapes import (
    draw_hexihole,
    draw_rounded_rectangle_with_straight_back,
    grid_cells,
)

logger = logging.getLogger(__name__)

__all__ = ["BracketParams", "build", "draw_side"]


@dataclass(frozen=True)
class BracketParams(RecipeParams):
    grid_spacing: float = 40.0
    width_in_grids: int = 2
    top_length_in_grids: int = 1
    bottom_length_in_grids: int = 1
    fastener_diameter: float = 8.0
    wall_thickness: float = 1.6
    round_radius: float = 5.0
    inner_fillet: float = 5.0
    kerf: float = 1.0

    ALIASES = {
        "gridSpacingInMm": "grid_spacing",
        "widthInGrids": "width_in_grids",
        "topLengthInGrids": "top_length_in_grids",
        "bottomLengthInGrids": "bottom_length_in_grids",
        "fastenerDiameterInMm": "fastener_diameter",
        "wallThicknessInMm": "wall_thickness",
        "roundRadiusInMm": "round_radius",
        "innerFilletInMm": "inner_fillet",
        "kerfInMm": "kerf",
    }

    def __post_init__(self):
        require_positive(self, "grid_spacing", "width_in_grids", "top_length_in_grids",
                         "bottom_length_in_grids", "fastener_diameter", "wall_thickness",
                         "round_radius", "inner_fillet")
        require_non_negative(self, "kerf")

    @property
    def width(self) -> float:
        return self.width_in_grids * self.grid_spacing - 2 * self.kerf


def draw_side(params: BracketParams, length_in_grids: int):
    """One plate, flat edge on the x axis, with a hexihole per grid cell."""
    g = params.grid_spacing
    kerf = params.kerf
    side = draw_rounded_rectangle_with_straight_back(
        params.width, length_in_grids * g - kerf, params.round_radius)
    for wi, li in grid_cells((params.width_in_grids, length_in_grids)):
        hole = profile_ops.translate(
            draw_hexihole(params.fastener_diameter / 2.0, "flat-bottom"),
            -(0.5 + wi) * g + kerf, (0.5 + li) * g - kerf)
        side = profile_ops.cut(side, hole)
    return side


def _plate(params: BracketParams, length_in_grids: int) -> Solid:
    """Plate standing in the XY quarter: length along +X, width along +Z."""
    plate = extrude(draw_side(params, length_in_grids), "XZ", params.wall_thickness)
    return solid_ops.rotate(plate, 90.0, direction=(0.0, 1.0, 0.0))


def build(params: BracketParams) -> Solid:
    wall = params.wall_thickness
    bottom = solid_ops.translate(_plate(params, params.bottom_length_in_grids), 0.0, wall, 0.0)
    top = solid_ops.rotate(_plate(params, params.top_length_in_grids), 90.0)
    bracket = solid_ops.fuse(top, bottom)

    inner_corner = EdgeFinder().contains_point(
        (wall, wall, params.width_in_grids * params.grid_spacing / 2.0))
    spec = combine_finder_filters([
        (inner_corner, params.inner_fillet),
        (EdgeFinder(), wall / 3.0),
    ])
    logger.debug("bracket %dx(%d, %d) grids", params.width_in_grids,
                 params.top_length_in_grids, params.bottom_length_in_grids)
    return fillet(bracket, spec)


def parts(params: BracketParams):
    return [Part(build(params), name="bracket")]
