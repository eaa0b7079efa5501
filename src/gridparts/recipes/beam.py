"""Grid beam: a square bar with fastener holes through two faces per cell."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from gridparts import solid_ops
from gridparts.brep import Solid
from gridparts.edges import EdgeFinder
from gridparts.fillet import combine_finder_filters, fillet
from gridparts.forming import extrude
from gridparts.path import Profile
from gridparts.recipes.base import Part, RecipeParams, require_non_negative, require_positive
from gridparts.shapes import draw_circle, draw_hexihole, draw_rounded_rectangle, grid_positions

logger = logging.getLogger(__name__)

__all__ = ["BeamParams", "build"]


@dataclass(frozen=True)
class BeamParams(RecipeParams):
    grid_spacing: float = 20.0
    length_in_grids: int = 5
    fastener_diameter: float = 8.0
    outer_fillet: float = 2.0
    hole_fillet: float = 0.5
    use_hexiholes: bool = True

    ALIASES = {
        "gridSpacingInMm": "grid_spacing",
        "lengthInGrids": "length_in_grids",
        "fastenerDiameterInMm": "fastener_diameter",
        "outerFilletInMm": "outer_fillet",
        "holeFilletInMm": "hole_fillet",
        "useHexiholes": "use_hexiholes",
    }

    def __post_init__(self):
        require_positive(self, "grid_spacing", "length_in_grids", "fastener_diameter")
        require_non_negative(self, "outer_fillet", "hole_fillet")
        if self.fastener_diameter >= self.grid_spacing:
            raise ValueError("fastener holes must be narrower than the grid spacing")

    @property
    def length(self) -> float:
        return self.length_in_grids * self.grid_spacing


def _hole_profile(params: BeamParams) -> Profile:
    radius = params.fastener_diameter / 2.0
    if params.use_hexiholes:
        return draw_hexihole(radius)
    return draw_circle(radius)


def _cell_holes(params: BeamParams, x: float):
    """The vertical and horizontal through-holes of the cell centred at ``x``."""
    g = params.grid_spacing
    hole = _hole_profile(params)
    through_y = solid_ops.translate(extrude(hole, "XZ", g, offset=-g / 2.0), x, 0.0, 0.0)
    through_z = solid_ops.translate(extrude(hole, "XY", g, offset=-g / 2.0), x, 0.0, 0.0)
    return through_y, through_z


def build(params: BeamParams) -> Solid:
    g = params.grid_spacing
    beam = extrude(draw_rounded_rectangle(g, g, params.outer_fillet), "YZ", params.length)
    for x in grid_positions(params.length_in_grids, g):
        for hole in _cell_holes(params, x):
            beam = solid_ops.cut(beam, hole)
    logger.debug("beam: %d cells cut", params.length_in_grids)

    groups = []
    if params.outer_fillet > 0:
        ends = EdgeFinder().either([lambda f: f.in_plane("YZ", 0.0),
                                    lambda f: f.in_plane("YZ", params.length)])
        groups.append((ends, params.outer_fillet))
    if params.hole_fillet > 0:
        groups.append((EdgeFinder(), params.hole_fillet))
    if groups:
        beam = fillet(beam, combine_finder_filters(groups))
    return beam


def parts(params: BeamParams):
    return [Part(build(params), name="beam")]
