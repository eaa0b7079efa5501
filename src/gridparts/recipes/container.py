"""Wall-hung container: an open box with a flared wall and a perforated back.

The box wall is one cross-section swept around the floor outline.  The
section flares outward by the bottom fillet over its first millimetres,
rises to the box height, and returns on the inside one wall thickness
in; closing it along the floor edge gives a ring that is glued to a
floor plate of the same outline.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from gridparts import solid_ops
from gridparts.brep import Solid
from gridparts.edges import EdgeFinder
from gridparts.fillet import fillet
from gridparts.forming import extrude, make_wire, sweep
from gridparts.path import Profile, draw
from gridparts.recipes.base import Part, RecipeParams, require_non_negative, require_positive
from gridparts.shapes import draw_hexihole, draw_rounded_rectangle_with_straight_back

logger = logging.getLogger(__name__)

__all__ = ["ContainerParams", "build", "wall_profile"]


@dataclass(frozen=True)
class ContainerParams(RecipeParams):
    grid_spacing: float = 40.0
    width_in_grids: int = 5
    depth_in_grids: int = 2
    height_in_grids: int = 1
    fastener_diameter: float = 8.0
    wall_thickness: float = 1.6
    outer_fillet: float = 5.0
    bottom_fillet: float = 5.0
    kerf: float = 1.0

    ALIASES = {
        "gridSpacingInMm": "grid_spacing",
        "widthInGrids": "width_in_grids",
        "depthInGrids": "depth_in_grids",
        "heightInGrids": "height_in_grids",
        "fastenerDiameterInMm": "fastener_diameter",
        "wallThicknessInMm": "wall_thickness",
        "outerFilletInMm": "outer_fillet",
        "bottomFilletInMm": "bottom_fillet",
        "kerfInMm": "kerf",
    }

    def __post_init__(self):
        require_positive(self, "grid_spacing", "width_in_grids", "depth_in_grids",
                         "height_in_grids", "fastener_diameter", "wall_thickness",
                         "outer_fillet", "bottom_fillet")
        require_non_negative(self, "kerf")
        if self.bottom_fillet <= self.wall_thickness:
            raise ValueError("bottom fillet must be larger than the wall thickness")

    @property
    def width(self) -> float:
        return self.width_in_grids * self.grid_spacing - 2 * self.kerf

    @property
    def depth(self) -> float:
        return self.depth_in_grids * self.grid_spacing - 2 * self.kerf

    @property
    def box_height(self) -> float:
        return self.height_in_grids * self.grid_spacing - self.kerf

    @property
    def back_height(self) -> float:
        return self.grid_spacing - self.kerf


def wall_profile(params: ContainerParams) -> Profile:
    """Closed wall cross-section; ``x`` points outward and ``y`` up."""
    bf = params.bottom_fillet
    wall = params.wall_thickness
    height = params.box_height
    return (draw()
            .line(bf, bf)
            .custom_corner(bf)
            .v_line(height - bf)
            .h_line(-wall)
            .v_line(-height + wall / 2.0 + bf)
            .custom_corner(bf - wall)
            .line_to((0.0, wall))
            .close())


def _box(params: ContainerParams) -> Solid:
    bf = params.bottom_fillet
    floor = draw_rounded_rectangle_with_straight_back(
        params.width - 2 * bf, params.depth - 2 * bf, params.outer_fillet)
    ring = sweep(wall_profile(params), make_wire(floor, "XY"), with_contact=True)
    plate = extrude(floor, "XY", params.wall_thickness)
    box = solid_ops.fuse(ring, plate, same_face=True)
    return solid_ops.translate(box, -bf, bf, 0.0)


def _back(params: ContainerParams) -> Solid:
    g = params.grid_spacing
    wall = params.wall_thickness
    plate = extrude(draw_rounded_rectangle_with_straight_back(
        params.width, params.back_height, params.outer_fillet), "XZ", wall)
    back = solid_ops.translate(plate, 0.0, wall, params.box_height)
    hole = draw_hexihole(params.fastener_diameter / 2.0)
    for i in range(params.width_in_grids):
        cutter = solid_ops.translate(extrude(hole, "XZ", wall),
                                     params.kerf - (0.5 + i) * g, wall,
                                     params.box_height + g / 2.0)
        back = solid_ops.cut(back, cutter)
    return back


def build(params: ContainerParams) -> Solid:
    wall = params.wall_thickness
    container = solid_ops.fuse(_box(params), _back(params))
    rim = EdgeFinder().either([
        lambda f: f.in_plane("XY", params.box_height),
        lambda f: f.in_plane("XZ"),
        lambda f: f.in_plane("XZ", -wall),
    ])
    logger.debug("container %gx%gx%g mm", params.width, params.depth, params.box_height)
    return fillet(container, wall / 3.0, rim)


def parts(params: ContainerParams):
    return [Part(build(params), name="container")]
