"""Cutting jig: a rounded bar that pins to the grid for repeatable saw cuts.

The bar is one kerf short of a whole number of grid units and starts half
a kerf from the origin, so a blade run along either end lands on a grid
line.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from gridparts import profile_ops, solid_ops
from gridparts.brep import Solid
from gridparts.fillet import fillet
from gridparts.forming import extrude
from gridparts.recipes.base import Part, RecipeParams, require_non_negative, require_positive
from gridparts.shapes import draw_circle, draw_rounded_rectangle, grid_positions

logger = logging.getLogger(__name__)

__all__ = ["CuttingJigParams", "build"]


@dataclass(frozen=True)
class CuttingJigParams(RecipeParams):
    grid_unit: float = 40.0
    cutter_kerf: float = 0.635
    hole_diameter: float = 7.5  # drill size for tapping
    length_in_gu: int = 2
    height: float = 10.0
    fillet: float = 2.0

    ALIASES = {
        "gridUnitInMm": "grid_unit",
        "cutterKerfInMm": "cutter_kerf",
        "holeDiameterInMm": "hole_diameter",
        "lengthInGu": "length_in_gu",
        "heightInMm": "height",
        "filletInMm": "fillet",
    }

    def __post_init__(self):
        require_positive(self, "grid_unit", "hole_diameter", "length_in_gu", "height", "fillet")
        require_non_negative(self, "cutter_kerf")

    @property
    def length(self) -> float:
        return self.length_in_gu * self.grid_unit - self.cutter_kerf


def build(params: CuttingJigParams) -> Solid:
    length = params.length
    bar = profile_ops.translate(
        draw_rounded_rectangle(length, params.grid_unit, params.fillet),
        length / 2.0 + params.cutter_kerf / 2.0, 0.0)
    jig = fillet(extrude(bar, "XY", params.height), params.fillet)

    for x in grid_positions(params.length_in_gu, params.grid_unit):
        hole = extrude(draw_circle(params.hole_diameter / 2.0, (x, 0.0)), "XY", params.height)
        jig = solid_ops.cut(jig, hole)
    logger.debug("cutting jig %.3f mm with %d holes", length, params.length_in_gu)
    return jig


def parts(params: CuttingJigParams):
    return [Part(build(params), name="cutting-jig")]
