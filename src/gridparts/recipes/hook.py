"""Wall hook: a curled arm standing on a hexagonal mounting plate."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from gridparts import profile_ops, solid_ops
from gridparts.brep import Solid
from gridparts.fillet import fillet
from gridparts.forming import extrude
from gridparts.path import Profile, draw
from gridparts.recipes.base import Part, RecipeParams, require_positive
from gridparts.shapes import draw_hexihole

logger = logging.getLogger(__name__)

__all__ = ["HookParams", "build", "hook_profile", "mount_profile"]


@dataclass(frozen=True)
class HookParams(RecipeParams):
    width: float = 8.0
    height: float = 40.0
    mount_radius: float = 15.0
    thickness: float = 4.0
    ellipse_length: float = 10.0
    ellipse_radius: float = 4.0
    lip_length: float = 8.0
    fastener_diameter: float = 8.0
    fillet: float = 1.2

    ALIASES = {
        "hookWidth": "width",
        "hookHeight": "height",
        "hookMountRadius": "mount_radius",
        "hookThickness": "thickness",
        "hookEllipseLength": "ellipse_length",
        "hookEllipseRadius": "ellipse_radius",
        "hookLipLength": "lip_length",
        "hookFastenerDiameter": "fastener_diameter",
        "hookFillet": "fillet",
    }

    def __post_init__(self):
        require_positive(self, "width", "height", "mount_radius", "thickness",
                         "ellipse_length", "ellipse_radius", "lip_length",
                         "fastener_diameter", "fillet")
        if self.height <= self.mount_radius / 2.0:
            raise ValueError("HookParams.height must exceed half the mount radius")

    @property
    def mount_center_height(self) -> float:
        return self.mount_radius * math.sqrt(3.0) / 2.0


def hook_profile(params: HookParams) -> Profile:
    """Side view of the arm: up from the mount, over the curl, down to the lip."""
    t = params.thickness
    return (draw((0.0, params.mount_radius / 2.0))
            .h_line(t)
            .v_line(params.height - params.mount_radius / 2.0)
            .half_ellipse(params.ellipse_length, 0.0, params.ellipse_radius)
            .v_line(-params.lip_length)
            .h_line(t)
            .v_line(params.lip_length)
            .half_ellipse(-(params.ellipse_length + 2 * t), 0.0,
                          params.ellipse_radius + t, sweep=True)
            .close())


def mount_profile(params: HookParams) -> Profile:
    """Mounting plate: a hexagon with its lower-left vertex pulled down."""
    r = params.mount_radius

    def vertex(k: int, stretch: float = 1.0):
        angle = k * math.pi / 3.0
        return (r * math.sin(angle), stretch * r * math.cos(angle))

    pen = draw(vertex(1))
    for k in range(2, 7):
        pen = pen.line_to(vertex(k, 3.0 if k == 4 else 1.0))
    plate = profile_ops.rotate(pen.close(), 90.0)
    return profile_ops.translate(plate, 0.0, params.mount_center_height)


def _arm(params: HookParams) -> Solid:
    return fillet(extrude(hook_profile(params), "XY", params.width), params.fillet)


def _mount(params: HookParams) -> Solid:
    plate = extrude(mount_profile(params), "YZ", params.thickness)
    hole = extrude(draw_hexihole(params.fastener_diameter / 2.0, "flat-bottom"),
                   "YZ", params.thickness)
    hole = solid_ops.translate(hole, 0.0, 0.0, params.mount_center_height)
    return fillet(solid_ops.cut(plate, hole), params.fillet)


def build(params: HookParams) -> Solid:
    logger.debug("hook %g mm tall", params.height)
    return solid_ops.fuse(_arm(params), _mount(params))


def parts(params: HookParams):
    return [Part(build(params), name="hook")]
