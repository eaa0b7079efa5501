"""Threaded rod with an ISO metric coarse thread.

The tooth section is swept along a helix on the minor diameter, one
pitch taller than the rod.  The tooth hangs one pitch below the helix
start, and the part below ``z = 0`` is trimmed off so the thread ends
flush with the rod's base.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from gridparts import solid_ops
from gridparts.brep import Solid
from gridparts.fasteners.catalog import get_thread_data, metric_size_for
from gridparts.forming import helical_sweep, make_cylinder
from gridparts.recipes.base import Part, RecipeParams, require_positive
from gridparts.threadgen import IsoThread, metric_thread

logger = logging.getLogger(__name__)

__all__ = ["ThreadedFastenerParams", "build", "thread_for"]


@dataclass(frozen=True)
class ThreadedFastenerParams(RecipeParams):
    diameter: float = 8.0
    length: float = 20.0

    def __post_init__(self):
        require_positive(self, "diameter", "length")


def thread_for(diameter: float) -> IsoThread:
    """Thread geometry with the catalog pitch of ``M<floor(diameter)>``."""
    data = get_thread_data(metric_size_for(diameter))
    return metric_thread(diameter, data["pitch"])


def _thread(thread: IsoThread, length: float) -> Solid:
    pitch = thread.pitch
    coil = helical_sweep(thread.section(), pitch, length + pitch, thread.minor_diameter / 2.0)
    trim = make_cylinder(thread.major_diameter / 2.0, pitch, base=(0.0, 0.0, -pitch))
    return solid_ops.cut(coil, trim)


def build(params: ThreadedFastenerParams) -> Solid:
    thread = thread_for(params.diameter)
    core = make_cylinder(thread.minor_diameter / 2.0, params.length)
    logger.debug("threaded rod M%g x %g, pitch %g", params.diameter, params.length, thread.pitch)
    return solid_ops.fuse(core, _thread(thread, params.length), same_face=True)


def parts(params: ThreadedFastenerParams):
    return [Part(build(params), name="threaded-fastener")]
