"""ISO metric thread geometry for gridparts."""

from __future__ import annotations

import math
from dataclasses import dataclass

from gridparts.path import Profile, draw

__all__ = [
    "IsoThread",
    "thread_height",
    "minor_diameter",
    "metric_thread",
]


def thread_height(pitch: float) -> float:
    """Height ``H`` of the fundamental triangle, ``sqrt(3)/2 * P``."""
    return math.sqrt(3.0) / 2.0 * pitch


def minor_diameter(major_diameter: float, pitch: float) -> float:
    """Basic minor diameter ``D - 2 * 5/8 * H``."""
    return major_diameter - 2.0 * (5.0 / 8.0) * thread_height(pitch)


@dataclass(frozen=True)
class IsoThread:
    major_diameter: float
    pitch: float

    def __post_init__(self):
        if self.pitch <= 0:
            raise ValueError("pitch must be positive")
        if self.minor_diameter <= 0:
            raise ValueError(
                f"pitch {self.pitch:g} is too coarse for a {self.major_diameter:g} mm thread")

    @property
    def height(self) -> float:
        return thread_height(self.pitch)

    @property
    def depth(self) -> float:
        """Radial depth of the cut profile, ``5/8 * H``."""
        return 5.0 / 8.0 * self.height

    @property
    def minor_diameter(self) -> float:
        return minor_diameter(self.major_diameter, self.pitch)

    def section(self) -> Profile:
        """One pitch of tooth cross-section.

        Local ``x`` runs along the thread axis over ``[0, P]`` and local ``y``
        radially outward from the minor diameter.  The root flats of width
        ``P/8`` on either side carry no area and are left out, so the loop
        is the trapezoid between them with a crest flat of ``P/8``.
        """
        p = self.pitch
        depth = self.depth
        return (draw((2.0 / 16.0 * p, 0.0))
                .line_to((7.0 / 16.0 * p, depth))
                .line_to((9.0 / 16.0 * p, depth))
                .line_to((14.0 / 16.0 * p, 0.0))
                .close())


def metric_thread(major_diameter: float, pitch: float) -> IsoThread:
    return IsoThread(float(major_diameter), float(pitch))
