"""Part recipes and the host entry point.

Each family module defines a frozen parameter dataclass, ``build(params)``
returning one :class:`~gridparts.brep.Solid` and ``parts(params)`` returning
the list of :class:`~gridparts.recipes.base.Part` a host displays::

    >>> from gridparts.recipes import build_part
    >>> parts = build_part("beam", {"lengthInGrids": 3})  # doctest: +SKIP
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from . import (
    beam,
    bracket,
    container,
    cup_holder,
    cutting_jig,
    dowel_holder,
    hinge,
    hook,
    threaded_fastener,
)
from .base import Part

logger = logging.getLogger(__name__)

RECIPE_REGISTRY = {
    'beam': (beam, beam.BeamParams),
    'bracket': (bracket, bracket.BracketParams),
    'container': (container, container.ContainerParams),
    'cup_holder': (cup_holder, cup_holder.CupHolderParams),
    'cutting_jig': (cutting_jig, cutting_jig.CuttingJigParams),
    'dowel_holder': (dowel_holder, dowel_holder.DowelHolderParams),
    'hinge': (hinge, hinge.HingeParams),
    'hook': (hook, hook.HookParams),
    'threaded_fastener': (threaded_fastener, threaded_fastener.ThreadedFastenerParams),
}


def _key(name: str) -> str:
    return name.strip().lower().replace('-', '_')


def get_recipe(name: str):
    """Return ``(module, params_class)`` for a family name like ``"cup-holder"``."""
    try:
        return RECIPE_REGISTRY[_key(name)]
    except KeyError:
        raise ValueError(f"unknown part {name!r}; expected one of {sorted(RECIPE_REGISTRY)}") from None


def available_parts() -> List[str]:
    return sorted(RECIPE_REGISTRY)


def default_params(name: str):
    _, params_class = get_recipe(name)
    return params_class()


def build_part(name: str, params: Optional[Mapping[str, Any]] = None) -> List[Part]:
    """Build the part family ``name`` from a flat mapping of parameters.

    Missing parameters take their documented defaults; unknown names raise
    ``ValueError`` before any geometry is built.  Construction errors
    propagate unchanged and no partial result is returned.
    """
    module, params_class = get_recipe(name)
    parsed = params_class.from_mapping(params)
    logger.info("building %s", _key(name))
    return module.parts(parsed)


__all__ = ['Part', 'RECIPE_REGISTRY', 'available_parts', 'build_part', 'default_params',
           'get_recipe']
