"""Shared plumbing for part recipes: parameter parsing and results."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, ClassVar, Dict, Mapping, Optional

from gridparts.brep import Solid

logger = logging.getLogger(__name__)

__all__ = ["Part", "RecipeParams", "require_positive", "require_non_negative"]


@dataclass(frozen=True)
class Part:
    """One finished body and the colour a host should display it in."""

    solid: Solid
    color: Optional[str] = None
    name: str = ""


class RecipeParams:
    """Mixin for frozen parameter dataclasses.

    ``ALIASES`` maps the camelCase names hosts send (``gridSpacingInMm``) to
    field names (``grid_spacing``).  Either spelling is accepted by
    :meth:`from_mapping`; anything else is a ``ValueError``.
    """

    ALIASES: ClassVar[Dict[str, str]] = {}

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, Any]] = None):
        names = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in (mapping or {}).items():
            name = cls.ALIASES.get(key, key)
            if name not in names:
                raise ValueError(f"{cls.__name__}: unknown parameter {key!r}")
            if name in kwargs:
                raise ValueError(f"{cls.__name__}: parameter {name!r} given twice")
            kwargs[name] = value
        return cls(**kwargs)

    def as_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def require_positive(params, *names: str) -> None:
    for name in names:
        if not getattr(params, name) > 0:
            raise ValueError(f"{type(params).__name__}.{name} must be positive")


def require_non_negative(params, *names: str) -> None:
    for name in names:
        if getattr(params, name) < 0:
            raise ValueError(f"{type(params).__name__}.{name} must not be negative")
