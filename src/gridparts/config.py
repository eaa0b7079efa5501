"""Environment driven settings and logging setup.

Environment Variables:
    GRIDPARTS_TOLERANCE: geometric tolerance in millimetres (default 1e-6)
    GRIDPARTS_SEAM_OFFSET_DEG: rotation applied to helical sweeps so the
        thread start stays off a coaxial cylinder's seam (default 2.0)
    GRIDPARTS_EDGE_SAMPLES: points sampled along each edge for edge
        predicates (default 16)
    GRIDPARTS_LOG_LEVEL: level used by :func:`configure_logging`
    GRIDPARTS_THREAD_DATA: extra directories (``os.pathsep`` separated)
        searched for thread catalog YAML files before the bundled data
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

__all__ = [
    "Settings",
    "get_settings",
    "reload_settings",
    "configure_logging",
    "GRIDPARTS_THREAD_DATA",
]

GRIDPARTS_THREAD_DATA = "GRIDPARTS_THREAD_DATA"

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    tolerance: float = 1e-6
    seam_offset_deg: float = 2.0
    edge_samples: int = 16
    log_level: str = "WARNING"


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@lru_cache(maxsize=None)
def get_settings() -> Settings:
    """Return the process-wide settings, read once from the environment."""

    settings = Settings(
        tolerance=_env_float("GRIDPARTS_TOLERANCE", Settings.tolerance),
        seam_offset_deg=_env_float("GRIDPARTS_SEAM_OFFSET_DEG", Settings.seam_offset_deg),
        edge_samples=_env_int("GRIDPARTS_EDGE_SAMPLES", Settings.edge_samples),
        log_level=os.environ.get("GRIDPARTS_LOG_LEVEL", Settings.log_level).upper(),
    )
    if settings.tolerance <= 0:
        raise ValueError("GRIDPARTS_TOLERANCE must be positive")
    if settings.edge_samples < 2:
        raise ValueError("GRIDPARTS_EDGE_SAMPLES must be >= 2")
    return settings


def reload_settings() -> Settings:
    """Drop cached settings and re-read the environment."""

    get_settings.cache_clear()
    return get_settings()


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach a stream handler to the package logger.

    Hosts that manage logging themselves should skip this; the package only
    installs a ``NullHandler`` on import.
    """

    logger = logging.getLogger("gridparts")
    resolved = (level or get_settings().log_level).upper()
    logger.setLevel(resolved)
    if not any(isinstance(h, logging.StreamHandler) and not isinstance(h, logging.NullHandler)
               for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        logger.addHandler(handler)
    return logger
