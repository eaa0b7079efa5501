"""Thread catalog loading with bundled data and external override support.

Catalogs are YAML files named ``<series>.yaml``.  Directories listed in
the ``GRIDPARTS_THREAD_DATA`` environment variable (``os.pathsep``
separated) are searched before the bundled ``data`` directory, so a shop
can supply its own pitches without touching the package.

Example:
    export GRIDPARTS_THREAD_DATA="/path/to/my/threads"
"""

from __future__ import annotations

import logging
import math
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from gridparts.config import GRIDPARTS_THREAD_DATA

logger = logging.getLogger(__name__)

__all__ = [
    "GRIDPARTS_THREAD_DATA",
    "THREAD_SERIES",
    "load_catalog",
    "list_available_sizes",
    "get_thread_data",
    "metric_size_for",
    "clear_cache",
]

_BUNDLED_DATA_DIR = Path(__file__).parent / "data"

THREAD_SERIES = {
    "metric_coarse": "ISO metric coarse thread (M series)",
}


def clear_cache() -> None:
    """Forget loaded catalogs; call after editing external catalog files."""
    _data_dirs.cache_clear()
    _load_catalog_cached.cache_clear()


@lru_cache(maxsize=None)
def _data_dirs() -> Tuple[Path, ...]:
    dirs: List[Path] = []
    env_path = os.environ.get(GRIDPARTS_THREAD_DATA)
    if env_path:
        for p in env_path.split(os.pathsep):
            p = p.strip()
            if p:
                path = Path(p).expanduser().resolve()
                if path.is_dir():
                    dirs.append(path)
                else:
                    logger.warning("%s entry %s is not a directory", GRIDPARTS_THREAD_DATA, path)
    if _BUNDLED_DATA_DIR.is_dir():
        dirs.append(_BUNDLED_DATA_DIR)
    return tuple(dirs)


@lru_cache(maxsize=16)
def _load_catalog_cached(thread_series: str, custom_path_str: Optional[str]) -> Dict[str, Any]:
    if custom_path_str:
        path = Path(custom_path_str)
        if not path.exists():
            raise FileNotFoundError(f"Custom catalog not found: {path}")
        return _load_yaml(path)

    filename = f"{thread_series}.yaml"
    for data_dir in _data_dirs():
        path = data_dir / filename
        if path.exists():
            return _load_yaml(path)

    searched = [str(d) for d in _data_dirs()]
    raise FileNotFoundError(
        f"No catalog found for '{thread_series}'. Searched directories: {searched}"
    )


def _load_yaml(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Invalid catalog format in {path}: expected a mapping at the root")
    schema_version = str(data.get("schema_version", "1.0"))
    if not schema_version.startswith("1."):
        raise ValueError(f"Unsupported schema version '{schema_version}' in {path}")
    sizes = data.get("sizes")
    if not isinstance(sizes, dict) or not sizes:
        raise ValueError(f"Catalog {path} has no 'sizes' section")
    for size, entry in sizes.items():
        if not isinstance(entry, dict) or "pitch" not in entry:
            raise ValueError(f"Catalog {path}: size {size!r} has no pitch")
        if float(entry["pitch"]) <= 0:
            raise ValueError(f"Catalog {path}: size {size!r} has a non-positive pitch")

    data["_source_path"] = str(path)
    logger.debug("loaded thread catalog %s (%d sizes)", path, len(sizes))
    return data


def load_catalog(thread_series: str = "metric_coarse",
                 custom_path: Optional[Path] = None) -> Dict[str, Any]:
    """Load and cache the catalog for ``thread_series``.

    Raises
    ------
    ValueError
        Unknown series or malformed file.
    FileNotFoundError
        No catalog file in any searched directory.
    """
    if thread_series not in THREAD_SERIES:
        raise ValueError(
            f"Unknown thread series '{thread_series}'. Available: {list(THREAD_SERIES)}"
        )
    return _load_catalog_cached(thread_series, str(custom_path) if custom_path else None)


def list_available_sizes(thread_series: str = "metric_coarse",
                         custom_path: Optional[Path] = None) -> List[str]:
    sizes = load_catalog(thread_series, custom_path)["sizes"]
    return sorted(sizes, key=lambda s: float(sizes[s].get("nominal_diameter", 0)))


def get_thread_data(size: str, thread_series: str = "metric_coarse",
                    custom_path: Optional[Path] = None) -> Dict[str, Any]:
    """Dimensions for ``size`` (e.g. ``"M8"``); raises ``KeyError`` if absent."""
    sizes = load_catalog(thread_series, custom_path)["sizes"]
    for key in (size, size.upper(), size.lower()):
        if key in sizes:
            return dict(sizes[key])
    raise KeyError(f"Size '{size}' not found in {thread_series}. "
                   f"Available sizes: {list_available_sizes(thread_series, custom_path)}")


def metric_size_for(diameter: float) -> str:
    """Catalog key of a metric thread: the diameter rounded down, ``8.4 -> "M8"``."""
    if diameter <= 0:
        raise ValueError("thread diameter must be positive")
    return f"M{math.floor(diameter)}"
