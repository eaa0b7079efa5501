"""Thread catalog data for threaded parts.

Quick Start:
    >>> from gridparts.fasteners import get_thread_data
    >>> get_thread_data("M8")["pitch"]
    1.25

Set ``GRIDPARTS_THREAD_DATA`` to add catalog directories searched before
the bundled data.
"""

from __future__ import annotations

from .catalog import (
    GRIDPARTS_THREAD_DATA,
    THREAD_SERIES,
    clear_cache,
    get_thread_data,
    list_available_sizes,
    load_catalog,
    metric_size_for,
)

__all__ = [
    "GRIDPARTS_THREAD_DATA",
    "THREAD_SERIES",
    "clear_cache",
    "get_thread_data",
    "list_available_sizes",
    "load_catalog",
    "metric_size_for",
]
