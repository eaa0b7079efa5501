"""
Exceptions raised by the gridparts construction pipeline.

Every failure surfaces to the recipe caller unchanged: the pipeline never
retries and never approximates a radius, profile or boolean result.

- GeometryError: malformed 2D path (degenerate segment, infeasible corner)
- FormingError: profile to solid lift rejected by the kernel
- BooleanError: fuse/cut/intersect failed or produced nothing
- FilletError: rounding radius infeasible at the selected edges
- ConsumedSolidError: a Solid handle was used after an operation consumed it
- KernelUnavailableError: pythonocc-core is not importable
"""

from contextlib import contextmanager
from typing import Optional, Type


class GridPartsError(Exception):
    """Base class for all gridparts failures."""


class GeometryError(GridPartsError):
    """A 2D path operation would produce a malformed profile."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 index: Optional[int] = None):
        self.operation = operation
        self.index = index
        prefix = ""
        if operation is not None:
            prefix = f"{operation}"
            if index is not None:
                prefix += f" (segment {index})"
            prefix += ": "
        super().__init__(prefix + message)


class FormingError(GridPartsError):
    """The kernel rejected a profile to solid construction."""

    def __init__(self, message: str, operation: str, subject: Optional[str] = None):
        self.operation = operation
        self.subject = subject
        detail = f" [{subject}]" if subject else ""
        super().__init__(f"{operation}{detail}: {message}")


class BooleanError(GridPartsError):
    """A boolean combination failed or produced an empty result."""

    def __init__(self, message: str, operation: str):
        self.operation = operation
        super().__init__(f"{operation}: {message}")


class FilletError(GridPartsError):
    """A rounding (or chamfer) radius is not realizable at the selected edges."""

    def __init__(self, message: str, radius: Optional[float] = None,
                 group: Optional[int] = None, operation: str = "fillet"):
        self.radius = radius
        self.group = group
        self.operation = operation
        parts = [operation]
        if group is not None:
            parts.append(f"group {group}")
        if radius is not None:
            parts.append(f"radius {radius:g}")
        super().__init__(f"{' '.join(parts)}: {message}")


class ConsumedSolidError(GridPartsError, RuntimeError):
    """A Solid (or an EdgeSet derived from it) was used after being consumed."""


class KernelUnavailableError(GridPartsError, RuntimeError):
    """pythonocc-core could not be imported."""


@contextmanager
def kernel_errors(operation: str, subject: Optional[str] = None,
                  error: Type[GridPartsError] = FormingError):
    """Re-raise kernel failures inside the block as ``error``.

    pythonocc-core surfaces ``Standard_Failure`` and ``StdFail_NotDone`` from
    builder constructors, ``Build()`` and ``Shape()`` as ``RuntimeError``.
    gridparts errors raised inside the block pass through unchanged.
    ``error`` is :class:`FormingError` or :class:`BooleanError`.
    """
    try:
        yield
    except GridPartsError:
        raise
    except RuntimeError as exc:
        message = f"kernel raised {type(exc).__name__}: {exc}"
        if error is FormingError:
            raise FormingError(message, operation, subject) from exc
        raise error(message, operation) from exc


__all__ = [
    "GridPartsError",
    "GeometryError",
    "FormingError",
    "BooleanError",
    "FilletError",
    "ConsumedSolidError",
    "KernelUnavailableError",
    "kernel_errors",
]
