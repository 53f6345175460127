"""Exception types raised by the pvflux engine.

Only entry validation and missing configuration raise. Numerical
singularities (night rows, undefined Perez bins, near-zero cos(zenith))
are resolved row by row and never abort a batch.
"""

from __future__ import annotations


class PVFluxError(Exception):
    """Base class for all pvflux errors."""


class InputValidationError(PVFluxError, ValueError):
    """Raised when inputs are rejected before any computation starts.

    Attributes:
        field: Name of the offending argument (e.g. "lat", "ghi").
        reason: Why the value was rejected.
    """

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid input for '{field}': {reason}")


class TurbidityDatabaseError(PVFluxError, FileNotFoundError):
    """Raised when the Linke turbidity grid cannot be located or read.

    This is a configuration error: there is no silent fallback to
    :func:`pvflux.solar.turbidity.simple_linke_turbidity`.
    """

    def __init__(
        self,
        path: str | None,
        suggestion: str | None = None,
        reason: str = "not found",
    ):
        self.path = path
        self.reason = reason
        message = (
            f"Linke turbidity database {reason}: {path}"
            if path
            else "No Linke turbidity database configured"
        )
        if suggestion:
            message += f"\n{suggestion}"
        super().__init__(message)
