"""Exception types raised by the geometry core."""
from __future__ import annotations


class UnsupportedCurveError(NotImplementedError):
    """Raised when a query has no implementation for a curve type (e.g. NURBS).

    Distinct from a ``False`` answer: callers must not treat an unsupported
    curve as "not containing" or "not on curve".
    """

    def __init__(self, operation: str, obj) -> None:
        self.operation = operation
        self.type_name = type(obj).__name__
        super().__init__(f"{operation} is not implemented for {self.type_name}")


__all__ = ['UnsupportedCurveError']
