"""Error and warning types raised by the layout and aspect engines."""

from __future__ import annotations

from typing import Iterable, List

__all__ = ["DegenerateGeometryWarning", "ValidationError"]


class ValidationError(ValueError):
    """Raised when caller supplied points or chart data are malformed."""

    def __init__(self, errors: Iterable[str] | str):
        if isinstance(errors, str):
            errors = [errors]
        self.errors: List[str] = list(errors)
        super().__init__("; ".join(self.errors))


class DegenerateGeometryWarning(RuntimeWarning):
    """Issued when the minimum separation cannot be honoured on the circle."""
