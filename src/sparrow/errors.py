"""Exception hierarchy shared by the Sparrow core and its collaborators."""

from __future__ import annotations


class SparrowError(Exception):
    """Base class for every error raised by the studio core."""


class InvalidDimensionsError(SparrowError, ValueError):
    """Raised when a raster is created with a non-positive width or height."""

    def __init__(self, width: int, height: int) -> None:
        super().__init__(f"Raster dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height


class DecodeError(SparrowError):
    """Raised when encoded image bytes cannot be turned into a raster."""


class NothingToExportError(SparrowError):
    """Raised when an export is requested before any image has been rendered."""


__all__ = [
    "DecodeError",
    "InvalidDimensionsError",
    "NothingToExportError",
    "SparrowError",
]
