"""Owned RGBA8 raster storage used by every stage of the filter pipeline."""

from __future__ import annotations

from typing import Iterable

import numpy as np

from ..errors import InvalidDimensionsError

RGBA = tuple[int, int, int, int]


class PixelBuffer:
    """Fixed-size RGBA8 raster backed by a ``(height, width, 4)`` uint8 array.

    The buffer owns its storage.  Every constructor path either allocates a new
    array or copies the caller's data, so two buffers never alias each other.
    Pipeline stages that have just produced a fresh array use :meth:`_adopt`
    to skip the redundant copy.
    """

    __slots__ = ("_pixels",)

    def __init__(self, width: int, height: int, pixels: np.ndarray | None = None) -> None:
        width = int(width)
        height = int(height)
        if width <= 0 or height <= 0:
            raise InvalidDimensionsError(width, height)

        if pixels is None:
            self._pixels = np.zeros((height, width, 4), dtype=np.uint8)
            return

        array = np.asarray(pixels)
        if array.shape != (height, width, 4):
            raise ValueError(
                f"Pixel array shape {array.shape} does not match {width}x{height} RGBA"
            )
        self._pixels = np.array(array, dtype=np.uint8, copy=True, order="C")

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------
    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        """Copy *array* (``H x W x 4`` uint8) into a new buffer."""

        array = np.asarray(array)
        if array.ndim != 3 or array.shape[2] != 4:
            raise ValueError(f"Expected an (H, W, 4) array, got shape {array.shape}")
        return cls(array.shape[1], array.shape[0], array)

    @classmethod
    def filled(cls, width: int, height: int, rgba: Iterable[int]) -> "PixelBuffer":
        """Return a buffer where every pixel equals *rgba*."""

        buffer = cls(width, height)
        buffer._pixels[...] = np.asarray(_validate_rgba(rgba), dtype=np.uint8)
        return buffer

    @classmethod
    def _adopt(cls, array: np.ndarray) -> "PixelBuffer":
        """Wrap a freshly allocated array without copying it."""

        if array.ndim != 3 or array.shape[2] != 4 or array.dtype != np.uint8:
            raise ValueError(f"Cannot adopt array of shape {array.shape} / {array.dtype}")
        height, width = array.shape[:2]
        if width <= 0 or height <= 0:
            raise InvalidDimensionsError(width, height)
        buffer = cls.__new__(cls)
        buffer._pixels = np.ascontiguousarray(array)
        return buffer

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def width(self) -> int:
        return int(self._pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self._pixels.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        """Return ``(width, height)``."""

        return self.width, self.height

    @property
    def pixels(self) -> np.ndarray:
        """Direct, writable view of the backing array."""

        return self._pixels

    def get_pixel(self, x: int, y: int) -> RGBA:
        self._check_bounds(x, y)
        r, g, b, a = self._pixels[y, x]
        return int(r), int(g), int(b), int(a)

    def set_pixel(self, x: int, y: int, rgba: Iterable[int]) -> None:
        self._check_bounds(x, y)
        self._pixels[y, x] = _validate_rgba(rgba)

    def copy(self) -> "PixelBuffer":
        return PixelBuffer._adopt(self._pixels.copy())

    def to_array(self) -> np.ndarray:
        """Return an independent copy of the pixel array."""

        return self._pixels.copy()

    def tobytes(self) -> bytes:
        return self._pixels.tobytes()

    # ------------------------------------------------------------------
    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} raster")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.size == other.size and np.array_equal(self._pixels, other._pixels)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"PixelBuffer({self.width}x{self.height})"


def _validate_rgba(rgba: Iterable[int]) -> RGBA:
    values = tuple(int(channel) for channel in rgba)
    if len(values) != 4:
        raise ValueError(f"Expected 4 channels, got {len(values)}")
    if any(channel < 0 or channel > 255 for channel in values):
        raise ValueError(f"Channel values must lie in [0, 255], got {values}")
    return values  # type: ignore[return-value]


__all__ = ["PixelBuffer", "RGBA"]
