"""Tests for the owned RGBA raster."""

import numpy as np
import pytest

from sparrow.core.pixel_buffer import PixelBuffer
from sparrow.errors import InvalidDimensionsError, SparrowError


@pytest.mark.parametrize("width, height", [(0, 4), (4, 0), (-1, 3)])
def test_non_positive_dimensions_are_rejected(width: int, height: int) -> None:
    with pytest.raises(InvalidDimensionsError) as excinfo:
        PixelBuffer(width, height)
    assert isinstance(excinfo.value, SparrowError)
    assert isinstance(excinfo.value, ValueError)


def test_new_buffer_is_transparent_black() -> None:
    buffer = PixelBuffer(3, 2)
    assert buffer.size == (3, 2)
    assert buffer.pixels.shape == (2, 3, 4)
    assert buffer.get_pixel(2, 1) == (0, 0, 0, 0)


def test_constructor_copies_caller_array() -> None:
    array = np.full((2, 2, 4), 10, dtype=np.uint8)
    buffer = PixelBuffer(2, 2, array)
    array[0, 0] = 99
    assert buffer.get_pixel(0, 0) == (10, 10, 10, 10)


def test_shape_mismatch_is_rejected() -> None:
    with pytest.raises(ValueError):
        PixelBuffer(3, 3, np.zeros((2, 3, 4), dtype=np.uint8))


def test_copy_does_not_alias() -> None:
    original = PixelBuffer.filled(2, 2, (1, 2, 3, 4))
    clone = original.copy()
    clone.set_pixel(0, 0, (9, 9, 9, 9))
    assert original.get_pixel(0, 0) == (1, 2, 3, 4)
    assert clone != original


def test_set_pixel_validates_channels_and_bounds() -> None:
    buffer = PixelBuffer(2, 2)
    with pytest.raises(ValueError):
        buffer.set_pixel(0, 0, (0, 0, 256, 0))
    with pytest.raises(ValueError):
        buffer.set_pixel(0, 0, (0, 0, 0))
    with pytest.raises(IndexError):
        buffer.get_pixel(2, 0)


def test_equality_compares_size_and_pixels() -> None:
    a = PixelBuffer.filled(2, 3, (5, 5, 5, 255))
    b = PixelBuffer.filled(2, 3, (5, 5, 5, 255))
    c = PixelBuffer.filled(3, 2, (5, 5, 5, 255))
    assert a == b
    assert a != c
    assert repr(a) == "PixelBuffer(2x3)"
