"""Tests for nearest-neighbour resampling and pixelation."""

import numpy as np
import pytest

from sparrow.core.filters import pixelate, resample_nearest
from sparrow.core.pixel_buffer import PixelBuffer


def test_solid_red_pixelate_two_is_unchanged() -> None:
    red = PixelBuffer.filled(4, 4, (255, 0, 0, 255))
    result = pixelate(red, 2)
    assert result == red
    assert result is not red


@pytest.mark.parametrize("factor", [1, 2, 3, 5, 7])
def test_uniform_colour_is_idempotent(factor: int) -> None:
    solid = PixelBuffer.filled(7, 7, (12, 200, 34, 128))
    assert pixelate(solid, factor) == solid


@pytest.mark.parametrize("factor", [1, 0, -3, 0.5, float("nan")])
def test_factor_one_or_less_returns_copy(gradient_buffer: PixelBuffer, factor: float) -> None:
    result = pixelate(gradient_buffer, factor)
    assert result == gradient_buffer
    result.set_pixel(0, 0, (1, 1, 1, 1))
    assert gradient_buffer.get_pixel(0, 0) != (1, 1, 1, 1)


def test_pixelate_produces_uniform_blocks() -> None:
    array = np.arange(4 * 4 * 4, dtype=np.uint8).reshape((4, 4, 4))
    result = pixelate(PixelBuffer.from_array(array), 2)
    pixels = result.pixels
    for by in (0, 2):
        for bx in (0, 2):
            block = pixels[by : by + 2, bx : bx + 2]
            assert (block == block[0, 0]).all()
    # The sampled pixel of every block is its centre-adjacent source pixel.
    assert result.get_pixel(0, 0) == tuple(int(v) for v in array[1, 1])


def test_factor_larger_than_image_collapses_to_one_colour(gradient_buffer: PixelBuffer) -> None:
    result = pixelate(gradient_buffer, 100)
    assert result.size == gradient_buffer.size
    first = result.get_pixel(0, 0)
    assert all(result.get_pixel(x, y) == first for x in range(7) for y in range(5))


def test_resample_nearest_keeps_exact_colours(gradient_buffer: PixelBuffer) -> None:
    small = resample_nearest(gradient_buffer, 3, 2)
    assert small.size == (3, 2)
    source_colours = {tuple(p) for p in gradient_buffer.pixels.reshape(-1, 4).tolist()}
    for p in small.pixels.reshape(-1, 4).tolist():
        assert tuple(p) in source_colours
