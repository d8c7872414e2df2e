"""Tests for 3x3 convolution and Sobel edge detection."""

import numpy as np
import pytest

from sparrow.core.filter_params import PostKernel
from sparrow.core.filters import BoundaryPolicy, convolve, detect_edges, kernel_for
from sparrow.core.filters.convolution import IDENTITY_KERNEL, SHARPEN_KERNEL
from sparrow.core.pixel_buffer import PixelBuffer


def _opaque(buffer: PixelBuffer) -> PixelBuffer:
    array = buffer.to_array()
    array[..., 3] = 255
    return PixelBuffer.from_array(array)


def test_identity_kernel_leaves_interior_unchanged(gradient_buffer: PixelBuffer) -> None:
    source = _opaque(gradient_buffer)
    result = convolve(source, IDENTITY_KERNEL)
    assert np.array_equal(result.pixels[1:-1, 1:-1], source.pixels[1:-1, 1:-1])


def test_copy_boundary_keeps_outer_ring(gradient_buffer: PixelBuffer) -> None:
    result = convolve(gradient_buffer, SHARPEN_KERNEL, BoundaryPolicy.COPY)
    source = gradient_buffer.pixels
    assert np.array_equal(result.pixels[0], source[0])
    assert np.array_equal(result.pixels[-1], source[-1])
    assert np.array_equal(result.pixels[:, 0], source[:, 0])
    assert np.array_equal(result.pixels[:, -1], source[:, -1])


def test_transparent_boundary_zeroes_outer_ring(gradient_buffer: PixelBuffer) -> None:
    result = convolve(gradient_buffer, SHARPEN_KERNEL, "transparent")
    ring = np.ones((5, 7), dtype=bool)
    ring[1:-1, 1:-1] = False
    assert not result.pixels[ring].any()


def test_interior_becomes_opaque(gradient_buffer: PixelBuffer) -> None:
    result = convolve(gradient_buffer, kernel_for(PostKernel.BLUR))
    assert (result.pixels[1:-1, 1:-1, 3] == 255).all()


def test_box_blur_is_normalised() -> None:
    uniform = PixelBuffer.filled(5, 5, (60, 120, 180, 255))
    assert convolve(uniform, kernel_for("Blur")) == uniform


def test_sharpen_clamps_results() -> None:
    array = np.zeros((3, 3, 4), dtype=np.uint8)
    array[..., 3] = 255
    array[1, 1, :3] = 200
    result = convolve(PixelBuffer.from_array(array), SHARPEN_KERNEL)
    assert result.get_pixel(1, 1) == (255, 255, 255, 255)


@pytest.mark.parametrize("size", [(1, 1), (2, 5), (5, 2)])
def test_degenerate_buffers_are_copied(size: tuple[int, int]) -> None:
    buffer = PixelBuffer.filled(*size, (1, 2, 3, 4))
    assert convolve(buffer, SHARPEN_KERNEL) == buffer
    assert detect_edges(buffer) == buffer


def test_kernel_needs_nine_weights(white_buffer: PixelBuffer) -> None:
    with pytest.raises(ValueError):
        convolve(white_buffer, [1, 2, 3])


def test_input_is_not_mutated(gradient_buffer: PixelBuffer) -> None:
    before = gradient_buffer.copy()
    convolve(gradient_buffer, kernel_for(PostKernel.EMBOSS), BoundaryPolicy.TRANSPARENT)
    detect_edges(gradient_buffer)
    assert gradient_buffer == before


def test_sobel_on_uniform_image_is_zero() -> None:
    uniform = PixelBuffer.filled(6, 6, (90, 30, 200, 255))
    result = detect_edges(uniform)
    interior = result.pixels[1:-1, 1:-1]
    assert not interior[..., :3].any()
    assert (interior[..., 3] == 255).all()


def test_sobel_checkerboard_marks_only_boundaries(checkerboard: PixelBuffer) -> None:
    result = detect_edges(checkerboard, BoundaryPolicy.TRANSPARENT)
    magnitude = result.pixels[..., 0]

    # Pixels beside the colour seams (rows and columns 3 and 4) see a gradient.
    assert magnitude[3, 1] > 0
    assert magnitude[1, 4] > 0
    assert magnitude[4, 4] > 0
    # Pixels two away from any seam sit in a uniform neighbourhood.
    assert magnitude[1, 1] == 0
    assert magnitude[1, 6] == 0
    assert magnitude[6, 1] == 0
    assert magnitude[6, 6] == 0
    # Output is grey.
    assert np.array_equal(result.pixels[..., 0], result.pixels[..., 1])
    assert np.array_equal(result.pixels[..., 0], result.pixels[..., 2])


def test_sobel_boundary_policies(checkerboard: PixelBuffer) -> None:
    copied = detect_edges(checkerboard)
    cleared = detect_edges(checkerboard, BoundaryPolicy.TRANSPARENT)
    assert np.array_equal(copied.pixels[0], checkerboard.pixels[0])
    assert not cleared.pixels[0].any()
    assert np.array_equal(copied.pixels[1:-1, 1:-1], cleared.pixels[1:-1, 1:-1])


def test_boundary_policy_coerce() -> None:
    assert BoundaryPolicy.coerce(" Transparent ") is BoundaryPolicy.TRANSPARENT
    with pytest.raises(ValueError):
        BoundaryPolicy.coerce("wrap")
