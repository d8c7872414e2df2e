"""Tests for the end-to-end render call."""

import pytest

from sparrow.core.filter_params import FilterParameters, PostKernel
from sparrow.core.filters import BoundaryPolicy, apply_tone_mapping, pixelate, render
from sparrow.core.pixel_buffer import PixelBuffer


def test_default_parameters_are_byte_identical(gradient_buffer: PixelBuffer) -> None:
    result = render(gradient_buffer, FilterParameters())
    assert result.tobytes() == gradient_buffer.tobytes()
    assert result.pixels is not gradient_buffer.pixels


def test_show_original_bypasses_every_stage(gradient_buffer: PixelBuffer) -> None:
    params = FilterParameters(
        brightness=20, pixelate=3, edge_detect=True, post_kernel=PostKernel.EMBOSS, show_original=True
    )
    assert render(gradient_buffer, params) == gradient_buffer


def test_pixelation_runs_before_tone_mapping(gradient_buffer: PixelBuffer) -> None:
    params = FilterParameters(pixelate=2, sepia=70, contrast=140)
    expected = apply_tone_mapping(pixelate(gradient_buffer, 2), params)
    assert render(gradient_buffer, params) == expected


def test_render_is_deterministic_and_pure(gradient_buffer: PixelBuffer) -> None:
    before = gradient_buffer.copy()
    params = FilterParameters(
        brightness=130, hue=30, blur=1.2, pixelate=2, edge_detect=True, post_kernel=PostKernel.SHARPEN
    )
    first = render(gradient_buffer, params)
    second = render(gradient_buffer, params)
    assert first == second
    assert first.size == gradient_buffer.size
    assert gradient_buffer == before


@pytest.mark.parametrize("boundary", [BoundaryPolicy.COPY, BoundaryPolicy.TRANSPARENT])
def test_edge_detect_output_is_grey(gradient_buffer: PixelBuffer, boundary: BoundaryPolicy) -> None:
    result = render(gradient_buffer, FilterParameters(edge_detect=True), boundary=boundary)
    interior = result.pixels[1:-1, 1:-1]
    assert (interior[..., 0] == interior[..., 1]).all()
    assert (interior[..., 3] == 255).all()


def test_out_of_range_parameters_are_clamped_before_rendering(white_buffer: PixelBuffer) -> None:
    wild = FilterParameters(grayscale=500, pixelate=0, invert=float("nan"))
    assert render(white_buffer, wild) == white_buffer
