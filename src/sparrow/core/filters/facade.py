"""Orchestrate the filter stages into one deterministic render call."""

from __future__ import annotations

import logging

from ..filter_params import FilterParameters, PostKernel
from ..pixel_buffer import PixelBuffer
from .convolution import BoundaryPolicy, convolve, detect_edges, kernel_for
from .numpy_executor import apply_tone_mapping
from .resample import pixelate

_LOGGER = logging.getLogger(__name__)


def render(
    source: PixelBuffer,
    params: FilterParameters,
    *,
    boundary: BoundaryPolicy | str = BoundaryPolicy.COPY,
) -> PixelBuffer:
    """Return a new raster with *params* applied to *source*.

    The stages always run in the same order: pixelation, tone mapping, Sobel
    edge detection, then the optional post kernel.  Tone mapping follows
    pixelation so colour filters never bleed across block boundaries.  Neither
    input is mutated and the output has the dimensions of *source*.
    """

    params = params.clamp()
    if params.show_original:
        return source.copy()

    buffer = pixelate(source, params.pixelate)
    if not params.is_tone_identity:
        buffer = apply_tone_mapping(buffer, params)
    if params.edge_detect:
        buffer = detect_edges(buffer, boundary)
    if params.post_kernel is not PostKernel.NONE:
        buffer = convolve(buffer, kernel_for(params.post_kernel), boundary)

    _LOGGER.debug(
        "Rendered %dx%d (pixelate=%d, tone=%s, edges=%s, kernel=%s)",
        buffer.width,
        buffer.height,
        params.pixelate,
        not params.is_tone_identity,
        params.edge_detect,
        params.post_kernel.value,
    )
    return buffer


__all__ = ["render"]
