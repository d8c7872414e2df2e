"""Generic 3x3 convolution and Sobel edge detection.

Both operations share one boundary policy.  A 3x3 window cannot be centred on
the outermost 1-pixel ring, so the ring is either copied through from the
input (:attr:`BoundaryPolicy.COPY`, the default) or left fully transparent
black (:attr:`BoundaryPolicy.TRANSPARENT`), matching a browser canvas that
never writes those pixels.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Mapping, Sequence

import numpy as np

from ..filter_params import PostKernel
from ..pixel_buffer import PixelBuffer
from .algorithms import normalise_kernel
from .jit_executor import convolve_fast, sobel_fast

_LOGGER = logging.getLogger(__name__)

IDENTITY_KERNEL = (0, 0, 0, 0, 1, 0, 0, 0, 0)
SHARPEN_KERNEL = (0, -1, 0, -1, 5, -1, 0, -1, 0)
BOX_BLUR_KERNEL = (1, 1, 1, 1, 1, 1, 1, 1, 1)
EMBOSS_KERNEL = (-2, -1, 0, -1, 1, 1, 0, 1, 2)

KERNELS: Mapping[PostKernel, tuple[int, ...]] = {
    PostKernel.NONE: IDENTITY_KERNEL,
    PostKernel.SHARPEN: SHARPEN_KERNEL,
    PostKernel.BLUR: BOX_BLUR_KERNEL,
    PostKernel.EMBOSS: EMBOSS_KERNEL,
}


class BoundaryPolicy(str, Enum):
    """What the outermost ring of pixels contains after a 3x3 pass."""

    COPY = "copy"
    TRANSPARENT = "transparent"

    @classmethod
    def coerce(cls, value: "BoundaryPolicy | str") -> "BoundaryPolicy":
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


def kernel_for(kernel: PostKernel | str) -> tuple[int, ...]:
    """Return the weights for a named post kernel (``NONE`` maps to identity)."""

    return KERNELS[PostKernel.coerce(kernel)]


def _prepare_output(buffer: PixelBuffer, boundary: BoundaryPolicy) -> np.ndarray:
    if boundary is BoundaryPolicy.COPY:
        return buffer.to_array()
    return np.zeros_like(buffer.pixels)


def _has_interior(buffer: PixelBuffer) -> bool:
    return buffer.width >= 3 and buffer.height >= 3


def convolve(
    buffer: PixelBuffer,
    kernel: Sequence[float],
    boundary: BoundaryPolicy | str = BoundaryPolicy.COPY,
) -> PixelBuffer:
    """Convolve *buffer* with a normalised 3x3 *kernel*.

    Interior pixels receive the clamped weighted sum of their neighbourhood on
    each colour channel and become fully opaque.  Buffers without an interior
    come back as an unchanged copy.
    """

    weights = normalise_kernel(kernel)
    if not _has_interior(buffer):
        return buffer.copy()

    policy = BoundaryPolicy.coerce(boundary)
    output = _prepare_output(buffer, policy)
    convolve_fast(buffer.pixels, weights, output)
    _LOGGER.debug("Convolved %dx%d raster (boundary=%s)", buffer.width, buffer.height, policy.value)
    return PixelBuffer._adopt(output)


def detect_edges(
    buffer: PixelBuffer,
    boundary: BoundaryPolicy | str = BoundaryPolicy.COPY,
) -> PixelBuffer:
    """Return the grayscale Sobel gradient magnitude of *buffer*."""

    if not _has_interior(buffer):
        return buffer.copy()

    policy = BoundaryPolicy.coerce(boundary)
    output = _prepare_output(buffer, policy)
    sobel_fast(buffer.pixels, output)
    _LOGGER.debug("Detected edges on %dx%d raster (boundary=%s)", buffer.width, buffer.height, policy.value)
    return PixelBuffer._adopt(output)


__all__ = [
    "BOX_BLUR_KERNEL",
    "BoundaryPolicy",
    "EMBOSS_KERNEL",
    "IDENTITY_KERNEL",
    "KERNELS",
    "SHARPEN_KERNEL",
    "convolve",
    "detect_edges",
    "kernel_for",
]
