"""JIT-accelerated 3x3 neighbourhood kernels using Numba.

The loops walk the interior of an ``(H, W, 4)`` uint8 array and write into an
output array the caller has already initialised with its boundary policy, so
the outermost ring is never touched here.
"""

from __future__ import annotations

import math

import numpy as np
from numba import jit

from .algorithms import _quantize

SOBEL_X = np.array([-1.0, 0.0, 1.0, -2.0, 0.0, 2.0, -1.0, 0.0, 1.0])
SOBEL_Y = np.array([-1.0, -2.0, -1.0, 0.0, 0.0, 0.0, 1.0, 2.0, 1.0])


@jit(nopython=True, cache=True)
def _convolve_interior(
    source: np.ndarray,
    weights: np.ndarray,
    output: np.ndarray,
) -> None:
    """Write the weighted 3x3 sum of every interior pixel into *output*."""

    height = source.shape[0]
    width = source.shape[1]
    if width < 3 or height < 3:
        return

    for y in range(1, height - 1):
        for x in range(1, width - 1):
            r = 0.0
            g = 0.0
            b = 0.0
            tap = 0
            for ky in range(-1, 2):
                for kx in range(-1, 2):
                    weight = weights[tap]
                    tap += 1
                    r += weight * source[y + ky, x + kx, 0]
                    g += weight * source[y + ky, x + kx, 1]
                    b += weight * source[y + ky, x + kx, 2]
            output[y, x, 0] = _quantize(r)
            output[y, x, 1] = _quantize(g)
            output[y, x, 2] = _quantize(b)
            output[y, x, 3] = 255


@jit(nopython=True, cache=True)
def _luma_plane(source: np.ndarray) -> np.ndarray:
    """Return the byte-quantised luma of every pixel."""

    height = source.shape[0]
    width = source.shape[1]
    plane = np.empty((height, width), dtype=np.float64)
    for y in range(height):
        for x in range(width):
            value = (
                0.299 * source[y, x, 0]
                + 0.587 * source[y, x, 1]
                + 0.114 * source[y, x, 2]
            )
            plane[y, x] = _quantize(value)
    return plane


@jit(nopython=True, cache=True)
def _sobel_interior(
    source: np.ndarray,
    kernel_x: np.ndarray,
    kernel_y: np.ndarray,
    output: np.ndarray,
) -> None:
    """Write the Sobel gradient magnitude of every interior pixel into *output*."""

    height = source.shape[0]
    width = source.shape[1]
    if width < 3 or height < 3:
        return

    gray = _luma_plane(source)
    for y in range(1, height - 1):
        for x in range(1, width - 1):
            gx = 0.0
            gy = 0.0
            tap = 0
            for ky in range(-1, 2):
                for kx in range(-1, 2):
                    value = gray[y + ky, x + kx]
                    gx += kernel_x[tap] * value
                    gy += kernel_y[tap] * value
                    tap += 1
            magnitude = _quantize(min(255.0, math.sqrt(gx * gx + gy * gy)))
            output[y, x, 0] = magnitude
            output[y, x, 1] = magnitude
            output[y, x, 2] = magnitude
            output[y, x, 3] = 255


def convolve_fast(source: np.ndarray, weights: np.ndarray, output: np.ndarray) -> None:
    """Run the compiled convolution over *source* into *output* in-place."""

    _convolve_interior(
        np.ascontiguousarray(source),
        np.ascontiguousarray(weights, dtype=np.float64),
        output,
    )


def sobel_fast(source: np.ndarray, output: np.ndarray) -> None:
    """Run the compiled Sobel detector over *source* into *output* in-place."""

    _sobel_interior(np.ascontiguousarray(source), SOBEL_X, SOBEL_Y, output)


__all__ = ["SOBEL_X", "SOBEL_Y", "convolve_fast", "sobel_fast"]
