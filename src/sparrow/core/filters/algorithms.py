"""Pure numeric building blocks shared by the filter executors.

The scalar helpers are compiled with Numba so the JIT executor can inline them
inside its per-pixel loops, while the array helpers operate on whole NumPy
planes for the vectorised tone chain.  Every function works on the ``0..255``
channel scale.
"""

from __future__ import annotations

import math

import numpy as np
from numba import jit

LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)
"""NTSC luma coefficients used by saturation, grayscale and Sobel."""

SEPIA_MATRIX = np.array(
    [
        [0.393, 0.769, 0.189],
        [0.349, 0.686, 0.168],
        [0.272, 0.534, 0.131],
    ],
    dtype=np.float64,
)
"""Row ``i`` gives the weights of output channel ``i`` over input ``(R, G, B)``."""


@jit(nopython=True, cache=True)
def _clamp_channel(value: float) -> float:
    """Return *value* limited to ``[0, 255]``."""

    if value < 0.0:
        return 0.0
    if value > 255.0:
        return 255.0
    return value


@jit(nopython=True, cache=True)
def _quantize(value: float) -> np.uint8:
    """Clamp *value* and round half up to the nearest byte."""

    return np.uint8(math.floor(_clamp_channel(value) + 0.5))


def quantize_array(values: np.ndarray) -> np.ndarray:
    """Vectorised counterpart of :func:`_quantize`."""

    return np.floor(np.clip(values, 0.0, 255.0) + 0.5).astype(np.uint8)


def luma(rgb: np.ndarray) -> np.ndarray:
    """Return the luma plane of an ``(..., 3)`` float array."""

    return (
        rgb[..., 0] * LUMA_WEIGHTS[0]
        + rgb[..., 1] * LUMA_WEIGHTS[1]
        + rgb[..., 2] * LUMA_WEIGHTS[2]
    )


def mix(a: np.ndarray, b: np.ndarray, t: float) -> np.ndarray:
    """Linear blend ``a + (b - a) * t``."""

    return a + (b - a) * t


def rgb_to_hsl(rgb: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Convert ``(..., 3)`` RGB in ``[0, 1]`` into hue degrees, saturation, lightness."""

    r = rgb[..., 0]
    g = rgb[..., 1]
    b = rgb[..., 2]
    maxc = np.maximum(np.maximum(r, g), b)
    minc = np.minimum(np.minimum(r, g), b)
    delta = maxc - minc
    lightness = (maxc + minc) * 0.5

    chromatic = delta > 0.0
    safe_delta = np.where(chromatic, delta, 1.0)
    denom = 1.0 - np.abs(2.0 * lightness - 1.0)
    saturation = np.where(chromatic & (denom > 0.0), delta / np.where(denom > 0.0, denom, 1.0), 0.0)

    hue = np.where(
        maxc == r,
        np.mod((g - b) / safe_delta, 6.0),
        np.where(maxc == g, (b - r) / safe_delta + 2.0, (r - g) / safe_delta + 4.0),
    )
    hue = np.where(chromatic, hue * 60.0, 0.0)
    return hue, saturation, lightness


def hsl_to_rgb(hue: np.ndarray, saturation: np.ndarray, lightness: np.ndarray) -> np.ndarray:
    """Inverse of :func:`rgb_to_hsl`; returns ``(..., 3)`` RGB in ``[0, 1]``."""

    chroma = (1.0 - np.abs(2.0 * lightness - 1.0)) * saturation
    sector_position = np.mod(hue, 360.0) / 60.0
    x = chroma * (1.0 - np.abs(np.mod(sector_position, 2.0) - 1.0))
    m = lightness - chroma * 0.5
    sector = np.floor(sector_position).astype(np.int64) % 6

    zeros = np.zeros_like(chroma)
    r = np.choose(sector, [chroma, x, zeros, zeros, x, chroma])
    g = np.choose(sector, [x, chroma, chroma, x, zeros, zeros])
    b = np.choose(sector, [zeros, zeros, x, chroma, chroma, x])
    return np.stack((r + m, g + m, b + m), axis=-1)


# Tail sums over more taps than this use the midpoint integral instead.
_EXACT_TAIL_TAPS = 1 << 16

# Past this sigma every tap of a raster-sized kernel weighs exactly 1.0 in double
# precision; capping keeps sigma squared finite.
_MAX_SIGMA = 1e150


def _gaussian_tail(sigma: float, start: int, stop: int) -> float:
    """Return ``sum(exp(-k**2 / (2 sigma**2)) for k in start..stop)``."""

    count = stop - start + 1
    if count <= 0:
        return 0.0
    if count <= _EXACT_TAIL_TAPS:
        offsets = np.arange(start, stop + 1, dtype=np.float64)
        return float(np.exp(-(offsets * offsets) / (2.0 * sigma * sigma)).sum())
    scale = sigma * math.sqrt(2.0)
    return sigma * math.sqrt(math.pi / 2.0) * (
        math.erf((stop + 0.5) / scale) - math.erf((start - 0.5) / scale)
    )


def gaussian_weights(sigma: float, limit: int | None = None) -> np.ndarray:
    """Return normalised 1-D Gaussian taps for standard deviation *sigma*.

    The kernel spans ``ceil(3 sigma)`` taps either side.  With *limit* set,
    taps further out than *limit* are folded into the outermost kept tap.  On
    an axis of ``limit + 1`` pixels with replicated edges those taps only ever
    read the edge pixel, so the blur result is unchanged while the kernel
    stays no wider than the image.
    """

    sigma = min(float(sigma), _MAX_SIGMA)
    radius = max(1, int(math.ceil(3.0 * sigma)))
    reach = radius if limit is None else max(0, min(radius, int(limit)))
    offsets = np.arange(-reach, reach + 1, dtype=np.float64)
    denominator = 2.0 * sigma * sigma
    if denominator <= 0.0:
        return (offsets == 0.0).astype(np.float64)
    weights = np.exp(-(offsets * offsets) / denominator)
    if reach < radius:
        tail = _gaussian_tail(sigma, reach + 1, radius)
        weights[0] += tail
        weights[-1] += tail
    return weights / weights.sum()


def _blur_axis(plane: np.ndarray, weights: np.ndarray, axis: int) -> np.ndarray:
    radius = len(weights) // 2
    length = plane.shape[axis]
    pad = [(0, 0)] * plane.ndim
    pad[axis] = (radius, radius)
    padded = np.pad(plane, pad, mode="edge")
    blurred = np.zeros_like(plane)
    for tap, weight in enumerate(weights):
        blurred += weight * np.take(padded, np.arange(tap, tap + length), axis=axis)
    return blurred


def separable_blur(plane: np.ndarray, sigma: float) -> np.ndarray:
    """Gaussian-blur an ``(H, W, C)`` float array along both axes with replicated edges."""

    height, width = plane.shape[:2]
    horizontal = _blur_axis(plane, gaussian_weights(sigma, width - 1), axis=1)
    return _blur_axis(horizontal, gaussian_weights(sigma, height - 1), axis=0)


def normalise_kernel(kernel) -> np.ndarray:
    """Return the 9 weights of *kernel* divided by their sum (or by 1 if it is 0)."""

    weights = np.asarray(kernel, dtype=np.float64).reshape(-1)
    if weights.size != 9:
        raise ValueError(f"A 3x3 kernel needs 9 weights, got {weights.size}")
    total = float(weights.sum())
    return weights / (total if total != 0.0 else 1.0)
