"""Nearest-neighbour resampling used by the pixelation effect."""

from __future__ import annotations

import logging
import math

import numpy as np

from ..pixel_buffer import PixelBuffer

_LOGGER = logging.getLogger(__name__)


def _nearest_indices(source_length: int, target_length: int) -> np.ndarray:
    """Return the source index sampled by each target cell (centre sampling)."""

    centres = (np.arange(target_length, dtype=np.float64) + 0.5) * (source_length / target_length)
    return np.minimum(np.floor(centres).astype(np.intp), source_length - 1)


def resample_nearest(buffer: PixelBuffer, width: int, height: int) -> PixelBuffer:
    """Return *buffer* resized to ``width x height`` without interpolation."""

    rows = _nearest_indices(buffer.height, int(height))
    cols = _nearest_indices(buffer.width, int(width))
    return PixelBuffer._adopt(buffer.pixels[rows[:, None], cols[None, :]])


def pixelate(buffer: PixelBuffer, factor: float) -> PixelBuffer:
    """Return a blocky copy of *buffer* reduced by *factor* and blown back up.

    Both passes use nearest-neighbour sampling.  Averaging during the
    downscale would blend neighbouring colours into each block, so none is
    done.  A factor of one (or less) returns an unmodified copy.
    """

    try:
        factor_value = float(factor)
    except (TypeError, ValueError):
        factor_value = 1.0
    step = int(math.floor(factor_value)) if math.isfinite(factor_value) else 1
    if step <= 1:
        return buffer.copy()

    reduced_width = max(1, buffer.width // step)
    reduced_height = max(1, buffer.height // step)
    _LOGGER.debug(
        "Pixelating %dx%d via %dx%d (factor %d)",
        buffer.width,
        buffer.height,
        reduced_width,
        reduced_height,
        step,
    )
    reduced = resample_nearest(buffer, reduced_width, reduced_height)
    return resample_nearest(reduced, buffer.width, buffer.height)


__all__ = ["pixelate", "resample_nearest"]
