"""NumPy vectorised executor for the tone-mapping chain.

Each stage consumes the float output of the previous one, clamps to the byte
range, and hands the plane on.  Quantisation back to bytes happens exactly
once, after the last stage, so rounding error does not accumulate.
"""

from __future__ import annotations

import logging

import numpy as np

from ..filter_params import FilterParameters
from ..pixel_buffer import PixelBuffer
from .algorithms import (
    SEPIA_MATRIX,
    hsl_to_rgb,
    luma,
    mix,
    quantize_array,
    rgb_to_hsl,
    separable_blur,
)

_LOGGER = logging.getLogger(__name__)


def _clip(rgb: np.ndarray) -> np.ndarray:
    return np.clip(rgb, 0.0, 255.0, out=rgb)


def _np_brightness(rgb: np.ndarray, percent: float) -> np.ndarray:
    return _clip(rgb * (percent / 100.0))


def _np_contrast(rgb: np.ndarray, percent: float) -> np.ndarray:
    return _clip((rgb - 128.0) * (percent / 100.0) + 128.0)


def _np_saturation(rgb: np.ndarray, percent: float) -> np.ndarray:
    y = luma(rgb)[..., None]
    return _clip(y + (rgb - y) * (percent / 100.0))


def _np_hue_rotate(rgb: np.ndarray, degrees: float) -> np.ndarray:
    hue, saturation, lightness = rgb_to_hsl(rgb / 255.0)
    rotated = hsl_to_rgb(np.mod(hue + degrees, 360.0), saturation, lightness)
    return _clip(rotated * 255.0)


def _np_grayscale(rgb: np.ndarray, percent: float) -> np.ndarray:
    y = luma(rgb)[..., None]
    return _clip(mix(rgb, np.broadcast_to(y, rgb.shape), percent / 100.0))


def _np_sepia(rgb: np.ndarray, percent: float) -> np.ndarray:
    toned = np.clip(rgb @ SEPIA_MATRIX.T, 0.0, 255.0)
    return _clip(mix(rgb, toned, percent / 100.0))


def _np_invert(rgb: np.ndarray, percent: float) -> np.ndarray:
    return _clip(mix(rgb, 255.0 - rgb, percent / 100.0))


def _np_blur(rgb: np.ndarray, radius_px: float) -> np.ndarray:
    return _clip(separable_blur(rgb, radius_px))


def apply_tone_mapping(buffer: PixelBuffer, params: FilterParameters) -> PixelBuffer:
    """Return a new buffer with the eight tone stages applied in order.

    Stages sitting at their neutral value are skipped; when all of them are
    neutral the input is copied unchanged.
    """

    params = params.clamp()
    if params.is_tone_identity:
        return buffer.copy()

    source = buffer.pixels
    rgb = source[..., :3].astype(np.float64)

    if params.brightness != 100.0:
        rgb = _np_brightness(rgb, params.brightness)
    if params.contrast != 100.0:
        rgb = _np_contrast(rgb, params.contrast)
    if params.saturation != 100.0:
        rgb = _np_saturation(rgb, params.saturation)
    if params.hue % 360.0 != 0.0:
        rgb = _np_hue_rotate(rgb, params.hue)
    if params.grayscale > 0.0:
        rgb = _np_grayscale(rgb, params.grayscale)
    if params.sepia > 0.0:
        rgb = _np_sepia(rgb, params.sepia)
    if params.invert > 0.0:
        rgb = _np_invert(rgb, params.invert)
    if params.blur > 0.0:
        rgb = _np_blur(rgb, params.blur)

    output = np.empty_like(source)
    output[..., :3] = quantize_array(rgb)
    output[..., 3] = source[..., 3]
    _LOGGER.debug("Tone-mapped %dx%d raster", buffer.width, buffer.height)
    return PixelBuffer._adopt(output)


__all__ = ["apply_tone_mapping"]
