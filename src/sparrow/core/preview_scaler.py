"""Display-resolution aware preview frames derived from the working raster."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from PIL import Image

from ..config import DEFAULT_MAX_ZOOM, DEFAULT_MIN_ZOOM
from .pixel_buffer import PixelBuffer


@dataclass(frozen=True)
class PreviewGeometry:
    """Sizes needed to present one preview frame.

    ``logical_*`` is the size in device-independent units the widget should
    occupy, ``backing_*`` the number of physical pixels the frame carries.
    """

    logical_width: int
    logical_height: int
    backing_width: int
    backing_height: int
    device_pixel_ratio: int


def _finite_or(value: object, default: float) -> float:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def compute_preview_geometry(
    width: int,
    height: int,
    zoom: float,
    device_pixel_ratio: float,
    fit_to_width: bool,
    target_display_width: int,
    *,
    min_zoom: float = DEFAULT_MIN_ZOOM,
    max_zoom: float = DEFAULT_MAX_ZOOM,
) -> PreviewGeometry:
    """Return the logical and backing sizes for a ``width x height`` raster."""

    dpr = max(1, int(math.floor(_finite_or(device_pixel_ratio, 1.0))))
    zoom = max(min_zoom, min(max_zoom, _finite_or(zoom, 1.0)))

    scale = 1.0
    if fit_to_width and width > 0:
        scale = min(1.0, max(1, int(target_display_width)) / width)
    display_width = round(width * scale)
    display_height = round(height * scale)

    return PreviewGeometry(
        logical_width=max(1, int(math.floor(display_width * zoom))),
        logical_height=max(1, int(math.floor(display_height * zoom))),
        backing_width=max(1, int(math.floor(display_width * zoom * dpr))),
        backing_height=max(1, int(math.floor(display_height * zoom * dpr))),
        device_pixel_ratio=dpr,
    )


def scale(
    buffer: PixelBuffer,
    zoom: float,
    device_pixel_ratio: float,
    fit_to_width: bool,
    target_display_width: int,
    *,
    min_zoom: float = DEFAULT_MIN_ZOOM,
    max_zoom: float = DEFAULT_MAX_ZOOM,
) -> PixelBuffer:
    """Return a smoothly resampled preview of *buffer*; *buffer* is not touched.

    Unlike pixelation this path interpolates (bilinear) so downsized previews
    stay free of aliasing.
    """

    geometry = compute_preview_geometry(
        buffer.width,
        buffer.height,
        zoom,
        device_pixel_ratio,
        fit_to_width,
        target_display_width,
        min_zoom=min_zoom,
        max_zoom=max_zoom,
    )
    target = (geometry.backing_width, geometry.backing_height)
    if target == buffer.size:
        return buffer.copy()

    image = Image.fromarray(buffer.to_array())
    resized = image.resize(target, Image.Resampling.BILINEAR)
    return PixelBuffer._adopt(np.array(resized.convert("RGBA"), dtype=np.uint8))


__all__ = ["PreviewGeometry", "compute_preview_geometry", "scale"]
