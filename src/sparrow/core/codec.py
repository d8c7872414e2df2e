"""Decode encoded images into rasters and encode rasters as PNG, via Pillow."""

from __future__ import annotations

import io
import logging
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from ..errors import DecodeError
from .pixel_buffer import PixelBuffer

_LOGGER = logging.getLogger(__name__)


def decode_image(data: bytes) -> PixelBuffer:
    """Return the RGBA raster stored in the encoded *data*.

    Any format Pillow understands is accepted.  Failures surface as
    :class:`~sparrow.errors.DecodeError` regardless of which layer of Pillow
    rejected the payload.
    """

    if not data:
        raise DecodeError("No image data supplied")
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            rgba = image.convert("RGBA")
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as exc:
        raise DecodeError(f"Unable to decode image: {exc}") from exc

    buffer = PixelBuffer._adopt(np.array(rgba, dtype=np.uint8))
    _LOGGER.info("Decoded %dx%d image", buffer.width, buffer.height)
    return buffer


def load_image_file(path: str | Path) -> PixelBuffer:
    """Read *path* from disk and decode it."""

    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise DecodeError(f"Unable to read image file {path}: {exc}") from exc
    return decode_image(data)


def encode_png(buffer: PixelBuffer) -> bytes:
    """Return *buffer* encoded as a PNG byte string."""

    image = Image.fromarray(buffer.to_array())
    stream = io.BytesIO()
    image.save(stream, format="PNG")
    return stream.getvalue()


__all__ = ["decode_image", "encode_png", "load_image_file"]
