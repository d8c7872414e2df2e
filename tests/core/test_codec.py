"""Tests for Pillow-backed decoding and PNG export."""

import io

import pytest
from PIL import Image

from sparrow.core.codec import decode_image, encode_png, load_image_file
from sparrow.core.pixel_buffer import PixelBuffer
from sparrow.errors import DecodeError


def _png_bytes(mode: str, size: tuple[int, int], colour) -> bytes:
    stream = io.BytesIO()
    Image.new(mode, size, colour).save(stream, format="PNG")
    return stream.getvalue()


def test_decode_converts_to_rgba() -> None:
    buffer = decode_image(_png_bytes("RGB", (3, 2), (10, 20, 30)))
    assert buffer.size == (3, 2)
    assert buffer.get_pixel(2, 1) == (10, 20, 30, 255)


@pytest.mark.parametrize("payload", [b"", b"not an image"])
def test_undecodable_payloads_raise_decode_error(payload: bytes) -> None:
    with pytest.raises(DecodeError):
        decode_image(payload)


def test_missing_file_raises_decode_error(tmp_path) -> None:
    with pytest.raises(DecodeError):
        load_image_file(tmp_path / "missing.png")


def test_png_export_preserves_pixels(tmp_path, gradient_buffer: PixelBuffer) -> None:
    path = tmp_path / "out.png"
    path.write_bytes(encode_png(gradient_buffer))
    assert load_image_file(path) == gradient_buffer
