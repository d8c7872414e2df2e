import os
import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Run against the working tree even when the package is not installed.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Qt needs a platform plugin; tests never open a window.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from sparrow.core.pixel_buffer import PixelBuffer  # noqa: E402


@pytest.fixture
def white_buffer() -> PixelBuffer:
    return PixelBuffer.filled(4, 4, (255, 255, 255, 255))


@pytest.fixture
def gradient_buffer() -> PixelBuffer:
    """A 7x5 raster where every pixel differs, alpha varying too."""

    height, width = 5, 7
    ys, xs = np.mgrid[0:height, 0:width]
    array = np.empty((height, width, 4), dtype=np.uint8)
    array[..., 0] = (xs * 37) % 256
    array[..., 1] = (ys * 53) % 256
    array[..., 2] = (xs * ys * 11) % 256
    array[..., 3] = 200 + xs
    return PixelBuffer.from_array(array)


@pytest.fixture
def checkerboard() -> PixelBuffer:
    """8x8 raster of four 4x4 quadrants, black top-left and bottom-right."""

    array = np.zeros((8, 8, 4), dtype=np.uint8)
    array[..., 3] = 255
    array[:4, 4:, :3] = 255
    array[4:, :4, :3] = 255
    return PixelBuffer.from_array(array)
