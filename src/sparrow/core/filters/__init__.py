"""Modular image filtering package for the studio pipeline.

This package splits the pixel work by concern:
- algorithms: Pure mathematical helpers (luma, HSL, rounding, kernels)
- executors: NumPy vectorised tone chain and Numba-compiled 3x3 loops
- resample / convolution: Public stage functions
- facade: The ``render`` entry point chaining every stage
"""

from __future__ import annotations

from .convolution import BoundaryPolicy, KERNELS, convolve, detect_edges, kernel_for
from .facade import render
from .numpy_executor import apply_tone_mapping
from .resample import pixelate, resample_nearest

__all__ = [
    "BoundaryPolicy",
    "KERNELS",
    "apply_tone_mapping",
    "convolve",
    "detect_edges",
    "kernel_for",
    "pixelate",
    "render",
    "resample_nearest",
]
