"""Command line entry point: render one image through the filter pipeline.

Example::

    python -m sparrow photo.jpg -o out.png --preset Vintage --pixelate 4 -v
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from .config import load_settings
from .core.codec import load_image_file
from .core.filter_params import PRESETS, TONE_KEYS, PostKernel
from .core.session import EditSession
from .errors import SparrowError
from .utils.logging import get_logger, level_for_verbosity

_LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="sparrow",
        description="Apply tone, pixelation, edge and kernel filters to an image and save a PNG.",
    )
    p.add_argument("input", type=Path, help="Image to read (any format Pillow decodes).")
    p.add_argument("-o", "--output", type=Path, required=True, help="PNG file to write.")
    p.add_argument("-v", "--verbose", action="count", default=0, help="Increase verbosity (-v, -vv).")
    p.add_argument("--preset", choices=sorted(PRESETS), help="Preset applied before the individual flags.")
    for key in TONE_KEYS:
        p.add_argument(
            f"--{key}", type=float, default=None, help=f"{key.capitalize()} value (see README for ranges)."
        )
    p.add_argument("--pixelate", type=int, default=None, help="Pixel block size (1 = off).")
    p.add_argument("--edge-detect", action="store_true", help="Replace colours with Sobel edge magnitude.")
    p.add_argument(
        "--kernel",
        choices=[member.value for member in PostKernel],
        default=None,
        help="3x3 kernel applied last.",
    )
    p.add_argument(
        "--boundary",
        choices=["copy", "transparent"],
        default=None,
        help="Border handling for kernels (default from SPARROW_BOUNDARY_POLICY or 'copy').",
    )
    return p


def _collect_changes(args: argparse.Namespace) -> dict[str, Any]:
    changes: dict[str, Any] = {}
    for key in TONE_KEYS:
        value = getattr(args, key)
        if value is not None:
            changes[key] = value
    if args.pixelate is not None:
        changes["pixelate"] = args.pixelate
    if args.edge_detect:
        changes["edge_detect"] = True
    if args.kernel is not None:
        changes["post_kernel"] = args.kernel
    return changes


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    get_logger(level_for_verbosity(args.verbose))

    settings = load_settings()
    if args.boundary:
        settings = replace(settings, boundary_policy=args.boundary)
    session = EditSession(settings)

    try:
        session.load_image(load_image_file(args.input))
        if args.preset:
            session.apply_preset(args.preset)
        changes = _collect_changes(args)
        if changes:
            session.set_parameters(changes)
        payload = session.export_raster()
    except SparrowError as exc:
        _LOGGER.error("%s", exc)
        return 1

    try:
        args.output.write_bytes(payload)
    except OSError as exc:
        _LOGGER.error("Unable to write %s: %s", args.output, exc)
        return 1
    _LOGGER.info("Wrote %s", args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
