"""Background worker helpers for GUI tasks."""

from .image_load_worker import ImageLoadWorker, ImageLoadWorkerSignals
from .render_worker import RenderSignals, RenderWorker

__all__ = [
    "ImageLoadWorker",
    "ImageLoadWorkerSignals",
    "RenderSignals",
    "RenderWorker",
]
