"""Worker that executes pipeline renders on a background thread."""

from __future__ import annotations

import logging
import threading
from typing import Callable

from PySide6.QtCore import QObject, QRunnable, Signal

from ....core.filter_params import FilterParameters
from ....core.pixel_buffer import PixelBuffer

_LOGGER = logging.getLogger(__name__)

Renderer = Callable[[PixelBuffer, FilterParameters], PixelBuffer]


class RenderSignals(QObject):
    """Signals emitted by :class:`RenderWorker`."""

    finished = Signal(object, object, int)
    """Emitted with the rendered raster, the parameters used and the job id."""

    error = Signal(int, str)
    """Emitted if the renderer raised."""

    done = Signal(int)
    """Emitted once the worker has returned, cancelled or not."""

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)


class RenderWorker(QRunnable):
    """Run ``renderer(source, params)`` inside a :class:`QThreadPool`.

    A cancelled worker skips the render if it has not started yet and never
    emits a result.  Cancellation cannot interrupt a render already in
    progress; the controller drops such results by job id instead.
    """

    def __init__(
        self,
        renderer: Renderer,
        source: PixelBuffer,
        params: FilterParameters,
        job_id: int,
    ) -> None:
        super().__init__()
        self.setAutoDelete(False)
        self._renderer = renderer
        self._source = source
        self._params = params
        self._job_id = int(job_id)
        self._cancelled = threading.Event()
        self.signals = RenderSignals()

    @property
    def job_id(self) -> int:
        return self._job_id

    def cancel(self) -> None:
        self._cancelled.set()

    def is_cancelled(self) -> bool:
        return self._cancelled.is_set()

    def run(self) -> None:  # type: ignore[override]
        """Render the frame and notify listeners unless cancelled."""

        try:
            if self._cancelled.is_set():
                _LOGGER.debug("Render job %d cancelled before start", self._job_id)
                return
            try:
                result = self._renderer(self._source, self._params)
            except Exception as exc:
                _LOGGER.exception("Render job %d failed", self._job_id)
                self.signals.error.emit(self._job_id, str(exc))
                return
            if self._cancelled.is_set():
                _LOGGER.debug("Render job %d cancelled while running; dropping result", self._job_id)
                return
            self.signals.finished.emit(result, self._params, self._job_id)
        finally:
            self.signals.done.emit(self._job_id)


__all__ = ["RenderSignals", "RenderWorker"]
