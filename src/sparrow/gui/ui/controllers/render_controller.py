"""Controller scheduling background renders for an :class:`EditSession`."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from PySide6.QtCore import QObject, QThreadPool, Signal

from ....core.filter_params import FilterParameters
from ....core.filters import render
from ....core.pixel_buffer import PixelBuffer
from ....core.session import EditSession
from ...performance_monitor import PerformanceMonitor
from ..tasks import ImageLoadWorker, RenderWorker

_LOGGER = logging.getLogger(__name__)


class RenderController(QObject):
    """Run renders off the GUI thread with last-request-wins semantics.

    Every render request receives a new job id.  Only the result carrying the
    newest id is installed in the session; anything older is dropped when it
    arrives, so the displayed frame never goes back in time.  Loads, undo and
    redo also bump the id because they replace the working raster directly.
    """

    frameReady = Signal(object)
    """Emitted with the new working :class:`PixelBuffer` whenever it changes."""

    renderFailed = Signal(str)
    """Emitted when the newest render request raised."""

    loadFailed = Signal(str)
    """Emitted when the newest load request could not be decoded."""

    def __init__(
        self,
        session: EditSession,
        *,
        pool: QThreadPool | None = None,
        monitor: PerformanceMonitor | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._session = session
        self._pool = pool or QThreadPool.globalInstance()
        self._monitor = monitor or PerformanceMonitor(
            enabled=True, slow_threshold_ms=session.settings.slow_render_ms
        )
        boundary = session.boundary

        def _render(source: PixelBuffer, params: FilterParameters) -> PixelBuffer:
            return render(source, params, boundary=boundary)

        self._renderer = self._monitor.measure("render")(_render)
        self._latest_job = 0
        self._latest_load = 0
        self._pending_render: Optional[RenderWorker] = None
        # Workers do not auto-delete; these keep them alive until they report ``done``.
        self._render_workers: Dict[int, RenderWorker] = {}
        self._load_workers: Dict[int, ImageLoadWorker] = {}
        self._snapshot_deferred = False

    # ------------------------------------------------------------------
    @property
    def session(self) -> EditSession:
        return self._session

    @property
    def monitor(self) -> PerformanceMonitor:
        return self._monitor

    @property
    def latest_job_id(self) -> int:
        return self._latest_job

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def request_render(
        self, partial: Mapping[str, Any] | None = None, **changes: Any
    ) -> Optional[int]:
        """Stage a parameter update and render it in the background.

        Returns the job id, or ``None`` when no image is loaded yet.
        """

        params = self._session.stage_parameters(partial, **changes)
        source = self._session.source
        if source is None:
            return None

        job_id = self._invalidate()
        worker = RenderWorker(self._renderer, source, params, job_id)
        worker.signals.finished.connect(self._handle_render_finished)
        worker.signals.error.connect(self._handle_render_error)
        worker.signals.done.connect(self._release_render_worker)
        self._render_workers[job_id] = worker
        self._pending_render = worker
        self._pool.start(worker)
        _LOGGER.debug("Queued render job %d", job_id)
        return job_id

    def _invalidate(self) -> int:
        """Retire the in-flight render and return the next job id."""

        previous = self._pending_render
        if previous is not None:
            previous.cancel()
            if self._pool.tryTake(previous):
                _LOGGER.debug("Removed queued render job %d", previous.job_id)
                self._render_workers.pop(previous.job_id, None)
        self._pending_render = None
        self._latest_job += 1
        return self._latest_job

    def _handle_render_finished(
        self, result: PixelBuffer, params: FilterParameters, job_id: int
    ) -> None:
        if job_id != self._latest_job:
            _LOGGER.debug("Discarding stale render job %d (latest %d)", job_id, self._latest_job)
            return
        self._pending_render = None
        if self._session.adopt_render(params, result):
            if self._snapshot_deferred:
                self._snapshot_deferred = False
                self._session.snapshot()
            self.frameReady.emit(result)
        else:
            self._snapshot_deferred = False
            _LOGGER.warning("Render job %d no longer matches the loaded image", job_id)

    def _handle_render_error(self, job_id: int, message: str) -> None:
        if job_id != self._latest_job:
            return
        self._pending_render = None
        if self._snapshot_deferred:
            _LOGGER.warning("Dropping snapshot requested for failed render job %d", job_id)
            self._snapshot_deferred = False
        self.renderFailed.emit(message)

    def _release_render_worker(self, job_id: int) -> None:
        worker = self._render_workers.pop(job_id, None)
        if worker is not None and worker is self._pending_render:
            self._pending_render = None

    def _release_load_worker(self, request_id: int) -> None:
        self._load_workers.pop(request_id, None)

    @property
    def active_workers(self) -> int:
        """Number of workers queued or running that have not reported ``done``."""

        return len(self._render_workers) + len(self._load_workers)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def load_path(self, path: str | Path) -> int:
        """Decode *path* in the background; the newest request wins."""

        self._latest_load += 1
        request_id = self._latest_load
        worker = ImageLoadWorker(path, request_id)
        worker.signals.loaded.connect(self._handle_loaded)
        worker.signals.failed.connect(self._handle_load_failed)
        worker.signals.done.connect(self._release_load_worker)
        self._load_workers[request_id] = worker
        self._pool.start(worker)
        return request_id

    def load_image(self, raster: PixelBuffer) -> PixelBuffer:
        """Load an already decoded raster synchronously."""

        self._invalidate()
        self._snapshot_deferred = False
        working = self._session.load_image(raster)
        self.frameReady.emit(working)
        return working

    def _handle_loaded(self, raster: PixelBuffer, request_id: int) -> None:
        if request_id != self._latest_load:
            _LOGGER.debug("Discarding stale load request %d", request_id)
            return
        self.load_image(raster)

    def _handle_load_failed(self, request_id: int, message: str) -> None:
        if request_id != self._latest_load:
            return
        self.loadFailed.emit(message)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------
    def snapshot(self) -> bool:
        """Commit the frame for the parameters staged so far.

        While a render is in flight the commit waits for its result, so the
        snapshot holds what the sliders show rather than the previous frame.
        A deferred snapshot follows later requests that supersede the job and
        is dropped by undo, redo, a new load or a failed render.
        """

        if self._pending_render is not None and self._session.has_image:
            self._snapshot_deferred = True
            return True
        return self._session.snapshot()

    def undo(self) -> Optional[PixelBuffer]:
        self._invalidate()
        self._snapshot_deferred = False
        restored = self._session.undo()
        if restored is not None:
            self.frameReady.emit(restored)
        return restored

    def redo(self) -> Optional[PixelBuffer]:
        self._invalidate()
        self._snapshot_deferred = False
        restored = self._session.redo()
        if restored is not None:
            self.frameReady.emit(restored)
        return restored

    # ------------------------------------------------------------------
    def wait_for_done(self, msecs: int = -1) -> bool:
        """Block until every queued worker finished; used by tests and shutdown."""

        return self._pool.waitForDone(msecs)


__all__ = ["RenderController"]
