"""Worker that decodes image files off the GUI thread."""

from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtCore import QObject, QRunnable, Signal

from ....core.codec import load_image_file
from ....errors import DecodeError

_LOGGER = logging.getLogger(__name__)


class ImageLoadWorkerSignals(QObject):
    """Signals emitted by :class:`ImageLoadWorker`."""

    loaded = Signal(object, int)
    """Emitted with the decoded :class:`PixelBuffer` and the request id."""

    failed = Signal(int, str)
    """Emitted with the request id and a readable reason when decoding fails."""

    done = Signal(int)
    """Emitted after ``loaded`` or ``failed``."""

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)


class ImageLoadWorker(QRunnable):
    """Read and decode ``path`` inside a :class:`QThreadPool`."""

    def __init__(self, path: str | Path, request_id: int) -> None:
        super().__init__()
        self.setAutoDelete(False)
        self._path = Path(path)
        self._request_id = int(request_id)
        self.signals = ImageLoadWorkerSignals()

    @property
    def request_id(self) -> int:
        return self._request_id

    def run(self) -> None:  # type: ignore[override]
        try:
            raster = load_image_file(self._path)
        except DecodeError as exc:
            _LOGGER.warning("Failed to load %s: %s", self._path, exc)
            self.signals.failed.emit(self._request_id, str(exc))
        else:
            self.signals.loaded.emit(raster, self._request_id)
        finally:
            self.signals.done.emit(self._request_id)


__all__ = ["ImageLoadWorker", "ImageLoadWorkerSignals"]
