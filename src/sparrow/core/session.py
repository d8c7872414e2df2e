"""Editing session tying the source image, parameters, history and export."""

from __future__ import annotations

import logging
import threading
from typing import Any, Mapping, Optional

from ..config import StudioSettings
from ..errors import NothingToExportError
from . import preview_scaler
from .codec import decode_image, encode_png
from .filter_params import PRESETS, FilterParameters, apply_preset
from .filters import BoundaryPolicy, render
from .history import HistoryStack
from .pixel_buffer import PixelBuffer

_LOGGER = logging.getLogger(__name__)


class EditSession:
    """Command surface the collaborator layer drives.

    The working raster is always either the render of the current source and
    parameters or a snapshot restored from history.  History stores pixels,
    so undo and redo leave :attr:`parameters` untouched; the next parameter
    change re-renders from the source and replaces the restored pixels.

    Every raster handed out is a copy, so drawing on a returned frame never
    changes the session state.
    """

    def __init__(self, settings: StudioSettings | None = None) -> None:
        self._settings = settings or StudioSettings()
        self._boundary = BoundaryPolicy.coerce(self._settings.boundary_policy)
        self._history = HistoryStack(self._settings.history_limit)
        self._source: Optional[PixelBuffer] = None
        self._working: Optional[PixelBuffer] = None
        self._params = FilterParameters()
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------
    @property
    def settings(self) -> StudioSettings:
        return self._settings

    @property
    def history(self) -> HistoryStack:
        return self._history

    @property
    def boundary(self) -> BoundaryPolicy:
        return self._boundary

    @property
    def source(self) -> Optional[PixelBuffer]:
        with self._lock:
            return _copy_or_none(self._source)

    @property
    def working(self) -> Optional[PixelBuffer]:
        with self._lock:
            return _copy_or_none(self._working)

    @property
    def parameters(self) -> FilterParameters:
        with self._lock:
            return self._params

    @property
    def has_image(self) -> bool:
        with self._lock:
            return self._source is not None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def load_image(self, raster: PixelBuffer) -> PixelBuffer:
        """Replace the source image and seed a fresh history with its render."""

        source = raster.copy()
        with self._lock:
            self._source = source
            self._history.clear()
            self._working = render(source, self._params, boundary=self._boundary)
            self._history.push(self._working)
            working = self._working.copy()
        _LOGGER.info("Loaded %dx%d source image", source.width, source.height)
        return working

    def load_image_bytes(self, data: bytes) -> PixelBuffer:
        """Decode *data* and load it; a decode failure leaves the session as it was."""

        return self.load_image(decode_image(data))

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------
    def stage_parameters(
        self, partial: Mapping[str, Any] | None = None, **changes: Any
    ) -> FilterParameters:
        """Merge a partial update into the parameters without rendering."""

        update = dict(partial or {})
        update.update(changes)
        with self._lock:
            self._params = self._params.merged(update)
            return self._params

    def set_parameters(
        self, partial: Mapping[str, Any] | None = None, **changes: Any
    ) -> Optional[PixelBuffer]:
        """Merge a partial update and re-render synchronously.

        Returns the new working raster, or ``None`` when no image is loaded.
        """

        with self._lock:
            params = self.stage_parameters(partial, **changes)
            return _copy_or_none(self._rerender(params))

    def reset_parameters(self) -> Optional[PixelBuffer]:
        return self.set_parameters(PRESETS["Original"])

    def apply_preset(self, name: str) -> Optional[PixelBuffer]:
        with self._lock:
            self._params = apply_preset(self._params, name)
            return _copy_or_none(self._rerender(self._params))

    def adopt_render(self, params: FilterParameters, buffer: PixelBuffer) -> bool:
        """Install a raster rendered elsewhere for *params*.

        The result is refused when no image is loaded or when its size does not
        match the current source (it was rendered for a previous load).
        """

        with self._lock:
            if self._source is None or buffer.size != self._source.size:
                return False
            self._params = params
            self._working = buffer.copy()
            return True

    def _rerender(self, params: FilterParameters) -> Optional[PixelBuffer]:
        if self._source is None:
            return None
        self._working = render(self._source, params, boundary=self._boundary)
        return self._working

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------
    def snapshot(self) -> bool:
        """Commit the working raster to history; ``False`` when there is none."""

        with self._lock:
            if self._working is None:
                return False
            self._history.push(self._working)
            return True

    def undo(self) -> Optional[PixelBuffer]:
        with self._lock:
            restored = self._history.undo()
            if restored is not None:
                self._working = restored
            return _copy_or_none(restored)

    def redo(self) -> Optional[PixelBuffer]:
        with self._lock:
            restored = self._history.redo()
            if restored is not None:
                self._working = restored
            return _copy_or_none(restored)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    def export_raster(self) -> bytes:
        """Return the working raster as PNG bytes at full source resolution."""

        with self._lock:
            working = self._working
        if working is None:
            raise NothingToExportError("No rendered image is available to export")
        payload = encode_png(working)
        _LOGGER.info("Exported %dx%d PNG (%d bytes)", working.width, working.height, len(payload))
        return payload

    def preview(
        self,
        zoom: float = 1.0,
        device_pixel_ratio: float = 1.0,
        fit_to_width: bool = True,
        target_display_width: int | None = None,
    ) -> Optional[PixelBuffer]:
        """Return a display frame of the working raster, or ``None`` before a load."""

        with self._lock:
            working = self._working
        if working is None:
            return None
        if target_display_width is None:
            target_display_width = self._settings.target_display_width
        return preview_scaler.scale(
            working,
            zoom,
            device_pixel_ratio,
            fit_to_width,
            target_display_width,
            min_zoom=self._settings.min_zoom,
            max_zoom=self._settings.max_zoom,
        )


def _copy_or_none(buffer: Optional[PixelBuffer]) -> Optional[PixelBuffer]:
    return None if buffer is None else buffer.copy()


__all__ = ["EditSession"]
