"""Runtime settings for the studio core.

Settings come from three layers: the defaults declared on
:class:`StudioSettings`, an optional settings mapping using dotted keys (the
same shape the preference store hands to controllers), and ``SPARROW_*``
environment variables, which win over both.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Any, Mapping

DEFAULT_HISTORY_LIMIT = 20
DEFAULT_BOUNDARY_POLICY = "copy"
DEFAULT_PREVIEW_PADDING = 16
DEFAULT_HOLDER_WIDTH = 1000
DEFAULT_MIN_ZOOM = 0.25
DEFAULT_MAX_ZOOM = 2.0
DEFAULT_SLOW_RENDER_MS = 100.0

_BOUNDARY_CHOICES = frozenset({"copy", "transparent"})


@dataclass(frozen=True)
class StudioSettings:
    """Immutable bag of tunables consumed by the session and the controllers."""

    history_limit: int = DEFAULT_HISTORY_LIMIT
    boundary_policy: str = DEFAULT_BOUNDARY_POLICY
    preview_padding: int = DEFAULT_PREVIEW_PADDING
    holder_width: int = DEFAULT_HOLDER_WIDTH
    min_zoom: float = DEFAULT_MIN_ZOOM
    max_zoom: float = DEFAULT_MAX_ZOOM
    slow_render_ms: float = DEFAULT_SLOW_RENDER_MS

    @property
    def target_display_width(self) -> int:
        """Return the width available to a fit-to-width preview."""

        return max(1, self.holder_width - self.preview_padding * 2)

    @classmethod
    def from_mapping(cls, settings: Mapping[str, Any] | None) -> "StudioSettings":
        """Build settings from a dotted-key mapping, ignoring unusable values."""

        if not settings:
            return cls()

        defaults = cls()
        return cls(
            history_limit=_coerce_int(
                settings.get("history.limit"), defaults.history_limit, minimum=1
            ),
            boundary_policy=_coerce_boundary(
                settings.get("render.boundary_policy"), defaults.boundary_policy
            ),
            preview_padding=_coerce_int(
                settings.get("preview.padding"), defaults.preview_padding, minimum=0
            ),
            holder_width=_coerce_int(
                settings.get("preview.holder_width"), defaults.holder_width, minimum=1
            ),
            min_zoom=_coerce_float(settings.get("preview.min_zoom"), defaults.min_zoom),
            max_zoom=_coerce_float(settings.get("preview.max_zoom"), defaults.max_zoom),
            slow_render_ms=_coerce_float(
                settings.get("render.slow_threshold_ms"), defaults.slow_render_ms
            ),
        )


def load_settings(
    settings: Mapping[str, Any] | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> StudioSettings:
    """Return :class:`StudioSettings` with environment overrides applied."""

    env = os.environ if environ is None else environ
    resolved = StudioSettings.from_mapping(settings)

    history_limit = env.get("SPARROW_HISTORY_LIMIT")
    if history_limit:
        resolved = replace(
            resolved,
            history_limit=_coerce_int(history_limit, resolved.history_limit, minimum=1),
        )
    boundary = env.get("SPARROW_BOUNDARY_POLICY")
    if boundary:
        resolved = replace(
            resolved, boundary_policy=_coerce_boundary(boundary, resolved.boundary_policy)
        )
    slow_ms = env.get("SPARROW_SLOW_RENDER_MS")
    if slow_ms:
        resolved = replace(
            resolved, slow_render_ms=_coerce_float(slow_ms, resolved.slow_render_ms)
        )
    return resolved


def _coerce_int(value: Any, default: int, *, minimum: int) -> int:
    if value is None:
        return default
    try:
        number = int(round(float(value)))
    except (TypeError, ValueError):
        return default
    return max(minimum, number)


def _coerce_float(value: Any, default: float) -> float:
    if value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if number != number or number <= 0.0:
        return default
    return number


def _coerce_boundary(value: Any, default: str) -> str:
    if not isinstance(value, str):
        return default
    normalised = value.strip().lower()
    return normalised if normalised in _BOUNDARY_CHOICES else default


__all__ = ["StudioSettings", "load_settings"]
