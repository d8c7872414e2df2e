"""Filter parameter value object, post-kernel choices and the preset table."""

from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Mapping

# Order of the tone stages.  Presets, the identity fast path and the CLI all
# iterate this tuple so the keys never drift apart.
TONE_KEYS = (
    "brightness",
    "contrast",
    "saturation",
    "hue",
    "grayscale",
    "sepia",
    "invert",
    "blur",
)

TONE_IDENTITY: Mapping[str, float] = {
    "brightness": 100.0,
    "contrast": 100.0,
    "saturation": 100.0,
    "hue": 0.0,
    "grayscale": 0.0,
    "sepia": 0.0,
    "invert": 0.0,
    "blur": 0.0,
}


class PostKernel(str, Enum):
    """Optional 3x3 kernel applied after the tone and edge stages."""

    NONE = "None"
    SHARPEN = "Sharpen"
    BLUR = "Blur"
    EMBOSS = "Emboss"

    @classmethod
    def coerce(cls, value: "PostKernel | str | None") -> "PostKernel":
        """Return the member matching *value* by value or name, case-insensitively."""

        if isinstance(value, cls):
            return value
        if value is None:
            return cls.NONE
        text = str(value).strip().lower()
        for member in cls:
            if text in (member.value.lower(), member.name.lower()):
                return member
        raise ValueError(f"Unknown post kernel: {value!r}")


@dataclass(frozen=True)
class FilterParameters:
    """Immutable snapshot of every value the pipeline reads during a render."""

    brightness: float = 100.0
    contrast: float = 100.0
    saturation: float = 100.0
    hue: float = 0.0
    grayscale: float = 0.0
    sepia: float = 0.0
    invert: float = 0.0
    blur: float = 0.0
    pixelate: int = 1
    edge_detect: bool = False
    post_kernel: PostKernel = PostKernel.NONE
    show_original: bool = False

    def clamp(self) -> "FilterParameters":
        """Return a copy with every value forced into its documented range.

        Non-finite numbers fall back to the field default so a misbehaving
        collaborator cannot poison the pipeline with NaNs.
        """

        return FilterParameters(
            brightness=_clamp_number(self.brightness, 100.0, 0.0, None),
            contrast=_clamp_number(self.contrast, 100.0, 0.0, None),
            saturation=_clamp_number(self.saturation, 100.0, 0.0, None),
            hue=_clamp_number(self.hue, 0.0, -180.0, 180.0),
            grayscale=_clamp_number(self.grayscale, 0.0, 0.0, 100.0),
            sepia=_clamp_number(self.sepia, 0.0, 0.0, 100.0),
            invert=_clamp_number(self.invert, 0.0, 0.0, 100.0),
            blur=_clamp_number(self.blur, 0.0, 0.0, None),
            pixelate=_clamp_pixelate(self.pixelate),
            edge_detect=bool(self.edge_detect),
            post_kernel=PostKernel.coerce(self.post_kernel),
            show_original=bool(self.show_original),
        )

    @property
    def is_tone_identity(self) -> bool:
        """``True`` when every tone value sits at its neutral position."""

        return all(getattr(self, key) == TONE_IDENTITY[key] for key in TONE_KEYS)

    def merged(self, partial: Mapping[str, Any] | None) -> "FilterParameters":
        """Return a clamped copy with *partial* applied on top."""

        if not partial:
            return self.clamp()
        known = _field_names()
        unknown = [key for key in partial if key not in known]
        if unknown:
            raise KeyError(f"Unknown filter parameter(s): {', '.join(sorted(unknown))}")
        return replace(self, **dict(partial)).clamp()

    def as_dict(self) -> dict[str, Any]:
        values = {name: getattr(self, name) for name in _field_names()}
        values["post_kernel"] = self.post_kernel.value
        return values

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any] | None) -> "FilterParameters":
        return cls().merged(values)


def _field_names() -> tuple[str, ...]:
    return tuple(field.name for field in fields(FilterParameters))


def _clamp_number(
    value: Any, default: float, minimum: float | None, maximum: float | None
) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    if minimum is not None and number < minimum:
        number = minimum
    if maximum is not None and number > maximum:
        number = maximum
    return number


def _clamp_pixelate(value: Any) -> int:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 1
    if not math.isfinite(number):
        return 1
    return max(1, int(math.floor(number)))


# ----------------------------------------------------------------------
# Presets
# ----------------------------------------------------------------------
# Each preset is a partial update merged onto the current parameters, so a
# preset leaves untouched every key it does not name (pixelation survives
# "Warm", brightness survives "B&W").
PRESETS: Mapping[str, Mapping[str, Any]] = {
    "Original": {**TONE_IDENTITY, "pixelate": 1},
    "Warm": {
        "brightness": 102, "contrast": 105, "saturation": 120, "hue": -10,
        "sepia": 10, "grayscale": 0, "invert": 0, "blur": 0,
    },
    "Cool": {
        "brightness": 100, "contrast": 105, "saturation": 105, "hue": 12,
        "sepia": 0, "grayscale": 0, "invert": 0, "blur": 0,
    },
    "Vintage": {
        "brightness": 102, "contrast": 95, "saturation": 85, "hue": -5,
        "sepia": 25, "grayscale": 0, "invert": 0, "blur": 0.5,
    },
    "B&W": {
        "contrast": 110, "saturation": 0, "grayscale": 100, "sepia": 0,
        "invert": 0, "blur": 0,
    },
    "Dramatic": {"contrast": 130, "saturation": 90, "grayscale": 20, "blur": 0},
}


def apply_preset(params: FilterParameters, name: str) -> FilterParameters:
    """Return *params* with the preset called *name* merged in."""

    try:
        update = PRESETS[name]
    except KeyError:
        raise KeyError(f"Unknown preset: {name!r}") from None
    return params.merged(update)


__all__ = [
    "FilterParameters",
    "PRESETS",
    "PostKernel",
    "TONE_IDENTITY",
    "TONE_KEYS",
    "apply_preset",
]
