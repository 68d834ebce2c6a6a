# qrapi/qr_generator/options.py

"""
Rendering option normalization.

`normalize_options` never rejects input: anything missing, unparsable or out
of range falls back to a default or is clamped into range.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping, Optional

ERROR_CORRECTION_LEVELS = ("L", "M", "Q", "H")
OUTPUT_FORMATS = ("png", "svg", "base64")

DEFAULT_WIDTH = 300
MIN_WIDTH, MAX_WIDTH = 100, 2000
DEFAULT_MARGIN = 2
MIN_MARGIN, MAX_MARGIN = 0, 10
DEFAULT_DARK = "000000"
DEFAULT_LIGHT = "ffffff"
DEFAULT_ERROR_CORRECTION = "M"
DEFAULT_FORMAT = "png"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class RenderOptions:
    width: int = DEFAULT_WIDTH
    margin: int = DEFAULT_MARGIN
    dark_color: str = DEFAULT_DARK
    light_color: str = DEFAULT_LIGHT
    error_correction: str = DEFAULT_ERROR_CORRECTION
    output_format: str = DEFAULT_FORMAT

    def with_error_correction(self, level: str) -> "RenderOptions":
        return replace(self, error_correction=level)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "size": self.width,
            "margin": self.margin,
            "format": self.output_format,
            "error_correction": self.error_correction,
        }


def _parse_int(value: Any) -> Optional[int]:
    """Leading-integer parse: '250px' -> 250, '12.9' -> 12, 'abc' -> None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


def _clamp(value: int, low: int, high: int) -> int:
    return min(max(value, low), high)


def _choice(value: Any, allowed, default: str, upper: bool) -> str:
    if not isinstance(value, str):
        return default
    candidate = value.strip().upper() if upper else value.strip().lower()
    return candidate if candidate in allowed else default


def _color(value: Any, default: str) -> str:
    if value is None:
        return default
    return str(value).lstrip("#")


def normalize_options(raw: Optional[Mapping[str, Any]] = None) -> RenderOptions:
    raw = raw or {}

    width = _parse_int(raw.get("size"))
    margin = _parse_int(raw.get("margin"))

    return RenderOptions(
        width=_clamp(DEFAULT_WIDTH if width is None else width, MIN_WIDTH, MAX_WIDTH),
        margin=_clamp(DEFAULT_MARGIN if margin is None else margin, MIN_MARGIN, MAX_MARGIN),
        dark_color=_color(raw.get("color"), DEFAULT_DARK),
        light_color=_color(raw.get("bg_color"), DEFAULT_LIGHT),
        error_correction=_choice(
            raw.get("error_correction"), ERROR_CORRECTION_LEVELS, DEFAULT_ERROR_CORRECTION, upper=True
        ),
        output_format=_choice(raw.get("format"), OUTPUT_FORMATS, DEFAULT_FORMAT, upper=False),
    )
