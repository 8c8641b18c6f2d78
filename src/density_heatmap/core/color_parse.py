"""Color parsing: any color specification -> RGBA channel values."""

from __future__ import annotations

import math
import numbers
import re
from typing import Any, NamedTuple

import matplotlib.colors as mcolors

from .validation import ColorParseError


class RGBA(NamedTuple):
    """Four color channels.

    As returned by parse_color(): red/green/blue in [0, 255], alpha in
    [0, 1]. ColorStop.color reuses the type with alpha in [0, 255].
    """

    red: float
    green: float
    blue: float
    alpha: float = 1.0


TRANSPARENT_BLACK = RGBA(0.0, 0.0, 0.0, 0.0)

_CSS_FUNCTIONAL = re.compile(
    r"^\s*rgba?\(\s*([^,\s]+)\s*,\s*([^,\s]+)\s*,\s*([^,\s]+)\s*(?:,\s*([^,\s]+)\s*)?\)\s*$",
    re.IGNORECASE,
)


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def _parse_css_functional(spec: str) -> RGBA | None:
    """Parse 'rgb(r, g, b)' / 'rgba(r, g, b, a)'. Returns None if spec has another form."""
    match = _CSS_FUNCTIONAL.match(spec)
    if match is None:
        return None
    try:
        raw = [float(g) for g in match.groups(default="1")]
    except ValueError:
        raise ColorParseError(f"Invalid color string {spec!r}.") from None
    # Clamping would map NaN into range, so reject it first.
    if not all(math.isfinite(v) for v in raw):
        raise ColorParseError(f"Invalid color string {spec!r}.")
    red, green, blue = (_clamp(v, 0.0, 255.0) for v in raw[:3])
    return RGBA(red, green, blue, _clamp(raw[3], 0.0, 1.0))


def parse_color(spec: Any) -> RGBA:
    """Normalize a color specification to RGBA.

    Accepts an already-parsed RGBA, an int packed as 0xRRGGBB, CSS
    'rgb()'/'rgba()' strings, and anything matplotlib understands
    (names, '#rgb', '#rrggbb', '#rrggbbaa', float tuples in [0, 1]).

    Raises ColorParseError on anything else.
    """
    if isinstance(spec, RGBA):
        return spec
    if isinstance(spec, numbers.Integral) and not isinstance(spec, bool):
        packed = int(spec)
        if not 0 <= packed <= 0xFFFFFF:
            raise ColorParseError(
                f"Packed color {packed:#x} is outside 0x000000-0xFFFFFF."
            )
        return RGBA(float(packed >> 16 & 0xFF), float(packed >> 8 & 0xFF), float(packed & 0xFF), 1.0)
    if isinstance(spec, str):
        parsed = _parse_css_functional(spec)
        if parsed is not None:
            return parsed
        spec = spec.strip()
    try:
        r, g, b, a = mcolors.to_rgba(spec)
    except (ValueError, TypeError):
        raise ColorParseError(
            f"Unknown color {spec!r}. Use a color name like 'red', a hex "
            f"string like '#ff0000', or 'rgba(255, 0, 0, 0.5)'."
        ) from None
    return RGBA(r * 255.0, g * 255.0, b * 255.0, a)


def format_css_rgba(red: float, green: float, blue: float, alpha: float) -> str:
    """Format channel values as a CSS 'rgba()' string, as drawing contexts expect."""
    return f"rgba({red:g}, {green:g}, {blue:g}, {float(alpha)!r})"
