"""Color stop normalization: user gradient description -> sorted stops on [0, 255]."""

from __future__ import annotations

import math
import numbers
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Iterable, Union

import pandas as pd

from .color_parse import RGBA, TRANSPARENT_BLACK, parse_color

# A mapping offset -> color, a sequence of colors, or a single color.
GradientStops = Union[Mapping[Any, Any], Sequence[Any], pd.Series, str, int, RGBA]

OFFSET_MAX = 255.0


@dataclass(frozen=True)
class ColorStop:
    """One gradient anchor on the lookup-table scale.

    offset is in [0, 255] and so is every channel of color, alpha included.
    color is not a parse_color() input: its alpha is already multiplied
    by 255.
    """

    offset: float
    color: RGBA


def _is_single_color(spec: Any) -> bool:
    if isinstance(spec, (str, RGBA, numbers.Number)):
        return True
    # An RGB/RGBA float tuple is one color, not a list of colors.
    return (
        isinstance(spec, tuple)
        and len(spec) in (3, 4)
        and all(
            isinstance(v, numbers.Real) and not isinstance(v, bool) and 0.0 <= v <= 1.0
            for v in spec
        )
    )


def _parse_offset(key: Any) -> float | None:
    """Parse a mapping key to an offset in [0, 1]; None if unusable."""
    if isinstance(key, bool):
        return None
    try:
        offset = float(key)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(offset) or offset < 0.0 or offset > 1.0:
        return None
    return offset


def _stops_as_items(spec: GradientStops) -> Iterable[tuple[Any, Any]]:
    """Flatten any accepted gradient shape to (offset, color) pairs."""
    if isinstance(spec, pd.Series):
        return spec.items()
    if isinstance(spec, Mapping):
        return spec.items()
    if _is_single_color(spec):
        return [(0, spec)]
    if isinstance(spec, Sequence):
        colors = list(spec)
        # One color would divide by zero below; it becomes a stop at 0.
        if len(colors) == 1:
            return [(0, colors[0])]
        return [(i / (len(colors) - 1), color) for i, color in enumerate(colors)]
    return [(0, spec)]


def normalize_color_stops(spec: GradientStops) -> list[ColorStop]:
    """Convert a gradient description to ascending stops spanning [0, 255].

    Offsets that are not finite numbers in [0, 1] are dropped. Colors go
    through parse_color (errors propagate) with alpha rescaled to [0, 255].
    When at least one stop survives, transparent black stops are added at
    0 and 255 unless the extremes already reach them, so the result has at
    least two entries. No surviving stops gives an empty list.
    """
    stops = []
    for key, value in _stops_as_items(spec):
        offset = _parse_offset(key)
        if offset is None:
            continue
        color = parse_color(value)
        stops.append(
            ColorStop(
                offset * OFFSET_MAX,
                RGBA(color.red, color.green, color.blue, color.alpha * 255.0),
            )
        )

    if not stops:
        return stops

    # Stable, so duplicate offsets keep their given order.
    stops.sort(key=lambda stop: stop.offset)

    if stops[0].offset > 0.0:
        stops.insert(0, ColorStop(0.0, TRANSPARENT_BLACK))
    if stops[-1].offset < OFFSET_MAX:
        stops.append(ColorStop(OFFSET_MAX, TRANSPARENT_BLACK))
    return stops
