"""ColorScale: gradient color stops -> 256-entry RGBA lookup table."""

from __future__ import annotations

import logging
import math
from types import MappingProxyType
from typing import Sequence

import numpy as np

from .color_stops import ColorStop, GradientStops, normalize_color_stops

LOGGER = logging.getLogger(__name__)

LUT_SIZE = 256

DEFAULT_GRADIENT_STOPS: GradientStops = MappingProxyType({
    1: "red",
    0.5: "yellow",
    0: "blue",
})

_CHANNELS = ("red", "green", "blue", "alpha")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def build_gradient_table(stops: Sequence[ColorStop]) -> np.ndarray:
    """Build a (256, 4) uint8 RGBA lookup table from normalized stops.

    stops must be sorted by offset and span [0, 255] (normalize_color_stops
    guarantees both). Each level i is interpolated between the stops just
    below and just above it; each neighbor is weighted by the other's
    distance, so the closer stop dominates. An empty stop list gives an
    all-zero table.
    """
    lut = np.zeros((LUT_SIZE, 4), dtype=np.uint8)
    if not stops:
        return lut

    lo, hi = 0, 1
    for i in range(LUT_SIZE):
        # while, not if: stops may sit less than one level apart
        while i > stops[hi].offset:
            lo += 1
            hi += 1
        below, above = stops[lo], stops[hi]

        d1 = abs(i - below.offset)
        d2 = abs(above.offset - i)
        total = d1 + d2

        if total == 0:
            # Two stops share this exact offset: average them.
            lut[i] = [
                max(0, min(255, round((getattr(below.color, ch) + getattr(above.color, ch)) / 2)))
                for ch in _CHANNELS
            ]
        else:
            lut[i] = [
                max(0, min(255, _round_half_up(
                    (getattr(below.color, ch) * d2 + getattr(above.color, ch) * d1) / total
                )))
                for ch in _CHANNELS
            ]
    return lut


def generate_gradient(spec: GradientStops | None = None) -> np.ndarray:
    """Normalize a gradient description and build its lookup table."""
    if spec is None:
        spec = DEFAULT_GRADIENT_STOPS
    return build_gradient_table(normalize_color_stops(spec))


class ColorScale:
    """A gradient description paired with the lookup table built from it.

    Immutable: to change the gradient, build a new ColorScale. The table
    is transferred as 1024 bytes (256 entries x 4 bytes RGBA).
    """

    __slots__ = ("_spec", "_stops", "_lut")

    LUT_SIZE = LUT_SIZE

    def __init__(self, spec: GradientStops | None = None) -> None:
        if spec is None:
            spec = DEFAULT_GRADIENT_STOPS
        stops = normalize_color_stops(spec)
        lut = build_gradient_table(stops)
        lut.flags.writeable = False
        self._spec = spec
        self._stops = tuple(stops)
        self._lut = lut
        LOGGER.debug("Built gradient table from %d color stops", len(stops))

    @property
    def spec(self) -> GradientStops:
        """The gradient description as given."""
        return self._spec

    @property
    def stops(self) -> tuple[ColorStop, ...]:
        """Normalized stops, ascending, offsets in [0, 255]."""
        return self._stops

    @property
    def lut(self) -> np.ndarray:
        """(256, 4) uint8 RGBA lookup table, read-only."""
        return self._lut

    def to_bytes(self) -> bytes:
        """Serialize LUT as 1024 bytes (256 * 4 RGBA)."""
        return self._lut.tobytes()

    def color_at(self, level: int) -> tuple[int, int, int, int]:
        """RGBA entry for an intensity level in [0, 255]."""
        if not 0 <= level < LUT_SIZE:
            raise ValueError(f"Intensity level must be in [0, 255], got {level}.")
        return tuple(int(v) for v in self._lut[level])
