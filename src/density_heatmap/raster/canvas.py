"""RasterCanvas: an in-memory RGBA drawing surface backed by numpy.

Implements the subset of a 2d canvas a Heatmap uses: concentric radial
gradients, rectangle fills with source-over compositing, and bulk pixel
read/write. Pixels are stored unpremultiplied, (height, width, 4) uint8.
"""

from __future__ import annotations

from dataclasses import dataclass
import math

import numpy as np

from ..core.color_parse import RGBA, parse_color
from ..core.validation import validate_dimension


@dataclass
class ImageData:
    """A copy of the pixels of a rectangular region."""

    data: np.ndarray

    @property
    def width(self) -> int:
        return self.data.shape[1]

    @property
    def height(self) -> int:
        return self.data.shape[0]


class RadialGradient:
    """A radial gradient between two concentric circles.

    Offset 0 sits on the circle of radius r0 and offset 1 on the circle of
    radius r1. Inside r0 and beyond r1 the edge stop colors are padded out.
    If r0 == r1 the gradient paints nothing.
    """

    def __init__(
        self, x0: float, y0: float, r0: float, x1: float, y1: float, r1: float,
    ) -> None:
        if r0 < 0 or r1 < 0:
            raise ValueError(f"Gradient radii must be non-negative, got {r0} and {r1}.")
        if x0 != x1 or y0 != y1:
            raise ValueError(
                "Only concentric radial gradients are supported: "
                f"({x0}, {y0}) != ({x1}, {y1})."
            )
        self.cx = float(x0)
        self.cy = float(y0)
        self.r0 = float(r0)
        self.r1 = float(r1)
        self._stops: list[tuple[float, RGBA]] = []

    def add_color_stop(self, offset: float, color: str) -> None:
        if not 0.0 <= offset <= 1.0:
            raise ValueError(f"Color stop offset must be in [0, 1], got {offset}.")
        self._stops.append((float(offset), parse_color(color)))
        self._stops.sort(key=lambda stop: stop[0])

    def sample(self, xs: np.ndarray, ys: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """Evaluate at the given points.

        Returns (rgb, alpha): rgb is (..., 3) float in [0, 255] and alpha
        is (...) float in [0, 1].
        """
        shape = np.broadcast(xs, ys).shape
        if not self._stops or self.r0 == self.r1:
            return np.zeros(shape + (3,)), np.zeros(shape)

        dist = np.hypot(xs - self.cx, ys - self.cy)
        omega = np.clip((dist - self.r0) / (self.r1 - self.r0), 0.0, 1.0)

        offsets = np.array([offset for offset, _ in self._stops])
        channels = np.array([list(color) for _, color in self._stops], dtype=np.float64)
        rgba = np.stack(
            [np.interp(omega, offsets, channels[:, k]) for k in range(4)], axis=-1,
        )
        return rgba[..., :3], rgba[..., 3]


def source_over(dst: np.ndarray, src_rgb: np.ndarray, src_alpha: np.ndarray) -> None:
    """Composite a source onto dst (uint8 RGBA, unpremultiplied) in place.

    out_a = sa + da * (1 - sa)
    out_c = (sc * sa + dc * da * (1 - sa)) / out_a
    """
    sa = src_alpha.astype(np.float64)
    da = dst[..., 3].astype(np.float64) / 255.0
    dst_weight = da * (1.0 - sa)
    out_a = sa + dst_weight

    out_rgb = np.zeros(dst.shape[:-1] + (3,), dtype=np.float64)
    np.divide(
        src_rgb * sa[..., None] + dst[..., :3].astype(np.float64) * dst_weight[..., None],
        out_a[..., None],
        out=out_rgb,
        where=out_a[..., None] > 0,
    )
    dst[..., :3] = np.clip(np.rint(out_rgb), 0, 255).astype(np.uint8)
    dst[..., 3] = np.clip(np.rint(out_a * 255.0), 0, 255).astype(np.uint8)


class RasterContext:
    """2d drawing context over a RasterCanvas."""

    def __init__(self, canvas: RasterCanvas) -> None:
        self._canvas = canvas
        self._fill_style: RadialGradient | RGBA = parse_color("#000000")

    @property
    def canvas(self) -> RasterCanvas:
        return self._canvas

    @property
    def fill_style(self) -> RadialGradient | RGBA:
        return self._fill_style

    @fill_style.setter
    def fill_style(self, value: RadialGradient | str | RGBA) -> None:
        if isinstance(value, RadialGradient):
            self._fill_style = value
        else:
            self._fill_style = parse_color(value)

    def create_radial_gradient(
        self, x0: float, y0: float, r0: float, x1: float, y1: float, r1: float,
    ) -> RadialGradient:
        return RadialGradient(x0, y0, r0, x1, y1, r1)

    def fill_rect(self, x: float, y: float, w: float, h: float) -> None:
        """Fill every pixel whose center lies in the rectangle."""
        pixels = self._canvas._pixels
        height, width = pixels.shape[:2]
        if w < 0:
            x, w = x + w, -w
        if h < 0:
            y, h = y + h, -h

        # Pixel p has its center at p + 0.5; keep x <= p + 0.5 < x + w.
        px0 = max(0, math.ceil(x - 0.5))
        px1 = min(width, math.ceil(x + w - 0.5))
        py0 = max(0, math.ceil(y - 0.5))
        py1 = min(height, math.ceil(y + h - 0.5))
        if px0 >= px1 or py0 >= py1:
            return

        region = pixels[py0:py1, px0:px1]
        style = self._fill_style
        if isinstance(style, RadialGradient):
            ys, xs = np.mgrid[py0:py1, px0:px1]
            src_rgb, src_alpha = style.sample(xs + 0.5, ys + 0.5)
        else:
            src_rgb = np.broadcast_to(
                np.array([style.red, style.green, style.blue], dtype=np.float64),
                region.shape[:-1] + (3,),
            )
            src_alpha = np.full(region.shape[:-1], style.alpha)
        source_over(region, src_rgb, src_alpha)

    def get_image_data(self, sx: int, sy: int, sw: int, sh: int) -> ImageData:
        """Copy a region out. Parts outside the canvas read as transparent black."""
        sx, sy, sw, sh = int(sx), int(sy), int(sw), int(sh)
        pixels = self._canvas._pixels
        out = np.zeros((max(sh, 0), max(sw, 0), 4), dtype=np.uint8)
        x0, y0 = max(sx, 0), max(sy, 0)
        x1, y1 = min(sx + sw, pixels.shape[1]), min(sy + sh, pixels.shape[0])
        if x0 < x1 and y0 < y1:
            out[y0 - sy:y1 - sy, x0 - sx:x1 - sx] = pixels[y0:y1, x0:x1]
        return ImageData(out)

    def put_image_data(self, image_data: ImageData, dx: int, dy: int) -> None:
        """Write pixels back, replacing (not compositing), clipped to the canvas."""
        dx, dy = int(dx), int(dy)
        src = np.asarray(image_data.data, dtype=np.uint8)
        pixels = self._canvas._pixels
        x0, y0 = max(dx, 0), max(dy, 0)
        x1 = min(dx + src.shape[1], pixels.shape[1])
        y1 = min(dy + src.shape[0], pixels.shape[0])
        if x0 >= x1 or y0 >= y1:
            return
        pixels[y0:y1, x0:x1] = src[y0 - dy:y1 - dy, x0 - dx:x1 - dx]


class RasterCanvas:
    """A fixed-size RGBA surface, initially transparent black."""

    def __init__(self, width: int, height: int) -> None:
        self._width = validate_dimension(width, "width")
        self._height = validate_dimension(height, "height")
        self._pixels = np.zeros((self._height, self._width, 4), dtype=np.uint8)
        self._context: RasterContext | None = None

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def get_context(self, context_id: str = "2d") -> RasterContext | None:
        """Return the canvas's 2d context (always the same one); None for other ids."""
        if context_id != "2d":
            return None
        if self._context is None:
            self._context = RasterContext(self)
        return self._context

    def to_array(self) -> np.ndarray:
        """Copy of the pixels, (height, width, 4) uint8 RGBA."""
        return self._pixels.copy()
