"""Heatmap: the main user-facing API."""

from __future__ import annotations

import logging
import pathlib
from typing import Any, Sequence

import numpy as np
import pandas as pd

from .core.color_parse import format_css_rgba
from .core.color_scale import ColorScale
from .core.color_stops import GradientStops
from .core.validation import (
    validate_canvas,
    validate_context,
    validate_dimension,
    validate_gradient_table,
)
from .raster.protocols import CanvasLike, ContextLike

LOGGER = logging.getLogger(__name__)

GridData = Sequence[Sequence[float]] | np.ndarray | pd.DataFrame


class Heatmap:
    """Draws a density heatmap onto a 2d drawing context.

    Points are stamped as white radial gradients whose alpha builds up
    with source-over compositing; colorize() then replaces every pixel
    with the gradient color for its accumulated alpha.

    Usage::

        import density_heatmap as dh

        canvas = dh.RasterCanvas(200, 100)
        hm = dh.Heatmap.from_canvas(canvas, ["blue", "yellow", "red"])
        hm.draw_point(50, 50, 10, 20, 0.8)
        hm.colorize()
        hm.save_png("out.png")
    """

    DEFAULT_RADIUS1 = 0.25
    DEFAULT_RADIUS2 = 0.75

    def __init__(
        self,
        context: ContextLike,
        width: int,
        height: int,
        gradient: GradientStops | None = None,
    ) -> None:
        self._context = validate_context(context)
        self._width = validate_dimension(width, "width")
        self._height = validate_dimension(height, "height")
        self._color_scale = ColorScale(gradient)
        LOGGER.debug("Created %dx%d heatmap", self._width, self._height)

    @classmethod
    def from_context(
        cls,
        context: ContextLike,
        width: int,
        height: int,
        gradient: GradientStops | None = None,
    ) -> Heatmap:
        """Build a heatmap over an existing 2d context of the given size."""
        return cls(context, width, height, gradient)

    @classmethod
    def from_canvas(
        cls,
        canvas: CanvasLike,
        gradient: GradientStops | None = None,
    ) -> Heatmap:
        """Build a heatmap covering the whole of canvas."""
        canvas = validate_canvas(canvas)
        context = validate_context(canvas.get_context("2d"))
        return cls(context, canvas.width, canvas.height, gradient)

    # --- Properties ---

    @property
    def context(self) -> ContextLike:
        return self._context

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def gradient(self) -> GradientStops:
        """The gradient description last assigned."""
        return self._color_scale.spec

    @gradient.setter
    def gradient(self, value: GradientStops | None) -> None:
        # Built before assignment: a bad color leaves the old gradient intact.
        self._color_scale = ColorScale(value)

    @property
    def gradient_data(self) -> np.ndarray:
        """(256, 4) uint8 lookup table built from the current gradient."""
        return self._color_scale.lut

    @property
    def color_scale(self) -> ColorScale:
        return self._color_scale

    def _is_empty(self) -> bool:
        return self._width == 0 or self._height == 0

    # --- Drawing ---

    def draw_point(self, x: float, y: float, r1: float, r2: float, alpha: float) -> None:
        """Draw a single point.

        Parameters
        ----------
        x, y : float
            Center of the point.
        r1 : float
            Inner, solid radius.
        r2 : float
            Outer radius where the point fades out.
        alpha : float
            Strength of the point, 0.0 to 1.0.
        """
        if self._is_empty():
            return
        grd = self._context.create_radial_gradient(x, y, r1, x, y, r2)
        grd.add_color_stop(0, format_css_rgba(255, 255, 255, alpha))
        grd.add_color_stop(1, "rgba(255, 255, 255, 0)")

        self._context.fill_style = grd
        full_radius = max(r1, r2)
        self._context.fill_rect(
            x - full_radius, y - full_radius, full_radius * 2, full_radius * 2,
        )

    def draw_point_grid(
        self,
        data: GridData,
        *,
        radius1: float = DEFAULT_RADIUS1,
        radius2: float = DEFAULT_RADIUS2,
    ) -> None:
        """Draw one point per cell of a grid spread over the whole surface.

        Parameters
        ----------
        data : rows of normalized (0.0 to 1.0) values, ndarray or DataFrame
            The column count is the length of the first row. Missing, None
            and NaN cells count as 0.
        radius1, radius2 : float
            Inner and outer radius as a fraction of the average cell size.
        """
        if self._is_empty():
            return
        if isinstance(data, pd.DataFrame):
            data = data.to_numpy()
        rows = len(data)
        columns = len(data[0]) if rows > 0 else 0
        if rows == 0 or columns == 0:
            return

        column_width = self._width / columns
        row_height = self._height / rows
        average_scale = (column_width + row_height) / 2

        r1 = average_scale * radius1
        r2 = average_scale * radius2

        for r in range(rows):
            row = data[r]
            for c in range(columns):
                value = row[c] if c < len(row) else None
                if pd.isna(value):
                    value = 0
                x = (c + 0.5) * column_width
                y = (r + 0.5) * row_height
                self.draw_point(x, y, r1, r2, float(value))

    # --- Color ---

    def colorize(
        self,
        gradient: GradientStops | np.ndarray | bytes | None = None,
        *,
        transparent: bool = False,
    ) -> None:
        """Replace every pixel with the gradient color for its alpha.

        Before this call the heatmap is white with varying alpha. gradient
        may be a prebuilt (256, 4) table, 1024 raw bytes, or a gradient
        description; it is used for this call only. With transparent=True
        the table's alpha is ignored and the accumulated alpha is kept.
        """
        if gradient is None:
            lut = self._color_scale.lut
        elif isinstance(gradient, (np.ndarray, bytes, bytearray, memoryview)):
            lut = validate_gradient_table(gradient)
        else:
            lut = ColorScale(gradient).lut

        if self._is_empty():
            return
        image_data = self._context.get_image_data(0, 0, self._width, self._height)
        data = image_data.data
        strength = data[..., 3].copy()
        if transparent:
            data[..., :3] = lut[strength, :3]
        else:
            data[...] = lut[strength]
        self._context.put_image_data(image_data, 0, 0)

    def decolorize(self, *args: Any, **kwargs: Any) -> None:
        """Map rendered colors back to intensities. Not supported."""
        raise NotImplementedError(
            "decolorize() is not supported: a gradient is not guaranteed to be "
            "invertible, so colors cannot be mapped back to intensities."
        )

    def make_opaque(self) -> None:
        """Remove all transparency from the heatmap."""
        if self._is_empty():
            return
        image_data = self._context.get_image_data(0, 0, self._width, self._height)
        image_data.data[..., 3] = 255
        self._context.put_image_data(image_data, 0, 0)

    # --- Export ---

    def to_array(self) -> np.ndarray:
        """Current pixels as a (height, width, 4) uint8 RGBA array."""
        if self._is_empty():
            return np.zeros((self._height, self._width, 4), dtype=np.uint8)
        return np.array(
            self._context.get_image_data(0, 0, self._width, self._height).data,
            dtype=np.uint8,
        )

    def to_image(self):
        """Current pixels as a PIL RGBA image."""
        from .export.image_export import to_image
        return to_image(self)

    def save_png(self, path: str | pathlib.Path) -> None:
        """Write the current pixels as a PNG file."""
        from .export.image_export import save_png
        save_png(self, path)

    def to_html(self, path: str | pathlib.Path, title: str = "density-heatmap") -> None:
        """Write a standalone HTML page showing the heatmap and its color bar."""
        from .export.image_export import HTMLExporter
        HTMLExporter.export(path, self, title=title)
