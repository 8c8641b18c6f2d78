"""Structural types for the drawing surface a Heatmap draws on.

Any canvas implementation with these methods works: the bundled
RasterCanvas, or an adapter over another 2d raster library.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import numpy as np


class GradientLike(Protocol):
    """A fill style built by a drawing context."""

    def add_color_stop(self, offset: float, color: str) -> None: ...


class ImageDataLike(Protocol):
    """Raw pixels of a rectangular region: (height, width, 4) uint8 RGBA."""

    data: np.ndarray


@runtime_checkable
class ContextLike(Protocol):
    """The 2d drawing context operations a Heatmap needs."""

    fill_style: Any

    def create_radial_gradient(
        self, x0: float, y0: float, r0: float, x1: float, y1: float, r1: float,
    ) -> GradientLike: ...

    def fill_rect(self, x: float, y: float, w: float, h: float) -> None: ...

    def get_image_data(self, sx: int, sy: int, sw: int, sh: int) -> ImageDataLike: ...

    def put_image_data(self, image_data: ImageDataLike, dx: int, dy: int) -> None: ...


@runtime_checkable
class CanvasLike(Protocol):
    """A surface with fixed dimensions that can hand out a 2d context."""

    width: int
    height: int

    def get_context(self, context_id: str) -> ContextLike | None: ...
