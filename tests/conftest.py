"""Shared test fixtures for density-heatmap."""

import numpy as np
import pytest

from density_heatmap.api import Heatmap
from density_heatmap.raster.canvas import ImageData, RasterCanvas


class RecordingGradient:
    def __init__(self, args):
        self.args = args
        self.stops = []

    def add_color_stop(self, offset, color):
        self.stops.append((offset, color))


class RecordingContext:
    """A duck-typed 2d context that records calls and stores pixels."""

    def __init__(self, width, height):
        self.pixels = np.zeros((height, width, 4), dtype=np.uint8)
        self.fill_style = None
        self.gradients = []
        self.filled = []

    def create_radial_gradient(self, x0, y0, r0, x1, y1, r1):
        grd = RecordingGradient((x0, y0, r0, x1, y1, r1))
        self.gradients.append(grd)
        return grd

    def fill_rect(self, x, y, w, h):
        self.filled.append((self.fill_style, (x, y, w, h)))

    def get_image_data(self, sx, sy, sw, sh):
        return ImageData(self.pixels[sy:sy + sh, sx:sx + sw].copy())

    def put_image_data(self, image_data, dx, dy):
        h, w = image_data.data.shape[:2]
        self.pixels[dy:dy + h, dx:dx + w] = image_data.data


class NoContextCanvas:
    """A canvas whose 2d context cannot be obtained."""

    width = 10
    height = 10

    def get_context(self, context_id):
        return None


@pytest.fixture
def canvas():
    """100x100 transparent canvas."""
    return RasterCanvas(100, 100)


@pytest.fixture
def heatmap(canvas):
    """Heatmap over the 100x100 canvas with the default gradient."""
    return Heatmap.from_canvas(canvas)


@pytest.fixture
def recording_context():
    return RecordingContext(20, 10)


@pytest.fixture
def two_level_pixels():
    """4x4 pixels: left half alpha 0, right half alpha 255, random RGB."""
    rng = np.random.default_rng(42)
    pixels = rng.integers(0, 256, size=(4, 4, 4), dtype=np.uint8)
    pixels[:, :2, 3] = 0
    pixels[:, 2:, 3] = 255
    return pixels


@pytest.fixture
def empty_context():
    """A recording context with no pixels."""
    return RecordingContext(0, 0)


@pytest.fixture
def no_context_canvas():
    return NoContextCanvas()
