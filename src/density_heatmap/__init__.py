"""density-heatmap: accumulate point intensities and color them through a gradient."""

from ._version import __version__
from .api import Heatmap
from .core.color_parse import RGBA, parse_color
from .core.color_scale import (
    DEFAULT_GRADIENT_STOPS,
    ColorScale,
    build_gradient_table,
    generate_gradient,
)
from .core.color_stops import ColorStop, normalize_color_stops
from .core.validation import ColorParseError
from .raster.canvas import RasterCanvas


__all__ = [
    "__version__",
    "Heatmap",
    "RasterCanvas",
    "ColorScale",
    "ColorStop",
    "ColorParseError",
    "DEFAULT_GRADIENT_STOPS",
    "RGBA",
    "build_gradient_table",
    "generate_gradient",
    "normalize_color_stops",
    "parse_color",
]
